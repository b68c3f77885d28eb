"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from functools import lru_cache
from pathlib import Path
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="supportops", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=4000, description="Server port", ge=1, le=65535)
    shutdown_grace_seconds: float = Field(
        default=10.0,
        description="Seconds to wait for a graceful close before forcing exit",
        gt=0
    )
    static_dir: Optional[Path] = Field(
        default=None,
        description="Directory of static web client files served at /"
    )

    # ========== Ticket Store ==========
    seed_sample_ticket: bool = Field(
        default=True,
        description="Seed the store with a sample ticket on startup"
    )

    # ========== AI Triage ==========
    triage_enabled: bool = Field(
        default=True,
        description="Enrich new tickets with AI priority and suggested reply"
    )
    mock_llm: bool = Field(
        default=False,
        description="Use mock text generation for testing (no API calls)"
    )
    triage_model_url: str = Field(
        default="https://api-inference.huggingface.co/models/google/flan-t5-small",
        description="Hosted text-generation model endpoint"
    )
    huggingface_api_token: Optional[str] = Field(
        default=None,
        description="Optional bearer token for the inference endpoint"
    )
    triage_timeout_seconds: float = Field(
        default=25.0,
        description="Timeout for each text-generation call",
        gt=0,
        le=120
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class Priority(str):
    """Ticket priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TicketStatus(str):
    """Ticket statuses. Only creation exists, so only one status."""
    NEW = "new"


class TicketEvent(str):
    """Real-time event names pushed to connected clients."""
    INIT = "init"
    TICKET_NEW = "ticket:new"


# ========== Lists for validation ==========

VALID_PRIORITIES = [
    Priority.LOW, Priority.MEDIUM,
    Priority.HIGH, Priority.URGENT
]
DEFAULT_PRIORITY = Priority.MEDIUM
