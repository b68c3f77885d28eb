"""
Triage Domain Layer
===================

Contains:
- Entities: TriageResult
- Prompt building and priority sanitisation

This layer is framework-agnostic and contains pure business logic.
"""

from supportops.triage.domain.entities import (
    TriageResult,
    TriagePromptBuilder,
    normalize_priority,
)

__all__ = [
    "TriageResult",
    "TriagePromptBuilder",
    "normalize_priority",
]
