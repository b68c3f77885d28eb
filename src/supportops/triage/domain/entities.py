"""
Triage Domain Entities
======================

Value objects for ticket triage: the enrichment result, the prompts sent
to the model and the sanitisation applied to its answers.
"""

from dataclasses import dataclass
from typing import Optional

from supportops.config import DEFAULT_PRIORITY, VALID_PRIORITIES


def normalize_priority(raw: Optional[str]) -> str:
    """
    Map free model output onto a known priority.

    ``"HIGH"`` becomes ``"high"``; anything outside the fixed set becomes
    the default priority.
    """
    if not raw:
        return DEFAULT_PRIORITY
    candidate = raw.strip().lower()
    return candidate if candidate in VALID_PRIORITIES else DEFAULT_PRIORITY


@dataclass(frozen=True)
class TriageResult:
    """
    Result of triaging a ticket.

    ``enriched`` is False when the values are the fallback defaults.
    """
    priority: str
    suggested_reply: str
    enriched: bool = True

    def __post_init__(self):
        if self.priority not in VALID_PRIORITIES:
            raise ValueError(f"priority must be one of {VALID_PRIORITIES}")

    @classmethod
    def fallback(cls) -> "TriageResult":
        return cls(priority=DEFAULT_PRIORITY, suggested_reply="", enriched=False)


class TriagePromptBuilder:
    """Builds the two prompts sent for every new ticket."""

    PRIORITY_TEMPLATE = (
        "Classify this support issue into one of: low, medium, high, urgent.\n"
        "Issue: {text}"
    )
    REPLY_TEMPLATE = (
        "Write a short helpful support agent reply for this issue:\n"
        "\"{text}\""
    )

    @classmethod
    def priority_prompt(cls, text: str) -> str:
        return cls.PRIORITY_TEMPLATE.format(text=text)

    @classmethod
    def reply_prompt(cls, text: str) -> str:
        return cls.REPLY_TEMPLATE.format(text=text)
