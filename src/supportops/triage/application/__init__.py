"""
Triage Application Layer
=========================

Contains:
- Services: the non-fatal enrichment adapter
- Interfaces: text generation and triage abstractions
"""

from supportops.triage.application.services import (
    ITextGenerator,
    ITriageService,
    TriageService,
    FallbackTriageService,
)

__all__ = [
    "ITextGenerator",
    "ITriageService",
    "TriageService",
    "FallbackTriageService",
]
