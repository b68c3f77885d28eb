"""
Triage Infrastructure Layer
============================

Text-generation backends implementing ITextGenerator.
"""

from supportops.triage.infrastructure.external import (
    HuggingFaceTextGenerator,
    MockTextGenerator,
)

__all__ = [
    "HuggingFaceTextGenerator",
    "MockTextGenerator",
]
