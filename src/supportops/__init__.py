"""
SupportOps
==========

Support-ticket intake service with best-effort AI triage and real-time
broadcast of new tickets.
"""

__version__ = "1.0.0"
