"""
Triage Module
=============

Bounded Context for best-effort AI enrichment of new tickets.

Responsibilities:
- Ask a hosted text-generation model for a ticket priority
- Ask the same model for a drafted support reply
- Fall back to (medium, "") on any timeout or failure
"""
