"""
Tickets Module
==============

Bounded Context for ticket intake.

Responsibilities:
- Validate and create tickets, enriched by the triage module
- Keep the ordered in-memory ticket store
- Publish new tickets to real-time clients
"""
