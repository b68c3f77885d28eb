"""
Shared Kernel Module
====================

This module contains shared infrastructure used across all bounded contexts
(Tickets and Triage).

Architecture Pattern: Modular Monolith
- Each module (tickets, triage) is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add business logic from Tickets or Triage to shared kernel.
"""
