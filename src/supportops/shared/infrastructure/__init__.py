"""
Infrastructure Layer
=====================

Low-level technical concerns:
- Logging setup
- Bounded waits around outbound calls
- Process lifecycle (signals, forced exit, uncaught errors)
"""
