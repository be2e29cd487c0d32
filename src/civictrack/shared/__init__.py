"""
Shared Kernel Module
====================

Shared infrastructure used by both bounded contexts (issue lifecycle and
SLA tracking).

DO NOT add business logic from the issues or SLA modules to the shared kernel.
"""
