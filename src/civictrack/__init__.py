"""
CivicTrack
==========

Issue lifecycle and SLA tracking engine for citizen issue reporting.

Bounded contexts:
- issues: intake, lifecycle rules and the append-only timeline
- sla: deadlines, compliance buckets and statistics
"""

__version__ = "1.0.0"
