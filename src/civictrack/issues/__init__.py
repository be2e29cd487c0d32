"""
Issue Lifecycle Module
======================

Bounded context for citizen-reported issues.

Responsibilities:
- Validate reports and create issues with a stamped SLA deadline
- Apply status, assignment and field updates with an append-only timeline
- Reject status regressions
- Filter and search issue lists
"""
