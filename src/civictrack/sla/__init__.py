"""
SLA Tracking Module
===================

Bounded context for response-time compliance.

Responsibilities:
- Map priorities to response-time allowances
- Classify issues as met, on-track, at-risk or overdue at read time
- Aggregate statistics for dashboards and public reporting
- Load SLA policy overrides from YAML
"""
