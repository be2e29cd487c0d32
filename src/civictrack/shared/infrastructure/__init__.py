"""
Infrastructure Layer
=====================

Low-level technical concerns:
- Logging setup
- Time sources
"""

from civictrack.shared.infrastructure.clock import IClock, SystemClock, FixedClock, ensure_aware

__all__ = ["IClock", "SystemClock", "FixedClock", "ensure_aware"]
