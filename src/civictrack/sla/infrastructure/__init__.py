"""
SLA Infrastructure Layer
========================

Loading SLA policy overrides from YAML files.
"""

from civictrack.sla.infrastructure.external import SLAPolicyManager

__all__ = ["SLAPolicyManager"]
