"""
SLA Policy Loading
==================

YAML-backed SLA policy with thread-safe reload.

File format::

    allowance_hours:
      urgent: 4
      high: 24
      medium: 72
      low: 72
    warning_threshold_hours: 8
"""

import threading
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError as PydanticValidationError

from civictrack.core import ConfigurationException
from civictrack.shared.infrastructure.logging import get_logger
from civictrack.sla.application.services import ISLAPolicyProvider
from civictrack.sla.domain import SLAPolicy

logger = get_logger(__name__)


class SLAPolicyManager(ISLAPolicyProvider):
    """
    Thread-safe SLA policy holder.

    Starts with the default policy; ``load`` and ``reload`` swap in the
    policy from a YAML file. A failed reload keeps the previous policy.
    """

    def __init__(self, policy: Optional[SLAPolicy] = None):
        self._policy = policy or SLAPolicy()
        self._lock = threading.Lock()
        self._path: Optional[Path] = None

    def load(self, path: Path) -> SLAPolicy:
        """Initial policy load; raises ``ConfigurationException`` on failure."""
        path = Path(path)
        policy = self._load_from_file(path)
        with self._lock:
            self._path = path
            self._policy = policy
        logger.info("SLA policy loaded", extra={"path": str(path)})
        return policy

    def _load_from_file(self, path: Path) -> SLAPolicy:
        """Load and parse YAML policy file."""
        if not path.exists():
            raise ConfigurationException(f"SLA policy file not found: {path}", {"path": str(path)})

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationException(f"SLA policy file is not valid YAML: {e}", {"path": str(path)}) from e

        if not isinstance(data, dict):
            raise ConfigurationException("SLA policy file must contain a mapping", {"path": str(path)})

        try:
            return SLAPolicy(**data)
        except PydanticValidationError as e:
            raise ConfigurationException(f"Invalid SLA policy: {e}", {"path": str(path)}) from e

    def reload(self) -> bool:
        """Reload policy from the last loaded file."""
        if self._path is None:
            return False

        try:
            new_policy = self._load_from_file(self._path)
        except ConfigurationException as e:
            logger.error("Failed to reload SLA policy", extra={"error": e.message})
            return False

        with self._lock:
            self._policy = new_policy
        logger.info("SLA policy reloaded successfully")
        return True

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def policy(self) -> SLAPolicy:
        """Get current policy."""
        with self._lock:
            return self._policy

    def get_policy(self) -> SLAPolicy:
        return self.policy
