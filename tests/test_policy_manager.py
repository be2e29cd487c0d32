"""
Unit tests for loading SLA policies from YAML.
"""

from datetime import timedelta

import pytest

from civictrack.config import Priority
from civictrack.core import ConfigurationException
from civictrack.sla.infrastructure import SLAPolicyManager

POLICY_YAML = """\
allowance_hours:
  urgent: 2
  high: 12
  medium: 48
  low: 96
warning_threshold_hours: 4
"""


@pytest.fixture
def policy_file(tmp_path):
    path = tmp_path / "sla.yaml"
    path.write_text(POLICY_YAML, encoding="utf-8")
    return path


class TestSLAPolicyManager:
    """Test loading and reloading policy files."""

    def test_defaults_before_load(self):
        manager = SLAPolicyManager()

        assert manager.path is None
        assert manager.get_policy().allowance_for(Priority.URGENT) == timedelta(hours=4)
        assert manager.reload() is False

    def test_load(self, policy_file):
        manager = SLAPolicyManager()
        policy = manager.load(policy_file)

        assert manager.path == policy_file
        assert policy.allowance_for(Priority.LOW) == timedelta(hours=96)
        assert policy.warning_threshold_hours == 4
        assert manager.get_policy() is policy

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationException) as exc_info:
            SLAPolicyManager().load(tmp_path / "nope.yaml")

        assert "not found" in exc_info.value.message

    @pytest.mark.parametrize("content", [
        "allowance_hours: [unclosed",
        "- just\n- a list\n",
        "allowance_hours:\n  urgent: 4\n",
    ])
    def test_invalid_file(self, tmp_path, content):
        path = tmp_path / "bad.yaml"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigurationException):
            SLAPolicyManager().load(path)

    def test_reload_keeps_previous_policy_on_error(self, policy_file):
        manager = SLAPolicyManager()
        loaded = manager.load(policy_file)

        policy_file.write_text("allowance_hours: {urgent: -1}", encoding="utf-8")

        assert manager.reload() is False
        assert manager.get_policy() is loaded

    def test_reload_picks_up_changes(self, policy_file):
        manager = SLAPolicyManager()
        manager.load(policy_file)

        policy_file.write_text(POLICY_YAML.replace("urgent: 2", "urgent: 1"), encoding="utf-8")

        assert manager.reload() is True
        assert manager.get_policy().allowance_for(Priority.URGENT) == timedelta(hours=1)
