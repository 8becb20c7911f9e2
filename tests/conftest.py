"""
Shared fixtures: an in-memory StateProvider and a Config with no files.
"""
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from postureprobe.core.config import Config
from postureprobe.core.schemas import (
    FirewallProfile,
    FirewallProfileStatus,
    FirewallRule,
    PolicyStore,
    RuleFilter,
)
from postureprobe.core.state import StateProvider


class FakeStateProvider(StateProvider):
    """Serves canned state; any attribute may be set to an exception to raise it."""

    def __init__(self, profiles=None, connected=None, rules=None, filters=None,
                 services=None, libraries=None):
        self.profiles = profiles if profiles is not None else {
            "Domain": True, "Private": True, "Public": True,
        }
        self.connected = connected if connected is not None else {"Private"}
        self.rules = rules or {}
        self.filters = filters or {}
        self._services = services or []
        self._libraries = libraries or []
        self.calls = []

    @staticmethod
    def _maybe_raise(value):
        if isinstance(value, Exception):
            raise value
        return value

    def firewall_profiles(self):
        self.calls.append("firewall_profiles")
        profiles = self._maybe_raise(self.profiles)
        return [
            FirewallProfileStatus(profile_name=FirewallProfile(name), enabled=enabled)
            for name, enabled in profiles.items()
        ]

    def connected_categories(self):
        return set(self._maybe_raise(self.connected))

    def firewall_rules(self, store):
        self.calls.append(f"firewall_rules:{store.value}")
        return list(self._maybe_raise(self.rules.get(store, [])))

    def rule_filter(self, rule):
        return self.filters.get(rule.rule_id, RuleFilter())

    def services(self):
        self.calls.append("services")
        return list(self._maybe_raise(self._services))

    def service_libraries(self):
        self.calls.append("service_libraries")
        return list(self._maybe_raise(self._libraries))


def make_rule(rule_id, group=None, store=PolicyStore.ACTIVE, **kwargs):
    return FirewallRule(rule_id=rule_id, display_name=rule_id, group=group, source_store=store, **kwargs)


@pytest.fixture
def config(tmp_path, monkeypatch):
    """Config pointing at an empty directory, with Windows location variables cleared."""
    for var in ("SystemRoot", "ProgramFiles", "ProgramFiles(x86)", "ProgramData",
                "POSTUREPROBE_LOG_LEVEL", "POSTUREPROBE_LOG_FILE", "POSTUREPROBE_PS_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return Config(config_path=str(tmp_path / "config.yaml"))


@pytest.fixture
def provider():
    return FakeStateProvider()
