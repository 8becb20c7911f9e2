"""
PostureProbe Smoke Tests
Basic import and schema validation tests for core functionality.
"""
import pytest
from pydantic import ValidationError

from postureprobe.core.schemas import Finding, FirewallProfileStatus, FirewallRule, ProfileMask, Report


def test_imports() -> None:
    """Verify the entry point and check modules import without Windows."""
    from postureprobe import probe
    from postureprobe.modules import build_checks

    assert callable(probe.main)
    assert callable(build_checks)


def test_schema_validation() -> None:
    """Verify Pydantic schemas validate data correctly."""
    status = FirewallProfileStatus(profile_name="Public", enabled=True)
    assert status.network_connected is False
    with pytest.raises(ValidationError):
        FirewallProfileStatus(profile_name="Work", enabled=True)


def test_aliases_accepted_on_input() -> None:
    rule = FirewallRule.model_validate({"RuleId": "x", "Group": "", "ProfileMask": int(ProfileMask.DOMAIN)})
    assert rule.rule_id == "x"
    assert rule.profiles == ["Domain"]


def test_finding_requires_risk_score() -> None:
    with pytest.raises(ValidationError):
        Finding(name="a", display_name="A", description="")


def test_empty_report_serializes_to_empty_array() -> None:
    assert Report([]).to_json() == "[]"


@pytest.mark.parametrize("score, risk_score", [(42, 50), (-1, 50), (5, -7), (5, 101)])
def test_finding_rejects_out_of_range_values(score, risk_score) -> None:
    with pytest.raises(ValidationError):
        Finding(name="a", display_name="A", description="", score=score, risk_score=risk_score)


def test_finding_accepts_boundary_values() -> None:
    low = Finding(name="a", display_name="A", description="", score=0, risk_score=0)
    high = Finding(name="a", display_name="A", description="", score=10, risk_score=100)
    assert (low.score, high.risk_score) == (0, 100)
