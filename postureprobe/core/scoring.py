"""
Per-check scoring rules. Scores run from 0 (critical) to 10 (healthy).
Each check owns its thresholds; there is no shared formula.
"""
from typing import Dict, Iterable, Sized

from postureprobe.core.schemas import FirewallProfile, FirewallProfileStatus

SCORE_HEALTHY = 10
SCORE_DEGRADED = 5
SCORE_FLAGGED = 1
SCORE_CRITICAL = 0


def score_firewall_profiles(statuses: Iterable[FirewallProfileStatus]) -> int:
    """10 when every profile is on, 5 when Domain or Private is off, 0 when Public is off."""
    enabled: Dict[FirewallProfile, bool] = {s.profile_name: s.enabled for s in statuses}

    score = SCORE_HEALTHY
    if not (enabled.get(FirewallProfile.DOMAIN) and enabled.get(FirewallProfile.PRIVATE)):
        score = SCORE_DEGRADED
    # Public off overrides the Domain/Private result
    if not enabled.get(FirewallProfile.PUBLIC):
        score = SCORE_CRITICAL
    return score


def score_open_ports(custom_rules: Sized) -> int:
    """Binary: any unexplained inbound allow rule is maximally notable."""
    return SCORE_HEALTHY if len(custom_rules) == 0 else SCORE_FLAGGED


def score_locations(anomalies: Sized) -> int:
    return SCORE_HEALTHY if len(anomalies) == 0 else SCORE_FLAGGED
