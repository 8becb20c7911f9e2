# postureprobe/modules/firewall_checks.py
"""
Firewall posture checks.

FWState     - Domain/Private/Public profile enable state plus whether a
              network of that category is currently connected.
OpenFWPorts - Inbound allow rules an administrator added by hand: the
              active store minus the built-in stores, ungrouped only.
"""
from typing import List

from postureprobe.core.errors import QueryError
from postureprobe.core.reconciler import reconcile
from postureprobe.core.runner import CheckDefinition, CheckOutcome
from postureprobe.core.schemas import FirewallProfile, FirewallProfileStatus, PolicyStore
from postureprobe.core.scoring import score_firewall_profiles, score_open_ports
from postureprobe.core.state import StateProvider
from postureprobe.utils.logger import Logger

logger = Logger()


def collect_profile_statuses(provider: StateProvider) -> List[FirewallProfileStatus]:
    """One status per profile, in Domain/Private/Public order, with connectivity filled in."""
    by_name = {status.profile_name: status for status in provider.firewall_profiles()}
    missing = [profile.value for profile in FirewallProfile if profile not in by_name]
    if missing:
        raise QueryError(f"Firewall profiles not reported: {', '.join(missing)}")

    connected = provider.connected_categories()
    return [
        by_name[profile].model_copy(update={"network_connected": profile.value in connected})
        for profile in FirewallProfile
    ]


def check_firewall_state(provider: StateProvider) -> CheckOutcome:
    statuses = collect_profile_statuses(provider)
    disabled = [s.profile_name.value for s in statuses if not s.enabled]
    if disabled:
        logger.warning(f"Firewall disabled for: {', '.join(disabled)}")
    return CheckOutcome(
        score=score_firewall_profiles(statuses),
        result_data=[s.model_dump(by_alias=True, mode="json") for s in statuses],
    )


def check_open_ports(provider: StateProvider) -> CheckOutcome:
    active = provider.firewall_rules(PolicyStore.ACTIVE)
    system_defaults = provider.firewall_rules(PolicyStore.SYSTEM_DEFAULTS)
    static_service = provider.firewall_rules(PolicyStore.STATIC_SERVICE)

    custom_rules = reconcile(active, system_defaults, static_service)
    logger.info(f"OpenFWPorts: {len(active)} active inbound allow rules, {len(custom_rules)} custom")

    enriched = [rule.with_filter(provider.rule_filter(rule)) for rule in custom_rules]
    return CheckOutcome(
        score=score_open_ports(enriched),
        result_data=[rule.model_dump(by_alias=True, mode="json") for rule in enriched],
    )


FIREWALL_STATE = CheckDefinition(
    name="FWState",
    display_name="Firewall Profile State",
    description="Checks that the Windows Firewall is enabled for the Domain, Private and Public profiles.",
    risk_weight=100,
    run=check_firewall_state,
)

OPEN_FIREWALL_PORTS = CheckDefinition(
    name="OpenFWPorts",
    display_name="Custom Inbound Firewall Rules",
    description="Lists enabled inbound allow rules that are neither built in nor part of a feature group.",
    risk_weight=70,
    run=check_open_ports,
)
