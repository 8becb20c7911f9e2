# postureprobe/core/reconciler.py
from typing import Iterable, List, Set

from postureprobe.core.schemas import FirewallRule


def _rule_ids(*stores: Iterable[FirewallRule]) -> Set[str]:
    ids: Set[str] = set()
    for store in stores:
        ids.update(rule.rule_id for rule in store)
    return ids


def is_ungrouped(rule: FirewallRule) -> bool:
    """Grouped rules belong to a known Windows feature and count as vetted."""
    return not rule.group


def reconcile(
    active: Iterable[FirewallRule],
    system_defaults: Iterable[FirewallRule],
    static_service: Iterable[FirewallRule],
) -> List[FirewallRule]:
    """
    Reduces the active rule set to rules an administrator added by hand.

    Drops every active rule whose id also exists in the built-in stores
    (exact, case-sensitive id match), then keeps only rules with no group.
    The relative order of ``active`` is preserved.
    """
    builtin_ids = _rule_ids(system_defaults, static_service)
    return [
        rule for rule in active
        if rule.rule_id not in builtin_ids and is_ungrouped(rule)
    ]
