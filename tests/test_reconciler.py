# tests/test_reconciler.py
from conftest import make_rule
from postureprobe.core.reconciler import reconcile
from postureprobe.core.schemas import PolicyStore


def test_ungrouped_active_rule_survives():
    active = [make_rule("ruleA", group=""), make_rule("ruleB", group="Core Networking")]
    result = reconcile(active, [], [])
    assert [r.rule_id for r in result] == ["ruleA"]


def test_builtin_ids_are_removed():
    active = [make_rule("ruleA"), make_rule("ruleB"), make_rule("ruleC")]
    defaults = [make_rule("ruleA", store=PolicyStore.SYSTEM_DEFAULTS)]
    static = [make_rule("ruleC", store=PolicyStore.STATIC_SERVICE)]
    result = reconcile(active, defaults, static)
    assert [r.rule_id for r in result] == ["ruleB"]


def test_nothing_active_means_nothing_reconciled():
    defaults = [make_rule("x", store=PolicyStore.SYSTEM_DEFAULTS)]
    static = [make_rule("y", store=PolicyStore.STATIC_SERVICE)]
    assert reconcile([], defaults, static) == []


def test_active_order_is_preserved():
    ids = ["zeta", "alpha", "mid", "beta"]
    result = reconcile([make_rule(i) for i in ids], [make_rule("mid")], [])
    assert [r.rule_id for r in result] == ["zeta", "alpha", "beta"]


def test_rule_id_match_is_case_sensitive():
    active = [make_rule("RemoteDesktop-In")]
    defaults = [make_rule("remotedesktop-in", store=PolicyStore.SYSTEM_DEFAULTS)]
    assert len(reconcile(active, defaults, [])) == 1


def test_result_is_subset_of_active_and_never_builtin_or_grouped():
    active = [
        make_rule("a"), make_rule("b", group="File and Printer Sharing"),
        make_rule("c"), make_rule("d"), make_rule("e", group=""),
    ]
    defaults = [make_rule("c")]
    static = [make_rule("d"), make_rule("zz")]
    result = reconcile(active, defaults, static)

    builtin = {"c", "d", "zz"}
    assert all(rule in active for rule in result)
    assert all(rule.rule_id not in builtin for rule in result)
    assert all(not rule.group for rule in result)
    assert [r.rule_id for r in result] == ["a", "e"]
