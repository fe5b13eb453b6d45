"""Tests for the rule model — types, rule store, history."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from safe_analyst import (
    Category, ReplacementRule, RuleSet, SelectionCandidate, HistoryManager,
    add_or_update_rule, remove_rule, clear_rules, merge_rules,
)


def _rule(original, replacement="X", category=Category.CUSTOM, rule_id=None):
    if rule_id is None:
        return ReplacementRule.create(original, replacement, category)
    return ReplacementRule(id=rule_id, original=original, replacement=replacement, category=category)


# ── Types ────────────────────────────────────────────────────────────

def test_rule_ids_are_unique():
    ids = {_rule("a").id for _ in range(200)}
    assert len(ids) == 200


def test_category_parse_accepts_labels_and_names():
    assert Category.parse("Phone Number") is Category.PHONE
    assert Category.parse("PHONE") is Category.PHONE
    assert Category.parse("ip_address") is Category.IP_ADDRESS
    assert Category.parse("ApiKey") is Category.API_KEY
    assert Category.parse(Category.HOST) is Category.HOST


def test_category_parse_unknown_becomes_custom():
    assert Category.parse("Spaceship") is Category.CUSTOM
    assert Category.parse(None) is Category.CUSTOM
    assert Category.parse(42) is Category.CUSTOM


def test_ruleset_keyed_by_original():
    rs = RuleSet([_rule("a", "1"), _rule("b", "2"), _rule("a", "3")])
    assert len(rs) == 2
    assert [r.original for r in rs] == ["b", "a"]
    assert rs.get("a").replacement == "3"
    assert "b" in rs
    assert "c" not in rs


def test_ruleset_equality_is_structural():
    r1, r2 = _rule("a"), _rule("b")
    assert RuleSet([r1, r2]) == RuleSet([r1, r2])
    assert RuleSet([r1, r2]) != RuleSet([r2, r1])
    assert RuleSet() == RuleSet()


def test_selection_candidate_filters_whitespace():
    doc = "Hello   world"
    assert SelectionCandidate.from_selection(doc, 5, 8) is None
    assert SelectionCandidate.from_selection(doc, 3, 3) is None
    cand = SelectionCandidate.from_selection(doc, 8, 0)
    assert cand == SelectionCandidate("Hello   ", 0, 8)


# ── Rule Store ───────────────────────────────────────────────────────

def test_add_or_update_replaces_same_original():
    rs = add_or_update_rule(RuleSet(), _rule("Alice", "[PERSON_1]"))
    rs = add_or_update_rule(rs, _rule("Alice", "Bob"))
    assert len(rs) == 1
    assert rs.get("Alice").replacement == "Bob"


def test_add_or_update_moves_rule_to_end():
    rs = RuleSet([_rule("a"), _rule("b")])
    rs = add_or_update_rule(rs, _rule("a", "new"))
    assert [r.original for r in rs] == ["b", "a"]


def test_add_does_not_mutate_input():
    original = RuleSet([_rule("a")])
    add_or_update_rule(original, _rule("b"))
    assert len(original) == 1


def test_remove_rule():
    keep, drop = _rule("keep"), _rule("drop")
    rs = remove_rule(RuleSet([keep, drop]), drop.id)
    assert list(rs) == [keep]


def test_remove_missing_id_is_noop():
    rs = RuleSet([_rule("a")])
    assert remove_rule(rs, "nope") is rs


def test_clear_rules():
    assert len(clear_rules(RuleSet([_rule("a"), _rule("b")]))) == 0
    empty = RuleSet()
    assert clear_rules(empty) is empty


def test_merge_first_write_wins():
    existing = _rule("Alice", "[PERSON_1]")
    incoming = [_rule("Alice", "OVERRIDE"), _rule("Bob", "[PERSON_2]")]
    rs = merge_rules(RuleSet([existing]), incoming)
    assert rs.get("Alice").replacement == "[PERSON_1]"
    assert rs.get("Bob").replacement == "[PERSON_2]"
    assert [r.original for r in rs] == ["Alice", "Bob"]


def test_merge_duplicates_within_incoming():
    rs = merge_rules(RuleSet(), [_rule("x", "1"), _rule("x", "2")])
    assert len(rs) == 1
    assert rs.get("x").replacement == "1"


def test_merge_reissues_colliding_ids():
    existing = _rule("a", rule_id="same")
    rs = merge_rules(RuleSet([existing]), [_rule("b", rule_id="same")])
    assert len(rs) == 2
    assert rs.get("a").id == "same"
    assert rs.get("b").id != "same"


# ── History ──────────────────────────────────────────────────────────

def test_history_starts_empty():
    h = HistoryManager()
    assert len(h.current()) == 0
    assert not h.can_undo
    assert not h.can_redo
    assert not h.undo()
    assert not h.redo()


def test_undo_redo_roundtrip():
    h = HistoryManager()
    a = RuleSet([_rule("a")])
    assert h.commit(a)
    assert h.undo()
    assert h.current() == RuleSet()
    assert h.redo()
    assert h.current() == a


def test_commit_after_undo_discards_redo_branch():
    h = HistoryManager()
    a = RuleSet([_rule("a")])
    b = add_or_update_rule(a, _rule("b"))
    c = add_or_update_rule(a, _rule("c"))
    h.commit(a)
    h.commit(b)
    h.undo()
    assert h.current() == a
    h.commit(c)
    assert len(h) == 3
    assert h.current() == c
    assert not h.can_redo
    h.undo()
    assert h.current() == a


def test_clearing_empty_set_adds_no_undo_step():
    h = HistoryManager()
    assert not h.commit(clear_rules(h.current()))
    assert len(h) == 1
    assert not h.can_undo


def test_unchanged_commit_is_skipped():
    h = HistoryManager()
    a = RuleSet([_rule("a")])
    h.commit(a)
    assert not h.commit(remove_rule(a, "missing"))
    assert len(h) == 2


def test_reset():
    h = HistoryManager()
    h.commit(RuleSet([_rule("a")]))
    h.reset()
    assert len(h) == 1
    assert h.cursor == 0
    assert len(h.current()) == 0
