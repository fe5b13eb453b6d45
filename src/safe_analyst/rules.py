"""Rule store — pure operations over RuleSet snapshots.

Every function returns a new RuleSet and leaves its input untouched, so
old snapshots stay valid inside the undo history.

Design goals:
  - Keyed by ``original``: at most one rule per literal original
  - Ids are unique within a set and never reused
  - Inputs are validated upstream (no empty originals reach this module)
"""

from __future__ import annotations
from dataclasses import replace
from typing import Iterable

from .types import ReplacementRule, RuleSet, new_rule_id


def add_or_update_rule(rule_set: RuleSet, new_rule: ReplacementRule) -> RuleSet:
    """Replace any rule with the same original, then append ``new_rule``."""
    rules = [r for r in rule_set if r.original != new_rule.original]
    rules.append(new_rule)
    return RuleSet(rules)


def remove_rule(rule_set: RuleSet, rule_id: str) -> RuleSet:
    """Drop the rule with ``rule_id``; the same set comes back if it is absent."""
    if rule_set.find(rule_id) is None:
        return rule_set
    return RuleSet(r for r in rule_set if r.id != rule_id)


def clear_rules(rule_set: RuleSet) -> RuleSet:
    if not rule_set:
        return rule_set
    return RuleSet()


def merge_rules(rule_set: RuleSet, incoming: Iterable[ReplacementRule]) -> RuleSet:
    """Append incoming rules whose original is new.  Existing rules win."""
    rules = list(rule_set)
    seen = rule_set.originals()
    ids = rule_set.ids()
    for rule in incoming:
        if not rule.original or rule.original in seen:
            continue
        if rule.id in ids:
            rule = replace(rule, id=new_rule_id())
        rules.append(rule)
        seen.add(rule.original)
        ids.add(rule.id)
    return RuleSet(rules)
