"""Substitution engine — applies a rule set to raw text.

Usage:
    from safe_analyst import Sanitizer, ReplacementRule, RuleSet, Category

    rules = RuleSet([ReplacementRule.create("john@acme.com", "[EMAIL_1]", Category.EMAIL)])
    sanitizer = Sanitizer()

    sanitizer.plain_text("Mail john@acme.com", rules)    # "Mail [EMAIL_1]"
    sanitizer.segments("Mail john@acme.com", rules)      # passthrough + match

Both operations order rules by descending ``original`` length so the
longer, more specific original wins where two overlap.  The plain text is
built cumulatively (one pass per rule) while the segments come from one
simultaneous pass.  The two can disagree when a replacement value itself
contains a shorter rule's original; ``render_segments`` gives the
single-pass string when that matters.
"""

from __future__ import annotations
import re
from typing import Iterable

from .types import ReplacementRule, RuleSet, Segment


def sort_rules(rules: Iterable[ReplacementRule]) -> list[ReplacementRule]:
    """Longest original first; equal lengths keep insertion order."""
    return sorted(
        (r for r in rules if r.original),
        key=lambda r: len(r.original),
        reverse=True,
    )


def to_plain_text(raw_text: str, rules: Iterable[ReplacementRule]) -> str:
    """Replace every literal occurrence of each original, longest first."""
    result = raw_text
    for rule in sort_rules(rules):
        if rule.original in result:
            result = result.replace(rule.original, rule.replacement)
    return result


def build_pattern(rules: Iterable[ReplacementRule]) -> re.Pattern | None:
    """One alternation of escaped originals, longest first."""
    ordered = sort_rules(rules)
    if not ordered:
        return None
    return re.compile("|".join(re.escape(r.original) for r in ordered))


def to_annotated_segments(raw_text: str, rules: Iterable[ReplacementRule]) -> list[Segment]:
    """Partition ``raw_text`` into passthrough and matched segments.

    Concatenating ``segment.text`` over the result gives back ``raw_text``.
    """
    rule_set = rules if isinstance(rules, RuleSet) else RuleSet(rules)
    return _segments(raw_text, rule_set, build_pattern(rule_set))


def render_segments(segments: Iterable[Segment]) -> str:
    """Sanitized text from a single-pass segmentation."""
    return "".join(s.rendered for s in segments)


def _segments(raw_text: str, rule_set: RuleSet, pattern: re.Pattern | None) -> list[Segment]:
    if not raw_text:
        return []
    if pattern is None:
        return [Segment(raw_text)]

    segments: list[Segment] = []
    pos = 0
    for m in pattern.finditer(raw_text):
        if m.start() > pos:
            segments.append(Segment(raw_text[pos:m.start()]))
        segments.append(Segment(m.group(), rule_set.get(m.group())))
        pos = m.end()
    if pos < len(raw_text):
        segments.append(Segment(raw_text[pos:]))
    return segments


class Sanitizer:
    """Reusable engine that caches the compiled alternation per rule set."""

    __slots__ = ("_cached_rules", "_cached_pattern")

    def __init__(self) -> None:
        self._cached_rules: RuleSet | None = None
        self._cached_pattern: re.Pattern | None = None

    def plain_text(self, raw_text: str, rules: Iterable[ReplacementRule]) -> str:
        return to_plain_text(raw_text, rules)

    def segments(self, raw_text: str, rules: Iterable[ReplacementRule]) -> list[Segment]:
        rule_set = rules if isinstance(rules, RuleSet) else RuleSet(rules)
        return _segments(raw_text, rule_set, self._pattern_for(rule_set))

    def _pattern_for(self, rule_set: RuleSet) -> re.Pattern | None:
        # snapshots are immutable, so identity is enough to reuse the pattern
        if rule_set is not self._cached_rules:
            self._cached_pattern = build_pattern(rule_set)
            self._cached_rules = rule_set
        return self._cached_pattern
