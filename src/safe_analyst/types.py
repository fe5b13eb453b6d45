"""Core types."""

from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

logger = logging.getLogger(__name__)


class Category(str, Enum):
    """Closed set of rule categories.  Values are the exported labels."""

    PERSON = "Person Name"
    ORGANIZATION = "Organization"
    API_KEY = "API Key/Token"
    EMAIL = "Email"
    IP_ADDRESS = "IP Address"
    DATE = "Date"
    LOCATION = "Location"
    HOST = "Host/Domain"
    SYSTEM_NAME = "System/Module"
    SOCIAL_HANDLE = "Social Handle"
    PHONE = "Phone Number"
    CUSTOM = "Custom"

    @classmethod
    def parse(cls, value: object) -> "Category":
        """Accept a label or member name; anything unknown becomes CUSTOM."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value == member.value:
                    return member
            key = value.strip().upper().replace(" ", "_").replace("-", "_")
            if key in cls.__members__:
                return cls.__members__[key]
            # CamelCase spellings: "ApiKey", "IpAddress", "SocialHandle"
            compact = key.replace("_", "")
            for name, member in cls.__members__.items():
                if name.replace("_", "") == compact:
                    return member
        logger.warning("Unknown category %r, using %s", value, cls.CUSTOM.value)
        return cls.CUSTOM


def new_rule_id() -> str:
    """Opaque, never-reused rule identifier."""
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True, slots=True)
class ReplacementRule:
    """A literal original → replacement mapping."""
    id: str
    original: str          # matched verbatim, never as a pattern
    replacement: str
    category: Category

    @classmethod
    def create(
        cls,
        original: str,
        replacement: str,
        category: Category = Category.CUSTOM,
    ) -> "ReplacementRule":
        return cls(id=new_rule_id(), original=original,
                   replacement=replacement, category=category)


class RuleSet:
    """Immutable snapshot of rules, keyed by ``original``.

    Iteration yields rules in insertion order (the display order).
    Substitution never depends on this order; see ``sanitizer.sort_rules``.
    """

    __slots__ = ("_by_original",)

    def __init__(self, rules: Iterable[ReplacementRule] = ()) -> None:
        by_original: dict[str, ReplacementRule] = {}
        for rule in rules:
            # later duplicates replace earlier ones and move to the end
            by_original.pop(rule.original, None)
            by_original[rule.original] = rule
        self._by_original = by_original

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, original: str) -> ReplacementRule | None:
        return self._by_original.get(original)

    def find(self, rule_id: str) -> ReplacementRule | None:
        for rule in self._by_original.values():
            if rule.id == rule_id:
                return rule
        return None

    def count(self, category: Category) -> int:
        return sum(1 for r in self._by_original.values() if r.category == category)

    def originals(self) -> set[str]:
        return set(self._by_original)

    def ids(self) -> set[str]:
        return {r.id for r in self._by_original.values()}

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def __contains__(self, original: object) -> bool:
        return original in self._by_original

    def __iter__(self) -> Iterator[ReplacementRule]:
        return iter(self._by_original.values())

    def __len__(self) -> int:
        return len(self._by_original)

    def __bool__(self) -> bool:
        return bool(self._by_original)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleSet):
            return NotImplemented
        return list(self) == list(other)

    def __hash__(self) -> int:
        return hash(tuple(self))

    def __repr__(self) -> str:
        return f"RuleSet({list(self)!r})"


@dataclass(frozen=True, slots=True)
class Segment:
    """One span of the annotated output."""
    text: str                              # raw span of the source document
    rule: ReplacementRule | None = None    # None for passthrough text

    @property
    def is_match(self) -> bool:
        return self.rule is not None

    @property
    def original(self) -> str | None:
        return self.rule.original if self.rule else None

    @property
    def replacement(self) -> str | None:
        return self.rule.replacement if self.rule else None

    @property
    def category(self) -> Category | None:
        return self.rule.category if self.rule else None

    @property
    def rendered(self) -> str:
        return self.rule.replacement if self.rule else self.text


@dataclass(frozen=True, slots=True)
class SelectionCandidate:
    """A highlighted span waiting to become a rule."""
    text: str
    start: int
    end: int

    @classmethod
    def from_selection(
        cls, document: str, start: int, end: int,
    ) -> "SelectionCandidate | None":
        """Return a candidate, or None for empty / whitespace-only selections."""
        if start > end:
            start, end = end, start
        start = max(0, min(start, len(document)))
        end = max(0, min(end, len(document)))
        selected = document[start:end]
        if not selected.strip():
            return None
        return cls(text=selected, start=start, end=end)
