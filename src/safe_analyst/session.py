"""Masking session — one document, one rule history.

Usage:

    session = MaskingSession.create(text="Call Bob at bob@acme.com")

    # Manual selection
    candidate = session.select(5, 8)             # "Bob"
    session.add_rule(candidate, Category.PERSON)  # Bob -> [PERSON_1]

    # Auto-mask every email in the document (one undo step)
    session.auto_mask("email")

    session.plain_text()      # "Call [PERSON_1] at [EMAIL_1]"
    session.undo()            # the email rule is gone again

All rule mutations go through the HistoryManager, so every accepted edit
is a snapshot and undo/redo never loses state.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from . import rules as store
from .history import HistoryManager
from .mock import generate_mock_value
from .patterns import DETECTORS, Detector, get_detector
from .sanitizer import Sanitizer
from .serializer import DEFAULT_EXPORT_FILENAME, dump_bytes, export_rules, import_rules, loads
from .types import Category, ReplacementRule, RuleSet, Segment, SelectionCandidate

logger = logging.getLogger(__name__)


@dataclass
class MaskingSession:
    """Application context for a single document."""

    text: str = ""
    history: HistoryManager = field(default_factory=HistoryManager)
    detectors: dict[str, Detector] = field(default_factory=lambda: dict(DETECTORS))
    sanitizer: Sanitizer = field(default_factory=Sanitizer)
    export_indent: int | None = 2
    export_filename: str = DEFAULT_EXPORT_FILENAME

    @classmethod
    def create(
        cls,
        *,
        text: str = "",
        detectors: dict[str, Detector] | None = None,
    ) -> "MaskingSession":
        """Factory — a fresh session with its own history."""
        session = cls(text=text)
        if detectors is not None:
            session.detectors = dict(detectors)
        return session

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def rules(self) -> RuleSet:
        return self.history.current()

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    # ------------------------------------------------------------------
    # Rule mutations
    # ------------------------------------------------------------------

    def select(self, start: int, end: int) -> SelectionCandidate | None:
        """Turn a highlighted range into a candidate (None if blank)."""
        return SelectionCandidate.from_selection(self.text, start, end)

    def add_rule(
        self,
        original: str | SelectionCandidate,
        category: Category = Category.CUSTOM,
        custom_value: str | None = None,
    ) -> ReplacementRule:
        """Add or update the rule for ``original``.

        A blank ``custom_value`` falls back to a generated mock value.
        """
        if isinstance(original, SelectionCandidate):
            original = original.text
        if not original:
            raise ValueError("original must be a non-empty string")

        current = self.rules
        replacement = custom_value if custom_value and custom_value.strip() else None
        if replacement is None:
            replacement = generate_mock_value(category, current)

        rule = ReplacementRule.create(original, replacement, category)
        self.history.commit(store.add_or_update_rule(current, rule))
        return rule

    def remove_rule(self, rule_id: str) -> bool:
        return self.history.commit(store.remove_rule(self.rules, rule_id))

    def clear_rules(self) -> bool:
        return self.history.commit(store.clear_rules(self.rules))

    def merge_rules(self, incoming: Iterable[ReplacementRule]) -> list[ReplacementRule]:
        """Merge rules (existing originals win).  Returns the rules added."""
        before = self.rules
        merged = store.merge_rules(before, incoming)
        self.history.commit(merged)
        return [r for r in merged if r.original not in before]

    def auto_mask(self, detector: str | Detector) -> list[ReplacementRule]:
        """Create rules for every new match of ``detector`` as one undo step."""
        if isinstance(detector, str):
            detector = get_detector(detector, self.detectors)
        if not self.text:
            return []

        current = self.rules
        unique: list[str] = []
        seen: set[str] = set()
        for match in detector.detect(self.text):
            if not match.strip() or match in seen or match in current:
                continue
            seen.add(match)
            unique.append(match)

        if not unique:
            logger.debug("Auto-mask %s: nothing new", detector.name)
            return []

        category = detector.category
        ordinal = current.count(category)
        new_rules: list[ReplacementRule] = []
        for match in unique:
            ordinal += 1
            new_rules.append(ReplacementRule.create(
                match, generate_mock_value(category, ordinal=ordinal), category,
            ))

        self.history.commit(RuleSet([*current, *new_rules]))
        logger.info("Auto-mask %s: added %d rules", detector.name, len(new_rules))
        return new_rules

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def plain_text(self) -> str:
        return self.sanitizer.plain_text(self.text, self.rules)

    def segments(self) -> list[Segment]:
        return self.sanitizer.segments(self.text, self.rules)

    def copy_to(self, clipboard: Callable[[str], object]) -> str:
        """Hand the sanitized text to a clipboard writer."""
        text = self.plain_text()
        clipboard(text)
        return text

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def export_config(self) -> dict:
        return export_rules(self.rules)

    def save_config(self, path: str | Path | None = None) -> Path:
        """Write the rule document; defaults to ``export_filename``."""
        path = Path(path or self.export_filename).expanduser()
        path.write_bytes(dump_bytes(self.rules, indent=self.export_indent))
        logger.info("Saved %d rules to %s", len(self.rules), path)
        return path

    def import_config(self, data: str | bytes | dict) -> list[ReplacementRule]:
        """Merge a rule document.  Raises InvalidConfigDocument, state untouched."""
        if isinstance(data, dict):
            incoming = import_rules(data)
        else:
            incoming = loads(data)
        added = self.merge_rules(incoming)
        logger.info("Imported %d of %d rules", len(added), len(incoming))
        return added

    def import_file(self, path: str | Path) -> list[ReplacementRule]:
        path = Path(path).expanduser()
        incoming = loads(path.read_bytes(), source=str(path))
        added = self.merge_rules(incoming)
        logger.info("Imported %d of %d rules from %s", len(added), len(incoming), path)
        return added
