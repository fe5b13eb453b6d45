"""Rule-set documents — export to and import from portable JSON.

Document format:

    {
      "rules": [
        {"id": "3f2a9c01b7de", "original": "john@acme.com",
         "replacement": "[EMAIL_1]", "category": "Email"}
      ],
      "version": "1.0",
      "createdAt": "2024-05-01T12:00:00+00:00"
    }

Imports are all-or-nothing: any structural problem raises
InvalidConfigDocument before a single rule is returned.
"""

from __future__ import annotations
import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from .errors import InvalidConfigDocument
from .types import Category, ReplacementRule, new_rule_id

logger = logging.getLogger(__name__)

DOCUMENT_VERSION = "1.0"
DEFAULT_EXPORT_FILENAME = "safe-analyst-config.json"


def rule_to_dict(rule: ReplacementRule) -> dict[str, str]:
    return {
        "id": rule.id,
        "original": rule.original,
        "replacement": rule.replacement,
        "category": rule.category.value,
    }


def export_rules(
    rules: Iterable[ReplacementRule],
    *,
    created_at: datetime | None = None,
) -> dict[str, Any]:
    """Build the export document for ``rules`` (insertion order kept)."""
    stamp = created_at or datetime.now(timezone.utc)
    return {
        "rules": [rule_to_dict(r) for r in rules],
        "version": DOCUMENT_VERSION,
        "createdAt": stamp.isoformat(),
    }


def dumps(rules: Iterable[ReplacementRule], *, indent: int | None = 2, **kwargs: Any) -> str:
    """Serialize ``rules`` as a JSON document string."""
    return json.dumps(export_rules(rules, **kwargs), indent=indent, ensure_ascii=False)


def dump_bytes(rules: Iterable[ReplacementRule], *, indent: int | None = 2, **kwargs: Any) -> bytes:
    """UTF-8 blob for whatever writes the file."""
    return dumps(rules, indent=indent, **kwargs).encode("utf-8")


def import_rules(document: Any, *, source: str | None = None) -> list[ReplacementRule]:
    """Validate a parsed document and return its rules.

    Raises InvalidConfigDocument when ``rules`` is missing or not an
    array, or when an element cannot form a rule.  Unknown categories
    become CUSTOM; missing ids are regenerated.
    """
    if not isinstance(document, dict):
        raise InvalidConfigDocument("document must be a JSON object", source=source)
    raw_rules = document.get("rules")
    if not isinstance(raw_rules, list):
        raise InvalidConfigDocument("'rules' must be an array", source=source)

    version = document.get("version")
    if version is not None and version != DOCUMENT_VERSION:
        logger.warning("Importing document version %r (expected %s)", version, DOCUMENT_VERSION)

    return [_rule_from_dict(item, idx, source) for idx, item in enumerate(raw_rules)]


def loads(data: str | bytes, *, source: str | None = None) -> list[ReplacementRule]:
    """Parse JSON text and import its rules."""
    try:
        document = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidConfigDocument(f"not valid JSON ({e})", source=source) from e
    return import_rules(document, source=source)


def _rule_from_dict(item: Any, idx: int, source: str | None) -> ReplacementRule:
    if not isinstance(item, dict):
        raise InvalidConfigDocument(f"rules[{idx}] is not an object", source=source)

    original = item.get("original")
    if not isinstance(original, str) or not original:
        raise InvalidConfigDocument(
            f"rules[{idx}].original must be a non-empty string", source=source,
        )
    replacement = item.get("replacement")
    if not isinstance(replacement, str):
        raise InvalidConfigDocument(
            f"rules[{idx}].replacement must be a string", source=source,
        )

    # older documents call the field "type"
    category = Category.parse(item.get("category", item.get("type")))
    rule_id = item.get("id")
    if not isinstance(rule_id, str) or not rule_id:
        rule_id = new_rule_id()

    return ReplacementRule(id=rule_id, original=original,
                           replacement=replacement, category=category)
