"""Mock value generator — deterministic placeholders per category.

    generate_mock_value(Category.PHONE, ordinal=3)      # "+1-555-0103"
    generate_mock_value(Category.EMAIL, rules)          # "[EMAIL_<count+1>]"
"""

from __future__ import annotations
from typing import Iterable

from .types import Category, ReplacementRule

# Templates take the ordinal as ``n``; DATE has none on purpose.
_TEMPLATES: dict[Category, str] = {
    Category.PERSON: "[PERSON_{n}]",
    Category.ORGANIZATION: "[ORG_{n}]",
    Category.API_KEY: "[SECRET_KEY_{n}]",
    Category.EMAIL: "[EMAIL_{n}]",
    Category.IP_ADDRESS: "192.168.x.{n}",
    Category.DATE: "20XX-XX-XX",
    Category.LOCATION: "[LOCATION_{n}]",
    Category.HOST: "host-{n}.example.com",
    Category.SYSTEM_NAME: "[SYSTEM_{n}]",
    Category.SOCIAL_HANDLE: "[@user_{n}]",
    Category.PHONE: "+1-555-01{n:02d}",
}

DEFAULT_MOCK = "[REDACTED]"


def next_ordinal(category: Category, rules: Iterable[ReplacementRule] = ()) -> int:
    """Count of existing rules in ``category`` plus one."""
    return sum(1 for r in rules if r.category == category) + 1


def generate_mock_value(
    category: Category,
    rules: Iterable[ReplacementRule] = (),
    ordinal: int | None = None,
) -> str:
    """Return the placeholder for ``category`` at ``ordinal``.

    When no ordinal is given it is derived from ``rules``.
    """
    template = _TEMPLATES.get(category)
    if template is None:
        return DEFAULT_MOCK
    n = ordinal if ordinal is not None else next_ordinal(category, rules)
    return template.format(n=n)
