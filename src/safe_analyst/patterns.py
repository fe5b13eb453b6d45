"""Pattern detectors — regex and phone-metadata scanners for auto-masking.

Each detector returns the literal substrings it matched, in document
order, duplicates included.  Deduplication against the rule set is the
caller's job (see ``MaskingSession.auto_mask``).
"""

from __future__ import annotations
import ipaddress
import logging
import re
from typing import Protocol, runtime_checkable

import phonenumbers

from .types import Category

logger = logging.getLogger(__name__)


@runtime_checkable
class Detector(Protocol):
    name: str
    category: Category

    def detect(self, text: str) -> list[str]: ...


class RegexDetector:
    """Detector backed by a single compiled pattern."""

    __slots__ = ("name", "category", "pattern")

    def __init__(self, name: str, category: Category, pattern: re.Pattern) -> None:
        self.name = name
        self.category = category
        self.pattern = pattern

    def detect(self, text: str) -> list[str]:
        return [m.group() for m in self.pattern.finditer(text)]

    def __repr__(self) -> str:
        return f"RegexDetector({self.name!r}, {self.category.name})"


class PhoneDetector:
    """Phone numbers via libphonenumber metadata.

    ``region`` is the default country for numbers written without a
    ``+`` prefix, e.g. ``(650) 253-0000`` for US.  International numbers
    are found regardless of region.
    """

    __slots__ = ("name", "category", "region")

    def __init__(self, region: str = "US", *, name: str = "phone") -> None:
        self.name = name
        self.category = Category.PHONE
        self.region = region.upper()

    def detect(self, text: str) -> list[str]:
        return [text[m.start:m.end] for m in phonenumbers.PhoneNumberMatcher(text, self.region)]

    def __repr__(self) -> str:
        return f"PhoneDetector(region={self.region!r})"


# IPv6 candidates: full, "::" compressed, embedded IPv4 tail, optional
# %zone.  Candidates are confirmed by ipaddress, so the pattern can stay
# permissive.  The IPv4 tail is tried before a hex group so that
# "::ffff:10.0.0.1" is not cut at "::ffff:10".  A trailing ":" is
# punctuation unless another group follows it.
_IPV6_CANDIDATE = re.compile(
    r"(?<![\w:])"
    r"(?:[0-9A-Fa-f]{0,4}:){2,7}"
    r"(?:(?:25[0-5]|2[0-4]\d|[01]?\d\d?)(?:\.(?:25[0-5]|2[0-4]\d|[01]?\d\d?)){3}"
    r"|[0-9A-Fa-f]{1,4})?"
    r"(?:%[0-9A-Za-z]+)?"
    r"(?<![0-9A-Fa-f]:)"
    r"(?!\w|:[0-9A-Fa-f:])"
)


class IPv6Detector:
    """IPv6 addresses, validated with the ipaddress module."""

    __slots__ = ("name", "category")

    def __init__(self, *, name: str = "ipv6") -> None:
        self.name = name
        self.category = Category.IP_ADDRESS

    def detect(self, text: str) -> list[str]:
        found: list[str] = []
        for m in _IPV6_CANDIDATE.finditer(text):
            # a bare "::" is valid but is usually a scope operator
            if not m.group().strip(":"):
                continue
            try:
                ipaddress.IPv6Address(m.group())
            except ValueError:
                continue
            found.append(m.group())
        return found

    def __repr__(self) -> str:
        return "IPv6Detector()"


EMAIL = RegexDetector("email", Category.EMAIL, re.compile(
    r"\b[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}\b"
))

IPV4 = RegexDetector("ipv4", Category.IP_ADDRESS, re.compile(
    r"\b(?:(?:25[0-5]|2[0-4]\d|[01]?\d\d?)\.){3}"
    r"(?:25[0-5]|2[0-4]\d|[01]?\d\d?)\b"
))

# DNS labels (1-63 chars, no leading/trailing hyphen) ending in an
# alphabetic top-level label
HOST = RegexDetector("host", Category.HOST, re.compile(
    r"\b(?:[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,63}\b"
))


def default_detectors(region: str = "US") -> dict[str, Detector]:
    """Fresh registry in the order the auto-mask shortcuts are offered."""
    detectors: list[Detector] = [PhoneDetector(region), EMAIL, IPV4, IPv6Detector(), HOST]
    return {d.name: d for d in detectors}


DETECTORS: dict[str, Detector] = default_detectors()


def register_detector(detector: Detector, registry: dict[str, Detector] | None = None) -> None:
    """Add or replace a detector by name."""
    target = DETECTORS if registry is None else registry
    target[detector.name] = detector


def get_detector(name: str, registry: dict[str, Detector] | None = None) -> Detector:
    source = DETECTORS if registry is None else registry
    try:
        return source[name.lower()]
    except KeyError:
        raise KeyError(
            f"Unknown detector {name!r} (known: {', '.join(source)})"
        ) from None


def detect_all(text: str, registry: dict[str, Detector] | None = None) -> dict[str, list[str]]:
    """Run every registered detector.  Returns ``{name: matches}``."""
    source = DETECTORS if registry is None else registry
    results: dict[str, list[str]] = {}
    for name, detector in source.items():
        results[name] = detector.detect(text)
        logger.debug("Detector %s found %d matches", name, len(results[name]))
    return results
