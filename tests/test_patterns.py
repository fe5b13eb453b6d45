"""Tests for the pattern detectors."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import re

import pytest

from safe_analyst import Category, DETECTORS, get_detector, detect_all
from safe_analyst.patterns import (
    Detector, PhoneDetector, IPv6Detector, RegexDetector, default_detectors, register_detector,
)


# ── Email ────────────────────────────────────────────────────────────

def test_email_detection():
    found = get_detector("email").detect("Contact alice@example.com or bob.smith+x@mail.acme.co.uk")
    assert found == ["alice@example.com", "bob.smith+x@mail.acme.co.uk"]


def test_email_keeps_duplicates_in_order():
    found = get_detector("email").detect("a@b.io, c@d.io, a@b.io")
    assert found == ["a@b.io", "c@d.io", "a@b.io"]


# ── IPv4 ─────────────────────────────────────────────────────────────

def test_ipv4_detection():
    found = get_detector("ipv4").detect("gw 10.0.0.1, db 192.168.1.100")
    assert found == ["10.0.0.1", "192.168.1.100"]


def test_ipv4_rejects_out_of_range_octets():
    assert get_detector("ipv4").detect("bad 999.1.1.1 and 10.0.0.256") == []


# ── IPv6 ─────────────────────────────────────────────────────────────

def test_ipv6_full_and_compressed():
    text = "a 2001:0db8:85a3:0000:0000:8a2e:0370:7334 b 2001:db8::1 c ::1"
    assert IPv6Detector().detect(text) == [
        "2001:0db8:85a3:0000:0000:8a2e:0370:7334", "2001:db8::1", "::1",
    ]


def test_ipv6_embedded_ipv4_and_zone():
    text = "mapped ::ffff:192.168.1.1 link fe80::1%eth0."
    assert IPv6Detector().detect(text) == ["::ffff:192.168.1.1", "fe80::1%eth0"]


def test_ipv6_ignores_times_and_scope_operators():
    assert IPv6Detector().detect("at 12:30:45 call std::vector or x :: Int") == []


def test_ipv6_followed_by_colon_punctuation():
    assert IPv6Detector().detect("addr 2001:db8::1: next") == ["2001:db8::1"]
    assert IPv6Detector().detect("gateways: fe80::2:, ::1:") == ["fe80::2", "::1"]


def test_ipv6_registered_as_ip_address():
    assert get_detector("ipv6").category is Category.IP_ADDRESS


# ── Host ─────────────────────────────────────────────────────────────

def test_host_detection():
    found = get_detector("host").detect("Deploy to api.internal.example.org then example.com")
    assert found == ["api.internal.example.org", "example.com"]


def test_host_requires_alpha_tld():
    assert get_detector("host").detect("version 1.2.3 and 10.0.0.1") == []


# ── Phone ────────────────────────────────────────────────────────────

def test_phone_local_format_uses_default_region():
    found = PhoneDetector("US").detect("Call (650) 253-0000 today")
    assert found == ["(650) 253-0000"]


def test_phone_international_any_region():
    found = PhoneDetector("US").detect("Zurich office: +41 44 668 1800.")
    assert found == ["+41 44 668 1800"]


def test_phone_no_false_positive_on_clean_text():
    assert PhoneDetector().detect("The weather is nice today in Melbourne") == []


# ── Registry ─────────────────────────────────────────────────────────

def test_default_registry_order():
    assert list(DETECTORS) == ["phone", "email", "ipv4", "ipv6", "host"]
    for detector in DETECTORS.values():
        assert isinstance(detector, Detector)


def test_get_detector_unknown():
    with pytest.raises(KeyError, match="known"):
        get_detector("ssn")


def test_register_custom_detector():
    registry = default_detectors()
    ticket = RegexDetector("ticket", Category.SYSTEM_NAME, re.compile(r"\bJIRA-\d+\b"))
    register_detector(ticket, registry)
    assert get_detector("ticket", registry).detect("see JIRA-42") == ["JIRA-42"]
    assert "ticket" not in DETECTORS


def test_detect_all():
    results = detect_all("mail bob@acme.com from 10.1.2.3")
    assert results["email"] == ["bob@acme.com"]
    assert results["ipv4"] == ["10.1.2.3"]
    assert "acme.com" in results["host"]
