"""
Test suite for origin and loop filters.
"""

import pytest

from wabridge.identity import extract_phone_number, is_broadcast, is_group, is_self

OWN_ID = "6281234567890:12@s.whatsapp.net"


class TestIsSelf:
    def test_digit_runs_compared_ignoring_suffix(self):
        assert is_self("6281234567890@s.whatsapp.net", OWN_ID) == is_self(
            "+6281234567890@g.us", OWN_ID
        )
        assert is_self("6281234567890@s.whatsapp.net", OWN_ID) is True

    def test_device_suffix_ignored(self):
        assert is_self("6281234567890:3@s.whatsapp.net", OWN_ID) is True

    def test_other_number(self):
        assert is_self("6289876543210@s.whatsapp.net", OWN_ID) is False

    def test_unknown_own_id(self):
        assert is_self("6281234567890@s.whatsapp.net", None) is False

    def test_address_without_digits(self):
        assert is_self("status@broadcast", "nodigits@s.whatsapp.net") is False


class TestOriginFilters:
    @pytest.mark.parametrize(
        "jid, expected",
        [
            ("120363025246125486@g.us", True),
            ("6289876543210@s.whatsapp.net", False),
            ("status@broadcast", False),
        ],
    )
    def test_is_group(self, jid, expected):
        assert is_group(jid) is expected

    @pytest.mark.parametrize(
        "source, expected",
        [
            ("6289876543210@s.whatsapp.net in status@broadcast", True),
            ("6289876543210@s.whatsapp.net in 1234567890@broadcast", True),
            ("6289876543210@s.whatsapp.net", False),
        ],
    )
    def test_is_broadcast(self, source, expected):
        assert is_broadcast(source) is expected

    def test_extract_phone_number(self):
        assert extract_phone_number("+6281234567890:7@s.whatsapp.net") == "6281234567890"
        assert extract_phone_number("status@broadcast") == ""
