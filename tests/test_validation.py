"""
Tests for utils/validation.py.
"""

import pytest

from utils.validation import ValidationUtils


@pytest.mark.parametrize("text,expected", [
    ("1", True),
    ("  12 ", True),
    ("007", True),
    ("1a", False),
    ("-1", False),
    ("1.5", False),
    ("", False),
    (None, False),
    (".1", False),
])
def test_is_selection_reply(text, expected):
    assert ValidationUtils.is_selection_reply(text) is expected


def test_group_jid_detection():
    assert ValidationUtils.is_group_jid("120363000000000000@g.us")
    assert not ValidationUtils.is_group_jid("94771111111@s.whatsapp.net")
    assert not ValidationUtils.is_group_jid(None)


def test_jid_number_strips_device_suffix():
    assert ValidationUtils.jid_number("94771111111:12@s.whatsapp.net") == "94771111111"
    assert ValidationUtils.jid_number("") == ""


def test_to_user_jid():
    assert ValidationUtils.to_user_jid("+94 77-111 1111") == "94771111111@s.whatsapp.net"
    assert ValidationUtils.to_user_jid("abc") is None


def test_contains_link():
    assert ValidationUtils.contains_link("join https://example.com now")
    assert ValidationUtils.contains_link("www.example.com")
    assert not ValidationUtils.contains_link("no links here")


def test_find_bad_word_is_case_insensitive():
    assert ValidationUtils.find_bad_word("You are a DAMN fool", ["shit", "damn"]) == "damn"
    assert ValidationUtils.find_bad_word("clean text", ["shit"]) is None


def test_validate_toggle():
    assert ValidationUtils.validate_toggle(["ON"]).value is True
    assert ValidationUtils.validate_toggle(["off"]).value is False
    assert not ValidationUtils.validate_toggle([])
    assert not ValidationUtils.validate_toggle(["maybe"])


def test_validate_url():
    assert ValidationUtils.validate_url(" https://youtube.com/watch?v=x ").sanitized == "https://youtube.com/watch?v=x"
    assert not ValidationUtils.validate_url("youtube")
    assert not ValidationUtils.validate_url(None)


def test_extract_invite_code():
    result = ValidationUtils.extract_invite_code("https://chat.whatsapp.com/AbCdEfGhIjKlMnOpQrSt12")
    assert result.sanitized == "AbCdEfGhIjKlMnOpQrSt12"
    assert not ValidationUtils.extract_invite_code("https://example.com/abc")


def test_validate_expression():
    assert ValidationUtils.validate_expression("2 x 3").sanitized == "2 * 3"
    assert not ValidationUtils.validate_expression("__import__('os')")
    assert not ValidationUtils.validate_expression("  ")
