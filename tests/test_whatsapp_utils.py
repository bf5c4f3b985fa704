"""
Tests for utils/whatsapp.py.
"""

import pytest

from tests.helpers import FakeTransport
from utils.whatsapp import WhatsAppUtils


def test_format_duration():
    assert WhatsAppUtils.format_duration(0) == "0d 0h 0m 0s"
    assert WhatsAppUtils.format_duration(93784) == "1d 2h 3m 4s"


def test_format_size():
    assert WhatsAppUtils.format_size(0) == "0 Bytes"
    assert WhatsAppUtils.format_size(1536) == "1.5 KB"
    assert WhatsAppUtils.format_size(5 * 1024 * 1024) == "5 MB"


def test_format_number():
    assert WhatsAppUtils.format_number(1234567) == "1,234,567"
    assert WhatsAppUtils.format_number("n/a") == "n/a"


def test_mention_and_numbered_list():
    assert WhatsAppUtils.mention("94771111111@s.whatsapp.net") == "@94771111111"
    assert WhatsAppUtils.numbered_list(["a", "b"]) == "1. a\n2. b"


@pytest.mark.parametrize("expression,expected", [
    ("2 + 3 * 4", 14),
    ("(2 + 3) * 4", 20),
    ("10 / 4", 2.5),
    ("10 / 5", 2),
    ("-3 + 5", 2),
    ("7 % 3", 1),
])
def test_calculate(expression, expected):
    assert WhatsAppUtils.calculate(expression) == expected


def test_calculate_rejects_non_arithmetic():
    with pytest.raises(ValueError):
        WhatsAppUtils.calculate("2 ** 3 ** 99")
    with pytest.raises(ValueError):
        WhatsAppUtils.calculate("abs(1)")


def test_calculate_division_by_zero():
    with pytest.raises(ZeroDivisionError):
        WhatsAppUtils.calculate("1 / 0")


@pytest.mark.asyncio
async def test_safe_send_swallows_failures():
    transport = FakeTransport()
    transport.fail_sends = True
    assert await WhatsAppUtils.safe_send(transport, "x@s.whatsapp.net", "hi") is None


@pytest.mark.asyncio
async def test_safe_send_returns_sent_info():
    transport = FakeTransport()
    sent = await WhatsAppUtils.safe_send(transport, "x@s.whatsapp.net", "hi")
    assert sent["key"]["id"] == "MSG1"
    assert transport.texts() == ["hi"]
