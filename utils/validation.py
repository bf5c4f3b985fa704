"""
Validation Utilities
Helper functions for validating WhatsApp identities and user input
"""

import re
from typing import Any, Iterable, List, Optional

GROUP_SUFFIX = "@g.us"
USER_SUFFIX = "@s.whatsapp.net"
STATUS_BROADCAST = "status@broadcast"

# A selection reply is the whole (trimmed) message made of decimal digits
SELECTION_REPLY_REGEX = re.compile(r"^\d+$")

# Links in chat text
LINK_REGEX = re.compile(r"(https?://|www\.)[^\s]+", re.IGNORECASE)

URL_REGEX = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)

# WhatsApp group invite links
INVITE_REGEX = re.compile(r"chat\.whatsapp\.com/([0-9A-Za-z]{20,24})")

# Only arithmetic characters are accepted by the calculator
ARITHMETIC_REGEX = re.compile(r"^[\d\s+\-*/().%]+$")

TOGGLE_VALUES = ("on", "off")


class ValidationResult:
    """Result of a validation operation."""

    def __init__(
        self,
        valid: bool,
        error: Optional[str] = None,
        sanitized: Optional[str] = None,
        value: Optional[Any] = None,
    ):
        self.valid = valid
        self.error = error
        self.sanitized = sanitized
        self.value = value

    def __bool__(self) -> bool:
        return self.valid


class ValidationUtils:
    """Utility class for input validation."""

    @staticmethod
    def is_group_jid(jid: Optional[str]) -> bool:
        """Check if a JID belongs to a group conversation."""
        return bool(jid) and jid.endswith(GROUP_SUFFIX)

    @staticmethod
    def jid_number(jid: Optional[str]) -> str:
        """
        Extract the phone-number part of a JID.

        Args:
            jid: JID like ``94771234567@s.whatsapp.net``

        Returns:
            Number part, or empty string
        """
        if not jid:
            return ""
        return jid.split("@", 1)[0].split(":", 1)[0]

    @staticmethod
    def to_user_jid(number: str) -> Optional[str]:
        """
        Build a user JID from a loosely formatted phone number.

        Args:
            number: Phone number, any punctuation allowed

        Returns:
            User JID or None if no digits remain
        """
        digits = re.sub(r"[^0-9]", "", number or "")
        if not digits:
            return None
        return f"{digits}{USER_SUFFIX}"

    @staticmethod
    def is_selection_reply(text: Optional[str]) -> bool:
        """Check if a message is a bare number (a reply to a numbered list)."""
        if not text:
            return False
        return bool(SELECTION_REPLY_REGEX.match(text.strip()))

    @staticmethod
    def contains_link(text: Optional[str]) -> bool:
        """Check if text contains a link."""
        if not text:
            return False
        return LINK_REGEX.search(text) is not None

    @staticmethod
    def find_bad_word(text: Optional[str], bad_words: Iterable[str]) -> Optional[str]:
        """
        Find the first bad word contained in the text.

        Args:
            text: Message text
            bad_words: Lower-cased words to look for

        Returns:
            Matched word or None
        """
        if not text:
            return None
        lower_text = text.lower()
        for word in bad_words:
            if word and word in lower_text:
                return word
        return None

    @staticmethod
    def validate_toggle(args: List[str]) -> ValidationResult:
        """
        Validate an ``on``/``off`` argument.

        Args:
            args: Command arguments

        Returns:
            ValidationResult whose value is True for on, False for off
        """
        action = args[0].lower() if args else ""
        if action not in TOGGLE_VALUES:
            return ValidationResult(valid=False, error="Expected on/off")
        return ValidationResult(valid=True, sanitized=action, value=action == "on")

    @staticmethod
    def validate_url(url: Optional[str]) -> ValidationResult:
        """
        Validate URL format.

        Args:
            url: URL to validate

        Returns:
            ValidationResult
        """
        if not url or not isinstance(url, str):
            return ValidationResult(valid=False, error="URL is required")

        url = url.strip()
        if not URL_REGEX.match(url):
            return ValidationResult(valid=False, error="Invalid URL format")

        return ValidationResult(valid=True, sanitized=url)

    @staticmethod
    def extract_invite_code(text: Optional[str]) -> ValidationResult:
        """
        Extract the code from a WhatsApp group invite link.

        Args:
            text: Invite link

        Returns:
            ValidationResult with the code as ``sanitized``
        """
        match = INVITE_REGEX.search(text or "")
        if not match:
            return ValidationResult(valid=False, error="Invalid invite link")
        return ValidationResult(valid=True, sanitized=match.group(1))

    @staticmethod
    def validate_expression(expression: Optional[str]) -> ValidationResult:
        """
        Validate an arithmetic expression for the calculator.

        Args:
            expression: Expression text

        Returns:
            ValidationResult with the expression as ``sanitized``
        """
        if not expression or not expression.strip():
            return ValidationResult(valid=False, error="Expression is required")
        expression = expression.replace("x", "*").replace("÷", "/").strip()
        if not ARITHMETIC_REGEX.match(expression):
            return ValidationResult(valid=False, error="Only numbers and + - * / % ( ) are allowed")
        return ValidationResult(valid=True, sanitized=expression)
