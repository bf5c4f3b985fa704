"""
WhatsApp Utilities
Helper functions for WhatsApp interactions and message text
"""

import ast
import math
import operator
import re
from typing import Any, Dict, List, Optional, Union

from utils.logger import get_logger
from utils.validation import ValidationUtils

logger = get_logger("WhatsAppUtils")

REGEX = {
    "NUMBER_FORMAT": re.compile(r"\B(?=(\d{3})+(?!\d))"),
}

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]

_BIN_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Mod: operator.mod,
}

_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


class WhatsAppUtils:
    """Utility class for WhatsApp-related helper functions."""

    @staticmethod
    async def safe_send(transport: Any, chat_id: str, content: Union[str, Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """
        Send a message and swallow transport failures.

        Used for notices whose loss is harmless (welcome, filter warnings).

        Args:
            transport: Messaging transport
            chat_id: Conversation JID
            content: Text or message payload

        Returns:
            Sent message info or None if failed
        """
        if not transport or not chat_id:
            return None
        try:
            return await transport.send_message(chat_id, content)
        except Exception as e:
            logger.debug(f"safe_send to {chat_id} failed: {e}")
            return None

    @staticmethod
    def mention(jid: str) -> str:
        """Render a JID as an @mention."""
        return f"@{ValidationUtils.jid_number(jid)}"

    @staticmethod
    def format_duration(seconds: int) -> str:
        """
        Format duration as days, hours, minutes and seconds.

        Args:
            seconds: Duration in seconds

        Returns:
            Formatted duration string, e.g. ``1d 2h 3m 4s``
        """
        seconds = max(0, int(seconds))
        days = seconds // 86400
        hours = (seconds % 86400) // 3600
        minutes = (seconds % 3600) // 60
        secs = seconds % 60
        return f"{days}d {hours}h {minutes}m {secs}s"

    @staticmethod
    def format_size(num_bytes: int) -> str:
        """
        Format a byte count for humans.

        Args:
            num_bytes: Size in bytes

        Returns:
            Size like ``1.5 MB``
        """
        if num_bytes <= 0:
            return "0 Bytes"
        index = min(int(math.floor(math.log(num_bytes, 1024))), len(SIZE_UNITS) - 1)
        value = round(num_bytes / math.pow(1024, index), 2)
        if value == int(value):
            value = int(value)
        return f"{value} {SIZE_UNITS[index]}"

    @staticmethod
    def format_number(num: Any) -> str:
        """Format number with commas."""
        if not isinstance(num, (int, float)):
            return str(num)
        return REGEX["NUMBER_FORMAT"].sub(",", str(num))

    @staticmethod
    def numbered_list(lines: List[str]) -> str:
        """Render lines as a 1-based numbered list."""
        return "\n".join(f"{i}. {line}" for i, line in enumerate(lines, 1))

    @staticmethod
    def calculate(expression: str) -> Union[int, float]:
        """
        Evaluate an arithmetic expression without ``eval``.

        Args:
            expression: Expression of numbers, + - * / % and parentheses

        Returns:
            Result

        Raises:
            ValueError: If the expression is not plain arithmetic
            ZeroDivisionError: On division by zero
        """
        try:
            tree = ast.parse(expression, mode="eval")
        except SyntaxError as e:
            raise ValueError("Invalid expression") from e

        def _eval(node: ast.AST) -> Union[int, float]:
            if isinstance(node, ast.Expression):
                return _eval(node.body)
            if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)):
                return node.value
            if isinstance(node, ast.BinOp) and type(node.op) in _BIN_OPS:
                return _BIN_OPS[type(node.op)](_eval(node.left), _eval(node.right))
            if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
                return _UNARY_OPS[type(node.op)](_eval(node.operand))
            raise ValueError("Invalid expression")

        result = _eval(tree)
        if isinstance(result, float) and result.is_integer():
            return int(result)
        return result
