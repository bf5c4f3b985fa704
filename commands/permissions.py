"""
Permission Evaluator
Decides whether a caller may run a command
"""

from enum import Enum
from typing import Optional

from commands.command_registry import CommandDefinition
from commands.context import CallerContext


class DenialReason(str, Enum):
    BANNED = "banned"
    OWNER_ONLY = "owner-only"
    GROUP_ONLY = "group-only"
    ADMIN_ONLY = "admin-only"


DENIAL_MESSAGES = {
    DenialReason.BANNED: "🚫 You are banned from using this bot!",
    DenialReason.OWNER_ONLY: "❌ This command is owner only!",
    DenialReason.GROUP_ONLY: "❌ This command can only be used in groups!",
    DenialReason.ADMIN_ONLY: "❌ This command is admin only!",
}


class PermissionResult:
    """Result of a permission check."""

    def __init__(self, allowed: bool, reason: Optional[DenialReason] = None):
        self.allowed = allowed
        self.reason = reason

    @property
    def message(self) -> Optional[str]:
        return DENIAL_MESSAGES.get(self.reason) if self.reason else None

    def __bool__(self) -> bool:
        return self.allowed

    def __repr__(self) -> str:
        return "Allowed" if self.allowed else f"Denied({self.reason.value})"


ALLOWED = PermissionResult(True)


async def can_invoke(definition: CommandDefinition, caller: CallerContext) -> PermissionResult:
    """
    Check a caller against a command's restrictions.

    Checks run in a fixed order and the first failure wins. The admin lookup
    only happens in groups and only for admin-only commands.

    Args:
        definition: Command being invoked
        caller: Invoking caller

    Returns:
        PermissionResult
    """
    if caller.is_banned and not caller.is_owner:
        return PermissionResult(False, DenialReason.BANNED)

    if definition.owner_only and not caller.is_owner:
        return PermissionResult(False, DenialReason.OWNER_ONLY)

    if definition.group_only and not caller.is_group:
        return PermissionResult(False, DenialReason.GROUP_ONLY)

    if definition.admin_only and caller.is_group and not caller.is_owner:
        if not await caller.is_admin():
            return PermissionResult(False, DenialReason.ADMIN_ONLY)

    return ALLOWED
