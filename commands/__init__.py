"""
Command system for the WhatsApp bot.
"""

from .command_registry import Category, CommandDefinition, CommandRegistry
from .context import CallerContext, CommandContext, InboundEvent, Services
from .dispatcher import Dispatcher
from .downloader_commands import register_downloader_commands, resolve_selection
from .general_commands import register_general_commands
from .group_commands import register_group_commands
from .moderation_commands import register_moderation_commands
from .owner_commands import register_owner_commands
from .permissions import DenialReason, PermissionResult, can_invoke
from .selection_store import PendingSelection, SelectionKind, SelectionStore
from .settings_commands import register_settings_commands


def register_all_commands(registry: CommandRegistry) -> CommandRegistry:
    """Register every command module, in menu order."""
    register_general_commands(registry)
    register_group_commands(registry)
    register_moderation_commands(registry)
    register_settings_commands(registry)
    register_owner_commands(registry)
    register_downloader_commands(registry)
    registry.logger.info(f"Registered {len(registry.get_all())} commands")
    return registry


__all__ = [
    "Category",
    "CommandDefinition",
    "CommandRegistry",
    "CallerContext",
    "CommandContext",
    "InboundEvent",
    "Services",
    "Dispatcher",
    "DenialReason",
    "PermissionResult",
    "can_invoke",
    "PendingSelection",
    "SelectionKind",
    "SelectionStore",
    "register_all_commands",
    "resolve_selection",
]
