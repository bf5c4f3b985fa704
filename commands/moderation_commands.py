"""
Moderation Commands
Group filters, warnings and message deletion
"""

from typing import List

from bot.transport import TransportError
from commands.command_registry import Category, CommandRegistry
from commands.context import CommandContext
from utils.logger import get_logger
from utils.validation import ValidationUtils
from utils.whatsapp import WhatsAppUtils

logger = get_logger("Moderation")

MAX_WARNINGS = 3

ADMIN_GROUP = {"group_only": True, "admin_only": True}


def _make_filter_toggle(key: str, label: str, subject: str):
    async def handler(ctx: CommandContext, args: List[str]) -> None:
        toggle = ValidationUtils.validate_toggle(args)
        if not toggle:
            await ctx.reply(f"❌ Usage: .{key} on/off")
            return

        await ctx.services.settings.update_group_setting(ctx.chat_id, key, toggle.value)
        if toggle.value:
            await ctx.reply(f"✅ {label} enabled!\n{subject} will be automatically deleted.")
        else:
            await ctx.reply(f"❌ {label} disabled!")

    handler.__name__ = f"{key}_command"
    return handler


async def warn_command(ctx: CommandContext, args: List[str]) -> None:
    """
    Warn the first mentioned user; the third warning removes them.

    Args:
        ctx: Command context
        args: Ignored, the target comes from mentions
    """
    if not ctx.event.mentioned:
        await ctx.reply("❌ Please mention a user to warn!")
        return

    target = ctx.event.mentioned[0]
    warnings = await ctx.services.users.add_warning(target)
    kick = warnings >= MAX_WARNINGS

    text = f"⚠️ User warned! ({warnings}/{MAX_WARNINGS})"
    if kick:
        text += "\n🚫 User will be kicked!"
    await ctx.reply({"text": text, "mentions": [target]})

    if kick:
        try:
            await ctx.transport.group_participants_update(ctx.chat_id, [target], "remove")
        except TransportError as e:
            logger.error(f"Failed to kick {target}: {e}")


async def resetwarnings_command(ctx: CommandContext, args: List[str]) -> None:
    if not ctx.event.mentioned:
        await ctx.reply("❌ Please mention a user!")
        return

    target = ctx.event.mentioned[0]
    await ctx.services.users.reset_warnings(target)
    await ctx.reply({"text": f"✅ Warnings reset for {WhatsAppUtils.mention(target)}", "mentions": [target]})


async def delete_command(ctx: CommandContext, args: List[str]) -> None:
    """Delete the replied-to message."""
    if not ctx.event.quoted_id or not ctx.event.quoted_sender:
        await ctx.reply("❌ Please reply to a message to delete it!")
        return

    key = {
        "remoteJid": ctx.chat_id,
        "fromMe": False,
        "id": ctx.event.quoted_id,
        "participant": ctx.event.quoted_sender,
    }
    try:
        await ctx.transport.delete_message(ctx.chat_id, key)
    except TransportError as e:
        await ctx.reply(f"❌ Failed to delete message: {e}")


def register_moderation_commands(registry: CommandRegistry) -> None:
    moderation = Category.MODERATION
    registry.register("antilink", moderation, _make_filter_toggle("antilink", "Anti-link", "Links"), {
        **ADMIN_GROUP, "description": "Toggle anti-link protection", "usage": "on/off",
    })
    registry.register("antibadword", moderation, _make_filter_toggle("antibadword", "Anti-badword", "Bad words"), {
        **ADMIN_GROUP, "description": "Toggle bad word filter", "usage": "on/off",
    })
    registry.register("warn", moderation, warn_command, {
        **ADMIN_GROUP, "description": f"Warn a user ({MAX_WARNINGS} warnings = kick)", "usage": "@user",
    })
    registry.register("resetwarnings", moderation, resetwarnings_command, {
        **ADMIN_GROUP, "aliases": ["clearwarnings"], "description": "Reset user warnings", "usage": "@user",
    })
    registry.register("delete", moderation, delete_command, {
        **ADMIN_GROUP, "aliases": ["del"], "description": "Delete a message (reply to it)",
    })
