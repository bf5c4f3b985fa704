"""
Owner Commands
Bans, blocks, broadcast, group membership and bot statistics
"""

import asyncio
from typing import List

from bot.transport import TransportError
from commands.command_registry import Category, CommandRegistry
from commands.context import CommandContext
from utils.logger import get_logger
from utils.validation import ValidationUtils
from utils.whatsapp import WhatsAppUtils

logger = get_logger("OwnerCommands")

# Pause between broadcast sends
BROADCAST_DELAY = 2.0

OWNER = {"owner_only": True}


async def ban_command(ctx: CommandContext, args: List[str]) -> None:
    if not ctx.event.mentioned:
        await ctx.reply("❌ Please mention a user to ban!")
        return
    target = ctx.event.mentioned[0]
    await ctx.services.users.set_banned(target, True)
    await ctx.reply({"text": "🚫 User has been banned from using the bot!", "mentions": [target]})


async def unban_command(ctx: CommandContext, args: List[str]) -> None:
    """Lift a ban and clear the user's warnings."""
    if not ctx.event.mentioned:
        await ctx.reply("❌ Please mention a user to unban!")
        return
    target = ctx.event.mentioned[0]
    await ctx.services.users.set_banned(target, False)
    await ctx.services.users.reset_warnings(target)
    await ctx.reply({"text": "✅ User has been unbanned!", "mentions": [target]})


async def _set_block(ctx: CommandContext, action: str) -> None:
    if not ctx.event.mentioned:
        await ctx.reply(f"❌ Please mention a user to {action}!")
        return
    try:
        await ctx.transport.update_block_status(ctx.event.mentioned[0], action)
    except TransportError as e:
        await ctx.reply(f"❌ Error: {e}")
        return
    await ctx.reply(f"✅ User {action}ed successfully!")


async def block_command(ctx: CommandContext, args: List[str]) -> None:
    await _set_block(ctx, "block")


async def unblock_command(ctx: CommandContext, args: List[str]) -> None:
    await _set_block(ctx, "unblock")


async def broadcast_command(ctx: CommandContext, args: List[str]) -> None:
    """
    Send a message to every known chat.

    Args:
        ctx: Command context
        args: Message words
    """
    if not args:
        await ctx.reply("❌ Usage: .broadcast <message>")
        return

    message = " ".join(args)
    chats = await ctx.transport.list_chats()
    await ctx.reply("📢 Broadcasting message...")

    success = failed = 0
    for chat_id in chats:
        try:
            await ctx.transport.send_message(
                chat_id,
                f"📢 *BROADCAST MESSAGE*\n\n{message}\n\n_This is a broadcast message from bot owner_",
            )
            success += 1
        except TransportError as e:
            logger.debug(f"Broadcast to {chat_id} failed: {e}")
            failed += 1
        await asyncio.sleep(BROADCAST_DELAY)

    await ctx.reply(f"✅ Broadcast complete!\n\n✔️ Success: {success}\n❌ Failed: {failed}")


async def join_command(ctx: CommandContext, args: List[str]) -> None:
    if not args:
        await ctx.reply("❌ Usage: .join <group_invite_link>")
        return

    invite = ValidationUtils.extract_invite_code(args[0])
    if not invite:
        await ctx.reply("❌ Invalid invite link!")
        return

    try:
        await ctx.transport.group_accept_invite(invite.sanitized)
    except TransportError as e:
        await ctx.reply(f"❌ Failed to join group: {e}")
        return
    await ctx.reply("✅ Successfully joined the group!")


async def leave_command(ctx: CommandContext, args: List[str]) -> None:
    if not ctx.caller.is_group:
        await ctx.reply("❌ This command only works in groups!")
        return
    await ctx.reply("👋 Goodbye! Bot is leaving...")
    await ctx.transport.group_leave(ctx.chat_id)


async def stats_command(ctx: CommandContext, args: List[str]) -> None:
    """Show stored totals and process figures."""
    services = ctx.services
    total_users = await services.users.count()
    total_groups = await services.groups.count()
    banned_users = await services.users.count_banned()
    total_commands = await services.command_logs.count()
    system = services.monitoring.get_system_metrics()

    text = "\n".join([
        "╭━━━『 *BOT STATISTICS* 』━━━╮",
        "│ ",
        f"│ 👥 *Total Users:* {WhatsAppUtils.format_number(total_users)}",
        f"│ 🏘️ *Total Groups:* {WhatsAppUtils.format_number(total_groups)}",
        f"│ 🚫 *Banned Users:* {WhatsAppUtils.format_number(banned_users)}",
        f"│ 📊 *Commands Executed:* {WhatsAppUtils.format_number(total_commands)}",
        f"│ 💾 *Memory Usage:* {system['memory']['used']} MB",
        f"│ ⏰ *Uptime:* {system['uptime']['bot']}",
        "│ ",
        "╰━━━━━━━━━━━━━━━━━━━━╯",
    ])

    top = await services.command_logs.top_commands(5)
    if top:
        text += "\n\n🏆 *Top Commands*\n" + WhatsAppUtils.numbered_list(
            [f"{row['command']} ({row['uses']})" for row in top]
        )
    await ctx.reply(text)


async def health_command(ctx: CommandContext, args: List[str]) -> None:
    await ctx.reply(ctx.services.monitoring.format_health_status())


def register_owner_commands(registry: CommandRegistry) -> None:
    owner = Category.OWNER
    registry.register("ban", owner, ban_command, {**OWNER, "description": "Ban user from using bot", "usage": "@user"})
    registry.register("unban", owner, unban_command, {**OWNER, "description": "Unban user from using bot", "usage": "@user"})
    registry.register("stats", owner, stats_command, {**OWNER, "description": "View bot statistics"})
    registry.register("health", owner, health_command, {
        **OWNER, "aliases": ["status"], "description": "Show bot health status and metrics",
    })
    registry.register("broadcast", owner, broadcast_command, {
        **OWNER, "description": "Broadcast message to all chats", "usage": "<message>",
    })
    registry.register("join", owner, join_command, {
        **OWNER, "description": "Join a group via invite link", "usage": "<invite_link>",
    })
    registry.register("leave", owner, leave_command, {**OWNER, "description": "Make bot leave the group"})
    registry.register("block", owner, block_command, {**OWNER, "description": "Block a user", "usage": "@user"})
    registry.register("unblock", owner, unblock_command, {**OWNER, "description": "Unblock a user", "usage": "@user"})
