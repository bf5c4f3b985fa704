"""
Group Commands
Group administration: members, tags, invite link and group settings
"""

from typing import List

from bot.transport import TransportError
from commands.command_registry import Category, CommandRegistry
from commands.context import CommandContext
from utils.validation import ValidationUtils
from utils.whatsapp import WhatsAppUtils

ADMIN_GROUP = {"group_only": True, "admin_only": True}

# command -> (transport setting, stored flag, flag value, success text, failure verb)
GROUP_SETTING_COMMANDS = {
    "mute": ("announcement", "muted", True, "🔇 Group muted! Only admins can send messages.", "mute"),
    "unmute": ("not_announcement", "muted", False, "🔊 Group unmuted! Everyone can send messages.", "unmute"),
    "lock": ("locked", "locked", True, "🔒 Group settings locked! Only admins can edit group info.", "lock"),
    "unlock": ("unlocked", "locked", False, "🔓 Group settings unlocked! Everyone can edit group info.", "unlock"),
}


async def tagall_command(ctx: CommandContext, args: List[str]) -> None:
    metadata = await ctx.transport.group_metadata(ctx.chat_id)
    message = " ".join(args) or "Everyone!"
    tags = " ".join(WhatsAppUtils.mention(jid) for jid in metadata.participant_ids)
    await ctx.reply({
        "text": f"📢 *TAG ALL*\n\n{message}\n\n{tags}",
        "mentions": metadata.participant_ids,
    })


async def hidetag_command(ctx: CommandContext, args: List[str]) -> None:
    metadata = await ctx.transport.group_metadata(ctx.chat_id)
    await ctx.reply({"text": " ".join(args) or "Hidden tag!", "mentions": metadata.participant_ids})


async def add_command(ctx: CommandContext, args: List[str]) -> None:
    """Add a participant by phone number."""
    jid = ValidationUtils.to_user_jid(args[0]) if args else None
    if not jid:
        await ctx.reply("❌ Please provide a phone number!")
        return

    try:
        await ctx.transport.group_participants_update(ctx.chat_id, [jid], "add")
    except TransportError as e:
        await ctx.reply(f"❌ Failed to add user: {e}")
        return
    await ctx.reply({"text": f"✅ Added {WhatsAppUtils.mention(jid)}", "mentions": [jid]})


async def _update_mentioned(ctx: CommandContext, action: str, missing: str, done: str, failed: str) -> None:
    mentioned = ctx.event.mentioned
    if not mentioned:
        await ctx.reply(missing)
        return

    try:
        await ctx.transport.group_participants_update(ctx.chat_id, mentioned, action)
    except TransportError as e:
        await ctx.reply(f"{failed}: {e}")
        return
    await ctx.reply({"text": done, "mentions": mentioned})


async def remove_command(ctx: CommandContext, args: List[str]) -> None:
    count = len(ctx.event.mentioned)
    await _update_mentioned(
        ctx,
        "remove",
        "❌ Please mention a user to remove!",
        f"✅ Removed {count} user(s) successfully!",
        "❌ Failed to remove user",
    )


async def promote_command(ctx: CommandContext, args: List[str]) -> None:
    await _update_mentioned(
        ctx, "promote", "❌ Please mention a user to promote!", "✅ User promoted to admin!", "❌ Failed to promote user"
    )


async def demote_command(ctx: CommandContext, args: List[str]) -> None:
    await _update_mentioned(
        ctx, "demote", "❌ Please mention a user to demote!", "✅ User demoted from admin!", "❌ Failed to demote user"
    )


def _make_setting_handler(command: str):
    """Build the handler of one mute/unmute/lock/unlock command."""
    setting, flag, value, success, verb = GROUP_SETTING_COMMANDS[command]

    async def handler(ctx: CommandContext, args: List[str]) -> None:
        try:
            await ctx.transport.group_setting_update(ctx.chat_id, setting)
        except TransportError as e:
            await ctx.reply(f"❌ Failed to {verb} group: {e}")
            return
        await ctx.services.settings.update_group_setting(ctx.chat_id, flag, value)
        await ctx.reply(success)

    handler.__name__ = f"{command}_command"
    return handler


async def groupinfo_command(ctx: CommandContext, args: List[str]) -> None:
    metadata = await ctx.transport.group_metadata(ctx.chat_id)
    settings = await ctx.services.settings.get_group_settings(ctx.chat_id)

    def mark(key: str) -> str:
        return "✅" if settings.get(key) else "❌"

    text = "\n".join([
        "╭━━━『 *GROUP INFO* 』━━━╮",
        "│ ",
        f"│ 📛 *Name:* {metadata.subject}",
        f"│ 🆔 *ID:* {metadata.id}",
        f"│ 👥 *Members:* {len(metadata.participants)}",
        f"│ 👮 *Admins:* {len(metadata.admins)}",
        "│ 📝 *Description:*",
        f"│ {metadata.description or 'No description'}",
        "│ ",
        "│ ⚙️ *Settings:*",
        f"│ 🔗 Anti-Link: {mark('antilink')}",
        f"│ 🚫 Anti-Badword: {mark('antibadword')}",
        f"│ 🔇 Muted: {mark('muted')}",
        f"│ 🔒 Locked: {mark('locked')}",
        "│ ",
        "╰━━━━━━━━━━━━━━━━━━━━╯",
    ])
    await ctx.reply(text)


async def admins_command(ctx: CommandContext, args: List[str]) -> None:
    metadata = await ctx.transport.group_metadata(ctx.chat_id)
    admins = metadata.admins
    listing = WhatsAppUtils.numbered_list([WhatsAppUtils.mention(jid) for jid in admins])
    await ctx.reply({"text": f"👮 *Group Admins* ({len(admins)})\n\n{listing}", "mentions": admins})


async def invite_command(ctx: CommandContext, args: List[str]) -> None:
    code = await ctx.transport.group_invite_code(ctx.chat_id)
    metadata = await ctx.transport.group_metadata(ctx.chat_id)
    await ctx.reply("\n".join([
        "╭━━━『 *GROUP INVITE* 』━━━╮",
        "│ ",
        f"│ 📛 *Group:* {metadata.subject}",
        f"│ 🔗 *Link:* https://chat.whatsapp.com/{code}",
        "│ ",
        "╰━━━━━━━━━━━━━━━━━━━━╯",
        "Share this link to invite others!",
    ]))


async def revoke_command(ctx: CommandContext, args: List[str]) -> None:
    await ctx.transport.group_revoke_invite(ctx.chat_id)
    await ctx.reply("✅ Group invite link has been revoked! Old links are now invalid.")


async def setname_command(ctx: CommandContext, args: List[str]) -> None:
    if not args:
        await ctx.reply("❌ Please provide a new group name!")
        return
    name = " ".join(args)
    await ctx.transport.group_update_subject(ctx.chat_id, name)
    await ctx.reply(f"✅ Group name changed to: *{name}*")


async def setdesc_command(ctx: CommandContext, args: List[str]) -> None:
    if not args:
        await ctx.reply("❌ Please provide a new group description!")
        return
    await ctx.transport.group_update_description(ctx.chat_id, " ".join(args))
    await ctx.reply("✅ Group description updated successfully!")


def register_group_commands(registry: CommandRegistry) -> None:
    """Register group administration commands."""
    group = Category.GROUP
    registry.register("tagall", group, tagall_command, {
        **ADMIN_GROUP, "aliases": ["everyone"], "description": "Tag all group members", "usage": "[message]",
    })
    registry.register("add", group, add_command, {
        **ADMIN_GROUP, "description": "Add a user to the group", "usage": "<number>",
    })
    registry.register("remove", group, remove_command, {
        **ADMIN_GROUP, "aliases": ["kick"], "description": "Remove mentioned users from the group", "usage": "@user",
    })
    registry.register("promote", group, promote_command, {
        **ADMIN_GROUP, "description": "Promote a user to admin", "usage": "@user",
    })
    registry.register("demote", group, demote_command, {
        **ADMIN_GROUP, "description": "Demote an admin to member", "usage": "@user",
    })
    registry.register("mute", group, _make_setting_handler("mute"), {
        **ADMIN_GROUP, "description": "Mute the group (only admins can send messages)",
    })
    registry.register("unmute", group, _make_setting_handler("unmute"), {
        **ADMIN_GROUP, "description": "Unmute the group",
    })
    registry.register("lock", group, _make_setting_handler("lock"), {
        **ADMIN_GROUP, "description": "Lock group settings",
    })
    registry.register("unlock", group, _make_setting_handler("unlock"), {
        **ADMIN_GROUP, "description": "Unlock group settings",
    })
    registry.register("hidetag", group, hidetag_command, {
        **ADMIN_GROUP, "description": "Send hidden tag to all members", "usage": "[message]",
    })
    registry.register("invite", group, invite_command, {**ADMIN_GROUP, "description": "Get group invite link"})
    registry.register("revoke", group, revoke_command, {**ADMIN_GROUP, "description": "Revoke group invite link"})
    registry.register("setname", group, setname_command, {
        **ADMIN_GROUP, "description": "Change group name", "usage": "<name>",
    })
    registry.register("setdesc", group, setdesc_command, {
        **ADMIN_GROUP, "description": "Change group description", "usage": "<description>",
    })
    registry.register("groupinfo", group, groupinfo_command, {
        "group_only": True, "description": "Display group information",
    })
    registry.register("admins", group, admins_command, {"group_only": True, "description": "List all group admins"})
