"""
Settings Commands
Owner switches for global bot behaviour and the bad-word list
"""

from typing import List

from commands.command_registry import Category, CommandRegistry
from commands.context import CommandContext
from utils.validation import ValidationUtils

# command -> (setting key, label, description)
GLOBAL_TOGGLES = {
    "autostatusview": ("autoStatusView", "Auto status view", "Toggle automatic status viewing"),
    "alwaysonline": ("alwaysOnline", "Always online", "Toggle always online presence"),
    "autoseen": ("autoSeen", "Auto seen", "Toggle automatic read receipts"),
}


def _make_toggle_handler(command: str):
    key, label, _ = GLOBAL_TOGGLES[command]

    async def handler(ctx: CommandContext, args: List[str]) -> None:
        toggle = ValidationUtils.validate_toggle(args)
        if not toggle:
            await ctx.reply(f"❌ Usage: .{command} on/off")
            return

        await ctx.services.settings.update_global_setting(key, toggle.value)
        await ctx.reply(f"✅ {label} enabled!" if toggle.value else f"❌ {label} disabled!")

    handler.__name__ = f"{command}_command"
    return handler


async def addbadword_command(ctx: CommandContext, args: List[str]) -> None:
    if not args:
        await ctx.reply("❌ Usage: .addbadword <word>")
        return
    word = args[0].lower()
    if await ctx.services.settings.add_bad_word(word):
        await ctx.reply(f"✅ Added *{word}* to the bad word list!")
    else:
        await ctx.reply(f"⚠️ *{word}* is already in the bad word list.")


async def delbadword_command(ctx: CommandContext, args: List[str]) -> None:
    if not args:
        await ctx.reply("❌ Usage: .delbadword <word>")
        return
    word = args[0].lower()
    if await ctx.services.settings.remove_bad_word(word):
        await ctx.reply(f"✅ Removed *{word}* from the bad word list!")
    else:
        await ctx.reply(f"⚠️ *{word}* is not in the bad word list.")


async def badwords_command(ctx: CommandContext, args: List[str]) -> None:
    words = await ctx.services.settings.get_bad_words()
    await ctx.reply(f"🚫 *Bad Words* ({len(words)})\n\n" + (", ".join(words) or "None"))


def register_settings_commands(registry: CommandRegistry) -> None:
    settings = Category.SETTINGS
    for command, (_, _, description) in GLOBAL_TOGGLES.items():
        registry.register(command, settings, _make_toggle_handler(command), {
            "owner_only": True, "description": description, "usage": "on/off",
        })
    registry.register("addbadword", settings, addbadword_command, {
        "owner_only": True, "description": "Add a word to the bad word filter", "usage": "<word>",
    })
    registry.register("delbadword", settings, delbadword_command, {
        "owner_only": True, "description": "Remove a word from the bad word filter", "usage": "<word>",
    })
    registry.register("badwords", settings, badwords_command, {
        "owner_only": True, "description": "List filtered words",
    })
