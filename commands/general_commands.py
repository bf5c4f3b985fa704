"""
General Commands
Info, fun and text utilities available to everyone
"""

import random
import time
from typing import List
from urllib.parse import quote_plus

from commands.command_registry import Category, CommandRegistry
from commands.context import CommandContext
from utils.validation import ValidationUtils
from utils.whatsapp import WhatsAppUtils

DICE_FACES = ["⚀", "⚁", "⚂", "⚃", "⚄", "⚅"]


async def ping_command(ctx: CommandContext, args: List[str]) -> None:
    """Reply with the round-trip time of one send."""
    start = time.perf_counter()
    sent = await ctx.reply("🏓 Pinging...")
    latency = round((time.perf_counter() - start) * 1000)

    content = {"text": f"🏓 *Pong!*\n⏱️ Response Time: {latency}ms"}
    if isinstance(sent, dict) and sent.get("key"):
        content["edit"] = sent["key"]
    await ctx.reply(content)


async def alive_command(ctx: CommandContext, args: List[str]) -> None:
    uptime = WhatsAppUtils.format_duration(ctx.services.monitoring.uptime_seconds())
    await ctx.reply(
        f"✅ *Bot is Alive!*\n\n⏰ Uptime: {uptime}\n🤖 {ctx.services.config.BOT_NAME}"
    )


async def menu_command(ctx: CommandContext, args: List[str]) -> None:
    """
    Show the command menu, or details of one command.

    Args:
        ctx: Command context
        args: Optional command name
    """
    config = ctx.services.config
    registry = ctx.services.registry

    if args:
        token = args[0].lower()
        if token.startswith(config.PREFIX):
            token = token[len(config.PREFIX):]
        details = registry.generate_command_help(token, config.PREFIX)
        await ctx.reply(details or f"❌ Unknown command: {args[0]}")
        return

    await ctx.reply(registry.generate_menu(config.PREFIX, config.BOT_NAME))


async def info_command(ctx: CommandContext, args: List[str]) -> None:
    config = ctx.services.config
    monitoring = ctx.services.monitoring
    owner_jid = ValidationUtils.to_user_jid(config.OWNER_NUMBER)
    memory = monitoring.get_system_metrics()["memory"]["used"]

    text = "\n".join([
        "╭━━━『 *BOT INFO* 』━━━╮",
        "│ ",
        f"│ 🤖 *Name:* {config.BOT_NAME}",
        f"│ 👤 *Owner:* @{config.OWNER_NUMBER}",
        f"│ ⏰ *Uptime:* {WhatsAppUtils.format_duration(monitoring.uptime_seconds())}",
        f"│ 🔖 *Prefix:* {config.PREFIX}",
        f"│ 💾 *Memory:* {memory} MB",
        "│ ",
        "╰━━━━━━━━━━━━━━━━━━━━╯",
    ])
    await ctx.reply({"text": text, "mentions": [owner_jid] if owner_jid else []})


async def owner_command(ctx: CommandContext, args: List[str]) -> None:
    number = ctx.services.config.OWNER_NUMBER
    await ctx.reply({
        "text": f"👤 *Bot Owner*\n\n@{number}\n\nContact for support or inquiries.",
        "mentions": [ValidationUtils.to_user_jid(number)],
    })


async def profile_command(ctx: CommandContext, args: List[str]) -> None:
    """Show the caller's stored profile."""
    user = await ctx.services.users.find_user(ctx.user_id)
    if not user:
        await ctx.reply("❌ User not found in database!")
        return

    registered = user.get("registered_at")
    last_seen = user.get("last_seen")
    text = "\n".join([
        "╭━━━『 *YOUR PROFILE* 』━━━╮",
        "│ ",
        f"│ 👤 *Name:* {user.get('name') or 'Unknown'}",
        f"│ 📱 *Number:* {WhatsAppUtils.mention(ctx.user_id)}",
        f"│ ⚠️ *Warnings:* {user.get('warnings', 0)}/3",
        f"│ 🚫 *Banned:* {'Yes' if user.get('is_banned') else 'No'}",
        f"│ 📊 *Commands Used:* {user.get('command_usage', 0)}",
        f"│ 📅 *Registered:* {registered.strftime('%Y-%m-%d') if registered else 'Unknown'}",
        f"│ 👁️ *Last Seen:* {last_seen.strftime('%Y-%m-%d %H:%M') if last_seen else 'Unknown'}",
        "│ ",
        "╰━━━━━━━━━━━━━━━━━━━━╯",
    ])
    await ctx.reply({"text": text, "mentions": [ctx.user_id]})


async def runtime_command(ctx: CommandContext, args: List[str]) -> None:
    uptime = WhatsAppUtils.format_duration(ctx.services.monitoring.uptime_seconds())
    await ctx.reply(f"⏰ *Runtime*\n\n{uptime}")


async def flipcoin_command(ctx: CommandContext, args: List[str]) -> None:
    result = random.choice(["Heads 🪙", "Tails 🪙"])
    await ctx.reply(f"🎲 Coin Flip: *{result}*")


async def dice_command(ctx: CommandContext, args: List[str]) -> None:
    result = random.randint(1, 6)
    await ctx.reply(f"🎲 Dice Roll: *{result}* {DICE_FACES[result - 1]}")


async def choose_command(ctx: CommandContext, args: List[str]) -> None:
    if len(args) < 2:
        await ctx.reply("❌ Usage: .choose <option1> <option2> ...\nExample: .choose pizza burger pasta")
        return
    await ctx.reply(f"🎯 I choose: *{random.choice(args)}*")


async def calculate_command(ctx: CommandContext, args: List[str]) -> None:
    """Evaluate plain arithmetic."""
    if not args:
        await ctx.reply("❌ Usage: .calculate <expression>\nExample: .calculate 2 + 2")
        return

    expression = " ".join(args)
    validation = ValidationUtils.validate_expression(expression)
    if not validation:
        await ctx.reply("❌ Invalid expression! Use only numbers and operators (+, -, *, /, %)")
        return

    try:
        result = WhatsAppUtils.calculate(validation.sanitized)
    except ZeroDivisionError:
        await ctx.reply("❌ Cannot divide by zero!")
        return
    except ValueError:
        await ctx.reply("❌ Invalid expression! Use only numbers and operators (+, -, *, /, %)")
        return

    await ctx.reply(f"🧮 *Calculator*\n\n{expression} = {result}")


async def lowercase_command(ctx: CommandContext, args: List[str]) -> None:
    text = " ".join(args)
    if not text:
        await ctx.reply("❌ Please provide text to convert!")
        return
    await ctx.reply(text.lower())


async def uppercase_command(ctx: CommandContext, args: List[str]) -> None:
    text = " ".join(args)
    if not text:
        await ctx.reply("❌ Please provide text to convert!")
        return
    await ctx.reply(text.upper())


async def reverse_command(ctx: CommandContext, args: List[str]) -> None:
    text = " ".join(args)
    if not text:
        await ctx.reply("❌ Please provide text to reverse!")
        return
    await ctx.reply(text[::-1])


def to_fancy(text: str) -> str:
    """Map ASCII letters to mathematical bold script."""
    chars = []
    for char in text:
        code = ord(char)
        if 65 <= code <= 90:
            chars.append(chr(code + 119743))
        elif 97 <= code <= 122:
            chars.append(chr(code + 119737))
        else:
            chars.append(char)
    return "".join(chars)


async def fancy_command(ctx: CommandContext, args: List[str]) -> None:
    text = " ".join(args)
    if not text:
        await ctx.reply("❌ Please provide text to convert!")
        return
    await ctx.reply(to_fancy(text))


async def google_command(ctx: CommandContext, args: List[str]) -> None:
    if not args:
        await ctx.reply("❌ Usage: .google <query>")
        return
    query = " ".join(args)
    url = f"https://www.google.com/search?q={quote_plus(query)}"
    await ctx.reply(f"🔍 *Google Search*\n\nQuery: {query}\nLink: {url}")


async def quoted_command(ctx: CommandContext, args: List[str]) -> None:
    if ctx.event.quoted_id is None and ctx.event.quoted_text is None:
        await ctx.reply("❌ Please reply to a message!")
        return
    await ctx.reply(f"📝 *Quoted Message:*\n\n{ctx.event.quoted_text or 'No text content'}")


async def poll_command(ctx: CommandContext, args: List[str]) -> None:
    """Create a single-choice poll from ``question | option | option``."""
    usage = "❌ Usage: .poll <question> | <option1> | <option2> | ...\nExample: .poll Favorite color? | Red | Blue | Green"
    if len(args) < 3:
        await ctx.reply(usage)
        return

    parts = [part.strip() for part in " ".join(args).split("|")]
    question, options = parts[0], [p for p in parts[1:] if p]
    if len(options) < 2:
        await ctx.reply("❌ Please provide at least 2 options!")
        return

    await ctx.reply({"poll": {"name": question, "values": options, "selectableCount": 1}})


async def react_command(ctx: CommandContext, args: List[str]) -> None:
    if not ctx.event.quoted_id:
        await ctx.reply("❌ Please reply to a message!")
        return

    key = {"remoteJid": ctx.chat_id, "fromMe": False, "id": ctx.event.quoted_id}
    if ctx.event.quoted_sender:
        key["participant"] = ctx.event.quoted_sender
    await ctx.reply({"react": {"text": args[0] if args else "👍", "key": key}})


async def reminder_command(ctx: CommandContext, args: List[str]) -> None:
    if len(args) < 2:
        await ctx.reply("❌ Usage: .reminder <minutes> <message>\nExample: .reminder 10 Check the oven")
        return

    if not args[0].isdigit() or int(args[0]) <= 0:
        await ctx.reply("❌ Please provide a valid number of minutes!")
        return

    minutes = int(args[0])
    ctx.services.reminders.schedule(ctx.chat_id, ctx.user_id, minutes, " ".join(args[1:]))
    await ctx.reply(f"⏰ Reminder set for {minutes} minute(s)!")


def register_general_commands(registry: CommandRegistry) -> None:
    """Register everyone-commands."""
    general = Category.GENERAL
    registry.register("ping", general, ping_command, {"description": "Check bot latency"})
    registry.register("alive", general, alive_command, {"description": "Check if bot is alive"})
    registry.register("menu", general, menu_command, {
        "aliases": ["help"],
        "description": "Show command menu",
        "usage": "[command]",
    })
    registry.register("info", general, info_command, {"aliases": ["botinfo"], "description": "Display bot information"})
    registry.register("owner", general, owner_command, {"description": "Display owner contact"})
    registry.register("profile", general, profile_command, {"aliases": ["me"], "description": "View your profile"})
    registry.register("runtime", general, runtime_command, {"description": "Check bot runtime"})
    registry.register("flipcoin", general, flipcoin_command, {"aliases": ["coin"], "description": "Flip a coin"})
    registry.register("dice", general, dice_command, {"description": "Roll a dice"})
    registry.register("choose", general, choose_command, {
        "aliases": ["pick"],
        "description": "Choose randomly from options",
        "usage": "<option1> <option2> ...",
    })
    registry.register("calculate", general, calculate_command, {
        "aliases": ["calc", "math"],
        "description": "Calculate mathematical expressions",
        "usage": "<expression>",
    })
    registry.register("lowercase", general, lowercase_command, {"aliases": ["lower"], "description": "Convert text to lowercase"})
    registry.register("uppercase", general, uppercase_command, {"aliases": ["upper"], "description": "Convert text to uppercase"})
    registry.register("reverse", general, reverse_command, {"description": "Reverse text"})
    registry.register("fancy", general, fancy_command, {"description": "Convert text to fancy font"})
    registry.register("google", general, google_command, {"aliases": ["search"], "description": "Generate Google search link"})
    registry.register("quoted", general, quoted_command, {"aliases": ["q"], "description": "Get quoted message text"})
    registry.register("poll", general, poll_command, {
        "description": "Create a poll",
        "usage": "<question> | <option1> | <option2>",
    })
    registry.register("react", general, react_command, {"description": "React to a message", "usage": "[emoji]"})
    registry.register("reminder", general, reminder_command, {
        "aliases": ["remind"],
        "description": "Set a reminder",
        "usage": "<minutes> <message>",
    })
