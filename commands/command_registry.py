"""
Command Registry
Command registration and lookup by name or alias
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from utils.logger import get_logger

# Command handler type alias: async handler(ctx, args)
CommandHandler = Callable[[Any, List[str]], Awaitable[Any]]


class Category(str, Enum):
    """Menu section a command belongs to."""

    GENERAL = "general"
    GROUP = "group"
    MODERATION = "moderation"
    SETTINGS = "settings"
    OWNER = "owner"
    DOWNLOAD = "download"
    MEDIA = "media"


CATEGORY_ICONS = {
    Category.GENERAL: "📋",
    Category.GROUP: "👥",
    Category.MODERATION: "🛡️",
    Category.SETTINGS: "⚙️",
    Category.OWNER: "👑",
    Category.DOWNLOAD: "📥",
    Category.MEDIA: "🎬",
}


class CommandDefinition:
    """Definition of a command."""

    def __init__(
        self,
        name: str,
        category: Category,
        handler: CommandHandler,
        description: str = "",
        aliases: Optional[List[str]] = None,
        usage: str = "",
        owner_only: bool = False,
        group_only: bool = False,
        admin_only: bool = False,
    ):
        self.name = name
        self.category = category
        self.handler = handler
        self.description = description
        self.aliases = aliases or []
        self.usage = usage
        self.owner_only = owner_only
        self.group_only = group_only
        self.admin_only = admin_only

    def __repr__(self) -> str:
        return f"CommandDefinition({self.name!r}, {self.category.value!r})"


class CommandRegistry:
    """Command registration and lookup."""

    def __init__(self):
        self.logger = get_logger("CommandRegistry")
        # Primary names and aliases share one table
        self.commands: Dict[str, CommandDefinition] = {}

    def register(
        self,
        name: str,
        category: Category,
        handler: CommandHandler,
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Register a command. A name or alias already in use is overwritten.

        Args:
            name: Command name
            category: Menu category
            handler: Async function ``handler(ctx, args)``
            options: Optional dict with keys:
                - aliases: List of alternative tokens
                - description: Menu description
                - usage: Argument synopsis
                - owner_only / group_only / admin_only: Restriction flags
        """
        options = options or {}
        definition = CommandDefinition(
            name=name,
            category=Category(category),
            handler=handler,
            description=options.get("description", ""),
            aliases=list(options.get("aliases", [])),
            usage=options.get("usage", ""),
            owner_only=options.get("owner_only", False),
            group_only=options.get("group_only", False),
            admin_only=options.get("admin_only", False),
        )

        if name in self.commands:
            self.logger.debug(f"Overwriting command: {name}")
        self.commands[name] = definition

        for alias in definition.aliases:
            self.commands[alias] = definition

        self.logger.debug(f"Registered command: {name}")

    def resolve(self, token: str) -> Optional[CommandDefinition]:
        """
        Look up a command by exact name or alias.

        Args:
            token: Command token (case-sensitive)

        Returns:
            CommandDefinition or None if not found
        """
        return self.commands.get(token)

    def has(self, token: str) -> bool:
        return token in self.commands

    def list_by_category(self, category: Category) -> List[str]:
        """
        Primary names of the commands in a category, in registration order.

        Args:
            category: Category

        Returns:
            Command names (aliases excluded)
        """
        category = Category(category)
        return [
            token
            for token, definition in self.commands.items()
            if definition.name == token and definition.category == category
        ]

    def get_all(self) -> List[CommandDefinition]:
        """All registered definitions, one per primary name."""
        return [d for token, d in self.commands.items() if d.name == token]

    def generate_menu(self, prefix: str, bot_name: str) -> str:
        """
        Generate the command menu.

        Args:
            prefix: Command prefix
            bot_name: Bot display name

        Returns:
            Formatted menu string
        """
        lines = [f"╭─「 *{bot_name} Menu* 」", f"│ Prefix: {prefix}", "╰───────────", ""]

        for category in Category:
            names = self.list_by_category(category)
            if not names:
                continue
            lines.append(f"*{CATEGORY_ICONS[category]} {category.value.upper()}*")
            for name in names:
                lines.append(f"• {prefix}{name}")
            lines.append("")

        lines.append(f"Type {prefix}help <command> for details")
        return "\n".join(lines)

    def generate_command_help(self, token: str, prefix: str) -> Optional[str]:
        """
        Generate detailed help for a specific command.

        Args:
            token: Command name or alias
            prefix: Command prefix

        Returns:
            Formatted help string or None if command not found
        """
        definition = self.resolve(token)
        if not definition:
            return None

        lines = [f"📖 *Command:* {prefix}{definition.name}"]
        if definition.description:
            lines.append(f"*Description:* {definition.description}")
        if definition.usage:
            lines.append(f"*Usage:* {prefix}{definition.name} {definition.usage}")
        if definition.aliases:
            lines.append("*Aliases:* " + ", ".join(f"{prefix}{a}" for a in definition.aliases))

        restrictions = [
            label
            for flag, label in (
                (definition.owner_only, "owner"),
                (definition.group_only, "groups"),
                (definition.admin_only, "admins"),
            )
            if flag
        ]
        if restrictions:
            lines.append("*Restricted to:* " + ", ".join(restrictions))

        return "\n".join(lines)
