"""
Dispatcher
Routes inbound text to pending selections or registered commands
"""

from typing import Any, Awaitable, Callable, List, Optional, Tuple

from commands.command_registry import CommandRegistry
from commands.context import CallerContext, CommandContext, InboundEvent, Services
from commands.permissions import can_invoke
from commands.selection_store import PendingSelection
from utils.error_handler import get_error_handler
from utils.logger import get_logger
from utils.validation import ValidationUtils

INVALID_SELECTION_MESSAGE = "❌ Invalid selection. Please choose a number from the list."
COMMAND_FAILED_MESSAGE = "❌ An error occurred while executing the command."

# Longer replies cannot index any list and are treated as out of range
MAX_SELECTION_DIGITS = 6

# async resolver(ctx, pending, picked_option)
SelectionResolver = Callable[[CommandContext, PendingSelection, Any], Awaitable[None]]


class Dispatcher:
    """Parses inbound messages and runs the matching command or selection."""

    def __init__(
        self,
        registry: CommandRegistry,
        services: Services,
        selection_resolver: Optional[SelectionResolver] = None,
    ):
        self.logger = get_logger("Dispatcher")
        self.registry = registry
        self.services = services
        self.selection_resolver = selection_resolver
        self.prefix = services.config.PREFIX
        self.owner_number = services.config.OWNER_NUMBER

    def _caller(self, event: InboundEvent, is_banned: bool = False) -> CallerContext:
        return CallerContext.for_event(event, self.owner_number, self.services.transport, is_banned)

    def _record(self, name: str) -> None:
        monitoring = self.services.monitoring
        if monitoring:
            getattr(monitoring, f"record_{name}")()

    async def handle(self, event: InboundEvent) -> None:
        """
        Handle one inbound message.

        Args:
            event: Normalised inbound message
        """
        text = (event.text or "").strip()
        if not text:
            return

        # A bare number is always a selection reply, never a command
        if ValidationUtils.is_selection_reply(text):
            await self.handle_selection(event, self.parse_selection(text))
            return

        if not text.startswith(self.prefix):
            return

        command_name, args = self.parse_command(text)
        if not command_name:
            return

        definition = self.registry.resolve(command_name)
        if not definition:
            return

        try:
            is_banned = False
            if self.services.users is not None:
                is_banned = await self.services.users.is_user_banned(event.sender_id)
            caller = self._caller(event, is_banned)

            permission = await can_invoke(definition, caller)
            if not permission:
                self.logger.debug(f"{event.sender_id} denied {command_name}: {permission.reason.value}")
                self._record("denial")
                await self.services.transport.send_message(event.chat_id, permission.message)
                return

            await self._log_usage(event, caller, command_name)

            self.logger.debug(f"Executing: {command_name} for {event.sender_id}")
            self._record("command")
            await definition.handler(CommandContext(event, caller, self.services), args)
        except Exception as error:
            get_error_handler().handle_exception(error, f"command:{command_name}")
            self._record("error")
            await self._notify_failure(event.chat_id)

    async def handle_selection(self, event: InboundEvent, number: int) -> None:
        """
        Resolve a bare-number reply against the sender's pending selection.

        The pending selection is consumed whether or not the number is valid.

        Args:
            event: Inbound message
            number: Parsed reply
        """
        selections = self.services.selections
        if selections is None:
            return

        pending = await selections.take(event.sender_id)
        if pending is None:
            return

        try:
            option = pending.payload.pick(number)
            if option is None:
                await self.services.transport.send_message(event.chat_id, INVALID_SELECTION_MESSAGE)
                return

            self._record("selection")
            if self.selection_resolver is None:
                self.logger.warning(f"No resolver for {pending.kind.value}")
                return

            ctx = CommandContext(event, self._caller(event), self.services)
            await self.selection_resolver(ctx, pending, option)
        except Exception as error:
            get_error_handler().handle_exception(error, f"selection:{pending.kind.value}")
            self._record("error")
            await self._notify_failure(event.chat_id)

    async def _log_usage(self, event: InboundEvent, caller: CallerContext, command_name: str) -> None:
        if self.services.command_logs is not None:
            await self.services.command_logs.append(
                caller.user_id,
                command_name,
                caller.chat_id if caller.is_group else None,
            )

        if self.services.users is not None:
            try:
                await self.services.users.increment_command_usage(caller.user_id)
            except Exception as e:
                self.logger.warning(f"Failed to update usage count for {caller.user_id}: {e}")

    async def _notify_failure(self, chat_id: str) -> None:
        try:
            await self.services.transport.send_message(chat_id, COMMAND_FAILED_MESSAGE)
        except Exception as e:
            self.logger.error(f"Failed to send error notice to {chat_id}: {e}")

    def parse_selection(self, text: str) -> int:
        """Selection number for a bare-digit reply, 0 when it is too long to be one."""
        if len(text) > MAX_SELECTION_DIGITS:
            return 0
        return int(text)

    def parse_command(self, text: str) -> Tuple[str, List[str]]:
        """
        Split prefixed text into command token and arguments.

        Args:
            text: Message text starting with the prefix

        Returns:
            Tuple of (lower-cased command token, args)
        """
        parts = text[len(self.prefix):].split()
        if not parts:
            return "", []
        return parts[0].lower(), parts[1:]
