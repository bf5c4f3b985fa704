"""
WhatsApp bot client: wires transport, persistence, managers and the dispatcher.
"""

import asyncio
import logging
from typing import Any, List, Optional

from bot.config import Config, config
from bot.database import close_database, init_database
from bot.keep_alive import attach_bot, run_server, update_bot_status
from bot.transport import BridgeTransport, MessagingTransport
from commands import (
    CommandRegistry,
    Dispatcher,
    InboundEvent,
    SelectionStore,
    Services,
    register_all_commands,
    resolve_selection,
)
from managers import (
    DownloadManager,
    MaintenanceManager,
    ModerationManager,
    ReminderManager,
    SettingsManager,
)
from repositories import CommandLogRepository, GroupRepository, SettingsRepository, UserRepository
from utils.error_handler import get_error_handler, setup_error_handler
from utils.logger import get_logger, set_default_level
from utils.monitoring import Monitoring
from utils.validation import STATUS_BROADCAST
from utils.whatsapp import WhatsAppUtils

logger = get_logger("Client")


class WhatsAppBot:
    """WhatsApp bot."""

    def __init__(self, transport: MessagingTransport, pool: Any = None, bot_config: Config = config):
        self.config = bot_config
        self.transport = transport
        self.monitoring = Monitoring()

        self.users = UserRepository(pool)
        self.groups = GroupRepository(pool)
        self.command_logs = CommandLogRepository(pool)
        self.settings = SettingsManager(SettingsRepository(pool), self.groups)

        self.registry = register_all_commands(CommandRegistry())
        self.selections = SelectionStore(ttl=bot_config.SELECTION_TTL)

        self.downloads = DownloadManager(
            bot_config.DOWNLOAD_API_BASE,
            bot_config.DOWNLOAD_API_KEY,
            bot_config.TEMP_DIR,
            bot_config.MAX_FILE_SIZE,
        )
        self.reminders = ReminderManager(transport)
        self.moderation = ModerationManager(transport, self.settings, bot_config.OWNER_NUMBER)
        self.maintenance = MaintenanceManager(transport, self.settings, self.selections)

        self.services = Services(
            transport=transport,
            config=bot_config,
            registry=self.registry,
            selections=self.selections,
            users=self.users,
            groups=self.groups,
            command_logs=self.command_logs,
            settings=self.settings,
            downloads=self.downloads,
            reminders=self.reminders,
            monitoring=self.monitoring,
        )
        self.dispatcher = Dispatcher(self.registry, self.services, resolve_selection)

    async def handle_message(self, event: InboundEvent) -> None:
        """
        Process one inbound message.

        Args:
            event: Normalised inbound message
        """
        try:
            await self._process_message(event)
        except Exception as error:
            get_error_handler().handle_exception(error, "message")

    async def _process_message(self, event: InboundEvent) -> None:
        if event.from_me:
            return

        if event.chat_id == STATUS_BROADCAST:
            await self.handle_status(event)
            return

        self.monitoring.record_message()

        if await self.settings.is_auto_seen_enabled():
            try:
                await self.transport.read_messages([event.key])
            except Exception as e:
                logger.debug(f"Failed to mark {event.message_id} read: {e}")

        await self.users.get_or_create(event.sender_id, event.push_name or "Unknown")

        if event.is_group:
            try:
                metadata = await self.transport.group_metadata(event.chat_id)
                await self.groups.get_or_create(
                    event.chat_id, metadata.subject, metadata.participant_ids, metadata.admins
                )
            except Exception as e:
                logger.error(f"Error fetching group metadata: {e}")

        if await self.moderation.check_message(event):
            return

        await self.dispatcher.handle(event)

    async def handle_status(self, event: InboundEvent) -> None:
        """Mark a status update as viewed when auto status view is on."""
        if await self.settings.is_auto_status_view_enabled():
            await self.transport.read_messages([event.key])

    async def handle_group_participants(self, chat_id: str, participants: List[str], action: str) -> None:
        """
        Greet joining members and say goodbye to leaving ones.

        Args:
            chat_id: Group JID
            participants: Affected member JIDs
            action: add, remove, promote or demote
        """
        if action not in ("add", "remove"):
            return

        try:
            subject = ""
            if action == "add":
                subject = (await self.transport.group_metadata(chat_id)).subject

            for participant in participants:
                mention = WhatsAppUtils.mention(participant)
                if action == "add":
                    text = f"👋 Welcome {mention} to *{subject}*!"
                else:
                    text = f"👋 Goodbye {mention}!"
                await self.transport.send_message(chat_id, {"text": text, "mentions": [participant]})
        except Exception as e:
            logger.error(f"Error handling group participant update: {e}")

    async def on_connected(self) -> None:
        """Bridge reported an open WhatsApp session."""
        self.monitoring.connected = True
        update_bot_status(status="ready", whatsapp_connected=True)
        logger.info("Connected to WhatsApp")
        await self.maintenance.refresh_presence()

    def on_disconnected(self) -> None:
        self.monitoring.connected = False
        update_bot_status(status="disconnected", whatsapp_connected=False)
        logger.warning("WhatsApp connection closed")

    async def start(self) -> None:
        self.maintenance.start()
        update_bot_status(status="running")
        logger.info(f"Bot started. Use {self.config.PREFIX}menu to see available commands")

    async def close(self) -> None:
        """Clean shutdown."""
        logger.info("Shutting down bot...")

        self.maintenance.cleanup()
        self.reminders.cleanup()
        await self.downloads.close()
        if isinstance(self.transport, BridgeTransport):
            await self.transport.close()
        await close_database()

        update_bot_status(status="offline", whatsapp_connected=False)


# Global bot instance
bot: Optional[WhatsAppBot] = None


def get_bot() -> Optional[WhatsAppBot]:
    return bot


def create_bot(transport: MessagingTransport, pool: Any = None) -> WhatsAppBot:
    """Create and return bot instance."""
    global bot
    bot = WhatsAppBot(transport, pool)
    attach_bot(bot)
    return bot


async def run_bot() -> None:
    """Run the bot until a shutdown signal arrives."""
    config.validate()
    if config.DEBUG:
        set_default_level(logging.DEBUG)

    stop_event = asyncio.Event()

    async def shutdown() -> None:
        stop_event.set()

    setup_error_handler(asyncio.get_running_loop(), shutdown)

    pool = await init_database(config.DATABASE_URL)
    transport = BridgeTransport(config.BRIDGE_URL, config.BRIDGE_TOKEN)
    instance = create_bot(transport, pool)

    server_task = await run_server()
    try:
        await instance.start()
        await stop_event.wait()
    except Exception as e:
        logger.error(f"Bot error: {e}")
        raise
    finally:
        server_task.cancel()
        await instance.close()
