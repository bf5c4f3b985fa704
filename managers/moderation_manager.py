"""
Moderation Manager
Anti-link and anti-bad-word filtering of group messages
"""

from typing import Optional

from bot.transport import MessagingTransport
from commands.context import InboundEvent
from managers.settings_manager import SettingsManager
from utils.logger import LoggerMixin
from utils.validation import ValidationUtils
from utils.whatsapp import WhatsAppUtils

LINK_WARNING = "⚠️ Links are not allowed in this group!"
BAD_WORD_WARNING = "⚠️ Bad words are not allowed!"


class ModerationManager(LoggerMixin):
    """Deletes offending group messages and warns their senders."""

    def __init__(self, transport: MessagingTransport, settings: SettingsManager, owner_number: str):
        super().__init__("Moderation")
        self.transport = transport
        self.settings = settings
        self.owner_number = owner_number

    async def check_message(self, event: InboundEvent) -> bool:
        """
        Apply the group's filters to a message.

        Admins and the owner are exempt.

        Args:
            event: Inbound message

        Returns:
            True if the message was removed and must not be processed further
        """
        if not event.is_group or not event.text:
            return False

        warning = await self._violation(event)
        if warning is None:
            return False

        if await self._is_exempt(event):
            return False

        try:
            await self.transport.delete_message(event.chat_id, event.key)
        except Exception as e:
            self.error(f"Failed to delete message in {event.chat_id}: {e}")
        await WhatsAppUtils.safe_send(
            self.transport,
            event.chat_id,
            {"text": warning, "mentions": [event.sender_id]},
        )
        self.info(f"Filtered message from {event.sender_id} in {event.chat_id}")
        return True

    async def _violation(self, event: InboundEvent) -> Optional[str]:
        if await self.settings.is_antilink_enabled(event.chat_id) and ValidationUtils.contains_link(event.text):
            return LINK_WARNING

        if await self.settings.is_antibadword_enabled(event.chat_id):
            bad_words = await self.settings.get_bad_words()
            if ValidationUtils.find_bad_word(event.text, bad_words):
                return BAD_WORD_WARNING

        return None

    async def _is_exempt(self, event: InboundEvent) -> bool:
        if ValidationUtils.jid_number(event.sender_id) == self.owner_number:
            return True
        metadata = await self.transport.group_metadata(event.chat_id)
        return metadata.is_admin(event.sender_id)
