"""
Reminder Manager
One-shot chat reminders on managed timers
"""

import itertools

from bot.transport import MessagingTransport
from managers.base_manager import BaseManager
from utils.whatsapp import WhatsAppUtils


class ReminderManager(BaseManager):
    """Schedules reminder messages; pending reminders are lost on restart."""

    def __init__(self, transport: MessagingTransport):
        super().__init__("Reminder")
        self.transport = transport
        self._ids = itertools.count(1)
        self.enabled = True

    def schedule(self, chat_id: str, user_id: str, minutes: int, message: str) -> str:
        """
        Send a reminder to a chat after a delay.

        Args:
            chat_id: Conversation to post in
            user_id: User to mention
            minutes: Delay in minutes
            message: Reminder text

        Returns:
            Timer name
        """
        name = f"reminder:{next(self._ids)}"

        async def fire() -> None:
            await WhatsAppUtils.safe_send(
                self.transport,
                chat_id,
                {
                    "text": f"⏰ *REMINDER*\n\n{WhatsAppUtils.mention(user_id)}\n{message}",
                    "mentions": [user_id],
                },
            )

        self.set_managed_timer(name, fire, minutes * 60 * 1000)
        self.debug(f"Scheduled {name} in {minutes}m for {user_id}")
        return name

    def pending_count(self) -> int:
        return len(self.timers)
