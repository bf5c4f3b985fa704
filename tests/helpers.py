"""Fakes and builders shared by the test modules."""

from typing import Any, List, Optional
from unittest.mock import AsyncMock, MagicMock

from bot.transport import GroupMetadata, MessagingTransport, Participant
from commands import InboundEvent, Services

OWNER_NUMBER = "94770000000"
OWNER_JID = f"{OWNER_NUMBER}@s.whatsapp.net"
ALICE = "94771111111@s.whatsapp.net"
BOB = "94772222222@s.whatsapp.net"
GROUP = "120363000000000000@g.us"


class FakeTransport(MessagingTransport):
    """In-memory transport that records everything the bot sends."""

    def __init__(self, admins: Optional[List[str]] = None, members: Optional[List[str]] = None):
        self.sent: List[tuple] = []
        self.files: List[tuple] = []
        self.calls: List[tuple] = []
        self.metadata_calls = 0
        self.admins = list(admins or [])
        self.members = list(members or [])
        self.chats: List[str] = []
        self.invite_code = "AbCdEfGhIjKlMnOpQrSt12"
        self.fail_sends = False

    def texts(self) -> List[str]:
        """Text of every sent message, in order."""
        return [c if isinstance(c, str) else c.get("text", "") for _, c in self.sent]

    async def send_message(self, chat_id, content):
        if self.fail_sends:
            raise RuntimeError("send failed")
        self.sent.append((chat_id, content))
        return {"key": {"remoteJid": chat_id, "id": f"MSG{len(self.sent)}", "fromMe": True}}

    async def send_file(self, chat_id, path, caption, mimetype):
        self.files.append((chat_id, path, caption, mimetype))
        return None

    async def group_metadata(self, chat_id):
        self.metadata_calls += 1
        participants = [Participant(jid, "admin") for jid in self.admins]
        participants += [Participant(jid) for jid in self.members if jid not in self.admins]
        return GroupMetadata(id=chat_id, subject="Test Group", participants=participants)

    async def group_participants_update(self, chat_id, participants, action):
        self.calls.append(("participants", chat_id, list(participants), action))

    async def group_setting_update(self, chat_id, setting):
        self.calls.append(("setting", chat_id, setting))

    async def group_invite_code(self, chat_id):
        return self.invite_code

    async def group_revoke_invite(self, chat_id):
        self.calls.append(("revoke", chat_id))

    async def group_update_subject(self, chat_id, subject):
        self.calls.append(("subject", chat_id, subject))

    async def group_update_description(self, chat_id, description):
        self.calls.append(("description", chat_id, description))

    async def group_accept_invite(self, code):
        self.calls.append(("join", code))
        return GROUP

    async def group_leave(self, chat_id):
        self.calls.append(("leave", chat_id))

    async def update_block_status(self, jid, action):
        self.calls.append(("block", jid, action))

    async def delete_message(self, chat_id, key):
        self.calls.append(("delete", chat_id, key))

    async def read_messages(self, keys):
        self.calls.append(("read", keys))

    async def send_presence_update(self, presence):
        self.calls.append(("presence", presence))

    async def list_chats(self):
        return list(self.chats)


def make_event(text: str, sender: str = ALICE, chat: Optional[str] = None, **kwargs: Any) -> InboundEvent:
    """Inbound message from ``sender``; a private chat unless ``chat`` is given."""
    return InboundEvent(chat_id=chat or sender, sender_id=sender, text=text, message_id="ABC123", **kwargs)


def make_users(banned: Optional[List[str]] = None) -> MagicMock:
    users = MagicMock()
    banned_set = set(banned or [])
    users.is_user_banned = AsyncMock(side_effect=lambda jid: jid in banned_set)
    users.increment_command_usage = AsyncMock()
    users.find_user = AsyncMock(return_value=None)
    users.get_or_create = AsyncMock()
    users.set_banned = AsyncMock()
    users.add_warning = AsyncMock(return_value=1)
    users.reset_warnings = AsyncMock()
    users.count_banned = AsyncMock(return_value=0)
    users.count = AsyncMock(return_value=0)
    return users


def sent_text(content: Any) -> str:
    return content if isinstance(content, str) else content.get("text", "")


def metric(services: Services, name: str) -> int:
    return services.monitoring.metrics[name]
