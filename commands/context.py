"""
Command Context
Inbound event, caller identity and the services a handler may use
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from bot.transport import MessageContent, MessagingTransport
from utils.validation import ValidationUtils


@dataclass
class InboundEvent:
    """Normalised inbound chat message."""

    chat_id: str
    sender_id: str
    text: str = ""
    push_name: str = ""
    message_id: str = ""
    from_me: bool = False
    mentioned: List[str] = field(default_factory=list)
    quoted_text: Optional[str] = None
    quoted_id: Optional[str] = None
    quoted_sender: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InboundEvent":
        chat_id = data.get("chatId") or data.get("remoteJid") or ""
        quoted = data.get("quoted") or {}
        return cls(
            chat_id=chat_id,
            sender_id=data.get("sender") or data.get("participant") or chat_id,
            text=data.get("text") or "",
            push_name=data.get("pushName") or "",
            message_id=data.get("id") or "",
            from_me=bool(data.get("fromMe")),
            mentioned=list(data.get("mentioned") or []),
            quoted_text=quoted.get("text"),
            quoted_id=quoted.get("id"),
            quoted_sender=quoted.get("sender"),
        )

    @property
    def is_group(self) -> bool:
        return ValidationUtils.is_group_jid(self.chat_id)

    @property
    def key(self) -> Dict[str, Any]:
        """Message key as the transport expects it for delete/read."""
        key = {"remoteJid": self.chat_id, "id": self.message_id, "fromMe": self.from_me}
        if self.is_group:
            key["participant"] = self.sender_id
        return key


class CallerContext:
    """Who is invoking a command, and from where."""

    def __init__(
        self,
        user_id: str,
        chat_id: str,
        is_owner: bool = False,
        is_banned: bool = False,
        admin_resolver: Optional[Callable[[], Awaitable[bool]]] = None,
    ):
        self.user_id = user_id
        self.chat_id = chat_id
        self.is_group = ValidationUtils.is_group_jid(chat_id)
        self.is_owner = is_owner
        self.is_banned = is_banned
        self._admin_resolver = admin_resolver
        self._is_admin: Optional[bool] = None

    @classmethod
    def for_event(
        cls,
        event: InboundEvent,
        owner_number: str,
        transport: Optional[MessagingTransport] = None,
        is_banned: bool = False,
    ) -> "CallerContext":
        """
        Build the caller of an inbound event.

        Admin status is looked up through the transport on first use only.
        """

        async def resolve_admin() -> bool:
            if transport is None:
                return False
            metadata = await transport.group_metadata(event.chat_id)
            return metadata.is_admin(event.sender_id)

        return cls(
            user_id=event.sender_id,
            chat_id=event.chat_id,
            is_owner=ValidationUtils.jid_number(event.sender_id) == owner_number,
            is_banned=is_banned,
            admin_resolver=resolve_admin,
        )

    async def is_admin(self) -> bool:
        """Whether the caller is a group admin. Resolved once, then memoised."""
        if self._is_admin is None:
            if not self.is_group or self._admin_resolver is None:
                self._is_admin = False
            else:
                self._is_admin = await self._admin_resolver()
        return self._is_admin


@dataclass
class Services:
    """Collaborators shared by all handlers."""

    transport: MessagingTransport
    config: Any
    registry: Any = None
    selections: Any = None
    users: Any = None
    groups: Any = None
    command_logs: Any = None
    settings: Any = None
    downloads: Any = None
    reminders: Any = None
    monitoring: Any = None


@dataclass
class CommandContext:
    """Everything a handler gets besides its arguments."""

    event: InboundEvent
    caller: CallerContext
    services: Services

    @property
    def chat_id(self) -> str:
        return self.event.chat_id

    @property
    def user_id(self) -> str:
        return self.event.sender_id

    @property
    def transport(self) -> MessagingTransport:
        return self.services.transport

    async def reply(self, content: MessageContent) -> Optional[Dict[str, Any]]:
        """Send a message to the originating chat."""
        return await self.services.transport.send_message(self.event.chat_id, content)
