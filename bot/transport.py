"""
Messaging transport.

The WhatsApp session library (pairing, encryption, message transport) runs in
a separate bridge process. The bot talks to it through MessagingTransport;
BridgeTransport is the HTTP/JSON implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import httpx

from utils.logger import get_logger

logger = get_logger("Transport")

MessageContent = Union[str, Dict[str, Any]]


class TransportError(Exception):
    """Raised when the bridge rejects or fails a request."""


@dataclass
class Participant:
    """Group participant; ``admin`` is "admin", "superadmin" or None."""

    id: str
    admin: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return bool(self.admin)


@dataclass
class GroupMetadata:
    """Snapshot of a group's subject and participants."""

    id: str
    subject: str = ""
    description: str = ""
    participants: List[Participant] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GroupMetadata":
        return cls(
            id=data.get("id", ""),
            subject=data.get("subject", "") or "",
            description=data.get("desc", "") or data.get("description", "") or "",
            participants=[
                Participant(id=p["id"], admin=p.get("admin"))
                for p in data.get("participants", [])
            ],
        )

    @property
    def participant_ids(self) -> List[str]:
        return [p.id for p in self.participants]

    @property
    def admins(self) -> List[str]:
        return [p.id for p in self.participants if p.is_admin]

    def is_admin(self, jid: str) -> bool:
        """Check whether a participant holds admin rights in this group."""
        return any(p.id == jid and p.is_admin for p in self.participants)


class MessagingTransport(ABC):
    """Operations the bot needs from the WhatsApp connection."""

    @abstractmethod
    async def send_message(self, chat_id: str, content: MessageContent) -> Optional[Dict[str, Any]]:
        """Send text (str) or a structured message payload (dict)."""

    @abstractmethod
    async def send_file(self, chat_id: str, path: str, caption: str, mimetype: str) -> Optional[Dict[str, Any]]:
        """Upload a local file as video/audio/document."""

    @abstractmethod
    async def group_metadata(self, chat_id: str) -> GroupMetadata:
        """Fetch subject and participants of a group."""

    @abstractmethod
    async def group_participants_update(self, chat_id: str, participants: List[str], action: str) -> None:
        """Add, remove, promote or demote participants."""

    @abstractmethod
    async def group_setting_update(self, chat_id: str, setting: str) -> None:
        """Apply announcement/not_announcement/locked/unlocked."""

    @abstractmethod
    async def group_invite_code(self, chat_id: str) -> str:
        """Current invite code of a group."""

    @abstractmethod
    async def group_revoke_invite(self, chat_id: str) -> None:
        """Invalidate the group's invite link."""

    @abstractmethod
    async def group_update_subject(self, chat_id: str, subject: str) -> None:
        """Rename a group."""

    @abstractmethod
    async def group_update_description(self, chat_id: str, description: str) -> None:
        """Change a group's description."""

    @abstractmethod
    async def group_accept_invite(self, code: str) -> Optional[str]:
        """Join a group by invite code; returns the group JID."""

    @abstractmethod
    async def group_leave(self, chat_id: str) -> None:
        """Leave a group."""

    @abstractmethod
    async def update_block_status(self, jid: str, action: str) -> None:
        """Block or unblock a user."""

    @abstractmethod
    async def delete_message(self, chat_id: str, key: Dict[str, Any]) -> None:
        """Delete a message for everyone."""

    @abstractmethod
    async def read_messages(self, keys: List[Dict[str, Any]]) -> None:
        """Send read receipts."""

    @abstractmethod
    async def send_presence_update(self, presence: str) -> None:
        """Set presence (e.g. "available")."""

    @abstractmethod
    async def list_chats(self) -> List[str]:
        """JIDs of all known chats."""


class BridgeTransport(MessagingTransport):
    """MessagingTransport backed by the WhatsApp bridge's HTTP API."""

    def __init__(self, base_url: str, token: str = "", timeout: float = 30.0):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(base_url=base_url.rstrip("/"), headers=headers, timeout=timeout)

    async def _call(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """
        Perform one bridge request.

        Args:
            method: HTTP method
            path: Bridge endpoint path
            payload: JSON body

        Returns:
            Decoded ``data`` field of the bridge response

        Raises:
            TransportError: On connection failure or a non-2xx/unsuccessful reply
        """
        try:
            response = await self._client.request(method, path, json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"Bridge unreachable: {e}") from e

        if response.status_code >= 400:
            raise TransportError(f"Bridge error ({response.status_code}) on {path}: {response.text[:200]}")

        body = response.json() if response.content else {}
        if isinstance(body, dict) and body.get("success") is False:
            raise TransportError(body.get("message") or f"Bridge refused {path}")
        return body.get("data") if isinstance(body, dict) else body

    async def send_message(self, chat_id: str, content: MessageContent) -> Optional[Dict[str, Any]]:
        if isinstance(content, str):
            content = {"text": content}
        return await self._call("POST", "/messages", {"jid": chat_id, "content": content})

    async def send_file(self, chat_id: str, path: str, caption: str, mimetype: str) -> Optional[Dict[str, Any]]:
        try:
            with open(path, "rb") as handle:
                response = await self._client.post(
                    "/messages/file",
                    data={"jid": chat_id, "caption": caption, "mimetype": mimetype},
                    files={"file": (path.rsplit("/", 1)[-1], handle, mimetype)},
                    headers={"Content-Type": None},
                )
        except httpx.HTTPError as e:
            raise TransportError(f"Bridge unreachable: {e}") from e

        if response.status_code >= 400:
            raise TransportError(f"File upload failed ({response.status_code})")
        return response.json().get("data") if response.content else None

    async def group_metadata(self, chat_id: str) -> GroupMetadata:
        data = await self._call("GET", f"/groups/{chat_id}")
        return GroupMetadata.from_dict(data or {"id": chat_id})

    async def group_participants_update(self, chat_id: str, participants: List[str], action: str) -> None:
        await self._call("POST", f"/groups/{chat_id}/participants", {"participants": participants, "action": action})

    async def group_setting_update(self, chat_id: str, setting: str) -> None:
        await self._call("POST", f"/groups/{chat_id}/settings", {"setting": setting})

    async def group_invite_code(self, chat_id: str) -> str:
        data = await self._call("GET", f"/groups/{chat_id}/invite")
        return (data or {}).get("code", "")

    async def group_revoke_invite(self, chat_id: str) -> None:
        await self._call("DELETE", f"/groups/{chat_id}/invite")

    async def group_update_subject(self, chat_id: str, subject: str) -> None:
        await self._call("POST", f"/groups/{chat_id}/subject", {"subject": subject})

    async def group_update_description(self, chat_id: str, description: str) -> None:
        await self._call("POST", f"/groups/{chat_id}/description", {"description": description})

    async def group_accept_invite(self, code: str) -> Optional[str]:
        data = await self._call("POST", "/groups/join", {"code": code})
        return (data or {}).get("jid")

    async def group_leave(self, chat_id: str) -> None:
        await self._call("POST", f"/groups/{chat_id}/leave")

    async def update_block_status(self, jid: str, action: str) -> None:
        await self._call("POST", "/contacts/block", {"jid": jid, "action": action})

    async def delete_message(self, chat_id: str, key: Dict[str, Any]) -> None:
        await self._call("POST", "/messages", {"jid": chat_id, "content": {"delete": key}})

    async def read_messages(self, keys: List[Dict[str, Any]]) -> None:
        await self._call("POST", "/messages/read", {"keys": keys})

    async def send_presence_update(self, presence: str) -> None:
        await self._call("POST", "/presence", {"presence": presence})

    async def list_chats(self) -> List[str]:
        data = await self._call("GET", "/chats")
        return [chat["id"] if isinstance(chat, dict) else chat for chat in (data or [])]

    async def close(self) -> None:
        await self._client.aclose()
