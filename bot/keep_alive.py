"""
Web server: health endpoints plus the webhooks the WhatsApp bridge posts events to.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, Coroutine, Dict, List, Optional, Set

from fastapi import FastAPI, Header, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from bot.config import config
from bot.database import is_connected
from commands.context import InboundEvent
from utils.logger import get_logger

logger = get_logger("KeepAlive")

# Track bot status
_bot_status: Dict[str, Any] = {
    "status": "starting",
    "whatsapp_connected": False,
}

# Bot receiving bridge events (set by attach_bot)
_bot: Optional[Any] = None

# Strong references to in-flight event tasks
_event_tasks: Set[asyncio.Task] = set()


def update_bot_status(**kwargs: Any) -> None:
    """Update bot status for health endpoint."""
    _bot_status.update(kwargs)


def attach_bot(bot: Any) -> None:
    """Route bridge webhooks to a bot instance."""
    global _bot
    _bot = bot


class QuotedPayload(BaseModel):
    id: Optional[str] = None
    sender: Optional[str] = None
    text: Optional[str] = None


class MessageEventPayload(BaseModel):
    chatId: str
    sender: Optional[str] = None
    id: str = ""
    text: str = ""
    pushName: str = ""
    fromMe: bool = False
    mentioned: List[str] = []
    quoted: Optional[QuotedPayload] = None


class ParticipantsEventPayload(BaseModel):
    chatId: str
    participants: List[str]
    action: str


class ConnectionEventPayload(BaseModel):
    state: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    logger.info("Web server starting...")
    yield
    logger.info("Web server shutting down...")


app = FastAPI(
    title="Self-WA Bot",
    description="WhatsApp bot health and bridge webhook server",
    version="1.0.0",
    lifespan=lifespan,
)


def _spawn(coro: Coroutine[Any, Any, Any]) -> None:
    task = asyncio.create_task(coro)
    _event_tasks.add(task)
    task.add_done_callback(_event_tasks.discard)


def _require_bot(authorization: Optional[str]) -> Any:
    if config.BRIDGE_TOKEN and authorization != f"Bearer {config.BRIDGE_TOKEN}":
        raise HTTPException(status_code=401, detail="Invalid bridge token")
    if _bot is None:
        raise HTTPException(status_code=503, detail="Bot not ready")
    return _bot


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Self-WA Bot",
        "version": "1.0.0",
        "status": _bot_status.get("status", "unknown"),
    }


@app.get("/health")
async def health():
    """Health check endpoint for monitoring."""
    database_ok = is_connected()
    whatsapp_ok = bool(_bot_status.get("whatsapp_connected"))

    status = "healthy" if database_ok and whatsapp_ok else "degraded"
    uptime = _bot.monitoring.uptime_seconds() if _bot is not None else 0

    return JSONResponse(
        status_code=200 if status == "healthy" else 503,
        content={
            "status": status,
            "whatsapp": "connected" if whatsapp_ok else "disconnected",
            "database": "connected" if database_ok else "disconnected",
            "uptime": uptime,
        },
    )


@app.get("/ping")
async def ping():
    """Simple ping endpoint."""
    return {"pong": True}


@app.post("/events/message", status_code=202)
async def message_event(payload: MessageEventPayload, authorization: Optional[str] = Header(default=None)):
    """Inbound chat message from the bridge; processed in the background."""
    bot = _require_bot(authorization)
    event = InboundEvent.from_dict(payload.model_dump())
    _spawn(bot.handle_message(event))
    return {"accepted": True}


@app.post("/events/group-participants", status_code=202)
async def group_participants_event(
    payload: ParticipantsEventPayload,
    authorization: Optional[str] = Header(default=None),
):
    bot = _require_bot(authorization)
    _spawn(bot.handle_group_participants(payload.chatId, payload.participants, payload.action))
    return {"accepted": True}


@app.post("/events/connection")
async def connection_event(payload: ConnectionEventPayload, authorization: Optional[str] = Header(default=None)):
    bot = _require_bot(authorization)
    if payload.state == "open":
        await bot.on_connected()
    else:
        bot.on_disconnected()
    return {"state": payload.state}


async def start_server():
    """Start the web server."""
    import uvicorn

    config_uvicorn = uvicorn.Config(
        app,
        host=config.HOST,
        port=config.PORT,
        log_level="warning",
        access_log=False,
    )
    server = uvicorn.Server(config_uvicorn)

    logger.info(f"Web server listening on port {config.PORT}")
    await server.serve()


async def run_server():
    """Run server in background task."""
    return asyncio.create_task(start_server())
