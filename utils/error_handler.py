"""
Error Handler
Global error handling and reporting
"""

import asyncio
import signal
import traceback
from typing import Any, Awaitable, Callable, Dict, Optional

from utils.logger import get_logger


class ErrorHandler:
    """Global error handler for the bot."""

    def __init__(self):
        self.logger = get_logger("ErrorHandler")
        self.error_counts: Dict[str, int] = {}
        self._shutdown_callback: Optional[Callable[[], Awaitable[Any]]] = None

    def initialize(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        on_shutdown: Optional[Callable[[], Awaitable[Any]]] = None,
    ) -> None:
        """
        Install the loop exception handler and shutdown signal handlers.

        Args:
            loop: Event loop (default: running loop)
            on_shutdown: Coroutine function run on SIGINT/SIGTERM
        """
        if loop is None:
            loop = asyncio.get_running_loop()

        self._shutdown_callback = on_shutdown
        loop.set_exception_handler(self._async_exception_handler)

        try:
            loop.add_signal_handler(signal.SIGINT, self._signal_handler, signal.SIGINT)
            loop.add_signal_handler(signal.SIGTERM, self._signal_handler, signal.SIGTERM)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

        self.logger.info("Error handlers initialized")

    def _signal_handler(self, sig: signal.Signals) -> None:
        self.logger.info(f"Received signal {sig.name}, shutting down...")
        if self._shutdown_callback:
            asyncio.ensure_future(self._shutdown_callback())

    def _async_exception_handler(self, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        exception = context.get("exception")
        if exception:
            self.handle_exception(exception, "async")
        else:
            message = context.get("message", "Unknown async error")
            self.logger.error(f"Async error: {message}")

    def handle_exception(self, error: BaseException, context: str = "") -> int:
        """
        Log an exception and count it under its context.

        Args:
            error: The exception that occurred
            context: Optional context string (e.g. the command name)

        Returns:
            Number of errors seen so far for this context and error type
        """
        error_key = f"{context}:{type(error).__name__}"

        if context:
            self.logger.error(f"[{context}] {type(error).__name__}: {error}")
        else:
            self.logger.error(f"{type(error).__name__}: {error}")

        self.logger.debug(
            "Traceback:\n" + "".join(traceback.format_exception(type(error), error, error.__traceback__))
        )

        count = self.error_counts.get(error_key, 0) + 1
        self.error_counts[error_key] = count
        return count

    def reset(self) -> None:
        """Forget all counted errors."""
        self.error_counts.clear()


# Global error handler instance
_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    global _error_handler
    if _error_handler is None:
        _error_handler = ErrorHandler()
    return _error_handler


def setup_error_handler(
    loop: Optional[asyncio.AbstractEventLoop] = None,
    on_shutdown: Optional[Callable[[], Awaitable[Any]]] = None,
) -> ErrorHandler:
    """Set up the global error handler."""
    handler = get_error_handler()
    handler.initialize(loop, on_shutdown)
    return handler
