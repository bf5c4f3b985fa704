"""
Utility modules for the WhatsApp bot.
"""

from .logger import LoggerMixin, get_logger, setup_logging
from .whatsapp import WhatsAppUtils
from .validation import ValidationUtils, ValidationResult
from .monitoring import Monitoring, HealthStatus
from .error_handler import ErrorHandler, get_error_handler, setup_error_handler

__all__ = [
    "LoggerMixin",
    "get_logger",
    "setup_logging",
    "WhatsAppUtils",
    "ValidationUtils",
    "ValidationResult",
    "Monitoring",
    "HealthStatus",
    "ErrorHandler",
    "get_error_handler",
    "setup_error_handler",
]
