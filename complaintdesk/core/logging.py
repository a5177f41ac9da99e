"""
Logging Configuration and Utilities

Structured logging with context tracking, built on the standard
logging module with structlog processors.
"""

import logging
import logging.config
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog

from complaintdesk.config.logging import build_logging_config
from complaintdesk.config.settings import settings

# Context variables for request tracking
request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
user_id: ContextVar[Optional[str]] = ContextVar('user_id', default=None)

_configured = False


class RequestContextProcessor:
    """Add request context to log records"""

    def __call__(self, logger, method_name, event_dict):
        req_id = request_id.get()
        if req_id:
            event_dict['request_id'] = req_id

        uid = user_id.get()
        if uid:
            event_dict['user_id'] = uid

        event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()
        event_dict['service'] = 'complaint-desk'
        event_dict['environment'] = settings.ENVIRONMENT

        return event_dict


class SecurityLogProcessor:
    """Mask sensitive values before they reach a renderer"""

    SENSITIVE_KEYS = ('password', 'token', 'secret', 'authorization', 'cookie')

    def __call__(self, logger, method_name, event_dict):
        self._sanitize_event_dict(event_dict)
        return event_dict

    def _sanitize_event_dict(self, event_dict: Dict[str, Any]):
        for key in list(event_dict.keys()):
            if any(sensitive in key.lower() for sensitive in self.SENSITIVE_KEYS):
                event_dict[key] = '[REDACTED]'
            elif isinstance(event_dict[key], dict):
                self._sanitize_event_dict(event_dict[key])


class LoggingConfig:
    """Centralized logging configuration"""

    @staticmethod
    def configure_structured_logging():
        """Configure structlog to render through the stdlib handlers"""
        processors = [
            RequestContextProcessor(),
            SecurityLogProcessor(),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if settings.LOG_FORMAT == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.processors.KeyValueRenderer())

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def configure_standard_logging():
        """Configure standard Python logging from the dictConfig mapping"""
        logging.config.dictConfig(build_logging_config())
        logging.getLogger("httpx").setLevel(logging.WARNING)


class LoggerAdapter:
    """Stdlib logger wrapper that stamps request and user ids on records"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _log(self, level: int, message: str, *args, **kwargs):
        extra = dict(kwargs.get('extra') or {})
        for key, var in (('request_id', request_id), ('user_id', user_id)):
            value = var.get()
            if value and key not in extra:
                extra[key] = value
        kwargs['extra'] = extra
        self.logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._log(logging.ERROR, message, *args, **kwargs)

    def critical(self, message: str, *args, **kwargs):
        self._log(logging.CRITICAL, message, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    """
    Get configured logger instance.

    Args:
        name: Logger name (defaults to the package logger)

    Returns:
        Context-aware logger adapter
    """
    return LoggerAdapter(logging.getLogger(name or "complaintdesk"))


def get_structured_logger(name: Optional[str] = None):
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name or "complaintdesk")


def setup_logging(force: bool = False) -> None:
    """Initialize logging configuration once per process"""
    global _configured
    if _configured and not force:
        return

    LoggingConfig.configure_structured_logging()
    LoggingConfig.configure_standard_logging()
    _configured = True

    get_logger(__name__).info(
        "Logging system initialized",
        extra={'log_level': settings.LOG_LEVEL, 'log_format': settings.LOG_FORMAT},
    )


__all__ = [
    'get_logger',
    'get_structured_logger',
    'setup_logging',
    'LoggerAdapter',
    'LoggingConfig',
    'request_id',
    'user_id',
]
