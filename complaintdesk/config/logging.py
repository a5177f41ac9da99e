"""
Logging configuration for the complaint desk.
Provides console logging with a plain or JSON formatter.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from complaintdesk.config.settings import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with additional fields"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        """Add custom fields to the log record"""
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['environment'] = settings.ENVIRONMENT

        if hasattr(record, 'request_id'):
            log_record['request_id'] = record.request_id

        if hasattr(record, 'user_id'):
            log_record['user_id'] = record.user_id

        if hasattr(record, 'complaint_id'):
            log_record['complaint_id'] = record.complaint_id

        if record.exc_info:
            log_record['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }


def build_logging_config() -> Dict[str, Any]:
    """Create the dictConfig mapping for the current settings."""
    formatter = 'json' if settings.LOG_FORMAT == 'json' else 'standard'
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
            },
            'json': {
                '()': CustomJsonFormatter,
                'format': '%(timestamp)s %(level)s %(logger)s %(message)s'
            },
        },
        'handlers': {
            'console': {
                'level': 'DEBUG' if settings.DEBUG else settings.LOG_LEVEL,
                'class': 'logging.StreamHandler',
                'formatter': formatter,
            },
        },
        'loggers': {
            '': {  # Root logger
                'handlers': ['console'],
                'level': settings.LOG_LEVEL,
                'propagate': True
            },
            'sqlalchemy.engine': {
                'handlers': ['console'],
                'level': 'INFO' if settings.DB_ECHO else 'WARNING',
                'propagate': False
            },
            'uvicorn.access': {
                'handlers': ['console'],
                'level': 'WARNING',
                'propagate': False
            },
        }
    }
