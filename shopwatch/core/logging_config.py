"""
Structured logging configuration.

Provides JSON log output, a correlation context so every line written during
one alert cycle carries the same cycle id, and rotating file handlers for
long-running bot processes.
"""

import logging
import logging.handlers
import json
import sys
import threading
import traceback
import uuid
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, Optional, List

from .config import settings


@dataclass
class LogEntry:
    """Structured log entry"""
    timestamp: str
    level: str
    logger_name: str
    message: str
    correlation_id: Optional[str] = None
    user_id: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    duration_ms: Optional[float] = None
    extra: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        result = asdict(self)
        # Remove None values to reduce log size
        return {k: v for k, v in result.items() if v is not None}


class CorrelationContext:
    """Thread-local correlation context"""

    def __init__(self):
        self._storage = threading.local()

    def set_correlation_id(self, correlation_id: Optional[str]):
        """Set correlation ID for current thread"""
        self._storage.correlation_id = correlation_id

    def get_correlation_id(self) -> Optional[str]:
        """Get correlation ID for current thread"""
        return getattr(self._storage, 'correlation_id', None)

    def new_correlation_id(self) -> str:
        """Start a fresh correlation ID and return it"""
        correlation_id = uuid.uuid4().hex[:8]
        self.set_correlation_id(correlation_id)
        return correlation_id

    def set_user_id(self, user_id: Optional[str]):
        self._storage.user_id = user_id

    def get_user_id(self) -> Optional[str]:
        return getattr(self._storage, 'user_id', None)

    def clear(self):
        """Clear all context for current thread"""
        for attr in ['correlation_id', 'user_id']:
            if hasattr(self._storage, attr):
                delattr(self._storage, attr)


_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'message', 'taskName'
}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra
        self.correlation_context = correlation_context

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        extra = {}
        if self.include_extra:
            extra = {
                key: value for key, value in record.__dict__.items()
                if key not in _RESERVED_ATTRS
            }

        if record.exc_info:
            extra['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        log_entry = LogEntry(
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            level=record.levelname,
            logger_name=record.name,
            message=record.getMessage(),
            correlation_id=self.correlation_context.get_correlation_id(),
            user_id=extra.pop('user_id', None) or self.correlation_context.get_user_id(),
            component=extra.pop('component', None),
            operation=extra.pop('operation', None),
            duration_ms=extra.pop('duration_ms', None),
            extra=extra if extra else None
        )

        return json.dumps(log_entry.to_dict(), ensure_ascii=False, default=str)


class LoggingManager:
    """Centralized logging management"""

    def __init__(self):
        self.configured = False
        self.log_dir: Optional[Path] = None
        self.handlers: List[logging.Handler] = []

    def setup_logging(self,
                      log_level: str = "INFO",
                      log_dir: Optional[str] = "logs",
                      max_file_size: int = 10 * 1024 * 1024,  # 10MB
                      backup_count: int = 5,
                      enable_console: bool = True,
                      enable_json: bool = True) -> None:
        """Setup logging configuration"""

        if self.configured:
            return

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, log_level.upper()))
        root_logger.handlers.clear()

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            if enable_json:
                console_handler.setFormatter(StructuredFormatter())
            else:
                console_handler.setFormatter(
                    logging.Formatter(
                        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
                    )
                )
            root_logger.addHandler(console_handler)
            self.handlers.append(console_handler)

        if log_dir:
            self.log_dir = Path(log_dir)
            self.log_dir.mkdir(parents=True, exist_ok=True)

            app_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / "app.log",
                maxBytes=max_file_size,
                backupCount=backup_count,
                encoding='utf-8'
            )
            app_handler.setFormatter(StructuredFormatter())
            root_logger.addHandler(app_handler)
            self.handlers.append(app_handler)

            error_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / "error.log",
                maxBytes=max_file_size,
                backupCount=backup_count,
                encoding='utf-8'
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(StructuredFormatter())
            root_logger.addHandler(error_handler)
            self.handlers.append(error_handler)

        self.configured = True
        logging.info("Logging system initialized")

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger with proper configuration"""
        return logging.getLogger(name)

    def close(self):
        """Close all handlers"""
        root_logger = logging.getLogger()
        for handler in self.handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self.handlers.clear()
        self.configured = False


# Global instances
correlation_context = CorrelationContext()
logging_manager = LoggingManager()


def setup_logging():
    """Setup logging system from settings"""
    logging_manager.setup_logging(
        log_level=settings.log_level,
        log_dir=settings.log_dir or None,
        enable_console=True,
        enable_json=settings.log_json,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger"""
    return logging_manager.get_logger(name)


def set_correlation_id(correlation_id: Optional[str]):
    """Set correlation ID for the current cycle"""
    correlation_context.set_correlation_id(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get correlation ID for the current cycle"""
    return correlation_context.get_correlation_id()


def new_correlation_id() -> str:
    """Start a new correlation ID"""
    return correlation_context.new_correlation_id()
