"""Structured logging configuration with JSON formatter.

All handlers write to stderr or a file: in stdio mode stdout carries the
MCP protocol. Tool calls log through a ToolLogAdapter, which attaches the
tool name and target database to every record.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from spanner_mcp import __version__

SERVICE_NAME = "spanner-mcp"

# Client library loggers that are only useful when debugging
NOISY_LOGGERS = (
    'google.auth',
    'google.api_core',
    'google.cloud.spanner_v1',
    'grpc',
    'urllib3',
)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'service': SERVICE_NAME,
            'version': __version__,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if record.exc_info:
            log_obj['exception'] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_obj.update(record.extra_fields)

        return json.dumps(log_obj, default=str)


class ContextFormatter(logging.Formatter):
    """Plain text formatter that appends tool context as key=value pairs."""

    def __init__(self):
        super().__init__('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, 'extra_fields', None)
        if not fields:
            return line
        context = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        # Keep the context on the message line, ahead of any traceback
        head, sep, tail = line.partition("\n")
        return f"{head} [{context}]{sep}{tail}"


class ToolLogAdapter(logging.LoggerAdapter):
    """Logger adapter carrying context fields such as the tool and database."""

    def process(self, msg, kwargs):
        fields = dict(self.extra)
        fields.update(kwargs.pop('extra', None) or {})
        kwargs['extra'] = {'extra_fields': fields}
        return msg, kwargs

    def bind(self, **fields) -> 'ToolLogAdapter':
        """Return an adapter with additional context fields."""
        return ToolLogAdapter(self.logger, {**self.extra, **fields})


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """Set up structured logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Whether to use JSON formatting
        log_file: Optional log file path
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    formatter = JSONFormatter() if json_format else ContextFormatter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    library_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str, extra_fields: Optional[Dict[str, Any]] = None):
    """Get a logger, wrapped in a ToolLogAdapter when context is given.

    Args:
        name: Logger name
        extra_fields: Context fields to include in all logs

    Returns:
        Logger, or ToolLogAdapter when extra_fields is set
    """
    logger = logging.getLogger(name)

    if extra_fields:
        return ToolLogAdapter(logger, dict(extra_fields))

    return logger
