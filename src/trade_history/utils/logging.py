"""Logging setup for the trade history fetcher."""

import logging
import logging.config
import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from ..config.settings import LoggingConfig

# Attributes every LogRecord carries; anything else came in through `extra`.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {'message', 'asctime'}


def _utc_timestamp(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, extras included."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            'timestamp': _utc_timestamp(record).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log_data.update(
            (key, value) for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
        )
        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """`timestamp [LEVEL] logger: message`, level colored on a terminal."""

    LEVEL_COLORS = {
        'DEBUG': '36',
        'INFO': '32',
        'WARNING': '33',
        'ERROR': '31',
        'CRITICAL': '35',
    }

    def __init__(self, use_colors: bool = False):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors and level in self.LEVEL_COLORS:
            level = f"\033[{self.LEVEL_COLORS[level]}m{level}\033[0m"

        timestamp = _utc_timestamp(record).strftime('%Y-%m-%d %H:%M:%S')
        formatted = f"{timestamp} [{level}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)
        return formatted


class ServiceFilter(logging.Filter):
    """Tags each record with the service name."""

    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        return True


def _handler_config(output: str) -> Dict[str, Any]:
    if output.lower() in ('stdout', 'stderr'):
        stream = sys.stdout if output.lower() == 'stdout' else sys.stderr
        return {'class': 'logging.StreamHandler', 'stream': stream}
    return {'class': 'logging.FileHandler', 'filename': output, 'encoding': 'utf-8'}


def setup_logging(config: LoggingConfig, service_name: str = "trade-history") -> None:
    """Route all logging through one handler configured from `config`."""

    handler = _handler_config(config.output)
    if config.format.lower() == 'json':
        formatter = {'()': JSONFormatter}
    else:
        stream = handler.get('stream')
        formatter = {'()': TextFormatter, 'use_colors': bool(stream and stream.isatty())}

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {'default': formatter},
        'filters': {'service': {'()': ServiceFilter, 'service': service_name}},
        'handlers': {'default': {**handler, 'formatter': 'default', 'filters': ['service']}},
        'loggers': {
            'aiohttp': {'level': 'WARNING'},
            'asyncio': {'level': 'WARNING'},
        },
        'root': {'level': config.level.upper(), 'handlers': ['default']},
    })
