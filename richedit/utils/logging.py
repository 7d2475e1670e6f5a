"""Logging configuration using structlog."""

import logging
import re
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from structlog.typing import EventDict, WrappedLogger

import structlog


class SafeStreamHandler(logging.StreamHandler):
    """A StreamHandler that survives consoles with a narrow encoding.

    Characters the stream cannot encode are replaced instead of aborting
    the whole record.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a record, handling encoding errors gracefully."""
        try:
            msg = self.format(record)
            stream = self.stream
            try:
                stream.write(msg + self.terminator)
            except UnicodeEncodeError:
                encoding = stream.encoding or "utf-8"
                stream.write(
                    msg.encode(encoding, errors="replace").decode(encoding, errors="replace")
                    + self.terminator
                )
            self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)


_log_output: TextIO = sys.stderr

# Data URIs produced while re-encoding images, and bare base64 payloads
_DATA_URI_PATTERN = re.compile(
    r"(data:[\w.+-]+/[\w.+-]+(?:;[\w=.+-]+)*(?:;base64)?,)[A-Za-z0-9+/=%]{100,}|"
    r"[A-Za-z0-9+/=]{500,}"
)

_MAX_VALUE_LENGTH = 500

# Third-party loggers kept at WARNING unless debugging
_NOISY_LOGGERS = ["PIL", "asyncio", "anyio"]


def set_log_output(output: TextIO) -> None:
    """Set the stream the console handler writes to."""
    global _log_output
    _log_output = output


def _truncate_data_uris(
    _logger: "WrappedLogger", _method_name: str, event_dict: "EventDict"
) -> "EventDict":
    """Replace encoded image payloads with their length."""
    for key, value in list(event_dict.items()):
        if isinstance(value, str) and len(value) > 100 and _DATA_URI_PATTERN.search(value):
            event_dict[key] = _DATA_URI_PATTERN.sub(
                lambda m: f"{m.group(1) or ''}[BASE64:{len(m.group(0))} chars]",
                value,
            )
    return event_dict


def _filter_event_dict(
    _logger: "WrappedLogger", _method_name: str, event_dict: "EventDict"
) -> "EventDict":
    """Shorten long strings and hide binary values."""
    for key, value in list(event_dict.items()):
        if isinstance(value, str) and len(value) > _MAX_VALUE_LENGTH:
            event_dict[key] = value[:_MAX_VALUE_LENGTH] + f"... [{len(value)} chars total]"
        elif isinstance(value, (bytes, bytearray, memoryview)):
            event_dict[key] = f"[BINARY DATA: {len(value)} bytes]"
    return event_dict


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    json_format: bool = False,
) -> None:
    """Configure structlog for the application.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path; rotated at midnight, 7 days kept
        json_format: If True, render JSON lines instead of console output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(max(log_level, logging.WARNING))

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _truncate_data_uris,
        _filter_event_dict,
    ]

    def _formatter(colors: bool) -> structlog.stdlib.ProcessorFormatter:
        if json_format:
            renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        else:
            renderer = structlog.dev.ConsoleRenderer(
                colors=colors,
                exception_formatter=structlog.dev.plain_traceback,
                pad_event_to=0,
                pad_level=False,
            )
        return structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )

    console_handler = SafeStreamHandler(_log_output)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(_formatter(colors=True))
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setLevel(log_level)
        file_handler.setFormatter(_formatter(colors=False))
        root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Optional logger name

    Returns:
        A structlog bound logger
    """
    return structlog.get_logger(name)
