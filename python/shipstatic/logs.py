import logging
import os
from typing import Any

import structlog

# Event names that can be dropped via the SHIP_SUPPRESS_EVENTS env var,
# e.g. SHIP_SUPPRESS_EVENTS="empty_file_skipped,spa_check_failed"
SUPPRESSED_EVENTS: set[str] = set()

_HANDLER_NAME = "shipstatic"


def _load_suppressed_events() -> None:
    global SUPPRESSED_EVENTS
    suppressed = os.getenv("SHIP_SUPPRESS_EVENTS", "")
    SUPPRESSED_EVENTS = {e.strip() for e in suppressed.split(",") if e.strip()}


def _drop_suppressed(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Structlog processor that drops events listed in SUPPRESSED_EVENTS."""
    event_name = event_dict.get("event_name")
    if event_name and event_name in SUPPRESSED_EVENTS:
        raise structlog.DropEvent
    return event_dict


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configures structured logging for the SDK and CLI consumers.

    Args:
        level: Log level name. Falls back to SHIP_LOG_LEVEL, then INFO.
        fmt: "dev" for coloured console output, anything else for JSON lines.
            Falls back to SHIP_LOG_FORMAT.

    Calling this more than once replaces the handler installed by the previous
    call instead of stacking a second one on the root logger.
    """
    log_level = (level or os.getenv("SHIP_LOG_LEVEL", "INFO")).upper()
    dev_logs = (fmt if fmt is not None else os.getenv("SHIP_LOG_FORMAT", "")) == "dev"

    _load_suppressed_events()

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _drop_suppressed,
    ]
    shared_processors.append(structlog.dev.set_exc_info if dev_logs else structlog.processors.format_exc_info)

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = structlog.dev.ConsoleRenderer(event_key="message") if dev_logs else structlog.processors.JSONRenderer()
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(formatter)
    root.addHandler(handler)
    root.setLevel(log_level)
