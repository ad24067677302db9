import logging

import pytest
import structlog
from shipstatic import logs


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if handler.get_name() == "shipstatic":
            root.removeHandler(handler)
    structlog.reset_defaults()
    logs.SUPPRESSED_EVENTS = set()


def test_setup_logging_does_not_stack_handlers():
    logs.setup_logging(level="debug", fmt="json")
    logs.setup_logging(level="warning", fmt="dev")

    root = logging.getLogger()
    assert [h.get_name() for h in root.handlers].count("shipstatic") == 1
    assert root.level == logging.WARNING


def test_suppressed_events(monkeypatch):
    monkeypatch.setenv("SHIP_SUPPRESS_EVENTS", "empty_file_skipped, spa_check_failed")
    logs.setup_logging()

    assert logs.SUPPRESSED_EVENTS == {"empty_file_skipped", "spa_check_failed"}
    with pytest.raises(structlog.DropEvent):
        logs._drop_suppressed(None, "warning", {"event": "x", "event_name": "empty_file_skipped"})
    event = {"event": "x", "event_name": "file_hashed"}
    assert logs._drop_suppressed(None, "debug", event) is event
