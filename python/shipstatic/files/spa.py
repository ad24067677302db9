"""Single-page application auto-configuration.

When the platform says a file set looks like an SPA, a `ship.json` with a
catch-all rewrite to /index.html is added to the deploy. The check is
advisory: if it fails for any reason the deploy goes ahead unchanged.
"""
import json
from enum import Enum

import structlog

from ..state import SPAChecker
from ..types import BytesSource, FileRecord
from .hashing import build_record

logger = structlog.get_logger("shipstatic.files.spa")

DEPLOYMENT_CONFIG_FILENAME = "ship.json"

SPA_REWRITE_CONFIG = {
    "rewrites": [{
        "source": "/(.*)",
        "destination": "/index.html",
    }],
}


class SPAState(str, Enum):
    UNCHECKED = "unchecked"
    CONFIGURED = "configured"
    SKIPPED = "skipped"


async def create_spa_config() -> FileRecord:
    """Build the ship.json record holding the SPA rewrite rule."""
    data = json.dumps(SPA_REWRITE_CONFIG, indent=2).encode("utf-8")
    return await build_record(DEPLOYMENT_CONFIG_FILENAME, BytesSource(data=data))


def has_deployment_config(records: list[FileRecord]) -> bool:
    return any(r.path == DEPLOYMENT_CONFIG_FILENAME for r in records)


class SPAConfigurator:
    """Runs the SPA check at most once and records how it ended."""

    def __init__(self, checker: SPAChecker | None, enabled: bool = True) -> None:
        self.checker = checker
        self.enabled = enabled
        self.state = SPAState.UNCHECKED

    async def configure(self, records: list[FileRecord]) -> list[FileRecord]:
        if self.state != SPAState.UNCHECKED:
            return records

        if not self.enabled or self.checker is None or has_deployment_config(records):
            self.state = SPAState.SKIPPED
            return records

        try:
            is_spa = await self.checker.check_spa(records)
        except Exception as exc:
            logger.warning(
                "SPA detection failed, continuing without auto-config.",
                event_name="spa_check_failed",
                error=str(exc),
            )
            is_spa = False

        if not is_spa:
            self.state = SPAState.SKIPPED
            return records

        config = await create_spa_config()
        self.state = SPAState.CONFIGURED
        logger.info("SPA detected, adding rewrite configuration.", path=config.path)
        return [*records, config]


async def detect_and_configure_spa(
    records: list[FileRecord],
    checker: SPAChecker | None,
    enabled: bool = True,
) -> list[FileRecord]:
    return await SPAConfigurator(checker, enabled=enabled).configure(records)
