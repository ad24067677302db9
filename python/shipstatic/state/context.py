import asyncio
from typing import Protocol

import structlog

from ..errors import ConfigurationError
from ..types import DeployOptions, FileRecord
from .config import PlatformLimits

logger = structlog.get_logger("shipstatic.state.context")


class SPAChecker(Protocol):
    """Remote heuristic deciding whether a file set is a single-page app."""

    async def check_spa(self, records: list[FileRecord]) -> bool: ...


class PlatformLimitsProvider:
    """Holds the platform limits for one SDK instance.

    Limits are written once, after the first successful fetch, and read many
    times. Concurrent first fetches may both write; they write the same value.
    """

    def __init__(self, limits: PlatformLimits | None = None) -> None:
        self._limits = limits

    def get(self) -> PlatformLimits:
        if self._limits is None:
            raise ConfigurationError(
                "Platform configuration not initialized. "
                "The SDK must fetch configuration from the API before performing operations."
            )
        return self._limits

    def set(self, limits: PlatformLimits) -> None:
        if self._limits is not None and self._limits != limits:
            logger.warning("Platform limits changed between fetches.", previous=self._limits, current=limits)
        self._limits = limits

    def is_initialized(self) -> bool:
        return self._limits is not None

    def reset(self) -> None:
        self._limits = None


class DeployContext:
    """Everything one deploy needs, passed explicitly through the pipeline."""

    def __init__(
        self,
        limits: PlatformLimitsProvider,
        spa_checker: SPAChecker | None = None,
        options: DeployOptions | None = None,
    ) -> None:
        self.limits = limits
        self.spa_checker = spa_checker
        self.options = options or DeployOptions()

    def with_options(self, options: DeployOptions) -> "DeployContext":
        return DeployContext(self.limits, self.spa_checker, options)

    def raise_if_cancelled(self) -> None:
        signal = self.options.signal
        if signal is not None and signal.is_set():
            raise asyncio.CancelledError("Deploy cancelled.")
