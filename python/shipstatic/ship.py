from typing import Any

import httpx
import structlog

from .files.validation import validate_files
from .ingest import DeployInput, prepare_deploy
from .platform import ApiClient
from .state import DeployContext, PlatformLimits, PlatformLimitsProvider, ShipConfig
from .types import CandidateFile, Deployment, DeployOptions, FileRecord, ValidationOutcome

logger = structlog.get_logger("shipstatic.ship")


class Ship:
    """Ship SDK client.

    >>> async with Ship(api_key="ship-...") as ship:
    ...     deployment = await ship.deploy("./dist")

    Platform limits are fetched once per client, on the first operation that
    needs them (or explicitly with `init()`).
    """

    def __init__(
        self,
        config: ShipConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        self.config = config or ShipConfig(**kwargs)
        self.api = ApiClient(self.config, transport=transport)
        self.limits = PlatformLimitsProvider()

    async def __aenter__(self) -> "Ship":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.api.aclose()

    async def init(self) -> PlatformLimits:
        """Fetch platform limits unless this client already has them."""
        if not self.limits.is_initialized():
            self.limits.set(await self.api.get_config())
            logger.debug("Platform limits loaded.", limits=self.limits.get().model_dump())
        return self.limits.get()

    def context(self, options: DeployOptions | None = None) -> DeployContext:
        return DeployContext(self.limits, spa_checker=self.api, options=options)

    async def prepare(self, deploy_input: DeployInput, options: DeployOptions | None = None) -> list[FileRecord]:
        """Run the pipeline without uploading anything."""
        await self.init()
        records, _ = await prepare_deploy(deploy_input, self.context(options))
        return records

    async def deploy(self, deploy_input: DeployInput, options: DeployOptions | None = None) -> Deployment:
        await self.init()
        context = self.context(options)
        _, body = await prepare_deploy(deploy_input, context)
        context.raise_if_cancelled()
        deployment = await self.api.create_deployment(body)
        logger.info("Deployment created.", deployment=deployment.deployment, url=deployment.url)
        return deployment

    async def validate_files(self, candidates: list[CandidateFile]) -> ValidationOutcome:
        """Pre-flight validation of a whole candidate set (all or nothing)."""
        return validate_files(candidates, await self.init())

    async def ping(self) -> bool:
        return await self.api.ping()
