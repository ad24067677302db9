import asyncio
from typing import Any, Literal

import httpx
import structlog

from ..errors import PlatformError
from ..state import PlatformLimits, ShipConfig
from ..types import Deployment, DeployBody, FileRecord, MultipartForm

logger = structlog.get_logger("shipstatic.platform.client")

ENDPOINTS = {
    "deployments": "/deployments",
    "config": "/config",
    "ping": "/ping",
    "spa_check": "/spa-check",
}

SPA_INDEX_MAX_SIZE = 100 * 1024


def _error_message(exc: httpx.HTTPStatusError) -> str:
    try:
        error_body = exc.response.json()
    except Exception:
        error_body = exc.response.text
    return (
        f"\n"
        f"  URL: {exc.request.url}\n"
        f"  Status: {exc.response.status_code} {exc.response.reason_phrase}\n"
        f"  Response body: {error_body or None}"
    )


class ApiClient:
    """Thin async client for the Ship platform API.

    Retries 429s, 5xx responses and network errors with exponential backoff.
    Other 4xx responses fail immediately with a PlatformError.
    """

    def __init__(
        self,
        config: ShipConfig,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.max_retries = max_retries
        self._client = httpx.AsyncClient(
            base_url=config.api_url,
            timeout=httpx.Timeout(config.timeout, read=None),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: Literal["GET", "POST"],
        path: str,
        headers: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        content: bytes | None = None,
        files: list[tuple[str, tuple[str, Any, str]]] | None = None,
        data: dict[str, str] | None = None,
    ) -> httpx.Response:
        headers = {**(headers or {}), **self.config.auth_headers}
        payload_kwargs: dict[str, Any] = {}
        if json is not None:
            payload_kwargs["json"] = json
        elif content is not None:
            payload_kwargs["content"] = content
        elif files is not None:
            payload_kwargs["files"] = files
            payload_kwargs["data"] = data

        for attempt in range(self.max_retries + 1):
            try:
                res = await self._client.request(method, path, headers=headers, **payload_kwargs)
                res.raise_for_status()
                return res
            except httpx.HTTPStatusError as exc:
                status_code = exc.response.status_code
                if (400 <= status_code < 500 and status_code != 429) or attempt == self.max_retries:
                    raise PlatformError(_error_message(exc)) from exc
                wait_time = 0.1 * (2 ** attempt)
                logger.warning(
                    f"Request failed, retrying in {wait_time:.1f}s",
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    status_code=status_code,
                )
                await asyncio.sleep(wait_time)
            except httpx.TransportError as exc:
                if attempt == self.max_retries:
                    raise PlatformError(f"Request to {path} failed: {exc}") from exc
                wait_time = 0.1 * (2 ** attempt)
                logger.warning(
                    f"Request failed, retrying in {wait_time:.1f}s",
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    error=str(exc),
                )
                await asyncio.sleep(wait_time)
        raise PlatformError(f"Request to {path} failed.")

    async def get_config(self) -> PlatformLimits:
        res = await self._request("GET", ENDPOINTS["config"])
        return PlatformLimits.model_validate(res.json())

    async def ping(self) -> bool:
        res = await self._request("GET", ENDPOINTS["ping"])
        return bool(res.json().get("success", False))

    async def check_spa(self, records: list[FileRecord]) -> bool:
        """Ask the platform whether `records` look like a single-page app.

        Without a root index.html, or with one over 100 KiB, the answer is
        False and no request is made.
        """
        index = next((r for r in records if r.path in ("index.html", "/index.html")), None)
        if index is None or index.size > SPA_INDEX_MAX_SIZE:
            return False
        index_content = (await index.content.read()).decode("utf-8", errors="replace")
        res = await self._request(
            "POST",
            ENDPOINTS["spa_check"],
            json={"files": [r.path for r in records], "index": index_content},
        )
        return bool(res.json().get("isSPA", False))

    async def create_deployment(self, body: DeployBody) -> Deployment:
        if isinstance(body.payload, MultipartForm):
            res = await self._request(
                "POST",
                ENDPOINTS["deployments"],
                headers=body.headers,
                files=body.payload.files,
                data=body.payload.data,
            )
        else:
            res = await self._request("POST", ENDPOINTS["deployments"], headers=body.headers, content=body.payload)
        return Deployment.model_validate(res.json())
