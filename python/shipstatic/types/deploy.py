import asyncio
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DeployOptions(BaseModel):
    """Per-deploy options shared by both runtimes."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    path_detect: bool = True
    """Strip the common parent directory from deploy paths."""
    spa_detect: bool = True
    """Ask the platform whether this is a single-page app and add a rewrite config if so."""
    labels: list[str] = []
    via: str | None = None
    """Identifies the calling tool, e.g. "cli"."""
    signal: asyncio.Event | None = None
    """Cancellation flag. Checked before scanning and before upload only."""


class MultipartForm(BaseModel):
    """A multipart body that has not been serialized yet.

    Holds the `files=` and `data=` arguments an httpx request encodes and
    streams at send time.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    files: list[tuple[str, tuple[str, Any, str]]]
    data: dict[str, str]


class DeployBody(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    payload: bytes | MultipartForm
    headers: dict[str, str] = {}

    @property
    def is_buffered(self) -> bool:
        return isinstance(self.payload, bytes)


class Deployment(BaseModel):
    """Deployment descriptor returned by the platform."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    deployment: str
    files: int | None = None
    size: int | None = None
    status: str | None = None
    url: str | None = None
    labels: list[str] = Field(default_factory=list)
    created: int | None = None
