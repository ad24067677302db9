"""Byte sources backing deploy files.

A file's bytes come either from an owned buffer (read from disk by the path
runtime) or from an opaque binary handle (an in-memory upload handed over by
the caller). The kind is decided once at the ingestion boundary; everything
downstream only calls `read()`.
"""
import asyncio
from typing import Annotated, Any, BinaryIO, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class BytesSource(BaseModel):
    """Owned, already materialized bytes."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bytes"] = "bytes"
    data: bytes

    async def read(self) -> bytes:
        return self.data


class HandleSource(BaseModel):
    """An opaque binary file-like object owned by the caller."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["handle"] = "handle"
    handle: Any

    async def read(self) -> bytes:
        """Read the whole handle from its start.

        The handle is rewound afterwards so a transport can stream it again.
        """
        return await asyncio.to_thread(self._read_all)

    def _read_all(self) -> bytes:
        handle: BinaryIO = self.handle
        seekable = getattr(handle, "seekable", None)
        can_seek = bool(seekable()) if callable(seekable) else False
        if can_seek:
            handle.seek(0)
        data = handle.read()
        if can_seek:
            handle.seek(0)
        if isinstance(data, str):
            raise TypeError("Upload handles must be opened in binary mode.")
        return bytes(data)


ByteSource = Annotated[BytesSource | HandleSource, Field(discriminator="kind")]
byte_source_adapter = TypeAdapter(ByteSource)
