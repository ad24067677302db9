import io
import re
from typing import Any, BinaryIO

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .source import ByteSource

_MD5_RE = re.compile(r"^[0-9a-f]{32}$")


class FileRecord(BaseModel):
    """A validated, content-addressed file ready to be uploaded.

    `size` and `digest` are derived from `content` once, when the record is
    built, and the model is frozen so they are never recomputed.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    """Forward-slash deployment path, relative, e.g. "assets/app.js"."""
    content: ByteSource
    size: int = Field(ge=0)
    digest: str
    """Lowercase hex MD5 of the content."""

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v:
            raise ValueError("File path cannot be empty")
        if "\\" in v:
            raise ValueError("File path must use forward slashes")
        for segment in v.split("/"):
            if segment == "..":
                raise ValueError("File path cannot contain traversal segments")
            if len(segment) > 255:
                raise ValueError("File path segment exceeds 255 characters")
        return v

    @field_validator("digest")
    @classmethod
    def validate_digest(cls, v: str) -> str:
        if not _MD5_RE.match(v):
            raise ValueError("Digest must be a lowercase hex MD5")
        return v


class UploadHandle(BaseModel):
    """An in-memory file handed to the SDK by its caller.

    This is the handle runtime's input: typically what a web framework gives
    back for a multipart upload. `name` may carry a relative directory path
    (e.g. "dist/assets/app.js") when a whole folder was uploaded.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    content: bytes | Any
    """Raw bytes or a binary file-like object."""
    mime_type: str | None = None
    """MIME type reported by the runtime. Never used for the wire format."""
    size: int | None = None

    def byte_size(self) -> int:
        """Size in bytes without consuming the handle.

        Raises io.UnsupportedOperation for a handle that cannot seek and has no
        reported size.
        """
        if self.size is not None:
            return self.size
        if isinstance(self.content, bytes | bytearray | memoryview):
            return len(self.content)
        if not self.is_seekable():
            raise io.UnsupportedOperation(f"Cannot size a non-seekable handle: {self.name}")
        handle: BinaryIO = self.content
        position = handle.tell()
        handle.seek(0, 2)
        end = handle.tell()
        handle.seek(position)
        return end

    def is_handle(self) -> bool:
        return not isinstance(self.content, bytes | bytearray | memoryview)

    def is_seekable(self) -> bool:
        if not self.is_handle():
            return True
        seekable = getattr(self.content, "seekable", None)
        return bool(seekable()) if callable(seekable) else False