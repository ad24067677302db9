import hashlib

import structlog

from ..errors import FileIOError
from ..types import ByteSource, BytesSource, FileRecord, HandleSource

logger = structlog.get_logger("shipstatic.files.hashing")


def hash_bytes(data: bytes) -> str:
    """Lowercase hex MD5 of `data`. Depends on the bytes only."""
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


async def read_source(source: ByteSource, path: str) -> bytes:
    """Materialize a source, naming `path` if it cannot be read."""
    try:
        return await source.read()
    except (OSError, TypeError, ValueError) as exc:
        raise FileIOError(f"Could not read file {path}: {exc}", path=path) from exc


async def build_record(path: str, source: ByteSource) -> FileRecord:
    """Read a source fully, hash it once and freeze the result into a record.

    Buffers stay owned by the record. Handles stay opaque so a streaming
    transport can send them as they are.
    """
    data = await read_source(source, path)
    content: ByteSource = source if isinstance(source, HandleSource) else BytesSource(data=data)
    record = FileRecord(path=path, content=content, size=len(data), digest=hash_bytes(data))
    logger.debug("file_hashed", path=path, size=record.size, digest=record.digest)
    return record
