"""Handle runtime: deploy files the caller already holds in memory."""
from typing import Any

import structlog

from ..errors import FileIOError, WrongEnvironmentError
from ..files.hashing import build_record, read_source
from ..files.junk import is_junk
from ..files.mime import get_mime_type
from ..files.paths import optimize_deploy_paths
from ..files.security import validate_deploy_file
from ..files.validation import FailFastValidator
from ..state import DeployContext
from ..types import BytesSource, CandidateFile, FileRecord, HandleSource, UploadHandle

logger = structlog.get_logger("shipstatic.ingest.handles")


def is_handle_input(value: Any) -> bool:
    return isinstance(value, UploadHandle)


def _source_for(upload: UploadHandle) -> BytesSource | HandleSource:
    if upload.is_handle():
        return HandleSource(handle=upload.content)
    return BytesSource(data=bytes(upload.content))


async def _rewindable(upload: UploadHandle) -> UploadHandle:
    """The upload itself, or an in-memory copy if its handle cannot seek.

    A handle is read once for hashing and again by the transport, so a
    one-shot stream is copied here before either happens.
    """
    if upload.is_seekable():
        return upload
    data = await read_source(HandleSource(handle=upload.content), upload.name)
    logger.debug("Copied non-seekable upload into memory.", path=upload.name, size=len(data))
    return upload.model_copy(update={"content": data, "size": None})


def _byte_size(upload: UploadHandle) -> int:
    try:
        return upload.byte_size()
    except (OSError, ValueError) as exc:
        raise FileIOError(f"Could not read file {upload.name}: {exc}", path=upload.name) from exc


def _reported_type(upload: UploadHandle) -> str:
    """Runtime-reported MIME type without parameters such as charset."""
    return (upload.mime_type or "").split(";", 1)[0].strip()


async def process_handles(uploads: list[Any], context: DeployContext) -> list[FileRecord]:
    """Filter, validate and hash in-memory uploads.

    Upload names may carry a folder structure ("site/assets/app.js"). Junk
    rules are applied relative to the folder all uploads share, so an
    uploaded "site/.well-known/..." counts as a root `.well-known`.
    """
    if not uploads or not all(is_handle_input(u) for u in uploads):
        raise WrongEnvironmentError("Invalid input for the handle runtime. Expected UploadHandle objects.")

    context.raise_if_cancelled()
    limits = context.limits.get()

    root_relative = optimize_deploy_paths([u.name for u in uploads], flatten=True)
    kept = [u for u, p in zip(uploads, root_relative) if not is_junk(p.path)]
    if not kept:
        logger.info("No deployable files found.", uploads=len(uploads))
        return []

    kept = [await _rewindable(u) for u in kept]
    deploy_paths = optimize_deploy_paths([u.name for u in kept], flatten=context.options.path_detect)

    candidates: list[tuple[UploadHandle, CandidateFile]] = []
    for upload, deploy_path in zip(kept, deploy_paths):
        validate_deploy_file(deploy_path.path, upload.name)
        candidates.append((
            upload,
            CandidateFile(
                name=deploy_path.path,
                size=_byte_size(upload),
                mime_type=_reported_type(upload) or get_mime_type(deploy_path.path),
            ),
        ))

    validator = FailFastValidator(limits, [c for _, c in candidates])
    records: list[FileRecord] = []
    for upload, candidate in candidates:
        if not validator.admit(candidate):
            continue
        records.append(await build_record(candidate.name, _source_for(upload)))

    logger.info("Prepared files from uploads.", files=len(records))
    return records
