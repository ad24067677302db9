"""Path runtime: deploy files found on the local filesystem."""
import asyncio
import os
from pathlib import Path
from typing import Any

import structlog

from ..errors import FileIOError, WrongEnvironmentError
from ..files.hashing import build_record
from ..files.junk import is_junk
from ..files.mime import get_mime_type
from ..files.paths import find_common_ancestor, normalize_slashes, optimize_deploy_paths
from ..files.security import validate_deploy_file
from ..files.validation import FailFastValidator
from ..state import DeployContext
from ..types import BytesSource, CandidateFile, FileRecord

logger = structlog.get_logger("shipstatic.ingest.paths")


def is_path_input(value: Any) -> bool:
    return isinstance(value, str | os.PathLike)


def _directory_key(path: str) -> tuple[int, int] | str:
    """Identity of a directory after resolving symlinks."""
    try:
        st = os.stat(path)
    except OSError:
        return os.path.realpath(path)
    if st.st_ino:
        return (st.st_dev, st.st_ino)
    return os.path.realpath(path)


def _sorted_entries(directory: str) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as exc:
        raise FileIOError(f"Could not read directory {directory}: {exc}", path=directory) from exc


def walk_files(root: str) -> list[str]:
    """All regular files under `root`, depth first, entries in name order.

    Directory symlinks are followed. A directory reached a second time (a
    symlink cycle or two links to one target) is skipped.
    """
    visited = {_directory_key(root)}
    results: list[str] = []
    stack = [iter(_sorted_entries(root))]
    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue
        try:
            if entry.is_dir():
                key = _directory_key(entry.path)
                if key in visited:
                    logger.debug("Skipping already visited directory.", path=entry.path)
                    continue
                visited.add(key)
                stack.append(iter(_sorted_entries(entry.path)))
            elif entry.is_file():
                results.append(entry.path)
        except OSError as exc:
            raise FileIOError(f"Could not read {entry.path}: {exc}", path=entry.path) from exc
    return results


def discover_files(inputs: list[str]) -> tuple[list[str], str]:
    """Expand input paths into unique absolute file paths.

    Also returns the base directory deploy paths are made relative to: the
    common ancestor of the inputs' directories.
    """
    discovered: list[str] = []
    input_dirs: list[str] = []
    for raw in inputs:
        absolute = os.path.abspath(raw)
        if os.path.isdir(absolute):
            discovered.extend(walk_files(absolute))
            input_dirs.append(absolute)
        elif os.path.isfile(absolute):
            discovered.append(absolute)
            input_dirs.append(os.path.dirname(absolute))
        else:
            raise FileIOError(f"Path does not exist: {raw}", path=str(raw))

    unique = list(dict.fromkeys(discovered))
    base = find_common_ancestor([normalize_slashes(d) for d in input_dirs])
    return unique, base


def _relative_path(file_path: str, base: str) -> str:
    if base:
        rel = os.path.relpath(file_path, base)
        if rel and not rel.startswith(".."):
            return normalize_slashes(rel)
    return os.path.basename(file_path)


async def _read_file(path: str) -> bytes:
    try:
        return await asyncio.to_thread(Path(path).read_bytes)
    except OSError as exc:
        raise FileIOError(f"Could not read file {path}: {exc}", path=path) from exc


async def process_paths(inputs: list[Any], context: DeployContext) -> list[FileRecord]:
    """Scan, filter, validate and hash files from filesystem paths.

    Fails fast: the first unsafe path or broken limit raises and nothing is
    returned. Empty files are skipped.
    """
    if not inputs or not all(is_path_input(p) for p in inputs):
        raise WrongEnvironmentError("Invalid input for the path runtime. Expected file or directory paths.")

    context.raise_if_cancelled()
    limits = context.limits.get()

    files, base = discover_files([os.fspath(p) for p in inputs])
    kept: list[tuple[str, str]] = []
    for file_path in files:
        rel = _relative_path(file_path, base)
        if not is_junk(rel):
            kept.append((rel, file_path))
    if not kept:
        logger.info("No deployable files found.", inputs=[os.fspath(p) for p in inputs])
        return []

    deploy_paths = optimize_deploy_paths([rel for rel, _ in kept], flatten=context.options.path_detect)

    candidates: list[tuple[str, CandidateFile]] = []
    for (_, source_path), deploy_path in zip(kept, deploy_paths):
        validate_deploy_file(deploy_path.path, source_path)
        try:
            size = os.stat(source_path).st_size
        except OSError as exc:
            raise FileIOError(f"Could not read file {source_path}: {exc}", path=source_path) from exc
        candidates.append((
            source_path,
            CandidateFile(name=deploy_path.path, size=size, mime_type=get_mime_type(deploy_path.path)),
        ))

    validator = FailFastValidator(limits, [c for _, c in candidates])
    records: list[FileRecord] = []
    for source_path, candidate in candidates:
        if not validator.admit(candidate):
            continue
        data = await _read_file(source_path)
        records.append(await build_record(candidate.name, BytesSource(data=data)))

    logger.info("Prepared files from paths.", files=len(records), base=base)
    return records
