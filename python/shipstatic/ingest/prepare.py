"""Turns any deploy input into validated file records and a deploy body."""
import os
from typing import Any

import structlog

from ..errors import BusinessRuleError, WrongEnvironmentError
from ..files.deploy_body import create_buffered_deploy_body, create_streaming_deploy_body
from ..files.spa import SPAConfigurator
from ..state import DeployContext
from ..types import DeployBody, FileRecord, UploadHandle
from .handles import is_handle_input, process_handles
from .paths import is_path_input, process_paths

logger = structlog.get_logger("shipstatic.ingest.prepare")

DeployInput = str | os.PathLike | UploadHandle | list[str | os.PathLike] | list[UploadHandle]


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, str | os.PathLike | UploadHandle):
        return [value]
    if isinstance(value, list | tuple):
        return list(value)
    raise WrongEnvironmentError(
        f"Unsupported deploy input of type {type(value).__name__}. "
        "Expected file paths or UploadHandle objects."
    )


def detect_runtime(items: list[Any]) -> str:
    """'paths' or 'handles'. Mixed or unknown inputs are rejected."""
    if not items:
        raise BusinessRuleError("No files to deploy.", rule="no_files")
    if all(is_path_input(i) for i in items):
        return "paths"
    if all(is_handle_input(i) for i in items):
        return "handles"
    raise WrongEnvironmentError(
        "Deploy input must be either all file paths or all UploadHandle objects."
    )


async def convert_deploy_input(deploy_input: DeployInput, context: DeployContext) -> list[FileRecord]:
    """Run ingestion, fail-fast validation and SPA configuration."""
    items = _as_list(deploy_input)
    runtime = detect_runtime(items)

    if runtime == "paths":
        records = await process_paths(items, context)
    else:
        records = await process_handles(items, context)

    if not records:
        raise BusinessRuleError("No files to deploy.", rule="no_files")

    configurator = SPAConfigurator(context.spa_checker, enabled=context.options.spa_detect)
    return await configurator.configure(records)


async def prepare_deploy(deploy_input: DeployInput, context: DeployContext) -> tuple[list[FileRecord], DeployBody]:
    """Records plus the body the transport sends.

    Path inputs get a fully encoded body, in-memory uploads a streamed one.
    """
    items = _as_list(deploy_input)
    runtime = detect_runtime(items)
    records = await convert_deploy_input(items, context)

    encode = create_buffered_deploy_body if runtime == "paths" else create_streaming_deploy_body
    body = await encode(records, context.options.labels, context.options.via)
    logger.info("Deploy body ready.", runtime=runtime, files=len(records), buffered=body.is_buffered)
    return records, body
