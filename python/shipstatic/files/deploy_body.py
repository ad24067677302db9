"""Multipart deploy bodies.

Wire format (multipart/form-data):

    files[]    one part per record, content type from the extension table
    checksums  JSON array of MD5 digests, aligned with the file parts
    labels     JSON array of strings, omitted when empty
    via        calling tool, omitted when unset

The path runtime gets a fully encoded body with an explicit Content-Length.
The handle runtime gets a `MultipartForm` that httpx encodes and streams at
send time; its part filenames carry no leading slash.
"""
import json
from typing import Any

import httpx

from ..types import DeployBody, FileRecord, HandleSource, MultipartForm
from .mime import get_mime_type

FILES_FIELD = "files[]"
CHECKSUMS_FIELD = "checksums"
LABELS_FIELD = "labels"
VIA_FIELD = "via"

# httpx only encodes multipart bodies as part of a request. The request is
# never sent.
_ENCODING_URL = "http://deploy-body.invalid/"


def _form_data(records: list[FileRecord], labels: list[str] | None, via: str | None) -> dict[str, str]:
    data = {CHECKSUMS_FIELD: json.dumps([r.digest for r in records])}
    if labels:
        data[LABELS_FIELD] = json.dumps(list(labels))
    if via:
        data[VIA_FIELD] = via
    return data


async def create_buffered_deploy_body(
    records: list[FileRecord],
    labels: list[str] | None = None,
    via: str | None = None,
) -> DeployBody:
    """Encode the whole multipart body into bytes up front."""
    files: list[tuple[str, tuple[str, bytes, str]]] = []
    for record in records:
        content = await record.content.read()
        filename = record.path if record.path.startswith("/") else f"/{record.path}"
        files.append((FILES_FIELD, (filename, content, get_mime_type(record.path))))

    request = httpx.Request("POST", _ENCODING_URL, files=files, data=_form_data(records, labels, via))
    payload = request.read()
    return DeployBody(
        payload=payload,
        headers={
            "Content-Type": request.headers["Content-Type"],
            "Content-Length": str(len(payload)),
        },
    )


async def create_streaming_deploy_body(
    records: list[FileRecord],
    labels: list[str] | None = None,
    via: str | None = None,
) -> DeployBody:
    """Describe the multipart body without encoding it.

    Handle-backed records are passed through as file objects so the transport
    streams them instead of copying them into memory again.
    """
    files: list[tuple[str, tuple[str, Any, str]]] = []
    for record in records:
        if isinstance(record.content, HandleSource):
            content: Any = record.content.handle
            seekable = getattr(content, "seekable", None)
            if callable(seekable) and seekable():
                content.seek(0)
        else:
            content = await record.content.read()
        files.append((FILES_FIELD, (record.path.lstrip("/"), content, get_mime_type(record.path))))

    return DeployBody(
        payload=MultipartForm(files=files, data=_form_data(records, labels, via)),
        headers={},
    )
