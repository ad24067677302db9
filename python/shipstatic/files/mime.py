"""Extension to MIME type table.

Content types on the wire come from this table only, never from what a
runtime reports, so the same file always gets the same content type. The
table is Python's built-in `mimetypes` defaults (no system mime.types files)
with the web formats pinned explicitly.
"""
import mimetypes

DEFAULT_MIME_TYPE = "application/octet-stream"

WEB_TYPES: dict[str, str] = {
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "mjs": "application/javascript",
    "json": "application/json",
    "map": "application/json",
    "webmanifest": "application/manifest+json",
    "xml": "application/xml",
    "txt": "text/plain",
    "md": "text/markdown",
    "csv": "text/csv",
    "svg": "image/svg+xml",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "avif": "image/avif",
    "ico": "image/x-icon",
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
    "eot": "application/vnd.ms-fontobject",
    "wasm": "application/wasm",
    "pdf": "application/pdf",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "zip": "application/zip",
}

# Types browsers and other runtimes report that the stdlib table does not know.
MIME_ALIASES: dict[str, set[str]] = {
    "text/javascript": {"js", "mjs"},
    "application/x-javascript": {"js"},
    "application/gzip": {"gz", "tgz"},
    "application/x-gzip": {"gz", "tgz"},
    "image/vnd.microsoft.icon": {"ico"},
    "image/apng": {"apng"},
    "application/yaml": {"yaml", "yml"},
    "text/yaml": {"yaml", "yml"},
    "application/toml": {"toml"},
    "application/ld+json": {"jsonld"},
    "application/geo+json": {"geojson"},
    "font/collection": {"ttc"},
    "audio/mp3": {"mp3"},
    "audio/wave": {"wav"},
    "audio/x-wav": {"wav"},
}

_db = mimetypes.MimeTypes()

_EXTENSION_TO_TYPE: dict[str, str] = {}
for _strict in (False, True):
    for _ext, _type in _db.types_map[_strict].items():
        _EXTENSION_TO_TYPE.setdefault(_ext.lstrip(".").lower(), _type)
_EXTENSION_TO_TYPE.update(WEB_TYPES)

_TYPE_TO_EXTENSIONS: dict[str, set[str]] = {}
for _ext, _type in _EXTENSION_TO_TYPE.items():
    _TYPE_TO_EXTENSIONS.setdefault(_type, set()).add(_ext)
for _type in (*_db.types_map_inv[False], *_db.types_map_inv[True]):
    for _ext in _db.guess_all_extensions(_type, strict=False):
        _TYPE_TO_EXTENSIONS.setdefault(_type, set()).add(_ext.lstrip(".").lower())
for _type, _extensions in MIME_ALIASES.items():
    _TYPE_TO_EXTENSIONS.setdefault(_type, set()).update(_extensions)

KNOWN_MIME_TYPES = frozenset(_TYPE_TO_EXTENSIONS)


def extension_of(path: str) -> str:
    """Lowercased text after the last dot of the basename, or ""."""
    basename = path.rsplit("/", 1)[-1]
    if "." not in basename:
        return ""
    return basename.rsplit(".", 1)[-1].lower()


def get_mime_type(path: str) -> str:
    return _EXTENSION_TO_TYPE.get(extension_of(path), DEFAULT_MIME_TYPE)


def extensions_for(mime_type: str) -> set[str] | None:
    """Extensions registered for a MIME type, or None if it has none."""
    return _TYPE_TO_EXTENSIONS.get(mime_type)


def is_known_mime_type(mime_type: str) -> bool:
    return mime_type in KNOWN_MIME_TYPES
