"""Filtering of OS and editor artifacts out of deploy file lists.

A path is dropped when:
- any segment is a junk directory (resource forks, trash and index folders),
- its basename is a known junk file (.DS_Store, Thumbs.db, AppleDouble files...),
- any segment starts with a dot, except a top-level `.well-known` directory (RFC 8615),
- any segment is longer than 255 characters.

Dot files are dropped because they usually hold configuration or secrets
(.env, .git) that must never be served.
"""
import re

from .paths import normalize_slashes

JUNK_DIRECTORIES = frozenset(
    name.lower()
    for name in (
        "__MACOSX",
        ".Trashes",
        ".fseventsd",
        ".Spotlight-V100",
        "$RECYCLE.BIN",
        "@eaDir",
    )
)

_JUNK_BASENAMES = re.compile(
    "|".join((
        r"^npm-debug\.log$",
        r"^\..*\.swp$",
        r"^\.DS_Store$",
        r"^\.AppleDouble$",
        r"^\.LSOverride$",
        r"^Icon\r$",
        r"^\._.*",
        r"^\.Spotlight-V100$",
        r"\.Trashes",
        r"^__MACOSX$",
        r"~$",
        r"^Thumbs\.db$",
        r"^ehthumbs\.db$",
        r"^[Dd]esktop\.ini$",
        r"@eaDir$",
    ))
)

WELL_KNOWN_DIRECTORY = ".well-known"
MAX_SEGMENT_LENGTH = 255


def is_junk_name(basename: str) -> bool:
    return bool(_JUNK_BASENAMES.search(basename))


def is_junk(path: str | None) -> bool:
    if not path:
        return True

    parts = [p for p in normalize_slashes(path).split("/") if p]
    if not parts:
        return False

    if any(part.lower() in JUNK_DIRECTORIES for part in parts):
        return True

    if is_junk_name(parts[-1]):
        return True

    for index, part in enumerate(parts):
        if part.startswith(".") and not (index == 0 and part == WELL_KNOWN_DIRECTORY):
            return True

    return any(len(part) > MAX_SEGMENT_LENGTH for part in parts)


def filter_junk(paths: list[str] | None) -> list[str]:
    """Keep the paths that are not junk, in their original order and form."""
    if not paths:
        return []
    return [p for p in paths if not is_junk(p)]
