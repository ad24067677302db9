"""Security checks run on every deploy path before any of its bytes are read."""
import re

from ..errors import SecurityViolationError

_UNSAFE_CHARS = re.compile(r"""[?&#%<>\[\]{}|\\^~`;$()'"*\r\n\t]""")
_RESERVED_NAMES = re.compile(r"^(CON|PRN|AUX|NUL|COM[1-9]|LPT[1-9])(\.|$)", re.IGNORECASE)

BLOCKED_EXTENSIONS = frozenset({
    "exe", "msi", "dll", "bat", "cmd", "com", "scr", "vbs",
    "ps1", "sh", "jar", "app", "deb", "rpm", "dmg", "pkg",
})


def has_traversal(path: str) -> bool:
    """Whether any `/` or `\\` separated segment is `..`."""
    return ".." in re.split(r"[/\\]", path)


def check_file_name(name: str | None) -> str | None:
    """Return why `name` is not a safe deploy path, or None if it is.

    `name` may be a nested relative path; every segment is checked.
    """
    if not name or not name.strip():
        return "File name cannot be empty"
    if "\0" in name:
        return "File name contains invalid characters (null byte)"
    if has_traversal(name):
        return "File name contains path traversal pattern"
    if _UNSAFE_CHARS.search(name):
        return "File name contains unsafe characters"

    for segment in name.split("/"):
        if not segment:
            continue
        if segment != segment.strip():
            return "File name cannot start/end with spaces"
        if segment.endswith("."):
            return "File name cannot end with dots"
        if _RESERVED_NAMES.match(segment):
            return "File name uses a reserved system name"
    return None


def is_blocked_extension(path: str) -> bool:
    basename = path.rsplit("/", 1)[-1]
    if basename.startswith(".") or "." not in basename:
        return False
    return basename.rsplit(".", 1)[-1].lower() in BLOCKED_EXTENSIONS


def validate_deploy_path(deploy_path: str, source: str) -> None:
    """Reject null bytes and `..` segments.

    Double dots inside a name ("foo..bar.txt") are fine.
    """
    if "\0" in deploy_path or has_traversal(deploy_path):
        raise SecurityViolationError(
            f'Security error: Unsafe file path "{deploy_path}" for file: {source}',
            path=deploy_path,
        )


def validate_deploy_file(deploy_path: str, source: str) -> None:
    """Run every path and name check. Raises on the first failure."""
    validate_deploy_path(deploy_path, source)
    reason = check_file_name(deploy_path)
    if reason is not None:
        raise SecurityViolationError(f'{reason}: "{source}"', path=deploy_path)
    if is_blocked_extension(deploy_path):
        raise SecurityViolationError(f'File extension not allowed: "{source}"', path=deploy_path)
