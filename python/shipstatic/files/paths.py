"""Deploy path optimization.

Local paths are turned into clean deployment paths by normalizing separators
and, unless asked to preserve the structure, stripping the directory every
file shares:

    >>> [p.path for p in optimize_deploy_paths(["dist/index.html", "dist/assets/app.js"])]
    ['index.html', 'assets/app.js']
"""
import re
from typing import NamedTuple

_REPEATED_SLASHES = re.compile(r"/+")


class DeployPath(NamedTuple):
    path: str
    """Deployment path, e.g. "assets/style.css"."""
    name: str
    """Original file name."""


def normalize_slashes(path: str) -> str:
    """Convert backslashes to forward slashes. Leading slashes are kept."""
    return path.replace("\\", "/")


def normalize_web_path(path: str) -> str:
    """Forward slashes, no repeated slashes, no leading slash."""
    return _REPEATED_SLASHES.sub("/", normalize_slashes(path)).lstrip("/")


def _segments(path: str) -> list[str]:
    path = normalize_slashes(path)
    if path.startswith("/"):
        path = path[1:]
    return [s for s in path.split("/") if s]


def find_common_ancestor(paths: list[str]) -> str:
    """Longest common directory prefix of all paths, compared segment by segment.

    Returns "" when there is nothing in common, so callers never flatten in
    that case. A single path is returned as is (normalized). The result keeps
    a leading slash only when every input had one.
    """
    if not paths:
        return ""
    normalized = [normalize_slashes(p) for p in paths if p]
    if not normalized:
        return ""
    if len(normalized) == 1:
        return normalized[0]

    split = [_segments(p) for p in normalized]
    common: list[str] = []
    for level in zip(*split):
        if any(segment != level[0] for segment in level[1:]):
            break
        common.append(level[0])

    if not common:
        return ""
    prefix = "/".join(common)
    if all(p.startswith("/") for p in normalized):
        return f"/{prefix}"
    return prefix


def _file_name(path: str) -> str:
    return re.split(r"[/\\]", path)[-1] or path


def _directory(web_path: str) -> str:
    head, sep, _ = web_path.rpartition("/")
    return head if sep else ""


def optimize_deploy_paths(raw_paths: list[str], flatten: bool = True) -> list[DeployPath]:
    """Normalize raw paths and, if `flatten`, strip their common parent directory.

    With `flatten=False` the directory structure is preserved, which is what
    already-built artifacts (bundler output) want.
    """
    web_paths = [normalize_web_path(p) for p in raw_paths]
    if not flatten:
        return [DeployPath(path, _file_name(raw)) for path, raw in zip(web_paths, raw_paths)]

    directories = [_directory(p) for p in web_paths]
    # A file sitting at the root means there is no shared parent to strip.
    common = find_common_ancestor(directories) if directories and all(directories) else ""
    prefix = f"{common.rstrip('/')}/" if common else ""

    results: list[DeployPath] = []
    for deploy_path, raw in zip(web_paths, raw_paths):
        if prefix and deploy_path.startswith(prefix):
            deploy_path = deploy_path[len(prefix):]
        if not deploy_path:
            deploy_path = _file_name(raw)
        results.append(DeployPath(deploy_path, _file_name(raw)))
    return results
