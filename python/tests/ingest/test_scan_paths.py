import asyncio
import os

import pytest
from shipstatic.errors import (
    BusinessRuleError,
    ConfigurationError,
    FileIOError,
    SecurityViolationError,
    WrongEnvironmentError,
)
from shipstatic.files.hashing import hash_bytes
from shipstatic.ingest.paths import discover_files, process_paths, walk_files
from shipstatic.state import DeployContext, PlatformLimits, PlatformLimitsProvider
from shipstatic.types import BytesSource, UploadHandle

MB = 1024 * 1024


def write(root, relative: str, data: bytes = b"content") -> str:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return str(path)


@pytest.fixture
def site(tmp_path):
    root = tmp_path / "dist"
    write(root, "index.html", b"<html>home</html>")
    write(root, "assets/app.js", b"console.log('app')")
    write(root, "assets/style.css", b"body{}")
    return root


class TestWalk:

    def test_files_in_name_order(self, site):
        files = walk_files(str(site))
        assert [os.path.relpath(f, site) for f in files] == [
            os.path.join("assets", "app.js"),
            os.path.join("assets", "style.css"),
            "index.html",
        ]

    def test_symlink_cycle_is_skipped(self, site):
        os.symlink(site, site / "assets" / "loop")
        files = walk_files(str(site))
        assert len(files) == 3

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileIOError, match="Path does not exist"):
            discover_files([str(tmp_path / "nope")])

    def test_base_of_a_single_file_is_its_directory(self, site):
        files, base = discover_files([str(site / "index.html")])
        assert files == [str(site / "index.html")]
        assert base == str(site)


class TestProcessPaths:

    @pytest.mark.asyncio
    async def test_directory(self, site, make_context):
        records = await process_paths([str(site)], make_context())

        assert [r.path for r in records] == ["assets/app.js", "assets/style.css", "index.html"]
        index = records[-1]
        assert isinstance(index.content, BytesSource)
        assert await index.content.read() == b"<html>home</html>"
        assert index.size == len(b"<html>home</html>")
        assert index.digest == hash_bytes(b"<html>home</html>")

    @pytest.mark.asyncio
    async def test_accepts_path_objects(self, site, make_context):
        records = await process_paths([site], make_context())
        assert len(records) == 3

    @pytest.mark.asyncio
    async def test_common_directory_is_stripped(self, site, make_context):
        records = await process_paths([str(site / "assets")], make_context())
        assert [r.path for r in records] == ["app.js", "style.css"]

    @pytest.mark.asyncio
    async def test_nested_common_directory_is_stripped(self, tmp_path, make_context):
        write(tmp_path, "build/static/js/main.js")
        write(tmp_path, "build/static/css/main.css")
        records = await process_paths([str(tmp_path / "build")], make_context())
        assert [r.path for r in records] == ["css/main.css", "js/main.js"]

    @pytest.mark.asyncio
    async def test_structure_preserved_without_path_detect(self, tmp_path, make_context):
        write(tmp_path, "build/static/js/main.js")
        write(tmp_path, "build/static/css/main.css")
        records = await process_paths([str(tmp_path / "build")], make_context(path_detect=False))
        assert [r.path for r in records] == ["static/css/main.css", "static/js/main.js"]

    @pytest.mark.asyncio
    async def test_several_inputs(self, tmp_path, make_context):
        a = write(tmp_path, "site/a/one.txt")
        b = write(tmp_path, "site/b/two.txt")
        records = await process_paths([a, b], make_context())
        assert [r.path for r in records] == ["a/one.txt", "b/two.txt"]

    @pytest.mark.asyncio
    async def test_duplicate_inputs_are_deployed_once(self, site, make_context):
        records = await process_paths([str(site), str(site / "index.html")], make_context())
        assert [r.path for r in records].count("index.html") == 1

    @pytest.mark.asyncio
    async def test_junk_and_dot_files_are_dropped(self, site, make_context):
        write(site, ".DS_Store")
        write(site, ".env", b"SECRET=1")
        write(site, ".git/config")
        write(site, "__MACOSX/._index.html")
        write(site, "assets/Thumbs.db")
        write(site, "notes.txt~")

        records = await process_paths([str(site)], make_context())

        assert [r.path for r in records] == ["assets/app.js", "assets/style.css", "index.html"]

    @pytest.mark.asyncio
    async def test_root_well_known_is_kept(self, site, make_context):
        write(site, ".well-known/security.txt")
        write(site, "assets/.well-known/hidden.txt")

        records = await process_paths([str(site)], make_context())

        paths = [r.path for r in records]
        assert ".well-known/security.txt" in paths
        assert "assets/.well-known/hidden.txt" not in paths

    @pytest.mark.asyncio
    async def test_dot_directories_above_the_input_do_not_matter(self, tmp_path, make_context):
        write(tmp_path, ".cache/site/index.html")
        records = await process_paths([str(tmp_path / ".cache" / "site")], make_context())
        assert [r.path for r in records] == ["index.html"]

    @pytest.mark.asyncio
    async def test_only_junk(self, tmp_path, make_context):
        write(tmp_path, "site/.DS_Store")
        assert await process_paths([str(tmp_path / "site")], make_context()) == []

    @pytest.mark.asyncio
    async def test_empty_files_are_skipped(self, site, make_context):
        write(site, "empty.txt", b"")
        records = await process_paths([str(site)], make_context())
        assert "empty.txt" not in [r.path for r in records]

    @pytest.mark.asyncio
    async def test_file_too_large(self, site, make_context):
        write(site, "big.bin", b"x" * 2048)
        limits = PlatformLimits(
            max_file_size=1024,
            max_files_count=100,
            max_total_size=10 * MB,
            allowed_mime_types=["text/", "application/"],
        )
        with pytest.raises(BusinessRuleError, match="exceeds limit") as exc_info:
            await process_paths([str(site)], make_context(limits_override=limits))
        assert exc_info.value.path == "big.bin"

    @pytest.mark.asyncio
    async def test_too_many_files(self, site, make_context):
        limits = PlatformLimits(
            max_file_size=MB,
            max_files_count=2,
            max_total_size=10 * MB,
            allowed_mime_types=["text/", "application/"],
        )
        with pytest.raises(BusinessRuleError, match="Number of files"):
            await process_paths([str(site)], make_context(limits_override=limits))

    @pytest.mark.asyncio
    async def test_unsafe_name(self, site, make_context):
        write(site, "what?.html")
        with pytest.raises(SecurityViolationError, match="unsafe characters"):
            await process_paths([str(site)], make_context())

    @pytest.mark.asyncio
    async def test_blocked_extension(self, site, make_context):
        write(site, "install.sh", b"#!/bin/sh")
        with pytest.raises(SecurityViolationError, match="extension not allowed"):
            await process_paths([str(site)], make_context())

    @pytest.mark.asyncio
    async def test_handles_are_rejected(self, make_context):
        with pytest.raises(WrongEnvironmentError):
            await process_paths([UploadHandle(name="a.txt", content=b"a")], make_context())

    @pytest.mark.asyncio
    async def test_cancelled_before_scan(self, site, make_context):
        signal = asyncio.Event()
        signal.set()
        with pytest.raises(asyncio.CancelledError):
            await process_paths([str(site)], make_context(signal=signal))

    @pytest.mark.asyncio
    async def test_limits_must_be_loaded(self, site):
        with pytest.raises(ConfigurationError):
            await process_paths([str(site)], DeployContext(PlatformLimitsProvider()))


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["config.toml", "main.ts", "data.yaml", "sitemap.xml.gz"])
async def test_unlisted_extensions_are_deployed(tmp_path, make_context, name):
    write(tmp_path, "site/index.html", b"<html></html>")
    write(tmp_path, f"site/{name}", b"payload")

    records = await process_paths([str(tmp_path / "site")], make_context())

    assert sorted(r.path for r in records) == sorted(["index.html", name])
