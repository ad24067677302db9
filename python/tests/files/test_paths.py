import pytest
from shipstatic.files.paths import (
    find_common_ancestor,
    normalize_slashes,
    normalize_web_path,
    optimize_deploy_paths,
)


def paths_of(raw: list[str], flatten: bool = True) -> list[str]:
    return [p.path for p in optimize_deploy_paths(raw, flatten=flatten)]


class TestFindCommonAncestor:

    def test_empty_input(self):
        assert find_common_ancestor([]) == ""

    def test_only_falsy_entries(self):
        assert find_common_ancestor(["", ""]) == ""

    def test_single_path_is_returned_as_is(self):
        assert find_common_ancestor(["/proj/dist"]) == "/proj/dist"
        assert find_common_ancestor(["proj\\dist"]) == "proj/dist"

    def test_absolute_paths_keep_leading_slash(self):
        assert find_common_ancestor(["/proj/dist", "/proj/dist/assets"]) == "/proj/dist"

    def test_relative_paths(self):
        assert find_common_ancestor(["src/components", "src/utils"]) == "src"

    def test_disjoint_roots(self):
        assert find_common_ancestor(["/home/a", "/tmp/b"]) == ""
        assert find_common_ancestor(["dist", "build"]) == ""

    def test_segments_are_compared_exactly(self):
        assert find_common_ancestor(["app/x", "application/y"]) == ""

    def test_windows_separators(self):
        assert find_common_ancestor(["C:\\work\\site\\a", "C:\\work\\site\\b"]) == "C:/work/site"

    def test_result_is_ancestor_of_every_input(self):
        dirs = ["/srv/www/site/assets/img", "/srv/www/site/assets", "/srv/www/site/js"]
        common = find_common_ancestor(dirs)
        assert common == "/srv/www/site"
        for d in dirs:
            assert d == common or d.startswith(common + "/")


class TestNormalization:

    def test_normalize_slashes_keeps_leading_slash(self):
        assert normalize_slashes("\\a\\b") == "/a/b"

    def test_normalize_web_path(self):
        assert normalize_web_path("//a//b\\c") == "a/b/c"


class TestOptimizeDeployPaths:

    def test_absolute_build_output(self):
        assert paths_of(["/proj/dist/index.html", "/proj/dist/assets/app.js"]) == ["index.html", "assets/app.js"]

    def test_vite_build_output(self):
        raw = [
            "dist/index.html",
            "dist/vite.svg",
            "dist/assets/browser-SQEQcwkt.js",
            "dist/assets/style-CuqkljXd.css",
        ]
        assert paths_of(raw) == [
            "index.html",
            "vite.svg",
            "assets/browser-SQEQcwkt.js",
            "assets/style-CuqkljXd.css",
        ]

    def test_nested_project_strips_only_shared_part(self):
        raw = [
            "project/src/components/Header.tsx",
            "project/src/utils/helpers.ts",
            "project/public/favicon.ico",
        ]
        assert paths_of(raw) == ["src/components/Header.tsx", "src/utils/helpers.ts", "public/favicon.ico"]

    def test_root_level_file_disables_flattening(self):
        raw = ["file1.txt", "file2.txt", "subdir/file3.txt"]
        assert paths_of(raw) == raw

    def test_single_file_in_directory(self):
        assert paths_of(["dist/index.html"]) == ["index.html"]

    def test_preserve_structure(self):
        raw = ["dist/index.html", "dist\\assets\\app.js", "/dist/robots.txt"]
        assert paths_of(raw, flatten=False) == ["dist/index.html", "dist/assets/app.js", "dist/robots.txt"]

    def test_names_are_returned(self):
        result = optimize_deploy_paths(["dist\\assets\\app.js", "dist/index.html"])
        assert [p.name for p in result] == ["app.js", "index.html"]

    @pytest.mark.parametrize("flatten", [True, False])
    def test_output_is_aligned_with_input(self, flatten):
        raw = ["a/b/c.txt", "a/b/d/e.txt", "a/b/f.txt"]
        assert len(optimize_deploy_paths(raw, flatten=flatten)) == len(raw)
