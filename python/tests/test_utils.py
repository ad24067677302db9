import pytest
from shipstatic.utils import format_file_size, pluralize


@pytest.mark.parametrize("num_bytes, expected", [
    (0, "0 Bytes"),
    (512, "512 Bytes"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (5_000_000, "4.8 MB"),
    (10 * 1024 * 1024, "10 MB"),
    (3 * 1024 ** 3, "3 GB"),
])
def test_format_file_size(num_bytes, expected):
    assert format_file_size(num_bytes) == expected


def test_format_file_size_decimals():
    assert format_file_size(5_000_000, decimals=2) == "4.77 MB"


def test_pluralize():
    assert pluralize(1, "file", "files") == "1 file"
    assert pluralize(0, "file", "files") == "0 files"
    assert pluralize(3, "file", "files", include_count=False) == "files"
