import pytest
from shipstatic.files.mime import DEFAULT_MIME_TYPE, extension_of, get_mime_type, is_known_mime_type


@pytest.mark.parametrize("path, expected", [
    ("index.html", "text/html"),
    ("assets/app.js", "application/javascript"),
    ("assets/style.CSS", "text/css"),
    ("img/logo.svg", "image/svg+xml"),
    ("fonts/inter.woff2", "font/woff2"),
    ("site.webmanifest", "application/manifest+json"),
    ("photo.jpeg", "image/jpeg"),
])
def test_web_types(path, expected):
    assert get_mime_type(path) == expected


def test_unknown_or_missing_extension():
    assert get_mime_type("LICENSE") == DEFAULT_MIME_TYPE
    assert get_mime_type("data.unknownext") == DEFAULT_MIME_TYPE


def test_extension_ignores_dots_in_directories():
    assert extension_of("v1.2/README") == ""
    assert extension_of("archive.tar.gz") == "gz"


def test_known_types():
    assert is_known_mime_type("text/plain")
    assert is_known_mime_type("image/png")
    assert not is_known_mime_type("text/not-a-real-type")


@pytest.mark.parametrize("mime_type", ["text/javascript", "application/gzip", "image/vnd.microsoft.icon"])
def test_reported_aliases_are_known(mime_type):
    assert is_known_mime_type(mime_type)
