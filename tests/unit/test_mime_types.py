"""
Unit tests for MIME type detection.
"""

import pytest

from bws.http.mime_types import get_content_type, get_extension, DEFAULT_MIME_TYPE


@pytest.mark.parametrize("path,expected", [
    ("/www/photo.jpeg", "image/jpeg"),
    ("/www/photo.jpg", "image/jpeg"),
    ("/www/logo.png", "image/png"),
    ("/www/anim.gif", "image/gif"),
    ("/www/style.css", "text/css"),
    ("/www/app.js", "text/javascript"),
    ("/www/notes.txt", "text/plain"),
    ("/www/index.html", "text/html"),
    ("/www/index.htm", "text/html"),
])
def test_known_extensions(path, expected):
    assert get_content_type(path) == expected


@pytest.mark.parametrize("path", [
    "/www/LOGO.PNG",
    "/www/archive.tar.gz",
    "/www/README",
    "/www/trailing.",
])
def test_unknown_falls_back_to_html(path):
    assert get_content_type(path) == DEFAULT_MIME_TYPE == "text/html"


def test_extension_is_after_last_dot_of_whole_path():
    assert get_extension("/srv/www.v2/readme") == "v2/readme"
    assert get_extension("/www/a.b.css") == "css"
