"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps a resolved file path to the Content-Type sent with it.

The table is deliberately small. Anything it does not know, including
files with no extension at all, is served as text/html.

=============================================================================
EXTENSION RULES
=============================================================================

    The extension is the text after the LAST "." in the whole path, and
    the match is exact (case-sensitive):

        /srv/www/logo.png        → "png"        → image/png
        /srv/www/LOGO.PNG        → "PNG"        → text/html
        /srv/www/notes.          → ""           → text/html
        /srv/www.v2/readme       → "v2/readme"  → text/html

=============================================================================
"""

from pathlib import Path
from typing import Union


MIME_TYPES = {
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "css": "text/css",
    "js": "text/javascript",
    "txt": "text/plain",
}

DEFAULT_MIME_TYPE = "text/html"


def get_extension(path: Union[str, Path]) -> str:
    """
    Text after the last "." of the path.

    A path without any "." yields the whole path, which never matches the
    table.
    """
    return str(path).rpartition(".")[2]


def get_content_type(path: Union[str, Path]) -> str:
    """
    Get the Content-Type for a file.

    Examples:
        >>> get_content_type("/www/style.css")
        'text/css'
        >>> get_content_type("/www/archive.tar.gz")
        'text/html'
    """
    return MIME_TYPES.get(get_extension(path), DEFAULT_MIME_TYPE)
