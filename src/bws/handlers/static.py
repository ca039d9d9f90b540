"""
=============================================================================
STATIC RESOURCE RESOLUTION
=============================================================================

Maps a request path onto a file under the document root.

=============================================================================
RESOLUTION ORDER
=============================================================================

    Request: GET /docs

        1. <root>/docs                  readable regular file?  → serve it
        2. <root>/docs/index.html       readable regular file?  → serve it
        3. <root>/docs/index.htm        readable regular file?  → serve it
        4. nothing left                                          → 404

    The default documents are tried against the REQUESTED path every time,
    never against the previous candidate. "/docs" and "/docs/" resolve the
    same way.

=============================================================================
SECURITY
=============================================================================

Request paths are joined onto the root as they arrive, so "/../secret"
would point outside it. Every candidate is normalised and checked against
the root first; a candidate outside the root counts as a miss and the
request ends in 404, like any other missing file.

=============================================================================
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from ..http.errors import ErrorKind, RequestError
from ..http.mime_types import get_content_type


logger = logging.getLogger(__name__)


DEFAULT_DOCUMENTS = ("index.html", "index.htm")


@dataclass(frozen=True)
class ResolvedResource:
    """
    What the resolver learned about one candidate path.

    Attributes:
        path: Absolute filesystem path.
        exists: Something exists at path.
        is_file: It is a regular file.
        readable: This process may read it.
        size: Length in bytes (0 unless exists).
        last_modified: POSIX mtime (0.0 unless exists).
        content_type: MIME type inferred from the path.
    """

    path: Path
    exists: bool
    is_file: bool
    readable: bool
    size: int
    last_modified: float
    content_type: str

    @property
    def servable(self) -> bool:
        """True for a readable regular file."""
        return self.exists and self.is_file and self.readable

    @classmethod
    def probe(cls, path: Union[str, Path]) -> "ResolvedResource":
        """Stat a path and describe it."""
        path = Path(os.path.abspath(path))
        try:
            stat = path.stat()
        except (OSError, ValueError):
            return cls(path, False, False, False, 0, 0.0, get_content_type(path))

        is_file = path.is_file()
        return cls(
            path=path,
            exists=True,
            is_file=is_file,
            readable=is_file and os.access(path, os.R_OK),
            size=stat.st_size,
            last_modified=stat.st_mtime,
            content_type=get_content_type(path),
        )


class StaticResolver:
    """
    Resolves request paths against a document root.

    Usage:
        resolver = StaticResolver("www")
        resource = resolver.resolve("/docs/")   # raises RequestError(NOT_FOUND)
    """

    def __init__(
        self,
        document_root: Union[str, Path],
        default_documents: Sequence[str] = DEFAULT_DOCUMENTS,
    ):
        """
        Args:
            document_root: Directory request paths are resolved against.
                           It need not exist; every request then gets 404.
            default_documents: File names tried, in order, when the path
                               itself is not a readable file.
        """
        self.document_root = Path(os.path.abspath(document_root))
        self.default_documents = tuple(default_documents)

    def resolve(self, request_path: str) -> ResolvedResource:
        """
        Find the file a request path refers to.

        Args:
            request_path: Validated request path (starts with "/").

        Returns:
            The first servable candidate.

        Raises:
            RequestError: NOT_FOUND when no candidate is servable.
        """
        # Back to the bytes the client sent, then to a filesystem name.
        fs_path = os.fsdecode(request_path.encode("iso-8859-1"))
        base = os.path.join(str(self.document_root), fs_path.lstrip("/"))
        logger.debug(f"Requested file: {base}")

        candidates = [base]
        candidates.extend(os.path.join(base, name) for name in self.default_documents)

        for candidate in candidates:
            resource = self._probe(candidate)
            if resource is not None and resource.servable:
                logger.debug(f"Found {resource.path}")
                return resource
            logger.debug(f"Not found: {candidate}")

        raise RequestError(ErrorKind.NOT_FOUND, f"No file for {request_path}")

    def _probe(self, candidate: str) -> Optional[ResolvedResource]:
        if "\x00" in candidate:
            # No file name can contain NUL.
            return None
        normalized = os.path.normpath(candidate)
        root = str(self.document_root)
        prefix = root if root.endswith(os.sep) else root + os.sep
        if normalized != root and not normalized.startswith(prefix):
            logger.warning(f"Path outside document root: {candidate}")
            return None
        return ResolvedResource.probe(normalized)
