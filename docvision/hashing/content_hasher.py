"""Streaming content digests used as document and image identities."""

import hashlib
from pathlib import Path

_CHUNK_SIZE = 64 * 1024


class ContentHasher:
    """Computes stable content identities for files.

    Documents get a sha256 digest (output namespacing, duplicate-run detection).
    Images get an md5 digest, used purely as an equality key.
    """

    def document_digest(self, path: Path) -> str:
        """Return the sha256 hex digest of a document.

        Raises:
            OSError: if the path cannot be read.
        """
        return self._digest(path, "sha256")

    def image_digest(self, path: Path) -> str:
        """Return the md5 hex digest of an image file.

        Raises:
            OSError: if the path cannot be read.
        """
        return self._digest(path, "md5")

    @staticmethod
    def _digest(path: Path, algorithm: str) -> str:
        digest = hashlib.new(algorithm, usedforsecurity=False)
        with open(path, "rb") as fh:
            for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
        return digest.hexdigest()
