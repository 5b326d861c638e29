from __future__ import annotations

from typing import Protocol


class FileStorage(Protocol):
    def upload(self, data: bytes, filename: str, content_type: str, folder: str) -> str:
        """Store the bytes under ``folder`` and return a public URL.

        Raises StorageError when the object could not be written.
        """
        ...
