"""
Reactive Engine - Upload Store

Read-only access to files submitted with an update request. Hosts adapt
their multipart parser to UploadStore; MemoryUploads serves tests and hosts
that collect files themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class Upload(Protocol):
    """A submitted file. Annotate action parameters with this type."""

    filename: str | None
    content_type: str | None


class UploadStore(Protocol):
    def get_file(self, name: str) -> Upload | None: ...

    def get_files(self, name: str) -> list[Upload]: ...


@dataclass
class MemoryUpload:
    filename: str | None
    content: bytes = b""
    content_type: str | None = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


class MemoryUploads:
    """In-memory upload store keyed by form field name."""

    def __init__(self, files: dict[str, list[Upload]] | None = None) -> None:
        self._files: dict[str, list[Upload]] = {k: list(v) for k, v in (files or {}).items()}

    def add(self, name: str, upload: Upload) -> None:
        self._files.setdefault(name, []).append(upload)

    def get_file(self, name: str) -> Upload | None:
        files = self._files.get(name)
        return files[0] if files else None

    def get_files(self, name: str) -> list[Upload]:
        return list(self._files.get(name, []))

