"""Adapts a parsed multipart form to the engine's UploadStore."""

from __future__ import annotations

from starlette.datastructures import FormData, UploadFile


class FormUploads:
    """Read-only view over the UploadFile entries of a form."""

    def __init__(self, form: FormData) -> None:
        self._form = form

    def get_file(self, name: str) -> UploadFile | None:
        files = self.get_files(name)
        return files[0] if files else None

    def get_files(self, name: str) -> list[UploadFile]:
        return [v for v in self._form.getlist(name) if isinstance(v, UploadFile)]
