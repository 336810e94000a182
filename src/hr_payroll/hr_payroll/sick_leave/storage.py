from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from werkzeug.utils import secure_filename

from ..core.constants import ALLOWED_UPLOAD_EXTENSIONS, MAX_UPLOAD_BYTES
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class UploadedDocument:
    filename: str
    content: bytes
    content_type: str = ""

    @property
    def extension(self) -> str:
        name = secure_filename(self.filename or "")
        return name.rsplit(".", 1)[-1].lower() if "." in name else ""


class DocumentStorage(Protocol):
    """Stores proof documents; callers keep only the returned opaque path."""

    def save(self, *, key: str, document: UploadedDocument) -> str:
        raise NotImplementedError


class LocalDocumentStorage(DocumentStorage):
    def __init__(
        self,
        root_dir: str | Path,
        *,
        max_bytes: int = MAX_UPLOAD_BYTES,
        allowed_extensions: Sequence[str] = ALLOWED_UPLOAD_EXTENSIONS,
    ):
        self._root = Path(root_dir)
        self._max_bytes = int(max_bytes)
        self._allowed = tuple(e.lower() for e in allowed_extensions)

    def validate(self, document: UploadedDocument) -> None:
        if document.extension not in self._allowed:
            raise ValidationError(
                "Format file harus " + "/".join(e.upper() for e in self._allowed),
                details={"field": "file", "filename": document.filename},
            )
        if len(document.content) > self._max_bytes:
            raise ValidationError(
                f"Ukuran file maksimal {self._max_bytes // (1024 * 1024)} MB",
                details={"field": "file", "size": len(document.content)},
            )

    def save(self, *, key: str, document: UploadedDocument) -> str:
        self.validate(document)
        relative = f"{key}.{document.extension}"
        target = self._root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(document.content)
        return relative
