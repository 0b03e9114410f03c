# council/services/storage_service.py
from __future__ import annotations

import os
import uuid
from dataclasses import dataclass

from werkzeug.utils import secure_filename

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class StoredBlob:
    path: str
    url: str
    size: int
    content_type: str | None


class LocalBlobStore:
    """
    Path-namespaced blob store on the local filesystem. Paths look like
    `rentals/<rental_id>/<photo_type>/<uuid>_<filename>`; files are served
    back under `url_prefix`.
    """

    def __init__(self, root: str, url_prefix: str = "/uploads"):
        self.root = os.path.abspath(root)
        self.url_prefix = url_prefix.rstrip("/")

    def _full_path(self, path: str) -> str:
        full = os.path.abspath(os.path.join(self.root, path))
        if os.path.commonpath([full, self.root]) != self.root:
            raise ValueError("Invalid storage path")
        return full

    def url_for(self, path: str) -> str:
        return f"{self.url_prefix}/{path}"

    def upload(self, namespace: str, file_storage, allowed_types=None, max_bytes: int = None,
               on_progress=None) -> StoredBlob:
        """
        Save a werkzeug FileStorage under `namespace`. `on_progress(written, total)`
        is called after each chunk; total is None when the client did not send a length.
        """
        if file_storage is None or not file_storage.filename:
            raise ValueError("No file was uploaded")

        content_type = file_storage.mimetype or None
        if allowed_types and content_type not in allowed_types:
            raise ValueError(f"File type not allowed: {content_type}")

        filename = secure_filename(file_storage.filename) or "upload"
        parts = [p for p in (secure_filename(s) for s in namespace.split("/")) if p]
        rel_path = "/".join(parts + [f"{uuid.uuid4().hex}_{filename}"])
        full = self._full_path(rel_path)
        os.makedirs(os.path.dirname(full), exist_ok=True)

        total = file_storage.content_length or None
        written = 0
        try:
            with open(full, "wb") as out:
                while True:
                    chunk = file_storage.stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if max_bytes and written > max_bytes:
                        raise ValueError("File is too large")
                    out.write(chunk)
                    if on_progress:
                        on_progress(written, total)
        except ValueError:
            os.remove(full)
            raise

        if written == 0:
            os.remove(full)
            raise ValueError("Uploaded file is empty")

        return StoredBlob(path=rel_path, url=self.url_for(rel_path), size=written, content_type=content_type)

    def download(self, path: str) -> bytes:
        with open(self._full_path(path), "rb") as f:
            return f.read()

    def delete(self, path: str) -> bool:
        full = self._full_path(path)
        if not os.path.exists(full):
            return False
        os.remove(full)
        return True
