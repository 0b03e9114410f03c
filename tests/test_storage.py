"""
Tests for the local blob store used for rental photos.
"""

import io

import pytest
from werkzeug.datastructures import FileStorage

from council.services.storage_service import LocalBlobStore

JPEG = ("image/jpeg",)


def _file(data=b"\xff\xd8\xff\xe0fake-jpeg", name="photo.jpg", content_type="image/jpeg"):
    return FileStorage(stream=io.BytesIO(data), filename=name, content_type=content_type)


@pytest.fixture
def store(tmp_path):
    return LocalBlobStore(str(tmp_path / "blobs"), url_prefix="/uploads/")


class TestLocalBlobStore:
    def test_upload_download_delete(self, store):
        blob = store.upload("rentals/1/student_id", _file(), allowed_types=JPEG)

        assert blob.path.startswith("rentals/1/student_id/")
        assert blob.path.endswith("_photo.jpg")
        assert blob.url == f"/uploads/{blob.path}"
        assert blob.size == len(b"\xff\xd8\xff\xe0fake-jpeg")
        assert blob.content_type == "image/jpeg"
        assert store.download(blob.path) == b"\xff\xd8\xff\xe0fake-jpeg"

        assert store.delete(blob.path) is True
        assert store.delete(blob.path) is False

    def test_reports_progress(self, store):
        seen = []
        store.upload("x", _file(data=b"a" * 150_000), on_progress=lambda written, total: seen.append(written))

        assert seen == [65536, 131072, 150000]

    def test_missing_file(self, store):
        with pytest.raises(ValueError, match="No file"):
            store.upload("x", None)

    def test_type_not_allowed(self, store):
        with pytest.raises(ValueError, match="not allowed"):
            store.upload("x", _file(name="notes.txt", content_type="text/plain"), allowed_types=JPEG)

    def test_too_large_leaves_nothing_behind(self, store, tmp_path):
        with pytest.raises(ValueError, match="too large"):
            store.upload("big", _file(data=b"a" * 2048), max_bytes=1024)

        assert list((tmp_path / "blobs" / "big").iterdir()) == []

    def test_empty_file(self, store):
        with pytest.raises(ValueError, match="empty"):
            store.upload("x", _file(data=b""))

    def test_path_traversal_is_refused(self, store):
        with pytest.raises(ValueError, match="Invalid storage path"):
            store.download("../../etc/passwd")

    def test_namespace_is_sanitised(self, store):
        blob = store.upload("../../escape", _file())
        assert blob.path.startswith("escape/")
