import io
import re

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from civicpulse.core.config import settings
from civicpulse.core.errors import ValidationError
from civicpulse.services import storage
from civicpulse.services.storage import (
    delete_report_photo,
    generate_photo_filename,
    save_report_photo,
)

pytestmark = pytest.mark.anyio


def make_upload(content: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def test_generated_filename_keeps_extension_and_is_unique():
    names = {generate_photo_filename("Overflowing Bin.PNG") for _ in range(50)}

    assert len(names) > 1
    for name in names:
        assert re.fullmatch(r"\d+-\d+\.png", name)


def test_generated_filename_without_extension():
    assert re.fullmatch(r"\d+-\d+", generate_photo_filename("photo"))


async def test_save_writes_file_and_returns_public_url(upload_dir):
    url = await save_report_photo(make_upload(b"png-bytes", "spot.png", "image/png"))

    assert url.startswith(f"{settings.UPLOAD_URL_PREFIX}/")
    stored = upload_dir / url.rsplit("/", 1)[1]
    assert stored.read_bytes() == b"png-bytes"


async def test_save_without_file_returns_none(upload_dir):
    assert await save_report_photo(None) is None
    assert await save_report_photo(make_upload(b"", "", "image/png")) is None


async def test_save_rejects_non_images(upload_dir):
    with pytest.raises(ValidationError):
        await save_report_photo(make_upload(b"%PDF", "scan.pdf", "application/pdf"))


class CountingBytesIO(io.BytesIO):
    def __init__(self, content: bytes):
        super().__init__(content)
        self.bytes_read = 0

    def read(self, size=-1):
        chunk = super().read(size)
        self.bytes_read += len(chunk)
        return chunk


async def test_save_rejects_oversized_files(upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 1024)
    body = CountingBytesIO(b"x" * 5_000_000)
    upload = UploadFile(file=body, filename="big.jpg", headers=Headers({"content-type": "image/jpeg"}))

    with pytest.raises(ValidationError):
        await save_report_photo(upload)

    assert body.bytes_read == 1025
    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


async def test_save_accepts_file_exactly_at_limit(upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 8)

    url = await save_report_photo(make_upload(b"01234567", "edge.jpg", "image/jpeg"))

    assert (upload_dir / url.rsplit("/", 1)[1]).read_bytes() == b"01234567"


async def test_save_writes_off_the_event_loop(upload_dir, monkeypatch):
    calls = []

    async def recording_threadpool(func, *args):
        calls.append(func)
        return func(*args)

    monkeypatch.setattr(storage, "run_in_threadpool", recording_threadpool)

    url = await save_report_photo(make_upload(b"png", "spot.png", "image/png"))

    assert len(calls) == 1
    assert (upload_dir / url.rsplit("/", 1)[1]).read_bytes() == b"png"


async def test_delete_removes_only_files_under_upload_dir(upload_dir):
    url = await save_report_photo(make_upload(b"jpeg", "a.jpg", "image/jpeg"))

    assert delete_report_photo(url) is True
    assert delete_report_photo(url) is False
    assert delete_report_photo(None) is False
    assert delete_report_photo("https://elsewhere.example/a.jpg") is False
