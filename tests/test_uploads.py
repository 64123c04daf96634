"""Tests for option image uploads."""

import re

import pytest

from classvote.errors import ValidationError
from classvote.uploads import save_image, stored_filename


def test_stored_filename_has_millisecond_prefix():
    name = stored_filename("museum.jpg")

    assert re.fullmatch(r"\d{13}-museum\.jpg", name)


@pytest.mark.parametrize("original", ["../../etc/passwd", "..\\..\\evil.png", "/abs/path/x.png"])
def test_stored_filename_strips_directories(original):
    name = stored_filename(original)

    assert "/" not in name
    assert "\\" not in name
    assert not name.split("-", 1)[1].startswith("..")


@pytest.mark.asyncio
class TestSaveImage:

    async def test_saves_image_in_upload_dir(self, settings, make_upload):
        stored = await save_image(make_upload(b"pixels"), settings)

        assert stored.path.parent == settings.upload_dir
        assert stored.path.read_bytes() == b"pixels"
        assert stored.public_url == f"/uploads/{stored.filename}"
        assert stored.filename.endswith("-cat.png")

    async def test_no_file_returns_none(self, settings):
        assert await save_image(None, settings) is None

    async def test_rejects_non_image(self, settings, make_upload):
        upload = make_upload(b"%PDF-1.4", filename="notes.pdf", content_type="application/pdf")

        with pytest.raises(ValidationError, match="Not an image"):
            await save_image(upload, settings)

        assert list(settings.upload_dir.iterdir()) == []

    async def test_rejects_file_over_limit(self, settings, make_upload):
        settings.max_upload_bytes = 1024
        upload = make_upload(b"x" * 1025)

        with pytest.raises(ValidationError, match="too large"):
            await save_image(upload, settings)

        assert list(settings.upload_dir.iterdir()) == []

    async def test_accepts_file_at_limit(self, settings, make_upload):
        settings.max_upload_bytes = 1024

        stored = await save_image(make_upload(b"x" * 1024), settings)

        assert stored.path.stat().st_size == 1024
