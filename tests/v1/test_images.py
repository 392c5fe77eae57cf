"""Tests for the image ingestion pipeline."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from cornchan.core.errors import ImageDecodeError, InvalidImageFormat
from cornchan.services import images as images_module
from cornchan.services.images import (
    IMAGE_ID_ALPHABET,
    IMAGE_ID_LENGTH,
    ImageIngestor,
    ImagePolicy,
    generate_image_id,
    select_quality,
    sniff_format,
)
from tests.conftest import TEST_THRESHOLD, make_image


@pytest.fixture()
def ingestor(public_dir: Path) -> ImageIngestor:
    return ImageIngestor(public_dir, ImagePolicy(size_threshold=TEST_THRESHOLD))


def _stored(public_dir: Path) -> list[Path]:
    return sorted(public_dir.iterdir())


@pytest.mark.parametrize("fmt", ["PNG", "JPEG", "GIF", "BMP", "TIFF", "WEBP", "PPM"])
def test_sniff_format_recognises_pillow_output(fmt: str) -> None:
    assert sniff_format(make_image(fmt)[:32]) == fmt


def test_sniff_format_unknown_prefix() -> None:
    assert sniff_format(b"hello world, not an image at all") is None
    assert sniff_format(b"RIFF\x00\x00\x00\x00WAVEfmt ") is None


def test_select_quality_threshold() -> None:
    assert select_quality(100 * 1024, TEST_THRESHOLD, 50) is None
    assert select_quality(600 * 1024, TEST_THRESHOLD, 50) == 50
    assert select_quality(TEST_THRESHOLD, TEST_THRESHOLD, 50) == 50


def test_generate_image_id_is_url_safe() -> None:
    ids = {generate_image_id() for _ in range(100)}
    assert len(ids) == 100
    for image_id in ids:
        assert len(image_id) == IMAGE_ID_LENGTH
        assert set(image_id) <= set(IMAGE_ID_ALPHABET)


def test_ingest_stores_webp(ingestor: ImageIngestor, public_dir: Path) -> None:
    image_id = ingestor.ingest_one(io.BytesIO(make_image("PNG")))

    assert image_id is not None
    stored = public_dir / image_id
    data = stored.read_bytes()
    assert data[:4] == b"RIFF"
    assert data[8:12] == b"WEBP"


def test_ingest_converts_palette_images(ingestor: ImageIngestor, public_dir: Path) -> None:
    image_id = ingestor.ingest_one(io.BytesIO(make_image("GIF")))
    assert image_id is not None
    assert (public_dir / image_id).exists()


@pytest.mark.parametrize(
    "blob",
    [None, io.BytesIO(b""), io.BytesIO(b"\x00" * 10), io.BytesIO(b"x" * 63)],
)
def test_small_or_absent_blobs_are_skipped(
    ingestor: ImageIngestor, public_dir: Path, blob: io.BytesIO | None
) -> None:
    assert ingestor.ingest_one(blob) is None
    assert _stored(public_dir) == []


def test_unknown_format_is_rejected(ingestor: ImageIngestor) -> None:
    with pytest.raises(InvalidImageFormat):
        ingestor.ingest_one(io.BytesIO(b"hello world " * 10))


def test_undecodable_image_is_rejected(ingestor: ImageIngestor) -> None:
    broken_png = b"\x89PNG\r\n\x1a\n" + b"\x00" * 120
    with pytest.raises(ImageDecodeError):
        ingestor.ingest_one(io.BytesIO(broken_png))


def test_quality_follows_upload_size(
    ingestor: ImageIngestor, monkeypatch: pytest.MonkeyPatch
) -> None:
    qualities: list[int | None] = []
    encode = ImageIngestor._encode

    def spy(image, quality):
        qualities.append(quality)
        return encode(image, quality)

    monkeypatch.setattr(ImageIngestor, "_encode", staticmethod(spy))

    small = make_image("BMP", (128, 256), noise=True)  # ~96 KiB
    large = make_image("BMP", (320, 640), noise=True)  # ~600 KiB
    assert len(small) < TEST_THRESHOLD <= len(large)

    ingestor.ingest([io.BytesIO(small), io.BytesIO(large)])

    assert qualities == [None, 50]


def test_ingest_keeps_slot_order_and_skips_empty(ingestor: ImageIngestor) -> None:
    first = io.BytesIO(make_image("PNG"))
    third = io.BytesIO(make_image("JPEG"))

    stored = ingestor.ingest([first, io.BytesIO(b""), third])

    assert len(stored) == 2
    assert len(set(stored)) == 2


def test_failed_submission_removes_written_images(
    ingestor: ImageIngestor, public_dir: Path
) -> None:
    blobs = [io.BytesIO(make_image("PNG")), io.BytesIO(b"hello world " * 10)]

    with pytest.raises(InvalidImageFormat):
        ingestor.ingest(blobs)

    assert _stored(public_dir) == []


def test_ingest_rejects_more_than_three_blobs(ingestor: ImageIngestor) -> None:
    with pytest.raises(ValueError):
        ingestor.ingest([None, None, None, None])


def test_write_never_overwrites(
    ingestor: ImageIngestor, public_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (public_dir / "taken").write_bytes(b"existing")
    ids = iter(["taken", "fresh"])
    monkeypatch.setattr(images_module, "generate_image_id", lambda: next(ids))

    image_id = ingestor.ingest_one(io.BytesIO(make_image("PNG")))

    assert image_id == "fresh"
    assert (public_dir / "taken").read_bytes() == b"existing"


@pytest.mark.asyncio
async def test_ingest_async_runs_pipeline(ingestor: ImageIngestor, public_dir: Path) -> None:
    stored = await ingestor.ingest_async([io.BytesIO(make_image("PNG")), None])
    assert len(stored) == 1
    assert (public_dir / stored[0]).exists()


def test_image_too_wide_for_webp_is_rejected(ingestor: ImageIngestor, public_dir: Path) -> None:
    too_wide = make_image("PNG", (17000, 1))

    with pytest.raises(ImageDecodeError) as excinfo:
        ingestor.ingest_one(io.BytesIO(too_wide))

    assert excinfo.value.status_code == 400
    assert _stored(public_dir) == []
