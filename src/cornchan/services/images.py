"""Image ingestion: sniff, decode, transcode to WebP and persist uploads."""

from __future__ import annotations

import io
import logging
import secrets
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from fastapi.concurrency import run_in_threadpool
from PIL import Image

from cornchan.core.errors import ImageDecodeError, InvalidImageFormat
from cornchan.core.settings import Settings

logger = logging.getLogger(__name__)

MAX_IMAGES_PER_POST = 3

# nanoid's default alphabet; 21 symbols give ~126 bits of randomness
IMAGE_ID_ALPHABET = "_-0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
IMAGE_ID_LENGTH = 21

# (magic bytes, offset, Pillow format name)
_SIGNATURES: tuple[tuple[bytes, int, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", 0, "PNG"),
    (b"\xff\xd8\xff", 0, "JPEG"),
    (b"GIF87a", 0, "GIF"),
    (b"GIF89a", 0, "GIF"),
    (b"WEBP", 8, "WEBP"),
    (b"II*\x00", 0, "TIFF"),
    (b"MM\x00*", 0, "TIFF"),
    (b"\x00\x00\x01\x00", 0, "ICO"),
    (b"qoif", 0, "QOI"),
    (b"BM", 0, "BMP"),
)
_PNM_MAGIC = frozenset(f"P{n}".encode() for n in range(1, 7))


def sniff_format(prefix: bytes) -> str | None:
    """Return the Pillow format name matching ``prefix`` or None."""
    for magic, offset, fmt in _SIGNATURES:
        if fmt == "WEBP" and not prefix.startswith(b"RIFF"):
            continue
        if prefix[offset:offset + len(magic)] == magic:
            return fmt
    if prefix[:2] in _PNM_MAGIC:
        return "PPM"
    return None


def select_quality(size: int, threshold: int, lossy_quality: int) -> int | None:
    """Return the WebP quality for an upload of ``size`` bytes.

    Uploads at or above ``threshold`` are compressed harder; smaller ones keep
    the encoder default, signalled by None.
    """
    if size >= threshold:
        return lossy_quality
    return None


def generate_image_id(length: int = IMAGE_ID_LENGTH) -> str:
    """Return a random URL-safe identifier."""
    return "".join(secrets.choice(IMAGE_ID_ALPHABET) for _ in range(length))


def _blob_size(blob: BinaryIO) -> int:
    blob.seek(0, io.SEEK_END)
    size = blob.tell()
    blob.seek(0)
    return size


@dataclass(frozen=True)
class ImagePolicy:
    """Operator-tunable thresholds for the ingestion pipeline."""

    min_bytes: int = 64
    sniff_bytes: int = 32
    size_threshold: int = 200 * 1024
    lossy_quality: int = 50

    @classmethod
    def from_settings(cls, cfg: Settings) -> ImagePolicy:
        return cls(
            min_bytes=cfg.image_min_bytes,
            sniff_bytes=cfg.image_sniff_bytes,
            size_threshold=cfg.image_size_threshold,
            lossy_quality=cfg.image_lossy_quality,
        )


class ImageIngestor:
    """Turn raw uploads into WebP files in the public blob directory."""

    def __init__(self, public_dir: str | Path, policy: ImagePolicy | None = None) -> None:
        self.public_dir = Path(public_dir)
        self.policy = policy or ImagePolicy()
        self.public_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, image_id: str) -> Path:
        return self.public_dir / image_id

    # ── single upload ────────────────────────────────────────────

    def ingest_one(self, blob: BinaryIO | None) -> str | None:
        """Store one upload and return its identifier.

        Returns None for an absent upload or one smaller than the sniff
        threshold; those are treated as "no image supplied".

        Raises:
            InvalidImageFormat: If the prefix matches no supported format.
            ImageDecodeError: If the image cannot be decoded or transcoded.
        """
        if blob is None:
            return None
        size = _blob_size(blob)
        if size < self.policy.min_bytes:
            logger.debug(
                "Skipping %d-byte upload below the %d-byte minimum", size, self.policy.min_bytes
            )
            return None

        fmt = sniff_format(blob.read(self.policy.sniff_bytes))
        if fmt is None:
            logger.warning("Rejected upload with unrecognised format (%d bytes)", size)
            raise InvalidImageFormat()

        blob.seek(0)
        try:
            image = Image.open(blob, formats=[fmt])
            image.load()
        except (Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
            logger.warning("Failed to decode %s upload: %s", fmt, exc)
            raise ImageDecodeError(f"failed to decode {fmt} image") from exc

        try:
            quality = select_quality(size, self.policy.size_threshold, self.policy.lossy_quality)
            data = self._encode(image, quality)
        except (OSError, ValueError) as exc:
            logger.warning("Failed to transcode %s upload: %s", fmt, exc)
            raise ImageDecodeError(f"failed to transcode {fmt} image") from exc
        finally:
            image.close()

        image_id = self._write(data)
        logger.info("Stored %s upload (%d bytes) as %s (%d bytes)", fmt, size, image_id, len(data))
        return image_id

    @staticmethod
    def _encode(image: Image.Image, quality: int | None) -> bytes:
        if image.mode not in ("RGB", "RGBA"):
            has_alpha = "A" in image.getbands() or "transparency" in image.info
            image = image.convert("RGBA" if has_alpha else "RGB")
        options = {} if quality is None else {"quality": quality}
        buf = io.BytesIO()
        image.save(buf, format="WEBP", **options)
        return buf.getvalue()

    def _write(self, data: bytes) -> str:
        while True:
            image_id = generate_image_id()
            try:
                with self.path_for(image_id).open("xb") as fh:
                    fh.write(data)
            except FileExistsError:
                continue
            return image_id

    # ── whole submission ─────────────────────────────────────────

    def ingest(self, blobs: Sequence[BinaryIO | None]) -> list[str]:
        """Store up to three uploads, returning identifiers in slot order.

        If any upload is rejected, files already written for this submission
        are removed before the error propagates.
        """
        if len(blobs) > MAX_IMAGES_PER_POST:
            raise ValueError(f"At most {MAX_IMAGES_PER_POST} images per post")
        stored: list[str] = []
        try:
            for blob in blobs:
                image_id = self.ingest_one(blob)
                if image_id is not None:
                    stored.append(image_id)
        except Exception:
            self.discard(stored)
            raise
        return stored

    async def ingest_async(self, blobs: Sequence[BinaryIO | None]) -> list[str]:
        """Run :meth:`ingest` in the threadpool to keep the event loop free."""
        return await run_in_threadpool(self.ingest, blobs)

    def discard(self, image_ids: Sequence[str]) -> None:
        """Delete stored images, ignoring ones already gone."""
        for image_id in image_ids:
            self.path_for(image_id).unlink(missing_ok=True)
            logger.debug("Discarded orphaned image %s", image_id)
