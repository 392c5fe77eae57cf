# mypy: ignore-errors
"""Tests for hashing utilities."""

from __future__ import annotations

import hashlib

from cornchan.utils import hash as hash_utils

DIGEST_LENGTH = 28
KECCAK224_EMPTY = "f71837502ba8e10837bdd8d365adb85591895602fc552b48b7390abd"


def test_keccak224_digest_length() -> None:
    """Ensure the digest produces 28 bytes."""
    digest = hash_utils.keccak224_digest(b"127.0.0.1")
    assert isinstance(digest, bytes)
    assert len(digest) == DIGEST_LENGTH


def test_keccak224_known_vector() -> None:
    """Ensure the original Keccak padding is used rather than SHA3-224."""
    assert hash_utils.keccak224_digest(b"").hex() == KECCAK224_EMPTY
    assert hash_utils.keccak224_digest(b"") != hashlib.sha3_224(b"").digest()


def test_hash_ip_hashes_text_form() -> None:
    assert hash_utils.hash_ip("::1") == hash_utils.keccak224_digest(b"::1")
    assert hash_utils.hash_ip("10.0.0.1") != hash_utils.hash_ip("10.0.0.2")
