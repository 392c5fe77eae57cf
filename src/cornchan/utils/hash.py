"""Hashing helpers for network addresses."""

from __future__ import annotations

from Crypto.Hash import keccak

IP_DIGEST_BITS = 224
IP_DIGEST_LENGTH = IP_DIGEST_BITS // 8


def keccak224_digest(data: bytes) -> bytes:
    """Return the 28-byte Keccak-224 digest of the supplied data.

    This is the original Keccak padding, not the NIST SHA3-224 variant that
    ``hashlib.sha3_224`` implements; existing ban tables are keyed by it.
    """
    hasher = keccak.new(digest_bits=IP_DIGEST_BITS)
    hasher.update(data)
    return hasher.digest()


def hash_ip(address: str) -> bytes:
    """Return the ban-table key for a textual IP address."""
    return keccak224_digest(address.encode("utf-8"))
