"""
SHA-256 hash primitives for windi-reader.

Uses hashlib for SHA-256. Digests are lowercase hex; the URN form
prefixes the algorithm name ("sha256:<hex>") as expected by the remote
verification API.
"""

import hashlib
import hmac
import os
from typing import Any, Union

from .canonical import canonical_json


HASH_ALGORITHM = "sha256"

# Read files in chunks so large PDFs are never held twice in memory
_CHUNK_SIZE = 64 * 1024

PathLike = Union[str, "os.PathLike[str]"]


def sha256_hex(data: bytes) -> str:
    """Compute SHA-256 of raw bytes. Returns lowercase hex."""
    return hashlib.sha256(data).hexdigest()


def sha256_hex_from_text(text: str) -> str:
    """Compute SHA-256 of a string encoded as UTF-8."""
    return sha256_hex(text.encode("utf-8"))


def sha256_hex_from_file(path: PathLike) -> str:
    """
    Compute SHA-256 of a file's contents.

    Args:
        path: Path to the file

    Returns:
        Lowercase hex digest

    Raises:
        OSError: If the path does not exist or cannot be read
    """
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def to_urn(hex_digest: str) -> str:
    """Format a hex digest as "sha256:<hex>"."""
    return f"{HASH_ALGORITHM}:{hex_digest}"


def sha256_urn(data: bytes) -> str:
    return to_urn(sha256_hex(data))


def sha256_urn_from_text(text: str) -> str:
    return to_urn(sha256_hex_from_text(text))


def sha256_urn_from_file(path: PathLike) -> str:
    return to_urn(sha256_hex_from_file(path))


def hash_json(value: Any) -> str:
    """
    Compute SHA-256 over the canonical JSON form of a value.

    Key order of mappings does not affect the result.
    """
    return sha256_hex_from_text(canonical_json(value))


def safe_equal(left: Any, right: Any) -> bool:
    """
    Constant-time string comparison to prevent timing side-channel attacks.
    """
    left = left if isinstance(left, str) else str(left or "")
    right = right if isinstance(right, str) else str(right or "")
    return hmac.compare_digest(left.encode("utf-8"), right.encode("utf-8"))
