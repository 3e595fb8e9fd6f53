"""
Offline document verification for windi-reader.

Combines hashing, receipt validation and chain verification into one
verdict per document. Expected failures never raise: every call ends in
a terminal VerificationStatus with human-readable errors and warnings.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from .chain import verify_receipt_chain
from .extract import ExtractedMetadata, extract_receipt
from .hashing import PathLike, safe_equal, sha256_hex, sha256_hex_from_file
from .receipt import VirtueReceipt, coerce_receipt, validate_receipt


logger = logging.getLogger(__name__)

Extractor = Callable[[bytes, Optional[str]], Optional[ExtractedMetadata]]

HASH_MISMATCH_ERROR = "Document hash does not match Virtue Receipt"
CHAIN_FAILURE_MESSAGE = "Chain integrity verification failed"
NO_GOVERNANCE_WARNING = "No WINDI governance metadata found in document"


class VerificationStatus(str, Enum):
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    INVALID = "INVALID"
    ERROR = "ERROR"
    NO_GOVERNANCE = "NO_GOVERNANCE"


@dataclass(frozen=True)
class VerifyOptions:
    """
    Per-call verification settings.

    strict: a broken chain link makes the document INVALID instead of
        being downgraded to a warning.
    """
    strict: bool = False


@dataclass
class VerificationResult:
    """Outcome of verifying one document."""
    verified: bool = False
    status: VerificationStatus = VerificationStatus.PENDING
    document_hash: Optional[str] = None
    virtue_receipt: Optional[VirtueReceipt] = None
    governance_level: Optional[str] = None
    isp_profile: Optional[str] = None
    chain_intact: bool = False
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    verified_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "verified": self.verified,
            "status": self.status.value,
            "document_hash": self.document_hash,
            "virtue_receipt": self.virtue_receipt.to_dict() if self.virtue_receipt else None,
            "governance_level": self.governance_level,
            "isp_profile": self.isp_profile,
            "chain_intact": self.chain_intact,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "verified_at": self.verified_at.isoformat() if self.verified_at else None,
        }


@dataclass
class ReceiptCheck:
    """Result of checking a receipt on its own, without a document."""
    valid: bool
    errors: list[str]
    chain_intact: bool
    governance_level: Optional[str]
    timestamp: Optional[str]


def compute_hash(path: PathLike) -> str:
    """Lowercase hex SHA-256 of a document file."""
    return sha256_hex_from_file(path)


def verify_document(
    path: PathLike,
    options: Optional[VerifyOptions] = None,
    extractor: Extractor = extract_receipt,
) -> VerificationResult:
    """
    Verify a document file against its embedded Virtue Receipt.

    Args:
        path: Path to the document
        options: Verification settings (default: lenient)
        extractor: Callable locating the embedded receipt in the bytes

    Returns:
        VerificationResult in a terminal state
    """
    options = options or VerifyOptions()
    result = VerificationResult()

    try:
        with open(path, "rb") as f:
            buffer = f.read()
        result.document_hash = sha256_hex(buffer)

        metadata = extractor(buffer, os.fspath(path))
        if metadata is None:
            result.status = VerificationStatus.NO_GOVERNANCE
            result.warnings.append(NO_GOVERNANCE_WARNING)
        else:
            _check_receipt(result, coerce_receipt(metadata.virtue_receipt), options)
    except OSError as exc:
        logger.warning("Could not read %s: %s", path, exc)
        _fail_with_error(result, exc)
    except Exception as exc:
        logger.exception("Verification of %s failed", path)
        _fail_with_error(result, exc)

    return _finish(result, path)


def verify_buffer(
    buffer: bytes,
    receipt: "VirtueReceipt | dict[str, Any] | None",
    options: Optional[VerifyOptions] = None,
) -> VerificationResult:
    """
    Verify in-memory document bytes against a supplied receipt.

    Same checks and strict handling as verify_document(), without
    receipt extraction.
    """
    options = options or VerifyOptions()
    result = VerificationResult()

    try:
        result.document_hash = sha256_hex(buffer)
        _check_receipt(result, coerce_receipt(receipt), options)
    except Exception as exc:
        logger.exception("Verification of in-memory document failed")
        _fail_with_error(result, exc)

    return _finish(result, "<buffer>")


def verify_receipt(receipt: "VirtueReceipt | dict[str, Any]") -> ReceiptCheck:
    """Validate a receipt's structure and its own chain link."""
    parsed = coerce_receipt(receipt)
    errors = validate_receipt(parsed)
    chain_intact = verify_receipt_chain(parsed) if parsed is not None else False

    return ReceiptCheck(
        valid=not errors and chain_intact,
        errors=errors,
        chain_intact=chain_intact,
        governance_level=parsed.governance_level if parsed else None,
        timestamp=parsed.timestamp if parsed else None,
    )


def _check_receipt(
    result: VerificationResult,
    receipt: Optional[VirtueReceipt],
    options: VerifyOptions,
) -> None:
    """Receipt checks shared by file and buffer verification, in order."""
    result.virtue_receipt = receipt

    validation_errors = validate_receipt(receipt)
    if validation_errors:
        result.errors.extend(validation_errors)
        result.status = VerificationStatus.INVALID
        return

    # Receipt hash format is case-insensitive; the computed digest is lowercase
    if not safe_equal((receipt.hash or "").lower(), result.document_hash):
        result.errors.append(HASH_MISMATCH_ERROR)
        result.status = VerificationStatus.INVALID
        return

    result.chain_intact = verify_receipt_chain(receipt)
    if not result.chain_intact:
        if options.strict:
            result.errors.append(CHAIN_FAILURE_MESSAGE)
            result.status = VerificationStatus.INVALID
            return
        logger.warning(
            "Chain verification failed for %s; continuing in lenient mode",
            receipt.document_id,
        )
        result.warnings.append(f"{CHAIN_FAILURE_MESSAGE} (document hash valid)")

    result.verified = True
    result.status = VerificationStatus.VERIFIED
    result.governance_level = receipt.governance_level
    result.isp_profile = receipt.isp_profile


def _fail_with_error(result: VerificationResult, exc: Exception) -> None:
    result.verified = False
    result.status = VerificationStatus.ERROR
    result.errors.append(f"Verification error: {exc}")


def _finish(result: VerificationResult, source: Any) -> VerificationResult:
    result.verified_at = datetime.now(timezone.utc)
    logger.info("Verification of %s finished: %s", source, result.status.value)
    return result
