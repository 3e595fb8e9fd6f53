"""
Virtue Receipt model and structural validation.

Validation here is purely structural: required fields, hash format,
governance level and timestamp syntax. Hash matching and chain integrity
are checked by the orchestrator in verify.py.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class GovernanceLevel(str, Enum):
    """Risk/oversight classification carried by a receipt."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


GOVERNANCE_LEVELS = frozenset(level.value for level in GovernanceLevel)

REQUIRED_FIELDS = ("document_id", "hash", "timestamp", "governance_level")

_SHA256_HEX_RE = re.compile(r"^[a-f0-9]{64}$", re.IGNORECASE)

_ISO_TIMESTAMP_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2})"
    r"(?:[Tt ](\d{2}:\d{2}(?::\d{2})?)(?:[.,](\d+))?"
    r"([Zz]|[+-]\d{2}(?::?\d{2})?)?)?$"
)


@dataclass(frozen=True)
class VirtueReceipt:
    """
    Governance record attached to a document.

    Created upstream at document-creation time and consumed read-only.
    Required fields are still typed Optional so that incomplete receipts
    can be represented and reported by validate_receipt().
    """
    document_id: Optional[str] = None
    hash: Optional[str] = None
    timestamp: Optional[str] = None
    governance_level: Optional[str] = None
    prev_hash: Optional[str] = None
    chain_hash: Optional[str] = None
    isp_profile: Optional[str] = None
    sge_scores: Optional[dict[str, float]] = None
    actor: Optional[str] = None
    signature: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VirtueReceipt":
        """
        Build a receipt from its JSON shape.

        Unknown keys are ignored. Scalar fields are stringified so that
        a receipt with e.g. a numeric hash is reported as malformed
        rather than crashing validation.
        """
        def text(name: str) -> Optional[str]:
            value = data.get(name)
            if value is None:
                return None
            return value if isinstance(value, str) else str(value)

        scores = data.get("sge_scores")
        return cls(
            document_id=text("document_id"),
            hash=text("hash"),
            timestamp=text("timestamp"),
            governance_level=text("governance_level"),
            prev_hash=text("prev_hash"),
            chain_hash=text("chain_hash"),
            isp_profile=text("isp_profile"),
            sge_scores=dict(scores) if isinstance(scores, dict) else None,
            actor=text("actor"),
            signature=text("signature"),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON shape of the receipt. Absent optional fields are omitted."""
        result: dict[str, Any] = {
            "document_id": self.document_id,
            "hash": self.hash,
            "timestamp": self.timestamp,
            "governance_level": self.governance_level,
        }
        optional = {
            "prev_hash": self.prev_hash,
            "chain_hash": self.chain_hash,
            "isp_profile": self.isp_profile,
            "sge_scores": dict(self.sge_scores) if self.sge_scores is not None else None,
            "actor": self.actor,
            "signature": self.signature,
        }
        result.update({k: v for k, v in optional.items() if v is not None})
        return result

    @property
    def has_chain_data(self) -> bool:
        return bool(self.prev_hash) and bool(self.chain_hash)


def coerce_receipt(receipt: "VirtueReceipt | dict[str, Any] | None") -> Optional[VirtueReceipt]:
    """Accept a receipt as a dataclass or its JSON dict."""
    if receipt is None or isinstance(receipt, VirtueReceipt):
        return receipt
    if isinstance(receipt, dict):
        return VirtueReceipt.from_dict(receipt)
    raise TypeError(f"Unsupported receipt type: {type(receipt).__name__}")


def is_sha256_hex(value: str) -> bool:
    return bool(_SHA256_HEX_RE.match(value))


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp. None if invalid.

    Fractions of any length, "Z" and offsets written as +HH, +HHMM or
    +HH:MM are rewritten into the one form datetime.fromisoformat()
    accepts on every supported Python version.
    """
    match = _ISO_TIMESTAMP_RE.match(value.strip())
    if not match:
        return None

    date, time, fraction, offset = match.groups()
    text = date
    if time:
        text += "T" + time
        if fraction:
            text += "." + fraction[:6].ljust(6, "0")
        if offset:
            text += _normalize_offset(offset)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _normalize_offset(offset: str) -> str:
    if offset.upper() == "Z":
        return "+00:00"
    sign, hours, minutes = offset[0], offset[1:3], offset[3:].lstrip(":")
    return f"{sign}{hours}:{minutes or '00'}"


def validate_receipt(receipt: Optional[VirtueReceipt]) -> list[str]:
    """
    Check a receipt's structure and field formats.

    Args:
        receipt: Receipt to validate (not mutated)

    Returns:
        Ordered list of error messages; empty if structurally valid
    """
    errors: list[str] = []

    if receipt is None:
        errors.append("Virtue Receipt is null or undefined")
        return errors

    for field_name in REQUIRED_FIELDS:
        if not getattr(receipt, field_name):
            errors.append(f"Missing required field: {field_name}")

    if receipt.hash and not is_sha256_hex(receipt.hash):
        errors.append("Invalid hash format (expected SHA-256)")

    if receipt.governance_level and receipt.governance_level not in GOVERNANCE_LEVELS:
        errors.append(f"Invalid governance level: {receipt.governance_level}")

    if receipt.timestamp and parse_timestamp(receipt.timestamp) is None:
        errors.append("Invalid timestamp format")

    return errors
