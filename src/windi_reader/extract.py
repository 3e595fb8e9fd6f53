"""
Best-effort extraction of an embedded Virtue Receipt from document bytes.

Receipts are located by markers (a JSON envelope, an inline
"virtue_receipt" object, a PDF /WINDI dictionary or an XMP element).
This is scraping, not parsing: a miss means "no receipt found", never a
hard failure.
"""

import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Optional

from .canonical import canonical_json


logger = logging.getLogger(__name__)

# Only the head of a document is searched for text markers
SCAN_WINDOW = 50_000

ENVELOPE_BEGIN = "WINDI-ENVELOPE-BEGIN"
ENVELOPE_END = "WINDI-ENVELOPE-END"

_ENVELOPE_RE = re.compile(ENVELOPE_BEGIN + r"([\s\S]*?)" + ENVELOPE_END)
_INLINE_RECEIPT_RE = re.compile(r'"virtue_receipt"\s*:\s*(\{[^}]+\})')
_PDF_WINDI_DICT_RE = re.compile(r"/WINDI\s*<<([^>]+)>>")
_PDF_DICT_ENTRY_RE = re.compile(r"/(\w+)\s*\(([^)]*)\)")
_XMP_RECEIPT_RE = re.compile(r"<windi:VirtueReceipt>([\s\S]*?)</windi:VirtueReceipt>")


@dataclass
class ExtractedMetadata:
    """
    What was found in a document.

    virtue_receipt may be None when an envelope was found but carried no
    receipt; the orchestrator reports that as an invalid receipt.
    """
    virtue_receipt: Optional[dict[str, Any]]
    envelope: Optional[dict[str, Any]] = None


def extract_receipt(buffer: bytes, filename: Optional[str] = None) -> Optional[ExtractedMetadata]:
    """
    Try to locate an embedded receipt.

    Args:
        buffer: Raw document bytes
        filename: Original file name, used to enable PDF-specific markers

    Returns:
        ExtractedMetadata, or None if no receipt could be found
    """
    head = buffer[:SCAN_WINDOW].decode("utf-8", errors="replace")

    match = _ENVELOPE_RE.search(head)
    if match:
        envelope = _loads(match.group(1).strip(), "envelope")
        if isinstance(envelope, dict):
            receipt = envelope.get("virtue_receipt") or envelope.get("virtueReceipt")
            return ExtractedMetadata(
                virtue_receipt=receipt if isinstance(receipt, dict) else None,
                envelope=envelope,
            )

    match = _INLINE_RECEIPT_RE.search(head)
    if match:
        receipt = _loads(match.group(1), "inline receipt")
        if isinstance(receipt, dict):
            return ExtractedMetadata(virtue_receipt=receipt)

    if filename and os.path.splitext(filename)[1].lower() == ".pdf":
        return _extract_pdf_metadata(buffer)

    return None


def _extract_pdf_metadata(buffer: bytes) -> Optional[ExtractedMetadata]:
    # latin-1 maps every byte to one character, like a binary string
    content = buffer.decode("latin-1")

    match = _PDF_WINDI_DICT_RE.search(content)
    if match:
        entries = parse_pdf_dict(match.group(1))
        if "VirtueReceipt" in entries:
            receipt = _loads(entries["VirtueReceipt"], "PDF /WINDI dictionary")
            if isinstance(receipt, dict):
                return ExtractedMetadata(virtue_receipt=receipt)

    match = _XMP_RECEIPT_RE.search(content)
    if match:
        receipt = _loads(match.group(1).strip(), "XMP metadata")
        if isinstance(receipt, dict):
            return ExtractedMetadata(virtue_receipt=receipt)

    return None


def parse_pdf_dict(text: str) -> dict[str, str]:
    """Parse "/Key (value)" pairs from a simplified PDF dictionary body."""
    return {key: value for key, value in _PDF_DICT_ENTRY_RE.findall(text)}


def _loads(text: str, source: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as exc:
        logger.debug("Ignoring malformed JSON in %s: %s", source, exc)
        return None


def embed_envelope(receipt: dict[str, Any], **extra: Any) -> str:
    """
    Render a WINDI envelope block carrying a receipt.

    Extra keyword arguments are added as top-level envelope fields.
    """
    envelope = dict(extra)
    envelope["virtue_receipt"] = receipt
    return f"{ENVELOPE_BEGIN}\n{canonical_json(envelope)}\n{ENVELOPE_END}"
