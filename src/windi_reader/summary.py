"""
Verification result summaries for human-readable inspection.

Extracts key fields from a VerificationResult without modifying it.
"""

from typing import Any

from .verify import VerificationResult


def result_summary(result: VerificationResult) -> dict[str, Any]:
    """
    Extract a flat summary from a verification result.

    Args:
        result: A finished VerificationResult

    Returns:
        Dict with document_id, status, verified, hash, governance_level,
        chain_intact, error_count and warning_count
    """
    receipt = result.virtue_receipt

    return {
        "document_id": receipt.document_id if receipt else "",
        "status": result.status.value,
        "verified": result.verified,
        "document_hash": result.document_hash or "",
        "governance_level": result.governance_level or "",
        "isp_profile": result.isp_profile or "",
        "chain_intact": result.chain_intact,
        "error_count": len(result.errors),
        "warning_count": len(result.warnings),
    }


def format_result_summary(result: VerificationResult) -> str:
    """
    Format a verification result as a single-line human-readable string.

    Returns:
        String like "windi:doc:inv-001 | VERIFIED [HIGH] | chain intact | 3f7a9c01d2e4b5a6..."
    """
    s = result_summary(result)
    hash_short = s["document_hash"][:16] + "..." if len(s["document_hash"]) > 16 else s["document_hash"]
    document = s["document_id"] or "unknown document"
    level = f" [{s['governance_level']}]" if s["governance_level"] else ""
    chain = "chain intact" if s["chain_intact"] else "chain unverified"
    line = f"{document} | {s['status']}{level} | {chain} | {hash_short or 'no hash'}"
    if s["error_count"]:
        line += f" | {s['error_count']} error(s)"
    if s["warning_count"]:
        line += f" | {s['warning_count']} warning(s)"
    return line
