"""
Receipt sealing and receipt-chain construction (issuer side).

The reader never seals receipts in production; this module exists so
that issuers, fixtures and tests build chains with exactly the hash
rules the reader verifies.
"""

from dataclasses import dataclass, replace
from typing import Optional

from .chain import (
    GENESIS_HASH,
    compute_merkle_root,
    generate_chain_hash,
    receipt_chain_payload,
)
from .hashing import safe_equal
from .receipt import VirtueReceipt


@dataclass
class ReceiptInput:
    """Input for one link of a receipt chain."""
    document_id: str
    document_hash: str
    timestamp: str
    governance_level: str
    isp_profile: Optional[str] = None
    sge_scores: Optional[dict[str, float]] = None
    actor: Optional[str] = None


def seal_receipt(
    document_id: str,
    document_hash: str,
    timestamp: str,
    governance_level: str,
    prev_hash: str = GENESIS_HASH,
    isp_profile: Optional[str] = None,
    sge_scores: Optional[dict[str, float]] = None,
    actor: Optional[str] = None,
) -> VirtueReceipt:
    """
    Create a receipt linked to prev_hash.

    Args:
        document_id: Document identifier
        document_hash: Lowercase hex SHA-256 of the document bytes
        timestamp: ISO-8601 timestamp
        governance_level: HIGH, MEDIUM or LOW
        prev_hash: Chain hash of the previous receipt (GENESIS_HASH for the first)

    Returns:
        VirtueReceipt with chain_hash computed over its core fields
    """
    unsealed = VirtueReceipt(
        document_id=document_id,
        hash=document_hash,
        timestamp=timestamp,
        governance_level=governance_level,
        prev_hash=prev_hash,
        isp_profile=isp_profile,
        sge_scores=sge_scores,
        actor=actor,
    )
    chain_hash = generate_chain_hash(prev_hash, receipt_chain_payload(unsealed))
    return replace(unsealed, chain_hash=chain_hash)


def build_receipt_chain(entries: list[ReceiptInput]) -> list[VirtueReceipt]:
    """
    Seal an ordered list of entries into a linked receipt chain.

    The first receipt links to GENESIS_HASH, every later one to the
    chain_hash of its predecessor.
    """
    chain: list[VirtueReceipt] = []

    for entry in entries:
        prev_hash = chain[-1].chain_hash if chain else GENESIS_HASH
        chain.append(seal_receipt(
            document_id=entry.document_id,
            document_hash=entry.document_hash,
            timestamp=entry.timestamp,
            governance_level=entry.governance_level,
            prev_hash=prev_hash or GENESIS_HASH,
            isp_profile=entry.isp_profile,
            sge_scores=entry.sge_scores,
            actor=entry.actor,
        ))

    return chain


def verify_receipt_chain_sequence(receipts: list[VirtueReceipt]) -> list[str]:
    """
    Verify linkage and chain hashes across an ordered list of receipts.

    Returns:
        Ordered list of error messages; empty if the chain is intact
    """
    errors: list[str] = []

    if not receipts:
        errors.append("Receipt chain must be a non-empty list")
        return errors

    for seq, receipt in enumerate(receipts):
        expected_prev = GENESIS_HASH if seq == 0 else (receipts[seq - 1].chain_hash or "")
        if not safe_equal(receipt.prev_hash or "", expected_prev):
            errors.append(f"Chain broken at sequence {seq}: prev_hash mismatch")

        expected = generate_chain_hash(receipt.prev_hash or "", receipt_chain_payload(receipt))
        if not safe_equal(receipt.chain_hash or "", expected):
            errors.append(f"Chain hash mismatch at sequence {seq}")

    return errors


def receipt_chain_root(receipts: list[VirtueReceipt]) -> str:
    """
    Merkle root over the chain hashes of a receipt chain.

    Raises:
        ValueError: If the chain is empty or a receipt is unsealed
    """
    leaves = []
    for receipt in receipts:
        if not receipt.chain_hash:
            raise ValueError(f"Receipt {receipt.document_id} has no chain_hash")
        leaves.append(receipt.chain_hash)
    return compute_merkle_root(leaves)
