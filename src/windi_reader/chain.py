"""
Hash-chain and Merkle-root verification.

Chain hashes are SHA-256 over the plain concatenation of the previous
hash and the payload (no separator, no length prefix). The issuer side
computes them the same way, so this concatenation must not change.
"""

import logging

from .canonical import canonical_json
from .hashing import safe_equal, sha256_hex_from_text
from .receipt import VirtueReceipt


logger = logging.getLogger(__name__)

# Sentinel value for the first link in a hash chain (no predecessor)
GENESIS_HASH = "0" * 64


def generate_chain_hash(prev_hash: str, payload: str) -> str:
    """chain_hash = SHA-256(prev_hash + payload), lowercase hex."""
    return sha256_hex_from_text(prev_hash + payload)


def verify_chain_link(prev_hash: str, payload: str, expected_hash: str) -> bool:
    """Recompute a chain hash and compare it to the expected value."""
    return safe_equal(generate_chain_hash(prev_hash, payload), expected_hash)


def compute_merkle_root(leaves: list[str]) -> str:
    """
    Compute the Merkle root over an ordered list of leaf hashes.

    Adjacent leaves are paired left to right; on a level with an odd
    count the last element is paired with itself. A single leaf is its
    own root.

    Raises:
        ValueError: If leaves is empty
    """
    if not leaves:
        raise ValueError("Merkle root requires at least one leaf")

    level = list(leaves)
    while len(level) > 1:
        if len(level) % 2 == 1:
            level.append(level[-1])
        level = [
            sha256_hex_from_text(level[i] + level[i + 1])
            for i in range(0, len(level), 2)
        ]
    return level[0]


def verify_merkle_root(leaves: list[str], expected_root: str) -> bool:
    """
    Check that leaves produce the expected Merkle root.

    An empty leaf list is never valid. A single leaf must equal the
    expected root directly.
    """
    if not leaves:
        return False
    return safe_equal(compute_merkle_root(leaves), expected_root)


def receipt_chain_payload(receipt: VirtueReceipt) -> str:
    """
    Canonical payload bound by a receipt's chain hash.

    Only the core fields are covered; optional metadata such as scores
    or the ISP profile is not part of the chain.
    """
    return canonical_json({
        "document_id": receipt.document_id,
        "hash": receipt.hash,
        "timestamp": receipt.timestamp,
        "governance_level": receipt.governance_level,
    })


def verify_receipt_chain(receipt: VirtueReceipt) -> bool:
    """
    Verify a receipt's own chain link.

    A receipt without prev_hash/chain_hash has nothing to verify and is
    reported as intact.
    """
    if not receipt.has_chain_data:
        return True

    payload = receipt_chain_payload(receipt)
    intact = verify_chain_link(receipt.prev_hash or "", payload, receipt.chain_hash or "")
    if not intact:
        logger.debug(
            "Chain hash mismatch for %s: expected %s",
            receipt.document_id,
            generate_chain_hash(receipt.prev_hash or "", payload),
        )
    return intact
