"""
windi-reader: Offline verification of WINDI-governed documents.

Checks that a document matches its Virtue Receipt (content hash,
structure, hash-chain link) without sending document content anywhere,
and builds canonical shelf strings for payment-field fingerprints.
"""

__version__ = "0.1.0"

from .canonical import canonical_json
from .hashing import (
    hash_json,
    sha256_hex,
    sha256_hex_from_file,
    sha256_hex_from_text,
    sha256_urn,
    sha256_urn_from_file,
    sha256_urn_from_text,
)
from .fields import (
    build_payment_shelves,
    canon_amount2,
    canon_currency,
    canon_iban,
    canon_text,
    canon_text_upper,
    shelf_amount_dec2,
    shelf_beneficiary_name,
    shelf_currency_iso,
    shelf_fingerprints,
    shelf_payto_iban,
    shelf_reference_e2e,
)
from .receipt import (
    GovernanceLevel,
    VirtueReceipt,
    validate_receipt,
)
from .chain import (
    GENESIS_HASH,
    compute_merkle_root,
    generate_chain_hash,
    receipt_chain_payload,
    verify_chain_link,
    verify_merkle_root,
    verify_receipt_chain,
)
from .seal import (
    ReceiptInput,
    build_receipt_chain,
    receipt_chain_root,
    seal_receipt,
    verify_receipt_chain_sequence,
)
from .extract import (
    ExtractedMetadata,
    embed_envelope,
    extract_receipt,
)
from .verify import (
    ReceiptCheck,
    VerificationResult,
    VerificationStatus,
    VerifyOptions,
    compute_hash,
    verify_buffer,
    verify_document,
    verify_receipt,
)
from .errors import (
    ErrorCode,
    WindiConfigError,
    WindiError,
    WindiHttpError,
)

__all__ = [
    # Hashing
    "sha256_hex",
    "sha256_hex_from_text",
    "sha256_hex_from_file",
    "sha256_urn",
    "sha256_urn_from_text",
    "sha256_urn_from_file",
    "hash_json",
    # Canonicalization
    "canonical_json",
    "canon_text",
    "canon_text_upper",
    "canon_iban",
    "canon_currency",
    "canon_amount2",
    "shelf_payto_iban",
    "shelf_amount_dec2",
    "shelf_currency_iso",
    "shelf_beneficiary_name",
    "shelf_reference_e2e",
    "build_payment_shelves",
    "shelf_fingerprints",
    # Receipts
    "GovernanceLevel",
    "VirtueReceipt",
    "validate_receipt",
    # Chain
    "GENESIS_HASH",
    "generate_chain_hash",
    "verify_chain_link",
    "compute_merkle_root",
    "verify_merkle_root",
    "receipt_chain_payload",
    "verify_receipt_chain",
    # Sealing
    "ReceiptInput",
    "seal_receipt",
    "build_receipt_chain",
    "verify_receipt_chain_sequence",
    "receipt_chain_root",
    # Extraction
    "ExtractedMetadata",
    "extract_receipt",
    "embed_envelope",
    # Verification
    "VerificationStatus",
    "VerificationResult",
    "VerifyOptions",
    "ReceiptCheck",
    "compute_hash",
    "verify_document",
    "verify_buffer",
    "verify_receipt",
    # Errors
    "ErrorCode",
    "WindiError",
    "WindiConfigError",
    "WindiHttpError",
]
