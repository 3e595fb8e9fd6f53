"""Shared fixtures for windi-reader tests."""

import hashlib

import pytest

from windi_reader import VirtueReceipt, seal_receipt


DOCUMENT_BYTES = b"%PDF-1.7\nInvoice INV-2026-001\nIBAN DE89 3704 0044 0532 0130 00\n%%EOF\n"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def document_bytes() -> bytes:
    return DOCUMENT_BYTES


@pytest.fixture
def document_hash(document_bytes) -> str:
    return hashlib.sha256(document_bytes).hexdigest()


@pytest.fixture
def sealed_receipt(document_hash) -> VirtueReceipt:
    """A genesis-linked receipt matching DOCUMENT_BYTES."""
    return seal_receipt(
        document_id="windi:doc:inv-2026-001",
        document_hash=document_hash,
        timestamp="2026-01-15T10:30:00Z",
        governance_level="HIGH",
        isp_profile="isp:bank-de:formal",
        sge_scores={"clarity": 0.92, "risk": 0.1},
        actor="windi:actor:issuer-01",
    )


@pytest.fixture
def unchained_receipt(document_hash) -> VirtueReceipt:
    """A receipt matching DOCUMENT_BYTES without prev_hash/chain_hash."""
    return VirtueReceipt(
        document_id="windi:doc:inv-2026-001",
        hash=document_hash,
        timestamp="2026-01-15T10:30:00Z",
        governance_level="MEDIUM",
    )
