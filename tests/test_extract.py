"""Tests for embedded receipt extraction."""

import json

import pytest

from windi_reader import embed_envelope, extract_receipt
from windi_reader.extract import SCAN_WINDOW, parse_pdf_dict


RECEIPT = {
    "document_id": "windi:doc:1",
    "hash": "ab" * 32,
    "timestamp": "2026-01-15T10:30:00Z",
    "governance_level": "LOW",
}


class TestEnvelope:

    def test_envelope_found(self):
        buffer = ("header\n" + embed_envelope(RECEIPT, version="1.0") + "\ntrailer").encode()
        metadata = extract_receipt(buffer, "letter.txt")

        assert metadata.virtue_receipt == RECEIPT
        assert metadata.envelope["version"] == "1.0"

    def test_camel_case_key(self):
        body = json.dumps({"virtueReceipt": RECEIPT})
        buffer = f"WINDI-ENVELOPE-BEGIN{body}WINDI-ENVELOPE-END".encode()
        assert extract_receipt(buffer).virtue_receipt == RECEIPT

    def test_envelope_without_receipt(self):
        buffer = b'WINDI-ENVELOPE-BEGIN {"version": "1.0"} WINDI-ENVELOPE-END'
        metadata = extract_receipt(buffer)

        assert metadata is not None
        assert metadata.virtue_receipt is None
        assert metadata.envelope == {"version": "1.0"}

    def test_malformed_envelope_falls_through(self):
        inline = json.dumps({"virtue_receipt": RECEIPT})
        buffer = f"WINDI-ENVELOPE-BEGIN {{not json WINDI-ENVELOPE-END {inline}".encode()
        assert extract_receipt(buffer).virtue_receipt == RECEIPT

    def test_marker_beyond_scan_window_is_ignored(self):
        buffer = b" " * SCAN_WINDOW + embed_envelope(RECEIPT).encode()
        assert extract_receipt(buffer) is None


class TestInlineReceipt:

    def test_inline_object(self):
        buffer = json.dumps({"meta": {"virtue_receipt": RECEIPT}}).encode()
        assert extract_receipt(buffer, "doc.json").virtue_receipt == RECEIPT

    def test_malformed_inline_is_no_receipt(self):
        assert extract_receipt(b'"virtue_receipt": {broken}', "doc.txt") is None


class TestPdfMarkers:

    def pdf_dict(self, receipt_json: str) -> bytes:
        return (
            "%PDF-1.7\n1 0 obj\n<< /WINDI << /Version (1.0) "
            f"/VirtueReceipt ({receipt_json}) >> >>\nendobj\n%%EOF"
        ).encode("latin-1")

    def test_windi_dictionary(self):
        buffer = self.pdf_dict(json.dumps(RECEIPT))
        assert extract_receipt(buffer, "invoice.pdf").virtue_receipt == RECEIPT

    def test_extension_case_insensitive(self):
        buffer = self.pdf_dict(json.dumps(RECEIPT))
        assert extract_receipt(buffer, "/tmp/INVOICE.PDF").virtue_receipt == RECEIPT

    def test_pdf_markers_ignored_for_other_files(self):
        buffer = self.pdf_dict(json.dumps(RECEIPT))
        assert extract_receipt(buffer, "invoice.txt") is None
        assert extract_receipt(buffer) is None

    def test_xmp_element(self):
        xmp = f"<x:xmpmeta><windi:VirtueReceipt>\n{json.dumps(RECEIPT)}\n</windi:VirtueReceipt></x:xmpmeta>"
        buffer = b"%PDF-1.7\n\xe2\xe3\xcf\xd3\n" + xmp.encode("latin-1")
        assert extract_receipt(buffer, "invoice.pdf").virtue_receipt == RECEIPT

    def test_malformed_dictionary_falls_back_to_xmp(self):
        xmp = f"<windi:VirtueReceipt>{json.dumps(RECEIPT)}</windi:VirtueReceipt>"
        buffer = b"%PDF-1.7 /WINDI << /VirtueReceipt (nope) >> " + xmp.encode("latin-1")
        assert extract_receipt(buffer, "invoice.pdf").virtue_receipt == RECEIPT

    def test_plain_pdf_has_no_receipt(self, document_bytes):
        assert extract_receipt(document_bytes, "invoice.pdf") is None


@pytest.mark.parametrize("text,expected", [
    ("/Version (1.0) /Issuer (WINDI)", {"Version": "1.0", "Issuer": "WINDI"}),
    ("/Empty ()", {"Empty": ""}),
    ("no entries here", {}),
])
def test_parse_pdf_dict(text, expected):
    assert parse_pdf_dict(text) == expected
