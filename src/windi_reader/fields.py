"""
Field canonicalization and shelf strings for payment fields.

A shelf string is a tagged, normalized form of one payment field
(``PAYTO|IBAN|DE89370400440532013000``). The issuer and the reader
normalize independently, so both sides must apply exactly these rules
for their shelf hashes to agree.

WARNING: canon_amount2 is a pragmatic normalizer for reader-side
checks. It is not accounting grade.
"""

import re
import unicodedata
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

from .hashing import sha256_urn_from_text


_WHITESPACE_RE = re.compile(r"\s+")
_IBAN_SEPARATORS_RE = re.compile(r"[\s-]")
_AMOUNT_CHARS_RE = re.compile(r"[0-9,.+\-]+")

_CURRENCY_CODES = {
    "€": "EUR",
    "EURO": "EUR",
    "EUR": "EUR",
    "$": "USD",
    "DOLLAR": "USD",
    "USD": "USD",
    "£": "GBP",
    "POUND": "GBP",
    "GBP": "GBP",
    "¥": "JPY",
    "YEN": "JPY",
    "JPY": "JPY",
    "CHF": "CHF",
    "FRANC": "CHF",
}

# Currency markers allowed around an amount, longest first so "EURO" wins over "EUR"
_AMOUNT_CURRENCY_RE = re.compile(
    "|".join(re.escape(code) for code in sorted(_CURRENCY_CODES, key=len, reverse=True)),
    re.IGNORECASE,
)

_CENTS = Decimal("0.01")

SHELF_PAYTO_IBAN = "PAYTO|IBAN"
SHELF_AMOUNT_DEC = "AMOUNT|DEC"
SHELF_CURRENCY_ISO = "CURRENCY|ISO4217"
SHELF_BENEFICIARY_NAME = "BENEFICIARY|NAME"
SHELF_REFERENCE_E2E = "REFERENCE|E2E"


def canon_text(value: Any) -> str:
    """Trim and collapse whitespace runs to a single space."""
    text = "" if value is None else str(value)
    return _WHITESPACE_RE.sub(" ", text.strip())


def canon_text_upper(value: Any) -> str:
    """canon_text, then NFKC normalization and uppercase."""
    return unicodedata.normalize("NFKC", canon_text(value)).upper()


def canon_iban(iban: Any) -> str:
    """
    Remove spaces and hyphens, uppercase.

    Normalization only; the IBAN checksum is not validated.
    """
    return _IBAN_SEPARATORS_RE.sub("", canon_text(iban)).upper()


def canon_currency(currency: Any) -> str:
    """Map a currency symbol or name to its ISO 4217 code."""
    code = canon_text_upper(currency)
    return _CURRENCY_CODES.get(code, code)


def canon_amount2(amount: Any) -> str:
    """
    Normalize a monetary amount to a two-decimal string.

    The separator convention is taken from whichever of "," and "." comes
    last: "1.234,50" and "1,234.50" both become "1234.50". Rounding is
    half-up on the decimal value.

    Only whitespace and known currency symbols or names are removed.
    Empty input, or anything else left over ("12abc34", "1.5e3"),
    yields "0.00".
    """
    raw = _AMOUNT_CURRENCY_RE.sub("", canon_text(amount))
    raw = _WHITESPACE_RE.sub("", raw)
    if not raw or not _AMOUNT_CHARS_RE.fullmatch(raw):
        return "0.00"

    if raw.rfind(",") > raw.rfind("."):
        normalized = raw.replace(".", "").replace(",", ".")
    else:
        normalized = raw.replace(",", "")

    try:
        with localcontext() as ctx:
            # quantize needs room for every integer digit plus the cents
            ctx.prec = max(ctx.prec, len(normalized) + 2)
            cents = Decimal(normalized).quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return "0.00"
    if cents.is_zero():
        return "0.00"
    return f"{cents:.2f}"


def shelf_payto_iban(iban: Any) -> str:
    return f"{SHELF_PAYTO_IBAN}|{canon_iban(iban)}"


def shelf_amount_dec2(amount: Any) -> str:
    return f"{SHELF_AMOUNT_DEC}|{canon_amount2(amount)}"


def shelf_currency_iso(currency: Any) -> str:
    return f"{SHELF_CURRENCY_ISO}|{canon_currency(currency)}"


def shelf_beneficiary_name(name: Any) -> str:
    return f"{SHELF_BENEFICIARY_NAME}|{canon_text_upper(name)}"


def shelf_reference_e2e(reference: Any) -> str:
    return f"{SHELF_REFERENCE_E2E}|{canon_text_upper(reference)}"


def build_payment_shelves(
    iban: Any = None,
    amount: Any = None,
    currency: Any = None,
    beneficiary: Any = None,
    reference: Any = None,
) -> list[str]:
    """
    Build shelf strings for the supplied payment fields.

    Fields left as None are skipped. Output order is fixed: IBAN, amount,
    currency, beneficiary, reference.
    """
    builders = [
        (iban, shelf_payto_iban),
        (amount, shelf_amount_dec2),
        (currency, shelf_currency_iso),
        (beneficiary, shelf_beneficiary_name),
        (reference, shelf_reference_e2e),
    ]
    return [build(value) for value, build in builders if value is not None]


def shelf_fingerprints(shelves: list[str]) -> dict[str, str]:
    """Map each shelf string to its "sha256:<hex>" fingerprint."""
    return {shelf: sha256_urn_from_text(shelf) for shelf in shelves}
