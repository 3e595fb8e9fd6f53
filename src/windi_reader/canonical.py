"""
Canonical JSON for receipt payloads and chain hashing.

Receipt issuers hash the same payloads, so the output here has to be
byte-identical to theirs:

- mapping keys in code-point order, non-string keys stringified
- compact separators, no insignificant whitespace
- integral numbers without a fractional part, NaN and infinities as null
- strings escaped as JSON requires, non-ASCII left literal
"""

import json
import math
from decimal import Decimal
from typing import Any, Union


Number = Union[int, float, Decimal]

# Integral floats at or above this magnitude keep JSON exponent notation
_MAX_PLAIN_INTEGER = 10**21


def canonical_json(value: Any) -> str:
    """
    Serialize a value to its canonical JSON text.

    Never raises: values outside the JSON data model are serialized as
    the JSON string of their ``str()``.

    Args:
        value: Any value, normally a receipt dict or part of one

    Returns:
        Compact JSON with sorted keys
    """
    return _encode(value)


def _encode(value: Any) -> str:
    if value is None:
        return "null"
    # bool first: True and False are ints too
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return _encode_number(value)
    if isinstance(value, str):
        return _encode_string(value)
    if isinstance(value, dict):
        return _encode_mapping(value)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    return _encode_string(str(value))


def _encode_number(num: Number) -> str:
    if isinstance(num, Decimal):
        if not num.is_finite():
            return "null"
        if num != num.to_integral_value():
            return _encode_number(float(num))
        num = int(num)

    if isinstance(num, float):
        if not math.isfinite(num):
            return "null"
        if num.is_integer() and abs(num) < _MAX_PLAIN_INTEGER:
            return str(int(num))
        text = json.dumps(num)
        return text[:-2] if text.endswith(".0") else text

    return str(num)


def _encode_string(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _encode_mapping(obj: dict) -> str:
    items = sorted(((str(key), val) for key, val in obj.items()), key=lambda item: item[0])
    return "{" + ",".join(f"{_encode_string(key)}:{_encode(val)}" for key, val in items) + "}"
