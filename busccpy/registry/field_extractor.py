"""Restricted field extraction from project record files.

The registry compiler does not decode record files with a general JSON
parser. Records are flat: every value is a string, ``null`` or an array of
strings. Two patterns cover that schema:

- scalar: ``"key": "value"`` (escaped quotes allowed) or ``"key": null``
- string array: ``"key": [ "a", "b", ... ]``

Any other value shape for a key (object, number, boolean, non-string array
element) is not understood and yields a missing value, never an error. This
is a schema constraint: a field that needs a richer type requires revisiting
the record schema and this module together.

Examples
--------
>>> text = '{"id": "x", "keywords": ["a", "b"], "count": 3}'
>>> extract_scalar(text, "id")
'x'
>>> extract_array(text, "keywords")
['a', 'b']
>>> extract_values(text, "count")
[]
"""

from __future__ import annotations

import json
import re

_STRING = r'"(?:[^"\\]|\\.)*"'
_KEY_PREFIX = r'(?<![\w\\])"{key}"\s*:\s*'
_TOKEN = re.compile(r'"(?:[^"\\]|\\.)*"|[{}\[\]]')
_KEY_VALUE_START = re.compile(r'\s*:\s*(?="|null\b|\[)')
_STRING_LITERAL = re.compile(_STRING)


def _scalar_pattern(key: str) -> re.Pattern[str]:
    return re.compile(
        _KEY_PREFIX.format(key=re.escape(key)) + rf"(?:({_STRING})|null\b)"
    )


def _array_pattern(key: str) -> re.Pattern[str]:
    return re.compile(
        _KEY_PREFIX.format(key=re.escape(key)) + rf'\[((?:[^\]"]|{_STRING})*)\]'
    )


def _decode_string(literal: str) -> str:
    """Decode one quoted JSON string literal, keeping the raw text if it is malformed."""
    try:
        return json.loads(literal)
    except json.JSONDecodeError:
        return literal[1:-1]


def extract_scalar(text: str, key: str) -> str | None:
    """Return the string value of ``key``, or ``None`` for ``null``/unsupported/missing."""
    match = _scalar_pattern(key).search(text)
    if match is None or match.group(1) is None:
        return None
    return _decode_string(match.group(1))


def extract_array(text: str, key: str) -> list[str] | None:
    """Return the string elements of array ``key``; ``None`` when it is not an array."""
    match = _array_pattern(key).search(text)
    if match is None:
        return None
    return [_decode_string(item) for item in _STRING_LITERAL.findall(match.group(1))]


def extract_values(text: str, key: str) -> list[str]:
    """Return every string value stored under ``key`` as a list.

    Scalars become one-element lists so that records written with unboxed
    single values compile like their array form.
    """
    scalar = extract_scalar(text, key)
    if scalar is not None:
        return [scalar]
    return extract_array(text, key) or []


def discover_keys(text: str) -> list[str]:
    """Return top-level keys whose values are strings, ``null`` or arrays.

    Strings are skipped as whole tokens while brackets are counted, so keys
    of nested objects (and text inside values) are never reported.

    Examples
    --------
    >>> discover_keys('{"id": "a", "meta": {"owner": "x"}, "tags": []}')
    ['id', 'tags']
    """
    keys: list[str] = []
    depth = 0
    for token in _TOKEN.finditer(text):
        literal = token.group(0)
        if literal in ("{", "["):
            depth += 1
        elif literal in ("}", "]"):
            depth -= 1
        elif depth == 1 and _KEY_VALUE_START.match(text, token.end()):
            key = _decode_string(literal)
            if key and key not in keys:
                keys.append(key)
    return keys


__all__ = ["discover_keys", "extract_array", "extract_scalar", "extract_values"]
