"""
Canonical JSON for hashing vault snapshots.

A snapshot is built only from dicts with str keys, lists, ints, strs and
None. Anything else (floats in particular) is rejected, so two processes
holding the same vault state always produce the same bytes.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


CANONICAL_ENCODING_VERSION = 1
DOMAIN_PREFIX = b"autovault:"


def _check_value(value: Any, path: str = "$") -> None:
    if value is None or isinstance(value, int):
        return
    if isinstance(value, str):
        if any(0xD800 <= ord(ch) <= 0xDFFF for ch in value):
            raise TypeError(f"{path}: lone surrogate in string")
        return
    if isinstance(value, list):
        for i, item in enumerate(value):
            _check_value(item, f"{path}[{i}]")
        return
    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError(f"{path}: dict keys must be str, got {type(k).__name__}")
            _check_value(k, path)
            _check_value(v, f"{path}.{k}")
        return
    raise TypeError(f"{path}: {type(value).__name__} is not allowed in canonical encoding")


def canonical_json_bytes(value: Any) -> bytes:
    """UTF-8 JSON with sorted keys and no whitespace."""
    _check_value(value)
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    return "0x" + hashlib.sha256(data).hexdigest()


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """`autovault:<label>:v<version>` followed by a NUL terminator."""
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if "\x00" in label or not label.isascii():
        raise ValueError("label must be NUL-free ASCII")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return DOMAIN_PREFIX + label.encode("ascii") + b":v" + str(version).encode("ascii") + b"\x00"
