"""
Canonical serialization for deterministic comparison and hashing.

Replay results, CLI output and the JSONL pull log all go through these
functions so that identical state always produces identical bytes.
"""

import hashlib
import json
from datetime import datetime
from enum import Enum
from typing import Any

from .events import format_timestamp


def canonicalize(obj: Any) -> Any:
    """
    Convert arbitrary nested values to canonical form.

    Rules:
    - objects exposing to_dict() are expanded
    - dict keys converted to strings and sorted
    - enums replaced by their values, datetimes by ISO-8601 UTC
    - tuples converted to lists
    """
    if hasattr(obj, "to_dict") and callable(obj.to_dict):
        return canonicalize(obj.to_dict())
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return format_timestamp(obj)
    if isinstance(obj, dict):
        items = {_key(k): canonicalize(v) for k, v in obj.items()}
        return {k: items[k] for k in sorted(items)}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def _key(k: Any) -> str:
    if isinstance(k, Enum):
        return str(k.value)
    return str(k)


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Deterministic JSON bytes: sorted keys, no whitespace, UTF-8 kept as-is.
    """
    canon = canonicalize(obj)
    s = json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    return canonical_json_bytes(obj).decode("utf-8")


def state_hash(obj: Any) -> str:
    """SHA-256 hex digest of the canonical bytes of obj."""
    return hashlib.sha256(canonical_json_bytes(obj)).hexdigest()
