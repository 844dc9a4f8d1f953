"""
Best-effort extraction of human-readable revert reasons.

Solidity's ``Error(string)`` payload is ``selector | offset | length | bytes``.
Skipping the ``0x`` prefix, the 4-byte selector and the two 32-byte words leaves
the string bytes at hex offset 138. Decoding never raises: any problem yields None.
"""

from __future__ import annotations

from typing import Any, Optional

from bulk_register.errors import DecodeError

REASON_HEX_OFFSET = 138


def _as_hex_payload(value: Any) -> Optional[str]:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, str) and value.startswith("0x"):
        return value
    return None


def extract_revert_data(error: BaseException) -> Optional[str]:
    """
    Find a hex revert payload on `error` or anything in its ``__cause__`` chain.

    Looks at ``revert_data``, ``data`` and a nested ``error.data`` (the shape
    JSON-RPC providers use for wrapped node errors).
    """
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        for attr in ("revert_data", "data"):
            payload = _as_hex_payload(getattr(current, attr, None))
            if payload:
                return payload
        nested = getattr(current, "error", None)
        if isinstance(nested, dict):
            payload = _as_hex_payload(nested.get("data"))
        else:
            payload = _as_hex_payload(getattr(nested, "data", None))
        if payload:
            return payload
        for arg in current.args:
            if isinstance(arg, dict):
                payload = _as_hex_payload(arg.get("data"))
                if payload:
                    return payload
        current = current.__cause__
    return None


def _decode(payload: str) -> str:
    tail = payload[REASON_HEX_OFFSET:]
    if not tail:
        raise DecodeError("payload too short to carry a reason")
    try:
        text = bytes.fromhex(tail).decode("utf-8")
    except ValueError as exc:
        raise DecodeError(str(exc)) from exc
    text = text.rstrip("\x00").strip()
    if not text:
        raise DecodeError("empty reason")
    return text


def decode_revert_reason(error: BaseException) -> Optional[str]:
    """Return the revert reason carried by `error`, or None if there is none."""
    payload = extract_revert_data(error)
    if payload is None:
        return None
    try:
        return _decode(payload)
    except DecodeError:
        return None


__all__ = ["decode_revert_reason", "extract_revert_data", "REASON_HEX_OFFSET"]
