from __future__ import annotations

from types import SimpleNamespace

from bulk_register.errors import EstimationError
from bulk_register.infrastructure.revert import decode_revert_reason, extract_revert_data


class _RpcError(Exception):
    def __init__(self, message: str, error: object) -> None:
        super().__init__(message)
        self.error = error


def test_decodes_reason_from_revert_data(encode_revert) -> None:
    error = EstimationError("reverted", revert_data=encode_revert("Not authorised"))

    assert decode_revert_reason(error) == "Not authorised"


def test_decodes_reason_from_nested_rpc_error(encode_revert) -> None:
    payload = encode_revert("Duration too short")
    dict_error = _RpcError("call failed", {"code": 3, "data": payload})
    attr_error = _RpcError("call failed", SimpleNamespace(data=payload))

    assert decode_revert_reason(dict_error) == "Duration too short"
    assert decode_revert_reason(attr_error) == "Duration too short"


def test_follows_cause_chain(encode_revert) -> None:
    cause = _RpcError("call failed", {"data": encode_revert("Taken")})
    try:
        try:
            raise cause
        except _RpcError as exc:
            raise EstimationError("estimate failed") from exc
    except EstimationError as wrapped:
        error = wrapped

    assert extract_revert_data(error) is not None
    assert decode_revert_reason(error) == "Taken"


def test_returns_none_without_payload() -> None:
    assert decode_revert_reason(RuntimeError("boom")) is None


def test_returns_none_for_short_or_invalid_payload() -> None:
    assert decode_revert_reason(EstimationError("x", revert_data="0x08c379a0")) is None
    assert decode_revert_reason(EstimationError("x", revert_data="0x" + "0" * 138 + "f")) is None
    assert decode_revert_reason(EstimationError("x", revert_data="0x" + "0" * 136 + "ffff")) is None
