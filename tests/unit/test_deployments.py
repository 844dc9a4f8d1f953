from __future__ import annotations

import json
from pathlib import Path

import pytest

from bulk_register.errors import AbiLoadError
from bulk_register.infrastructure.deployments import load_deployment

REGISTRAR_ADDRESS = "0x" + "ab" * 20


def test_load_deployment_reads_address_and_abi(tmp_path: Path) -> None:
    path = tmp_path / "ETHRegistrarController.json"
    path.write_text(
        json.dumps({"address": REGISTRAR_ADDRESS, "abi": [{"type": "function"}], "receipt": {}}),
        encoding="utf-8",
    )

    deployment = load_deployment(path)

    assert deployment.address == REGISTRAR_ADDRESS
    assert deployment.abi == [{"type": "function"}]


@pytest.mark.parametrize(
    "content",
    ["{", "[]", json.dumps({"abi": []}), json.dumps({"address": REGISTRAR_ADDRESS})],
)
def test_load_deployment_rejects_incomplete_metadata(tmp_path: Path, content: str) -> None:
    path = tmp_path / "PublicResolver.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(AbiLoadError):
        load_deployment(path)


def test_load_deployment_missing_file(tmp_path: Path) -> None:
    with pytest.raises(AbiLoadError, match="not found"):
        load_deployment(tmp_path / "missing.json")


def test_load_deployment_rejects_malformed_address(tmp_path: Path) -> None:
    path = tmp_path / "PublicResolver.json"
    path.write_text(json.dumps({"address": "0xnotanaddress", "abi": []}), encoding="utf-8")

    with pytest.raises(AbiLoadError, match="invalid 'address'"):
        load_deployment(path)
