"""
Load deployed contract metadata (address + ABI) for the selected network.

Deployment files follow the hardhat-deploy layout:
``<deployments_dir>/<NetworkDir>/<ContractName>.json`` holding at least
``{"address": "0x...", "abi": [...]}``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from web3 import Web3

from bulk_register.errors import AbiLoadError


@dataclass(frozen=True)
class Deployment:
    address: str
    abi: List[Dict[str, Any]]


def load_deployment(path: Path | str) -> Deployment:
    """
    Read one deployment file.

    Raises
    ------
    AbiLoadError
        If the file is missing, is not JSON, or lacks `address`/`abi`.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError as exc:
        raise AbiLoadError(f"Failed to load ABI from {path}: file not found") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise AbiLoadError(f"Failed to load ABI from {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise AbiLoadError(f"Failed to load ABI from {path}: expected a JSON object")
    address = payload.get("address")
    abi = payload.get("abi")
    if not isinstance(address, str) or not address:
        raise AbiLoadError(f"Failed to load ABI from {path}: missing 'address'")
    if not Web3.is_address(address):
        raise AbiLoadError(f"Failed to load ABI from {path}: invalid 'address' {address!r}")
    if not isinstance(abi, list):
        raise AbiLoadError(f"Failed to load ABI from {path}: missing 'abi'")
    return Deployment(address=address, abi=abi)


__all__ = ["Deployment", "load_deployment"]
