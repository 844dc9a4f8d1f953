"""
Pytest configuration for bulk domain registration.

Provides fixtures for:
- A run configuration rooted in a temporary directory
- CSV and progress-file writers
- In-memory registrar/resolver fakes standing in for the web3 adapters
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import pytest

from bulk_register.config import NETWORKS, RunConfig
from bulk_register.registration.abstract import RegistrationRequest

FAKE_GAS_ESTIMATE = 210_000
RESOLVER_ADDRESS = "0x" + "11" * 20
ENCODED_SET_ADDR = "0xd5fa2b00"

_ENV_KEYS = (
    "NETWORK",
    "RPC_URL",
    "INFURA_API_KEY",
    "DEPLOYER_PRIVATE_KEY",
    "OWNER_PRIVATE_KEY",
    "BASE_DOMAIN",
    "DEPLOYMENTS_DIR",
    "DOMAINS_CSV",
    "PROGRESS_FILE",
    "LOG_LEVEL",
    "LOG_JSON",
    "REGISTER_MAX_ATTEMPTS",
    "REGISTER_RETRY_BACKOFF",
    "CONFIRMATION_TIMEOUT",
)


def revert_payload(reason: str) -> str:
    """ABI-encode `Error(string)` the way a reverting contract returns it."""
    raw = reason.encode("utf-8")
    padded = raw.ljust((len(raw) + 31) // 32 * 32, b"\x00")
    return "0x08c379a0" + f"{32:064x}" + f"{len(raw):064x}" + padded.hex()


class FakePendingTransaction:
    def __init__(self, tx_hash: str, error: Optional[Exception] = None) -> None:
        self.tx_hash = tx_hash
        self._error = error
        self.waited = False

    def wait(self) -> dict:
        self.waited = True
        if self._error is not None:
            raise self._error
        return {"status": 1, "transactionHash": self.tx_hash}


class FakeRegistrar:
    """
    Registrar double that records every call.

    Failures are configured per domain and per stage; each listed exception is
    raised once per attempt unless `sticky` is False, in which case it is raised
    only on the first attempt.
    """

    gas_estimate = FAKE_GAS_ESTIMATE

    def __init__(
        self,
        estimate_failures: Optional[Dict[str, Exception]] = None,
        submit_failures: Optional[Dict[str, Exception]] = None,
        confirm_failures: Optional[Dict[str, Exception]] = None,
        sticky: bool = True,
    ) -> None:
        self.estimate_failures = dict(estimate_failures or {})
        self.submit_failures = dict(submit_failures or {})
        self.confirm_failures = dict(confirm_failures or {})
        self.sticky = sticky
        self.estimated: List[RegistrationRequest] = []
        self.submitted: List[Tuple[RegistrationRequest, int]] = []
        self.pending: List[FakePendingTransaction] = []

    def _take(self, failures: Dict[str, Exception], name: str) -> Optional[Exception]:
        return failures.get(name) if self.sticky else failures.pop(name, None)

    def estimate_gas(self, request: RegistrationRequest) -> int:
        self.estimated.append(request)
        error = self._take(self.estimate_failures, request.name)
        if error is not None:
            raise error
        return self.gas_estimate

    def submit(self, request: RegistrationRequest, gas_limit: int) -> FakePendingTransaction:
        self.submitted.append((request, gas_limit))
        error = self._take(self.submit_failures, request.name)
        if error is not None:
            raise error
        pending = FakePendingTransaction(
            f"0x{len(self.submitted):064x}", self._take(self.confirm_failures, request.name)
        )
        self.pending.append(pending)
        return pending

    @property
    def submitted_names(self) -> List[str]:
        return [request.name for request, _ in self.submitted]


class FakeResolver:
    def __init__(self) -> None:
        self.address = RESOLVER_ADDRESS
        self.encoded: List[Tuple[bytes, str]] = []

    def encode_set_addr(self, node: bytes, owner: str) -> str:
        self.encoded.append((node, owner))
        return ENCODED_SET_ADDR


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's environment and `.env` out of every test."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def csv_path(tmp_path: Path) -> Path:
    return tmp_path / "domains.csv"


@pytest.fixture
def progress_path(tmp_path: Path) -> Path:
    return tmp_path / "progress.json"


@pytest.fixture
def write_csv(csv_path: Path) -> Callable[[Iterable[Tuple[str, str]]], Path]:
    def _write(rows: Iterable[Tuple[str, str]]) -> Path:
        with csv_path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["domain", "owner"])
            writer.writerows(rows)
        return csv_path

    return _write


@pytest.fixture
def write_progress(progress_path: Path) -> Callable[[List[dict]], Path]:
    """Write a progress file from a list of record dicts, keyed by their domain."""

    def _write(records: List[dict]) -> Path:
        pairs = [[record["domain"], record] for record in records]
        progress_path.write_text(json.dumps(pairs, indent=2), encoding="utf-8")
        return progress_path

    return _write


@pytest.fixture
def run_config(tmp_path: Path, csv_path: Path, progress_path: Path) -> RunConfig:
    return RunConfig(
        network=NETWORKS["localhost"],
        rpc_url="http://localhost:8545",
        base_domain="linea",
        deployer_private_key=None,
        owner_private_key=None,
        deployments_dir=tmp_path / "deployments",
        csv_path=csv_path,
        progress_path=progress_path,
        max_attempts=1,
        retry_backoff_seconds=0.0,
        confirmation_timeout=1.0,
    )


@pytest.fixture
def registrar() -> FakeRegistrar:
    return FakeRegistrar()


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def make_registrar() -> Callable[..., FakeRegistrar]:
    return FakeRegistrar


@pytest.fixture
def encode_revert() -> Callable[[str], str]:
    return revert_payload
