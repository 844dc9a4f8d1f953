"""
web3.py adapters for the registrar and resolver contracts.

Provides RPC connection with retry, signer resolution (node-unlocked accounts on
localhost, locally signed `eth_account` keys elsewhere), and the concrete
`Registrar` / `Resolver` implementations used by the executor. web3 exceptions are
translated into this package's `RegistrationError` subclasses at this boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from eth_account import Account
from eth_account.signers.local import LocalAccount
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted

from bulk_register.config import RunConfig
from bulk_register.errors import (
    ConfigError,
    ConfirmationError,
    ContractRevert,
    EstimationError,
    RpcUnavailableError,
    SubmissionError,
)
from bulk_register.infrastructure.deployments import Deployment, load_deployment
from bulk_register.registration.abstract import RegistrationRequest
from bulk_register.utils.logging import get_logger

log = get_logger(__name__)

SET_ADDR_SIGNATURE = "setAddr(bytes32,address)"


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(RpcUnavailableError),
    reraise=True,
)
def connect(rpc_url: str) -> Web3:
    """
    Open an HTTP provider and check connectivity, retrying transient failures.

    Raises
    ------
    RpcUnavailableError
        If the endpoint is still unreachable after 3 attempts.
    """
    w3 = Web3(Web3.HTTPProvider(rpc_url))
    if not w3.is_connected():
        raise RpcUnavailableError("Could not connect to the RPC endpoint")
    return w3


@dataclass(frozen=True)
class Signer:
    """Sending address, with a local account when transactions are signed client-side."""

    address: str
    account: Optional[LocalAccount] = None


def _from_key(key: Optional[str], label: str) -> Signer:
    try:
        account = Account.from_key(key)
    except (ValueError, TypeError) as exc:
        raise ConfigError(f"{label} is not a valid private key") from exc
    return Signer(address=account.address, account=account)


def resolve_signers(w3: Web3, config: RunConfig) -> Tuple[Signer, Signer]:
    """Return the (deployer, owner) signers for the configured network."""
    if config.network.local:
        accounts = w3.eth.accounts
        if len(accounts) < 2:
            raise ConfigError(
                f"Local node exposes {len(accounts)} account(s); deployer and owner need 2"
            )
        return Signer(address=accounts[0]), Signer(address=accounts[1])
    return (
        _from_key(config.deployer_private_key, "DEPLOYER_PRIVATE_KEY"),
        _from_key(config.owner_private_key, "OWNER_PRIVATE_KEY"),
    )


class Web3PendingTransaction:
    def __init__(self, w3: Web3, tx_hash: Any, timeout: float) -> None:
        self._w3 = w3
        self._raw_hash = tx_hash
        self.tx_hash = Web3.to_hex(tx_hash)
        self._timeout = timeout

    def wait(self) -> Any:
        try:
            receipt = self._w3.eth.wait_for_transaction_receipt(
                self._raw_hash, timeout=self._timeout
            )
        except TimeExhausted as exc:
            raise ConfirmationError(
                f"Transaction {self.tx_hash} not mined within {self._timeout}s"
            ) from exc
        except Exception as exc:  # noqa: BLE001 - provider errors vary by transport
            raise ConfirmationError(f"Waiting for {self.tx_hash} failed: {exc}") from exc

        if receipt["status"] == 0:
            raise ContractRevert(f"Transaction {self.tx_hash} reverted")
        return receipt


class Web3Registrar:
    """ETHRegistrarController bound to the owner signer."""

    def __init__(
        self, w3: Web3, deployment: Deployment, signer: Signer, confirmation_timeout: float
    ) -> None:
        self._w3 = w3
        self._signer = signer
        self._timeout = confirmation_timeout
        self.contract = w3.eth.contract(
            address=Web3.to_checksum_address(deployment.address), abi=deployment.abi
        )

    @property
    def address(self) -> str:
        return self.contract.address

    def owner(self) -> str:
        try:
            return self.contract.functions.owner().call()
        except Exception as exc:  # noqa: BLE001
            raise RpcUnavailableError(f"Cannot read registrar owner: {exc}") from exc

    def _function(self, request: RegistrationRequest):
        return self.contract.functions.ownerRegister(*request.as_args())

    def estimate_gas(self, request: RegistrationRequest) -> int:
        try:
            return self._function(request).estimate_gas({"from": self._signer.address})
        except ContractLogicError as exc:
            raise EstimationError(exc.message or str(exc), revert_data=_data(exc)) from exc
        except Exception as exc:  # noqa: BLE001
            raise EstimationError(str(exc)) from exc

    def submit(self, request: RegistrationRequest, gas_limit: int) -> Web3PendingTransaction:
        sender = self._signer.address
        try:
            if self._signer.account is None:
                tx_hash = self._function(request).transact({"from": sender, "gas": gas_limit})
            else:
                tx = self._function(request).build_transaction(
                    {
                        "from": sender,
                        "gas": gas_limit,
                        "nonce": self._w3.eth.get_transaction_count(sender, "pending"),
                    }
                )
                signed = self._signer.account.sign_transaction(tx)
                tx_hash = self._w3.eth.send_raw_transaction(signed.raw_transaction)
        except ContractLogicError as exc:
            raise SubmissionError(exc.message or str(exc), revert_data=_data(exc)) from exc
        except Exception as exc:  # noqa: BLE001
            raise SubmissionError(str(exc)) from exc
        return Web3PendingTransaction(self._w3, tx_hash, self._timeout)


class Web3Resolver:
    """PublicResolver; only its address and `setAddr` encoding are needed."""

    def __init__(self, w3: Web3, deployment: Deployment) -> None:
        self.contract = w3.eth.contract(
            address=Web3.to_checksum_address(deployment.address), abi=deployment.abi
        )
        self.address = self.contract.address

    def encode_set_addr(self, node: bytes, owner: str) -> str:
        return self.contract.encode_abi(
            SET_ADDR_SIGNATURE, args=[node, Web3.to_checksum_address(owner)]
        )


def _data(exc: ContractLogicError) -> Optional[str]:
    data = exc.data
    return data if isinstance(data, str) else None


def open_contracts(config: RunConfig) -> Tuple[Web3Registrar, Web3Resolver]:
    """
    Load deployments, connect and bind both contracts for `config.network`.

    Deployment files are read before connecting so a missing ABI fails fast.
    """
    registrar_deployment = load_deployment(config.registrar_deployment)
    resolver_deployment = load_deployment(config.resolver_deployment)

    w3 = connect(config.rpc_url)
    deployer, owner = resolve_signers(w3, config)
    log.info(
        f"Connected to {config.network.name}",
        extra={"network": config.network.name, "deployer": deployer.address, "owner": owner.address},
    )

    registrar = Web3Registrar(w3, registrar_deployment, owner, config.confirmation_timeout)
    resolver = Web3Resolver(w3, resolver_deployment)
    log.info(f"RegistrarController owner: {registrar.owner()}")
    return registrar, resolver


__all__ = [
    "connect",
    "Signer",
    "resolve_signers",
    "Web3PendingTransaction",
    "Web3Registrar",
    "Web3Resolver",
    "open_contracts",
]
