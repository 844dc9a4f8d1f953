"""
Contract interfaces the registration executor depends on.

The executor only needs a narrow slice of the registrar and resolver contracts.
Concrete web3 adapters live in `bulk_register.infrastructure.chain`; tests provide
in-memory fakes implementing the same protocols.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Protocol, runtime_checkable


@dataclass(frozen=True)
class RegistrationRequest:
    """Arguments of one `ownerRegister` call, in contract order."""

    name: str
    owner: str
    duration: int
    resolver: str
    data: List[Any]
    owner_controlled_fuses: int
    reverse_record: bool

    def as_args(self) -> tuple:
        return (
            self.name,
            self.owner,
            self.duration,
            self.resolver,
            self.data,
            self.owner_controlled_fuses,
            self.reverse_record,
        )


@runtime_checkable
class PendingTransaction(Protocol):
    """A broadcast transaction that can be waited on."""

    tx_hash: str

    def wait(self) -> Any:
        """
        Block until the transaction is mined and return its receipt.

        Raises ConfirmationError on timeout/RPC failure and ContractRevert if the
        mined transaction reverted.
        """
        ...


@runtime_checkable
class Registrar(Protocol):
    """
    Registrar controller contract.

    Implementations translate transport errors into `EstimationError` and
    `SubmissionError` respectively.
    """

    def estimate_gas(self, request: RegistrationRequest) -> int:
        ...

    def submit(self, request: RegistrationRequest, gas_limit: int) -> PendingTransaction:
        ...


@runtime_checkable
class Resolver(Protocol):
    """Public resolver contract: its address and the `setAddr` encoder."""

    address: str

    def encode_set_addr(self, node: bytes, owner: str) -> Any:
        ...


__all__ = ["RegistrationRequest", "PendingTransaction", "Registrar", "Resolver"]
