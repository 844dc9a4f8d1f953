"""
Error taxonomy for bulk domain registration.

Two families matter to callers:

- ``FatalError`` subclasses abort the run before any batch work happens
  (bad configuration, unreadable deployments, unreadable input or progress file,
  unreachable RPC endpoint).
- ``RegistrationError`` subclasses describe a single failed registration attempt.
  They are converted to a ``Failed`` tracking status by the executor and never
  abort the batch.
"""

from __future__ import annotations

from typing import Optional


class BulkRegisterError(Exception):
    """Base class for all errors raised by this package."""


class FatalError(BulkRegisterError):
    """An error that stops the whole run."""


class ConfigError(FatalError):
    """A required configuration value is missing or invalid."""


class AbiLoadError(FatalError):
    """Contract ABI/address metadata is missing or unreadable for the selected network."""


class InputError(FatalError):
    """The candidate CSV is missing or malformed."""


class ProgressFileError(FatalError):
    """The progress file exists but cannot be read back into tracking records."""


class RpcUnavailableError(FatalError):
    """The RPC endpoint could not be reached."""


class RegistrationError(BulkRegisterError):
    """
    A single registration attempt failed.

    ``revert_data`` holds the raw hex revert payload when the node returned one.
    """

    retryable: bool = True

    def __init__(self, message: str, revert_data: Optional[str] = None) -> None:
        super().__init__(message)
        self.revert_data = revert_data


class EstimationError(RegistrationError):
    """Gas estimation for the registration call failed."""


class SubmissionError(RegistrationError):
    """The registration transaction could not be signed or broadcast."""


class ConfirmationError(RegistrationError):
    """Waiting for the transaction receipt failed or timed out."""


class ContractRevert(RegistrationError):
    """The transaction was mined but reverted."""

    retryable = False


class DecodeError(BulkRegisterError):
    """Revert payload could not be decoded. Never escapes the decoder."""


__all__ = [
    "BulkRegisterError",
    "FatalError",
    "ConfigError",
    "AbiLoadError",
    "InputError",
    "ProgressFileError",
    "RpcUnavailableError",
    "RegistrationError",
    "EstimationError",
    "SubmissionError",
    "ConfirmationError",
    "ContractRevert",
    "DecodeError",
]
