"""
Domain models for bulk domain registration.

`TrackingRecord` is the durable unit of the progress file: one per domain, keyed by
domain name. `Candidate` is a row read from the input CSV, and `RegistrationOutcome`
is what the executor reports back for a single attempt.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, Field, model_validator


class DomainStatus(str, Enum):
    NOT_STARTED = "NotStarted"
    SUCCESS = "Success"
    FAILED = "Failed"

    @property
    def pending(self) -> bool:
        """True for statuses the batch driver will attempt."""
        return self is not DomainStatus.SUCCESS


class TrackingRecord(BaseModel):
    """
    Registration progress for a single domain.
    """

    domain: str = Field(..., min_length=1, description="Label being registered (store key).")
    owner: str = Field(..., min_length=1, description="Address the domain is registered to.")
    status: DomainStatus = Field(DomainStatus.NOT_STARTED, description="Last known outcome.")
    error: Optional[str] = Field(None, description="Last failure detail, only when Failed.")

    model_config = {
        "frozen": True,
    }

    @model_validator(mode="after")
    def _error_only_when_failed(self) -> "TrackingRecord":
        if self.error is not None and self.status is not DomainStatus.FAILED:
            raise ValueError(f"error is only allowed when status is {DomainStatus.FAILED.value}")
        return self


class Candidate(NamedTuple):
    """A (domain, owner) pair read from the input CSV."""

    domain: str
    owner: str


@dataclass(frozen=True)
class RegistrationOutcome:
    status: DomainStatus
    error: Optional[str] = None
    revert_reason: Optional[str] = None
    retryable: bool = False

    @classmethod
    def success(cls) -> "RegistrationOutcome":
        return cls(status=DomainStatus.SUCCESS)

    @classmethod
    def failed(
        cls, error: str, revert_reason: Optional[str] = None, retryable: bool = True
    ) -> "RegistrationOutcome":
        return cls(
            status=DomainStatus.FAILED,
            error=error,
            revert_reason=revert_reason,
            retryable=retryable,
        )


__all__ = ["DomainStatus", "TrackingRecord", "Candidate", "RegistrationOutcome"]
