"""
Domain package for bulk domain registration.

Exports the core models shared by the record store, reconciler, executor and
batch driver. Keep this package focused on data definitions and validation.
"""

from bulk_register.domain.models import (
    Candidate,
    DomainStatus,
    RegistrationOutcome,
    TrackingRecord,
)

__all__ = [
    "Candidate",
    "DomainStatus",
    "RegistrationOutcome",
    "TrackingRecord",
]
