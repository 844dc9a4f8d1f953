"""
Bulk Register - resumable bulk domain registration on an ENS-style naming system.

Reads (domain, owner) pairs from a CSV, tracks each domain in a local progress
file, and submits one `ownerRegister` transaction per pending domain through the
registrar controller contract. Interrupted or partially failed runs resume from
the progress file:

- Successful domains are never submitted again
- Failed and not-yet-started domains are retried on the next run
- New CSV rows are appended to the progress file without touching known ones
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from bulk_register.config import RunConfig, Settings, build_run_config, get_settings
from bulk_register.domain.models import (
    Candidate,
    DomainStatus,
    RegistrationOutcome,
    TrackingRecord,
)
from bulk_register.infrastructure.record_store import RecordStore
from bulk_register.orchestrator import BatchSummary, process_records, run_registration
from bulk_register.reconciler import reconcile
from bulk_register.registration.executor import attempt_registration, register_domain
from bulk_register.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "RunConfig",
    "Settings",
    "build_run_config",
    "get_settings",
    # Domain
    "Candidate",
    "DomainStatus",
    "RegistrationOutcome",
    "TrackingRecord",
    # Pipeline
    "BatchSummary",
    "RecordStore",
    "process_records",
    "reconcile",
    "register_domain",
    "attempt_registration",
    "run_registration",
    # Logging
    "configure_logging",
    "get_logger",
]
