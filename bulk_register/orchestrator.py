"""
Batch driver and end-to-end registration pipeline.

Usage (example from CLI):
    from bulk_register.orchestrator import run_registration

    summary = run_registration(config, registrar, resolver)
    print(summary.as_dict())

Flow: load progress file -> reconcile with CSV -> persist if changed -> attempt
every pending record sequentially, persisting after each attempt.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from functools import partial
from typing import Callable, Dict, Optional

from bulk_register.config import RunConfig
from bulk_register.domain.models import DomainStatus, RegistrationOutcome, TrackingRecord
from bulk_register.infrastructure.csv_source import load_candidates
from bulk_register.infrastructure.record_store import RecordStore
from bulk_register.reconciler import reconcile
from bulk_register.registration.abstract import Registrar, Resolver
from bulk_register.registration.executor import attempt_registration
from bulk_register.utils.logging import get_logger

log = get_logger(__name__)

AttemptFn = Callable[[str, str], RegistrationOutcome]


@dataclass
class BatchSummary:
    tracked: int = 0
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def process_records(
    records: Dict[str, TrackingRecord],
    attempt: AttemptFn,
    store: RecordStore,
) -> BatchSummary:
    """
    Attempt every record that is not yet `Success`, one at a time.

    The whole mapping is saved after each attempt so a crash loses at most the
    attempt in flight.

    Parameters
    ----------
    records : dict[str, TrackingRecord]
        Tracked records in store order; updated in place with each outcome.
    attempt : callable
        ``attempt(domain, owner) -> RegistrationOutcome``. Must not raise for
        per-domain failures.
    store : RecordStore
        Where to persist after every attempt.
    """
    summary = BatchSummary(tracked=len(records))
    pending = sum(1 for record in records.values() if record.status.pending)
    position = 0

    for domain, record in records.items():
        if record.status is DomainStatus.SUCCESS:
            summary.skipped += 1
            continue

        position += 1
        log.info(
            f"[{position}/{pending}] Processing domain: {domain}, owner: {record.owner}",
            extra={"domain": domain, "owner": record.owner, "previous_status": record.status.value},
        )
        outcome = attempt(domain, record.owner)
        records[domain] = record.model_copy(
            update={
                "status": outcome.status,
                "error": outcome.error if outcome.status is DomainStatus.FAILED else None,
            }
        )
        store.save(records)

        summary.attempted += 1
        if outcome.status is DomainStatus.SUCCESS:
            summary.succeeded += 1
        else:
            summary.failed += 1

    log.info(
        "All domains processed.",
        extra={
            "attempted": summary.attempted,
            "succeeded": summary.succeeded,
            "failed": summary.failed,
            "skipped": summary.skipped,
        },
    )
    return summary


def prepare_records(config: RunConfig, store: Optional[RecordStore] = None) -> Dict[str, TrackingRecord]:
    """Load the progress file, merge new CSV candidates and persist if anything was added."""
    store = store or RecordStore(config.progress_path)
    records = store.load()
    if reconcile(records, load_candidates(config.csv_path)):
        store.save(records)
    return records


def run_registration(
    config: RunConfig,
    registrar: Optional[Registrar],
    resolver: Optional[Resolver],
    dry_run: bool = False,
) -> BatchSummary:
    """
    Run the full pipeline for `config`.

    Parameters
    ----------
    config : RunConfig
        Validated run configuration.
    registrar, resolver :
        Contract adapters. May be None only when `dry_run` is True.
    dry_run : bool
        Stop after reconciliation without touching the chain.

    Returns
    -------
    BatchSummary
        Counts for this run (`tracked` reflects the store after reconciliation).
    """
    store = RecordStore(config.progress_path)
    records = prepare_records(config, store)

    if dry_run:
        pending = sum(1 for record in records.values() if record.status.pending)
        log.info(
            f"[DRY RUN] {pending} of {len(records)} domain(s) would be attempted",
            extra={"pending": pending, "tracked": len(records)},
        )
        return BatchSummary(tracked=len(records), skipped=len(records) - pending)

    if registrar is None or resolver is None:
        raise ValueError("registrar and resolver are required unless dry_run is set")

    attempt = partial(
        attempt_registration,
        registrar=registrar,
        resolver=resolver,
        base_domain=config.base_domain,
        max_attempts=config.max_attempts,
        backoff_seconds=config.retry_backoff_seconds,
    )
    return process_records(records, attempt, store)


__all__ = [
    "BatchSummary",
    "process_records",
    "prepare_records",
    "run_registration",
]
