"""
Merge CSV candidates into the tracked records.

Only unseen domains are inserted. Known records are never touched, even when the
CSV now names a different owner: the owner recorded first stays authoritative
and the mismatch is logged as a warning for an operator to resolve.
"""

from __future__ import annotations

from typing import Dict, Iterable

from bulk_register.domain.models import Candidate, DomainStatus, TrackingRecord
from bulk_register.utils.logging import get_logger

log = get_logger(__name__)


def reconcile(records: Dict[str, TrackingRecord], candidates: Iterable[Candidate]) -> bool:
    """
    Insert a `NotStarted` record for each candidate domain not yet in `records`.

    Parameters
    ----------
    records : dict[str, TrackingRecord]
        Tracked records, mutated in place. Insertion order follows the CSV.
    candidates : iterable[Candidate]
        Rows from the input loader. Errors raised while iterating propagate.

    Returns
    -------
    bool
        True if at least one record was inserted (the store needs saving).
    """
    inserted = 0
    for domain, owner in candidates:
        existing = records.get(domain)
        if existing is None:
            records[domain] = TrackingRecord(
                domain=domain, owner=owner, status=DomainStatus.NOT_STARTED
            )
            inserted += 1
        elif existing.owner != owner:
            log.warning(
                f"Owner mismatch for {domain}: tracked {existing.owner}, CSV {owner}; "
                "keeping tracked owner",
                extra={"domain": domain, "tracked_owner": existing.owner, "csv_owner": owner},
            )

    log.info(
        f"CSV file successfully processed, {inserted} new domain(s) added",
        extra={"inserted": inserted, "tracked": len(records)},
    )
    return inserted > 0


__all__ = ["reconcile"]
