"""
Input loader: read (domain, owner) candidates from a CSV file with a header row.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterator

from bulk_register.domain.models import Candidate
from bulk_register.errors import InputError

REQUIRED_COLUMNS = ("domain", "owner")


def load_candidates(csv_path: Path | str) -> Iterator[Candidate]:
    """
    Lazily yield candidates from `csv_path`.

    Re-invoking re-reads the file from the start. Malformed input raises
    `InputError` instead of being skipped, since a silently dropped row would
    never be registered.

    Raises
    ------
    InputError
        If the file is missing, lacks the `domain`/`owner` header columns, or a
        row has an empty domain or owner.
    """
    path = Path(csv_path)
    try:
        f = path.open("r", newline="", encoding="utf-8")
    except OSError as exc:
        raise InputError(f"Cannot open input CSV {path}: {exc}") from exc

    with f:
        reader = csv.DictReader(f)
        header = [name.strip() for name in reader.fieldnames or []]
        missing = [column for column in REQUIRED_COLUMNS if column not in header]
        if missing:
            raise InputError(f"Input CSV {path} is missing required column(s): {', '.join(missing)}")
        reader.fieldnames = header

        try:
            for row in reader:
                domain = (row.get("domain") or "").strip()
                owner = (row.get("owner") or "").strip()
                if not domain or not owner:
                    raise InputError(
                        f"Input CSV {path} line {reader.line_num}: domain and owner are required"
                    )
                yield Candidate(domain=domain, owner=owner)
        except csv.Error as exc:
            raise InputError(f"Input CSV {path} line {reader.line_num}: {exc}") from exc


__all__ = ["load_candidates", "REQUIRED_COLUMNS"]
