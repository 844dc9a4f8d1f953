"""
Durable store of tracking records (the progress file).

The file is a JSON array of ``[domain, record]`` pairs so that insertion order is
preserved exactly as written. It is the single source of truth for what has been
attempted; the CSV is only a source of candidates.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict

from pydantic import ValidationError

from bulk_register.domain.models import TrackingRecord
from bulk_register.errors import ProgressFileError
from bulk_register.utils.logging import get_logger

log = get_logger(__name__)

Records = Dict[str, TrackingRecord]


class RecordStore:
    """
    Load and persist the domain -> TrackingRecord mapping.

    Every `save` rewrites the whole file through a temporary sibling and
    `os.replace`, so readers never observe a half-written progress file.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> Records:
        """
        Read persisted records, creating an empty progress file on first use.

        Raises
        ------
        ProgressFileError
            If the file exists but is not a valid list of ``[domain, record]`` pairs.
        """
        if not self.path.exists():
            log.info(f"Creating progress file {self.path}", extra={"path": str(self.path)})
            self._write("[]")
            return {}

        try:
            with self.path.open("r", encoding="utf-8") as f:
                pairs = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ProgressFileError(f"Cannot read progress file {self.path}: {exc}") from exc

        if not isinstance(pairs, list):
            raise ProgressFileError(f"Progress file {self.path} must contain a JSON array")

        records: Records = {}
        for index, pair in enumerate(pairs):
            if not isinstance(pair, list) or len(pair) != 2:
                raise ProgressFileError(
                    f"Entry {index} in {self.path} is not a [domain, record] pair"
                )
            domain, raw = pair
            try:
                record = TrackingRecord.model_validate(raw)
            except ValidationError as exc:
                raise ProgressFileError(f"Entry {index} ({domain!r}) is invalid: {exc}") from exc
            if record.domain != domain:
                raise ProgressFileError(
                    f"Entry {index} is keyed {domain!r} but describes {record.domain!r}"
                )
            records[domain] = record

        log.debug(f"Loaded {len(records)} tracking records", extra={"records": len(records)})
        return records

    def save(self, records: Records) -> None:
        """Overwrite the progress file with the full mapping."""
        pairs = [
            [domain, record.model_dump(mode="json", exclude_none=True)]
            for domain, record in records.items()
        ]
        self._write(json.dumps(pairs, indent=2))

    def _write(self, content: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["RecordStore", "Records"]
