from __future__ import annotations

from typing import Dict, Mapping, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from bulk_register.domain.models import DomainStatus, TrackingRecord

STATUS_STYLES: Dict[DomainStatus, str] = {
    DomainStatus.SUCCESS: "bold green",
    DomainStatus.FAILED: "bold red",
    DomainStatus.NOT_STARTED: "yellow",
}


def count_statuses(records: Mapping[str, TrackingRecord]) -> Dict[DomainStatus, int]:
    counts = {status: 0 for status in DomainStatus}
    for record in records.values():
        counts[record.status] += 1
    return counts


def print_records(
    records: Mapping[str, TrackingRecord],
    console: Optional[Console] = None,
    title: str = "Domain Registration Progress",
) -> None:
    """
    Render tracking records as a rich table, in store order.

    The caption summarizes how many domains sit in each status.
    """
    console = console or Console()

    if not records:
        console.print("[yellow]No domains tracked yet.[/yellow]")
        return

    counts = count_statuses(records)
    caption = " │ ".join(f"{status.value}: {counts[status]}" for status in DomainStatus)

    table = Table(title=title, box=box.ROUNDED, caption=caption)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Domain", style="cyan", no_wrap=True)
    table.add_column("Owner", style="magenta", no_wrap=True)
    table.add_column("Status", justify="center")
    table.add_column("Error", style="dim", overflow="fold")

    for index, record in enumerate(records.values(), start=1):
        style = STATUS_STYLES[record.status]
        table.add_row(
            str(index),
            record.domain,
            record.owner,
            f"[{style}]{record.status.value}[/{style}]",
            record.error or "",
        )

    console.print(table)
