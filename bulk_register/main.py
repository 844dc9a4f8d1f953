from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer

from bulk_register.config import Settings, build_run_config, get_settings
from bulk_register.errors import FatalError
from bulk_register.infrastructure.chain import open_contracts
from bulk_register.infrastructure.record_store import RecordStore
from bulk_register.orchestrator import run_registration
from bulk_register.reporter import print_records
from bulk_register.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Bulk domain registration through the registrar controller.")
log = get_logger(__name__)


def _apply_overrides(settings: Settings, **overrides: object) -> Settings:
    update = {key: value for key, value in overrides.items() if value is not None}
    return settings.model_copy(update=update) if update else settings


@app.command()
def info() -> None:
    """
    Show effective configuration values (secrets are never printed).
    """
    settings = get_settings()
    typer.echo(
        f"network={settings.network} base_domain={settings.base_domain or '<unset>'} | "
        f"csv={settings.csv_path} progress={settings.progress_path} "
        f"deployments={settings.deployments_dir} | "
        f"max_attempts={settings.max_attempts} "
        f"deployer_key={'set' if settings.deployer_private_key else 'unset'} "
        f"owner_key={'set' if settings.owner_private_key else 'unset'}"
    )


@app.command()
def run(
    csv_path: Optional[Path] = typer.Option(
        None, "--csv", "-c", help="Input CSV with domain,owner columns (default from settings)."
    ),
    progress_path: Optional[Path] = typer.Option(
        None, "--progress", "-p", help="Progress file to resume from (default from settings)."
    ),
    network: Optional[str] = typer.Option(
        None, "--network", "-n", help="Network name (localhost, lineaSepolia, mainnet)."
    ),
    max_attempts: Optional[int] = typer.Option(
        None, "--max-attempts", help="In-run attempts per domain for retryable failures."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Reconcile the CSV into the progress file without registering."
    ),
) -> None:
    """
    Register every pending domain, resuming from the progress file.
    """
    settings = _apply_overrides(
        get_settings(),
        csv_path=csv_path,
        progress_path=progress_path,
        network=network,
        max_attempts=max_attempts,
    )
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)

    try:
        config = build_run_config(settings)
        registrar = resolver = None
        if not dry_run:
            registrar, resolver = open_contracts(config)
        summary = run_registration(config, registrar, resolver, dry_run=dry_run)
    except FatalError as exc:
        log.error(f"{type(exc).__name__}: {exc}", extra={"error_type": type(exc).__name__})
        raise typer.Exit(code=1) from exc

    print_records(RecordStore(config.progress_path).load())
    typer.echo(json.dumps(summary.as_dict(), indent=2))


@app.command()
def status(
    progress_path: Optional[Path] = typer.Option(
        None, "--progress", "-p", help="Progress file to display (default from settings)."
    ),
) -> None:
    """
    Show the tracked domains and their last known status.
    """
    settings = _apply_overrides(get_settings(), progress_path=progress_path)
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)

    if not settings.progress_path.exists():
        typer.echo(f"No progress file at {settings.progress_path}.")
        return
    try:
        records = RecordStore(settings.progress_path).load()
    except FatalError as exc:
        log.error(f"{type(exc).__name__}: {exc}", extra={"error_type": type(exc).__name__})
        raise typer.Exit(code=1) from exc
    print_records(records)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
