"""Command-line interface for stakemap."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from stakemap import __version__
from stakemap.config import StakemapSettings, load_settings
from stakemap.errors import StakemapError
from stakemap.logging import setup_logging
from stakemap.models import Snapshot, load_snapshot

app = typer.Typer(
    name="stakemap",
    help="Aggregate stakeholder placement maps and measure relational dissonance.",
    no_args_is_help=True,
)
console = Console(width=min(100, Console().width))


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"stakemap {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Aggregate stakeholder placement maps and measure relational dissonance."""


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


SnapshotArg = Annotated[
    Path,
    typer.Argument(help="Project snapshot JSON (project + sessions)."),
]
VerboseOpt = Annotated[
    bool,
    typer.Option("-v", "--verbose", help="Show debug logging in the terminal."),
]


def _prepare(
    snapshot_path: Path,
    verbose: bool,
    **overrides: object,
) -> tuple[StakemapSettings, Snapshot]:
    """Load settings, configure logging and read the snapshot, or exit 1."""
    settings = load_settings(**overrides)
    setup_logging(output_dir=settings.output_dir, verbose=verbose)
    try:
        snapshot = load_snapshot(snapshot_path)
    except FileNotFoundError:
        console.print(f"[red]No such file:[/red] {snapshot_path}")
        raise typer.Exit(1)
    except ValidationError as exc:
        console.print(f"[red]Invalid snapshot[/red] {snapshot_path}: {exc.error_count()} error(s)")
        console.print(f"[dim]{exc.errors()[0]['loc']}: {exc.errors()[0]['msg']}[/dim]")
        raise typer.Exit(1)
    return settings, snapshot


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def analyse(
    snapshot_path: SnapshotArg,
    completed_only: Annotated[
        bool,
        typer.Option("--completed-only", help="Ignore sessions that were never submitted."),
    ] = False,
    board_size: Annotated[
        float | None,
        typer.Option("--board-size", help="Board width in px (default 600)."),
    ] = None,
    token_radius: Annotated[
        float | None,
        typer.Option("--token-radius", help="Token radius in px (default 24)."),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Write a log file under this directory."),
    ] = None,
    verbose: VerboseOpt = False,
) -> None:
    """Print consensus, per-respondent maps and dissonance for a snapshot."""
    from stakemap.report import build_report

    settings, snapshot = _prepare(
        snapshot_path,
        verbose,
        board_size=board_size,
        token_radius=token_radius,
        output_dir=output_dir,
        completed_only=completed_only or None,
    )
    try:
        report = build_report(
            snapshot.project,
            snapshot.sessions,
            settings.board(),
            completed_only=settings.completed_only,
        )
    except StakemapError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    config = snapshot.project.config
    console.print(f"\n  [bold]{snapshot.project.name}[/bold]")
    console.print(
        f"  [dim]{report.completed_sessions} completed of {report.total_sessions} sessions[/dim]\n"
    )

    consensus = Table(title="Global consensus (impact)")
    consensus.add_column("Stakeholder")
    consensus.add_column("Score", justify="right")
    consensus.add_column("±", justify="right")
    consensus.add_column("n", justify="right")
    for point in report.consensus_ranking():
        consensus.add_row(
            config.label_for(point.id), str(point.mean_score), f"{point.std_dev}", str(point.count)
        )
    console.print(consensus)

    for respondent, targets in report.relationships.items():
        if not targets:
            continue
        table = Table(title=f"Seen by {config.label_for(respondent)}")
        table.add_column("Stakeholder")
        table.add_column("Distance", justify="right")
        table.add_column("±", justify="right")
        table.add_column("Zone")
        table.add_column("n", justify="right")
        labels = report.relationship_zone_labels.get(respondent, {})
        for point in sorted(targets.values(), key=lambda p: p.mean_score):
            table.add_row(
                config.label_for(point.id),
                str(point.mean_score),
                f"{point.std_dev}",
                labels.get(point.id, ""),
                str(point.count),
            )
        console.print(table)

    dissonance = Table(title="Relational dissonance")
    dissonance.add_column("Pair")
    dissonance.add_column("A → B", justify="right")
    dissonance.add_column("B → A", justify="right")
    dissonance.add_column("Gap", justify="right")
    for pair in report.dissonance:
        dissonance.add_row(
            f"{config.label_for(pair.a)} ↔ {config.label_for(pair.b)}",
            str(pair.a_to_b) if pair.a_to_b_count else "[dim]–[/dim]",
            str(pair.b_to_a) if pair.b_to_a_count else "[dim]–[/dim]",
            str(pair.gap),
        )
    if not report.dissonance:
        console.print("[dim]Not enough overlapping data to calculate dissonance yet.[/dim]")
    else:
        console.print(dissonance)


# US spelling
app.command(name="analyze", hidden=True)(analyse)


@app.command()
def export(
    snapshot_path: SnapshotArg,
    csv_path: Annotated[
        Path | None,
        typer.Option("--csv", help="Write rows to this CSV file instead of the terminal."),
    ] = None,
    verbose: VerboseOpt = False,
) -> None:
    """Flatten every session into one row of distances and coordinates."""
    from stakemap.export import export_columns, export_rows

    settings, snapshot = _prepare(snapshot_path, verbose)
    config = snapshot.project.config
    columns = export_columns(config)
    rows = export_rows(snapshot.sessions, config, settings.board())

    if csv_path is not None:
        with csv_path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=columns)
            writer.writeheader()
            writer.writerows(rows)
        console.print(f"Wrote {len(rows)} rows to [bold]{csv_path}[/bold]")
        return

    for row in rows:
        table = Table(title=str(row["Session ID"]))
        table.add_column("Field")
        table.add_column("Value")
        for col in columns[1:]:
            table.add_row(col, str(row[col]))
        console.print(table)
