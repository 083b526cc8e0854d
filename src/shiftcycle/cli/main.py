from __future__ import annotations

import json
from contextlib import nullcontext
from datetime import timedelta
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from shiftcycle.cli._utils import (
    PHASE_CODES,
    PHASE_STYLES,
    format_hours,
    parse_date,
    parse_instant,
    parse_leave_blocks,
    parse_month,
)
from shiftcycle.core import ShiftCycleValueError, iter_days, month_bounds
from shiftcycle.evaluation import (
    compute_stats,
    compute_year_stats,
    history_frame,
    monthly_distribution,
    summarize_stats,
    year_frame,
)
from shiftcycle.resolver import (
    RETURN_TO_WORK_HORIZON_DAYS,
    resolve_range,
    resolve_status,
)
from shiftcycle.rotation import RotationConfig
from shiftcycle.rotation.io import load_rotation
from shiftcycle.scheduling.reminders import next_reminder, reminder_for_snapshot
from shiftcycle.telemetry import QueryTelemetryLogger

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Resolve rotation phases and shift statistics from a rotation settings file.",
)
console = Console()

ConfigArgument = Annotated[
    Path,
    typer.Argument(exists=True, dir_okay=False, help="Path to the rotation settings YAML."),
]
ExtensionOption = Annotated[
    int | None,
    typer.Option("--extension", help="Override work_duration_extension (days) for this query."),
]
LeaveOption = Annotated[
    list[str] | None,
    typer.Option(
        "--leave",
        help="Repeatable extra annual-leave override in id=YYYY-MM-DD:YYYY-MM-DD format.",
    ),
]
TelemetryOption = Annotated[
    Path | None,
    typer.Option("--telemetry-log", help="Append a JSONL telemetry record for this query."),
]


def _load_config(
    config_path: Path, extension: int | None, leave: list[str] | None
) -> RotationConfig:
    try:
        config = load_rotation(config_path)
        if extension is not None:
            config = config.with_extension(extension)
        for block in parse_leave_blocks(leave):
            config = config.with_leave_block(block)
    except (ShiftCycleValueError, ValidationError) as exc:
        raise typer.BadParameter(str(exc)) from exc
    return config


def _telemetry(
    telemetry_log: Path | None,
    command: str,
    config_path: Path,
    reference: str,
    extension: int | None,
    leave: list[str] | None,
):
    if telemetry_log is None:
        return nullcontext(None)
    return QueryTelemetryLogger(
        log_path=telemetry_log,
        command=command,
        config_path=str(config_path),
        reference=reference,
        context={"extension": extension, "leave": list(leave or [])},
    )


def _cli_value(parser, value):
    try:
        return parser(value)
    except ShiftCycleValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def validate(config_path: ConfigArgument) -> None:
    """Validate a rotation settings file and print its derived cycle lengths."""
    config = _load_config(config_path, None, None)
    t = Table(title=f"Rotation: {config_path.name}")
    t.add_column("Field")
    t.add_column("Value")
    t.add_row("Anchor date", config.anchor_date.isoformat())
    t.add_row("Anchor mode", config.anchor_mode.value)
    t.add_row("Pattern", config.pattern_family.value)
    if config.is_industrial:
        t.add_row("Anchor phase offset", str(config.anchor_phase_offset))
    t.add_row("Work block", f"{config.work_duration} + {config.work_duration_extension} extension")
    t.add_row("Leave block", str(config.total_vacation))
    t.add_row("Super-cycle", str(config.total_cycle))
    t.add_row("Annual leave blocks", str(len(config.annual_leave_blocks)))
    t.add_row("Annual leave total", str(config.annual_leave_total))
    console.print(t)


@app.command()
def phase(
    config_path: ConfigArgument,
    on: Annotated[str | None, typer.Option("--date", "-d", help="First date (YYYY-MM-DD).")] = None,
    days: Annotated[int, typer.Option("--days", "-n", min=1, help="Number of days to list.")] = 1,
    extension: ExtensionOption = None,
    leave: LeaveOption = None,
    telemetry_log: TelemetryOption = None,
) -> None:
    """Resolve the phase of one or more consecutive dates."""
    start = _cli_value(parse_date, on)
    config = _load_config(config_path, extension, leave)
    with _telemetry(
        telemetry_log, "phase", config_path, start.isoformat(), extension, leave
    ) as logger:
        resolved = resolve_range(start, start + timedelta(days=days - 1), config)
        table = Table(title="Resolved phases")
        table.add_column("Date")
        table.add_column("Weekday")
        table.add_column("Phase")
        table.add_column("Leave origin")
        table.add_column("Cycle day", justify="right")
        table.add_column("Position", justify="right")
        table.add_column("Markers")
        for item in resolved:
            markers = [
                label
                for flag, label in (
                    (item.is_leave_start, "leave-start"),
                    (item.is_leave_end, "leave-end"),
                    (item.is_extension_day, "extension"),
                )
                if flag
            ]
            style = PHASE_STYLES[item.phase.value]
            table.add_row(
                item.day.isoformat(),
                item.day.strftime("%a"),
                f"[{style}]{item.phase.value}[/]",
                item.leave_origin.value if item.leave_origin else "-",
                str(item.cycle_day),
                f"{item.cycle_position + 1}/{config.total_cycle}",
                ", ".join(markers),
            )
        console.print(table)
        if logger is not None:
            logger.finalize(
                metrics={"days": len(resolved), "work_days": sum(item.is_work for item in resolved)}
            )


@app.command()
def status(
    config_path: ConfigArgument,
    at: Annotated[
        str | None,
        typer.Option("--at", help="Instant to evaluate (ISO date-time, default: now)."),
    ] = None,
    lead_minutes: Annotated[
        int | None,
        typer.Option("--lead-minutes", min=0, help="Report when a reminder should fire."),
    ] = None,
    extension: ExtensionOption = None,
    leave: LeaveOption = None,
    telemetry_log: TelemetryOption = None,
) -> None:
    """Show the active shift window, its progress and the return-to-work lookahead."""
    now = _cli_value(parse_instant, at)
    config = _load_config(config_path, extension, leave)
    with _telemetry(
        telemetry_log, "status", config_path, now.isoformat(), extension, leave
    ) as logger:
        snapshot = resolve_status(now, config)
        style = PHASE_STYLES[snapshot.active_phase.value]
        console.print(
            f"[bold {style}]{snapshot.active_phase.value}[/] "
            f"({snapshot.active_window.value}, {snapshot.window_state.value})"
        )
        console.print(
            f"Window: {snapshot.window_start:%Y-%m-%d %H:%M} -> {snapshot.window_end:%Y-%m-%d %H:%M}"
        )
        console.print(
            f"Progress: {snapshot.percent_complete:.1f}% | remaining {format_hours(snapshot.hours_remaining)}"
        )
        console.print(f"Tomorrow: {snapshot.tomorrow_phase.value}")
        if snapshot.day.is_extension_day:
            console.print("[yellow]Extension day[/]")
        if snapshot.day.leave_day_index is not None:
            console.print(
                f"Leave day {snapshot.day.leave_day_index + 1} of {snapshot.total_vacation_days}"
            )
        ret = snapshot.return_to_work
        if ret is not None:
            if ret.resolved and ret.day is not None and ret.phase is not None:
                console.print(f"Return to work: {ret.day.isoformat()} ({ret.phase.value})")
            else:
                console.print(
                    f"[yellow]Return to work unresolved within {RETURN_TO_WORK_HORIZON_DAYS} days[/]"
                )
        reminder = None
        if lead_minutes is not None:
            reminder = reminder_for_snapshot(snapshot, lead_minutes) or next_reminder(
                now, config, lead_minutes
            )
            if reminder is None:
                console.print("[dim]No upcoming shift to remind about.[/]")
            else:
                console.print(f"Reminder at: {reminder:%Y-%m-%d %H:%M}")
        if logger is not None:
            logger.finalize(
                metrics={
                    "today_phase": snapshot.today_phase.value,
                    "active_phase": snapshot.active_phase.value,
                    "window_state": snapshot.window_state.value,
                    "percent_complete": round(snapshot.percent_complete, 2),
                    "reminder_at": reminder.isoformat() if reminder else None,
                }
            )


@app.command()
def month(
    config_path: ConfigArgument,
    on: Annotated[
        str | None, typer.Option("--date", "-d", help="Reference date (YYYY-MM-DD).")
    ] = None,
    out_json: Annotated[
        Path | None,
        typer.Option("--out-json", help="Optional path to write the stats summary JSON."),
    ] = None,
    out_history_csv: Annotated[
        Path | None,
        typer.Option("--out-history-csv", help="Optional path to write the 30-day history CSV."),
    ] = None,
    extension: ExtensionOption = None,
    leave: LeaveOption = None,
    telemetry_log: TelemetryOption = None,
) -> None:
    """Summarise the reference month (distribution, hours, streak, work-block progress)."""
    reference = _cli_value(parse_date, on)
    config = _load_config(config_path, extension, leave)
    with _telemetry(
        telemetry_log, "month", config_path, reference.isoformat(), extension, leave
    ) as logger:
        stats = compute_stats(reference, config)
        month_stats = stats.month
        table = Table(title=f"Month {month_stats.month_start:%Y-%m}")
        table.add_column("Metric")
        table.add_column("Value", justify="right")
        for phase_value, count in month_stats.distribution.items():
            table.add_row(f"days: {phase_value.value}", str(count))
        table.add_row("Work days", str(month_stats.work_days))
        table.add_row("Hours worked", f"{month_stats.hours_worked:g}")
        table.add_row("Completed / remaining", f"{month_stats.completed_work_days} / {month_stats.remaining_work_days}")
        table.add_row("Completion", f"{month_stats.completion_percent}%")
        table.add_row("Rest days remaining", str(month_stats.rest_days_remaining))
        streak = f"{month_stats.streak.count}" + (" (horizon)" if month_stats.streak.exhausted else "")
        table.add_row("Work streak", streak)
        table.add_row(
            "Work block",
            f"{month_stats.work_block.days_worked_in_cycle}/{month_stats.work_block.total_work_block_days}",
        )
        console.print(table)

        summary = summarize_stats(stats)
        if out_json:
            out_json.parent.mkdir(parents=True, exist_ok=True)
            out_json.write_text(json.dumps(summary, indent=2))
            console.print(f"Wrote summary to {out_json}")
        if out_history_csv:
            out_history_csv.parent.mkdir(parents=True, exist_ok=True)
            history_frame(month_stats.history).to_csv(out_history_csv, index=False)
            console.print(f"Wrote history to {out_history_csv}")
        if logger is not None:
            month_summary: dict[str, Any] = summary["month"]  # type: ignore[assignment]
            logger.finalize(metrics=month_summary)


@app.command()
def year(
    config_path: ConfigArgument,
    on: Annotated[
        str | None, typer.Option("--date", "-d", help="Reference date (YYYY-MM-DD).")
    ] = None,
    by_month: Annotated[
        bool, typer.Option("--by-month", help="Print the month x phase day counts.")
    ] = False,
    out_csv: Annotated[
        Path | None,
        typer.Option("--out-csv", help="Optional path to write one row per day of the year."),
    ] = None,
    extension: ExtensionOption = None,
    leave: LeaveOption = None,
    telemetry_log: TelemetryOption = None,
) -> None:
    """Index the year's leave blocks and report the annual-leave pool."""
    reference = _cli_value(parse_date, on)
    config = _load_config(config_path, extension, leave)
    with _telemetry(
        telemetry_log, "year", config_path, reference.isoformat(), extension, leave
    ) as logger:
        stats = compute_year_stats(reference, config)
        table = Table(title=f"Year {stats.year}")
        table.add_column("Metric")
        table.add_column("Value", justify="right")
        table.add_row("Leave blocks", str(stats.vacations_in_year))
        table.add_row("Current block index", str(stats.current_vacation_index))
        table.add_row("Blocks remaining", str(stats.vacations_remaining))
        next_value = (
            "-" if stats.days_until_next_vacation is None else str(stats.days_until_next_vacation)
        )
        table.add_row("Days until next leave", next_value)
        table.add_row("Annual leave consumed", f"{stats.leave_pool.consumed}/{stats.leave_pool.total}")
        table.add_row("Annual leave remaining", str(stats.leave_pool.remaining))
        console.print(table)

        frame = None
        if by_month or out_csv:
            frame = year_frame(stats.year, config)
        if by_month and frame is not None:
            counts = monthly_distribution(frame, config)
            dist = Table(title=f"Phase days per month ({stats.year})")
            for column in counts.columns:
                dist.add_column(str(column), justify="right")
            for row in counts.itertuples(index=False):
                dist.add_row(*(str(value) for value in row))
            console.print(dist)
        if out_csv and frame is not None:
            out_csv.parent.mkdir(parents=True, exist_ok=True)
            frame.to_csv(out_csv, index=False)
            console.print(f"Wrote {len(frame)} day rows to {out_csv}")
        if logger is not None:
            logger.finalize(
                metrics={
                    "vacations_in_year": stats.vacations_in_year,
                    "current_vacation_index": stats.current_vacation_index,
                    "days_until_next_vacation": stats.days_until_next_vacation,
                    "annual_leave_consumed": stats.leave_pool.consumed,
                }
            )


@app.command()
def calendar(
    config_path: ConfigArgument,
    month_text: Annotated[
        str | None, typer.Option("--month", "-m", help="Month to render (YYYY-MM).")
    ] = None,
    extension: ExtensionOption = None,
    leave: LeaveOption = None,
) -> None:
    """Print a Sunday-first month grid of phase codes."""
    first = _cli_value(parse_month, month_text)
    config = _load_config(config_path, extension, leave)
    start, end = month_bounds(first)
    resolved = {item.day: item for item in resolve_range(start, end, config)}

    grid = Table(title=f"{start:%B %Y}", show_lines=True)
    for name in ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"):
        grid.add_column(name, justify="center")
    cells: list[str] = [""] * ((start.weekday() + 1) % 7)
    for day in iter_days(start, end):
        item = resolved[day]
        style = PHASE_STYLES[item.phase.value]
        cells.append(f"[{style}]{day.day:>2} {PHASE_CODES[item.phase.value]}[/]")
    while len(cells) % 7:
        cells.append("")
    for offset in range(0, len(cells), 7):
        grid.add_row(*cells[offset : offset + 7])
    console.print(grid)
    legend = ", ".join(f"{PHASE_CODES[phase.value]}={phase.value}" for phase in config.phases())
    console.print(f"[dim]{legend}[/]")


if __name__ == "__main__":
    app()
