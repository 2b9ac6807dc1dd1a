from __future__ import annotations

import argparse
import json
from datetime import date, datetime
from pathlib import Path

from .config import get_config
from .exporter import export_report
from .importer import parse_import_text
from .logging import configure_logging
from .models import FilingStatus, StateCode
from .shifts import invalid_shifts
from .storage import DataStore
from .tax_tables import load_tax_table
from .time_range import local_instant
from .time_tracking import (
    TimeTrackingError,
    active_clock_in_week,
    add_shift,
    clock_in,
    clock_out,
    delete_shift,
    edit_shift,
    import_shifts,
    update_active_clock,
    week_bounds,
    weekly_shifts,
    weekly_stats,
)
from .views import (
    format_detailed_share_text,
    format_elapsed,
    format_share_text,
    format_stats,
    format_week_log,
)


def store_from_args(args: argparse.Namespace) -> DataStore:
    return DataStore(Path(args.data_dir) if args.data_dir else get_config().data_dir)


def current_instant(args: argparse.Namespace) -> datetime:
    return local_instant(datetime.fromisoformat(args.now)) if args.now else datetime.now()


def parse_date(value: str) -> date:
    return date.fromisoformat(value)


def anchor_from_args(args: argparse.Namespace) -> date:
    return parse_date(args.anchor) if args.anchor else current_instant(args).date()


def cmd_clock_in(args: argparse.Namespace) -> None:
    clock = clock_in(store_from_args(args), current_instant(args))
    print(f"Clocked in at {clock.time} on {clock.date}")


def cmd_clock_out(args: argparse.Namespace) -> None:
    shift = clock_out(store_from_args(args), current_instant(args))
    print(f"Clocked out: {shift.date} {shift.start_time} - {shift.end_time} ({shift.id})")


def cmd_clock_edit(args: argparse.Namespace) -> None:
    clock = update_active_clock(store_from_args(args), args.date, args.time)
    print(f"Clock-in corrected to {clock.date} {clock.time}")


def cmd_status(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    if store.active_clock is None:
        print("Not clocked in")
        return
    clock = store.active_clock
    print(f"Clocked in since {clock.date} {clock.time} ({format_elapsed(clock, current_instant(args))} elapsed)")


def cmd_add(args: argparse.Namespace) -> None:
    shift = add_shift(store_from_args(args), shift_date=args.date, start_time=args.start, end_time=args.end, shift_id=args.id)
    print(f"Added shift {shift.id} on {shift.date} {shift.start_time} - {shift.end_time}")


def cmd_edit(args: argparse.Namespace) -> None:
    shift = edit_shift(store_from_args(args), args.id, shift_date=args.date, start_time=args.start, end_time=args.end)
    print(f"Updated shift {shift.id} on {shift.date} {shift.start_time} - {shift.end_time}")


def cmd_delete(args: argparse.Namespace) -> None:
    shift = delete_shift(store_from_args(args), args.id)
    print(f"Deleted shift {shift.id}")


def cmd_week(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    anchor = anchor_from_args(args)
    start, end = week_bounds(anchor, store.settings.week_start_day)
    shifts = weekly_shifts(store, anchor)
    print(format_week_log(shifts, start, end))
    unreadable = invalid_shifts(shifts)
    if unreadable:
        print(f"Warning: {len(unreadable)} shift(s) have unreadable times and count as 0 hours")


def cmd_stats(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    table = load_tax_table(get_config().tax_table_version)
    print(format_stats(weekly_stats(store, anchor_from_args(args), current_instant(args), table)))


def cmd_share(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    anchor = anchor_from_args(args)
    now = current_instant(args)
    table = load_tax_table(get_config().tax_table_version)
    stats = weekly_stats(store, anchor, now, table)
    formatter = format_detailed_share_text if args.detailed else format_share_text
    text = formatter(weekly_shifts(store, anchor), store.settings, stats, active_clock_in_week(store, anchor), now)
    if args.output:
        start, end = week_bounds(anchor, store.settings.week_start_day)
        title = store.settings.company_name or "Work hours"
        output_path = export_report(text, Path(args.output), title=f"{title}: {start.isoformat()} to {end.isoformat()}")
        print(f"Report exported to {output_path}")
    else:
        print(text)


def cmd_import(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    path = Path(args.path)
    year = args.year or current_instant(args).year
    result = parse_import_text(
        path.read_text(encoding="utf-8"),
        year=year,
        separator=args.separator.replace("\\t", "\t"),
        columns=[column.strip() for column in args.columns.split(",")],
    )
    imported = import_shifts(store, result.shifts)
    print(f"Imported {len(imported)} shifts from {path}")
    if result.message:
        print(result.message)


def cmd_settings(args: argparse.Namespace) -> None:
    store = store_from_args(args)
    settings = store.settings
    tax = settings.tax_settings
    updates = {
        "company_name": args.company,
        "hourly_rate": args.rate,
        "overtime_threshold": args.ot_threshold,
        "overtime_multiplier": args.ot_multiplier,
        "min_weekly_guarantee": args.guarantee,
        "week_start_day": args.week_start,
    }
    tax_updates = {
        "filing_status": FilingStatus(args.filing_status) if args.filing_status else None,
        "state_code": StateCode(args.state) if args.state else None,
        "state_tax_rate": args.state_rate,
        "use_standard_deduction": args.standard_deduction,
        "custom_deduction": args.custom_deduction,
        "include_fica": args.fica,
        "additional_withholding": args.additional_withholding,
        "is_1099": args.contractor,
    }
    changed = False
    for name, value in updates.items():
        if value is not None:
            setattr(settings, name, value)
            changed = True
    for name, value in tax_updates.items():
        if value is not None:
            setattr(tax, name, value)
            changed = True
    if changed:
        store.save()
    print(json.dumps(settings.to_dict(), indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Work hours and pay estimate tracker")
    parser.add_argument("--data-dir", help="Directory holding the shift data (defaults to SHIFTPAY_DATA_DIR)")
    parser.add_argument("--now", help="Treat this ISO timestamp as the current time")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("clock-in", help="Start the live timer").set_defaults(func=cmd_clock_in)
    sub.add_parser("clock-out", help="Stop the live timer and save the shift").set_defaults(func=cmd_clock_out)

    clock_edit = sub.add_parser("clock-edit", help="Correct the open clock-in date and time")
    clock_edit.add_argument("date")
    clock_edit.add_argument("time")
    clock_edit.set_defaults(func=cmd_clock_edit)

    sub.add_parser("status", help="Show the running timer").set_defaults(func=cmd_status)

    add = sub.add_parser("add", help="Log a shift manually")
    add.add_argument("date")
    add.add_argument("start")
    add.add_argument("end")
    add.add_argument("--id")
    add.set_defaults(func=cmd_add)

    edit = sub.add_parser("edit", help="Change a logged shift")
    edit.add_argument("id")
    edit.add_argument("--date")
    edit.add_argument("--start")
    edit.add_argument("--end")
    edit.set_defaults(func=cmd_edit)

    delete = sub.add_parser("delete", help="Remove a logged shift")
    delete.add_argument("id")
    delete.set_defaults(func=cmd_delete)

    week = sub.add_parser("week", help="List the shifts of a week")
    week.add_argument("--anchor", help="Any date in the week (defaults to today)")
    week.set_defaults(func=cmd_week)

    stats = sub.add_parser("stats", help="Hours, gross and estimated net pay for a week")
    stats.add_argument("--anchor", help="Any date in the week (defaults to today)")
    stats.set_defaults(func=cmd_stats)

    share = sub.add_parser("share", help="Render the week as shareable text")
    share.add_argument("--anchor", help="Any date in the week (defaults to today)")
    share.add_argument("--detailed", action="store_true", help="Include the pay summary")
    share.add_argument("--output", help="Write to a .txt or .pdf file instead of stdout")
    share.set_defaults(func=cmd_share)

    imp = sub.add_parser("import", help="Import shifts from pasted text or CSV")
    imp.add_argument("path")
    imp.add_argument("--separator", default=",", help="Column separator (use \\t for tab)")
    imp.add_argument("--columns", default="date,start,end", help="Column order, e.g. date,ignore,start,end")
    imp.add_argument("--year", type=int, help="Year for share-format lines (defaults to the current year)")
    imp.set_defaults(func=cmd_import)

    settings = sub.add_parser("settings", help="Show or change pay and tax settings")
    settings.add_argument("--company")
    settings.add_argument("--rate", type=float, help="Hourly base rate")
    settings.add_argument("--ot-threshold", type=float, help="Overtime after this many hours per week")
    settings.add_argument("--ot-multiplier", type=float)
    settings.add_argument("--guarantee", type=float, help="Minimum weekly guaranteed pay")
    settings.add_argument("--week-start", type=int, choices=range(7), help="0 = Sunday .. 6 = Saturday")
    settings.add_argument("--filing-status", choices=[status.value for status in FilingStatus])
    settings.add_argument("--state", choices=[code.value for code in StateCode])
    settings.add_argument("--state-rate", type=float, help="Percent used with --state CUSTOM")
    settings.add_argument("--standard-deduction", action=argparse.BooleanOptionalAction, default=None)
    settings.add_argument("--custom-deduction", type=float)
    settings.add_argument("--fica", action=argparse.BooleanOptionalAction, default=None)
    settings.add_argument("--additional-withholding", type=float, help="Extra weekly withholding")
    settings.add_argument("--contractor", action=argparse.BooleanOptionalAction, default=None, help="1099, no withholding")
    settings.set_defaults(func=cmd_settings)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = get_config()
    configure_logging(config.log_level, json_output=config.log_json)
    try:
        args.func(args)
    except TimeTrackingError as exc:
        parser.exit(1, f"error: {exc}\n")


if __name__ == "__main__":
    main()
