"""
Command-line entrypoint.

Usage:
    python -m drively serve                       # HTTP API + daily reminder job
    python -m drively status                      # progress summary + reminders
    python -m drively export --format csv -o drives.csv
    python -m drively log --date 2024-06-01 --start 18:30 --end 19:45
    python -m drively reset --yes
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from drively.config import get_settings

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run("drively.api.main:app", host=settings.api_host, port=settings.api_port)
    return 0


def _cmd_status(args: argparse.Namespace) -> int:
    from drively.analysis.progress import format_drive_line, format_share_message
    from drively.analysis.reminders import build_reminders
    from drively.api.main import build_coordinator

    coordinator = build_coordinator()
    document = coordinator.initialize()
    print(format_share_message(document.user, document.streaks))

    recent = sorted(document.drives, key=lambda d: (d.date, d.start_time), reverse=True)[:args.recent]
    if recent:
        print("\nRecent drives:")
        for drive in recent:
            print(f"  {format_drive_line(drive)}")

    reminders = build_reminders(
        document,
        coordinator.today(),
        backup_interval_days=get_settings().backup_reminder_days,
        freeze_cap=coordinator.freeze_cap,
    )
    for reminder in reminders:
        print(f"* {reminder.message}")
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    from drively.api.main import build_coordinator

    coordinator = build_coordinator()
    document = coordinator.initialize()
    if args.format == "json":
        document = coordinator.update_settings(last_backup_date=coordinator.today())
        body = coordinator.store.export_json(document)
    else:
        body = coordinator.store.export_csv(document)

    if args.output:
        Path(args.output).write_text(body, encoding="utf-8")
        logger.info("Exported %s to %s", args.format, args.output)
    else:
        sys.stdout.write(body)
    return 0


def _cmd_log(args: argparse.Namespace) -> int:
    from drively.analysis.progress import format_drive_line
    from drively.analysis.times import current_time, format_date_for_storage
    from drively.api.main import build_coordinator
    from drively.errors import ParseError, StateError
    from drively.state.drive_factory import build_drive

    coordinator = build_coordinator()
    document = coordinator.initialize()
    try:
        drive = build_drive(
            coordinator.clock,
            document.settings,
            date=args.date or format_date_for_storage(coordinator.today()),
            start_time=args.start,
            end_time=args.end or current_time(coordinator.clock.now()),
            duration=args.duration,
            paused_minutes=args.paused,
            existing_ids=[d.id for d in document.drives],
            license_type=document.user.license_type,
            require_supervisor=args.require_supervisor,
            supervisor_name=args.supervisor,
            supervisor_age=args.supervisor_age,
        )
        document = coordinator.add_drive(drive)
    except (ParseError, StateError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Logged {format_drive_line(drive)}. Streak: {document.streaks.current} days.")
    return 0 if coordinator.save_queue.last_result else 1


def _cmd_reset(args: argparse.Namespace) -> int:
    from drively.api.main import build_coordinator

    if not args.yes:
        print("Refusing to reset without --yes. This deletes all drives.", file=sys.stderr)
        return 1
    coordinator = build_coordinator()
    coordinator.initialize()
    asyncio.run(coordinator.reset())
    print("All data cleared.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="drively", description="Supervised driving log")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the HTTP API").set_defaults(func=_cmd_serve)
    status = sub.add_parser("status", help="Show progress, recent drives and reminders")
    status.add_argument("--recent", type=int, default=5, help="Number of recent drives to list")
    status.set_defaults(func=_cmd_status)

    export = sub.add_parser("export", help="Export data")
    export.add_argument("--format", choices=["json", "csv"], default="json")
    export.add_argument("-o", "--output", help="File to write (default: stdout)")
    export.set_defaults(func=_cmd_export)

    log = sub.add_parser("log", help="Log a finished drive")
    log.add_argument("--date", help="YYYY-MM-DD (default: today)")
    log.add_argument("--start", required=True, help="HH:MM")
    log.add_argument("--end", help="HH:MM (default: now)")
    log.add_argument("--duration", type=int, help="Driving minutes (default: end - start - paused)")
    log.add_argument("--paused", type=int, default=0, help="Minutes paused")
    log.add_argument("--supervisor", help="Supervising adult's name")
    log.add_argument("--supervisor-age", type=int, help="Supervising adult's age (21+)")
    log.add_argument(
        "--require-supervisor", action="store_true",
        help="Demand supervisor details even when not on a learner permit",
    )
    log.set_defaults(func=_cmd_log)

    reset = sub.add_parser("reset", help="Delete all data")
    reset.add_argument("--yes", action="store_true", help="Confirm the reset")
    reset.set_defaults(func=_cmd_reset)

    return parser


def main(argv=None) -> int:
    _configure_logging()
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
