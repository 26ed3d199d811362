from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from tabulate import tabulate

from .core.config import get_settings
from .core.errors import MetronomeError
from .core.logging_setup import setup_logging
from .db.session import init_db, make_engine, session_scope
from .schemas.filters import FILTER_CHOICES
from .schemas.tasks import CategoryTotals, TaskList
from .services import lifecycle, query
from .services.formatting import EMPTY, format_timestamp

logger = logging.getLogger(__name__)

LIST_HEADERS = ["ID", "TASK", "START TIME", "END TIME", "TOTAL TIME", "CATEGORY"]
TOTAL_HEADERS = ["CATEGORY", "TOTAL TIME"]


def _print_window(result) -> None:
    # Only announce a window the user asked for, or one that was ignored.
    if result.window.cutoff or not result.window.recognized:
        print(f"** {result.window.label} **")


def _print_tasks(result: TaskList) -> None:
    _print_window(result)
    if not result.tasks:
        print("No tasks found.")
        return
    rows = [
        [
            t.id,
            t.name,
            format_timestamp(t.start_time),
            format_timestamp(t.end_time),
            str(t.duration) if t.duration is not None else EMPTY,
            t.category,
        ]
        for t in result.tasks
    ]
    print(tabulate(rows, headers=LIST_HEADERS, tablefmt="github"))
    print(f"{result.count} task(s)")


def _print_totals(result: CategoryTotals) -> None:
    _print_window(result)
    if not result.totals:
        print("No completed tasks found.")
        return
    rows = [[t.category, str(t.duration)] for t in result.totals]
    print(tabulate(rows, headers=TOTAL_HEADERS, tablefmt="github"))


def cmd_start(ns: argparse.Namespace, session) -> int:
    res = lifecycle.start_task(session, ns.task, ns.category)
    print(f'Task "{res.name}" started at {format_timestamp(res.start_time)}!')
    return 0


def cmd_end(ns: argparse.Namespace, session) -> int:
    if ns.all:
        res_all = lifecycle.end_all_active(session)
        print(f"Ended {res_all.count} active tasks at {format_timestamp(res_all.end_time)}.")
        return 0
    if ns.last:
        res = lifecycle.end_last(session)
    else:
        res = lifecycle.end_task(session, ns.task)
    print(f'Task "{res.name}" ended at {format_timestamp(res.end_time)} after {res.duration}')
    return 0


def cmd_list(ns: argparse.Namespace, session) -> int:
    if ns.active:
        result = query.list_active(session, ns.filter)
    elif ns.complete:
        result = query.list_complete(session, ns.filter)
    else:
        result = query.list_all(session, ns.filter)
    _print_tasks(result)
    return 0


def cmd_total(ns: argparse.Namespace, session) -> int:
    _print_totals(query.sum_by_category(session, ns.filter, ns.category))
    return 0


def _non_empty(value: str) -> str:
    if not value.strip():
        raise argparse.ArgumentTypeError("value must not be empty")
    return value


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="metronome",
        description="Metronome: track the time you spend on tasks.",
    )
    p.add_argument(
        "--db",
        help="Path to the SQLite DB (default: ~/.metronome/tasks.db or METRONOME_DATABASE_URL)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("start", help="Start a new task.")
    s.add_argument("task", type=_non_empty, help="Name of the task to start.")
    s.add_argument("-c", "--category", type=_non_empty, help="Category for the new task (default: Misc).")
    s.set_defaults(func=cmd_start)

    s = sub.add_parser("end", help="End an existing task.")
    g = s.add_mutually_exclusive_group(required=True)
    g.add_argument("task", nargs="?", type=_non_empty, help="Name of the task to end.")
    g.add_argument("-l", "--last", action="store_true", help="End the active task started most recently.")
    g.add_argument("--all", action="store_true", help="End all active tasks.")
    s.set_defaults(func=cmd_end)

    s = sub.add_parser("list", help="Display a list of tasks.")
    g = s.add_mutually_exclusive_group()
    g.add_argument("-a", "--active", action="store_true", help="List the active tasks.")
    g.add_argument("-c", "--complete", "--completed", action="store_true", help="List the completed tasks.")
    g.add_argument("--all", action="store_true", help="List all tasks.")
    s.add_argument("-f", "--filter", type=str.lower, choices=FILTER_CHOICES, help="Time range filter.")
    s.set_defaults(func=cmd_list)

    s = sub.add_parser("total", help="Sum the time spent on tasks per category.")
    s.add_argument("-f", "--filter", type=str.lower, choices=FILTER_CHOICES, help="Time range filter.")
    s.add_argument("-c", "--category", type=_non_empty, help="Only total this category.")
    s.set_defaults(func=cmd_total)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    if ns.db:
        engine = make_engine(f"sqlite:///{Path(ns.db).expanduser().resolve()}")
    else:
        engine = make_engine(settings.database_url)

    try:
        init_db(engine)
        with session_scope(engine) as session:
            return int(ns.func(ns, session))
    except MetronomeError as e:
        print(str(e), file=sys.stderr)
        return 1
    except SQLAlchemyError as e:
        logger.exception("Store operation failed")
        print(f"Database error: {e}", file=sys.stderr)
        return 2
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
