import argparse
import sys
from pathlib import Path

from loguru import logger

from src.config import get_settings
from src.trackers.base import ExitCode
from src.trackers.utils import (
    available_trackers,
    combined_exit_code,
    get_tracker,
    run_all_trackers,
    run_tracker,
)


def check(tracker_id: str, html_file: str = None, notify: bool = True) -> ExitCode:
    """執行單一 tracker，回傳 exit code"""
    tracker = get_tracker(tracker_id)
    if tracker is None:
        logger.error(f"Unknown tracker: {tracker_id}. Available: {list(available_trackers())}")
        return ExitCode.ERROR
    result = run_tracker(
        tracker,
        html_file=Path(html_file) if html_file else None,
        notify=notify,
    )
    return result.exit_code


def check_all(notify: bool = True) -> ExitCode:
    """執行所有 tracker"""
    results = run_all_trackers(notify=notify)
    for result in results:
        logger.info(
            f"{result.tracker_id}: status={result.status} "
            f"new={len(result.new_products)} exit_code={int(result.exit_code)}"
        )
    return combined_exit_code(results)


def list_trackers():
    for tracker_id, name in available_trackers().items():
        print(f"{tracker_id}\t{name}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Stock Radar CLI")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # check command
    check_parser = subparsers.add_parser(
        "check",
        help="Run one tracker (exit 0 = new products, 1 = none, 2 = error/blocked)",
    )
    check_parser.add_argument("tracker", help="Tracker id (see `list`)")
    check_parser.add_argument(
        "--html-file", help="Read the page from a saved HTML file instead of fetching"
    )
    check_parser.add_argument(
        "--no-notify", action="store_true", help="Do not send notifications"
    )

    # check-all command
    check_all_parser = subparsers.add_parser("check-all", help="Run every tracker")
    check_all_parser.add_argument(
        "--no-notify", action="store_true", help="Do not send notifications"
    )

    # list command
    subparsers.add_parser("list", help="List registered trackers")

    # serve command
    subparsers.add_parser("serve", help="Start API server")

    args = parser.parse_args(argv)

    if args.command == "check":
        return int(check(args.tracker, args.html_file, notify=not args.no_notify))
    elif args.command == "check-all":
        return int(check_all(notify=not args.no_notify))
    elif args.command == "list":
        list_trackers()
    elif args.command == "serve":
        import uvicorn

        settings = get_settings()
        uvicorn.run(
            "src.main:app",
            host=settings.api_host,
            port=settings.api_port,
            reload=settings.debug,
        )
    else:
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
