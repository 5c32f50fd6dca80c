"""noticore entry point — CLI args, lifecycle loop and a stdin feed.

Reads one JSON object per line from stdin. An object is either a notification
(``{"summary": "...", "body": "...", "urgency": "critical", "timeout": 5}``)
or an action (``{"action": "close", "id": 3}``, ``{"action": "close_all"}``,
``{"action": "history_pop"}``, ``{"action": "pause"}``, ``{"action": "resume"}``).
Lines that fail validation are logged and skipped.
"""

import argparse
import json
import logging
import sys
import time

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from noticore.config import NotiConfig, get_config
from noticore.lifecycle.loop import LifecycleLoop
from noticore.lifecycle.notification import CloseReason, Notification
from noticore.lifecycle.queues import NotificationQueues
from noticore.lifecycle.script import ScriptRunner
from noticore.records import ActionRecord, NotificationRecord
from noticore.utils.logger import log_file_path, setup_logging

console = Console()
logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="noticore",
        description="noticore — notification lifecycle engine",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Print the effective configuration and exit",
    )
    return parser.parse_args()


def _run_check(config: NotiConfig) -> None:
    """Print every configuration value and where the daemon log goes."""
    table = Table(title="noticore configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name, value in config.model_dump().items():
        table.add_row(name, repr(value))
    console.print(table)

    log_file = log_file_path(config)
    console.print(f"Log file: {log_file if log_file else '[dim]disabled[/]'}")


def _render(displayed: tuple[Notification, ...]) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("id", justify="right")
    table.add_column("urgency")
    table.add_column("summary")
    table.add_column("body")
    for n in displayed:
        summary = f"({n.dup_count}) {n.summary}" if n.dup_count > 1 else n.summary
        table.add_row(str(n.id), n.urgency.name.lower(), summary, n.body)
    console.print(table)


def _handle_line(line: str, loop: LifecycleLoop, config: NotiConfig) -> None:
    try:
        record = json.loads(line)
    except json.JSONDecodeError as e:
        logger.warning("Ignoring malformed record: %s", e)
        return

    if not isinstance(record, dict):
        logger.warning("Ignoring record that is not a JSON object: %r", record)
        return

    if "action" not in record:
        try:
            n = NotificationRecord.model_validate(record).to_notification(config)
        except ValidationError as e:
            logger.warning("Ignoring invalid notification: %s", e)
            return
        notification_id = loop.submit(n)
        logger.info("Accepted notification id=%d", notification_id)
        return

    try:
        request = ActionRecord.model_validate(record)
    except ValidationError as e:
        logger.warning("Ignoring invalid action: %s", e)
        return

    if request.action == "close":
        loop.close(request.id, CloseReason.SIGNALED)
    elif request.action == "close_all":
        loop.close_all()
    elif request.action == "history_pop":
        loop.history_pop()
    else:
        loop.set_paused(request.action == "pause")


def main() -> None:
    """Main entry point."""
    args = _parse_args()
    config = get_config()

    if args.check:
        _run_check(config)
        return

    setup_logging(config, verbose=args.verbose)

    last_shown: tuple = ()

    def on_change(displayed: tuple[Notification, ...]) -> None:
        nonlocal last_shown
        key = tuple((n.id, n.dup_count) for n in displayed)
        if key != last_shown:
            last_shown = key
            _render(displayed)

    def on_closed(n: Notification, reason: CloseReason) -> None:
        logger.info("Notification %d closed (%s)", n.id, reason.name.lower())

    queues = NotificationQueues(
        config,
        run_script=ScriptRunner(),
        notify_closed=on_closed,
    )
    loop = LifecycleLoop(queues, config=config, on_change=on_change)
    loop.start()

    try:
        for line in sys.stdin:
            line = line.strip()
            if line:
                _handle_line(line, loop, config)

        console.print("[dim]Input closed — waiting for notifications to expire (Ctrl+C to quit)[/]")
        while loop.has_pending():
            time.sleep(0.2)
    except KeyboardInterrupt:
        pass
    finally:
        loop.stop()
        queues.teardown()


if __name__ == "__main__":
    main()
