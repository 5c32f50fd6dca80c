"""Fire-and-forget runner for per-notification scripts."""

import logging
import os
import subprocess

from noticore.lifecycle.notification import Notification

logger = logging.getLogger(__name__)


def script_env(n: Notification) -> dict[str, str]:
    """Environment variables describing ``n`` to its script."""
    return {
        "NOTICORE_ID": str(n.id),
        "NOTICORE_APP_NAME": n.appname,
        "NOTICORE_SUMMARY": n.summary,
        "NOTICORE_BODY": n.body,
        "NOTICORE_ICON_PATH": n.icon,
        "NOTICORE_URGENCY": n.urgency.name,
        "NOTICORE_PROGRESS": str(n.progress),
        "NOTICORE_CATEGORY": n.category,
        "NOTICORE_TIMESTAMP": f"{n.timestamp:.0f}",
    }


class ScriptRunner:
    """Runs a notification's script without waiting for it to finish."""

    def __call__(self, n: Notification) -> None:
        if not n.script:
            return

        args = [n.script, n.appname, n.summary, n.body, n.icon, n.urgency.name]
        try:
            subprocess.Popen(
                args,
                env={**os.environ, **script_env(n)},
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.error("Failed to run script %s for notification %d: %s", n.script, n.id, e)
            return
        logger.debug("Started script %s for notification %d", n.script, n.id)
