"""Best-effort desktop notification at the end of a run."""

from __future__ import annotations

import logging

from plyer import notification

from .constants import APP_NAME, NOTIFICATION_TITLE

logger = logging.getLogger("ethroute")


def send_notification(message: str, *, title: str = NOTIFICATION_TITLE) -> bool:
    """Show a desktop notification. Never raises; returns False on failure."""
    try:
        notification.notify(title=title, message=message, app_name=APP_NAME, timeout=10)
    except Exception as e:
        logger.debug("Desktop notification failed: %s", e)
        return False
    return True
