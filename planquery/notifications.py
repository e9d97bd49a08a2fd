"""Notifiers — where command outcomes are reported to the user."""

from __future__ import annotations

import abc
import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

INFO = "info"
WARNING = "warning"
ERROR = "error"

_LOG_LEVELS = {INFO: logging.INFO, WARNING: logging.WARNING, ERROR: logging.ERROR}


class Notifier(abc.ABC):
    """Abstract notification sink."""

    @abc.abstractmethod
    def notify(self, level: str, title: str, message: str) -> bool:
        """Deliver one notification.

        Parameters
        ----------
        level:
            ``"info"``, ``"warning"`` or ``"error"``.
        title:
            Short heading, e.g. "Missing Information".
        message:
            Body text; may span several lines.

        Returns True if the notification was delivered.
        """


class ConsoleNotifier(Notifier):
    """Log notifications and keep them in memory."""

    def __init__(self) -> None:
        self._log: list[dict[str, Any]] = []

    def notify(self, level: str, title: str, message: str) -> bool:
        self._log.append({"level": level, "title": title, "message": message})
        logger.log(_LOG_LEVELS.get(level, logging.INFO), "[PlanQuery] %s: %s", title, message)
        return True

    @property
    def log(self) -> list[dict[str, Any]]:
        """Access the in-memory log for testing."""
        return list(self._log)


class WebhookNotifier(Notifier):
    """Slack/Teams-style incoming webhook.  Failures are logged, not raised."""

    def __init__(self, webhook_url: str, *, timeout: float = 10.0) -> None:
        self._webhook_url = webhook_url
        self._timeout = timeout

    def notify(self, level: str, title: str, message: str) -> bool:
        payload = {"text": f"PlanQuery {level.upper()}: {title}\n{message}"}
        try:
            resp = requests.post(self._webhook_url, json=payload, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.warning("Webhook notification failed: %s", exc)
            return False
        return resp.status_code in (200, 204)


class MultiNotifier(Notifier):
    """Fan one notification out to several notifiers."""

    def __init__(self, notifiers: list[Notifier]) -> None:
        self._notifiers = list(notifiers)

    def notify(self, level: str, title: str, message: str) -> bool:
        delivered = False
        for notifier in self._notifiers:
            delivered = notifier.notify(level, title, message) or delivered
        return delivered
