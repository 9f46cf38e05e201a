"""Desktop alerts for prayer times."""

from __future__ import annotations

import logging
from typing import Protocol

from plyer import notification as plyer_notification  # type: ignore[import]

from ..config import NotificationSettings
from ..errors import NotificationError
from ..models import PrayerKind

LOGGER = logging.getLogger(__name__)


def notification_text(kind: PrayerKind) -> tuple[str, str]:
    return f"Waktu Sholat {kind.value}", f"Saatnya menunaikan sholat {kind.value}"


class Notifier(Protocol):
    def notify(self, kind: PrayerKind) -> None:
        ...


class DesktopNotifier:
    """Send the alert through plyer's platform notification backend."""

    def __init__(self, settings: NotificationSettings | None = None) -> None:
        self.settings = settings or NotificationSettings()

    def notify(self, kind: PrayerKind) -> None:
        title, message = notification_text(kind)
        try:
            plyer_notification.notify(
                title=title,
                message=message,
                app_name=self.settings.app_name,
                timeout=self.settings.timeout,
            )
        except Exception as exc:
            # plyer surfaces backend failures as arbitrary exception types
            raise NotificationError(f"Could not show notification for {kind.value}: {exc}") from exc
        LOGGER.info("Notified %s", kind.value)


class NullNotifier:
    def notify(self, kind: PrayerKind) -> None:
        LOGGER.info("Notifications disabled; skipping %s alert", kind.value)
