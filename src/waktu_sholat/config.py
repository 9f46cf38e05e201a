from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import timedelta, tzinfo
from pathlib import Path
import tomllib
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigurationError

MADHABS = ("shafi", "hanafi")


def _default_config_path() -> Path:
    return Path.home() / ".config" / "waktu-sholat" / "config.toml"


@dataclass(frozen=True, slots=True)
class CalculationSettings:
    method: str = "Singapore"
    madhab: str = "Shafi"


@dataclass(frozen=True, slots=True)
class LocationSettings:
    timezone: str = ""

    def zone(self) -> tzinfo | None:
        if not self.timezone:
            return None
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigurationError(f"Unknown timezone: {self.timezone}") from exc


@dataclass(frozen=True, slots=True)
class NotificationSettings:
    enabled: bool = True
    app_name: str = "Waktu Sholat"
    timeout: int = 10
    cooldown: timedelta = field(default_factory=lambda: timedelta(seconds=1))


@dataclass(frozen=True, slots=True)
class NotifierConfig:
    calculation: CalculationSettings = field(default_factory=CalculationSettings)
    location: LocationSettings = field(default_factory=LocationSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)

    @classmethod
    def default(cls) -> "NotifierConfig":
        return cls()

    def with_overrides(self, *, method: str | None = None, madhab: str | None = None) -> "NotifierConfig":
        calculation = self.calculation
        if method:
            calculation = replace(calculation, method=method)
        if madhab:
            calculation = replace(calculation, madhab=_check_madhab(madhab))
        return replace(self, calculation=calculation)


def _check_madhab(value: str) -> str:
    if value.strip().lower() not in MADHABS:
        raise ConfigurationError(f"Unknown madhab: {value} (expected Shafi or Hanafi)")
    return value.strip()


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        raise ConfigurationError(f"[{name}] must be a table")
    return section


class ConfigManager:
    """Read-only TOML configuration loader."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path or _default_config_path()

    def load(self) -> NotifierConfig:
        if not self.config_path.exists():
            return NotifierConfig.default()

        try:
            with self.config_path.open("rb") as handle:
                raw = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid config file {self.config_path}: {exc}") from exc
        except OSError as exc:
            raise ConfigurationError(f"Cannot read config file {self.config_path}: {exc}") from exc

        calculation_cfg = _section(raw, "calculation")
        location_cfg = _section(raw, "location")
        notifications_cfg = _section(raw, "notifications")
        enabled = notifications_cfg.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ConfigurationError(f"notifications.enabled must be true or false, not {enabled!r}")
        defaults = NotificationSettings()

        try:
            cooldown_seconds = float(notifications_cfg.get("cooldown", defaults.cooldown.total_seconds()))
            timeout = int(notifications_cfg.get("timeout", defaults.timeout))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid [notifications] value: {exc}") from exc
        if cooldown_seconds < 0:
            raise ConfigurationError("notifications.cooldown must not be negative")

        config = NotifierConfig(
            calculation=CalculationSettings(
                method=str(calculation_cfg.get("method", "Singapore")),
                madhab=_check_madhab(str(calculation_cfg.get("madhab", "Shafi"))),
            ),
            location=LocationSettings(
                timezone=str(location_cfg.get("timezone", "") or ""),
            ),
            notifications=NotificationSettings(
                enabled=enabled,
                app_name=str(notifications_cfg.get("app_name", defaults.app_name)),
                timeout=timeout,
                cooldown=timedelta(seconds=cooldown_seconds),
            ),
        )
        # fail early on a bad zone name instead of on the first cycle
        config.location.zone()
        return config
