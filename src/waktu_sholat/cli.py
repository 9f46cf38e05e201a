from __future__ import annotations

import argparse
import io
import logging
import os
from pathlib import Path
import signal
import sys
import threading
from typing import Sequence

from . import __version__
from .clock import Clock, FixedClock, RealClock
from .config import ConfigManager, NotifierConfig
from .errors import CityNotFoundError, ConfigurationError, StatusOutputError, WaktuSholatError
from .scheduler import Scheduler
from .services.location import LocationResolver
from .services.notifier import DesktopNotifier, Notifier, NullNotifier
from .services.prayer import PyIslamProvider
from .status import StatusEmitter
from .waiter import Waiter

LOGGER = logging.getLogger(__name__)

PROG = "waktu-sholat"
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Print today's prayer times as JSON and notify when each one arrives.",
    )
    location = parser.add_mutually_exclusive_group()
    location.add_argument("--city", help="city name from the bundled database (case-insensitive)")
    location.add_argument("--coordinate", metavar="LAT,LON", help="latitude and longitude, e.g. 1.35,103.8")
    parser.add_argument("--method", help="calculation method (default: Singapore)")
    parser.add_argument("--madhab", help="Shafi or Hanafi (default: Shafi)")
    parser.add_argument("--config", type=Path, help="path to config.toml")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug details to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    # run one cycle as if the local time were HH:MM today
    parser.add_argument("--test-at", metavar="HH:MM", help=argparse.SUPPRESS)
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def load_config(args: argparse.Namespace) -> NotifierConfig:
    config = ConfigManager(args.config).load()
    return config.with_overrides(method=args.method, madhab=args.madhab)


def build_clock(args: argparse.Namespace, config: NotifierConfig) -> Clock:
    tz = config.location.zone()
    if args.test_at is None:
        return RealClock(tz)
    try:
        return FixedClock.at_time_of_day(args.test_at, tz=tz)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid --test-at value: {exc}") from exc


def build_notifier(config: NotifierConfig) -> Notifier:
    if not config.notifications.enabled:
        return NullNotifier()
    return DesktopNotifier(config.notifications)


def install_stop_handlers(waiter: Waiter) -> None:
    if threading.current_thread() is not threading.main_thread():
        return

    def _handle(signum: int, _frame: object) -> None:
        LOGGER.debug("Received signal %s", signum)
        waiter.stop()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def run(args: argparse.Namespace) -> int:
    config = load_config(args)
    coordinates = LocationResolver().resolve(city=args.city, coordinate=args.coordinate)
    clock = build_clock(args, config)
    waiter = Waiter()
    scheduler = Scheduler(
        config,
        coordinates,
        PyIslamProvider(),
        clock,
        build_notifier(config),
        emitter=StatusEmitter(),
        waiter=waiter,
    )
    install_stop_handlers(waiter)
    scheduler.run()
    return 0


def _discard_stdout() -> None:
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    except (OSError, ValueError, io.UnsupportedOperation):
        pass


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        return run(args)
    except (ConfigurationError, CityNotFoundError) as exc:
        print(f"{PROG}: error: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except StatusOutputError as exc:
        # stdout is gone; keep the interpreter from flushing into it again at exit
        _discard_stdout()
        print(f"{PROG}: error: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    except WaktuSholatError as exc:
        print(f"{PROG}: error: {exc}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
