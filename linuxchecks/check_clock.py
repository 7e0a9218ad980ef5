"""Plugin reporting the seconds elapsed between local time and a reference clock."""

from __future__ import annotations

import argparse
import sys
import time

from .thresholds import State, Thresholds, state_text
from .xstrton import ConversionError, parse_int

_PROGRAM = "check_clock"
_PROGRAM_SHORT = "clock"
_VERSION = "1.0.0"

_DESCRIPTION = (
    "This plugin returns the number of seconds elapsed between\n"
    "the host local time and Nagios time."
)
_EPILOG = (
    "examples:\n"
    f"  {_PROGRAM} -w 60 -c 120 --refclock $ARG1$\n"
    "  # where $ARG1$ is the number of seconds since the Epoch: \"$(date '+%s')\"\n"
    "  # provided by the Nagios poller"
)


class _Exit(Exception):
    def __init__(self, status: State) -> None:
        super().__init__(status)
        self.status = status


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        sys.stderr.write(f"{self.prog}: {message}\n")
        raise _Exit(State.UNKNOWN)

    def exit(self, status: int = 0, message: str | None = None) -> None:  # type: ignore[override]
        if message:
            sys.stderr.write(message)
        raise _Exit(State.OK if status == 0 else State.UNKNOWN)


def _build_parser() -> _Parser:
    parser = _Parser(
        prog=_PROGRAM,
        description=_DESCRIPTION,
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-r", "--refclock", metavar="COUNTER",
        help="the clock reference (in seconds since the Epoch)",
    )
    parser.add_argument("-w", "--warning", metavar="COUNTER", help="warning threshold")
    parser.add_argument("-c", "--critical", metavar="COUNTER", help="critical threshold")
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="show details for command-line debugging (Nagios may truncate output)",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"{_PROGRAM} (linuxchecks) v{_VERSION}"
    )
    return parser


def get_timedelta(refclock: int, now: int | None = None, verbose: bool = False) -> int:
    """Return the local time (or ``now``) minus ``refclock``, in seconds."""
    seconds = int(time.time()) if now is None else int(now)
    delta = seconds - refclock
    if verbose:
        print(f"Seconds since the Epoch: {seconds}")
        print(f"Refclock: {refclock}  -->  Delta: {delta}")
    return delta


def main(argv: list[str] | None = None) -> int:
    """Run the plugin and return its Nagios state."""
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
        if args.refclock is None:
            parser.print_usage(sys.stderr)
            return State.UNKNOWN
        try:
            refclock = parse_int(args.refclock, "the option '-r' requires an integer")
        except ConversionError as err:
            print(f"{_PROGRAM}: {err}", file=sys.stderr)
            return State.UNKNOWN
        try:
            thresholds = Thresholds.parse(args.warning, args.critical)
        except ValueError:
            parser.print_usage(sys.stderr)
            return State.UNKNOWN
    except _Exit as done:
        return done.status

    delta = get_timedelta(refclock, verbose=args.verbose)
    status = thresholds.status(abs(delta))
    print(
        f"{_PROGRAM_SHORT} {state_text(status)} - time delta {delta}s | clock_delta={delta}"
    )
    return status


if __name__ == "__main__":
    sys.exit(main())