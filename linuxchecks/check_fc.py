"""Plugin monitoring the status of the fiber channel ports."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from dataclasses import dataclass, fields

from .sysfs import Sysfs
from .thresholds import PluginError, State, Thresholds, state_text
from .xstrton import ConversionError, parse_int

_log = logging.getLogger(__name__)

_PROGRAM = "check_fc"
_PROGRAM_SHORT = "fc"
_VERSION = "1.0.0"

_FC_HOST = os.path.join("class", "fc_host")
_COUNTER_WRAP = 2**64

DELAY_DEFAULT = 1
DELAY_MAX = 86400
COUNT_DEFAULT = 2
COUNT_MAX = 86400

_DESCRIPTION = "This plugin monitors the status of the fiber status ports."
_EPILOG = (
    f"  delay is the delay between updates in seconds (default: {DELAY_DEFAULT}sec)\n"
    f"  count is the number of updates (default: {COUNT_DEFAULT})\n"
    "\t1 means the total inbound/outbound traffic from boottime.\n"
    "examples:\n"
    f"  {_PROGRAM} -c 2:\n"
    f"  {_PROGRAM} -i -v"
)


@dataclass
class FcHostStatistics:
    """Frame and error counters summed over all fiber channel hosts."""

    rx_frames: int = 0
    tx_frames: int = 0
    error_frames: int = 0
    invalid_crc_count: int = 0
    link_failure_count: int = 0
    loss_of_signal_count: int = 0
    loss_of_sync_count: int = 0

    def perfdata(self) -> str:
        """Return the counters as Nagios performance data."""
        return " ".join(f"{f.name}={getattr(self, f.name)}" for f in fields(self))


_ERROR_COUNTERS = (
    "error_frames",
    "invalid_crc_count",
    "link_failure_count",
    "loss_of_signal_count",
    "loss_of_sync_count",
)


def _statistic(sysfs: Sysfs, host: str, which: str) -> int:
    path = os.path.join(_FC_HOST, host, "statistics", which)
    value = sysfs.read_value(path)
    if value is None:
        raise PluginError(
            f"an error has occurred while reading {os.path.join(sysfs.root, path)}"
        )
    _log.debug("%s = %d", path, value)
    return value


def fc_host_summary(sysfs: Sysfs, verbose: bool = False) -> list[str]:
    """Describe the fc_host class devices, with their attributes when verbose."""
    lines = []
    for host in sysfs.entries(_FC_HOST, dirs=True, links=True, files=False):
        lines.append(f'Class Device = "{host}"')
        if not verbose:
            continue
        device = os.path.realpath(os.path.join(sysfs.root, _FC_HOST, host, "device"))
        lines.append(f'Class Device path = "{device}"')
        host_dir = os.path.join(_FC_HOST, host)
        for name in sysfs.entries(host_dir, dirs=False, links=False, files=True):
            value = sysfs.read_line(os.path.join(host_dir, name))
            if value is not None:
                lines.append(f'{name:>25} = "{value}"')
        lines.append("")
    return lines


def fc_host_status(
    sysfs: Sysfs, delay: float = DELAY_DEFAULT, count: int = COUNT_DEFAULT
) -> tuple[int, int, FcHostStatistics]:
    """Return the number of ports, of online ports, and the summed statistics.

    With ``count`` greater than one the frame counters are the difference
    between the last two samples taken ``delay`` seconds apart.
    """
    stats = FcHostStatistics()
    n_ports = n_online = 0
    for host in sysfs.entries(_FC_HOST, dirs=True, links=True, files=False):
        n_ports += 1
        if sysfs.read_line(os.path.join(_FC_HOST, host, "port_state")) == "Online":
            n_online += 1

        rx = rx_prev = _statistic(sysfs, host, "rx_frames")
        tx = tx_prev = _statistic(sysfs, host, "tx_frames")
        rx_delta, tx_delta = rx, tx
        for _ in range(1, count):
            time.sleep(delay)
            rx = _statistic(sysfs, host, "rx_frames")
            rx_delta = (rx - rx_prev) % _COUNTER_WRAP
            tx = _statistic(sysfs, host, "tx_frames")
            tx_delta = (tx - tx_prev) % _COUNTER_WRAP
            rx_prev, tx_prev = rx, tx

        stats.rx_frames += rx_delta
        stats.tx_frames += tx_delta
        for name in _ERROR_COUNTERS:
            setattr(stats, name, getattr(stats, name) + _statistic(sysfs, host, name))
    return n_ports, n_online, stats


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
        "-i", "--fchostinfo", action="store_true",
        help="show the fc_host class object attributes",
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
    parser.add_argument("numbers", nargs="*", metavar="delay [count]")
    return parser


def _delay_and_count(numbers: list[str]) -> tuple[int, int]:
    delay, count = DELAY_DEFAULT, COUNT_DEFAULT
    if numbers:
        delay = parse_int(numbers[0], "failed to parse argument")
        if delay == 0:
            raise PluginError("delay must be positive integer")
        if delay < 0 or delay > DELAY_MAX:
            raise PluginError(f"too large delay value (greater than {DELAY_MAX})")
    if len(numbers) > 1:
        count = parse_int(numbers[1], "failed to parse argument")
        if count < 0 or count > COUNT_MAX:
            raise PluginError(f"too large count value (greater than {COUNT_MAX})")
    return delay, count


def main(argv: list[str] | None = None) -> int:
    """Run the plugin and return its Nagios state."""
    parser = _build_parser()
    sysfs = Sysfs()
    try:
        args = parser.parse_args(argv)
        if args.fchostinfo:
            sysfs.check_mounted()
            for line in fc_host_summary(sysfs, args.verbose):
                print(line)
            return State.UNKNOWN

        delay, count = _delay_and_count(args.numbers)
        sysfs.check_mounted()
        try:
            thresholds = Thresholds.parse(args.warning, args.critical)
        except ValueError:
            parser.print_usage(sys.stderr)
            return State.UNKNOWN

        n_ports, n_online, stats = fc_host_status(sysfs, delay, count)
    except _Exit as done:
        return done.status
    except ConversionError as err:
        print(f"{_PROGRAM}: {err}", file=sys.stderr)
        return State.UNKNOWN
    except PluginError as err:
        print(f"{_PROGRAM}: {err.message}", file=sys.stderr)
        return err.status

    status = thresholds.status(n_online)
    print(
        f"{_PROGRAM_SHORT} {state_text(status)} - Fiber Channel ports status: "
        f"{n_online}/{n_ports} Online | {stats.perfdata()}"
    )
    return status


if __name__ == "__main__":
    sys.exit(main())