"""Counting of TCP sockets by state from /proc/net/tcp and /proc/net/tcp6."""

from __future__ import annotations

import ipaddress
import os
import re
import sys
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import IntEnum

from .thresholds import PluginError


class TcpState(IntEnum):
    """Socket states as numbered by the kernel."""

    ESTABLISHED = 1
    SYN_SENT = 2
    SYN_RECV = 3
    FIN_WAIT1 = 4
    FIN_WAIT2 = 5
    TIME_WAIT = 6
    CLOSE = 7
    CLOSE_WAIT = 8
    LAST_ACK = 9
    LISTEN = 10
    CLOSING = 11


_HEX = "[0-9A-Fa-f]"
_ROW_HEAD = re.compile(
    rf"\s*(\d+):\s*({_HEX}{{1,64}}):({_HEX}+)\s+({_HEX}{{1,64}}):({_HEX}+)\s+({_HEX}+)"
)
_ROW_TAIL = re.compile(rf"\s+{_HEX}+:{_HEX}+\s+{_HEX}+:{_HEX}+\s+{_HEX}+")

_VALID_STATES = frozenset(state.value for state in TcpState)


def _state_name(state: int) -> str:
    return TcpState(state).name if state in _VALID_STATES else ""


def decode_address(hexaddr: str) -> str:
    """Turn an address as written in /proc/net/tcp{,6} into its printable form."""
    if len(hexaddr) <= 8:
        value = int(hexaddr, 16) & 0xFFFFFFFF
        return str(ipaddress.IPv4Address(value.to_bytes(4, sys.byteorder)))

    packed = b"".join(
        (int(word, 16) if word else 0).to_bytes(4, sys.byteorder)
        for word in (hexaddr[offset:offset + 8] for offset in range(0, 32, 8))
    )
    words = [int.from_bytes(packed[i:i + 2], "big") for i in range(0, 16, 2)]
    tail = ipaddress.IPv4Address(packed[12:])
    if not any(words[:5]) and words[5] == 0xFFFF:
        return f"::ffff:{tail}"
    if not any(words[:6]) and words[6] != 0:
        return f"::{tail}"
    return str(ipaddress.IPv6Address(packed))


@dataclass
class TcpTable:
    """Number of TCP sockets in each state."""

    counts: Counter = field(default_factory=Counter)

    def parse(self, lines: Iterable[str], source: str = "", verbose: bool = False) -> "TcpTable":
        """Add the sockets listed in ``lines`` (a heading line then one socket per line)."""
        for number, line in enumerate(lines, start=1):
            if number == 1:
                if verbose:
                    print(
                        f"[{source}]\nproto  {'status':<11} "
                        f"{'local-addr:port':>20} {'remote-addr:port':>22}"
                    )
                continue

            head = _ROW_HEAD.match(line)
            if head is None or not _ROW_TAIL.match(line, head.end()):
                sys.stderr.write(f"warning, got bogus tcp line.\n{line}")
            if head is None:
                continue

            _, local, local_port, remote, remote_port, state_hex = head.groups()
            state = int(state_hex, 16)
            if state in _VALID_STATES:
                self.counts[TcpState(state)] += 1

            if not verbose:
                continue
            proto = "tcp6" if len(local) > 8 else "tcp "
            print(
                f" {proto}  {_state_name(state):<11} "
                f"{decode_address(local):>15}:{int(local_port, 16):<6} "
                f"{decode_address(remote):>15}:{int(remote_port, 16):<6}"
            )
        return self

    def read(self, path: str, verbose: bool = False) -> "TcpTable":
        """Add the sockets listed in the proc file ``path``."""
        try:
            with open(path, encoding="ascii", errors="replace") as fh:
                return self.parse(fh, path, verbose)
        except OSError as err:
            raise PluginError(f"error opening {path}: {err.strerror}") from err

    def count(self, state: int) -> int:
        """Return the number of sockets in ``state``."""
        return self.counts[TcpState(state)]


def read_tcp_table(
    ipv4: bool = True, ipv6: bool = False, verbose: bool = False, proc_root: str = "/proc"
) -> TcpTable:
    """Count the TCP sockets of the selected address families."""
    table = TcpTable()
    if ipv4:
        table.read(os.path.join(proc_root, "net", "tcp"), verbose)
    if ipv6:
        table.read(os.path.join(proc_root, "net", "tcp6"), verbose)
    return table