"""Nagios plugin states, alert ranges and warning/critical thresholds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .xstrton import _scan_float


class State(IntEnum):
    """Exit states understood by Nagios."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3
    DEPENDENT = 4


def state_text(status: int) -> str:
    """Return the textual name of a plugin state."""
    return State(status).name


class PluginError(Exception):
    """A failure that ends a plugin with the given state."""

    def __init__(self, message: str, status: State = State.UNKNOWN) -> None:
        super().__init__(message)
        self.message = message
        self.status = State(status)


def _strtod(text: str) -> float:
    value, _ = _scan_float(text)
    return value


@dataclass(frozen=True)
class Range:
    """A numeric range in the Nagios plugin range syntax."""

    start: float = 0.0
    end: float = 0.0
    start_infinity: bool = False
    end_infinity: bool = True
    alert_inside: bool = False

    @classmethod
    def parse(cls, text: str) -> "Range":
        """Parse a range such as ``10``, ``10:``, ``~:10``, ``10:20`` or ``@10:20``."""
        alert_inside = text.startswith("@")
        body = text[1:] if alert_inside else text

        start = 0.0
        start_infinity = False
        head, colon, tail = body.partition(":")
        if colon:
            if body.startswith("~"):
                start_infinity = True
            else:
                start = _strtod(head)
            end_text = tail
        else:
            end_text = body

        end = 0.0
        end_infinity = True
        if end_text:
            end = _strtod(end_text)
            end_infinity = False

        if start_infinity or end_infinity or start <= end:
            return cls(start, end, start_infinity, end_infinity, alert_inside)
        raise ValueError(f"unparseable range '{text}'")

    def alerts(self, value: float) -> bool:
        """Return True if an alert should be raised for ``value``."""
        if self.start_infinity and self.end_infinity:
            inside = True
        elif self.end_infinity:
            inside = self.start <= value
        elif self.start_infinity:
            inside = value <= self.end
        else:
            inside = self.start <= value <= self.end
        return inside if self.alert_inside else not inside


@dataclass(frozen=True)
class Thresholds:
    """Optional warning and critical ranges."""

    warning: Range | None = None
    critical: Range | None = None

    @classmethod
    def parse(cls, warning: str | None, critical: str | None) -> "Thresholds":
        """Build thresholds from their textual ranges; raise ValueError if unparseable."""
        return cls(
            warning=Range.parse(warning) if warning is not None else None,
            critical=Range.parse(critical) if critical is not None else None,
        )

    def status(self, value: float) -> State:
        """Return the plugin state for ``value``."""
        if self.critical is not None and self.critical.alerts(value):
            return State.CRITICAL
        if self.warning is not None and self.warning.alerts(value):
            return State.WARNING
        return State.OK


def expressed_as_percentages(warning: str | None, critical: str | None) -> bool:
    """Return True if every given threshold is written as a percentage."""
    if (warning is not None and "%" not in warning) or (
        critical is not None and "%" not in critical
    ):
        return False
    return True