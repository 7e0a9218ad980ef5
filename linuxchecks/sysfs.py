"""Access to CPU frequency and thermal zone data exposed by sysfs."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass

from .thresholds import PluginError

_log = logging.getLogger(__name__)

_ULONG_MAX = 2**64 - 1
_LLONG_MIN = -(2**63)
_LLONG_MAX = 2**63 - 1

_AUTO_BASE = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_DECIMAL = re.compile(r"\s*([+-]?)([0-9]+)")
_LEADING_DIGITS = re.compile(r"[0-9]*")

_CPUFREQ_VALUES = frozenset(
    {
        "cpuinfo_cur_freq",
        "cpuinfo_min_freq",
        "cpuinfo_max_freq",
        "cpuinfo_transition_latency",
        "scaling_cur_freq",
        "scaling_min_freq",
        "scaling_max_freq",
    }
)

_THERMAL_PREFIX = "thermal_zone"
_TRIP_POINTS = 4


def _to_unsigned(sign: str, magnitude: int) -> int | None:
    """Mimic the wrap-around and range checks of the unsigned C conversions."""
    if magnitude > _ULONG_MAX:
        return None
    return (-magnitude) % (_ULONG_MAX + 1) if sign == "-" else magnitude


def _zone_number(name: str) -> int:
    digits = _LEADING_DIGITS.match(name, len(_THERMAL_PREFIX)).group()
    return int(digits) if digits else 0


def linelookup_numeric(line: str, pattern: str) -> int | None:
    """Return the number following ``pattern`` and whitespace in ``line``, or None."""
    if not line or len(pattern) + 1 > len(line):
        return None
    if not line.startswith(pattern) or not line[len(pattern)].isspace():
        return None
    match = _DECIMAL.match(line, len(pattern))
    if not match:
        return 0
    value = int(match.group(1) + match.group(2))
    return max(_LLONG_MIN, min(_LLONG_MAX, value))


@dataclass(frozen=True)
class ThermalReading:
    """The temperature (in millidegrees Celsius) reported by a thermal zone."""

    temperature: int
    zone: int
    type: str | None


@dataclass(frozen=True)
class Sysfs:
    """A view of the sysfs tree mounted at ``root``; paths are relative to it."""

    root: str = "/sys"

    def _abs(self, path: str) -> str:
        return os.path.join(self.root, path)

    @property
    def _cpu_path(self) -> str:
        return os.path.join(self.root, "devices", "system", "cpu")

    @property
    def _thermal_path(self) -> str:
        return os.path.join(self.root, "class", "thermal")

    # Generic helpers

    def check_mounted(self, mounts_file: str = "/proc/mounts") -> str:
        """Return the root if a sysfs filesystem is mounted there, else raise PluginError."""
        try:
            with open(mounts_file, encoding="utf-8", errors="replace") as fh:
                for line in fh:
                    parts = line.split()
                    if len(parts) >= 3 and parts[2] == "sysfs" and parts[1] == self.root:
                        return self.root
        except OSError:
            pass
        raise PluginError(f"The sysfs filesystem ({self.root}) is not mounted")

    def path_exists(self, path: str) -> bool:
        """Return True if ``path`` exists."""
        return os.path.lexists(self._abs(path))

    def entries(
        self, path: str = "", dirs: bool = True, links: bool = True, files: bool = False
    ) -> list[str]:
        """Return the sorted names in ``path`` that are of one of the selected types."""
        full = self._abs(path)
        try:
            with os.scandir(full) as it:
                names = [
                    entry.name
                    for entry in it
                    if (dirs and entry.is_dir(follow_symlinks=False))
                    or (links and entry.is_symlink())
                    or (files and entry.is_file(follow_symlinks=False))
                ]
        except OSError as err:
            raise PluginError(f"Cannot open {full}: {err.strerror}") from err
        return sorted(names)

    def read_line(self, path: str) -> str | None:
        """Return the first line of a file without its newline, or None if unreadable or empty."""
        full = self._abs(path)
        _log.debug("reading sysfs data: %s", full)
        try:
            with open(full, encoding="utf-8", errors="replace") as fh:
                line = fh.readline()
        except OSError as err:
            _log.debug("  \\ error: %s", err.strerror)
            return None
        if not line:
            return None
        if line.endswith("\n"):
            line = line[:-1]
        _log.debug('  \\ "%s"', line)
        return line

    def read_value(self, path: str) -> int | None:
        """Return the unsigned number (decimal, octal or hex) at the start of a file."""
        line = self.read_line(path)
        if line is None:
            return None
        match = _AUTO_BASE.match(line)
        if not match:
            return None
        sign, digits = match.groups()
        if digits[:2].lower() == "0x":
            magnitude = int(digits, 16)
        elif digits.startswith("0"):
            magnitude = int(digits, 8)
        else:
            magnitude = int(digits)
        return _to_unsigned(sign, magnitude)

    # CPU frequency

    def _cpufreq_file(self, cpu: int, name: str) -> str:
        return os.path.join(self._cpu_path, f"cpu{cpu}", "cpufreq", name)

    def _cpufreq_value(self, cpu: int, name: str) -> int:
        if name not in _CPUFREQ_VALUES:
            return 0
        line = self.read_line(self._cpufreq_file(cpu, name))
        if line is None:
            return 0
        match = _DECIMAL.match(line)
        if not match:
            return 0
        value = _to_unsigned(match.group(1), int(match.group(2)))
        return 0 if value is None else value

    def _cpufreq_string(self, cpu: int, name: str) -> str | None:
        line = self.read_line(self._cpufreq_file(cpu, name))
        if line is None:
            return None
        return line.removesuffix("\n")

    def cpufreq_hardware_limits(self, cpu: int) -> tuple[int, int] | None:
        """Return the (minimum, maximum) hardware frequencies in kHz, or None."""
        low = self._cpufreq_value(cpu, "cpuinfo_min_freq")
        if not low:
            return None
        high = self._cpufreq_value(cpu, "cpuinfo_max_freq")
        if not high:
            return None
        return low, high

    def cpufreq_freq_kernel(self, cpu: int) -> int:
        """Return the current frequency known to the kernel in kHz, 0 if unknown."""
        return self._cpufreq_value(cpu, "scaling_cur_freq")

    def cpufreq_available_freqs(self, cpu: int) -> str | None:
        """Return the list of available frequencies as written by the kernel."""
        return self._cpufreq_string(cpu, "scaling_available_frequencies")

    def cpufreq_transition_latency(self, cpu: int) -> int:
        """Return the frequency transition latency in nanoseconds, 0 if unknown."""
        return self._cpufreq_value(cpu, "cpuinfo_transition_latency")

    def cpufreq_driver(self, cpu: int) -> str | None:
        """Return the name of the scaling driver."""
        return self._cpufreq_string(cpu, "scaling_driver")

    def cpufreq_governor(self, cpu: int) -> str | None:
        """Return the name of the current scaling governor."""
        return self._cpufreq_string(cpu, "scaling_governor")

    def cpufreq_available_governors(self, cpu: int) -> str | None:
        """Return the available scaling governors as written by the kernel."""
        return self._cpufreq_string(cpu, "scaling_available_governors")

    # Thermal zones

    def thermal_kernel_support(self) -> bool:
        """Return True if the kernel exposes thermal zones."""
        return os.path.isdir(self._thermal_path)

    def thermal_path(self) -> str:
        """Return the directory holding the thermal zones."""
        return self._thermal_path

    def _zone_file(self, zone: int, name: str) -> str:
        return os.path.join(self._thermal_path, f"{_THERMAL_PREFIX}{zone}", name)

    def thermal_critical_temperature(self, zone: int) -> int:
        """Return the critical trip point of a zone in millidegrees, 0 if there is none."""
        for index in range(_TRIP_POINTS):
            kind = self.read_line(self._zone_file(zone, f"trip_point_{index}_type"))
            if kind is None or not kind.startswith("critical"):
                continue
            temp_file = self._zone_file(zone, f"trip_point_{index}_temp")
            value = self.read_value(temp_file)
            if value is None:
                raise PluginError(f"an error has occurred while reading {temp_file}")
            if value > 0:
                _log.debug(
                    "a critical trip point has been found: %.2f degrees C", value / 1000.0
                )
            return value
        return 0

    def thermal_device(self, zone: int) -> str:
        """Return the ACPI device name of a zone, or "Virtual device"."""
        device = self.read_line(self._zone_file(zone, os.path.join("device", "path")))
        if device is None:
            return "Virtual device"
        return device.removeprefix("\\_TZ_.")

    def _require_thermal(self) -> None:
        if not self.thermal_kernel_support():
            raise PluginError(
                "no ACPI thermal support in kernel "
                f'or incorrect path ("{self._thermal_path}")'
            )

    def thermal_temperature(self, selected_zone: int | None = None) -> ThermalReading:
        """Return the reading of ``selected_zone``, or the hottest zone when it is None."""
        self._require_thermal()
        try:
            names = sorted(os.listdir(self._thermal_path))
        except OSError as err:
            raise PluginError(
                f"cannot open() {self._thermal_path}: {err.strerror}"
            ) from err

        best: ThermalReading | None = None
        temp = 0
        for name in names:
            if not name.startswith(_THERMAL_PREFIX):
                continue
            zone = _zone_number(name)
            if selected_zone is not None and selected_zone != zone:
                continue

            value = self.read_value(os.path.join(self._thermal_path, name, "temp"))
            if value is not None:
                temp = value
            kind = self.read_line(os.path.join(self._thermal_path, name, "type"))
            _log.debug(
                "thermal information found: %.2f°C, zone: %u, type: %s",
                temp / 1000.0,
                zone,
                kind,
            )
            if best is None or best.temperature < temp or best.temperature == 0:
                best = ThermalReading(temp, zone, kind)

        if best is None:
            if selected_zone is None:
                raise PluginError("no thermal information has been found")
            raise PluginError(f"no thermal information for zone '{selected_zone}'")
        return best

    def thermal_listall(self) -> list[str]:
        """Return a human readable description of every thermal zone."""
        self._require_thermal()
        try:
            names = sorted(os.listdir(self._thermal_path))
        except OSError as err:
            raise PluginError(
                f"cannot scandir() {self._thermal_path}: {err.strerror}"
            ) from err

        lines = [f"Thermal zones reported by the linux kernel ({self.thermal_path()}):"]
        for name in names:
            if not name.startswith(_THERMAL_PREFIX):
                continue
            zone = _zone_number(name)
            kind = self.read_line(os.path.join(self._thermal_path, name, "type"))
            critical = self.thermal_critical_temperature(zone)
            text = (
                f" - zone {zone:2d} [{self.thermal_device(zone)}], "
                f'type "{kind if kind is not None else "n/a"}"'
            )
            if critical > 0:
                text += f", critical trip point at {critical // 1000}°C"
            lines.append(text)
        return lines