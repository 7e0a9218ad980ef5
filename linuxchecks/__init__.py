"""Nagios-style checks (check_clock, check_fc) and proc/sysfs parsers for Linux hosts."""

__version__ = "0.1.0"