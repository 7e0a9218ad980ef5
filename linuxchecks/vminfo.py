"""Virtual memory statistics read from /proc/vmstat and /proc/stat."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, fields

PROC_STAT = "/proc/stat"
_VMSTAT_ENV = "NPL_TEST_PATH_PROCVMSTAT"

_LEADING_NUMBER = re.compile(r"\s*([0-9]+)")
_PAGE_LINE = re.compile(r"page\s*([0-9]+)\s+([0-9]+)")
_SWAP_LINE = re.compile(r"swap\s*([0-9]+)\s+([0-9]+)")

_ZONES = ("dma", "dma32", "normal", "high")


def vmstat_path() -> str:
    """Return the path of the vmstat file, which the environment may override."""
    return os.environ.get(_VMSTAT_ENV) or "/proc/vmstat"


def page_size() -> int:
    """Return the memory page size in bytes."""
    return os.sysconf("SC_PAGESIZE")


def _leading_unsigned(text: str) -> int:
    match = _LEADING_NUMBER.match(text)
    return int(match.group(1)) if match else 0


@dataclass
class VmStats:
    """Counters from the kernel's virtual memory statistics."""

    allocstall: int = 0
    kswapd_inodesteal: int = 0
    kswapd_steal: int = 0
    nr_dirty: int = 0
    nr_mapped: int = 0
    nr_page_table_pages: int = 0
    nr_pagecache: int = 0
    nr_reverse_maps: int = 0
    nr_slab: int = 0
    nr_unstable: int = 0
    nr_writeback: int = 0
    pageoutrun: int = 0
    pgactivate: int = 0
    pgalloc: int = 0
    pgalloc_dma: int = 0
    pgalloc_dma32: int = 0
    pgalloc_high: int = 0
    pgalloc_normal: int = 0
    pgdeactivate: int = 0
    pgfault: int = 0
    pgfree: int = 0
    pginodesteal: int = 0
    pgmajfault: int = 0
    pgpgin: int = 0
    pgpgout: int = 0
    pgrefill: int = 0
    pgrefill_dma: int = 0
    pgrefill_dma32: int = 0
    pgrefill_high: int = 0
    pgrefill_normal: int = 0
    pgrotated: int = 0
    pgscan: int = 0
    pgscan_direct_dma: int = 0
    pgscan_direct_dma32: int = 0
    pgscan_direct_high: int = 0
    pgscan_direct_normal: int = 0
    pgscan_kswapd_dma: int = 0
    pgscan_kswapd_dma32: int = 0
    pgscan_kswapd_high: int = 0
    pgscan_kswapd_normal: int = 0
    pgsteal: int = 0
    pgsteal_dma: int = 0
    pgsteal_dma32: int = 0
    pgsteal_high: int = 0
    pgsteal_normal: int = 0
    pgsteal_direct_dma: int = 0
    pgsteal_direct_dma32: int = 0
    pgsteal_direct_high: int = 0
    pgsteal_direct_normal: int = 0
    pswpin: int = 0
    pswpout: int = 0
    slabs_scanned: int = 0

    @classmethod
    def read(cls, vmstat_file: str | None = None, stat_file: str = PROC_STAT) -> "VmStats":
        """Read the statistics, falling back to ``stat_file`` for paging and swap data."""
        known = {field.name for field in fields(cls)}
        found: dict[str, int] = {}
        with open(vmstat_file or vmstat_path(), encoding="ascii", errors="replace") as fh:
            for line in fh:
                key, _, rest = line.strip().partition(" ")
                if key in known:
                    found[key] = _leading_unsigned(rest)

        stats = cls(**found)
        stats._fill_zone_totals()

        has_pgpg = "pgpgin" in found
        has_pswp = "pswpin" in found
        if has_pgpg and has_pswp:
            return stats

        # Older kernels report paging and swapping in /proc/stat.
        try:
            with open(stat_file, encoding="ascii", errors="replace") as fh:
                for line in fh:
                    if match := _PAGE_LINE.match(line):
                        stats.pgpgin, stats.pgpgout = map(int, match.groups())
                        has_pgpg = True
                    elif match := _SWAP_LINE.match(line):
                        stats.pswpin, stats.pswpout = map(int, match.groups())
                        has_pswp = True
                    if has_pgpg and has_pswp:
                        break
        except OSError:
            pass

        if not has_pgpg:
            stats.pgpgin = stats.pgpgout = 0
        if not has_pswp:
            stats.pswpin = stats.pswpout = 0
        return stats

    def _zone_sum(self, prefix: str) -> int:
        return sum(getattr(self, f"{prefix}_{zone}") for zone in _ZONES)

    def _fill_zone_totals(self) -> None:
        if not self.pgalloc:
            self.pgalloc = self._zone_sum("pgalloc")
        if not self.pgrefill:
            self.pgrefill = self._zone_sum("pgrefill")
        if not self.pgscan:
            self.pgscan = self._zone_sum("pgscan_direct") + self._zone_sum("pgscan_kswapd")
        if not self.pgsteal:
            self.pgsteal = self._zone_sum("pgsteal")

    def pgscand(self) -> int:
        """Pages scanned by direct reclaim (dma, high and normal zones)."""
        return self.pgscan_direct_dma + self.pgscan_direct_high + self.pgscan_direct_normal

    def pgscank(self) -> int:
        """Pages scanned by kswapd (dma, high and normal zones)."""
        return self.pgscan_kswapd_dma + self.pgscan_kswapd_high + self.pgscan_kswapd_normal