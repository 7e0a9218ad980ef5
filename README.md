# linuxchecks

Monitoring checks for Linux hosts in the Nagios plugin style, together with
the small libraries they are built on: threshold ranges, parsers for
`/proc/vmstat`, `/proc/net/tcp` and the sysfs tree, and helpers that turn
size and age strings into numbers.

Each check prints one status line with performance data and exits with the
usual plugin codes: 0 (OK), 1 (WARNING), 2 (CRITICAL), 3 (UNKNOWN).

## Installation

```
pip install .
```

Run the tests with:

```
pip install ".[test]"
pytest
```

## Commands

### check_clock

Reports how many seconds the local clock differs from a reference clock
given in seconds since the Epoch. The thresholds apply to the absolute
difference. Without `--refclock` the command prints its usage and exits
with UNKNOWN.

```
check_clock -w 60 -c 120 --refclock "$(date '+%s')"
```

Output looks like:

```
clock OK - time delta 0s | clock_delta=0
```

Options: `-r/--refclock`, `-w/--warning`, `-c/--critical`, `-v/--verbose`,
`-h/--help`, `-V/--version`.

### check_fc

Counts the Fibre Channel ports under `/sys/class/fc_host` whose
`port_state` is `Online`, applies the thresholds to that number, and reports
frame and error counters as performance data (`rx_frames`, `tx_frames`,
`error_frames`, `invalid_crc_count`, `link_failure_count`,
`loss_of_signal_count`, `loss_of_sync_count`).

```
check_fc -c 2:
check_fc -i -v
```

Optional positional arguments are `delay` (seconds between samples,
default 1, at most 86400) and `count` (number of samples, default 2, at
most 86400). With a count of 1 the frame counters since boot are reported;
otherwise the difference between the last two samples.

`-i/--fchostinfo` lists the fc_host devices and exits with UNKNOWN; with
`-v` it also prints each device's path and attribute files.

Other options: `-w/--warning`, `-c/--critical`, `-v/--verbose`,
`-h/--help`, `-V/--version`. Both commands check that sysfs is mounted at
`/sys` (looking in `/proc/mounts`) before reading it.

## Threshold ranges

Warning and critical thresholds use the standard plugin range syntax:

| Range     | Alert when the value is      |
|-----------|------------------------------|
| `10`      | below 0 or above 10          |
| `10:`     | below 10                     |
| `~:10`    | above 10                     |
| `10:20`   | outside 10..20               |
| `@10:20`  | inside 10..20                |

A range whose start is greater than its end is rejected with `ValueError`.

From Python:

```python
from linuxchecks.thresholds import Thresholds, State, state_text

limits = Thresholds.parse("80", "95")
status = limits.status(90.0)
assert status is State.WARNING
print(state_text(status))  # WARNING
```

`Range.parse` and `Range.alerts` work on a single range;
`expressed_as_percentages` tells whether every given threshold string
contains `%`. `PluginError` carries a message and the `State` to exit with.

## Library pieces

- `linuxchecks.xstrton`: `parse_size("10.5k")` (powers of 1000, suffixes
  b, k, m, g, t, p) and `parse_age("-1h")` (suffixes s, m, h, d, w, y)
  turn strings with a unit suffix into integers; `parse_int` is a strict
  decimal integer parser. Bad input raises `ConversionError`.
- `linuxchecks.urlencode`: `url_encode` percent-encodes a string (UTF-8,
  spaces become `+`); `to_hex` and `from_hex` convert single hex digits.
- `linuxchecks.vminfo`: `VmStats.read()` loads the virtual-memory counters
  from `/proc/vmstat` (or the file named by `NPL_TEST_PATH_PROCVMSTAT`),
  falling back to `/proc/stat` for paging and swap figures;
  `pgscand()` and `pgscank()` sum the per-zone scan counters.
  `page_size()` returns the memory page size.
- `linuxchecks.tcpinfo`: `read_tcp_table()` counts sockets per `TcpState`
  from `/proc/net/tcp` and, on request, `/proc/net/tcp6`; `TcpTable.count`
  returns the number for one state, and `decode_address` prints an address
  as the kernel writes it.
- `linuxchecks.sysfs`: `Sysfs` reads CPU frequency data (hardware limits,
  current frequency, governors, driver, transition latency) and thermal
  zone data (`thermal_temperature`, `thermal_critical_temperature`,
  `thermal_device`, `thermal_listall`). Its `root` defaults to `/sys` and
  can point at any directory tree laid out the same way.

## What is not included

Only `check_clock` and `check_fc` are installed as commands. The memory,
TCP socket, CPU frequency and thermal readers are available as library
code only; there are no ready-made checks for CPU usage, memory, paging,
TCP connections or temperature built on them.