import pytest

from linuxchecks.check_fc import FcHostStatistics, fc_host_status, fc_host_summary, main
from linuxchecks.sysfs import Sysfs
from linuxchecks.thresholds import PluginError

COUNTERS = {
    "rx_frames": "100",
    "tx_frames": "200",
    "error_frames": "1",
    "invalid_crc_count": "2",
    "link_failure_count": "3",
    "loss_of_signal_count": "4",
    "loss_of_sync_count": "5",
}


def _make_host(root, name, state, counters=COUNTERS):
    host = root / "class" / "fc_host" / name
    stats = host / "statistics"
    stats.mkdir(parents=True)
    if state is not None:
        (host / "port_state").write_text(state + "\n")
    for key, value in counters.items():
        (stats / key).write_text(value + "\n")
    return host


@pytest.fixture
def two_hosts(tmp_path):
    _make_host(tmp_path, "host0", "Online")
    _make_host(tmp_path, "host1", "Linkdown")
    return Sysfs(root=str(tmp_path))


def test_status_counts_ports(two_hosts):
    n_ports, n_online, _ = fc_host_status(two_hosts, delay=0, count=1)
    assert (n_ports, n_online) == (2, 1)


def test_status_sums_statistics(two_hosts):
    _, _, stats = fc_host_status(two_hosts, delay=0, count=1)
    assert stats.rx_frames == 2 * 100
    assert stats.tx_frames == 2 * 200
    assert stats.error_frames == 2 * 1
    assert stats.loss_of_sync_count == 2 * 5


def test_status_deltas_with_static_counters(two_hosts):
    _, _, stats = fc_host_status(two_hosts, delay=0, count=2)
    assert stats.rx_frames == 0
    assert stats.tx_frames == 0
    assert stats.invalid_crc_count == 2 * 2


def test_status_reads_hex_counters(tmp_path):
    counters = dict(COUNTERS, rx_frames="0x10")
    _make_host(tmp_path, "host0", "Online", counters)
    _, _, stats = fc_host_status(Sysfs(root=str(tmp_path)), delay=0, count=1)
    assert stats.rx_frames == 0x10


def test_status_missing_port_state_is_offline(tmp_path):
    _make_host(tmp_path, "host0", None)
    n_ports, n_online, _ = fc_host_status(Sysfs(root=str(tmp_path)), 0, 1)
    assert (n_ports, n_online) == (1, 0)


def test_status_missing_statistic_raises(tmp_path):
    counters = {k: v for k, v in COUNTERS.items() if k != "error_frames"}
    _make_host(tmp_path, "host0", "Online", counters)
    with pytest.raises(PluginError, match="error_frames"):
        fc_host_status(Sysfs(root=str(tmp_path)), 0, 1)


def test_status_without_fc_host_dir_raises(tmp_path):
    with pytest.raises(PluginError, match="Cannot open"):
        fc_host_status(Sysfs(root=str(tmp_path)), 0, 1)


def test_summary_plain(two_hosts):
    assert fc_host_summary(two_hosts) == [
        'Class Device = "host0"',
        'Class Device = "host1"',
    ]


def test_summary_verbose_lists_attributes(two_hosts):
    lines = fc_host_summary(two_hosts, verbose=True)
    assert lines[0] == 'Class Device = "host0"'
    assert lines[1].startswith('Class Device path = "')
    assert f'{"port_state":>25} = "Online"' in lines
    assert f'{"port_state":>25} = "Linkdown"' in lines
    assert lines[-1] == ""


def test_perfdata_names_every_counter():
    stats = FcHostStatistics(rx_frames=7, loss_of_sync_count=9)
    text = stats.perfdata()
    assert text.startswith("rx_frames=7 tx_frames=0 ")
    assert text.endswith("loss_of_sync_count=9")


def test_main_zero_delay(capsys):
    assert main(["0"]) == 3
    assert "delay must be positive integer" in capsys.readouterr().err


def test_main_bad_delay(capsys):
    assert main(["abc"]) == 3
    assert "failed to parse argument" in capsys.readouterr().err


def test_main_too_large_count(capsys):
    assert main(["1", "999999999"]) == 3
    assert "too large count value" in capsys.readouterr().err


def test_main_unknown_option():
    assert main(["--bogus"]) == 3


def test_main_help(capsys):
    assert main(["--help"]) == 0
    assert "--fchostinfo" in capsys.readouterr().out