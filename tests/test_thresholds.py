import pytest

from linuxchecks.thresholds import (
    PluginError,
    Range,
    State,
    Thresholds,
    expressed_as_percentages,
    state_text,
)


@pytest.mark.parametrize(
    "name, expected",
    [("OK", 0), ("WARNING", 1), ("CRITICAL", 2), ("UNKNOWN", 3), ("DEPENDENT", 4)],
)
def test_state_text(name, expected):
    state = State[name]
    assert state_text(state) == name
    assert int(state) == expected


def test_plugin_error_carries_status():
    err = PluginError("boom", State.CRITICAL)
    assert err.status is State.CRITICAL
    assert err.message == "boom"
    assert PluginError("x").status is State.UNKNOWN


def test_parse_simple_end():
    r = Range.parse("10")
    assert (r.start, r.end, r.start_infinity, r.end_infinity, r.alert_inside) == (
        0,
        10,
        False,
        False,
        False,
    )
    assert r.alerts(11)
    assert r.alerts(-1)
    assert not r.alerts(5)
    assert not r.alerts(10)
    assert not r.alerts(0)


def test_parse_open_end():
    r = Range.parse("10:")
    assert r.start == 10 and r.end_infinity
    assert r.alerts(9)
    assert not r.alerts(10)
    assert not r.alerts(1e12)


def test_parse_negative_infinity_start():
    r = Range.parse("~:10")
    assert r.start_infinity and not r.end_infinity
    assert r.end == 10
    assert not r.alerts(-1e12)
    assert r.alerts(10.5)


def test_parse_bounded():
    r = Range.parse("10:20")
    assert (r.start, r.end) == (10, 20)
    assert r.alerts(9.9)
    assert not r.alerts(15)
    assert r.alerts(21)


def test_parse_inside():
    r = Range.parse("@10:20")
    assert r.alert_inside
    assert r.alerts(15)
    assert not r.alerts(25)


def test_parse_both_infinite():
    assert not Range.parse("~:").alerts(123)
    assert Range.parse("@~:").alerts(123)


def test_parse_percentage():
    r = Range.parse("85%")
    assert r.end == 85
    assert r.alerts(90)


def test_parse_reversed_range_is_error():
    with pytest.raises(ValueError):
        Range.parse("20:10")


def test_thresholds_status():
    t = Thresholds.parse("60", "120")
    assert t.status(30) is State.OK
    assert t.status(90) is State.WARNING
    assert t.status(200) is State.CRITICAL


def test_thresholds_empty():
    t = Thresholds.parse(None, None)
    assert t.warning is None and t.critical is None
    assert t.status(1e9) is State.OK


def test_thresholds_unparseable():
    with pytest.raises(ValueError):
        Thresholds.parse("5", "9:3")


@pytest.mark.parametrize(
    "warning, critical, expected",
    [
        ("85%", "95%", True),
        ("85", "95%", False),
        ("85%", "95", False),
        (None, None, True),
        (None, "5%", True),
        ("5", None, False),
    ],
)
def test_expressed_as_percentages(warning, critical, expected):
    assert expressed_as_percentages(warning, critical) is expected