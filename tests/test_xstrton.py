import pytest

from linuxchecks.xstrton import ConversionError, parse_age, parse_int, parse_size


def test_age_without_suffix_is_seconds():
    assert parse_age("42") == 42
    assert parse_age("42") == parse_age("42s") == parse_age("42S")


def test_age_multipliers_from_source():
    assert parse_age("1d") == 86400
    assert parse_age("1y") == 31557600
    assert parse_age("1h") == 3600


def test_age_case_insensitive_and_ordering():
    for unit in "smhdwy":
        assert parse_age("3" + unit) == parse_age("3" + unit.upper())
    values = [parse_age("1" + unit) for unit in "smhdwy"]
    assert values == sorted(values)
    assert len(set(values)) == len(values)


def test_age_negative_is_mirror():
    assert parse_age("-1h") == -parse_age("1h")
    assert parse_age("-1h") < 0


def test_size_multipliers():
    assert parse_size("1k") == 1000
    assert parse_size("7") == parse_size("7b") == parse_size("7B")
    assert parse_size("2m") == parse_size("2000k")
    assert parse_size("-10.5k") == -parse_size("10.5k")


def test_size_fraction_truncates():
    assert parse_size("0.5") == 0
    assert parse_size("1.9") == 1


@pytest.mark.parametrize("func", [parse_age, parse_size])
def test_empty_string(func):
    with pytest.raises(ConversionError, match="empty string"):
        func("")
    with pytest.raises(ConversionError):
        func(None)


@pytest.mark.parametrize("func", [parse_age, parse_size])
def test_not_a_number(func):
    with pytest.raises(ConversionError, match="converting `abc' to a number failed"):
        func("abc")


def test_invalid_suffix():
    with pytest.raises(ConversionError, match="invalid suffix `x' in `5x'"):
        parse_age("5x")
    with pytest.raises(ConversionError, match="invalid suffix"):
        parse_size("5h")


def test_invalid_trailing_character():
    with pytest.raises(ConversionError, match="invalid trailing character `b' in `5kb'"):
        parse_size("5kb")


def test_parse_int_ok():
    assert parse_int("123", "bad") == 123
    assert parse_int("-7", "bad") == -7


@pytest.mark.parametrize("text", ["", "12a", "1.5", "abc", "99999999999999999999"])
def test_parse_int_errors(text):
    with pytest.raises(ConversionError) as excinfo:
        parse_int(text, "failed to parse argument")
    assert str(excinfo.value) == f"failed to parse argument: '{text}'"