import pytest

from utils.parsing import is_blank, parse_number


@pytest.mark.parametrize(
    "raw, expected",
    [
        (42, (42.0, False)),
        (" 1,200 ", (1200.0, False)),
        ("$18,000.50", (18000.5, False)),
        ("10%", (10.0, True)),
        ("(250)", (-250.0, False)),
        ("-3.5", (-3.5, False)),
    ],
)
def test_parse_number_accepts_form_values(raw, expected):
    assert parse_number(raw) == expected


@pytest.mark.parametrize("raw", [None, True, "", "   ", "abc", "$", "nan", float("inf"), [1]])
def test_parse_number_rejects_non_numbers(raw):
    value, _ = parse_number(raw)
    assert value is None


def test_is_blank():
    assert is_blank(None)
    assert is_blank("  ")
    assert not is_blank(0)
    assert not is_blank("0")
