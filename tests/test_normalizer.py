import pytest

from core.enums import Severity, ValidationIssueType
from stages.s1_normalization import Normalizer, normalize


@pytest.fixture
def normalizer(catalogs):
    return Normalizer(catalogs.schema)


def _issue_types(result):
    return {(i.address, i.issue_type) for i in result.issues}


def test_empty_state_is_total(catalogs):
    state = normalize({})

    assert state.schema_version == catalogs.version
    assert set(state.values) == set(catalogs.schema.addresses)
    assert state["Sheet1!D9"] == 10
    assert state["Sheet1!D33"] == 252
    assert state["Sheet1!D34"] == 1
    assert state["Sheet1!B44"] == 0.04
    assert state["Sheet1!C38"] == 0


def test_normalize_is_idempotent(golden_state):
    once = normalize(golden_state)
    twice = normalize(once.values)

    assert twice == once


@pytest.mark.parametrize(
    "address, raw, expected",
    [
        ("Sheet1!F9", "10%", 0.1),
        ("Sheet1!F9", "5%", 0.05),
        ("Sheet1!F9", "0.05", 0.05),
        ("Sheet1!F9", 0.05, 0.05),
        ("Sheet1!F9", 1, 1.0),
        ("Sheet1!D34", "150%", 1.5),
        ("Sheet1!D34", 1.5, 1.5),
        ("Sheet1!D34", "1.5", 1.5),
        ("Sheet1!N9", "$18,000", 18000.0),
        ("Sheet1!C9", " 1,200 ", 1200.0),
        ("Sheet1!C9", "", 0.0),
        ("Sheet1!D9", None, 10.0),
    ],
)
def test_coercion(address, raw, expected):
    assert normalize({address: raw})[address] == pytest.approx(expected)


def test_negative_values_clamp_to_zero(normalizer):
    result = normalizer.execute({"Sheet1!C9": "-5", "Sheet1!N9": "(250)"})

    assert result.state["Sheet1!C9"] == 0
    assert result.state["Sheet1!N9"] == 0
    assert ("Sheet1!C9", ValidationIssueType.NEGATIVE_CLAMPED) in _issue_types(result)
    assert ("Sheet1!N9", ValidationIssueType.NEGATIVE_CLAMPED) in _issue_types(result)


def test_capped_percent_clamps_to_one(normalizer):
    result = normalizer.execute({"Sheet1!F9": "250%"})

    assert result.state["Sheet1!F9"] == 1.0
    assert ("Sheet1!F9", ValidationIssueType.RANGE_CLAMPED) in _issue_types(result)


def test_unparsable_value_falls_back_to_default(normalizer):
    result = normalizer.execute({"Sheet1!D9": "abc", "Sheet1!C9": True})

    assert result.state["Sheet1!D9"] == 10
    assert result.state["Sheet1!C9"] == 0
    issues = _issue_types(result)
    assert ("Sheet1!D9", ValidationIssueType.COERCION_FALLBACK) in issues
    assert ("Sheet1!C9", ValidationIssueType.COERCION_FALLBACK) in issues


def test_unknown_addresses_are_dropped(normalizer):
    result = normalizer.execute({"Sheet1!Z99": 5, "Sheet1!C9": 3})

    assert "Sheet1!Z99" not in result.state
    assert result.state["Sheet1!C9"] == 3
    unknown = [i for i in result.issues if i.issue_type == ValidationIssueType.UNKNOWN_ADDRESS]
    assert [i.address for i in unknown] == ["Sheet1!Z99"]
    assert unknown[0].severity == Severity.INFO


def test_schema_version_mismatch_still_normalizes(normalizer, caplog):
    with caplog.at_level("WARNING"):
        result = normalizer.execute({"Sheet1!C9": 4}, schema_version="bonus-grid-v0")

    assert result.state["Sheet1!C9"] == 4
    assert "bonus-grid-v0" in caplog.text


def test_no_value_is_negative_or_non_finite(normalizer):
    raw = {address: value for address, value in zip(
        normalizer.schema.addresses,
        ["-1", "nan", "inf", "(3)", "-0", "abc", float("nan"), -7] * 20,
    )}
    state = normalizer.execute(raw).state

    assert all(v >= 0 for v in state.values.values())
    assert all(v == v and v != float("inf") for v in state.values.values())


@pytest.mark.parametrize("address", ["Sheet1!F9", "Sheet1!D34"])
def test_percent_coercion_is_monotonic(address):
    typed = ["0", "0.5", "0.9", "1", "1.5", "2", "5", "150"]
    coerced = [normalize({address: raw})[address] for raw in typed]

    assert coerced == sorted(coerced)


def test_percent_units_match_on_capped_and_uncapped_fields():
    state = normalize({"Sheet1!F9": "0.9", "Sheet1!D34": "0.9", "Sheet1!F10": "90%", "Sheet1!B38": "2%"})

    assert state["Sheet1!F9"] == state["Sheet1!D34"] == 0.9
    assert state["Sheet1!F10"] == pytest.approx(0.9)
    assert state["Sheet1!B38"] == 0.02


def test_bare_percent_above_one_clamps_on_capped_field(normalizer):
    result = normalizer.execute({"Sheet1!F9": "2", "Sheet1!D34": "2"})

    assert result.state["Sheet1!F9"] == 1.0
    assert result.state["Sheet1!D34"] == 2.0
    assert ("Sheet1!F9", ValidationIssueType.RANGE_CLAMPED) in _issue_types(result)
