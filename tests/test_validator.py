from core.enums import Severity, ValidationIssueType
from stages.s1_normalization import GridValidator


def test_missing_goals_invalidate_grid(golden_state):
    report = GridValidator().validate(golden_state)

    assert not report.is_valid
    assert not report.has_required_values
    missing = {i.address for i in report.critical_issues}
    assert missing == {f"Sheet1!C{row}" for row in range(39, 45)}
    assert all(i.issue_type == ValidationIssueType.MISSING_REQUIRED for i in report.critical_issues)


def test_complete_grid_is_valid(full_goals_state):
    report = GridValidator().validate(full_goals_state)

    assert report.is_valid
    assert report.critical_issues == []


def test_zero_or_text_goal_is_missing(full_goals_state):
    report = GridValidator().validate({**full_goals_state, "Sheet1!C40": 0, "Sheet1!C41": "soon"})

    assert {i.address for i in report.critical_issues} == {"Sheet1!C40", "Sheet1!C41"}


def test_coercion_warnings_do_not_invalidate(full_goals_state):
    report = GridValidator().validate({**full_goals_state, "Sheet1!D9": "abc"})

    assert report.is_valid
    assert any(
        i.address == "Sheet1!D9" and i.severity == Severity.WARNING for i in report.issues
    )


def test_checksum_ignores_key_order(golden_state):
    reversed_state = dict(reversed(list(golden_state.items())))

    validator = GridValidator()
    assert validator.validate(golden_state).checksum == validator.validate(reversed_state).checksum
    assert validator.validate({}).checksum != validator.validate(golden_state).checksum
