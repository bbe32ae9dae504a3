"""Integrity report over a raw workbook state."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from core.enums import Severity, ValidationIssueType
from core.models import GridValidationReport, ValidationIssue
from utils.checksum import state_checksum
from utils.parsing import parse_number
from .normalizer import Normalizer


class GridValidator:
    """Check a saved or in-progress grid before it is trusted for planning.

    A grid is valid once every required field (the tier growth goals) holds a
    positive number. Coercion problems are reported but do not invalidate it.
    """

    def __init__(self, normalizer: Optional[Normalizer] = None):
        self.normalizer = normalizer or Normalizer()

    def validate(self, raw_state: Mapping[str, Any]) -> GridValidationReport:
        raw_state = raw_state or {}
        issues: List[ValidationIssue] = list(self.normalizer.execute(raw_state).issues)

        has_required_values = True
        for field in self.normalizer.schema.required_fields():
            raw = raw_state.get(field.address)
            value, _ = parse_number(raw)
            if value is None or value <= 0:
                has_required_values = False
                issues.append(
                    ValidationIssue(
                        address=field.address,
                        value=raw,
                        issue_type=ValidationIssueType.MISSING_REQUIRED,
                        severity=Severity.CRITICAL,
                        message=f"{field.label} must be a number greater than 0",
                    )
                )

        critical = [i for i in issues if i.severity == Severity.CRITICAL]
        return GridValidationReport(
            is_valid=has_required_values and not critical,
            has_required_values=has_required_values,
            checksum=state_checksum(raw_state),
            issues=issues,
        )
