"""Stage 1: Normalization - turn raw form state into a typed snapshot."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from catalogs import SchemaRegistry, default_catalogs
from core.enums import FieldType, Severity, ValidationIssueType
from core.interfaces import Stage
from core.models import (
    InputField,
    InputSchema,
    NormalizationResult,
    NormalizedState,
    ValidationIssue,
)
from utils.parsing import is_blank, parse_number

logger = logging.getLogger(__name__)


class Normalizer(Stage[Mapping[str, Any], NormalizationResult]):
    """Coerce a partial, possibly stringy workbook state into a total numeric one."""

    def __init__(self, schema: Optional[Union[SchemaRegistry, InputSchema]] = None):
        if schema is None:
            schema = default_catalogs().schema
        elif isinstance(schema, InputSchema):
            schema = SchemaRegistry(schema)
        self.schema = schema

    @property
    def name(self) -> str:
        return "Normalization"

    @property
    def stage_number(self) -> int:
        return 1

    def validate_input(self, input_data: Mapping[str, Any]) -> bool:
        return isinstance(input_data, Mapping)

    def execute(
        self,
        input_data: Mapping[str, Any],
        schema_version: Optional[str] = None,
    ) -> NormalizationResult:
        if schema_version and schema_version != self.schema.version:
            logger.warning(
                "Workbook state was saved against schema %s, normalizing with %s",
                schema_version,
                self.schema.version,
            )

        values: Dict[str, float] = {}
        issues: List[ValidationIssue] = []

        for field in self.schema:
            value, field_issues = self.coerce(field, input_data.get(field.address))
            values[field.address] = value
            issues.extend(field_issues)

        for address in input_data:
            if address not in self.schema:
                logger.debug("Dropping undeclared address %s", address)
                issues.append(
                    ValidationIssue(
                        address=str(address),
                        value=input_data[address],
                        issue_type=ValidationIssueType.UNKNOWN_ADDRESS,
                        severity=Severity.INFO,
                        message=f"{address} is not part of schema {self.schema.version}",
                    )
                )

        state = NormalizedState(schema_version=self.schema.version, values=values)
        logger.debug("Normalized %d fields with %d issues", len(state), len(issues))
        return NormalizationResult(state=state, issues=issues)

    def coerce(self, field: InputField, raw: Any) -> Tuple[float, List[ValidationIssue]]:
        """Coerce one raw value against its field declaration"""
        issues: List[ValidationIssue] = []
        default = float(field.default)

        if is_blank(raw):
            return default, issues

        value, had_percent = parse_number(raw)
        if value is None:
            logger.debug("Unparsable value %r at %s, using default", raw, field.address)
            issues.append(
                ValidationIssue(
                    address=field.address,
                    value=raw,
                    issue_type=ValidationIssueType.COERCION_FALLBACK,
                    message=f"{field.label}: '{raw}' is not a number, using {default:g}",
                )
            )
            return default, issues

        # Bare percent values are fractions; only a "%" suffix scales
        if field.type == FieldType.PERCENT and had_percent:
            value = value / 100

        if value < 0:
            issues.append(
                ValidationIssue(
                    address=field.address,
                    value=raw,
                    issue_type=ValidationIssueType.NEGATIVE_CLAMPED,
                    message=f"{field.label} cannot be negative, using 0",
                )
            )
            value = 0.0

        if field.type == FieldType.PERCENT and field.capped and value > 1:
            issues.append(
                ValidationIssue(
                    address=field.address,
                    value=raw,
                    issue_type=ValidationIssueType.RANGE_CLAMPED,
                    message=f"{field.label} cannot exceed 100%, using 100%",
                )
            )
            value = 1.0

        return float(value), issues


def normalize(
    raw_state: Mapping[str, Any],
    schema: Optional[Union[SchemaRegistry, InputSchema]] = None,
    schema_version: Optional[str] = None,
) -> NormalizedState:
    """Normalize a raw workbook state against a schema (packaged schema by default)"""
    return Normalizer(schema).execute(raw_state or {}, schema_version=schema_version).state
