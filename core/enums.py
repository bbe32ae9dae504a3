"""Core enumerations for the bonus grid engine"""

from enum import Enum


class FieldType(str, Enum):
    """Declared type of an input field"""
    NUMBER = "number"
    PERCENT = "percent"
    CURRENCY = "currency"


class InputSection(str, Enum):
    """Form section an input field belongs to"""
    BASELINE = "baseline"
    NEW_BUSINESS = "new_business"
    GROWTH_BONUS_FACTORS = "growth_bonus_factors"
    GROWTH_GRID = "growth_grid"


class CellKind(str, Enum):
    """Rounding class of a derived cell"""
    COUNT = "count"
    CURRENCY = "currency"
    PERCENT = "percent"
    RATIO = "ratio"
    PACE = "pace"

    @property
    def precision(self) -> int:
        """Decimal places the spreadsheet rounds this kind of cell to"""
        return CELL_PRECISION[self]


CELL_PRECISION = {
    CellKind.COUNT: 0,
    CellKind.CURRENCY: 2,
    CellKind.PERCENT: 4,
    CellKind.RATIO: 4,
    CellKind.PACE: 2,
}


class ValidationIssueType(str, Enum):
    """Type of validation issue found in a raw workbook state"""
    COERCION_FALLBACK = "coercion_fallback"
    NEGATIVE_CLAMPED = "negative_clamped"
    RANGE_CLAMPED = "range_clamped"
    UNKNOWN_ADDRESS = "unknown_address"
    MISSING_REQUIRED = "missing_required"


class Severity(str, Enum):
    """Issue severity level"""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class ExportFormat(str, Enum):
    """Supported export renderings"""
    TEXT = "text"
    MARKDOWN = "markdown"
    JSON = "json"
