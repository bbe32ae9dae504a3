"""Core abstractions for the bonus grid engine"""

from .models import *
from .enums import *
from .exceptions import *
from .interfaces import *

__all__ = [
    # Models
    "CellAddress",
    "InputField",
    "InputSchema",
    "BaselineRow",
    "NewBusinessRow",
    "RowCatalog",
    "TierLayout",
    "GridTotals",
    "OutputCatalog",
    "NormalizedState",
    "ValidationIssue",
    "NormalizationResult",
    "GridValidationReport",
    "ComputeRequest",
    "ComputedOutputs",
    "ExportRequest",
    "Headline",
    "TierSummary",
    "ExportPayload",
    # Enums
    "FieldType",
    "InputSection",
    "CellKind",
    "ValidationIssueType",
    "Severity",
    "ExportFormat",
    # Exceptions
    "BonusGridError",
    "PipelineError",
    "StageError",
    "SchemaViolation",
    "CircularReferenceError",
    "CatalogLoadError",
    "UnknownAddressError",
    # Interfaces
    "Stage",
]
