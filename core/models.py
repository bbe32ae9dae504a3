"""Core data models for the bonus grid engine"""

from typing import Annotated, Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .enums import FieldType, InputSection, Severity, ValidationIssueType


ADDRESS_PATTERN = r"^[A-Za-z0-9_ ]+![A-Z]{1,3}[1-9][0-9]*$"

CellAddress = Annotated[str, Field(pattern=ADDRESS_PATTERN)]


# ─────────────────────────────────────────────────────────────
# Input schema
# ─────────────────────────────────────────────────────────────

class InputField(BaseModel):
    """One addressable input of the bonus grid"""
    sheet: str
    cell: str = Field(pattern=r"^[A-Z]{1,3}[1-9][0-9]*$")
    section: InputSection
    label: str
    type: FieldType
    default: float = 0.0
    capped: bool = True  # Percent fields only; uncapped growth factors may exceed 100%
    required: bool = False

    @property
    def address(self) -> str:
        return f"{self.sheet}!{self.cell}"


class InputSchema(BaseModel):
    """Schema asset: every input field of one layout version"""
    version: str
    all_fields: list[InputField] = []


# ─────────────────────────────────────────────────────────────
# Row / output catalogs
# ─────────────────────────────────────────────────────────────

class BaselineRow(BaseModel):
    """One product line of the Baseline table"""
    line: str
    items: CellAddress
    points_per_item: CellAddress
    points: CellAddress
    loss: CellAddress
    total: CellAddress


class NewBusinessRow(BaseModel):
    """One product line of the New Business table"""
    line: str
    items: CellAddress
    points_per_item: CellAddress
    total: CellAddress
    premium: CellAddress


class RowCatalog(BaseModel):
    """Row catalog asset"""
    baseline: list[BaselineRow] = []
    new_business: list[NewBusinessRow] = []


class BaselineTotals(BaseModel):
    items: CellAddress
    points: CellAddress
    retained_points: CellAddress
    loss_ratio: CellAddress
    points_per_item: CellAddress


class NewBusinessTotals(BaseModel):
    items: CellAddress
    points: CellAddress
    premium: CellAddress
    points_per_item: CellAddress
    premium_per_item: CellAddress


class FactorLayout(BaseModel):
    """Growth bonus factor cells"""
    growth: CellAddress
    retention: CellAddress
    combined: CellAddress
    points_per_item_mix: CellAddress


class ParameterLayout(BaseModel):
    """User-editable period parameters"""
    business_days_remaining: CellAddress
    bonus_multiplier: CellAddress


class TierLayout(BaseModel):
    """One row of the growth grid"""
    tier: int = Field(ge=1)
    preset_percent: CellAddress
    goal: CellAddress
    bonus_dollars: CellAddress
    items_needed: CellAddress
    points_needed: CellAddress
    target_points: CellAddress
    bonus_percent: CellAddress
    projected_premium: CellAddress
    monthly_items_needed: CellAddress
    daily_points_needed: CellAddress
    daily_items_needed: CellAddress

    def input_addresses(self) -> list[str]:
        return [self.preset_percent, self.goal]

    def derived_addresses(self) -> list[str]:
        return [
            self.bonus_dollars,
            self.items_needed,
            self.points_needed,
            self.target_points,
            self.bonus_percent,
            self.projected_premium,
            self.monthly_items_needed,
            self.daily_points_needed,
            self.daily_items_needed,
        ]


class GridTotals(BaseModel):
    """Pace totals under the growth grid"""
    daily_points_needed: CellAddress
    daily_items_needed: CellAddress


class OutputCatalog(BaseModel):
    """Output catalog asset"""
    baseline_totals: BaselineTotals
    new_business_totals: NewBusinessTotals
    factors: FactorLayout
    parameters: ParameterLayout
    tiers: list[TierLayout] = []
    grid_totals: GridTotals
    groups: dict[str, list[CellAddress]] = {}

    def all_group_addresses(self) -> list[str]:
        """Every grouped address, in catalog order, without duplicates"""
        seen: list[str] = []
        for addresses in self.groups.values():
            for address in addresses:
                if address not in seen:
                    seen.append(address)
        return seen


# ─────────────────────────────────────────────────────────────
# Normalization
# ─────────────────────────────────────────────────────────────

class NormalizedState(BaseModel):
    """Total, typed, clamped input state for one snapshot"""
    model_config = ConfigDict(frozen=True)

    schema_version: str
    values: Dict[str, float] = {}

    def get(self, address: str, default: float = 0.0) -> float:
        return self.values.get(address, default)

    def __getitem__(self, address: str) -> float:
        return self.values[address]

    def __contains__(self, address: object) -> bool:
        return address in self.values

    def __len__(self) -> int:
        return len(self.values)

    def frozen_items(self) -> Tuple[Tuple[str, float], ...]:
        """Hashable snapshot of the values, used as a memoization key"""
        return tuple(sorted(self.values.items()))


class ValidationIssue(BaseModel):
    """Single problem found while reading a raw value"""
    address: str
    value: Any = None
    issue_type: ValidationIssueType
    severity: Severity = Severity.WARNING
    message: str


class NormalizationResult(BaseModel):
    """Normalizer output with its coercion trail"""
    state: NormalizedState
    issues: list[ValidationIssue] = []


class GridValidationReport(BaseModel):
    """Integrity report over a raw workbook state"""
    is_valid: bool
    has_required_values: bool
    checksum: str
    issues: list[ValidationIssue] = []

    @property
    def critical_issues(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.CRITICAL]


# ─────────────────────────────────────────────────────────────
# Computation
# ─────────────────────────────────────────────────────────────

class ComputeRequest(BaseModel):
    """Input of the computation stage"""
    state: NormalizedState
    addresses: Optional[list[str]] = None  # None requests every derived cell


class ComputedOutputs(BaseModel):
    """Requested cell values for one input snapshot"""
    model_config = ConfigDict(frozen=True)

    values: Dict[str, float] = {}
    unresolved: list[str] = []  # Requested addresses with no input or formula

    def get(self, address: str, default: float = 0.0) -> float:
        return self.values.get(address, default)

    def __getitem__(self, address: str) -> float:
        return self.values[address]

    def __contains__(self, address: object) -> bool:
        return address in self.values

    def pick(self, addresses: Iterable[str]) -> list[float]:
        return [self.get(a) for a in addresses]


# ─────────────────────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────────────────────

class ExportRequest(BaseModel):
    """Input of the export stage"""
    state: NormalizedState
    outputs: ComputedOutputs


class Headline(BaseModel):
    """Tier 1 KPI strip"""
    bonus_percent: float = 0.0
    bonus_dollars: float = 0.0
    daily_points_needed: float = 0.0
    daily_items_needed: float = 0.0


class TierSummary(BaseModel):
    """One exported growth grid row"""
    tier: int
    goal: float = 0.0
    bonus_percent: float = 0.0
    bonus_dollars: float = 0.0
    items_needed: float = 0.0
    points_needed: float = 0.0
    monthly_items_needed: float = 0.0
    daily_points_needed: float = 0.0
    daily_items_needed: float = 0.0


class ExportPayload(BaseModel):
    """Shareable snapshot of a computed bonus grid"""
    schema_version: str
    state_checksum: str
    headline: Headline
    max_bonus_dollars: float = 0.0
    totals: Dict[str, float] = {}
    factors: Dict[str, float] = {}
    tiers: list[TierSummary] = []
    text: str = ""
    generated_at: Optional[str] = None
