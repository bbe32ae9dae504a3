"""Formula declarations for the bonus grid layout.

Each derived cell is a pure function of the cells it names, keyed by the
address the catalogs place it at. Nothing here hardcodes an address: moving a
cell means editing the catalogs only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Sequence, Tuple

from catalogs import Catalogs
from core.enums import CellKind
from core.exceptions import SchemaViolation
from utils.rounding import excel_round

BUSINESS_DAYS_PER_MONTH = 21


@dataclass(frozen=True)
class Formula:
    """One derived cell: dependencies, derivation and rounding class"""
    address: str
    inputs: Tuple[str, ...]
    fn: Callable[..., float]
    kind: CellKind
    description: str = ""

    def evaluate(self, values: Sequence[float]) -> float:
        return excel_round(self.fn(*values), self.kind.precision)


def _sum(*values: float) -> float:
    return sum(values, 0.0)


def _product(a: float, b: float) -> float:
    return a * b


def _ratio(numerator: float, denominator: float) -> float:
    # Blank-safe division: the sheet wraps these in IF(denominator>0, ..., 0)
    return numerator / denominator if denominator > 0 else 0.0


def _retained(loss_ratio: float, points: float) -> float:
    return (1 - loss_ratio) * points


def _loss_ratio(retained: float, points: float) -> float:
    return 1 - retained / points if points > 0 else 0.0


def _first_positive(preferred: float, fallback: float) -> float:
    return preferred if preferred > 0 else fallback


def _shortfall(target: float, retained: float, written: float) -> float:
    return max(0.0, target - retained - written)


def _projected_premium(premium: float, items: float, premium_per_item: float) -> float:
    return premium + items * premium_per_item


def _monthly_items(items: float, days_remaining: float) -> float:
    return items * BUSINESS_DAYS_PER_MONTH / days_remaining if days_remaining > 0 else 0.0


class FormulaSet:
    """Collects declarations and rejects a cell placed twice"""

    def __init__(self):
        self.formulas: Dict[str, Formula] = {}

    def add(
        self,
        address: str,
        inputs: Sequence[str],
        fn: Callable[..., float],
        kind: CellKind,
        description: str = "",
    ) -> None:
        if address in self.formulas:
            raise SchemaViolation(f"Formula for {address} declared twice", address=address)
        self.formulas[address] = Formula(address, tuple(inputs), fn, kind, description)


def build_formulas(catalogs: Catalogs) -> Dict[str, Formula]:
    """Declare every derived cell of the layout described by ``catalogs``"""
    formula_set = FormulaSet()
    _row_formulas(formula_set, catalogs)
    _aggregate_formulas(formula_set, catalogs)
    _factor_formulas(formula_set, catalogs)
    _tier_formulas(formula_set, catalogs)
    return formula_set.formulas


def _row_formulas(fs: FormulaSet, catalogs: Catalogs) -> None:
    for row in catalogs.rows.baseline:
        fs.add(row.points, (row.items, row.points_per_item), _product,
               CellKind.COUNT, f"{row.line} baseline points")
        fs.add(row.total, (row.loss, row.points), _retained,
               CellKind.COUNT, f"{row.line} retained points")

    for row in catalogs.rows.new_business:
        fs.add(row.total, (row.items, row.points_per_item), _product,
               CellKind.COUNT, f"{row.line} new business points")


def _aggregate_formulas(fs: FormulaSet, catalogs: Catalogs) -> None:
    baseline = catalogs.rows.baseline
    new_business = catalogs.rows.new_business
    bt = catalogs.outputs.baseline_totals
    nt = catalogs.outputs.new_business_totals

    fs.add(bt.items, [r.items for r in baseline], _sum, CellKind.COUNT, "Baseline items")
    fs.add(bt.points, [r.points for r in baseline], _sum, CellKind.COUNT, "Baseline points")
    fs.add(bt.retained_points, [r.total for r in baseline], _sum,
           CellKind.COUNT, "Baseline retained points")
    fs.add(bt.loss_ratio, (bt.retained_points, bt.points), _loss_ratio,
           CellKind.PERCENT, "Weighted baseline loss ratio")
    fs.add(bt.points_per_item, (bt.points, bt.items), _ratio,
           CellKind.RATIO, "Baseline points per item")

    fs.add(nt.items, [r.items for r in new_business], _sum, CellKind.COUNT, "New business items")
    fs.add(nt.points, [r.total for r in new_business], _sum, CellKind.COUNT, "New business points")
    fs.add(nt.premium, [r.premium for r in new_business], _sum,
           CellKind.CURRENCY, "New business premium")
    fs.add(nt.points_per_item, (nt.points, nt.items), _ratio,
           CellKind.RATIO, "New business points per item")
    fs.add(nt.premium_per_item, (nt.premium, nt.items), _ratio,
           CellKind.CURRENCY, "Average premium per new item")


def _factor_formulas(fs: FormulaSet, catalogs: Catalogs) -> None:
    bt = catalogs.outputs.baseline_totals
    nt = catalogs.outputs.new_business_totals
    factors = catalogs.outputs.factors

    fs.add(factors.growth, (nt.points, bt.points), _ratio, CellKind.RATIO, "Growth factor")
    fs.add(factors.retention, (bt.retained_points, bt.points), _ratio,
           CellKind.RATIO, "Retention factor")
    fs.add(factors.combined, (factors.growth, factors.retention), _sum,
           CellKind.RATIO, "Combined factor")
    fs.add(factors.points_per_item_mix, (nt.points_per_item, bt.points_per_item),
           _first_positive, CellKind.RATIO, "Points per item mix")


def _tier_formulas(fs: FormulaSet, catalogs: Catalogs) -> None:
    bt = catalogs.outputs.baseline_totals
    nt = catalogs.outputs.new_business_totals
    mix = catalogs.outputs.factors.points_per_item_mix
    params = catalogs.outputs.parameters

    for tier in catalogs.outputs.tiers:
        label = f"Tier {tier.tier}"
        fs.add(tier.target_points, (bt.points, tier.goal), _sum,
               CellKind.COUNT, f"{label} target points")
        fs.add(tier.points_needed, (tier.target_points, bt.retained_points, nt.points),
               _shortfall, CellKind.COUNT, f"{label} points still needed")
        fs.add(tier.items_needed, (tier.points_needed, mix), _ratio,
               CellKind.COUNT, f"{label} items still needed")
        fs.add(tier.projected_premium, (nt.premium, tier.items_needed, nt.premium_per_item),
               _projected_premium, CellKind.CURRENCY, f"{label} projected premium")
        fs.add(tier.bonus_percent, (tier.preset_percent, params.bonus_multiplier), _product,
               CellKind.PERCENT, f"{label} bonus percent")
        fs.add(tier.bonus_dollars, (tier.projected_premium, tier.bonus_percent), _product,
               CellKind.CURRENCY, f"{label} bonus dollars")
        fs.add(tier.daily_points_needed, (tier.points_needed, params.business_days_remaining),
               _ratio, CellKind.PACE, f"{label} daily points needed")
        fs.add(tier.monthly_items_needed, (tier.items_needed, params.business_days_remaining),
               _monthly_items, CellKind.PACE, f"{label} monthly items needed")
        fs.add(tier.daily_items_needed, (tier.items_needed, params.business_days_remaining),
               _ratio, CellKind.PACE, f"{label} daily items needed")

    totals = catalogs.outputs.grid_totals
    tiers = catalogs.outputs.tiers
    fs.add(totals.daily_points_needed, [t.daily_points_needed for t in tiers], _sum,
           CellKind.PACE, "Daily points needed, all tiers")
    fs.add(totals.daily_items_needed, [t.daily_items_needed for t in tiers], _sum,
           CellKind.PACE, "Daily items needed, all tiers")
