"""Stage 3: Export - shareable payload and clipboard text."""

from datetime import datetime
from typing import List, Optional

from catalogs import Catalogs, default_catalogs
from config import settings
from core.enums import ExportFormat
from core.interfaces import Stage
from core.models import (
    ComputedOutputs,
    ExportPayload,
    ExportRequest,
    Headline,
    NormalizedState,
    TierSummary,
)
from utils.checksum import state_checksum


class ExportFormatter(Stage[ExportRequest, ExportPayload]):
    """Stage 3: Serialize a state/outputs pair (payload, text, markdown)"""

    def __init__(self, catalogs: Optional[Catalogs] = None, currency_symbol: Optional[str] = None):
        self.catalogs = catalogs or default_catalogs()
        self.currency_symbol = (
            settings.EXPORT_CURRENCY_SYMBOL if currency_symbol is None else currency_symbol
        )

    @property
    def name(self) -> str:
        return "Export"

    @property
    def stage_number(self) -> int:
        return 3

    def validate_input(self, input_data: ExportRequest) -> bool:
        return isinstance(input_data, ExportRequest)

    def required_addresses(self) -> List[str]:
        """Cells the payload reads from the computed outputs"""
        outputs = self.catalogs.outputs
        addresses: List[str] = []
        for tier in outputs.tiers:
            addresses.extend([
                tier.bonus_percent,
                tier.bonus_dollars,
                tier.items_needed,
                tier.points_needed,
                tier.monthly_items_needed,
                tier.daily_points_needed,
                tier.daily_items_needed,
            ])
        addresses.extend(outputs.baseline_totals.model_dump().values())
        addresses.extend(outputs.new_business_totals.model_dump().values())
        addresses.extend(outputs.factors.model_dump().values())
        addresses.extend(outputs.grid_totals.model_dump().values())
        return addresses

    def execute(
        self, input_data: ExportRequest, generated_at: Optional[datetime] = None
    ) -> ExportPayload:
        """Build the export payload"""
        state = input_data.state
        outputs = input_data.outputs
        layout = self.catalogs.outputs

        tiers = [
            TierSummary(
                tier=tier.tier,
                goal=state.get(tier.goal),
                bonus_percent=outputs.get(tier.bonus_percent),
                bonus_dollars=outputs.get(tier.bonus_dollars),
                items_needed=outputs.get(tier.items_needed),
                points_needed=outputs.get(tier.points_needed),
                monthly_items_needed=outputs.get(tier.monthly_items_needed),
                daily_points_needed=outputs.get(tier.daily_points_needed),
                daily_items_needed=outputs.get(tier.daily_items_needed),
            )
            for tier in layout.tiers
        ]

        headline = Headline()
        if tiers:
            first = tiers[0]
            headline = Headline(
                bonus_percent=first.bonus_percent,
                bonus_dollars=first.bonus_dollars,
                daily_points_needed=first.daily_points_needed,
                daily_items_needed=first.daily_items_needed,
            )

        bt = layout.baseline_totals
        nt = layout.new_business_totals
        totals = {
            "baseline_items": outputs.get(bt.items),
            "baseline_points": outputs.get(bt.points),
            "baseline_retained_points": outputs.get(bt.retained_points),
            "new_business_items": outputs.get(nt.items),
            "new_business_points": outputs.get(nt.points),
            "new_business_premium": outputs.get(nt.premium),
            "daily_points_needed_all_tiers": outputs.get(layout.grid_totals.daily_points_needed),
            "daily_items_needed_all_tiers": outputs.get(layout.grid_totals.daily_items_needed),
        }
        factors = {
            "growth": outputs.get(layout.factors.growth),
            "retention": outputs.get(layout.factors.retention),
            "combined": outputs.get(layout.factors.combined),
        }

        payload = ExportPayload(
            schema_version=state.schema_version,
            state_checksum=state_checksum(state.values),
            headline=headline,
            max_bonus_dollars=max((t.bonus_dollars for t in tiers), default=0.0),
            totals=totals,
            factors=factors,
            tiers=tiers,
            generated_at=generated_at.strftime("%Y-%m-%d %H:%M:%S") if generated_at else None,
        )
        return payload.model_copy(update={"text": self.render_text(payload)})

    def render(self, payload: ExportPayload, fmt: ExportFormat = ExportFormat.TEXT) -> str:
        if fmt == ExportFormat.MARKDOWN:
            return self.render_markdown(payload)
        if fmt == ExportFormat.JSON:
            return payload.model_dump_json(indent=2)
        return payload.text or self.render_text(payload)

    def render_text(self, payload: ExportPayload) -> str:
        """Plain text for the clipboard"""
        money = self._money
        lines = [
            "Bonus Grid Summary",
            f"Schema: {payload.schema_version}",
        ]
        if payload.generated_at:
            lines.append(f"Generated: {payload.generated_at}")
        lines.extend([
            "",
            "=" * 50,
            "HEADLINE (TIER 1)",
            "=" * 50,
            f"Bonus %:       {self._percent(payload.headline.bonus_percent)}",
            f"Bonus $:       {money(payload.headline.bonus_dollars)}",
            f"Daily points:  {payload.headline.daily_points_needed:.2f}",
            f"Daily items:   {payload.headline.daily_items_needed:.2f}",
            f"Maximum bonus: {money(payload.max_bonus_dollars)}",
            "",
            "=" * 50,
            "GROWTH GRID",
            "=" * 50,
        ])

        for tier in payload.tiers:
            lines.append(
                f"Tier {tier.tier}: goal {tier.goal:,.0f} | "
                f"bonus {self._percent(tier.bonus_percent)} = {money(tier.bonus_dollars)} | "
                f"needs {tier.items_needed:,.0f} items / {tier.points_needed:,.0f} points | "
                f"monthly {tier.monthly_items_needed:.2f} items | "
                f"daily {tier.daily_points_needed:.2f} points, {tier.daily_items_needed:.2f} items"
            )

        lines.extend([
            "",
            "=" * 50,
            "GROWTH BONUS FACTORS",
            "=" * 50,
        ])
        for name, value in payload.factors.items():
            lines.append(f"{name.title()}: {value:.4f}")

        return "\n".join(lines)

    def render_markdown(self, payload: ExportPayload) -> str:
        """Markdown table of the growth grid"""
        money = self._money
        lines = [
            "# Bonus Grid Summary",
            "",
            f"**Schema:** {payload.schema_version}",
        ]
        if payload.generated_at:
            lines.append(f"**Generated:** {payload.generated_at}")
        lines.extend([
            "",
            f"- **Bonus %:** {self._percent(payload.headline.bonus_percent)}",
            f"- **Bonus $:** {money(payload.headline.bonus_dollars)}",
            f"- **Daily points:** {payload.headline.daily_points_needed:.2f}",
            f"- **Daily items:** {payload.headline.daily_items_needed:.2f}",
            f"- **Maximum bonus:** {money(payload.max_bonus_dollars)}",
            "",
            "## Growth Grid",
            "",
            "| Tier | Goal | Bonus % | Bonus $ | Items Needed | Points Needed | Monthly Items | Daily Points | Daily Items |",
            "|---|---|---|---|---|---|---|---|---|",
        ])
        for tier in payload.tiers:
            lines.append(
                f"| {tier.tier} | {tier.goal:,.0f} | {self._percent(tier.bonus_percent)} | "
                f"{money(tier.bonus_dollars)} | {tier.items_needed:,.0f} | "
                f"{tier.points_needed:,.0f} | {tier.monthly_items_needed:.2f} | "
                f"{tier.daily_points_needed:.2f} | "
                f"{tier.daily_items_needed:.2f} |"
            )
        return "\n".join(lines)

    def _money(self, value: float) -> str:
        return f"{self.currency_symbol}{value:,.2f}"

    def _percent(self, value: float) -> str:
        return f"{value * 100:.2f}%"


def export(
    state: NormalizedState,
    outputs: ComputedOutputs,
    catalogs: Optional[Catalogs] = None,
) -> ExportPayload:
    """Build an export payload with the packaged layout (or ``catalogs``)"""
    return ExportFormatter(catalogs).execute(ExportRequest(state=state, outputs=outputs))
