import json
from datetime import datetime

import pytest

from core.enums import ExportFormat
from core.models import ExportRequest
from stages.s1_normalization import normalize
from stages.s2_computation import ComputeEngine
from stages.s3_export import ExportFormatter, export
from utils.checksum import state_checksum


@pytest.fixture
def formatter(catalogs):
    return ExportFormatter(catalogs)


@pytest.fixture
def request_for(catalogs, formatter):
    def build(raw_state):
        state = normalize(raw_state, catalogs.schema)
        outputs = ComputeEngine(catalogs).compute(state, formatter.required_addresses())
        return ExportRequest(state=state, outputs=outputs)
    return build


def test_payload_headline_is_tier_one(formatter, request_for, golden_state):
    payload = formatter.execute(request_for(golden_state))

    assert payload.headline.bonus_percent == 0.005
    assert payload.headline.bonus_dollars == 120.0
    assert payload.headline.daily_points_needed == 0.2
    assert payload.headline.daily_items_needed == 0.02
    assert payload.tiers[0].goal == 140
    assert len(payload.tiers) == 7


def test_payload_totals_and_factors(formatter, request_for, golden_state):
    payload = formatter.execute(request_for(golden_state))

    assert payload.totals["baseline_retained_points"] == 1140
    assert payload.totals["new_business_premium"] == 18000
    assert payload.factors == {"growth": 0.125, "retention": 0.95, "combined": 1.075}


def test_max_bonus_is_largest_tier(formatter, request_for, full_goals_state):
    payload = formatter.execute(request_for(full_goals_state))

    assert payload.max_bonus_dollars == max(t.bonus_dollars for t in payload.tiers)
    assert payload.max_bonus_dollars == payload.tiers[-1].bonus_dollars


def test_checksum_tracks_normalized_state(formatter, request_for, golden_state):
    request = request_for(golden_state)
    payload = formatter.execute(request)

    assert payload.state_checksum == state_checksum(request.state.values)
    assert payload.schema_version == "bonus-grid-v1"


def test_text_rendering(formatter, request_for, golden_state):
    payload = formatter.execute(request_for(golden_state), generated_at=datetime(2024, 3, 1, 9, 30))

    assert "Generated: 2024-03-01 09:30:00" in payload.text
    assert "Bonus %:       0.50%" in payload.text
    assert "Bonus $:       $120.00" in payload.text
    assert "Tier 1: goal 140 | bonus 0.50% = $120.00 | needs 5 items / 50 points" in payload.text
    assert "Growth: 0.1250" in payload.text
    assert formatter.render(payload) == payload.text


def test_markdown_rendering(formatter, request_for, golden_state):
    payload = formatter.execute(request_for(golden_state))
    markdown = formatter.render(payload, ExportFormat.MARKDOWN)

    assert markdown.startswith("# Bonus Grid Summary")
    assert "| 1 | 140 | 0.50% | $120.00 | 5 | 50 | 0.42 | 0.20 | 0.02 |" in markdown


def test_json_rendering_round_trips(formatter, request_for, golden_state):
    payload = formatter.execute(request_for(golden_state))
    data = json.loads(formatter.render(payload, ExportFormat.JSON))

    assert data["headline"]["bonus_dollars"] == 120.0
    assert data["tiers"][0]["items_needed"] == 5


def test_custom_currency_symbol(catalogs, request_for, golden_state):
    payload = ExportFormatter(catalogs, currency_symbol="€").execute(request_for(golden_state))

    assert "Bonus $:       €120.00" in payload.text


def test_module_export(catalogs, request_for, golden_state):
    request = request_for(golden_state)

    assert export(request.state, request.outputs).headline.bonus_dollars == 120.0
