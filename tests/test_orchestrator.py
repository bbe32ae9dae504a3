import io
import json
from pathlib import Path

import pytest
from openpyxl import Workbook

from core.exceptions import CatalogLoadError, PipelineError
from main import main
from orchestrator import Orchestrator
from stages.s1_normalization import normalize
from ui.progress import ConsoleProgress, SilentProgress
from utils.workbook import read_cells, read_workbook_state


def _write_json(tmp_path: Path, data) -> Path:
    path = tmp_path / "state.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _write_workbook(tmp_path: Path, cells: dict) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Sheet1"
    for cell, value in cells.items():
        sheet[cell] = value

    file_path = tmp_path / "grid.xlsx"
    workbook.save(file_path)
    return file_path


def test_pipeline_runs_all_stages(catalogs, golden_state):
    progress = SilentProgress()
    ctx = Orchestrator(progress, catalogs=catalogs).run(golden_state)

    assert progress.started == [1, 2, 3]
    assert progress.completed == {1, 2, 3}
    assert progress.finished
    assert ctx.normalization.state["Sheet1!F9"] == 0.05
    assert ctx.outputs["Sheet1!D38"] == 120.0
    assert ctx.export.headline.bonus_dollars == 120.0


def test_pipeline_keeps_requested_addresses(catalogs, golden_state):
    ctx = Orchestrator(SilentProgress(), catalogs=catalogs).run(golden_state, requested=["Sheet1!E9"])

    assert ctx.outputs["Sheet1!E9"] == 1200
    assert "Sheet1!D38" in ctx.outputs


def test_strict_pipeline_failure_is_reported(catalogs, golden_state):
    progress = SilentProgress()
    orchestrator = Orchestrator(progress, catalogs=catalogs, strict=True)

    with pytest.raises(PipelineError) as exc_info:
        orchestrator.run(golden_state, requested=["Sheet1!Z99"])

    assert exc_info.value.stage == 2
    assert progress.failures[0][0] == 2
    assert not progress.finished


def test_console_progress_writes_to_stream(catalogs, golden_state, capsys):
    Orchestrator(ConsoleProgress(), catalogs=catalogs).run(golden_state)

    captured = capsys.readouterr()
    assert "Stage 2: Computation complete" in captured.err
    assert "Pipeline complete" in captured.err
    assert captured.out == ""


def test_cli_text_output(tmp_path, golden_state, capsys):
    exit_code = main([str(_write_json(tmp_path, golden_state)), "--quiet"])

    assert exit_code == 0
    assert "Bonus $:       $120.00" in capsys.readouterr().out


def test_cli_json_output(tmp_path, golden_state, capsys):
    exit_code = main([str(_write_json(tmp_path, golden_state)), "--quiet", "--format", "json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["headline"]["daily_points_needed"] == 0.2


def test_cli_validate(tmp_path, golden_state, full_goals_state, capsys):
    assert main([str(_write_json(tmp_path, golden_state)), "--validate"]) == 1
    report = json.loads(capsys.readouterr().out)
    assert report["has_required_values"] is False

    assert main([str(_write_json(tmp_path, full_goals_state)), "--validate"]) == 0


def test_cli_rejects_bad_input(tmp_path, capsys):
    assert main([str(tmp_path / "missing.json")]) == 1
    assert main([str(_write_json(tmp_path, [1, 2]))]) == 1

    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    assert main([str(broken)]) == 1
    assert "not valid JSON" in capsys.readouterr().out


def test_cli_reads_workbook(tmp_path, capsys):
    file_path = _write_workbook(
        tmp_path, {"C9": 120, "F9": 0.05, "K9": 15, "N9": 18000, "C38": 140}
    )

    assert main([str(file_path), "--quiet"]) == 0
    assert "Bonus $:       $120.00" in capsys.readouterr().out


def test_read_cells_returns_stored_values(tmp_path):
    file_path = _write_workbook(tmp_path, {"D38": 120, "K38": 0.2, "A1": "Label"})

    values = read_cells(file_path, ["Sheet1!D38", "Sheet1!K38", "Sheet1!A1", "Sheet1!E38", "Other!A1"])

    assert values == {"Sheet1!D38": 120, "Sheet1!K38": 0.2, "Sheet1!A1": "Label"}


def test_read_workbook_state_keeps_schema_inputs_only(tmp_path, catalogs):
    file_path = _write_workbook(tmp_path, {"C9": 120, "D9": 10, "E9": 1200, "D38": 120})

    state = read_workbook_state(file_path, catalogs.schema)

    assert state == {"Sheet1!C9": 120, "Sheet1!D9": 10}
    assert normalize(state, catalogs.schema)["Sheet1!C9"] == 120


def test_unreadable_workbook(tmp_path):
    file_path = tmp_path / "grid.xlsx"
    file_path.write_text("not a workbook", encoding="utf-8")

    with pytest.raises(CatalogLoadError):
        read_cells(file_path, ["Sheet1!C9"])


def test_console_progress_reports_failures_and_timings():
    stream = io.StringIO()
    progress = ConsoleProgress(stream=stream)

    progress.start_stage(1, "Normalization")
    progress.complete_stage(1)
    progress.start_stage(2, "Computation")
    progress.fail(2, "No input or formula is declared for Sheet1!Z99")

    output = stream.getvalue()
    assert "Stage 1: Normalization complete (" in output
    assert "Stage 2: Computation failed - No input or formula" in output
    assert set(progress.durations) == {1}
