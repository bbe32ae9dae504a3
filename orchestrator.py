"""Pipeline orchestrator"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from catalogs import Catalogs, default_catalogs
from core.exceptions import BonusGridError, PipelineError, StageError
from core.models import (
    ComputedOutputs,
    ComputeRequest,
    ExportPayload,
    ExportRequest,
    NormalizationResult,
)
from stages import ComputeEngine, ExportFormatter, Normalizer
from ui.progress import ProgressTracker


@dataclass
class PipelineContext:
    """Shared context passed through pipeline"""
    raw_state: Dict[str, Any] = field(default_factory=dict)
    normalization: Optional[NormalizationResult] = None
    outputs: Optional[ComputedOutputs] = None
    export: Optional[ExportPayload] = None


class Orchestrator:
    """Pipeline coordinator: normalize -> compute -> export"""

    def __init__(
        self,
        progress: ProgressTracker,
        catalogs: Optional[Catalogs] = None,
        strict: Optional[bool] = None,
    ):
        self.progress = progress
        self.catalogs = catalogs or default_catalogs()

        # Initialize stages
        self.stages = {
            1: Normalizer(self.catalogs.schema),
            2: ComputeEngine(self.catalogs, strict=strict),
            3: ExportFormatter(self.catalogs),
        }

    def run(
        self,
        raw_state: Mapping[str, Any],
        requested: Optional[Iterable[str]] = None,
        schema_version: Optional[str] = None,
        generated_at: Optional[datetime] = None,
    ) -> PipelineContext:
        """Execute full pipeline"""
        ctx = PipelineContext(raw_state=dict(raw_state or {}))

        try:
            # Stage 1: Normalization
            ctx.normalization = self._execute_stage(
                1, ctx.raw_state, schema_version=schema_version
            )

            # Stage 2: Computation
            ctx.outputs = self._execute_stage(2, ComputeRequest(
                state=ctx.normalization.state,
                addresses=self._requested_addresses(requested),
            ))

            # Stage 3: Export
            ctx.export = self._execute_stage(3, ExportRequest(
                state=ctx.normalization.state,
                outputs=ctx.outputs,
            ), generated_at=generated_at)

            self.progress.complete()
            return ctx

        except StageError as e:
            self.progress.fail(e.stage, e.message)
            raise PipelineError(f"Pipeline failed at stage {e.stage}: {e.message}", stage=e.stage)

    def _requested_addresses(self, requested: Optional[Iterable[str]]) -> List[str]:
        """Caller's addresses plus everything the export reads"""
        addresses = list(requested) if requested is not None else self.stages[2].default_addresses()
        for address in self.stages[3].required_addresses():
            if address not in addresses:
                addresses.append(address)
        return addresses

    def _execute_stage(self, stage_num: int, input_data, **kwargs) -> Any:
        """Execute a single stage with progress tracking"""
        stage = self.stages[stage_num]
        self.progress.start_stage(stage_num, stage.name)

        if not stage.validate_input(input_data):
            raise StageError(stage_num, "Invalid input")

        try:
            result = stage.execute(input_data, **kwargs)
        except StageError:
            raise
        except BonusGridError as e:
            raise StageError(stage_num, str(e)) from e

        self.progress.complete_stage(stage_num)
        return result
