"""Stage 2: Computation - derive requested cells from a normalized state."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from catalogs import Catalogs, default_catalogs
from config import settings
from core.exceptions import UnknownAddressError
from core.interfaces import Stage
from core.models import ComputedOutputs, ComputeRequest, NormalizedState
from .formulas import build_formulas
from .graph import FormulaGraph

logger = logging.getLogger(__name__)

StateLike = Union[NormalizedState, Mapping[str, float]]
Snapshot = Tuple[Tuple[str, float], ...]


class ComputeEngine(Stage[ComputeRequest, ComputedOutputs]):
    """Evaluate the bonus grid formula graph for one input snapshot.

    Only the cells the requested addresses depend on are evaluated, each one
    rounded to its spreadsheet precision before anything reads it. Requested
    inputs come back as their normalized value. Addresses with neither an
    input nor a formula read as a blank cell (0) and are listed in
    ``ComputedOutputs.unresolved``; in strict mode they raise
    ``UnknownAddressError`` instead.
    """

    def __init__(
        self,
        catalogs: Optional[Catalogs] = None,
        strict: Optional[bool] = None,
        cache_size: Optional[int] = None,
    ):
        self.catalogs = catalogs or default_catalogs()
        self.strict = settings.BONUS_GRID_STRICT_MODE if strict is None else strict
        self.graph = FormulaGraph(build_formulas(self.catalogs))
        logger.info(
            "Formula graph for %s: %d cells, %d levels deep",
            self.catalogs.version,
            len(self.graph),
            max(self.graph.depths.values(), default=-1) + 1,
        )

        if cache_size is None:
            cache_size = settings.BONUS_GRID_CACHE_SIZE
        if cache_size > 0:
            self._evaluate = lru_cache(maxsize=cache_size)(self._evaluate_snapshot)
        else:
            self._evaluate = self._evaluate_snapshot

    @property
    def name(self) -> str:
        return "Computation"

    @property
    def stage_number(self) -> int:
        return 2

    def validate_input(self, input_data: ComputeRequest) -> bool:
        return isinstance(input_data, ComputeRequest)

    def execute(self, input_data: ComputeRequest) -> ComputedOutputs:
        return self.compute(input_data.state, input_data.addresses)

    def default_addresses(self) -> List[str]:
        """Every derived cell, in evaluation order"""
        return list(self.graph.execution_order)

    def compute(
        self,
        state: StateLike,
        addresses: Optional[Iterable[str]] = None,
    ) -> ComputedOutputs:
        if isinstance(state, NormalizedState):
            snapshot = state.frozen_items()
        else:
            snapshot = tuple(sorted((k, float(v)) for k, v in state.items()))

        requested = tuple(addresses) if addresses is not None else tuple(self.default_addresses())

        if self.strict:
            known_inputs = {address for address, _ in snapshot}
            for address in requested:
                if address not in self.graph and address not in known_inputs:
                    raise UnknownAddressError(address)

        values, unresolved = self._evaluate(snapshot, requested)
        return ComputedOutputs(values=dict(values), unresolved=list(unresolved))

    def _evaluate_snapshot(
        self, snapshot: Snapshot, requested: Tuple[str, ...]
    ) -> Tuple[Snapshot, Tuple[str, ...]]:
        inputs = dict(snapshot)
        cells: Dict[str, float] = {}

        for address in self.graph.closure(requested):
            formula = self.graph.formulas[address]
            args = [cells[d] if d in cells else inputs.get(d, 0.0) for d in formula.inputs]
            cells[address] = formula.evaluate(args)

        values: Dict[str, float] = {}
        unresolved: List[str] = []
        for address in requested:
            if address in cells:
                values[address] = cells[address]
            elif address in inputs:
                values[address] = inputs[address]
            else:
                values[address] = 0.0
                if address not in unresolved:
                    logger.debug("No input or formula for %s, reading as blank", address)
                    unresolved.append(address)

        return tuple(values.items()), tuple(unresolved)


@lru_cache(maxsize=1)
def _default_engine() -> ComputeEngine:
    return ComputeEngine()


def compute(
    state: StateLike,
    requested_addresses: Optional[Iterable[str]] = None,
    catalogs: Optional[Catalogs] = None,
    strict: Optional[bool] = None,
) -> ComputedOutputs:
    """Compute the requested cells with the packaged layout (or ``catalogs``)"""
    if catalogs is None and strict is None:
        engine = _default_engine()
    else:
        engine = ComputeEngine(catalogs, strict=strict)
    return engine.compute(state, requested_addresses)
