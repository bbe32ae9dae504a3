from .engine import ComputeEngine, compute
from .formulas import Formula, build_formulas
from .graph import FormulaGraph

__all__ = ["ComputeEngine", "compute", "Formula", "build_formulas", "FormulaGraph"]
