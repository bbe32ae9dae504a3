"""Pipeline stages"""

from .s1_normalization import Normalizer, GridValidator, normalize
from .s2_computation import ComputeEngine, compute
from .s3_export import ExportFormatter, export

__all__ = [
    "Normalizer",
    "GridValidator",
    "normalize",
    "ComputeEngine",
    "compute",
    "ExportFormatter",
    "export",
]
