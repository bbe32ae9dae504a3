from .normalizer import Normalizer, normalize
from .validator import GridValidator

__all__ = ["Normalizer", "normalize", "GridValidator"]
