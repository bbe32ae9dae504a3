"""Utility modules"""

from .checksum import state_checksum
from .parsing import is_blank, parse_number
from .rounding import excel_round
from .workbook import read_cells, read_workbook_state

__all__ = [
    "read_cells",
    "read_workbook_state",
    "state_checksum",
    "is_blank",
    "parse_number",
    "excel_round",
]
