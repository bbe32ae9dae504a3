"""Read cell values from an .xlsx copy of the bonus grid"""

from pathlib import Path
from typing import Any, Dict, Iterable, Union
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.cell import coordinate_from_string
from openpyxl.utils.exceptions import InvalidFileException

from core.exceptions import CatalogLoadError


def read_cells(file_path: Union[str, Path], addresses: Iterable[str]) -> Dict[str, Any]:
    """
    Read the stored values of ``Sheet!A1`` addresses from a workbook

    Formula cells return the value the spreadsheet last calculated, which is
    how reference figures are captured for rounding checks. Empty cells and
    sheets the workbook does not have are left out.

    Args:
        file_path: Path to the .xlsx file
        addresses: Cell addresses to read

    Returns:
        Address -> cell value
    """
    try:
        workbook = load_workbook(file_path, data_only=True)
    except (OSError, InvalidFileException, BadZipFile, KeyError) as e:
        raise CatalogLoadError(f"Cannot open workbook {file_path}: {e}", file_path=str(file_path))

    values: Dict[str, Any] = {}
    try:
        for address in addresses:
            sheet_name, cell = address.split("!", 1)
            if sheet_name not in workbook.sheetnames:
                continue
            coordinate_from_string(cell)  # rejects malformed coordinates
            value = workbook[sheet_name][cell].value
            if value is not None:
                values[address] = value
    finally:
        workbook.close()
    return values


def read_workbook_state(file_path: Union[str, Path], schema) -> Dict[str, Any]:
    """Raw workbook state holding the input cells ``schema`` declares"""
    return read_cells(file_path, schema.addresses)
