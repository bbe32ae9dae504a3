"""Static workbook layout catalogs"""

from .registry import SchemaRegistry
from .loader import (
    Catalogs,
    default_catalogs,
    load_catalogs,
    load_output_catalog,
    load_row_catalog,
    load_schema,
    validate_catalogs,
)

__all__ = [
    "SchemaRegistry",
    "Catalogs",
    "default_catalogs",
    "load_catalogs",
    "load_output_catalog",
    "load_row_catalog",
    "load_schema",
    "validate_catalogs",
]
