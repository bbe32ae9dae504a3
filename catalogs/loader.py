"""Catalog loading and cross-validation"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from core.exceptions import CatalogLoadError, SchemaViolation
from core.models import InputSchema, OutputCatalog, RowCatalog
from config import settings
from .registry import SchemaRegistry

logger = logging.getLogger(__name__)

SCHEMA_FILE = "schema_inputs.json"
ROWS_FILE = "rows.json"
OUTPUTS_FILE = "outputs_addresses.json"


@dataclass(frozen=True)
class Catalogs:
    """Schema, row and output catalogs of one workbook layout"""
    schema: SchemaRegistry
    rows: RowCatalog
    outputs: OutputCatalog

    @property
    def version(self) -> str:
        return self.schema.version

    def input_addresses(self) -> List[str]:
        """Addresses the row, parameter and tier catalogs expect the user to fill"""
        addresses: List[str] = []
        for row in self.rows.baseline:
            addresses.extend([row.items, row.points_per_item, row.loss])
        for row in self.rows.new_business:
            addresses.extend([row.items, row.points_per_item, row.premium])
        params = self.outputs.parameters
        addresses.extend([params.business_days_remaining, params.bonus_multiplier])
        for tier in self.outputs.tiers:
            addresses.extend(tier.input_addresses())
        return addresses

    def derived_addresses(self) -> List[str]:
        """Addresses whose value comes from a formula"""
        addresses: List[str] = []
        for row in self.rows.baseline:
            addresses.extend([row.points, row.total])
        for row in self.rows.new_business:
            addresses.append(row.total)
        addresses.extend(self.outputs.baseline_totals.model_dump().values())
        addresses.extend(self.outputs.new_business_totals.model_dump().values())
        addresses.extend(self.outputs.factors.model_dump().values())
        for tier in self.outputs.tiers:
            addresses.extend(tier.derived_addresses())
        addresses.extend(self.outputs.grid_totals.model_dump().values())
        return addresses

    def group(self, name: str) -> List[str]:
        return list(self.outputs.groups.get(name, []))


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise CatalogLoadError(f"Catalog file not found: {path}", file_path=str(path))
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Malformed catalog file {path}: {e}", file_path=str(path))


def load_schema(path: Union[str, Path]) -> SchemaRegistry:
    """Load the input schema asset and build its registry"""
    path = Path(path)
    try:
        schema = InputSchema.model_validate(_read_json(path))
    except PydanticValidationError as e:
        raise CatalogLoadError(f"Invalid input schema {path}: {e}", file_path=str(path))
    return SchemaRegistry(schema)


def load_row_catalog(path: Union[str, Path]) -> RowCatalog:
    path = Path(path)
    try:
        return RowCatalog.model_validate(_read_json(path))
    except PydanticValidationError as e:
        raise CatalogLoadError(f"Invalid row catalog {path}: {e}", file_path=str(path))


def load_output_catalog(path: Union[str, Path]) -> OutputCatalog:
    path = Path(path)
    try:
        return OutputCatalog.model_validate(_read_json(path))
    except PydanticValidationError as e:
        raise CatalogLoadError(f"Invalid output catalog {path}: {e}", file_path=str(path))


def validate_catalogs(catalogs: Catalogs) -> None:
    """
    Cross-check the catalogs against the schema

    Raises:
        SchemaViolation: an input role is undeclared, a derived cell collides
            with an input or another derived cell, or an output group names an
            address nothing produces
    """
    schema = catalogs.schema

    for address in catalogs.input_addresses():
        if address not in schema:
            raise SchemaViolation(
                f"Catalog input {address} is not declared in the schema", address=address
            )

    derived = set()
    for address in catalogs.derived_addresses():
        if address in schema:
            raise SchemaViolation(
                f"Derived cell {address} is also declared as an input", address=address
            )
        if address in derived:
            raise SchemaViolation(
                f"Derived cell {address} is placed twice in the catalogs", address=address
            )
        derived.add(address)

    for name, addresses in catalogs.outputs.groups.items():
        for address in addresses:
            if address not in schema and address not in derived:
                raise SchemaViolation(
                    f"Output group '{name}' references undeclared address {address}",
                    address=address,
                )


def load_catalogs(directory: Optional[Union[str, Path]] = None) -> Catalogs:
    """Load and validate the three catalogs from a directory"""
    directory = Path(directory) if directory else settings.get_catalog_path()

    catalogs = Catalogs(
        schema=load_schema(directory / SCHEMA_FILE),
        rows=load_row_catalog(directory / ROWS_FILE),
        outputs=load_output_catalog(directory / OUTPUTS_FILE),
    )
    validate_catalogs(catalogs)

    logger.info(
        "Loaded bonus grid catalogs %s from %s: %d inputs, %d derived cells, %d tiers",
        catalogs.version,
        directory,
        len(catalogs.schema),
        len(catalogs.derived_addresses()),
        len(catalogs.outputs.tiers),
    )
    return catalogs


@lru_cache(maxsize=1)
def default_catalogs() -> Catalogs:
    """Catalogs from the configured directory, loaded once per process"""
    return load_catalogs()
