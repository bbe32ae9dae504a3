"""Input schema registry"""

from typing import Dict, Iterator, List

from core.enums import InputSection
from core.exceptions import SchemaViolation
from core.models import InputField, InputSchema


class SchemaRegistry:
    """Lookup over the declared input fields of one layout version.

    Built once at load time and never mutated. Declaring the same address
    twice raises ``SchemaViolation``.
    """

    def __init__(self, schema: InputSchema):
        self.version = schema.version
        self._fields: Dict[str, InputField] = {}

        for field in schema.all_fields:
            address = field.address
            if address in self._fields:
                raise SchemaViolation(
                    f"Duplicate input declaration for {address}", address=address
                )
            self._fields[address] = field

    @property
    def addresses(self) -> List[str]:
        return list(self._fields)

    @property
    def fields(self) -> List[InputField]:
        return list(self._fields.values())

    def get(self, address: str) -> InputField:
        return self._fields[address]

    def by_section(self, section: InputSection) -> List[InputField]:
        return [f for f in self._fields.values() if f.section == section]

    def required_fields(self) -> List[InputField]:
        return [f for f in self._fields.values() if f.required]

    def defaults(self) -> Dict[str, float]:
        """Address -> default value for every declared field"""
        return {address: field.default for address, field in self._fields.items()}

    def __contains__(self, address: object) -> bool:
        return address in self._fields

    def __iter__(self) -> Iterator[InputField]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)
