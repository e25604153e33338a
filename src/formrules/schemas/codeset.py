from typing import Any

from pydantic import Field

from .base import SchemaModel
from .field import FieldOption


class CodeSetItem(SchemaModel):
    value: str
    text: str
    text_alt: str | None = None
    is_default: bool = False
    order: int = 0
    is_active: bool = True
    description: str | None = None
    parent_value: str | None = None
    metadata: dict[str, Any] | None = None


class CodeSetSchema(SchemaModel):
    """A shared, reusable option list referenced by fields through ``optionSetRef``."""

    id: int
    code: str = Field(min_length=1)
    name: str
    name_alt: str | None = None
    version: float = 1.0
    items: list[CodeSetItem] = Field(default_factory=list)
    category: str | None = None
    is_active: bool = True
    tags: list[str] = Field(default_factory=list)

    def to_field_options(self) -> list[FieldOption]:
        """Active items as field options, ordered by ``order``."""
        active = sorted(
            (item for item in self.items if item.is_active), key=lambda item: item.order
        )
        return [
            FieldOption(
                value=item.value,
                label=item.text,
                label_alt=item.text_alt,
                is_default=item.is_default,
                order=item.order,
            )
            for item in active
        ]

    def get_item(self, value: str) -> CodeSetItem | None:
        wanted = value.casefold()
        for item in self.items:
            if item.value.casefold() == wanted:
                return item
        return None
