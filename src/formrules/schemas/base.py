from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SchemaModel(BaseModel):
    """Base class of all schema value types.

    Schemas are immutable and use camelCase keys when they cross a process
    boundary as JSON; Python code may use either the field names or the aliases.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Interchange form: camelCase keys, JSON types, unset optionals omitted."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
