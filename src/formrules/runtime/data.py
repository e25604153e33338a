from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class WorkflowFormData:
    """Multi-module data snapshot.

    ``modules`` maps a module key (a numeric id as string such as ``"1"``, or a
    friendly alias such as ``"PersonalInfo"``) to that module's field values.
    ``current_module_key`` is used for field references without a module
    prefix. The caller owns and mutates this object; the engine only reads it.
    """

    modules: dict[str, dict[str, Any]] = field(default_factory=dict)
    current_module_key: str | None = None

    def get_field_value(self, module_key: str | None, field_id: str) -> Any:
        """Value of a field, or None when the module or field is absent."""
        target = module_key if module_key is not None else self.current_module_key
        if target is None:
            return None
        module_data = self.modules.get(target)
        if module_data is None:
            return None
        return module_data.get(field_id)

    def set_field_value(self, module_key: str, field_id: str, value: Any) -> None:
        self.modules.setdefault(module_key, {})[field_id] = value

    def has_module(self, module_key: str) -> bool:
        return module_key in self.modules

    def get_module_data(self, module_key: str) -> dict[str, Any] | None:
        return self.modules.get(module_key)

    def set_module_data(self, module_key: str, module_data: dict[str, Any]) -> None:
        self.modules[module_key] = module_data

    @property
    def module_count(self) -> int:
        return len(self.modules)

    @property
    def module_keys(self) -> Iterable[str]:
        return self.modules.keys()

    @classmethod
    def from_single_module(
        cls, module_key: str, field_data: dict[str, Any]
    ) -> WorkflowFormData:
        return cls(modules={module_key: field_data}, current_module_key=module_key)

    @classmethod
    def empty(cls) -> WorkflowFormData:
        return cls()
