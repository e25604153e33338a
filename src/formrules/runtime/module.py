from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from ..schemas import ModuleSchema
from .node import FieldNode


@dataclass(frozen=True, slots=True)
class HierarchyMetrics:
    total_fields: int = 0
    root_field_count: int = 0
    max_depth: int = 0
    average_depth: float = 0.0
    conditional_field_count: int = 0
    complexity_score: float = 0.0


@dataclass
class BuildDiagnostics:
    """Problems found while building a tree.

    Warnings were healed automatically (orphaned parents, unresolved option
    sets); errors were severed (cycles). Neither stops the build.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


HierarchyValidationResult = BuildDiagnostics


@dataclass(frozen=True)
class ModuleRuntime:
    """Built, navigable tree of one module.

    Read-only once returned by the builder and safe to share between
    concurrent readers; a schema edit is handled by building a new runtime.
    """

    schema: ModuleSchema
    nodes_by_id: Mapping[str, FieldNode]
    root_ids: tuple[str, ...]
    metrics: HierarchyMetrics = field(default_factory=HierarchyMetrics)

    @property
    def root_fields(self) -> list[FieldNode]:
        return [self.nodes_by_id[root_id] for root_id in self.root_ids]

    def get_field(self, field_id: str) -> FieldNode | None:
        return self.nodes_by_id.get(field_id)

    def fields_in_order(self) -> Iterator[FieldNode]:
        """All fields in depth-first hierarchy order."""
        for root in self.root_fields:
            yield root
            yield from root.descendants()

    def __contains__(self, field_id: object) -> bool:
        return field_id in self.nodes_by_id

    def __len__(self) -> int:
        return len(self.nodes_by_id)

    def __str__(self) -> str:
        return (
            f"Module '{self.schema.title}' - {self.metrics.total_fields} fields, "
            f"{self.metrics.root_field_count} roots, max depth {self.metrics.max_depth}"
        )


@dataclass(frozen=True)
class BuildResult:
    runtime: ModuleRuntime
    diagnostics: BuildDiagnostics
