from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from ..schemas import FieldOption, FieldSchema


@dataclass(eq=False, frozen=True)
class FieldNode:
    """Runtime wrapper of a field inside a built module tree.

    Nodes live in the arena (``nodes_by_id``) of their :class:`ModuleRuntime`.
    Links are stored as ids; ``parent`` and ``children`` are lookups through the
    arena, so a node never owns its parent. Nodes are frozen: ``parent_id``,
    ``child_ids``, ``level``, ``path`` and ``resolved_options`` are filled in
    by the hierarchy builder while it links the tree and cannot be reassigned
    afterwards.
    """

    schema: FieldSchema
    index: int
    parent_id: str | None = None
    child_ids: tuple[str, ...] = ()
    level: int = 0
    path: str = ""
    resolved_options: tuple[FieldOption, ...] = ()
    _arena: Mapping[str, FieldNode] = field(default_factory=dict, repr=False)

    @property
    def id(self) -> str:
        return self.schema.id

    @property
    def parent(self) -> FieldNode | None:
        if self.parent_id is None:
            return None
        return self._arena.get(self.parent_id)

    @property
    def children(self) -> list[FieldNode]:
        return [self._arena[child_id] for child_id in self.child_ids]

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def effective_options(self) -> list[FieldOption]:
        """Resolved option-set entries, else the inline options."""
        if self.resolved_options:
            return list(self.resolved_options)
        return list(self.schema.options_inline or [])

    def ancestors(self) -> Iterator[FieldNode]:
        """Ancestors from the immediate parent up to the root."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def descendants(self) -> Iterator[FieldNode]:
        """All descendants in depth-first order."""
        for child in self.children:
            yield child
            yield from child.descendants()

    def __str__(self) -> str:
        return f"{self.schema.field_type} [{self.id}] at level {self.level}"
