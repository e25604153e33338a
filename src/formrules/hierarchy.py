"""Hierarchy builder: flat module schema to navigable runtime tree."""

import asyncio
import inspect
import logging
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from .codesets import AsyncOptionSetResolver, OptionSetResolver
from .config import EngineConfig
from .runtime import (
    BuildDiagnostics,
    BuildResult,
    FieldNode,
    HierarchyMetrics,
    HierarchyValidationResult,
    ModuleRuntime,
)
from .schemas import FieldOption, FieldSchema, ModuleSchema

logger = logging.getLogger(__name__)

Resolver = OptionSetResolver | AsyncOptionSetResolver


class _ResolutionCancelled(Exception):
    pass


def _set(node: FieldNode, **values: Any) -> None:
    # Nodes are frozen once handed out; only the builder fills them in.
    for name, value in values.items():
        object.__setattr__(node, name, value)


def _parent_of(field: FieldSchema) -> str | None:
    parent_id = field.parent_id
    if parent_id is None or not parent_id.strip():
        return None
    return parent_id


def _creates_cycle(field_id: str, parent_id: str, index: dict[str, FieldSchema]) -> bool:
    """Whether ``parent_id`` or one of its schema ancestors is ``field_id``."""
    visited: set[str] = set()
    current: str | None = parent_id
    while current is not None and current not in visited:
        if current == field_id:
            return True
        visited.add(current)
        parent = index.get(current)
        current = _parent_of(parent) if parent is not None else None
    return False


class HierarchyBuilder:
    """Build :class:`ModuleRuntime` trees from module schemas.

    The builder never raises for problems in the schema or the resolver:
    orphaned parents and unresolvable option sets become warnings, parent
    cycles become errors and are severed, and a usable runtime is always
    returned together with the diagnostics.
    """

    def __init__(
        self,
        resolver: Resolver | None = None,
        config: EngineConfig | None = None,
    ):
        self.resolver = resolver
        self.config = config or EngineConfig()

    def build(self, schema: ModuleSchema, resolver: OptionSetResolver | None = None) -> BuildResult:
        """Build a tree, resolving option sets synchronously.

        Args:
            schema: Module to build
            resolver: Option-set resolver (defaults to the builder's resolver)

        Returns:
            BuildResult with the runtime and accumulated diagnostics
        """
        resolver = resolver if resolver is not None else self.resolver
        logger.debug(
            f"Building hierarchy for module {schema.id} '{schema.title}' "
            f"with {len(schema.fields)} fields"
        )

        diagnostics = BuildDiagnostics()
        nodes, root_ids = self._link(schema, diagnostics)

        for node in nodes.values():
            if node.schema.option_set_ref is None:
                _set(node, resolved_options=tuple(node.schema.options_inline or ()))
                continue
            options, warning = self._resolve_sync(node, resolver)
            _set(node, resolved_options=options)
            if warning:
                self._warn(diagnostics, warning)

        return self._finish(schema, nodes, root_ids, diagnostics)

    async def build_async(
        self,
        schema: ModuleSchema,
        resolver: Resolver | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> BuildResult:
        """Build a tree, resolving option sets concurrently.

        Lookups for different fields run concurrently (at most
        ``config.resolver.concurrency`` at a time), each bounded by
        ``config.resolver.timeout`` seconds. Synchronous resolvers run in the
        default thread pool; a timed-out or cancelled synchronous lookup keeps
        its worker thread until it returns, but its result is discarded.
        Setting ``cancel_event`` abandons the lookups still pending; like
        timeouts and resolver errors, this only produces warnings. The runtime
        is returned once every lookup has settled.
        """
        resolver = resolver if resolver is not None else self.resolver
        logger.debug(
            f"Building hierarchy (async) for module {schema.id} '{schema.title}' "
            f"with {len(schema.fields)} fields"
        )

        diagnostics = BuildDiagnostics()
        nodes, root_ids = self._link(schema, diagnostics)

        pending: list[FieldNode] = []
        for node in nodes.values():
            if node.schema.option_set_ref is None:
                _set(node, resolved_options=tuple(node.schema.options_inline or ()))
            else:
                pending.append(node)

        if pending:
            semaphore = asyncio.Semaphore(self.config.resolver.concurrency)
            results = await asyncio.gather(
                *(
                    self._resolve_async(node, resolver, semaphore, cancel_event)
                    for node in pending
                )
            )
            for node, (options, warning) in zip(pending, results):
                _set(node, resolved_options=options)
                if warning:
                    self._warn(diagnostics, warning)

        return self._finish(schema, nodes, root_ids, diagnostics)

    def validate_hierarchy(self, schema: ModuleSchema) -> HierarchyValidationResult:
        """Check a schema's parent references without building it."""
        result = HierarchyValidationResult()
        index = {field.id: field for field in schema.fields}

        for field in schema.fields:
            parent_id = _parent_of(field)
            if parent_id is None:
                continue
            if parent_id == field.id:
                result.errors.append(f"Field '{field.id}' references itself as parent")
            elif parent_id not in index:
                result.warnings.append(
                    f"Field '{field.id}' references non-existent parent '{parent_id}'"
                )
            elif _creates_cycle(field.id, parent_id, index):
                result.errors.append(f"Circular reference detected involving field '{field.id}'")

        return result

    def fix_hierarchy_issues(self, schema: ModuleSchema) -> ModuleSchema:
        """Return a copy of the schema with invalid parent references cleared.

        Self references, references to missing fields, and links that close a
        cycle are removed; the affected fields become roots.
        """
        index = {field.id: field for field in schema.fields}
        fixed: list[FieldSchema] = []
        changed = False

        for field in schema.fields:
            parent_id = _parent_of(field)
            if parent_id is not None and (
                parent_id not in index or _creates_cycle(field.id, parent_id, index)
            ):
                logger.warning(
                    f"Clearing invalid parent reference '{parent_id}' from field '{field.id}'"
                )
                fixed.append(field.model_copy(update={"parent_id": None}))
                changed = True
            else:
                fixed.append(field)

        if not changed:
            logger.debug(f"No hierarchy issues to fix in module {schema.id}")
            return schema
        return schema.model_copy(update={"fields": fixed})

    def calculate_metrics(self, schema: ModuleSchema) -> HierarchyMetrics:
        diagnostics = BuildDiagnostics()
        nodes, root_ids = self._link(schema, diagnostics)
        return self._finish(schema, nodes, root_ids, diagnostics).runtime.metrics

    def _link(
        self, schema: ModuleSchema, diagnostics: BuildDiagnostics
    ) -> tuple[dict[str, FieldNode], list[str]]:
        index = {field.id: field for field in schema.fields}
        nodes: dict[str, FieldNode] = {}
        arena = MappingProxyType(nodes)
        for position, field in enumerate(schema.fields):
            nodes[field.id] = FieldNode(schema=field, index=position, _arena=arena)

        children: dict[str, list[FieldNode]] = {field_id: [] for field_id in nodes}
        roots: list[FieldNode] = []

        for node in nodes.values():
            parent_id = _parent_of(node.schema)
            if parent_id is None:
                roots.append(node)
                continue

            if parent_id not in nodes:
                self._warn(
                    diagnostics,
                    f"Field '{node.id}' is an orphaned field: it references missing parent "
                    f"'{parent_id}'. Treating it as a root field.",
                )
                roots.append(node)
                continue

            if _creates_cycle(node.id, parent_id, index):
                message = (
                    f"Cycle detected: linking field '{node.id}' under '{parent_id}' would make "
                    f"it its own ancestor. Link severed, treating it as a root field."
                )
                diagnostics.errors.append(message)
                logger.error(message)
                roots.append(node)
                continue

            _set(node, parent_id=parent_id)
            children[parent_id].append(node)

        def sort_key(n: FieldNode) -> tuple[int, int]:
            return (n.schema.order, n.index)

        for parent_id, kids in children.items():
            kids.sort(key=sort_key)
            _set(nodes[parent_id], child_ids=tuple(kid.id for kid in kids))
        roots.sort(key=sort_key)

        return nodes, [root.id for root in roots]

    def _finish(
        self,
        schema: ModuleSchema,
        nodes: dict[str, FieldNode],
        root_ids: list[str],
        diagnostics: BuildDiagnostics,
    ) -> BuildResult:
        total_levels = 0
        max_depth = 0
        links = 0
        conditional = 0

        stack = [(nodes[root_id], 0, "") for root_id in reversed(root_ids)]
        while stack:
            node, level, prefix = stack.pop()
            _set(node, level=level, path=f"{prefix}.{node.id}" if prefix else node.id)

            total_levels += level
            max_depth = max(max_depth, level)
            if node.parent_id is not None:
                links += 1
            if node.schema.active_rules:
                conditional += 1

            for child_id in reversed(node.child_ids):
                stack.append((nodes[child_id], level + 1, node.path))

        metrics = self._metrics(len(nodes), len(root_ids), max_depth, total_levels, links, conditional)
        runtime = ModuleRuntime(
            schema=schema,
            nodes_by_id=MappingProxyType(nodes),
            root_ids=tuple(root_ids),
            metrics=metrics,
        )

        logger.debug(
            f"Hierarchy built: {metrics.total_fields} fields, {metrics.root_field_count} roots, "
            f"max depth {metrics.max_depth}, {len(diagnostics.errors)} errors, "
            f"{len(diagnostics.warnings)} warnings"
        )
        return BuildResult(runtime=runtime, diagnostics=diagnostics)

    def _metrics(
        self,
        total: int,
        roots: int,
        max_depth: int,
        total_levels: int,
        links: int,
        conditional: int,
    ) -> HierarchyMetrics:
        if total == 0:
            return HierarchyMetrics()

        weights = self.config.metrics
        score = (
            total * weights.fields
            + links * weights.links
            + conditional * weights.conditional_fields
            + max_depth**2 * weights.depth_squared
        )
        return HierarchyMetrics(
            total_fields=total,
            root_field_count=roots,
            max_depth=max_depth,
            average_depth=round(total_levels / total, 2),
            conditional_field_count=conditional,
            complexity_score=round(score, 2),
        )

    def _resolve_sync(
        self, node: FieldNode, resolver: OptionSetResolver | None
    ) -> tuple[tuple[FieldOption, ...], str | None]:
        ref = node.schema.option_set_ref
        if resolver is None:
            return (), f"Option set {ref!r} for field '{node.id}' not resolved: no resolver configured"

        try:
            result = resolver.resolve(ref)
        except Exception as e:
            return (), f"Failed to resolve option set {ref!r} for field '{node.id}': {e}"

        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            return (), (
                f"Option set {ref!r} for field '{node.id}' not resolved: "
                "resolver is asynchronous, use build_async"
            )
        return self._accept(node, result)

    async def _resolve_async(
        self,
        node: FieldNode,
        resolver: Resolver | None,
        semaphore: asyncio.Semaphore,
        cancel_event: asyncio.Event | None,
    ) -> tuple[tuple[FieldOption, ...], str | None]:
        ref = node.schema.option_set_ref
        if resolver is None:
            return (), f"Option set {ref!r} for field '{node.id}' not resolved: no resolver configured"

        async with semaphore:
            if cancel_event is not None and cancel_event.is_set():
                return (), f"Resolution of option set {ref!r} for field '{node.id}' was cancelled"

            try:
                if inspect.iscoroutinefunction(resolver.resolve):
                    lookup = resolver.resolve(ref)
                else:
                    lookup = asyncio.to_thread(resolver.resolve, ref)
                result = await self._await_lookup(lookup, cancel_event)
                if inspect.isawaitable(result):
                    result = await self._await_lookup(result, cancel_event)
            except TimeoutError:
                return (), (
                    f"Resolution of option set {ref!r} for field '{node.id}' timed out "
                    f"after {self.config.resolver.timeout}s"
                )
            except _ResolutionCancelled:
                return (), f"Resolution of option set {ref!r} for field '{node.id}' was cancelled"
            except asyncio.CancelledError:
                task = asyncio.current_task()
                if task is not None and task.cancelling():
                    raise
                return (), f"Resolution of option set {ref!r} for field '{node.id}' was cancelled"
            except Exception as e:
                return (), f"Failed to resolve option set {ref!r} for field '{node.id}': {e}"

        return self._accept(node, result)

    async def _await_lookup(self, awaitable, cancel_event: asyncio.Event | None) -> Any:
        timeout = self.config.resolver.timeout
        lookup = asyncio.ensure_future(awaitable)
        if cancel_event is None:
            return await asyncio.wait_for(lookup, timeout)

        cancelled = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {lookup, cancelled}, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            lookup.cancel()
            raise
        finally:
            cancelled.cancel()

        if lookup in done:
            return lookup.result()

        lookup.cancel()
        if cancelled in done:
            raise _ResolutionCancelled()
        raise TimeoutError()

    def _accept(
        self, node: FieldNode, result: Any
    ) -> tuple[tuple[FieldOption, ...], str | None]:
        ref = node.schema.option_set_ref
        try:
            options = tuple(FieldOption.model_validate(option) for option in result or ())
        except (TypeError, ValidationError) as e:
            return (), f"Option set {ref!r} for field '{node.id}' returned invalid options: {e}"

        if not options:
            return (), f"Option set {ref!r} for field '{node.id}' returned no options"

        logger.debug(f"Resolved option set {ref!r} for field '{node.id}': {len(options)} options")
        return options, None

    @staticmethod
    def _warn(diagnostics: BuildDiagnostics, message: str) -> None:
        diagnostics.warnings.append(message)
        logger.warning(message)


def build_hierarchy(
    schema: ModuleSchema,
    resolver: OptionSetResolver | None = None,
    config: EngineConfig | None = None,
) -> BuildResult:
    """Build a module tree with a one-off :class:`HierarchyBuilder`."""
    return HierarchyBuilder(resolver=resolver, config=config).build(schema)
