"""Effective per-field state: visible, enabled, required."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from .enums import RelationshipType, RuleAction
from .evaluator import ConditionEvaluator
from .runtime import FieldNode, ModuleRuntime, WorkflowFormData
from .schemas import ConditionalRule
from .utils import is_empty

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FieldState:
    visible: bool = True
    enabled: bool = True
    required: bool = False


def _apply(state: FieldState, action: RuleAction) -> FieldState:
    match action:
        case RuleAction.SHOW:
            return replace(state, visible=True)
        case RuleAction.HIDE:
            return replace(state, visible=False)
        case RuleAction.ENABLE:
            return replace(state, enabled=True)
        case RuleAction.DISABLE:
            return replace(state, enabled=False)
        case RuleAction.SET_REQUIRED:
            return replace(state, required=True)
        case RuleAction.SET_OPTIONAL:
            return replace(state, required=False)
        case _:
            return state


def rules_by_target(nodes: Iterable[FieldNode]) -> dict[str, list[ConditionalRule]]:
    """Active field-scoped rules of a module grouped by the field they affect.

    A rule without ``target_field_id`` affects the field that owns it.
    """
    targets: dict[str, list[ConditionalRule]] = {}
    for node in nodes:
        for rule in node.schema.active_rules:
            target = rule.target_field_id or node.id
            targets.setdefault(target, []).append(rule)
    return targets


class FieldStateResolver:
    """Combine schema defaults, relationships and triggered rules.

    For each field, triggered rules targeting it are applied in priority order
    on top of the schema defaults (last applied wins). The parent then
    constrains the child: an invisible parent hides all its descendants, a
    ``Conditional`` or ``Cascade`` child is hidden while the parent holds no
    value, and a disabled parent disables its ``Container`` children.
    """

    def __init__(self, evaluator: ConditionEvaluator | None = None):
        self.evaluator = evaluator or ConditionEvaluator()

    def resolve(self, runtime: ModuleRuntime, data: WorkflowFormData) -> dict[str, FieldState]:
        targets = rules_by_target(runtime.nodes_by_id.values())
        states: dict[str, FieldState] = {}
        for node in runtime.fields_in_order():
            parent_state = states.get(node.parent_id) if node.parent_id else None
            states[node.id] = self._state(node, parent_state, targets, data)
        return states

    def state_of(self, node: FieldNode, data: WorkflowFormData) -> FieldState:
        """State of a single field, walking its ancestors as needed."""
        chain = [*reversed(list(node.ancestors())), node]
        targets = rules_by_target(self._module_nodes(node))
        state: FieldState | None = None
        for current in chain:
            state = self._state(current, state, targets, data)
        return state

    def _state(
        self,
        node: FieldNode,
        parent_state: FieldState | None,
        targets: Mapping[str, list[ConditionalRule]],
        data: WorkflowFormData,
    ) -> FieldState:
        schema = node.schema
        state = FieldState(
            visible=schema.is_visible,
            enabled=not schema.is_read_only,
            required=schema.is_required,
        )

        for result in self.evaluator.evaluate_rules(targets.get(node.id, ()), data):
            if result.is_triggered:
                state = _apply(state, result.rule.action)
            elif result.error_message:
                logger.debug(
                    f"Rule '{result.rule.id}' on field '{node.id}' not applied: "
                    f"{result.error_message}"
                )

        if parent_state is None:
            return state

        if not parent_state.visible:
            state = replace(state, visible=False)
        elif schema.relationship in (RelationshipType.CONDITIONAL, RelationshipType.CASCADE):
            if is_empty(data.get_field_value(None, node.parent_id)):
                state = replace(state, visible=False)

        if not parent_state.enabled and schema.relationship == RelationshipType.CONTAINER:
            state = replace(state, enabled=False)

        return state

    @staticmethod
    def _module_nodes(node: FieldNode) -> Iterable[FieldNode]:
        return node._arena.values()
