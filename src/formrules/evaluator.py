"""Condition evaluation against multi-module form data.

Evaluation never raises for runtime data problems. A malformed field reference
or a comparison between incompatible values makes the affected condition false
and leaves a note that :meth:`ConditionEvaluator.evaluate_rule` reports as the
rule's ``error_message``.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .consts import INACTIVE_RULE_MESSAGE
from .enums import ConditionOperator, LogicalOperator
from .runtime import WorkflowFormData
from .schemas import ComplexCondition, ConditionalRule, SimpleCondition
from .utils import is_empty, stringify, to_datetime, to_number

logger = logging.getLogger(__name__)

AnyCondition = SimpleCondition | ComplexCondition

_ORDERING = {
    ConditionOperator.GREATER_THAN: lambda c: c > 0,
    ConditionOperator.GREATER_THAN_OR_EQUAL: lambda c: c >= 0,
    ConditionOperator.LESS_THAN: lambda c: c < 0,
    ConditionOperator.LESS_THAN_OR_EQUAL: lambda c: c <= 0,
}


class InvalidReference(ValueError):
    """A field reference that cannot name a field."""


class _Mismatch(Exception):
    """An operator was applied to values it cannot compare."""


@dataclass(frozen=True)
class RuleEvaluationResult:
    rule: ConditionalRule
    is_triggered: bool
    error_message: str | None = None


def parse_field_reference(reference: str) -> tuple[str | None, str]:
    """Split ``"moduleKey.fieldId"`` on the first dot.

    Returns:
        (module_key, field_id); module_key is None for unqualified references

    Raises:
        InvalidReference: If the reference, its module key or its field id is empty

    Examples:
        >>> parse_field_reference("age")
        (None, 'age')
        >>> parse_field_reference("Step1.address.city")
        ('Step1', 'address.city')
    """
    if reference is None or not reference.strip():
        raise InvalidReference("Field reference cannot be empty")

    reference = reference.strip()
    module_key, dot, field_id = reference.partition(".")
    if not dot:
        return None, reference
    if not module_key or not field_id:
        raise InvalidReference(f"Malformed field reference '{reference}'")
    return module_key, field_id


def _compare(left: Any, right: Any) -> int:
    """Three-way compare: numbers, then dates, then strings."""
    if left is None or right is None:
        raise _Mismatch("cannot order an absent value")

    left_num, right_num = to_number(left), to_number(right)
    if left_num is not None and right_num is not None:
        return (left_num > right_num) - (left_num < right_num)
    if (left_num is None) != (right_num is None):
        raise _Mismatch(
            f"cannot compare {left!r} with {right!r}: only one side is numeric"
        )

    left_date, right_date = to_datetime(left), to_datetime(right)
    if left_date is not None and right_date is not None:
        try:
            return (left_date > right_date) - (left_date < right_date)
        except TypeError as e:
            raise _Mismatch(f"cannot compare dates {left!r} and {right!r}: {e}") from e

    if isinstance(left, str) and isinstance(right, str):
        a, b = left.casefold(), right.casefold()
        return (a > b) - (a < b)

    raise _Mismatch(
        f"cannot compare {type(left).__name__} {left!r} with {type(right).__name__} {right!r}"
    )


def values_equal(left: Any, right: Any) -> bool:
    """Equality used by ``Equals``, ``In`` and list ``Contains``.

    Absent equals absent; numbers (including numeric strings) compare
    numerically; lists compare element-wise; everything else compares by
    string form, case-insensitively.
    """
    if left is None or right is None:
        return left is None and right is None

    if isinstance(left, bool) and isinstance(right, bool):
        return left == right

    left_num, right_num = to_number(left), to_number(right)
    if left_num is not None and right_num is not None:
        return left_num == right_num

    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(
            values_equal(a, b) for a, b in zip(left, right)
        )

    return stringify(left).casefold() == stringify(right).casefold()


def _is_in(value: Any, candidates: Any) -> bool:
    if not isinstance(candidates, (list, tuple, set, frozenset)):
        raise _Mismatch(f"In/NotIn expects a list of values, got {type(candidates).__name__}")
    if value is None:
        return False
    return any(values_equal(value, candidate) for candidate in candidates)


def _contains(value: Any, expected: Any) -> bool:
    if value is None or expected is None:
        return False
    if isinstance(value, (list, tuple, set, frozenset)):
        return any(values_equal(item, expected) for item in value)
    return stringify(expected).casefold() in stringify(value).casefold()


def _apply_operator(op: ConditionOperator, value: Any, expected: Any) -> bool:
    match op:
        case ConditionOperator.EQUALS:
            return values_equal(value, expected)
        case ConditionOperator.NOT_EQUALS:
            return not values_equal(value, expected)
        case (
            ConditionOperator.GREATER_THAN
            | ConditionOperator.GREATER_THAN_OR_EQUAL
            | ConditionOperator.LESS_THAN
            | ConditionOperator.LESS_THAN_OR_EQUAL
        ):
            return _ORDERING[op](_compare(value, expected))
        case ConditionOperator.CONTAINS:
            return _contains(value, expected)
        case ConditionOperator.NOT_CONTAINS:
            return not _contains(value, expected)
        case ConditionOperator.STARTS_WITH:
            if value is None or expected is None:
                return False
            return stringify(value).casefold().startswith(stringify(expected).casefold())
        case ConditionOperator.ENDS_WITH:
            if value is None or expected is None:
                return False
            return stringify(value).casefold().endswith(stringify(expected).casefold())
        case ConditionOperator.IN:
            return _is_in(value, expected)
        case ConditionOperator.NOT_IN:
            return not _is_in(value, expected)
        case ConditionOperator.IS_NULL:
            return value is None
        case ConditionOperator.IS_NOT_NULL:
            return value is not None
        case ConditionOperator.IS_EMPTY:
            return is_empty(value)
        case ConditionOperator.IS_NOT_EMPTY:
            return not is_empty(value)
        case _:
            raise _Mismatch(f"Unsupported operator: {op}")


class ConditionEvaluator:
    """Evaluate conditions and conditional rules.

    Stateless; one instance can serve any number of concurrent evaluations.
    """

    def evaluate(self, condition: AnyCondition, data: WorkflowFormData) -> bool:
        notes: list[str] = []
        result = self._evaluate(condition, data, notes)
        for note in notes:
            logger.debug(f"Condition note: {note}")
        return result

    def evaluate_rule(self, rule: ConditionalRule, data: WorkflowFormData) -> RuleEvaluationResult:
        if not rule.is_active:
            return RuleEvaluationResult(
                rule=rule, is_triggered=False, error_message=INACTIVE_RULE_MESSAGE
            )

        notes: list[str] = []
        triggered = self._evaluate(rule.condition, data, notes)
        if notes:
            logger.debug(f"Rule '{rule.id}' evaluated with notes: {'; '.join(notes)}")
        return RuleEvaluationResult(
            rule=rule,
            is_triggered=triggered,
            error_message="; ".join(notes) if notes else None,
        )

    def evaluate_rules(
        self, rules: Iterable[ConditionalRule], data: WorkflowFormData
    ) -> list[RuleEvaluationResult]:
        """Evaluate every rule independently, ordered by priority.

        Lower priority numbers come first; rules with equal priority keep
        their input order. Callers applying the triggered results in this
        order get "last applied wins" conflict resolution.
        """
        results = [self.evaluate_rule(rule, data) for rule in rules]
        return sorted(results, key=lambda result: result.rule.priority)

    def triggered_rules(
        self, rules: Iterable[ConditionalRule], data: WorkflowFormData
    ) -> list[ConditionalRule]:
        return [result.rule for result in self.evaluate_rules(rules, data) if result.is_triggered]

    def _evaluate(self, condition: AnyCondition, data: WorkflowFormData, notes: list[str]) -> bool:
        if isinstance(condition, SimpleCondition):
            return self._evaluate_simple(condition, data, notes)
        return self._evaluate_complex(condition, data, notes)

    def _evaluate_simple(
        self, condition: SimpleCondition, data: WorkflowFormData, notes: list[str]
    ) -> bool:
        try:
            module_key, field_id = parse_field_reference(condition.field)
        except InvalidReference as e:
            notes.append(str(e))
            return False

        value = data.get_field_value(module_key, field_id)
        try:
            return _apply_operator(condition.operator, value, condition.value)
        except _Mismatch as e:
            notes.append(f"{condition.field} {condition.operator.value}: {e}")
            return False

    def _evaluate_complex(
        self, condition: ComplexCondition, data: WorkflowFormData, notes: list[str]
    ) -> bool:
        match condition.logical_op:
            case LogicalOperator.AND:
                return all(self._evaluate(c, data, notes) for c in condition.conditions)
            case LogicalOperator.OR:
                return any(self._evaluate(c, data, notes) for c in condition.conditions)
            case LogicalOperator.NOT:
                # Unary; extra children only exist in lenient payloads and are ignored.
                return not self._evaluate(condition.conditions[0], data, notes)
            case _:
                notes.append(f"Unsupported logical operator: {condition.logical_op}")
                return False
