"""Recursive condition structure and conditional rules.

A condition is either a :class:`SimpleCondition` leaf comparing one field with a
value, or a :class:`ComplexCondition` combining child conditions with
``And``/``Or``/``Not``. The JSON shape decides which one a payload is; a payload
carrying keys of both shapes is rejected.

``Not`` is unary. Payloads written for older rule sets sometimes list several
children under ``Not``; they only validate when the validation context carries
``{"lenient_not": True}``, and then only the first child is evaluated.
"""

from typing import Annotated, Any, Union

from pydantic import (
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    model_validator,
)

from ..consts import DEFAULT_RULE_PRIORITY
from ..enums import ConditionOperator, LogicalOperator, RuleAction
from ..errors import SchemaException
from .base import SchemaModel

SIMPLE_KEYS = frozenset({"field", "operator", "value"})
COMPLEX_KEYS = frozenset({"logicalOp", "logical_op", "conditions"})


class SimpleCondition(SchemaModel, extra="forbid"):
    """Leaf condition: ``field`` is ``"fieldId"`` or ``"moduleKey.fieldId"``."""

    field: str
    operator: ConditionOperator
    value: Any = None

    @property
    def is_simple(self) -> bool:
        return True


class ComplexCondition(SchemaModel, extra="forbid"):
    logical_op: LogicalOperator
    conditions: list["Condition"] = Field(min_length=1)

    @property
    def is_simple(self) -> bool:
        return False

    @model_validator(mode="after")
    def validate_not_arity(self, info: ValidationInfo) -> "ComplexCondition":
        if self.logical_op != LogicalOperator.NOT or len(self.conditions) == 1:
            return self

        context = info.context or {}
        if not context.get("lenient_not", False):
            raise ValueError(
                f"Not takes exactly one condition, got {len(self.conditions)}"
            )
        return self


def _condition_shape(value: Any) -> str | None:
    if isinstance(value, SimpleCondition):
        return "simple"
    if isinstance(value, ComplexCondition):
        return "complex"
    if not isinstance(value, dict):
        return None

    keys = set(value)
    has_simple = bool(keys & SIMPLE_KEYS)
    has_complex = bool(keys & COMPLEX_KEYS)
    if has_simple == has_complex:
        return None
    return "simple" if has_simple else "complex"


Condition = Annotated[
    Union[
        Annotated[SimpleCondition, Tag("simple")],
        Annotated[ComplexCondition, Tag("complex")],
    ],
    Discriminator(
        _condition_shape,
        custom_error_type="condition_shape",
        custom_error_message=(
            "Condition must set either field/operator/value or logicalOp/conditions, not both"
        ),
    ),
]

ComplexCondition.model_rebuild()

_condition_adapter: TypeAdapter[Condition] = TypeAdapter(Condition)


def parse_condition(data: Any, *, lenient_not: bool = False) -> SimpleCondition | ComplexCondition:
    """Parse an interchange payload into a condition.

    Raises:
        SchemaException: If the payload matches neither condition shape
    """
    try:
        return _condition_adapter.validate_python(
            data, context={"lenient_not": lenient_not}
        )
    except ValidationError as e:
        raise SchemaException(f"Invalid condition: {e}") from e


def all_of(*conditions: SimpleCondition | ComplexCondition) -> ComplexCondition:
    return ComplexCondition(logical_op=LogicalOperator.AND, conditions=list(conditions))


def any_of(*conditions: SimpleCondition | ComplexCondition) -> ComplexCondition:
    return ComplexCondition(logical_op=LogicalOperator.OR, conditions=list(conditions))


def negate(condition: SimpleCondition | ComplexCondition) -> ComplexCondition:
    return ComplexCondition(logical_op=LogicalOperator.NOT, conditions=[condition])


class ConditionalRule(SchemaModel):
    """A condition plus the action to take when it holds.

    Field-scoped actions target ``target_field_id`` (or, when unset, the field
    owning the rule). Workflow-scoped actions target ``target_step_number``
    (1-based) or ``target_module_key``, the id of a module in the workflow;
    ``completeWorkflow`` needs no target.
    """

    id: str = Field(min_length=1)
    description: str | None = None
    condition: Condition
    action: RuleAction
    target_field_id: str | None = None
    target_step_number: int | None = Field(default=None, ge=1)
    target_module_key: str | None = None
    priority: int = DEFAULT_RULE_PRIORITY
    is_active: bool = True
    category: str | None = None
    tags: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_target(self) -> "ConditionalRule":
        if self.target_field_id is not None and self.target_step_number is not None:
            raise ValueError(
                f"Rule '{self.id}' sets both targetFieldId and targetStepNumber"
            )
        if self.target_step_number is not None and self.target_module_key is not None:
            raise ValueError(
                f"Rule '{self.id}' sets both targetStepNumber and targetModuleKey"
            )

        if self.action.is_field_scoped:
            if self.target_step_number is not None or self.target_module_key is not None:
                raise ValueError(
                    f"Rule '{self.id}': action '{self.action.value}' targets a field, "
                    "not a workflow step"
                )
            return self

        if self.target_field_id is not None:
            raise ValueError(
                f"Rule '{self.id}': action '{self.action.value}' targets a workflow step, "
                "not a field"
            )
        if (
            self.action != RuleAction.COMPLETE_WORKFLOW
            and self.target_step_number is None
            and self.target_module_key is None
        ):
            raise ValueError(
                f"Rule '{self.id}': action '{self.action.value}' requires targetStepNumber "
                "or targetModuleKey"
            )
        return self
