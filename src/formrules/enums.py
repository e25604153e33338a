"""Enumeration type definitions"""

from enum import Enum


class RelationshipType(str, Enum):
    """How a child field interacts with its parent"""

    CONTAINER = "Container"
    CONDITIONAL = "Conditional"
    CASCADE = "Cascade"
    VALIDATION = "Validation"


class ConditionOperator(str, Enum):
    EQUALS = "Equals"
    NOT_EQUALS = "NotEquals"

    GREATER_THAN = "GreaterThan"
    GREATER_THAN_OR_EQUAL = "GreaterThanOrEqual"
    LESS_THAN = "LessThan"
    LESS_THAN_OR_EQUAL = "LessThanOrEqual"

    CONTAINS = "Contains"
    NOT_CONTAINS = "NotContains"
    STARTS_WITH = "StartsWith"
    ENDS_WITH = "EndsWith"
    IN = "In"
    NOT_IN = "NotIn"

    IS_NULL = "IsNull"
    IS_NOT_NULL = "IsNotNull"
    IS_EMPTY = "IsEmpty"
    IS_NOT_EMPTY = "IsNotEmpty"


class LogicalOperator(str, Enum):
    AND = "And"
    OR = "Or"
    NOT = "Not"


class RuleAction(str, Enum):
    """Action performed when a conditional rule is triggered"""

    SHOW = "show"
    HIDE = "hide"
    ENABLE = "enable"
    DISABLE = "disable"
    SET_REQUIRED = "setRequired"
    SET_OPTIONAL = "setOptional"

    SKIP_STEP = "skipStep"
    GO_TO_STEP = "goToStep"
    COMPLETE_WORKFLOW = "completeWorkflow"

    @property
    def is_field_scoped(self) -> bool:
        return self in FIELD_ACTIONS

    @property
    def is_workflow_scoped(self) -> bool:
        return not self.is_field_scoped


FIELD_ACTIONS = frozenset(
    {
        RuleAction.SHOW,
        RuleAction.HIDE,
        RuleAction.ENABLE,
        RuleAction.DISABLE,
        RuleAction.SET_REQUIRED,
        RuleAction.SET_OPTIONAL,
    }
)


class CrossFieldType(str, Enum):
    AT_LEAST_ONE = "AtLeastOne"
    ALL_OR_NONE = "AllOrNone"
    MUTUALLY_EXCLUSIVE = "MutuallyExclusive"
