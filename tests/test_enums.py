from formrules.enums import (
    ConditionOperator,
    CrossFieldType,
    LogicalOperator,
    RelationshipType,
    RuleAction,
)


def test_relationship_type_values():
    assert RelationshipType.CONTAINER.value == "Container"
    assert RelationshipType.CONDITIONAL.value == "Conditional"
    assert RelationshipType.CASCADE.value == "Cascade"
    assert RelationshipType.VALIDATION.value == "Validation"


def test_condition_operator_covers_all_operators():
    assert len(ConditionOperator) == 16
    assert ConditionOperator("GreaterThanOrEqual") is ConditionOperator.GREATER_THAN_OR_EQUAL
    assert ConditionOperator("IsNotEmpty") is ConditionOperator.IS_NOT_EMPTY


def test_logical_operator_values():
    assert [op.value for op in LogicalOperator] == ["And", "Or", "Not"]


def test_rule_action_scopes():
    field_actions = {
        RuleAction.SHOW,
        RuleAction.HIDE,
        RuleAction.ENABLE,
        RuleAction.DISABLE,
        RuleAction.SET_REQUIRED,
        RuleAction.SET_OPTIONAL,
    }
    for action in RuleAction:
        assert action.is_field_scoped == (action in field_actions)
        assert action.is_workflow_scoped == (action not in field_actions)


def test_enums_are_string_enums():
    assert isinstance(RuleAction.GO_TO_STEP, str)
    assert RuleAction.GO_TO_STEP == "goToStep"
    assert CrossFieldType.AT_LEAST_ONE == "AtLeastOne"
