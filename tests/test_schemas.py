"""Schema model unit tests"""

import pytest
from pydantic import ValidationError

from formrules.enums import ConditionOperator, CrossFieldType, LogicalOperator, RuleAction
from formrules.errors import SchemaException
from formrules.schemas import (
    CodeSetItem,
    CodeSetSchema,
    ComplexCondition,
    ConditionalRule,
    DataGridConfig,
    DateConfig,
    FieldOption,
    FieldSchema,
    FieldValidationConfig,
    ModuleSchema,
    SimpleCondition,
    TextInputConfig,
    WorkflowSchema,
    all_of,
    negate,
    parse_condition,
)


def _when(field="age", operator="LessThan", value=18):
    return {"field": field, "operator": operator, "value": value}


class TestFieldSchema:
    """Tests for FieldSchema"""

    def test_parses_camel_case_payload(self):
        field = FieldSchema.model_validate(
            {
                "id": "city",
                "fieldType": "TextBox",
                "parentId": "address",
                "relationship": "Cascade",
                "labelAlt": "Ville",
                "validation": {"isRequired": True, "maxLength": 40},
            }
        )

        assert field.parent_id == "address"
        assert field.relationship == "Cascade"
        assert field.label_alt == "Ville"
        assert field.is_required
        assert field.validation.max_length == 40

    def test_json_dict_uses_camel_case_and_omits_unset(self):
        field = FieldSchema.text_field("name", "Name", label_alt="Nom", is_required=True)
        data = field.to_json_dict()

        assert data["fieldType"] == "TextBox"
        assert data["labelAlt"] == "Nom"
        assert data["validation"]["isRequired"] is True
        assert "parentId" not in data
        assert FieldSchema.model_validate(data) == field

    def test_inline_options_and_option_set_are_exclusive(self):
        with pytest.raises(ValidationError, match="both optionsInline and optionSetRef"):
            FieldSchema(
                id="country",
                field_type="DropDown",
                options_inline=[FieldOption(value="CA", label="Canada")],
                option_set_ref="COUNTRIES",
            )

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            FieldSchema(id="", field_type="TextBox")

    def test_workflow_rule_on_field_rejected(self):
        rule = ConditionalRule(
            id="r1",
            condition=SimpleCondition(field="age", operator=ConditionOperator.LESS_THAN, value=18),
            action=RuleAction.GO_TO_STEP,
            target_step_number=2,
        )
        with pytest.raises(ValidationError, match="workflow rules belong to the workflow schema"):
            FieldSchema(id="age", field_type="Number", conditional_rules=[rule])

    def test_schema_is_immutable(self):
        field = FieldSchema.text_field("name", "Name")
        with pytest.raises(ValidationError):
            field.label = "Other"

    def test_display_label_falls_back_to_id(self):
        field = FieldSchema(id="phone", field_type="TextBox")
        assert field.display_label == "phone"
        assert field.display_label_alt == "phone"

    def test_active_rules_skip_inactive(self):
        active = ConditionalRule(id="a", condition=_when(), action=RuleAction.SHOW)
        inactive = ConditionalRule(id="b", condition=_when(), action=RuleAction.HIDE, is_active=False)
        field = FieldSchema(id="x", field_type="TextBox", conditional_rules=[active, inactive])
        assert [rule.id for rule in field.active_rules] == ["a"]


class TestFieldValidationConfig:
    def test_min_length_above_max_length_rejected(self):
        with pytest.raises(ValidationError, match="minLength"):
            FieldValidationConfig(min_length=10, max_length=5)

    def test_min_value_above_max_value_rejected(self):
        with pytest.raises(ValidationError, match="minValue"):
            FieldValidationConfig(min_value=10, max_value=5)


class TestTypeConfig:
    """Tests for the tagged type-config union"""

    def test_tag_selects_variant(self):
        field = FieldSchema.model_validate(
            {
                "id": "start",
                "fieldType": "DatePicker",
                "typeConfig": {"$type": "date", "minDate": "Now", "allowPast": False},
            }
        )

        assert isinstance(field.type_config, DateConfig)
        assert field.type_config.min_date == "Now"
        assert field.type_config.allow_past is False

    def test_tag_survives_round_trip(self):
        field = FieldSchema(
            id="email",
            field_type="TextBox",
            type_config=TextInputConfig(input_type="email"),
        )
        data = field.to_json_dict()

        assert data["typeConfig"]["$type"] == "textinput"
        assert FieldSchema.model_validate(data).type_config == field.type_config

    def test_datagrid_columns_are_field_schemas(self):
        field = FieldSchema.model_validate(
            {
                "id": "items",
                "fieldType": "DataGrid",
                "typeConfig": {
                    "$type": "datagrid",
                    "maxRows": 5,
                    "columns": [{"id": "qty", "fieldType": "Number"}],
                },
            }
        )

        assert isinstance(field.type_config, DataGridConfig)
        assert isinstance(field.type_config.columns[0], FieldSchema)

    def test_unknown_tag_rejected(self):
        with pytest.raises(ValidationError):
            FieldSchema.model_validate(
                {"id": "x", "fieldType": "TextBox", "typeConfig": {"$type": "hologram"}}
            )


class TestCondition:
    """Tests for the recursive condition structure"""

    def test_simple_shape(self):
        condition = parse_condition(_when())
        assert isinstance(condition, SimpleCondition)
        assert condition.operator == ConditionOperator.LESS_THAN

    def test_complex_shape(self):
        condition = parse_condition(
            {"logicalOp": "And", "conditions": [_when(), _when("country", "Equals", "CA")]}
        )
        assert isinstance(condition, ComplexCondition)
        assert condition.logical_op == LogicalOperator.AND
        assert len(condition.conditions) == 2

    def test_mixed_shape_rejected(self):
        with pytest.raises(SchemaException):
            parse_condition({**_when(), "logicalOp": "And", "conditions": [_when()]})

    def test_empty_conditions_rejected(self):
        with pytest.raises(SchemaException):
            parse_condition({"logicalOp": "Or", "conditions": []})

    def test_multi_child_not_rejected_by_default(self):
        with pytest.raises(SchemaException, match="exactly one condition"):
            parse_condition({"logicalOp": "Not", "conditions": [_when(), _when()]})

    def test_multi_child_not_accepted_when_lenient(self):
        condition = parse_condition(
            {"logicalOp": "Not", "conditions": [_when(), _when()]}, lenient_not=True
        )
        assert len(condition.conditions) == 2

    def test_lenient_context_reaches_nested_schemas(self):
        payload = {
            "id": 1,
            "title": "Legacy",
            "fields": [
                {
                    "id": "x",
                    "fieldType": "TextBox",
                    "conditionalRules": [
                        {
                            "id": "r",
                            "action": "hide",
                            "condition": {"logicalOp": "Not", "conditions": [_when(), _when()]},
                        }
                    ],
                }
            ],
        }

        with pytest.raises(ValidationError):
            ModuleSchema.model_validate(payload)
        module = ModuleSchema.model_validate(payload, context={"lenient_not": True})
        assert module.fields[0].conditional_rules[0].id == "r"

    def test_helpers_build_complex_conditions(self):
        leaf = SimpleCondition(field="age", operator=ConditionOperator.IS_NOT_NULL)
        assert all_of(leaf, leaf).logical_op == LogicalOperator.AND
        assert negate(leaf).conditions == [leaf]


class TestConditionalRule:
    """Tests for rule target consistency"""

    def test_defaults(self):
        rule = ConditionalRule(id="r", condition=_when(), action=RuleAction.SHOW)
        assert rule.priority == 100
        assert rule.is_active
        assert rule.target_field_id is None

    def test_both_targets_rejected(self):
        with pytest.raises(ValidationError, match="both targetFieldId and targetStepNumber"):
            ConditionalRule(
                id="r",
                condition=_when(),
                action=RuleAction.SHOW,
                target_field_id="x",
                target_step_number=2,
            )

    def test_field_action_with_step_rejected(self):
        with pytest.raises(ValidationError, match="targets a field"):
            ConditionalRule(id="r", condition=_when(), action=RuleAction.HIDE, target_step_number=2)

    def test_workflow_action_with_field_rejected(self):
        with pytest.raises(ValidationError, match="targets a workflow step"):
            ConditionalRule(
                id="r", condition=_when(), action=RuleAction.SKIP_STEP, target_field_id="x"
            )

    @pytest.mark.parametrize("action", [RuleAction.SKIP_STEP, RuleAction.GO_TO_STEP])
    def test_step_actions_require_step(self, action):
        with pytest.raises(ValidationError, match="requires targetStepNumber"):
            ConditionalRule(id="r", condition=_when(), action=action)

    def test_module_key_targets_a_step(self):
        rule = ConditionalRule(
            id="r", condition=_when(), action=RuleAction.GO_TO_STEP, target_module_key="20"
        )
        assert rule.target_step_number is None

    def test_step_and_module_key_rejected(self):
        with pytest.raises(ValidationError, match="both targetStepNumber and targetModuleKey"):
            ConditionalRule(
                id="r",
                condition=_when(),
                action=RuleAction.SKIP_STEP,
                target_step_number=2,
                target_module_key="20",
            )

    def test_field_action_with_module_key_rejected(self):
        with pytest.raises(ValidationError, match="targets a field"):
            ConditionalRule(
                id="r", condition=_when(), action=RuleAction.HIDE, target_module_key="20"
            )

    def test_step_numbers_are_one_based(self):
        with pytest.raises(ValidationError):
            ConditionalRule(
                id="r", condition=_when(), action=RuleAction.GO_TO_STEP, target_step_number=0
            )

    def test_complete_workflow_needs_no_target(self):
        rule = ConditionalRule(id="r", condition=_when(), action=RuleAction.COMPLETE_WORKFLOW)
        assert rule.target_step_number is None

    def test_payload_round_trip(self):
        payload = {
            "id": "r",
            "condition": _when(),
            "action": "goToStep",
            "targetStepNumber": 3,
            "priority": 5,
        }
        rule = ConditionalRule.model_validate(payload)
        data = rule.to_json_dict()
        assert data["targetStepNumber"] == 3
        assert data["condition"] == _when()


class TestModuleSchema:
    def test_duplicate_field_ids_rejected(self):
        with pytest.raises(ValidationError, match="duplicate field ids: name"):
            ModuleSchema(
                id=1,
                title="Dup",
                fields=[FieldSchema.text_field("name", "A"), FieldSchema.text_field("name", "B")],
            )

    def test_get_field(self):
        module = ModuleSchema(id=1, title="M", fields=[FieldSchema.text_field("name", "Name")])
        assert module.get_field("name").label == "Name"
        assert module.get_field("missing") is None

    def test_cross_field_validation_needs_field_ids(self):
        with pytest.raises(ValidationError):
            ModuleSchema.model_validate(
                {
                    "id": 1,
                    "title": "M",
                    "crossFieldValidations": [{"type": "AtLeastOne", "fieldIds": []}],
                }
            )

    def test_cross_field_payload(self):
        module = ModuleSchema.model_validate(
            {
                "id": 1,
                "title": "M",
                "crossFieldValidations": [
                    {"type": "MutuallyExclusive", "fieldIds": ["a", "b"], "errorMessage": "One"}
                ],
            }
        )
        assert module.cross_field_validations[0].type == CrossFieldType.MUTUALLY_EXCLUSIVE


class TestWorkflowSchema:
    def _rule(self, action, step=None):
        return ConditionalRule(
            id="w", condition=_when(), action=action, target_step_number=step
        )

    def test_step_lookup(self):
        workflow = WorkflowSchema(id=1, title="W", module_ids=[10, 20, 30])
        assert workflow.step_count == 3
        assert workflow.module_id_for_step(2) == 20
        assert workflow.module_id_for_step(4) is None
        assert workflow.module_id_for_step(0) is None

    def test_field_rule_rejected(self):
        with pytest.raises(ValidationError, match="field rules belong to a field schema"):
            WorkflowSchema(
                id=1, title="W", module_ids=[10], workflow_rules=[self._rule(RuleAction.SHOW)]
            )

    def test_module_key_lookup(self):
        workflow = WorkflowSchema(id=1, title="W", module_ids=[10, 20, 30])
        assert workflow.step_for_module(" 20 ") == 2
        assert workflow.step_for_module("40") is None

    def test_unknown_module_key_rejected(self):
        rule = ConditionalRule(
            id="w", condition=_when(), action=RuleAction.GO_TO_STEP, target_module_key="40"
        )
        with pytest.raises(ValidationError, match="targets module '40'"):
            WorkflowSchema(id=1, title="W", module_ids=[10, 20], workflow_rules=[rule])

    def test_step_beyond_workflow_rejected(self):
        with pytest.raises(ValidationError, match="targets step 3"):
            WorkflowSchema(
                id=1,
                title="W",
                module_ids=[10, 20],
                workflow_rules=[self._rule(RuleAction.GO_TO_STEP, 3)],
            )


class TestCodeSetSchema:
    @pytest.fixture
    def provinces(self):
        return CodeSetSchema(
            id=7,
            code="PROVINCES",
            name="Provinces",
            items=[
                CodeSetItem(value="QC", text="Quebec", text_alt="Québec", order=2),
                CodeSetItem(value="ON", text="Ontario", order=1),
                CodeSetItem(value="XX", text="Retired", order=0, is_active=False),
            ],
        )

    def test_field_options_are_active_and_ordered(self, provinces):
        options = provinces.to_field_options()
        assert [option.value for option in options] == ["ON", "QC"]
        assert options[1].label_alt == "Québec"

    def test_get_item_is_case_insensitive(self, provinces):
        assert provinces.get_item("qc").text == "Quebec"
        assert provinces.get_item("nope") is None
