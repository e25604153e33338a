import logging
from typing import Any

from ..config import EngineConfig
from ..evaluator import ConditionEvaluator
from ..runtime import FieldNode, ModuleRuntime, WorkflowFormData
from ..state import FieldState, FieldStateResolver
from .base import ValidationContext, ValidationError, ValidationResult, ValidationRule
from .cross_field import check_field_set
from .rules import default_rules

logger = logging.getLogger(__name__)


class ValidationEngine:
    """Validate form data against registered field rules and module set rules.

    Field rules run in registration order; the built-ins are registered first.
    Invisible fields never produce errors. Validation reads the data only and
    never stops at the first failing field, so running it twice on the same
    input yields the same errors.
    """

    def __init__(
        self,
        evaluator: ConditionEvaluator | None = None,
        config: EngineConfig | None = None,
        state_resolver: FieldStateResolver | None = None,
        rules: list[ValidationRule] | None = None,
    ):
        self.config = config or EngineConfig()
        self.evaluator = evaluator or ConditionEvaluator()
        self.state_resolver = state_resolver or FieldStateResolver(self.evaluator)
        self._rules: dict[str, ValidationRule] = {}
        for rule in default_rules() if rules is None else rules:
            self.register_rule(rule)

    @property
    def rules(self) -> list[ValidationRule]:
        return list(self._rules.values())

    def register_rule(self, rule: ValidationRule) -> None:
        """Register a rule; a rule with an existing id replaces it in place."""
        if not rule.rule_id:
            raise ValueError(f"Validation rule {type(rule).__name__} has no rule_id")
        if rule.rule_id in self._rules:
            logger.debug(f"Replacing validation rule '{rule.rule_id}'")
        self._rules[rule.rule_id] = rule

    def unregister_rule(self, rule_id: str) -> bool:
        return self._rules.pop(rule_id, None) is not None

    def get_rule(self, rule_id: str) -> ValidationRule | None:
        return self._rules.get(rule_id)

    def validate_field(
        self,
        node: FieldNode,
        value: Any,
        data: WorkflowFormData,
        state: FieldState | None = None,
    ) -> ValidationResult:
        """Run every applicable rule against one field value.

        Args:
            node: Field to validate
            value: Submitted value
            data: Full form data, for rules and conditions that look elsewhere
            state: Effective field state (resolved from ``data`` when omitted)
        """
        if state is None:
            state = self.state_resolver.state_of(node, data)
        if not state.visible:
            return ValidationResult.success()

        ctx = ValidationContext(node=node, value=value, data=data, state=state, config=self.config)
        listed = set(node.schema.validation.custom_rule_ids) if node.schema.validation else set()
        for rule_id in sorted(listed - self._rules.keys()):
            logger.warning(f"Validation rule '{rule_id}' not found for field '{node.id}'")

        errors: list[ValidationError] = []
        for rule in self._rules.values():
            if rule.rule_id in listed or rule.applies(ctx):
                errors.extend(rule.validate(ctx))
        return ValidationResult(errors=errors)

    def validate_module(
        self,
        runtime: ModuleRuntime,
        data: WorkflowFormData,
        module_key: str | None = None,
    ) -> ValidationResult:
        """Validate every visible field of a module, then its set-level rules.

        Args:
            runtime: Built module tree
            data: Form data of the whole workflow
            module_key: Key of this module's values in ``data``; defaults to
                ``data.current_module_key``, then to the module id

        Returns:
            ValidationResult with field errors in tree order followed by
            cross-field errors
        """
        module_key = module_key or data.current_module_key or str(runtime.schema.id)
        if module_key != data.current_module_key:
            data = WorkflowFormData(modules=data.modules, current_module_key=module_key)

        states = self.state_resolver.resolve(runtime, data)
        errors: list[ValidationError] = []
        for node in runtime.fields_in_order():
            state = states[node.id]
            if not state.visible:
                continue
            value = data.get_field_value(module_key, node.id)
            errors.extend(self.validate_field(node, value, data, state=state).errors)

        module_data = data.get_module_data(module_key) or {}
        for rule in runtime.schema.cross_field_validations:
            error = check_field_set(rule, module_data, self.config)
            if error is not None:
                errors.append(error)

        if errors:
            logger.info(
                f"Module {runtime.schema.id} ('{module_key}') failed validation "
                f"with {len(errors)} errors"
            )
        return ValidationResult(errors=errors)
