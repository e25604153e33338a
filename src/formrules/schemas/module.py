from pydantic import Field, model_validator

from ..enums import CrossFieldType
from .base import SchemaModel
from .condition import ConditionalRule
from .field import FieldSchema


class FieldSetValidation(SchemaModel):
    """Set-level rule over raw field ids, independent of the field tree."""

    type: CrossFieldType
    field_ids: list[str] = Field(min_length=1)
    error_message: str | None = None
    error_message_alt: str | None = None


class ModuleSchema(SchemaModel):
    """A single form definition: a flat field list plus cross-field rules."""

    id: int
    title: str
    title_alt: str | None = None
    description: str | None = None
    description_alt: str | None = None
    version: float = 1.0

    fields: list[FieldSchema] = Field(default_factory=list)
    cross_field_validations: list[FieldSetValidation] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_field_ids(self) -> "ModuleSchema":
        seen: set[str] = set()
        duplicates: list[str] = []
        for field in self.fields:
            if field.id in seen and field.id not in duplicates:
                duplicates.append(field.id)
            seen.add(field.id)

        if duplicates:
            raise ValueError(
                f"Module {self.id}: duplicate field ids: {', '.join(duplicates)}"
            )
        return self

    def get_field(self, field_id: str) -> FieldSchema | None:
        for field in self.fields:
            if field.id == field_id:
                return field
        return None


class WorkflowNavigation(SchemaModel):
    allow_step_jumping: bool = False
    show_progress: bool = True
    show_step_numbers: bool = True


class WorkflowSettings(SchemaModel):
    require_all_modules_complete: bool = True
    allow_module_skipping: bool = False
    auto_save_interval_seconds: int = Field(default=300, ge=0)


class WorkflowSchema(SchemaModel):
    """Ordered module references; step N (1-based) is ``module_ids[N - 1]``."""

    id: int
    title: str
    title_alt: str | None = None
    description: str | None = None
    description_alt: str | None = None
    version: float = 1.0

    module_ids: list[int] = Field(default_factory=list)
    workflow_rules: list[ConditionalRule] = Field(default_factory=list)
    navigation: WorkflowNavigation = Field(default_factory=WorkflowNavigation)
    settings: WorkflowSettings = Field(default_factory=WorkflowSettings)

    @model_validator(mode="after")
    def validate_workflow_rules(self) -> "WorkflowSchema":
        step_count = len(self.module_ids)
        for rule in self.workflow_rules:
            if rule.action.is_field_scoped:
                raise ValueError(
                    f"Workflow {self.id}: rule '{rule.id}' has field action "
                    f"'{rule.action.value}'; field rules belong to a field schema"
                )
            if rule.target_step_number is not None and rule.target_step_number > step_count:
                raise ValueError(
                    f"Workflow {self.id}: rule '{rule.id}' targets step "
                    f"{rule.target_step_number} but the workflow has {step_count} steps"
                )
            if rule.target_module_key is not None and self.step_for_module(rule.target_module_key) is None:
                raise ValueError(
                    f"Workflow {self.id}: rule '{rule.id}' targets module "
                    f"'{rule.target_module_key}' which is not part of the workflow"
                )
        return self

    @property
    def step_count(self) -> int:
        return len(self.module_ids)

    def module_id_for_step(self, step: int) -> int | None:
        if 1 <= step <= len(self.module_ids):
            return self.module_ids[step - 1]
        return None

    def step_for_module(self, module_key: str) -> int | None:
        """1-based step of the first module whose id matches ``module_key``."""
        key = module_key.strip()
        for step, module_id in enumerate(self.module_ids, start=1):
            if str(module_id) == key:
                return step
        return None

    def target_step(self, rule: ConditionalRule) -> int | None:
        if rule.target_step_number is not None:
            return rule.target_step_number
        if rule.target_module_key is not None:
            return self.step_for_module(rule.target_module_key)
        return None
