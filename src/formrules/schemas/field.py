from typing import Any

from pydantic import Field, model_validator

from ..enums import RelationshipType
from .base import SchemaModel
from .condition import ConditionalRule
from .type_configs import (
    DataGridConfig,
    MatrixColumnDefinition,
    MatrixConfig,
    TypeConfig,
)


class FieldOption(SchemaModel):
    value: str
    label: str
    label_alt: str | None = None
    is_default: bool = False
    order: int = 0


class FieldValidationConfig(SchemaModel):
    is_required: bool = False
    required_message: str | None = None
    required_message_alt: str | None = None

    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)

    pattern: str | None = None
    pattern_message: str | None = None
    pattern_message_alt: str | None = None

    min_value: float | None = None
    max_value: float | None = None

    custom_rule_ids: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_bounds(self) -> "FieldValidationConfig":
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError(
                f"minLength ({self.min_length}) is greater than maxLength ({self.max_length})"
            )
        if (
            self.min_value is not None
            and self.max_value is not None
            and self.min_value > self.max_value
        ):
            raise ValueError(
                f"minValue ({self.min_value}) is greater than maxValue ({self.max_value})"
            )
        return self


class FieldSchema(SchemaModel):
    """One form field definition.

    The hierarchy is implicit: ``parent_id`` names another field of the same
    module. Options come either inline or from an option set, never both.
    """

    id: str = Field(min_length=1)
    field_type: str
    order: int = 1
    version: float = 1.0

    parent_id: str | None = None
    relationship: RelationshipType = RelationshipType.CONTAINER

    label: str | None = None
    label_alt: str | None = None
    description: str | None = None
    description_alt: str | None = None
    help: str | None = None
    help_alt: str | None = None
    placeholder: str | None = None
    placeholder_alt: str | None = None

    validation: FieldValidationConfig | None = None
    conditional_rules: list[ConditionalRule] = Field(default_factory=list)

    option_set_ref: int | str | None = None
    options_inline: list[FieldOption] | None = None

    is_visible: bool = True
    is_read_only: bool = False

    type_config: TypeConfig | None = None
    extended_properties: dict[str, Any] | None = None

    @model_validator(mode="after")
    def validate_field(self) -> "FieldSchema":
        if self.option_set_ref is not None and self.options_inline is not None:
            raise ValueError(
                f"Field '{self.id}' sets both optionsInline and optionSetRef"
            )

        for rule in self.conditional_rules:
            if not rule.action.is_field_scoped:
                raise ValueError(
                    f"Field '{self.id}': rule '{rule.id}' has workflow action "
                    f"'{rule.action.value}'; workflow rules belong to the workflow schema"
                )
        return self

    @property
    def display_label(self) -> str:
        return self.label or self.id

    @property
    def display_label_alt(self) -> str:
        return self.label_alt or self.display_label

    @property
    def is_required(self) -> bool:
        return bool(self.validation and self.validation.is_required)

    @property
    def active_rules(self) -> list[ConditionalRule]:
        return [rule for rule in self.conditional_rules if rule.is_active]

    @classmethod
    def text_field(
        cls,
        id: str,
        label: str,
        label_alt: str | None = None,
        is_required: bool = False,
        order: int = 1,
        **kwargs,
    ) -> "FieldSchema":
        return cls(
            id=id,
            field_type="TextBox",
            label=label,
            label_alt=label_alt,
            validation=FieldValidationConfig(is_required=is_required),
            order=order,
            **kwargs,
        )

    @classmethod
    def section(
        cls,
        id: str,
        title: str,
        title_alt: str | None = None,
        order: int = 1,
        **kwargs,
    ) -> "FieldSchema":
        return cls(
            id=id,
            field_type="Section",
            label=title,
            label_alt=title_alt,
            order=order,
            **kwargs,
        )

    @classmethod
    def drop_down(
        cls,
        id: str,
        label: str,
        options: list[FieldOption],
        label_alt: str | None = None,
        is_required: bool = False,
        order: int = 1,
        **kwargs,
    ) -> "FieldSchema":
        return cls(
            id=id,
            field_type="DropDown",
            label=label,
            label_alt=label_alt,
            options_inline=options,
            validation=FieldValidationConfig(is_required=is_required),
            order=order,
            **kwargs,
        )


_namespace = {"FieldSchema": FieldSchema, "FieldOption": FieldOption}
DataGridConfig.model_rebuild(_types_namespace=_namespace)
MatrixColumnDefinition.model_rebuild(_types_namespace=_namespace)
MatrixConfig.model_rebuild(_types_namespace=_namespace)
FieldSchema.model_rebuild(_types_namespace=_namespace)
