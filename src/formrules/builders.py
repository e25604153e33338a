"""Fluent construction of module and field schemas in code."""

import uuid
from collections.abc import Callable
from typing import Any

from .enums import CrossFieldType, RelationshipType, RuleAction
from .schemas import (
    ComplexCondition,
    ConditionalRule,
    FieldOption,
    FieldSchema,
    FieldSetValidation,
    FieldValidationConfig,
    ModuleSchema,
    SimpleCondition,
    TypeConfig,
)


class FieldBuilder:
    """Chainable builder of a single :class:`FieldSchema`.

    Examples:
        >>> field = FieldBuilder("email").field_type("Email").label("Email", "Courriel").required().build()
        >>> field.is_required
        True
    """

    def __init__(self, id: str | None = None):
        self._values: dict[str, Any] = {"id": id or str(uuid.uuid4()), "field_type": "TextBox"}
        self._validation: dict[str, Any] = {}
        self._options: list[FieldOption] = []
        self._rules: list[ConditionalRule] = []

    def field_type(self, field_type: str) -> "FieldBuilder":
        self._values["field_type"] = field_type
        return self

    def label(self, label: str, label_alt: str | None = None) -> "FieldBuilder":
        self._values["label"] = label
        self._values["label_alt"] = label_alt
        return self

    def description(self, description: str, description_alt: str | None = None) -> "FieldBuilder":
        self._values["description"] = description
        self._values["description_alt"] = description_alt
        return self

    def parent(
        self, parent_id: str, relationship: RelationshipType = RelationshipType.CONTAINER
    ) -> "FieldBuilder":
        self._values["parent_id"] = parent_id
        self._values["relationship"] = relationship
        return self

    def order(self, order: int) -> "FieldBuilder":
        self._values["order"] = order
        return self

    def required(
        self, required: bool = True, message: str | None = None, message_alt: str | None = None
    ) -> "FieldBuilder":
        self._validation.update(
            is_required=required, required_message=message, required_message_alt=message_alt
        )
        return self

    def length(self, min_length: int | None = None, max_length: int | None = None) -> "FieldBuilder":
        self._validation.update(min_length=min_length, max_length=max_length)
        return self

    def pattern(
        self, pattern: str, message: str | None = None, message_alt: str | None = None
    ) -> "FieldBuilder":
        self._validation.update(
            pattern=pattern, pattern_message=message, pattern_message_alt=message_alt
        )
        return self

    def range(self, min_value: float | None = None, max_value: float | None = None) -> "FieldBuilder":
        self._validation.update(min_value=min_value, max_value=max_value)
        return self

    def custom_rule(self, rule_id: str) -> "FieldBuilder":
        self._validation.setdefault("custom_rule_ids", []).append(rule_id)
        return self

    def option(
        self, value: str, label: str, label_alt: str | None = None, is_default: bool = False
    ) -> "FieldBuilder":
        self._options.append(
            FieldOption(
                value=value,
                label=label,
                label_alt=label_alt or label,
                is_default=is_default,
                order=len(self._options) + 1,
            )
        )
        return self

    def option_set(self, reference: int | str) -> "FieldBuilder":
        self._values["option_set_ref"] = reference
        return self

    def type_config(self, config: TypeConfig) -> "FieldBuilder":
        self._values["type_config"] = config
        return self

    def hidden(self) -> "FieldBuilder":
        self._values["is_visible"] = False
        return self

    def read_only(self) -> "FieldBuilder":
        self._values["is_read_only"] = True
        return self

    def rule(self, rule: ConditionalRule) -> "FieldBuilder":
        self._rules.append(rule)
        return self

    def when(
        self,
        condition: SimpleCondition | ComplexCondition,
        action: RuleAction,
        target_field_id: str | None = None,
        priority: int | None = None,
    ) -> "FieldBuilder":
        """Add a field rule with a generated id."""
        rule_id = f"{self._values['id']}-{action.value}-{len(self._rules) + 1}"
        extra = {} if priority is None else {"priority": priority}
        return self.rule(
            ConditionalRule(
                id=rule_id,
                condition=condition,
                action=action,
                target_field_id=target_field_id,
                **extra,
            )
        )

    def build(self) -> FieldSchema:
        values = dict(self._values)
        if self._validation:
            values["validation"] = FieldValidationConfig(**self._validation)
        if self._options:
            values["options_inline"] = list(self._options)
        if self._rules:
            values["conditional_rules"] = list(self._rules)
        return FieldSchema(**values)


FieldSpec = FieldSchema | FieldBuilder | Callable[[FieldBuilder], FieldBuilder]


def _make_field(field: FieldSpec) -> FieldSchema:
    if isinstance(field, FieldSchema):
        return field
    if isinstance(field, FieldBuilder):
        return field.build()
    return field(FieldBuilder()).build()


class SectionBuilder:
    """Collects the children of a section; every child gets the section as parent."""

    def __init__(self, parent_id: str):
        self._parent_id = parent_id
        self._fields: list[FieldSchema] = []

    def _add(self, field: FieldSchema) -> None:
        self._fields.append(field.model_copy(update={"parent_id": self._parent_id}))

    def add_text(self, id: str, label: str, required: bool = False) -> "SectionBuilder":
        self._add(FieldSchema.text_field(id, label, is_required=required, order=len(self._fields) + 1))
        return self

    def add_field(self, field: FieldSpec) -> "SectionBuilder":
        self._add(_make_field(field))
        return self

    def add_section(
        self,
        id: str,
        title: str,
        title_alt: str | None = None,
        children: Callable[["SectionBuilder"], Any] | None = None,
    ) -> "SectionBuilder":
        self._add(FieldSchema.section(id, title, title_alt, order=len(self._fields) + 1))
        if children is not None:
            nested = SectionBuilder(id)
            children(nested)
            self._fields.extend(nested.build())
        return self

    def build(self) -> list[FieldSchema]:
        return list(self._fields)


class ModuleBuilder:
    """Chainable builder of a :class:`ModuleSchema`.

    Examples:
        >>> module = (
        ...     ModuleBuilder(1, "Contact")
        ...     .add_section("info", "Contact info", children=lambda s: s.add_text("phone", "Phone"))
        ...     .require_one_of(["phone", "email"])
        ...     .build()
        ... )
        >>> [f.id for f in module.fields]
        ['info', 'phone']
    """

    def __init__(self, id: int, title: str, title_alt: str | None = None):
        self._values: dict[str, Any] = {"id": id, "title": title, "title_alt": title_alt}
        self._fields: list[FieldSchema] = []
        self._cross_field: list[FieldSetValidation] = []

    def title(self, title: str, title_alt: str | None = None) -> "ModuleBuilder":
        self._values.update(title=title, title_alt=title_alt)
        return self

    def description(self, description: str, description_alt: str | None = None) -> "ModuleBuilder":
        self._values.update(description=description, description_alt=description_alt)
        return self

    def version(self, version: float) -> "ModuleBuilder":
        self._values["version"] = version
        return self

    def add_field(self, field: FieldSpec) -> "ModuleBuilder":
        self._fields.append(_make_field(field))
        return self

    def add_section(
        self,
        id: str,
        title: str,
        title_alt: str | None = None,
        children: Callable[[SectionBuilder], Any] | None = None,
    ) -> "ModuleBuilder":
        self._fields.append(FieldSchema.section(id, title, title_alt, order=len(self._fields) + 1))
        if children is not None:
            section = SectionBuilder(id)
            children(section)
            self._fields.extend(section.build())
        return self

    def cross_field(
        self,
        type: CrossFieldType,
        field_ids: list[str],
        message: str | None = None,
        message_alt: str | None = None,
    ) -> "ModuleBuilder":
        self._cross_field.append(
            FieldSetValidation(
                type=type,
                field_ids=list(field_ids),
                error_message=message,
                error_message_alt=message_alt,
            )
        )
        return self

    def require_one_of(
        self, field_ids: list[str], message: str | None = None, message_alt: str | None = None
    ) -> "ModuleBuilder":
        return self.cross_field(CrossFieldType.AT_LEAST_ONE, field_ids, message, message_alt)

    def build(self) -> ModuleSchema:
        return ModuleSchema(
            **self._values,
            fields=list(self._fields),
            cross_field_validations=list(self._cross_field),
        )
