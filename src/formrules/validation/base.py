from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..config import EngineConfig
from ..i18n import format_message
from ..runtime import FieldNode, WorkflowFormData
from ..schemas import FieldSchema
from ..state import FieldState


@dataclass(frozen=True, slots=True)
class ValidationError:
    field_id: str
    error_code: str
    message: str
    message_alt: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def error_codes(self) -> list[str]:
        return [error.error_code for error in self.errors]

    def for_field(self, field_id: str) -> list[ValidationError]:
        return [error for error in self.errors if error.field_id == field_id]

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def failure(cls, *errors: ValidationError) -> "ValidationResult":
        return cls(errors=list(errors))

    @classmethod
    def merge(cls, results: Iterable["ValidationResult"]) -> "ValidationResult":
        errors: list[ValidationError] = []
        for result in results:
            errors.extend(result.errors)
        return cls(errors=errors)


@dataclass(frozen=True)
class ValidationContext:
    """Everything a rule may look at while checking one field."""

    node: FieldNode
    value: Any
    data: WorkflowFormData
    state: FieldState
    config: EngineConfig

    @property
    def schema(self) -> FieldSchema:
        return self.node.schema

    def error(
        self,
        code: str,
        message_id: str,
        configured: str | None = None,
        configured_alt: str | None = None,
        **kwargs,
    ) -> ValidationError:
        """Build an error for this field.

        A message configured on the field wins; otherwise ``message_id`` is
        rendered in the primary language and, when one is configured, the
        alternate language.
        """
        schema = self.schema
        message = configured or format_message(
            message_id, self.config.language, label=schema.display_label, **kwargs
        )

        message_alt = configured_alt
        if message_alt is None and self.config.alt_language:
            message_alt = format_message(
                message_id,
                self.config.alt_language,
                label=schema.display_label_alt,
                **kwargs,
            )

        return ValidationError(
            field_id=schema.id,
            error_code=code,
            message=message,
            message_alt=message_alt,
        )


class ValidationRule(ABC):
    """A named check registered with the validation engine.

    ``applies`` lets a rule decide from the field schema whether it is relevant;
    a rule whose id is listed in a field's ``customRuleIds`` runs regardless.
    """

    rule_id: str = ""

    def applies(self, ctx: ValidationContext) -> bool:
        return False

    @abstractmethod
    def validate(self, ctx: ValidationContext) -> list[ValidationError]: ...
