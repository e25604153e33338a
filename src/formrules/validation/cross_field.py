from collections.abc import Mapping
from typing import Any

from .. import i18n
from ..config import EngineConfig
from ..consts import (
    CODE_CROSS_FIELD_ALL_OR_NONE,
    CODE_CROSS_FIELD_EXCLUSIVE,
    CODE_CROSS_FIELD_REQUIRED,
)
from ..enums import CrossFieldType
from ..schemas import FieldSetValidation
from ..utils import is_empty
from .base import ValidationError

_CHECKS = {
    CrossFieldType.AT_LEAST_ONE: (
        CODE_CROSS_FIELD_REQUIRED,
        i18n.MSG_AT_LEAST_ONE,
        lambda filled, total: filled == 0,
    ),
    CrossFieldType.ALL_OR_NONE: (
        CODE_CROSS_FIELD_ALL_OR_NONE,
        i18n.MSG_ALL_OR_NONE,
        lambda filled, total: 0 < filled < total,
    ),
    CrossFieldType.MUTUALLY_EXCLUSIVE: (
        CODE_CROSS_FIELD_EXCLUSIVE,
        i18n.MSG_MUTUALLY_EXCLUSIVE,
        lambda filled, total: filled > 1,
    ),
}


def check_field_set(
    rule: FieldSetValidation,
    module_data: Mapping[str, Any],
    config: EngineConfig,
) -> ValidationError | None:
    """Check one set-level rule against the raw values of a module.

    Field ids are looked up directly in the data, independent of the field
    tree and of visibility. A failing rule yields a single error whose
    ``field_id`` is the comma-joined list of its field ids.
    """
    code, message_id, fails = _CHECKS[rule.type]
    filled = sum(1 for field_id in rule.field_ids if not is_empty(module_data.get(field_id)))
    if not fails(filled, len(rule.field_ids)):
        return None

    fields = ", ".join(rule.field_ids)
    message = rule.error_message or i18n.format_message(message_id, config.language, fields=fields)
    message_alt = rule.error_message_alt
    if message_alt is None and config.alt_language:
        message_alt = i18n.format_message(message_id, config.alt_language, fields=fields)

    return ValidationError(
        field_id=",".join(rule.field_ids),
        error_code=code,
        message=message,
        message_alt=message_alt,
    )
