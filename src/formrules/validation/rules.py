"""Built-in field validation rules.

Format rules (length, pattern, email, range, typeconfig) skip empty values;
emptiness is the ``required`` rule's business.
"""

import logging
import re
from collections.abc import Callable, Mapping
from datetime import date, timedelta
from pathlib import PurePath
from typing import Any

from .. import i18n
from ..consts import (
    CODE_DATE_TOO_EARLY,
    CODE_DATE_TOO_LATE,
    CODE_FILE_TOO_LARGE,
    CODE_INVALID_DATE,
    CODE_INVALID_EMAIL,
    CODE_INVALID_FILE_TYPE,
    CODE_MAX_LENGTH,
    CODE_MAX_VALUE,
    CODE_MIN_LENGTH,
    CODE_MIN_VALUE,
    CODE_NOT_A_NUMBER,
    CODE_PATTERN_MISMATCH,
    CODE_REQUIRED,
    CODE_TOO_MANY_FILES,
    CODE_TOO_MANY_ROWS,
    DATE_OFFSET_UNITS,
    EMAIL_FIELD_TYPES,
    RULE_EMAIL,
    RULE_LENGTH,
    RULE_PATTERN,
    RULE_RANGE,
    RULE_REQUIRED,
    RULE_TYPE_CONFIG,
)
from ..schemas import (
    DataGridConfig,
    DateConfig,
    FieldSchema,
    FileUploadConfig,
    TextInputConfig,
)
from ..utils import is_empty, stringify, to_datetime, to_number
from .base import ValidationContext, ValidationError, ValidationRule

logger = logging.getLogger(__name__)

_RELATIVE_DATE = re.compile(r"^now\s*(?:([+-])\s*(\d+)\s*([dwmy]))?$", re.IGNORECASE)


def _pattern_of(schema: FieldSchema) -> str | None:
    if schema.validation and schema.validation.pattern:
        return schema.validation.pattern
    match schema.type_config:
        case TextInputConfig(custom_pattern=pattern) if pattern:
            return pattern
        case _:
            return None


def _search(pattern: str, text: str, field_id: str) -> bool | None:
    """``re.search`` that reports an invalid pattern as None."""
    try:
        return re.search(pattern, text) is not None
    except re.error as e:
        logger.warning(f"Invalid validation pattern on field '{field_id}': {pattern!r} ({e})")
        return None


def resolve_date_bound(bound: str | None, today: date) -> date | None:
    """Turn a ``DateConfig`` bound into a date.

    Accepts ISO 8601 dates and ``Now`` with an optional ``+``/``-`` offset in
    days, weeks, months (30 days) or years (365 days).

    Examples:
        >>> resolve_date_bound("Now+30d", date(2024, 1, 1))
        datetime.date(2024, 1, 31)
        >>> resolve_date_bound("2024-06-01", date(2024, 1, 1))
        datetime.date(2024, 6, 1)
    """
    if bound is None or not bound.strip():
        return None

    relative = _RELATIVE_DATE.match(bound.strip())
    if relative:
        sign, amount, unit = relative.groups()
        if sign is None:
            return today
        days = int(amount) * DATE_OFFSET_UNITS[unit.lower()]
        return today + timedelta(days=days if sign == "+" else -days)

    parsed = to_datetime(bound)
    if parsed is None:
        logger.warning(f"Ignoring unparseable date bound: {bound!r}")
        return None
    return parsed.date()


class RequiredRule(ValidationRule):
    """Effective requiredness comes from the field state, so ``setRequired``
    and ``setOptional`` rules are honoured."""

    rule_id = RULE_REQUIRED

    def applies(self, ctx: ValidationContext) -> bool:
        return ctx.state.required

    def validate(self, ctx: ValidationContext) -> list[ValidationError]:
        if not is_empty(ctx.value):
            return []

        validation = ctx.schema.validation
        return [
            ctx.error(
                CODE_REQUIRED,
                i18n.MSG_REQUIRED,
                configured=validation.required_message if validation else None,
                configured_alt=validation.required_message_alt if validation else None,
            )
        ]


class LengthRule(ValidationRule):
    """Character count of scalar values; lists and mappings are not measured."""

    rule_id = RULE_LENGTH

    def applies(self, ctx: ValidationContext) -> bool:
        validation = ctx.schema.validation
        return validation is not None and (
            validation.min_length is not None or validation.max_length is not None
        )

    def validate(self, ctx: ValidationContext) -> list[ValidationError]:
        validation = ctx.schema.validation
        if validation is None or is_empty(ctx.value):
            return []
        if isinstance(ctx.value, (list, tuple, set, frozenset, Mapping)):
            return []

        length = len(stringify(ctx.value))
        errors = []
        if validation.min_length is not None and length < validation.min_length:
            errors.append(
                ctx.error(CODE_MIN_LENGTH, i18n.MSG_MIN_LENGTH, min_length=validation.min_length)
            )
        if validation.max_length is not None and length > validation.max_length:
            errors.append(
                ctx.error(CODE_MAX_LENGTH, i18n.MSG_MAX_LENGTH, max_length=validation.max_length)
            )
        return errors


class PatternRule(ValidationRule):
    """Regular expression check; an invalid pattern logs a warning and passes."""

    rule_id = RULE_PATTERN

    def applies(self, ctx: ValidationContext) -> bool:
        return _pattern_of(ctx.schema) is not None

    def validate(self, ctx: ValidationContext) -> list[ValidationError]:
        pattern = _pattern_of(ctx.schema)
        if pattern is None or is_empty(ctx.value):
            return []

        if _search(pattern, stringify(ctx.value), ctx.schema.id) is not False:
            return []

        validation = ctx.schema.validation
        return [
            ctx.error(
                CODE_PATTERN_MISMATCH,
                i18n.MSG_PATTERN,
                configured=validation.pattern_message if validation else None,
                configured_alt=validation.pattern_message_alt if validation else None,
            )
        ]


class EmailRule(ValidationRule):
    rule_id = RULE_EMAIL

    def applies(self, ctx: ValidationContext) -> bool:
        if ctx.schema.field_type.casefold() in EMAIL_FIELD_TYPES:
            return True
        match ctx.schema.type_config:
            case TextInputConfig(input_type="email"):
                return True
            case _:
                return False

    def validate(self, ctx: ValidationContext) -> list[ValidationError]:
        if is_empty(ctx.value):
            return []

        pattern = ctx.config.validation.email_pattern
        if re.search(pattern, stringify(ctx.value).strip()):
            return []
        return [ctx.error(CODE_INVALID_EMAIL, i18n.MSG_EMAIL)]


class RangeRule(ValidationRule):
    rule_id = RULE_RANGE

    def applies(self, ctx: ValidationContext) -> bool:
        validation = ctx.schema.validation
        return validation is not None and (
            validation.min_value is not None or validation.max_value is not None
        )

    def validate(self, ctx: ValidationContext) -> list[ValidationError]:
        validation = ctx.schema.validation
        if validation is None or is_empty(ctx.value):
            return []

        number = to_number(ctx.value)
        if number is None:
            return [ctx.error(CODE_NOT_A_NUMBER, i18n.MSG_NOT_A_NUMBER)]

        if validation.min_value is not None and number < validation.min_value:
            return [
                ctx.error(
                    CODE_MIN_VALUE, i18n.MSG_MIN_VALUE, min_value=stringify(validation.min_value)
                )
            ]
        if validation.max_value is not None and number > validation.max_value:
            return [
                ctx.error(
                    CODE_MAX_VALUE, i18n.MSG_MAX_VALUE, max_value=stringify(validation.max_value)
                )
            ]
        return []


class TypeConfigRule(ValidationRule):
    """Constraints carried by the field's type-specific settings.

    - ``date``: value must parse as a date inside the configured bounds;
      ``allowPast``/``allowFuture`` set to false bound the value by today.
    - ``fileupload``: file names (or ``{"name", "size"}`` mappings) must use an
      allowed extension and stay under the size limit; a single file unless
      ``allowMultiple``.
    - ``datagrid``: no more than ``maxRows`` rows.
    """

    rule_id = RULE_TYPE_CONFIG

    def __init__(self, today: Callable[[], date] | None = None):
        self._today = today or date.today

    def applies(self, ctx: ValidationContext) -> bool:
        return isinstance(ctx.schema.type_config, (DateConfig, FileUploadConfig, DataGridConfig))

    def validate(self, ctx: ValidationContext) -> list[ValidationError]:
        if is_empty(ctx.value):
            return []

        match ctx.schema.type_config:
            case DateConfig() as config:
                return self._validate_date(ctx, config)
            case FileUploadConfig() as config:
                return self._validate_files(ctx, config)
            case DataGridConfig(max_rows=max_rows) if max_rows is not None:
                rows = ctx.value if isinstance(ctx.value, (list, tuple)) else [ctx.value]
                if len(rows) > max_rows:
                    return [ctx.error(CODE_TOO_MANY_ROWS, i18n.MSG_TOO_MANY_ROWS, max_rows=max_rows)]
                return []
            case _:
                return []

    def _validate_date(self, ctx: ValidationContext, config: DateConfig) -> list[ValidationError]:
        parsed = to_datetime(ctx.value)
        if parsed is None:
            return [ctx.error(CODE_INVALID_DATE, i18n.MSG_INVALID_DATE)]

        value = parsed.date()
        today = self._today()
        earliest = resolve_date_bound(config.min_date, today)
        latest = resolve_date_bound(config.max_date, today)
        if not config.allow_past:
            earliest = max(earliest, today) if earliest else today
        if not config.allow_future:
            latest = min(latest, today) if latest else today

        if earliest is not None and value < earliest:
            return [ctx.error(CODE_DATE_TOO_EARLY, i18n.MSG_DATE_TOO_EARLY, date=earliest.isoformat())]
        if latest is not None and value > latest:
            return [ctx.error(CODE_DATE_TOO_LATE, i18n.MSG_DATE_TOO_LATE, date=latest.isoformat())]
        return []

    def _validate_files(
        self, ctx: ValidationContext, config: FileUploadConfig
    ) -> list[ValidationError]:
        files = ctx.value if isinstance(ctx.value, (list, tuple)) else [ctx.value]
        errors = []
        if len(files) > 1 and not config.allow_multiple:
            errors.append(ctx.error(CODE_TOO_MANY_FILES, i18n.MSG_TOO_MANY_FILES))

        allowed = {ext.lower().lstrip(".") for ext in config.allowed_extensions}
        infos = [_file_info(file) for file in files]
        if allowed and any(
            PurePath(name).suffix.lower().lstrip(".") not in allowed for name, _ in infos
        ):
            errors.append(
                ctx.error(
                    CODE_INVALID_FILE_TYPE,
                    i18n.MSG_INVALID_FILE_TYPE,
                    extensions=", ".join(sorted(allowed)),
                )
            )
        if any(size is not None and size > config.max_file_size_bytes for _, size in infos):
            errors.append(
                ctx.error(
                    CODE_FILE_TOO_LARGE,
                    i18n.MSG_FILE_TOO_LARGE,
                    max_size=config.max_file_size_bytes,
                )
            )
        return errors


def _file_info(file: Any) -> tuple[str, float | None]:
    if isinstance(file, Mapping):
        return stringify(file.get("name")), to_number(file.get("size"))
    return stringify(file), None


def default_rules() -> list[ValidationRule]:
    return [
        RequiredRule(),
        LengthRule(),
        PatternRule(),
        EmailRule(),
        RangeRule(),
        TypeConfigRule(),
    ]
