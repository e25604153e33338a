from .base import ValidationContext, ValidationError, ValidationResult, ValidationRule
from .cross_field import check_field_set
from .engine import ValidationEngine
from .rules import (
    EmailRule,
    LengthRule,
    PatternRule,
    RangeRule,
    RequiredRule,
    TypeConfigRule,
    default_rules,
    resolve_date_bound,
)

__all__ = [
    "EmailRule",
    "LengthRule",
    "PatternRule",
    "RangeRule",
    "RequiredRule",
    "TypeConfigRule",
    "ValidationContext",
    "ValidationEngine",
    "ValidationError",
    "ValidationResult",
    "ValidationRule",
    "check_field_set",
    "default_rules",
    "resolve_date_bound",
]
