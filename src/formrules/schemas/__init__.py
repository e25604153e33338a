from .base import SchemaModel
from .codeset import CodeSetItem, CodeSetSchema
from .condition import (
    ComplexCondition,
    Condition,
    ConditionalRule,
    SimpleCondition,
    all_of,
    any_of,
    negate,
    parse_condition,
)
from .field import FieldOption, FieldSchema, FieldValidationConfig
from .module import (
    FieldSetValidation,
    ModuleSchema,
    WorkflowNavigation,
    WorkflowSchema,
    WorkflowSettings,
)
from .type_configs import (
    AutoCompleteConfig,
    DataGridConfig,
    DateConfig,
    FileUploadConfig,
    MatrixColumnDefinition,
    MatrixConfig,
    MatrixRowDefinition,
    TextInputConfig,
    ToggleConfig,
    TypeConfig,
)

__all__ = [
    "AutoCompleteConfig",
    "CodeSetItem",
    "CodeSetSchema",
    "ComplexCondition",
    "Condition",
    "ConditionalRule",
    "DataGridConfig",
    "DateConfig",
    "FieldOption",
    "FieldSchema",
    "FieldSetValidation",
    "FieldValidationConfig",
    "FileUploadConfig",
    "MatrixColumnDefinition",
    "MatrixConfig",
    "MatrixRowDefinition",
    "ModuleSchema",
    "SchemaModel",
    "SimpleCondition",
    "TextInputConfig",
    "ToggleConfig",
    "TypeConfig",
    "WorkflowNavigation",
    "WorkflowSchema",
    "WorkflowSettings",
    "all_of",
    "any_of",
    "negate",
    "parse_condition",
]
