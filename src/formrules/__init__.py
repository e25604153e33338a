from __future__ import annotations

from .builders import FieldBuilder, ModuleBuilder, SectionBuilder
from .codesets import AsyncCodeSetProvider, InMemoryCodeSetProvider
from .config import EngineConfig
from .errors import (
    ConfigException,
    FormRulesException,
    OptionSetResolutionError,
    SchemaException,
    SchemaNotFoundError,
)
from .evaluator import ConditionEvaluator, RuleEvaluationResult, parse_field_reference
from .hierarchy import HierarchyBuilder, build_hierarchy
from .runtime import BuildResult, FieldNode, ModuleRuntime, WorkflowFormData
from .state import FieldState, FieldStateResolver
from .stores import InMemorySchemaStore, SchemaStore
from .validation import ValidationEngine, ValidationError, ValidationResult, ValidationRule
from .workflow import NavigationDecision, WorkflowNavigator

__version__ = "0.1.0"

__all__ = [
    "AsyncCodeSetProvider",
    "BuildResult",
    "ConditionEvaluator",
    "ConfigException",
    "EngineConfig",
    "FieldBuilder",
    "FieldNode",
    "FieldState",
    "FieldStateResolver",
    "FormRulesException",
    "HierarchyBuilder",
    "InMemoryCodeSetProvider",
    "InMemorySchemaStore",
    "ModuleBuilder",
    "ModuleRuntime",
    "NavigationDecision",
    "OptionSetResolutionError",
    "RuleEvaluationResult",
    "SchemaException",
    "SchemaNotFoundError",
    "SchemaStore",
    "SectionBuilder",
    "ValidationEngine",
    "ValidationError",
    "ValidationResult",
    "ValidationRule",
    "WorkflowFormData",
    "WorkflowNavigator",
    "build_hierarchy",
    "parse_field_reference",
]
