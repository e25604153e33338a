from .data import WorkflowFormData
from .module import (
    BuildDiagnostics,
    BuildResult,
    HierarchyMetrics,
    HierarchyValidationResult,
    ModuleRuntime,
)
from .node import FieldNode

__all__ = [
    "BuildDiagnostics",
    "BuildResult",
    "FieldNode",
    "HierarchyMetrics",
    "HierarchyValidationResult",
    "ModuleRuntime",
    "WorkflowFormData",
]
