"""Schema stores: supply immutable module and workflow schemas by id."""

import logging
import threading
from typing import Protocol, runtime_checkable

from .errors import SchemaNotFoundError
from .schemas import ModuleSchema, WorkflowSchema

logger = logging.getLogger(__name__)


@runtime_checkable
class SchemaStore(Protocol):
    def get_module(self, module_id: int) -> ModuleSchema | None: ...

    def get_workflow(self, workflow_id: int) -> WorkflowSchema | None: ...


class InMemorySchemaStore:
    """Schemas held in memory, keyed by id.

    Registering a schema with an existing id replaces the previous version.
    Schemas are immutable, so readers may keep what they fetched while a new
    version is registered.
    """

    def __init__(
        self,
        modules: list[ModuleSchema] | None = None,
        workflows: list[WorkflowSchema] | None = None,
    ):
        self._lock = threading.Lock()
        self._modules: dict[int, ModuleSchema] = {}
        self._workflows: dict[int, WorkflowSchema] = {}
        for module in modules or []:
            self.register_module(module)
        for workflow in workflows or []:
            self.register_workflow(workflow)

    def register_module(self, module: ModuleSchema) -> None:
        with self._lock:
            replaced = module.id in self._modules
            self._modules[module.id] = module
        logger.debug(
            f"{'Replaced' if replaced else 'Registered'} module {module.id} "
            f"'{module.title}' (version {module.version})"
        )

    def register_workflow(self, workflow: WorkflowSchema) -> None:
        with self._lock:
            replaced = workflow.id in self._workflows
            self._workflows[workflow.id] = workflow
        logger.debug(
            f"{'Replaced' if replaced else 'Registered'} workflow {workflow.id} "
            f"'{workflow.title}' with {workflow.step_count} steps"
        )

    def get_module(self, module_id: int) -> ModuleSchema | None:
        return self._modules.get(module_id)

    def get_workflow(self, workflow_id: int) -> WorkflowSchema | None:
        return self._workflows.get(workflow_id)

    def require_module(self, module_id: int) -> ModuleSchema:
        module = self.get_module(module_id)
        if module is None:
            raise SchemaNotFoundError(f"Module {module_id} not found")
        return module

    def require_workflow(self, workflow_id: int) -> WorkflowSchema:
        workflow = self.get_workflow(workflow_id)
        if workflow is None:
            raise SchemaNotFoundError(f"Workflow {workflow_id} not found")
        return workflow

    def get_workflow_modules(self, workflow_id: int) -> list[ModuleSchema]:
        """Modules of a workflow in step order.

        Raises:
            SchemaNotFoundError: If the workflow or any of its modules is unknown
        """
        workflow = self.require_workflow(workflow_id)
        missing = [module_id for module_id in workflow.module_ids if module_id not in self._modules]
        if missing:
            raise SchemaNotFoundError(
                f"Workflow {workflow_id} references unknown modules: "
                f"{', '.join(str(module_id) for module_id in missing)}"
            )
        return [self._modules[module_id] for module_id in workflow.module_ids]

    def module_ids(self) -> list[int]:
        return sorted(self._modules)

    def workflow_ids(self) -> list[int]:
        return sorted(self._workflows)
