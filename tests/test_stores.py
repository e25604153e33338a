"""Schema store unit tests"""

import pytest

from formrules.errors import SchemaNotFoundError
from formrules.schemas import ModuleSchema, WorkflowSchema
from formrules.stores import InMemorySchemaStore, SchemaStore


@pytest.fixture
def store():
    return InMemorySchemaStore(
        modules=[ModuleSchema(id=1, title="Personal"), ModuleSchema(id=2, title="Contact")],
        workflows=[
            WorkflowSchema(id=10, title="Signup", module_ids=[2, 1]),
            WorkflowSchema(id=11, title="Broken", module_ids=[1, 3, 4]),
        ],
    )


def test_implements_protocol(store):
    assert isinstance(store, SchemaStore)


def test_get_module_and_workflow(store):
    assert store.get_module(1).title == "Personal"
    assert store.get_module(99) is None
    assert store.get_workflow(10).title == "Signup"
    assert store.get_workflow(99) is None


def test_workflow_modules_in_step_order(store):
    modules = store.get_workflow_modules(10)
    assert [module.title for module in modules] == ["Contact", "Personal"]


def test_unresolvable_module_ids_raise(store):
    with pytest.raises(SchemaNotFoundError, match="unknown modules: 3, 4"):
        store.get_workflow_modules(11)


def test_unknown_workflow_raises(store):
    with pytest.raises(SchemaNotFoundError, match="Workflow 99 not found"):
        store.get_workflow_modules(99)


def test_require_module(store):
    assert store.require_module(2).title == "Contact"
    with pytest.raises(SchemaNotFoundError):
        store.require_module(42)


def test_register_replaces_version(store):
    store.register_module(ModuleSchema(id=1, title="Personal", version=2.0))
    assert store.get_module(1).version == 2.0
    assert store.module_ids() == [1, 2]
    assert store.workflow_ids() == [10, 11]
