"""Code set provider unit tests"""

import asyncio

import pytest

from formrules.codesets import (
    AsyncCodeSetProvider,
    AsyncOptionSetResolver,
    InMemoryCodeSetProvider,
    OptionSetResolver,
)
from formrules.errors import OptionSetResolutionError
from formrules.schemas import CodeSetItem, CodeSetSchema


def _code_set(id, code, category=None, is_active=True, items=("A", "B")):
    return CodeSetSchema(
        id=id,
        code=code,
        name=code.title(),
        category=category,
        is_active=is_active,
        items=[CodeSetItem(value=value, text=value, order=i) for i, value in enumerate(items)],
    )


@pytest.fixture
def provider():
    return InMemoryCodeSetProvider(
        [
            _code_set(1, "COUNTRIES", category="geo"),
            _code_set(2, "PROVINCES", category="geo"),
            _code_set(3, "LEGACY", is_active=False),
        ]
    )


class TestLookup:
    def test_by_id(self, provider):
        assert provider.get(1).code == "COUNTRIES"

    def test_by_numeric_string(self, provider):
        assert provider.get("2").code == "PROVINCES"

    def test_by_code_case_insensitive(self, provider):
        assert provider.get("countries").id == 1
        assert provider.exists(" Provinces ")

    def test_unknown(self, provider):
        assert provider.get("PLANETS") is None
        assert not provider.exists(99)

    def test_by_category_skips_inactive(self, provider):
        assert [cs.id for cs in provider.by_category("GEO")] == [1, 2]


class TestResolve:
    def test_resolve_returns_field_options(self, provider):
        options = provider.resolve("COUNTRIES")
        assert [option.value for option in options] == ["A", "B"]

    def test_unknown_raises(self, provider):
        with pytest.raises(OptionSetResolutionError, match="Unknown code set"):
            provider.resolve("PLANETS")

    def test_inactive_raises(self, provider):
        with pytest.raises(OptionSetResolutionError, match="inactive"):
            provider.resolve(3)

    def test_implements_resolver_protocols(self, provider):
        assert isinstance(provider, OptionSetResolver)
        assert isinstance(AsyncCodeSetProvider(provider), AsyncOptionSetResolver)

    def test_async_adapter(self, provider):
        options = asyncio.run(AsyncCodeSetProvider(provider).resolve(1))
        assert len(options) == 2

    def test_async_adapter_propagates_errors(self, provider):
        with pytest.raises(OptionSetResolutionError):
            asyncio.run(AsyncCodeSetProvider(provider).resolve("PLANETS"))


class TestRegistration:
    def test_register_replaces_code_index(self, provider):
        provider.register(_code_set(1, "NATIONS"))

        assert provider.get("NATIONS").id == 1
        assert provider.get("COUNTRIES") is None

    def test_unregister(self, provider):
        assert provider.unregister(2)
        assert not provider.unregister(2)
        assert provider.get("PROVINCES") is None

    def test_clear(self, provider):
        provider.clear()
        assert provider.stats().total_code_sets == 0

    def test_stats(self, provider):
        stats = provider.stats()
        assert stats.total_code_sets == 3
        assert stats.active_code_sets == 2
        assert stats.total_items == 6
        assert stats.categories == 1
