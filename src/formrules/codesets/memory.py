import asyncio
import logging
from dataclasses import dataclass

from ..errors import OptionSetResolutionError
from ..schemas import CodeSetSchema, FieldOption
from .base import OptionSetRef, OptionSetResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CodeSetProviderStats:
    total_code_sets: int
    active_code_sets: int
    total_items: int
    categories: int


class InMemoryCodeSetProvider:
    """Code sets held in memory, looked up by numeric id or by code.

    Codes are matched case-insensitively; a numeric string is treated as an id.
    The provider is an explicit object: construct one per process or per
    request and hand it to the hierarchy builder.
    """

    def __init__(self, code_sets: list[CodeSetSchema] | None = None):
        self._by_id: dict[int, CodeSetSchema] = {}
        self._by_code: dict[str, CodeSetSchema] = {}
        for code_set in code_sets or []:
            self.register(code_set)

    def register(self, code_set: CodeSetSchema) -> None:
        previous = self._by_id.get(code_set.id)
        if previous is not None:
            self._by_code.pop(previous.code.casefold(), None)

        self._by_id[code_set.id] = code_set
        self._by_code[code_set.code.casefold()] = code_set
        logger.debug(
            f"Registered code set {code_set.id} '{code_set.code}' "
            f"with {len(code_set.items)} items"
        )

    def unregister(self, code_set_id: int) -> bool:
        code_set = self._by_id.pop(code_set_id, None)
        if code_set is None:
            return False
        self._by_code.pop(code_set.code.casefold(), None)
        logger.debug(f"Unregistered code set {code_set_id} '{code_set.code}'")
        return True

    def clear(self) -> None:
        count = len(self._by_id)
        self._by_id.clear()
        self._by_code.clear()
        logger.debug(f"Cleared all code sets ({count} removed)")

    def get(self, reference: OptionSetRef) -> CodeSetSchema | None:
        if isinstance(reference, int):
            return self._by_id.get(reference)

        text = reference.strip()
        if text.isdigit():
            code_set = self._by_id.get(int(text))
            if code_set is not None:
                return code_set
        return self._by_code.get(text.casefold())

    def exists(self, reference: OptionSetRef) -> bool:
        return self.get(reference) is not None

    def by_category(self, category: str) -> list[CodeSetSchema]:
        wanted = category.casefold()
        return [
            code_set
            for code_set in self._by_id.values()
            if code_set.is_active and (code_set.category or "").casefold() == wanted
        ]

    def resolve(self, reference: OptionSetRef) -> list[FieldOption]:
        code_set = self.get(reference)
        if code_set is None:
            raise OptionSetResolutionError(f"Unknown code set: {reference!r}")
        if not code_set.is_active:
            raise OptionSetResolutionError(f"Code set {reference!r} is inactive")
        return code_set.to_field_options()

    def stats(self) -> CodeSetProviderStats:
        code_sets = list(self._by_id.values())
        return CodeSetProviderStats(
            total_code_sets=len(code_sets),
            active_code_sets=sum(1 for cs in code_sets if cs.is_active),
            total_items=sum(len(cs.items) for cs in code_sets),
            categories=len({cs.category for cs in code_sets if cs.category}),
        )


class AsyncCodeSetProvider:
    """Async adapter over a synchronous resolver.

    Each lookup runs in the default thread pool so a slow backing store does
    not block the event loop.
    """

    def __init__(self, resolver: OptionSetResolver):
        self._resolver = resolver

    async def resolve(self, reference: OptionSetRef) -> list[FieldOption]:
        return await asyncio.to_thread(self._resolver.resolve, reference)
