from typing import Awaitable, Protocol, runtime_checkable

from ..schemas import FieldOption

OptionSetRef = int | str


@runtime_checkable
class OptionSetResolver(Protocol):
    """Synchronous option-set lookup.

    Implementations may raise anything for unknown references; the hierarchy
    builder turns every failure into a build warning.
    """

    def resolve(self, reference: OptionSetRef) -> list[FieldOption]: ...


@runtime_checkable
class AsyncOptionSetResolver(Protocol):
    def resolve(self, reference: OptionSetRef) -> Awaitable[list[FieldOption]]: ...
