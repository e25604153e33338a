from .base import AsyncOptionSetResolver, OptionSetRef, OptionSetResolver
from .memory import AsyncCodeSetProvider, CodeSetProviderStats, InMemoryCodeSetProvider

__all__ = [
    "AsyncCodeSetProvider",
    "AsyncOptionSetResolver",
    "CodeSetProviderStats",
    "InMemoryCodeSetProvider",
    "OptionSetRef",
    "OptionSetResolver",
]
