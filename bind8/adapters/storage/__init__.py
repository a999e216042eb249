from bind8.adapters.storage.base import AbstractWeddingStore
from bind8.adapters.storage.in_memory import InMemoryWeddingStore

__all__ = ["AbstractWeddingStore", "InMemoryWeddingStore"]
