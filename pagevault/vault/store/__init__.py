"""State store implementations for vault snapshot persistence."""

from pagevault.vault.store.base import StateStore
from pagevault.vault.store.local import LocalStateStore
from pagevault.vault.store.memory import MemoryStateStore

__all__ = ["LocalStateStore", "MemoryStateStore", "StateStore"]
