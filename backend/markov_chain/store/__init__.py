# markov_chain/store/__init__.py
from .base import TransitionStore, prepare_entries
from .memory import MemoryTransitionStore
from .sql import SqlTransitionStore

__all__ = [
    "TransitionStore",
    "prepare_entries",
    "MemoryTransitionStore",
    "SqlTransitionStore",
]
