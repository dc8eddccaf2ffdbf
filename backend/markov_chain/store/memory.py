# markov_chain/store/memory.py
import threading
from typing import Dict, Iterable, Iterator

from markov_chain.core.errors import NotFound
from markov_chain.core.types import Bigram, ChainEntry, to_bigram
from markov_chain.store.base import TransitionStore


class MemoryTransitionStore(TransitionStore):
    """
    Hash map keyed by Bigram.

    Rebuilds construct a fresh map and swap it in under the lock. `put` updates
    the live map in place. Readers copy what they need while holding the lock,
    so they never observe a partial rebuild.
    """

    def __init__(self, entries: Iterable = ()):
        self._lock = threading.Lock()
        self._chain: Dict[Bigram, ChainEntry] = {}
        entries = list(entries)
        if entries:
            self.bulk_load(entries)

    def get(self, bigram) -> ChainEntry:
        key = to_bigram(bigram)
        with self._lock:
            entry = self._chain.get(key)
        if entry is None:
            raise NotFound(key)
        return entry

    def _store(self, entry: ChainEntry) -> None:
        with self._lock:
            self._chain[entry.bigram] = entry

    def _replace_all(self, entries: Dict[Bigram, ChainEntry]) -> None:
        chain = dict(entries)
        with self._lock:
            self._chain = chain

    def count(self) -> int:
        with self._lock:
            return len(self._chain)

    def entries(self) -> Iterator[ChainEntry]:
        with self._lock:
            snapshot = list(self._chain.values())
        return iter(snapshot)
