# markov_chain/store/base.py
"""
Common interface for transition stores.

A store maps a Bigram to one ChainEntry (topic plus ordered candidates).
Writes happen through `put` (single insert-or-replace) or `bulk_load`, which
always REBUILDS: the previous contents are discarded and readers switch to
the new snapshot in one step.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Iterator, Sequence

from markov_chain.core.errors import InvalidInput, NotFound
from markov_chain.core.types import Bigram, ChainEntry, coerce_entry, make_entry, to_bigram

logger = logging.getLogger("uvicorn")


def prepare_entries(entries: Iterable) -> Dict[Bigram, ChainEntry]:
    """
    Validate every entry before anything is written.
    Later entries for the same bigram replace earlier ones, keeping first-seen order.
    """
    prepared: Dict[Bigram, ChainEntry] = {}
    replaced = 0
    for i, raw in enumerate(entries):
        try:
            entry = coerce_entry(raw)
        except InvalidInput as e:
            raise InvalidInput(f"entry #{i}: {e}") from None
        if entry.bigram in prepared:
            replaced += 1
        prepared[entry.bigram] = entry
    if replaced:
        logger.info(f"🔁 {replaced:,} duplicate bigram(s) replaced by later entries")
    return prepared


class TransitionStore(ABC):

    @abstractmethod
    def get(self, bigram) -> ChainEntry:
        """Exact-key lookup. Raises NotFound on a miss."""

    @abstractmethod
    def _store(self, entry: ChainEntry) -> None:
        ...

    @abstractmethod
    def _replace_all(self, entries: Dict[Bigram, ChainEntry]) -> None:
        ...

    @abstractmethod
    def count(self) -> int:
        ...

    @abstractmethod
    def entries(self) -> Iterator[ChainEntry]:
        ...

    def put(self, bigram, topic, candidates: Sequence) -> ChainEntry:
        entry = make_entry(bigram, topic, candidates)
        self._store(entry)
        return entry

    def bulk_load(self, entries: Iterable) -> int:
        """Replace the whole store with `entries`. Returns the number of distinct entries."""
        prepared = prepare_entries(entries)
        self._replace_all(prepared)
        if not prepared:
            logger.warning("⚠️ Bulk load with zero entries: store is now empty")
        return len(prepared)

    def prune(self, min_candidates: int) -> int:
        """Rebuild keeping only entries with at least `min_candidates` candidates."""
        if min_candidates < 1:
            raise InvalidInput(f"min_candidates must be >= 1, got {min_candidates}")
        before = self.count()
        survivors = [e for e in self.entries() if len(e.candidates) >= min_candidates]
        self.bulk_load(survivors)
        removed = before - len(survivors)
        logger.info(f"✂️ Pruned {removed:,} entries with fewer than {min_candidates} candidates")
        return removed

    def __contains__(self, bigram) -> bool:
        try:
            self.get(to_bigram(bigram))
        except NotFound:
            return False
        return True
