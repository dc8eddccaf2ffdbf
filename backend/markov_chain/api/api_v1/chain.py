# markov_chain/api/api_v1/chain.py
"""
FastAPI routes for reading and (re)building the transition store.
"""

import logging
from fastapi import APIRouter, Depends, Query

from markov_chain.api.deps import get_store, to_http_error
from markov_chain.core.errors import ChainError
from markov_chain.schemas import (
    ChainEntryData, BulkLoadRequest, BulkLoadResponse, PruneResponse, ChainStats
)
from markov_chain.store import TransitionStore

logger = logging.getLogger("uvicorn")

router = APIRouter()


@router.get("/chain/stats", response_model=ChainStats)
def get_chain_stats(store: TransitionStore = Depends(get_store)):
    """Number of entries currently published."""
    return ChainStats(entries=store.count())


@router.get("/chain/{first}/{second}", response_model=ChainEntryData)
def get_chain_entry(first: str, second: str, store: TransitionStore = Depends(get_store)):
    """Exact lookup of one bigram."""
    try:
        entry = store.get((first, second))
    except ChainError as e:
        raise to_http_error(e)
    return ChainEntryData.from_entry(entry)


@router.get("/chain", response_model=ChainEntryData)
def lookup_chain_entry(
    first: str = Query(..., description="First token of the bigram"),
    second: str = Query(..., description="Second token of the bigram"),
    store: TransitionStore = Depends(get_store),
):
    """Same lookup as the path form, for tokens containing `/`."""
    return get_chain_entry(first, second, store)


@router.put("/chain", response_model=ChainEntryData)
def put_chain_entry(payload: ChainEntryData, store: TransitionStore = Depends(get_store)):
    """Insert or replace the entry for a bigram."""
    try:
        entry = store.put(payload.bigram, payload.topic, payload.next_unigrams)
    except ChainError as e:
        raise to_http_error(e)
    return ChainEntryData.from_entry(entry)


@router.post("/chain/bulk", response_model=BulkLoadResponse)
def bulk_load_chain(payload: BulkLoadRequest, store: TransitionStore = Depends(get_store)):
    """
    Rebuild the store from the given entries.

    The previous contents are discarded; an empty list empties the store.
    Nothing is written if any entry is invalid.
    """
    logger.info(f"📦 Bulk rebuild requested with {len(payload.entries):,} entries")
    try:
        loaded = store.bulk_load(
            (e.bigram, e.topic, e.next_unigrams) for e in payload.entries
        )
    except ChainError as e:
        raise to_http_error(e)
    return BulkLoadResponse(loaded=loaded)


@router.post("/chain/prune", response_model=PruneResponse)
def prune_chain(
    min_candidates: int = Query(..., ge=1, description="Keep entries with at least this many candidates"),
    store: TransitionStore = Depends(get_store),
):
    """Drop sparse entries (rebuild of the survivors)."""
    try:
        removed = store.prune(min_candidates)
    except ChainError as e:
        raise to_http_error(e)
    return PruneResponse(removed=removed, remaining=store.count())
