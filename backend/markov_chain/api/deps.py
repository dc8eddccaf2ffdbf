# markov_chain/api/deps.py
from fastapi import HTTPException, Request

from markov_chain.core.errors import ChainError, EmptyChain, InvalidInput, NotFound
from markov_chain.generation import ChainWalker
from markov_chain.store import TransitionStore


def get_store(request: Request) -> TransitionStore:
    """Store dependency, set on app.state during startup."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Transition store not initialized")
    return store


def get_walker(request: Request) -> ChainWalker:
    return ChainWalker(get_store(request))


def to_http_error(e: ChainError) -> HTTPException:
    if isinstance(e, InvalidInput):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, (NotFound, EmptyChain)):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))
