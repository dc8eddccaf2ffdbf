# markov_chain/api/api_v1/generate.py
import random
from fastapi import APIRouter, Depends, HTTPException

from markov_chain.api.deps import get_walker, to_http_error
from markov_chain.core.config import settings
from markov_chain.core.errors import ChainError
from markov_chain.generation import ChainWalker
from markov_chain.schemas import GenerateRequest, GenerateResponse

router = APIRouter()


@router.post("/generate", response_model=GenerateResponse)
def generate(payload: GenerateRequest, walker: ChainWalker = Depends(get_walker)):
    """Random walk from a seed bigram. A fixed rng_seed makes the walk reproducible."""
    max_length = payload.max_length or settings.DEFAULT_MAX_LENGTH
    if max_length > settings.MAX_LENGTH_LIMIT:
        raise HTTPException(
            status_code=422,
            detail=f"max_length must be <= {settings.MAX_LENGTH_LIMIT}"
        )

    rng = random.Random(payload.rng_seed)
    try:
        result = walker.walk(
            payload.seed,
            max_length,
            rng=rng,
            topic=payload.topic,
            strict_topic=payload.strict_topic,
        )
    except ChainError as e:
        raise to_http_error(e)

    return GenerateResponse(
        words=result.words,
        text=result.text,
        length=len(result.words),
        stop_reason=result.stop_reason,
    )
