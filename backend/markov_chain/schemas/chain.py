# markov_chain/schemas/chain.py
from pydantic import BaseModel, Field
from typing import Annotated, List, Optional, Tuple

from markov_chain.core.types import ChainEntry

# Tokens are validated by the store so that malformed input surfaces as InvalidInput
BigramPair = Tuple[str, str]
Candidate = Tuple[int, str]


class ChainEntryData(BaseModel):
    bigram: BigramPair
    topic: BigramPair
    next_unigrams: List[Candidate]

    @classmethod
    def from_entry(cls, entry: ChainEntry) -> "ChainEntryData":
        return cls(
            bigram=tuple(entry.bigram),
            topic=tuple(entry.topic),
            next_unigrams=[tuple(c) for c in entry.candidates],
        )

class BulkLoadRequest(BaseModel):
    entries: List[ChainEntryData]

class BulkLoadResponse(BaseModel):
    loaded: int

class PruneResponse(BaseModel):
    removed: int
    remaining: int

class ChainStats(BaseModel):
    entries: int

class GenerateRequest(BaseModel):
    seed: BigramPair
    max_length: Optional[Annotated[int, Field(ge=2)]] = None
    rng_seed: Optional[int] = None  # fixed seed -> reproducible walk
    topic: Optional[BigramPair] = None
    strict_topic: bool = False

class GenerateResponse(BaseModel):
    words: List[str]
    text: str
    length: int
    stop_reason: str
