# markov_chain/generation/walker.py
"""
Random walk over a transition store.

Starting from a seed bigram the walker repeatedly samples a continuation,
appends it and slides the bigram window one word to the right. The walk ends
at `max_length` words, at a bigram with no entry, or when the end token is
drawn (the end token itself is not emitted).
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from markov_chain.core.config import settings
from markov_chain.core.errors import EmptyChain, InvalidInput, NotFound
from markov_chain.core.types import Bigram, ChainEntry, to_bigram
from markov_chain.generation.sampling import WEIGHTING_POLICIES, candidate_weights, weighted_choice
from markov_chain.store.base import TransitionStore

logger = logging.getLogger("uvicorn")


@dataclass
class WalkResult:
    words: List[str]
    stop_reason: str  # "max_length" | "end_of_chain" | "end_token" | "topic_changed"

    @property
    def text(self) -> str:
        return " ".join(self.words)


class ChainWalker:
    """Weighted random walk over chain entries."""

    def __init__(
        self,
        store: TransitionStore,
        *,
        end_token: Optional[str] = None,
        weighting: Optional[str] = None,
        topic_boost: Optional[float] = None,
    ) -> None:
        self.store = store
        self.end_token = settings.END_TOKEN if end_token is None else end_token
        self.weighting = weighting or settings.WEIGHTING
        self.topic_boost = settings.TOPIC_BOOST if topic_boost is None else topic_boost
        if self.weighting not in WEIGHTING_POLICIES:
            raise InvalidInput(f"Unknown weighting {self.weighting!r}, expected one of {WEIGHTING_POLICIES}")
        if self.topic_boost <= 0:
            raise InvalidInput(f"topic_boost must be positive, got {self.topic_boost}")

    def generate(
        self,
        seed,
        max_length: int,
        rng=None,
        topic=None,
        strict_topic: bool = False,
    ) -> List[str]:
        return self.walk(seed, max_length, rng=rng, topic=topic, strict_topic=strict_topic).words

    def walk(
        self,
        seed,
        max_length: int,
        rng=None,
        topic=None,
        strict_topic: bool = False,
    ) -> WalkResult:
        seed = to_bigram(seed, "seed")
        topic = to_bigram(topic, "topic") if topic is not None else None
        if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length < 2:
            raise InvalidInput(f"max_length must be an integer >= 2, got {max_length!r}")
        if strict_topic and topic is None:
            raise InvalidInput("strict_topic requires a topic")
        rng = rng or random

        try:
            entry: Optional[ChainEntry] = self.store.get(seed)
        except NotFound:
            raise EmptyChain(seed) from None
        if strict_topic and entry.topic != topic:
            raise EmptyChain(seed, f"entry topic {tuple(entry.topic)!r} does not match {tuple(topic)!r}")

        output = [seed.first, seed.second]
        current = seed
        stop_reason = "max_length"

        while len(output) < max_length:
            if entry is None:
                try:
                    entry = self.store.get(current)
                except NotFound:
                    stop_reason = "end_of_chain"
                    break
                if strict_topic and entry.topic != topic:
                    stop_reason = "topic_changed"
                    break

            weights = candidate_weights(entry.candidates, self.weighting, topic, self.topic_boost)
            picked = weighted_choice(entry.candidates, weights, rng)
            if picked.unigram == self.end_token:
                stop_reason = "end_token"
                break

            output.append(picked.unigram)
            current = Bigram(current.second, picked.unigram)
            entry = None

        logger.debug(f"🎲 Walk from {seed} produced {len(output)} words ({stop_reason})")
        return WalkResult(words=output, stop_reason=stop_reason)
