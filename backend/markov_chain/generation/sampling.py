# markov_chain/generation/sampling.py
from typing import List, Optional, Sequence

from markov_chain.core.errors import InvalidInput
from markov_chain.core.types import Bigram, SeqUnigram

WEIGHTING_POLICIES = ("count", "uniform")


def candidate_weights(
    candidates: Sequence[SeqUnigram],
    weighting: str = "uniform",
    topic: Optional[Bigram] = None,
    topic_boost: float = 1.0,
) -> List[float]:
    """
    Weight per candidate, in stored order.

    - uniform: every stored candidate weighs 1. seq_num is only a position
      within a topic run, so repeated words are likelier in proportion.
    - count: seq_num is read as an occurrence count. All-zero counts fall back to uniform.
    Candidates naming a topic word are multiplied by `topic_boost`.
    """
    if weighting == "count":
        weights = [float(c.seq_num) for c in candidates]
        if not any(weights):
            weights = [1.0] * len(candidates)
    elif weighting == "uniform":
        weights = [1.0] * len(candidates)
    else:
        raise InvalidInput(f"Unknown weighting {weighting!r}, expected one of {WEIGHTING_POLICIES}")

    if topic is not None and topic_boost != 1.0:
        topic_words = {topic.first, topic.second}
        weights = [
            w * topic_boost if c.unigram in topic_words else w
            for c, w in zip(candidates, weights)
        ]
    return weights


def weighted_choice(candidates: Sequence[SeqUnigram], weights: Sequence[float], rng) -> SeqUnigram:
    """
    Cumulative scan in stored order: with equal weights the earlier candidate
    owns the lower slice of [0, total), and rng.random() == 0 picks the first.
    """
    total = sum(weights)
    if total <= 0:
        raise InvalidInput("Candidate weights must have a positive total")
    choice = rng.random() * total
    running = 0.0
    for candidate, weight in zip(candidates, weights):
        running += weight
        if weight > 0 and choice < running:
            return candidate
    # float rounding at the top end
    for candidate, weight in reversed(list(zip(candidates, weights))):
        if weight > 0:
            return candidate
