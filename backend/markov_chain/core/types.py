# markov_chain/core/types.py
import numbers
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Sequence, Tuple

from markov_chain.core.errors import InvalidInput

# seq_num fits a signed 32-bit integer
SEQ_NUM_MAX = 2**31 - 1


class Bigram(NamedTuple):
    first: str
    second: str

    def __str__(self) -> str:
        return f"{self.first} {self.second}"


class SeqUnigram(NamedTuple):
    seq_num: int
    unigram: str


@dataclass(frozen=True)
class ChainEntry:
    bigram: Bigram
    topic: Bigram
    candidates: Tuple[SeqUnigram, ...]

    def to_record(self) -> dict:
        """JSON-friendly form used by snapshot files and the JSON column."""
        return {
            "bigram": [self.bigram.first, self.bigram.second],
            "topic": [self.topic.first, self.topic.second],
            "next_unigrams": [[c.seq_num, c.unigram] for c in self.candidates],
        }


def _check_token(token, label: str) -> str:
    if not isinstance(token, str) or not token.strip():
        raise InvalidInput(f"{label} must be a non-empty token, got {token!r}")
    return token


def to_bigram(value, label: str = "bigram") -> Bigram:
    """Coerce a (first, second) pair into a validated Bigram."""
    if value is None:
        raise InvalidInput(f"{label} must not be null")
    if isinstance(value, str):
        raise InvalidInput(f"{label} must be a pair of tokens, not a string")
    try:
        first, second = value
    except (TypeError, ValueError):
        raise InvalidInput(f"{label} must be a pair of tokens, got {value!r}") from None
    return Bigram(_check_token(first, f"{label}.first"), _check_token(second, f"{label}.second"))


def to_candidates(values: Iterable) -> Tuple[SeqUnigram, ...]:
    """Coerce (seq_num, unigram) pairs, preserving order. Empty lists are rejected."""
    if values is None:
        raise InvalidInput("candidates must not be null")
    out = []
    for i, value in enumerate(values):
        try:
            seq_num, unigram = value
        except (TypeError, ValueError):
            raise InvalidInput(f"candidate #{i} must be a (seq_num, unigram) pair, got {value!r}") from None
        # bool is an int subclass but never a meaningful count
        if isinstance(seq_num, bool) or not isinstance(seq_num, numbers.Integral) or not 0 <= seq_num <= SEQ_NUM_MAX:
            raise InvalidInput(f"candidate #{i} seq_num must be an integer in [0, {SEQ_NUM_MAX}], got {seq_num!r}")
        out.append(SeqUnigram(int(seq_num), _check_token(unigram, f"candidate #{i} unigram")))
    if not out:
        raise InvalidInput("a chain entry needs at least one candidate")
    return tuple(out)


def make_entry(bigram, topic, candidates: Sequence) -> ChainEntry:
    return ChainEntry(
        bigram=to_bigram(bigram, "bigram"),
        topic=to_bigram(topic, "topic"),
        candidates=to_candidates(candidates),
    )


def coerce_entry(value) -> ChainEntry:
    """Accept a ChainEntry, a snapshot record dict or a (bigram, topic, candidates) triple."""
    if isinstance(value, ChainEntry):
        return make_entry(value.bigram, value.topic, value.candidates)
    if isinstance(value, dict):
        missing = {"bigram", "topic", "next_unigrams"} - value.keys()
        if missing:
            raise InvalidInput(f"chain record is missing {sorted(missing)}")
        return make_entry(value["bigram"], value["topic"], value["next_unigrams"])
    try:
        bigram, topic, candidates = value
    except (TypeError, ValueError):
        raise InvalidInput(f"cannot interpret {value!r} as a chain entry") from None
    return make_entry(bigram, topic, candidates)
