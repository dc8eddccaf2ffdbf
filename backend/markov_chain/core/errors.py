# markov_chain/core/errors.py
"""
Error taxonomy shared by the store, the walker and the HTTP layer.

Every error is local to a single call; nothing here is retried.
"""


class ChainError(Exception):
    """Base class for transition store and walker errors."""


class InvalidInput(ChainError, ValueError):
    """Malformed bigram, topic, candidate list or walk parameter."""


class NotFound(ChainError, LookupError):
    """Lookup miss. During a walk this means end of chain, not failure."""

    def __init__(self, bigram):
        self.bigram = bigram
        super().__init__(f"No chain entry for bigram {tuple(bigram)!r}")


class EmptyChain(ChainError):
    """The seed bigram has nothing to walk from."""

    def __init__(self, seed, reason: str = "no entry"):
        self.seed = seed
        super().__init__(f"Cannot generate from seed {tuple(seed)!r}: {reason}")
