from __future__ import annotations

import random
import unittest

from markov_chain.core.errors import EmptyChain, InvalidInput
from markov_chain.core.types import Bigram, SeqUnigram
from markov_chain.generation import ChainWalker
from markov_chain.generation.sampling import candidate_weights, weighted_choice
from markov_chain.store import MemoryTransitionStore


class FixedRng:
    """rng stub: random() always returns the same value."""

    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


def cands(*pairs) -> tuple:
    return tuple(SeqUnigram(n, w) for n, w in pairs)


class SamplingTests(unittest.TestCase):
    def test_count_weighting_uses_seq_num(self) -> None:
        self.assertEqual(candidate_weights(cands((1, "a"), (3, "b")), "count"), [1.0, 3.0])

    def test_all_zero_counts_fall_back_to_uniform(self) -> None:
        self.assertEqual(candidate_weights(cands((0, "a"), (0, "b")), "count"), [1.0, 1.0])

    def test_uniform_weighting_ignores_seq_num(self) -> None:
        self.assertEqual(candidate_weights(cands((9, "a"), (1, "b")), "uniform"), [1.0, 1.0])

    def test_topic_words_are_boosted(self) -> None:
        weights = candidate_weights(
            cands((1, "cat"), (1, "dog")), "count", Bigram("dog", "bone"), topic_boost=3.0
        )
        self.assertEqual(weights, [1.0, 3.0])

    def test_unknown_weighting_is_rejected(self) -> None:
        with self.assertRaises(InvalidInput):
            candidate_weights(cands((1, "a")), "softmax")

    def test_equal_weights_resolve_in_stored_order(self) -> None:
        candidates = cands((1, "a"), (1, "b"))
        self.assertEqual(weighted_choice(candidates, [1.0, 1.0], FixedRng(0.0)).unigram, "a")
        self.assertEqual(weighted_choice(candidates, [1.0, 1.0], FixedRng(0.49)).unigram, "a")
        self.assertEqual(weighted_choice(candidates, [1.0, 1.0], FixedRng(0.5)).unigram, "b")
        self.assertEqual(weighted_choice(candidates, [1.0, 1.0], FixedRng(0.999)).unigram, "b")

    def test_zero_weight_is_never_picked(self) -> None:
        candidates = cands((0, "never"), (5, "always"))
        weights = candidate_weights(candidates, "count")
        for seed in range(50):
            self.assertEqual(weighted_choice(candidates, weights, random.Random(seed)).unigram, "always")


class ChainWalkerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryTransitionStore([
            (("the", "cat"), ("the", "cat"), [(1, "sat"), (2, "ran")]),
        ])
        self.walker = ChainWalker(self.store, end_token="$", weighting="count", topic_boost=2.0)

    def test_example_walk_terminates_at_missing_bigram(self) -> None:
        words = self.walker.generate(("the", "cat"), 4, FixedRng(0.0))
        self.assertEqual(words, ["the", "cat", "sat"])

    def test_example_walk_continues_when_next_bigram_exists(self) -> None:
        self.store.put(("cat", "sat"), ("the", "cat"), [(1, "down")])
        result = self.walker.walk(("the", "cat"), 4, FixedRng(0.0))
        self.assertEqual(result.words, ["the", "cat", "sat", "down"])
        self.assertEqual(result.stop_reason, "max_length")
        self.assertEqual(result.text, "the cat sat down")

    def test_count_weighting_picks_heavier_candidate(self) -> None:
        # total weight 3: [0, 1) -> sat, [1, 3) -> ran
        self.assertEqual(self.walker.generate(("the", "cat"), 3, FixedRng(0.5)), ["the", "cat", "ran"])

    def test_uniform_weighting(self) -> None:
        walker = ChainWalker(self.store, weighting="uniform")
        self.assertEqual(walker.generate(("the", "cat"), 3, FixedRng(0.4)), ["the", "cat", "sat"])
        self.assertEqual(walker.generate(("the", "cat"), 3, FixedRng(0.6)), ["the", "cat", "ran"])

    def test_length_never_exceeds_max_length(self) -> None:
        self.store.bulk_load([
            (("a", "b"), ("a", "b"), [(1, "a")]),
            (("b", "a"), ("a", "b"), [(1, "b")]),
        ])
        for max_length in (2, 3, 10, 57):
            words = self.walker.generate(("a", "b"), max_length, random.Random(7))
            self.assertEqual(len(words), max_length)

    def test_max_length_two_returns_seed(self) -> None:
        self.assertEqual(self.walker.generate(("the", "cat"), 2), ["the", "cat"])

    def test_output_never_shorter_than_seed(self) -> None:
        self.store.bulk_load([(("x", "y"), ("x", "y"), [(1, "$")])])
        result = self.walker.walk(("x", "y"), 10, random.Random(1))
        self.assertEqual(result.words, ["x", "y"])
        self.assertEqual(result.stop_reason, "end_token")

    def test_end_token_is_not_emitted(self) -> None:
        self.store.put(("cat", "sat"), ("the", "cat"), [(1, "$")])
        result = self.walker.walk(("the", "cat"), 10, FixedRng(0.0))
        self.assertEqual(result.words, ["the", "cat", "sat"])
        self.assertEqual(result.stop_reason, "end_token")

    def test_missing_seed_raises_empty_chain(self) -> None:
        with self.assertRaises(EmptyChain):
            self.walker.generate(("no", "entry"), 5, random.Random(0))

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(InvalidInput):
            self.walker.generate(("the", ""), 5)
        with self.assertRaises(InvalidInput):
            self.walker.generate(("the", "cat"), 1)
        with self.assertRaises(InvalidInput):
            self.walker.generate(("the", "cat"), 5, strict_topic=True)
        with self.assertRaises(InvalidInput):
            ChainWalker(self.store, weighting="softmax")
        with self.assertRaises(InvalidInput):
            ChainWalker(self.store, topic_boost=0)

    def test_single_candidate_chain_is_deterministic(self) -> None:
        self.store.bulk_load([
            (("one", "two"), ("one", "two"), [(1, "three")]),
            (("two", "three"), ("one", "two"), [(1, "four")]),
            (("three", "four"), ("one", "two"), [(1, "one")]),
            (("four", "one"), ("one", "two"), [(1, "two")]),
        ])
        first = self.walker.generate(("one", "two"), 20, random.Random(123))
        second = self.walker.generate(("one", "two"), 20, random.Random(456))
        self.assertEqual(first, second)
        self.assertEqual(first[:6], ["one", "two", "three", "four", "one", "two"])

    def test_fixed_seed_is_reproducible(self) -> None:
        self.store.bulk_load([
            (("a", "b"), ("a", "b"), [(1, "a"), (2, "b"), (3, "c")]),
            (("b", "a"), ("a", "b"), [(1, "b"), (1, "c")]),
            (("b", "b"), ("a", "b"), [(2, "a"), (1, "b")]),
            (("b", "c"), ("a", "b"), [(1, "a")]),
            (("c", "a"), ("a", "b"), [(1, "b")]),
            (("a", "c"), ("a", "b"), [(1, "a")]),
        ])
        runs = [self.walker.generate(("a", "b"), 30, random.Random(2024)) for _ in range(3)]
        self.assertEqual(runs[0], runs[1])
        self.assertEqual(runs[1], runs[2])

    def test_topic_boost_reweights_candidates(self) -> None:
        self.store.put(("my", "pet"), ("my", "pet"), [(1, "cat"), (1, "dog")])
        # without topic: total 2, 0.3 * 2 = 0.6 -> cat
        self.assertEqual(self.walker.generate(("my", "pet"), 3, FixedRng(0.3)), ["my", "pet", "cat"])
        # dog boosted x2: total 3, 0.3 * 3 = 0.9 -> cat; 0.4 * 3 = 1.2 -> dog
        self.assertEqual(
            self.walker.generate(("my", "pet"), 3, FixedRng(0.4), topic=("dog", "bone")),
            ["my", "pet", "dog"],
        )

    def test_default_weighting_reaches_position_zero(self) -> None:
        self.store.put(("pos", "run"), ("pos", "run"), [(0, "first"), (1, "second")])
        walker = ChainWalker(self.store)
        self.assertEqual(walker.weighting, "uniform")
        picked = {walker.generate(("pos", "run"), 3, random.Random(seed))[-1] for seed in range(200)}
        self.assertEqual(picked, {"first", "second"})
        self.assertEqual(walker.generate(("pos", "run"), 3, FixedRng(0.0)), ["pos", "run", "first"])

    def test_largest_seq_num_walks_under_count_weighting(self) -> None:
        self.store.put(("big", "count"), ("big", "count"), [(2**31 - 1, "huge"), (0, "never")])
        self.assertEqual(self.walker.generate(("big", "count"), 3, FixedRng(0.999)), ["big", "count", "huge"])

    def test_strict_topic_rejects_seed_with_other_topic(self) -> None:
        with self.assertRaises(EmptyChain):
            self.walker.generate(("the", "cat"), 5, FixedRng(0.0), topic=("dog", "bone"), strict_topic=True)

    def test_strict_topic_stops_when_topic_changes(self) -> None:
        self.store.put(("cat", "sat"), ("other", "topic"), [(1, "down")])
        result = self.walker.walk(("the", "cat"), 10, FixedRng(0.0), topic=("the", "cat"), strict_topic=True)
        self.assertEqual(result.words, ["the", "cat", "sat"])
        self.assertEqual(result.stop_reason, "topic_changed")


if __name__ == "__main__":
    unittest.main()
