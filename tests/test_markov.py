"""
Tests for the Markov Word Generator
===================================
Tests for NGramModel training, BackoffChain, MarkovSampler and
MarkovGenerator in randkit/generators/markov.py.
"""

import random
import sys
from collections import Counter
from pathlib import Path

import pytest

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from randkit.generators.markov import (
    END,
    START,
    BackoffChain,
    MarkovGenerator,
    MarkovSampler,
    MarkovTrainer,
    NGramModel,
)

BANANA = ["banana", "anana", "bandana"]


def bigrams(words):
    return {w[i:i + 2] for w in words for i in range(len(w) - 1)}


class TestTraining:
    """Tests for MarkovTrainer.train()."""

    def test_order_two_transitions(self):
        """Test padding and window counts for a single word."""
        model = MarkovTrainer(order=2).train(["ab"])
        assert model.order == 2
        assert model.transitions == {
            START + START: {"a": 1},
            START + "a": {"b": 1},
            "ab": {END: 1},
        }

    def test_counts_accumulate(self):
        """Test repeated transitions are summed."""
        model = MarkovTrainer(order=1).train(["aa", "ab"])
        assert model.transitions[START] == {"a": 2}
        assert model.transitions["a"] == {"a": 1, "b": 1, END: 1}

    def test_order_zero_is_symbol_frequency(self):
        """Test order 0 counts every symbol plus one END per word."""
        model = MarkovTrainer(order=0).train(["ab", "a"])
        assert model.transitions == {"": {"a": 2, "b": 1, END: 2}}

    def test_no_zero_counts(self):
        """Test every stored count is at least one."""
        model = MarkovTrainer(order=3).train(BANANA)
        assert all(c >= 1 for counts in model.transitions.values() for c in counts.values())

    def test_training_is_deterministic(self):
        """Test the same corpus always yields the same model."""
        a = MarkovTrainer(order=3).train(BANANA)
        b = MarkovTrainer(order=3).train(BANANA)
        assert a == b
        assert a.to_dict() == b.to_dict()

    def test_every_context_can_terminate_or_continue(self):
        """Test words both start and end through learned contexts."""
        model = MarkovTrainer(order=2).train(BANANA)
        assert START * 2 in model.transitions
        assert any(END in counts for counts in model.transitions.values())


class TestBackoffChain:
    """Tests for chain construction and validation."""

    def test_chain_without_backoff(self):
        """Test only the top order and order 0 are trained."""
        chain = MarkovTrainer(order=3).train_chain(BANANA, backoff=False)
        assert [m.order for m in chain.models] == [3, 0]
        assert chain.order == 3
        assert not chain.backoff

    def test_chain_with_backoff(self):
        """Test every order down to 0 is trained."""
        chain = MarkovTrainer(order=3).train_chain(BANANA, backoff=True)
        assert [m.order for m in chain.models] == [3, 2, 1, 0]

    def test_order_zero_chain(self):
        """Test an order-0 chain holds a single model."""
        chain = MarkovTrainer(order=0).train_chain(BANANA)
        assert [m.order for m in chain.models] == [0]
        assert chain.levels() == [chain.fallback]

    def test_alphabet_has_full_support(self):
        """Test the fallback covers every corpus symbol and END."""
        chain = MarkovTrainer(order=2).train_chain(BANANA)
        assert set(chain.alphabet) == {"a", "b", "n", "d", END}

    def test_levels_without_backoff_skip_intermediate_orders(self):
        """Test lookups jump straight from order N to order 0."""
        chain = MarkovTrainer(order=3).train_chain(BANANA, backoff=True)
        no_backoff = BackoffChain(models=chain.models, backoff=False)
        assert [m.order for m in no_backoff.levels()] == [3, 0]

    def test_rejects_missing_order_zero(self):
        """Test a chain must end with the order-0 fallback."""
        with pytest.raises(ValueError):
            BackoffChain(models=[MarkovTrainer(order=2).train(BANANA)])

    def test_rejects_unsorted_orders(self):
        """Test model orders must decrease."""
        models = [MarkovTrainer(order=k).train(BANANA) for k in (1, 2, 0)]
        with pytest.raises(ValueError):
            BackoffChain(models=models)

    def test_dict_round_trip(self):
        """Test to_dict/from_dict preserves counts and order list."""
        chain = MarkovTrainer(order=2).train_chain(BANANA, backoff=True)
        restored = BackoffChain.from_dict(chain.to_dict())
        assert restored == chain

    def test_from_dict_rejects_bad_counts(self):
        """Test zero counts are not accepted when loading."""
        data = {"order": 0, "transitions": {"": {"a": 0}}}
        with pytest.raises(ValueError):
            NGramModel.from_dict(data)

    def test_from_dict_rejects_empty_counts(self):
        """Test a context with no successors is not accepted."""
        with pytest.raises(ValueError):
            NGramModel.from_dict({"order": 1, "transitions": {"a": {}}})

    def test_from_dict_rejects_fallback_without_symbols(self):
        """Test a chain whose order-0 model can only end words is refused."""
        data = MarkovTrainer(order=1).train_chain(BANANA).to_dict()
        data["models"][-1]["transitions"] = {"": {END: 2}}
        with pytest.raises(ValueError):
            BackoffChain.from_dict(data)


class TestSampler:
    """Tests for MarkovSampler distributions and draws."""

    @pytest.fixture
    def chain(self):
        return MarkovTrainer(order=2).train_chain(BANANA, backoff=False)

    def test_prior_zero_uses_observed_counts(self, chain):
        """Test prior 0 gives exactly the observed relative frequencies."""
        sampler = MarkovSampler(chain, prior=0.0)
        dist = dict(sampler.distribution("na"))
        assert dist == chain.models[0].transitions["na"]

    def test_distribution_sorted_by_weight(self, chain):
        """Test candidates are ordered heaviest first."""
        sampler = MarkovSampler(chain, prior=0.0)
        weights = [w for _, w in sampler.distribution(START * 2)]
        assert weights == sorted(weights, reverse=True)

    def test_unseen_context_jumps_to_order_zero(self, chain):
        """Test without back-off an unseen context uses order 0 directly."""
        sampler = MarkovSampler(chain, prior=0.0)
        dist = dict(sampler.distribution("zz"))
        assert dist == chain.fallback.transitions[""]

    def test_backoff_tries_lower_orders(self):
        """Test back-off uses the trailing context at order N-1."""
        chain = MarkovTrainer(order=2).train_chain(BANANA, backoff=True)
        sampler = MarkovSampler(chain, prior=0.0)
        # "xa" never occurs at order 2, but "a" does at order 1
        dist = dict(sampler.distribution("xa"))
        assert dist == chain.models[1].transitions["a"]

    def test_prior_gives_full_alphabet_support(self, chain):
        """Test prior > 0 makes every symbol reachable from any context."""
        sampler = MarkovSampler(chain, prior=0.01)
        for context in (START * 2, "na", "zz", "dd"):
            dist = dict(sampler.distribution(context))
            assert set(dist) == set(chain.alphabet)
            assert all(w > 0 for w in dist.values())

    def test_prior_adds_to_observed_counts(self, chain):
        """Test smoothing is count + prior per symbol."""
        sampler = MarkovSampler(chain, prior=0.5)
        dist = dict(sampler.distribution("ba"))
        assert dist["n"] == chain.models[0].transitions["ba"]["n"] + 0.5
        assert dist["d"] == 0.5

    def test_prior_zero_never_draws_unseen(self, chain):
        """Test draws stay within the observed support."""
        sampler = MarkovSampler(chain, prior=0.0, rng=random.Random(7))
        observed = set(chain.models[0].transitions["ba"])
        draws = {sampler.sample("ba") for _ in range(500)}
        assert draws <= observed

    def test_prior_reaches_unseen_symbols(self, chain):
        """Test a large prior eventually draws unobserved symbols."""
        sampler = MarkovSampler(chain, prior=10.0, rng=random.Random(3))
        draws = {sampler.sample("ba") for _ in range(500)}
        assert draws == set(chain.alphabet)

    def test_sampling_follows_weights(self, chain):
        """Test draw frequencies track the counts."""
        sampler = MarkovSampler(chain, prior=0.0, rng=random.Random(11))
        counts = Counter(sampler.sample("") for _ in range(4000))
        expected = chain.fallback.transitions[""]
        total = sum(expected.values())
        for symbol, count in expected.items():
            assert counts[symbol] / 4000 == pytest.approx(count / total, abs=0.03)

    def test_exclude_end(self, chain):
        """Test END can be excluded, falling back when nothing else remains."""
        sampler = MarkovSampler(chain, prior=0.0, rng=random.Random(5))
        for _ in range(200):
            assert sampler.sample("na", exclude={END}) != END

    def test_same_seed_same_draws(self, chain):
        """Test an injected seeded source makes sampling reproducible."""
        a = MarkovSampler(chain, rng=random.Random(42))
        b = MarkovSampler(chain, rng=random.Random(42))
        assert [a.sample(START * 2) for _ in range(50)] == [b.sample(START * 2) for _ in range(50)]

    def test_negative_prior_rejected(self, chain):
        """Test a negative prior is invalid."""
        with pytest.raises(ValueError):
            MarkovSampler(chain, prior=-1.0)


class TestGenerator:
    """Tests for MarkovGenerator word generation."""

    def test_lengths_within_range(self):
        """Test every word satisfies min <= len <= max."""
        chain = MarkovTrainer(order=2).train_chain(BANANA, backoff=True)
        gen = MarkovGenerator(chain, prior=0.05, rng=random.Random(1))
        for word in gen.generate_batch(300, min_length=3, max_length=6):
            assert 3 <= len(word) <= 6

    def test_banana_bigrams_all_observed(self):
        """Test order 2, prior 0 output only uses corpus bigrams."""
        chain = MarkovTrainer(order=2).train_chain(BANANA, backoff=False)
        gen = MarkovGenerator(chain, prior=0.0, rng=random.Random(2))
        allowed = bigrams(BANANA)
        for word in gen.generate_batch(300, min_length=3, max_length=6):
            assert 3 <= len(word) <= 6
            assert bigrams([word]) <= allowed

    def test_max_length_forces_termination(self):
        """Test words stop at max even without END."""
        chain = MarkovTrainer(order=1).train_chain(["aaaaaaaaaaaaaaaaaaaa"])
        gen = MarkovGenerator(chain, rng=random.Random(4))
        for word in gen.generate_batch(50, min_length=1, max_length=4):
            assert 1 <= len(word) <= 4

    def test_retry_budget_falls_back_to_max_length(self):
        """Test words too short for min are forced to max after the budget."""
        chain = MarkovTrainer(order=1).train_chain(["a"])
        gen = MarkovGenerator(chain, rng=random.Random(9), max_attempts=5)
        assert gen.generate(min_length=3, max_length=5) == "aaaaa"

    def test_capitalize(self):
        """Test only the first letter is uppercased."""
        chain = MarkovTrainer(order=2).train_chain(BANANA)
        gen = MarkovGenerator(chain, rng=random.Random(6))
        word = gen.generate(min_length=3, max_length=6, capitalize=True)
        assert word[0] == "B" or word[0] == "A"
        assert word[1:] == word[1:].lower()

    def test_order_zero_generation(self):
        """Test an order-0 chain still produces valid words."""
        chain = MarkovTrainer(order=0).train_chain(BANANA)
        gen = MarkovGenerator(chain, rng=random.Random(8))
        for word in gen.generate_batch(100, min_length=2, max_length=5):
            assert 2 <= len(word) <= 5
            assert set(word) <= {"a", "b", "n", "d"}

    def test_min_equals_max(self):
        """Test an exact-length range."""
        chain = MarkovTrainer(order=2).train_chain(BANANA, backoff=True)
        gen = MarkovGenerator(chain, prior=0.01, rng=random.Random(10))
        assert all(len(w) == 4 for w in gen.generate_batch(50, min_length=4, max_length=4))

    def test_min_greater_than_max(self):
        """Test an inverted range is rejected."""
        chain = MarkovTrainer(order=2).train_chain(BANANA)
        with pytest.raises(ValueError):
            MarkovGenerator(chain).generate(min_length=5, max_length=3)

    def test_batch_count(self):
        """Test generate_batch returns count words."""
        chain = MarkovTrainer(order=2).train_chain(BANANA)
        gen = MarkovGenerator(chain, rng=random.Random(12))
        assert len(gen.generate_batch(7, min_length=3, max_length=6)) == 7
        assert gen.generate_batch(0) == []

    def test_round_tripped_chain_generates_identically(self):
        """Test a deserialized chain makes the same draws under the same seed."""
        chain = MarkovTrainer(order=3).train_chain(BANANA, backoff=True)
        restored = BackoffChain.from_dict(chain.to_dict())
        a = MarkovGenerator(chain, prior=0.1, rng=random.Random(99))
        b = MarkovGenerator(restored, prior=0.1, rng=random.Random(99))
        assert a.generate_batch(40, min_length=2, max_length=8) == \
            b.generate_batch(40, min_length=2, max_length=8)
