#!/usr/bin/env python3
"""
Markov Word Generator
=====================
Generates pronounceable words using character-level Markov chains trained
on a corpus of example words.

Key features:
- Any model order, from 0 (letter frequencies only) upwards
- Dirichlet prior smoothing, so unseen letters stay reachable
- Optional Katz-style back-off to lower orders for unseen contexts
- Length range with bounded retries

Theory:
-------
Markov chains model P(next_char | previous_n_chars). The "order" n determines
how much context is used:
- Order 1: Chaotic, many unrealistic combinations
- Order 2: Good balance, learns common patterns
- Order 3: More conservative, closer to training data
- Higher:  Tends to reproduce training words verbatim

Every word is padded with n START symbols and one END symbol before
training, so the model learns how words begin and how they finish.
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .entropy import get_random, weighted_choice

logger = logging.getLogger(__name__)

# Special tokens
START = '\x02'
END = '\x03'


# =============================================================================
# MARKOV CHAIN MODEL
# =============================================================================

@dataclass
class NGramModel:
    """
    Character-level n-gram counts for a single order.

    ``transitions`` maps a context of exactly ``order`` symbols to the
    observed counts of the symbol that followed it. Treat as read-only once
    trained.
    """
    order: int
    transitions: dict = field(default_factory=dict)

    def counts(self, context: str) -> Optional[dict]:
        """Counts for the trailing ``order`` symbols of context, or None."""
        key = context[-self.order:] if self.order else ''
        return self.transitions.get(key)

    @property
    def support(self) -> set:
        return {s for counts in self.transitions.values() for s in counts}

    def to_dict(self) -> dict:
        """Serialize model to dictionary"""
        return {
            'order': self.order,
            'transitions': {
                context: dict(sorted(counts.items()))
                for context, counts in sorted(self.transitions.items())
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'NGramModel':
        """Deserialize model from dictionary"""
        order = data['order']
        if not isinstance(order, int) or order < 0:
            raise ValueError(f"invalid model order: {order!r}")

        transitions = {}
        for context, counts in data['transitions'].items():
            if len(context) != order:
                raise ValueError(f"context {context!r} does not match order {order}")
            if not counts:
                raise ValueError(f"no counts after context {context!r}")
            checked = {}
            for symbol, count in counts.items():
                if not isinstance(count, int) or count < 1 or len(symbol) != 1:
                    raise ValueError(f"invalid count for {symbol!r} after {context!r}")
                checked[symbol] = count
            transitions[context] = checked
        return cls(order=order, transitions=transitions)


class MarkovTrainer:
    """Trains n-gram models on word lists"""

    def __init__(self, order: int = 3):
        self.order = order

    def train(self, words: Iterable[str]) -> NGramModel:
        """Train a model of this trainer's order on a list of words"""
        transitions = defaultdict(Counter)
        k = self.order

        for word in words:
            padded = START * k + word + END
            for i in range(len(padded) - k):
                context = padded[i:i + k]
                next_char = padded[i + k]
                transitions[context][next_char] += 1

        return NGramModel(
            order=k,
            transitions={ctx: dict(counts) for ctx, counts in transitions.items()},
        )

    def train_chain(self, words: Iterable[str], backoff: bool = False) -> 'BackoffChain':
        """
        Train every model the chain needs.

        With back-off the chain holds orders N, N-1, ..., 0. Without it only
        order N and the order-0 fallback are trained.
        """
        words = list(words)
        if backoff:
            orders = list(range(self.order, -1, -1))
        else:
            orders = [self.order, 0] if self.order else [0]

        logger.info(f"Training order-{self.order} model on {len(words)} words "
                    f"(back-off {'on' if backoff else 'off'})")
        models = [MarkovTrainer(order=k).train(words) for k in orders]
        return BackoffChain(models=models, backoff=backoff)


# =============================================================================
# BACK-OFF CHAIN
# =============================================================================

@dataclass
class BackoffChain:
    """
    Models ordered from the highest order down to order 0.

    The order-0 model sees every symbol of the corpus plus END, so a
    lookup through the chain always finds a distribution.
    """
    models: List[NGramModel]
    backoff: bool = False

    def __post_init__(self):
        if not self.models:
            raise ValueError("a back-off chain needs at least one model")
        orders = [m.order for m in self.models]
        if orders != sorted(orders, reverse=True) or len(set(orders)) != len(orders):
            raise ValueError(f"model orders must be strictly decreasing, got {orders}")
        if orders[-1] != 0:
            raise ValueError("the last model in a chain must be order 0")

    @property
    def order(self) -> int:
        return self.models[0].order

    @property
    def fallback(self) -> NGramModel:
        return self.models[-1]

    @property
    def alphabet(self) -> List[str]:
        """Every symbol the chain can emit, END included, sorted."""
        return sorted(self.fallback.support)

    def levels(self) -> List[NGramModel]:
        """Models consulted for a lookup, in order."""
        if self.backoff:
            return list(self.models)
        if len(self.models) == 1:
            return [self.fallback]
        return [self.models[0], self.fallback]

    def to_dict(self) -> dict:
        return {
            'backoff': self.backoff,
            'models': [m.to_dict() for m in self.models],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'BackoffChain':
        backoff = data['backoff']
        if not isinstance(backoff, bool):
            raise ValueError(f"invalid back-off flag: {backoff!r}")
        chain = cls(
            models=[NGramModel.from_dict(m) for m in data['models']],
            backoff=backoff,
        )

        # Every lookup ends at the fallback, so it must be able to start a word
        fallback = chain.fallback.transitions
        if set(fallback) != {''} or not set(fallback['']) - {END}:
            raise ValueError("order-0 model has no symbols to emit")
        return chain


# =============================================================================
# SAMPLER
# =============================================================================

class MarkovSampler:
    """
    Draws the next symbol for a context.

    The first level of the chain that has counts for the context supplies the
    candidates. With ``prior > 0`` every symbol in the alphabet gets
    ``count + prior``; with ``prior == 0`` only observed symbols are
    candidates.
    """

    def __init__(self, chain: BackoffChain, prior: float = 0.0, rng=None):
        if prior < 0:
            raise ValueError(f"prior must be >= 0, got {prior}")
        self.chain = chain
        self.prior = prior
        self.rng = rng or get_random()
        self._alphabet = chain.alphabet

    def distribution(self, context: str,
                     exclude: Optional[set] = None) -> List[Tuple[str, float]]:
        """
        Smoothed (symbol, weight) pairs for context, heaviest first.

        Levels whose candidates are all excluded are skipped.
        """
        exclude = exclude or set()

        for model in self.chain.levels():
            counts = model.counts(context)
            if counts is None:
                continue

            if self.prior > 0:
                weights = {s: counts.get(s, 0) + self.prior for s in self._alphabet}
            else:
                weights = dict(counts)

            items = [(s, w) for s, w in weights.items() if s not in exclude and w > 0]
            if items:
                items.sort(key=lambda item: (-item[1], item[0]))
                return items

        return []

    def sample(self, context: str, exclude: Optional[set] = None) -> str:
        """Draw one symbol for context."""
        items = self.distribution(context, exclude)
        if not items:
            raise ValueError(f"no symbol available after context {context!r}")
        return weighted_choice(items, rng=self.rng)


# =============================================================================
# WORD GENERATOR
# =============================================================================

class MarkovGenerator:
    """Generates words using a trained back-off chain"""

    def __init__(self,
                 chain: BackoffChain,
                 prior: float = 0.0,
                 rng=None,
                 max_attempts: int = 1000):
        """
        Initialize generator.

        Args:
            chain: Trained BackoffChain (shared, read-only)
            prior: Dirichlet prior added to every symbol's count
            rng: Random source exposing random(); defaults to SecureRandom
            max_attempts: Restarts allowed before forcing a max-length word
        """
        self.chain = chain
        self.sampler = MarkovSampler(chain, prior=prior, rng=rng)
        self.max_attempts = max_attempts

    def _initial_context(self) -> str:
        return START * self.chain.order

    def _advance(self, context: str, symbol: str) -> str:
        order = self.chain.order
        return (context + symbol)[-order:] if order else ''

    def _attempt(self, min_length: int, max_length: int) -> Optional[str]:
        """One pass; None when END came too early."""
        word = []
        context = self._initial_context()

        while len(word) < max_length:
            symbol = self.sampler.sample(context)
            if symbol == END:
                if len(word) >= min_length:
                    return ''.join(word)
                return None
            word.append(symbol)
            context = self._advance(context, symbol)

        return ''.join(word)

    def _forced(self, max_length: int) -> str:
        """Build a max-length word, never drawing END."""
        word = []
        context = self._initial_context()
        while len(word) < max_length:
            symbol = self.sampler.sample(context, exclude={END})
            word.append(symbol)
            context = self._advance(context, symbol)
        return ''.join(word)

    def generate(self,
                 min_length: int = 2,
                 max_length: int = 10,
                 capitalize: bool = False) -> str:
        """
        Generate a single word.

        Args:
            min_length: Minimum word length (inclusive)
            max_length: Maximum word length (inclusive)
            capitalize: Uppercase the first letter

        Returns:
            Generated word with min_length <= len(word) <= max_length
        """
        if min_length > max_length:
            raise ValueError(f"min_length {min_length} exceeds max_length {max_length}")

        word = None
        for _ in range(self.max_attempts):
            word = self._attempt(min_length, max_length)
            if word is not None:
                break
        else:
            logger.debug(f"No word of length {min_length}-{max_length} after "
                         f"{self.max_attempts} attempts, forcing length {max_length}")
            word = self._forced(max_length)

        if capitalize and word:
            word = word[0].upper() + word[1:]
        return word

    def generate_batch(self, count: int, **kwargs) -> List[str]:
        """
        Generate multiple words.

        Each word starts from a fresh context; duplicates are kept.

        Args:
            count: Number of words to generate
            **kwargs: Arguments for generate()
        """
        return [self.generate(**kwargs) for _ in range(count)]
