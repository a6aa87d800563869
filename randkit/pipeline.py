#!/usr/bin/env python3
"""
Markov Pipeline
===============
Corpus load -> train or cache hit -> word generation, for one invocation.

Usage:
    from randkit.pipeline import MarkovOptions, generate_markov_words

    options = MarkovOptions(order=2, backoff=True, capitalize=True)
    words = generate_markov_words(options, count=5, path="names.txt")
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, TextIO

from .config import config
from .corpus import DEFAULT_DELIMITER, load_corpus
from .errors import InvalidRangeError
from .generators.markov import MarkovGenerator
from .model_cache import CachePolicy, ModelCache

logger = logging.getLogger(__name__)


@dataclass
class MarkovOptions:
    """Parameters of the markov subcommand."""
    min_length: int = 2
    max_length: int = 10
    order: int = 3
    prior: float = 0.0
    backoff: bool = False
    capitalize: bool = False
    delimiter: str = DEFAULT_DELIMITER
    policy: CachePolicy = CachePolicy.USE_OR_BUILD

    def validate(self):
        """
        Reject inconsistent parameters before any I/O happens.

        Raises:
            InvalidRangeError: On the first problem found
        """
        if self.max_length == 0:
            raise InvalidRangeError("Maximum length must be greater than 0")
        if self.min_length < 0 or self.max_length < 0:
            raise InvalidRangeError("Word lengths cannot be negative")
        if self.min_length > self.max_length:
            raise InvalidRangeError(
                f"Minimum length ({self.min_length}) is greater than "
                f"maximum length ({self.max_length})"
            )
        if self.order < 0:
            raise InvalidRangeError(f"Order cannot be negative (got {self.order})")
        if self.order == 0 and self.backoff:
            raise InvalidRangeError("Back-off requires an order of at least 1")
        if not self.prior >= 0.0:
            raise InvalidRangeError(f"Prior must be a non-negative number (got {self.prior})")
        if not self.delimiter:
            raise InvalidRangeError("Delimiter cannot be empty")


def generate_markov_words(options: MarkovOptions,
                          count: int = 1,
                          path: Optional[Path] = None,
                          stream: Optional[TextIO] = None,
                          cache: Optional[ModelCache] = None,
                          rng=None) -> List[str]:
    """
    Generate count words from the corpus at path (or stdin).

    Args:
        options: Validated before anything is read
        count: Number of words
        path: Corpus file, None for standard input
        stream: Replacement for standard input
        cache: Model cache (created from config when needed)
        rng: Random source for sampling

    Raises:
        InvalidRangeError, CorpusIOError, EmptyCorpusError
    """
    options.validate()
    if count < 0:
        raise InvalidRangeError(f"Count cannot be negative (got {count})")

    corpus = load_corpus(path, delimiter=options.delimiter, stream=stream)

    # Construction touches no files; BYPASS never reads or writes
    cache = cache or ModelCache()
    chain = cache.get_or_train(
        corpus,
        order=options.order,
        prior=options.prior,
        backoff=options.backoff,
        policy=options.policy,
    )

    logger.debug(f"Generating {count} words of length "
                 f"{options.min_length}-{options.max_length}")
    generator = MarkovGenerator(
        chain,
        prior=options.prior,
        rng=rng,
        max_attempts=config().max_attempts,
    )
    return generator.generate_batch(
        count,
        min_length=options.min_length,
        max_length=options.max_length,
        capitalize=options.capitalize,
    )
