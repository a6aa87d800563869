#!/usr/bin/env python3
"""
Markov Model Cache
==================
Stores trained back-off chains on disk so repeated runs over the same
corpus skip training.

Each entry is a JSON file named after a hash of its fingerprint: the
corpus content hash, order, prior, back-off flag and delimiter. Changing
any of them selects a different file. Unreadable or inconsistent entries
count as misses; the cache never causes a command to fail.

Usage:
    cache = ModelCache()
    chain = cache.get_or_train(corpus, order=3, prior=0.0, backoff=False)
"""

import hashlib
import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .config import config
from .corpus import Corpus
from .errors import CacheDeserializeError
from .generators.markov import BackoffChain, MarkovTrainer
from .settings import expand_cache_dir

logger = logging.getLogger(__name__)

CACHE_FORMAT = 1


class CachePolicy(Enum):
    """How the cache is consulted for one run."""
    BYPASS = "bypass"                 # --no-cache
    USE_OR_BUILD = "use_or_build"     # default
    FORCE_REBUILD = "force_rebuild"   # --rebuild-cache

    @classmethod
    def from_flags(cls, no_cache: bool = False, rebuild_cache: bool = False) -> 'CachePolicy':
        if no_cache and rebuild_cache:
            raise ValueError("no_cache and rebuild_cache are mutually exclusive")
        if no_cache:
            return cls.BYPASS
        if rebuild_cache:
            return cls.FORCE_REBUILD
        return cls.USE_OR_BUILD


@dataclass(frozen=True)
class ModelFingerprint:
    """Everything a trained chain depends on."""
    corpus_hash: str
    order: int
    prior: float
    backoff: bool
    delimiter: str

    @classmethod
    def for_corpus(cls, corpus: Corpus, order: int, prior: float, backoff: bool) -> 'ModelFingerprint':
        return cls(
            corpus_hash=corpus.fingerprint,
            order=order,
            prior=float(prior),
            backoff=bool(backoff),
            delimiter=corpus.delimiter,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def key(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)


class ModelCache:
    """
    File cache for trained BackoffChains.

    Usage:
        cache = ModelCache(cache_dir="/tmp/models")
        chain = cache.get_or_train(corpus, 3, 0.0, True, CachePolicy.FORCE_REBUILD)
    """

    def __init__(self, cache_dir: Optional[str] = None, hash_length: Optional[int] = None):
        """
        Initialize the cache.

        Args:
            cache_dir: Directory for entries (default: markov.cache_dir in
                app.yaml, or RANDKIT_CACHE_DIR)
            hash_length: Hex digits of the fingerprint hash used in file names
        """
        cfg = config()
        if cache_dir:
            self.cache_dir = expand_cache_dir(cache_dir)
        else:
            self.cache_dir = cfg.cache_dir
        self.hash_length = hash_length or cfg.cache_hash_length
        if self.hash_length < 1:
            raise ValueError("markov.cache_hash_length must be positive")

    def _get_cache_path(self, fingerprint: ModelFingerprint) -> Path:
        """Get cache file path for a fingerprint"""
        key_hash = hashlib.md5(fingerprint.key.encode()).hexdigest()[:self.hash_length]
        return self.cache_dir / f"{key_hash}.json"

    def path_for(self, fingerprint: ModelFingerprint) -> Path:
        return self._get_cache_path(fingerprint)

    @staticmethod
    def serialize(fingerprint: ModelFingerprint, chain: BackoffChain) -> str:
        """Deterministic JSON text for an entry."""
        data = {
            'format': CACHE_FORMAT,
            'fingerprint': fingerprint.to_dict(),
            'chain': chain.to_dict(),
        }
        return json.dumps(data, indent=2, sort_keys=True)

    @staticmethod
    def deserialize(text: str, fingerprint: ModelFingerprint) -> BackoffChain:
        """
        Decode an entry written by serialize().

        Raises:
            CacheDeserializeError: Malformed or too deeply nested JSON,
                another format version, a different fingerprint, or a chain
                that is inconsistent or has nothing to sample
        """
        try:
            data = json.loads(text)
            if data['format'] != CACHE_FORMAT:
                raise CacheDeserializeError(f"unsupported cache format {data['format']!r}")
            if data['fingerprint'] != fingerprint.to_dict():
                raise CacheDeserializeError("fingerprint mismatch")
            chain = BackoffChain.from_dict(data['chain'])
        except CacheDeserializeError:
            raise
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError,
                RecursionError) as e:
            raise CacheDeserializeError(f"corrupt cache entry: {e}") from e

        if chain.order != fingerprint.order or chain.backoff != fingerprint.backoff:
            raise CacheDeserializeError("chain does not match fingerprint")
        return chain

    def load(self, fingerprint: ModelFingerprint) -> Optional[BackoffChain]:
        """Load a cached chain, or None on any kind of miss."""
        cache_path = self._get_cache_path(fingerprint)
        if not cache_path.exists():
            logger.debug(f"Cache miss: {cache_path}")
            return None

        try:
            text = cache_path.read_text(encoding="utf-8")
            chain = self.deserialize(text, fingerprint)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Cache entry unreadable, retraining: {cache_path} ({e})")
            return None
        except CacheDeserializeError as e:
            logger.debug(f"Cache entry rejected, retraining: {cache_path} ({e})")
            return None

        logger.debug(f"Cache hit: {cache_path}")
        return chain

    def save(self, fingerprint: ModelFingerprint, chain: BackoffChain) -> Optional[Path]:
        """
        Write an entry, replacing any previous one atomically.

        Returns the entry path, or None when the write failed.
        """
        cache_path = self._get_cache_path(fingerprint)
        text = self.serialize(fingerprint, chain)

        tmp_path = None
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode='w', encoding='utf-8', dir=self.cache_dir,
                prefix=f".{cache_path.stem}.", suffix='.tmp', delete=False,
            ) as f:
                tmp_path = Path(f.name)
                f.write(text)
            os.replace(tmp_path, cache_path)
        except OSError as e:
            logger.warning(f"Could not write model cache {cache_path}: {e}")
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink(missing_ok=True)
            return None

        logger.debug(f"Cached model at {cache_path}")
        return cache_path

    def get_or_train(self,
                     corpus: Corpus,
                     order: int,
                     prior: float = 0.0,
                     backoff: bool = False,
                     policy: CachePolicy = CachePolicy.USE_OR_BUILD) -> BackoffChain:
        """
        Return a chain for corpus, honoring the cache policy.

        Args:
            corpus: Loaded corpus
            order: Highest model order
            prior: Dirichlet prior (part of the fingerprint)
            backoff: Train the full back-off chain
            policy: BYPASS trains without touching disk; FORCE_REBUILD
                retrains and overwrites; USE_OR_BUILD reuses a valid entry
        """
        trainer = MarkovTrainer(order=order)

        if policy is CachePolicy.BYPASS:
            logger.debug("Model cache bypassed")
            return trainer.train_chain(corpus.units, backoff=backoff)

        fingerprint = ModelFingerprint.for_corpus(corpus, order, prior, backoff)

        if policy is CachePolicy.USE_OR_BUILD:
            chain = self.load(fingerprint)
            if chain is not None:
                return chain
        else:
            logger.debug("Rebuilding cached model")

        chain = trainer.train_chain(corpus.units, backoff=backoff)
        self.save(fingerprint, chain)
        return chain
