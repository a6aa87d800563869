#!/usr/bin/env python3
"""
Corpus Loading
==============
Reads training text for the Markov generator (and wordlists for
passphrases) from a file or standard input.

A corpus is split into units (usually words) on a delimiter. Surrounding
whitespace is stripped from every unit and empty units are dropped.
"""

import hashlib
import logging
import sys
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Optional, TextIO

from .errors import CorpusIOError, EmptyCorpusError
from .generators.markov import END, START

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = "\n"

# START/END are reserved for word boundaries in the model
_SENTINELS = str.maketrans('', '', START + END)


@dataclass(frozen=True)
class Corpus:
    """Raw corpus text plus the delimiter that separates training units."""
    text: str
    delimiter: str = DEFAULT_DELIMITER
    source: str = "<stdin>"

    @cached_property
    def units(self) -> tuple:
        """Non-empty, whitespace-stripped units in corpus order, sentinels removed."""
        pieces = self.text.split(self.delimiter) if self.delimiter else [self.text]
        cleaned = (p.translate(_SENTINELS).strip() for p in pieces)
        return tuple(unit for unit in cleaned if unit)

    @cached_property
    def fingerprint(self) -> str:
        """SHA-256 of the corpus text (content identity, not path)."""
        return hashlib.sha256(self.text.encode("utf-8")).hexdigest()

    @property
    def alphabet(self) -> set:
        return {symbol for unit in self.units for symbol in unit}

    def __len__(self) -> int:
        return len(self.units)


def load_corpus(path: Optional[Path] = None,
                delimiter: str = DEFAULT_DELIMITER,
                stream: Optional[TextIO] = None) -> Corpus:
    """
    Load a corpus from a path, or from standard input when path is None.

    Args:
        path: File to read (UTF-8)
        delimiter: Separator between training units
        stream: Text stream used instead of sys.stdin when path is None

    Raises:
        CorpusIOError: The file is missing, unreadable or not UTF-8
        EmptyCorpusError: No units remain after splitting
    """
    if path is not None:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise CorpusIOError(f"Corpus file not found: {path}") from None
        except UnicodeDecodeError as e:
            raise CorpusIOError(f"Corpus file is not valid UTF-8: {path} ({e.reason})") from None
        except OSError as e:
            raise CorpusIOError(f"Cannot read corpus file {path}: {e.strerror or e}") from None
        source = str(path)
    else:
        stream = stream if stream is not None else sys.stdin
        try:
            text = stream.read()
        except (OSError, UnicodeDecodeError) as e:
            raise CorpusIOError(f"Cannot read corpus from standard input: {e}") from None
        source = "<stdin>"

    corpus = Corpus(text=text, delimiter=delimiter, source=source)
    if not corpus.units:
        raise EmptyCorpusError(f"Corpus is empty: {source}")

    logger.debug(f"Loaded {len(corpus)} units over {len(corpus.alphabet)} symbols from {source}")
    return corpus
