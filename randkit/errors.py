#!/usr/bin/env python3
"""
Errors
======
Exception types raised by randkit. Each carries the process exit code the
CLI reports for it.
"""

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_CORPUS_IO = 3
EXIT_EMPTY_CORPUS = 4
EXIT_INVALID_RANGE = 5
EXIT_INTERRUPTED = 130


class RandkitError(Exception):
    """Base class for errors reported to the user."""
    exit_code = EXIT_FAILURE


class CorpusIOError(RandkitError):
    """The corpus (or wordlist, or analyzed input) could not be read."""
    exit_code = EXIT_CORPUS_IO


class EmptyCorpusError(RandkitError):
    """The input contained no usable symbols."""
    exit_code = EXIT_EMPTY_CORPUS


class InvalidRangeError(RandkitError):
    """A numeric argument is out of range or inconsistent with another."""
    exit_code = EXIT_INVALID_RANGE


class CacheDeserializeError(RandkitError):
    """A cached model could not be decoded. Never reaches the user."""


class ConfigError(RandkitError):
    """The packaged app.yaml is missing or malformed."""
