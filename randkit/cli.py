#!/usr/bin/env python3
"""
randkit CLI
===========
Command-line interface for random data generation and analysis.

Usage:
    randkit generate hex 32
    randkit generate password -S 20 5
    randkit generate username -C complex 3
    randkit generate markov -i names.txt -o 2 -b 10
    randkit analyze key.bin
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path

from . import __version__
from .config import config
from .errors import (
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_USAGE,
    ConfigError,
    RandkitError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Writes results to stdout and errors to stderr."""

    def __init__(self, stdout=None, stderr=None):
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def print(self, *args, **kwargs):
        print(*args, file=self.stdout, **kwargs)

    def lines(self, items):
        for item in items:
            self.print(item)

    def write_bytes(self, data: bytes):
        buffer = getattr(self.stdout, 'buffer', None)
        if buffer is not None:
            buffer.write(data)
            buffer.flush()
        else:
            self.stdout.write(data.decode('latin-1'))

    def error(self, msg: str):
        print(f"Error: {msg}", file=self.stderr)


def setup_logging(debug: bool = False, verbose: bool = False, quiet: bool = False):
    """Configure the root logger on stderr from the verbosity flags."""
    if debug:
        level = logging.DEBUG
        fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    elif verbose:
        level = logging.DEBUG
        fmt = "%(asctime)s %(levelname)s %(message)s"
    elif quiet:
        level = logging.WARNING
        fmt = "%(asctime)s %(levelname)s %(message)s"
    else:
        level = logging.INFO
        fmt = "%(asctime)s %(levelname)s %(message)s"

    logging.basicConfig(level=level, format=fmt, datefmt="%Y-%m-%d %H:%M:%S", stream=sys.stderr)
    logging.getLogger().setLevel(level)


def unescape(value: str) -> str:
    """Turn backslash escapes typed on the command line (\\n, \\t) into characters."""
    return value.encode('latin-1', 'backslashreplace').decode('unicode_escape')


def non_negative(value: str) -> int:
    """argparse type for lengths and counts."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {number}")
    return number


def _count(args) -> int:
    return 1 if args.count is None else args.count


# =============================================================================
# Commands
# =============================================================================

def cmd_bytes(args, out: Output):
    """Write raw random bytes."""
    from .generators import generate_bytes

    out.write_bytes(generate_bytes(args.length))
    return EXIT_OK


def cmd_hex(args, out: Output):
    """Random bytes as hexadecimal."""
    from .generators import generate_hex

    out.print(generate_hex(args.length, uppercase=args.uppercase))
    return EXIT_OK


def cmd_base64(args, out: Output):
    """Random bytes as Base64."""
    from .generators import generate_base64

    out.print(generate_base64(args.length, url_safe=args.url_safe))
    return EXIT_OK


def cmd_password(args, out: Output):
    """Generate passwords."""
    from .generators import generate_password

    out.lines(
        generate_password(args.length, digits=args.digits, symbols=args.symbols)
        for _ in range(_count(args))
    )
    return EXIT_OK


def cmd_passphrase(args, out: Output):
    """Generate passphrases from a wordlist."""
    from .corpus import load_corpus
    from .generators import generate_passphrase

    delimiter = unescape(args.delimiter)
    if not delimiter:
        out.error("Delimiter cannot be empty")
        return EXIT_FAILURE

    wordlist = load_corpus(args.path, delimiter=delimiter)
    words = list(wordlist.units)
    logger.debug(f"Loaded {len(words)} words from {wordlist.source}")

    separator = unescape(args.separator)
    out.lines(
        generate_passphrase(words, args.length, separator=separator)
        for _ in range(_count(args))
    )
    return EXIT_OK


def cmd_username(args, out: Output):
    """Generate pronounceable usernames."""
    from .generators import generate_complex_username, generate_simple_username

    generate = {
        'simple': generate_simple_username,
        'complex': generate_complex_username,
    }[args.style]

    out.lines(
        generate(args.length, capitalize=args.capitalize)
        for _ in range(_count(args))
    )
    return EXIT_OK


def cmd_digits(args, out: Output):
    """Generate digit sequences."""
    from .generators import generate_digits

    out.lines(generate_digits(args.length) for _ in range(_count(args)))
    return EXIT_OK


def cmd_number(args, out: Output):
    """Generate numbers in a range."""
    from .generators import generate_number

    numbers = [generate_number(args.minimum, args.maximum) for _ in range(_count(args))]
    out.lines(numbers)
    return EXIT_OK


def cmd_markov(args, out: Output):
    """Generate words from a Markov model trained on a corpus."""
    from .model_cache import CachePolicy
    from .pipeline import MarkovOptions, generate_markov_words

    options = MarkovOptions(
        min_length=args.minimum,
        max_length=args.maximum,
        order=args.order,
        prior=args.prior,
        backoff=args.backoff,
        capitalize=args.capitalize,
        delimiter=unescape(args.delimiter),
        policy=CachePolicy.from_flags(args.no_cache, args.rebuild_cache),
    )

    words = generate_markov_words(options, count=_count(args), path=args.input)
    out.lines(words)
    return EXIT_OK


def cmd_analyze(args, out: Output):
    """Print byte statistics for a file or stdin."""
    from rich.console import Console

    from .analysis import analyze_bytes, read_input, render_report

    report = analyze_bytes(read_input(args.input))
    render_report(report, console=Console(file=out.stdout))
    return EXIT_OK


GENERATE_COMMANDS = {
    'bytes': cmd_bytes,
    'hex': cmd_hex,
    'base64': cmd_base64,
    'password': cmd_password,
    'passphrase': cmd_passphrase,
    'username': cmd_username,
    'digits': cmd_digits,
    'number': cmd_number,
    'markov': cmd_markov,
}


# =============================================================================
# Parser
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    cfg = config()

    parser = argparse.ArgumentParser(
        prog='randkit',
        description='randkit - Random Secrets, Usernames & Words',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate hex 32
  %(prog)s generate password --no-symbols 16 5
  %(prog)s generate passphrase -p words.txt -s - 4
  %(prog)s generate username -C complex 3 10
  %(prog)s generate markov -i names.txt --order 2 --backoff -C 10
  %(prog)s analyze key.bin
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('--debug', '-d', action='store_true', help='Enable debugging output')
    verbosity.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output')
    verbosity.add_argument('--quiet', '-q', action='store_true', help='Suppress informational messages')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    gen = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate a secret, username or word')
    kinds = gen.add_subparsers(dest='kind', help='What to generate')

    p = kinds.add_parser('bytes', help='Generate random bytes')
    p.add_argument('length', type=non_negative, help='The number of bytes to generate')

    p = kinds.add_parser('hex', help='Generate random bytes encoded as a hexadecimal string')
    p.add_argument('--uppercase', '-u', action='store_true', help='Print hexadecimal digits in uppercase')
    p.add_argument('length', type=non_negative, help='The number of bytes to generate')

    p = kinds.add_parser('base64', help='Generate random bytes encoded as a Base64 string')
    p.add_argument('--url-safe', '-u', action='store_true', help='Use a URL-safe alphabet')
    p.add_argument('length', type=non_negative, help='The number of bytes to generate')

    p = kinds.add_parser('password', help='Generate a random password')
    p.add_argument('--no-digits', '-D', dest='digits', action='store_false', help="Don't include any digits")
    p.add_argument('--no-symbols', '-S', dest='symbols', action='store_false', help="Don't include any symbols")
    p.add_argument('length', type=non_negative, help='The number of characters to generate')
    p.add_argument('count', type=non_negative, nargs='?', help='How many passwords to generate')

    p = kinds.add_parser('passphrase', help='Generate a passphrase from words in a wordlist')
    p.add_argument('--path', '-p', type=Path, help='The wordlist file to read (default: stdin)')
    p.add_argument('--delimiter', '-D', default='\\n',
                   help='The string separating words in the wordlist (default: \\n)')
    p.add_argument('--separator', '-s', default=' ', help='The string placed between words (default: space)')
    p.add_argument('length', type=non_negative, help='The number of words to generate')
    p.add_argument('count', type=non_negative, nargs='?', help='How many passphrases to generate')

    p = kinds.add_parser('username', help='Generate a random pronounceable username')
    p.add_argument('--capitalize', '-C', action='store_true', help='Make the first letter uppercase')
    styles = p.add_subparsers(dest='style', help='Username style')
    styles.required = True
    for style, unit, help_text in (
        ('simple', 'characters', 'Alternate between vowels and consonants'),
        ('complex', 'syllables', 'Build the username from random syllables'),
    ):
        s = styles.add_parser(style, help=help_text)
        s.add_argument('--capitalize', '-C', action='store_true', default=argparse.SUPPRESS,
                       help='Make the first letter uppercase')
        s.add_argument('length', type=non_negative, help=f'The number of {unit} to generate')
        s.add_argument('count', type=non_negative, nargs='?', help='How many usernames to generate')

    p = kinds.add_parser('digits', help='Generate a random sequence of digits')
    p.add_argument('length', type=non_negative, help='The number of digits to generate')
    p.add_argument('count', type=non_negative, nargs='?', help='How many sequences to generate')

    p = kinds.add_parser('number', help='Generate a random number')
    p.add_argument('minimum', type=int, help='The smallest number that can be generated')
    p.add_argument('maximum', type=int, help='The largest number that can be generated')
    p.add_argument('count', type=non_negative, nargs='?', help='How many numbers to generate')

    p = kinds.add_parser('markov', help='Generate a random word using a Markov model')
    p.add_argument('--capitalize', '-C', action='store_true', help='Make the first letter uppercase')
    p.add_argument('--input', '-i', type=Path, help='A corpus file (default: stdin)')
    p.add_argument('--min', '-m', dest='minimum', type=int, default=cfg.min_length,
                   help=f'The minimum length of the word (default: {cfg.min_length})')
    p.add_argument('--max', '-M', dest='maximum', type=int, default=cfg.max_length,
                   help=f'The maximum length of the word (default: {cfg.max_length})')
    p.add_argument('--order', '-o', type=int, default=cfg.order,
                   help=f'The model order (default: {cfg.order})')
    p.add_argument('--prior', '-p', type=float, default=cfg.prior,
                   help=f'The Dirichlet prior added to every letter (default: {cfg.prior})')
    p.add_argument('--backoff', '-b', action='store_true', help='Use a Katz back-off model')
    p.add_argument('--delimiter', '-D', default='\\n',
                   help='The string separating words in the corpus (default: \\n)')
    cache = p.add_mutually_exclusive_group()
    cache.add_argument('--no-cache', '-N', action='store_true', help='Do not use a cached model')
    cache.add_argument('--rebuild-cache', '-R', action='store_true', help='Rebuild the cached model')
    p.add_argument('count', type=non_negative, nargs='?', help='How many words to generate')

    # --- analyze ---
    p = subparsers.add_parser('analyze', help='Report byte statistics for a piece of data')
    p.add_argument('input', type=Path, nargs='?', help='A file to analyze (default: stdin)')

    return parser


# =============================================================================
# Main
# =============================================================================

def main(argv=None, out: Output = None):
    out = out or Output()

    # Option defaults come from app.yaml
    try:
        parser = build_parser()
    except ConfigError as e:
        out.error(str(e))
        return e.exit_code

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    setup_logging(debug=args.debug, verbose=args.verbose, quiet=args.quiet)

    if args.command == 'analyze':
        handler = cmd_analyze
    else:
        handler = GENERATE_COMMANDS.get(getattr(args, 'kind', None))
        if handler is None:
            out.error(f"Choose what to generate: {', '.join(GENERATE_COMMANDS)}")
            return EXIT_USAGE

    try:
        return handler(args, out)
    except KeyboardInterrupt:
        out.error("Cancelled.")
        return EXIT_INTERRUPTED
    except RandkitError as e:
        out.error(str(e))
        return e.exit_code
    except Exception as e:
        out.error(str(e))
        if args.debug:
            traceback.print_exc()
        return EXIT_FAILURE


if __name__ == '__main__':
    sys.exit(main())
