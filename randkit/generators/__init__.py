#!/usr/bin/env python3
"""
Generators
==========
Provides every generation strategy:
- Markov: Statistical character-level words trained on a corpus
- Username: Model-free pronounceable usernames
- Tokens: Bytes, hex, Base64, passwords, passphrases, numbers
"""

from .entropy import (
    SecureRandom,
    get_random,
    weighted_choice,
)
from .markov import (
    START,
    END,
    NGramModel,
    BackoffChain,
    MarkovTrainer,
    MarkovSampler,
    MarkovGenerator,
)
from .username import (
    generate_simple_username,
    generate_complex_username,
)
from .tokens import (
    generate_bytes,
    generate_hex,
    generate_base64,
    generate_password,
    generate_passphrase,
    generate_digits,
    generate_number,
    password_alphabet,
)

__all__ = [
    'SecureRandom',
    'get_random',
    'weighted_choice',
    'START',
    'END',
    'NGramModel',
    'BackoffChain',
    'MarkovTrainer',
    'MarkovSampler',
    'MarkovGenerator',
    'generate_simple_username',
    'generate_complex_username',
    'generate_bytes',
    'generate_hex',
    'generate_base64',
    'generate_password',
    'generate_passphrase',
    'generate_digits',
    'generate_number',
    'password_alphabet',
]
