#!/usr/bin/env python3
"""
randkit - Random Secrets, Usernames & Words
===========================================

A command-line toolkit for generating random bytes, encoded keys,
passwords, passphrases, pronounceable usernames, numbers, and words
sampled from a Markov model trained on a corpus.

Quick Start
-----------
    from randkit.pipeline import MarkovOptions, generate_markov_words

    # Words that sound like the names in names.txt
    words = generate_markov_words(MarkovOptions(order=2, backoff=True),
                                  count=10, path="names.txt")

    # Lower level: train a chain and sample from it
    from randkit.generators import MarkovTrainer, MarkovGenerator

    chain = MarkovTrainer(order=2).train_chain(["banana", "bandana"])
    word = MarkovGenerator(chain).generate(min_length=3, max_length=6)

Modules
-------
    randkit.generators  - Markov, username and token generators
    randkit.corpus      - Corpus loading from files or stdin
    randkit.model_cache - On-disk cache of trained Markov chains
    randkit.pipeline    - Corpus -> model -> words for one invocation
    randkit.analysis    - Byte statistics for the analyze command
    randkit.config      - app.yaml settings and environment overrides

CLI Usage
---------
    python -m randkit generate markov -i names.txt 10
    python -m randkit generate password 20
    python -m randkit analyze key.bin
"""

__version__ = "0.4.0"
