#!/usr/bin/env python3
"""
Conlang - Phoneme Sequence Generator
====================================

Generates phoneme sequences for constructed languages from a phonetic
inventory and phonotactic patterns, following a configurable frequency
profile and never repeating a symbol twice in a row.

Quick Start
-----------
    import random
    from conlang import load_language, SequenceGenerator

    language = load_language("mylang.yaml")
    gen = SequenceGenerator.from_language(language)

    word = gen.generate_word("CV.CVC", random.Random(42))
    print(word)           # syllables separated by a space
    print(word.ssml())    # <phoneme alphabet="ipa" ph="..."></phoneme>

Modules
-------
    conlang.inventory     - Symbols and per-class inventories
    conlang.categories    - Category letter resolution
    conlang.distribution  - Weight computation and precedence policy
    conlang.pattern       - Pattern compiler
    conlang.generator     - Constrained weighted sampling
    conlang.batch         - Deterministic batch generation
    conlang.config        - Language configuration loading

CLI Usage
---------
    python -m conlang generate --consonants ptkmn --vowels aiu --pattern CVC -n 10
    python -m conlang weights --config mylang.yaml --pattern CV
    python -m conlang categories
"""

__version__ = "0.1.0"
__author__ = "Conlang"

# =============================================================================
# Core Imports
# =============================================================================

from .errors import (
    ConlangError,
    ConfigurationError,
    UnknownSymbol,
    DuplicateSymbol,
    UnknownCategory,
    UnresolvedDistribution,
    PatternError,
    InvalidPatternToken,
    EmptyPattern,
    MissingWeight,
    ExhaustedPool,
)
from .inventory import Inventory, Symbol, SymbolClass
from .categories import Alias, CategoryResolver, resolve
from .distribution import (
    Uniform,
    Sinusoidal,
    Custom,
    DistributionPolicy,
    spec_from_config,
    weights,
)
from .pattern import Pattern, PatternCompiler, PatternToken, Boundary, compile_pattern
from .generator import SequenceGenerator, GenerationState, Word, generate
from .config import LanguageConfig, load_language, language_from_dict
from .entropy import make_rng
from .batch import BatchConfig, BatchItem, generate_batch

__all__ = [
    '__version__',
    # Errors
    'ConlangError',
    'ConfigurationError',
    'UnknownSymbol',
    'DuplicateSymbol',
    'UnknownCategory',
    'UnresolvedDistribution',
    'PatternError',
    'InvalidPatternToken',
    'EmptyPattern',
    'MissingWeight',
    'ExhaustedPool',
    # Inventory & categories
    'Inventory',
    'Symbol',
    'SymbolClass',
    'Alias',
    'CategoryResolver',
    'resolve',
    # Distributions
    'Uniform',
    'Sinusoidal',
    'Custom',
    'DistributionPolicy',
    'spec_from_config',
    'weights',
    # Patterns & generation
    'Pattern',
    'PatternCompiler',
    'PatternToken',
    'Boundary',
    'compile_pattern',
    'SequenceGenerator',
    'GenerationState',
    'Word',
    'generate',
    # Configuration
    'LanguageConfig',
    'load_language',
    'language_from_dict',
    'make_rng',
    # Batch
    'BatchConfig',
    'BatchItem',
    'generate_batch',
]
