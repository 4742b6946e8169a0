#!/usr/bin/env python3
"""
Error Taxonomy
==============
Every failure raised by the generation engine derives from ConlangError.

ConlangError subclasses ValueError, so callers that already guard
configuration problems with ``except ValueError`` keep working.

    ConlangError
    ├── ConfigurationError
    │   ├── UnknownSymbol
    │   └── DuplicateSymbol
    ├── UnknownCategory
    │   └── UnresolvedDistribution
    ├── PatternError
    │   ├── InvalidPatternToken
    │   └── EmptyPattern
    ├── MissingWeight
    └── ExhaustedPool
"""

from typing import Iterable, Optional


class ConlangError(ValueError):
    """Base class for all conlang errors."""


# =============================================================================
# Configuration
# =============================================================================

class ConfigurationError(ConlangError):
    """A language configuration value is malformed or inconsistent."""


class UnknownSymbol(ConfigurationError):
    """One or more symbols are not known members of their class."""

    def __init__(self, klass: str, symbols: Iterable[str]):
        self.klass = klass
        self.symbols = list(symbols)
        if len(self.symbols) == 1:
            msg = f"unknown {klass} symbol: {self.symbols[0]}"
        else:
            msg = f"unknown {klass} symbols: {', '.join(self.symbols)}"
        super().__init__(msg)


class DuplicateSymbol(ConfigurationError):
    """A symbol appears twice within the same class."""

    def __init__(self, klass: str, symbol: str):
        self.klass = klass
        self.symbol = symbol
        super().__init__(f"duplicate {klass} symbol: {symbol}")


# =============================================================================
# Categories
# =============================================================================

class UnknownCategory(ConlangError):
    """A category token is neither a built-in letter nor a declared alias."""

    def __init__(self, token: str, message: Optional[str] = None):
        self.token = token
        super().__init__(message or f"unknown category '{token}'")


class UnresolvedDistribution(UnknownCategory):
    """A category spans classes whose distributions disagree."""

    def __init__(self, token: str, classes: Iterable[str]):
        self.classes = list(classes)
        super().__init__(
            token,
            f"category '{token}' spans classes with different distributions "
            f"({', '.join(self.classes)}); declare a distribution for '{token}'",
        )


# =============================================================================
# Patterns
# =============================================================================

class PatternError(ConlangError):
    """A pattern string cannot be compiled."""


class InvalidPatternToken(PatternError):
    """A pattern character has no mapped category."""

    def __init__(self, pattern: str, char: str, position: int):
        self.pattern = pattern
        self.char = char
        self.position = position
        super().__init__(
            f"unrecognized character '{char}' at position {position} "
            f"in pattern \"{pattern}\""
        )


class EmptyPattern(PatternError):
    """The pattern has no category positions."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"pattern \"{pattern}\" has no category positions")


# =============================================================================
# Sampling
# =============================================================================

class MissingWeight(ConlangError):
    """A custom distribution has no weight for a pool member."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"no weight configured for symbol '{symbol}'")


class ExhaustedPool(ConlangError):
    """Adjacency exclusion left no candidate for a pattern position."""

    def __init__(self, token: str, position: int, excluded: Iterable[str] = ()):
        self.token = token
        self.position = position
        self.excluded = list(excluded)
        if self.excluded:
            detail = f"after excluding {', '.join(self.excluded)}"
        else:
            detail = "(category resolves to no symbols)"
        super().__init__(
            f"no candidates for '{token}' at position {position} {detail}"
        )


__all__ = [
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
]
