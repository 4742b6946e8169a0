#!/usr/bin/env python3
"""
Pattern Compiler
================
Parses phonotactic pattern strings into reusable Pattern values.

A pattern is a string of category letters, optionally split into
syllables by boundary characters (space and '.' by default):

    "CVC"       -> [C, V, C]
    "CV.CVC"    -> [C, V, |, C, V, C]

Runs of boundary characters collapse into one, and boundaries at either
end are dropped. Compilation only checks letters against the set it was
given, so it never touches an inventory.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union

from .errors import EmptyPattern, InvalidPatternToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternToken:
    """One pattern position referencing a category letter."""
    category: str
    offset: int

    def __str__(self) -> str:
        return self.category


@dataclass(frozen=True)
class Boundary:
    """Syllable boundary marker. Emits nothing."""
    char: str
    offset: int

    def __str__(self) -> str:
        return self.char


Token = Union[PatternToken, Boundary]


@dataclass(frozen=True)
class Pattern:
    """A compiled pattern."""
    source: str
    tokens: Tuple[Token, ...]

    @property
    def positions(self) -> Tuple[PatternToken, ...]:
        """Category positions only, in order."""
        return tuple(t for t in self.tokens if isinstance(t, PatternToken))

    def syllables(self) -> List[Tuple[PatternToken, ...]]:
        """Category positions grouped by boundary."""
        groups: List[List[PatternToken]] = [[]]
        for token in self.tokens:
            if isinstance(token, Boundary):
                groups.append([])
            else:
                groups[-1].append(token)
        return [tuple(g) for g in groups]

    def __len__(self) -> int:
        return len(self.positions)

    def __str__(self) -> str:
        return ''.join(str(t) for t in self.tokens)


class PatternCompiler:
    """Compiles pattern strings against a fixed set of category letters."""

    def __init__(self, categories: Iterable[str], boundary_characters: str = " ."):
        self.categories = frozenset(categories)
        self.boundary_characters = frozenset(boundary_characters)
        overlap = self.categories & self.boundary_characters
        if overlap:
            raise ValueError(
                f"boundary characters overlap category letters: {''.join(sorted(overlap))}"
            )

    def compile(self, source: str) -> Pattern:
        """
        Compile a pattern string.

        Raises
        ------
        InvalidPatternToken
            On the first character that is neither a category letter nor a
            boundary character.
        EmptyPattern
            If the pattern has no category positions.
        """
        tokens: List[Token] = []
        for offset, char in enumerate(source):
            if char in self.boundary_characters:
                if tokens and not isinstance(tokens[-1], Boundary):
                    tokens.append(Boundary(char, offset))
            elif char in self.categories:
                tokens.append(PatternToken(char, offset))
            else:
                raise InvalidPatternToken(source, char, offset)

        if tokens and isinstance(tokens[-1], Boundary):
            tokens.pop()
        if not tokens:
            raise EmptyPattern(source)

        pattern = Pattern(source=source, tokens=tuple(tokens))
        logger.debug("compiled pattern %r -> %s", source, pattern)
        return pattern


def compile_pattern(source: str, categories: Iterable[str], boundary_characters: str = " .") -> Pattern:
    """Compile a single pattern string."""
    return PatternCompiler(categories, boundary_characters).compile(source)


__all__ = [
    'PatternToken',
    'Boundary',
    'Pattern',
    'PatternCompiler',
    'compile_pattern',
]
