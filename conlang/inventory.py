#!/usr/bin/env python3
"""
Symbol Inventory
================
The phonetic symbols available to a language, partitioned into classes.

An Inventory keeps one ordered tuple of Symbols per class. Order is
meaningful: position-dependent distributions give earlier symbols larger
shares, so the order a language lists its symbols in is preserved as-is.

Usage:
    from conlang.inventory import Inventory

    inv = Inventory(consonants="ptkmn", vowels="aiu")
    inv.consonants        # (p, t, k, m, n)
    str(inv)              # 'ptkmn aiu'
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .errors import DuplicateSymbol, UnknownSymbol
from .phonemes import load_ipa, split_graphemes


class SymbolClass(Enum):
    """Inventory classes, valued by their configuration key."""
    CONSONANT = "consonants"
    VOWEL = "vowels"
    NON_PULMONIC = "non_pulmonics"
    OTHER = "others"

    @property
    def label(self) -> str:
        return {
            SymbolClass.CONSONANT: "consonant",
            SymbolClass.VOWEL: "vowel",
            SymbolClass.NON_PULMONIC: "non-pulmonic",
            SymbolClass.OTHER: "other",
        }[self]


# Classes whose members must appear in the IPA chart.
VALIDATED_CLASSES = (SymbolClass.CONSONANT, SymbolClass.VOWEL, SymbolClass.NON_PULMONIC)


@dataclass(frozen=True)
class Symbol:
    """A phonetic symbol. Equality and hashing use the grapheme only."""
    grapheme: str
    klass: SymbolClass = field(default=SymbolClass.OTHER, compare=False)
    weight: Optional[float] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.grapheme

    def __repr__(self) -> str:
        return f"Symbol({self.grapheme!r})"


SymbolsLike = Union[str, Iterable[Union[str, Symbol]], None]


def _coerce(entries: SymbolsLike, klass: SymbolClass) -> Tuple[Symbol, ...]:
    """Turn a flat string or an iterable of strings/Symbols into class Symbols."""
    if entries is None:
        return ()
    if isinstance(entries, str):
        entries = split_graphemes(entries)

    symbols = []
    for entry in entries:
        if isinstance(entry, Symbol):
            symbols.append(Symbol(entry.grapheme, klass, entry.weight))
        else:
            symbols.append(Symbol(str(entry), klass))
    return tuple(symbols)


class Inventory:
    """Per-class ordered sets of Symbols."""

    def __init__(self,
                 consonants: SymbolsLike = None,
                 vowels: SymbolsLike = None,
                 non_pulmonics: SymbolsLike = None,
                 others: SymbolsLike = None,
                 validate: bool = True):
        self._classes: Dict[SymbolClass, Tuple[Symbol, ...]] = {
            SymbolClass.CONSONANT: _coerce(consonants, SymbolClass.CONSONANT),
            SymbolClass.VOWEL: _coerce(vowels, SymbolClass.VOWEL),
            SymbolClass.NON_PULMONIC: _coerce(non_pulmonics, SymbolClass.NON_PULMONIC),
            SymbolClass.OTHER: _coerce(others, SymbolClass.OTHER),
        }

        for klass, members in self._classes.items():
            seen = set()
            for symbol in members:
                if symbol in seen:
                    raise DuplicateSymbol(klass.label, symbol.grapheme)
                seen.add(symbol)

        if validate:
            self._validate()

        self._index: Dict[Symbol, SymbolClass] = {}
        for klass, members in self._classes.items():
            for symbol in members:
                self._index.setdefault(symbol, klass)

    def _validate(self):
        chart = load_ipa()
        for klass in VALIDATED_CLASSES:
            unknown = [s.grapheme for s in self._classes[klass]
                       if not chart.knows(klass.value, s.grapheme)]
            if unknown:
                raise UnknownSymbol(klass.label, unknown)

    # --- Construction helpers ---

    @classmethod
    def default(cls) -> 'Inventory':
        """The full consonant and vowel charts."""
        chart = load_ipa()
        return cls(
            consonants=chart.symbols(SymbolClass.CONSONANT.value),
            vowels=chart.symbols(SymbolClass.VOWEL.value),
        )

    @classmethod
    def parse(cls, text: str) -> 'Inventory':
        """
        Parse the "<consonants> <vowels>" text form, e.g. "ptkmn aiu".

        Both halves are validated together so every unknown symbol is
        reported at once.
        """
        groups = text.split()
        if len(groups) != 2:
            raise ValueError(
                f"inventory text needs exactly two groups (consonants vowels), got {len(groups)}"
            )
        consonants, vowels = groups

        chart = load_ipa()
        unknown: List[str] = []
        for klass, part in ((SymbolClass.CONSONANT, consonants), (SymbolClass.VOWEL, vowels)):
            unknown.extend(g for g in split_graphemes(part) if not chart.knows(klass.value, g))
        if unknown:
            raise UnknownSymbol("consonant/vowel", unknown)

        return cls(consonants=consonants, vowels=vowels)

    # --- Accessors ---

    def members(self, klass: SymbolClass) -> Tuple[Symbol, ...]:
        return self._classes[klass]

    @property
    def consonants(self) -> Tuple[Symbol, ...]:
        return self._classes[SymbolClass.CONSONANT]

    @property
    def vowels(self) -> Tuple[Symbol, ...]:
        return self._classes[SymbolClass.VOWEL]

    @property
    def non_pulmonics(self) -> Tuple[Symbol, ...]:
        return self._classes[SymbolClass.NON_PULMONIC]

    @property
    def others(self) -> Tuple[Symbol, ...]:
        return self._classes[SymbolClass.OTHER]

    def all(self) -> Tuple[Symbol, ...]:
        """Every symbol in class order, then insertion order."""
        return tuple(s for klass in SymbolClass for s in self._classes[klass])

    def class_of(self, symbol: Union[str, Symbol]) -> Optional[SymbolClass]:
        if isinstance(symbol, str):
            symbol = Symbol(symbol)
        return self._index.get(symbol)

    def __contains__(self, symbol) -> bool:
        return self.class_of(symbol) is not None

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self.all())

    def __len__(self) -> int:
        return sum(len(m) for m in self._classes.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Inventory):
            return NotImplemented
        return all(
            [s.grapheme for s in self._classes[k]] == [s.grapheme for s in other._classes[k]]
            for k in SymbolClass
        )

    def __hash__(self):
        return hash(tuple(tuple(s.grapheme for s in self._classes[k]) for k in SymbolClass))

    def __str__(self) -> str:
        """
        Display form: consonants, vowels, then any non-pulmonics and others.

        Only a consonant/vowel inventory with both classes filled reads
        back through parse().
        """
        text = ''.join(s.grapheme for s in self.consonants)
        text += ' ' + ''.join(s.grapheme for s in self.vowels)
        extra = [''.join(s.grapheme for s in self._classes[k])
                 for k in (SymbolClass.NON_PULMONIC, SymbolClass.OTHER)]
        if any(extra):
            text += ' ' + ' '.join(extra).strip()
        return text

    def __repr__(self) -> str:
        return f"Inventory({str(self)!r})"


__all__ = [
    'SymbolClass',
    'Symbol',
    'Inventory',
    'VALIDATED_CLASSES',
]
