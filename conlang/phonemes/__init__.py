#!/usr/bin/env python3
"""
Phoneme Data Loader
===================
Loads the static phonetic tables the generator is built on:

- ipa.yaml        - IPA chart: consonants (place, manner), vowels
                    (backness, height), non-pulmonics and other symbols
- categories.yaml - built-in pattern letters and the feature each selects

Usage:
    from conlang.phonemes import load_ipa, load_categories, split_graphemes

    chart = load_ipa()
    chart.feature('consonants', 'pʰ', 'place')   # 'bilabial'
    table = load_categories()
    table.is_builtin('N')                        # True
"""

import unicodedata
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml


# =============================================================================
# Configuration Path
# =============================================================================

PHONEMES_DIR = Path(__file__).parent

CLASS_KEYS = ('consonants', 'vowels', 'non_pulmonics', 'others')

# Tie bars join the following base character into the same grapheme (t͡ʃ).
_TIE_BARS = {'͡', '͜'}


# =============================================================================
# Data Classes for Typed Access
# =============================================================================

@dataclass(frozen=True)
class IPAChart:
    """Container for the loaded IPA chart."""
    tables: Dict[str, Dict[str, Dict[str, Any]]]
    raw: Dict[str, Any]

    def symbols(self, klass: str) -> List[str]:
        """Get every chart symbol of a class, in chart order."""
        return list(self.tables.get(klass, {}))

    def entry(self, klass: str, grapheme: str) -> Optional[Dict[str, Any]]:
        """
        Look up a grapheme's chart entry.

        Graphemes carrying diacritics or modifiers (pʰ, aː, t͡ʃ) fall back to
        the entry of their base character. Two base letters ("pq") are two
        symbols, not one, and get no entry.
        """
        table = self.tables.get(klass, {})
        if grapheme in table:
            return table[grapheme]
        if len(split_graphemes(grapheme)) == 1 and grapheme[0] in table:
            return table[grapheme[0]]
        return None

    def knows(self, klass: str, grapheme: str) -> bool:
        return self.entry(klass, grapheme) is not None

    def feature(self, klass: str, grapheme: str, name: str) -> Optional[str]:
        """Get a single feature (place, manner, backness...) of a grapheme."""
        entry = self.entry(klass, grapheme)
        if entry is None:
            return None
        return entry.get(name)


@dataclass(frozen=True)
class FeatureGroup:
    """A built-in letter selecting symbols whose feature equals a value."""
    letter: str
    feature: str
    value: str
    draws_from: Tuple[str, ...]


@dataclass(frozen=True)
class CategoryTable:
    """Container for the built-in category letter table."""
    classes: Dict[str, str]
    groups: Dict[str, FeatureGroup]
    raw: Dict[str, Any]

    def letters(self) -> List[str]:
        """All built-in letters: classes first, then feature groups."""
        return list(self.classes) + list(self.groups)

    def is_builtin(self, letter: str) -> bool:
        return letter in self.classes or letter in self.groups

    def describe(self, letter: str) -> str:
        """Human readable description of a built-in letter."""
        if letter in self.classes:
            return f"all {self.classes[letter].replace('_', '-')}"
        group = self.groups[letter]
        return f"{group.value.replace('_', ' ')} ({group.feature})"


# =============================================================================
# Loader Functions
# =============================================================================

def _load_yaml(filename: str) -> Dict[str, Any]:
    """Load a YAML file from the phonemes directory."""
    filepath = PHONEMES_DIR / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Phoneme config not found: {filepath}")

    with open(filepath, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


@lru_cache(maxsize=1)
def load_ipa() -> IPAChart:
    """Load the IPA chart."""
    raw = _load_yaml('ipa.yaml')

    tables = {}
    for klass in CLASS_KEYS:
        entries = raw.get(klass) or {}
        tables[klass] = {str(symbol): dict(data or {}) for symbol, data in entries.items()}

    return IPAChart(tables=tables, raw=raw)


@lru_cache(maxsize=1)
def load_categories() -> CategoryTable:
    """Load the built-in category letter table."""
    raw = _load_yaml('categories.yaml')

    classes = {str(k): str(v) for k, v in (raw.get('classes') or {}).items()}
    for klass in classes.values():
        if klass not in CLASS_KEYS:
            raise ValueError(f"categories.yaml: unknown class '{klass}'")

    groups = {}
    for feature, section in raw.items():
        if feature == 'classes':
            continue
        draws_from = tuple(section.get('draws_from') or ())
        if not draws_from:
            raise ValueError(f"categories.yaml: {feature}.draws_from must be set")
        for letter, value in (section.get('letters') or {}).items():
            letter = str(letter)
            if letter in classes or letter in groups:
                raise ValueError(f"categories.yaml: letter '{letter}' defined twice")
            groups[letter] = FeatureGroup(
                letter=letter,
                feature=_feature_name(feature),
                value=str(value),
                draws_from=draws_from,
            )

    return CategoryTable(classes=classes, groups=groups, raw=raw)


def _feature_name(section: str) -> str:
    # Section names are plural ("places"); chart entries use the singular.
    return {'manners': 'manner', 'places': 'place'}.get(section, section)


def reload_configs():
    """Clear cached tables and reload from disk."""
    load_ipa.cache_clear()
    load_categories.cache_clear()


# =============================================================================
# Grapheme Segmentation
# =============================================================================

def split_graphemes(text: str) -> List[str]:
    """
    Split a flat symbol string into graphemes.

    Combining marks and modifier letters (ʰ ʼ ː) attach to the preceding
    base character, a tie bar also pulls in the character after it, and
    whitespace separates symbols without producing one.

    >>> split_graphemes("pʰat͡ʃ")
    ['pʰ', 'a', 't͡ʃ']
    """
    graphemes: List[str] = []
    after_space = True
    join_next = False

    for char in text:
        if char.isspace():
            after_space = True
            join_next = False
            continue

        attaches = not after_space and (
            join_next
            or unicodedata.combining(char) != 0
            or unicodedata.category(char) == 'Lm'
        )
        if attaches:
            graphemes[-1] += char
        else:
            graphemes.append(char)

        after_space = False
        join_next = char in _TIE_BARS

    return graphemes


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    'CLASS_KEYS',
    'IPAChart',
    'FeatureGroup',
    'CategoryTable',
    'load_ipa',
    'load_categories',
    'reload_configs',
    'split_graphemes',
]
