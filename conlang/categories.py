#!/usr/bin/env python3
"""
Category Resolver
=================
Maps pattern letters to ordered subsets of an Inventory.

Built-in letters come from the static table in phonemes/categories.yaml:

    C V X O          whole classes (consonants, vowels, non-pulmonics, others)
    P N R T F Z A L  manners of articulation (pulmonic consonants)
    B W D S J E Y K Q H G
                     places of articulation (consonants and non-pulmonics)
    I M U            vowel backness (front, central, back)

A built-in letter resolves to ``group members ∩ inventory class`` and keeps
the inventory's order. Letters drawing from several classes resolve to the
union of their per-class groups.

Languages can declare single-character aliases on top: either a union of
other letters (``members``) or an explicit symbol list (``values``).
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .errors import ConfigurationError, UnknownCategory
from .inventory import Inventory, Symbol, SymbolClass
from .phonemes import CategoryTable, load_categories, load_ipa, split_graphemes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Alias:
    """A user-declared category letter."""
    letter: str
    members: Tuple[str, ...] = ()
    values: Tuple[str, ...] = ()
    description: str = ""

    @classmethod
    def union(cls, letter: str, members: Iterable[str], description: str = "") -> 'Alias':
        return cls(letter=letter, members=tuple(members), description=description)

    @classmethod
    def of(cls, letter: str, values, description: str = "") -> 'Alias':
        if isinstance(values, str):
            values = split_graphemes(values)
        return cls(letter=letter, values=tuple(values), description=description)


class CategoryResolver:
    """Resolves category letters against one Inventory."""

    def __init__(self,
                 inventory: Inventory,
                 aliases: Iterable[Alias] = (),
                 reserved: Iterable[str] = (),
                 table: Optional[CategoryTable] = None):
        self.inventory = inventory
        self.table = table or load_categories()
        self.aliases: Dict[str, Alias] = {}
        self._cache: Dict[str, Tuple[Symbol, ...]] = {}

        reserved = set(reserved)
        for alias in aliases:
            self._check_alias(alias, reserved)
            self.aliases[alias.letter] = alias

        for alias in self.aliases.values():
            self._check_references(alias)
        self._check_cycles()

    # --- Validation ---

    def _check_alias(self, alias: Alias, reserved: Set[str]):
        letter = alias.letter
        if len(letter) != 1 or letter.isspace():
            raise ConfigurationError(f"category alias '{letter}' must be a single character")
        if self.table.is_builtin(letter):
            raise ConfigurationError(f"category alias '{letter}' shadows a built-in letter")
        if letter in reserved:
            raise ConfigurationError(f"category alias '{letter}' is a boundary character")
        if letter in self.aliases:
            raise ConfigurationError(f"category alias '{letter}' declared twice")
        if bool(alias.members) == bool(alias.values):
            raise ConfigurationError(
                f"category alias '{letter}' needs exactly one of members or values"
            )

    def _check_references(self, alias: Alias):
        for member in alias.members:
            if not self.is_known(member):
                raise UnknownCategory(
                    member, f"category alias '{alias.letter}' references unknown category '{member}'"
                )
        missing = [v for v in alias.values if v not in self.inventory]
        if missing:
            raise ConfigurationError(
                f"category alias '{alias.letter}' lists symbols missing from the inventory: "
                f"{', '.join(missing)}"
            )

    def _check_cycles(self):
        visiting: Set[str] = set()
        done: Set[str] = set()

        def visit(letter: str, path: List[str]):
            if letter in done or letter not in self.aliases:
                return
            if letter in visiting:
                cycle = ' -> '.join(path + [letter])
                raise ConfigurationError(f"category aliases form a cycle: {cycle}")
            visiting.add(letter)
            for member in self.aliases[letter].members:
                visit(member, path + [letter])
            visiting.discard(letter)
            done.add(letter)

        for letter in self.aliases:
            visit(letter, [])

    # --- Lookup ---

    def tokens(self) -> List[str]:
        """Every letter this resolver accepts: built-ins, then aliases."""
        return self.table.letters() + list(self.aliases)

    def is_known(self, token: str) -> bool:
        return self.table.is_builtin(token) or token in self.aliases

    def describe(self, token: str) -> str:
        if token in self.aliases:
            alias = self.aliases[token]
            if alias.description:
                return alias.description
            if alias.members:
                return f"union of {''.join(alias.members)}"
            return "explicit symbols"
        if self.table.is_builtin(token):
            return self.table.describe(token)
        raise UnknownCategory(token)

    def resolve(self, token: str) -> Tuple[Symbol, ...]:
        """
        Resolve a category letter to its ordered pool of Symbols.

        Raises
        ------
        UnknownCategory
            If the token is neither a built-in letter nor a declared alias.
        """
        if token in self._cache:
            return self._cache[token]

        if token in self.aliases:
            pool = self._resolve_alias(self.aliases[token])
        elif token in self.table.classes:
            pool = self.inventory.members(SymbolClass(self.table.classes[token]))
        elif token in self.table.groups:
            pool = self._resolve_group(token)
        else:
            raise UnknownCategory(token)

        logger.debug("category %s -> %s", token, ''.join(s.grapheme for s in pool))
        self._cache[token] = pool
        return pool

    def _resolve_group(self, token: str) -> Tuple[Symbol, ...]:
        group = self.table.groups[token]
        chart = load_ipa()
        pool = []
        # SymbolClass iteration order is inventory order across classes.
        for klass in SymbolClass:
            if klass.value not in group.draws_from:
                continue
            pool.extend(
                s for s in self.inventory.members(klass)
                if chart.feature(klass.value, s.grapheme, group.feature) == group.value
            )
        return tuple(pool)

    def _resolve_alias(self, alias: Alias) -> Tuple[Symbol, ...]:
        if alias.values:
            wanted = set(alias.values)
        else:
            wanted = set()
            for member in alias.members:
                wanted.update(s.grapheme for s in self.resolve(member))

        pool = []
        for symbol in self.inventory.all():
            # A grapheme listed in two classes joins the pool once.
            if symbol.grapheme in wanted and symbol not in pool:
                pool.append(symbol)
        return tuple(pool)

    def classes_of(self, pool: Iterable[Symbol]) -> List[SymbolClass]:
        """Distinct inventory classes covered by a pool, in class order."""
        present = {self.inventory.class_of(s) for s in pool}
        return [k for k in SymbolClass if k in present]


def resolve(token: str, inventory: Inventory, aliases: Iterable[Alias] = ()) -> Tuple[Symbol, ...]:
    """Resolve a single category letter against an inventory."""
    return CategoryResolver(inventory, aliases).resolve(token)


__all__ = [
    'Alias',
    'CategoryResolver',
    'resolve',
]
