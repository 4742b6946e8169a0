#!/usr/bin/env python3
"""
Sequence Generator
==================
Walks a compiled pattern and samples one symbol per category position.

For each position the generator:

1. resolves the category's pool and its weight table
2. removes the most recently emitted symbol(s) from the pool and
   renormalizes what is left (adjacency exclusion)
3. draws once from the RNG and picks the first symbol whose cumulative
   weight reaches the draw
4. emits the symbol and records it in the exclusion window

The walk is strictly sequential with no backtracking. If exclusion leaves
a position without candidates, ExhaustedPool is raised; the constraint is
never relaxed.

The exclusion window defaults to one symbol: ``XX`` cannot occur, ``XYX``
can.

Usage:
    import random
    from conlang import Inventory, SequenceGenerator

    gen = SequenceGenerator.build(Inventory(consonants="ptkmn", vowels="aiu"))
    word = gen.generate_word("CV.CVC", random.Random(7))
    print(word)          # e.g. "ka pin"
"""

import html
import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .categories import Alias, CategoryResolver
from .config import LanguageConfig, default_distribution
from .distribution import DistributionPolicy, DistributionSpec, weights
from .entropy import RandomSource
from .errors import ExhaustedPool
from .inventory import Inventory, Symbol
from .pattern import Boundary, Pattern, PatternCompiler, PatternToken

logger = logging.getLogger(__name__)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class Slot:
    """A category position with its resolved pool and weights."""
    category: str
    spec: DistributionSpec
    pool: Tuple[Symbol, ...]
    weights: Tuple[float, ...]

    def items(self) -> List[Tuple[Symbol, float]]:
        return list(zip(self.pool, self.weights))


@dataclass(frozen=True)
class Word:
    """Generated output grouped into syllables."""
    syllables: Tuple[Tuple[Symbol, ...], ...]
    pattern: str = ""

    @property
    def symbols(self) -> Tuple[Symbol, ...]:
        return tuple(s for syllable in self.syllables for s in syllable)

    @property
    def ipa(self) -> str:
        return ' '.join(''.join(s.grapheme for s in syl) for syl in self.syllables)

    def ssml(self) -> str:
        """SSML phoneme element for IPA-capable speech engines."""
        return f'<phoneme alphabet="ipa" ph="{html.escape(self.ipa, quote=True)}"></phoneme>'

    def __len__(self) -> int:
        return len(self.symbols)

    def __str__(self) -> str:
        return self.ipa


class GenerationState:
    """Per-call exclusion window over the most recent emitted symbols."""

    def __init__(self, window: int = 1):
        self.window = window
        self._recent = deque(maxlen=window) if window > 0 else None

    @property
    def previous(self) -> Optional[Symbol]:
        if not self._recent:
            return None
        return self._recent[-1]

    def excluded(self) -> Tuple[Symbol, ...]:
        return tuple(self._recent) if self._recent else ()

    def push(self, symbol: Symbol):
        if self._recent is not None:
            self._recent.append(symbol)

    def reset(self):
        if self._recent is not None:
            self._recent.clear()


# =============================================================================
# Sampling
# =============================================================================

def sample(candidates: Sequence[Tuple[Symbol, float]], draw: float) -> Symbol:
    """
    Pick from (symbol, weight) pairs summing to 1 with a draw in [0, 1).

    Returns the first symbol whose cumulative weight is >= draw. Zero
    weights are never picked.
    """
    cumulative = 0.0
    last = None
    for symbol, weight in candidates:
        if weight <= 0:
            continue
        cumulative += weight
        last = symbol
        if cumulative >= draw:
            return symbol
    # Rounding can leave the total a hair under the draw.
    if last is None:
        raise ValueError("no candidate with positive weight")
    return last


# =============================================================================
# Generator
# =============================================================================

class SequenceGenerator:
    """Generates symbol sequences for one language."""

    def __init__(self,
                 resolver: CategoryResolver,
                 policy: DistributionPolicy,
                 exclusion_window: int = 1,
                 reset_on_boundary: bool = False,
                 boundary_characters: str = " ."):
        if exclusion_window < 0:
            raise ValueError(f"exclusion_window must be >= 0, got {exclusion_window}")
        self.resolver = resolver
        self.policy = policy
        self.exclusion_window = exclusion_window
        self.reset_on_boundary = reset_on_boundary
        self.compiler = PatternCompiler(resolver.tokens(), boundary_characters)
        self._patterns: Dict[str, Pattern] = {}
        self._slots: Dict[str, Slot] = {}

    @classmethod
    def from_language(cls, language: LanguageConfig) -> 'SequenceGenerator':
        resolver = CategoryResolver(
            language.inventory,
            language.aliases,
            reserved=language.boundary_characters,
        )
        return cls(
            resolver,
            language.policy(),
            exclusion_window=language.exclusion_window,
            reset_on_boundary=language.reset_on_boundary,
            boundary_characters=language.boundary_characters,
        )

    @classmethod
    def build(cls,
              inventory: Inventory,
              aliases: Iterable[Alias] = (),
              distribution: Optional[DistributionSpec] = None,
              exclusion_window: int = 1) -> 'SequenceGenerator':
        """Generator over an inventory with one distribution for every class."""
        policy = DistributionPolicy(default=distribution or default_distribution())
        return cls(CategoryResolver(inventory, aliases), policy, exclusion_window=exclusion_window)

    @property
    def inventory(self) -> Inventory:
        return self.resolver.inventory

    # --- Compilation ---

    def compile(self, source: Union[str, Pattern]) -> Pattern:
        """Compile (and cache) a pattern string."""
        if isinstance(source, Pattern):
            return source
        pattern = self._patterns.get(source)
        if pattern is None:
            pattern = self.compiler.compile(source)
            self._patterns[source] = pattern
        return pattern

    def slot(self, category: str) -> Slot:
        """Resolve a category letter to its pool and weight table."""
        cached = self._slots.get(category)
        if cached is not None:
            return cached

        pool = self.resolver.resolve(category)
        spec = self.policy.spec_for(category, self.resolver.classes_of(pool))
        table = weights(pool, spec)
        slot = Slot(
            category=category,
            spec=spec,
            pool=tuple(table),
            weights=tuple(table.values()),
        )
        self._slots[category] = slot
        return slot

    def slots(self, pattern: Union[str, Pattern]) -> List[Slot]:
        """Slots for every category position of a pattern, in order."""
        pattern = self.compile(pattern)
        return [self.slot(token.category) for token in pattern.positions]

    # --- Generation ---

    def _draw(self, slot: Slot, position: int, state: GenerationState, rng: RandomSource) -> Symbol:
        if not slot.pool:
            raise ExhaustedPool(slot.category, position)

        excluded = set(state.excluded())
        candidates = [(s, w) for s, w in zip(slot.pool, slot.weights) if s not in excluded]
        total = sum(w for _, w in candidates)
        if total <= 0:
            raise ExhaustedPool(
                slot.category,
                position,
                [s.grapheme for s in state.excluded() if s in slot.pool],
            )
        if len(candidates) < len(slot.pool):
            candidates = [(s, w / total) for s, w in candidates]

        return sample(candidates, rng.random())

    def generate_word(self, pattern: Union[str, Pattern], rng: RandomSource) -> Word:
        """
        Generate one word for a pattern.

        Every position's pool and weights are prepared before the first
        draw, so resolution errors surface without consuming randomness.

        Raises
        ------
        UnknownCategory, InvalidPatternToken, EmptyPattern, MissingWeight
            Before any sampling.
        ExhaustedPool
            When adjacency exclusion leaves a position without candidates.
        """
        pattern = self.compile(pattern)
        prepared = iter(self.slots(pattern))

        state = GenerationState(self.exclusion_window)
        syllables: List[List[Symbol]] = [[]]
        position = 0
        for token in pattern.tokens:
            if isinstance(token, Boundary):
                syllables.append([])
                if self.reset_on_boundary:
                    state.reset()
                continue

            symbol = self._draw(next(prepared), position, state, rng)
            syllables[-1].append(symbol)
            state.push(symbol)
            position += 1

        return Word(syllables=tuple(tuple(s) for s in syllables), pattern=pattern.source)

    def generate(self, pattern: Union[str, Pattern], rng: RandomSource) -> Tuple[Symbol, ...]:
        """Generate one flat symbol sequence for a pattern."""
        return self.generate_word(pattern, rng).symbols

    def enumerate(self, pattern: Union[str, Pattern]) -> Iterator[Tuple[Symbol, ...]]:
        """
        Yield every sequence the generator could emit for a pattern.

        Sequences come out in pool order. Zero-weight symbols and symbols
        blocked by the exclusion window are skipped.
        """
        pattern = self.compile(pattern)
        prepared = iter(self.slots(pattern))
        steps: List[Optional[Slot]] = [
            None if isinstance(token, Boundary) else next(prepared)
            for token in pattern.tokens
        ]
        window = self.exclusion_window

        def walk(index: int, recent: Tuple[Symbol, ...], emitted: Tuple[Symbol, ...]):
            if index == len(steps):
                yield emitted
                return
            step = steps[index]
            if step is None:
                yield from walk(index + 1, () if self.reset_on_boundary else recent, emitted)
                return
            for symbol, weight in zip(step.pool, step.weights):
                if weight <= 0 or symbol in recent:
                    continue
                following = (recent + (symbol,))[-window:] if window else ()
                yield from walk(index + 1, following, emitted + (symbol,))

        return walk(0, (), ())


def generate(pattern: Union[str, Pattern],
             inventory: Inventory,
             rng: RandomSource,
             distribution: Optional[DistributionSpec] = None) -> Tuple[Symbol, ...]:
    """One-shot generation over an inventory."""
    return SequenceGenerator.build(inventory, distribution=distribution).generate(pattern, rng)


__all__ = [
    'Slot',
    'Word',
    'GenerationState',
    'SequenceGenerator',
    'sample',
    'generate',
]
