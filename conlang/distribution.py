#!/usr/bin/env python3
"""
Distribution Engine
===================
Computes normalized per-symbol probability weights for a pool.

Three rules are supported:

- Uniform           every symbol gets 1/k
- Sinusoidal(a)     position-dependent; earlier symbols get larger shares.
                    For pool size k and position n, with p(n) = nπ/(2k):

                        raw(n) = [sin p(n+1) - sin p(n)] + a·[p(n+1) - p(n)]

                    The sine term integrates a quarter cosine over the
                    slot, so with a = 0 the raw values already sum to 1.
                    The linear term is the same for every slot, so raising
                    `a` flattens the curve toward uniform.
- Custom            explicit relative weights from configuration

Weight values are cached per (pool graphemes, spec) for the lifetime of the
process; each call pairs them with the caller's own Symbols.

Which rule applies to a category is decided by DistributionPolicy:

1. a distribution declared for the category letter itself
2. the distribution of the single class the pool lies in
3. for pools spanning classes, the classes' shared distribution; if the
   classes disagree, UnresolvedDistribution is raised
"""

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import ConfigurationError, MissingWeight, UnresolvedDistribution
from .inventory import Symbol, SymbolClass

logger = logging.getLogger(__name__)

MISSING_POLICIES = ('error', 'zero', 'default')


# =============================================================================
# Distribution Specs
# =============================================================================

@dataclass(frozen=True)
class Uniform:
    """Every symbol equally likely."""

    @property
    def curve(self) -> str:
        return "uniform"

    def describe(self) -> str:
        return "uniform"


@dataclass(frozen=True)
class Sinusoidal:
    """Quarter-cosine falloff over pool positions, flattened by `a`."""
    a: float = 0.0

    def __post_init__(self):
        if not isinstance(self.a, (int, float)) or isinstance(self.a, bool):
            raise ConfigurationError(f"cosine distribution needs a numeric 'a', got {self.a!r}")
        if math.isnan(self.a) or self.a < 0:
            raise ConfigurationError(f"cosine distribution needs a >= 0, got {self.a}")

    @property
    def curve(self) -> str:
        return "cosine"

    def describe(self) -> str:
        return f"cosine(a={self.a:g})"


@dataclass(frozen=True)
class Custom:
    """
    Explicit relative weights keyed by grapheme.

    `missing` decides what happens for a pool member without a weight:
    'error' raises MissingWeight, 'zero' gives it weight 0, 'default'
    gives it `default_weight`.
    """
    weights: Tuple[Tuple[str, float], ...]
    missing: str = 'error'
    default_weight: float = 1.0

    def __post_init__(self):
        if self.missing not in MISSING_POLICIES:
            raise ConfigurationError(
                f"missing-weight policy must be one of {', '.join(MISSING_POLICIES)}, "
                f"got '{self.missing}'"
            )
        if self.default_weight < 0:
            raise ConfigurationError(f"default_weight must be >= 0, got {self.default_weight}")
        seen = set()
        for grapheme, weight in self.weights:
            if grapheme in seen:
                raise ConfigurationError(f"weight for '{grapheme}' given twice")
            seen.add(grapheme)
            if weight < 0 or math.isnan(weight):
                raise ConfigurationError(f"weight for '{grapheme}' must be >= 0, got {weight}")

    @classmethod
    def from_mapping(cls,
                     weights: Union[Mapping[str, float], Iterable[Tuple[str, float]]],
                     missing: str = 'error',
                     default_weight: float = 1.0) -> 'Custom':
        items = weights.items() if isinstance(weights, Mapping) else weights
        return cls(
            weights=tuple((str(k), float(v)) for k, v in items),
            missing=missing,
            default_weight=float(default_weight),
        )

    @property
    def curve(self) -> str:
        return "custom"

    def as_dict(self) -> Dict[str, float]:
        return dict(self.weights)

    def weight_for(self, grapheme: str) -> float:
        table = self.as_dict()
        if grapheme in table:
            return table[grapheme]
        if self.missing == 'zero':
            return 0.0
        if self.missing == 'default':
            return self.default_weight
        raise MissingWeight(grapheme)

    def describe(self) -> str:
        return "custom(" + ", ".join(f"{g}:{w:g}" for g, w in self.weights) + ")"


DistributionSpec = Union[Uniform, Sinusoidal, Custom]


def spec_from_config(data: Optional[Mapping[str, Any]]) -> DistributionSpec:
    """
    Build a DistributionSpec from its configuration form.

        {curve: uniform}
        {curve: cosine, a: 0.5}
        {curve: custom, weights: {p: 3, t: 1}, missing: default, default_weight: 1}
    """
    if not data:
        raise ConfigurationError("distribution needs a 'curve'")
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"distribution must be a mapping, got {data!r}")

    curve = str(data.get('curve', '')).lower()
    if curve == 'uniform':
        return Uniform()
    if curve == 'cosine':
        return Sinusoidal(a=data.get('a', 0.0))
    if curve == 'custom':
        weights = data.get('weights')
        if not isinstance(weights, Mapping) or not weights:
            raise ConfigurationError("custom distribution needs a 'weights' mapping")
        try:
            return Custom.from_mapping(
                weights,
                missing=data.get('missing', 'error'),
                default_weight=data.get('default_weight', 1.0),
            )
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid custom weights: {e}") from e
    raise ConfigurationError(f"unknown distribution curve '{data.get('curve')}'")


# =============================================================================
# Weight Computation
# =============================================================================

def normalize(raw: Sequence[float]) -> List[float]:
    """Scale non-negative values to sum to 1."""
    total = sum(raw)
    if total <= 0:
        raise ConfigurationError("weights sum to zero")
    return [value / total for value in raw]


def sinusoidal_weights(k: int, a: float = 0.0) -> List[float]:
    """Normalized sinusoidal weights for a pool of size k."""
    if k <= 0:
        return []
    step = math.pi / (2 * k)
    raw = []
    for n in range(k):
        lo, hi = n * step, (n + 1) * step
        raw.append((math.sin(hi) - math.sin(lo)) + a * (hi - lo))
    return normalize(raw)


@lru_cache(maxsize=1024)
def _weight_values(graphemes: Tuple[str, ...], spec: DistributionSpec) -> Tuple[float, ...]:
    # Keyed on graphemes: weights never depend on a symbol's class.
    if not graphemes:
        return ()

    if isinstance(spec, Uniform):
        values = [1.0 / len(graphemes)] * len(graphemes)
    elif isinstance(spec, Sinusoidal):
        values = sinusoidal_weights(len(graphemes), spec.a)
    elif isinstance(spec, Custom):
        raw = [spec.weight_for(g) for g in graphemes]
        if sum(raw) <= 0:
            raise ConfigurationError(f"custom weights for {''.join(graphemes)} are all zero")
        values = normalize(raw)
    else:
        raise TypeError(f"unsupported distribution spec: {spec!r}")

    logger.debug("weights %s over %s", spec.describe(), ''.join(graphemes))
    return tuple(values)


def weights(pool: Iterable[Symbol], spec: DistributionSpec) -> Dict[Symbol, float]:
    """
    Compute normalized weights for a pool under a distribution rule.

    Returns an ordered mapping (pool order) summing to 1. Custom specs may
    yield explicit zero weights; every other weight is strictly positive.

    Raises
    ------
    MissingWeight
        If a Custom spec has no weight for a pool member and its missing
        policy is 'error'.
    """
    pool = tuple(pool)
    values = _weight_values(tuple(s.grapheme for s in pool), spec)
    return dict(zip(pool, values))


def clear_cache():
    """Drop cached weight tables."""
    _weight_values.cache_clear()


# =============================================================================
# Precedence Policy
# =============================================================================

class DistributionPolicy:
    """Decides which DistributionSpec applies to a resolved category."""

    def __init__(self,
                 default: DistributionSpec,
                 class_specs: Optional[Mapping[SymbolClass, DistributionSpec]] = None,
                 overrides: Optional[Mapping[str, DistributionSpec]] = None):
        self.default = default
        self.class_specs: Dict[SymbolClass, DistributionSpec] = dict(class_specs or {})
        self.overrides: Dict[str, DistributionSpec] = dict(overrides or {})

    def for_class(self, klass: SymbolClass) -> DistributionSpec:
        return self.class_specs.get(klass, self.default)

    def spec_for(self, token: str, classes: Sequence[SymbolClass]) -> DistributionSpec:
        """
        Pick the spec for a category whose pool covers `classes`.

        Raises
        ------
        UnresolvedDistribution
            If the pool spans classes with different specs and the category
            has no distribution of its own.
        """
        if token in self.overrides:
            return self.overrides[token]
        if not classes:
            return self.default

        specs = [self.for_class(k) for k in classes]
        if all(spec == specs[0] for spec in specs[1:]):
            return specs[0]
        raise UnresolvedDistribution(token, [k.label for k in classes])


__all__ = [
    'Uniform',
    'Sinusoidal',
    'Custom',
    'DistributionSpec',
    'DistributionPolicy',
    'spec_from_config',
    'sinusoidal_weights',
    'normalize',
    'weights',
    'clear_cache',
    'MISSING_POLICIES',
]
