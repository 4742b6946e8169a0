#!/usr/bin/env python3
"""
Language Configuration
======================
Loads a language definition (inventory, categories, distributions,
patterns) from YAML/JSON files or plain dicts.

File layout:

    inventory:
      consonants: "pbtdkgmn"               # flat string: default distribution
      vowels:                              # custom weights
        - {value: ɘ, weight: 50}
        - {value: ɑ, weight: 15}
        - {value: i, weight: 5}
      non_pulmonics:
        values: "ʘǀ"
        distribution: {curve: uniform}
      others: ""

    categories:                            # user aliases
      S: {members: "PF"}                   # union of other letters
      H: {values: "ptk", distribution: {curve: uniform}}

    distributions:                         # per-letter overrides
      N: {curve: cosine, a: 1.0}

    patterns: ["CV", "CVC", "CV.CVC"]
    exclusion_window: 1
    reset_on_boundary: false

Application defaults (default distribution, exclusion window, boundary
characters) come from configs/app.yaml and are copied into the
LanguageConfig when it is built.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from .categories import Alias
from .distribution import (
    Custom,
    DistributionPolicy,
    DistributionSpec,
    spec_from_config,
)
from .errors import ConfigurationError, UnknownCategory
from .inventory import Inventory, Symbol, SymbolClass
from .phonemes import load_categories, load_ipa, split_graphemes
from .settings import generation_defaults

logger = logging.getLogger(__name__)


# =============================================================================
# Language Configuration
# =============================================================================

@dataclass(frozen=True)
class LanguageConfig:
    """Immutable language definition handed to the generator."""
    inventory: Inventory
    default_distribution: DistributionSpec
    class_distributions: Dict[SymbolClass, DistributionSpec] = field(default_factory=dict)
    overrides: Dict[str, DistributionSpec] = field(default_factory=dict)
    aliases: Tuple[Alias, ...] = ()
    patterns: Tuple[str, ...] = ()
    exclusion_window: int = 1
    reset_on_boundary: bool = False
    boundary_characters: str = " ."
    name: str = ""

    def policy(self) -> DistributionPolicy:
        return DistributionPolicy(
            default=self.default_distribution,
            class_specs=self.class_distributions,
            overrides=self.overrides,
        )


def default_distribution() -> DistributionSpec:
    """The distribution for classes declared as a flat string."""
    return spec_from_config(generation_defaults().default_distribution)


# =============================================================================
# Parsing
# =============================================================================

def _entry_symbols(entries: Any, klass: SymbolClass) -> Tuple[List[Symbol], Dict[str, float]]:
    """Parse a class's symbol entries into Symbols plus any explicit weights."""
    if entries is None:
        return [], {}
    if isinstance(entries, str):
        return [Symbol(g, klass) for g in split_graphemes(entries)], {}
    if not isinstance(entries, list):
        raise ConfigurationError(
            f"{klass.value}: expected a symbol string or a list, got {type(entries).__name__}"
        )

    symbols: List[Symbol] = []
    weights: Dict[str, float] = {}
    for entry in entries:
        if isinstance(entry, str):
            symbols.append(Symbol(entry, klass))
            continue
        if not isinstance(entry, Mapping) or 'value' not in entry:
            raise ConfigurationError(f"{klass.value}: entries need a 'value', got {entry!r}")
        value = str(entry['value'])
        weight = entry.get('weight')
        if weight is not None:
            try:
                weight = float(weight)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"{klass.value}: bad weight for '{value}': {weight!r}") from e
            weights[value] = weight
        symbols.append(Symbol(value, klass, weight))
    return symbols, weights


def _class_section(data: Any, klass: SymbolClass) -> Tuple[List[Symbol], Optional[DistributionSpec]]:
    """Parse one inventory class: flat string, entry list, or {values, distribution}."""
    if isinstance(data, Mapping):
        if 'values' not in data:
            raise ConfigurationError(f"{klass.value}: mapping form needs 'values'")
        symbols, weights = _entry_symbols(data['values'], klass)
        dist = data.get('distribution')
    else:
        symbols, weights = _entry_symbols(data, klass)
        dist = None

    if dist is None:
        spec = Custom.from_mapping(weights) if weights else None
    elif isinstance(dist, Mapping) and str(dist.get('curve', '')).lower() == 'custom':
        merged = dict(weights)
        merged.update(dist.get('weights') or {})
        spec = spec_from_config({**dist, 'weights': merged})
    elif weights:
        raise ConfigurationError(
            f"{klass.value}: per-symbol weights need a custom distribution, "
            f"not '{dist.get('curve') if isinstance(dist, Mapping) else dist}'"
        )
    else:
        spec = spec_from_config(dist)

    if isinstance(spec, Custom):
        graphemes = {s.grapheme for s in symbols}
        stray = [g for g, _ in spec.weights if g not in graphemes]
        if stray:
            logger.warning("%s: weights given for symbols not in the class: %s",
                           klass.value, ', '.join(stray))
    return symbols, spec


def _aliases(data: Any) -> Tuple[List[Alias], Dict[str, DistributionSpec]]:
    if not data:
        return [], {}
    if not isinstance(data, Mapping):
        raise ConfigurationError("categories must be a mapping of letter -> definition")

    aliases = []
    specs = {}
    for letter, body in data.items():
        letter = str(letter)
        if isinstance(body, str):
            body = {'members': body}
        if not isinstance(body, Mapping):
            raise ConfigurationError(f"category '{letter}': expected a mapping, got {body!r}")

        description = str(body.get('description', ''))
        if 'members' in body and 'values' in body:
            raise ConfigurationError(f"category '{letter}': give members or values, not both")
        if 'members' in body:
            aliases.append(Alias.union(letter, str(body['members']), description))
        elif 'values' in body:
            values = body['values']
            if isinstance(values, list):
                values = [str(v) for v in values]
            aliases.append(Alias.of(letter, values, description))
        else:
            raise ConfigurationError(f"category '{letter}': needs members or values")

        if body.get('distribution') is not None:
            specs[letter] = spec_from_config(body['distribution'])
    return aliases, specs


def language_from_dict(data: Optional[Mapping[str, Any]], name: str = "") -> LanguageConfig:
    """
    Build a LanguageConfig from its dict form.

    A missing `inventory` section means the full consonant and vowel
    charts; a present section only contains the classes it lists.
    """
    data = data or {}
    if not isinstance(data, Mapping):
        raise ConfigurationError("language configuration must be a mapping")

    default = default_distribution()

    inv_data = data.get('inventory')
    class_specs: Dict[SymbolClass, DistributionSpec] = {}
    if inv_data is None:
        inventory = Inventory.default()
    elif not isinstance(inv_data, Mapping):
        raise ConfigurationError("inventory must be a mapping of class -> symbols")
    else:
        unknown_keys = set(inv_data) - {k.value for k in SymbolClass}
        if unknown_keys:
            raise ConfigurationError(f"unknown inventory classes: {', '.join(sorted(unknown_keys))}")
        members = {}
        for klass in SymbolClass:
            symbols, spec = _class_section(inv_data.get(klass.value), klass)
            members[klass.value] = symbols
            if spec is not None:
                class_specs[klass] = spec
        inventory = Inventory(**members)

    aliases, alias_specs = _aliases(data.get('categories'))

    overrides: Dict[str, DistributionSpec] = {}
    for letter, dist in (data.get('distributions') or {}).items():
        letter = str(letter)
        if letter in alias_specs:
            raise ConfigurationError(
                f"distribution for '{letter}' declared both on the category and in distributions"
            )
        overrides[letter] = spec_from_config(dist)
    overrides.update(alias_specs)

    table = load_categories()
    alias_letters = {a.letter for a in aliases}
    for letter in overrides:
        if not table.is_builtin(letter) and letter not in alias_letters:
            raise UnknownCategory(letter, f"distribution declared for unknown category '{letter}'")

    patterns = data.get('patterns') or ()
    if isinstance(patterns, str):
        patterns = [patterns]
    patterns = tuple(str(p) for p in patterns)

    defaults = generation_defaults()

    window = data.get('exclusion_window')
    if window is None:
        window = defaults.exclusion_window
    if isinstance(window, bool) or not isinstance(window, int) or window < 0:
        raise ConfigurationError(f"exclusion_window must be an integer >= 0, got {window!r}")

    reset = data.get('reset_on_boundary')
    if reset is None:
        reset = defaults.reset_on_boundary
    if not isinstance(reset, bool):
        raise ConfigurationError(f"reset_on_boundary must be true or false, got {reset!r}")

    boundaries = data.get('boundary_characters')
    if boundaries is None:
        boundaries = defaults.boundary_characters
    if not isinstance(boundaries, str):
        raise ConfigurationError(f"boundary_characters must be a string, got {boundaries!r}")

    return LanguageConfig(
        inventory=inventory,
        default_distribution=default,
        class_distributions=class_specs,
        overrides=overrides,
        aliases=tuple(aliases),
        patterns=patterns,
        exclusion_window=window,
        reset_on_boundary=reset,
        boundary_characters=boundaries,
        name=str(data.get('name', name)),
    )


def load_language(path: Union[str, Path]) -> LanguageConfig:
    """Load a language definition from a YAML or JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Language config not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{path}: {e}") from e

    logger.debug("loaded language config %s", path)
    return language_from_dict(data, name=path.stem)


def chart_inventory_section(consonants: Optional[str] = None,
                            vowels: Optional[str] = None,
                            non_pulmonics: Optional[str] = None,
                            others: Optional[str] = None) -> Dict[str, str]:
    """
    Inventory section for ad-hoc languages: unspecified consonants and
    vowels fall back to the full charts, the other classes to nothing.
    """
    chart = load_ipa()
    return {
        'consonants': consonants if consonants is not None else ''.join(chart.symbols('consonants')),
        'vowels': vowels if vowels is not None else ''.join(chart.symbols('vowels')),
        'non_pulmonics': non_pulmonics or '',
        'others': others or '',
    }


__all__ = [
    'LanguageConfig',
    'default_distribution',
    'language_from_dict',
    'load_language',
    'chart_inventory_section',
]
