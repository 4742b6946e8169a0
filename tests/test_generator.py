"""
Tests for Sequence Generator
============================
Tests for constrained weighted sampling in conlang/generator.py.
"""

import random
from collections import Counter

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from conlang.categories import CategoryResolver
from conlang.distribution import Custom, DistributionPolicy, Sinusoidal, Uniform
from conlang.errors import (
    EmptyPattern,
    ExhaustedPool,
    InvalidPatternToken,
    MissingWeight,
    UnknownCategory,
)
from conlang.generator import GenerationState, SequenceGenerator, Word, generate, sample
from conlang.inventory import Inventory, Symbol


class ForbiddenRng:
    """Random source that fails the test if it is ever consulted."""

    def random(self):
        raise AssertionError("rng consulted before validation finished")


class CountingRng:
    """Wraps random.Random and counts draws."""

    def __init__(self, seed):
        self._rng = random.Random(seed)
        self.calls = 0

    def random(self):
        self.calls += 1
        return self._rng.random()


def text(symbols):
    return ''.join(s.grapheme for s in symbols)


@pytest.fixture
def gen():
    return SequenceGenerator.build(Inventory(consonants="ptkmn", vowels="aiu"))


class TestSample:
    """Tests for the sample() selection rule."""

    def test_first_reaching_draw(self):
        pairs = [(Symbol('a'), 0.5), (Symbol('b'), 0.3), (Symbol('c'), 0.2)]
        assert sample(pairs, 0.0).grapheme == 'a'
        assert sample(pairs, 0.5).grapheme == 'a'
        assert sample(pairs, 0.51).grapheme == 'b'
        assert sample(pairs, 0.99).grapheme == 'c'

    def test_zero_weight_never_picked(self):
        pairs = [(Symbol('a'), 0.0), (Symbol('b'), 1.0)]
        assert sample(pairs, 0.0).grapheme == 'b'

    def test_rounding_falls_back_to_last(self):
        pairs = [(Symbol('a'), 0.5), (Symbol('b'), 0.4999999), (Symbol('c'), 0.0)]
        assert sample(pairs, 0.99999999).grapheme == 'b'


class TestGenerationState:
    """Tests for the exclusion window."""

    def test_window_one(self):
        state = GenerationState(1)
        state.push(Symbol('a'))
        state.push(Symbol('b'))
        assert state.excluded() == (Symbol('b'),)
        assert state.previous == Symbol('b')

    def test_window_two(self):
        state = GenerationState(2)
        for g in "abc":
            state.push(Symbol(g))
        assert state.excluded() == (Symbol('b'), Symbol('c'))

    def test_window_zero(self):
        state = GenerationState(0)
        state.push(Symbol('a'))
        assert state.excluded() == ()
        assert state.previous is None

    def test_reset(self):
        state = GenerationState(1)
        state.push(Symbol('a'))
        state.reset()
        assert state.excluded() == ()


class TestGenerate:
    """Tests for SequenceGenerator.generate_word() and generate()."""

    def test_length_matches_pattern(self, gen):
        rng = random.Random(1)
        assert len(gen.generate("CVCV", rng)) == 4
        assert len(gen.generate("CV.CVC", rng)) == 5

    def test_symbols_from_category(self, gen):
        rng = random.Random(2)
        for _ in range(200):
            c, v = gen.generate("CV", rng)
            assert c.grapheme in "ptkmn"
            assert v.grapheme in "aiu"

    def test_one_draw_per_position(self, gen):
        rng = CountingRng(3)
        gen.generate("CV.CVC", rng)
        assert rng.calls == 5

    def test_deterministic(self, gen):
        a = [text(gen.generate("CVCVC", random.Random(99))) for _ in range(5)]
        b = [text(gen.generate("CVCVC", random.Random(99))) for _ in range(5)]
        assert a == b

    def test_syllables(self, gen):
        word = gen.generate_word("CV.CVC", random.Random(4))
        assert isinstance(word, Word)
        assert [len(s) for s in word.syllables] == [2, 3]
        assert word.ipa.count(' ') == 1
        assert str(word) == word.ipa
        assert word.pattern == "CV.CVC"

    def test_ssml(self, gen):
        word = gen.generate_word("CV", random.Random(5))
        assert word.ssml() == f'<phoneme alphabet="ipa" ph="{word.ipa}"></phoneme>'

    def test_module_generate(self):
        out = generate("CV", Inventory(consonants="p", vowels="a"), random.Random(0))
        assert text(out) == "pa"


class TestAdjacencyExclusion:
    """No symbol is emitted twice in a row."""

    def test_no_adjacent_repeats(self):
        gen = SequenceGenerator.build(Inventory(consonants="ptk", vowels="ai"))
        rng = random.Random(2024)
        for _ in range(10000):
            seq = gen.generate("CCVVCC", rng)
            assert all(a != b for a, b in zip(seq, seq[1:]))

    def test_boundary_does_not_reset(self):
        gen = SequenceGenerator.build(Inventory(consonants="pt", vowels="a"))
        rng = random.Random(7)
        for _ in range(500):
            seq = gen.generate("C.C", rng)
            assert seq[0] != seq[1]

    def test_non_adjacent_repeat_allowed(self):
        gen = SequenceGenerator.build(Inventory(consonants="pt"))
        rng = random.Random(8)
        seen = {text(gen.generate("CCC", rng)) for _ in range(100)}
        assert seen == {"ptp", "tpt"}

    def test_singleton_pool_exhausted(self):
        gen = SequenceGenerator.build(Inventory(vowels="a"))
        with pytest.raises(ExhaustedPool) as exc:
            gen.generate("VV", random.Random(0))
        assert exc.value.token == 'V'
        assert exc.value.position == 1
        assert exc.value.excluded == ['a']

    def test_window_zero_allows_repeats(self):
        gen = SequenceGenerator.build(Inventory(vowels="a"), exclusion_window=0)
        assert text(gen.generate("VV", random.Random(0))) == "aa"

    def test_window_two(self):
        gen = SequenceGenerator.build(Inventory(consonants="pt"), exclusion_window=2)
        with pytest.raises(ExhaustedPool):
            gen.generate("CCC", random.Random(0))

    def test_reset_on_boundary(self):
        inv = Inventory(consonants="p")
        resolver = CategoryResolver(inv)
        policy = DistributionPolicy(default=Uniform())
        gen = SequenceGenerator(resolver, policy, reset_on_boundary=True)
        assert text(gen.generate("C.C", random.Random(0))) == "pp"

        strict = SequenceGenerator(resolver, policy, reset_on_boundary=False)
        with pytest.raises(ExhaustedPool):
            strict.generate("C.C", random.Random(0))

    def test_empty_pool(self):
        gen = SequenceGenerator.build(Inventory(consonants="ptk"))
        with pytest.raises(ExhaustedPool) as exc:
            gen.generate("CV", random.Random(0))
        assert exc.value.token == 'V'

    def test_zero_weight_only_candidate_left(self):
        spec = Custom.from_mapping({'a': 1, 'i': 0})
        gen = SequenceGenerator.build(Inventory(vowels="ai"), distribution=spec)
        with pytest.raises(ExhaustedPool):
            gen.generate("VV", random.Random(0))


class TestDistributionFidelity:
    """Sampling follows the configured weights."""

    def test_conditional_ratio(self):
        """After ɘ, the remaining vowels keep their 15:5 ratio."""
        spec = Custom.from_mapping({'ɘ': 50, 'ɑ': 15, 'i': 5})
        gen = SequenceGenerator.build(Inventory(vowels="ɘɑi"), distribution=spec)
        rng = random.Random(1234)

        counts = Counter()
        for _ in range(20000):
            first, second = gen.generate("VV", rng)
            if first.grapheme == 'ɘ':
                counts[second.grapheme] += 1

        assert counts['ɘ'] == 0
        assert counts['ɑ'] / counts['i'] == pytest.approx(3.0, abs=0.3)

    def test_first_position_shares(self):
        spec = Custom.from_mapping({'a': 3, 'i': 1})
        gen = SequenceGenerator.build(Inventory(vowels="ai"), distribution=spec)
        rng = random.Random(55)
        counts = Counter(gen.generate("V", rng)[0].grapheme for _ in range(20000))
        assert counts['a'] / 20000 == pytest.approx(0.75, abs=0.02)

    def test_zero_weight_never_emitted(self):
        spec = Custom.from_mapping({'a': 1, 'i': 0, 'u': 1})
        gen = SequenceGenerator.build(Inventory(vowels="aiu"), distribution=spec)
        rng = random.Random(6)
        for _ in range(2000):
            assert gen.generate("V", rng)[0].grapheme != 'i'

    def test_sinusoidal_prefers_early_symbols(self):
        gen = SequenceGenerator.build(Inventory(consonants="ptkmnsfl"), distribution=Sinusoidal())
        rng = random.Random(10)
        counts = Counter(gen.generate("C", rng)[0].grapheme for _ in range(20000))
        assert counts['p'] > counts['n'] > counts['l']


class TestValidationBeforeSampling:
    """Errors surface before any randomness is consumed."""

    def test_invalid_token(self, gen):
        with pytest.raises(InvalidPatternToken):
            gen.generate("C1V", ForbiddenRng())

    def test_empty_pattern(self, gen):
        with pytest.raises(EmptyPattern):
            gen.generate("", ForbiddenRng())

    def test_missing_weight(self):
        spec = Custom.from_mapping({'a': 1})
        gen = SequenceGenerator.build(Inventory(vowels="ai"), distribution=spec)
        with pytest.raises(MissingWeight):
            gen.generate("V", ForbiddenRng())

    def test_missing_weight_late_position(self):
        spec = Custom.from_mapping({'p': 1, 'a': 1})
        gen = SequenceGenerator.build(Inventory(consonants="p", vowels="ai"), distribution=spec)
        with pytest.raises(MissingWeight):
            gen.generate("CV", ForbiddenRng())

    def test_unknown_category(self, gen):
        with pytest.raises(UnknownCategory):
            gen.slot('1')


class TestEnumerate:
    """Tests for SequenceGenerator.enumerate()."""

    def test_all_sequences(self):
        gen = SequenceGenerator.build(Inventory(consonants="pt", vowels="a"))
        assert [text(s) for s in gen.enumerate("CV")] == ["pa", "ta"]

    def test_exclusion_applied(self):
        gen = SequenceGenerator.build(Inventory(consonants="pt"))
        assert [text(s) for s in gen.enumerate("CC")] == ["pt", "tp"]

    def test_window_zero(self):
        gen = SequenceGenerator.build(Inventory(consonants="pt"), exclusion_window=0)
        assert [text(s) for s in gen.enumerate("CC")] == ["pp", "pt", "tp", "tt"]

    def test_zero_weights_skipped(self):
        spec = Custom.from_mapping({'a': 1, 'i': 0})
        gen = SequenceGenerator.build(Inventory(vowels="ai"), distribution=spec)
        assert [text(s) for s in gen.enumerate("V")] == ["a"]

    def test_generated_words_are_enumerated(self, gen):
        every = {text(s) for s in gen.enumerate("CVC")}
        rng = random.Random(3)
        for _ in range(200):
            assert text(gen.generate("CVC", rng)) in every
