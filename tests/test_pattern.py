"""
Tests for Pattern Compiler
==========================
Tests for PatternCompiler and Pattern in conlang/pattern.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from conlang.errors import EmptyPattern, InvalidPatternToken, PatternError
from conlang.pattern import Boundary, PatternCompiler, PatternToken, compile_pattern


@pytest.fixture
def compiler():
    return PatternCompiler("CVNP")


def categories(pattern):
    return [t.category for t in pattern.positions]


class TestCompile:
    """Tests for PatternCompiler.compile()."""

    def test_simple(self, compiler):
        pattern = compiler.compile("CVC")
        assert categories(pattern) == ['C', 'V', 'C']
        assert len(pattern) == 3
        assert all(isinstance(t, PatternToken) for t in pattern.tokens)

    def test_offsets(self, compiler):
        pattern = compiler.compile("CV.N")
        assert [t.offset for t in pattern.tokens] == [0, 1, 2, 3]

    def test_boundaries(self, compiler):
        pattern = compiler.compile("CV.CVC")
        assert isinstance(pattern.tokens[2], Boundary)
        assert len(pattern) == 5
        assert [categories_of(s) for s in pattern.syllables()] == [['C', 'V'], ['C', 'V', 'C']]

    def test_space_is_boundary(self, compiler):
        pattern = compiler.compile("CV CV")
        assert len(pattern.syllables()) == 2

    def test_boundary_runs_collapse(self, compiler):
        pattern = compiler.compile("CV. .CV")
        assert sum(isinstance(t, Boundary) for t in pattern.tokens) == 1

    def test_edge_boundaries_dropped(self, compiler):
        pattern = compiler.compile(" .CV. ")
        assert all(isinstance(t, PatternToken) for t in pattern.tokens)
        assert str(pattern) == "CV"

    def test_source_kept(self, compiler):
        assert compiler.compile("CV.C").source == "CV.C"

    def test_str(self, compiler):
        assert str(compiler.compile("CV.CVC")) == "CV.CVC"


class TestErrors:
    """Tests for compile failures."""

    def test_invalid_token(self, compiler):
        with pytest.raises(InvalidPatternToken) as exc:
            compiler.compile("CXV")
        assert exc.value.char == 'X'
        assert exc.value.position == 1
        assert exc.value.pattern == "CXV"

    def test_first_invalid_reported(self, compiler):
        with pytest.raises(InvalidPatternToken) as exc:
            compiler.compile("C12")
        assert exc.value.char == '1'

    def test_empty(self, compiler):
        with pytest.raises(EmptyPattern):
            compiler.compile("")

    def test_only_boundaries(self, compiler):
        with pytest.raises(EmptyPattern):
            compiler.compile(" . ")

    def test_errors_share_base(self):
        assert issubclass(InvalidPatternToken, PatternError)
        assert issubclass(EmptyPattern, PatternError)

    def test_boundary_overlap_rejected(self):
        with pytest.raises(ValueError):
            PatternCompiler("CV.", boundary_characters=".")


class TestCompilePattern:
    """Tests for the compile_pattern() helper."""

    def test_custom_boundaries(self):
        pattern = compile_pattern("CV-CV", "CV", boundary_characters="-")
        assert len(pattern.syllables()) == 2

    def test_dot_invalid_without_boundary(self):
        with pytest.raises(InvalidPatternToken):
            compile_pattern("CV.CV", "CV", boundary_characters="-")


def categories_of(syllable):
    return [t.category for t in syllable]
