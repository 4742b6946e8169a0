"""
Tests for CLI Commands
======================
Tests for the conlang command-line interface in conlang/cli.py.
"""

import json
import os
import pytest
import sys
import subprocess
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from conlang.cli import build_parser, language_from_args, patterns_from_args
from conlang.inventory import Inventory

EXAMPLE = ROOT / "conlang" / "configs" / "example.yaml"


def run_cli(*args):
    """Run `python -m conlang` and capture its output as UTF-8."""
    env = dict(os.environ, PYTHONIOENCODING="utf-8")
    return subprocess.run(
        [sys.executable, "-m", "conlang", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
        cwd=str(ROOT),
        env=env,
    )


def lines(output):
    return [line for line in output.splitlines() if line.strip()]


class TestCLIBasic:
    """Basic CLI tests."""

    def test_version_flag(self):
        result = run_cli("--version")
        assert result.returncode == 0
        assert "conlang" in result.stdout.lower()

    def test_help_flag(self):
        result = run_cli("--help")
        assert result.returncode == 0
        assert "generate" in result.stdout
        assert "categories" in result.stdout

    def test_generate_help(self):
        result = run_cli("generate", "--help")
        assert result.returncode == 0
        assert "--pattern" in result.stdout
        assert "--seed" in result.stdout

    def test_no_command(self):
        result = run_cli()
        assert result.returncode == 0


class TestGenerateCommand:
    """Tests for `conlang generate`."""

    def test_text_output(self):
        result = run_cli("generate", "--consonants", "ptk", "--vowels", "ai",
                         "--pattern", "CV", "-n", "5", "--seed", "1")
        assert result.returncode == 0
        words = lines(result.stdout)
        assert len(words) == 5
        for word in words:
            assert word[0] in "ptk" and word[1] in "ai"

    def test_alias(self):
        result = run_cli("g", "--consonants", "ptk", "--vowels", "ai", "-p", "CV", "-n", "3", "-q")
        assert result.returncode == 0
        assert len(lines(result.stdout)) == 3

    def test_seed_reproducible(self):
        args = ("generate", "--consonants", "ptkmn", "--vowels", "aiu",
                "-p", "CVC", "-p", "CV.CV", "-n", "20", "--seed", "42", "-q")
        assert run_cli(*args).stdout == run_cli(*args).stdout

    def test_workers_do_not_change_output(self):
        base = ("generate", "--consonants", "ptkmn", "--vowels", "aiu",
                "-p", "CVC", "-n", "30", "--seed", "9", "-q")
        assert run_cli(*base, "--workers", "1").stdout == run_cli(*base, "--workers", "3").stdout

    def test_syllables_space_separated(self):
        result = run_cli("generate", "--consonants", "ptk", "--vowels", "ai",
                         "-p", "CV.CV", "-n", "4", "--seed", "2", "-q")
        for word in lines(result.stdout):
            assert len(word.split(' ')) == 2

    def test_json_output(self):
        result = run_cli("generate", "--consonants", "ptk", "--vowels", "ai",
                         "-p", "CV", "-n", "3", "--seed", "3", "--format", "json")
        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert len(data) == 3
        assert data[0]['pattern'] == "CV"
        assert len(data[0]['syllables'][0]) == 2

    def test_ssml_output(self):
        result = run_cli("generate", "--consonants", "ptk", "--vowels", "ai",
                         "-p", "CV", "-n", "2", "--seed", "4", "--format", "ssml", "-q")
        for line in lines(result.stdout):
            assert line.startswith('<phoneme alphabet="ipa" ph="')

    def test_exclusion_window_zero(self):
        result = run_cli("generate", "--consonants", "p", "--vowels", "a",
                         "-p", "CC", "-n", "2", "--exclusion-window", "0", "-q")
        assert result.returncode == 0
        assert lines(result.stdout) == ["pp", "pp"]

    def test_config_file(self):
        result = run_cli("generate", "--config", str(EXAMPLE), "-n", "10", "--seed", "5", "-q")
        assert result.returncode == 0
        assert len(lines(result.stdout)) == 10


class TestCLIErrors:
    """Errors print a message and exit with status 1."""

    def test_invalid_pattern(self):
        result = run_cli("generate", "--consonants", "ptk", "--vowels", "ai", "-p", "C?V", "-q")
        assert result.returncode == 1
        assert "Error:" in result.stderr

    def test_unknown_symbol(self):
        result = run_cli("generate", "--consonants", "pt1", "--vowels", "a", "-q")
        assert result.returncode == 1
        assert "1" in result.stderr

    def test_exhausted_pool(self):
        result = run_cli("generate", "--consonants", "p", "--vowels", "a", "-p", "CC", "-q")
        assert result.returncode == 1
        assert "Error:" in result.stderr

    def test_missing_config(self):
        result = run_cli("generate", "--config", "does-not-exist.yaml", "-q")
        assert result.returncode == 1

    def test_config_with_flags(self):
        result = run_cli("generate", "--config", str(EXAMPLE), "--vowels", "a", "-q")
        assert result.returncode == 1


class TestInspectionCommands:
    """Tests for weights, enumerate and categories."""

    def test_weights(self):
        result = run_cli("weights", "--consonants", "pbɣʂʐɟkg", "--vowels", "a", "-p", "C", "-q")
        assert result.returncode == 0
        rows = lines(result.stdout)
        assert len(rows) == 8
        assert "19.51%" in rows[0]
        assert "1.92%" in rows[-1]

    def test_weights_table(self):
        result = run_cli("w", "--consonants", "ptk", "--vowels", "a", "-p", "CV")
        assert result.returncode == 0
        assert "Pattern CV" in result.stdout

    def test_enumerate(self):
        result = run_cli("enumerate", "--consonants", "pt", "--vowels", "a", "-p", "CV", "-q")
        assert result.returncode == 0
        assert lines(result.stdout) == ["pa", "ta"]

    def test_enumerate_limit(self):
        result = run_cli("e", "--consonants", "ptk", "--vowels", "ai", "-p", "CVC", "--limit", "4", "-q")
        assert len(lines(result.stdout)) == 4

    def test_categories(self):
        result = run_cli("categories", "--consonants", "ptkmn", "--vowels", "a", "-q")
        assert result.returncode == 0
        rows = lines(result.stdout)
        assert rows[0].startswith("C")
        assert any(row.startswith("N") and row.rstrip().endswith("mn") for row in rows)


class TestArgumentHandling:
    """In-process tests for argument to language conversion."""

    def test_flags_build_inventory(self):
        args = build_parser().parse_args(["generate", "--consonants", "ptk", "--vowels", "ai"])
        language = language_from_args(args)
        assert language.inventory == Inventory(consonants="ptk", vowels="ai")

    def test_unspecified_vowels_use_chart(self):
        args = build_parser().parse_args(["generate", "--consonants", "ptk"])
        language = language_from_args(args)
        assert language.inventory.vowels == Inventory.default().vowels

    def test_exclusion_window_override(self):
        args = build_parser().parse_args(["generate", "--consonants", "p", "--exclusion-window", "2"])
        assert language_from_args(args).exclusion_window == 2

    def test_negative_exclusion_window(self):
        args = build_parser().parse_args(["generate", "--exclusion-window", "-1"])
        with pytest.raises(ValueError):
            language_from_args(args)

    def test_default_patterns(self):
        args = build_parser().parse_args(["generate", "--consonants", "p", "--vowels", "a"])
        assert patterns_from_args(args, language_from_args(args)) == ["CV"]

    def test_config_patterns(self):
        args = build_parser().parse_args(["generate", "--config", str(EXAMPLE)])
        assert patterns_from_args(args, language_from_args(args))[0] == "CV"

    @pytest.mark.parametrize("argv", [
        ["-q", "generate"],
        ["generate", "-q"],
        ["generate", "--quiet", "--consonants", "p"],
        ["enum", "-q"],
    ])
    def test_quiet_before_or_after_command(self, argv):
        args = build_parser().parse_args(argv)
        assert getattr(args, 'quiet', False) is True

    def test_verbose_after_command(self):
        args = build_parser().parse_args(["categories", "-v"])
        assert getattr(args, 'verbose', False) is True
        assert getattr(args, 'quiet', False) is False

    def test_flags_default_off(self):
        args = build_parser().parse_args(["generate"])
        assert getattr(args, 'quiet', False) is False
        assert getattr(args, 'verbose', False) is False

    def test_trailing_quiet_runs(self):
        result = run_cli("weights", "--consonants", "pt", "--vowels", "a", "-p", "CV", "-q")
        assert result.returncode == 0
        assert "\t" in result.stdout
