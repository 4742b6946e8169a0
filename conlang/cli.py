#!/usr/bin/env python3
"""
Conlang CLI
===========
Command-line interface for phoneme sequence generation.

Usage:
    conlang generate --consonants ptkmn --vowels aiu --pattern CV --pattern CVC -n 20
    conlang generate --config mylang.yaml --seed 7 --format json
    conlang weights --config mylang.yaml --pattern CVC
    conlang enumerate --consonants ptk --vowels ai --pattern CV
    conlang categories --config mylang.yaml
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from conlang import __version__
from conlang.batch import BatchConfig, generate_batch
from conlang.config import LanguageConfig, chart_inventory_section, language_from_dict, load_language
from conlang.errors import ConlangError
from conlang.generator import SequenceGenerator
from conlang.settings import get_setting

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

OUTPUT_FORMATS = ['text', 'json', 'ssml']

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False, console: Optional[Console] = None,
                 err_console: Optional[Console] = None):
        self.quiet = quiet
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def print(self, *args, **kwargs):
        if not self.quiet:
            self.console.print(*args, **kwargs)

    def status(self, msg: str):
        """Progress note on stderr, so piped results stay clean."""
        if not self.quiet:
            self.err_console.print(msg, style="dim", markup=False, highlight=False)

    def result(self, text: str):
        """Print a result line; never suppressed."""
        self.console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)

    def error(self, msg: str):
        self.err_console.print(f"Error: {msg}", markup=False, highlight=False)

    def table(self, title: str, headers: list, rows: list):
        """Print a formatted table."""
        if self.quiet:
            return
        table = Table(title=title)
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*(str(c) for c in row))
        self.console.print(table)


def configure_logging(verbose: bool = False):
    """Route log records to stderr through rich."""
    level = logging.DEBUG if verbose else get_setting("logging.level", "WARNING")
    logging.basicConfig(
        level=level,
        format=get_setting("logging.format", "%(message)s"),
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def language_from_args(args) -> LanguageConfig:
    """Build the language from --config or the inventory flags."""
    flags = [args.consonants, args.vowels, args.non_pulmonic, args.others]
    if args.config:
        if any(f is not None for f in flags):
            raise ValueError("--config cannot be combined with inventory flags")
        language = load_language(Path(args.config).expanduser())
    else:
        language = language_from_dict({
            'inventory': chart_inventory_section(
                consonants=args.consonants,
                vowels=args.vowels,
                non_pulmonics=args.non_pulmonic,
                others=args.others,
            ),
        })

    if getattr(args, 'exclusion_window', None) is not None:
        if args.exclusion_window < 0:
            raise ValueError("--exclusion-window must be >= 0")
        language = dataclasses.replace(language, exclusion_window=args.exclusion_window)
    return language


def patterns_from_args(args, language: LanguageConfig) -> List[str]:
    """Patterns from the command line, else the language, else app defaults."""
    if args.pattern:
        return list(args.pattern)
    if language.patterns:
        return list(language.patterns)
    return list(get_setting("cli.default_patterns", ["CV"]))


def _render(symbols) -> str:
    return ''.join(s.grapheme for s in symbols)


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate words."""
    language = language_from_args(args)
    gen = SequenceGenerator.from_language(language)
    patterns = patterns_from_args(args, language)
    count = args.count if args.count is not None else get_setting("cli.default_count", 100)

    out.status(f"Generating {count} words from {', '.join(patterns)}...")
    items = generate_batch(gen, patterns, count, seed=args.seed,
                           config=BatchConfig(workers=args.workers))

    if args.format == 'json':
        data = [
            {
                'pattern': item.pattern,
                'ipa': item.word.ipa,
                'syllables': [[s.grapheme for s in syl] for syl in item.word.syllables],
            }
            for item in items
        ]
        out.result(json.dumps(data, ensure_ascii=False, indent=2))
    elif args.format == 'ssml':
        for item in items:
            out.result(item.word.ssml())
    else:
        for item in items:
            out.result(item.word.ipa)
    return 0


def cmd_weights(args, out: Output):
    """Show the weight table for each category of a pattern."""
    language = language_from_args(args)
    gen = SequenceGenerator.from_language(language)
    patterns = patterns_from_args(args, language)

    for source in patterns:
        seen = set()
        rows = []
        for slot in gen.slots(source):
            if slot.category in seen:
                continue
            seen.add(slot.category)
            for symbol, weight in slot.items():
                rows.append((slot.category, slot.spec.describe(), symbol.grapheme, f"{weight * 100:.2f}%"))
        if out.quiet:
            for row in rows:
                out.result('\t'.join(row))
        else:
            out.table(f"Pattern {source}", ['Category', 'Distribution', 'Symbol', 'Weight'], rows)
    return 0


def cmd_enumerate(args, out: Output):
    """List every sequence a pattern can produce."""
    language = language_from_args(args)
    gen = SequenceGenerator.from_language(language)
    limit = args.limit if args.limit is not None else get_setting("cli.enumerate_limit", 500)

    shown = 0
    for source in patterns_from_args(args, language):
        for sequence in gen.enumerate(source):
            if shown >= limit:
                out.status(f"... stopped after {limit} sequences")
                return 0
            out.result(_render(sequence))
            shown += 1
    return 0


def cmd_categories(args, out: Output):
    """List category letters and the symbols they resolve to."""
    language = language_from_args(args)
    gen = SequenceGenerator.from_language(language)
    resolver = gen.resolver

    rows = []
    for token in resolver.tokens():
        pool = resolver.resolve(token)
        rows.append((token, resolver.describe(token), _render(pool) or '-'))

    if out.quiet:
        for row in rows:
            out.result('\t'.join(row))
    else:
        out.table(f"Categories ({len(language.inventory)} symbols)", ['Letter', 'Selects', 'Pool'], rows)
    return 0


# =============================================================================
# Main
# =============================================================================

def _add_language_args(p: argparse.ArgumentParser):
    p.add_argument('--config', '-c', help='Language config file (YAML or JSON)')
    p.add_argument('--consonants', help='Consonant symbols (default: full chart)')
    p.add_argument('--vowels', help='Vowel symbols (default: full chart)')
    p.add_argument('--non-pulmonic', dest='non_pulmonic', help='Non-pulmonic symbols')
    p.add_argument('--others', help='Other symbols')
    p.add_argument('--pattern', '-p', action='append',
                   help='Phonotactic pattern like CVC or VV; repeat for several patterns')
    p.add_argument('--exclusion-window', type=int,
                   help='Number of recent symbols excluded from each draw')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='conlang',
        description='Conlang - Phoneme Sequence Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate --consonants ptkmn --vowels aiu --pattern CVC -n 10
  %(prog)s generate --config mylang.yaml --seed 42 --format json
  %(prog)s weights --consonants pbɣʂʐɟkg --pattern C
  %(prog)s enumerate --consonants ptk --vowels ai --pattern CV
  %(prog)s categories
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging and tracebacks')

    # Accept the global flags after the subcommand too
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--quiet', '-q', action='store_true', default=argparse.SUPPRESS,
                        help='Suppress non-essential output')
    common.add_argument('--verbose', '-v', action='store_true', default=argparse.SUPPRESS,
                        help='Debug logging and tracebacks')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], parents=[common],
                              help='Generate words')
    _add_language_args(p)
    p.add_argument('-n', '--count', type=int, help='Number of words (default: from app.yaml)')
    p.add_argument('--seed', '-s', type=int, help='Random seed for reproducible output')
    p.add_argument('--workers', '-w', type=int, help='Worker threads (default: from app.yaml)')
    p.add_argument('--format', '-f', choices=OUTPUT_FORMATS, default='text', help='Output format')

    # --- weights ---
    p = subparsers.add_parser('weights', aliases=['w'], parents=[common],
                              help='Show weight tables')
    _add_language_args(p)

    # --- enumerate ---
    p = subparsers.add_parser('enumerate', aliases=['enum', 'e'], parents=[common],
                              help='List all sequences')
    _add_language_args(p)
    p.add_argument('--limit', '-l', type=int, help='Max sequences (default: from app.yaml)')

    # --- categories ---
    p = subparsers.add_parser('categories', aliases=['cat'], parents=[common],
                              help='List category letters')
    _add_language_args(p)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    verbose = getattr(args, 'verbose', False)
    configure_logging(verbose)

    # Handle aliases
    cmd_map = {
        'gen': 'generate', 'g': 'generate',
        'w': 'weights',
        'enum': 'enumerate', 'e': 'enumerate',
        'cat': 'categories',
    }
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=getattr(args, 'quiet', False))

    commands = {
        'generate': cmd_generate,
        'weights': cmd_weights,
        'enumerate': cmd_enumerate,
        'categories': cmd_categories,
    }

    handler = commands[command]
    try:
        return handler(args, out)
    except KeyboardInterrupt:
        out.print("\nCancelled.")
        return 130
    except (ConlangError, ValueError, FileNotFoundError) as e:
        out.error(str(e))
        if verbose:
            logger.exception("command %s failed", command)
        return 1


if __name__ == '__main__':
    sys.exit(main())
