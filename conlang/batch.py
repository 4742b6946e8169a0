#!/usr/bin/env python3
"""
Batch Generation
================
Generates many words across several patterns, optionally on a thread pool.

Generation calls share only read-only state (inventory, compiled patterns,
cached weight tables), so they can run side by side without locking. Every
item gets its own RNG seeded from one parent stream before any work starts,
which makes the output identical for every worker count.

Usage:
    from conlang.batch import BatchConfig, generate_batch

    items = generate_batch(gen, ["CV", "CVC"], count=100, seed=42,
                           config=BatchConfig(workers=4))
    for item in items:
        print(item.pattern, item.word)
"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .entropy import derive_seeds, make_rng
from .generator import SequenceGenerator, Word
from .settings import get_setting

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class BatchConfig:
    """Configuration for batch generation."""
    workers: Optional[int] = None      # Worker threads (1 = sequential)

    def __post_init__(self):
        if self.workers is None:
            self.workers = get_setting("batch.workers")
        if self.workers is None:
            raise ValueError("batch settings missing in app.yaml: workers")
        if self.workers < 1:
            raise ValueError(f"batch.workers must be >= 1, got {self.workers}")


@dataclass(frozen=True)
class BatchItem:
    """One generated word and the pattern it came from."""
    index: int
    pattern: str
    word: Word


# =============================================================================
# Generation
# =============================================================================

def generate_batch(generator: SequenceGenerator,
                   patterns: Sequence[str],
                   count: int,
                   seed: Optional[int] = None,
                   config: Optional[BatchConfig] = None) -> List[BatchItem]:
    """
    Generate `count` words, each from a pattern picked at random.

    All patterns are compiled and resolved before any word is generated,
    so configuration errors surface before work is scheduled. Items come
    back in index order.
    """
    if not patterns:
        raise ValueError("at least one pattern is required")
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    config = config or BatchConfig()

    compiled = [generator.compile(p) for p in patterns]
    for pattern in compiled:
        generator.slots(pattern)

    seeds = derive_seeds(make_rng(seed), count)

    def work(index: int) -> BatchItem:
        rng = random.Random(seeds[index])
        pattern = compiled[rng.randrange(len(compiled))]
        return BatchItem(index=index, pattern=pattern.source, word=generator.generate_word(pattern, rng))

    if config.workers <= 1 or count < 2:
        return [work(i) for i in range(count)]

    logger.debug("generating %d words on %d workers", count, config.workers)
    with ThreadPoolExecutor(max_workers=config.workers) as executor:
        return list(executor.map(work, range(count)))


__all__ = [
    'BatchConfig',
    'BatchItem',
    'generate_batch',
]
