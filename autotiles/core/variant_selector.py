"""
Blob AutoTiles - Variant Selection

Seeded random picks among interchangeable tile ids. The random source is
passed in, so a pass is reproducible from its seed and cell order alone.
"""

import random
from typing import Iterable, TypeVar

T = TypeVar("T")


class VariantSelector:
    """Uniform picks from variant groups using one shared random stream."""

    def __init__(self, rng: random.Random):
        self.rng = rng

    @classmethod
    def seeded(cls, seed: int) -> "VariantSelector":
        return cls(random.Random(seed))

    def pick(self, variants: Iterable[int]) -> int:
        """
        Pick one tile id uniformly at random.

        Candidates are sorted first so set iteration order cannot change
        the result.

        Raises:
            ValueError: If there are no candidates.
        """
        candidates = sorted(variants)
        if not candidates:
            raise ValueError("Cannot pick from an empty variant group")
        return candidates[self.rng.randrange(len(candidates))]

    def shuffled(self, items: Iterable[T]) -> list[T]:
        """Return a Fisher-Yates shuffled copy drawn from the same stream."""
        result = list(items)
        n = len(result)
        while n > 1:
            n -= 1
            k = self.rng.randrange(n + 1)
            result[k], result[n] = result[n], result[k]
        return result
