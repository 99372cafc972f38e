import random
from typing import List, Optional, Union


class RandomSource:
    """Random numbers for every stochastic operator of a run.

    Pass a seed (or a seeded ``random.Random``) to get reproducible runs.
    """

    def __init__(self, seed: Union[int, random.Random, None] = None):
        if isinstance(seed, random.Random):
            self._rng = seed
        else:
            self._rng = random.Random(seed)

    def uniform(self) -> float:
        return self._rng.random()

    def uniform_int(self, max_exclusive: int) -> int:
        if max_exclusive < 1:
            raise ValueError(f"max_exclusive must be positive: {max_exclusive}")
        return self._rng.randrange(max_exclusive)

    def unique_ints(self, count: int, max_exclusive: int) -> List[int]:
        """Return ``count`` distinct ints in [0, max_exclusive), ascending.

        Uses rejection sampling, so the number of draws is unbounded in the
        worst case and grows sharply as ``count`` approaches ``max_exclusive``.
        """
        if count < 2:
            raise ValueError("Must create at least 2 values!")
        if max_exclusive < count:
            raise ValueError(f"Must create at least {count} different values!")
        used = [False] * max_exclusive
        cardinality = 0
        while cardinality < count:
            value = self._rng.randrange(max_exclusive)
            if not used[value]:
                used[value] = True
                cardinality += 1
        return [i for i, flag in enumerate(used) if flag]


def ensure_source(rng: Optional[RandomSource]) -> RandomSource:
    return rng if rng is not None else RandomSource()
