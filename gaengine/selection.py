import bisect
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .model import Chromosome, sort_by_fitness
from .random_source import RandomSource, ensure_source

logger = logging.getLogger(__name__)


class Selector(ABC):
    """Builds the breeding pool: same length as the input, repetition allowed."""

    @abstractmethod
    def select(self, chromosomes: Sequence[Chromosome]) -> List[Chromosome]:
        raise NotImplementedError


class SelectorAllSortedBest(Selector):
    """Refill the population by cycling through the ``best_count`` fittest."""

    def __init__(self, best_count: int):
        if best_count < 1:
            raise ValueError(f"best_count must be at least 1: {best_count}")
        self.best_count = best_count

    def select(self, chromosomes):
        ranked = sort_by_fitness(chromosomes)
        return [ranked[i % self.best_count] for i in range(len(chromosomes))]


class SelectorAllSortedBestOnly(SelectorAllSortedBest):
    def __init__(self):
        super().__init__(1)


class SelectorAllSortedAll(Selector):
    def select(self, chromosomes):
        return sort_by_fitness(chromosomes)


class SelectorBestSortedRandom(Selector):
    """Random picks among the ``best_count`` fittest chromosomes."""

    def __init__(self, best_count: int, rng: Optional[RandomSource] = None):
        if best_count < 1:
            raise ValueError(f"best_count must be at least 1: {best_count}")
        self.best_count = best_count
        self.rng = ensure_source(rng)

    def select(self, chromosomes):
        best = sort_by_fitness(chromosomes)[: self.best_count]
        return [best[self.rng.uniform_int(len(best))] for _ in range(len(chromosomes))]


class SelectorRandomSortedBestOnly(Selector):
    """The fittest of a random tournament fills every slot."""

    def __init__(self, tournament_size: int, rng: Optional[RandomSource] = None):
        if tournament_size < 2:
            raise ValueError(f"tournament_size must be at least 2: {tournament_size}")
        self.tournament_size = tournament_size
        self.rng = ensure_source(rng)

    def select(self, chromosomes):
        picked = self.rng.unique_ints(self.tournament_size, len(chromosomes))
        winner = sort_by_fitness(chromosomes[i] for i in picked)[0]
        return [winner] * len(chromosomes)


class SelectorFitnessProportional(Selector):
    """Roulette wheel: selection probability proportional to fitness."""

    def __init__(self, rng: Optional[RandomSource] = None):
        self.rng = ensure_source(rng)

    def select(self, chromosomes):
        count = len(chromosomes)
        cumulative = []
        total = 0.0
        for chromosome in chromosomes:
            total += chromosome.fitness
            cumulative.append(total)
        if total <= 0:
            raise ValueError("Fitness proportional selection needs a positive total fitness")
        result = []
        for _ in range(count):
            target = self.rng.uniform() * total
            index = min(bisect.bisect_right(cumulative, target), count - 1)
            result.append(chromosomes[index])
        return result


class SelectorAlternating(Selector):
    """Switches between two selectors every ``every`` generations.

    The generation is read from the event handler the runner reports to.
    """

    def __init__(self, first: Selector, second: Selector, every: int, event_handler):
        if every < 1:
            raise ValueError(f"every may not be < 1: {every}")
        self.first = first
        self.second = second
        self.every = every
        self.event_handler = event_handler
        self.current = first

    def select(self, chromosomes):
        generation = self.event_handler.last_generation
        if generation is not None and generation % self.every == 0:
            self.current = self.first if self.current is self.second else self.second
            logger.debug("Switching selector to %s", type(self.current).__name__)
        return self.current.select(chromosomes)
