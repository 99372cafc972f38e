import csv
import logging
import time
from typing import Iterable, List, TextIO

from ..events import EventHandler
from .fitness import TSPFitnessFunction

logger = logging.getLogger(__name__)


class TSPEventHandlerLogging(EventHandler):
    """Logs every new shortest tour, plus a progress line every ``log_interval`` generations."""

    def __init__(self, nested: Iterable[EventHandler] = (), log_interval: int = 1_000_000):
        super().__init__(nested)
        if log_interval < 1:
            raise ValueError(f"log_interval must be positive: {log_interval}")
        self.log_interval = log_interval
        self._start = time.perf_counter()

    def _elapsed_ms(self) -> int:
        return int((time.perf_counter() - self._start) * 1000)

    def _on_new_population(self, population):
        if population.generation % self.log_interval == 0:
            logger.info("After %d ms at generation %d", self._elapsed_ms(), population.generation)

    def _on_new_fittest_chromosome(self, chromosome):
        ff = chromosome.fitness_function
        distance = ff.distance_for_fitness(chromosome.fitness) if isinstance(ff, TSPFitnessFunction) else None
        logger.info(
            "After %d ms [Gen %s]: New shortest distance [%s]",
            self._elapsed_ms(),
            self.last_generation,
            distance,
        )


class TSPEventHandlerGenerationTracker(EventHandler):
    """Best distance of each population and the best-so-far series."""

    def __init__(self, fitness_function: TSPFitnessFunction, nested: Iterable[EventHandler] = ()):
        super().__init__(nested)
        self.fitness_function = fitness_function
        self.distance_per_population: List[float] = []
        self.distance_best: List[float] = []

    def _on_new_population(self, population):
        distance = self.fitness_function.distance(population.fittest_chromosome())
        self.distance_per_population.append(distance)
        if self.distance_best and self.distance_best[-1] <= distance:
            self.distance_best.append(self.distance_best[-1])
        else:
            self.distance_best.append(distance)


class TSPEventHandlerCSV(EventHandler):
    """Writes ``Generation,Distance`` rows, one per population."""

    def __init__(self, stream: TextIO, fitness_function: TSPFitnessFunction, nested: Iterable[EventHandler] = ()):
        super().__init__(nested)
        self.fitness_function = fitness_function
        self.writer = csv.writer(stream)
        self.writer.writerow(["Generation", "Distance"])

    def _on_new_population(self, population):
        distance = self.fitness_function.distance(population.fittest_chromosome())
        self.writer.writerow([population.generation, int(distance)])
