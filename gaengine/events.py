import logging
from typing import Iterable, Optional

from .model import Chromosome, Population

logger = logging.getLogger(__name__)


class EventHandler:
    """Observer of a run.

    Keeps the last population and the overall fittest chromosome, runs its own
    hook and then the nested handlers, in order. Subclasses override
    ``_on_new_population`` / ``_on_new_fittest_chromosome``.
    """

    def __init__(self, nested: Iterable["EventHandler"] = ()):
        self.nested = list(nested)
        self.last_population: Optional[Population] = None
        self.fittest_chromosome: Optional[Chromosome] = None

    @property
    def last_generation(self) -> Optional[int]:
        """Generation of the last reported population, None before the first one."""
        return self.last_population.generation if self.last_population is not None else None

    def _on_new_population(self, population: Population) -> None:
        pass

    def _on_new_fittest_chromosome(self, chromosome: Chromosome) -> None:
        pass

    def on_new_population(self, population: Population) -> None:
        self.last_population = population
        self._on_new_population(population)
        for handler in self.nested:
            handler.on_new_population(population)

    def on_new_fittest_chromosome(self, chromosome: Chromosome) -> None:
        self.fittest_chromosome = chromosome
        self._on_new_fittest_chromosome(chromosome)
        for handler in self.nested:
            handler.on_new_fittest_chromosome(chromosome)


class EventHandlerLogging(EventHandler):
    def _on_new_fittest_chromosome(self, chromosome):
        logger.info("New fittest [%s]: %s", chromosome.fitness, chromosome.gene_values())
