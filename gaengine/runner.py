import enum
import logging
from typing import List, Optional

from .continuation import Continuation
from .crossover import AbstractCrossover
from .errors import InvariantViolation
from .events import EventHandler
from .model import Chromosome, Population, PopulationCreator
from .mutation import AbstractMutation
from .selection import Selector

logger = logging.getLogger(__name__)


class RunState(enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"


def _check(chromosomes: List[Chromosome], expected_size: int, stage: str) -> None:
    if len(chromosomes) != expected_size:
        raise InvariantViolation(f"{stage} changed the population size from {expected_size} to {len(chromosomes)}")
    for index, chromosome in enumerate(chromosomes):
        if not chromosome.is_valid():
            raise InvariantViolation(f"{stage} created illegal chromosome at index {index}")


class GARunner:
    """One run of the genetic algorithm.

    Generation 0 comes from the population creator; every further generation
    is select -> crossover -> mutate of the previous one, until the
    continuation says stop. A runner runs once; build fresh strategy objects
    for another run.
    """

    def __init__(
        self,
        event_handler: EventHandler,
        continuation: Continuation,
        population_creator: PopulationCreator,
        selector: Selector,
        crossover: AbstractCrossover,
        mutation: AbstractMutation,
    ):
        for name, value in (
            ("event_handler", event_handler),
            ("continuation", continuation),
            ("population_creator", population_creator),
            ("selector", selector),
            ("crossover", crossover),
            ("mutation", mutation),
        ):
            if value is None:
                raise ValueError(f"{name} is required")
        self.event_handler = event_handler
        self.continuation = continuation
        self.population_creator = population_creator
        self.selector = selector
        self.crossover = crossover
        self.mutation = mutation
        self.state = RunState.NOT_STARTED
        self.last_population: Optional[Population] = None
        self.overall_best: Optional[Chromosome] = None

    def run(self) -> Chromosome:
        if self.state is not RunState.NOT_STARTED:
            raise RuntimeError(f"Runner cannot be started in state {self.state.value}")
        self.state = RunState.RUNNING
        try:
            return self._run()
        finally:
            self.state = RunState.STOPPED

    def _run(self) -> Chromosome:
        population = self.population_creator.create_initial_population()
        size = len(population)
        _check(population.all_chromosomes(), size, "Population creator")
        self.continuation.on_start()
        while True:
            self.last_population = population
            self.event_handler.on_new_population(population)
            fittest = population.fittest_chromosome()
            if self.overall_best is None or fittest.is_fitter_than(self.overall_best):
                self.overall_best = fittest
                self.event_handler.on_new_fittest_chromosome(fittest)
            if not self.continuation.should_continue(population):
                break
            chromosomes = self.selector.select(population.all_chromosomes())
            _check(chromosomes, size, "Selection")
            chromosomes = self.crossover.crossover(chromosomes)
            _check(chromosomes, size, "Crossover")
            chromosomes = self.mutation.mutate(chromosomes)
            _check(chromosomes, size, "Mutation")
            population = Population(population.generation + 1, chromosomes)
        logger.debug("Run stopped at generation %d", population.generation)
        return self.overall_best
