import logging
import time
from dataclasses import dataclass
from typing import Optional

from ..continuation import (
    Continuation,
    ContinuationInfinite,
    ContinuationKnownOptimum,
    ContinuationTimeBased,
    ContinuationTotalGeneration,
)
from ..crossover import AbstractCrossover, CrossoverPartiallyMapped
from ..decision import DecisionMakerPercentage, DecisionMakerPercentageDecreasing
from ..events import EventHandler
from ..model import Chromosome, PopulationCreator
from ..mutation import AbstractMutation, MutationRandomExchange
from ..random_source import RandomSource
from ..runner import GARunner
from ..selection import Selector, SelectorAllSortedBest
from .events import TSPEventHandlerLogging
from .fitness import TSPChromosomeValidator, TSPFitnessFunction
from .mutation import TSPMutationGreedy
from .population import TSPPopulationCreatorRandom

logger = logging.getLogger(__name__)


@dataclass
class TSPRunConfig:
    max_population_size: int = 32
    time_limit: Optional[float] = 20.0
    max_generations: Optional[int] = None
    best_count: int = 2
    crossover_percentage: float = 2.0
    mutation_initial_percentage: float = 50.0
    mutation_minimum_percentage: float = 2.0
    mutation_delta: float = 1.0
    mutation_change_step: int = 5000
    use_validator: bool = False
    random_seed: Optional[int] = None


def _percent(part: float, whole: float) -> str:
    if not whole:
        return "n/a"
    return f"{part / whole:.2%}"


class TSPRunner:
    """Solves one TSP instance and logs how the run went."""

    def __init__(self, run_id: str):
        if not run_id:
            raise ValueError("run_id must not be empty")
        self.run_id = run_id
        self.last_runner: Optional[GARunner] = None

    def run_with_default_settings(
        self,
        distances,
        optimum_distance: Optional[float] = None,
        config: Optional[TSPRunConfig] = None,
    ) -> Chromosome:
        cfg = config or TSPRunConfig()
        rng = RandomSource(cfg.random_seed)
        ff = TSPFitnessFunction(distances)
        n_cities = ff.city_count
        validator = TSPChromosomeValidator(n_cities) if cfg.use_validator else None
        population_size = min(n_cities, cfg.max_population_size)

        event_handler = TSPEventHandlerLogging()
        limits = []
        if optimum_distance is not None:
            limits.append(ContinuationKnownOptimum(ff.fitness_for_distance(optimum_distance), event_handler))
        if cfg.time_limit is not None:
            limits.append(ContinuationTimeBased(cfg.time_limit * 1000))
        if cfg.max_generations is not None:
            limits.append(ContinuationTotalGeneration(cfg.max_generations))
        continuation = ContinuationInfinite(limits)

        creator = TSPPopulationCreatorRandom(n_cities, population_size, ff, validator, rng)
        selector = SelectorAllSortedBest(cfg.best_count)
        crossover = CrossoverPartiallyMapped(DecisionMakerPercentage(cfg.crossover_percentage, rng), rng)
        mutation_decision = DecisionMakerPercentageDecreasing(
            cfg.mutation_initial_percentage,
            cfg.mutation_minimum_percentage,
            cfg.mutation_delta,
            cfg.mutation_change_step,
            rng,
        )
        if n_cities >= 4:
            mutation = TSPMutationGreedy(mutation_decision, ff.distances, rng)
        else:
            # greedy windows need at least 4 cities
            mutation = MutationRandomExchange(mutation_decision, rng)
        return self.run(ff, optimum_distance, event_handler, continuation, creator, selector, crossover, mutation)

    def run(
        self,
        fitness_function: TSPFitnessFunction,
        optimum_distance: Optional[float],
        event_handler: EventHandler,
        continuation: Continuation,
        population_creator: PopulationCreator,
        selector: Selector,
        crossover: AbstractCrossover,
        mutation: AbstractMutation,
    ) -> Chromosome:
        n_cities = fitness_function.city_count
        if optimum_distance is not None:
            logger.info(
                "Trying to solve TSP '%s' with %d cities with known optimum of %s",
                self.run_id,
                n_cities,
                optimum_distance,
            )
        else:
            logger.info("Trying to solve TSP '%s' with %d cities", self.run_id, n_cities)

        runner = GARunner(event_handler, continuation, population_creator, selector, crossover, mutation)
        self.last_runner = runner
        t0 = time.perf_counter()
        best = runner.run()
        elapsed = time.perf_counter() - t0

        distance = fitness_function.distance(best)
        compared = ""
        if optimum_distance:
            compared = f" ({_percent(distance, optimum_distance)} of optimum)"
        generations = event_handler.last_generation or 0
        rate = generations / elapsed if elapsed > 0 else float("inf")
        logger.info(
            "Shortest path has length %s%s after %d generations (in %.0f ms which is %.2f generations per second)",
            distance,
            compared,
            generations,
            elapsed * 1000,
            rate,
        )
        logger.info(
            "Crossovers executed: %d out of %d = %s",
            crossover.execution_count,
            crossover.try_count,
            _percent(crossover.execution_count, crossover.try_count),
        )
        logger.info(
            "Mutations executed: %d out of %d = %s",
            mutation.execution_count,
            mutation.try_count,
            _percent(mutation.execution_count, mutation.try_count),
        )
        return best
