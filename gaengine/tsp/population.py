import logging
import math
from typing import List, Optional

from ..model import Chromosome, ChromosomeValidator, FitnessFunction, Population, PopulationCreator
from ..random_source import RandomSource, ensure_source

logger = logging.getLogger(__name__)


class TSPPopulationCreatorRandom(PopulationCreator):
    """Generation 0 of distinct, randomly shuffled tours."""

    def __init__(
        self,
        n_cities: int,
        population_size: int,
        fitness_function: FitnessFunction,
        validator: Optional[ChromosomeValidator] = None,
        rng: Optional[RandomSource] = None,
    ):
        if n_cities < 2:
            raise ValueError(f"At least 2 cities are required: {n_cities}")
        if population_size < 2:
            raise ValueError(f"population_size must be at least 2: {population_size}")
        if population_size > math.factorial(n_cities):
            raise ValueError(
                f"Cannot create {population_size} distinct chromosomes from {n_cities} cities"
            )
        self.n_cities = n_cities
        self.population_size = population_size
        self.fitness_function = fitness_function
        self.validator = validator
        self.rng = ensure_source(rng)

    def _swap(self, tour: List[int]) -> None:
        a, b = self.rng.unique_ints(2, self.n_cities)
        tour[a], tour[b] = tour[b], tour[a]

    def create_initial_population(self) -> Population:
        chromosomes: List[Chromosome] = []
        seen = set()
        while len(chromosomes) < self.population_size:
            tour = list(range(self.n_cities))
            for _ in range(self.n_cities):
                self._swap(tour)
            chromosome = Chromosome(self.fitness_function, tour, self.validator)
            # n swaps only reach permutations of one parity; keep swapping a
            # rejected tour instead of starting over
            while chromosome in seen or not chromosome.is_valid():
                self._swap(tour)
                chromosome = Chromosome(self.fitness_function, tour, self.validator)
            seen.add(chromosome)
            chromosomes.append(chromosome)
        logger.debug("Created %d chromosomes of %d cities", len(chromosomes), self.n_cities)
        return Population(0, chromosomes)
