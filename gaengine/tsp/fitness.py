import logging
from typing import Sequence, Union

import numpy as np

from ..model import Chromosome, ChromosomeValidator, FitnessFunction

logger = logging.getLogger(__name__)


def as_distance_matrix(distances) -> np.ndarray:
    matrix = np.asarray(distances, dtype=float)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError("Matrix must be symmetrical!")
    if not np.array_equal(matrix, matrix.T):
        raise ValueError("Matrix must be symmetrical!")
    return matrix


class TSPFitnessFunction(FitnessFunction):
    """Fitness of a tour: ``worst_case_distance - distance``.

    The worst case is the largest edge times ``n + 1``, so every closed tour
    scores positive and a shorter tour always scores higher.
    """

    def __init__(self, distances, scaling_factor: float = 1.0):
        self.distances = as_distance_matrix(distances)
        self.scaling_factor = scaling_factor
        n = self.distances.shape[0]
        longest = float(self.distances[np.triu_indices(n, k=1)].max()) if n > 1 else 0.0
        self._worst_case = longest * (n + 1) * scaling_factor

    @property
    def city_count(self) -> int:
        return self.distances.shape[0]

    def worst_case_distance(self) -> float:
        return self._worst_case

    def distance(self, tour: Union[Chromosome, Sequence[int]]) -> float:
        """Closed tour length, including the edge back to the start."""
        values = tour.gene_values() if isinstance(tour, Chromosome) else tour
        idx = np.asarray(values, dtype=int)
        return float(self.distances[idx, np.roll(idx, -1)].sum())

    def fitness_for_distance(self, distance: float) -> float:
        return self._worst_case - distance * self.scaling_factor

    def distance_for_fitness(self, fitness: float) -> float:
        return (self._worst_case - fitness) / self.scaling_factor

    def fitness(self, chromosome):
        return self.fitness_for_distance(self.distance(chromosome))


class TSPChromosomeValidator(ChromosomeValidator):
    """Accepts exactly the permutations of ``0..n_cities-1``."""

    def __init__(self, n_cities: int):
        if n_cities < 1:
            raise ValueError(f"n_cities must be positive: {n_cities}")
        self.n_cities = n_cities

    def is_valid_chromosome(self, chromosome):
        values = chromosome.gene_values()
        if len(values) != self.n_cities:
            logger.warning("Chromosome has %d genes, expected %d: %s", len(values), self.n_cities, values)
            return False
        present = set(values)
        for city in range(self.n_cities):
            if city not in present:
                logger.warning("Gene %d is missing in chromosome %s", city, values)
                return False
        return True
