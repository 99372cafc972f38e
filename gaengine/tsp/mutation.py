import logging
from typing import List, Optional

import numpy as np

from ..decision import DecisionMaker, DecisionMakerAlways
from ..events import EventHandler
from ..mutation import AbstractMutation, _require_genes, random_window
from ..random_source import RandomSource
from .fitness import as_distance_matrix

logger = logging.getLogger(__name__)


def greedy_order(distances) -> List[int]:
    """Nearest-neighbour tour starting at city 0; ties go to the lowest index."""
    matrix = np.asarray(distances, dtype=float)
    n = matrix.shape[0]
    tour = [0]
    visited = np.zeros(n, dtype=bool)
    visited[0] = True
    current = 0
    while len(tour) < n:
        row = np.where(visited, np.inf, matrix[current])
        current = int(np.argmin(row))
        visited[current] = True
        tour.append(current)
    return tour


class TSPMutationGreedy(AbstractMutation):
    """Reorder a random window of cities by a nearest-neighbour walk."""

    def __init__(self, decision_maker: DecisionMaker, distances, rng: Optional[RandomSource] = None):
        super().__init__(decision_maker, rng)
        self.distances = as_distance_matrix(distances)

    def execute_mutation(self, chromosome):
        count = _require_genes(chromosome, 4)
        low, high = random_window(self.rng, count)
        genes = chromosome.gene_values()
        window = np.asarray(genes[low:high])
        order = greedy_order(self.distances[np.ix_(window, window)])
        genes[low:high] = [int(window[i]) for i in order]
        return chromosome.derive(genes)


class TSPMutationGreedyBeginning(AbstractMutation):
    """Greedy mutation on every chromosome during the first generations.

    Once the shared event handler reports ``switch_generation`` the fallback
    takes over for good, and this mutation adopts its decision maker.
    """

    def __init__(
        self,
        distances,
        event_handler: EventHandler,
        fallback: AbstractMutation,
        switch_generation: int = 15,
        rng: Optional[RandomSource] = None,
    ):
        super().__init__(DecisionMakerAlways(), rng)
        if event_handler is None or fallback is None:
            raise ValueError("event_handler and fallback are required")
        if switch_generation < 0:
            raise ValueError(f"switch_generation may not be negative: {switch_generation}")
        self.greedy = TSPMutationGreedy(self.decision_maker, distances, self.rng)
        self.event_handler = event_handler
        self.fallback = fallback
        self.switch_generation = switch_generation
        self.switched = False

    def _check_switch(self) -> None:
        if self.switched:
            return
        generation = self.event_handler.last_generation
        if generation is not None and generation >= self.switch_generation:
            self.switched = True
            self.decision_maker = self.fallback.decision_maker
            logger.debug("Switching to %s at generation %d", type(self.fallback).__name__, generation)

    def mutate(self, chromosomes):
        self._check_switch()
        return super().mutate(chromosomes)

    def execute_mutation(self, chromosome):
        if self.switched:
            return self.fallback.execute_mutation(chromosome)
        return self.greedy.execute_mutation(chromosome)
