from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from .decision import DecisionMaker
from .model import Chromosome
from .random_source import RandomSource, ensure_source


class AbstractCrossover(ABC):
    """Decision-gated recombination over a whole population.

    Parents are taken in groups of ``crossover_chromosome_count`` (wrapping
    around the population) until as many children as inputs exist.
    """

    def __init__(
        self,
        crossover_chromosome_count: int,
        decision_maker: DecisionMaker,
        rng: Optional[RandomSource] = None,
    ):
        if crossover_chromosome_count < 2:
            raise ValueError("At least 2 chromosomes are required for a crossover!")
        if decision_maker is None:
            raise ValueError("decision_maker is required")
        self.crossover_chromosome_count = crossover_chromosome_count
        self.decision_maker = decision_maker
        self.rng = ensure_source(rng)
        self.try_count = 0
        self.execution_count = 0

    @abstractmethod
    def execute_crossover(self, parents: Sequence[Chromosome]) -> List[Chromosome]:
        raise NotImplementedError

    def crossover(self, chromosomes: Sequence[Chromosome]) -> List[Chromosome]:
        self.try_count += 1
        if not self.decision_maker.should_do_it():
            return list(chromosomes)
        self.execution_count += 1
        count = len(chromosomes)
        group = self.crossover_chromosome_count
        result: List[Chromosome] = []
        total_index = 0
        while len(result) < count:
            parents = [chromosomes[(total_index + i) % count] for i in range(group)]
            total_index += group
            result.extend(self.execute_crossover(parents))
        return result[:count]


class _PermutationBuilder:
    """Child under construction: positions filled so far and values used."""

    def __init__(self, parent: Chromosome):
        self.old = parent.gene_values()
        size = len(self.old)
        self.new = [-1] * size
        self.used_values = [False] * size
        self.used_positions = [False] * size

    def set(self, index: int, value: int) -> None:
        self.new[index] = value
        self.used_values[value] = True
        self.used_positions[index] = True

    def unused_values(self) -> List[int]:
        return [v for v, used in enumerate(self.used_values) if not used]

    def free_positions(self) -> List[int]:
        return [i for i, used in enumerate(self.used_positions) if not used]


class CrossoverOnePointInt(AbstractCrossover):
    """One-point crossover for permutations.

    Cut at index 2::

        parent A: 0 1 | 2 3 4 5
        parent B: 3 1 | 5 4 0 2

    Each child keeps its own prefix, takes the other parent's genes from the
    cut onwards where still unused, and appends missing values ascending::

        child A:  0 1 | 5 4 2 3
        child B:  3 1 | 2 4 5 0
    """

    def __init__(self, decision_maker: DecisionMaker, rng: Optional[RandomSource] = None):
        super().__init__(2, decision_maker, rng)

    def _get_crossover_index(self, gene_count: int) -> int:
        return 1 + self.rng.uniform_int(gene_count - 1)

    def execute_crossover(self, parents):
        first, second = parents[0], parents[1]
        gene_count = first.gene_count
        cut = self._get_crossover_index(gene_count)
        child_a = _PermutationBuilder(first)
        child_b = _PermutationBuilder(second)
        index_a = index_b = 0
        for i in range(cut):
            child_a.set(index_a, child_a.old[i])
            index_a += 1
            child_b.set(index_b, child_b.old[i])
            index_b += 1
        for i in range(cut, gene_count):
            if not child_a.used_values[child_b.old[i]]:
                child_a.set(index_a, child_b.old[i])
                index_a += 1
            if not child_b.used_values[child_a.old[i]]:
                child_b.set(index_b, child_a.old[i])
                index_b += 1
        for value in child_a.unused_values():
            child_a.set(index_a, value)
            index_a += 1
        for value in child_b.unused_values():
            child_b.set(index_b, value)
            index_b += 1
        return [first.derive(child_a.new), second.derive(child_b.new)]


def _cycles(first: List[int], second: List[int]) -> List[List[int]]:
    position_in_first = {value: i for i, value in enumerate(first)}
    seen = [False] * len(first)
    cycles = []
    for start in range(len(first)):
        if seen[start]:
            continue
        cycle = []
        index = start
        while not seen[index]:
            seen[index] = True
            cycle.append(index)
            index = position_in_first[second[index]]
        cycles.append(cycle)
    return cycles


class CrossoverCycle(AbstractCrossover):
    """Cycle crossover.

    Positions are split into cycles of the value/position mapping between the
    parents; child A takes cycle 1 from parent A, cycle 2 from parent B and
    so on, child B the complement. Genes never move, so both children stay
    permutations.
    """

    def __init__(self, decision_maker: DecisionMaker, rng: Optional[RandomSource] = None):
        super().__init__(2, decision_maker, rng)

    def execute_crossover(self, parents):
        first, second = parents[0], parents[1]
        genes_a = first.gene_values()
        genes_b = second.gene_values()
        child_a = list(genes_a)
        child_b = list(genes_b)
        for number, cycle in enumerate(_cycles(genes_a, genes_b)):
            if number % 2 == 1:
                for index in cycle:
                    child_a[index] = genes_b[index]
                    child_b[index] = genes_a[index]
        return [first.derive(child_a), second.derive(child_b)]


class CrossoverPartiallyMapped(AbstractCrossover):
    """PMX.

    The segment ``[start, end)`` is copied from the other parent; every other
    position takes the own parent's gene, mapped through the segment while
    it collides with a copied value.
    """

    def __init__(self, decision_maker: DecisionMaker, rng: Optional[RandomSource] = None):
        super().__init__(2, decision_maker, rng)

    def _get_crossover_indices(self, gene_count: int) -> Tuple[int, int]:
        start, end = self.rng.unique_ints(2, gene_count)
        return start, end

    @staticmethod
    def _child(own: List[int], other: List[int], start: int, end: int) -> List[int]:
        child = list(own)
        child[start:end] = other[start:end]
        # value copied from `other` -> value it displaced in `own`
        mapping = {other[i]: own[i] for i in range(start, end)}
        for i in list(range(start)) + list(range(end, len(own))):
            value = own[i]
            while value in mapping:
                value = mapping[value]
            child[i] = value
        return child

    def execute_crossover(self, parents):
        first, second = parents[0], parents[1]
        genes_a = first.gene_values()
        genes_b = second.gene_values()
        start, end = self._get_crossover_indices(first.gene_count)
        return [
            first.derive(self._child(genes_a, genes_b, start, end)),
            second.derive(self._child(genes_b, genes_a, start, end)),
        ]


class CrossoverEdgeRecombination(AbstractCrossover):
    """Edge recombination: reuse as many parent edges as possible.

    Starting from a parent's first gene, repeatedly move to the neighbour
    (in either parent tour) with the fewest remaining neighbours, lowest value
    on ties; with no neighbour left, jump to the lowest unused value.
    """

    def __init__(self, decision_maker: DecisionMaker, rng: Optional[RandomSource] = None):
        super().__init__(2, decision_maker, rng)

    @staticmethod
    def _adjacency(tours: Sequence[List[int]]) -> List[set]:
        adjacency = [set() for _ in range(len(tours[0]))]
        for tour in tours:
            n = len(tour)
            for i, value in enumerate(tour):
                adjacency[value].add(tour[i - 1])
                adjacency[value].add(tour[(i + 1) % n])
        return adjacency

    @classmethod
    def _child(cls, start: int, tours: Sequence[List[int]]) -> List[int]:
        adjacency = cls._adjacency(tours)
        size = len(adjacency)
        used = [False] * size
        child = []
        current = start
        while True:
            child.append(current)
            used[current] = True
            for neighbours in adjacency:
                neighbours.discard(current)
            if len(child) == size:
                return child
            neighbours = adjacency[current]
            if neighbours:
                current = min(neighbours, key=lambda v: (len(adjacency[v]), v))
            else:
                current = used.index(False)

    def execute_crossover(self, parents):
        first, second = parents[0], parents[1]
        tours = [first.gene_values(), second.gene_values()]
        return [
            first.derive(self._child(tours[0][0], tours)),
            second.derive(self._child(tours[1][0], tours)),
        ]
