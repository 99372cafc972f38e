from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from .decision import DecisionMaker
from .model import Chromosome
from .random_source import RandomSource, ensure_source


class AbstractMutation(ABC):
    """Decision-gated single chromosome transform.

    ``mutate`` asks the decision maker once per chromosome. Inputs are never
    changed: ``execute_mutation`` always builds a new chromosome.
    """

    def __init__(self, decision_maker: DecisionMaker, rng: Optional[RandomSource] = None):
        if decision_maker is None:
            raise ValueError("decision_maker is required")
        self.decision_maker = decision_maker
        self.rng = ensure_source(rng)
        self.try_count = 0
        self.execution_count = 0

    @abstractmethod
    def execute_mutation(self, chromosome: Chromosome) -> Chromosome:
        raise NotImplementedError

    def mutate(self, chromosomes: Sequence[Chromosome]) -> List[Chromosome]:
        result = []
        for chromosome in chromosomes:
            self.try_count += 1
            if self.decision_maker.should_do_it():
                self.execution_count += 1
                chromosome = self.execute_mutation(chromosome)
            result.append(chromosome)
        return result


def _require_genes(chromosome: Chromosome, minimum: int) -> int:
    count = chromosome.gene_count
    if count < minimum:
        raise ValueError(f"You need to have at least {minimum} genes, but you only have {count} genes!")
    return count


def random_window(rng: RandomSource, gene_count: int) -> Tuple[int, int]:
    """Two indices at least 2 apart, returned as ``(low, high)``."""
    first = rng.uniform_int(gene_count)
    while True:
        second = rng.uniform_int(gene_count)
        if abs(first - second) >= 2:
            return min(first, second), max(first, second)


class MutationRandomPartialReverse(AbstractMutation):
    """Inversion: reverse a random slice of at least 2 genes.

    ``1 2 3 4 5 6 7`` -> ``1 2 5 4 3 6 7``
    """

    def execute_mutation(self, chromosome):
        # with 3 genes the middle index has no partner 2 positions away
        count = _require_genes(chromosome, 4)
        low, high = random_window(self.rng, count)
        genes = list(chromosome.genes)
        genes[low:high] = reversed(genes[low:high])
        return chromosome.derive(genes)


class MutationRandomExchange(AbstractMutation):
    """Swap two random genes."""

    def execute_mutation(self, chromosome):
        count = _require_genes(chromosome, 2)
        first, second = self.rng.unique_ints(2, count)
        genes = list(chromosome.genes)
        genes[first], genes[second] = genes[second], genes[first]
        return chromosome.derive(genes)


class MutationRandomMoveSingle(AbstractMutation):
    """Remove one gene and insert it at another position."""

    def execute_mutation(self, chromosome):
        count = _require_genes(chromosome, 2)
        source, target = self.rng.unique_ints(2, count)
        genes = list(chromosome.genes)
        genes.insert(target, genes.pop(source))
        return chromosome.derive(genes)


class MutationRandomMoveMultiple(AbstractMutation):
    """Move a block of 1 to n-2 consecutive genes to another position."""

    def execute_mutation(self, chromosome):
        count = _require_genes(chromosome, 3)
        block = 1 + self.rng.uniform_int(count - 2)
        source, target = self.rng.unique_ints(2, count - block)
        genes = list(chromosome.genes)
        moved = genes[source : source + block]
        del genes[source : source + block]
        genes[target:target] = moved
        return chromosome.derive(genes)
