import weakref
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class Gene:
    value: int

    def __int__(self) -> int:
        return int(self.value)

    def __float__(self) -> float:
        return float(self.value)


class FitnessFunction(ABC):
    """Scores a chromosome. Higher is better."""

    @abstractmethod
    def fitness(self, chromosome: "Chromosome") -> float:
        raise NotImplementedError


class ChromosomeValidator(ABC):
    @abstractmethod
    def is_valid_chromosome(self, chromosome: "Chromosome") -> bool:
        raise NotImplementedError


class Chromosome:
    """Immutable ordered sequence of genes with its fitness.

    The fitness is computed once, when the chromosome is built. ``parent`` is
    kept only as a weak reference for debugging lineage.
    """

    def __init__(
        self,
        fitness_function: FitnessFunction,
        genes: Iterable[Union[Gene, int]],
        validator: Optional[ChromosomeValidator] = None,
        parent: Optional["Chromosome"] = None,
    ):
        if fitness_function is None:
            raise ValueError("fitness_function is required")
        self.genes: Tuple[Gene, ...] = tuple(g if isinstance(g, Gene) else Gene(g) for g in genes)
        if not self.genes:
            raise ValueError("No genes provided!")
        self.fitness_function = fitness_function
        self.validator = validator
        self._parent = weakref.ref(parent) if parent is not None else None
        self.fitness: float = float(fitness_function.fitness(self))

    @classmethod
    def from_values(
        cls,
        fitness_function: FitnessFunction,
        values: Sequence[int],
        validator: Optional[ChromosomeValidator] = None,
    ) -> "Chromosome":
        return cls(fitness_function, [Gene(v) for v in values], validator)

    def derive(self, genes: Iterable[Union[Gene, int]]) -> "Chromosome":
        """New chromosome with the same fitness function/validator and ``self`` as parent."""
        return Chromosome(self.fitness_function, genes, self.validator, parent=self)

    @property
    def parent(self) -> Optional["Chromosome"]:
        return self._parent() if self._parent is not None else None

    @property
    def gene_count(self) -> int:
        return len(self.genes)

    def gene(self, index: int) -> Gene:
        return self.genes[index]

    def gene_values(self) -> List[int]:
        return [g.value for g in self.genes]

    def is_fitter_than(self, other: "Chromosome") -> bool:
        return self.fitness > other.fitness

    def is_valid(self) -> bool:
        return self.validator is None or self.validator.is_valid_chromosome(self)

    def __len__(self) -> int:
        return len(self.genes)

    def __eq__(self, other) -> bool:
        if self is other:
            return True
        if not isinstance(other, Chromosome):
            return NotImplemented
        return self.genes == other.genes

    def __hash__(self) -> int:
        return hash(self.genes)

    def __repr__(self) -> str:
        return f"Chromosome(genes={self.gene_values()}, fitness={self.fitness})"


def sort_by_fitness(chromosomes: Iterable[Chromosome]) -> List[Chromosome]:
    """Descending by fitness; equal fitness keeps the original order."""
    return sorted(chromosomes, key=lambda c: c.fitness, reverse=True)


class Population:
    def __init__(self, generation: int, chromosomes: Iterable[Chromosome] = ()):
        if generation < 0:
            raise ValueError(f"generation may not be negative: {generation}")
        self.generation = generation
        self.chromosomes: Tuple[Chromosome, ...] = tuple(chromosomes)
        self._fittest: Optional[Chromosome] = None

    def __len__(self) -> int:
        return len(self.chromosomes)

    def __iter__(self):
        return iter(self.chromosomes)

    @property
    def chromosome_count(self) -> int:
        return len(self.chromosomes)

    def chromosome(self, index: int) -> Chromosome:
        return self.chromosomes[index]

    def all_chromosomes(self) -> List[Chromosome]:
        return list(self.chromosomes)

    def fittest_chromosome(self) -> Optional[Chromosome]:
        if self._fittest is None:
            for chromosome in self.chromosomes:
                if self._fittest is None or chromosome.is_fitter_than(self._fittest):
                    self._fittest = chromosome
        return self._fittest

    def __repr__(self) -> str:
        return f"Population(generation={self.generation}, size={len(self.chromosomes)})"


class PopulationCreator(ABC):
    @abstractmethod
    def create_initial_population(self) -> Population:
        raise NotImplementedError
