import pytest

from gaengine.continuation import ContinuationTotalGeneration
from gaengine.crossover import CrossoverCycle, CrossoverPartiallyMapped
from gaengine.decision import DecisionMakerAlways, DecisionMakerPercentage
from gaengine.errors import InvariantViolation
from gaengine.events import EventHandler
from gaengine.model import Population, PopulationCreator
from gaengine.mutation import AbstractMutation, MutationRandomPartialReverse
from gaengine.runner import GARunner, RunState
from gaengine.selection import SelectorAllSortedBest


class FixedCreator(PopulationCreator):
    def __init__(self, chromosomes):
        self.chromosomes = chromosomes

    def create_initial_population(self):
        return Population(0, self.chromosomes)


class SizeTracker(EventHandler):
    def __init__(self):
        super().__init__()
        self.sizes = []
        self.generations = []
        self.fittest = []

    def _on_new_population(self, population):
        self.sizes.append(len(population))
        self.generations.append(population.generation)

    def _on_new_fittest_chromosome(self, chromosome):
        self.fittest.append(chromosome.fitness)


class DropOne(AbstractMutation):
    def execute_mutation(self, chromosome):
        return chromosome

    def mutate(self, chromosomes):
        return list(chromosomes)[1:]


class Duplicate(AbstractMutation):
    def execute_mutation(self, chromosome):
        values = chromosome.gene_values()
        return chromosome.derive([values[0]] * len(values))


def _runner(handler, chromosomes, mutation, rng, generations=30):
    return GARunner(
        handler,
        ContinuationTotalGeneration(generations),
        FixedCreator(chromosomes),
        SelectorAllSortedBest(2),
        CrossoverPartiallyMapped(DecisionMakerPercentage(50, rng), rng),
        mutation,
    )


def test_population_size_is_constant(random_permutations, rng):
    handler = SizeTracker()
    mutation = MutationRandomPartialReverse(DecisionMakerPercentage(30, rng), rng)
    runner = _runner(handler, random_permutations(7, 8), mutation, rng)
    best = runner.run()
    assert handler.sizes == [7] * 31
    assert handler.generations == list(range(31))
    assert runner.last_population.generation == 30
    assert best is runner.overall_best
    assert handler.fittest_chromosome is best
    assert handler.fittest == sorted(handler.fittest)
    assert len(set(handler.fittest)) == len(handler.fittest)
    assert runner.state is RunState.STOPPED


def test_children_stay_valid(random_permutations, rng):
    mutation = MutationRandomPartialReverse(DecisionMakerAlways(), rng)
    runner = GARunner(
        EventHandler(),
        ContinuationTotalGeneration(20),
        FixedCreator(random_permutations(6, 7)),
        SelectorAllSortedBest(3),
        CrossoverCycle(DecisionMakerAlways(), rng),
        mutation,
    )
    runner.run()
    assert all(c.is_valid() for c in runner.last_population)


def test_size_change_is_an_invariant_violation(random_permutations, rng):
    runner = _runner(EventHandler(), random_permutations(4, 5), DropOne(DecisionMakerAlways()), rng)
    with pytest.raises(InvariantViolation, match="Mutation"):
        runner.run()


def test_invalid_chromosome_is_an_invariant_violation(random_permutations, rng):
    runner = _runner(EventHandler(), random_permutations(4, 5), Duplicate(DecisionMakerAlways()), rng)
    with pytest.raises(InvariantViolation, match="illegal"):
        runner.run()


def test_invalid_initial_population(make_chromosome, rng):
    chromosomes = [make_chromosome([0, 0, 1]), make_chromosome([0, 1, 2])]
    runner = _runner(EventHandler(), chromosomes, MutationRandomPartialReverse(DecisionMakerAlways()), rng)
    with pytest.raises(InvariantViolation):
        runner.run()


def test_runs_once(random_permutations, rng):
    mutation = MutationRandomPartialReverse(DecisionMakerAlways(), rng)
    runner = _runner(EventHandler(), random_permutations(4, 5), mutation, rng, generations=1)
    runner.run()
    assert runner.last_population.generation == 1
    with pytest.raises(RuntimeError):
        runner.run()


def test_requires_all_parts(rng):
    with pytest.raises(ValueError):
        GARunner(EventHandler(), None, None, None, None, None)
