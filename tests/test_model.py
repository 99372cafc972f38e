import gc

import pytest

from gaengine.model import Chromosome, Gene, Population, sort_by_fitness


class TestChromosome:
    def test_fitness_computed_once_at_construction(self, fitness):
        calls = []

        class Counting(type(fitness)):
            def fitness(self, chromosome):
                calls.append(1)
                return super().fitness(chromosome)

        c = Chromosome(Counting(), [0, 1, 2])
        assert c.fitness == 1 * 0 + 2 * 1 + 3 * 2
        _ = c.fitness, c.fitness
        assert len(calls) == 1

    def test_genes_wrapped(self, make_chromosome):
        c = make_chromosome([2, 0, 1])
        assert c.gene(0) == Gene(2)
        assert int(c.gene(1)) == 0
        assert float(c.gene(2)) == 1.0
        assert c.gene_values() == [2, 0, 1]
        assert len(c) == c.gene_count == 3

    def test_empty_genes_rejected(self, fitness):
        with pytest.raises(ValueError):
            Chromosome(fitness, [])

    def test_equality_by_genes(self, make_chromosome):
        assert make_chromosome([0, 1, 2]) == make_chromosome([0, 1, 2])
        assert make_chromosome([0, 1, 2]) != make_chromosome([0, 2, 1])
        assert len({make_chromosome([0, 1, 2]), make_chromosome([0, 1, 2])}) == 1

    def test_derive_keeps_context(self, make_chromosome):
        parent = make_chromosome([0, 1, 2])
        child = parent.derive([2, 1, 0])
        assert child.parent is parent
        assert child.fitness_function is parent.fitness_function
        assert child.validator is parent.validator
        assert parent.gene_values() == [0, 1, 2]

    def test_parent_not_kept_alive(self, make_chromosome):
        child = make_chromosome([0, 1, 2]).derive([1, 0, 2])
        gc.collect()
        assert child.parent is None

    def test_validity(self, make_chromosome, fitness):
        assert make_chromosome([1, 0, 2]).is_valid()
        assert not make_chromosome([1, 1, 2]).is_valid()
        assert Chromosome(fitness, [1, 1, 2]).is_valid()

    def test_is_fitter_than_is_strict(self, make_chromosome):
        a = make_chromosome([0, 1, 2])
        b = make_chromosome([2, 1, 0])
        assert a.is_fitter_than(b)
        assert not b.is_fitter_than(a)
        assert not a.is_fitter_than(make_chromosome([0, 1, 2]))


def test_sort_by_fitness_is_stable(make_chromosome):
    low = make_chromosome([2, 1, 0])
    tie_a = make_chromosome([1, 0, 2])
    tie_b = make_chromosome([0, 2, 1])
    assert tie_a.fitness == tie_b.fitness
    high = make_chromosome([0, 1, 2])
    assert sort_by_fitness([low, tie_a, high, tie_b]) == [high, tie_a, tie_b, low]


class TestPopulation:
    def test_fittest_is_first_best(self, make_chromosome):
        tie_a = make_chromosome([1, 0, 2])
        tie_b = make_chromosome([0, 2, 1])
        population = Population(3, [make_chromosome([2, 1, 0]), tie_b, tie_a])
        assert population.fittest_chromosome() is tie_b

    def test_accessors(self, make_chromosome):
        chromosomes = [make_chromosome([0, 1]), make_chromosome([1, 0])]
        population = Population(0, chromosomes)
        assert len(population) == population.chromosome_count == 2
        assert population.chromosome(1) is chromosomes[1]
        copy = population.all_chromosomes()
        copy.pop()
        assert len(population) == 2
        assert list(population) == chromosomes

    def test_empty_population_has_no_fittest(self):
        assert Population(0).fittest_chromosome() is None

    def test_negative_generation(self):
        with pytest.raises(ValueError):
            Population(-1)
