import random

import networkx as nx
import pytest

from gaengine.model import Chromosome, ChromosomeValidator, FitnessFunction
from gaengine.random_source import RandomSource


class PositionFitness(FitnessFunction):
    """Sorted ascending scores highest; distinct permutations rarely tie."""

    def fitness(self, chromosome):
        return float(sum((i + 1) * v for i, v in enumerate(chromosome.gene_values())))


class PermutationValidator(ChromosomeValidator):
    def is_valid_chromosome(self, chromosome):
        values = chromosome.gene_values()
        return sorted(values) == list(range(len(values)))


def _matrix(edges):
    graph = nx.Graph()
    graph.add_weighted_edges_from(edges)
    return nx.to_numpy_array(graph, nodelist=sorted(graph.nodes()))


@pytest.fixture
def rng():
    return RandomSource(42)


@pytest.fixture
def fitness():
    return PositionFitness()


@pytest.fixture
def validator():
    return PermutationValidator()


@pytest.fixture
def make_chromosome(fitness, validator):
    def _make(values):
        return Chromosome(fitness, values, validator)

    return _make


@pytest.fixture
def random_permutations(make_chromosome):
    shuffler = random.Random(7)

    def _make(count, size):
        result = []
        for _ in range(count):
            values = list(range(size))
            shuffler.shuffle(values)
            result.append(make_chromosome(values))
        return result

    return _make


@pytest.fixture
def square_matrix():
    """4 cities, shortest closed tour 11."""
    return _matrix([(0, 1, 2), (0, 2, 4), (0, 3, 5), (1, 2, 2), (1, 3, 4), (2, 3, 2)])


@pytest.fixture
def kite_matrix():
    """4 cities, shortest closed tour 14."""
    return _matrix([(0, 1, 5), (0, 2, 4), (0, 3, 3), (1, 2, 2), (1, 3, 5), (2, 3, 4)])


@pytest.fixture
def tiny_tsplib(tmp_path):
    (tmp_path / "tiny.tsp").write_text(
        "NAME: tiny\n"
        "TYPE: TSP\n"
        "DIMENSION: 3\n"
        "EDGE_WEIGHT_TYPE: EUC_2D\n"
        "NODE_COORD_SECTION\n"
        "1 0 0\n"
        "2 3 0\n"
        "3 3 4\n"
        "EOF\n"
    )
    (tmp_path / "tiny.opt.tour").write_text(
        "NAME: tiny.opt.tour\n"
        "TYPE: TOUR\n"
        "DIMENSION: 3\n"
        "TOUR_SECTION\n"
        "1\n"
        "2\n"
        "3\n"
        "-1\n"
        "EOF\n"
    )
    return tmp_path


def assert_permutation(chromosome, size):
    assert sorted(chromosome.gene_values()) == list(range(size))


@pytest.fixture
def is_permutation():
    return assert_permutation


@pytest.fixture
def matrix_from_edges():
    return _matrix
