import logging

from gaengine.events import EventHandler, EventHandlerLogging
from gaengine.model import Population


class Recording(EventHandler):
    def __init__(self, name, calls, nested=()):
        super().__init__(nested)
        self.name = name
        self.calls = calls

    def _on_new_population(self, population):
        self.calls.append((self.name, "population", population.generation))

    def _on_new_fittest_chromosome(self, chromosome):
        self.calls.append((self.name, "fittest", chromosome.fitness))


def test_initial_state():
    handler = EventHandler()
    assert handler.last_population is None
    assert handler.last_generation is None
    assert handler.fittest_chromosome is None


def test_local_hook_then_nested_in_order(make_chromosome):
    calls = []
    inner = Recording("inner", calls)
    outer = Recording("outer", calls, [Recording("first", calls, [inner]), Recording("second", calls)])
    population = Population(4, [make_chromosome([0, 1, 2])])
    outer.on_new_population(population)
    outer.on_new_fittest_chromosome(population.fittest_chromosome())
    assert calls == [
        ("outer", "population", 4),
        ("first", "population", 4),
        ("inner", "population", 4),
        ("second", "population", 4),
        ("outer", "fittest", 8.0),
        ("first", "fittest", 8.0),
        ("inner", "fittest", 8.0),
        ("second", "fittest", 8.0),
    ]
    assert inner.last_generation == 4
    assert inner.fittest_chromosome is population.fittest_chromosome()


def test_logging_handler(make_chromosome, caplog):
    with caplog.at_level(logging.INFO):
        EventHandlerLogging().on_new_fittest_chromosome(make_chromosome([1, 0, 2]))
    assert "New fittest [7.0]" in caplog.text
