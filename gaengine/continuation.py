import logging
import time
from typing import Iterable

from .events import EventHandler
from .model import Population

logger = logging.getLogger(__name__)


class Continuation:
    """Stopping condition.

    A run goes on only while this link and every nested link agree; links are
    asked in order and the first refusal wins.
    """

    def __init__(self, nested: Iterable["Continuation"] = ()):
        self.nested = list(nested)

    def _on_start(self) -> None:
        pass

    def _should_continue(self, population: Population) -> bool:
        return True

    def on_start(self) -> None:
        self._on_start()
        for continuation in self.nested:
            continuation.on_start()

    def should_continue(self, population: Population) -> bool:
        if not self._should_continue(population):
            return False
        return all(c.should_continue(population) for c in self.nested)


class ContinuationInfinite(Continuation):
    def _on_start(self):
        logger.info("Running algorithm for infinite time!")


class ContinuationTotalGeneration(Continuation):
    def __init__(self, max_generations: int, nested: Iterable[Continuation] = ()):
        super().__init__(nested)
        if max_generations < 1:
            raise ValueError(f"max generation count is too small: {max_generations}")
        self.max_generations = max_generations

    def _should_continue(self, population):
        return population.generation < self.max_generations


class ContinuationTimeBased(Continuation):
    def __init__(self, milliseconds: float, nested: Iterable[Continuation] = ()):
        super().__init__(nested)
        if milliseconds < 0:
            raise ValueError(f"milliseconds may not be negative: {milliseconds}")
        self.milliseconds = milliseconds
        self._start = None

    def _on_start(self):
        self._start = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        if self._start is None:
            return 0.0
        return (time.perf_counter() - self._start) * 1000.0

    def _should_continue(self, population):
        return self.elapsed_ms < self.milliseconds


class ContinuationKnownOptimum(Continuation):
    """Stop as soon as the best chromosome seen reaches ``optimum_fitness``.

    The best chromosome is read from the event handler the runner reports to.
    """

    def __init__(
        self,
        optimum_fitness: float,
        event_handler: EventHandler,
        nested: Iterable[Continuation] = (),
    ):
        super().__init__(nested)
        if event_handler is None:
            raise ValueError("event_handler is required")
        self.optimum_fitness = optimum_fitness
        self.event_handler = event_handler

    def _should_continue(self, population):
        fittest = self.event_handler.fittest_chromosome
        if fittest is None:
            return True
        best = fittest.fitness
        if best == self.optimum_fitness:
            logger.debug("Found optimum fitness of %s!", best)
        elif best > self.optimum_fitness:
            logger.warning("Found something better than the optimum: %s vs %s!", best, self.optimum_fitness)
        return best < self.optimum_fitness
