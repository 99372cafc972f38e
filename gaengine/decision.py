import logging
from abc import ABC, abstractmethod
from typing import Optional

from .random_source import RandomSource, ensure_source

logger = logging.getLogger(__name__)


class DecisionMaker(ABC):
    @abstractmethod
    def should_do_it(self) -> bool:
        raise NotImplementedError


class DecisionMakerAlways(DecisionMaker):
    def should_do_it(self) -> bool:
        return True


class DecisionMakerNever(DecisionMaker):
    def should_do_it(self) -> bool:
        return False


class DecisionMakerFixedRate(DecisionMaker):
    """Say yes on a fixed call of every round.

    ``(1, 3)`` fires on the 1st, 4th, 7th ... call, ``(2, 4)`` on the 2nd,
    6th, 10th ... call.
    """

    def __init__(self, every: int, of: int):
        if every <= 0:
            raise ValueError(f"every must be positive: {every}")
        if of <= 0:
            raise ValueError(f"of must be positive: {of}")
        if every > of:
            raise ValueError(f"every ({every}) must be <= of ({of})")
        self.every = every
        self.of = of
        self._call = 0

    def should_do_it(self) -> bool:
        result = self._call % self.of == self.every - 1
        self._call += 1
        return result


def _is_valid_percentage(percentage: float) -> bool:
    return 0 <= percentage <= 100


class DecisionMakerPercentage(DecisionMaker):
    def __init__(self, percentage: float, rng: Optional[RandomSource] = None):
        self.rng = ensure_source(rng)
        self.percentage = percentage

    @property
    def percentage(self) -> float:
        return self._percentage

    @percentage.setter
    def percentage(self, value: float) -> None:
        if not _is_valid_percentage(value):
            raise ValueError(f"percentage is illegal: {value}")
        self._percentage = value

    def use_random_number(self, value: float) -> bool:
        return value <= self._percentage

    def should_do_it(self) -> bool:
        # 0.00 .. 100.00 in steps of 0.01
        return self.use_random_number(self.rng.uniform_int(10001) / 100.0)


class _SteppedPercentage(DecisionMakerPercentage):
    def __init__(
        self,
        initial: float,
        bound: float,
        delta: float,
        change_step: int,
        rng: Optional[RandomSource] = None,
    ):
        super().__init__(initial, rng)
        if not _is_valid_percentage(delta):
            raise ValueError(f"Delta percentage is illegal: {delta}")
        if change_step <= 0:
            raise ValueError(f"Step is invalid: {change_step}")
        self.bound = bound
        self.delta = delta
        self.change_step = change_step
        self._step = 0

    def _next_percentage(self, current: float) -> Optional[float]:
        raise NotImplementedError

    def use_random_number(self, value: float) -> bool:
        self._step += 1
        if self._step % self.change_step == 0:
            new_percentage = self._next_percentage(self.percentage)
            if new_percentage is not None:
                self.percentage = new_percentage
                logger.debug("%s percentage now %.2f", type(self).__name__, new_percentage)
        return super().use_random_number(value)


class DecisionMakerPercentageDecreasing(_SteppedPercentage):
    def __init__(self, initial, minimum, delta, change_step, rng=None):
        if not _is_valid_percentage(minimum) or minimum > initial:
            raise ValueError(f"Min percentage is illegal: {minimum}")
        super().__init__(initial, minimum, delta, change_step, rng)

    def _next_percentage(self, current):
        if current > self.bound:
            return max(current - self.delta, self.bound)
        return None


class DecisionMakerPercentageIncreasing(_SteppedPercentage):
    def __init__(self, initial, maximum, delta, change_step, rng=None):
        if not _is_valid_percentage(maximum) or maximum < initial:
            raise ValueError(f"Max percentage is illegal: {maximum}")
        super().__init__(initial, maximum, delta, change_step, rng)

    def _next_percentage(self, current):
        if current < self.bound:
            return min(current + self.delta, self.bound)
        return None
