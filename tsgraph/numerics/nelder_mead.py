"""
Derivative-free minimisation with the Nelder-Mead simplex method.

Example:
    >>> nm = NelderMead()
    >>> nm.minimize(lambda v: (v[0] - 1) ** 2 + (v[1] + 2) ** 2,
    ...             NelderMead.initial_simplex([0.0, 0.0]), max_iterations=200)
    >>> nm.arg_min
    array([ 1., -2.])
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence
import itertools
import logging
import math

import numpy as np


logger = logging.getLogger(__name__)

TargetFunction = Callable[[np.ndarray], float]
# (argument, value, percent_complete, finished)
ProgressCallback = Callable[[np.ndarray, float, int, bool], None]

_sequence = itertools.count()


@dataclass(order=True)
class Evaluation:
    """
    One evaluation of the target function.

    Ordered by value, then by creation order, so sorting a simplex keeps
    ties stable.
    """
    value: float
    order: int = field(default_factory=lambda: next(_sequence))
    argument: np.ndarray = field(default=None, compare=False)


class Optimizer(ABC):
    """
    Base for minimisers.

    Attributes:
        minimum: Best value found
        arg_min: Argument of the best value
        evaluations: History of simplex-best evaluations
        callback: Optional progress callback
        start_iteration: Offset used when reporting percent complete for
            a restarted run
    """

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.minimum: Optional[float] = None
        self.arg_min: Optional[np.ndarray] = None
        self.evaluations: List[Evaluation] = []
        self.callback = callback
        self.start_iteration = 0

    @abstractmethod
    def minimize(self, target: TargetFunction, initial_values: Sequence, max_iterations: int) -> None:
        """Search from initial_values for at most max_iterations steps."""
        pass


class NelderMead(Optimizer):
    """
    Nelder-Mead simplex minimiser.

    Args:
        alpha: Reflection coefficient (default: 1.0)
        gamma: Expansion coefficient (default: 2.0)
        rho: Contraction coefficient (default: 0.5)
        sigma: Shrink coefficient (default: 0.5)
        callback: Optional progress callback
    """

    # Reflection steps tried (each 0.8x shorter) while the target is NaN
    max_reflection_retries = 50

    def __init__(
        self,
        alpha: float = 1.0,
        gamma: float = 2.0,
        rho: float = 0.5,
        sigma: float = 0.5,
        callback: Optional[ProgressCallback] = None
    ):
        super().__init__(callback)
        self.alpha = alpha
        self.gamma = gamma
        self.rho = rho
        self.sigma = sigma

    @staticmethod
    def initial_simplex(start: Sequence[float], step: float = 0.1) -> List[np.ndarray]:
        """Start point plus one point displaced by ``step`` along each axis."""
        start = np.asarray(start, dtype=float)
        points = [start.copy()]
        for i in range(start.size):
            point = start.copy()
            point[i] += step
            points.append(point)
        return points

    def _evaluate(self, target: TargetFunction, point: np.ndarray) -> Evaluation:
        return Evaluation(value=float(target(point)), argument=point)

    def minimize(self, target: TargetFunction, initial_values: Sequence, max_iterations: int) -> None:
        """
        Minimise target starting from a simplex.

        Args:
            target: Function of a 1-D array
            initial_values: dimension + 1 starting points
            max_iterations: Number of simplex updates

        Raises:
            ValueError: If the number of starting points is not dimension + 1
        """
        points = [np.asarray(v, dtype=float) for v in initial_values]
        dimension = points[0].size
        if len(points) != dimension + 1:
            raise ValueError(
                f"Initial value count must be {dimension + 1} so that a simplex can be defined."
            )

        simplex = [self._evaluate(target, p) for p in points]
        self.evaluations = []

        for iteration in range(max_iterations):
            simplex.sort()
            best, worst = simplex[0], simplex[dimension]

            if not self.evaluations or best.order > self.evaluations[-1].order:
                self.evaluations.append(best)

            if self.callback is not None:
                percent = 100 * (iteration + self.start_iteration) // (max_iterations + self.start_iteration)
                self.callback(best.argument, best.value, percent, False)

            centroid = np.mean([e.argument for e in simplex[:dimension]], axis=0)

            # Shrink the reflection step until the target is defined there
            step = self.alpha
            reflected = self._evaluate(target, centroid + step * (centroid - worst.argument))
            for _ in range(self.max_reflection_retries):
                if not math.isnan(reflected.value):
                    break
                step *= 0.8
                reflected = self._evaluate(target, centroid + step * (centroid - worst.argument))
            if math.isnan(reflected.value):
                reflected.value = math.inf

            if reflected.value < worst.value:
                if reflected.value > best.value:
                    simplex[dimension] = reflected
                else:
                    expanded = self._evaluate(target, centroid + self.gamma * (centroid - worst.argument))
                    simplex[dimension] = expanded if expanded.value < reflected.value else reflected
            else:
                contracted = self._evaluate(target, worst.argument + self.rho * (centroid - worst.argument))
                if contracted.value < worst.value:
                    simplex[dimension] = contracted
                else:
                    for i in range(1, dimension + 1):
                        shrunk = best.argument + self.sigma * (simplex[i].argument - best.argument)
                        simplex[i] = self._evaluate(target, shrunk)

        simplex.sort()
        self.minimum = simplex[0].value
        self.arg_min = simplex[0].argument
        logger.debug("Nelder-Mead finished: minimum %.6g after %d iterations",
                     self.minimum, max_iterations)

        if self.callback is not None:
            self.callback(self.arg_min, self.minimum, 100, True)
