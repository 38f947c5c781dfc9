"""Stop ordering generation.

The first stop is where the trip starts and never moves. With N stops there
are (N-1)! orderings of the rest, so full enumeration is only used up to
``max_exhaustive_stops``. Larger trips get one ordering from a
nearest-neighbour tour improved by 2-opt over straight-line distances.
"""

from __future__ import annotations

import itertools
import logging
import math
from typing import Iterator, Sequence

from ...config import settings
from ...models.domain import Stop
from ..geospatial import distance_km


def path_length_km(stops: Sequence[Stop]) -> float:
    return sum(distance_km(a.location, b.location) for a, b in zip(stops, stops[1:]))


def nearest_neighbor_order(stops: Sequence[Stop]) -> list[Stop]:
    order = [stops[0]]
    remaining = list(stops[1:])
    while remaining:
        current = order[-1].location
        nearest = min(remaining, key=lambda stop: distance_km(current, stop.location))
        remaining.remove(nearest)
        order.append(nearest)
    return order


def two_opt(order: Sequence[Stop]) -> list[Stop]:
    """Reverse sub-paths while that shortens the open path. Index 0 stays put."""
    best = list(order)
    best_length = path_length_km(best)
    improved = True
    while improved:
        improved = False
        for i in range(1, len(best) - 1):
            for k in range(i + 1, len(best)):
                candidate = best[:i] + best[i : k + 1][::-1] + best[k + 1 :]
                length = path_length_km(candidate)
                if length < best_length - 1e-9:
                    best, best_length = candidate, length
                    improved = True
    return best


class RouteEnumerator:
    def __init__(self, max_exhaustive_stops: int | None = None, logger: logging.Logger | None = None) -> None:
        self.max_exhaustive_stops = max_exhaustive_stops or settings.max_exhaustive_stops
        self.logger = logger or logging.getLogger(__name__)

    def is_exhaustive(self, stops: Sequence[Stop]) -> bool:
        return len(stops) <= self.max_exhaustive_stops

    def count(self, stops: Sequence[Stop]) -> int:
        if not self.is_exhaustive(stops):
            return 1
        return math.factorial(len(stops) - 1)

    def orderings(self, stops: Sequence[Stop]) -> Iterator[tuple[Stop, ...]]:
        """Yield orderings in lexicographic order of the input positions."""
        if len(stops) < 2:
            raise ValueError("At least 2 stops are required.")

        first, rest = stops[0], stops[1:]
        if self.is_exhaustive(stops):
            for permutation in itertools.permutations(rest):
                yield (first, *permutation)
            return

        self.logger.warning(
            "%d stops exceed exhaustive limit of %d; using nearest-neighbour + 2-opt ordering",
            len(stops),
            self.max_exhaustive_stops,
        )
        yield tuple(two_opt(nearest_neighbor_order(stops)))
