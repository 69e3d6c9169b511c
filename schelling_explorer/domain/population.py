"""Deterministic apportionment of a total population across groups."""

from __future__ import annotations

import math
from collections.abc import Sequence
from random import Random

from schelling_explorer.domain.group import Group


class PopulationDispenser:
    """Hands out group indices until every group's quota is exhausted.

    Quotas are fixed by ``initialize``: ``floor(total * percentage)`` per
    group, with the rounding shortfall added one unit at a time round-robin
    from the first quota'd group.  ``next_agent`` then draws uniformly among
    the groups that still have quota, so fill order is random while the final
    per-group totals are exact.
    """

    def __init__(self) -> None:
        self._group_indices: list[int] = []
        self._remaining: list[int] = []

    def clear(self) -> None:
        self._group_indices.clear()
        self._remaining.clear()

    def has_more(self) -> bool:
        return bool(self._remaining)

    def quotas(self) -> dict[int, int]:
        """Remaining quota keyed by group index."""
        return dict(zip(self._group_indices, self._remaining, strict=True))

    def initialize(
        self,
        groups: Sequence[Group],
        total_population: int,
        require_at_least_one: bool,
    ) -> None:
        """Compute per-group quotas for ``total_population`` agents.

        A group whose floored quota is zero gets no slot at all unless
        ``require_at_least_one`` is set, in which case its quota is one.
        """
        if groups is None:
            raise TypeError("groups must not be None")
        if len(groups) == 0:
            raise ValueError("groups must contain at least one group")
        if total_population < 1:
            raise ValueError("total_population must be >= 1")

        self.clear()
        for index, group in enumerate(groups):
            quota = math.floor(total_population * group.population_percentage)
            if quota == 0:
                if not require_at_least_one:
                    continue
                quota = 1
            self._group_indices.append(index)
            self._remaining.append(quota)

        if not self._remaining:
            raise ValueError("no group has a positive population share")

        remainder = total_population - sum(self._remaining)
        for i in range(remainder):
            self._remaining[i % len(self._remaining)] += 1

    def next_agent(self, rng: Random) -> int:
        """Draw the group index of the next agent to place."""
        if rng is None:
            raise TypeError("rng must not be None")
        if not self._remaining:
            raise RuntimeError("population quota is exhausted")
        selection = rng.randrange(len(self._group_indices))
        group_index = self._group_indices[selection]
        remaining = self._remaining[selection] - 1
        if remaining <= 0:
            del self._group_indices[selection]
            del self._remaining[selection]
        else:
            self._remaining[selection] = remaining
        return group_index
