"""Contains code for caching conditions coverage. It is done to improve performance by
avoiding recalculating each time a condition is evaluated as a candidate, added to
or removed from rule conditions.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from domlem.conditions import ElementaryCondition
from domlem.data import InformationTable


class ConditionsCoverageCache:
    """Cache for storing conditions coverages to avoid recalculating them. Single
    cache should only be used with a single information table.
    """

    def __init__(self):
        self.cache: dict[ElementaryCondition, np.ndarray] = {}

        self.hits_count: int = 0
        self.misses_count: int = 0

    def get(self, condition: ElementaryCondition) -> Optional[np.ndarray]:
        coverage: Optional[np.ndarray] = self.cache.get(condition)
        if coverage is None:
            self.misses_count += 1
        else:
            self.hits_count += 1
        return coverage

    def get_or_calculate(
        self,
        condition: ElementaryCondition,
        information_table: InformationTable,
        save_to_cache: bool = True,
    ) -> np.ndarray:
        coverage_mask: Optional[np.ndarray] = self.get(condition)
        if coverage_mask is None:
            coverage_mask = condition.covered_mask(information_table)
            # cached masks are shared, nobody should modify them in place
            coverage_mask.setflags(write=False)
            if save_to_cache:
                self.set(condition, coverage_mask)
        return coverage_mask

    def set(self, condition: ElementaryCondition, value: np.ndarray):
        self.cache[condition] = value

    def clear(self):
        self.cache.clear()
