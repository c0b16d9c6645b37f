"""Contains rule conditions, i.e. the premise of a rule under construction together
with the sets of objects it is induced for.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
from typing import Iterator
from typing import Optional
from typing import Union as TypingUnion

import numpy as np

from domlem import _helpers
from domlem._types import RuleSemantics
from domlem._types import RuleType
from domlem.approximations import Union
from domlem.cache import ConditionsCoverageCache
from domlem.conditions import ElementaryCondition
from domlem.data import InformationTable

ObjectsSet = TypingUnion[np.ndarray, Iterable[int]]


class RuleConditions:
    """Ordered conjunction of elementary conditions and the objects it covers.

    Args:
        learning_information_table (InformationTable): table rules are induced from
        positive_objects (ObjectsSet): objects belonging to the approximated union
        approximation_objects (ObjectsSet): objects of the approximation that
            should be covered (e.g. lower approximation for certain rules)
        allowed_objects (ObjectsSet): objects that can be covered
        neutral_objects (ObjectsSet): objects neither positive nor negative
        rule_type (RuleType): type of induced rule
        rule_semantics (RuleSemantics): semantics of induced rule
        cache (Optional[ConditionsCoverageCache], optional): conditions coverage
            cache. Defaults to None.
    """

    def __init__(
        self,
        learning_information_table: InformationTable,
        positive_objects: ObjectsSet,
        approximation_objects: ObjectsSet,
        allowed_objects: ObjectsSet,
        neutral_objects: ObjectsSet,
        rule_type: RuleType,
        rule_semantics: RuleSemantics,
        cache: Optional[ConditionsCoverageCache] = None,
    ):
        n: int = learning_information_table.number_of_objects
        self.learning_information_table: InformationTable = learning_information_table
        self.positive_objects_mask: np.ndarray = _helpers.as_mask(positive_objects, n)
        self.approximation_objects_mask: np.ndarray = _helpers.as_mask(
            approximation_objects, n
        )
        self.allowed_objects_mask: np.ndarray = _helpers.as_mask(allowed_objects, n)
        self.neutral_objects_mask: np.ndarray = _helpers.as_mask(neutral_objects, n)
        self.rule_type: RuleType = rule_type
        self.rule_semantics: RuleSemantics = rule_semantics
        self.cache: ConditionsCoverageCache = (
            ConditionsCoverageCache() if cache is None else cache
        )

        self._conditions: list[ElementaryCondition] = []
        self._covered_mask: np.ndarray = np.ones(n, dtype=bool)

    def _condition_covered_mask(self, condition: ElementaryCondition) -> np.ndarray:
        return self.cache.get_or_calculate(condition, self.learning_information_table)

    @property
    def conditions(self) -> tuple[ElementaryCondition, ...]:
        return tuple(self._conditions)

    @property
    def covered_mask(self) -> np.ndarray:
        return self._covered_mask

    @property
    def indices_of_covered_objects(self) -> np.ndarray:
        return _helpers.as_indices(self._covered_mask)

    @property
    def indices_of_positive_objects(self) -> np.ndarray:
        return _helpers.as_indices(self.positive_objects_mask)

    @property
    def indices_of_approximation_objects(self) -> np.ndarray:
        return _helpers.as_indices(self.approximation_objects_mask)

    @property
    def indices_of_allowed_objects(self) -> np.ndarray:
        return _helpers.as_indices(self.allowed_objects_mask)

    @property
    def indices_of_neutral_objects(self) -> np.ndarray:
        return _helpers.as_indices(self.neutral_objects_mask)

    def add_condition(self, condition: ElementaryCondition) -> int:
        """Appends condition at the end of conditions.

        Returns:
            int: index of added condition
        """
        self._conditions.append(condition)
        self._covered_mask = self._covered_mask & self._condition_covered_mask(
            condition
        )
        return len(self._conditions) - 1

    def remove_condition(self, condition_index: int) -> ElementaryCondition:
        condition: ElementaryCondition = self._conditions.pop(condition_index)
        self._covered_mask = self._calculate_covered_mask(self._conditions)
        return condition

    def replace_condition(
        self, condition_index: int, condition: ElementaryCondition
    ) -> ElementaryCondition:
        """Puts condition in place of the condition with given index.

        Returns:
            ElementaryCondition: replaced condition
        """
        replaced: ElementaryCondition = self._conditions[condition_index]
        self._conditions[condition_index] = condition
        self._covered_mask = self._calculate_covered_mask(self._conditions)
        return replaced

    def get_condition(self, condition_index: int) -> ElementaryCondition:
        return self._conditions[condition_index]

    def contains_condition(self, condition: ElementaryCondition) -> bool:
        return condition in self._conditions

    def has_condition_for_attribute(self, attribute_index: int) -> bool:
        return any(c.attribute_index == attribute_index for c in self._conditions)

    def covers(self, object_index: int) -> bool:
        return bool(self._covered_mask[object_index])

    def covered_mask_with_condition(self, condition: ElementaryCondition) -> np.ndarray:
        return self._covered_mask & self._condition_covered_mask(condition)

    def covered_mask_without_condition(self, condition_index: int) -> np.ndarray:
        return self._calculate_covered_mask(
            [c for i, c in enumerate(self._conditions) if i != condition_index]
        )

    def covered_mask_with_replaced_condition(
        self, condition_index: int, condition: ElementaryCondition
    ) -> np.ndarray:
        return self._calculate_covered_mask(
            [
                condition if i == condition_index else c
                for i, c in enumerate(self._conditions)
            ]
        )

    def _calculate_covered_mask(
        self, conditions: list[ElementaryCondition]
    ) -> np.ndarray:
        covered_mask: np.ndarray = np.ones(
            self.learning_information_table.number_of_objects, dtype=bool
        )
        for condition in conditions:
            covered_mask &= self._condition_covered_mask(condition)
        return covered_mask

    def __len__(self) -> int:
        return len(self._conditions)

    def __iter__(self) -> Iterator[ElementaryCondition]:
        return iter(self._conditions)

    def __str__(self) -> str:
        return " & ".join(f"({condition})" for condition in self._conditions)

    def __repr__(self) -> str:
        return f"RuleConditions({self})"


@dataclass(frozen=True)
class RuleConditionsWithApproximatedSet:
    """Rule conditions paired with the approximated set (union) they were induced
    for.
    """

    rule_conditions: RuleConditions
    approximated_set: Union
