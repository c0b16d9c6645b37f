"""Contains monotonic measures evaluating rule conditions.

Each measure is either a gain type measure (greater values are better) or a cost
type one (smaller values are better) and declares how its value changes when rule
conditions cover more objects. The same measure may be used for choosing the best
condition to add, for choosing a condition to remove, for checking the stopping
condition and for ranking whole rule conditions.
"""
from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from enum import Enum
from typing import TYPE_CHECKING
from typing import Optional
from typing import Sequence

import numpy as np

if TYPE_CHECKING:
    from domlem.approximations import Union
    from domlem.conditions import ElementaryCondition
    from domlem.rule_conditions import RuleConditions


class MeasureType(Enum):
    GAIN = "gain"
    COST = "cost"


class MonotonicityType(Enum):
    IMPROVES_WITH_NUMBER_OF_COVERED_OBJECTS = "improves"
    DETERIORATES_WITH_NUMBER_OF_COVERED_OBJECTS = "deteriorates"


class RuleConditionsMeasure(ABC):

    measure_type: MeasureType = None
    monotonicity_type: Optional[MonotonicityType] = None

    @abstractmethod
    def calculate(
        self, rule_conditions: RuleConditions, covered_mask: np.ndarray
    ) -> float:
        """Calculates measure value for rule conditions covering given objects.

        Args:
            rule_conditions (RuleConditions): rule conditions with their reference
                objects sets
            covered_mask (np.ndarray): mask of objects covered by the evaluated
                conditions

        Returns:
            float: measure value
        """

    def evaluate(self, rule_conditions: RuleConditions) -> float:
        return self.calculate(rule_conditions, rule_conditions.covered_mask)

    def evaluate_with_condition(
        self, rule_conditions: RuleConditions, condition: ElementaryCondition
    ) -> float:
        return self.calculate(
            rule_conditions, rule_conditions.covered_mask_with_condition(condition)
        )

    def evaluate_without_condition(
        self, rule_conditions: RuleConditions, condition_index: int
    ) -> float:
        return self.calculate(
            rule_conditions,
            rule_conditions.covered_mask_without_condition(condition_index),
        )

    def evaluate_with_replaced_condition(
        self,
        rule_conditions: RuleConditions,
        condition_index: int,
        condition: ElementaryCondition,
    ) -> float:
        return self.calculate(
            rule_conditions,
            rule_conditions.covered_mask_with_replaced_condition(
                condition_index, condition
            ),
        )

    def compare(self, first: float, second: float) -> int:
        """Returns 1 when first value is better than the second one, -1 when it is
        worse and 0 when both are equal.
        """
        if first == second:
            return 0
        if self.measure_type == MeasureType.GAIN:
            return 1 if first > second else -1
        return 1 if first < second else -1

    def satisfies_threshold(self, value: float, threshold: float) -> bool:
        if self.measure_type == MeasureType.GAIN:
            return value >= threshold
        return value <= threshold

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


def compare_evaluations(
    measures: Sequence[RuleConditionsMeasure],
    first: Sequence[float],
    second: Sequence[float],
) -> int:
    """Compares two vectors of evaluations lexicographically, the first measure
    being the most important one.

    Returns:
        int: 1 when first vector is better, -1 when it is worse, 0 when equal
    """
    for measure, first_value, second_value in zip(measures, first, second):
        result: int = measure.compare(first_value, second_value)
        if result != 0:
            return result
    return 0


def _count(mask: np.ndarray) -> int:
    return int(np.count_nonzero(mask))


class EpsilonConsistencyMeasure(RuleConditionsMeasure):
    """Epsilon consistency: fraction of objects not belonging to the approximated
    union (and not neutral) that are covered. Cost type measure, 0 means full
    consistency.

    It is also used as an object consistency measure by the VC-DRSA calculator, in
    which case the dominance cone of an object plays the role of covered objects.
    """

    measure_type = MeasureType.COST
    monotonicity_type = MonotonicityType.DETERIORATES_WITH_NUMBER_OF_COVERED_OBJECTS

    def calculate(
        self, rule_conditions: RuleConditions, covered_mask: np.ndarray
    ) -> float:
        negative_mask: np.ndarray = (
            ~rule_conditions.positive_objects_mask & ~rule_conditions.neutral_objects_mask
        )
        negatives_count: int = _count(negative_mask)
        covered_negatives_count: int = _count(covered_mask & negative_mask)
        if covered_negatives_count == 0 or negatives_count == 0:
            return 0.0
        return covered_negatives_count / negatives_count

    def calculate_objects_consistencies(self, union: Union) -> np.ndarray:
        """Calculates epsilon consistency of each object of the table with respect
        to the union, based on the dominance cones of objects.

        Returns:
            np.ndarray: consistency of each object
        """
        negatives_count: int = _count(union.negative_mask)
        if negatives_count == 0:
            return np.zeros(union.information_table.number_of_objects, dtype=float)
        return (union.cones & union.negative_mask).sum(axis=1) / negatives_count


class CoverageInApproximationMeasure(RuleConditionsMeasure):
    """Number of covered objects belonging to the approximation which rule
    conditions are induced for.
    """

    measure_type = MeasureType.GAIN
    monotonicity_type = MonotonicityType.IMPROVES_WITH_NUMBER_OF_COVERED_OBJECTS

    def calculate(
        self, rule_conditions: RuleConditions, covered_mask: np.ndarray
    ) -> float:
        return _count(covered_mask & rule_conditions.approximation_objects_mask)


class SupportMeasure(RuleConditionsMeasure):
    """Number of covered objects belonging to the approximated union."""

    measure_type = MeasureType.GAIN
    monotonicity_type = MonotonicityType.IMPROVES_WITH_NUMBER_OF_COVERED_OBJECTS

    def calculate(
        self, rule_conditions: RuleConditions, covered_mask: np.ndarray
    ) -> float:
        return _count(covered_mask & rule_conditions.positive_objects_mask)


class CoverageOutsideApproximationMeasure(RuleConditionsMeasure):
    """Number of covered objects neither belonging to the approximation nor
    neutral.
    """

    measure_type = MeasureType.COST
    monotonicity_type = MonotonicityType.DETERIORATES_WITH_NUMBER_OF_COVERED_OBJECTS

    def calculate(
        self, rule_conditions: RuleConditions, covered_mask: np.ndarray
    ) -> float:
        return _count(
            covered_mask
            & ~rule_conditions.approximation_objects_mask
            & ~rule_conditions.neutral_objects_mask
        )


class RelativeCoverageOutsideApproximationMeasure(RuleConditionsMeasure):
    """Number of covered objects neither belonging to the approximation nor
    neutral, divided by the number of objects neither belonging to the union nor
    neutral.
    """

    measure_type = MeasureType.COST
    monotonicity_type = MonotonicityType.DETERIORATES_WITH_NUMBER_OF_COVERED_OBJECTS

    def calculate(
        self, rule_conditions: RuleConditions, covered_mask: np.ndarray
    ) -> float:
        outside_count: int = _count(
            covered_mask
            & ~rule_conditions.approximation_objects_mask
            & ~rule_conditions.neutral_objects_mask
        )
        negatives_count: int = _count(
            ~rule_conditions.positive_objects_mask
            & ~rule_conditions.neutral_objects_mask
        )
        if outside_count == 0 or negatives_count == 0:
            return 0.0
        return outside_count / negatives_count


class RoughMembershipMeasure(RuleConditionsMeasure):
    """Rough membership: fraction of covered objects (neutral ones excluded) that
    belong to the approximated union. Gain type measure, 1 means full consistency.

    Used as an object consistency measure by the VC-DRSA calculator, it is the
    fraction of objects of the dominance cone of an object that belong to the
    union.
    """

    measure_type = MeasureType.GAIN

    def calculate(
        self, rule_conditions: RuleConditions, covered_mask: np.ndarray
    ) -> float:
        counted_mask: np.ndarray = covered_mask & ~rule_conditions.neutral_objects_mask
        counted: int = _count(counted_mask)
        if counted == 0:
            return 0.0
        return _count(counted_mask & rule_conditions.positive_objects_mask) / counted

    def calculate_objects_consistencies(self, union: Union) -> np.ndarray:
        cones: np.ndarray = union.cones & ~union.neutral_mask
        counts: np.ndarray = cones.sum(axis=1)
        positive_counts: np.ndarray = (cones & union.objects_mask).sum(axis=1)
        consistencies: np.ndarray = np.zeros(len(counts), dtype=float)
        np.divide(positive_counts, counts, out=consistencies, where=counts > 0)
        return consistencies
