"""Contains unions of ordered decision classes together with their rough set
approximations calculated under the dominance relation.

Both classical Dominance-based Rough Set Approach (DRSA) and its Variable
Consistency variant (VC-DRSA) are supported through interchangeable calculators.
All sets of objects are exposed as sorted arrays of objects indices.
"""
from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from functools import cached_property
from typing import Any
from typing import Optional

import numpy as np
import pandas as pd

from domlem import _helpers
from domlem._types import UnionType
from domlem.data import AttributePreferenceType
from domlem.data import InformationTable
from domlem.dominance import DominanceCones
from domlem.exceptions import InvalidConfigurationError
from domlem.measures import EpsilonConsistencyMeasure
from domlem.measures import RuleConditionsMeasure


class DominanceBasedRoughSetCalculator(ABC):

    @abstractmethod
    def calculate_lower_approximation(self, union: Union) -> np.ndarray:
        """Returns boolean mask of objects in the lower approximation of the union"""

    @abstractmethod
    def calculate_upper_approximation(self, union: Union) -> np.ndarray:
        """Returns boolean mask of objects in the upper approximation of the union"""


class ClassicalDominanceBasedRoughSetCalculator(DominanceBasedRoughSetCalculator):
    """Lower approximation contains objects of the union whose whole dominance cone
    is consistent with the union. Upper approximation contains objects belonging to
    a dominance cone of any object of the union.
    """

    def calculate_lower_approximation(self, union: Union) -> np.ndarray:
        inconsistent: np.ndarray = (union.cones & union.negative_mask).any(axis=1)
        return union.objects_mask & ~inconsistent

    def calculate_upper_approximation(self, union: Union) -> np.ndarray:
        upper: np.ndarray = union.cones[union.objects_mask].any(axis=0)
        return (upper | union.objects_mask) & ~union.neutral_mask


class VCDominanceBasedRoughSetCalculator(DominanceBasedRoughSetCalculator):
    """Calculator for Variable Consistency Dominance-based Rough Set Approach. An
    object of the union belongs to its lower approximation when its consistency
    measured by object consistency measure satisfies the threshold: is at most
    equal to it for cost type measures (epsilon consistency) and at least equal
    to it for gain type ones (rough membership).

    Args:
        consistency_measure (RuleConditionsMeasure): object consistency measure
            calculating consistencies of objects with a union, epsilon consistency
            by default
        threshold (float): consistency threshold, 0 with epsilon consistency
            gives classical DRSA
    """

    def __init__(
        self,
        consistency_measure: Optional[RuleConditionsMeasure] = None,
        threshold: float = 0.0,
    ):
        if threshold < 0:
            raise InvalidConfigurationError(
                f"Consistency threshold must be non-negative, got: {threshold}"
            )
        self.consistency_measure: RuleConditionsMeasure = (
            EpsilonConsistencyMeasure()
            if consistency_measure is None
            else consistency_measure
        )
        self.threshold: float = threshold

    def calculate_lower_approximation(self, union: Union) -> np.ndarray:
        consistencies: np.ndarray = (
            self.consistency_measure.calculate_objects_consistencies(union)
        )
        return union.objects_mask & self.consistency_measure.satisfies_threshold(
            consistencies, self.threshold
        )

    def calculate_upper_approximation(self, union: Union) -> np.ndarray:
        complementary_union: Optional[Union] = union.complementary_union
        if complementary_union is None:
            return ~union.neutral_mask
        return ~complementary_union.lower_approximation_mask & ~union.neutral_mask


class Union:
    """Union of ordered decision classes, i.e. objects with decision at least
    (upward union) or at most (downward union) as good as the limiting decision.
    Objects with missing decision are neutral: they neither belong to the union
    nor to its complement.

    Args:
        union_type (UnionType): union type
        limiting_decision (Any): limiting decision value
        information_table (InformationTable): information table
        rough_set_calculator (DominanceBasedRoughSetCalculator): calculator of
            the approximations
        dominance_cones (Optional[DominanceCones], optional): precalculated
            dominance cones for the table. Defaults to None.
    """

    def __init__(
        self,
        union_type: UnionType,
        limiting_decision: Any,
        information_table: InformationTable,
        rough_set_calculator: DominanceBasedRoughSetCalculator,
        dominance_cones: Optional[DominanceCones] = None,
    ):
        self.union_type: UnionType = union_type
        self.limiting_decision: Any = _helpers.to_python_scalar(limiting_decision)
        self.information_table: InformationTable = information_table
        self.rough_set_calculator: DominanceBasedRoughSetCalculator = (
            rough_set_calculator
        )
        self.dominance_cones: DominanceCones = (
            DominanceCones(information_table)
            if dominance_cones is None
            else dominance_cones
        )

        decisions: np.ndarray = information_table.decisions
        self.neutral_mask: np.ndarray = np.asarray(pd.isnull(decisions), dtype=bool)
        self.objects_mask: np.ndarray = np.zeros(len(decisions), dtype=bool)
        for i, decision in enumerate(decisions):
            if not self.neutral_mask[i]:
                self.objects_mask[i] = self.is_decision_concordant(decision)
        self.negative_mask: np.ndarray = ~self.objects_mask & ~self.neutral_mask

    def is_decision_concordant(self, decision: Any) -> bool:
        """Checks whether object with given decision belongs to the union"""
        gain: bool = (
            self.information_table.decision_attribute.preference_type
            == AttributePreferenceType.GAIN
        )
        at_least: bool = self.union_type == UnionType.AT_LEAST
        if gain == at_least:
            return decision >= self.limiting_decision
        return decision <= self.limiting_decision

    @property
    def cones(self) -> np.ndarray:
        """Matrix whose i-th row is the dominance cone of the i-th object relevant
        to this union
        """
        return self.dominance_cones.cones_for(self.union_type)

    @cached_property
    def complementary_union(self) -> Optional[Union]:
        """Union consisting of objects that neither belong to this union nor are
        neutral. None when all non-neutral objects belong to this union.
        """
        if not self.negative_mask.any():
            return None
        decisions: np.ndarray = self.information_table.decisions[self.negative_mask]
        complementary_type: UnionType = (
            UnionType.AT_MOST
            if self.union_type == UnionType.AT_LEAST
            else UnionType.AT_LEAST
        )
        gain: bool = (
            self.information_table.decision_attribute.preference_type
            == AttributePreferenceType.GAIN
        )
        # complement is limited by the negative decision closest to this union
        if gain == (complementary_type == UnionType.AT_MOST):
            limiting_decision = np.max(decisions)
        else:
            limiting_decision = np.min(decisions)
        return Union(
            complementary_type,
            limiting_decision,
            self.information_table,
            self.rough_set_calculator,
            self.dominance_cones,
        )

    @cached_property
    def lower_approximation_mask(self) -> np.ndarray:
        return self.rough_set_calculator.calculate_lower_approximation(self)

    @cached_property
    def upper_approximation_mask(self) -> np.ndarray:
        return self.rough_set_calculator.calculate_upper_approximation(self)

    @property
    def boundary_mask(self) -> np.ndarray:
        return self.upper_approximation_mask & ~self.lower_approximation_mask

    @cached_property
    def positive_region_mask(self) -> np.ndarray:
        lower: np.ndarray = self.lower_approximation_mask
        return self.cones[lower].any(axis=0) | lower

    @property
    def negative_region_mask(self) -> np.ndarray:
        if self.complementary_union is None:
            return np.zeros(self.information_table.number_of_objects, dtype=bool)
        return self.complementary_union.positive_region_mask

    @property
    def boundary_region_mask(self) -> np.ndarray:
        return ~self.positive_region_mask & ~self.negative_region_mask

    @property
    def objects(self) -> np.ndarray:
        return _helpers.as_indices(self.objects_mask)

    @property
    def neutral_objects(self) -> np.ndarray:
        return _helpers.as_indices(self.neutral_mask)

    @property
    def lower_approximation(self) -> np.ndarray:
        return _helpers.as_indices(self.lower_approximation_mask)

    @property
    def upper_approximation(self) -> np.ndarray:
        return _helpers.as_indices(self.upper_approximation_mask)

    @property
    def boundary(self) -> np.ndarray:
        return _helpers.as_indices(self.boundary_mask)

    @property
    def positive_region(self) -> np.ndarray:
        return _helpers.as_indices(self.positive_region_mask)

    @property
    def negative_region(self) -> np.ndarray:
        return _helpers.as_indices(self.negative_region_mask)

    @property
    def boundary_region(self) -> np.ndarray:
        return _helpers.as_indices(self.boundary_region_mask)

    def includes(self, other: Union) -> bool:
        """Checks whether this union is of the same type and contains every object
        of the other union
        """
        return (
            self.union_type == other.union_type
            and not (other.objects_mask & ~self.objects_mask).any()
        )

    def __str__(self) -> str:
        relation: str = ">=" if self.union_type == UnionType.AT_LEAST else "<="
        return (
            f"{self.information_table.decision_attribute.name} "
            f"{relation} {self.limiting_decision}"
        )

    def __repr__(self) -> str:
        return f"Union({self})"


class UnionsWithSingleLimitingDecision:
    """All meaningful upward and downward unions of decision classes of the table.
    Upward unions are ordered from the best to the worst limiting decision,
    downward unions from the worst to the best one. Unions containing all objects
    are skipped.

    Args:
        information_table (InformationTable): information table
        rough_set_calculator (DominanceBasedRoughSetCalculator): approximations
            calculator
    """

    def __init__(
        self,
        information_table: InformationTable,
        rough_set_calculator: DominanceBasedRoughSetCalculator,
    ):
        self.information_table: InformationTable = information_table
        self.rough_set_calculator: DominanceBasedRoughSetCalculator = (
            rough_set_calculator
        )
        self.dominance_cones: DominanceCones = DominanceCones(information_table)

        decisions: np.ndarray = information_table.decisions
        # from the worst to the best decision
        ordered_decisions: list[Any] = sorted(
            {
                _helpers.to_python_scalar(decision)
                for decision in decisions[~np.asarray(pd.isnull(decisions), dtype=bool)]
            },
            reverse=(
                information_table.decision_attribute.preference_type
                == AttributePreferenceType.COST
            ),
        )
        self.ordered_decisions: list[Any] = ordered_decisions
        self.upward_unions: list[Union] = [
            self._create_union(UnionType.AT_LEAST, decision)
            for decision in reversed(ordered_decisions[1:])
        ]
        self.downward_unions: list[Union] = [
            self._create_union(UnionType.AT_MOST, decision)
            for decision in ordered_decisions[:-1]
        ]

    def _create_union(self, union_type: UnionType, decision: Any) -> Union:
        return Union(
            union_type,
            decision,
            self.information_table,
            self.rough_set_calculator,
            self.dominance_cones,
        )

    def get_unions(self, union_type: UnionType) -> list[Union]:
        if union_type == UnionType.AT_LEAST:
            return self.upward_unions
        return self.downward_unions

    @property
    def quality_of_approximation(self) -> float:
        """Fraction of non-neutral objects belonging to the lower approximation of
        every union they belong to.
        """
        unions: list[Union] = self.upward_unions + self.downward_unions
        non_neutral: np.ndarray = ~np.asarray(
            pd.isnull(self.information_table.decisions), dtype=bool
        )
        if not non_neutral.any():
            return 0.0
        consistent: np.ndarray = non_neutral.copy()
        for union in unions:
            consistent &= ~(union.objects_mask & ~union.lower_approximation_mask)
        return float(consistent.sum() / non_neutral.sum())


class UnionProvider:
    """Provides unions of a single type in the order rules should be induced for
    them.

    Args:
        union_type (UnionType): type of provided unions
        unions (UnionsWithSingleLimitingDecision): all unions of the table
    """

    def __init__(self, union_type: UnionType, unions: UnionsWithSingleLimitingDecision):
        self.union_type: UnionType = union_type
        self.unions: UnionsWithSingleLimitingDecision = unions
        self._provided_unions: list[Union] = unions.get_unions(union_type)

    def count(self) -> int:
        return len(self._provided_unions)

    def get_approximated_set(self, i: int) -> Union:
        return self._provided_unions[i]
