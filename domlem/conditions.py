"""Contains elementary conditions used in rules premises and decisions.

Each condition compares value of a single attribute with a limiting value. Missing
values satisfy every condition, as a missing value is treated as equal to any
other value.
"""
from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from dataclasses import dataclass
from typing import Any
from typing import ClassVar

import numpy as np
import pandas as pd

from domlem import _helpers
from domlem._types import RuleSemantics
from domlem.data import Attribute
from domlem.data import AttributePreferenceType
from domlem.data import InformationTable


@dataclass(frozen=True)
class ElementaryCondition(ABC):
    attribute_index: int
    attribute_name: str
    limiting_value: Any

    relation: ClassVar[str] = None

    @abstractmethod
    def _satisfied(self, value: Any) -> bool:
        pass

    @abstractmethod
    def _covered_mask(self, information_table: InformationTable) -> np.ndarray:
        pass

    @abstractmethod
    def is_at_least_as_general_as(self, other: ElementaryCondition) -> bool:
        """Checks whether this condition is satisfied by every value satisfying
        the other condition.
        """

    def satisfied_by(self, value: Any) -> bool:
        if pd.isnull(value):
            return True
        return bool(self._satisfied(value))

    def covered_mask(self, information_table: InformationTable) -> np.ndarray:
        """Calculates which objects of the table satisfy this condition.

        Args:
            information_table (InformationTable): table

        Returns:
            np.ndarray: boolean mask of covered objects
        """
        missing: np.ndarray = information_table.missing_mask(self.attribute_index)
        with np.errstate(invalid="ignore"):
            mask: np.ndarray = self._covered_mask(information_table)
        return np.asarray(mask, dtype=bool) | missing

    def covers(self, object_index: int, information_table: InformationTable) -> bool:
        return self.satisfied_by(
            information_table.value_of(object_index, self.attribute_index)
        )

    def _is_comparable_with(self, other: ElementaryCondition) -> bool:
        return (
            other.__class__ is self.__class__
            and other.attribute_index == self.attribute_index
        )

    def __str__(self) -> str:
        return f"{self.attribute_name} {self.relation} {self.limiting_value}"


@dataclass(frozen=True)
class ConditionAtLeast(ElementaryCondition):
    """attribute >= limiting value"""

    relation: ClassVar[str] = ">="

    def _satisfied(self, value: Any) -> bool:
        return value >= self.limiting_value

    def _covered_mask(self, information_table: InformationTable) -> np.ndarray:
        return (
            information_table.numeric_column(self.attribute_index)
            >= float(self.limiting_value)
        )

    def is_at_least_as_general_as(self, other: ElementaryCondition) -> bool:
        return (
            self._is_comparable_with(other)
            and self.limiting_value <= other.limiting_value
        )


@dataclass(frozen=True)
class ConditionAtMost(ElementaryCondition):
    """attribute <= limiting value"""

    relation: ClassVar[str] = "<="

    def _satisfied(self, value: Any) -> bool:
        return value <= self.limiting_value

    def _covered_mask(self, information_table: InformationTable) -> np.ndarray:
        return (
            information_table.numeric_column(self.attribute_index)
            <= float(self.limiting_value)
        )

    def is_at_least_as_general_as(self, other: ElementaryCondition) -> bool:
        return (
            self._is_comparable_with(other)
            and self.limiting_value >= other.limiting_value
        )


@dataclass(frozen=True)
class ConditionEqual(ElementaryCondition):
    """attribute = limiting value"""

    relation: ClassVar[str] = "="

    def _satisfied(self, value: Any) -> bool:
        return value == self.limiting_value

    def _covered_mask(self, information_table: InformationTable) -> np.ndarray:
        values: np.ndarray = information_table.column(self.attribute_index)
        return np.array(
            [
                not pd.isnull(value) and value == self.limiting_value
                for value in values
            ],
            dtype=bool,
        )

    def is_at_least_as_general_as(self, other: ElementaryCondition) -> bool:
        return (
            self._is_comparable_with(other)
            and self.limiting_value == other.limiting_value
        )


def get_condition_class(
    rule_semantics: RuleSemantics, preference_type: AttributePreferenceType
) -> type[ElementaryCondition]:
    """Chooses the kind of condition satisfied by objects at least as good as
    (at-least semantics) or at most as good as (at-most semantics) the limiting
    value on the given attribute.
    """
    if (
        rule_semantics == RuleSemantics.EQUAL
        or preference_type == AttributePreferenceType.NONE
    ):
        return ConditionEqual
    is_gain: bool = preference_type == AttributePreferenceType.GAIN
    if rule_semantics == RuleSemantics.AT_LEAST:
        return ConditionAtLeast if is_gain else ConditionAtMost
    if rule_semantics == RuleSemantics.AT_MOST:
        return ConditionAtMost if is_gain else ConditionAtLeast
    raise ValueError(f"Unsupported rule semantics: {rule_semantics}")


def construct_condition(
    rule_semantics: RuleSemantics,
    attribute: Attribute,
    attribute_index: int,
    limiting_value: Any,
) -> ElementaryCondition:
    condition_class = get_condition_class(rule_semantics, attribute.preference_type)
    return condition_class(
        attribute_index=attribute_index,
        attribute_name=attribute.name,
        limiting_value=_helpers.to_python_scalar(limiting_value),
    )
