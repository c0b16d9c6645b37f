"""Contains decision rules, their coverage information and rule sets."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator
from typing import Optional
from typing import Sequence

import numpy as np
import pandas as pd

from domlem import _helpers
from domlem._types import RuleSemantics
from domlem._types import RuleType
from domlem.characteristics import RuleCharacteristics
from domlem.characteristics import RuleFilter
from domlem.conditions import ElementaryCondition
from domlem.data import InformationTable
from domlem.exceptions import UnknownValueError
from domlem.rule_conditions import RuleConditions


@dataclass(frozen=True)
class Rule:
    """Decision rule: if all conditions of the premise hold, then the decision
    part holds. Decision part is an alternative of conjunctions of decision
    conditions, typically a single conjunction with a single condition.
    """

    rule_type: RuleType
    rule_semantics: RuleSemantics
    conditions: tuple[ElementaryCondition, ...]
    decisions: tuple[tuple[ElementaryCondition, ...], ...]

    def __post_init__(self):
        if len(self.decisions) == 0 or any(len(d) == 0 for d in self.decisions):
            raise ValueError("Rule requires at least one non-empty decision part")
        object.__setattr__(self, "conditions", tuple(self.conditions))
        object.__setattr__(
            self, "decisions", tuple(tuple(decision) for decision in self.decisions)
        )

    @staticmethod
    def from_rule_conditions(
        rule_conditions: RuleConditions,
        decisions: Sequence[Sequence[ElementaryCondition]],
    ) -> Rule:
        return Rule(
            rule_type=rule_conditions.rule_type,
            rule_semantics=rule_conditions.rule_semantics,
            conditions=rule_conditions.conditions,
            decisions=tuple(tuple(decision) for decision in decisions),
        )

    @property
    def number_of_conditions(self) -> int:
        return len(self.conditions)

    def covered_mask(self, information_table: InformationTable) -> np.ndarray:
        covered_mask: np.ndarray = np.ones(information_table.number_of_objects, dtype=bool)
        for condition in self.conditions:
            covered_mask &= condition.covered_mask(information_table)
        return covered_mask

    def covers(self, object_index: int, information_table: InformationTable) -> bool:
        return all(c.covers(object_index, information_table) for c in self.conditions)

    def decisions_matched_mask(self, information_table: InformationTable) -> np.ndarray:
        """Mask of objects whose decision agrees with the decision part of the rule.
        Objects with missing decision never agree.
        """
        matched_mask: np.ndarray = np.zeros(information_table.number_of_objects, dtype=bool)
        for decision in self.decisions:
            decision_mask: np.ndarray = np.ones_like(matched_mask)
            for condition in decision:
                decision_mask &= condition.covered_mask(information_table)
                decision_mask &= ~np.asarray(
                    pd.isnull(information_table.column(condition.attribute_index)),
                    dtype=bool,
                )
            matched_mask |= decision_mask
        return matched_mask

    def __str__(self) -> str:
        premise: str = " & ".join(f"({condition})" for condition in self.conditions)
        decisions_parts: list[str] = [
            " & ".join(f"({condition})" for condition in decision)
            for decision in self.decisions
        ]
        if len(decisions_parts) == 1:
            decision: str = decisions_parts[0]
        else:
            decision = " | ".join(f"[{part}]" for part in decisions_parts)
        marker: str = " [p]" if self.rule_type == RuleType.POSSIBLE else ""
        return f"{premise}{marker} => {decision}".strip()


@dataclass(frozen=True, eq=False)
class RuleCoverageInformation:
    """Indices of objects covered by the rule, of objects whose decision agrees
    with the rule's decision (positive objects) and of neutral objects, together
    with the number of all objects in the table.
    """

    indices_of_covered_objects: np.ndarray
    indices_of_positive_objects: np.ndarray
    indices_of_neutral_objects: np.ndarray
    all_objects_count: int

    @staticmethod
    def from_rule_conditions(rule_conditions: RuleConditions) -> RuleCoverageInformation:
        return RuleCoverageInformation(
            indices_of_covered_objects=rule_conditions.indices_of_covered_objects,
            indices_of_positive_objects=rule_conditions.indices_of_positive_objects,
            indices_of_neutral_objects=rule_conditions.indices_of_neutral_objects,
            all_objects_count=(
                rule_conditions.learning_information_table.number_of_objects
            ),
        )

    @staticmethod
    def from_rule(rule: Rule, information_table: InformationTable) -> RuleCoverageInformation:
        neutral_mask: np.ndarray = np.asarray(
            pd.isnull(information_table.decisions), dtype=bool)
        return RuleCoverageInformation(
            indices_of_covered_objects=_helpers.as_indices(
                rule.covered_mask(information_table)
            ),
            indices_of_positive_objects=_helpers.as_indices(
                rule.decisions_matched_mask(information_table)
            ),
            indices_of_neutral_objects=_helpers.as_indices(neutral_mask),
            all_objects_count=information_table.number_of_objects,
        )

    @property
    def indices_of_supporting_objects(self) -> np.ndarray:
        """Indices of covered objects whose decision agrees with the rule"""
        return np.intersect1d(
            self.indices_of_covered_objects,
            self.indices_of_positive_objects,
            assume_unique=True,
        )

    @property
    def indices_of_covered_negative_objects(self) -> np.ndarray:
        """Indices of covered objects that are neither positive nor neutral"""
        return np.setdiff1d(
            self.indices_of_covered_not_supporting_objects,
            self.indices_of_neutral_objects,
            assume_unique=True,
        )

    @property
    def indices_of_covered_not_supporting_objects(self) -> np.ndarray:
        return np.setdiff1d(
            self.indices_of_covered_objects,
            self.indices_of_positive_objects,
            assume_unique=True,
        )


class RuleSet:
    """Ordered, fixed size collection of rules."""

    def __init__(self, rules: Sequence[Rule]):
        self._rules: tuple[Rule, ...] = tuple(rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __getitem__(self, index: int) -> Rule:
        return self._rules[index]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RuleSet) and self._rules == other._rules

    def __hash__(self) -> int:
        return hash(self._rules)

    def __str__(self) -> str:
        return "\n".join(str(rule) for rule in self._rules)


class RuleSetWithCharacteristics(RuleSet):
    """Rule set whose every rule is paired with its characteristics.

    Args:
        rules (Sequence[Rule]): rules
        characteristics (Sequence[Optional[RuleCharacteristics]]): characteristics
            of subsequent rules, None for characteristics calculated on first
            request
    """

    def __init__(
        self,
        rules: Sequence[Rule],
        characteristics: Sequence[Optional[RuleCharacteristics]],
    ):
        super().__init__(rules)
        if len(characteristics) != len(self._rules):
            raise ValueError(
                f"Got {len(self._rules)} rules but characteristics for "
                f"{len(characteristics)} rules"
            )
        self._characteristics: list[Optional[RuleCharacteristics]] = list(
            characteristics
        )

    def get_rule_characteristics(self, rule_index: int) -> RuleCharacteristics:
        characteristics: Optional[RuleCharacteristics] = self._characteristics[
            rule_index
        ]
        if characteristics is None:
            characteristics = self._calculate_rule_characteristics(rule_index)
            self._characteristics[rule_index] = characteristics
        return characteristics

    def _calculate_rule_characteristics(self, rule_index: int) -> RuleCharacteristics:
        raise UnknownValueError(f"Characteristics of rule {rule_index} are not known")

    def filter(self, rule_filter: RuleFilter) -> RuleSetWithCharacteristics:
        """Returns rule set containing only rules accepted by the filter"""
        accepted_indices: list[int] = [
            i
            for i, rule in enumerate(self._rules)
            if rule_filter.accepts(rule, self.get_rule_characteristics(i))
        ]
        return RuleSetWithCharacteristics(
            [self._rules[i] for i in accepted_indices],
            [self.get_rule_characteristics(i) for i in accepted_indices],
        )


class RuleSetWithComputableCharacteristics(RuleSetWithCharacteristics):
    """Rule set keeping coverage information of each rule and calculating rules
    characteristics from it on first request.

    Args:
        rules (Sequence[Rule]): rules
        coverage_information (Sequence[RuleCoverageInformation]): coverage
            information of subsequent rules
    """

    def __init__(
        self,
        rules: Sequence[Rule],
        coverage_information: Sequence[RuleCoverageInformation],
    ):
        if len(coverage_information) != len(rules):
            raise ValueError(
                f"Got {len(rules)} rules but coverage information for "
                f"{len(coverage_information)} rules"
            )
        super().__init__(rules, [None] * len(rules))
        self._coverage_information: tuple[RuleCoverageInformation, ...] = tuple(
            coverage_information
        )

    def get_rule_coverage_information(self, rule_index: int) -> RuleCoverageInformation:
        return self._coverage_information[rule_index]

    def _calculate_rule_characteristics(self, rule_index: int) -> RuleCharacteristics:
        return RuleCharacteristics.from_coverage_information(
            self._coverage_information[rule_index],
            number_of_conditions=self._rules[rule_index].number_of_conditions,
        )

    def calculate_all_characteristics(self) -> list[RuleCharacteristics]:
        return [self.get_rule_characteristics(i) for i in range(len(self))]
