"""Contains classifiers assigning objects to single decision classes with decision
rules induced for unions of classes.
"""
from dataclasses import dataclass
from logging import Logger
from logging import getLogger
from typing import Any
from typing import Callable
from typing import Optional

import numpy as np

from domlem._types import RuleSemantics
from domlem.conditions import ConditionAtLeast
from domlem.data import InformationTable
from domlem.exceptions import InvalidConfigurationError
from domlem.rules import Rule
from domlem.rules import RuleSet
from domlem.rules import RuleSetWithComputableCharacteristics


@dataclass(frozen=True)
class SimpleClassificationResult:
    decision: Any
    indices_of_covering_rules: tuple[int, ...] = ()


def _limiting_decision(rule: Rule) -> Any:
    return rule.decisions[0][0].limiting_value


def _has_gain_decision(rule: Rule) -> bool:
    upward: bool = rule.rule_semantics == RuleSemantics.AT_LEAST
    return upward == isinstance(rule.decisions[0][0], ConditionAtLeast)


class SimpleRuleClassifier:
    """Classifies each object to the most cautious class in the intersection of
    unions suggested by covering rules. At least rules "decision >= 2" and
    "decision >= 3" give class 3, at most rules "decision <= 1" and
    "decision <= 2" give class 1. When both kinds of rules cover the object and
    their limits differ, the mean of both limits is returned (rounded down for
    integer decisions). Objects not covered by any rule get the default decision.

    Args:
        ruleset (RuleSet): rules with at least or at most semantics
        default_decision (Any): decision of objects not covered by any rule
    """

    def __init__(self, ruleset: RuleSet, default_decision: Any):
        self.ruleset: RuleSet = ruleset
        self.default_decision: Any = default_decision
        self.logger: Logger = getLogger(self.__class__.__name__)
        self._gain_decision: bool = (
            _has_gain_decision(ruleset[0]) if len(ruleset) > 0 else True
        )

    def classify(
        self, object_index: int, information_table: InformationTable
    ) -> SimpleClassificationResult:
        return self._resolve(
            [
                i
                for i, rule in enumerate(self.ruleset)
                if rule.covers(object_index, information_table)
            ]
        )

    def classify_all(
        self, information_table: InformationTable
    ) -> list[SimpleClassificationResult]:
        """Classifies all objects of the table.

        Args:
            information_table (InformationTable): table with classified objects,
                attributes have to be in the same order as in the learning table

        Returns:
            list[SimpleClassificationResult]: results of subsequent objects
        """
        if len(self.ruleset) == 0:
            return [
                SimpleClassificationResult(self.default_decision)
                for _ in range(information_table.number_of_objects)
            ]
        covering_matrix: np.ndarray = np.vstack(
            [rule.covered_mask(information_table) for rule in self.ruleset]
        )
        return [
            self._resolve(np.flatnonzero(covering_matrix[:, j]).tolist())
            for j in range(information_table.number_of_objects)
        ]

    def predict(self, information_table: InformationTable) -> np.ndarray:
        return np.asarray(
            [result.decision for result in self.classify_all(information_table)]
        )

    def _goodness(self, decision: Any) -> Any:
        return decision if self._gain_decision else -decision

    def _resolve(self, indices_of_covering_rules: list[int]) -> SimpleClassificationResult:
        at_least_rules: list[int] = []
        at_most_rules: list[int] = []
        for i in indices_of_covering_rules:
            semantics: RuleSemantics = self.ruleset[i].rule_semantics
            if semantics == RuleSemantics.AT_LEAST:
                at_least_rules.append(i)
            elif semantics == RuleSemantics.AT_MOST:
                at_most_rules.append(i)

        up_limit: Optional[Any] = None
        if at_least_rules:
            up_limit = max(
                (_limiting_decision(self.ruleset[i]) for i in at_least_rules),
                key=self._goodness,
            )
        down_limit: Optional[Any] = None
        if at_most_rules:
            down_limit = min(
                (_limiting_decision(self.ruleset[i]) for i in at_most_rules),
                key=self._goodness,
            )

        if up_limit is None and down_limit is None:
            decision: Any = self.default_decision
        elif down_limit is None:
            decision = up_limit
        elif up_limit is None or up_limit == down_limit:
            decision = down_limit
        else:
            # limits may contradict each other, e.g. >= 3 and <= 1
            decision = self._resolve_conflict(
                up_limit, down_limit, at_least_rules, at_most_rules
            )
        return SimpleClassificationResult(decision, tuple(indices_of_covering_rules))

    def _resolve_conflict(
        self,
        up_limit: Any,
        down_limit: Any,
        at_least_rules: list[int],
        at_most_rules: list[int],
    ) -> Any:
        if isinstance(up_limit, (int, np.integer)) and isinstance(
            down_limit, (int, np.integer)
        ):
            return (up_limit + down_limit) // 2
        return (up_limit + down_limit) / 2


class SimpleOptimizingRuleClassifier(SimpleRuleClassifier):
    """Works like :class:`SimpleRuleClassifier`, but resolves conflicting limits
    by choosing the one supported by more learning objects. Support of the up
    limit are learning objects with exactly that decision covered by any covering
    at least rule (each object counted once), analogously for the down limit and
    at most rules. Ties are resolved in favor of the down limit.

    Args:
        ruleset (RuleSetWithComputableCharacteristics): rules with coverage
            information calculated on the learning table
        learning_information_table (InformationTable): table the rules were
            induced from
        default_decision (Any): decision of objects not covered by any rule
    """

    def __init__(
        self,
        ruleset: RuleSetWithComputableCharacteristics,
        learning_information_table: InformationTable,
        default_decision: Any,
    ):
        super().__init__(ruleset, default_decision)
        self.learning_decisions: np.ndarray = learning_information_table.decisions

    def _count_supporting_objects(self, decision: Any, rule_indices: list[int]) -> int:
        covered_mask: np.ndarray = np.zeros(len(self.learning_decisions), dtype=bool)
        for i in rule_indices:
            covered_mask[
                self.ruleset.get_rule_coverage_information(i).indices_of_covered_objects
            ] = True
        return int(np.count_nonzero(covered_mask & (self.learning_decisions == decision)))

    def _resolve_conflict(
        self,
        up_limit: Any,
        down_limit: Any,
        at_least_rules: list[int],
        at_most_rules: list[int],
    ) -> Any:
        up_count: int = self._count_supporting_objects(up_limit, at_least_rules)
        down_count: int = self._count_supporting_objects(down_limit, at_most_rules)
        self.logger.debug(
            "Conflicting limits %s (%d objects) and %s (%d objects)",
            up_limit,
            up_count,
            down_limit,
            down_count,
        )
        return up_limit if up_count > down_count else down_limit


def create_rule_classifier(
    classifier: str,
    ruleset: RuleSetWithComputableCharacteristics,
    learning_information_table: InformationTable,
    default_decision: Any,
) -> SimpleRuleClassifier:
    """Creates classifier of given name ("simple" or "simple_optimizing").

    Raises:
        InvalidConfigurationError: when classifier name is unknown
    """
    classifiers: dict[str, Callable[[], SimpleRuleClassifier]] = {
        "simple": lambda: SimpleRuleClassifier(ruleset, default_decision),
        "simple_optimizing": lambda: SimpleOptimizingRuleClassifier(
            ruleset, learning_information_table, default_decision
        ),
    }
    if classifier not in classifiers:
        raise InvalidConfigurationError(
            f"Unknown classifier: {classifier}, available: {sorted(classifiers)}"
        )
    return classifiers[classifier]()
