"""Contains pruners removing redundant conditions from single rule conditions.

Every pruner removes a condition only when the stopping condition is still
satisfied without it and never removes the last condition.
"""
from abc import ABC
from abc import abstractmethod
from logging import Logger
from logging import getLogger
from typing import Optional

from domlem.exceptions import InvalidConfigurationError
from domlem.measures import RuleConditionsMeasure
from domlem.measures import compare_evaluations
from domlem.rule_conditions import RuleConditions
from domlem.stopping import EvaluationAndCoverageStoppingConditionChecker


class AbstractRuleConditionsPruner(ABC):

    def __init__(
        self,
        stopping_condition_checker: Optional[
            EvaluationAndCoverageStoppingConditionChecker
        ] = None,
    ):
        self.stopping_condition_checker: Optional[
            EvaluationAndCoverageStoppingConditionChecker
        ] = stopping_condition_checker
        self.logger: Logger = getLogger(self.__class__.__name__)

    @abstractmethod
    def prune(self, rule_conditions: RuleConditions) -> RuleConditions:
        """Removes redundant conditions. Given rule conditions are modified in
        place and returned.
        """

    def _can_remove(self, rule_conditions: RuleConditions, condition_index: int) -> bool:
        return (
            len(rule_conditions) > 1
            and self.stopping_condition_checker.is_stopping_condition_satisfied_without_condition(
                rule_conditions, condition_index
            )
        )

    def _remove(self, rule_conditions: RuleConditions, condition_index: int):
        condition = rule_conditions.remove_condition(condition_index)
        self.logger.debug("Removed condition %s", condition)


class DummyRuleConditionsPruner(AbstractRuleConditionsPruner):
    """Returns rule conditions untouched"""

    def prune(self, rule_conditions: RuleConditions) -> RuleConditions:
        return rule_conditions


class _CheckingRuleConditionsPruner(AbstractRuleConditionsPruner):

    def __init__(
        self,
        stopping_condition_checker: EvaluationAndCoverageStoppingConditionChecker,
    ):
        if stopping_condition_checker is None:
            raise InvalidConfigurationError(
                f"{self.__class__.__name__} requires stopping condition checker"
            )
        super().__init__(stopping_condition_checker)


class AttributeOrderRuleConditionsPruner(_CheckingRuleConditionsPruner):
    """Tries to remove conditions attribute by attribute, in the reverse order of
    attributes declaration in the information table. Conditions on the same
    attribute are tried from the most recently added one.
    """

    def prune(self, rule_conditions: RuleConditions) -> RuleConditions:
        table = rule_conditions.learning_information_table
        for attribute_index in reversed(range(table.number_of_attributes)):
            condition_index: int = len(rule_conditions) - 1
            while condition_index >= 0:
                condition = rule_conditions.get_condition(condition_index)
                if condition.attribute_index == attribute_index and self._can_remove(
                    rule_conditions, condition_index
                ):
                    self._remove(rule_conditions, condition_index)
                condition_index -= 1
        return rule_conditions


class FIFORuleConditionsPruner(_CheckingRuleConditionsPruner):
    """Tries to remove conditions in the order they were added."""

    def prune(self, rule_conditions: RuleConditions) -> RuleConditions:
        condition_index: int = 0
        while condition_index < len(rule_conditions):
            if self._can_remove(rule_conditions, condition_index):
                self._remove(rule_conditions, condition_index)
            else:
                condition_index += 1
        return rule_conditions


class EvaluatorGuidedRuleConditionsPruner(_CheckingRuleConditionsPruner):
    """In each step removes the condition whose removal gives the best evaluations
    among the conditions that can be removed. Ties are resolved in favour of the
    condition added earlier.

    Args:
        stopping_condition_checker (EvaluationAndCoverageStoppingConditionChecker):
            stopping condition checker
        condition_removal_evaluators (list[RuleConditionsMeasure]): evaluators of
            rule conditions without the removed condition, the first one being the
            most important one
    """

    def __init__(
        self,
        stopping_condition_checker: EvaluationAndCoverageStoppingConditionChecker,
        condition_removal_evaluators: list[RuleConditionsMeasure],
    ):
        super().__init__(stopping_condition_checker)
        if not condition_removal_evaluators:
            raise InvalidConfigurationError(
                "At least one condition removal evaluator is required"
            )
        self.condition_removal_evaluators: list[RuleConditionsMeasure] = list(
            condition_removal_evaluators
        )

    def prune(self, rule_conditions: RuleConditions) -> RuleConditions:
        while True:
            best_index: Optional[int] = None
            best_evaluations: Optional[tuple[float, ...]] = None
            for condition_index in range(len(rule_conditions)):
                if not self._can_remove(rule_conditions, condition_index):
                    continue
                evaluations: tuple[float, ...] = tuple(
                    evaluator.evaluate_without_condition(rule_conditions, condition_index)
                    for evaluator in self.condition_removal_evaluators
                )
                if best_index is None or compare_evaluations(
                    self.condition_removal_evaluators, evaluations, best_evaluations
                ) > 0:
                    best_index = condition_index
                    best_evaluations = evaluations
            if best_index is None:
                return rule_conditions
            self._remove(rule_conditions, best_index)
