"""Contains generalizers replacing conditions of pruned rule conditions with more
general ones, as long as the stopping condition remains satisfied.
"""
from abc import ABC
from abc import abstractmethod
from dataclasses import replace
from logging import Logger
from logging import getLogger
from typing import Any
from typing import Optional

import pandas as pd

from domlem.conditions import ConditionAtLeast
from domlem.conditions import ConditionAtMost
from domlem.conditions import ElementaryCondition
from domlem.data import InformationTable
from domlem.exceptions import InvalidConfigurationError
from domlem.rule_conditions import RuleConditions
from domlem.stopping import EvaluationAndCoverageStoppingConditionChecker


class AbstractRuleConditionsGeneralizer(ABC):

    @abstractmethod
    def generalize(self, rule_conditions: RuleConditions) -> int:
        """Generalizes conditions in place.

        Returns:
            int: number of generalized conditions
        """


class DummyRuleConditionsGeneralizer(AbstractRuleConditionsGeneralizer):
    """Leaves rule conditions untouched"""

    def generalize(self, rule_conditions: RuleConditions) -> int:
        return 0


class _LimitingValueInterval:
    """Open interval of limiting values worth checking for a condition. One end is
    the most general limiting value known to satisfy the stopping condition, the
    other one is the least general value known to violate it (if any).
    """

    def __init__(self, condition: ElementaryCondition):
        self.at_least: bool = isinstance(condition, ConditionAtLeast)
        self.acceptable: Any = condition.limiting_value
        self.too_general: Optional[Any] = None

    def includes(self, value: Any) -> bool:
        if self.at_least:
            return value < self.acceptable and (
                self.too_general is None or value > self.too_general
            )
        return value > self.acceptable and (
            self.too_general is None or value < self.too_general
        )

    def update(self, value: Any, acceptable: bool):
        if acceptable:
            self.acceptable = value
        else:
            self.too_general = value


class OptimizingRuleConditionsGeneralizer(AbstractRuleConditionsGeneralizer):
    """For each condition on a criterion looks for the most general limiting value
    (taken from evaluations of approximation objects) with which rule conditions
    still satisfy the stopping condition. Every evaluation is checked at most once
    and only if it lies between the most general acceptable value and the least
    general too general value found so far.

    Args:
        stopping_condition_checker (EvaluationAndCoverageStoppingConditionChecker):
            stopping condition checker
    """

    def __init__(
        self, stopping_condition_checker: EvaluationAndCoverageStoppingConditionChecker
    ):
        if stopping_condition_checker is None:
            raise InvalidConfigurationError(
                f"{self.__class__.__name__} requires stopping condition checker"
            )
        self.stopping_condition_checker: EvaluationAndCoverageStoppingConditionChecker = (
            stopping_condition_checker
        )
        self.logger: Logger = getLogger(self.__class__.__name__)

    def generalize(self, rule_conditions: RuleConditions) -> int:
        table: InformationTable = rule_conditions.learning_information_table
        approximation_objects = rule_conditions.indices_of_approximation_objects
        generalized_count: int = 0
        for condition_index in range(len(rule_conditions)):
            condition: ElementaryCondition = rule_conditions.get_condition(
                condition_index
            )
            if not isinstance(condition, (ConditionAtLeast, ConditionAtMost)):
                continue
            interval = _LimitingValueInterval(condition)
            for object_index in approximation_objects:
                value: Any = table.value_of(object_index, condition.attribute_index)
                if pd.isnull(value) or not interval.includes(value):
                    continue
                interval.update(
                    value,
                    self.stopping_condition_checker.is_stopping_condition_satisfied_when_replacing_condition(
                        rule_conditions,
                        condition_index,
                        replace(condition, limiting_value=value),
                    ),
                )
            if interval.acceptable != condition.limiting_value:
                new_condition = replace(condition, limiting_value=interval.acceptable)
                rule_conditions.replace_condition(condition_index, new_condition)
                self.logger.debug(
                    "Generalized condition %s to %s", condition, new_condition
                )
                generalized_count += 1
        return generalized_count
