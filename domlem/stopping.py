"""Contains checkers of the rule induction stopping condition."""
from __future__ import annotations

import numpy as np

from domlem.conditions import ElementaryCondition
from domlem.measures import RuleConditionsMeasure
from domlem.rule_conditions import RuleConditions


class EvaluationAndCoverageStoppingConditionChecker:
    """Stopping condition is satisfied when rule conditions evaluation satisfies the
    threshold (is not less than threshold for gain type evaluator and not greater
    than threshold for cost type one), all covered objects are allowed to be
    covered and at least one object of the approximation is covered.

    Args:
        rule_conditions_evaluator (RuleConditionsMeasure): evaluator
        evaluation_threshold (float): threshold
    """

    def __init__(
        self,
        rule_conditions_evaluator: RuleConditionsMeasure,
        evaluation_threshold: float,
    ):
        self.rule_conditions_evaluator: RuleConditionsMeasure = rule_conditions_evaluator
        self.evaluation_threshold: float = evaluation_threshold

    def is_stopping_condition_satisfied(self, rule_conditions: RuleConditions) -> bool:
        return self._is_satisfied(
            rule_conditions,
            rule_conditions.covered_mask,
            self.rule_conditions_evaluator.evaluate(rule_conditions),
        )

    def is_stopping_condition_satisfied_without_condition(
        self, rule_conditions: RuleConditions, condition_index: int
    ) -> bool:
        return self._is_satisfied(
            rule_conditions,
            rule_conditions.covered_mask_without_condition(condition_index),
            self.rule_conditions_evaluator.evaluate_without_condition(
                rule_conditions, condition_index
            ),
        )

    def is_stopping_condition_satisfied_when_replacing_condition(
        self,
        rule_conditions: RuleConditions,
        condition_index: int,
        condition: ElementaryCondition,
    ) -> bool:
        return self._is_satisfied(
            rule_conditions,
            rule_conditions.covered_mask_with_replaced_condition(
                condition_index, condition
            ),
            self.rule_conditions_evaluator.evaluate_with_replaced_condition(
                rule_conditions, condition_index, condition
            ),
        )

    def _is_satisfied(
        self,
        rule_conditions: RuleConditions,
        covered_mask: np.ndarray,
        evaluation: float,
    ) -> bool:
        if not self.rule_conditions_evaluator.satisfies_threshold(
            evaluation, self.evaluation_threshold
        ):
            return False
        if (covered_mask & ~rule_conditions.allowed_objects_mask).any():
            return False
        return bool((covered_mask & rule_conditions.approximation_objects_mask).any())

    def with_threshold(
        self, evaluation_threshold: float
    ) -> EvaluationAndCoverageStoppingConditionChecker:
        return EvaluationAndCoverageStoppingConditionChecker(
            self.rule_conditions_evaluator, evaluation_threshold
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self.rule_conditions_evaluator!r}, "
            f"{self.evaluation_threshold})"
        )
