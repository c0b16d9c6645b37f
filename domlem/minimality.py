"""Contains checkers verifying that newly induced rule conditions are not
subsumed by rule conditions already accepted for other approximated sets.
"""
from abc import ABC
from abc import abstractmethod
from typing import Optional

from domlem.measures import RuleConditionsMeasure
from domlem.rule_conditions import RuleConditions
from domlem.rule_conditions import RuleConditionsWithApproximatedSet


class AbstractRuleMinimalityChecker(ABC):

    @abstractmethod
    def check(
        self,
        already_accepted: list[RuleConditionsWithApproximatedSet],
        candidate: RuleConditionsWithApproximatedSet,
    ) -> bool:
        """Returns True when candidate is not subsumed by any accepted rule
        conditions and should be kept.
        """


class DummyRuleMinimalityChecker(AbstractRuleMinimalityChecker):
    """Accepts every rule conditions"""

    def check(
        self,
        already_accepted: list[RuleConditionsWithApproximatedSet],
        candidate: RuleConditionsWithApproximatedSet,
    ) -> bool:
        return True


class SingleEvaluationRuleMinimalityChecker(AbstractRuleMinimalityChecker):
    """Rejects candidate if some already accepted rule conditions of the same rule
    type and semantics:

    * were induced for a union of the same type included in candidate's union
      (so their decision is at least as strong),
    * have only conditions at least as general as some condition of the candidate
      (so they cover at least the same objects),
    * are evaluated not worse than the candidate by the evaluator.

    Args:
        rule_conditions_evaluator (RuleConditionsMeasure): evaluator
    """

    def __init__(self, rule_conditions_evaluator: RuleConditionsMeasure):
        self.rule_conditions_evaluator: RuleConditionsMeasure = rule_conditions_evaluator

    def check(
        self,
        already_accepted: list[RuleConditionsWithApproximatedSet],
        candidate: RuleConditionsWithApproximatedSet,
    ) -> bool:
        candidate_evaluation: Optional[float] = None
        for accepted in already_accepted:
            if not self._is_at_least_as_general(accepted, candidate):
                continue
            if candidate_evaluation is None:
                candidate_evaluation = self.rule_conditions_evaluator.evaluate(
                    candidate.rule_conditions
                )
            accepted_evaluation: float = self.rule_conditions_evaluator.evaluate(
                accepted.rule_conditions
            )
            if (
                self.rule_conditions_evaluator.compare(
                    accepted_evaluation, candidate_evaluation
                )
                >= 0
            ):
                return False
        return True

    def _is_at_least_as_general(
        self,
        accepted: RuleConditionsWithApproximatedSet,
        candidate: RuleConditionsWithApproximatedSet,
    ) -> bool:
        accepted_conditions: RuleConditions = accepted.rule_conditions
        candidate_conditions: RuleConditions = candidate.rule_conditions
        if (
            accepted_conditions.rule_type != candidate_conditions.rule_type
            or accepted_conditions.rule_semantics != candidate_conditions.rule_semantics
        ):
            return False
        if not candidate.approximated_set.includes(accepted.approximated_set):
            return False
        return all(
            any(
                accepted_condition.is_at_least_as_general_as(candidate_condition)
                for candidate_condition in candidate_conditions
            )
            for accepted_condition in accepted_conditions
        )
