"""Contains pruners removing redundant rule conditions from the list of rule
conditions induced for a single approximated set.
"""
from abc import ABC
from abc import abstractmethod
from functools import cmp_to_key
from logging import Logger
from logging import getLogger

import numpy as np

from domlem import _helpers
from domlem.exceptions import InvalidConfigurationError
from domlem.measures import RuleConditionsMeasure
from domlem.measures import compare_evaluations
from domlem.rule_conditions import ObjectsSet
from domlem.rule_conditions import RuleConditions


class AbstractRuleConditionsSetPruner(ABC):

    def __init__(self):
        self.logger: Logger = getLogger(self.__class__.__name__)

    @abstractmethod
    def prune(
        self,
        rule_conditions_list: list[RuleConditions],
        indices_of_objects_to_keep_covered: ObjectsSet,
    ) -> list[RuleConditions]:
        """Removes redundant rule conditions.

        Args:
            rule_conditions_list (list[RuleConditions]): rule conditions in the
                order of induction
            indices_of_objects_to_keep_covered (ObjectsSet): objects that have to
                remain covered by kept rule conditions

        Returns:
            list[RuleConditions]: kept rule conditions in the order of induction
        """


class DummyRuleConditionsSetPruner(AbstractRuleConditionsSetPruner):
    """Keeps all rule conditions"""

    def prune(
        self,
        rule_conditions_list: list[RuleConditions],
        indices_of_objects_to_keep_covered: ObjectsSet,
    ) -> list[RuleConditions]:
        return list(rule_conditions_list)


class EvaluationsAndOrderRuleConditionsSetPruner(AbstractRuleConditionsSetPruner):
    """Ranks rule conditions by evaluations (the first evaluator being the most
    important one, ties resolved by the order of induction) and greedily keeps them
    in that order, as long as they cover some object which is not covered by
    already kept rule conditions. Stops once all objects to keep covered are
    covered.

    Args:
        rule_conditions_evaluators (list[RuleConditionsMeasure]): evaluators
    """

    def __init__(self, rule_conditions_evaluators: list[RuleConditionsMeasure]):
        super().__init__()
        if not rule_conditions_evaluators:
            raise InvalidConfigurationError(
                "At least one rule conditions evaluator is required"
            )
        self.rule_conditions_evaluators: list[RuleConditionsMeasure] = list(
            rule_conditions_evaluators
        )

    def prune(
        self,
        rule_conditions_list: list[RuleConditions],
        indices_of_objects_to_keep_covered: ObjectsSet,
    ) -> list[RuleConditions]:
        if len(rule_conditions_list) == 0:
            return []
        n: int = rule_conditions_list[0].learning_information_table.number_of_objects
        not_covered_mask: np.ndarray = _helpers.as_mask(
            indices_of_objects_to_keep_covered, n
        )
        evaluations: list[tuple[float, ...]] = [
            tuple(
                evaluator.evaluate(rule_conditions)
                for evaluator in self.rule_conditions_evaluators
            )
            for rule_conditions in rule_conditions_list
        ]

        def compare_ranks(first: int, second: int) -> int:
            # better evaluations first, then the order of induction
            result: int = compare_evaluations(
                self.rule_conditions_evaluators, evaluations[second], evaluations[first]
            )
            return result if result != 0 else first - second

        ranking: list[int] = sorted(
            range(len(rule_conditions_list)), key=cmp_to_key(compare_ranks)
        )
        kept_indices: set[int] = set()
        for index in ranking:
            if not not_covered_mask.any():
                break
            newly_covered: np.ndarray = (
                rule_conditions_list[index].covered_mask & not_covered_mask
            )
            if newly_covered.any():
                kept_indices.add(index)
                not_covered_mask &= ~newly_covered
        self.logger.debug(
            "Kept %d out of %d rule conditions",
            len(kept_indices),
            len(rule_conditions_list),
        )
        return [
            rule_conditions
            for index, rule_conditions in enumerate(rule_conditions_list)
            if index in kept_indices
        ]
