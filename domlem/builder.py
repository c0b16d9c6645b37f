"""Contains the greedy builder of single rule conditions."""
from abc import ABC
from abc import abstractmethod
from logging import Logger
from logging import getLogger
from typing import Optional

import numpy as np

from domlem._types import RuleSemantics
from domlem._types import RuleType
from domlem.cache import ConditionsCoverageCache
from domlem.conditions import ElementaryCondition
from domlem.conditions_induction import AbstractConditionGenerator
from domlem.data import InformationTable
from domlem.rule_conditions import ObjectsSet
from domlem.rule_conditions import RuleConditions
from domlem.stopping import EvaluationAndCoverageStoppingConditionChecker


class ConditionSeparator(ABC):
    """Transforms a condition chosen by the condition generator into conditions
    actually added to rule conditions, e.g. a condition on a composite attribute
    into conditions on its components.
    """

    @abstractmethod
    def separate(self, condition: ElementaryCondition) -> list[ElementaryCondition]:
        pass


class RuleConditionsBuilder:
    """Builds rule conditions by adding, one by one, the best conditions satisfied by
    considered objects until the stopping condition is satisfied.

    Args:
        indices_of_considered_objects (ObjectsSet): objects which limiting values of
            conditions are taken from
        learning_information_table (InformationTable): information table
        indices_of_positive_objects (ObjectsSet): objects of the approximated union
        indices_of_approximation_objects (ObjectsSet): objects of the approximation
        indices_of_objects_that_can_be_covered (ObjectsSet): allowed objects
        indices_of_neutral_objects (ObjectsSet): neutral objects
        rule_type (RuleType): rule type
        rule_semantics (RuleSemantics): rule semantics
        condition_generator (AbstractConditionGenerator): condition generator
        stopping_condition_checker (EvaluationAndCoverageStoppingConditionChecker):
            stopping condition checker
        condition_separator (Optional[ConditionSeparator], optional): condition
            separator. Defaults to None.
        cache (Optional[ConditionsCoverageCache], optional): conditions coverage
            cache. Defaults to None.
    """

    def __init__(
        self,
        indices_of_considered_objects: ObjectsSet,
        learning_information_table: InformationTable,
        indices_of_positive_objects: ObjectsSet,
        indices_of_approximation_objects: ObjectsSet,
        indices_of_objects_that_can_be_covered: ObjectsSet,
        indices_of_neutral_objects: ObjectsSet,
        rule_type: RuleType,
        rule_semantics: RuleSemantics,
        condition_generator: AbstractConditionGenerator,
        stopping_condition_checker: EvaluationAndCoverageStoppingConditionChecker,
        condition_separator: Optional[ConditionSeparator] = None,
        cache: Optional[ConditionsCoverageCache] = None,
    ):
        self.indices_of_considered_objects: np.ndarray = np.asarray(
            list(indices_of_considered_objects), dtype=int
        )
        if self.indices_of_considered_objects.size == 0:
            raise ValueError("Rule conditions require at least one considered object")
        self.learning_information_table: InformationTable = learning_information_table
        self.indices_of_positive_objects: ObjectsSet = indices_of_positive_objects
        self.indices_of_approximation_objects: ObjectsSet = (
            indices_of_approximation_objects
        )
        self.indices_of_objects_that_can_be_covered: ObjectsSet = (
            indices_of_objects_that_can_be_covered
        )
        self.indices_of_neutral_objects: ObjectsSet = indices_of_neutral_objects
        self.rule_type: RuleType = rule_type
        self.rule_semantics: RuleSemantics = rule_semantics
        self.condition_generator: AbstractConditionGenerator = condition_generator
        self.stopping_condition_checker: EvaluationAndCoverageStoppingConditionChecker = (
            stopping_condition_checker
        )
        self.condition_separator: Optional[ConditionSeparator] = condition_separator
        self.cache: Optional[ConditionsCoverageCache] = cache
        self.logger: Logger = getLogger(self.__class__.__name__)

    def build(self) -> RuleConditions:
        """Builds rule conditions.

        Raises:
            ElementaryConditionNotFoundError: when the stopping condition cannot be
                satisfied

        Returns:
            RuleConditions: rule conditions satisfying the stopping condition
        """
        rule_conditions = RuleConditions(
            self.learning_information_table,
            self.indices_of_positive_objects,
            self.indices_of_approximation_objects,
            self.indices_of_objects_that_can_be_covered,
            self.indices_of_neutral_objects,
            self.rule_type,
            self.rule_semantics,
            cache=self.cache,
        )
        considered_objects: np.ndarray = self.indices_of_considered_objects
        while not self.stopping_condition_checker.is_stopping_condition_satisfied(
            rule_conditions
        ):
            best_condition: ElementaryCondition = (
                self.condition_generator.get_best_condition(
                    considered_objects, rule_conditions
                )
            )
            if self.condition_separator is None:
                conditions: list[ElementaryCondition] = [best_condition]
            else:
                conditions = self.condition_separator.separate(best_condition)
            for condition in conditions:
                rule_conditions.add_condition(condition)
            self.logger.debug("Added condition %s", best_condition)
            considered_objects = considered_objects[
                rule_conditions.covered_mask[considered_objects]
                & rule_conditions.allowed_objects_mask[considered_objects]
            ]
        return rule_conditions
