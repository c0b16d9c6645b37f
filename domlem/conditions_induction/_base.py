from abc import ABC
from abc import abstractmethod
from typing import Any
from typing import Optional

import numpy as np
import pandas as pd
from joblib import Parallel
from joblib import delayed

from domlem.conditions import ElementaryCondition
from domlem.conditions import construct_condition
from domlem.exceptions import ElementaryConditionNotFoundError
from domlem.exceptions import InvalidConfigurationError
from domlem.measures import RuleConditionsMeasure
from domlem.measures import compare_evaluations
from domlem.rule_conditions import RuleConditions

# best condition found for single attribute together with its evaluations
Candidate = tuple[ElementaryCondition, tuple[float, ...]]


class AbstractConditionGenerator(ABC):
    """Base class for generators choosing the best elementary condition to be added
    to rule conditions.

    Candidate conditions are built from values of considered objects, so that each
    candidate is satisfied by at least one of them. Candidates are compared using
    condition addition evaluators in the given order, the first one being the most
    important. Remaining ties are resolved in favour of lower attribute index and
    then lower limiting value, so results do not depend on the scanning order.

    Args:
        condition_addition_evaluators (list[RuleConditionsMeasure]): evaluators
        skip_used_attributes (bool, optional): whether attributes already present in
            rule conditions should be skipped. Defaults to True.
        n_jobs (int, optional): number of jobs used to scan attributes in parallel.
            Defaults to 1.
    """

    def __init__(
        self,
        condition_addition_evaluators: list[RuleConditionsMeasure],
        skip_used_attributes: bool = True,
        n_jobs: int = 1,
    ) -> None:
        super().__init__()
        if not condition_addition_evaluators:
            raise InvalidConfigurationError(
                "At least one condition addition evaluator is required"
            )
        for evaluator in condition_addition_evaluators:
            if not isinstance(evaluator, RuleConditionsMeasure):
                raise InvalidConfigurationError(
                    f"Invalid condition addition evaluator: {evaluator}"
                )
        self.condition_addition_evaluators: list[RuleConditionsMeasure] = list(
            condition_addition_evaluators
        )
        self.skip_used_attributes: bool = skip_used_attributes
        self.n_jobs: int = n_jobs

    def get_best_condition(
        self, considered_objects: np.ndarray, rule_conditions: RuleConditions
    ) -> ElementaryCondition:
        """Finds the best condition to be added to rule conditions.

        Args:
            considered_objects (np.ndarray): indices of objects which limiting
                values of candidate conditions are taken from
            rule_conditions (RuleConditions): rule conditions built so far

        Raises:
            ElementaryConditionNotFoundError: when there is no candidate condition

        Returns:
            ElementaryCondition: the best condition
        """
        considered_objects = np.asarray(considered_objects, dtype=int)
        attributes_indices: list[int] = self._get_candidate_attributes(rule_conditions)
        if self.n_jobs == 1 or len(attributes_indices) < 2:
            candidates: list[Optional[Candidate]] = [
                self._find_best_candidate_for_attribute(
                    attribute_index, considered_objects, rule_conditions
                )
                for attribute_index in attributes_indices
            ]
        else:
            candidates = Parallel(n_jobs=self.n_jobs, prefer="threads")(
                delayed(self._find_best_candidate_for_attribute)(
                    attribute_index, considered_objects, rule_conditions
                )
                for attribute_index in attributes_indices
            )
        # attributes are visited in increasing order, ties keep the earlier one
        best: Optional[Candidate] = None
        for candidate in candidates:
            if candidate is None:
                continue
            if best is None or self._compare(candidate[1], best[1]) > 0:
                best = candidate
        if best is None:
            raise ElementaryConditionNotFoundError(
                "No candidate condition left for rule conditions: "
                f"{rule_conditions}"
            )
        return best[0]

    @abstractmethod
    def _find_best_candidate_for_attribute(
        self,
        attribute_index: int,
        considered_objects: np.ndarray,
        rule_conditions: RuleConditions,
    ) -> Optional[Candidate]:
        pass

    def _get_candidate_attributes(self, rule_conditions: RuleConditions) -> list[int]:
        table = rule_conditions.learning_information_table
        return [
            attribute_index
            for attribute_index in table.condition_attributes_indices
            if not (
                self.skip_used_attributes
                and rule_conditions.has_condition_for_attribute(attribute_index)
            )
        ]

    def _get_candidate_values(
        self,
        attribute_index: int,
        considered_objects: np.ndarray,
        rule_conditions: RuleConditions,
    ) -> list[Any]:
        """Distinct non-missing values of considered objects, sorted ascending"""
        column: np.ndarray = rule_conditions.learning_information_table.column(
            attribute_index
        )[considered_objects]
        values = column[~np.asarray(pd.isnull(column), dtype=bool)]
        return sorted(set(values.tolist()))

    def _create_candidate(
        self,
        attribute_index: int,
        value: Any,
        rule_conditions: RuleConditions,
    ) -> ElementaryCondition:
        attribute = rule_conditions.learning_information_table.attributes[
            attribute_index
        ]
        return construct_condition(
            rule_conditions.rule_semantics, attribute, attribute_index, value
        )

    def _evaluate(
        self, condition: ElementaryCondition, rule_conditions: RuleConditions
    ) -> tuple[float, ...]:
        return tuple(
            evaluator.evaluate_with_condition(rule_conditions, condition)
            for evaluator in self.condition_addition_evaluators
        )

    def _compare(self, first: tuple[float, ...], second: tuple[float, ...]) -> int:
        return compare_evaluations(self.condition_addition_evaluators, first, second)
