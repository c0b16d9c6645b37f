from typing import Any
from typing import Optional

import numpy as np

from domlem.conditions import ConditionAtLeast
from domlem.conditions import ConditionAtMost
from domlem.conditions import ElementaryCondition
from domlem.conditions import get_condition_class
from domlem.conditions_induction._base import AbstractConditionGenerator
from domlem.conditions_induction._base import Candidate
from domlem.exceptions import InvalidConfigurationError
from domlem.measures import MonotonicityType
from domlem.measures import RuleConditionsMeasure
from domlem.rule_conditions import RuleConditions


class M4OptimizedConditionGenerator(AbstractConditionGenerator):
    """Condition generator taking advantage of the monotonicity of the first
    condition addition evaluator.

    Candidate conditions for a single attribute are visited from the one covering
    the least objects to the one covering the most objects when the first evaluator
    deteriorates with the number of covered objects, and in the opposite order when
    it improves. Once the first evaluator gets strictly worse than for the best
    candidate of the attribute, no further candidate of this attribute can be
    better, so the scan stops. Chosen conditions are the same as in the
    :class:`domlem.conditions_induction.StandardConditionGenerator`.
    """

    def __init__(
        self,
        condition_addition_evaluators: list[RuleConditionsMeasure],
        skip_used_attributes: bool = True,
        n_jobs: int = 1,
    ) -> None:
        super().__init__(condition_addition_evaluators, skip_used_attributes, n_jobs)
        for evaluator in self.condition_addition_evaluators:
            if evaluator.monotonicity_type is None:
                raise InvalidConfigurationError(
                    f"Evaluator {evaluator} has no declared monotonicity and cannot "
                    "be used by M4 optimized condition generator"
                )

    def _get_ordered_values(
        self,
        attribute_index: int,
        considered_objects: np.ndarray,
        rule_conditions: RuleConditions,
    ) -> tuple[list[Any], bool]:
        """Returns candidate values in the scanning order and whether the scan can
        be stopped early.
        """
        values: list[Any] = self._get_candidate_values(
            attribute_index, considered_objects, rule_conditions
        )
        attribute = rule_conditions.learning_information_table.attributes[
            attribute_index
        ]
        condition_class: type[ElementaryCondition] = get_condition_class(
            rule_conditions.rule_semantics, attribute.preference_type
        )
        if condition_class not in (ConditionAtLeast, ConditionAtMost):
            return values, False
        # values ordered from the most specific condition to the most general one
        if condition_class == ConditionAtLeast:
            values = values[::-1]
        first_evaluator: RuleConditionsMeasure = self.condition_addition_evaluators[0]
        if (
            first_evaluator.monotonicity_type
            == MonotonicityType.IMPROVES_WITH_NUMBER_OF_COVERED_OBJECTS
        ):
            values = values[::-1]
        return values, True

    def _find_best_candidate_for_attribute(
        self,
        attribute_index: int,
        considered_objects: np.ndarray,
        rule_conditions: RuleConditions,
    ) -> Optional[Candidate]:
        first_evaluator: RuleConditionsMeasure = self.condition_addition_evaluators[0]
        values, can_stop_early = self._get_ordered_values(
            attribute_index, considered_objects, rule_conditions
        )
        best: Optional[Candidate] = None
        for value in values:
            condition: ElementaryCondition = self._create_candidate(
                attribute_index, value, rule_conditions
            )
            if rule_conditions.contains_condition(condition):
                continue
            evaluations: tuple[float, ...] = self._evaluate(condition, rule_conditions)
            if best is None:
                best = (condition, evaluations)
                continue
            if can_stop_early and first_evaluator.compare(evaluations[0], best[1][0]) < 0:
                break
            comparison: int = self._compare(evaluations, best[1])
            if comparison > 0 or (
                comparison == 0 and value < best[0].limiting_value
            ):
                best = (condition, evaluations)
        return best
