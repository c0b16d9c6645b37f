from typing import Optional

import numpy as np

from domlem.conditions import ElementaryCondition
from domlem.conditions_induction._base import AbstractConditionGenerator
from domlem.conditions_induction._base import Candidate
from domlem.rule_conditions import RuleConditions


class StandardConditionGenerator(AbstractConditionGenerator):
    """Evaluates every candidate condition built from values of considered
    objects.
    """

    def _find_best_candidate_for_attribute(
        self,
        attribute_index: int,
        considered_objects: np.ndarray,
        rule_conditions: RuleConditions,
    ) -> Optional[Candidate]:
        best: Optional[Candidate] = None
        for value in self._get_candidate_values(
            attribute_index, considered_objects, rule_conditions
        ):
            condition: ElementaryCondition = self._create_candidate(
                attribute_index, value, rule_conditions
            )
            if rule_conditions.contains_condition(condition):
                continue
            evaluations: tuple[float, ...] = self._evaluate(condition, rule_conditions)
            if best is None or self._compare(evaluations, best[1]) > 0:
                best = (condition, evaluations)
        return best
