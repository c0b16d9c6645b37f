from logging import Logger
from logging import getLogger

import numpy as np

from domlem._induction import RuleInducersMixin
from domlem._types import RuleSemantics
from domlem._types import RuleType
from domlem._types import UnionType
from domlem.approximations import Union
from domlem.approximations import UnionProvider
from domlem.builder import RuleConditionsBuilder
from domlem.cache import ConditionsCoverageCache
from domlem.decisions import UnionRuleDecisionsProvider
from domlem.exceptions import InvalidConfigurationError
from domlem.exceptions import RuleInductionError
from domlem.rule_conditions import RuleConditions
from domlem.rule_conditions import RuleConditionsWithApproximatedSet
from domlem.rules import Rule
from domlem.rules import RuleCoverageInformation
from domlem.rules import RuleSetWithComputableCharacteristics
from domlem.vcdomlem._params import AllowedObjectsType
from domlem.vcdomlem._params import VCDomLEMParameters


class VCDomLEM(RuleInducersMixin):
    """Induces minimal decision rules with VC-DomLEM sequential covering algorithm.

    For each union given by the approximated set provider, rule conditions are
    built, pruned and generalized until all objects of the union's approximation
    are covered. Then redundant rule conditions are removed by the set pruner and
    the remaining ones are checked by the minimality checker, first against each
    other and then against rule conditions accepted for previous unions.

    Args:
        parameters (VCDomLEMParameters): algorithm components

    Raises:
        InvalidConfigurationError: when parameters are invalid
    """

    def __init__(self, parameters: VCDomLEMParameters):
        parameters.validate()
        self.parameters: VCDomLEMParameters = parameters
        self.cache: ConditionsCoverageCache = ConditionsCoverageCache()
        self.logger: Logger = getLogger(self.__class__.__name__)
        super().__init__()

    def generate_rules(
        self,
        approximated_set_provider: UnionProvider,
        rule_decisions_provider: UnionRuleDecisionsProvider,
    ) -> RuleSetWithComputableCharacteristics:
        """Induces rules for all provided unions.

        Args:
            approximated_set_provider (UnionProvider): provider of unions, rules are
                induced for unions in the order given by the provider
            rule_decisions_provider (UnionRuleDecisionsProvider): provider of
                decision parts of rules

        Raises:
            InvalidConfigurationError: when unions do not match rule semantics
            RuleInductionError: when rules for some union cannot be induced

        Returns:
            RuleSetWithComputableCharacteristics: rule set with coverage
                information of rules
        """
        self.cache.clear()
        accepted: list[RuleConditionsWithApproximatedSet] = []
        for i in range(approximated_set_provider.count()):
            union: Union = approximated_set_provider.get_approximated_set(i)
            self._check_union_type(union)
            self.logger.info("Inducing rules for union %s", union)
            rule_conditions_list: list[RuleConditions] = (
                self._calculate_approximated_set_rule_conditions(union)
            )
            candidates: list[RuleConditionsWithApproximatedSet] = (
                self._remove_subsumed_rule_conditions(
                    [
                        RuleConditionsWithApproximatedSet(rule_conditions, union)
                        for rule_conditions in rule_conditions_list
                    ]
                )
            )
            verified: list[RuleConditionsWithApproximatedSet] = []
            for candidate in candidates:
                if self.parameters.rule_minimality_checker.check(accepted, candidate):
                    verified.append(candidate)
                else:
                    self.logger.debug(
                        "Rejected non-minimal rule conditions %s",
                        candidate.rule_conditions,
                    )
            accepted.extend(verified)
            self.logger.info(
                "Accepted %d rule conditions for union %s", len(verified), union
            )

        rules: list[Rule] = []
        coverage_information: list[RuleCoverageInformation] = []
        for rule_conditions_with_set in accepted:
            rule_conditions = rule_conditions_with_set.rule_conditions
            rules.append(
                Rule.from_rule_conditions(
                    rule_conditions,
                    rule_decisions_provider.get_rule_decisions(
                        rule_conditions_with_set.approximated_set
                    ),
                )
            )
            coverage_information.append(
                RuleCoverageInformation.from_rule_conditions(rule_conditions)
            )
        return RuleSetWithComputableCharacteristics(rules, coverage_information)

    def _check_union_type(self, union: Union):
        expected_union_type: UnionType = (
            UnionType.AT_LEAST
            if self.parameters.rule_semantics == RuleSemantics.AT_LEAST
            else UnionType.AT_MOST
        )
        if union.union_type != expected_union_type:
            raise InvalidConfigurationError(
                f"Rules with {self.parameters.rule_semantics.value} semantics cannot "
                f"be induced for union {union}"
            )

    def _get_required_objects_mask(self, union: Union) -> np.ndarray:
        rule_type: RuleType = self.parameters.rule_type
        if rule_type == RuleType.CERTAIN:
            return union.lower_approximation_mask
        if rule_type == RuleType.POSSIBLE:
            return union.upper_approximation_mask
        return union.boundary_mask

    def _get_allowed_objects_mask(self, union: Union, required_mask: np.ndarray) -> np.ndarray:
        if self.parameters.rule_type != RuleType.CERTAIN:
            return required_mask | union.neutral_mask
        allowed_objects_type: AllowedObjectsType = self.parameters.allowed_objects_type
        if allowed_objects_type == AllowedObjectsType.POSITIVE_REGION:
            return union.positive_region_mask | union.neutral_mask
        if allowed_objects_type == AllowedObjectsType.POSITIVE_AND_BOUNDARY_REGIONS:
            return (
                union.positive_region_mask
                | union.boundary_region_mask
                | union.neutral_mask
            )
        return np.ones(union.information_table.number_of_objects, dtype=bool)

    def _calculate_approximated_set_rule_conditions(
        self, union: Union
    ) -> list[RuleConditions]:
        required_mask: np.ndarray = self._get_required_objects_mask(union)
        allowed_mask: np.ndarray = self._get_allowed_objects_mask(union, required_mask)
        not_covered: np.ndarray = np.flatnonzero(required_mask)

        rule_conditions_list: list[RuleConditions] = []
        while not_covered.size > 0:
            rule_conditions: RuleConditions = self._grow(
                union, not_covered, required_mask, allowed_mask
            )
            rule_conditions = self._prune(rule_conditions)
            new_not_covered: np.ndarray = not_covered[
                ~rule_conditions.covered_mask[not_covered]
            ]
            if new_not_covered.size == not_covered.size:
                raise RuleInductionError(
                    f"Rule conditions {rule_conditions} induced for union {union} "
                    "do not cover any of the remaining objects"
                )
            self.logger.debug("Induced rule conditions %s", rule_conditions)
            rule_conditions_list.append(rule_conditions)
            not_covered = new_not_covered

        return self.parameters.rule_conditions_set_pruner.prune(
            rule_conditions_list, required_mask
        )

    def _grow(
        self,
        union: Union,
        not_covered: np.ndarray,
        required_mask: np.ndarray,
        allowed_mask: np.ndarray,
    ) -> RuleConditions:
        builder = RuleConditionsBuilder(
            not_covered,
            union.information_table,
            union.objects_mask,
            required_mask,
            allowed_mask,
            union.neutral_mask,
            self.parameters.rule_type,
            self.parameters.rule_semantics,
            self.parameters.condition_generator,
            self.parameters.stopping_condition_checker,
            condition_separator=self.parameters.condition_separator,
            cache=self.cache,
        )
        return builder.build()

    def _prune(self, rule_conditions: RuleConditions) -> RuleConditions:
        rule_conditions = self.parameters.rule_conditions_pruner.prune(rule_conditions)
        self.parameters.rule_conditions_generalizer.generalize(rule_conditions)
        return rule_conditions

    def _remove_subsumed_rule_conditions(
        self, candidates: list[RuleConditionsWithApproximatedSet]
    ) -> list[RuleConditionsWithApproximatedSet]:
        """Removes rule conditions subsumed by other rule conditions induced for the
        same union. Each candidate is checked against all candidates kept so far,
        both earlier and later ones. A removed candidate is not used to reject
        others, so one of identical rule conditions survives.
        """
        kept: list[RuleConditionsWithApproximatedSet] = list(candidates)
        for candidate in candidates:
            others: list[RuleConditionsWithApproximatedSet] = [
                other for other in kept if other is not candidate
            ]
            if not self.parameters.rule_minimality_checker.check(others, candidate):
                self.logger.debug(
                    "Removed rule conditions %s subsumed within the same union",
                    candidate.rule_conditions,
                )
                kept = others
        return kept
