from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Callable
from typing import Optional

from domlem._params import AlgorithmParams
from domlem._types import RuleSemantics
from domlem._types import RuleType
from domlem.builder import ConditionSeparator
from domlem.conditions_induction import AbstractConditionGenerator
from domlem.conditions_induction import M4OptimizedConditionGenerator
from domlem.conditions_induction import StandardConditionGenerator
from domlem.exceptions import InvalidConfigurationError
from domlem.generalization import AbstractRuleConditionsGeneralizer
from domlem.generalization import DummyRuleConditionsGeneralizer
from domlem.generalization import OptimizingRuleConditionsGeneralizer
from domlem.measures import CoverageInApproximationMeasure
from domlem.measures import CoverageOutsideApproximationMeasure
from domlem.measures import EpsilonConsistencyMeasure
from domlem.measures import RuleConditionsMeasure
from domlem.minimality import AbstractRuleMinimalityChecker
from domlem.minimality import DummyRuleMinimalityChecker
from domlem.minimality import SingleEvaluationRuleMinimalityChecker
from domlem.pruning import AbstractRuleConditionsPruner
from domlem.pruning import AbstractRuleConditionsSetPruner
from domlem.pruning import AttributeOrderRuleConditionsPruner
from domlem.pruning import DummyRuleConditionsPruner
from domlem.pruning import DummyRuleConditionsSetPruner
from domlem.pruning import EvaluationsAndOrderRuleConditionsSetPruner
from domlem.pruning import EvaluatorGuidedRuleConditionsPruner
from domlem.pruning import FIFORuleConditionsPruner
from domlem.stopping import EvaluationAndCoverageStoppingConditionChecker


class AllowedObjectsType(Enum):
    """Which objects certain rules are allowed to cover"""

    POSITIVE_REGION = "positive_region"
    POSITIVE_AND_BOUNDARY_REGIONS = "positive_and_boundary_regions"
    ANY_REGION = "any_region"


@dataclass
class VCDomLEMParameters:
    """Components used by :class:`domlem.vcdomlem.VCDomLEM` algorithm."""

    condition_generator: AbstractConditionGenerator
    stopping_condition_checker: EvaluationAndCoverageStoppingConditionChecker
    rule_conditions_pruner: AbstractRuleConditionsPruner
    rule_conditions_set_pruner: AbstractRuleConditionsSetPruner
    rule_minimality_checker: AbstractRuleMinimalityChecker
    rule_type: RuleType = RuleType.CERTAIN
    rule_semantics: RuleSemantics = RuleSemantics.AT_LEAST
    allowed_objects_type: AllowedObjectsType = AllowedObjectsType.POSITIVE_REGION
    rule_conditions_generalizer: AbstractRuleConditionsGeneralizer = field(
        default_factory=DummyRuleConditionsGeneralizer
    )
    condition_separator: Optional[ConditionSeparator] = field(default=None)

    def validate(self):
        """Checks that all components are set and consistent with each other.

        Raises:
            InvalidConfigurationError: when parameters are invalid
        """
        required_components: dict[str, type] = {
            "condition_generator": AbstractConditionGenerator,
            "stopping_condition_checker": EvaluationAndCoverageStoppingConditionChecker,
            "rule_conditions_pruner": AbstractRuleConditionsPruner,
            "rule_conditions_generalizer": AbstractRuleConditionsGeneralizer,
            "rule_conditions_set_pruner": AbstractRuleConditionsSetPruner,
            "rule_minimality_checker": AbstractRuleMinimalityChecker,
        }
        for name, component_type in required_components.items():
            component = getattr(self, name)
            if component is None:
                raise InvalidConfigurationError(f"Parameter {name} is not set")
            if not isinstance(component, component_type):
                raise InvalidConfigurationError(
                    f"Parameter {name} has to be an instance of "
                    f"{component_type.__name__}, got: {type(component).__name__}"
                )
        if not isinstance(self.rule_type, RuleType):
            raise InvalidConfigurationError(f"Invalid rule type: {self.rule_type}")
        if not isinstance(self.rule_semantics, RuleSemantics):
            raise InvalidConfigurationError(
                f"Invalid rule semantics: {self.rule_semantics}")
        if self.rule_semantics == RuleSemantics.EQUAL:
            raise InvalidConfigurationError(
                "Rules with equal semantics cannot be induced for unions of classes"
            )
        if not isinstance(self.allowed_objects_type, AllowedObjectsType):
            raise InvalidConfigurationError(
                f"Invalid allowed objects type: {self.allowed_objects_type}"
            )
        if (
            self.rule_type != RuleType.CERTAIN
            and self.allowed_objects_type != AllowedObjectsType.POSITIVE_REGION
        ):
            raise InvalidConfigurationError(
                f"Allowed objects type {self.allowed_objects_type.value} can only be "
                f"used for certain rules, got {self.rule_type.value} rules"
            )


def _parse_enum(enum_type: type[Enum], value, param_name: str) -> Enum:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError as error:
        raise InvalidConfigurationError(
            f"Invalid value of {param_name}: {value}, expected one of: "
            f"{[e.value for e in enum_type]}"
        ) from error


def _choose(options: dict, value: str, param_name: str):
    if value not in options:
        raise InvalidConfigurationError(
            f"Invalid value of {param_name}: {value}, expected one of: "
            f"{list(options)}"
        )
    return options[value]


def to_vcdomlem_parameters(params: AlgorithmParams) -> VCDomLEMParameters:
    """Creates algorithm components from their names.

    Certain rules are evaluated with epsilon consistency measure compared against
    consistency threshold. Possible and approximate rules must not cover any object
    outside the approximation.

    Args:
        params (AlgorithmParams): parameters

    Raises:
        InvalidConfigurationError: when some parameter has invalid value

    Returns:
        VCDomLEMParameters: components
    """
    rule_type: RuleType = _parse_enum(RuleType, params["rule_type"], "rule_type")
    rule_semantics: RuleSemantics = _parse_enum(
        RuleSemantics, params["rule_semantics"], "rule_semantics"
    )
    allowed_objects_type: AllowedObjectsType = _parse_enum(
        AllowedObjectsType, params["allowed_objects_type"], "allowed_objects_type"
    )

    if rule_type == RuleType.CERTAIN:
        main_evaluator: RuleConditionsMeasure = EpsilonConsistencyMeasure()
        threshold: float = params["consistency_threshold"]
    else:
        main_evaluator = CoverageOutsideApproximationMeasure()
        threshold = 0
    set_pruner_evaluators: list[RuleConditionsMeasure] = (
        [main_evaluator]
        if rule_type == RuleType.CERTAIN
        else [main_evaluator, CoverageInApproximationMeasure()]
    )
    condition_addition_evaluators: list[RuleConditionsMeasure] = [
        main_evaluator,
        CoverageInApproximationMeasure(),
    ]
    stopping_condition_checker = EvaluationAndCoverageStoppingConditionChecker(
        main_evaluator, threshold
    )

    condition_generators: dict[str, Callable[[], AbstractConditionGenerator]] = {
        "m4": lambda: M4OptimizedConditionGenerator(
            condition_addition_evaluators, n_jobs=params["n_jobs"]
        ),
        "standard": lambda: StandardConditionGenerator(
            condition_addition_evaluators, n_jobs=params["n_jobs"]
        ),
    }
    rule_conditions_pruners: dict[str, Callable[[], AbstractRuleConditionsPruner]] = {
        "attribute_order": lambda: AttributeOrderRuleConditionsPruner(
            stopping_condition_checker
        ),
        "evaluator_guided": lambda: EvaluatorGuidedRuleConditionsPruner(
            stopping_condition_checker, [main_evaluator]
        ),
        "fifo": lambda: FIFORuleConditionsPruner(stopping_condition_checker),
        "dummy": DummyRuleConditionsPruner,
    }
    rule_conditions_generalizers: dict[
        str, Callable[[], AbstractRuleConditionsGeneralizer]
    ] = {
        "optimizing": lambda: OptimizingRuleConditionsGeneralizer(
            stopping_condition_checker
        ),
        "dummy": DummyRuleConditionsGeneralizer,
    }
    rule_conditions_set_pruners: dict[
        str, Callable[[], AbstractRuleConditionsSetPruner]
    ] = {
        "evaluations_and_order": lambda: EvaluationsAndOrderRuleConditionsSetPruner(
            set_pruner_evaluators
        ),
        "dummy": DummyRuleConditionsSetPruner,
    }
    rule_minimality_checkers: dict[str, Callable[[], AbstractRuleMinimalityChecker]] = {
        "single_evaluation": lambda: SingleEvaluationRuleMinimalityChecker(
            main_evaluator
        ),
        "dummy": DummyRuleMinimalityChecker,
    }

    condition_generator = _choose(
        condition_generators, params["condition_generator"], "condition_generator"
    )()
    rule_conditions_pruner = _choose(
        rule_conditions_pruners,
        params["rule_conditions_pruner"],
        "rule_conditions_pruner",
    )()
    rule_conditions_generalizer = _choose(
        rule_conditions_generalizers,
        params["rule_conditions_generalizer"],
        "rule_conditions_generalizer",
    )()
    rule_conditions_set_pruner = _choose(
        rule_conditions_set_pruners,
        params["rule_conditions_set_pruner"],
        "rule_conditions_set_pruner",
    )()
    rule_minimality_checker = _choose(
        rule_minimality_checkers,
        params["rule_minimality_checker"],
        "rule_minimality_checker",
    )()

    return VCDomLEMParameters(
        condition_generator=condition_generator,
        stopping_condition_checker=stopping_condition_checker,
        rule_conditions_pruner=rule_conditions_pruner,
        rule_conditions_set_pruner=rule_conditions_set_pruner,
        rule_minimality_checker=rule_minimality_checker,
        rule_type=rule_type,
        rule_semantics=rule_semantics,
        allowed_objects_type=allowed_objects_type,
        rule_conditions_generalizer=rule_conditions_generalizer,
    )
