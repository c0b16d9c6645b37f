from typing import TypedDict


class AlgorithmParams(TypedDict):
    consistency_threshold: float
    rule_type: str
    rule_semantics: str
    allowed_objects_type: str
    condition_generator: str
    rule_conditions_pruner: str
    rule_conditions_generalizer: str
    rule_conditions_set_pruner: str
    rule_minimality_checker: str
    classifier: str
    n_jobs: int


DEFAULT_PARAMS_VALUES: AlgorithmParams = AlgorithmParams(
    consistency_threshold=0.0,
    rule_type="certain",
    rule_semantics="at_least",
    allowed_objects_type="positive_region",
    condition_generator="m4",
    rule_conditions_pruner="attribute_order",
    rule_conditions_generalizer="optimizing",
    rule_conditions_set_pruner="evaluations_and_order",
    rule_minimality_checker="single_evaluation",
    classifier="simple_optimizing",
    n_jobs=1,
)


def fill_default_params(params: dict) -> AlgorithmParams:
    """Returns copy of params with missing values taken from defaults"""
    unknown_params: set[str] = set(params) - set(DEFAULT_PARAMS_VALUES)
    if unknown_params:
        raise ValueError(f"Unknown parameters: {sorted(unknown_params)}")
    new_params: AlgorithmParams = DEFAULT_PARAMS_VALUES.copy()
    new_params.update(params)
    return new_params
