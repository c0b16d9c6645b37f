import numpy as np
import pandas as pd
import pytest
import utils
from sklearn.exceptions import NotFittedError

from domlem._params import DEFAULT_PARAMS_VALUES
from domlem._params import fill_default_params
from domlem._types import RuleType
from domlem._types import UnionType
from domlem.approximations import ClassicalDominanceBasedRoughSetCalculator
from domlem.approximations import UnionProvider
from domlem.approximations import UnionsWithSingleLimitingDecision
from domlem.approximations import VCDominanceBasedRoughSetCalculator
from domlem.data import InformationTable
from domlem.decisions import UnionRuleDecisionsProvider
from domlem.exceptions import ElementaryConditionNotFoundError
from domlem.exceptions import InvalidConfigurationError
from domlem.exceptions import RuleInductionError
from domlem.rules import RuleSetWithComputableCharacteristics
from domlem.vcdomlem import VCDomLEM
from domlem.vcdomlem import VCDomLEMModel
from domlem.vcdomlem import to_vcdomlem_parameters


@pytest.fixture
def buses_dataset() -> tuple[pd.DataFrame, pd.Series]:
    return utils.read_dataset("buses")


@pytest.fixture
def buses_table(buses_dataset: tuple[pd.DataFrame, pd.Series]) -> InformationTable:
    X, y = buses_dataset
    return InformationTable.from_dataframe(X, y)


def _induce(
    table: InformationTable,
    union_type: UnionType = UnionType.AT_LEAST,
    calculator=None,
    **params,
) -> RuleSetWithComputableCharacteristics:
    params = fill_default_params(params)
    if calculator is None:
        calculator = VCDominanceBasedRoughSetCalculator(
            threshold=params["consistency_threshold"]
        )
    unions = UnionsWithSingleLimitingDecision(table, calculator)
    inducer = VCDomLEM(to_vcdomlem_parameters(params))
    return inducer.generate_rules(
        UnionProvider(union_type, unions), UnionRuleDecisionsProvider()
    )


def test_certain_at_least_rules(buses_table: InformationTable):
    ruleset = _induce(
        buses_table, calculator=ClassicalDominanceBasedRoughSetCalculator()
    )

    assert [str(rule) for rule in ruleset] == [
        "(symptom1 >= 31.0) => (state >= 2)",
        "(symptom1 >= 18.0) => (state >= 1)",
        "(symptom2 >= 17.0) => (state >= 1)",
    ]
    assert all(rule.rule_type == RuleType.CERTAIN for rule in ruleset)


def test_certain_at_most_rules(buses_table: InformationTable):
    ruleset = _induce(
        buses_table,
        union_type=UnionType.AT_MOST,
        calculator=ClassicalDominanceBasedRoughSetCalculator(),
        rule_semantics="at_most",
    )

    assert [str(rule) for rule in ruleset] == [
        "(symptom2 <= 9.0) => (state <= 0)",
        "(symptom1 <= 5.0) => (state <= 0)",
        "(symptom1 <= 21.0) => (state <= 1)",
    ]


def test_variable_consistency_rules(buses_table: InformationTable):
    ruleset = _induce(buses_table, consistency_threshold=0.1)

    assert [str(rule) for rule in ruleset] == [
        "(symptom1 >= 31.0) => (state >= 2)",
        "(symptom1 >= 27.5) => (state >= 2)",
        "(symptom1 >= 22.5) & (symptom2 >= 20.0) => (state >= 2)",
        "(symptom1 >= 18.0) => (state >= 1)",
        "(symptom2 >= 17.0) => (state >= 1)",
    ]
    for characteristics in ruleset.calculate_all_characteristics():
        assert characteristics.epsilon <= 0.1


def test_rules_cover_lower_approximations(buses_table: InformationTable):
    calculator = VCDominanceBasedRoughSetCalculator(threshold=0.1)
    unions = UnionsWithSingleLimitingDecision(buses_table, calculator)
    ruleset = _induce(buses_table, calculator=calculator, consistency_threshold=0.1)

    for union in unions.upward_unions:
        covered = np.zeros(buses_table.number_of_objects, dtype=bool)
        for rule in ruleset:
            if rule.decisions[0][0].limiting_value >= union.limiting_decision:
                covered |= rule.covered_mask(buses_table)
        assert not (union.lower_approximation_mask & ~covered).any()


def test_rules_cover_only_allowed_objects(buses_table: InformationTable):
    calculator = VCDominanceBasedRoughSetCalculator(threshold=0.1)
    unions = UnionsWithSingleLimitingDecision(buses_table, calculator)
    ruleset = _induce(buses_table, calculator=calculator, consistency_threshold=0.1)

    for rule in ruleset:
        union = next(
            u
            for u in unions.upward_unions
            if u.limiting_decision == rule.decisions[0][0].limiting_value
        )
        covered = rule.covered_mask(buses_table)
        assert not (covered & ~union.positive_region_mask).any()


def test_possible_rules(buses_table: InformationTable):
    ruleset = _induce(buses_table, rule_type="possible")

    assert [str(rule) for rule in ruleset] == [
        "(symptom1 >= 22.5) [p] => (state >= 2)",
        "(symptom1 >= 18.0) [p] => (state >= 1)",
        "(symptom2 >= 17.0) [p] => (state >= 1)",
    ]


def test_approximate_rules_cannot_exclude_dominating_objects(
    buses_table: InformationTable,
):
    # every rule covering the boundary of "state >= 2" covers object "a" as well
    with pytest.raises(ElementaryConditionNotFoundError):
        _induce(buses_table, rule_type="approximate")


def test_rule_coverage_information(buses_table: InformationTable):
    ruleset = _induce(buses_table, consistency_threshold=0.1)

    coverage_information = ruleset.get_rule_coverage_information(1)
    assert coverage_information.indices_of_covered_objects.tolist() == [
        0, 1, 2, 3, 4, 7]
    assert coverage_information.indices_of_positive_objects.tolist() == list(range(7))
    assert coverage_information.indices_of_neutral_objects.tolist() == []
    assert coverage_information.all_objects_count == 17
    assert coverage_information.indices_of_covered_not_supporting_objects.tolist() == [
        7]


def test_induction_is_deterministic(buses_table: InformationTable):
    first = _induce(buses_table, consistency_threshold=0.1)
    second = _induce(buses_table, consistency_threshold=0.1)

    assert first == second
    assert str(first) == str(second)


@pytest.mark.parametrize(
    "union_type, semantics, threshold",
    [
        (UnionType.AT_LEAST, "at_least", 0.0),
        (UnionType.AT_LEAST, "at_least", 0.1),
        (UnionType.AT_MOST, "at_most", 0.0),
    ],
)
def test_standard_and_m4_generators_give_the_same_rules(
    buses_table: InformationTable,
    union_type: UnionType,
    semantics: str,
    threshold: float,
):
    m4 = _induce(
        buses_table,
        union_type=union_type,
        rule_semantics=semantics,
        consistency_threshold=threshold,
        condition_generator="m4",
    )
    standard = _induce(
        buses_table,
        union_type=union_type,
        rule_semantics=semantics,
        consistency_threshold=threshold,
        condition_generator="standard",
    )
    assert str(m4) == str(standard)


def test_parallel_condition_generation(buses_table: InformationTable):
    sequential = _induce(buses_table, consistency_threshold=0.1, n_jobs=1)
    parallel = _induce(buses_table, consistency_threshold=0.1, n_jobs=2)

    assert str(sequential) == str(parallel)


def test_missing_values(buses_dataset: tuple[pd.DataFrame, pd.Series]):
    X, y = buses_dataset
    X = X.copy()
    X.loc["q", "symptom1"] = np.nan
    y = y.astype(float)
    y.loc["p"] = np.nan
    table = InformationTable.from_dataframe(X, y)

    ruleset = _induce(table)

    assert len(ruleset) > 0
    for i in range(len(ruleset)):
        coverage_information = ruleset.get_rule_coverage_information(i)
        assert coverage_information.indices_of_neutral_objects.tolist() == [15]
        # neutral object is never a counterexample of a certain rule
        assert ruleset.get_rule_characteristics(i).epsilon == 0.0


def test_timing(buses_table: InformationTable):
    params = fill_default_params({})
    unions = UnionsWithSingleLimitingDecision(
        buses_table, VCDominanceBasedRoughSetCalculator()
    )
    inducer = VCDomLEM(to_vcdomlem_parameters(params))
    inducer.generate_rules(
        UnionProvider(UnionType.AT_LEAST, unions), UnionRuleDecisionsProvider()
    )

    times = inducer.induction_times
    assert times.total_induction_time.total_seconds() > 0
    assert times.growing_time <= times.total_induction_time
    assert times.pruning_time <= times.total_induction_time


def test_union_type_must_match_rule_semantics(buses_table: InformationTable):
    with pytest.raises(InvalidConfigurationError):
        _induce(buses_table, union_type=UnionType.AT_MOST, rule_semantics="at_least")


@pytest.mark.parametrize(
    "params",
    [
        {"rule_type": "unknown"},
        {"rule_semantics": "equal"},
        {"condition_generator": "unknown"},
        {"rule_conditions_pruner": "unknown"},
        {"rule_conditions_generalizer": "unknown"},
        {"rule_conditions_set_pruner": "unknown"},
        {"rule_minimality_checker": "unknown"},
        {"rule_type": "possible", "allowed_objects_type": "any_region"},
    ],
)
def test_invalid_configuration(params: dict):
    with pytest.raises(InvalidConfigurationError):
        VCDomLEM(to_vcdomlem_parameters(fill_default_params(params)))


def test_unknown_parameter():
    with pytest.raises(ValueError):
        fill_default_params({"min_cov": 3})


def test_model(buses_dataset: tuple[pd.DataFrame, pd.Series]):
    model = VCDomLEMModel(consistency_threshold=0.1)
    X, y = buses_dataset
    ruleset = model.fit(X, y)

    assert ruleset is model.ruleset
    assert len(ruleset) == 5
    assert model.induction_times.total_induction_time.total_seconds() > 0
    assert model.quality_of_approximation == pytest.approx(14 / 17)


def test_model_params():
    model = VCDomLEMModel(consistency_threshold=0.2)

    params = model.get_params()
    assert set(params) == set(DEFAULT_PARAMS_VALUES)
    assert params["consistency_threshold"] == 0.2
    assert params["condition_generator"] == DEFAULT_PARAMS_VALUES["condition_generator"]

    model.set_params(rule_semantics="at_most")
    assert model.get_params()["rule_semantics"] == "at_most"


def test_model_with_cost_attribute(buses_dataset: tuple[pd.DataFrame, pd.Series]):
    X, y = buses_dataset
    X = X.assign(symptom2=-X["symptom2"])
    model = VCDomLEMModel()

    ruleset = model.fit(X, y, preference_types={"symptom2": "cost"})

    assert [str(rule) for rule in ruleset] == [
        "(symptom1 >= 31.0) => (state >= 2)",
        "(symptom1 >= 18.0) => (state >= 1)",
        "(symptom2 <= -17.0) => (state >= 1)",
    ]


def test_model_with_negative_threshold(buses_dataset: tuple[pd.DataFrame, pd.Series]):
    X, y = buses_dataset
    with pytest.raises(InvalidConfigurationError):
        VCDomLEMModel(consistency_threshold=-0.1).fit(X, y)


def test_induction_error_is_runtime_error():
    assert issubclass(ElementaryConditionNotFoundError, RuleInductionError)
    assert issubclass(RuleInductionError, RuntimeError)


def test_model_can_be_fitted_with_its_own_params(
    buses_dataset: tuple[pd.DataFrame, pd.Series]
):
    X, y = buses_dataset
    model = VCDomLEMModel(consistency_threshold=0.1)

    copy = VCDomLEMModel(**model.get_params())

    assert "__class__" not in model.get_params()
    assert str(copy.fit(X, y)) == str(model.fit(X, y))


def test_generalizer_does_not_change_most_general_rules(
    buses_table: InformationTable,
):
    generalized = _induce(buses_table, consistency_threshold=0.1)
    not_generalized = _induce(
        buses_table, consistency_threshold=0.1, rule_conditions_generalizer="dummy"
    )

    assert generalized == not_generalized


def _union_of_rule(rule, unions):
    return next(
        union
        for union in unions
        if union.limiting_decision == rule.decisions[0][0].limiting_value
    )


@pytest.mark.parametrize(
    "rule_type, semantics, union_type",
    [
        ("certain", "at_least", UnionType.AT_LEAST),
        ("certain", "at_most", UnionType.AT_MOST),
        ("possible", "at_least", UnionType.AT_LEAST),
        ("possible", "at_most", UnionType.AT_MOST),
    ],
)
def test_rules_cover_required_and_only_allowed_objects(
    buses_table: InformationTable,
    rule_type: str,
    semantics: str,
    union_type: UnionType,
):
    unions = UnionsWithSingleLimitingDecision(
        buses_table, VCDominanceBasedRoughSetCalculator()
    ).get_unions(union_type)
    ruleset = _induce(
        buses_table, union_type=union_type, rule_type=rule_type, rule_semantics=semantics
    )

    for union in unions:
        required = (
            union.lower_approximation_mask
            if rule_type == "certain"
            else union.upper_approximation_mask
        )
        covered = np.zeros(buses_table.number_of_objects, dtype=bool)
        for rule in ruleset:
            if union.includes(_union_of_rule(rule, unions)):
                covered |= rule.covered_mask(buses_table)
        assert not (required & ~covered).any()

    for rule in ruleset:
        union = _union_of_rule(rule, unions)
        allowed = (
            union.positive_region_mask
            if rule_type == "certain"
            else union.upper_approximation_mask
        ) | union.neutral_mask
        assert not (rule.covered_mask(buses_table) & ~allowed).any()


def _is_subsumed(rule, other) -> bool:
    return all(
        any(
            other_condition.is_at_least_as_general_as(condition)
            for condition in rule.conditions
        )
        for other_condition in other.conditions
    )


@pytest.mark.parametrize("threshold", [0.0, 0.2])
@pytest.mark.parametrize(
    "semantics, union_type",
    [("at_least", UnionType.AT_LEAST), ("at_most", UnionType.AT_MOST)],
)
def test_rules_of_the_same_union_are_minimal(
    threshold: float, semantics: str, union_type: UnionType
):
    checked: int = 0
    for seed in range(20):
        rng = np.random.default_rng(seed)
        X = pd.DataFrame(rng.integers(0, 5, size=(12, 3)), columns=["q1", "q2", "q3"])
        y = pd.Series(rng.integers(0, 3, size=12), name="class")
        table = InformationTable.from_dataframe(X, y)
        try:
            ruleset = _induce(
                table,
                union_type=union_type,
                rule_semantics=semantics,
                consistency_threshold=threshold,
            )
        except RuleInductionError:
            # greedy growing may run out of conditions on some random tables
            continue
        checked += 1
        characteristics = ruleset.calculate_all_characteristics()
        for i, rule in enumerate(ruleset):
            for j, other in enumerate(ruleset):
                if i == j or rule.decisions != other.decisions:
                    continue
                assert not (
                    _is_subsumed(rule, other)
                    and characteristics[j].epsilon <= characteristics[i].epsilon
                ), f"seed {seed}: {other} subsumes {rule}"
    assert checked > 0


def test_model_predict(buses_dataset: tuple[pd.DataFrame, pd.Series]):
    X, y = buses_dataset
    model = VCDomLEMModel()
    model.fit(X, y)

    # buses n, o, p and q are not covered and get the most frequent class 2
    assert model.default_decision == 2
    assert model.predict(X).tolist() == [2] * 4 + [1] * 9 + [2] * 4
    assert model.predict(X.iloc[:1]).tolist() == [2]


def test_model_predict_with_cost_attribute(
    buses_dataset: tuple[pd.DataFrame, pd.Series]
):
    X, y = buses_dataset
    X = X.assign(symptom2=-X["symptom2"])
    model = VCDomLEMModel(rule_semantics="at_most", classifier="simple")
    model.fit(X, y, preference_types={"symptom2": "cost"})

    # bus "a" is not covered by any at most rule
    assert model.predict(X).tolist() == [2] * 4 + [2] * 5 + [1] * 4 + [0] * 4


def test_model_predict_errors(buses_dataset: tuple[pd.DataFrame, pd.Series]):
    X, y = buses_dataset
    model = VCDomLEMModel()

    with pytest.raises(NotFittedError):
        model.predict(X)
    model.fit(X, y)
    with pytest.raises(InvalidConfigurationError):
        model.predict(X[["symptom2", "symptom1"]])
    with pytest.raises(InvalidConfigurationError):
        VCDomLEMModel(classifier="voting").fit(X, y)


def test_model_score(buses_dataset: tuple[pd.DataFrame, pd.Series]):
    X, y = buses_dataset
    model = VCDomLEMModel()
    model.fit(X, y)

    # recalls: 4/7 for class 2 (e, f and g get 1), 1 for class 1, 0 for class 0
    assert model.score(X, y) == pytest.approx((4 / 7 + 1) / 3)
