import numpy as np
import pandas as pd
import pytest
import utils

from domlem._types import RuleSemantics
from domlem._types import RuleType
from domlem._types import UnionType
from domlem.approximations import ClassicalDominanceBasedRoughSetCalculator
from domlem.approximations import UnionProvider
from domlem.approximations import UnionsWithSingleLimitingDecision
from domlem.approximations import VCDominanceBasedRoughSetCalculator
from domlem.conditions import ConditionAtLeast
from domlem.conditions import ConditionEqual
from domlem.data import AttributePreferenceType
from domlem.data import AttributeType
from domlem.data import InformationTable
from domlem.dominance import DominanceCones
from domlem.exceptions import InvalidConfigurationError
from domlem.measures import EpsilonConsistencyMeasure
from domlem.measures import RoughMembershipMeasure
from domlem.rule_conditions import RuleConditions


@pytest.fixture
def buses_table() -> InformationTable:
    X, y = utils.read_dataset("buses")
    return InformationTable.from_dataframe(X, y)


def test_information_table(buses_table: InformationTable):
    assert buses_table.number_of_objects == 17
    assert len(buses_table) == 17
    assert buses_table.number_of_attributes == 3
    assert buses_table.condition_attributes_indices == [0, 1]
    assert buses_table.decision_attribute.name == "state"
    assert buses_table.decision_attribute.type == AttributeType.DECISION
    assert buses_table.decisions.tolist()[:3] == [2, 2, 2]
    assert buses_table.value_of(4, 0) == 27.5
    assert buses_table.get_attribute_index("symptom2") == 1
    with pytest.raises(KeyError):
        buses_table.get_attribute_index("bus")


def test_information_table_preference_types():
    X = pd.DataFrame({"price": [1.0, 2.0], "color": ["red", "blue"], "size": [3, 4]})
    y = pd.Series([0, 1], name="class")

    table = InformationTable.from_dataframe(X, y, preference_types={"price": "cost"})

    assert [a.preference_type for a in table.attributes] == [
        AttributePreferenceType.COST,
        AttributePreferenceType.NONE,
        AttributePreferenceType.GAIN,
        AttributePreferenceType.GAIN,
    ]
    with pytest.raises(InvalidConfigurationError):
        InformationTable.from_dataframe(X, y, preference_types={"weight": "gain"})
    with pytest.raises(InvalidConfigurationError):
        InformationTable.from_dataframe(X, y, decision_preference="none")


def test_dominance_cones(buses_table: InformationTable):
    cones = DominanceCones(buses_table)

    assert cones.dominates[0, 4]
    assert not cones.dominates[4, 0]
    # objects dominating bus "e"
    assert np.flatnonzero(cones.positive_inverted_cone(4)).tolist() == [
        0, 1, 2, 3, 4, 7]
    # objects dominated by bus "j"
    assert np.flatnonzero(cones.negative_cone(9)).tolist() == [9, 13, 14, 15]


def test_dominance_with_missing_values():
    X = pd.DataFrame({"a": [1.0, np.nan, 3.0], "b": [1.0, 2.0, 0.0]})
    y = pd.Series([0, 1, 1], name="class")

    cones = DominanceCones(InformationTable.from_dataframe(X, y))

    assert cones.dominates[1, 0]
    assert not cones.dominates[0, 1]
    assert not cones.dominates[2, 1]


def test_unions(buses_table: InformationTable):
    unions = UnionsWithSingleLimitingDecision(
        buses_table, ClassicalDominanceBasedRoughSetCalculator()
    )

    assert unions.ordered_decisions == [0, 1, 2]
    assert [str(union) for union in unions.upward_unions] == ["state >= 2", "state >= 1"]
    assert [str(union) for union in unions.downward_unions] == [
        "state <= 0",
        "state <= 1",
    ]
    provider = UnionProvider(UnionType.AT_MOST, unions)
    assert provider.count() == 2
    assert provider.get_approximated_set(1) is unions.downward_unions[1]


def test_classical_approximations(buses_table: InformationTable):
    unions = UnionsWithSingleLimitingDecision(
        buses_table, ClassicalDominanceBasedRoughSetCalculator()
    )
    union = unions.upward_unions[0]

    assert union.objects.tolist() == [0, 1, 2, 3, 4, 5, 6]
    assert union.lower_approximation.tolist() == [0, 1, 2, 3]
    assert union.upper_approximation.tolist() == [0, 1, 2, 3, 4, 5, 6, 7, 8]
    assert union.boundary.tolist() == [4, 5, 6, 7, 8]
    assert union.positive_region.tolist() == [0, 1, 2, 3]
    assert union.neutral_objects.tolist() == []
    assert unions.quality_of_approximation == pytest.approx(12 / 17)


def test_variable_consistency_approximations(buses_table: InformationTable):
    unions = UnionsWithSingleLimitingDecision(
        buses_table, VCDominanceBasedRoughSetCalculator(threshold=0.1)
    )
    union = unions.upward_unions[0]

    assert union.lower_approximation.tolist() == [0, 1, 2, 3, 4, 6]
    assert union.positive_region.tolist() == [0, 1, 2, 3, 4, 6, 7, 8]
    assert union.negative_region.tolist() == list(range(9, 17))
    assert union.boundary_region.tolist() == [5]
    assert unions.upward_unions[1].lower_approximation.tolist() == list(range(13))

    complementary_union = union.complementary_union
    assert complementary_union.union_type == UnionType.AT_MOST
    assert complementary_union.limiting_decision == 1
    assert complementary_union.lower_approximation.tolist() == list(range(9, 17))


def test_variable_consistency_with_zero_threshold_is_classical(
    buses_table: InformationTable,
):
    classical = UnionsWithSingleLimitingDecision(
        buses_table, ClassicalDominanceBasedRoughSetCalculator()
    )
    variable_consistency = UnionsWithSingleLimitingDecision(
        buses_table, VCDominanceBasedRoughSetCalculator()
    )

    for first, second in zip(
        classical.upward_unions + classical.downward_unions,
        variable_consistency.upward_unions + variable_consistency.downward_unions,
    ):
        assert first.lower_approximation.tolist() == second.lower_approximation.tolist()
        assert first.upper_approximation.tolist() == second.upper_approximation.tolist()


def test_objects_consistencies(buses_table: InformationTable):
    unions = UnionsWithSingleLimitingDecision(
        buses_table, ClassicalDominanceBasedRoughSetCalculator()
    )

    consistencies = EpsilonConsistencyMeasure().calculate_objects_consistencies(
        unions.upward_unions[0]
    )

    assert consistencies[:7].tolist() == pytest.approx([0, 0, 0, 0, 0.1, 0.2, 0.1])


def test_union_inclusion(buses_table: InformationTable):
    unions = UnionsWithSingleLimitingDecision(
        buses_table, ClassicalDominanceBasedRoughSetCalculator()
    )
    at_least_2, at_least_1 = unions.upward_unions

    assert at_least_1.includes(at_least_2)
    assert not at_least_2.includes(at_least_1)
    assert not at_least_1.includes(unions.downward_unions[0])


def test_neutral_objects():
    X = pd.DataFrame({"a": [1.0, 2.0, 3.0, 4.0]})
    y = pd.Series([0.0, np.nan, 1.0, 1.0], name="class")

    unions = UnionsWithSingleLimitingDecision(
        InformationTable.from_dataframe(X, y),
        ClassicalDominanceBasedRoughSetCalculator(),
    )
    union = unions.upward_unions[0]

    assert union.objects.tolist() == [2, 3]
    assert union.neutral_objects.tolist() == [1]
    assert union.lower_approximation.tolist() == [2, 3]
    assert union.upper_approximation.tolist() == [2, 3]


def test_negative_threshold():
    with pytest.raises(InvalidConfigurationError):
        VCDominanceBasedRoughSetCalculator(threshold=-0.5)


@pytest.mark.parametrize("dtype", ["object", "string", "category"])
def test_nominal_columns(dtype: str):
    X = pd.DataFrame(
        {
            "color": pd.Series(["red", None, "blue", "red"], dtype=dtype),
            "size": [1, 2, 3, 4],
        }
    )
    y = pd.Series([0, 1, 1, 0], name="class")

    table = InformationTable.from_dataframe(X, y)

    assert table.attributes[0].preference_type == AttributePreferenceType.NONE
    assert table.attributes[1].preference_type == AttributePreferenceType.GAIN
    # missing value is equal to any other value
    assert ConditionEqual(0, "color", "red").covered_mask(table).tolist() == [
        True,
        True,
        False,
        True,
    ]


def test_rough_membership_consistencies(buses_table: InformationTable):
    unions = UnionsWithSingleLimitingDecision(
        buses_table, ClassicalDominanceBasedRoughSetCalculator()
    )

    consistencies = RoughMembershipMeasure().calculate_objects_consistencies(
        unions.upward_unions[0]
    )

    # e.g. bus "f" is dominated by a-e, h and i, of which h and i have class 1
    assert consistencies[:7].tolist() == pytest.approx(
        [1, 1, 1, 1, 5 / 6, 0.75, 0.8]
    )


def test_rough_membership_approximations(buses_table: InformationTable):
    unions = UnionsWithSingleLimitingDecision(
        buses_table,
        VCDominanceBasedRoughSetCalculator(
            consistency_measure=RoughMembershipMeasure(), threshold=0.8
        ),
    )

    assert unions.upward_unions[0].lower_approximation.tolist() == [0, 1, 2, 3, 4, 6]


def test_rough_membership_of_rule_conditions(buses_table: InformationTable):
    unions = UnionsWithSingleLimitingDecision(
        buses_table, ClassicalDominanceBasedRoughSetCalculator()
    )
    union = unions.upward_unions[0]
    rule_conditions = RuleConditions(
        buses_table,
        union.objects_mask,
        union.lower_approximation_mask,
        union.positive_region_mask | union.neutral_mask,
        union.neutral_mask,
        RuleType.CERTAIN,
        RuleSemantics.AT_LEAST,
    )
    rule_conditions.add_condition(ConditionAtLeast(0, "symptom1", 27.5))
    measure = RoughMembershipMeasure()

    # covers a-e and h
    assert measure.evaluate(rule_conditions) == pytest.approx(5 / 6)
    assert measure.satisfies_threshold(5 / 6, 0.8)
    assert not measure.satisfies_threshold(0.75, 0.8)
