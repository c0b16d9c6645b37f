import numpy as np
import pandas as pd
import pytest
import utils

from domlem.classification import SimpleClassificationResult
from domlem.classification import SimpleOptimizingRuleClassifier
from domlem.classification import SimpleRuleClassifier
from domlem.classification import create_rule_classifier
from domlem.data import InformationTable
from domlem.exceptions import InvalidConfigurationError
from domlem.rules import RuleSet
from domlem.rules import RuleSetWithComputableCharacteristics
from domlem.vcdomlem import VCDomLEMModel


@pytest.fixture
def buses_table() -> InformationTable:
    X, y = utils.read_dataset("buses")
    return InformationTable.from_dataframe(X, y)


@pytest.fixture
def ruleset() -> RuleSetWithComputableCharacteristics:
    """At least rules followed by at most rules:
    0: (symptom1 >= 31.0) => (state >= 2)
    1: (symptom1 >= 18.0) => (state >= 1)
    2: (symptom2 >= 17.0) => (state >= 1)
    3: (symptom2 <= 9.0) => (state <= 0)
    4: (symptom1 <= 5.0) => (state <= 0)
    5: (symptom1 <= 21.0) => (state <= 1)
    """
    X, y = utils.read_dataset("buses")
    at_least = VCDomLEMModel().fit(X, y)
    at_most = VCDomLEMModel(rule_semantics="at_most").fit(X, y)
    return RuleSetWithComputableCharacteristics(
        list(at_least) + list(at_most),
        [at_least.get_rule_coverage_information(i) for i in range(len(at_least))]
        + [at_most.get_rule_coverage_information(i) for i in range(len(at_most))],
    )


def _table(*objects: tuple[float, float]) -> InformationTable:
    X = pd.DataFrame(objects, columns=["symptom1", "symptom2"])
    return InformationTable.from_dataframe(
        X, pd.Series(np.nan, index=X.index, name="state")
    )


def test_ruleset_fixture(ruleset: RuleSetWithComputableCharacteristics):
    assert [str(rule) for rule in ruleset] == [
        "(symptom1 >= 31.0) => (state >= 2)",
        "(symptom1 >= 18.0) => (state >= 1)",
        "(symptom2 >= 17.0) => (state >= 1)",
        "(symptom2 <= 9.0) => (state <= 0)",
        "(symptom1 <= 5.0) => (state <= 0)",
        "(symptom1 <= 21.0) => (state <= 1)",
    ]


def test_classify_with_agreeing_limits(
    ruleset: RuleSetWithComputableCharacteristics, buses_table: InformationTable
):
    classifier = SimpleRuleClassifier(ruleset, default_decision=1)

    # bus "j" (21, 9.5) is covered by ">= 1" and "<= 1"
    assert classifier.classify(9, buses_table) == SimpleClassificationResult(1, (1, 5))
    # bus "n" (17.5, 5) is covered only by "<= 0" and "<= 1"
    assert classifier.classify(13, buses_table) == SimpleClassificationResult(0, (3, 5))
    # bus "a" (40, 17.8) is covered only by at least rules
    assert classifier.classify(0, buses_table).decision == 2


def test_classify_uncovered_object(ruleset: RuleSetWithComputableCharacteristics):
    classifier = SimpleRuleClassifier(RuleSet(ruleset.rules[:3]), default_decision=1)

    # at least rules require symptom1 >= 18 or symptom2 >= 17
    result = classifier.classify(0, _table((10.0, 5.0)))

    assert result.decision == 1
    assert result.indices_of_covering_rules == ()


def test_conflicting_limits(ruleset: RuleSetWithComputableCharacteristics, buses_table):
    # covered by ">= 2", ">= 1" and "<= 0"
    table = _table((31.0, 5.0))

    simple = SimpleRuleClassifier(ruleset, default_decision=0)
    optimizing = SimpleOptimizingRuleClassifier(ruleset, buses_table, default_decision=0)

    assert simple.classify(0, table).indices_of_covering_rules == (0, 1, 3)
    assert simple.classify(0, table).decision == 1
    # class 2 is supported by a-g, class 0 only by n, o and p
    assert optimizing.classify(0, table).decision == 2


def test_classify_all(ruleset: RuleSetWithComputableCharacteristics, buses_table):
    classifier = SimpleOptimizingRuleClassifier(ruleset, buses_table, default_decision=1)

    results = classifier.classify_all(buses_table)

    assert [result.decision for result in results] == [2] * 4 + [1] * 9 + [0] * 4
    assert results == [
        classifier.classify(i, buses_table) for i in range(len(buses_table))
    ]
    assert classifier.predict(buses_table).tolist() == [
        result.decision for result in results
    ]


def test_empty_ruleset(buses_table: InformationTable):
    classifier = SimpleRuleClassifier(RuleSet([]), default_decision=2)

    assert classifier.predict(buses_table).tolist() == [2] * 17


def test_create_rule_classifier(
    ruleset: RuleSetWithComputableCharacteristics, buses_table: InformationTable
):
    assert type(
        create_rule_classifier("simple", ruleset, buses_table, 0)
    ) is SimpleRuleClassifier
    assert isinstance(
        create_rule_classifier("simple_optimizing", ruleset, buses_table, 0),
        SimpleOptimizingRuleClassifier,
    )
    with pytest.raises(InvalidConfigurationError):
        create_rule_classifier("voting", ruleset, buses_table, 0)
