from domlem.pruning.conditions import AbstractRuleConditionsPruner
from domlem.pruning.conditions import AttributeOrderRuleConditionsPruner
from domlem.pruning.conditions import DummyRuleConditionsPruner
from domlem.pruning.conditions import EvaluatorGuidedRuleConditionsPruner
from domlem.pruning.conditions import FIFORuleConditionsPruner
from domlem.pruning.ruleset import AbstractRuleConditionsSetPruner
from domlem.pruning.ruleset import DummyRuleConditionsSetPruner
from domlem.pruning.ruleset import EvaluationsAndOrderRuleConditionsSetPruner

__all__ = [
    "AbstractRuleConditionsPruner",
    "AttributeOrderRuleConditionsPruner",
    "DummyRuleConditionsPruner",
    "EvaluatorGuidedRuleConditionsPruner",
    "FIFORuleConditionsPruner",
    "AbstractRuleConditionsSetPruner",
    "DummyRuleConditionsSetPruner",
    "EvaluationsAndOrderRuleConditionsSetPruner",
]
