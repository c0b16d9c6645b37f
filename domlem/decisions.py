from domlem._types import UnionType
from domlem.approximations import Union
from domlem.conditions import ConditionAtLeast
from domlem.conditions import ConditionAtMost
from domlem.conditions import ElementaryCondition
from domlem.data import AttributePreferenceType


class UnionRuleDecisionsProvider:
    """Provides decision part of rules induced for a union, e.g. "state >= 2" for
    upward union of classes at least as good as class 2.
    """

    def get_rule_decisions(self, union: Union) -> list[list[ElementaryCondition]]:
        table = union.information_table
        attribute = table.decision_attribute
        gain: bool = attribute.preference_type == AttributePreferenceType.GAIN
        at_least: bool = union.union_type == UnionType.AT_LEAST
        condition_class = ConditionAtLeast if gain == at_least else ConditionAtMost
        return [
            [
                condition_class(
                    attribute_index=table.decision_attribute_index,
                    attribute_name=attribute.name,
                    limiting_value=union.limiting_decision,
                )
            ]
        ]
