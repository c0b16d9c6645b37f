from enum import Enum


class UnionType(Enum):
    """Orientation of a decision classes union"""

    AT_LEAST = "at_least"
    AT_MOST = "at_most"


class RuleType(Enum):
    CERTAIN = "certain"
    POSSIBLE = "possible"
    APPROXIMATE = "approximate"


class RuleSemantics(Enum):
    AT_LEAST = "at_least"
    AT_MOST = "at_most"
    EQUAL = "equal"
