"""Contains calculation of the dominance relation between objects of an information
table.
"""
from __future__ import annotations

import numpy as np

from domlem._types import UnionType
from domlem.data import AttributePreferenceType
from domlem.data import InformationTable


class DominanceCones:
    """Dominance relation computed once for all pairs of objects.

    Object i dominates object j when it is at least as good on every active gain
    or cost condition attribute and has the same value on every active condition
    attribute without preference. Missing value is treated as equal to any
    other value.

    Args:
        information_table (InformationTable): information table
    """

    def __init__(self, information_table: InformationTable):
        self.information_table: InformationTable = information_table
        n: int = information_table.number_of_objects
        dominates: np.ndarray = np.ones((n, n), dtype=bool)
        for attribute_index in information_table.condition_attributes_indices:
            attribute = information_table.attributes[attribute_index]
            missing: np.ndarray = information_table.missing_mask(attribute_index)
            if not attribute.is_criterion:
                values: np.ndarray = information_table.column(attribute_index)
                relation = np.equal.outer(values, values).astype(bool)
            else:
                values = information_table.numeric_column(attribute_index)
                with np.errstate(invalid="ignore"):
                    if attribute.preference_type == AttributePreferenceType.GAIN:
                        relation = np.greater_equal.outer(values, values)
                    else:
                        relation = np.less_equal.outer(values, values)
            relation |= missing[:, np.newaxis] | missing[np.newaxis, :]
            dominates &= relation
        self.dominates: np.ndarray = dominates

    def positive_inverted_cone(self, object_index: int) -> np.ndarray:
        """Mask of objects dominating given object"""
        return self.dominates[:, object_index]

    def negative_cone(self, object_index: int) -> np.ndarray:
        """Mask of objects dominated by given object"""
        return self.dominates[object_index, :]

    def cones_for(self, union_type: UnionType) -> np.ndarray:
        """Returns matrix whose i-th row is the cone of i-th object relevant for
        unions of given type: objects dominating it for upward unions and objects
        dominated by it for downward ones.
        """
        if union_type == UnionType.AT_LEAST:
            return self.dominates.T
        return self.dominates
