"""Contains the information table (decision table) consumed by rule induction.

Objects are rows of the table, identified by their integer position. Values are
kept per attribute in numpy arrays of their original dtype, so that thresholds
taken from data print the same way as they were read.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
from typing import Optional

import numpy as np
import pandas as pd

from domlem import _helpers
from domlem.exceptions import InvalidConfigurationError


class AttributeType(Enum):
    CONDITION = "condition"
    DECISION = "decision"
    DESCRIPTION = "description"


class AttributePreferenceType(Enum):
    GAIN = "gain"
    COST = "cost"
    NONE = "none"


@dataclass(frozen=True)
class Attribute:
    name: str
    type: AttributeType = AttributeType.CONDITION
    preference_type: AttributePreferenceType = AttributePreferenceType.NONE
    active: bool = True

    @property
    def is_criterion(self) -> bool:
        return self.preference_type != AttributePreferenceType.NONE


class InformationTable:
    """Table of objects described by condition attributes and a single decision
    attribute.

    Args:
        attributes (list[Attribute]): attributes in the order of declaration
        columns (list[np.ndarray]): values of each attribute, one array per
            attribute, all of the same length
    """

    def __init__(self, attributes: list[Attribute], columns: list[np.ndarray]):
        if len(attributes) != len(columns):
            raise ValueError(
                f"Got {len(attributes)} attributes but {len(columns)} columns")
        lengths: set[int] = {len(column) for column in columns}
        if len(lengths) > 1:
            raise ValueError("All columns must have the same length")
        decision_indices: list[int] = [
            i for i, attribute in enumerate(attributes)
            if attribute.type == AttributeType.DECISION and attribute.active
        ]
        if len(decision_indices) > 1:
            raise InvalidConfigurationError(
                "Information table supports single active decision attribute, "
                f"got: {[attributes[i].name for i in decision_indices]}"
            )
        self.attributes: list[Attribute] = list(attributes)
        self._columns: list[np.ndarray] = [np.asarray(c) for c in columns]
        self._numeric_columns: dict[int, np.ndarray] = {}
        self.decision_attribute_index: Optional[int] = (
            decision_indices[0] if decision_indices else None
        )
        self.condition_attributes_indices: list[int] = [
            i for i, attribute in enumerate(attributes)
            if attribute.type == AttributeType.CONDITION and attribute.active
        ]

    @staticmethod
    def from_dataframe(
        X: pd.DataFrame,
        y: pd.Series,
        preference_types: Optional[dict[str, str]] = None,
        decision_preference: str = "gain",
    ) -> InformationTable:
        """Creates information table from dataset. Numerical columns without given
        preference type are treated as gain criteria, nominal ones as attributes
        without preference.

        Args:
            X (pd.DataFrame): condition attributes
            y (pd.Series): decision attribute
            preference_types (Optional[dict[str, str]], optional): preference type
                ("gain", "cost" or "none") for chosen columns. Defaults to None.
            decision_preference (str, optional): preference type of the decision
                attribute. Defaults to "gain".

        Returns:
            InformationTable: information table
        """
        preference_types = {} if preference_types is None else preference_types
        unknown_columns: set[str] = set(preference_types) - set(X.columns)
        if unknown_columns:
            raise InvalidConfigurationError(
                f"Preference types given for unknown columns: {sorted(unknown_columns)}"
            )
        nominal_indexes: list[int] = _helpers.get_nominal_indexes(X)
        attributes: list[Attribute] = []
        columns: list[np.ndarray] = []
        for i, column_name in enumerate(X.columns):
            default_preference: str = "none" if i in nominal_indexes else "gain"
            preference = AttributePreferenceType(
                preference_types.get(column_name, default_preference)
            )
            attributes.append(
                Attribute(
                    name=str(column_name),
                    type=AttributeType.CONDITION,
                    preference_type=preference,
                )
            )
            columns.append(X[column_name].to_numpy())
        decision_preference_type = AttributePreferenceType(decision_preference)
        if decision_preference_type == AttributePreferenceType.NONE:
            raise InvalidConfigurationError(
                "Decision attribute has to be either of gain or cost type"
            )
        attributes.append(
            Attribute(
                name=str(y.name) if y.name is not None else "decision",
                type=AttributeType.DECISION,
                preference_type=decision_preference_type,
            )
        )
        columns.append(y.to_numpy())
        return InformationTable(attributes, columns)

    @property
    def number_of_objects(self) -> int:
        return 0 if len(self._columns) == 0 else len(self._columns[0])

    @property
    def number_of_attributes(self) -> int:
        return len(self.attributes)

    @property
    def decision_attribute(self) -> Attribute:
        if self.decision_attribute_index is None:
            raise InvalidConfigurationError(
                "Information table has no decision attribute")
        return self.attributes[self.decision_attribute_index]

    @property
    def decisions(self) -> np.ndarray:
        if self.decision_attribute_index is None:
            raise InvalidConfigurationError(
                "Information table has no decision attribute")
        return self.column(self.decision_attribute_index)

    def column(self, attribute_index: int) -> np.ndarray:
        return self._columns[attribute_index]

    def numeric_column(self, attribute_index: int) -> np.ndarray:
        """Values of the attribute as floats, missing values being NaN."""
        numeric_column: Optional[np.ndarray] = self._numeric_columns.get(
            attribute_index)
        if numeric_column is None:
            numeric_column = pd.to_numeric(
                pd.Series(self._columns[attribute_index]), errors="raise"
            ).to_numpy(dtype=float)
            self._numeric_columns[attribute_index] = numeric_column
        return numeric_column

    def missing_mask(self, attribute_index: int) -> np.ndarray:
        return pd.isnull(self._columns[attribute_index])

    def value_of(self, object_index: int, attribute_index: int) -> Any:
        return _helpers.to_python_scalar(self._columns[attribute_index][object_index])

    def get_attribute_index(self, attribute_name: str) -> int:
        for i, attribute in enumerate(self.attributes):
            if attribute.name == attribute_name:
                return i
        raise KeyError(f"Unknown attribute: {attribute_name}")

    def __len__(self) -> int:
        return self.number_of_objects
