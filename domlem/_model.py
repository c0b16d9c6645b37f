from abc import abstractmethod
from typing import Any
from typing import Optional
from typing import Type

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator
from sklearn.exceptions import NotFittedError
from sklearn.metrics import balanced_accuracy_score

from domlem import _helpers
from domlem._induction import RuleInducersMixin
from domlem._induction import RuleInductionTimes
from domlem._params import AlgorithmParams
from domlem._params import fill_default_params
from domlem.classification import SimpleRuleClassifier
from domlem.classification import create_rule_classifier
from domlem.data import InformationTable
from domlem.exceptions import InvalidConfigurationError
from domlem.rules import RuleSetWithComputableCharacteristics


class BaseModel(BaseEstimator):

    _Inducer: Type[RuleInducersMixin] = None

    def __init__(self, **algorithm_params: dict):
        if self._Inducer is None:
            raise NotImplementedError(
                "_Inducer field must point to valid class implementing "
                "RuleInducersMixin."
            )

        self._params: dict[str, Any] = algorithm_params
        self.induction_times: RuleInductionTimes = None
        self.ruleset: Optional[RuleSetWithComputableCharacteristics] = None
        self.information_table: Optional[InformationTable] = None
        self._inducer: RuleInducersMixin = None
        self.classifier: Optional[SimpleRuleClassifier] = None
        self.default_decision: Any = None
        self._feature_names: Optional[list[str]] = None
        self._preference_types: Optional[dict[str, str]] = None
        self._decision_preference: Optional[str] = None
        self._decision_name: Optional[str] = None

    def set_params(self, **params):
        self._params.update(params)
        return self

    def get_params(self, deep=True) -> dict:
        return self._params

    def fit(
        self,
        X: pd.DataFrame,
        y: pd.Series,
        preference_types: Optional[dict[str, str]] = None,
        decision_preference: str = "gain",
    ) -> RuleSetWithComputableCharacteristics:
        """Induces a ruleset on given data.

        Args:
            X (pd.DataFrame): dataset with condition attributes
            y (pd.Series): decision column
            preference_types (Optional[dict[str, str]], optional): preference types
                ("gain", "cost" or "none") of condition attributes by column name.
                Not listed nominal columns get "none", numerical ones get "gain".
                Defaults to None.
            decision_preference (str, optional): preference type of the decision.
                Defaults to "gain".

        Returns:
            RuleSetWithComputableCharacteristics: induced ruleset
        """
        params: AlgorithmParams = fill_default_params(self._params)
        self.information_table = InformationTable.from_dataframe(
            X,
            y,
            preference_types=preference_types,
            decision_preference=decision_preference,
        )
        self.ruleset = self._induce(self.information_table, params)
        self.induction_times = self._inducer.induction_times

        self._feature_names = list(X.columns)
        self._preference_types = {
            column: self.information_table.attributes[i].preference_type.value
            for i, column in enumerate(X.columns)
        }
        self._decision_preference = decision_preference
        self._decision_name = self.information_table.decision_attribute.name
        modes: pd.Series = y.mode()
        self.default_decision = (
            _helpers.to_python_scalar(modes.iloc[0]) if len(modes) > 0 else None
        )
        self.classifier = create_rule_classifier(
            params["classifier"],
            self.ruleset,
            self.information_table,
            self.default_decision,
        )
        return self.ruleset

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        """Classifies objects with the induced ruleset. Objects not covered by any
        rule get the most frequent decision of the learning objects.

        Args:
            X (pd.DataFrame): dataset with the same columns as the one used in fit

        Raises:
            NotFittedError: when the model was not fitted yet
            InvalidConfigurationError: when columns differ from the fitted ones

        Returns:
            np.ndarray: predicted decisions
        """
        if self.classifier is None:
            raise NotFittedError(
                f"This {self.__class__.__name__} instance is not fitted yet"
            )
        if list(X.columns) != self._feature_names:
            raise InvalidConfigurationError(
                f"Expected columns {self._feature_names}, got: {list(X.columns)}"
            )
        information_table = InformationTable.from_dataframe(
            X,
            pd.Series(np.nan, index=X.index, name=self._decision_name),
            preference_types=self._preference_types,
            decision_preference=self._decision_preference,
        )
        return self.classifier.predict(information_table)

    def score(self, X: pd.DataFrame, y: pd.Series) -> float:
        """Balanced accuracy of predictions for given objects"""
        return float(balanced_accuracy_score(y, self.predict(X)))

    @abstractmethod
    def _induce(
        self, information_table: InformationTable, params: AlgorithmParams
    ) -> RuleSetWithComputableCharacteristics:
        pass
