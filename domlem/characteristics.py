"""Contains rule characteristics (support, confidence, confirmation measures etc.)
and filters accepting rules based on them.

Filters can be written as text, e.g. :code:`"support>10&confidence>=0.95"`, and are
printed back in the same form.
"""
from __future__ import annotations

import math
from abc import ABC
from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from typing import Callable
from typing import Optional
from typing import Union

from decision_rules import measures
from decision_rules.core.coverage import Coverage

from domlem.exceptions import InvalidConfigurationError
from domlem.exceptions import UnknownValueError

if TYPE_CHECKING:
    from domlem.rules import Rule
    from domlem.rules import RuleCoverageInformation

Number = Union[int, float]


def _divide(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.nan
    return numerator / denominator


@dataclass
class RuleCharacteristics:
    """Characteristics of a single rule. Characteristics that were not calculated
    are None.

    Confirmation measures are defined for premise E and conclusion H of the rule:

    * F = (P(E|H) - P(E|not H)) / (P(E|H) + P(E|not H))
    * A = (P(E|H) - P(E)) / (1 - P(E)) for confirmation, (P(E|H) - P(E)) / P(E)
      otherwise
    * Z = (P(H|E) - P(H)) / (1 - P(H)) for confirmation, (P(H|E) - P(H)) / P(H)
      otherwise
    * L = log(P(E|H) / P(E|not H))
    * S = P(H|E) - P(H|not E)
    """

    support: Optional[int] = None
    strength: Optional[float] = None
    confidence: Optional[float] = None
    coverage_factor: Optional[float] = None
    coverage: Optional[int] = None
    negative_coverage: Optional[int] = None
    epsilon: Optional[float] = None
    epsilon_prime: Optional[float] = None
    f_confirmation: Optional[float] = None
    a_confirmation: Optional[float] = None
    z_confirmation: Optional[float] = None
    l_confirmation: Optional[float] = None
    s_confirmation: Optional[float] = None
    c1: Optional[float] = None
    c2: Optional[float] = None
    number_of_conditions: Optional[int] = None

    @staticmethod
    def from_coverage_information(
        coverage_information: RuleCoverageInformation,
        number_of_conditions: Optional[int] = None,
    ) -> RuleCharacteristics:
        """Calculates all characteristics of a rule from its coverage.

        Args:
            coverage_information (RuleCoverageInformation): rule coverage
            number_of_conditions (Optional[int], optional): number of conditions in
                the rule premise. Defaults to None.

        Returns:
            RuleCharacteristics: characteristics
        """
        all_objects: int = coverage_information.all_objects_count
        P: int = len(coverage_information.indices_of_positive_objects)
        N: int = (
            all_objects - P - len(coverage_information.indices_of_neutral_objects)
        )
        p: int = len(coverage_information.indices_of_supporting_objects)
        n: int = len(coverage_information.indices_of_covered_negative_objects)
        coverage = Coverage(p=p, n=n, P=P, N=N)
        covers_anything: bool = coverage.p + coverage.n > 0
        has_both_classes: bool = coverage.P > 0 and coverage.N > 0
        return RuleCharacteristics(
            support=coverage.p,
            strength=_divide(coverage.p, all_objects),
            confidence=_measure(measures.precision, coverage, covers_anything),
            coverage_factor=_measure(measures.coverage, coverage, coverage.P > 0),
            coverage=coverage.p + coverage.n,
            negative_coverage=coverage.n,
            epsilon=0.0 if coverage.n == 0 else _divide(coverage.n, coverage.N),
            epsilon_prime=_divide(coverage.n, coverage.P),
            f_confirmation=_measure(
                measures.f_bayesian_confirmation,
                coverage,
                covers_anything and has_both_classes,
            ),
            a_confirmation=_a_confirmation(coverage),
            z_confirmation=_z_confirmation(coverage),
            l_confirmation=_l_confirmation(coverage),
            s_confirmation=_measure(
                measures.s_bayesian,
                coverage,
                covers_anything
                and coverage.p + coverage.n < coverage.P + coverage.N,
            ),
            c1=_measure(measures.c1, coverage, covers_anything and has_both_classes),
            c2=_measure(measures.c2, coverage, covers_anything and has_both_classes),
            number_of_conditions=number_of_conditions,
        )


def _measure(
    measure: Callable[[Coverage], float], coverage: Coverage, is_defined: bool
) -> float:
    # decision_rules returns 0 for degenerate coverages, those are reported as NaN
    if not is_defined:
        return math.nan
    return float(measure(coverage))


def _a_confirmation(coverage: Coverage) -> float:
    p_e_h: float = _divide(coverage.p, coverage.P)
    p_e: float = _divide(coverage.p + coverage.n, coverage.P + coverage.N)
    if p_e_h >= p_e:
        return _divide(p_e_h - p_e, 1 - p_e)
    return _divide(p_e_h - p_e, p_e)


def _z_confirmation(coverage: Coverage) -> float:
    p_h_e: float = _divide(coverage.p, coverage.p + coverage.n)
    p_h: float = _divide(coverage.P, coverage.P + coverage.N)
    if p_h_e >= p_h:
        return _divide(p_h_e - p_h, 1 - p_h)
    return _divide(p_h_e - p_h, p_h)


def _l_confirmation(coverage: Coverage) -> float:
    p_e_h: float = _divide(coverage.p, coverage.P)
    p_e_not_h: float = _divide(coverage.n, coverage.N)
    if math.isnan(p_e_h) or math.isnan(p_e_not_h):
        return math.nan
    if p_e_not_h == 0:
        return math.inf if p_e_h > 0 else math.nan
    if p_e_h == 0:
        return -math.inf
    return math.log(p_e_h / p_e_not_h)


class RuleCharacteristic(Enum):
    """Characteristics that can be used in textual filters. Values are names used
    in the text, matched case insensitively.
    """

    SUPPORT = ("support", "support")
    STRENGTH = ("strength", "strength")
    CONFIDENCE = ("confidence", "confidence")
    COVERAGE_FACTOR = ("coverage-factor", "coverage_factor")
    COVERAGE = ("coverage", "coverage")
    NEGATIVE_COVERAGE = ("negative-coverage", "negative_coverage")
    EPSILON = ("epsilon", "epsilon")
    EPSILON_PRIME = ("epsilon'", "epsilon_prime")
    F_CONFIRMATION = ("F", "f_confirmation")
    A_CONFIRMATION = ("A", "a_confirmation")
    Z_CONFIRMATION = ("Z", "z_confirmation")
    L_CONFIRMATION = ("L", "l_confirmation")
    S_CONFIRMATION = ("S", "s_confirmation")
    C1 = ("c1", "c1")
    C2 = ("c2", "c2")
    LENGTH = ("length", "number_of_conditions")

    def __init__(self, text: str, field_name: str):
        self.text: str = text
        self.field_name: str = field_name

    @staticmethod
    def of(text: str) -> RuleCharacteristic:
        for characteristic in RuleCharacteristic:
            if characteristic.text.lower() == text.strip().lower():
                return characteristic
        raise ValueError(f"Unknown rule characteristic: {text}")

    def value_of(self, characteristics: RuleCharacteristics) -> Number:
        value: Optional[Number] = getattr(characteristics, self.field_name)
        if value is None:
            raise UnknownValueError(f"Value of {self.text} was not calculated")
        return value


class Relation(Enum):
    # order matters when parsing, two characters relations have to go first
    GREATER_OR_EQUAL = ">="
    LESS_OR_EQUAL = "<="
    GREATER = ">"
    LESS = "<"
    EQUAL = "="

    def holds(self, value: Number, threshold: Number) -> bool:
        if self == Relation.GREATER_OR_EQUAL:
            return value >= threshold
        if self == Relation.LESS_OR_EQUAL:
            return value <= threshold
        if self == Relation.GREATER:
            return value > threshold
        if self == Relation.LESS:
            return value < threshold
        return value == threshold


class RuleFilter(ABC):

    @abstractmethod
    def accepts(self, rule: Rule, characteristics: RuleCharacteristics) -> bool:
        pass


class AcceptingRuleFilter(RuleFilter):
    """Filter accepting every rule"""

    def accepts(self, rule: Rule, characteristics: RuleCharacteristics) -> bool:
        return True

    def __str__(self) -> str:
        return ""


class ConfidenceRuleFilter(RuleFilter):
    """Accepts rules whose confidence is greater than (strict comparison) or at
    least equal to the threshold.

    Args:
        confidence_threshold (float): threshold from [0, 1] interval
        strict_comparison (bool, optional): whether confidence has to be greater
            than the threshold. Defaults to False.

    Raises:
        InvalidConfigurationError: when threshold is outside [0, 1] interval
    """

    def __init__(self, confidence_threshold: float, strict_comparison: bool = False):
        if not 0.0 <= confidence_threshold <= 1.0:
            raise InvalidConfigurationError(
                f"Confidence threshold must belong to [0, 1], got: {confidence_threshold}"
            )
        self.confidence_threshold: float = confidence_threshold
        self.strict_comparison: bool = strict_comparison

    def accepts(self, rule: Rule, characteristics: RuleCharacteristics) -> bool:
        """Raises:
        UnknownValueError: when confidence of the rule was not calculated
        """
        confidence: float = RuleCharacteristic.CONFIDENCE.value_of(characteristics)
        if self.strict_comparison:
            return confidence > self.confidence_threshold
        return confidence >= self.confidence_threshold

    def __str__(self) -> str:
        relation: Relation = (
            Relation.GREATER if self.strict_comparison else Relation.GREATER_OR_EQUAL
        )
        return f"confidence{relation.value}{self.confidence_threshold}"


def _parse_threshold(text: str) -> Number:
    value: float = float(text)
    if value.is_integer() and "." not in text and "e" not in text.lower():
        return int(value)
    return value


class RuleCharacteristicsFilter(RuleFilter):
    """Accepts rules whose characteristic is in the given relation with the
    threshold, e.g. :code:`confidence>=0.95`. Rules whose characteristic was not
    calculated or is NaN are rejected.

    Args:
        characteristic (RuleCharacteristic): filtered characteristic
        relation (Relation): relation
        threshold (Number): threshold
        threshold_text (Optional[str], optional): threshold as written in the
            parsed text, printed back instead of the parsed number. Defaults to
            None.
    """

    def __init__(
        self,
        characteristic: RuleCharacteristic,
        relation: Relation,
        threshold: Number,
        threshold_text: Optional[str] = None,
    ):
        self.characteristic: RuleCharacteristic = characteristic
        self.relation: Relation = relation
        self.threshold: Number = threshold
        self.threshold_text: str = (
            str(threshold) if threshold_text is None else threshold_text
        )

    @staticmethod
    def of(text: str) -> RuleCharacteristicsFilter:
        """Parses filter from text of the form :code:`<name><relation><threshold>`.

        Raises:
            ValueError: when text is malformed
        """
        for relation in Relation:
            if relation.value in text:
                name, threshold = text.split(relation.value, maxsplit=1)
                threshold = threshold.strip()
                try:
                    parsed_threshold: Number = _parse_threshold(threshold)
                except ValueError as error:
                    raise ValueError(
                        f"Invalid threshold in rule filter: {text}"
                    ) from error
                return RuleCharacteristicsFilter(
                    RuleCharacteristic.of(name), relation, parsed_threshold, threshold
                )
        raise ValueError(f"Rule filter without relation: {text}")

    def accepts(self, rule: Rule, characteristics: RuleCharacteristics) -> bool:
        try:
            value: Number = self.characteristic.value_of(characteristics)
        except UnknownValueError:
            return False
        if isinstance(value, float) and math.isnan(value):
            return False
        return self.relation.holds(value, self.threshold)

    def __str__(self) -> str:
        return f"{self.characteristic.text}{self.relation.value}{self.threshold_text}"

    def __repr__(self) -> str:
        return f"RuleCharacteristicsFilter({self})"


class CompositeRuleCharacteristicsFilter(RuleFilter):
    """Conjunction of characteristics filters written as text joined with
    :code:`&`, e.g. :code:`support>10&confidence>=0.95&epsilon=0.1`.
    """

    SEPARATOR: str = "&"

    def __init__(self, filters: list[RuleCharacteristicsFilter]):
        self.filters: list[RuleCharacteristicsFilter] = list(filters)

    @staticmethod
    def of(text: str) -> CompositeRuleCharacteristicsFilter:
        parts: list[str] = [
            part.strip()
            for part in text.split(CompositeRuleCharacteristicsFilter.SEPARATOR)
        ]
        return CompositeRuleCharacteristicsFilter(
            [RuleCharacteristicsFilter.of(part) for part in parts if part != ""]
        )

    def accepts(self, rule: Rule, characteristics: RuleCharacteristics) -> bool:
        return all(f.accepts(rule, characteristics) for f in self.filters)

    def __str__(self) -> str:
        return self.SEPARATOR.join(str(f) for f in self.filters)

    def __repr__(self) -> str:
        return f"CompositeRuleCharacteristicsFilter({self})"
