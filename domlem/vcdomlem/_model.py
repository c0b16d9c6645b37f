from domlem._model import BaseModel
from domlem._params import DEFAULT_PARAMS_VALUES
from domlem._params import AlgorithmParams
from domlem._types import RuleSemantics
from domlem._types import UnionType
from domlem.approximations import UnionProvider
from domlem.approximations import UnionsWithSingleLimitingDecision
from domlem.approximations import VCDominanceBasedRoughSetCalculator
from domlem.data import InformationTable
from domlem.decisions import UnionRuleDecisionsProvider
from domlem.rules import RuleSetWithComputableCharacteristics
from domlem.vcdomlem._induction import VCDomLEM
from domlem.vcdomlem._params import VCDomLEMParameters
from domlem.vcdomlem._params import to_vcdomlem_parameters


class VCDomLEMModel(BaseModel):
    """Induces decision rules for unions of ordered decision classes with VC-DomLEM
    algorithm. Rules have the following form:
        IF (q1 >= v1) AND (q2 <= v2) ... THEN decision >= d

    Lower approximations of the unions are calculated with Variable Consistency
    Dominance-based Rough Set Approach, where :code:`consistency_threshold`
    controls how many inconsistent objects are tolerated (0 gives classical DRSA).
    """

    _Inducer = VCDomLEM

    def __init__(
        self,
        consistency_threshold: float = DEFAULT_PARAMS_VALUES["consistency_threshold"],
        rule_type: str = DEFAULT_PARAMS_VALUES["rule_type"],
        rule_semantics: str = DEFAULT_PARAMS_VALUES["rule_semantics"],
        allowed_objects_type: str = DEFAULT_PARAMS_VALUES["allowed_objects_type"],
        condition_generator: str = DEFAULT_PARAMS_VALUES["condition_generator"],
        rule_conditions_pruner: str = DEFAULT_PARAMS_VALUES["rule_conditions_pruner"],
        rule_conditions_generalizer: str = DEFAULT_PARAMS_VALUES[
            "rule_conditions_generalizer"
        ],
        rule_conditions_set_pruner: str = DEFAULT_PARAMS_VALUES[
            "rule_conditions_set_pruner"
        ],
        rule_minimality_checker: str = DEFAULT_PARAMS_VALUES[
            "rule_minimality_checker"
        ],
        classifier: str = DEFAULT_PARAMS_VALUES["classifier"],
        n_jobs: int = DEFAULT_PARAMS_VALUES["n_jobs"],
    ):  # pylint: disable=unused-argument
        params: dict = locals()
        params.pop("self")
        # zero-argument super() puts the class cell into locals
        params.pop("__class__", None)
        super().__init__(**params)
        self.quality_of_approximation: float = None

    def _induce(
        self, information_table: InformationTable, params: AlgorithmParams
    ) -> RuleSetWithComputableCharacteristics:
        parameters: VCDomLEMParameters = to_vcdomlem_parameters(params)
        unions = UnionsWithSingleLimitingDecision(
            information_table,
            VCDominanceBasedRoughSetCalculator(
                threshold=params["consistency_threshold"]
            ),
        )
        self.quality_of_approximation = unions.quality_of_approximation
        union_type: UnionType = (
            UnionType.AT_LEAST
            if parameters.rule_semantics == RuleSemantics.AT_LEAST
            else UnionType.AT_MOST
        )
        self._inducer: VCDomLEM = self._Inducer(
            parameters
        )  # pylint: disable=not-callable
        return self._inducer.generate_rules(
            UnionProvider(union_type, unions), UnionRuleDecisionsProvider()
        )
