from domlem.vcdomlem._induction import VCDomLEM
from domlem.vcdomlem._model import VCDomLEMModel
from domlem.vcdomlem._params import AllowedObjectsType
from domlem.vcdomlem._params import VCDomLEMParameters
from domlem.vcdomlem._params import to_vcdomlem_parameters

__all__ = [
    "VCDomLEM",
    "VCDomLEMModel",
    "VCDomLEMParameters",
    "AllowedObjectsType",
    "to_vcdomlem_parameters",
]
