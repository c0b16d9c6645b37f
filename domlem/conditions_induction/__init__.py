from domlem.conditions_induction._base import AbstractConditionGenerator
from domlem.conditions_induction.m4 import M4OptimizedConditionGenerator
from domlem.conditions_induction.standard import StandardConditionGenerator

__all__ = [
    "AbstractConditionGenerator",
    "M4OptimizedConditionGenerator",
    "StandardConditionGenerator",
]
