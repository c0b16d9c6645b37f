"""Exceptions raised while configuring and running rule induction."""


class InvalidConfigurationError(ValueError):
    """Raised when induction components are configured in an inconsistent way.
    It is always raised before any induction work starts.
    """


class RuleInductionError(RuntimeError):
    """Raised when rule induction for some approximated set cannot be completed."""


class ElementaryConditionNotFoundError(RuleInductionError):
    """Raised when condition generator has no more candidate conditions to offer
    while the stopping condition is still not satisfied.
    """


class UnknownValueError(ValueError):
    """Raised when requested rule characteristic was not calculated."""
