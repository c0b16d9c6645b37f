"""
Package implementing VC-DomLEM algorithm inducing minimal sets of decision rules
from data with ordered decision classes and preference-ordered attributes.

Rules are induced for unions of decision classes approximated with Variable
Consistency Dominance-based Rough Set Approach. Missing values are handled by
treating them as equal to any other value.
"""
