"""
Error kinds raised by the geometric PSO search.
"""


class PSOSearchError(Exception):
    """Base class for every search failure."""


class InvalidConfiguration(PSOSearchError, ValueError):
    """Configuration (or dataset shape) rejected before any search work."""


class EvaluatorTypeMismatch(PSOSearchError, TypeError):
    """The supplied evaluator cannot score attribute subsets."""


class EvaluationFailure(PSOSearchError, RuntimeError):
    """The evaluator raised while scoring a subset; the run is aborted."""
