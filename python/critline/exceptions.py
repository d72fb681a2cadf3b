"""
critline Exception Classes
==========================

Custom exceptions for critline error handling.

Shape and content problems are reported before any solving starts.
Solver failures are reported by the orchestrators with one fixed
diagnostic per failure kind.
"""

from typing import Optional


class CritlineError(Exception):
    """Base exception for all critline errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DimensionError(CritlineError):
    """
    Raised when matrix/vector dimensions are incompatible.
    """

    def __init__(self, message: str) -> None:
        super().__init__(f"Dimension mismatch: {message}")


class InvalidInputError(CritlineError):
    """
    Raised when input data is invalid.

    Examples: NaN values, lower bound above upper bound, unknown
    constraint type.
    """

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid input: {message}")


class SolverError(CritlineError):
    """
    Base class for terminal solver outcomes.

    Attributes:
        status: The solver status that produced the error
    """

    default_message = "Solver failed"

    def __init__(self, message: Optional[str] = None, status=None) -> None:
        self.status = status
        super().__init__(message or self.default_message)


class InfeasibleError(SolverError):
    """
    Raised when phase 1 cannot drive every artificial variable to zero.

    No portfolio satisfies all constraints and limits.
    """

    default_message = "Infeasible problem. Check constraints and limits."


class UnboundedError(SolverError):
    """
    Raised when a ratio test finds no variable to leave the basis.

    The expected return can grow without limit, usually because the
    budget constraint is missing.
    """

    default_message = "Unbounded E. Make sure you have a valid budget constraint."


class DegenerateError(SolverError):
    """
    Raised when phase 1 ends with artificial variables stuck at zero
    and degenerate problems are not allowed a second chance.
    """

    default_message = "Degenerate problem."


class NumericalError(CritlineError):
    """
    Raised when a basis update meets a pivot too close to zero.
    """

    def __init__(self, message: str = "Numerical error encountered") -> None:
        super().__init__(message)


class ConvergenceError(CritlineError):
    """
    Raised by iterative root finders that fail to converge.

    The optimizer itself never raises it.
    """

    def __init__(
        self,
        message: str = "Convergence failed",
        iterations: Optional[int] = None,
    ) -> None:
        self.iterations = iterations
        super().__init__(message)
