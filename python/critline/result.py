"""
critline Result Classes
=======================

Status codes and the tagged result of the simplex stage.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from .exceptions import DegenerateError, InfeasibleError, UnboundedError


class Status(Enum):
    """
    Simplex outcome codes.

    Attributes:
        OK: A feasible vertex maximizing expected return was found
        INFEASIBLE: An artificial variable could not be driven to zero
        DEGENERATE: Artificial variables are stuck in the basis at zero
        UNBOUNDED: Expected return can grow without limit
    """
    OK = "ok"
    INFEASIBLE = "infeasible"
    DEGENERATE = "degenerate"
    UNBOUNDED = "unbounded"

    def __str__(self) -> str:
        return self.value

    @property
    def is_successful(self) -> bool:
        """True if solving may continue."""
        return self == Status.OK


_ERRORS = {
    Status.INFEASIBLE: InfeasibleError,
    Status.DEGENERATE: DegenerateError,
    Status.UNBOUNDED: UnboundedError,
}


@dataclass(frozen=True)
class SolveResult:
    """
    Result of running the simplex stage.

    Attributes:
        status: Outcome of the run
        iterations: Number of pivots performed over both phases
        degenerate_retry: True when artificial columns were kept as
            ordinary variables to get past a degenerate phase 1
    """

    status: Status
    iterations: int = 0
    degenerate_retry: bool = False

    @property
    def is_successful(self) -> bool:
        return self.status.is_successful

    def raise_for_status(self) -> None:
        """Raise the exception matching a failed status."""
        if not self.status.is_successful:
            raise _ERRORS[self.status](status=self.status)

    def __repr__(self) -> str:
        return (
            f"SolveResult(status={self.status}, "
            f"iterations={self.iterations}, "
            f"degenerate_retry={self.degenerate_retry})"
        )


@dataclass(frozen=True)
class LPResult:
    """
    Solution of a linear program solved by the simplex stage alone.

    Attributes:
        weights: Optimal variable values
        value: Objective value at ``weights``
        iterations: Number of pivots performed
        degenerate_retry: True when phase 1 needed a second chance
    """

    weights: np.ndarray
    value: float
    iterations: int = 0
    degenerate_retry: bool = False

    def __repr__(self) -> str:
        return f"LPResult(value={self.value:.6g}, iterations={self.iterations})"
