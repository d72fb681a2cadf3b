"""Input validation utilities."""

from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
from scipy import sparse

from ..exceptions import DimensionError, InvalidInputError


def as_vector(
    value: Any,
    name: str,
    length: Optional[int] = None,
) -> np.ndarray:
    """
    Convert to a 1-D float64 array, checking length and NaNs.

    Raises:
        DimensionError: If the array is not 1-D or has the wrong length
        InvalidInputError: If it contains NaN values
    """
    arr = np.array(value, dtype=np.float64)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    if arr.ndim != 1:
        raise DimensionError(f"{name} must be a vector, got shape {arr.shape}")
    if length is not None and len(arr) != length:
        raise DimensionError(f"{name} has {len(arr)} elements, expected {length}")
    if np.any(np.isnan(arr)):
        raise InvalidInputError(f"{name} contains NaN values")
    return arr


def as_matrix(
    value: Any,
    name: str,
    shape: Optional[Tuple[int, int]] = None,
) -> np.ndarray:
    """
    Convert to a 2-D float64 array, checking shape and NaNs.

    A 1-D input is read as a single row; scipy sparse matrices are
    densified.
    """
    if sparse.issparse(value):
        value = value.toarray()
    arr = np.array(value, dtype=np.float64)
    if arr.ndim == 1:
        arr = arr.reshape(1, -1)
    if arr.ndim != 2:
        raise DimensionError(f"{name} must be a matrix, got shape {arr.shape}")
    if shape is not None and arr.shape != shape:
        raise DimensionError(f"{name} must be {shape[0]}x{shape[1]}, got {arr.shape[0]}x{arr.shape[1]}")
    if np.any(np.isnan(arr)):
        raise InvalidInputError(f"{name} contains NaN values")
    return arr


def validate_bounds(lower: np.ndarray, upper: np.ndarray) -> None:
    """Check that no lower bound exceeds its upper bound."""
    bad = np.nonzero(lower > upper)[0]
    if len(bad) > 0:
        raise InvalidInputError(
            f"lower bound exceeds upper bound for asset {int(bad[0])}"
        )


def normalize_labels(labels: Optional[Sequence[str]], length: int) -> List[str]:
    """
    Return exactly ``length`` labels.

    Missing labels are filled with their position; extra labels are dropped.
    """
    if not labels:
        return [str(i) for i in range(length)]
    labels = [str(s) for s in labels[:length]]
    labels.extend(str(i) for i in range(len(labels), length))
    return labels
