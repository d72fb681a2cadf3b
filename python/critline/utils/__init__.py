"""Helper utilities shared by the front ends."""

from .validation import as_matrix, as_vector, normalize_labels, validate_bounds

__all__ = [
    "as_matrix",
    "as_vector",
    "normalize_labels",
    "validate_bounds",
]
