"""
core/vectors.py

Small 3D vector helpers on top of numpy.

Degenerate vectors are the one place a flock can go wrong quietly.
Every normalization here is guarded.
"""

from __future__ import annotations
from typing import Sequence, Union
import numpy as np

EPS = 1e-12

VectorLike = Union[np.ndarray, Sequence[float]]


def as_vec3(value: VectorLike) -> np.ndarray:
    """Coerce a length-3 sequence to a fresh float64 array."""
    vec = np.array(value, dtype=np.float64).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"Expected a 3D vector, got shape {np.shape(value)}")
    if not np.all(np.isfinite(vec)):
        raise ValueError(f"Vector has non-finite components: {vec}")
    return vec


def zeros() -> np.ndarray:
    return np.zeros(3, dtype=np.float64)


def safe_normalize(vec: np.ndarray, fallback: np.ndarray) -> np.ndarray:
    """
    Unit vector in the direction of `vec`.

    Returns a copy of `fallback` when `vec` is (numerically) zero,
    so callers never see NaN.
    """
    length = float(np.linalg.norm(vec))
    if length < EPS:
        return np.array(fallback, dtype=np.float64)
    return vec / length


def clamp_length(vec: np.ndarray, max_length: float) -> np.ndarray:
    """
    Limit the magnitude of `vec` to `max_length`.

    Compares squared lengths. The zero vector never exceeds a positive
    limit, so it is returned untouched.
    """
    length_sq = float(np.dot(vec, vec))
    if length_sq > max_length * max_length:
        return vec / np.sqrt(length_sq) * max_length
    return vec
