"""
observations/metrics.py

How tight, how fast, how aligned.

All functions take plain (n, 3) arrays so they work on live flock
state or on recorded trajectories alike.
"""

from __future__ import annotations
import numpy as np

from flocking.core.vectors import EPS


def mean_squared_distance_to_centroid(positions: np.ndarray) -> float:
    """Spread of the flock. 0.0 for an empty flock."""
    if len(positions) == 0:
        return 0.0
    centroid = positions.mean(axis=0)
    return float(((positions - centroid) ** 2).sum(axis=1).mean())


def polarization(velocities: np.ndarray) -> float:
    """
    Magnitude of the mean unit heading, in [0, 1].

    1.0 when every agent flies the same way. Agents at rest are
    left out; 0.0 if none are moving.
    """
    if len(velocities) == 0:
        return 0.0
    speeds = np.linalg.norm(velocities, axis=1)
    moving = speeds > EPS
    if not moving.any():
        return 0.0
    headings = velocities[moving] / speeds[moving, np.newaxis]
    return float(np.linalg.norm(headings.mean(axis=0)))


def mean_speed(velocities: np.ndarray) -> float:
    if len(velocities) == 0:
        return 0.0
    return float(np.linalg.norm(velocities, axis=1).mean())


def min_pairwise_distance(positions: np.ndarray) -> float:
    """Closest approach between any two agents. inf with fewer than two."""
    n = len(positions)
    if n < 2:
        return float("inf")
    diffs = positions[:, np.newaxis, :] - positions[np.newaxis, :, :]
    distances = np.linalg.norm(diffs, axis=2)
    distances[np.diag_indices(n)] = np.inf
    return float(distances.min())
