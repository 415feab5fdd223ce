"""
core/rules.py

The four built-in steering rules.

Each rule reads a frozen view of the flock taken before any agent
moves, so the force on one agent never depends on whether its
neighbors were updated first.

Inspired by:
- Reynolds' boids: cohesion, separation, alignment
- Soft walls instead of hard walls
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence
import numpy as np

from .vectors import zeros


@dataclass(frozen=True)
class FrameAggregates:
    """Flock-wide statistics, computed once per frame from pre-update state."""
    center: np.ndarray        # Mean position
    avg_velocity: np.ndarray  # Mean velocity

    @classmethod
    def from_arrays(cls, positions: np.ndarray, velocities: np.ndarray) -> FrameAggregates:
        center = positions.mean(axis=0)
        avg_velocity = velocities.mean(axis=0)
        center.flags.writeable = False
        avg_velocity.flags.writeable = False
        return cls(center=center, avg_velocity=avg_velocity)


@dataclass(frozen=True)
class FrameSnapshot:
    """
    Read-only copy of every agent's kinematic state at the start of a frame.

    Row i of `positions` and `velocities` belongs to `ids[i]`.
    """
    ids: np.ndarray
    positions: np.ndarray
    velocities: np.ndarray
    aggregates: FrameAggregates

    @classmethod
    def capture(cls, agents: Sequence) -> FrameSnapshot:
        ids = np.array([a.id for a in agents], dtype=np.int64)
        positions = np.array([a.position for a in agents], dtype=np.float64).reshape(-1, 3)
        velocities = np.array([a.velocity for a in agents], dtype=np.float64).reshape(-1, 3)
        aggregates = FrameAggregates.from_arrays(positions, velocities)
        for arr in (ids, positions, velocities):
            arr.flags.writeable = False
        return cls(ids=ids, positions=positions, velocities=velocities, aggregates=aggregates)

    def __len__(self) -> int:
        return len(self.ids)


def cohesion_force(
    position: np.ndarray,
    aggregates: FrameAggregates,
    cohesion: float
) -> np.ndarray:
    """
    Boids fly towards the centre of mass of the flock.

    The agent's own position is included in the centroid.
    """
    return (aggregates.center - position) * cohesion


def separation_force(
    agent_id: int,
    position: np.ndarray,
    snapshot: FrameSnapshot,
    separation: float,
    min_distance: float
) -> np.ndarray:
    """
    Boids keep a small distance away from each other.

    Every other agent closer than `min_distance` contributes its
    displacement, unnormalized, weighted by the distance deficit
    (min_distance - d). `d` is the linear distance. At d = 0 the
    displacement is the zero vector and contributes nothing.
    """
    if len(snapshot) == 0:
        return zeros()

    offsets = position - snapshot.positions
    distances = np.linalg.norm(offsets, axis=1)
    mask = (distances < min_distance) & (snapshot.ids != agent_id)
    if not mask.any():
        return zeros()

    weights = min_distance - distances[mask]
    total = (offsets[mask] * weights[:, np.newaxis]).sum(axis=0)
    return total * separation


def alignment_force(
    velocity: np.ndarray,
    aggregates: FrameAggregates,
    alignment: float
) -> np.ndarray:
    """Boids match velocity with the flock's mean velocity."""
    return (aggregates.avg_velocity - velocity) * alignment


def boundary_force(
    position: np.ndarray,
    bounds_min: np.ndarray,
    bounds_max: np.ndarray,
    push: float = 0.2,
    margin: float = 0.9
) -> np.ndarray:
    """
    Boids want to get away from the boundaries.

    Per axis: a constant push of `push` back inside when the position
    lies below margin * bounds_min or above margin * bounds_max.
    Zero anywhere in between. The push does not grow with depth.
    """
    below = position < bounds_min * margin
    above = (position > bounds_max * margin) & ~below
    force = zeros()
    force[below] = push
    force[above] = -push
    return force
