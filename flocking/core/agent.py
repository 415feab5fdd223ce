"""
core/agent.py

A boid holds nothing but where it is, where it is going,
and what pushed it last frame.

All behavior lives in the flock. The agent is state.

Inspired by:
- Reynolds' boids (1987)
- Starling murmurations
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import numpy as np

from .vectors import EPS, safe_normalize

# Heading reported for an agent at rest (zero velocity)
DEFAULT_ORIENTATION = np.array([0.0, 0.0, 1.0])


@dataclass
class AgentState:
    """
    What an agent IS at this moment.

    `force` is observational: the net force from the most recent
    update, kept for inspection and overwritten every frame.
    """
    position: np.ndarray          # World-space location
    velocity: np.ndarray          # Units per second
    force: Optional[np.ndarray] = None  # Last net force

    def __post_init__(self):
        self.position = np.array(self.position, dtype=np.float64)
        self.velocity = np.array(self.velocity, dtype=np.float64)
        if self.force is None:
            self.force = np.zeros(3)
        self.force = np.array(self.force, dtype=np.float64)

    def copy(self) -> AgentState:
        return AgentState(
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            force=self.force.copy(),
        )


class Agent:
    """
    A single boid in the flock.

    Identity is fixed at creation. Position and velocity are only
    changed by the flock's integration step.
    """

    def __init__(self, agent_id: int, position: np.ndarray, velocity: np.ndarray):
        self._id = int(agent_id)
        self.state = AgentState(position=position, velocity=velocity)

    @property
    def id(self) -> int:
        return self._id

    @property
    def position(self) -> np.ndarray:
        return self.state.position

    @position.setter
    def position(self, value: np.ndarray) -> None:
        self.state.position = np.array(value, dtype=np.float64)

    @property
    def velocity(self) -> np.ndarray:
        return self.state.velocity

    @velocity.setter
    def velocity(self, value: np.ndarray) -> None:
        self.state.velocity = np.array(value, dtype=np.float64)

    @property
    def force(self) -> np.ndarray:
        return self.state.force

    @force.setter
    def force(self, value: np.ndarray) -> None:
        self.state.force = np.array(value, dtype=np.float64)

    def orientation(self) -> np.ndarray:
        """
        Normalized velocity.

        An agent at rest has no heading of its own; it reports
        DEFAULT_ORIENTATION instead of a NaN vector.
        """
        return safe_normalize(self.state.velocity, DEFAULT_ORIENTATION)

    def speed(self) -> float:
        return float(np.linalg.norm(self.state.velocity))

    def is_at_rest(self) -> bool:
        return self.speed() < EPS

    def distance_to(self, other: Agent) -> float:
        """Euclidean distance to another agent."""
        return float(np.linalg.norm(self.state.position - other.state.position))

    def __repr__(self) -> str:
        p = self.state.position
        return (
            f"Agent(id={self._id}, "
            f"pos=[{p[0]:.2f}, {p[1]:.2f}, {p[2]:.2f}], "
            f"speed={self.speed():.2f})"
        )
