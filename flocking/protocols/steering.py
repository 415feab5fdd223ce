"""
protocols/steering.py

Forces from outside the flock.

The three rules make a flock. Everything else - a lure, a rock,
the wind - arrives through the same narrow door: a callable
taking (flock, agent) and returning a force.

Inspired by:
- Reynolds' steering behaviors (seek, obstacle avoidance)
- Plug-in forces in particle systems
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
import numpy as np

from flocking.core.vectors import EPS, VectorLike, as_vec3, zeros

if TYPE_CHECKING:
    from flocking.core.agent import Agent
    from flocking.core.flock import Flock


class SteeringBehavior(ABC):
    """
    An external force usable with Flock.add_force.

    Implementations read flock and agent state only. They never
    write to either.
    """

    @abstractmethod
    def __call__(self, flock: Flock, agent: Agent) -> np.ndarray:
        """Force on `agent` this frame."""
        pass


class SeekTarget(SteeringBehavior):
    """
    Constant-strength pull toward a point.

    Agents within `arrival_radius` of the target feel nothing,
    which keeps them from jittering around it.
    """

    def __init__(self, target: VectorLike, strength: float = 0.5, arrival_radius: float = 0.0):
        self.target = as_vec3(target)
        self.strength = strength
        self.arrival_radius = arrival_radius

    def __call__(self, flock: Flock, agent: Agent) -> np.ndarray:
        offset = self.target - agent.position
        distance = float(np.linalg.norm(offset))
        if distance < EPS or distance <= self.arrival_radius:
            return zeros()
        return offset / distance * self.strength


class AvoidSphere(SteeringBehavior):
    """
    Repulsion from a spherical obstacle.

    Inside `radius + margin` of the center, agents are pushed
    straight out, harder the deeper they are. An agent exactly at
    the center is pushed along its own heading.
    """

    def __init__(
        self,
        center: VectorLike,
        radius: float,
        margin: float = 2.0,
        strength: float = 1.0
    ):
        self.center = as_vec3(center)
        self.radius = radius
        self.margin = margin
        self.strength = strength

    def __call__(self, flock: Flock, agent: Agent) -> np.ndarray:
        influence = self.radius + self.margin
        offset = agent.position - self.center
        distance = float(np.linalg.norm(offset))
        if distance >= influence:
            return zeros()

        if distance < EPS:
            direction = agent.orientation()
        else:
            direction = offset / distance
        depth = (influence - distance) / influence
        return direction * depth * self.strength


class ConstantForce(SteeringBehavior):
    """The same force on every agent: wind, gravity, current."""

    def __init__(self, force: VectorLike):
        self.force = as_vec3(force)

    def __call__(self, flock: Flock, agent: Agent) -> np.ndarray:
        return self.force.copy()
