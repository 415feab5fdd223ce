"""
Core components of the flocking system.

- agent: The boid - identity and kinematic state
- flock: Population, coefficients, and the per-frame update
- rules: The four built-in steering forces
"""

from .agent import Agent, AgentState
from .errors import FlockError, FlockConfigError, FlockStateError, InvalidTimeStepError
from .flock import Flock, FlockConfig, FrameAggregates

__all__ = [
    "Agent",
    "AgentState",
    "Flock",
    "FlockConfig",
    "FrameAggregates",
    "FlockError",
    "FlockConfigError",
    "FlockStateError",
    "InvalidTimeStepError",
]
