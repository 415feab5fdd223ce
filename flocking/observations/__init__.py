"""
Observation tools: numbers and geometry derived from flock state.

- metrics: Scalar summaries of a frame
- debug: Per-agent debug geometry, kept outside the agents
"""

from .debug import DebugTracker, AgentDebugGeometry
from .metrics import (
    mean_speed,
    mean_squared_distance_to_centroid,
    min_pairwise_distance,
    polarization,
)

__all__ = [
    "DebugTracker",
    "AgentDebugGeometry",
    "mean_speed",
    "mean_squared_distance_to_centroid",
    "min_pairwise_distance",
    "polarization",
]
