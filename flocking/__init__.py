"""
Flocking: Emergent Group Motion from Three Local Rules

A small simulation core for boids in 3D space: cohesion, separation,
alignment, soft boundary containment, and a hook for custom steering.
"""

__version__ = "0.1.0"

from .core import Agent, AgentState, Flock, FlockConfig, FrameAggregates

__all__ = ["Agent", "AgentState", "Flock", "FlockConfig", "FrameAggregates"]
