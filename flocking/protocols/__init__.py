"""
Protocols for extending the flock without modifying it.

- steering: External forces plugged in via Flock.add_force
"""

from .steering import AvoidSphere, ConstantForce, SeekTarget, SteeringBehavior

__all__ = ["SteeringBehavior", "SeekTarget", "AvoidSphere", "ConstantForce"]
