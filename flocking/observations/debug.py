"""
observations/debug.py

Debug geometry for a renderer to draw.

Per-agent debug state lives here, keyed by agent id, never on the
agents themselves. The tracker computes what the overlay would show:
force arrows, separation spheres, the centroid, the bounding box.
Drawing it is someone else's job.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional
import logging

import numpy as np

if TYPE_CHECKING:
    from flocking.core.flock import Flock

logger = logging.getLogger(__name__)


@dataclass
class AgentDebugGeometry:
    """What the overlay draws for one agent."""
    arrow_start: np.ndarray    # Tip of the force arrow
    arrow_end: np.ndarray      # Agent position
    influence_center: np.ndarray
    influence_radius: float    # Equals separation_min_distance


class DebugTracker:
    """
    Flock observer producing debug geometry.

    Attach once with `attach(flock)`; toggle with `show` / `hide`.
    While hidden the tracker ignores frames and holds no geometry.
    """

    def __init__(self, force_scale: float = 20.0):
        self.force_scale = force_scale
        self.visible = False
        self.agents: Dict[int, AgentDebugGeometry] = {}
        self.center: Optional[np.ndarray] = None
        self.bbox_center: Optional[np.ndarray] = None
        self.bbox_size: Optional[np.ndarray] = None

    def attach(self, flock: Flock) -> DebugTracker:
        flock.add_observer(self)
        return self

    def show(self, flock: Flock) -> None:
        """
        Start tracking.

        Until the first frame arrives, arrows follow velocity, since no
        force has been computed yet.
        """
        if self.visible:
            return
        self.bbox_size = np.abs(flock.bounds_max - flock.bounds_min)
        self.bbox_center = (flock.bounds_max + flock.bounds_min) / 2.0
        self.center = flock.center.copy()
        self.agents = {
            agent.id: AgentDebugGeometry(
                arrow_start=agent.position + agent.velocity,
                arrow_end=agent.position.copy(),
                influence_center=agent.position.copy(),
                influence_radius=flock.separation_min_distance,
            )
            for agent in flock.agents
        }
        self.visible = True
        logger.debug(f"Debug tracking on for {len(self.agents)} agents")

    def hide(self) -> None:
        self.visible = False
        self.agents = {}
        self.center = None
        self.bbox_center = None
        self.bbox_size = None

    def __call__(self, flock: Flock) -> None:
        if not self.visible:
            return
        self.center = flock.center.copy()
        for agent in flock.agents:
            geometry = self.agents.get(agent.id)
            if geometry is None:
                continue
            geometry.arrow_start = agent.position + agent.force * self.force_scale
            geometry.arrow_end = agent.position.copy()
            geometry.influence_center = agent.position.copy()
            geometry.influence_radius = flock.separation_min_distance
