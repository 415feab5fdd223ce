"""
Tests for flocking/observations/

Metrics and debug geometry.
"""

import numpy as np
import pytest

from flocking.core.flock import Flock, FlockConfig
from flocking.observations.debug import DebugTracker
from flocking.observations.metrics import (
    mean_speed,
    mean_squared_distance_to_centroid,
    min_pairwise_distance,
    polarization,
)


class TestMetrics:

    def test_spread(self):
        positions = np.array([[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0]])
        assert mean_squared_distance_to_centroid(positions) == pytest.approx(1.0)

    def test_spread_empty(self):
        assert mean_squared_distance_to_centroid(np.zeros((0, 3))) == 0.0

    def test_polarization_aligned(self):
        velocities = np.array([[1.0, 0.0, 0.0], [3.0, 0.0, 0.0]])
        assert polarization(velocities) == pytest.approx(1.0)

    def test_polarization_opposed(self):
        velocities = np.array([[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0]])
        assert polarization(velocities) == pytest.approx(0.0)

    def test_polarization_ignores_resting_agents(self):
        velocities = np.array([[0.0, 0.0, 0.0], [0.0, 2.0, 0.0]])
        assert polarization(velocities) == pytest.approx(1.0)
        assert polarization(np.zeros((3, 3))) == 0.0

    def test_mean_speed(self):
        velocities = np.array([[3.0, 4.0, 0.0], [0.0, 0.0, 1.0]])
        assert mean_speed(velocities) == pytest.approx(3.0)

    def test_min_pairwise_distance(self):
        positions = np.array([[0.0, 0.0, 0.0], [5.0, 0.0, 0.0], [5.0, 2.0, 0.0]])
        assert min_pairwise_distance(positions) == pytest.approx(2.0)
        assert min_pairwise_distance(positions[:1]) == float("inf")


class TestDebugTracker:

    def make_flock(self):
        return Flock(4, config=FlockConfig(seed=0))

    def test_hidden_by_default(self):
        flock = self.make_flock()
        tracker = DebugTracker().attach(flock)
        flock.update(0.1)
        assert not tracker.visible
        assert tracker.agents == {}

    def test_show_builds_geometry(self):
        flock = self.make_flock()
        tracker = DebugTracker()
        tracker.show(flock)
        assert set(tracker.agents) == {0, 1, 2, 3}
        np.testing.assert_allclose(tracker.bbox_size, [200.0, 200.0, 200.0])
        np.testing.assert_allclose(tracker.bbox_center, [0.0, 0.0, 0.0])
        agent = flock.get_agent(1)
        np.testing.assert_allclose(tracker.agents[1].arrow_start, agent.position + agent.velocity)

    def test_tracks_forces_after_update(self):
        flock = self.make_flock()
        tracker = DebugTracker(force_scale=20.0).attach(flock)
        tracker.show(flock)
        flock.update(0.1)
        for agent in flock.agents:
            geometry = tracker.agents[agent.id]
            np.testing.assert_allclose(geometry.arrow_start, agent.position + agent.force * 20.0)
            np.testing.assert_allclose(geometry.arrow_end, agent.position)
            assert geometry.influence_radius == flock.separation_min_distance
        np.testing.assert_allclose(tracker.center, flock.center)

    def test_influence_radius_is_repulsion_range(self):
        """The drawn sphere has radius separation_min_distance, not half of it."""
        flock = Flock(2, config=FlockConfig(seed=0, separation_min_distance=4.0))
        tracker = DebugTracker()
        tracker.show(flock)
        assert tracker.agents[0].influence_radius == 4.0

    def test_influence_radius_follows_tuning(self):
        flock = self.make_flock()
        tracker = DebugTracker().attach(flock)
        tracker.show(flock)
        flock.separation_min_distance = 12.0
        flock.update(0.1)
        assert tracker.agents[0].influence_radius == 12.0

    def test_hide_clears(self):
        flock = self.make_flock()
        tracker = DebugTracker().attach(flock)
        tracker.show(flock)
        tracker.hide()
        flock.update(0.1)
        assert tracker.agents == {}
        assert tracker.center is None
