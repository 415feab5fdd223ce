"""
Tests for FlockConfig: defaults, dict and YAML round trips, validation.
"""

import pytest

from flocking.core.errors import FlockConfigError
from flocking.core.flock import TUNABLE_PARAMETERS, TUNING_RANGES, Flock, FlockConfig


class TestFlockConfig:

    def test_default_config(self):
        config = FlockConfig()
        assert config.cohesion == 0.3
        assert config.separation == 0.4
        assert config.alignment == 1.0
        assert config.separation_min_distance == 3.0
        assert config.max_speed == 1.0
        assert config.boundary_push == 0.2
        assert config.boundary_margin == 0.9
        assert config.initial_radius == 1.0
        assert config.bound_radius_scale == 100.0
        assert config.initial_velocity == (0.3, 0.1, 0.3)
        assert config.seed is None

    def test_initial_velocity_normalized_to_tuple(self):
        config = FlockConfig(initial_velocity=[1, 0, 0])
        assert config.initial_velocity == (1.0, 0.0, 0.0)

    def test_bad_initial_velocity(self):
        with pytest.raises(FlockConfigError):
            FlockConfig(initial_velocity=(1.0, 0.0))

    def test_dict_round_trip(self):
        config = FlockConfig(cohesion=0.7, seed=3)
        assert FlockConfig.from_dict(config.to_dict()) == config

    def test_from_dict_unknown_key(self):
        with pytest.raises(FlockConfigError):
            FlockConfig.from_dict({"cohesion": 0.5, "gravity": 9.8})

    def test_from_dict_validates(self):
        with pytest.raises(FlockConfigError):
            FlockConfig.from_dict({"max_speed": -2.0})

    def test_bad_seed(self):
        with pytest.raises(FlockConfigError):
            FlockConfig(seed=1.5).validate()

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "flock.yaml"
        path.write_text("cohesion: 0.5\nmax_speed: 2.0\ninitial_velocity: [1.0, 0.0, 0.0]\n")
        config = FlockConfig.from_yaml(path)
        assert config.cohesion == 0.5
        assert config.max_speed == 2.0
        assert config.initial_velocity == (1.0, 0.0, 0.0)

    def test_from_yaml_section(self, tmp_path):
        path = tmp_path / "study.yaml"
        path.write_text("flock:\n  separation: 1.5\n  seed: 4\n")
        config = FlockConfig.from_yaml(path, section="flock")
        assert config.separation == 1.5
        assert config.seed == 4

    def test_from_yaml_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert FlockConfig.from_yaml(path) == FlockConfig()

    def test_from_yaml_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(FlockConfigError):
            FlockConfig.from_yaml(path)


class TestTuningRanges:

    def test_ranges_cover_tunable_weights(self):
        for name in TUNING_RANGES:
            assert name in TUNABLE_PARAMETERS

    def test_range_ends_accepted_by_tune(self):
        flock = Flock(2, config=FlockConfig(seed=0))
        for name, (low, high) in TUNING_RANGES.items():
            flock.tune(**{name: low})
            assert getattr(flock, name) == low
            flock.tune(**{name: high})
            assert getattr(flock, name) == high

    def test_defaults_inside_ranges(self):
        config = FlockConfig()
        for name, (low, high) in TUNING_RANGES.items():
            assert low <= getattr(config, name) <= high
