"""
core/flock.py

The flock owns the agents, the coefficients, and the clock.

One frame: look at everyone as they were, decide every push,
then move everyone at once.

Inspired by:
- Reynolds' boids (cohesion, separation, alignment)
- Double-buffered physics steps
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
import logging
import numbers

import numpy as np
import yaml

from .agent import Agent, AgentState
from .errors import FlockConfigError, FlockStateError, InvalidTimeStepError
from .rules import (
    FrameAggregates,
    FrameSnapshot,
    alignment_force,
    boundary_force,
    cohesion_force,
    separation_force,
)
from .vectors import VectorLike, as_vec3, clamp_length, zeros

logger = logging.getLogger(__name__)

ForceCallback = Callable[["Flock", Agent], VectorLike]
FlockObserver = Callable[["Flock"], None]

# Coefficients an external tuning layer may change between frames
TUNABLE_PARAMETERS = (
    "cohesion",
    "separation",
    "alignment",
    "separation_min_distance",
    "max_speed",
)

# Suggested slider ranges for tuning UIs (min, max), both ends accepted by tune()
TUNING_RANGES: Dict[str, Tuple[float, float]] = {
    "cohesion": (0.0, 1.5),
    "separation": (0.0, 4.0),
    "alignment": (0.0, 4.0),
    "separation_min_distance": (0.1, 50.0),
}


@dataclass
class FlockConfig:
    """
    Configuration for a flock.

    Coefficients are starting values; the flock copies them and they
    may be tuned afterwards. Spawn parameters are used once, at
    construction.
    """
    # Rule weights
    cohesion: float = 0.3
    separation: float = 0.4
    alignment: float = 1.0
    separation_min_distance: float = 3.0   # Neighbor repulsion radius
    max_speed: float = 1.0                 # Units per second

    # Soft boundary
    boundary_push: float = 0.2             # Constant push outside the dead zone
    boundary_margin: float = 0.9           # Dead zone as a fraction of the bounds

    # Spawn
    initial_radius: float = 1.0            # Side of the spawn cube around center
    bound_radius_scale: float = 100.0      # Half-size of the bounding box
    initial_velocity: Tuple[float, float, float] = (0.3, 0.1, 0.3)
    velocity_jitter: float = 0.1           # Per-axis jitter, fraction of initial speed (+/- half)
    seed: Optional[int] = None             # Construction randomness only

    def __post_init__(self):
        self.initial_velocity = tuple(
            float(v) for v in _config_vector("initial_velocity", self.initial_velocity)
        )

    def validate(self) -> None:
        """Raise FlockConfigError on the first invalid value."""
        for name in ("cohesion", "separation", "alignment"):
            _check_weight(name, getattr(self, name))
        for name in ("separation_min_distance", "max_speed", "bound_radius_scale"):
            _check_positive(name, getattr(self, name))
        _check_weight("boundary_push", self.boundary_push)
        _check_weight("initial_radius", self.initial_radius)
        _check_weight("velocity_jitter", self.velocity_jitter)
        _check_margin("boundary_margin", self.boundary_margin)
        if self.seed is not None and (
            isinstance(self.seed, bool) or not isinstance(self.seed, numbers.Integral)
        ):
            raise FlockConfigError(f"seed must be an integer or None, got {self.seed!r}")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["initial_velocity"] = list(self.initial_velocity)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FlockConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise FlockConfigError(f"Unknown flock config keys: {sorted(unknown)}")
        config = cls(**data)
        config.validate()
        return config

    @classmethod
    def from_yaml(cls, path: Union[str, Path], section: Optional[str] = None) -> FlockConfig:
        """
        Load a config from a YAML file.

        With `section`, the config is read from that top-level key
        when the file has it, else from the whole file.
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if section is not None and isinstance(data, dict) and section in data:
            data = data[section] or {}
        if not isinstance(data, dict):
            raise FlockConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")
        return cls.from_dict(data)


def _is_real(value: Any) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and bool(np.isfinite(value))
    )


def _check_weight(name: str, value: Any) -> float:
    if not _is_real(value) or value < 0:
        raise FlockConfigError(f"{name} must be a non-negative number, got {value!r}")
    return float(value)


def _check_positive(name: str, value: Any) -> float:
    if not _is_real(value) or value <= 0:
        raise FlockConfigError(f"{name} must be a positive number, got {value!r}")
    return float(value)


def _check_margin(name: str, value: Any) -> float:
    if not _is_real(value) or not 0.0 < value <= 1.0:
        raise FlockConfigError(f"{name} must be in (0, 1], got {value!r}")
    return float(value)


class Flock:
    """
    A population of boids and the rules that move them.

    Features:
    - Fixed population, created once
    - Four built-in rules plus registered external forces
    - Order-independent frames (all forces read pre-frame state)
    - Observers notified after every frame

    Not thread-safe and not re-entrant: one update() at a time.
    """

    def __init__(
        self,
        total: int,
        center: Optional[VectorLike] = None,
        config: Optional[FlockConfig] = None
    ):
        if isinstance(total, bool) or not isinstance(total, numbers.Integral) or total < 0:
            raise FlockConfigError(f"Population must be a non-negative integer, got {total!r}")

        center = self._setup(center, config)
        self.agents: List[Agent] = self._spawn(int(total), center)
        self._log_created()

    def _setup(self, center: Optional[VectorLike], config: Optional[FlockConfig]) -> np.ndarray:
        """Validate config, set bounds and coefficients. Returns the center."""
        self.config = config or FlockConfig()
        self.config.validate()

        center = zeros() if center is None else _config_vector("center", center)
        scale = self.config.bound_radius_scale
        self.bounds_min = center - scale
        self.bounds_max = center + scale

        # Tunable coefficients (validated on assignment)
        self.cohesion = self.config.cohesion
        self.separation = self.config.separation
        self.alignment = self.config.alignment
        self.separation_min_distance = self.config.separation_min_distance
        self.max_speed = self.config.max_speed
        self.boundary_push = self.config.boundary_push
        self.boundary_margin = self.config.boundary_margin

        self.other_forces: List[ForceCallback] = []
        self._observers: List[FlockObserver] = []

        self._aggregates = FrameAggregates(center=center.copy(), avg_velocity=zeros())
        self._updating = False
        self.frame_count = 0
        self.time = 0.0
        return center

    def _log_created(self) -> None:
        logger.info(
            f"Created flock of {len(self.agents)} agents around "
            f"{((self.bounds_min + self.bounds_max) / 2.0).tolist()}, "
            f"bounds +/- {self.config.bound_radius_scale}"
        )

    @classmethod
    def from_states(
        cls,
        positions: VectorLike,
        velocities: VectorLike,
        center: Optional[VectorLike] = None,
        config: Optional[FlockConfig] = None
    ) -> Flock:
        """
        Build a flock with explicit initial state.

        Agents get ids 0..n-1 in row order. Bounds are centered on
        `center` (origin by default), as for a random flock.
        """
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        velocities = np.asarray(velocities, dtype=np.float64).reshape(-1, 3)
        if positions.shape != velocities.shape:
            raise FlockConfigError(
                f"positions {positions.shape} and velocities {velocities.shape} differ in shape"
            )
        if not (np.all(np.isfinite(positions)) and np.all(np.isfinite(velocities))):
            raise FlockConfigError("Initial state contains non-finite values")

        flock = cls.__new__(cls)
        flock._setup(center, config)
        flock.agents = [
            Agent(i, position, velocity)
            for i, (position, velocity) in enumerate(zip(positions, velocities))
        ]
        flock._recompute_aggregates()
        flock._log_created()
        return flock

    def _spawn(self, total: int, center: np.ndarray) -> List[Agent]:
        """Random positions in a cube around center, velocities jittered around the initial one."""
        rng = np.random.default_rng(self.config.seed)
        initial_velocity = np.array(self.config.initial_velocity, dtype=np.float64)
        initial_speed = float(np.linalg.norm(initial_velocity))

        position_jitter = (rng.random((total, 3)) - 0.5) * self.config.initial_radius
        velocity_jitter = (
            (rng.random((total, 3)) - 0.5) * self.config.velocity_jitter * initial_speed
        )

        return [
            Agent(i, center + position_jitter[i], initial_velocity + velocity_jitter[i])
            for i in range(total)
        ]

    # ==================== Tunable Coefficients ====================

    @property
    def cohesion(self) -> float:
        return self._cohesion

    @cohesion.setter
    def cohesion(self, value: float) -> None:
        self._cohesion = _check_weight("cohesion", value)

    @property
    def separation(self) -> float:
        return self._separation

    @separation.setter
    def separation(self, value: float) -> None:
        self._separation = _check_weight("separation", value)

    @property
    def alignment(self) -> float:
        return self._alignment

    @alignment.setter
    def alignment(self, value: float) -> None:
        self._alignment = _check_weight("alignment", value)

    @property
    def separation_min_distance(self) -> float:
        return self._separation_min_distance

    @separation_min_distance.setter
    def separation_min_distance(self, value: float) -> None:
        self._separation_min_distance = _check_positive("separation_min_distance", value)

    @property
    def max_speed(self) -> float:
        return self._max_speed

    @max_speed.setter
    def max_speed(self, value: float) -> None:
        self._max_speed = _check_positive("max_speed", value)

    @property
    def boundary_push(self) -> float:
        return self._boundary_push

    @boundary_push.setter
    def boundary_push(self, value: float) -> None:
        self._boundary_push = _check_weight("boundary_push", value)

    @property
    def boundary_margin(self) -> float:
        return self._boundary_margin

    @boundary_margin.setter
    def boundary_margin(self, value: float) -> None:
        self._boundary_margin = _check_margin("boundary_margin", value)

    def tune(self, **params: float) -> None:
        """
        Change tunable coefficients by name.

        All names and values are checked before any is applied.
        Takes effect on the next update().
        """
        unknown = set(params) - set(TUNABLE_PARAMETERS)
        if unknown:
            logger.warning(f"Rejected tuning of unknown parameters: {sorted(unknown)}")
            raise FlockConfigError(f"Not tunable: {sorted(unknown)}")

        checked = {}
        for name, value in params.items():
            check = _check_positive if name in ("separation_min_distance", "max_speed") else _check_weight
            try:
                checked[name] = check(name, value)
            except FlockConfigError:
                logger.warning(f"Rejected {name}={value!r}")
                raise

        for name, value in checked.items():
            setattr(self, name, value)
        logger.info(f"Tuned {checked}")

    # ==================== Extension Points ====================

    def add_force(self, callback: ForceCallback) -> None:
        """
        Register an external force.

        Called as callback(flock, agent) once per agent per frame,
        after the built-in rules, in registration order. It must not
        modify agents or the flock.
        """
        if self._updating:
            raise FlockStateError("Cannot register forces during update()")
        self.other_forces.append(callback)

    def add_observer(self, observer: FlockObserver) -> None:
        """Register a callable notified with the flock after each frame."""
        self._observers.append(observer)

    # ==================== Frame Update ====================

    @property
    def aggregates(self) -> FrameAggregates:
        return self._aggregates

    @property
    def center(self) -> np.ndarray:
        """Mean position at the start of the last frame."""
        return self._aggregates.center

    @property
    def avg_velocity(self) -> np.ndarray:
        """Mean velocity at the start of the last frame."""
        return self._aggregates.avg_velocity

    def update(self, delta_time: float) -> None:
        """
        Advance the flock by `delta_time` seconds.

        Phase 1: snapshot every agent, compute center and mean velocity,
                 compute every agent's net force.
        Phase 2: store forces, integrate velocity, clamp speed,
                 integrate position.

        delta_time == 0 recomputes aggregates and forces and clamps speed,
        but moves nothing.
        """
        if isinstance(delta_time, bool) or not isinstance(delta_time, numbers.Real):
            raise InvalidTimeStepError(f"delta_time must be a number, got {delta_time!r}")
        dt = float(delta_time)
        if not np.isfinite(dt) or dt < 0:
            raise InvalidTimeStepError(f"delta_time must be finite and >= 0, got {delta_time}")
        if self._updating:
            raise FlockStateError("update() is not re-entrant")

        if not self.agents:
            return

        self._updating = True
        try:
            snapshot = FrameSnapshot.capture(self.agents)
            self._aggregates = snapshot.aggregates

            # Phase 1: Forces
            net_forces = [self._compute_force(agent, snapshot) for agent in self.agents]

            # Phase 2: Integration
            for agent, force in zip(self.agents, net_forces):
                agent.force = force
                self._integrate(agent, force, dt)

            self.frame_count += 1
            self.time += dt
        finally:
            self._updating = False

        logger.debug(
            f"Frame {self.frame_count}: dt={dt:.4f}, "
            f"center={np.round(self.center, 3).tolist()}"
        )

        for observer in self._observers:
            observer(self)

    def _compute_force(self, agent: Agent, snapshot: FrameSnapshot) -> np.ndarray:
        """Net force on one agent from the built-in rules and external forces."""
        position = agent.position
        aggregates = snapshot.aggregates

        force = (
            cohesion_force(position, aggregates, self._cohesion)
            + separation_force(
                agent.id, position, snapshot,
                self._separation, self._separation_min_distance
            )
            + alignment_force(agent.velocity, aggregates, self._alignment)
            + boundary_force(
                position, self.bounds_min, self.bounds_max,
                self._boundary_push, self._boundary_margin
            )
        )

        for callback in self.other_forces:
            force = force + as_vec3(callback(self, agent))

        return force

    def _integrate(self, agent: Agent, force: np.ndarray, dt: float) -> None:
        """
        Unit mass: force is acceleration.

        The speed clamp applies even at dt == 0, where position and
        velocity direction are left as they are.
        """
        velocity = clamp_length(agent.velocity + force * dt, self._max_speed)
        agent.velocity = velocity
        agent.position = agent.position + velocity * dt

    def _recompute_aggregates(self) -> None:
        if self.agents:
            self._aggregates = FrameSnapshot.capture(self.agents).aggregates

    # ==================== Read Access ====================

    def get_agent(self, agent_id: int) -> Optional[Agent]:
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        return None

    def get_state_snapshot(self) -> Dict[int, AgentState]:
        """Copies of every agent's current state, keyed by id."""
        return {agent.id: agent.state.copy() for agent in self.agents}

    def get_positions(self) -> np.ndarray:
        """Positions of all agents as an (n, 3) array."""
        return np.array([a.position for a in self.agents], dtype=np.float64).reshape(-1, 3)

    def get_velocities(self) -> np.ndarray:
        """Velocities of all agents as an (n, 3) array."""
        return np.array([a.velocity for a in self.agents], dtype=np.float64).reshape(-1, 3)

    def get_forces(self) -> np.ndarray:
        """Last net forces of all agents as an (n, 3) array."""
        return np.array([a.force for a in self.agents], dtype=np.float64).reshape(-1, 3)

    def __len__(self) -> int:
        return len(self.agents)

    def __repr__(self) -> str:
        return (
            f"Flock(agents={len(self.agents)}, "
            f"frame={self.frame_count}, "
            f"time={self.time:.2f})"
        )


def _config_vector(name: str, value: VectorLike) -> np.ndarray:
    try:
        return as_vec3(value)
    except ValueError as e:
        raise FlockConfigError(f"{name}: {e}") from e
