"""
Study: Flock Observation

Run: python -m flocking.studies.observe
     flocking-observe --agents 50 --steps 2000 --config flock.yaml

Three rules. Watch what they make.
"""

from __future__ import annotations
from typing import Dict, List, Optional
import argparse
import logging

import numpy as np

from flocking.core.flock import Flock, FlockConfig
from flocking.observations.metrics import (
    mean_speed,
    mean_squared_distance_to_centroid,
    min_pairwise_distance,
    polarization,
)
from flocking.protocols.steering import SeekTarget

logger = logging.getLogger(__name__)


def run_study(
    n_agents: int = 30,
    steps: int = 1000,
    dt: float = 1.0 / 60.0,
    config: Optional[FlockConfig] = None,
    center: Optional[List[float]] = None,
    target: Optional[List[float]] = None,
    report_every: int = 200,
) -> Dict[str, List[float]]:
    """
    Run a flock headless and record per-frame metrics.

    Returns the metric histories, one value per frame.
    """
    print("=" * 50)
    print(f"Flock Observation (n={n_agents})")
    print("=" * 50)

    flock = Flock(n_agents, center=center, config=config)
    if target is not None:
        flock.add_force(SeekTarget(target))
        print(f"Seeking target at {target}")

    print(f"Running {steps} steps at dt={dt:.4f}...")

    history: Dict[str, List[float]] = {
        "spread": [],
        "polarization": [],
        "mean_speed": [],
        "min_distance": [],
    }

    for step in range(steps):
        flock.update(dt)

        positions = flock.get_positions()
        velocities = flock.get_velocities()
        history["spread"].append(mean_squared_distance_to_centroid(positions))
        history["polarization"].append(polarization(velocities))
        history["mean_speed"].append(mean_speed(velocities))
        history["min_distance"].append(min_pairwise_distance(positions))

        if report_every and step % report_every == 0:
            logger.info(
                f"Step {step}: spread={history['spread'][-1]:.3f}, "
                f"polarization={history['polarization'][-1]:.3f}, "
                f"speed={history['mean_speed'][-1]:.3f}"
            )

    if steps:
        print("\n" + "=" * 50)
        print("Observations")
        print("=" * 50)
        print(f"\nSpread (mean squared distance to centroid):")
        print(f"  Initial: {history['spread'][0]:.3f}")
        print(f"  Final: {history['spread'][-1]:.3f}")
        print(f"\nPolarization: {history['polarization'][-1]:.3f}")
        print(f"Mean speed: {np.mean(history['mean_speed']):.3f} (max {flock.max_speed})")
        print(f"Closest approach: {min(history['min_distance']):.3f}")
        print(f"Final centroid: {np.round(flock.center, 3).tolist()}")

    return history


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Headless flock observation")
    parser.add_argument("--agents", type=int, default=30)
    parser.add_argument("--steps", type=int, default=1000)
    parser.add_argument("--dt", type=float, default=1.0 / 60.0)
    parser.add_argument("--config", type=str, default=None,
                        help="YAML file with flock config (optionally under a 'flock' key)")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--target", type=float, nargs=3, default=None,
                        metavar=("X", "Y", "Z"))
    parser.add_argument("--log-level", type=str, default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.config:
        config = FlockConfig.from_yaml(args.config, section="flock")
    else:
        config = FlockConfig()
    if args.seed is not None:
        config.seed = args.seed

    run_study(
        n_agents=args.agents,
        steps=args.steps,
        dt=args.dt,
        config=config,
        target=args.target,
    )


if __name__ == "__main__":
    main()
