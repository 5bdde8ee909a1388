"""Spaceship domain: fly from the Earth to the Moon surface and stop there.

Simplified model: no gravity, no torque physics, no fuel. The agent picks
an acceleration each time step and the ship is integrated with a
symmetric half-step velocity update.

Context is a ``Space`` (planets + the live spaceship). The node payload
is the spaceship as it was *before* the transition, which is exactly
what undo needs to put back.

Two utilities are provided:
  'full'   -- closeness to the Moon surface plus negative speed
  'greedy' -- closeness plus speed penalty faded in near the surface
              (absoid weighting), which keeps the greedy branch convex
"""

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from ..search.driver import Domain

EARTH = 0
MOON = 1

Acceleration = Tuple[float, float, float]

# Acceleration magnitudes offered per axis.
MAGNITUDES = (0.1, 0.2, 0.3, 0.5, 0.6, 1.0, 1.2, 1.3)


def _vec(values=(0.0, 0.0, 0.0)) -> np.ndarray:
    return np.array(values, dtype=np.float64)


@dataclass
class Planet:
    name: str
    pos: np.ndarray
    mass: float
    radius: float

    def distance(self, pos: np.ndarray) -> float:
        """Distance from ``pos`` to the surface. Negative below the surface."""
        return float(np.linalg.norm(self.pos - pos)) - self.radius


@dataclass
class Spaceship:
    pos: np.ndarray = field(default_factory=_vec)
    vel: np.ndarray = field(default_factory=_vec)
    acc: np.ndarray = field(default_factory=_vec)
    torq: np.ndarray = field(default_factory=_vec)
    mass: float = 1.0

    def update(self, dt: float):
        """Advance one time step with constant acceleration."""
        self.vel = self.vel + self.acc * (0.5 * dt)
        self.pos = self.pos + self.vel * dt
        self.vel = self.vel + self.acc * (0.5 * dt)

    def speed(self) -> float:
        return float(np.linalg.norm(self.vel))

    def copy(self) -> 'Spaceship':
        return Spaceship(
            pos=self.pos.copy(),
            vel=self.vel.copy(),
            acc=self.acc.copy(),
            torq=self.torq.copy(),
            mass=self.mass,
        )


@dataclass
class Space:
    dt: float
    planets: List[Planet]
    spaceship: Spaceship

    def utility_get_close_to_surface(self, planet: int) -> float:
        return -abs(self.planets[planet].distance(self.spaceship.pos))

    def utility_full_stop(self) -> float:
        return -self.spaceship.speed()


def earth_moon(dt: float = 1.0) -> Space:
    """Earth at the origin, Moon three units along x, ship at rest at the origin."""
    return Space(
        dt=dt,
        planets=[
            Planet(name="Earth", pos=_vec(), mass=1.0, radius=1.0),
            Planet(name="Moon", pos=_vec((3.0, 0.0, 0.0)), mass=1.0, radius=1.0),
        ],
        spaceship=Spaceship(),
    )


def absoid(z: float, n: float, x: float) -> float:
    """Smooth step from 1 (x near 0) towards 0 (x much larger than z)."""
    return 1.0 / ((x / z) ** n + 1.0)


def accelerations_x() -> List[Acceleration]:
    """Accelerations along the x axis only, both directions."""
    actions = []
    for v in MAGNITUDES:
        actions.append((v, 0.0, 0.0))
        actions.append((-v, 0.0, 0.0))
    return actions


def accelerations_xyz() -> List[Acceleration]:
    """Accelerations along each of the three axes, both directions."""
    actions = []
    for v in MAGNITUDES:
        actions.append((v, 0.0, 0.0))
        actions.append((-v, 0.0, 0.0))
        actions.append((0.0, v, 0.0))
        actions.append((0.0, -v, 0.0))
        actions.append((0.0, 0.0, v))
        actions.append((0.0, 0.0, -v))
    return actions


class Lander(Domain):
    """Moon landing as a maximum tree domain.

    Args:
        axes: 'x' for one-dimensional control, 'xyz' for all three axes.
        utility: 'full' or 'greedy', see the module docstring.
        target: Index of the planet to land on.
    """

    AXES = {'x': accelerations_x, 'xyz': accelerations_xyz}
    UTILITIES = ('full', 'greedy')

    def __init__(self, axes: str = 'x', utility: str = 'greedy', target: int = MOON):
        if axes not in self.AXES:
            raise ValueError(f"Unknown axes: {axes}. Available: {list(self.AXES)}")
        if utility not in self.UTILITIES:
            raise ValueError(f"Unknown utility: {utility}. Available: {list(self.UTILITIES)}")
        self.axes = axes
        self.mode = utility
        self.target = target
        self._actions = self.AXES[axes]()

    def actions(self, ship: Spaceship, space: Space) -> List[Acceleration]:
        return list(self._actions)

    def execute(self, ship: Spaceship, acc: Acceleration, space: Space) -> Spaceship:
        old = space.spaceship.copy()
        space.spaceship.acc = _vec(acc)
        space.spaceship.update(space.dt)
        return old

    def undo(self, old: Spaceship, space: Space) -> None:
        space.spaceship = old.copy()

    def utility(self, ship: Spaceship, space: Space) -> float:
        closeness = space.utility_get_close_to_surface(self.target)
        if self.mode == 'full':
            return closeness + space.utility_full_stop()
        dist = abs(space.planets[self.target].distance(space.spaceship.pos))
        return closeness + absoid(0.2, 1.0, dist) * space.utility_full_stop()
