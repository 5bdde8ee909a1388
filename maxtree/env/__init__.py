"""Example domains for the maximum tree drivers.

  - Labyrinth: grid navigation, solved with exhaustive search
  - Lander: spaceship flying to the Moon surface, solved with greedy search
"""

from .labyrinth import Labyrinth, Move, START, default_map, walk
from .space import (
    EARTH, MOON, Lander, Planet, Space, Spaceship,
    absoid, accelerations_x, accelerations_xyz, earth_moon,
)
