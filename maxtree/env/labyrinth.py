"""Grid labyrinth domain.

The context is a 2-D map of cell utilities indexed ``map[y, x]``. The
node payload is the agent position ``(x, y)``. Moves that would leave
the grid are rejected. The map itself is never modified, so undo has
nothing to restore.

Usage:
    grid = default_map()
    search = MaxTreeSearch(Labyrinth(), SearchSettings(max_depth=4, eps_depth=1e-5))
    root = Node.root(START)
    search.exhaustive_search(root, 0, grid)
    positions = walk(root)
"""

from enum import Enum
from typing import List, Tuple

import numpy as np

from ..search.driver import ActionFailed, Domain
from ..search.node import Node

Pos = Tuple[int, int]

START: Pos = (0, 2)


class Move(Enum):
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, -1)
    DOWN = (0, 1)


def default_map() -> np.ndarray:
    """3x3 map with a single goal cell at (2, 0)."""
    return np.array([
        [0, 0, 1],
        [0, 0, 0],
        [0, 0, 0],
    ], dtype=np.uint8)


class Labyrinth(Domain):
    """Four-way movement on a bounded grid."""

    def actions(self, pos: Pos, grid: np.ndarray) -> List[Move]:
        return [Move.LEFT, Move.RIGHT, Move.UP, Move.DOWN]

    def execute(self, pos: Pos, move: Move, grid: np.ndarray) -> Pos:
        dx, dy = move.value
        x, y = pos[0] + dx, pos[1] + dy
        height, width = grid.shape
        if not (0 <= x < width and 0 <= y < height):
            raise ActionFailed(f"{move.name} from {pos} leaves the grid")
        return (x, y)

    def undo(self, pos: Pos, grid: np.ndarray) -> None:
        pass

    def utility(self, pos: Pos, grid: np.ndarray) -> float:
        return float(grid[pos[1], pos[0]])


def walk(root: Node) -> List[Pos]:
    """Positions visited along the optimal path, starting at the root."""
    positions = [root.data]
    node = root
    for i in root.optimal_path():
        node = node.child(i)
        positions.append(node.data)
    return positions
