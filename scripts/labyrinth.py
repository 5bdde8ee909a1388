#!/usr/bin/env python3
"""Exhaustive search on the 3x3 labyrinth.

Builds the complete maximum tree from the start cell and prints the
positions along the optimal path to the goal.

Usage:
    python scripts/labyrinth.py --depth 4 --eps 1e-5
"""

import argparse
import logging

from maxtree import MaxTreeSearch, Node, SearchSettings
from maxtree.env.labyrinth import START, Labyrinth, default_map, walk


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument('--depth', type=int, default=4)
    parser.add_argument('--eps', type=float, default=1e-5,
                        help='Utility discount per step')
    parser.add_argument('--analysis', action='store_true',
                        help='Count tree nodes and report memory estimates')
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    grid = default_map()
    settings = SearchSettings(max_depth=args.depth, eps_depth=args.eps, analysis=args.analysis)
    search = MaxTreeSearch(Labyrinth(), settings)

    root = Node.root(START)
    search.exhaustive_search(root, 0, grid)

    for pos in walk(root):
        print(pos)
    print(f"Best utility: {root.max:.6f}")
    print(f"Actions: {[move.name for move in root.optimal_actions()]}")

    if args.analysis:
        usage = search.memory_usage()
        print(f"Nodes: {usage['nodes']}")
        print(f"KiB: {usage['kib']:.2f}")


if __name__ == "__main__":
    main()
