#!/usr/bin/env python3
"""Greedy search landing a spaceship on the Moon from the Earth.

Runs one greedy search from the launch state, then commits the chosen
accelerations one step at a time against the live scene, printing the
ship state after every step.

Usage:
    python scripts/moon_landing.py --depth 5 --max-mib 10
    python scripts/moon_landing.py --axes xyz --utility full --strategy full --depth 2
"""

import argparse
import logging

from maxtree import MaxTreeSearch, Node, SearchSettings
from maxtree.env.space import Lander, earth_moon


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument('--depth', type=int, default=5)
    parser.add_argument('--eps', type=float, default=0.0)
    parser.add_argument('--max-mib', type=float, default=10.0,
                        help='Soft memory ceiling for the search tree')
    parser.add_argument('--axes', choices=sorted(Lander.AXES), default='x')
    parser.add_argument('--utility', choices=Lander.UTILITIES, default='greedy')
    parser.add_argument('--strategy', choices=MaxTreeSearch.STRATEGIES, default='greedy')
    parser.add_argument('--keep-branches', action='store_true',
                        help='Disable greedy elimination')
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    space = earth_moon()
    lander = Lander(axes=args.axes, utility=args.utility)
    settings = SearchSettings(
        max_depth=args.depth,
        eps_depth=args.eps,
        analysis=True,
        greedy_elimination=not args.keep_branches,
        max_mib=args.max_mib,
    )
    search = MaxTreeSearch(lander, settings)

    root = Node.root(space.spaceship.copy())
    search.search(root, space, strategy=args.strategy)

    node = root
    while True:
        ship = space.spaceship
        print(f"Pos: {ship.pos.tolist()}, Vel: {ship.vel.tolist()} = "
              f"{lander.utility(node.data, space):.4f}")
        i = search.commit_step(node, space)
        if i is None:
            break
        print(f"  Action: {node.children[i][0]}")
        node = node.child(i)

    usage = search.memory_usage()
    print(f"Nodes: {usage['nodes']}")
    print(f"GiB: {usage['gib']}")
    print(f"MiB: {usage['mib']}")
    print(f"KiB: {usage['kib']}")


if __name__ == "__main__":
    main()
