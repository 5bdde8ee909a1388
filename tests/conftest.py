import itertools
from typing import Tuple

import pytest

from maxtree import ActionFailed, Domain, MaxTreeSearch, SearchSettings


def path_score(path: Tuple[int, ...]) -> float:
    """Deterministic, irregular utility of an action sequence."""
    total = sum((i + 1) * (a + 1) for i, a in enumerate(path))
    return ((total * 7919) % 101) / 100.0


class PathDomain(Domain):
    """Fixed branching factor; the context is the list of actions taken.

    The payload is the action sequence as a tuple, so every state can be
    checked against the context it is scored in.
    """

    def __init__(self, branching=3, score=path_score, reject=()):
        self.branching = branching
        self.score = score
        self.reject = set(reject)
        self.executed = 0
        self.undone = 0

    def actions(self, path, ctx):
        return list(range(self.branching))

    def execute(self, path, action, ctx):
        new = path + (action,)
        if new in self.reject:
            raise ActionFailed(new)
        ctx.append(action)
        self.executed += 1
        return new

    def undo(self, path, ctx):
        assert tuple(ctx) == path, "undo called against a foreign context"
        ctx.pop()
        self.undone += 1

    def utility(self, path, ctx):
        assert tuple(ctx) == path, "utility scored against a foreign context"
        return self.score(path)


def brute_force_max(domain: PathDomain, height: int, eps: float) -> float:
    """Best discounted utility over all sequences of length <= height."""
    best = domain.score(())
    for length in range(1, height + 1):
        for path in itertools.product(range(domain.branching), repeat=length):
            if any(path[:k] in domain.reject for k in range(1, length + 1)):
                continue
            best = max(best, domain.score(path) - eps * length)
    return best


def check_max_values(search: MaxTreeSearch, node, depth=0):
    """Recompute every node's max from its own utility and its children."""
    own = search.domain.score(node.data) - search.settings.eps_depth * depth
    expected = max([own] + [child.max for _, child in node.children])
    assert node.max == pytest.approx(expected)
    for _, child in node.children:
        check_max_values(search, child, depth + 1)


@pytest.fixture
def domain():
    return PathDomain(branching=3)


@pytest.fixture
def make_search(domain):
    def _make(**settings):
        settings.setdefault('max_depth', 2)
        return MaxTreeSearch(domain, SearchSettings(**settings))
    return _make


@pytest.fixture
def brute_force():
    return brute_force_max


@pytest.fixture
def max_values():
    return check_max_values


@pytest.fixture
def path_domain():
    """Factory for PathDomain with custom branching, score or rejections."""
    return PathDomain
