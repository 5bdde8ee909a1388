"""
Node queries: optimal child, terminal nodes, optimal path and action uniqueness.
"""
import pytest

from maxtree import Node

pytestmark = pytest.mark.unit


def leaf(value, data=None):
    return Node(data, max=value)


def test_root_is_unevaluated_and_empty():
    root = Node.root("start")

    assert root.max is None
    assert not root.evaluated
    assert root.data == "start"
    assert root.children == []
    assert root.terminal()
    assert root.optimal_path() == []


def test_optimal_picks_first_child_reaching_parent_max():
    node = Node("p", max=0.5, children=[
        ("a", leaf(0.2)),
        ("b", leaf(0.5)),
        ("c", leaf(0.9)),
    ])

    # First in enumeration order wins, not the largest.
    assert node.optimal() == 1
    assert not node.terminal()


def test_optimal_tie_break_keeps_insertion_order():
    node = Node("p", max=1.0, children=[
        ("x", leaf(1.0)),
        ("y", leaf(1.0)),
    ])
    assert node.optimal() == 0

    node.children.reverse()
    assert node.children[node.optimal()][0] == "y"


@pytest.mark.parametrize("children, expected", [
    ([], None),
    ([("a", 0.1), ("b", 0.2)], None),
    ([("a", 0.1), ("b", 0.3)], 1),
    ([("a", 0.3), ("b", 0.1)], 0),
])
def test_optimal_none_iff_terminal(children, expected):
    node = Node("p", max=0.3, children=[(a, leaf(v)) for a, v in children])

    assert node.optimal() == expected
    assert node.terminal() == (expected is None)
    assert node.terminal() == (not any(child.max >= node.max for _, child in node.children))


def test_unevaluated_node_has_no_optimal_child():
    node = Node.root("p")
    node.children.append(("a", leaf(1.0)))

    assert node.optimal() is None
    assert node.terminal()


def test_optimal_path_follows_chosen_children():
    deep = Node("d", max=0.9)
    mid = Node("m", max=0.9, children=[("x", leaf(0.1)), ("y", deep)])
    root = Node("r", max=0.9, children=[("a", leaf(0.2)), ("b", mid)])

    assert root.optimal_path() == [1, 1]
    assert root.optimal_actions() == ["b", "y"]
    assert root.optimal_leaf() is deep
    # Recomputed on every call.
    mid.children[0] = ("x", leaf(0.95))
    mid.max = 0.95
    assert root.optimal_path() == [1, 0]


def test_count_and_depth():
    mid = Node("m", max=0.0, children=[("x", leaf(0.0)), ("y", leaf(0.0))])
    root = Node("r", max=0.0, children=[("a", mid), ("b", leaf(0.0))])

    assert root.count() == 4
    assert root.depth() == 2
    assert mid.depth() == 1
    assert leaf(0.0).depth() == 0


def test_child_by_index():
    a = leaf(0.1)
    node = Node("p", max=0.0, children=[("a", a)])

    assert node.child(0) is a
    with pytest.raises(IndexError):
        node.child(1)


def test_check_unique_actions():
    node = Node("p", max=0.0, children=[("a", leaf(0.0)), ("b", leaf(0.0))])
    assert node.check_unique_actions()

    node.children.append(("a", leaf(0.0)))
    assert not node.check_unique_actions()


def test_check_unique_actions_requires_hashable_actions():
    node = Node("p", max=0.0, children=[([1, 2], leaf(0.0))])

    with pytest.raises(TypeError):
        node.check_unique_actions()


def test_repr():
    assert repr(Node.root(3)) == "Node(max=unevaluated, data=3, children=0)"
    assert repr(Node("s", max=0.5)) == "Node(max=0.5, data='s', children=0)"
