"""Tests for the high-level functional API and upstream routes."""

import re
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flowtreelib import (
    Direction,
    EventDispatcher,
    Flow,
    FlowDefaults,
    count_nodes,
    create_root,
    default_dispatcher,
    find_nodes,
    get_tree_paths,
    get_tree_stats,
    traverse_flow,
    upstream,
)


@pytest.fixture
def tree():
    n = create_root('n')
    a = n.create('a')
    b = n.create('b')
    a.create('w')
    a.create('x')
    b.create('y')
    b.create('z')
    return n


def test_create_root_uses_fresh_dispatcher():
    root = create_root('root', 1)

    assert root.name == 'root'
    assert root.data == 1
    assert root.parent is None
    assert isinstance(root.dispatcher, EventDispatcher)
    assert root.dispatcher is not default_dispatcher()
    assert create_root().dispatcher is not root.dispatcher


def test_create_root_applies_behaviours_to_root():
    """Behaviours run on the root too, not only on created children."""
    tagged = []
    defaults = FlowDefaults(behaviours=[lambda flow, d: tagged.append(flow.name)])

    root = create_root('root', defaults=defaults)
    root.create('child')

    assert tagged == ['root', 'child']
    assert defaults.behaviours is not root.defaults.behaviours


def test_create_root_accepts_dispatcher():
    dispatcher = EventDispatcher()
    root = create_root('root', defaults=FlowDefaults.upstream(), dispatcher=dispatcher)

    assert root.dispatcher is dispatcher
    assert root.defaults.direction is Direction.UPSTREAM


def test_traverse_flow(tree):
    assert [f.name for f in traverse_flow(tree)] == ['n', 'a', 'b', 'w', 'x', 'y', 'z']
    assert [f.name for f in traverse_flow(tree, include_root=False)] == [
        'a', 'b', 'w', 'x', 'y', 'z',
    ]


def test_traverse_flow_allows_mutation(tree):
    """Disposing nodes while iterating does not change what is visited."""
    visited = []
    for node in traverse_flow(tree, include_root=False):
        visited.append(node.name)
        if node.name == 'a':
            node.dispose()

    assert visited == ['a', 'b', 'w', 'x', 'y', 'z']
    assert [f.name for f in tree.children()] == ['b']


def test_find_nodes(tree):
    found = find_nodes(tree, re.compile(r'^[wxyz]$'))
    assert [f.name for f in found] == ['w', 'x', 'y', 'z']
    assert find_nodes(tree, 'missing') == []


def test_count_nodes(tree):
    assert count_nodes(tree) == 7
    assert count_nodes(tree, include_root=False) == 6
    assert count_nodes(tree.find('a')) == 3


def test_get_tree_paths(tree):
    assert get_tree_paths(tree) == [
        ('n', 'a'), ('n', 'b'),
        ('n', 'a', 'w'), ('n', 'a', 'x'),
        ('n', 'b', 'y'), ('n', 'b', 'z'),
    ]


def test_get_tree_paths_of_subtree(tree):
    """Paths start at the node passed in, not the real root."""
    assert get_tree_paths(tree.find('a')) == [('a', 'w'), ('a', 'x')]


def test_get_tree_stats(tree):
    tree.on('ping', lambda event: None)
    tree.find('z').on('ping', lambda event: None)

    stats = get_tree_stats(tree)

    assert stats == {
        'total_nodes': 7,
        'leaf_nodes': 4,
        'max_depth': 2,
        'listeners': 2,
    }


def test_get_tree_stats_depth_is_relative(tree):
    stats = get_tree_stats(tree.find('a'))

    assert stats['total_nodes'] == 3
    assert stats['max_depth'] == 1


class TestUpstream:
    """Upstream routes: each ancestor and its path down to the node."""

    def test_routes_nearest_first(self):
        a = Flow('a', dispatcher=EventDispatcher())
        b = a.create('b')
        c = b.create('c')

        routes = c.upstream()

        assert [r.flow for r in routes] == [c, b, a]
        assert [r.route for r in routes] == [[c], [b, c], [a, b, c]]

    def test_root_has_single_route(self):
        a = Flow('a', dispatcher=EventDispatcher())
        routes = upstream(a)

        assert len(routes) == 1
        assert routes[0].flow is a
        assert routes[0].route == [a]

    def test_routes_follow_reparenting(self):
        a = Flow('a', dispatcher=EventDispatcher())
        b = a.create('b')
        c = a.create('c')

        c.reparent(b)

        assert [r.flow.name for r in c.upstream()] == ['c', 'b', 'a']
