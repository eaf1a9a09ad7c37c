"""High-level API for FlowTreeLib.

This module provides simple, functional interfaces for common operations
on whole flow trees. They wrap the Flow methods for ease of use in simple
cases.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from .config import FlowDefaults
from .core.node import Flow
from .events.dispatcher import EventDispatcher
from .factory import construct


def create_root(
    name: Any = None,
    data: Any = None,
    *,
    defaults: Optional[FlowDefaults] = None,
    dispatcher: Optional[EventDispatcher] = None,
) -> Flow:
    """Create a standalone root node.

    Unlike ``Flow(name)``, the root is built through the factory, so the
    behaviours listed in defaults are applied to it as well as to every
    node created below it.

    Args:
        name: Root name
        data: Root payload
        defaults: Construction record (FlowDefaults() if None)
        dispatcher: EventDispatcher for the new tree (a fresh one if None)

    Returns:
        The new root

    Example:
        >>> root = create_root('app', defaults=FlowDefaults.upstream())
        >>> root.create('child').defaults.direction
        <Direction.UPSTREAM: 'upstream'>
    """
    defaults = defaults.copy() if defaults is not None else FlowDefaults()
    if dispatcher is None:
        dispatcher = EventDispatcher()
    return construct(defaults, name, data, dispatcher=dispatcher)


def traverse_flow(root: Flow, include_root: bool = True) -> Iterator[Flow]:
    """Iterate over root (optionally) and then all of its descendants.

    The descendant list is computed before the first node is yielded, so
    the caller may mutate the tree while iterating.

    Example:
        >>> for node in traverse_flow(root):
        ...     print(node.name)
    """
    nodes = root.children_all()
    if include_root:
        yield root
    yield from nodes


def find_nodes(root: Flow, matcher: Any) -> List[Flow]:
    """Find all descendants of root matching matcher, in traversal order.

    Example:
        >>> find_nodes(root, re.compile(r'^item-'))
    """
    return root.find_all(matcher, recursive=True)


def count_nodes(root: Flow, include_root: bool = True) -> int:
    """Count the nodes of the tree under root.

    Example:
        >>> count = count_nodes(root)
        >>> print(f"Found {count} nodes")
    """
    return sum(1 for _ in traverse_flow(root, include_root=include_root))


def get_tree_paths(root: Flow) -> List[Tuple[Any, ...]]:
    """Return the name path from root to every descendant.

    Paths follow traversal order and start with root's own name.

    Example:
        >>> for path in get_tree_paths(root):
        ...     print(" -> ".join(map(str, path)))
    """
    paths = []
    for node in root.children_all():
        chain = [node]
        for parent in node.parents():
            chain.append(parent)
            if parent is root:
                break
        paths.append(tuple(n.name for n in reversed(chain)))
    return paths


def get_tree_stats(root: Flow) -> Dict[str, Any]:
    """Get statistics about the tree under root.

    Returns:
        Dictionary with keys total_nodes, leaf_nodes, max_depth (root = 0)
        and listeners (registrations across all nodes)

    Example:
        >>> stats = get_tree_stats(root)
        >>> print(f"Total nodes: {stats['total_nodes']}")
    """
    stats = {
        'total_nodes': 0,
        'leaf_nodes': 0,
        'max_depth': 0,
        'listeners': 0,
    }
    # Depth is measured by how far a node is below root, not the real root
    depths = {root.guid: 0}

    for node in traverse_flow(root):
        stats['total_nodes'] += 1
        if not node.children():
            stats['leaf_nodes'] += 1
        stats['listeners'] += node.dispatcher.listener_count(node)

        if node is not root:
            depth = depths[node.parent.guid] + 1
            depths[node.guid] = depth
            stats['max_depth'] = max(stats['max_depth'], depth)

    return stats
