"""Traversal strategies for flow trees.

Traversers walk the live parent/child links of flow nodes. They never
trust the tree to be acyclic: every walk keeps a visited set keyed by node
guid, so a corrupted tree still yields a finite result.

Each traverser snapshots a node's children list at the moment it expands
that node, so listeners that mutate the tree while a caller iterates the
result cannot affect it.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Set

from ..config import Direction


class FlowTraverser(ABC):
    """Abstract base class for flow traversal strategies.

    The starting node itself is never yielded; callers that need it
    prepend it themselves.
    """

    @abstractmethod
    def traverse(self, root: Any) -> Iterator[Any]:
        """Traverse the tree starting from root.

        Args:
            root: Starting node (not yielded)

        Yields:
            Flow nodes in strategy order
        """
        pass

    def collect(self, root: Any) -> List[Any]:
        """Materialize traverse() into a list."""
        return list(self.traverse(root))


class DescendantTraverser(FlowTraverser):
    """Top-down descendant walk.

    Expanding a node emits all of its immediate children, then the
    expansions of those children in order. For a root with children a, b
    where a has w, x and b has y, z the result is [a, b, w, x, y, z].

    A node that was already expanded contributes an empty expansion.
    """

    def traverse(self, root: Any) -> Iterator[Any]:
        visited: Set[str] = set()
        # Nodes still to expand, last one on top
        stack: List[Any] = [root]

        while stack:
            node = stack.pop()

            # Skip if already expanded (handles cycles)
            if node.guid in visited:
                continue
            visited.add(node.guid)

            children = list(node._children)
            yield from children
            stack.extend(reversed(children))


class AncestorTraverser(FlowTraverser):
    """Linear ascent through parent links, nearest parent first.

    Stops at the first node without a parent, or at the first node already
    seen in this walk (the starting node counts as seen).
    """

    def traverse(self, root: Any) -> Iterator[Any]:
        seen: Set[str] = {root.guid}
        node = root._parent

        while node is not None and node.guid not in seen:
            yield node
            seen.add(node.guid)
            node = node._parent


class EmptyTraverser(FlowTraverser):
    """Yields nothing. Used for events that stay on the current node."""

    def traverse(self, root: Any) -> Iterator[Any]:
        return iter(())


# Factory function for creating traversers by event direction
def create_traverser(direction: Direction) -> FlowTraverser:
    """Create the traverser that visits the nodes after the origin for direction.

    Args:
        direction: Event direction

    Returns:
        FlowTraverser instance

    Raises:
        ValueError: If direction is not a Direction member
    """
    strategies = {
        Direction.NONE: EmptyTraverser,
        Direction.CURRENT: EmptyTraverser,
        Direction.DOWNSTREAM: DescendantTraverser,
        Direction.UPSTREAM: AncestorTraverser,
    }

    if direction not in strategies:
        raise ValueError(
            f"Unknown direction: {direction!r}. "
            f"Choose from: {', '.join(d.name for d in Direction)}"
        )

    return strategies[direction]()
