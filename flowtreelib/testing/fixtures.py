"""Test fixtures for FlowTreeLib consumers.

These fixtures record what the tree core asks of its event collaborator and
check the structural invariants of a tree, without exposing internal state
as part of the public API.
"""

from typing import Any, Dict, List, Optional, Tuple

from ..events.dispatcher import Event, EventDispatcher, EventScope


class RecordingDispatcher(EventDispatcher):
    """EventDispatcher that records every call the tree core makes.

    Example:
        dispatcher = RecordingDispatcher()
        root = Flow('root', dispatcher=dispatcher)
        x = root.create('x')
        x.reparent(None)

        assert dispatcher.invalidated == [root, root]
        assert dispatcher.announced_names() == [
            'flow.create', 'flow.parent', 'flow.children.parent', ...]
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.announcements: List[Tuple[Any, str, EventScope, Tuple[Any, ...]]] = []
        self.invalidated: List[Any] = []
        self.cleared: List[Any] = []

    def announce(self, flow: Any, event: str, *payload: Any,
                 scope: EventScope = EventScope.SELF) -> Event:
        self.announcements.append((flow, event, scope, payload))
        return super().announce(flow, event, *payload, scope=scope)

    def invalidate(self, flow: Any) -> int:
        self.invalidated.append(flow)
        return super().invalidate(flow)

    def clear_listeners(self, flow: Any) -> int:
        self.cleared.append(flow)
        return super().clear_listeners(flow)

    def announced_names(self, flow: Optional[Any] = None) -> List[str]:
        """Full event names announced so far, optionally only those about flow."""
        return [
            scope.prefix + event
            for origin, event, scope, _ in self.announcements
            if flow is None or origin is flow
        ]

    def reset(self) -> None:
        """Forget everything recorded so far."""
        self.announcements.clear()
        self.invalidated.clear()
        self.cleared.clear()

    def get_summary(self) -> Dict[str, Any]:
        """Returns high-level counts for assertions."""
        return {
            'announcements': len(self.announcements),
            'invalidations': len(self.invalidated),
            'cleared': len(self.cleared),
            'cached_routes': len(self.cache),
        }


def assert_tree_consistent(root: Any) -> None:
    """Assert the structural invariants of the tree under root.

    Checks, for root and every descendant:
    - each child points back at the node listing it;
    - no node is listed by two parents or twice by one parent;
    - the node is not among its own parents;
    - disposed nodes have neither parent nor children.

    Raises:
        AssertionError: Describing the first violation found
    """
    owners: Dict[str, Any] = {}
    nodes = [root] + root.children_all()

    for node in nodes:
        assert all(p is not node for p in node.parents()), f"{node!r} is its own ancestor"

        if node.disposed:
            assert node.parent is None, f"disposed {node!r} still has a parent"
            assert not node.children(), f"disposed {node!r} still has children"

        for child in node.children():
            assert child.parent is node, (
                f"{child!r} is listed by {node!r} but points at {child.parent!r}"
            )
            previous = owners.get(child.guid)
            assert previous is None, (
                f"{child!r} is listed by both {previous!r} and {node!r}"
            )
            owners[child.guid] = node
