"""Event dispatch for flow trees.

The EventDispatcher is the collaborator the tree core talks to whenever
its structure changes:

- announce() delivers the core's internal events (reparenting, creation,
  disposal) to one scope of nodes per call;
- invalidate() is told about every attach and detach so cached listener
  routes never outlive the topology they were computed from;
- clear_listeners() is called once when a node is disposed.

It also implements the user-facing listener API (on/off/emit) that Flow
exposes as convenience methods.

Dispatch is synchronous: every listener runs inline, in route order, before
emit() or announce() returns.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import Direction
from ..core.traverser import AncestorTraverser, DescendantTraverser, create_traverser
from .cache import ListenerCache, Route
from .policies import FailFastPolicy, ListenerErrorPolicy

logger = logging.getLogger(__name__)


class EventScope(Enum):
    """Which nodes hear about a structural change of one node.

    The value is the prefix the event name receives for that scope:
    ancestors hear about a change among their children, descendants hear
    about a change of one of their parents.
    """
    SELF = "flow."
    ANCESTORS = "flow.children."
    DESCENDANTS = "flow.parent."

    @property
    def prefix(self) -> str:
        return self.value


@dataclass
class Event:
    """An event travelling along a listener route."""
    name: str
    source: Any
    direction: Optional[Direction] = None
    data: Tuple[Any, ...] = ()
    target: Any = None
    stopped: bool = field(default=False)

    def stop_propagation(self) -> None:
        """Stop the event after the current node's listeners have run."""
        self.stopped = True


class EventDispatcher:
    """Listener registry, route resolution and dispatch for flow trees.

    Listeners are stored per node guid, so nodes of several trees may
    share one dispatcher.

    Args:
        error_policy: How listener exceptions are handled (default: fail fast)
        cache: Listener route cache (a fresh one by default)
    """

    def __init__(self,
                 error_policy: Optional[ListenerErrorPolicy] = None,
                 cache: Optional[ListenerCache] = None):
        self._listeners: Dict[str, Dict[str, List[Callable[..., Any]]]] = {}
        self._policy = error_policy or FailFastPolicy()
        self.cache = cache if cache is not None else ListenerCache()

    # ------------------------------------------------------------------
    # Listener registry
    # ------------------------------------------------------------------

    def on(self, flow: Any, event: str, listener: Callable[..., Any]) -> None:
        """Register listener for event on flow.

        Raises:
            TypeError: If listener is not callable
        """
        if not callable(listener):
            raise TypeError(f"listener must be callable, got {listener!r}")
        self._listeners.setdefault(flow.guid, {}).setdefault(event, []).append(listener)
        self.cache.discard(flow)

    def off(self, flow: Any, event: Optional[str] = None,
            listener: Optional[Callable[..., Any]] = None) -> int:
        """Remove listeners from flow.

        - off(flow): every listener on flow
        - off(flow, event): every listener for event
        - off(flow, event, listener): one registration of listener

        Returns:
            Number of registrations removed
        """
        registry = self._listeners.get(flow.guid)
        if not registry:
            return 0

        if event is None:
            removed = sum(len(listeners) for listeners in registry.values())
            del self._listeners[flow.guid]
        elif listener is None:
            removed = len(registry.pop(event, []))
        else:
            listeners = registry.get(event, [])
            removed = 0
            if listener in listeners:
                listeners.remove(listener)
                removed = 1
            if not listeners:
                registry.pop(event, None)

        if flow.guid in self._listeners and not self._listeners[flow.guid]:
            del self._listeners[flow.guid]
        if removed:
            self.cache.discard(flow)
        return removed

    def clear_listeners(self, flow: Any) -> int:
        """Remove every listener registered on flow and forget its routes.

        Called once when flow is disposed, so routes that start at flow are
        dropped even when it never had listeners.
        """
        removed = self.off(flow)
        self.cache.discard(flow)
        return removed

    def listeners(self, flow: Any, event: Optional[str] = None):
        """Return a copy of flow's listeners.

        Returns:
            List of listeners for event, or a dict of event -> listeners
            when event is None
        """
        registry = self._listeners.get(flow.guid, {})
        if event is not None:
            return list(registry.get(event, []))
        return {name: list(listeners) for name, listeners in registry.items()}

    def listener_count(self, flow: Any) -> int:
        """Number of registrations on flow across all events."""
        return sum(len(listeners) for listeners in self._listeners.get(flow.guid, {}).values())

    # ------------------------------------------------------------------
    # Cache invalidation
    # ------------------------------------------------------------------

    def invalidate(self, flow: Any) -> int:
        """Forget cached routes affected by flow gaining or losing a child."""
        return self.cache.invalidate(flow)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def emit(self, flow: Any, event: str, *data: Any,
             direction: Optional[Direction] = None) -> Event:
        """Emit event from flow.

        Args:
            flow: Emitting node
            event: Event name
            *data: Arguments passed to every listener after the Event
            direction: Route shape, defaults to flow.defaults.direction

        Returns:
            The dispatched Event
        """
        if direction is None:
            direction = flow.defaults.direction
        evt = Event(name=event, source=flow, direction=direction, data=data)
        if direction is Direction.NONE:
            return evt
        route = self._resolve(flow, event, direction)
        self._dispatch(evt, route)
        return evt

    def announce(self, flow: Any, event: str, *payload: Any,
                 scope: EventScope = EventScope.SELF) -> Event:
        """Deliver an internal structural event to one scope around flow.

        The event name is prefixed with scope.prefix, so a ``parent``
        announcement reaches flow as ``flow.parent``, its ancestors as
        ``flow.children.parent`` and its descendants as
        ``flow.parent.parent``.

        Returns:
            The dispatched Event
        """
        name = scope.prefix + event
        evt = Event(name=name, source=flow, data=payload)
        route = self._resolve(flow, name, scope)
        if route:
            logger.debug("Announcing %s from %r to %d listeners", name, flow, len(route))
        self._dispatch(evt, route)
        return evt

    def _nodes_for(self, flow: Any, kind) -> List[Any]:
        if kind is EventScope.SELF:
            return [flow]
        if kind is EventScope.ANCESTORS:
            return AncestorTraverser().collect(flow)
        if kind is EventScope.DESCENDANTS:
            return DescendantTraverser().collect(flow)
        return [flow] + create_traverser(kind).collect(flow)

    def _resolve(self, flow: Any, event: str, kind) -> Route:
        key = (flow.guid, event, kind)
        route = self.cache.get(key)
        if route is not None:
            return route

        nodes = self._nodes_for(flow, kind)
        route = [
            (node, listener)
            for node in nodes
            for listener in self._listeners.get(node.guid, {}).get(event, ())
        ]
        # The origin is recorded even when the scope reached nobody
        self.cache.put(key, route, [flow.guid] + [node.guid for node in nodes])
        return route

    def _dispatch(self, evt: Event, route: Route) -> None:
        # Iterate a snapshot: listeners may register, remove or reparent
        for node, listener in list(route):
            if evt.stopped and node is not evt.target:
                break
            evt.target = node
            try:
                listener(evt, *evt.data)
            except Exception as error:
                self._policy.handle(error, evt, listener)


_default_dispatcher: Optional[EventDispatcher] = None


def default_dispatcher() -> EventDispatcher:
    """Return the process-wide dispatcher used by roots created without one."""
    global _default_dispatcher
    if _default_dispatcher is None:
        _default_dispatcher = EventDispatcher()
    return _default_dispatcher
