"""Flow: the node type of a FlowTreeLib tree.

A Flow owns an ordered list of children and holds a back-reference to at
most one parent. All structural changes go through reparent(), create()
and dispose(), which keep both sides of every link consistent and announce
each change to the tree's EventDispatcher.

Example:
    >>> root = Flow('root')
    >>> a = root.create('a')
    >>> x = a.create('x', 55)
    >>> y = a.create('y', 'foo')
    >>> root.children_all()
    [Flow('a'), Flow('x'), Flow('y')]
    >>> a.find(lambda f: True) is y     # last match wins
    True
    >>> x.parents()
    [Flow('a'), Flow('root')]
"""

import logging
import uuid
from enum import Enum
from typing import Any, Callable, List, Optional

from ..config import Direction, FlowDefaults
from ..errors import (
    FlowDisposedError,
    InvalidChildrenQueryError,
    InvalidConfigError,
    InvalidDisposeCallError,
    InvalidParentError,
    InvalidRootQueryError,
)
from ..events.dispatcher import Event, EventDispatcher, EventScope, default_dispatcher
from ..factory import construct
from ..stats import StatsDefaults, defaults_for
from .matcher import NameMatcher, build_matcher
from .structure import attach, detach
from .traverser import AncestorTraverser, DescendantTraverser

logger = logging.getLogger(__name__)

# Lookup expression accepted by find/has/find_parent (see core.matcher)
MatcherExpr = Any


class _Unset:
    """Marker for "no payload given" (None is a valid payload)."""

    def __repr__(self) -> str:
        return 'UNSET'


UNSET = _Unset()


class FlowState(Enum):
    """Lifecycle of a flow node. Transitions only move forward."""
    ACTIVE = "active"
    DISPOSING = "disposing"
    DISPOSED = "disposed"


# Scopes every reparent announcement is delivered to, in dispatch order
_STRUCTURAL_SCOPES = (EventScope.SELF, EventScope.ANCESTORS, EventScope.DESCENDANTS)


class Flow:
    """A node in a flow tree.

    Args:
        name: Label used by name matchers and by create()'s get-or-update rule
        data: Opaque payload
        defaults: Construction record handed on to children (copied)
        dispatcher: EventDispatcher for the tree (process default if None)

    Raises:
        InvalidConfigError: If defaults fail validation
    """

    def __init__(self,
                 name: Any = None,
                 data: Any = None,
                 *,
                 defaults: Optional[FlowDefaults] = None,
                 dispatcher: Optional[EventDispatcher] = None):
        defaults = defaults.copy() if defaults is not None else FlowDefaults()
        errors = defaults.validate()
        if errors:
            raise InvalidConfigError(errors)

        self._guid = uuid.uuid4().hex
        self._name = name
        self._parent: Optional['Flow'] = None
        self._children: List['Flow'] = []
        self._state = FlowState.ACTIVE

        self.data = data
        self.defaults = defaults
        self.dispatcher = dispatcher if dispatcher is not None else default_dispatcher()
        self.child_defaults = StatsDefaults()

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def guid(self) -> str:
        """Process-unique identifier, used for identity and cycle checks."""
        return self._guid

    @property
    def name(self) -> Any:
        return self._name

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def disposed(self) -> bool:
        return self._state is FlowState.DISPOSED

    def __repr__(self) -> str:
        return f"Flow({self._name!r})"

    # ------------------------------------------------------------------
    # Tree structure
    # ------------------------------------------------------------------

    @property
    def parent(self) -> Optional['Flow']:
        """The parent node, or None for a root. Assigning reparents."""
        return self._parent

    @parent.setter
    def parent(self, new_parent: Optional['Flow']) -> None:
        self.reparent(new_parent)

    def reparent(self, new_parent: Optional['Flow']) -> 'Flow':
        """Move this node under new_parent, or make it a root with None.

        The node is detached first, then ``parent`` is announced to the
        node, its ancestors and its descendants, then the node is attached
        and ``parented`` is announced to the same three scopes. Listeners
        receive ``(event, flow, new_parent, old_parent)``.

        Args:
            new_parent: Flow to attach to, or None

        Returns:
            self, for chaining

        Raises:
            InvalidParentError: If new_parent is not a Flow or None, or is
                this node or one of its descendants
            FlowDisposedError: If either side of the new link is not active
        """
        if new_parent is not None:
            self._check_new_parent(new_parent)

        old_parent = self._parent
        detach(self)
        self._announce_structural('parent', new_parent, old_parent)

        # A 'parent' listener may have attached this node somewhere else
        if self._parent is not None:
            detach(self)
        attach(self, new_parent)
        self._announce_structural('parented', new_parent, old_parent)

        logger.debug("Reparented %r: %r -> %r", self, old_parent, new_parent)
        return self

    def _check_new_parent(self, new_parent: Any) -> None:
        if not isinstance(new_parent, Flow):
            raise InvalidParentError(new_parent)
        if new_parent is self:
            raise InvalidParentError(new_parent, "a node cannot be its own parent")
        if any(p is self for p in new_parent.parents()):
            raise InvalidParentError(new_parent, "a node cannot be moved under its own descendant")
        if self._state is not FlowState.ACTIVE:
            raise FlowDisposedError(self, "attach to a parent")
        if new_parent._state is not FlowState.ACTIVE:
            raise FlowDisposedError(new_parent, "attach a child")

    def _announce_structural(self, event: str, new_parent: Optional['Flow'],
                             old_parent: Optional['Flow']) -> None:
        for scope in _STRUCTURAL_SCOPES:
            self.dispatcher.announce(self, event, self, new_parent, old_parent, scope=scope)

    # ------------------------------------------------------------------
    # Traversal & query
    # ------------------------------------------------------------------

    def children(self, *args) -> List['Flow']:
        """Return a copy of the immediate children. Getter only.

        Use create() to add children and reparent() to move nodes.

        Raises:
            InvalidChildrenQueryError: If called with arguments
        """
        if args:
            raise InvalidChildrenQueryError(args)
        return list(self._children)

    def children_all(self, *args) -> List['Flow']:
        """Return every descendant, each node's children before grandchildren.

        Raises:
            InvalidChildrenQueryError: If called with arguments
        """
        if args:
            raise InvalidChildrenQueryError(args)
        return DescendantTraverser().collect(self)

    def find_all(self, matcher: MatcherExpr, recursive: bool = True) -> List['Flow']:
        """Return every matching descendant (or child) in traversal order.

        Args:
            matcher: Lookup expression (see core.matcher)
            recursive: Search all descendants, or immediate children only
        """
        predicate = build_matcher(matcher)
        candidates = self.children_all() if recursive else self.children()
        return [flow for flow in candidates if predicate(flow)]

    def find(self, matcher: MatcherExpr, recursive: bool = True) -> Optional['Flow']:
        """Return the LAST node find_all() would return, or None.

        When several nodes match, the one discovered last wins: a later
        sibling beats an earlier one and a deeper node beats a shallower
        one.
        """
        matches = self.find_all(matcher, recursive)
        return matches[-1] if matches else None

    get = find

    def has(self, matcher: MatcherExpr, recursive: bool = True) -> bool:
        """Check if find() returns a node."""
        return self.find(matcher, recursive) is not None

    def parents(self) -> List['Flow']:
        """Return the ancestors of this node, nearest first, root last."""
        return AncestorTraverser().collect(self)

    def find_parent(self, matcher: MatcherExpr) -> Optional['Flow']:
        """Return the farthest (most root-ward) matching ancestor, or None."""
        if matcher is None:
            return None
        predicate = build_matcher(matcher)
        matches = [flow for flow in self.parents() if predicate(flow)]
        return matches[-1] if matches else None

    def has_parent(self, matcher: MatcherExpr) -> bool:
        """Check if find_parent() returns a node."""
        return self.find_parent(matcher) is not None

    def root(self, *args) -> Optional['Flow']:
        """Return the most distant ancestor, or None if this node has no parent.

        Raises:
            InvalidRootQueryError: If called with arguments
        """
        if args:
            raise InvalidRootQueryError(args)
        parents = self.parents()
        return parents[-1] if parents else None

    def upstream(self):
        """Return the upstream routes of this node (see routes.upstream)."""
        from ..routes import upstream
        return upstream(self)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create(self, name: Any, data: Any = UNSET) -> 'Flow':
        """Return the child called name, creating it if needed.

        An existing immediate child with that name is returned as-is, with
        its payload replaced when data is given. A new child is built from
        a copy of this node's defaults and, when no data is given, starts
        with the payload child_defaults declares for its name.

        Raises:
            FlowDisposedError: If this node is not active
        """
        if self._state is not FlowState.ACTIVE:
            raise FlowDisposedError(self, "create a child")

        existing = self.find(NameMatcher(name), recursive=False)
        if existing is not None:
            if data is not UNSET:
                existing.data = data
            return existing

        if data is UNSET:
            data = defaults_for(self, name)

        child = construct(self.defaults.copy(), name, data, dispatcher=self.dispatcher)
        attach(child, self)
        logger.debug("Created %r under %r", child, self)
        self.dispatcher.announce(self, 'create', self, child, scope=EventScope.SELF)
        return child

    def dispose(self, *args) -> 'Flow':
        """Dispose this node and, afterwards, every descendant.

        Announces ``dispose``, detaches from the parent, drops all listeners
        and then disposes a snapshot of the children. Calling it again is a
        no-op.

        Raises:
            InvalidDisposeCallError: If called with arguments
        """
        if args:
            raise InvalidDisposeCallError(args)
        if self._state is not FlowState.ACTIVE:
            return self

        self._state = FlowState.DISPOSING
        self.dispatcher.announce(self, 'dispose', self, scope=EventScope.SELF)
        self.reparent(None)
        self._state = FlowState.DISPOSED
        self.dispatcher.clear_listeners(self)

        children = self.children()
        logger.debug("Disposed %r, cascading to %d children", self, len(children))
        for child in children:
            child.dispose()
        return self

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, event: str, listener: Callable[..., Any]) -> 'Flow':
        """Register listener(event, *data) for event on this node."""
        self.dispatcher.on(self, event, listener)
        return self

    def off(self, event: Optional[str] = None,
            listener: Optional[Callable[..., Any]] = None) -> 'Flow':
        """Remove one listener, all listeners of event, or all listeners."""
        self.dispatcher.off(self, event, listener)
        return self

    def listeners(self, event: Optional[str] = None):
        """Return a copy of this node's listeners (see EventDispatcher.listeners)."""
        return self.dispatcher.listeners(self, event)

    def emit(self, event: str, *data: Any, direction: Optional[Direction] = None) -> Event:
        """Emit event from this node.

        direction defaults to defaults.direction (DOWNSTREAM unless
        configured otherwise).
        """
        return self.dispatcher.emit(self, event, *data, direction=direction)
