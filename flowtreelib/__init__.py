"""FlowTreeLib - hierarchical flow nodes with observable structure.

FlowTreeLib maintains mutable trees of Flow nodes. Nodes are created under
a parent, moved with reparent(), queried with matchers and disposed in a
cascade, while every structural change is announced through an event
dispatcher.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from flowtreelib import Flow

    root = Flow('root')
    a = root.create('a', 55)
    a.on('flow.parented', lambda event, flow, new, old: print(new))
    a.reparent(None)
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

# Core must be imported before events (node.py pulls the dispatcher in)
from .core import Flow, FlowState, UNSET, build_matcher
from .config import Direction, FlowDefaults
from .errors import (
    FlowError,
    InvalidParentError,
    InvalidChildrenQueryError,
    InvalidRootQueryError,
    InvalidDisposeCallError,
    InvalidMatcherError,
    FlowDisposedError,
    InvalidConfigError,
)
from .events import (
    Event,
    EventDispatcher,
    EventScope,
    default_dispatcher,
    FailFastPolicy,
    ContinueOnErrorsPolicy,
)
from .factory import construct
from .routes import Route, upstream
from .stats import StatsDefaults, defaults_for
from .api import (
    create_root,
    traverse_flow,
    find_nodes,
    count_nodes,
    get_tree_paths,
    get_tree_stats,
)

__all__ = [
    "__version__",
    # Core
    "Flow",
    "FlowState",
    "UNSET",
    "build_matcher",
    # Config
    "Direction",
    "FlowDefaults",
    # Errors
    "FlowError",
    "InvalidParentError",
    "InvalidChildrenQueryError",
    "InvalidRootQueryError",
    "InvalidDisposeCallError",
    "InvalidMatcherError",
    "FlowDisposedError",
    "InvalidConfigError",
    # Events
    "Event",
    "EventDispatcher",
    "EventScope",
    "default_dispatcher",
    "FailFastPolicy",
    "ContinueOnErrorsPolicy",
    # Collaborators
    "construct",
    "Route",
    "upstream",
    "StatsDefaults",
    "defaults_for",
    # API
    "create_root",
    "traverse_flow",
    "find_nodes",
    "count_nodes",
    "get_tree_paths",
    "get_tree_stats",
]
