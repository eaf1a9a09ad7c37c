"""Core abstractions for FlowTreeLib.

This package contains the flow node and the read-side helpers it is built
on. Import order matters: node.py depends on the other three modules.
"""

from .matcher import build_matcher, Matcher
from .structure import attach, detach
from .traverser import (
    FlowTraverser,
    DescendantTraverser,
    AncestorTraverser,
    create_traverser,
)
from .node import Flow, FlowState, UNSET

__all__ = [
    "Flow",
    "FlowState",
    "UNSET",
    "Matcher",
    "build_matcher",
    "attach",
    "detach",
    "FlowTraverser",
    "DescendantTraverser",
    "AncestorTraverser",
    "create_traverser",
]
