"""Lookup matchers for FlowTreeLib.

A matcher turns one of the supported lookup expressions into a predicate
over flow nodes. The expression kind is resolved once, in build_matcher(),
so query code only ever calls the resulting object.

Supported expressions:
- callable:        used as-is            .find(lambda f: f.data == 5)
- compiled regex:  searched in the name  .find(re.compile(r'^foo'))
- name literal:    name equality         .find('foo')
- Flow:            identity              .find(some_flow)
- None:            matches nothing
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Callable

from ..errors import InvalidMatcherError


class Matcher(ABC):
    """Abstract predicate over flow nodes."""

    @abstractmethod
    def __call__(self, flow: Any) -> bool:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class NeverMatcher(Matcher):
    """Matches nothing. Built from a None expression."""

    def __call__(self, flow: Any) -> bool:
        return False


class PredicateMatcher(Matcher):
    """Wraps a user supplied callable."""

    def __init__(self, predicate: Callable[[Any], Any]):
        self.predicate = predicate

    def __call__(self, flow: Any) -> bool:
        return bool(self.predicate(flow))

    def __repr__(self) -> str:
        return f"PredicateMatcher({self.predicate!r})"


class PatternMatcher(Matcher):
    """Searches a compiled regular expression in the node name."""

    def __init__(self, pattern: 're.Pattern'):
        self.pattern = pattern

    def __call__(self, flow: Any) -> bool:
        name = flow.name
        if not isinstance(name, str):
            return False
        return self.pattern.search(name) is not None

    def __repr__(self) -> str:
        return f"PatternMatcher({self.pattern.pattern!r})"


class NameMatcher(Matcher):
    """Matches nodes whose name equals a literal."""

    def __init__(self, name: Any):
        self.name = name

    def __call__(self, flow: Any) -> bool:
        return flow.name == self.name

    def __repr__(self) -> str:
        return f"NameMatcher({self.name!r})"


class IdentityMatcher(Matcher):
    """Matches one specific node by guid."""

    def __init__(self, flow: Any):
        self.guid = flow.guid

    def __call__(self, flow: Any) -> bool:
        return flow.guid == self.guid

    def __repr__(self) -> str:
        return f"IdentityMatcher(guid={self.guid!r})"


_LITERAL_TYPES = (str, int, float, bool)


def build_matcher(expr: Any) -> Matcher:
    """Normalize a lookup expression into a Matcher.

    Args:
        expr: Callable, compiled pattern, name literal, Flow or None

    Returns:
        Matcher instance (callable taking a flow, returning bool)

    Raises:
        InvalidMatcherError: If the expression kind is not supported
    """
    # Local import: node.py imports this module
    from .node import Flow

    if expr is None:
        return NeverMatcher()
    if isinstance(expr, Matcher):
        return expr
    if isinstance(expr, Flow):
        return IdentityMatcher(expr)
    if isinstance(expr, re.Pattern):
        return PatternMatcher(expr)
    if isinstance(expr, _LITERAL_TYPES):
        return NameMatcher(expr)
    if callable(expr):
        return PredicateMatcher(expr)
    raise InvalidMatcherError(expr)
