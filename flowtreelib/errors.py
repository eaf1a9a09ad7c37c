"""Exceptions raised by FlowTreeLib.

Every error here is a synchronous usage error: it is raised before the
offending call mutates anything and is never retried or swallowed by the
library itself.
"""

from typing import Any


class FlowError(Exception):
    """Base class for all FlowTreeLib errors."""
    pass


class InvalidParentError(FlowError, TypeError):
    """Raised when a reparent target is not a Flow or None, or would form a cycle."""

    def __init__(self, value: Any, reason: str = "parent must be a Flow instance or None"):
        self.value = value
        super().__init__(f"Invalid parent {value!r}: {reason}")


class InvalidChildrenQueryError(FlowError):
    """Raised when children() or children_all() is called with arguments.

    Both are getters. Use create() to add children and reparent() to move them.
    """

    def __init__(self, args: tuple = ()):
        self.args_given = args
        super().__init__(
            "children() is getter only; use create() to add nodes "
            "or reparent() to move them"
        )


class InvalidRootQueryError(FlowError):
    """Raised when root() is called with arguments."""

    def __init__(self, args: tuple = ()):
        self.args_given = args
        super().__init__("root() takes no arguments")


class InvalidDisposeCallError(FlowError):
    """Raised when dispose() is called with arguments."""

    def __init__(self, args: tuple = ()):
        self.args_given = args
        super().__init__("dispose() takes no arguments")


class InvalidMatcherError(FlowError, TypeError):
    """Raised when a lookup expression cannot be turned into a matcher."""

    def __init__(self, expr: Any):
        self.expr = expr
        super().__init__(
            f"Unsupported matcher {expr!r}: expected a callable, compiled "
            f"pattern, name literal, Flow or None"
        )


class FlowDisposedError(FlowError):
    """Raised when an operation would reactivate a disposed node."""

    def __init__(self, flow: Any, operation: str):
        self.flow = flow
        self.operation = operation
        super().__init__(f"Cannot {operation}: {flow!r} has been disposed")


class InvalidConfigError(FlowError, ValueError):
    """Raised when FlowDefaults fail validation."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(f"Invalid configuration: {'; '.join(self.errors)}")
