"""Configuration system for FlowTreeLib.

This module defines the construction record every flow node carries: which
factory builds its children, which behaviours are applied to them, and in
which direction their events travel by default.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional


class Direction(Enum):
    """Which nodes an emitted event reaches.

    The emitting node itself is always the first stop unless the
    direction is NONE.
    """
    NONE = "none"               # Nobody receives the event
    CURRENT = "current"         # Only the emitting node
    DOWNSTREAM = "downstream"   # Emitting node, then all descendants
    UPSTREAM = "upstream"       # Emitting node, then all ancestors


@dataclass
class FlowDefaults:
    """Construction defaults passed from a node to the children it creates.

    The core never interprets these fields. It copies the record from
    parent to child and hands it to the factory collaborator.
    """

    # Class (or callable) used to build child nodes. None means Flow.
    factory: Optional[Callable[..., Any]] = None

    # Callables applied in order to every new node: behaviour(flow, defaults)
    behaviours: List[Callable[[Any, "FlowDefaults"], None]] = field(default_factory=list)

    # Default emit direction for new nodes
    direction: Direction = Direction.DOWNSTREAM

    def copy(self) -> 'FlowDefaults':
        """Return an independent copy (the behaviours list is not shared)."""
        return FlowDefaults(
            factory=self.factory,
            behaviours=list(self.behaviours),
            direction=self.direction,
        )

    # Convenience constructors for common configurations

    @classmethod
    def upstream(cls, **kwargs) -> 'FlowDefaults':
        """Defaults whose events bubble towards the root."""
        return cls(direction=Direction.UPSTREAM, **kwargs)

    @classmethod
    def silent(cls, **kwargs) -> 'FlowDefaults':
        """Defaults whose plain emits reach nobody."""
        return cls(direction=Direction.NONE, **kwargs)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.factory is not None and not callable(self.factory):
            errors.append("factory must be callable")

        if not isinstance(self.behaviours, (list, tuple)):
            errors.append("behaviours must be a list of callables")
        else:
            for i, behaviour in enumerate(self.behaviours):
                if not callable(behaviour):
                    errors.append(f"behaviour at index {i} is not callable")

        if not isinstance(self.direction, Direction):
            errors.append(f"direction must be a Direction, got {self.direction!r}")

        return errors
