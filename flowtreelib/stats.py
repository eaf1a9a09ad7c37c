"""Per-name default payloads inherited by newly created children.

A node can declare, for a child name, the payload that child starts with
when it is created without explicit data. The table is read once per new
node; later changes to it never touch existing children.
"""

import copy
from typing import Any, Dict, Iterator, Optional, Tuple


class StatsDefaults:
    """Table of default payloads keyed by child name."""

    def __init__(self, initial: Optional[Dict[Any, Any]] = None):
        self._table: Dict[Any, Any] = dict(initial or {})

    def set(self, name: Any, payload: Any) -> None:
        self._table[name] = payload

    def get(self, name: Any) -> Optional[Any]:
        return self._table.get(name)

    def remove(self, name: Any) -> None:
        self._table.pop(name, None)

    def items(self) -> Iterator[Tuple[Any, Any]]:
        return iter(list(self._table.items()))

    def __contains__(self, name: Any) -> bool:
        return name in self._table

    def __len__(self) -> int:
        return len(self._table)


def defaults_for(parent: Any, name: Any) -> Optional[Any]:
    """Look up the default payload parent declares for a child called name.

    The returned payload is a deep copy, so children never share mutable
    state with the table or with each other.

    Args:
        parent: Node creating the child
        name: Name of the child being created

    Returns:
        Default payload, or None when the parent declares none
    """
    table = getattr(parent, 'child_defaults', None)
    if table is None or name not in table:
        return None
    return copy.deepcopy(table.get(name))
