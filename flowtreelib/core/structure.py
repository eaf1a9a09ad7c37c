"""Parent/child link maintenance for flow nodes.

attach() and detach() are the only two places that touch both sides of a
parent/child link, so a node's children are always exactly the nodes
pointing back at it. Each one requests a
single listener-cache invalidation on the parent that gained or lost a
child.
"""

from typing import Any, Optional


def attach(flow: Any, parent: Optional[Any]) -> None:
    """Point flow at parent and append it to parent's children.

    Callers must detach() first; attach never checks for an existing link.

    Args:
        flow: Node being attached
        parent: New parent, or None to leave the node standalone
    """
    flow._parent = parent
    if parent is not None:
        parent._children.append(flow)
        parent.dispatcher.invalidate(parent)


def detach(flow: Any) -> Optional[Any]:
    """Remove flow from its current parent's children.

    Removal is by identity, not by position. No-op when flow has no parent.

    Args:
        flow: Node being detached

    Returns:
        The former parent, or None
    """
    parent = flow._parent
    if parent is None:
        return None
    parent._children = [child for child in parent._children if child is not flow]
    flow._parent = None
    parent.dispatcher.invalidate(parent)
    return parent
