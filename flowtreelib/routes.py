"""Upstream route listing.

For a node and each of its ancestors, upstream() returns the path leading
from that ancestor back down to the node. It is the read-only view used to
answer "through which parents would an upstream event travel, and how did
it get there".
"""

from typing import Any, List, NamedTuple


class Route(NamedTuple):
    """An ancestor (or the node itself) and the path from it to the node."""
    flow: Any
    route: List[Any]


def upstream(flow: Any) -> List[Route]:
    """List the upstream routes of flow, nearest first.

    Example:
        >>> a = Flow('a'); b = a.create('b'); c = b.create('c')
        >>> [(r.flow.name, [n.name for n in r.route]) for r in upstream(c)]
        [('c', ['c']), ('b', ['b', 'c']), ('a', ['a', 'b', 'c'])]
    """
    chain = [flow] + flow.parents()
    return [
        Route(flow=node, route=list(reversed(chain[:i + 1])))
        for i, node in enumerate(chain)
    ]
