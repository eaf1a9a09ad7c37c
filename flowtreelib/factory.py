"""Node construction for FlowTreeLib.

create() never instantiates nodes itself. It hands its FlowDefaults record
to construct(), which picks the node class and applies the behaviours the
record lists, in order.
"""

import logging
from typing import Any, Optional

from .config import FlowDefaults

logger = logging.getLogger(__name__)


def construct(defaults: FlowDefaults, name: Any, data: Any = None, *,
              dispatcher: Optional[Any] = None) -> Any:
    """Build a new, unattached node from a defaults record.

    Args:
        defaults: Construction record (factory, behaviours, direction)
        name: Name of the new node
        data: Initial payload
        dispatcher: EventDispatcher the node should use (None = default)

    Returns:
        The new node, with every behaviour already applied
    """
    factory = defaults.factory
    if factory is None:
        # Local import: core.node imports this module
        from .core.node import Flow
        factory = Flow

    flow = factory(name, data, defaults=defaults, dispatcher=dispatcher)
    for behaviour in defaults.behaviours:
        behaviour(flow, flow.defaults)

    logger.debug("Constructed %r with %d behaviours", flow, len(defaults.behaviours))
    return flow
