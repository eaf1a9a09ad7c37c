"""Event dispatch and listener caching for flow trees."""

from .cache import ListenerCache
from .dispatcher import Event, EventDispatcher, EventScope, default_dispatcher
from .policies import (
    ListenerErrorPolicy,
    FailFastPolicy,
    CollectErrorsPolicy,
    ContinueOnErrorsPolicy,
    ThresholdPolicy,
)

__all__ = [
    'Event',
    'EventDispatcher',
    'EventScope',
    'default_dispatcher',
    'ListenerCache',
    'ListenerErrorPolicy',
    'FailFastPolicy',
    'CollectErrorsPolicy',
    'ContinueOnErrorsPolicy',
    'ThresholdPolicy',
]
