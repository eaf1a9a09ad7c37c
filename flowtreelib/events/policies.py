"""
Listener error policies for FlowTreeLib.

When a listener raises while an event is being dispatched, the dispatcher
hands the exception to a policy. The policy decides whether the error stops
the dispatch (and the structural operation that triggered it) or is
recorded so the remaining listeners still run.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class ListenerErrorPolicy(ABC):
    """
    Base class for listener error policies.

    Subclasses implement different strategies for handling exceptions
    raised by event listeners.
    """

    @abstractmethod
    def handle(self, error: Exception, event: Any, listener: Callable[..., Any]) -> None:
        """
        Handle an exception raised by a listener.

        Args:
            error: The exception that was raised
            event: The Event being dispatched (name, source, target, data)
            listener: The listener that raised

        Re-raise to abort the dispatch, return to continue with the next
        listener.
        """
        pass


class FailFastPolicy(ListenerErrorPolicy):
    """
    Policy that immediately re-raises any listener error.

    This is the default: a failing listener aborts the emit or the
    structural operation that announced the event.
    """

    def handle(self, error: Exception, event: Any, listener: Callable[..., Any]) -> None:
        """Re-raise the error immediately."""
        raise error


class CollectErrorsPolicy(ListenerErrorPolicy):
    """
    Policy that records every listener error and keeps dispatching.

    Useful for collecting all errors and inspecting them afterwards.
    """

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []

    def handle(self, error: Exception, event: Any, listener: Callable[..., Any]) -> None:
        """Silently record the error."""
        self._record(error, event, listener)

    def _record(self, error: Exception, event: Any, listener: Callable[..., Any]) -> Dict[str, Any]:
        record = {
            'event': event.name,
            'target': event.target,
            'listener': listener,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
        }
        self.errors.append(record)
        return record

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        by_event: Dict[str, int] = {}
        for record in self.errors:
            by_event[record['event']] = by_event.get(record['event'], 0) + 1
        return {
            'total_errors': len(self.errors),
            'by_event': by_event,
            'errors': self.errors,
        }


class ContinueOnErrorsPolicy(CollectErrorsPolicy):
    """
    Policy that records listener errors, logs them and continues.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for every error
        """
        super().__init__()
        self.verbose = verbose

    def handle(self, error: Exception, event: Any, listener: Callable[..., Any]) -> None:
        """Record the error and log it."""
        self._record(error, event, listener)
        if self.verbose:
            logger.warning(
                "Listener %r failed on %r for event %r: %s",
                listener, event.target, event.name, error,
            )


class ThresholdPolicy(CollectErrorsPolicy):
    """
    Policy that tolerates listener errors up to a threshold, then fails fast.

    Useful when occasional failures are expected but many indicate a
    systemic problem.
    """

    def __init__(self, max_errors: int = 10):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum errors to tolerate before failing
        """
        super().__init__()
        self.max_errors = max_errors

    def handle(self, error: Exception, event: Any, listener: Callable[..., Any]) -> None:
        """Record the error; raise once more than max_errors were seen."""
        self._record(error, event, listener)
        if len(self.errors) > self.max_errors:
            raise RuntimeError(
                f"Listener error threshold exceeded ({self.max_errors} errors)"
            ) from error
        logger.warning(
            "Listener error %d/%d on event %r: %s",
            len(self.errors), self.max_errors, event.name, error,
        )
