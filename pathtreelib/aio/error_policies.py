"""
Cascade error policies for PathTreeLib.

A reparent rewrites the path of every descendant with one storage write
each. When one of those writes fails, the policy decides whether the engine
stops right there or keeps rewriting the remaining descendants. Whatever the
policy decides, the engine raises CascadeWriteFailure once the cascade
ends with failures; policies only shape how much work gets done first.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class CascadePolicy(ABC):
    """
    Base class for cascade error policies.

    Subclasses implement different strategies for reacting to a failed
    per-descendant write. One policy may serve concurrent cascades: the
    decision only uses the per-cascade ``failure_count``, while ``errors``
    accumulates across every cascade until reset().
    """

    def __init__(self):
        self.errors: List[Dict[str, Any]] = []

    @abstractmethod
    async def handle(self, error: Exception, method_name: str, node: Any,
                     failure_count: int = 1) -> bool:
        """
        React to a failed storage write during a cascade.

        Args:
            error: The exception raised by the storage adapter
            method_name: Engine operation that failed (e.g. 'rebase_descendants')
            node: The descendant document whose write failed
            failure_count: Failed writes so far in this cascade, this one included

        Returns:
            True to continue with the remaining descendants, False to stop
        """
        pass

    def _record(self, error: Exception, method_name: str, node: Any) -> Dict[str, Any]:
        node_id = node.get('id') if isinstance(node, dict) else getattr(node, 'id', None)
        record = {
            'id': node_id,
            'method': method_name,
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
        return {
            'total_errors': len(self.errors),
            'failed_ids': [e['id'] for e in self.errors],
            'errors': self.errors,
        }

    def reset(self) -> None:
        """Forget recorded errors."""
        self.errors.clear()


class FailFastPolicy(CascadePolicy):
    """
    Policy that stops the cascade at the first failed write.

    This is the default behavior. Descendants after the failing one keep
    their old path until the reparent is re-run.
    """

    async def handle(self, error: Exception, method_name: str, node: Any,
                     failure_count: int = 1) -> bool:
        self._record(error, method_name, node)
        return False


class ContinueOnErrorsPolicy(CascadePolicy):
    """
    Policy that logs each failed write and keeps rewriting the rest.

    Useful when as many descendants as possible should reach the new path
    before the failure is reported.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for every failed write
        """
        super().__init__()
        self.verbose = verbose

    async def handle(self, error: Exception, method_name: str, node: Any,
                     failure_count: int = 1) -> bool:
        record = self._record(error, method_name, node)
        if self.verbose:
            logger.warning("Error in %s for node %r: %s", method_name, record['id'], error)
        return True


class CollectErrorsPolicy(ContinueOnErrorsPolicy):
    """
    Policy that collects all errors without logging.

    Similar to ContinueOnErrorsPolicy but silent; errors are reported only
    through the raised CascadeWriteFailure and get_statistics().
    """

    def __init__(self):
        super().__init__(verbose=False)


class ThresholdPolicy(CascadePolicy):
    """
    Policy that tolerates failed writes up to a threshold, then stops.

    Useful when a few failures are expected but many indicate the store is
    unavailable and further writes are pointless.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum failed writes to tolerate before stopping
            verbose: If True, log a warning for every failed write
        """
        super().__init__()
        self.max_errors = max_errors
        self.verbose = verbose

    async def handle(self, error: Exception, method_name: str, node: Any,
                     failure_count: int = 1) -> bool:
        record = self._record(error, method_name, node)
        if self.verbose:
            logger.warning("Error [%d/%d] in %s for node %r: %s",
                           failure_count, self.max_errors, method_name, record['id'], error)
        return failure_count <= self.max_errors
