"""
In-process change notifier.

Writers publish ChangeEvents after their transaction commits. Every
subscriber owns a bounded queue; when the queue is full the event is
dropped for that subscriber only. Delivery is best effort: subscribers
are expected to refetch state rather than reconstruct it from events.
"""
import queue
import threading
from typing import Any, Callable, Dict, List, Optional

from complaintdesk.config.settings import settings
from complaintdesk.core.events.base_event import ChangeEvent
from complaintdesk.core.events.scopes import ChangeScope
from complaintdesk.core.logging import get_structured_logger

logger = get_structured_logger(__name__)

ChangeCallback = Callable[[ChangeEvent], None]


class Subscription:
    """
    Handle returned by ``ChangeNotifier.subscribe``.

    Usage:
        with notifier.subscribe(OwnerScope(user_id)) as sub:
            ...
            for event in sub.drain():
                refetch(event.complaint_id)
    """

    def __init__(
        self,
        notifier: "ChangeNotifier",
        scope: ChangeScope,
        maxsize: int,
        callback: Optional[ChangeCallback] = None,
    ):
        self.notifier = notifier
        self.scope = scope
        self.callback = callback
        self.dropped = 0
        self._queue: "queue.Queue[ChangeEvent]" = queue.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _offer(self, event: ChangeEvent) -> bool:
        """Queue ``event`` for this subscriber and run its callback."""
        delivered = True
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            self.dropped += 1
            delivered = False
            logger.warning(
                "change_event_dropped",
                event_type=event.event_type,
                complaint_id=event.complaint_id,
                dropped=self.dropped,
            )

        if self.callback is not None:
            try:
                self.callback(event)
            except Exception:
                logger.error(
                    "change_callback_failed",
                    event_type=event.event_type,
                    complaint_id=event.complaint_id,
                    exc_info=True,
                )
        return delivered

    def get(self, timeout: Optional[float] = None) -> Optional[ChangeEvent]:
        """Block up to ``timeout`` seconds for the next event."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> List[ChangeEvent]:
        """Return and remove every queued event."""
        events = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                return events

    def pending(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        """Stop receiving events. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.notifier._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ChangeNotifier:
    """
    Fan-out of committed changes to scoped subscribers.
    """

    def __init__(self, queue_size: Optional[int] = None):
        if queue_size is None:
            queue_size = settings.NOTIFIER_QUEUE_SIZE
        self.queue_size = queue_size
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(
        self,
        scope: ChangeScope,
        callback: Optional[ChangeCallback] = None,
    ) -> Subscription:
        """
        Subscribe to changes matching ``scope``.

        Args:
            scope: Server-side filter for events
            callback: Optional function called with each matching event

        Returns:
            Subscription; close it to unsubscribe
        """
        subscription = Subscription(self, scope, self.queue_size, callback)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.debug("change_subscription_opened", scope=type(scope).__name__)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
        logger.debug("change_subscription_closed", scope=type(subscription.scope).__name__)

    def publish(self, event: ChangeEvent) -> int:
        """
        Deliver ``event`` to every matching subscriber.

        Never raises into the caller: scope and callback failures are
        logged and skipped.

        Returns:
            Number of subscribers whose queue accepted the event
        """
        with self._lock:
            subscriptions = list(self._subscriptions)

        delivered = 0
        for subscription in subscriptions:
            try:
                if not subscription.scope.matches(event):
                    continue
            except Exception:
                logger.error("change_scope_failed", event_type=event.event_type, exc_info=True)
                continue
            if subscription._offer(event):
                delivered += 1

        logger.debug("change_event_published", event_type=event.event_type, delivered=delivered)
        return delivered

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the notifier."""
        with self._lock:
            subscriptions = list(self._subscriptions)
        return {
            "subscribers": len(subscriptions),
            "queued": sum(s.pending() for s in subscriptions),
            "dropped": sum(s.dropped for s in subscriptions),
        }


# Process-wide notifier used by the HTTP layer
change_notifier = ChangeNotifier()


def get_change_notifier() -> ChangeNotifier:
    """Return the process-wide notifier."""
    return change_notifier
