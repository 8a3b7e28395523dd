"""
Thread-safe hand-off between producers and readers.

Sensor callbacks and the classifier worker never share mutable fields with
their readers. They publish through one of two channels instead:

    LatestValue  single slot, last writer wins, with a version counter so
                 a reader can wait for "something newer than what I saw".
    EventStream  bounded append-only stream. Appends never block; when the
                 buffer is full the oldest undelivered event is dropped.
                 Consumers either drain() it or subscribe() a callback.
"""

import logging
import threading
from collections import deque
from typing import Callable, Generic, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class LatestValue(Generic[T]):
    """
    Lock-protected single-value slot.

    Args:
        initial: Value returned before the first set(). Default: None.

    Example:
        >>> slot = LatestValue()
        >>> slot.set(3)
        1
        >>> slot.get()
        3
    """

    def __init__(self, initial: Optional[T] = None):
        self._value = initial
        self._version = 0
        self._cond = threading.Condition()

    def set(self, value: T) -> int:
        """Store a value, wake waiting readers and return the new version."""
        with self._cond:
            self._value = value
            self._version += 1
            self._cond.notify_all()
            return self._version

    def get(self) -> Optional[T]:
        """Return the latest value."""
        with self._cond:
            return self._value

    def snapshot(self) -> Tuple[Optional[T], int]:
        """Return (value, version) read atomically."""
        with self._cond:
            return self._value, self._version

    @property
    def version(self) -> int:
        """Number of set() calls so far."""
        with self._cond:
            return self._version

    def wait_for_update(self, since_version: int, timeout: Optional[float] = None) -> Tuple[Optional[T], int]:
        """
        Block until the version is newer than ``since_version``.

        Args:
            since_version: Version the caller has already seen.
            timeout: Maximum wait in seconds; None waits forever.

        Returns:
            (value, version). On timeout the current (unchanged) pair is
            returned; compare the version to tell the cases apart.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._version > since_version, timeout=timeout)
            return self._value, self._version


class EventStream(Generic[T]):
    """
    Bounded, non-blocking event stream with pull and push consumers.

    Args:
        maxlen: Buffer capacity for undelivered events (>= 1).

    Attributes:
        dropped: Number of events discarded because the buffer was full.
    """

    def __init__(self, maxlen: int = 1024):
        if maxlen < 1:
            raise ValueError(f"maxlen must be >= 1, got {maxlen}")
        self._buffer = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self._subscribers: List[Callable[[T], None]] = []
        self.dropped = 0

    def publish(self, event: T) -> None:
        """
        Append an event and deliver it to subscribers.

        Subscribers are called synchronously on the publishing thread, after
        the event is buffered. An exception in a subscriber is logged and
        does not stop delivery to the others.
        """
        with self._lock:
            if len(self._buffer) == self._buffer.maxlen:
                self.dropped += 1
            self._buffer.append(event)
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception("Subscriber %r failed on %r", callback, event)

    def drain(self) -> List[T]:
        """Remove and return all buffered events, oldest first."""
        with self._lock:
            events = list(self._buffer)
            self._buffer.clear()
        return events

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """
        Register a push consumer.

        Returns:
            A function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def resize(self, maxlen: int) -> None:
        """Change the capacity, keeping the newest buffered events."""
        if maxlen < 1:
            raise ValueError(f"maxlen must be >= 1, got {maxlen}")
        with self._lock:
            self.dropped += max(0, len(self._buffer) - maxlen)
            self._buffer = deque(self._buffer, maxlen=maxlen)
