"""
Bounded background dispatch of notification batches.

Group mutations hand their notifications to a NotificationDispatcher and
return immediately. A fixed pool of worker threads drains a bounded queue and
calls the publisher, retrying a few times before giving up. Publish failures
are logged and never reach the mutation caller. When the queue is full the
overflow policy decides which batch is dropped.
"""
import queue
import threading
import time
import logging
from typing import Callable, List, Optional

from teamup.config import settings
from teamup.modules.notifications.publisher import NotificationPublisher, build_publisher
from teamup.modules.notifications.schemas import NotificationMessage

logger = logging.getLogger(__name__)

DROP_OLDEST = "drop_oldest"
REJECT = "reject"
OVERFLOW_POLICIES = (DROP_OLDEST, REJECT)


class NotificationDispatcher:
    def __init__(
        self,
        publisher: NotificationPublisher,
        workers: int = 4,
        queue_size: int = 1000,
        attempts: int = 3,
        backoff_seconds: float = 0.5,
        overflow_policy: str = DROP_OLDEST,
        poll_interval: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if overflow_policy not in OVERFLOW_POLICIES:
            raise ValueError(f"Unknown overflow policy: {overflow_policy}")
        self.publisher = publisher
        self.workers = max(1, workers)
        self.attempts = max(1, attempts)
        self.backoff_seconds = backoff_seconds
        self.overflow_policy = overflow_policy
        self.poll_interval = poll_interval
        self.dropped = 0
        self.failed = 0
        self._sleep = sleep
        self._queue: "queue.Queue[List[NotificationMessage]]" = queue.Queue(maxsize=max(1, queue_size))
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._threads: List[threading.Thread] = []

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return bool(self._threads) and not self._stop_event.is_set()

    def start(self) -> None:
        with self._lock:
            if self._threads or self._stop_event.is_set():
                return
            for i in range(self.workers):
                thread = threading.Thread(
                    target=self._worker,
                    name=f"notification-worker-{i}",
                    daemon=True,
                )
                thread.start()
                self._threads.append(thread)
        logger.info(f"Notification dispatcher started with {self.workers} worker(s)")

    def submit(self, messages: List[NotificationMessage]) -> bool:
        """Queue a batch without blocking. Returns False when the batch was dropped."""
        if not messages:
            return True
        if self._stop_event.is_set():
            self.dropped += 1
            logger.warning(f"Notification dispatcher stopped, dropping {len(messages)} message(s)")
            return False

        batch = list(messages)
        with self._lock:
            try:
                self._queue.put_nowait(batch)
                return True
            except queue.Full:
                pass

            self.dropped += 1
            if self.overflow_policy == REJECT:
                logger.warning(f"Notification queue full, rejecting {len(batch)} message(s)")
                return False

            try:
                evicted = self._queue.get_nowait()
                self._queue.task_done()
                logger.warning(f"Notification queue full, dropped oldest batch of {len(evicted)} message(s)")
            except queue.Empty:
                pass
            try:
                self._queue.put_nowait(batch)
            except queue.Full:
                logger.warning(f"Notification queue full, dropping {len(batch)} message(s)")
                return False
            return True

    def drain(self, timeout: float = 5.0) -> bool:
        """Wait until every queued batch has been handled. Returns False on timeout."""
        deadline = time.monotonic() + timeout
        with self._queue.all_tasks_done:
            while self._queue.unfinished_tasks:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                self._queue.all_tasks_done.wait(remaining)
        return True

    def stop(self, wait: bool = True, timeout: Optional[float] = 10.0) -> None:
        """Stop accepting work; workers finish what is queued and exit."""
        self._stop_event.set()
        with self._lock:
            threads, self._threads = self._threads, []
        if wait:
            for thread in threads:
                thread.join(timeout)
        logger.info("Notification dispatcher stopped")

    def _worker(self) -> None:
        while True:
            try:
                batch = self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                if self._stop_event.is_set():
                    return
                continue
            try:
                self._publish(batch)
            finally:
                self._queue.task_done()

    def _publish(self, batch: List[NotificationMessage]) -> None:
        for attempt in range(1, self.attempts + 1):
            try:
                self.publisher.publish(batch)
                return
            except Exception as e:
                logger.warning(f"Notification publish attempt {attempt}/{self.attempts} failed: {str(e)}")
                if attempt < self.attempts:
                    self._sleep(self.backoff_seconds * attempt)
        self.failed += 1
        logger.error(f"Giving up on {len(batch)} notification(s) after {self.attempts} attempt(s)")


_dispatcher: Optional[NotificationDispatcher] = None
_dispatcher_initialized = False
_dispatcher_lock = threading.Lock()


def get_notification_dispatcher() -> Optional[NotificationDispatcher]:
    """Process-wide dispatcher built from settings; None when no publisher is configured."""
    global _dispatcher, _dispatcher_initialized
    with _dispatcher_lock:
        if not _dispatcher_initialized:
            publisher = build_publisher()
            if publisher is not None:
                _dispatcher = NotificationDispatcher(
                    publisher,
                    workers=settings.notification_workers,
                    queue_size=settings.notification_queue_size,
                    attempts=settings.notification_publish_attempts,
                    backoff_seconds=settings.notification_retry_backoff_seconds,
                    overflow_policy=settings.notification_overflow_policy,
                )
                _dispatcher.start()
            _dispatcher_initialized = True
        return _dispatcher


def shutdown_notification_dispatcher(wait: bool = True) -> None:
    global _dispatcher, _dispatcher_initialized
    with _dispatcher_lock:
        dispatcher, _dispatcher = _dispatcher, None
        _dispatcher_initialized = False
    if dispatcher is not None:
        dispatcher.stop(wait=wait)


def get_notification_publisher() -> Optional[NotificationPublisher]:
    """Publisher behind the process-wide dispatcher, for synchronous sends."""
    dispatcher = get_notification_dispatcher()
    return dispatcher.publisher if dispatcher is not None else None
