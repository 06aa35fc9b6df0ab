"""Queue service used to connect the producer, workers and aggregator.

The pipeline only needs a FIFO of byte messages per queue name. Redis
lists provide it in deployments; the in-memory implementation serves
single-process runs and tests.
"""

import queue as stdlib_queue
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator

import structlog
from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from pipeline.config import Settings
from pipeline.exceptions import QueueConnectionError
from pipeline.redis import get_redis_connection

logger = structlog.get_logger(__name__)


class QueueService(ABC):
    """FIFO message transport with blocking receive."""

    @abstractmethod
    def declare(self, queue_name: str) -> None:
        """Make sure a queue exists and the service is reachable."""

    @abstractmethod
    def publish(self, queue_name: str, body: bytes) -> None:
        """Append a message to a queue."""

    @abstractmethod
    def receive(self, queue_name: str, timeout: float | None = None) -> bytes | None:
        """
        Take the next message from a queue.

        Args:
            queue_name: Queue to read from
            timeout: Seconds to block; None blocks until a message arrives

        Returns:
            The message body, or None if the timeout elapsed
        """

    def consume(self, queue_name: str, timeout: float | None = None) -> Iterator[bytes]:
        """Yield messages forever, polling again whenever a receive times out."""
        while True:
            body = self.receive(queue_name, timeout=timeout)
            if body is None:
                logger.debug("queue_poll_timeout", queue=queue_name, timeout=timeout)
                continue
            yield body

    def close(self) -> None:  # noqa: B027
        """Release any held connections."""


class RedisQueueService(QueueService):
    """Queue service backed by Redis lists (RPUSH / BLPOP)."""

    def __init__(self, redis_url: str, connection: Redis | None = None):
        self._url = redis_url
        self._conn = connection or get_redis_connection(redis_url)

    @property
    def connection(self) -> Redis:
        """Get the underlying Redis client."""
        return self._conn

    def declare(self, queue_name: str) -> None:
        try:
            self._conn.ping()
            pending = self._conn.llen(queue_name)
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise QueueConnectionError(self._url, str(e)) from e
        logger.info("queue_declared", queue=queue_name, pending=pending)

    def publish(self, queue_name: str, body: bytes) -> None:
        try:
            self._conn.rpush(queue_name, body)
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise QueueConnectionError(self._url, str(e)) from e

    def receive(self, queue_name: str, timeout: float | None = None) -> bytes | None:
        # BLPOP treats 0 as "block forever"
        try:
            item = self._conn.blpop([queue_name], timeout=timeout or 0)
        except (RedisConnectionError, RedisTimeoutError) as e:
            raise QueueConnectionError(self._url, str(e)) from e
        if item is None:
            return None
        _key, body = item
        return body

    def close(self) -> None:
        self._conn.close()


class MemoryQueueService(QueueService):
    """Thread-safe in-process queue service."""

    def __init__(self) -> None:
        self._queues: dict[str, stdlib_queue.Queue[bytes]] = {}
        self._lock = threading.Lock()

    def _get(self, queue_name: str) -> stdlib_queue.Queue[bytes]:
        with self._lock:
            if queue_name not in self._queues:
                self._queues[queue_name] = stdlib_queue.Queue()
            return self._queues[queue_name]

    def declare(self, queue_name: str) -> None:
        self._get(queue_name)

    def publish(self, queue_name: str, body: bytes) -> None:
        self._get(queue_name).put(body)

    def receive(self, queue_name: str, timeout: float | None = None) -> bytes | None:
        try:
            return self._get(queue_name).get(timeout=timeout)
        except stdlib_queue.Empty:
            return None

    def pending(self, queue_name: str) -> int:
        """Number of messages waiting in a queue."""
        return self._get(queue_name).qsize()


def get_queue_service(settings: Settings) -> QueueService:
    """Build the queue service selected by settings."""
    if settings.queue_backend == "memory":
        return MemoryQueueService()
    return RedisQueueService(str(settings.redis_url))
