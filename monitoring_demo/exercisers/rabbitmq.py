"""
Message queue exerciser (RabbitMQ)

A producer and a consumer run side by side, each on its own connection
(pika connections must not be shared between threads):

    producer:  publish -> offer signal ---+
                                          |  one-slot hand-off
    consumer:  take signal -> receive <---+

The hand-off holds at most one signal, so the producer can only run one
message ahead of the consumer. Whichever side fails first decides the
error; the stop event then unblocks the other side.
"""
import queue
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional

import pika

from monitoring_demo.core.logger import get_logger
from monitoring_demo.core.addresses import with_scheme
from monitoring_demo.exercisers.base import RESOURCE_NAME, Exerciser
from monitoring_demo.services.budget import KeepGoing

logger = get_logger(__name__)

# End-of-stream marker on the hand-off
_DONE = object()

POLL_INTERVAL = 0.1


def _blocking_connection(url: str) -> pika.BlockingConnection:
    return pika.BlockingConnection(pika.URLParameters(url))


def _offer(handoff: queue.Queue, item: Any, stop: threading.Event) -> bool:
    """Put `item` on the hand-off, giving up once `stop` is set"""
    while not stop.is_set():
        try:
            handoff.put(item, timeout=POLL_INTERVAL)
            return True
        except queue.Full:
            continue
    return False


def _take(handoff: queue.Queue, stop: threading.Event) -> Optional[Any]:
    """Next item from the hand-off, or None once `stop` is set"""
    while not stop.is_set():
        try:
            return handoff.get(timeout=POLL_INTERVAL)
        except queue.Empty:
            continue
    return None


class RabbitMQExerciser(Exerciser):
    """Publish empty messages and consume each one as it is signalled"""

    name = "rabbitmq"
    label = "RabbitMQ"
    style = "btn-default"
    has_schema = True

    def __init__(
        self,
        url: str,
        teardown: bool = True,
        consume_timeout: float = 5.0,
        connection_factory: Callable[[str], Any] = _blocking_connection,
    ):
        super().__init__(with_scheme(url, "amqp"), teardown)
        self.consume_timeout = consume_timeout
        self.connection_factory = connection_factory

    def exercise(self, keep_going: KeepGoing) -> int:
        handoff: queue.Queue = queue.Queue(maxsize=1)
        errors: queue.Queue = queue.Queue()
        stop = threading.Event()

        def guarded(fn, *args):
            try:
                return fn(*args)
            except Exception as e:
                errors.put(e)
                stop.set()
                raise

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="rabbitmq") as pool:
            producer = pool.submit(guarded, self._produce, keep_going, handoff, stop)
            consumer = pool.submit(guarded, self._consume, handoff, stop)

            wait([producer, consumer], return_when=FIRST_EXCEPTION)

            if not errors.empty():
                stop.set()
                raise errors.get_nowait()

            # no error so far, the consumer finishes after the producer's end marker
            received = consumer.result()
            published = producer.result()

        logger.debug("RabbitMQ exchange complete", published=published, received=received)
        return published

    def _declare(self, channel) -> None:
        channel.queue_declare(
            queue=RESOURCE_NAME,
            durable=False,
            auto_delete=self.teardown,
        )

    def _produce(self, keep_going: KeepGoing, handoff: queue.Queue, stop: threading.Event) -> int:
        connection = self.connection_factory(self.url)
        published = 0

        try:
            channel = connection.channel()
            self._declare(channel)

            while not stop.is_set() and keep_going():
                channel.basic_publish(
                    exchange="",
                    routing_key=RESOURCE_NAME,
                    body=b"",
                    properties=pika.BasicProperties(content_type="text/plain"),
                )
                published += 1

                if not _offer(handoff, True, stop):
                    break
        finally:
            _offer(handoff, _DONE, stop)
            connection.close()

        return published

    def _consume(self, handoff: queue.Queue, stop: threading.Event) -> int:
        connection = self.connection_factory(self.url)
        received = 0

        try:
            channel = connection.channel()
            self._declare(channel)

            messages = channel.consume(
                RESOURCE_NAME,
                auto_ack=True,
                inactivity_timeout=self.consume_timeout,
            )

            while True:
                signal = _take(handoff, stop)
                if signal is None or signal is _DONE:
                    break

                method, _, _ = next(messages)
                if method is None:
                    raise TimeoutError(
                        f"no message on {RESOURCE_NAME} within {self.consume_timeout}s"
                    )
                received += 1

            channel.cancel()
        finally:
            connection.close()

        return received
