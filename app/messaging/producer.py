"""
============================================================================
Customer Service v1.0.0
Customer Message Producer - RabbitMQ Creation Notifications
============================================================================

Reliability Level: L4 Standard
Input Constraints: CustomerView of a committed customer
Side Effects: Publishes to RabbitMQ

TOPOLOGY:
    exchange      customer.exchange        (topic, durable)
    queue         customer.created.queue   (durable)
    routing key   customer.created

Messages are JSON (camelCase CustomerView) with persistent delivery mode.
Publishing is fire-and-forget: no publisher confirms are awaited.

A pika BlockingConnection is not thread-safe, so the producer serialises
access to its single connection with a lock.

============================================================================
"""

import json
import logging
import threading
from typing import Callable, Optional

import pika
from pika.exceptions import AMQPError

from services.customer_errors import NotificationError
from services.customer_models import CustomerView
from services.customer_service import CustomerNotificationPublisher, NullCustomerPublisher
from services.service_config import ServiceConfig, get_service_config

logger = logging.getLogger(__name__)

CONTENT_TYPE_JSON = "application/json"
PERSISTENT_DELIVERY_MODE = 2

# Request-path connections (publish, health probe) fail fast
REQUEST_SOCKET_TIMEOUT_SECONDS = 2.0
REQUEST_BLOCKED_CONNECTION_TIMEOUT_SECONDS = 5.0


def build_connection_parameters(
    config: ServiceConfig,
    connection_attempts: int = 1,
    retry_delay: float = 2.0,
    socket_timeout: float = REQUEST_SOCKET_TIMEOUT_SECONDS,
    blocked_connection_timeout: float = REQUEST_BLOCKED_CONNECTION_TIMEOUT_SECONDS,
) -> pika.ConnectionParameters:
    """
    Connection parameters for the configured broker.

    Defaults make a single attempt with a short socket timeout so that a
    down broker does not stall API requests holding the producer lock.
    """
    return pika.ConnectionParameters(
        host=config.rabbitmq_host,
        port=config.rabbitmq_port,
        virtual_host=config.rabbitmq_vhost,
        credentials=pika.PlainCredentials(config.rabbitmq_username, config.rabbitmq_password),
        heartbeat=600,
        blocked_connection_timeout=blocked_connection_timeout,
        connection_attempts=connection_attempts,
        retry_delay=retry_delay,
        socket_timeout=socket_timeout,
    )


def declare_topology(channel, config: ServiceConfig) -> None:
    """Declare the customer exchange, creation queue and their binding."""
    channel.exchange_declare(
        exchange=config.customer_exchange,
        exchange_type="topic",
        durable=True,
    )
    channel.queue_declare(queue=config.customer_created_queue, durable=True)
    channel.queue_bind(
        exchange=config.customer_exchange,
        queue=config.customer_created_queue,
        routing_key=config.customer_created_routing_key,
    )


def check_broker_connection(
    config: Optional[ServiceConfig] = None,
    connection_factory: Callable = pika.BlockingConnection,
) -> bool:
    """
    Open and close a broker connection.

    Raises:
        ConnectionError: If the broker is unreachable
    """
    config = config or get_service_config()
    try:
        connection = connection_factory(build_connection_parameters(config))
        connection.close()
        return True
    except AMQPError as e:
        raise ConnectionError(f"RabbitMQ connection failed: {e!r}") from e


class CustomerMessageProducer(CustomerNotificationPublisher):
    """
    Publishes ``customer.created`` notifications.

    Args:
        config: Service configuration (broker and topology)
        connection_factory: Builds a connection from parameters
            (``pika.BlockingConnection`` by default)
    """

    def __init__(
        self,
        config: ServiceConfig,
        connection_factory: Callable = pika.BlockingConnection,
    ):
        self._config = config
        self._connection_factory = connection_factory
        self._connection = None
        self._channel = None
        self._lock = threading.Lock()

    def _ensure_channel(self):
        if self._connection is None or self._connection.is_closed:
            self._connection = self._connection_factory(build_connection_parameters(self._config))
            self._channel = None
        if self._channel is None or self._channel.is_closed:
            self._channel = self._connection.channel()
            declare_topology(self._channel, self._config)
            logger.info(
                f"[MESSAGING] Connected to RabbitMQ | host={self._config.rabbitmq_host} | "
                f"exchange={self._config.customer_exchange}"
            )
        return self._channel

    def _discard_connection(self) -> None:
        connection, self._connection, self._channel = self._connection, None, None
        if connection is not None and not connection.is_closed:
            try:
                connection.close()
            except AMQPError as e:
                logger.debug(f"[MESSAGING] Ignoring error while closing connection | error={e!r}")

    def publish_customer_created(self, customer: CustomerView) -> None:
        """
        Raises:
            NotificationError: If the broker rejects or can not be reached
        """
        logger.info(f"[MESSAGING] Sending customer creation message | customer_id={customer.id}")
        body = json.dumps(customer.to_dict())

        with self._lock:
            try:
                channel = self._ensure_channel()
                channel.basic_publish(
                    exchange=self._config.customer_exchange,
                    routing_key=self._config.customer_created_routing_key,
                    body=body,
                    properties=pika.BasicProperties(
                        content_type=CONTENT_TYPE_JSON,
                        delivery_mode=PERSISTENT_DELIVERY_MODE,
                    ),
                )
            except AMQPError as e:
                self._discard_connection()
                raise NotificationError(
                    f"Failed to publish customer creation message for ID {customer.id}: {e!r}"
                ) from e

        logger.info(f"[MESSAGING] Customer creation message sent | customer_id={customer.id}")

    def close(self) -> None:
        with self._lock:
            self._discard_connection()


# =============================================================================
# Module-Level Producer Instance
# =============================================================================

_producer_instance: Optional[CustomerNotificationPublisher] = None
_producer_lock = threading.Lock()


def get_message_producer() -> CustomerNotificationPublisher:
    """
    Global notification publisher (FastAPI dependency).

    Returns a NullCustomerPublisher when NOTIFICATIONS_ENABLED is false.
    """
    global _producer_instance
    with _producer_lock:
        if _producer_instance is None:
            config = get_service_config()
            if config.notifications_enabled:
                _producer_instance = CustomerMessageProducer(config)
            else:
                _producer_instance = NullCustomerPublisher()
    return _producer_instance


def shutdown_message_producer() -> None:
    global _producer_instance
    with _producer_lock:
        if isinstance(_producer_instance, CustomerMessageProducer):
            _producer_instance.close()
        _producer_instance = None
