"""
============================================================================
Customer Service v1.0.0
Customer Message Consumer - Asynchronous Post-Creation Processing
============================================================================

Reliability Level: L4 Standard
Input Constraints: JSON CustomerView messages on customer.created.queue
Side Effects: Logs follow-up actions, acknowledges messages

Follow-up actions for a new customer:
    1. Welcome email
    2. Analytics update
    3. Downstream integrations

Malformed messages, and messages whose processing fails, are rejected
without requeue so they can not loop or stop the worker.

USAGE:
    python -m app.messaging.consumer

============================================================================
"""

import json
import logging
import os
import time
from typing import Callable, Optional

import pika
from dotenv import load_dotenv

from app.messaging.producer import build_connection_parameters, declare_topology
from services.customer_models import CustomerView
from services.service_config import ServiceConfig, get_service_config

logger = logging.getLogger(__name__)

# The long-running worker retries the broker on startup
CONNECTION_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 2.0
SOCKET_TIMEOUT_SECONDS = 10.0
BLOCKED_CONNECTION_TIMEOUT_SECONDS = 300.0


class CustomerMessageConsumer:
    """
    Consumes customer creation notifications.

    Args:
        config: Service configuration (broker, topology, processing delay)
        connection_factory: Builds a connection from parameters
        sleep: Delay function used to simulate processing work
    """

    def __init__(
        self,
        config: ServiceConfig,
        connection_factory: Callable = pika.BlockingConnection,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._config = config
        self._connection_factory = connection_factory
        self._sleep = sleep
        self._connection = None
        self._channel = None

    def process_customer_creation(self, customer: CustomerView) -> None:
        logger.info(
            f"[CONSUMER] Received customer creation message | customer_id={customer.id}"
        )
        logger.info("[CONSUMER] Processing customer data asynchronously")
        self._sleep(self._config.consumer_processing_delay_seconds)

        logger.info(
            f"[CONSUMER] Sending welcome email | "
            f"customer={customer.first_name} {customer.last_name}"
        )
        logger.info("[CONSUMER] Updating analytics with new customer information")
        logger.info("[CONSUMER] Notifying other systems about new customer")
        logger.info(
            f"[CONSUMER] Customer creation message processed | customer_id={customer.id}"
        )

    def on_message(self, channel, method, properties, body: bytes) -> None:
        """pika ``on_message_callback``: decode, process, acknowledge."""
        try:
            customer = CustomerView.from_dict(json.loads(body))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(
                f"[CONSUMER] Rejecting malformed customer message | "
                f"delivery_tag={method.delivery_tag} | error={e!r}"
            )
            channel.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
            return

        try:
            self.process_customer_creation(customer)
        except Exception as e:
            logger.exception(
                f"[CONSUMER] Processing failed, rejecting message | "
                f"customer_id={customer.id} | delivery_tag={method.delivery_tag} | error={e!r}"
            )
            channel.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
            return

        channel.basic_ack(delivery_tag=method.delivery_tag)

    def run(self) -> None:
        """Block consuming until interrupted."""
        self._connection = self._connection_factory(
            build_connection_parameters(
                self._config,
                connection_attempts=CONNECTION_ATTEMPTS,
                retry_delay=RETRY_DELAY_SECONDS,
                socket_timeout=SOCKET_TIMEOUT_SECONDS,
                blocked_connection_timeout=BLOCKED_CONNECTION_TIMEOUT_SECONDS,
            )
        )
        self._channel = self._connection.channel()
        declare_topology(self._channel, self._config)
        self._channel.basic_qos(prefetch_count=1)
        self._channel.basic_consume(
            queue=self._config.customer_created_queue,
            on_message_callback=self.on_message,
        )

        logger.info(
            f"[CONSUMER] Waiting for messages | queue={self._config.customer_created_queue}"
        )
        try:
            self._channel.start_consuming()
        except KeyboardInterrupt:
            logger.info("[CONSUMER] Interrupted, stopping")
            self._channel.stop_consuming()
        finally:
            self.close()

    def close(self) -> None:
        if self._connection is not None and not self._connection.is_closed:
            self._connection.close()
        self._connection = None
        self._channel = None


def main(config: Optional[ServiceConfig] = None) -> None:
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    CustomerMessageConsumer(config or get_service_config(validate=False)).run()


if __name__ == "__main__":
    main()
