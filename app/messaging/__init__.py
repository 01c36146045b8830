# ============================================================================
# Customer Service v1.0.0
# Messaging Module - RabbitMQ Producer & Consumer
# ============================================================================

from app.messaging.producer import (
    CustomerMessageProducer,
    check_broker_connection,
    get_message_producer,
    shutdown_message_producer,
)

__all__ = [
    "CustomerMessageProducer",
    "check_broker_connection",
    "get_message_producer",
    "shutdown_message_producer",
]
