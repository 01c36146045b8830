"""
============================================================================
Customer Service v1.0.0
Service Configuration - Environment-Driven Settings
============================================================================

Reliability Level: L5 High
Input Constraints: Environment variables (optionally from a .env file)
Side Effects: Logs configuration on load

This module provides configuration management for the Customer Service:
- Environment variable parsing with type safety
- Default values for optional configuration
- Validation of required configuration (fail-closed, CFG-001)

ENVIRONMENT VARIABLES:
    - JWT_SECRET: HMAC secret for bearer tokens (REQUIRED, >= 32 chars)
    - JWT_ALGORITHM: Signing algorithm (default: HS256)
    - JWT_EXPIRATION_MINUTES: Token lifetime (default: 60)
    - BCRYPT_ROUNDS: Password hashing cost (default: 12)
    - ADMIN_PASSWORD / USER_PASSWORD: Built-in account passwords
    - RABBITMQ_HOST / RABBITMQ_PORT / RABBITMQ_USERNAME /
      RABBITMQ_PASSWORD / RABBITMQ_VHOST: Broker connection
    - CUSTOMER_EXCHANGE / CUSTOMER_CREATED_QUEUE /
      CUSTOMER_CREATED_ROUTING_KEY: Notification topology
    - NOTIFICATIONS_ENABLED: Publish creation notifications (default: true)
    - CONSUMER_PROCESSING_DELAY_SECONDS: Simulated consumer work (default: 1.0)

ERROR CODES:
    - CFG-001: Required configuration missing or invalid

============================================================================
"""

from dataclasses import dataclass
from typing import List, Optional
import logging
import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Error Codes
# =============================================================================

class ServiceConfigErrorCode:
    """Configuration error codes for audit logging."""
    CONFIG_INVALID = "CFG-001"


# =============================================================================
# Default Values
# =============================================================================

DEFAULT_JWT_ALGORITHM = "HS256"
DEFAULT_JWT_EXPIRATION_MINUTES = 60
MIN_JWT_SECRET_LENGTH = 32
DEFAULT_BCRYPT_ROUNDS = 12

DEFAULT_RABBITMQ_HOST = "localhost"
DEFAULT_RABBITMQ_PORT = 5672
DEFAULT_CUSTOMER_EXCHANGE = "customer.exchange"
DEFAULT_CUSTOMER_CREATED_QUEUE = "customer.created.queue"
DEFAULT_CUSTOMER_CREATED_ROUTING_KEY = "customer.created"
DEFAULT_CONSUMER_PROCESSING_DELAY_SECONDS = 1.0


# =============================================================================
# Configuration Exception
# =============================================================================

class ServiceConfigurationError(Exception):
    """Raised when configuration is missing or invalid (fail-closed)."""

    def __init__(self, message: str, error_code: str = ServiceConfigErrorCode.CONFIG_INVALID):
        self.error_code = error_code
        self.message = message
        super().__init__(f"[{error_code}] {message}")


# =============================================================================
# Parsing Helpers
# =============================================================================

def _read_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.lower().strip() in ("true", "1", "yes", "on")


def _read_int(name: str, default: int) -> int:
    raw = os.environ.get(name, str(default))
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning(
            f"[SERVICE-CONFIG] Invalid {name} value: {raw}, using default: {default}"
        )
        return default


def _read_float(name: str, default: float) -> float:
    raw = os.environ.get(name, str(default))
    try:
        return float(raw.strip())
    except ValueError:
        logger.warning(
            f"[SERVICE-CONFIG] Invalid {name} value: {raw}, using default: {default}"
        )
        return default


# =============================================================================
# ServiceConfig Class
# =============================================================================

@dataclass
class ServiceConfig:
    """
    Customer Service configuration.

    Reliability Level: L5 High
    Input Constraints: jwt_secret must be at least 32 characters
    Side Effects: Logs configuration on validation
    """

    jwt_secret: str = ""
    jwt_algorithm: str = DEFAULT_JWT_ALGORITHM
    jwt_expiration_minutes: int = DEFAULT_JWT_EXPIRATION_MINUTES
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS
    admin_password: str = "admin"
    user_password: str = "user"

    rabbitmq_host: str = DEFAULT_RABBITMQ_HOST
    rabbitmq_port: int = DEFAULT_RABBITMQ_PORT
    rabbitmq_username: str = "guest"
    rabbitmq_password: str = "guest"
    rabbitmq_vhost: str = "/"
    customer_exchange: str = DEFAULT_CUSTOMER_EXCHANGE
    customer_created_queue: str = DEFAULT_CUSTOMER_CREATED_QUEUE
    customer_created_routing_key: str = DEFAULT_CUSTOMER_CREATED_ROUTING_KEY
    notifications_enabled: bool = True
    consumer_processing_delay_seconds: float = DEFAULT_CONSUMER_PROCESSING_DELAY_SECONDS

    def validate(self) -> None:
        """
        Validate configuration completeness.

        Raises:
            ServiceConfigurationError: If required configuration is missing
        """
        errors: List[str] = []

        if not self.jwt_secret:
            errors.append("JWT_SECRET must be set")
        elif len(self.jwt_secret) < MIN_JWT_SECRET_LENGTH:
            errors.append(
                f"JWT_SECRET is too short ({len(self.jwt_secret)} chars), "
                f"minimum {MIN_JWT_SECRET_LENGTH} characters required"
            )

        if self.jwt_expiration_minutes <= 0:
            errors.append(
                f"JWT_EXPIRATION_MINUTES must be positive, got: {self.jwt_expiration_minutes}"
            )

        if not 4 <= self.bcrypt_rounds <= 31:
            errors.append(f"BCRYPT_ROUNDS must be between 4 and 31, got: {self.bcrypt_rounds}")

        if self.consumer_processing_delay_seconds < 0:
            errors.append(
                "CONSUMER_PROCESSING_DELAY_SECONDS must be non-negative, "
                f"got: {self.consumer_processing_delay_seconds}"
            )

        if errors:
            error_msg = "Service configuration validation failed: " + "; ".join(errors)
            logger.error(f"[{ServiceConfigErrorCode.CONFIG_INVALID}] {error_msg}")
            raise ServiceConfigurationError(error_msg)

        logger.info(
            f"[SERVICE-CONFIG] Configuration validated | "
            f"jwt_algorithm={self.jwt_algorithm} | "
            f"jwt_expiration_minutes={self.jwt_expiration_minutes} | "
            f"rabbitmq={self.rabbitmq_host}:{self.rabbitmq_port} | "
            f"notifications_enabled={self.notifications_enabled}"
        )

    @classmethod
    def from_environment(cls, validate: bool = True) -> "ServiceConfig":
        """
        Load configuration from environment variables.

        Args:
            validate: Whether to validate configuration after loading

        Raises:
            ServiceConfigurationError: If required configuration is missing
        """
        config = cls(
            jwt_secret=os.environ.get("JWT_SECRET", "").strip(),
            jwt_algorithm=os.environ.get("JWT_ALGORITHM", DEFAULT_JWT_ALGORITHM).strip(),
            jwt_expiration_minutes=_read_int(
                "JWT_EXPIRATION_MINUTES", DEFAULT_JWT_EXPIRATION_MINUTES
            ),
            bcrypt_rounds=_read_int("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS),
            admin_password=os.environ.get("ADMIN_PASSWORD", "admin"),
            user_password=os.environ.get("USER_PASSWORD", "user"),
            rabbitmq_host=os.environ.get("RABBITMQ_HOST", DEFAULT_RABBITMQ_HOST),
            rabbitmq_port=_read_int("RABBITMQ_PORT", DEFAULT_RABBITMQ_PORT),
            rabbitmq_username=os.environ.get("RABBITMQ_USERNAME", "guest"),
            rabbitmq_password=os.environ.get("RABBITMQ_PASSWORD", "guest"),
            rabbitmq_vhost=os.environ.get("RABBITMQ_VHOST", "/"),
            customer_exchange=os.environ.get("CUSTOMER_EXCHANGE", DEFAULT_CUSTOMER_EXCHANGE),
            customer_created_queue=os.environ.get(
                "CUSTOMER_CREATED_QUEUE", DEFAULT_CUSTOMER_CREATED_QUEUE
            ),
            customer_created_routing_key=os.environ.get(
                "CUSTOMER_CREATED_ROUTING_KEY", DEFAULT_CUSTOMER_CREATED_ROUTING_KEY
            ),
            notifications_enabled=_read_bool("NOTIFICATIONS_ENABLED", True),
            consumer_processing_delay_seconds=_read_float(
                "CONSUMER_PROCESSING_DELAY_SECONDS", DEFAULT_CONSUMER_PROCESSING_DELAY_SECONDS
            ),
        )

        logger.info(
            f"[SERVICE-CONFIG] Loading configuration from environment | "
            f"RABBITMQ_HOST={config.rabbitmq_host} | "
            f"NOTIFICATIONS_ENABLED={config.notifications_enabled} | "
            f"JWT_SECRET_SET={bool(config.jwt_secret)}"
        )

        if validate:
            config.validate()

        return config

    def to_dict(self) -> dict:
        """Configuration for logging; secrets are omitted."""
        return {
            "jwt_algorithm": self.jwt_algorithm,
            "jwt_expiration_minutes": self.jwt_expiration_minutes,
            "bcrypt_rounds": self.bcrypt_rounds,
            "rabbitmq_host": self.rabbitmq_host,
            "rabbitmq_port": self.rabbitmq_port,
            "rabbitmq_vhost": self.rabbitmq_vhost,
            "customer_exchange": self.customer_exchange,
            "customer_created_queue": self.customer_created_queue,
            "customer_created_routing_key": self.customer_created_routing_key,
            "notifications_enabled": self.notifications_enabled,
        }


# =============================================================================
# Module-Level Configuration Instance
# =============================================================================

_config_instance: Optional[ServiceConfig] = None


def get_service_config(validate: bool = True) -> ServiceConfig:
    """
    Get the global service configuration, loading it on first access.

    Raises:
        ServiceConfigurationError: If required configuration is missing
    """
    global _config_instance

    if _config_instance is None:
        _config_instance = ServiceConfig.from_environment(validate=validate)

    return _config_instance


def reset_service_config() -> None:
    """Clear the global configuration instance (used by tests)."""
    global _config_instance
    _config_instance = None
    logger.debug("[SERVICE-CONFIG] Configuration instance reset")
