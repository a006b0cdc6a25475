"""
Service Bus Management Exception Hierarchy

Exception types raised while building, validating, and decoding management
entity descriptions.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

from typing import Optional, Dict, Any

from .constants import ERROR_SUBSCRIPTION_NOT_FOUND, ERROR_SUBSCRIPTION_NOT_FOUND_ON_TOPIC


class ServiceBusError(Exception):
    """
    Base exception for all Service Bus management errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code (e.g., 'EntityNotFound')
        details: Additional context (entity_type, entity_name, etc.)
    """

    error_code: str = "ServiceBusError"
    is_transient: bool = False

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.error_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# ========== Entity Errors ==========

class EntityError(ServiceBusError):
    """Base class for entity-related errors."""
    error_code = "EntityError"


class EntityNotFoundError(EntityError):
    """
    Raised when an entity does not exist, or when a management response does
    not have the shape of the requested entity.
    """
    error_code = "EntityNotFound"

    def __init__(
        self,
        entity_type: str,
        entity_name: Optional[str] = None,
        message: Optional[str] = None
    ):
        if message is None:
            if entity_name:
                message = f"{entity_type.capitalize()} '{entity_name}' not found"
            else:
                message = f"{entity_type.capitalize()} was not found"
        details = {"entity_type": entity_type}
        if entity_name:
            details["entity_name"] = entity_name
        super().__init__(message, details=details)


class SubscriptionNotFoundError(EntityNotFoundError):
    """Raised when a subscription is not found."""

    def __init__(
        self,
        topic_name: str,
        subscription_name: Optional[str] = None,
        message: Optional[str] = None
    ):
        if message is None:
            if subscription_name:
                message = ERROR_SUBSCRIPTION_NOT_FOUND_ON_TOPIC.format(
                    name=subscription_name, topic=topic_name
                )
            else:
                message = ERROR_SUBSCRIPTION_NOT_FOUND
        super().__init__("subscription", subscription_name, message)
        self.details["topic_name"] = topic_name


class InvalidEntityNameError(EntityError):
    """Raised when entity name is invalid."""
    error_code = "InvalidEntityName"

    def __init__(
        self,
        entity_type: str,
        entity_name: str,
        reason: str,
        message: Optional[str] = None
    ):
        message = message or f"Invalid {entity_type} name '{entity_name}': {reason}"
        details = {
            "entity_type": entity_type,
            "entity_name": entity_name,
            "reason": reason
        }
        super().__init__(message, details=details)
        self.reason = reason


# ========== Communication Errors ==========

class ServiceBusCommunicationError(ServiceBusError):
    """
    Raised when a management response cannot be understood.

    Wraps the original failure so that every decode problem other than
    validation and not-found surfaces with the same shape. The original
    exception is available as ``inner_error`` and as ``__cause__``.
    """
    error_code = "CommunicationError"
    is_transient = False

    def __init__(
        self,
        inner_error: Exception,
        message: Optional[str] = None
    ):
        message = message or f"Unable to process management response: {inner_error}"
        details = {
            "inner_error_type": type(inner_error).__name__,
            "inner_error": str(inner_error),
        }
        super().__init__(message, details=details)
        self.inner_error = inner_error


# ========== Utility Functions ==========

def is_transient_error(error: Exception) -> bool:
    """
    Determine if an error is transient and can be retried.

    Args:
        error: Exception to check

    Returns:
        True if error is transient and operation should be retried
    """
    if isinstance(error, ServiceBusError):
        return getattr(error, 'is_transient', False)

    # Standard transient exceptions
    if isinstance(error, (
        ConnectionError,
        ConnectionRefusedError,
        ConnectionResetError,
        TimeoutError,
    )):
        return True

    return False
