"""
Service Bus Management Models

Pydantic models for Service Bus subscription descriptions.

Every field is validated on construction and on assignment, so a description
can never hold a value the broker would reject: a failed assignment raises
``pydantic.ValidationError`` and leaves the previous value in place.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

from datetime import timedelta
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from .constants import (
    BROKER_MAX_DURATION,
    DEFAULT_LOCK_DURATION,
    DEFAULT_MAX_DELIVERY_COUNT,
    ERROR_SELF_FORWARDING,
    INFINITE,
    MAX_ALLOWED_TTL,
    MIN_ALLOWED_AUTO_DELETE_ON_IDLE,
    MIN_ALLOWED_MAX_DELIVERY_COUNT,
    MIN_ALLOWED_TTL,
)
from .exceptions import InvalidEntityNameError
from .rules import RuleDescription
from .validation import EntityNameValidator


class EntityStatus(str, Enum):
    """Status of a messaging entity."""
    ACTIVE = "Active"
    DISABLED = "Disabled"
    RESTORING = "Restoring"
    SEND_DISABLED = "SendDisabled"
    RECEIVE_DISABLED = "ReceiveDisabled"
    CREATING = "Creating"
    DELETING = "Deleting"
    RENAMING = "Renaming"
    UNKNOWN = "Unknown"


def _same_entity(left: Optional[str], right: Optional[str]) -> bool:
    """Compare two entity paths the way the broker does (case-insensitive)."""
    if left is None or right is None:
        return False
    left = EntityNameValidator.path_without_base_uri(left)
    right = EntityNameValidator.path_without_base_uri(right)
    return left.lower() == right.lower()


def _fold(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


def _check_name(validate, value: str) -> str:
    try:
        validate(value)
    except InvalidEntityNameError as e:
        raise ValueError(e.message) from e
    return value


def _never_if_unrepresentable(value: timedelta) -> timedelta:
    """Map durations the broker cannot represent to INFINITE."""
    if value >= BROKER_MAX_DURATION:
        return INFINITE
    return value


class SubscriptionDescription(BaseModel):
    """
    Service Bus Subscription Description model.

    Durations default to ``INFINITE`` ("never") for message time-to-live and
    auto-delete-on-idle. ``forward_to`` and ``forward_dead_lettered_messages_to``
    are unset (None) unless configured, and can never point back at the
    subscription's own topic.

    Two descriptions are equal when every field is equal; entity names
    compare case-insensitively.
    """
    model_config = ConfigDict(extra='forbid', validate_assignment=True)

    topic_path: str
    subscription_name: str
    lock_duration: timedelta = DEFAULT_LOCK_DURATION
    requires_session: bool = False
    default_message_time_to_live: timedelta = INFINITE
    auto_delete_on_idle: timedelta = INFINITE
    enable_dead_lettering_on_message_expiration: bool = False
    enable_dead_lettering_on_filter_evaluation_exceptions: bool = True
    max_delivery_count: int = DEFAULT_MAX_DELIVERY_COUNT
    status: EntityStatus = EntityStatus.ACTIVE
    forward_to: Optional[str] = None
    forward_dead_lettered_messages_to: Optional[str] = None
    default_rule: Optional[RuleDescription] = None

    def __init__(self, topic_path: str, subscription_name: str, **data: Any):
        super().__init__(topic_path=topic_path, subscription_name=subscription_name, **data)

    @field_validator('topic_path')
    @classmethod
    def validate_topic_path(cls, v: str, info: ValidationInfo) -> str:
        """Validate topic name and that no forwarding target points at it."""
        _check_name(EntityNameValidator.validate_topic_name, v)
        for field in ('forward_to', 'forward_dead_lettered_messages_to'):
            if _same_entity(v, info.data.get(field)):
                raise ValueError(ERROR_SELF_FORWARDING)
        return v

    @field_validator('subscription_name')
    @classmethod
    def validate_subscription_name(cls, v: str) -> str:
        """Validate subscription name."""
        return _check_name(EntityNameValidator.validate_subscription_name, v)

    @field_validator('lock_duration')
    @classmethod
    def validate_lock_duration(cls, v: timedelta) -> timedelta:
        """Validate lock duration is positive."""
        if v <= timedelta(0):
            raise ValueError("LockDuration must be positive")
        return _never_if_unrepresentable(v)

    @field_validator('default_message_time_to_live')
    @classmethod
    def validate_default_message_time_to_live(cls, v: timedelta) -> timedelta:
        """Validate TTL lies within the broker's allowed range."""
        if v < MIN_ALLOWED_TTL or v > MAX_ALLOWED_TTL:
            raise ValueError(
                f"DefaultMessageTimeToLive must be between {MIN_ALLOWED_TTL} and {MAX_ALLOWED_TTL}"
            )
        return _never_if_unrepresentable(v)

    @field_validator('auto_delete_on_idle')
    @classmethod
    def validate_auto_delete_on_idle(cls, v: timedelta) -> timedelta:
        """Validate auto-delete-on-idle is at least the broker minimum."""
        if v < MIN_ALLOWED_AUTO_DELETE_ON_IDLE:
            raise ValueError(
                f"AutoDeleteOnIdle must be at least {MIN_ALLOWED_AUTO_DELETE_ON_IDLE}"
            )
        return _never_if_unrepresentable(v)

    @field_validator('max_delivery_count')
    @classmethod
    def validate_max_delivery_count(cls, v: int) -> int:
        """Validate max delivery count is at least the broker minimum."""
        if v < MIN_ALLOWED_MAX_DELIVERY_COUNT:
            raise ValueError(
                f"MaxDeliveryCount must be at least {MIN_ALLOWED_MAX_DELIVERY_COUNT}"
            )
        return v

    @field_validator('forward_to', 'forward_dead_lettered_messages_to')
    @classmethod
    def validate_forwarding(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        """Validate forwarding target is a queue name other than the topic itself."""
        if v is None:
            return v
        _check_name(EntityNameValidator.validate_queue_name, v)
        if _same_entity(info.data.get('topic_path'), v):
            raise ValueError(ERROR_SELF_FORWARDING)
        return v

    def _comparison_key(self) -> Tuple:
        return (
            self.topic_path.lower(),
            self.subscription_name.lower(),
            self.lock_duration,
            self.requires_session,
            self.default_message_time_to_live,
            self.auto_delete_on_idle,
            self.enable_dead_lettering_on_message_expiration,
            self.enable_dead_lettering_on_filter_evaluation_exceptions,
            self.max_delivery_count,
            self.status,
            _fold(self.forward_to),
            _fold(self.forward_dead_lettered_messages_to),
            self.default_rule,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SubscriptionDescription):
            return NotImplemented
        return self._comparison_key() == other._comparison_key()
