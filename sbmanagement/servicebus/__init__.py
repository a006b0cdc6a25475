"""
Service Bus management entities.

Filter and subscription description models with their Atom/XML codecs.
"""

from .client import SubscriptionManagementClient
from .constants import INFINITE
from .exceptions import (
    EntityNotFoundError,
    InvalidEntityNameError,
    ServiceBusCommunicationError,
    ServiceBusError,
    SubscriptionNotFoundError,
    is_transient_error,
)
from .filter_codec import parse_filter, serialize_filter
from .filters import CorrelationFilter, Filter, SqlFilter, SqlFilterKind, false_filter, true_filter
from .models import EntityStatus, SubscriptionDescription
from .rules import RuleDescription
from .subscription_codec import (
    parse_subscription,
    parse_subscription_collection,
    serialize_subscription,
    subscription_to_xml,
)

__all__ = [
    "SubscriptionManagementClient",
    "INFINITE",
    "EntityNotFoundError",
    "InvalidEntityNameError",
    "ServiceBusCommunicationError",
    "ServiceBusError",
    "SubscriptionNotFoundError",
    "is_transient_error",
    "parse_filter",
    "serialize_filter",
    "CorrelationFilter",
    "Filter",
    "SqlFilter",
    "SqlFilterKind",
    "false_filter",
    "true_filter",
    "EntityStatus",
    "SubscriptionDescription",
    "RuleDescription",
    "parse_subscription",
    "parse_subscription_collection",
    "serialize_subscription",
    "subscription_to_xml",
]
