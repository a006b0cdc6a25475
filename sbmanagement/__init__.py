"""
sbmanagement: Service Bus management entity codec

Typed, validated subscription and filter descriptions and their Atom/XML
wire format.
"""

__version__ = "0.1.0"
__author__ = "Ayodele Oladeji"

from .servicebus import (
    CorrelationFilter,
    EntityStatus,
    RuleDescription,
    ServiceBusCommunicationError,
    ServiceBusError,
    SqlFilter,
    SubscriptionDescription,
    SubscriptionManagementClient,
    SubscriptionNotFoundError,
    false_filter,
    parse_subscription,
    parse_subscription_collection,
    serialize_subscription,
    true_filter,
)

__all__ = [
    "CorrelationFilter",
    "EntityStatus",
    "RuleDescription",
    "ServiceBusCommunicationError",
    "ServiceBusError",
    "SqlFilter",
    "SubscriptionDescription",
    "SubscriptionManagementClient",
    "SubscriptionNotFoundError",
    "false_filter",
    "parse_subscription",
    "parse_subscription_collection",
    "serialize_subscription",
    "true_filter",
    "__version__",
]
