"""
Service Bus Management Constants

Centralized constants for XML namespaces, entity bounds, and error messages.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

from datetime import timedelta

# Error message templates
ERROR_SUBSCRIPTION_NOT_FOUND = "Subscription was not found"
ERROR_SUBSCRIPTION_NOT_FOUND_ON_TOPIC = "Subscription '{name}' not found on topic '{topic}'"
ERROR_SELF_FORWARDING = "Entity cannot have auto-forwarding policy to itself"

# XML namespaces
ATOM_NS = "http://www.w3.org/2005/Atom"
SB_NS = "http://schemas.microsoft.com/netservices/2010/10/servicebus/connect"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
XSD_NS = "http://www.w3.org/2001/XMLSchema"

# XML constants
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'
XML_MEDIA_TYPE = "application/xml"

# Duration sentinel for "never expires" / "never auto-delete"
INFINITE = timedelta.max

# Largest duration the broker can represent (P10675199DT2H48M5.4775807S).
# Anything at or beyond it is read back as INFINITE.
BROKER_MAX_DURATION = timedelta(days=10675199, hours=2, minutes=48, seconds=5, microseconds=477580)

# Subscription defaults
DEFAULT_LOCK_DURATION = timedelta(seconds=60)
DEFAULT_MAX_DELIVERY_COUNT = 10

# Entity bounds
MIN_ALLOWED_TTL = timedelta(seconds=1)
MAX_ALLOWED_TTL = INFINITE
MIN_ALLOWED_AUTO_DELETE_ON_IDLE = timedelta(minutes=5)
MIN_ALLOWED_MAX_DELIVERY_COUNT = 1

# Size limits
MAX_QUEUE_NAME_LENGTH = 260
MAX_TOPIC_NAME_LENGTH = 260
MAX_SUBSCRIPTION_NAME_LENGTH = 50
MAX_RULE_NAME_LENGTH = 50

# Filter constants
MAX_SQL_EXPRESSION_LENGTH = 1024
DEFAULT_RULE_NAME = "$Default"
TRUE_FILTER_EXPRESSION = "1=1"
FALSE_FILTER_EXPRESSION = "1=0"
