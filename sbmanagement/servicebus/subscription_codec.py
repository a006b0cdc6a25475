"""
Subscription Description Codec

Converts between ``SubscriptionDescription`` models and the Atom documents
exchanged with the management endpoint.

Read path: the response body must be an ``entry`` (single subscription) or a
``feed`` of entries (collection). Each payload child element with a known name
is converted and applied through the model's validated fields; unknown
elements are skipped so that newer server properties do not break older
clients.

Write path: the description is rendered in the fixed element order the
broker expects. ``INFINITE`` durations and unset forwarding targets are
omitted entirely; on re-parse an absent element leaves the default in place.

Error mapping:
- wrong root element, empty document, empty feed, or missing
  ``content/SubscriptionDescription``: SubscriptionNotFoundError
- anything else that goes wrong while decoding (malformed XML, bad values,
  values the model rejects): ServiceBusCommunicationError wrapping the cause

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Callable, Dict, List, Tuple, Union

from .atom import (
    build_entry,
    build_payload,
    entry_content,
    entry_title,
    feed_entries,
    is_empty,
    local_name,
    parse_document,
    qname,
    to_xml,
)
from .durations import format_duration, is_infinite, parse_duration
from .exceptions import (
    ServiceBusCommunicationError,
    ServiceBusError,
    SubscriptionNotFoundError,
)
from .models import EntityStatus, SubscriptionDescription
from .rules import RuleDescription

logger = logging.getLogger(__name__)

PAYLOAD_NAME = "SubscriptionDescription"
DEFAULT_RULE_ELEMENT = "DefaultRuleDescription"


def _text(element: ET.Element) -> str:
    return (element.text or "").strip()


def _parse_bool(element: ET.Element) -> bool:
    value = _text(element).lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"Invalid boolean value for {local_name(element.tag)}: {element.text!r}")


def _parse_int(element: ET.Element) -> int:
    return int(_text(element))


def _parse_duration(element: ET.Element):
    return parse_duration(_text(element))


def _parse_status(element: ET.Element) -> EntityStatus:
    return EntityStatus(_text(element))


def _parse_optional_name(element: ET.Element):
    return _text(element) or None


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def _add(payload: ET.Element, name: str, text: str) -> None:
    ET.SubElement(payload, qname(name)).text = text


# Payload element name -> (model field, converter)
FIELD_PARSERS: Dict[str, Tuple[str, Callable[[ET.Element], Any]]] = {
    "RequiresSession": ("requires_session", _parse_bool),
    "DeadLetteringOnMessageExpiration": ("enable_dead_lettering_on_message_expiration", _parse_bool),
    "DeadLetteringOnFilterEvaluationExceptions": (
        "enable_dead_lettering_on_filter_evaluation_exceptions", _parse_bool
    ),
    "LockDuration": ("lock_duration", _parse_duration),
    "DefaultMessageTimeToLive": ("default_message_time_to_live", _parse_duration),
    "MaxDeliveryCount": ("max_delivery_count", _parse_int),
    "Status": ("status", _parse_status),
    "AutoDeleteOnIdle": ("auto_delete_on_idle", _parse_duration),
    "ForwardTo": ("forward_to", _parse_optional_name),
    "ForwardDeadLetteredMessagesTo": ("forward_dead_lettered_messages_to", _parse_optional_name),
    DEFAULT_RULE_ELEMENT: ("default_rule", RuleDescription.from_element),
}


def _parse_entry(topic_path: str, entry: ET.Element) -> SubscriptionDescription:
    """Build a description from one ``entry`` element."""
    try:
        name = entry_title(entry)
        if name is None:
            raise ValueError("Entry has no title")

        # The title is validated before the payload is looked up, so an
        # invalid name is a communication error even when content is missing.
        description = SubscriptionDescription(topic_path, name)

        payload = entry_content(entry, PAYLOAD_NAME)
        if payload is None:
            raise SubscriptionNotFoundError(topic_path)

        for element in payload:
            parser = FIELD_PARSERS.get(local_name(element.tag))
            if parser is None:
                continue
            field, convert = parser
            setattr(description, field, convert(element))

        logger.debug(f"Parsed subscription '{name}' on topic '{topic_path}'")
        return description

    except ServiceBusError:
        raise
    except Exception as e:
        logger.warning(
            f"Failed to parse subscription entry on topic '{topic_path}': {e}",
            exc_info=True,
        )
        raise ServiceBusCommunicationError(e) from e


def _parse_root(topic_path: str, xml_content: Union[str, bytes, None]):
    try:
        return parse_document(xml_content)
    except ET.ParseError as e:
        logger.warning(f"Malformed subscription response for topic '{topic_path}': {e}")
        raise ServiceBusCommunicationError(e) from e


def parse_subscription(topic_path: str, xml_content: Union[str, bytes, None]) -> SubscriptionDescription:
    """
    Parse a single-subscription response.

    Args:
        topic_path: Topic the subscription belongs to
        xml_content: Atom ``entry`` document

    Returns:
        Validated subscription description

    Raises:
        SubscriptionNotFoundError: If the document is not a non-empty entry
        ServiceBusCommunicationError: If the document cannot be decoded
    """
    root = _parse_root(topic_path, xml_content)
    if root is not None and not is_empty(root) and local_name(root.tag) == "entry":
        return _parse_entry(topic_path, root)

    raise SubscriptionNotFoundError(topic_path)


def parse_subscription_collection(
    topic_path: str,
    xml_content: Union[str, bytes, None]
) -> List[SubscriptionDescription]:
    """
    Parse a subscription list response.

    An empty feed is reported the same way as a missing one.

    Args:
        topic_path: Topic the subscriptions belong to
        xml_content: Atom ``feed`` document

    Returns:
        Subscription descriptions in document order

    Raises:
        SubscriptionNotFoundError: If the document is not a feed with entries
        ServiceBusCommunicationError: If an entry cannot be decoded
    """
    root = _parse_root(topic_path, xml_content)
    if root is not None and not is_empty(root) and local_name(root.tag) == "feed":
        entries = feed_entries(root)
        if entries:
            return [_parse_entry(topic_path, entry) for entry in entries]

    raise SubscriptionNotFoundError(topic_path)


def serialize_subscription(description: SubscriptionDescription) -> ET.Element:
    """
    Build the ``entry`` element for a create/update request.

    Args:
        description: Subscription to serialize

    Returns:
        The Atom ``entry`` element
    """
    payload = build_payload(PAYLOAD_NAME)

    _add(payload, "LockDuration", format_duration(description.lock_duration))
    _add(payload, "RequiresSession", _format_bool(description.requires_session))
    if not is_infinite(description.default_message_time_to_live):
        _add(payload, "DefaultMessageTimeToLive", format_duration(description.default_message_time_to_live))
    _add(payload, "DeadLetteringOnMessageExpiration", _format_bool(
        description.enable_dead_lettering_on_message_expiration
    ))
    _add(payload, "DeadLetteringOnFilterEvaluationExceptions", _format_bool(
        description.enable_dead_lettering_on_filter_evaluation_exceptions
    ))
    if description.default_rule is not None:
        payload.append(description.default_rule.to_element(DEFAULT_RULE_ELEMENT))
    _add(payload, "MaxDeliveryCount", str(description.max_delivery_count))
    _add(payload, "Status", description.status.value)
    if description.forward_to is not None:
        _add(payload, "ForwardTo", description.forward_to)
    if description.forward_dead_lettered_messages_to is not None:
        _add(payload, "ForwardDeadLetteredMessagesTo", description.forward_dead_lettered_messages_to)
    if not is_infinite(description.auto_delete_on_idle):
        _add(payload, "AutoDeleteOnIdle", format_duration(description.auto_delete_on_idle))

    return build_entry(payload)


def subscription_to_xml(
    description: SubscriptionDescription,
    xml_declaration: bool = True
) -> str:
    """Render a subscription description as an Atom entry document."""
    return to_xml(serialize_subscription(description), xml_declaration=xml_declaration)
