"""
Subscription Management Client

Reads and writes subscription descriptions through a caller-supplied
management transport. The transport owns HTTP/AMQP, credentials, retries,
and timeouts; this client only builds resource paths, renders request
documents, and decodes responses.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from ..core.config_manager import CodecConfig
from ..core.runtime import configure
from .atom import to_bytes
from .models import SubscriptionDescription
from .subscription_codec import (
    parse_subscription,
    parse_subscription_collection,
    serialize_subscription,
)
from .validation import EntityNameValidator

logger = logging.getLogger(__name__)

ResponseBody = Union[str, bytes, None]

# (resource_path) -> response body
FetchFn = Callable[[str], ResponseBody]

# (resource_path, encoded xml_document) -> response body
SendFn = Callable[[str, bytes], ResponseBody]


def subscription_path(topic_path: str, subscription_name: str) -> str:
    """Resource path of a single subscription."""
    return f"{topic_path}/Subscriptions/{subscription_name}"


def subscriptions_path(topic_path: str) -> str:
    """Resource path of a topic's subscription collection."""
    return f"{topic_path}/Subscriptions"


class SubscriptionManagementClient:
    """
    Subscription operations over a management transport.

    Example:
        >>> client = SubscriptionManagementClient(fetch=transport.get, send=transport.put)
        >>> sub = client.get_subscription("orders", "audit")
        >>> sub.max_delivery_count = 5
        >>> client.update_subscription(sub)
    """

    def __init__(
        self,
        fetch: FetchFn,
        send: SendFn,
        codec_config: Optional[CodecConfig] = None
    ):
        self._fetch = fetch
        self._send = send
        self._codec_config = codec_config or CodecConfig()

    @classmethod
    def from_config(
        cls,
        fetch: FetchFn,
        send: SendFn,
        config_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None
    ) -> "SubscriptionManagementClient":
        """
        Build a client from a configuration file.

        Loads the configuration, configures package logging and renders
        documents with the configured codec settings.
        """
        config = configure(config_file=config_file, overrides=overrides)
        return cls(fetch, send, codec_config=config.codec)

    def get_subscription(self, topic_path: str, subscription_name: str) -> SubscriptionDescription:
        """
        Fetch one subscription.

        Raises:
            InvalidEntityNameError: If a name is invalid
            SubscriptionNotFoundError: If the response holds no subscription
            ServiceBusCommunicationError: If the response cannot be decoded
        """
        EntityNameValidator.validate_topic_name(topic_path)
        EntityNameValidator.validate_subscription_name(subscription_name)

        path = subscription_path(topic_path, subscription_name)
        logger.debug(f"Fetching subscription: {path}", extra={"operation": "get", "entity_path": path})
        return parse_subscription(topic_path, self._fetch(path))

    def get_subscriptions(self, topic_path: str) -> List[SubscriptionDescription]:
        """
        Fetch every subscription of a topic, in server order.

        Raises:
            InvalidEntityNameError: If the topic name is invalid
            SubscriptionNotFoundError: If the response holds no subscriptions
            ServiceBusCommunicationError: If the response cannot be decoded
        """
        EntityNameValidator.validate_topic_name(topic_path)

        path = subscriptions_path(topic_path)
        logger.debug(f"Fetching subscriptions: {path}", extra={"operation": "list", "entity_path": path})
        return parse_subscription_collection(topic_path, self._fetch(path))

    def create_subscription(self, description: SubscriptionDescription) -> SubscriptionDescription:
        """Send a new subscription and return the description the server echoes back."""
        return self._put(description, "create")

    def update_subscription(self, description: SubscriptionDescription) -> SubscriptionDescription:
        """Send an updated subscription and return the description the server echoes back."""
        return self._put(description, "update")

    def render(self, description: SubscriptionDescription) -> bytes:
        """Render the request document, encoded as its XML declaration states."""
        return to_bytes(
            serialize_subscription(description),
            xml_declaration=self._codec_config.xml_declaration,
            encoding=self._codec_config.encoding,
        )

    def _put(self, description: SubscriptionDescription, operation: str) -> SubscriptionDescription:
        path = subscription_path(description.topic_path, description.subscription_name)
        document = self.render(description)

        logger.info(
            f"Sending subscription ({operation}): {path}",
            extra={"operation": operation, "entity_path": path},
        )
        response = self._send(path, document)
        return parse_subscription(description.topic_path, response)
