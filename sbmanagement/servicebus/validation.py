"""
Service Bus Entity Name Validation

Validates queue, topic, subscription, and rule names against the broker's
naming rules before they reach an entity description or a resource path.

Author: Ayodele Oladeji
Date: 2025-12-08
"""

from typing import Optional
from urllib.parse import urlparse

from .constants import (
    MAX_QUEUE_NAME_LENGTH,
    MAX_TOPIC_NAME_LENGTH,
    MAX_SUBSCRIPTION_NAME_LENGTH,
    MAX_RULE_NAME_LENGTH,
)
from .exceptions import InvalidEntityNameError


# ========== Entity Name Validation ==========

class EntityNameValidator:
    """
    Validates entity names against Azure Service Bus naming rules.

    Queue and topic names are paths: they may contain the '/' separator
    (but not at either end) and may be given as an absolute namespace URI,
    in which case only the path part is checked. Subscription and rule
    names are single path segments.
    """

    # Characters the broker reserves in entity paths
    DISALLOWED_CHARS = ('@', '?', '#', '*')

    PATH_SEPARATOR = '/'

    URI_SCHEMES = ('sb', 'amqp', 'amqps', 'http', 'https')

    @classmethod
    def validate_queue_name(cls, name: str) -> None:
        """
        Validate queue name (also used for forwarding destinations).

        Rules:
        - Length: 1-260 characters
        - Cannot start/end with slash
        - No reserved characters

        Args:
            name: Queue name or queue URI to validate

        Raises:
            InvalidEntityNameError: If validation fails
        """
        cls._validate_entity_name(
            cls.path_without_base_uri(name), "queue", MAX_QUEUE_NAME_LENGTH, allow_separator=True
        )

    @classmethod
    def validate_topic_name(cls, name: str) -> None:
        """
        Validate topic name.

        Args:
            name: Topic name or topic URI to validate

        Raises:
            InvalidEntityNameError: If validation fails
        """
        cls._validate_entity_name(
            cls.path_without_base_uri(name), "topic", MAX_TOPIC_NAME_LENGTH, allow_separator=True
        )

    @classmethod
    def validate_subscription_name(cls, name: str) -> None:
        """
        Validate subscription name.

        Rules:
        - Length: 1-50 characters
        - No path separators
        - No reserved characters

        Args:
            name: Subscription name to validate

        Raises:
            InvalidEntityNameError: If validation fails
        """
        cls._validate_entity_name(
            name, "subscription", MAX_SUBSCRIPTION_NAME_LENGTH, allow_separator=False
        )

    @classmethod
    def validate_rule_name(cls, name: str) -> None:
        """Validate rule name (same shape as a subscription name)."""
        cls._validate_entity_name(name, "rule", MAX_RULE_NAME_LENGTH, allow_separator=False)

    @classmethod
    def path_without_base_uri(cls, name: Optional[str]) -> Optional[str]:
        """Strip scheme and host from an absolute entity URI, leaving the entity path."""
        if not name:
            return name

        parsed = urlparse(name)
        if parsed.scheme.lower() in cls.URI_SCHEMES and parsed.netloc:
            return parsed.path.strip(cls.PATH_SEPARATOR)

        return name

    @classmethod
    def _validate_entity_name(
        cls,
        name: Optional[str],
        entity_type: str,
        max_length: int,
        allow_separator: bool
    ) -> None:
        """Internal validation logic."""
        if name is None or not name.strip():
            raise InvalidEntityNameError(
                entity_type,
                name or "",
                "Name cannot be empty"
            )

        if len(name) > max_length:
            raise InvalidEntityNameError(
                entity_type,
                name,
                f"Name exceeds maximum length of {max_length} characters"
            )

        for char in cls.DISALLOWED_CHARS:
            if char in name:
                raise InvalidEntityNameError(
                    entity_type,
                    name,
                    f"Name contains disallowed character: '{char}'"
                )

        if allow_separator:
            if name.startswith(cls.PATH_SEPARATOR) or name.endswith(cls.PATH_SEPARATOR):
                raise InvalidEntityNameError(
                    entity_type,
                    name,
                    "Name cannot start or end with slash"
                )
        elif cls.PATH_SEPARATOR in name:
            raise InvalidEntityNameError(
                entity_type,
                name,
                "Name cannot contain slash"
            )
