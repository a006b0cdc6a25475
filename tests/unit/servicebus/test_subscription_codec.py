"""
Unit tests for the subscription description codec.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import xml.etree.ElementTree as ET
from datetime import timedelta

import pytest
from pydantic import ValidationError

from sbmanagement.servicebus.atom import entry_content
from sbmanagement.servicebus.constants import ATOM_NS, INFINITE, SB_NS, XSI_NS
from sbmanagement.servicebus.exceptions import (
    EntityNotFoundError,
    ServiceBusCommunicationError,
    SubscriptionNotFoundError,
)
from sbmanagement.servicebus.filters import CorrelationFilter, SqlFilter, false_filter
from sbmanagement.servicebus.models import EntityStatus, SubscriptionDescription
from sbmanagement.servicebus.rules import RuleDescription
from sbmanagement.servicebus.subscription_codec import (
    parse_subscription,
    parse_subscription_collection,
    serialize_subscription,
    subscription_to_xml,
)


def _entry(title: str, payload: str, with_content: bool = True) -> str:
    content = (
        f'<content type="application/xml">'
        f'<SubscriptionDescription xmlns="{SB_NS}" xmlns:i="{XSI_NS}">{payload}</SubscriptionDescription>'
        f'</content>'
    ) if with_content else ""
    return (
        f'<entry xmlns="{ATOM_NS}">'
        f'<id>https://contoso.servicebus.windows.net/topicA/Subscriptions/{title}</id>'
        f'<title type="text">{title}</title>'
        f'<updated>2025-12-05T10:00:00Z</updated>'
        f'{content}'
        f'</entry>'
    )


def _feed(*entries: str) -> str:
    return (
        f'<feed xmlns="{ATOM_NS}">'
        f'<title type="text">Subscriptions</title>'
        f'{"".join(entries)}'
        f'</feed>'
    )


SERVER_ENTRY = _entry(
    "audit",
    "<LockDuration>PT1M</LockDuration>"
    "<RequiresSession>true</RequiresSession>"
    "<DefaultMessageTimeToLive>P10675199DT2H48M5.4775807S</DefaultMessageTimeToLive>"
    "<DeadLetteringOnMessageExpiration>true</DeadLetteringOnMessageExpiration>"
    "<DeadLetteringOnFilterEvaluationExceptions>false</DeadLetteringOnFilterEvaluationExceptions>"
    "<MessageCount>0</MessageCount>"
    "<MaxDeliveryCount>7</MaxDeliveryCount>"
    "<EnableBatchedOperations>true</EnableBatchedOperations>"
    "<Status>Disabled</Status>"
    "<ForwardTo>archive</ForwardTo>"
    "<CreatedAt>2025-12-05T10:00:00Z</CreatedAt>"
    "<AutoDeleteOnIdle>P7D</AutoDeleteOnIdle>"
    "<EntityAvailabilityStatus>Available</EntityAvailabilityStatus>"
)


class TestParseSubscription:
    """Test single-entry parsing."""

    def test_scenario_without_namespaces(self):
        """Test a bare entry document with two fields set."""
        xml = (
            "<entry><title>sub1</title><content><SubscriptionDescription>"
            "<LockDuration>PT45S</LockDuration><MaxDeliveryCount>5</MaxDeliveryCount>"
            "</SubscriptionDescription></content></entry>"
        )
        sub = parse_subscription("topicA", xml)

        expected = SubscriptionDescription("topicA", "sub1")
        expected.lock_duration = timedelta(seconds=45)
        expected.max_delivery_count = 5

        assert sub.topic_path == "topicA"
        assert sub.subscription_name == "sub1"
        assert sub.lock_duration == timedelta(seconds=45)
        assert sub.max_delivery_count == 5
        assert sub == expected

    def test_server_entry(self):
        """Test a full server response, including unknown elements."""
        sub = parse_subscription("topicA", SERVER_ENTRY)

        assert sub.subscription_name == "audit"
        assert sub.lock_duration == timedelta(minutes=1)
        assert sub.requires_session is True
        assert sub.default_message_time_to_live == INFINITE
        assert sub.enable_dead_lettering_on_message_expiration is True
        assert sub.enable_dead_lettering_on_filter_evaluation_exceptions is False
        assert sub.max_delivery_count == 7
        assert sub.status == EntityStatus.DISABLED
        assert sub.forward_to == "archive"
        assert sub.auto_delete_on_idle == timedelta(days=7)

    def test_bytes_input(self):
        """Test response bodies may be bytes."""
        sub = parse_subscription("topicA", SERVER_ENTRY.encode("utf-8"))
        assert sub.subscription_name == "audit"

    def test_boolean_case_insensitive(self):
        """Test booleans parse regardless of case."""
        sub = parse_subscription("topicA", _entry("s", "<RequiresSession> True </RequiresSession>"))
        assert sub.requires_session is True

    def test_empty_forward_to_is_unset(self):
        """Test an empty ForwardTo element leaves forwarding unset."""
        sub = parse_subscription("topicA", _entry("s", "<ForwardTo/>"))
        assert sub.forward_to is None

    @pytest.mark.parametrize("xml", [
        None,
        "",
        "   ",
        "<entry/>",
        f'<entry xmlns="{ATOM_NS}"></entry>',
        _feed(_entry("s", "")),
        f'<error><code>404</code></error>',
    ])
    def test_not_found(self, xml):
        """Test empty or wrongly shaped documents are not-found."""
        with pytest.raises(SubscriptionNotFoundError) as exc_info:
            parse_subscription("topicA", xml)
        assert exc_info.value.error_code == "EntityNotFound"
        assert exc_info.value.details["topic_name"] == "topicA"

    def test_missing_payload_is_not_found(self):
        """Test an entry without a SubscriptionDescription is not-found."""
        with pytest.raises(EntityNotFoundError):
            parse_subscription("topicA", _entry("s", "", with_content=False))

    def test_malformed_xml(self):
        """Test malformed XML is a communication error."""
        with pytest.raises(ServiceBusCommunicationError) as exc_info:
            parse_subscription("topicA", "<entry><title>")
        assert isinstance(exc_info.value.inner_error, ET.ParseError)
        assert exc_info.value.__cause__ is exc_info.value.inner_error

    @pytest.mark.parametrize("payload,cause", [
        ("<RequiresSession>yes</RequiresSession>", ValueError),
        ("<MaxDeliveryCount>ten</MaxDeliveryCount>", ValueError),
        ("<LockDuration>60</LockDuration>", ValueError),
        ("<Status>Paused</Status>", ValueError),
        ("<MaxDeliveryCount>0</MaxDeliveryCount>", ValidationError),
        ("<LockDuration>PT0S</LockDuration>", ValidationError),
        ("<ForwardTo>topicA</ForwardTo>", ValidationError),
    ])
    def test_bad_values_wrapped(self, payload, cause):
        """Test bad or out-of-range values surface as communication errors."""
        with pytest.raises(ServiceBusCommunicationError) as exc_info:
            parse_subscription("topicA", _entry("s", payload))
        assert isinstance(exc_info.value.inner_error, cause)
        assert exc_info.value.is_transient is False

    def test_missing_title_wrapped(self):
        """Test an entry without a title is a communication error."""
        xml = f'<entry xmlns="{ATOM_NS}"><content><SubscriptionDescription xmlns="{SB_NS}"/></content></entry>'
        with pytest.raises(ServiceBusCommunicationError):
            parse_subscription("topicA", xml)

    def test_invalid_title_checked_before_content(self):
        """Test an invalid name wins over missing content."""
        with pytest.raises(ServiceBusCommunicationError) as exc_info:
            parse_subscription("topicA", _entry("bad/name", "", with_content=False))
        assert isinstance(exc_info.value.inner_error, ValidationError)

    def test_valid_title_without_content_not_found(self):
        """Test a valid name with no content is not-found."""
        with pytest.raises(SubscriptionNotFoundError):
            parse_subscription("topicA", _entry("sub1", "", with_content=False))


class TestParseSubscriptionCollection:
    """Test feed parsing."""

    def test_entries_in_order(self):
        """Test every entry is parsed, in document order."""
        xml = _feed(
            _entry("first", "<MaxDeliveryCount>1</MaxDeliveryCount>"),
            _entry("second", "<MaxDeliveryCount>2</MaxDeliveryCount>"),
            _entry("third", "<MaxDeliveryCount>3</MaxDeliveryCount>"),
        )
        subs = parse_subscription_collection("topicA", xml)

        assert [s.subscription_name for s in subs] == ["first", "second", "third"]
        assert [s.max_delivery_count for s in subs] == [1, 2, 3]
        assert all(s.topic_path == "topicA" for s in subs)

    def test_empty_feed_is_not_found(self):
        """Test a feed with no entries is reported like a missing one."""
        with pytest.raises(SubscriptionNotFoundError):
            parse_subscription_collection("topicA", _feed())

    @pytest.mark.parametrize("xml", [None, "", "<feed/>", _entry("s", "")])
    def test_not_found(self, xml):
        """Test wrong or empty documents are not-found."""
        with pytest.raises(SubscriptionNotFoundError):
            parse_subscription_collection("topicA", xml)

    def test_bad_entry_wrapped(self):
        """Test one undecodable entry fails the whole collection."""
        xml = _feed(_entry("ok", ""), _entry("bad", "<MaxDeliveryCount>x</MaxDeliveryCount>"))
        with pytest.raises(ServiceBusCommunicationError):
            parse_subscription_collection("topicA", xml)


class TestSerializeSubscription:
    """Test request document output."""

    def _payload(self, sub):
        root = ET.fromstring(subscription_to_xml(sub))
        assert root.tag == f"{{{ATOM_NS}}}entry"
        content = root.find(f"{{{ATOM_NS}}}content")
        assert content.get("type") == "application/xml"
        return content.find(f"{{{SB_NS}}}SubscriptionDescription")

    def test_defaults_omit_sentinels(self):
        """Test default descriptions omit infinite and unset fields."""
        payload = self._payload(SubscriptionDescription("topicA", "sub1"))

        assert [child.tag.split("}")[1] for child in payload] == [
            "LockDuration",
            "RequiresSession",
            "DeadLetteringOnMessageExpiration",
            "DeadLetteringOnFilterEvaluationExceptions",
            "MaxDeliveryCount",
            "Status",
        ]
        assert [child.text for child in payload] == ["PT1M", "false", "false", "true", "10", "Active"]

    def test_all_fields_in_canonical_order(self):
        """Test every optional field appears in the fixed order."""
        sub = SubscriptionDescription(
            "topicA", "sub1",
            lock_duration=timedelta(seconds=30),
            requires_session=True,
            default_message_time_to_live=timedelta(days=1),
            max_delivery_count=4,
            status=EntityStatus.SEND_DISABLED,
            forward_to="queueB",
            forward_dead_lettered_messages_to="dlq",
            auto_delete_on_idle=timedelta(hours=2),
        )
        payload = self._payload(sub)

        assert [(child.tag.split("}")[1], child.text) for child in payload] == [
            ("LockDuration", "PT30S"),
            ("RequiresSession", "true"),
            ("DefaultMessageTimeToLive", "P1D"),
            ("DeadLetteringOnMessageExpiration", "false"),
            ("DeadLetteringOnFilterEvaluationExceptions", "true"),
            ("MaxDeliveryCount", "4"),
            ("Status", "SendDisabled"),
            ("ForwardTo", "queueB"),
            ("ForwardDeadLetteredMessagesTo", "dlq"),
            ("AutoDeleteOnIdle", "PT2H"),
        ]

    def test_default_rule_position(self):
        """Test the default rule sits after the dead-lettering flags."""
        sub = SubscriptionDescription("topicA", "sub1", default_rule=RuleDescription(filter=false_filter()))
        payload = self._payload(sub)

        names = [child.tag.split("}")[1] for child in payload]
        assert names.index("DefaultRuleDescription") == names.index("DeadLetteringOnFilterEvaluationExceptions") + 1
        rule = payload.find(f"{{{SB_NS}}}DefaultRuleDescription")
        assert rule.find(f"{{{SB_NS}}}Filter").get(f"{{{XSI_NS}}}type") == "FalseFilter"
        assert rule.find(f"{{{SB_NS}}}Name").text == "$Default"

    def test_literal_document(self):
        """Test the exact request document for a default description."""
        assert subscription_to_xml(SubscriptionDescription("topicA", "sub1")) == (
            '<?xml version="1.0" encoding="utf-8"?>'
            f'<entry xmlns="{ATOM_NS}"><content type="application/xml">'
            f'<SubscriptionDescription xmlns="{SB_NS}">'
            "<LockDuration>PT1M</LockDuration>"
            "<RequiresSession>false</RequiresSession>"
            "<DeadLetteringOnMessageExpiration>false</DeadLetteringOnMessageExpiration>"
            "<DeadLetteringOnFilterEvaluationExceptions>true</DeadLetteringOnFilterEvaluationExceptions>"
            "<MaxDeliveryCount>10</MaxDeliveryCount>"
            "<Status>Active</Status>"
            "</SubscriptionDescription></content></entry>"
        )

    def test_without_declaration(self):
        """Test the XML declaration can be left out."""
        assert subscription_to_xml(SubscriptionDescription("topicA", "sub1"), xml_declaration=False).startswith("<entry")

    def test_serialize_returns_entry_element(self):
        """Test the element form is the entry wrapper."""
        assert serialize_subscription(SubscriptionDescription("topicA", "sub1")).tag == f"{{{ATOM_NS}}}entry"

    def test_element_reads_back_directly(self):
        """Test the built entry exposes qualified payload children without rendering."""
        sub = SubscriptionDescription("topicA", "sub1", default_rule=RuleDescription(filter=false_filter()))
        payload = entry_content(serialize_subscription(sub), "SubscriptionDescription")

        assert payload.find(f"{{{SB_NS}}}MaxDeliveryCount").text == "10"
        rule = RuleDescription.from_element(payload.find(f"{{{SB_NS}}}DefaultRuleDescription"))
        assert rule == sub.default_rule


class TestRoundTrip:
    """Test serialize then parse yields an equal description."""

    @pytest.mark.parametrize("fields", [
        {},
        {"lock_duration": timedelta(seconds=5), "requires_session": True},
        {"default_message_time_to_live": timedelta(days=14)},
        {"auto_delete_on_idle": timedelta(minutes=5), "max_delivery_count": 1},
        {"forward_to": "queueB"},
        {"forward_dead_lettered_messages_to": "dlq", "status": EntityStatus.RECEIVE_DISABLED},
        {
            "enable_dead_lettering_on_message_expiration": True,
            "enable_dead_lettering_on_filter_evaluation_exceptions": False,
            "lock_duration": timedelta(seconds=1, milliseconds=250),
        },
        {"default_rule": RuleDescription(filter=SqlFilter(sql_expression="priority > 3"))},
        {"default_rule": RuleDescription(name="corr", filter=CorrelationFilter(label="x", properties={"k": "v"}))},
        {
            "lock_duration": timedelta(days=20_000_000),
            "default_message_time_to_live": timedelta(days=20_000_000),
            "auto_delete_on_idle": timedelta(days=20_000_000),
        },
        {"default_message_time_to_live": timedelta(days=10675199, hours=2, minutes=48, seconds=5)},
    ])
    def test_round_trip(self, fields):
        """Test semantic equality after a round trip."""
        original = SubscriptionDescription("topicA", "sub1", **fields)
        entry = ET.fromstring(subscription_to_xml(original))

        # Servers echo the name back in the entry title
        title = ET.SubElement(entry, f"{{{ATOM_NS}}}title")
        title.text = original.subscription_name

        parsed = parse_subscription("topicA", ET.tostring(entry, encoding="unicode"))
        assert parsed == original
