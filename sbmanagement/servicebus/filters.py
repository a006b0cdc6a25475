"""
Subscription Filter Models

The closed set of filter variants a rule or subscription can carry, and the
XML element codec for each variant.

Filter variants:
- SqlFilter: SQL-like expression (kind ``SqlFilter``)
- TrueFilter / FalseFilter: SqlFilter specializations with fixed expressions
  (kind ``TrueFilter`` / ``FalseFilter``)
- CorrelationFilter: message property matchers

The wire tag of an SqlFilter is taken from its ``kind``, never from the text
of its expression: ``SqlFilter(sql_expression="1=1")`` is still tagged
``SqlFilter``.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import xml.etree.ElementTree as ET
from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .atom import child_text, find_child, find_children, qname
from .constants import (
    FALSE_FILTER_EXPRESSION,
    MAX_SQL_EXPRESSION_LENGTH,
    TRUE_FILTER_EXPRESSION,
    XSD_NS,
    XSI_NS,
)


class SqlFilterKind(str, Enum):
    """Wire names of the SqlFilter-shaped variants."""
    SQL = "SqlFilter"
    TRUE = "TrueFilter"
    FALSE = "FalseFilter"


CORRELATION_FILTER_TYPE = "CorrelationFilter"

# Python attribute name -> element name, in wire order
CORRELATION_MATCHERS = {
    "correlation_id": "CorrelationId",
    "message_id": "MessageId",
    "to": "To",
    "reply_to": "ReplyTo",
    "label": "Label",
    "session_id": "SessionId",
    "reply_to_session_id": "ReplyToSessionId",
    "content_type": "ContentType",
}

_FIXED_EXPRESSIONS = {
    SqlFilterKind.TRUE: TRUE_FILTER_EXPRESSION,
    SqlFilterKind.FALSE: FALSE_FILTER_EXPRESSION,
}


def _filter_root(filter_type: str) -> ET.Element:
    """Create the ``Filter`` element carrying the ``i:type`` tag."""
    return ET.Element(qname("Filter"), {qname("type", XSI_NS): filter_type})


class SqlFilter(BaseModel):
    """
    SQL-like filter expression, or one of its True/False specializations.

    Parameters are not supported yet; the ``Parameters`` element is always
    written empty.
    """
    model_config = ConfigDict(extra='forbid', frozen=True)

    sql_expression: str
    kind: SqlFilterKind = SqlFilterKind.SQL

    @field_validator('sql_expression')
    @classmethod
    def validate_sql_expression(cls, v: str) -> str:
        """Validate expression is present and within the broker's length limit."""
        if not v or not v.strip():
            raise ValueError("sql_expression cannot be empty")
        if len(v) > MAX_SQL_EXPRESSION_LENGTH:
            raise ValueError(
                f"sql_expression cannot exceed {MAX_SQL_EXPRESSION_LENGTH} characters"
            )
        return v

    @model_validator(mode='after')
    def validate_fixed_expression(self) -> 'SqlFilter':
        """TrueFilter and FalseFilter only ever hold their fixed expression."""
        expected = _FIXED_EXPRESSIONS.get(self.kind)
        if expected is not None and self.sql_expression != expected:
            raise ValueError(f"{self.kind.value} expression must be '{expected}'")
        return self

    @classmethod
    def true(cls) -> 'SqlFilter':
        """Filter matching every message."""
        return cls(sql_expression=TRUE_FILTER_EXPRESSION, kind=SqlFilterKind.TRUE)

    @classmethod
    def false(cls) -> 'SqlFilter':
        """Filter matching no message."""
        return cls(sql_expression=FALSE_FILTER_EXPRESSION, kind=SqlFilterKind.FALSE)

    @property
    def filter_type(self) -> str:
        return self.kind.value

    def to_element(self) -> ET.Element:
        """Serialize to a ``Filter`` element tagged with this filter's kind."""
        root = _filter_root(self.filter_type)
        ET.SubElement(root, qname("SqlExpression")).text = self.sql_expression
        ET.SubElement(root, qname("Parameters"))
        return root

    @classmethod
    def from_element(
        cls,
        element: ET.Element,
        kind: SqlFilterKind = SqlFilterKind.SQL
    ) -> 'SqlFilter':
        """Parse the SqlFilter payload of a ``Filter`` element."""
        if kind is not SqlFilterKind.SQL:
            return cls(sql_expression=_FIXED_EXPRESSIONS[kind], kind=kind)

        expression = child_text(element, "SqlExpression")
        if expression is None:
            raise ValueError("SqlFilter element has no SqlExpression")
        return cls(sql_expression=expression)


def true_filter() -> SqlFilter:
    """Build a TrueFilter."""
    return SqlFilter.true()


def false_filter() -> SqlFilter:
    """Build a FalseFilter."""
    return SqlFilter.false()


class CorrelationFilter(BaseModel):
    """Matches messages by system properties and user properties."""
    model_config = ConfigDict(extra='forbid', frozen=True)

    correlation_id: Optional[str] = None
    message_id: Optional[str] = None
    to: Optional[str] = None
    reply_to: Optional[str] = None
    label: Optional[str] = None
    session_id: Optional[str] = None
    reply_to_session_id: Optional[str] = None
    content_type: Optional[str] = None
    properties: Dict[str, str] = Field(default_factory=dict)

    @field_validator(
        'correlation_id', 'message_id', 'to', 'reply_to', 'label',
        'session_id', 'reply_to_session_id', 'content_type',
    )
    @classmethod
    def blank_as_unset(cls, v: Optional[str]) -> Optional[str]:
        """Blank matchers are never sent, so treat them as unset."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def filter_type(self) -> str:
        return CORRELATION_FILTER_TYPE

    def to_element(self) -> ET.Element:
        """Serialize to a ``Filter`` element tagged ``CorrelationFilter``."""
        root = _filter_root(self.filter_type)

        for attr, name in CORRELATION_MATCHERS.items():
            value = getattr(self, attr)
            if value is not None:
                ET.SubElement(root, qname(name)).text = value

        properties = ET.SubElement(root, qname("Properties"))
        for key, value in self.properties.items():
            pair = ET.SubElement(properties, qname("KeyValueOfstringanyType"))
            ET.SubElement(pair, qname("Key")).text = key
            ET.SubElement(pair, qname("Value"), {
                qname("type", XSI_NS): ET.QName(XSD_NS, "string"),
            }).text = value

        return root

    @classmethod
    def from_element(cls, element: ET.Element) -> 'CorrelationFilter':
        """Parse the CorrelationFilter payload of a ``Filter`` element."""
        values: Dict[str, object] = {}
        for attr, name in CORRELATION_MATCHERS.items():
            text = child_text(element, name)
            if text is not None:
                values[attr] = text

        properties: Dict[str, str] = {}
        properties_elem = find_child(element, "Properties")
        if properties_elem is not None:
            for pair in find_children(properties_elem, "KeyValueOfstringanyType"):
                key = child_text(pair, "Key")
                if key is None:
                    continue
                properties[key] = child_text(pair, "Value") or ""
        values["properties"] = properties

        return cls(**values)


Filter = Union[SqlFilter, CorrelationFilter]
