"""
Rule Description Model

A named filter attached to a subscription. Only the default rule sent along
with a subscription description is modelled here.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import xml.etree.ElementTree as ET
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .atom import find_child, qname
from .constants import DEFAULT_RULE_NAME, XSI_NS
from .exceptions import InvalidEntityNameError
from .filter_codec import parse_filter, serialize_filter
from .filters import Filter, true_filter
from .validation import EntityNameValidator


class RuleDescription(BaseModel):
    """Rule containing a filter for a subscription."""
    model_config = ConfigDict(extra='forbid', frozen=True)

    name: str = DEFAULT_RULE_NAME
    # None when the server sent a filter kind this client does not know
    filter: Optional[Filter] = Field(default_factory=true_filter)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate rule name."""
        try:
            EntityNameValidator.validate_rule_name(v)
        except InvalidEntityNameError as e:
            raise ValueError(e.message) from e
        return v

    def to_element(self, tag: str = "RuleDescription") -> ET.Element:
        """
        Serialize to a rule element.

        Args:
            tag: Element name (``DefaultRuleDescription`` when nested in a
                subscription description)
        """
        root = ET.Element(qname(tag))

        filter_elem = serialize_filter(self.filter)
        if filter_elem is not None:
            root.append(filter_elem)
        ET.SubElement(root, qname("Action"), {qname("type", XSI_NS): "EmptyRuleAction"})
        ET.SubElement(root, qname("Name")).text = self.name
        return root

    @classmethod
    def from_element(cls, element: ET.Element) -> 'RuleDescription':
        """Parse a rule element; unknown children are ignored."""
        values = {}

        filter_elem = find_child(element, "Filter")
        if filter_elem is not None:
            values["filter"] = parse_filter(filter_elem)

        name_elem = find_child(element, "Name")
        if name_elem is not None and name_elem.text:
            values["name"] = name_elem.text

        return cls(**values)
