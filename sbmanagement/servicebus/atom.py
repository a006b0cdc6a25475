"""
Atom Envelope Codec

Wraps entity payload elements in the Atom ``entry`` document the management
endpoint accepts, and unwraps ``entry`` / ``feed`` response documents.

Elements are built with qualified (``{namespace}name``) tags and attributes,
the same form ``ET.fromstring`` produces, so a built element can be read back
directly. Rendering rewrites them into the form the broker writes itself,
with default-namespace declarations and the ``i:`` / ``d6p1:`` prefixes:

    <entry xmlns="http://www.w3.org/2005/Atom">
      <content type="application/xml">
        <SubscriptionDescription xmlns="...servicebus/connect">...</SubscriptionDescription>
      </content>
    </entry>

Lookups accept either the qualified name or a bare name written without a
namespace.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import xml.etree.ElementTree as ET
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from .constants import ATOM_NS, SB_NS, XML_DECLARATION, XML_MEDIA_TYPE, XSD_NS, XSI_NS

# Namespace -> prefix used for qualified attributes and QName attribute values
NAMESPACE_PREFIXES = {
    XSI_NS: "i",
    XSD_NS: "d6p1",
}


def qname(name: str, namespace: str = SB_NS) -> str:
    """Qualified ``{namespace}name`` form of a tag or attribute name."""
    return f"{{{namespace}}}{name}"


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` part of a qualified tag."""
    return tag.rsplit("}", 1)[-1]


def _split(tag: str) -> Tuple[Optional[str], str]:
    if tag.startswith("{"):
        namespace, name = tag[1:].split("}", 1)
        return namespace, name
    return None, tag


def find_child(element: ET.Element, name: str, namespace: str = SB_NS) -> Optional[ET.Element]:
    """
    Return the first child named ``name`` in ``namespace``.

    Children written without any namespace also match.
    """
    qualified = qname(name, namespace)
    for child in element:
        if child.tag == qualified or child.tag == name:
            return child
    return None


def find_children(element: ET.Element, name: str, namespace: str = SB_NS) -> List[ET.Element]:
    """Return all children named ``name`` (qualified or bare), in document order."""
    qualified = qname(name, namespace)
    return [child for child in element if child.tag == qualified or child.tag == name]


def child_text(element: ET.Element, name: str, namespace: str = SB_NS) -> Optional[str]:
    """Text of a named child; None when the child is absent, "" when it is empty."""
    child = find_child(element, name, namespace)
    if child is None:
        return None
    return child.text or ""


def is_empty(element: ET.Element) -> bool:
    """True when the element has neither child elements nor text."""
    return len(element) == 0 and not (element.text or "").strip()


def parse_document(xml_content: Union[str, bytes, None]) -> Optional[ET.Element]:
    """
    Parse a response body into its root element.

    Args:
        xml_content: XML document as text or bytes

    Returns:
        Root element, or None for an empty body

    Raises:
        xml.etree.ElementTree.ParseError: If the body is not well-formed XML
    """
    if xml_content is None:
        return None
    if isinstance(xml_content, bytes):
        if not xml_content.strip():
            return None
    elif not xml_content.strip():
        return None
    return ET.fromstring(xml_content)


def build_entry(payload: ET.Element) -> ET.Element:
    """
    Wrap an entity payload element in ``entry/content``.

    Args:
        payload: Entity description element (e.g. ``SubscriptionDescription``)

    Returns:
        The ``entry`` element
    """
    entry = ET.Element(qname("entry", ATOM_NS))
    content = ET.SubElement(entry, qname("content", ATOM_NS), {"type": XML_MEDIA_TYPE})
    content.append(payload)
    return entry


def build_payload(name: str) -> ET.Element:
    """Create an entity payload element in the broker namespace."""
    return ET.Element(qname(name))


def entry_title(entry: ET.Element) -> Optional[str]:
    """Return the text of the entry's ``title``, or None if it has none."""
    return child_text(entry, "title", ATOM_NS)


def entry_content(entry: ET.Element, payload_name: str) -> Optional[ET.Element]:
    """Return the ``content/<payload_name>`` element of an entry, if present."""
    content = find_child(entry, "content", ATOM_NS)
    if content is None:
        return None
    return find_child(content, payload_name, SB_NS)


def feed_entries(feed: ET.Element) -> List[ET.Element]:
    """Return the ``entry`` children of a feed in document order."""
    return find_children(feed, "entry", ATOM_NS)


def _prefixed(
    namespace: str,
    name: str,
    declarations: Dict[str, str],
    declared: set
) -> str:
    prefix = NAMESPACE_PREFIXES.get(namespace)
    if prefix is None:
        raise ValueError(f"No prefix registered for namespace '{namespace}'")
    if namespace not in declared:
        declarations[f"xmlns:{prefix}"] = namespace
        declared.add(namespace)
    return f"{prefix}:{name}"


def _broker_form(
    element: ET.Element,
    default_namespace: Optional[str],
    declared: FrozenSet[str]
) -> ET.Element:
    """Copy an element tree, turning qualified names into literal declarations."""
    namespace, name = _split(element.tag)
    attrib: Dict[str, str] = {}
    if namespace != default_namespace:
        attrib["xmlns"] = namespace or ""
        default_namespace = namespace

    in_scope = set(declared)
    # QName values are declared after the attribute that uses them
    trailing: Dict[str, str] = {}
    for key, value in element.attrib.items():
        attr_namespace, attr_name = _split(key)
        if attr_namespace is not None:
            key = _prefixed(attr_namespace, attr_name, attrib, in_scope)
        if isinstance(value, ET.QName):
            value_namespace, value_name = _split(value.text)
            value = _prefixed(value_namespace, value_name, trailing, in_scope)
        attrib[key] = value
    attrib.update(trailing)

    copy = ET.Element(name, attrib)
    copy.text = element.text
    copy.tail = element.tail
    for child in element:
        copy.append(_broker_form(child, default_namespace, frozenset(in_scope)))
    return copy


def to_xml(element: ET.Element, xml_declaration: bool = True, encoding: str = "utf-8") -> str:
    """Render an element tree as a document string in the broker's namespace form."""
    body = ET.tostring(_broker_form(element, None, frozenset()), encoding="unicode")
    if not xml_declaration:
        return body
    if encoding.lower() == "utf-8":
        return XML_DECLARATION + body
    return f'<?xml version="1.0" encoding="{encoding}"?>' + body


def to_bytes(element: ET.Element, xml_declaration: bool = True, encoding: str = "utf-8") -> bytes:
    """Render an element tree as a document encoded with the declared encoding."""
    return to_xml(element, xml_declaration, encoding).encode(encoding)
