"""
Filter Dispatch Codec

Routes between ``Filter`` XML elements and the filter variant models using the
``i:type`` attribute as the only dispatch key.

Unknown filter types parse to ``None`` instead of failing, so a response that
carries a filter kind this client does not know still decodes.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import logging
import xml.etree.ElementTree as ET
from typing import Callable, Dict, Optional

from .constants import XSI_NS
from .filters import (
    CORRELATION_FILTER_TYPE,
    CorrelationFilter,
    Filter,
    SqlFilter,
    SqlFilterKind,
)

logger = logging.getLogger(__name__)

TYPE_ATTRIBUTE = f"{{{XSI_NS}}}type"

# Wire tag -> variant parser
FILTER_PARSERS: Dict[str, Callable[[ET.Element], Filter]] = {
    SqlFilterKind.SQL.value: lambda element: SqlFilter.from_element(element, SqlFilterKind.SQL),
    SqlFilterKind.TRUE.value: lambda element: SqlFilter.from_element(element, SqlFilterKind.TRUE),
    SqlFilterKind.FALSE.value: lambda element: SqlFilter.from_element(element, SqlFilterKind.FALSE),
    CORRELATION_FILTER_TYPE: CorrelationFilter.from_element,
}


def parse_filter(element: ET.Element) -> Optional[Filter]:
    """
    Parse a ``Filter`` element.

    Args:
        element: Element carrying an ``i:type`` attribute

    Returns:
        The filter, or None when the element has no type tag or an
        unrecognized one
    """
    filter_type = element.get(TYPE_ATTRIBUTE)
    if filter_type is None:
        return None

    parser = FILTER_PARSERS.get(filter_type)
    if parser is None:
        logger.debug(f"Ignoring filter of unknown type '{filter_type}'")
        return None

    return parser(element)


def serialize_filter(filter_obj: Optional[Filter]) -> Optional[ET.Element]:
    """
    Serialize a filter to a ``Filter`` element.

    SqlFilter, TrueFilter and FalseFilter share one element builder; the
    wire tag comes from the filter's kind.

    Args:
        filter_obj: Filter to serialize, or None

    Returns:
        The element, or None for a missing filter
    """
    if filter_obj is None:
        return None

    if isinstance(filter_obj, (SqlFilter, CorrelationFilter)):
        return filter_obj.to_element()

    raise TypeError(f"Unsupported filter type: {type(filter_obj).__name__}")
