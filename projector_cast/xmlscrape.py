"""
Field extraction from UPnP description documents and SOAP responses.

These helpers pull a handful of known fields out of device XML with regular
expressions instead of a parser, so a device emitting slightly broken XML still
yields its fields. The flip side: self-closing tags, CDATA sections and nested
elements of the same name are not understood and simply produce no match.
Callers only ever see Optional[str].
"""

import re
from functools import lru_cache
from typing import Optional, Pattern
from xml.sax.saxutils import unescape


@lru_cache(maxsize=64)
def _tag_pattern(tag: str, lenient: bool) -> Pattern:
    name = re.escape(tag)
    if lenient:
        # Optional namespace prefix, attributes allowed, any case.
        return re.compile(
            rf'<(?:[\w.-]+:)?{name}(?:\s[^>]*)?>(.*?)</(?:[\w.-]+:)?{name}\s*>',
            re.IGNORECASE | re.DOTALL,
        )
    return re.compile(rf'<{name}>(.*?)</{name}>', re.DOTALL)


def extract_tag(doc: str, tag: str, lenient: bool = False) -> Optional[str]:
    """
    Return the text of the first <tag>...</tag> element in doc.

    Args:
        doc: Raw XML text.
        tag: Element name without prefix, e.g. 'CurrentVolume'.
        lenient: Match case-insensitively, with an optional namespace prefix
            and attributes on the opening tag.

    Returns:
        The stripped, entity-decoded element text, or None when absent.
    """
    if not doc:
        return None
    match = _tag_pattern(tag, lenient).search(doc)
    if match is None:
        return None
    return unescape(match.group(1).strip())


def extract_control_url(doc: str, service_type: str) -> Optional[str]:
    """Return the controlURL that follows the given serviceType in a description document."""
    if not doc:
        return None
    pattern = re.compile(
        rf'<serviceType>\s*{re.escape(service_type)}\s*</serviceType>.*?<controlURL>(.*?)</controlURL>',
        re.DOTALL,
    )
    match = pattern.search(doc)
    if match is None:
        return None
    return unescape(match.group(1).strip())
