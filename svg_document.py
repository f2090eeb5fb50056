#!/usr/bin/env python3
"""
SVG Document

Parse and serialize stages shared by the color extractor and the metadata
codec. Parsing is tolerant: malformed markup yields a best-effort partial
tree, or None when nothing can be recovered, and never raises.
"""

import logging
import re

from lxml import etree


logger = logging.getLogger(__name__)

SVG_NAMESPACE = 'http://www.w3.org/2000/svg'

# The text is re-encoded as UTF-8 before parsing, so any declared encoding
# must be rewritten to match.
XML_ENCODING_DECLARATION = re.compile(
    r'^(\s*<\?xml[^>]*?encoding\s*=\s*)(["\'])[^"\']*\2',
    re.IGNORECASE
)


def _make_parser():
    return etree.XMLParser(
        recover=True,
        remove_blank_text=False,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
    )


def parse_svg(svg_content):
    """
    Parse SVG text into an element tree.

    Args:
        svg_content: Raw SVG markup

    Returns:
        The root element, or None if the document could not be parsed at all
    """
    if not svg_content or not svg_content.strip():
        return None

    text = XML_ENCODING_DECLARATION.sub(r'\1\2utf-8\2', svg_content, count=1)
    parser = _make_parser()
    try:
        root = etree.fromstring(text.encode('utf-8'), parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        logger.warning("Failed to parse SVG document: %s", exc)
        return None

    if root is None:
        logger.warning("Failed to parse SVG document: no root element recovered")
        return None

    if len(parser.error_log):
        logger.debug("Recovered from %d markup errors, first: %s",
                     len(parser.error_log), parser.error_log[0])
    return root


def serialize_svg(root):
    """Serialize a parsed tree (including any doctype) back to text."""
    return etree.tostring(root.getroottree(), encoding='unicode')


def local_name(element):
    """Return the tag name of an element without its namespace."""
    return etree.QName(element).localname


def iter_elements(root):
    """Iterate over every element of the tree, skipping comments and processing instructions."""
    return root.iter(etree.Element)


def find_svg_root(root):
    """Return the outermost <svg> element of a parsed document, or None."""
    if root is None:
        return None
    for element in iter_elements(root):
        if local_name(element) == 'svg':
            return element
    return None


def find_element_by_id(root, element_id):
    """Find the first element carrying the given id attribute."""
    for element in iter_elements(root):
        if element.get('id') == element_id:
            return element
    return None


def make_child(parent, name):
    """Create an element in the parent's namespace (if any) without attaching it."""
    namespace = etree.QName(parent).namespace
    tag = f"{{{namespace}}}{name}" if namespace else name
    return parent.makeelement(tag, nsmap=None)
