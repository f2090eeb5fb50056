#!/usr/bin/env python3
"""
SVG Metadata

Embeds the full project state into an SVG as a JSON <script> node so that an
exported file can be uploaded again to restore the session. Also bakes an
opaque background rectangle into a document on request.

Both injections follow the same three stages: parse, mutate the tree,
serialize. If the document cannot be parsed or has no <svg> element it is
returned unchanged.
"""

import json
import logging

from svg_document import (
    find_element_by_id,
    find_svg_root,
    iter_elements,
    make_child,
    parse_svg,
    serialize_svg,
)


logger = logging.getLogger(__name__)

METADATA_NODE_ID = 'svg-palette-pro-metadata'
METADATA_MIME_TYPE = 'application/json'
METADATA_VERSION = '5'

DEFAULT_CANVAS_BG = '#F8FAFC'
BACKGROUND_MARKER_ATTRIBUTE = 'data-generated-bg'


def build_project_metadata(svg_data, color_options, canvas_bg, saved_palettes=None):
    """Assemble the round-trippable project snapshot stamped into every export."""
    return {
        'svgData': svg_data,
        'colorOptions': color_options,
        'canvasBg': canvas_bg,
        'savedPalettes': saved_palettes if saved_palettes is not None else [],
        'version': METADATA_VERSION,
    }


def inject_metadata(svg_content, metadata):
    """
    Store metadata as the last child of the root <svg> element.

    Any metadata node already present is removed first, so a document never
    carries more than one.
    """
    root = parse_svg(svg_content)
    svg = find_svg_root(root)
    if svg is None:
        return svg_content

    stale = [element for element in iter_elements(root)
             if element.get('id') == METADATA_NODE_ID and element.getparent() is not None]
    for element in stale:
        element.getparent().remove(element)

    script = make_child(svg, 'script')
    script.set('id', METADATA_NODE_ID)
    script.set('type', METADATA_MIME_TYPE)
    script.text = json.dumps(metadata)
    svg.append(script)

    return serialize_svg(root)


def extract_metadata(svg_content):
    """
    Read the embedded project snapshot.

    Returns:
        The decoded JSON value, or None when the node is absent, empty or
        does not hold valid JSON
    """
    root = parse_svg(svg_content)
    if root is None:
        return None

    script = find_element_by_id(root, METADATA_NODE_ID)
    if script is None:
        return None

    payload = ''.join(script.itertext()).strip()
    if not payload:
        return None

    try:
        return json.loads(payload)
    except ValueError as exc:
        logger.warning("Ignoring malformed embedded metadata: %s", exc)
        return None


def is_default_background(color):
    """True for the sentinel values that mean 'no baked background'."""
    if not color:
        return True
    value = color.strip().lower()
    return value in ('', 'transparent', DEFAULT_CANVAS_BG.lower())


def inject_background(svg_content, color):
    """Insert a full-size rectangle filled with color as the first child of the root <svg>."""
    if is_default_background(color):
        return svg_content

    root = parse_svg(svg_content)
    svg = find_svg_root(root)
    if svg is None:
        return svg_content

    rect = make_child(svg, 'rect')
    rect.set('width', '100%')
    rect.set('height', '100%')
    rect.set('fill', color)
    rect.set(BACKGROUND_MARKER_ATTRIBUTE, 'true')
    svg.insert(0, rect)

    return serialize_svg(root)


def has_baked_background(svg_content):
    """Check whether a document already carries a generated background rectangle."""
    root = parse_svg(svg_content)
    if root is None:
        return False
    return any(element.get(BACKGROUND_MARKER_ATTRIBUTE) == 'true'
               for element in iter_elements(root))
