#!/usr/bin/env python3
"""
SVG Color Extractor

This module finds every color used in an SVG document. Colors are collected
from three structurally different places:

1. presentation attributes (fill, stroke, stop-color),
2. the same properties inside inline style attributes,
3. embedded <style> blocks.

The stylesheet pass is a heuristic: any hex literal, rgb()/rgba() call or
bare word that the color parser accepts counts as a color, so a class name
such as ".tan" is reported as a color too. Only tokens inside a declaration
value are kept as raw spellings, so such a selector is never rewritten.
"""

import re
from typing import Dict, List

from svg_color_normalizer import is_valid_color, normalize_color
from svg_document import iter_elements, local_name, parse_svg


COLOR_ATTRIBUTES = ('fill', 'stroke', 'stop-color')

IGNORED_VALUES = ('none', 'inherit')

# property-scoped lookups inside style="..." text
STYLE_PROPERTY_PATTERNS = {
    attr: re.compile(r'(?<![\w-])' + re.escape(attr) + r'\s*:\s*([^;!]+)', re.IGNORECASE)
    for attr in COLOR_ATTRIBUTES
}

STYLESHEET_COLOR_PATTERN = re.compile(
    r'#(?:[0-9a-f]{3}){1,2}\b|rgba?\([^)]+\)|[a-z]{3,20}',
    re.IGNORECASE
)

# innermost rule bodies, and the value part of each declaration inside them
STYLESHEET_BLOCK_PATTERN = re.compile(r'\{([^{}]*)\}')
DECLARATION_VALUE_PATTERN = re.compile(r':\s*([^;]+)')


def _is_color_value(value: str) -> bool:
    """Reject empty values, the none/inherit keywords and paint-server references."""
    if not value:
        return False
    lowered = value.lower()
    return lowered not in IGNORED_VALUES and not lowered.startswith('url(')


def _record(tokens: Dict[str, List[str]], raw: str, spelling: bool = True):
    """
    Add a color under its canonical form, keeping first-seen order.

    With spelling=False only the color is recorded, not the raw text, so the
    token is never a substitution target.
    """
    if not is_valid_color(raw):
        return
    canonical = normalize_color(raw)
    spellings = tokens.setdefault(canonical, [])
    if spelling and raw.lower() not in (s.lower() for s in spellings):
        spellings.append(raw)


def _declaration_values(css: str):
    for block in STYLESHEET_BLOCK_PATTERN.finditer(css):
        for declaration in DECLARATION_VALUE_PATTERN.finditer(block.group(1)):
            yield declaration.group(1)


def extract_color_tokens(svg_content: str) -> Dict[str, List[str]]:
    """
    Collect every color in the document, grouped by canonical form.

    Args:
        svg_content: Raw SVG markup

    Returns:
        Ordered dict of canonical color -> raw spellings seen in the document
    """
    tokens = {}
    root = parse_svg(svg_content)
    if root is None:
        return tokens

    for element in iter_elements(root):
        for attr in COLOR_ATTRIBUTES:
            value = (element.get(attr) or '').strip()
            if _is_color_value(value):
                _record(tokens, value)

        style = element.get('style')
        if style:
            for attr in COLOR_ATTRIBUTES:
                match = STYLE_PROPERTY_PATTERNS[attr].search(style)
                if match:
                    value = match.group(1).strip()
                    if _is_color_value(value):
                        _record(tokens, value)

    for element in iter_elements(root):
        if local_name(element) != 'style':
            continue
        css = ''.join(element.itertext())
        for match in STYLESHEET_COLOR_PATTERN.finditer(css):
            value = match.group(0)
            if value.lower() in IGNORED_VALUES:
                continue
            _record(tokens, value, spelling=False)

        for declaration in _declaration_values(css):
            for match in STYLESHEET_COLOR_PATTERN.finditer(declaration):
                value = match.group(0)
                if value.lower() not in IGNORED_VALUES:
                    _record(tokens, value)

    return tokens


def extract_unique_colors(svg_content: str) -> List[str]:
    """Return the unique canonical colors of a document in first-seen order."""
    return list(extract_color_tokens(svg_content))
