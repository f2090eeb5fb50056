#!/usr/bin/env python3
"""
SVG Color Replacer

Text-level color substitution. The document is never re-serialized here, so
formatting outside of the replaced color tokens is preserved byte for byte.

All mapping keys are matched in a single pass over the original text, longest
key first. Every occurrence is rewritten at most once, which keeps swaps such
as {A: B, B: A} correct and stops a short key like #ABC from touching #ABCDEF.

Named colors ("red", "navy") are ordinary words, so they are only rewritten
where a value starts: right after fill=", stroke=" or stop-color=", or after
a ':' in a style declaration. Text content and class names are left alone.
"""

import re
from typing import Dict


# A key only matches as a whole token: not glued to a preceding word, and
# followed by whitespace, a quote, a closing bracket, ';', ',' or the end.
TOKEN_START = r'(?<![\w#-])'
TOKEN_END = r'(?=[\s;\'"),}]|$)'

NAMED_KEY_PATTERN = re.compile(r'^[a-z]+$', re.IGNORECASE)

VALUE_LEAD = r'(?<![\w-])(?:fill|stroke|stop-color)\s*=\s*["\']\s*|:\s*'


def _alternation(keys):
    ordered = sorted(keys, key=len, reverse=True)
    return '|'.join(re.escape(key) for key in ordered)


def build_color_pattern(keys):
    """
    Compile one pattern over the given color keys, longest first.

    Literal keys (hex, rgb() calls) land in the 'literal' group. Named keys
    land in the 'named' group, preceded by the value prefix in 'lead'.
    """
    named = [key for key in keys if NAMED_KEY_PATTERN.match(key)]
    literals = [key for key in keys if not NAMED_KEY_PATTERN.match(key)]

    branches = []
    if literals:
        branches.append(TOKEN_START + '(?P<literal>' + _alternation(literals) + ')')
    if named:
        branches.append('(?P<lead>' + VALUE_LEAD + ')(?P<named>' + _alternation(named) + ')')
    return re.compile('(?:' + '|'.join(branches) + ')' + TOKEN_END, re.IGNORECASE)


def apply_color_mapping(svg_content: str, mapping: Dict[str, str]) -> str:
    """
    Replace every occurrence of each original color with its replacement.

    Args:
        svg_content: SVG markup to rewrite
        mapping: Original color -> replacement color; keys match case-insensitively

    Returns:
        The rewritten markup
    """
    lookup = {}
    for original, replacement in mapping.items():
        if original:
            lookup.setdefault(original.lower(), replacement)

    if not lookup:
        return svg_content

    def substitute(match):
        groups = match.groupdict()
        if groups.get('named') is not None:
            return groups['lead'] + lookup[groups['named'].lower()]
        return lookup[groups['literal'].lower()]

    return build_color_pattern(lookup.keys()).sub(substitute, svg_content)
