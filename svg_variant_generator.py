#!/usr/bin/env python3
"""
SVG Variant Generator

Builds the recolored output documents for a project.

Two modes are supported:

* aligned (default): replacements[i] of every color option forms theme-set i.
  Options with fewer replacements reuse their last one.
* permutation: the Cartesian product of every option's distinct replacements,
  first option varying slowest. Refused outright once the number of
  combinations exceeds MAX_SAFE_VARIANTS.

Each variant is substituted, optionally given a baked background, and always
stamped with the full project metadata.
"""

import logging
from typing import Dict, List, Optional

from svg_color_extractor import extract_color_tokens
from svg_color_normalizer import normalize_color
from svg_color_replacer import apply_color_mapping
from svg_metadata import (
    DEFAULT_CANVAS_BG,
    build_project_metadata,
    inject_background,
    inject_metadata,
)


logger = logging.getLogger(__name__)

MAX_SAFE_VARIANTS = 500

MODE_THEME = 'theme'
MODE_VARIATION = 'variation'


def cartesian_product(lists: List[List]) -> List[List]:
    """
    Compute the Cartesian product of a list of lists, last list cycling fastest.

    e.g. [[a, b], [c, d]] -> [[a, c], [a, d], [b, c], [b, d]]
    """
    combinations = [[]]
    for choices in lists:
        combinations = [combo + [choice] for combo in combinations for choice in choices]
    return combinations


def distinct_replacements(option: Dict) -> List[str]:
    """Replacement colors of an option with duplicates removed, first-seen order kept."""
    seen = []
    for color in option['replacements']:
        if color not in seen:
            seen.append(color)
    return seen


def count_permutations(color_options: List[Dict]) -> int:
    """Number of variants permutation mode would produce."""
    total = 1
    for option in color_options:
        total *= len(distinct_replacements(option))
    return total


def is_too_many_variants(color_options: List[Dict], permutation_mode: bool) -> bool:
    return permutation_mode and count_permutations(color_options) > MAX_SAFE_VARIANTS


def max_set_count(color_options: List[Dict]) -> int:
    """Number of aligned theme-sets: the longest replacement list."""
    return max([0] + [len(option['replacements']) for option in color_options])


def aligned_mappings(color_options: List[Dict]) -> List[Dict[str, str]]:
    """One mapping per theme-set index, clamping short lists to their last entry."""
    mappings = []
    for index in range(max_set_count(color_options)):
        mapping = {}
        for option in color_options:
            replacements = option['replacements']
            mapping[option['originalColor']] = replacements[min(index, len(replacements) - 1)]
        mappings.append(mapping)
    return mappings


def permutation_mappings(color_options: List[Dict]) -> List[Dict[str, str]]:
    """One mapping per combination of distinct replacements."""
    combinations = cartesian_product([distinct_replacements(option) for option in color_options])
    return [
        {option['originalColor']: combo[i] for i, option in enumerate(color_options)}
        for combo in combinations
    ]


def expand_mapping(mapping: Dict[str, str], spellings: Dict[str, List[str]]) -> Dict[str, str]:
    """
    Extend a canonical-color mapping to every raw spelling found in the source.

    A document that writes white as "#fff" or "white" is only rewritten if
    those spellings are mapped too.
    """
    expanded = dict(mapping)
    for original, replacement in mapping.items():
        canonical = normalize_color(original)
        # unchanged colors keep the document's own spelling
        if normalize_color(replacement) == canonical:
            continue
        for raw in spellings.get(canonical, []):
            expanded.setdefault(raw, replacement)
    return expanded


def render_variant(svg_content: str, mapping: Dict[str, str], spellings: Dict[str, List[str]],
                   metadata: Dict, canvas_bg: str, bake_bg: bool) -> str:
    """Substitute colors, optionally bake the background, and stamp metadata."""
    content = apply_color_mapping(svg_content, expand_mapping(mapping, spellings))
    if bake_bg:
        content = inject_background(content, canvas_bg)
    return inject_metadata(content, metadata)


def generate_variants(svg_data: Optional[Dict], color_options: List[Dict],
                      canvas_bg: str = DEFAULT_CANVAS_BG, bake_bg: bool = False,
                      permutation_mode: bool = False,
                      saved_palettes: Optional[List[Dict]] = None) -> Dict:
    """
    Generate every output document for the current project state.

    Args:
        svg_data: {'originalContent', 'detectedColors'} or None when nothing is loaded
        color_options: List of {'id', 'originalColor', 'replacements'}
        canvas_bg: Background color, baked in only when bake_bg is set
        bake_bg: Insert a background rectangle into each variant
        permutation_mode: Generate the full Cartesian product instead of theme-sets
        saved_palettes: Theme library stamped into the metadata

    Returns:
        Dictionary with 'variants' (list of {'id', 'mapping', 'content'}),
        'tooManyVariants', 'totalPermutations' and 'mode'
    """
    total = count_permutations(color_options)
    batch = {
        'variants': [],
        'tooManyVariants': permutation_mode and total > MAX_SAFE_VARIANTS,
        'totalPermutations': total,
        'mode': MODE_VARIATION if permutation_mode else MODE_THEME,
    }

    if svg_data is None:
        return batch

    if batch['tooManyVariants']:
        logger.warning("Refusing to generate %d permutations (limit %d)", total, MAX_SAFE_VARIANTS)
        return batch

    if permutation_mode:
        mappings = permutation_mappings(color_options)
        id_prefix = 'variant'
    else:
        mappings = aligned_mappings(color_options)
        id_prefix = 'set'

    source = svg_data['originalContent']
    spellings = extract_color_tokens(source)
    metadata = build_project_metadata(svg_data, color_options, canvas_bg, saved_palettes)

    for index, mapping in enumerate(mappings):
        batch['variants'].append({
            'id': f"{id_prefix}-{index}",
            'mapping': mapping,
            'content': render_variant(source, mapping, spellings, metadata, canvas_bg, bake_bg),
        })

    logger.debug("Generated %d %s variants", len(batch['variants']), batch['mode'])
    return batch
