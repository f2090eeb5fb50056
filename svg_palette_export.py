#!/usr/bin/env python3
"""
SVG Palette Export

Packages generated variants into a single zip archive for download.
"""

import logging
import time
import zipfile


logger = logging.getLogger(__name__)


def bundle_entry_name(index, permutation_mode):
    """File name of the index-th variant (0-based) inside the bundle."""
    prefix = 'variation' if permutation_mode else 'theme'
    return f"{prefix}-{index + 1}.svg"


def default_bundle_name():
    return f"svg_bundle_{int(time.time() * 1000)}.zip"


def write_bundle(variants, permutation_mode, output_path):
    """
    Write one SVG entry per variant into a zip archive.

    Args:
        variants: List of {'id', 'mapping', 'content'} dictionaries
        permutation_mode: Selects 'variation-N' instead of 'theme-N' entry names
        output_path: Path of the archive to create

    Returns:
        List of entry names written, in variant order
    """
    names = []
    with zipfile.ZipFile(output_path, 'w', zipfile.ZIP_DEFLATED) as bundle:
        for index, variant in enumerate(variants):
            name = bundle_entry_name(index, permutation_mode)
            bundle.writestr(name, variant['content'])
            names.append(name)

    logger.info("Wrote %d variants to %s", len(names), output_path)
    return names
