#!/usr/bin/env python3
"""
SVG Palette Session

Owns the live state of one recoloring session: the source document, its
color options, the canvas background, the generation mode and the saved
theme library. Uploaded files are classified here (project export, library
export or plain image) and every mutation is written back to the optional
stores.
"""

import copy
import logging
import os
import time
from typing import Dict, List, Optional, Sequence, Tuple

from svg_color_extractor import extract_unique_colors
from svg_color_normalizer import generate_id, is_valid_color, normalize_color
from svg_metadata import DEFAULT_CANVAS_BG, extract_metadata
from svg_palette_export import default_bundle_name, write_bundle
from svg_variant_generator import count_permutations, generate_variants, max_set_count, MAX_SAFE_VARIANTS


logger = logging.getLogger(__name__)


def make_color_option(original_color: str, replacements: Optional[List[str]] = None) -> Dict:
    """Create a color option seeded with its own original color."""
    return {
        'id': generate_id(),
        'originalColor': original_color,
        'replacements': list(replacements) if replacements else [original_color],
    }


def is_color_option(option) -> bool:
    """True for a dict with a string originalColor and a non-empty list of string replacements."""
    if not isinstance(option, dict) or not isinstance(option.get('originalColor'), str):
        return False
    replacements = option.get('replacements')
    return (isinstance(replacements, list) and len(replacements) > 0
            and all(isinstance(color, str) for color in replacements))


def is_project_metadata(metadata) -> bool:
    """True if embedded metadata carries a restorable project snapshot."""
    if not isinstance(metadata, dict):
        return False
    svg_data = metadata.get('svgData')
    options = metadata.get('colorOptions')
    return (isinstance(svg_data, dict)
            and isinstance(svg_data.get('originalContent'), str)
            and isinstance(options, list)
            and all(is_color_option(option) for option in options))


def _with_ids(options: List[Dict]) -> List[Dict]:
    for option in options:
        if not isinstance(option.get('id'), str):
            option['id'] = generate_id()
    return options


def read_svg_files(paths: Sequence[str]) -> List[Tuple[str, str]]:
    """Load files from disk as (name, text) pairs for process_files()."""
    files = []
    for path in paths:
        with open(path, 'r', encoding='utf-8') as f:
            files.append((os.path.basename(path), f.read()))
    return files


class PaletteSession:
    """In-memory recoloring session with optional library/session persistence."""

    def __init__(self, library_store=None, session_store=None):
        self.library_store = library_store
        self.session_store = session_store

        self.svg_data = None
        self.color_options = []
        self.canvas_bg = DEFAULT_CANVAS_BG
        self.bake_bg = False
        self.permutation_mode = False
        self.saved_palettes = []

        # False after a save was refused (quota) or failed
        self.last_persist_ok = True

    # ------------------------------------------------------------------
    # persistence

    def load(self):
        """Restore the library and the last working session from the stores."""
        if self.library_store is not None:
            library = self.library_store.load()
            if isinstance(library, list):
                self.saved_palettes = library
            elif library is not None:
                logger.error("Ignoring library snapshot that is not a list")

        if self.session_store is not None:
            session = self.session_store.load()
            if isinstance(session, dict):
                if is_project_metadata(session):
                    self.svg_data = session['svgData']
                    self.color_options = _with_ids(session['colorOptions'])
                elif session.get('svgData') is not None:
                    logger.error("Ignoring session snapshot with malformed document or color options")
                if session.get('canvasBg'):
                    self.canvas_bg = session['canvasBg']
                if 'permutationMode' in session:
                    self.permutation_mode = bool(session['permutationMode'])
                if 'bakeBg' in session:
                    self.bake_bg = bool(session['bakeBg'])
            elif session is not None:
                logger.error("Ignoring session snapshot that is not an object")

    def session_snapshot(self) -> Dict:
        return {
            'svgData': self.svg_data,
            'colorOptions': self.color_options,
            'canvasBg': self.canvas_bg,
            'permutationMode': self.permutation_mode,
            'bakeBg': self.bake_bg,
        }

    def _persist_session(self):
        if self.session_store is None:
            return
        if self.svg_data is None:
            self.session_store.clear()
            return
        self.last_persist_ok = self.session_store.save(self.session_snapshot())
        if not self.last_persist_ok:
            logger.warning("Session too large to persist fully")

    def _update_library(self, palettes):
        self.saved_palettes = palettes
        if self.library_store is not None:
            self.last_persist_ok = self.library_store.save(palettes)
            if not self.last_persist_ok:
                logger.warning("Theme library could not be persisted")

    # ------------------------------------------------------------------
    # uploads

    def load_svg(self, svg_content: str):
        """Start a new project from a plain SVG document."""
        self._set_document(svg_content, [])

    def _set_document(self, svg_content, extra_palettes):
        colors = extract_unique_colors(svg_content)
        options = [make_color_option(color) for color in colors]

        # each extra upload becomes one more theme-set, matched by color index
        for palette in extra_palettes:
            for index, option in enumerate(options):
                replacement = palette[index] if index < len(palette) else option['originalColor']
                option['replacements'].append(replacement)

        self.svg_data = {'originalContent': svg_content, 'detectedColors': colors}
        self.color_options = options
        self._persist_session()

    def _restore_project(self, metadata):
        svg_data = copy.deepcopy(metadata['svgData'])
        if not isinstance(svg_data.get('detectedColors'), list):
            svg_data['detectedColors'] = extract_unique_colors(svg_data['originalContent'])
        self.svg_data = svg_data
        self.color_options = _with_ids(copy.deepcopy(metadata['colorOptions']))
        if metadata.get('canvasBg'):
            self.canvas_bg = metadata['canvasBg']

    def process_files(self, files: Sequence[Tuple[str, str]]) -> Dict:
        """
        Apply a batch of uploaded files to the session, in order.

        Args:
            files: Sequence of (file name, SVG text)

        Returns:
            Summary with 'restored', 'base' (name of the new base document)
            and 'palettesImported'
        """
        restored = False
        base = None
        extra_palettes = []
        incoming_palettes = []

        for name, text in files:
            if not name.lower().endswith('.svg'):
                logger.debug("Skipping non-SVG upload %s", name)
                continue

            try:
                metadata = extract_metadata(text)
                palettes = metadata.get('savedPalettes') if isinstance(metadata, dict) else None
                if isinstance(palettes, list):
                    incoming_palettes.extend(p for p in palettes if isinstance(p, dict) and 'id' in p)

                if is_project_metadata(metadata):
                    if not restored:
                        self._restore_project(metadata)
                        restored = True
                        logger.info("Restored project from %s", name)
                    continue

                if palettes:
                    continue

                if base is None:
                    base = (name, text)
                else:
                    extra_palettes.append(extract_unique_colors(text))
            except (ValueError, TypeError, KeyError) as exc:
                logger.error("Error processing file %s: %s", name, exc)

        imported = 0
        if incoming_palettes:
            existing_ids = {p.get('id') for p in self.saved_palettes}
            new_palettes = []
            for palette in incoming_palettes:
                if palette['id'] not in existing_ids:
                    existing_ids.add(palette['id'])
                    new_palettes.append(palette)
            if new_palettes:
                imported = len(new_palettes)
                self._update_library(new_palettes + self.saved_palettes)

        if restored:
            self._persist_session()
        elif base is not None:
            self._set_document(base[1], extra_palettes)

        return {
            'restored': restored,
            'base': base[0] if base is not None and not restored else None,
            'palettesImported': imported,
        }

    def process_paths(self, paths: Sequence[str]) -> Dict:
        return self.process_files(read_svg_files(paths))

    # ------------------------------------------------------------------
    # theme-set editing

    def _option(self, option_id):
        for option in self.color_options:
            if option['id'] == option_id:
                return option
        raise KeyError(option_id)

    def max_sets(self) -> int:
        return max_set_count(self.color_options)

    def add_set(self):
        """Append a theme-set that starts as a copy of each option's last replacement."""
        for option in self.color_options:
            option['replacements'].append(option['replacements'][-1])
        self._persist_session()

    def remove_set(self, set_index: int) -> bool:
        """Drop theme-set set_index from every option; the last set is never removed."""
        if not 0 <= set_index < self.max_sets():
            return False
        if self.max_sets() <= 1:
            return False
        for option in self.color_options:
            replacements = option['replacements']
            if set_index < len(replacements) and len(replacements) > 1:
                del replacements[set_index]
        self._persist_session()
        return True

    def update_set_color(self, option_id: str, set_index: int, color: str) -> bool:
        """
        Set one replacement color.

        Invalid colors are rejected and the previous value is kept. Returns
        True if the color was accepted.
        """
        option = self._option(option_id)
        if set_index < 0:
            raise IndexError(set_index)
        if not is_valid_color(color):
            logger.debug("Rejected invalid color %r for option %s", color, option_id)
            return False

        replacements = option['replacements']
        while len(replacements) <= set_index:
            replacements.append(replacements[-1])
        replacements[set_index] = normalize_color(color)
        self._persist_session()
        return True

    def add_replacement(self, option_id: str, color: Optional[str] = None) -> bool:
        option = self._option(option_id)
        if color is None:
            color = option['replacements'][-1]
        elif not is_valid_color(color):
            return False
        option['replacements'].append(normalize_color(color))
        self._persist_session()
        return True

    def remove_replacement(self, option_id: str, index: int) -> bool:
        option = self._option(option_id)
        if len(option['replacements']) <= 1:
            return False
        if not 0 <= index < len(option['replacements']):
            return False
        del option['replacements'][index]
        self._persist_session()
        return True

    def set_canvas_bg(self, color: str) -> bool:
        if color and color.strip().lower() == 'transparent':
            self.canvas_bg = 'transparent'
        elif is_valid_color(color):
            self.canvas_bg = normalize_color(color)
        else:
            return False
        self._persist_session()
        return True

    def set_bake_bg(self, enabled: bool):
        self.bake_bg = bool(enabled)
        self._persist_session()

    def set_permutation_mode(self, enabled: bool):
        self.permutation_mode = bool(enabled)
        self._persist_session()

    def reset(self):
        """Clear the current document and start over. The library is kept."""
        self.svg_data = None
        self.color_options = []
        if self.session_store is not None:
            self.session_store.clear()

    # ------------------------------------------------------------------
    # theme library

    def save_current_palette(self, name: Optional[str] = None) -> Dict:
        """Snapshot the current color options into the library (newest first)."""
        palette = {
            'id': generate_id(),
            'name': name or f"Theme {len(self.saved_palettes) + 1}",
            'timestamp': int(time.time() * 1000),
            'colorOptions': copy.deepcopy(self.color_options),
            'canvasBg': self.canvas_bg,
        }
        self._update_library([palette] + self.saved_palettes)
        return palette

    def apply_saved_palette(self, palette_id: str) -> bool:
        """Copy a saved palette's replacements onto options with the same original color."""
        if self.svg_data is None:
            logger.warning("Upload an SVG before applying a saved theme")
            return False

        palette = next((p for p in self.saved_palettes if p.get('id') == palette_id), None)
        if palette is None:
            raise KeyError(palette_id)

        saved = {}
        for option in palette.get('colorOptions', []):
            saved.setdefault(option['originalColor'].upper(), option)

        new_options = []
        for option in self.color_options:
            match = saved.get(option['originalColor'].upper())
            if match is not None and match.get('replacements'):
                option = dict(option, replacements=list(match['replacements']))
            new_options.append(option)

        self.color_options = new_options
        if palette.get('canvasBg'):
            self.canvas_bg = palette['canvasBg']
        self._persist_session()
        return True

    def delete_palette(self, palette_id: str):
        self._update_library([p for p in self.saved_palettes if p.get('id') != palette_id])

    # ------------------------------------------------------------------
    # output

    def total_permutations(self) -> int:
        return count_permutations(self.color_options)

    def too_many_variants(self) -> bool:
        return self.permutation_mode and self.total_permutations() > MAX_SAFE_VARIANTS

    def variants(self) -> Dict:
        return generate_variants(
            self.svg_data,
            self.color_options,
            canvas_bg=self.canvas_bg,
            bake_bg=self.bake_bg,
            permutation_mode=self.permutation_mode,
            saved_palettes=self.saved_palettes,
        )

    def export_bundle(self, output_path: Optional[str] = None) -> Optional[str]:
        """
        Write all current variants to a zip archive.

        Returns:
            The archive path, or None when there is nothing to export or the
            permutation limit is exceeded
        """
        batch = self.variants()
        if batch['tooManyVariants'] or not batch['variants']:
            return None
        output_path = output_path or default_bundle_name()
        write_bundle(batch['variants'], self.permutation_mode, output_path)
        return output_path
