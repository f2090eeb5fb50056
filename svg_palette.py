#!/usr/bin/env python3
"""
SVG Palette Pro

Detects the colors of an SVG, applies replacement color sets and writes the
recolored variants as a zip bundle. Every exported SVG carries the full
project state, so it can be fed back in to continue where you left off.

Usage:
    python svg_palette.py extract <input.svg>
    python svg_palette.py inspect <exported.svg>
    python svg_palette.py generate <input.svg> [more.svg ...] [--set C1,C2,...] [-o bundle.zip]
"""

import argparse
import logging
import sys

from svg_color_extractor import extract_unique_colors
from svg_metadata import DEFAULT_CANVAS_BG, extract_metadata
from svg_palette_session import PaletteSession, is_project_metadata
from svg_variant_generator import MAX_SAFE_VARIANTS


def load_svg_content(svg_path):
    """Load SVG content from file."""
    with open(svg_path, 'r', encoding='utf-8') as f:
        return f.read()


def run_extract(args):
    colors = extract_unique_colors(load_svg_content(args.input))
    print(f"Found {len(colors)} colors in {args.input}")
    for color in colors:
        print(color)
    return 0


def run_inspect(args):
    metadata = extract_metadata(load_svg_content(args.input))
    if metadata is None:
        print("No embedded project metadata found")
        return 1
    if not isinstance(metadata, dict):
        print("Metadata present but it does not describe a project")
        return 0

    if is_project_metadata(metadata):
        print(f"Project metadata (version {metadata.get('version', metadata.get('v', '?'))})")
        print(f"  Detected colors: {', '.join(metadata['svgData'].get('detectedColors', []))}")
        for option in metadata['colorOptions']:
            print(f"  {option.get('originalColor')}: {', '.join(option.get('replacements', []))}")
        print(f"  Canvas background: {metadata.get('canvasBg', DEFAULT_CANVAS_BG)}")
    else:
        print("Metadata present but it does not describe a project")

    palettes = metadata.get('savedPalettes') or []
    print(f"  Saved themes: {len(palettes)}")
    for palette in palettes:
        print(f"    {palette.get('name', palette.get('id'))}")
    return 0


def parse_color_set(value):
    return [color.strip() for color in value.split(',') if color.strip()]


def run_generate(args):
    session = PaletteSession()
    summary = session.process_paths(args.inputs)
    if session.svg_data is None:
        print("No usable SVG input")
        return 1

    if summary['restored']:
        print("Restored project from embedded metadata")
    print(f"Detected {len(session.color_options)} colors")

    for color_set in args.sets or []:
        colors = parse_color_set(color_set)
        session.add_set()
        set_index = session.max_sets() - 1
        for option, color in zip(session.color_options, colors):
            if not session.update_set_color(option['id'], set_index, color):
                print(f"Warning: ignoring invalid color {color!r}")

    if args.background:
        if not session.set_canvas_bg(args.background):
            print(f"Warning: ignoring invalid background {args.background!r}")
    session.set_bake_bg(args.bake_bg)
    session.set_permutation_mode(args.permutations)

    if session.too_many_variants():
        print(f"Too many variants: {session.total_permutations()} combinations "
              f"exceed the limit of {MAX_SAFE_VARIANTS}")
        return 2

    output_path = session.export_bundle(args.output)
    if output_path is None:
        print("Nothing to export")
        return 1

    print(f"Wrote {len(session.variants()['variants'])} variants to {output_path}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(description='Recolor SVG files with replacement color sets')
    parser.add_argument('--verbose', '-v', action='store_true', help='Show diagnostic logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    extract_parser = subparsers.add_parser('extract', help='List the colors used in an SVG')
    extract_parser.add_argument('input', help='Input SVG file')
    extract_parser.set_defaults(func=run_extract)

    inspect_parser = subparsers.add_parser('inspect', help='Show the project state embedded in an exported SVG')
    inspect_parser.add_argument('input', help='Exported SVG file')
    inspect_parser.set_defaults(func=run_inspect)

    generate_parser = subparsers.add_parser('generate', help='Write recolored variants to a zip bundle')
    generate_parser.add_argument('inputs', nargs='+',
                                 help='Base SVG, extra SVGs used as theme-sets, or exported SVGs to restore')
    generate_parser.add_argument('--set', dest='sets', action='append',
                                 help='Comma-separated replacement colors, one per detected color, in order')
    generate_parser.add_argument('--permutations', '-p', action='store_true',
                                 help='Generate every combination instead of one variant per set')
    generate_parser.add_argument('--background', '-b', help='Canvas background color')
    generate_parser.add_argument('--bake-bg', action='store_true',
                                 help='Insert the background as a rectangle into each variant')
    generate_parser.add_argument('--output', '-o', help='Output zip path')
    generate_parser.set_defaults(func=run_generate)

    return parser


def main(argv=None):
    """Main function to run the script."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
