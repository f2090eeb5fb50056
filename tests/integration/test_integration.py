import io
import os
import shutil
import tempfile
import unittest
import xml.etree.ElementTree as ET
import zipfile
from contextlib import redirect_stdout

import svg_palette
from svg_color_extractor import extract_unique_colors
from svg_metadata import BACKGROUND_MARKER_ATTRIBUTE, extract_metadata
from svg_palette_session import PaletteSession


class TestIntegration(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures before each test method."""
        self.fixture_dir = os.path.join(os.path.dirname(__file__), '..', 'fixtures')
        self.input_svg = os.path.join(self.fixture_dir, 'themed.svg')
        self.palette_svg = os.path.join(self.fixture_dir, 'palette.svg')
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def run_cli(self, *argv):
        output = io.StringIO()
        with redirect_stdout(output):
            status = svg_palette.main(list(argv))
        return status, output.getvalue()

    def test_extract_command(self):
        status, output = self.run_cli('extract', self.input_svg)
        self.assertEqual(status, 0)
        self.assertIn('Found 6 colors', output)
        self.assertIn('#FFCC00', output)

    def test_generate_and_restore_round_trip(self):
        """Test the full generate -> bundle -> re-upload cycle."""
        bundle_path = os.path.join(self.temp_dir, 'bundle.zip')
        status, output = self.run_cli(
            'generate', self.input_svg,
            '--set', '#000000,#111111,#222222,#333333,#444444,#555555',
            '--background', '#101010', '--bake-bg',
            '-o', bundle_path,
        )
        self.assertEqual(status, 0, output)

        with zipfile.ZipFile(bundle_path) as bundle:
            self.assertEqual(bundle.namelist(), ['theme-1.svg', 'theme-2.svg'])
            second = bundle.read('theme-2.svg').decode('utf-8')

        # the second theme replaces every color in every context
        root = ET.fromstring(second)
        first_child = list(root)[0]
        self.assertEqual(first_child.get(BACKGROUND_MARKER_ATTRIBUTE), 'true')
        self.assertEqual(first_child.get('fill'), '#101010')
        recolored = [c for c in extract_unique_colors(second) if c != '#101010']
        self.assertEqual(recolored, ['#000000', '#111111', '#222222', '#333333', '#444444', '#555555'])

        metadata = extract_metadata(second)
        with open(self.input_svg, 'r', encoding='utf-8') as f:
            self.assertEqual(metadata['svgData']['originalContent'], f.read())

        # feeding an export back in restores the whole project
        restored = PaletteSession()
        summary = restored.process_files([('theme-2.svg', second)])
        self.assertTrue(summary['restored'])
        self.assertEqual(restored.canvas_bg, '#101010')
        self.assertEqual([o['replacements'][1] for o in restored.color_options],
                         ['#000000', '#111111', '#222222', '#333333', '#444444', '#555555'])

        exported_path = os.path.join(self.temp_dir, 'exported.svg')
        with open(exported_path, 'w', encoding='utf-8') as f:
            f.write(second)
        status, output = self.run_cli('inspect', exported_path)
        self.assertEqual(status, 0)
        self.assertIn('Project metadata', output)

    def test_generate_with_extra_svg_as_theme_set(self):
        bundle_path = os.path.join(self.temp_dir, 'bundle.zip')
        status, _ = self.run_cli('generate', self.input_svg, self.palette_svg, '-o', bundle_path)
        self.assertEqual(status, 0)
        with zipfile.ZipFile(bundle_path) as bundle:
            self.assertEqual(len(bundle.namelist()), 2)
            second = bundle.read('theme-2.svg').decode('utf-8')
        self.assertEqual(extract_unique_colors(second)[:2], ['#111111', '#222222'])

    def test_permutation_bundle_names(self):
        bundle_path = os.path.join(self.temp_dir, 'bundle.zip')
        status, _ = self.run_cli(
            'generate', self.input_svg,
            '--set', '#000000,#000000,#000000,#000000,#000000,#111111',
            '--permutations', '-o', bundle_path,
        )
        self.assertEqual(status, 0)
        with zipfile.ZipFile(bundle_path) as bundle:
            self.assertEqual(len(bundle.namelist()), 64)
            self.assertIn('variation-64.svg', bundle.namelist())

    def test_permutation_limit(self):
        bundle_path = os.path.join(self.temp_dir, 'bundle.zip')
        sets = []
        for shade in range(4):
            sets.extend(['--set', ','.join([f'#0{shade}0{shade}0{shade}'] * 6)])
        status, output = self.run_cli('generate', self.input_svg, *sets, '--permutations', '-o', bundle_path)
        self.assertEqual(status, 2)
        self.assertIn('Too many variants', output)
        self.assertFalse(os.path.exists(bundle_path))

    def test_inspect_plain_file(self):
        status, output = self.run_cli('inspect', self.input_svg)
        self.assertEqual(status, 1)
        self.assertIn('No embedded project metadata', output)


if __name__ == '__main__':
    unittest.main()
