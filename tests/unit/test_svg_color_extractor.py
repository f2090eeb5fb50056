import os
import unittest

from svg_color_extractor import extract_color_tokens, extract_unique_colors


FIXTURE_DIR = os.path.join(os.path.dirname(__file__), '..', 'fixtures')


def load_fixture(name):
    with open(os.path.join(FIXTURE_DIR, name), 'r', encoding='utf-8') as f:
        return f.read()


def wrap(body):
    return f'<svg xmlns="http://www.w3.org/2000/svg">{body}</svg>'


class TestSvgColorExtractor(unittest.TestCase):

    def test_all_three_contexts(self):
        """Test attributes, inline styles and stylesheet blocks in document order."""
        colors = extract_unique_colors(load_fixture('themed.svg'))
        self.assertEqual(colors, ['#FFCC00', '#FFA500', '#FF0000', '#FFFFFF', '#0000FF', '#008000'])

    def test_order_preserving_and_duplicate_free(self):
        """Test that [A, B, A, C] yields [A, B, C]."""
        svg = wrap('<rect fill="#111111"/><rect fill="#222222"/>'
                   '<rect fill="#111"/><rect fill="#333333"/><rect fill="#111111"/>')
        self.assertEqual(extract_unique_colors(svg), ['#111111', '#222222', '#333333'])

    def test_equivalent_spellings_counted_once(self):
        svg = wrap('<rect fill="white"/><rect stroke="#fff"/><rect style="fill: rgb(255,255,255)"/>')
        self.assertEqual(extract_unique_colors(svg), ['#FFFFFF'])

    def test_ignores_none_inherit_and_url_in_attributes(self):
        svg = wrap('<rect fill="none" stroke="inherit"/><rect fill="url(#g)"/><rect stroke="#010203"/>')
        self.assertEqual(extract_unique_colors(svg), ['#010203'])

    def test_ignores_none_inherit_and_url_in_inline_style(self):
        svg = wrap('<rect style="fill:none;stroke:inherit"/>'
                   '<rect style="fill: url(#g); stroke: #0A0B0C"/>')
        self.assertEqual(extract_unique_colors(svg), ['#0A0B0C'])

    def test_ignores_none_inherit_and_url_in_stylesheet(self):
        svg = wrap('<style>.a { fill: none; stroke: inherit; } .b { fill: url(#g); }</style>')
        self.assertEqual(extract_unique_colors(svg), [])

    def test_inline_style_property_scoping(self):
        """Test that fill-opacity or -webkit-fill do not count as fill declarations."""
        svg = wrap('<rect style="fill-opacity: 0.5; -x-fill: red; fill: #00ff00 !important"/>')
        self.assertEqual(extract_unique_colors(svg), ['#00FF00'])

    def test_stop_color_attribute_and_style(self):
        svg = wrap('<linearGradient><stop stop-color="navy"/><stop style="stop-color:#abc"/></linearGradient>')
        self.assertEqual(extract_unique_colors(svg), ['#000080', '#AABBCC'])

    def test_stylesheet_words_must_validate(self):
        """Test that only stylesheet tokens accepted by the color parser are reported."""
        svg = wrap('<style>.shape { fill: teal; stroke-width: 3; display: block; }</style>')
        self.assertEqual(extract_unique_colors(svg), ['#008080'])

    def test_cdata_stylesheet(self):
        svg = wrap('<style><![CDATA[ .x { fill: #123456 } ]]></style>')
        self.assertEqual(extract_unique_colors(svg), ['#123456'])

    def test_invalid_attribute_values_are_excluded(self):
        svg = wrap('<rect fill="currentColor"/><rect fill="transparent"/><rect fill="#zzzzzz"/>')
        self.assertEqual(extract_unique_colors(svg), [])

    def test_unnamespaced_document(self):
        self.assertEqual(extract_unique_colors('<svg><rect fill="red"/></svg>'), ['#FF0000'])

    def test_malformed_markup_does_not_raise(self):
        """Test that broken markup yields a best-effort result."""
        colors = extract_unique_colors(load_fixture('broken.svg'))
        self.assertIsInstance(colors, list)
        self.assertIn('#123456', colors)

    def test_unparseable_input_yields_no_colors(self):
        self.assertEqual(extract_unique_colors(''), [])
        self.assertEqual(extract_unique_colors('this is not markup'), [])

    def test_color_tokens_keep_raw_spellings(self):
        svg = wrap('<rect fill="white"/><rect stroke="#FFF"/><rect fill="#fff"/><rect fill="red"/>')
        tokens = extract_color_tokens(svg)
        self.assertEqual(list(tokens), ['#FFFFFF', '#FF0000'])
        self.assertEqual(tokens['#FFFFFF'], ['white', '#FFF'])
        self.assertEqual(tokens['#FF0000'], ['red'])

    def test_stylesheet_selector_words_are_not_spellings(self):
        """Test that a color-named selector is detected but never kept as a raw spelling."""
        svg = wrap('<style>.tan { fill: #00FF00 } .b { stroke: navy }</style><rect class="tan"/>')
        tokens = extract_color_tokens(svg)
        self.assertEqual(list(tokens), ['#D2B48C', '#00FF00', '#000080'])
        self.assertEqual(tokens['#D2B48C'], [])
        self.assertEqual(tokens['#00FF00'], ['#00FF00'])
        self.assertEqual(tokens['#000080'], ['navy'])



if __name__ == '__main__':
    unittest.main()
