"""
Tests for Marker Rendering
==========================
Nested tag rendering, escaping, strict nesting and default styles.
"""

import html
import re

import pytest

from config_logging import ValidationError
from deep_diff.models import Marker
from deep_diff.renderer import (
    deep_diff_html,
    escape_html,
    get_default_styles,
    render_page,
    render_with_markers,
)

OPEN = '<ins class="deep-diff">'
CLOSE = '</ins>'
TAG_RE = re.compile(r'</?ins[^>]*>')


def strip_tags(rendered: str) -> str:
    return html.unescape(TAG_RE.sub('', rendered))


@pytest.fixture
def laminar_cases():
    """Texts with properly nested or disjoint marker sets."""
    return [
        ('hello world', [Marker(0, 10), Marker(6, 10)]),
        ('hello world', [Marker(0, 4), Marker(6, 10)]),
        ('a < b & "c" > d', [Marker(0, 14), Marker(2, 6), Marker(4, 4)]),
        ('abcdef', [Marker(0, 2), Marker(3, 5), Marker(0, 5)]),
        ('x', [Marker(0, 0), Marker(0, 0)]),
    ]


class TestEscapeHtml:
    """Tests for escape_html."""

    def test_escapes_special_characters(self):
        assert escape_html('<a href="x">&</a>') == '&lt;a href=&quot;x&quot;&gt;&amp;&lt;/a&gt;'

    def test_ampersand_escaped_once(self):
        assert escape_html('&lt;') == '&amp;lt;'

    def test_plain_text_unchanged(self):
        assert escape_html("it's fine") == "it's fine"


class TestBasicRendering:
    """Single and multiple marker rendering."""

    def test_no_markers_returns_escaped_text(self):
        assert render_with_markers('hello world', []) == 'hello world'
        assert render_with_markers('Tom & Jerry', []) == 'Tom &amp; Jerry'

    def test_empty_text(self):
        assert render_with_markers('', []) == ''

    def test_single_marker(self):
        assert render_with_markers('hello world', [Marker(0, 4)]) == f'{OPEN}hello{CLOSE} world'

    def test_marker_at_end(self):
        assert render_with_markers('hello world', [Marker(6, 10)]) == f'hello {OPEN}world{CLOSE}'

    def test_whole_text(self):
        assert render_with_markers('hello', [Marker(0, 4)]) == f'{OPEN}hello{CLOSE}'

    def test_single_character(self):
        assert render_with_markers('a', [Marker(0, 0)]) == f'{OPEN}a{CLOSE}'

    def test_disjoint_markers(self):
        rendered = render_with_markers('hello world', [Marker(0, 4), Marker(6, 10)])
        assert rendered == f'{OPEN}hello{CLOSE} {OPEN}world{CLOSE}'

    def test_nested_markers(self):
        rendered = render_with_markers('hello world', [Marker(0, 10), Marker(6, 10)])
        assert rendered == f'{OPEN}hello {OPEN}world{CLOSE}{CLOSE}'

    def test_abutting_markers_close_before_open(self):
        rendered = render_with_markers('abcd', [Marker(2, 3), Marker(0, 1)])
        assert rendered == f'{OPEN}ab{CLOSE}{OPEN}cd{CLOSE}'

    def test_escapes_inside_markers(self):
        rendered = render_with_markers('<b>', [Marker(0, 2)])
        assert rendered == f'{OPEN}&lt;b&gt;{CLOSE}'

    def test_script_is_neutralised(self):
        rendered = render_with_markers('<script>alert("xss")</script>', [])
        assert '<script>' not in rendered
        assert '&lt;script&gt;' in rendered
        assert '&quot;xss&quot;' in rendered


class TestDisabledMarkers:
    """Disabled markers never produce tags."""

    def test_disabled_markers_ignored(self):
        markers = [Marker(0, 4, enabled=False), Marker(6, 10)]
        rendered = render_with_markers('hello world', markers)
        assert rendered == f'hello {OPEN}world{CLOSE}'

    def test_only_disabled_markers(self):
        rendered = render_with_markers('a&b', [Marker(0, 2, enabled=False)])
        assert rendered == 'a&amp;b'

    def test_disabled_markers_with_stray_bounds(self):
        rendered = render_with_markers('abc', [Marker(50, 10, enabled=False)])
        assert rendered == 'abc'


class TestRenderOptions:
    """Tag and class options."""

    def test_custom_tag(self):
        rendered = render_with_markers('hello', [Marker(0, 4)], tag_name='mark')
        assert rendered == '<mark class="deep-diff">hello</mark>'

    def test_custom_class(self):
        rendered = render_with_markers('hello', [Marker(0, 4)], class_name='changed')
        assert rendered == '<ins class="changed">hello</ins>'

    def test_empty_class_omits_attribute(self):
        rendered = render_with_markers('hello', [Marker(0, 4)], class_name='')
        assert rendered == '<ins>hello</ins>'

    def test_invalid_tag_rejected(self):
        with pytest.raises(ValidationError):
            render_with_markers('hello', [Marker(0, 4)], tag_name='ins onclick=x')

    def test_mapping_markers_accepted(self):
        markers = [{'start': 0, 'end': 4}, {'start': 6, 'end': 10, 'enabled': False}]
        assert render_with_markers('hello world', markers) == f'{OPEN}hello{CLOSE} world'

    def test_malformed_mapping_rejected(self):
        with pytest.raises(ValidationError):
            render_with_markers('hello', [{'start': '0', 'end': 4}])

    def test_non_marker_rejected(self):
        with pytest.raises(ValidationError):
            render_with_markers('hello', [(0, 4)])

    def test_enabled_must_be_boolean(self):
        with pytest.raises(ValidationError):
            render_with_markers('abc', [{'start': 0, 'end': 2, 'enabled': 'false'}])
        with pytest.raises(ValidationError):
            render_with_markers('abc', [{'start': 0, 'end': 2, 'enabled': 0}])

    def test_invalid_class_rejected(self):
        with pytest.raises(ValidationError):
            render_with_markers('hello', [Marker(0, 4)], class_name='a" onclick="x')


class TestRenderProperties:
    """Round trip, balance and escaping over laminar marker sets."""

    def test_round_trip(self, laminar_cases):
        for text, markers in laminar_cases:
            assert strip_tags(render_with_markers(text, markers)) == text

    def test_tag_balance(self, laminar_cases):
        for text, markers in laminar_cases:
            rendered = render_with_markers(text, markers)
            assert rendered.count('<ins') == rendered.count(CLOSE) == len(markers)

    def test_no_unescaped_specials_outside_tags(self, laminar_cases):
        for text, markers in laminar_cases:
            outside = TAG_RE.sub('', render_with_markers(text, markers))
            assert '<' not in outside and '>' not in outside and '"' not in outside
            assert re.search(r'&(?!amp;|lt;|gt;|quot;)', outside) is None

    def test_strict_matches_sweep_for_laminar_sets(self, laminar_cases):
        for text, markers in laminar_cases:
            assert render_with_markers(text, markers, strict=True) == \
                render_with_markers(text, markers)


class TestStrictNesting:
    """Stack-based rendering of crossing markers."""

    def test_crossing_markers_sweep(self):
        rendered = render_with_markers('abcdefghij', [Marker(0, 4), Marker(2, 7)])
        assert rendered == f'{OPEN}ab{OPEN}cde{CLOSE}fgh{CLOSE}ij'

    def test_crossing_markers_strict_split(self):
        rendered = render_with_markers('abcdefghij', [Marker(0, 4), Marker(2, 7)], strict=True)
        assert rendered == f'{OPEN}ab{OPEN}cde{CLOSE}{CLOSE}{OPEN}fgh{CLOSE}ij'

    def test_strict_round_trip_with_crossings(self):
        text = 'the quick brown fox'
        markers = [Marker(0, 8), Marker(4, 14), Marker(10, 18)]
        rendered = render_with_markers(text, markers, strict=True)
        assert strip_tags(rendered) == text
        assert rendered.count('<ins') == rendered.count(CLOSE)

    def test_identical_markers_nest(self):
        rendered = render_with_markers('hello', [Marker(0, 4), Marker(0, 4)], strict=True)
        assert rendered == f'{OPEN}{OPEN}hello{CLOSE}{CLOSE}'


class TestDeepDiffHtml:
    """Compute and render together."""

    def test_cumulative_nesting_rendered(self):
        rendered = deep_diff_html(['hello', 'hello world', 'hello big world'])
        assert rendered == f'hello{OPEN} {OPEN}big {CLOSE}world{CLOSE}'

    def test_options_pass_through(self):
        rendered = deep_diff_html(['hello', 'hello world'], tag_name='mark', class_name='diff')
        assert rendered == 'hello<mark class="diff"> world</mark>'

    def test_long_history_is_balanced(self):
        revisions = [
            'Metamorphosis in biology is physical development.',
            'Metamorphosis in cosmology is a physical development.',
            'Metamorphosis in cosmology is physical development.',
            'Metamorphosis in cosmology is physical development. I put in a new sentence here, yo.',
            'Metamorphosis in cosmology is physical development. I put in a new bunch of words here, yo.',
            'Metamorphosis in cosmology is physical development. I put in a new collection of words here, yo.',
        ]
        rendered = deep_diff_html(revisions)
        assert strip_tags(rendered) == revisions[-1]
        assert rendered.count('<ins') == rendered.count(CLOSE)
        assert '<ins' in rendered


class TestDefaultStyles:
    """Tests for get_default_styles."""

    def test_base_rule(self):
        css = get_default_styles(1)
        assert css == '.deep-diff { background-color: rgba(144,238,144, 0.3); }\n'

    def test_nested_selectors(self):
        css = get_default_styles(3)
        assert '.deep-diff .deep-diff { background-color: rgba(144,238,144, 0.45); }' in css
        assert '.deep-diff .deep-diff .deep-diff { background-color: rgba(144,238,144, 0.6); }' in css

    def test_intensity_capped(self):
        css = get_default_styles(8)
        assert css.strip().splitlines()[-1].endswith('rgba(144,238,144, 0.9); }')

    def test_defaults_to_depth_five(self):
        assert get_default_styles() == get_default_styles(5)
        assert len(get_default_styles().splitlines()) == 5

    def test_custom_class(self):
        css = get_default_styles(2, class_name='heat')
        assert '.heat .heat {' in css
        assert 'deep-diff' not in css

    def test_class_cannot_break_out_of_style_block(self):
        with pytest.raises(ValidationError):
            get_default_styles(2, class_name='</style><script>alert(1)</script>')
        with pytest.raises(ValidationError):
            render_page(['a', 'ab'], class_name='x{}')

    def test_hyphen_and_underscore_classes_allowed(self):
        assert get_default_styles(1, class_name='deep_diff-2').startswith('.deep_diff-2 {')


class TestRenderPage:
    """Tests for render_page."""

    def test_standalone_page(self):
        page = render_page(['cat', 'cat sat'], title='Draft <1>')
        assert page.startswith('<!DOCTYPE html>')
        assert '<title>Draft &lt;1&gt;</title>' in page
        assert f'cat{OPEN} sat{CLOSE}' in page
        assert '.deep-diff { background-color' in page
