import random
from collections import Counter

import pytest

from keyswipe.exceptions import LayoutError, MissingCharacterError
from keyswipe.geometry import Geometry
from keyswipe.layout import Layout


def test_from_cells_reads_subposition_order(tiny_layout):
    assert tiny_layout.layout_string() == 'cdefaghijb'
    assert tiny_layout[4] == 'a'
    assert tiny_layout[9] == 'b'


def test_cells_round_trip(tiny_geometry):
    cells = [['c·e·a', '·h·jb']]
    layout = Layout.from_cells(tiny_geometry, cells)
    assert layout[1] is None
    assert layout.to_cells() == cells
    assert layout.layout_string('_') == 'c_e_a_h_jb'


def test_wrong_shape_raises(tiny_geometry):
    with pytest.raises(LayoutError):
        Layout(tiny_geometry, 'abc')
    with pytest.raises(LayoutError):
        Layout.from_cells(tiny_geometry, [['cdefa']])
    with pytest.raises(LayoutError):
        Layout.from_cells(tiny_geometry, [['cdef', 'ghijb']])


def test_space_and_multi_character_slots_rejected(tiny_geometry):
    keys = list('cdefaghijb')
    keys[0] = ' '
    with pytest.raises(LayoutError):
        Layout(tiny_geometry, keys)

    keys[0] = 'cc'
    with pytest.raises(LayoutError):
        Layout(tiny_geometry, keys)


def test_reserved_cells_stay_empty():
    g = Geometry(name='r', rows=1, cols=2, subpositions=3, tap_subposition=2,
                 reserved_cells=((0, 0),))
    Layout(g, [None, None, None, 'a', 'b', 'c'])
    with pytest.raises(LayoutError):
        Layout(g, ['x', None, None, 'a', 'b', 'c'])


def test_value_semantics(tiny_layout):
    clone = tiny_layout.copy()
    assert clone == tiny_layout
    assert hash(clone) == hash(tiny_layout)

    clone.swap(0, 9)
    assert clone != tiny_layout
    assert tiny_layout[0] == 'c'
    assert clone[0] == 'b' and clone[9] == 'c'


def test_swapped_applies_pairs_in_order(tiny_layout):
    result = tiny_layout.swapped((0, 1), (1, 2))
    assert result.layout_string() == 'decfaghijb'
    assert tiny_layout.layout_string() == 'cdefaghijb'


def test_validate_duplicates(tiny_geometry):
    layout = Layout(tiny_geometry, list('cdefaghijc'))
    with pytest.raises(LayoutError, match="more than once"):
        layout.validate()


def test_validate_missing_character(tiny_layout):
    with pytest.raises(MissingCharacterError) as excinfo:
        tiny_layout.validate('abcz')
    assert excinfo.value.char == 'z'
    assert "'z'" in str(excinfo.value)
    assert isinstance(excinfo.value, ValueError)


def test_validate_returns_position_map(tiny_layout):
    position_map = tiny_layout.validate('abcdefghij')
    assert position_map.lookup('a') == 4
    assert len(position_map) == 10


def test_shuffle_preserves_characters(config_path):
    from keyswipe.config_loader import load_keyboard
    keyboard = load_keyboard('swipe_3x6', config_path)
    layout = keyboard.reference_layout()
    shuffled = layout.copy()
    shuffled.shuffle(200, random.Random(7))

    assert shuffled.characters() == layout.characters()
    assert shuffled != layout
    g = layout.geometry
    for pos in range(g.size):
        if g.is_reserved(pos):
            assert shuffled[pos] is None


def test_characters(tiny_geometry):
    layout = Layout.from_cells(tiny_geometry, [['c·e·a', '·h·jb']])
    assert layout.characters() == Counter('ceahjb')


def test_render(tiny_layout):
    assert tiny_layout.render().splitlines() == [
        ' e   f | i   j |',
        '   a   |   b   |',
        ' d   c | h   g |',
        '------- -------',
    ]
    assert str(tiny_layout) == tiny_layout.render()


def test_render_space_bar(tiny_space_layout):
    assert tiny_space_layout.render().splitlines()[-1].strip() == '[ space ]'


def test_render_config_keyboards(config_path):
    from keyswipe.config_loader import load_keyboard
    for name in ('swipe_3x6', 'messagease_3x3'):
        keyboard = load_keyboard(name, config_path)
        layout = keyboard.reference_layout()
        text = layout.render()
        for char in layout.characters():
            assert char in text
        assert len(text.splitlines()) == 4 * keyboard.geometry.rows + 1
