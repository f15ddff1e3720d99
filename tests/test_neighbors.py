from collections import Counter

import pytest

from keyswipe.layout import Layout
from keyswipe.neighbors import LayoutPermutations, eligible_swaps


def _differences(a, b):
    return [pos for pos in range(len(a)) if a[pos] != b[pos]]


def test_single_swaps_of_full_layout(tiny_layout):
    permutations = LayoutPermutations(tiny_layout)
    assert len(permutations) == 45

    neighbors = list(permutations)
    assert len(neighbors) == 45
    assert len(set(neighbors)) == 45
    for neighbor in neighbors:
        assert len(_differences(neighbor, tiny_layout)) == 2
        assert neighbor.characters() == tiny_layout.characters()


def test_swaps_in_lexicographic_order(tiny_layout):
    neighbors = list(LayoutPermutations(tiny_layout))
    assert _differences(neighbors[0], tiny_layout) == [0, 1]
    assert _differences(neighbors[1], tiny_layout) == [0, 2]
    assert _differences(neighbors[-1], tiny_layout) == [8, 9]


def test_base_layout_untouched(tiny_layout):
    before = tiny_layout.copy()
    permutations = LayoutPermutations(tiny_layout)
    for neighbor in permutations:
        neighbor.swap(0, 1)
    assert tiny_layout == before
    assert permutations.orig_layout == before


def test_empty_pairs_are_skipped(tiny_geometry):
    layout = Layout.from_cells(tiny_geometry, [['c··fa', 'ghijb']])
    assert (1, 2) not in eligible_swaps(layout)
    assert len(LayoutPermutations(layout)) == 44


def test_same_class_swaps(tiny_layout):
    swaps = eligible_swaps(tiny_layout, same_class=True)
    assert (4, 9) in swaps
    assert (0, 4) not in swaps
    assert len(swaps) == 1 + 28


def test_two_swaps(tiny_layout):
    permutations = LayoutPermutations(tiny_layout, num_swaps=2)
    assert permutations.same_class

    # 1 tap swap x 28 swipe swaps + disjoint pairs of swipe swaps
    assert len(permutations) == 28 + 28 * 15 // 2

    g = tiny_layout.geometry
    count = 0
    for neighbor in permutations:
        count += 1
        changed = _differences(neighbor, tiny_layout)
        assert len(changed) == 4
        assert neighbor.characters() == tiny_layout.characters()
        for pos in changed:
            # taps stay taps, swipes stay swipes
            original = tiny_layout.keys.index(neighbor[pos])
            assert g.is_tap(pos) == g.is_tap(original)
    assert count == len(permutations)
    assert permutations.remaining == 0


def test_two_swaps_any_class(tiny_layout):
    permutations = LayoutPermutations(tiny_layout, num_swaps=2, same_class=False)
    # 45 swaps, each position in 9 of them
    assert len(permutations) == 45 * 44 // 2 - 10 * (9 * 8 // 2)
    assert sum(1 for _ in permutations) == len(permutations)


def test_iteration_is_finite(tiny_layout):
    permutations = LayoutPermutations(tiny_layout)
    assert permutations.remaining == 45
    next(permutations)
    assert permutations.index == 1
    list(permutations)
    with pytest.raises(StopIteration):
        next(permutations)


def test_invalid_swap_count(tiny_layout):
    with pytest.raises(ValueError):
        LayoutPermutations(tiny_layout, num_swaps=3)


@pytest.mark.parametrize('same_class', [True, False])
def test_two_swaps_with_empty_slots_are_distinct(tiny_geometry, same_class):
    layout = Layout.from_cells(tiny_geometry, [['c··fa', '·h··b']])
    permutations = LayoutPermutations(layout, num_swaps=2, same_class=same_class)

    neighbors = list(permutations)
    assert len(neighbors) == len(permutations)
    assert len(set(neighbors)) == len(permutations)
    assert layout not in neighbors
    if same_class:
        assert len(permutations) == 93


def test_two_swaps_of_full_layout_are_distinct(tiny_layout):
    neighbors = list(LayoutPermutations(tiny_layout, num_swaps=2))
    assert len(set(neighbors)) == len(neighbors) == 238
