from manaduel.components.color import Color
from manaduel.systems.match_finder import (
    candidate_swaps,
    classify_shape,
    creates_match,
    find_matches,
    find_valid_swaps,
    has_valid_move,
    matched_positions,
    swapped,
)

from tests.helpers import STALE_LAYOUT, THREE_LAYOUT, T_LAYOUT, parse_layout


def test_stale_layout_has_no_matches_and_no_moves():
    grid = parse_layout(STALE_LAYOUT)
    assert find_matches(grid) == []
    assert not has_valid_move(grid)


def test_horizontal_three_match():
    grid = parse_layout(THREE_LAYOUT)
    grid[0][2] = Color.RED
    matches = find_matches(grid)
    assert len(matches) == 1
    match = matches[0]
    assert match.color is Color.RED
    assert match.tiles == ((0, 0), (0, 1), (0, 2))
    assert match.special_shape is None


def test_match_on_board_boundary_is_found():
    grid = parse_layout(STALE_LAYOUT)
    for row in (5, 6, 7):
        grid[row][7] = Color.GREEN
    matches = find_matches(grid)
    assert [m.tiles for m in matches] == [((5, 7), (6, 7), (7, 7))]


def test_empty_tiles_never_match():
    grid = parse_layout(STALE_LAYOUT)
    for col in range(4):
        grid[0][col] = Color.EMPTY
    assert find_matches(grid) == []


def test_classify_t_and_l_shapes():
    assert classify_shape([(0, 0), (0, 1), (0, 2), (1, 1), (2, 1)]) == "T"
    assert classify_shape([(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]) == "L"
    assert classify_shape([(0, 1), (1, 0), (1, 1), (1, 2), (2, 1)]) is None
    assert classify_shape([(0, 0), (0, 1), (0, 2), (0, 3), (0, 4)]) is None
    assert classify_shape([(0, 0), (0, 1), (0, 2)]) is None


def test_swap_into_pivot_forms_t_shape():
    grid = parse_layout(T_LAYOUT)
    assert find_matches(grid) == []
    assert creates_match(grid, (1, 2), (2, 2))
    matches = find_matches(swapped(grid, (1, 2), (2, 2)))
    assert len(matches) == 1
    assert matches[0].special_shape == "T"
    assert set(matches[0].tiles) == {(2, 1), (2, 2), (2, 3), (3, 2), (4, 2)}


def test_overlapping_runs_become_one_match():
    grid = parse_layout([
        "RRRRB",
        "GBRGK",
        "BGRBG",
        "KYGKY",
        "GBYBK",
    ])
    matches = find_matches(grid)
    assert len(matches) == 1
    assert matches[0].length == 6
    assert matches[0].special_shape is None


def test_straight_five_sorts_before_shorter_matches():
    grid = parse_layout([
        "GBGBG",
        "KKKYG",
        "BGBGB",
        "RRRRR",
        "GBYBK",
    ])
    matches = find_matches(grid)
    assert [m.length for m in matches] == [5, 3]
    assert matches[0].color is Color.RED
    assert matched_positions(matches) == {(3, c) for c in range(5)} | {(1, c) for c in range(3)}


def test_swapped_does_not_touch_original_grid():
    grid = parse_layout(THREE_LAYOUT)
    result = swapped(grid, (0, 2), (1, 2))
    assert grid[0][2] is Color.BLACK
    assert result[0][2] is Color.RED


def test_valid_swaps_skip_frozen_tiles():
    grid = parse_layout(THREE_LAYOUT)
    assert ((0, 2), (1, 2)) in find_valid_swaps(grid)
    assert ((0, 2), (1, 2)) not in find_valid_swaps(grid, frozen={(1, 2)})
    assert all((1, 2) not in swap for swap in candidate_swaps(grid, frozen={(1, 2)}))


def test_candidate_swaps_list_horizontal_first():
    grid = parse_layout(["RGB", "GBR", "BRG"])
    swaps = candidate_swaps(grid)
    assert swaps[:2] == [((0, 0), (0, 1)), ((0, 1), (0, 2))]
    assert swaps[-1] == ((1, 2), (2, 2))
