"""Pure match detection over color grid snapshots.

Runs of three or more same-colored tiles are found row- and column-wise and
merged with a union-find so that overlapping runs (T, L and plus shapes)
become a single match. Every tile belongs to at most one match.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from manaduel.components.color import Color
from manaduel.constants import MIN_MATCH_LENGTH

Position = Tuple[int, int]
Grid = List[List[Color]]
Swap = Tuple[Position, Position]


@dataclass(frozen=True, slots=True)
class Match:
    color: Color
    tiles: tuple[Position, ...]
    special_shape: Optional[str] = None

    @property
    def length(self) -> int:
        return len(self.tiles)

    @property
    def is_straight(self) -> bool:
        rows = {r for r, _ in self.tiles}
        cols = {c for _, c in self.tiles}
        return len(rows) == 1 or len(cols) == 1


class _UnionFind:
    def __init__(self) -> None:
        self.parent: dict[Position, Position] = {}

    def find(self, pos: Position) -> Position:
        self.parent.setdefault(pos, pos)
        root = pos
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[pos] != root:
            self.parent[pos], pos = root, self.parent[pos]
        return root

    def union(self, a: Position, b: Position) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra != rb:
            self.parent[rb] = ra

    def groups(self) -> List[List[Position]]:
        buckets: dict[Position, List[Position]] = {}
        for pos in self.parent:
            buckets.setdefault(self.find(pos), []).append(pos)
        return list(buckets.values())


def copy_grid(grid: Sequence[Sequence[Color]]) -> Grid:
    return [list(row) for row in grid]


def find_runs(grid: Sequence[Sequence[Color]]) -> List[List[Position]]:
    """Return every maximal horizontal or vertical run of MIN_MATCH_LENGTH or more."""
    runs: List[List[Position]] = []
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    for r in range(rows):
        c = 0
        while c < cols:
            color = grid[r][c]
            end = c + 1
            while end < cols and grid[r][end] == color:
                end += 1
            if color is not Color.EMPTY and end - c >= MIN_MATCH_LENGTH:
                runs.append([(r, k) for k in range(c, end)])
            c = end
    for c in range(cols):
        r = 0
        while r < rows:
            color = grid[r][c]
            end = r + 1
            while end < rows and grid[end][c] == color:
                end += 1
            if color is not Color.EMPTY and end - r >= MIN_MATCH_LENGTH:
                runs.append([(k, c) for k in range(r, end)])
            r = end
    return runs


def classify_shape(tiles: Iterable[Position]) -> Optional[str]:
    """Classify a five-tile group as ``"T"`` or ``"L"``.

    Both shapes are a bar of three crossed by a perpendicular bar of three
    sharing one tile. The shared tile sits at the middle of one bar and the
    end of the other for a T, at the end of both for an L. A plus (middle of
    both) and a straight line are not special.
    """
    tiles = list(tiles)
    if len(tiles) != 5:
        return None
    row_counts = Counter(r for r, _ in tiles)
    col_counts = Counter(c for _, c in tiles)
    bar_rows = [r for r, n in row_counts.items() if n == 3]
    bar_cols = [c for c, n in col_counts.items() if n == 3]
    if len(bar_rows) != 1 or len(bar_cols) != 1:
        return None
    pivot = (bar_rows[0], bar_cols[0])
    if pivot not in tiles:
        return None
    horizontal = sorted(c for r, c in tiles if r == pivot[0])
    vertical = sorted(r for r, c in tiles if c == pivot[1])
    if horizontal[2] - horizontal[0] != 2 or vertical[2] - vertical[0] != 2:
        return None
    in_middle_h = horizontal.index(pivot[1]) == 1
    in_middle_v = vertical.index(pivot[0]) == 1
    if in_middle_h and in_middle_v:
        return None
    if in_middle_h or in_middle_v:
        return "T"
    return "L"


def _priority(match: Match) -> tuple:
    if match.length >= 5 and match.is_straight:
        rank = 0
    elif match.special_shape is not None:
        rank = 1
    else:
        rank = 2
    return (rank, -match.length, match.tiles[0])


def find_matches(grid: Sequence[Sequence[Color]]) -> List[Match]:
    """Scan ``grid`` and return its matches, longest and most special first."""
    uf = _UnionFind()
    for run in find_runs(grid):
        first = run[0]
        for pos in run:
            uf.union(first, pos)
    matches: List[Match] = []
    for group in uf.groups():
        tiles = tuple(sorted(group))
        r, c = tiles[0]
        matches.append(Match(color=grid[r][c], tiles=tiles, special_shape=classify_shape(tiles)))
    matches.sort(key=_priority)
    return matches


def matched_positions(matches: Iterable[Match]) -> Set[Position]:
    positions: Set[Position] = set()
    for match in matches:
        positions.update(match.tiles)
    return positions


def is_adjacent(a: Position, b: Position) -> bool:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def _has_line_at(grid: Sequence[Sequence[Color]], row: int, col: int) -> bool:
    color = grid[row][col]
    if color is Color.EMPTY:
        return False
    rows = len(grid)
    cols = len(grid[0])
    count = 1
    c = col - 1
    while c >= 0 and grid[row][c] == color:
        count += 1
        c -= 1
    c = col + 1
    while c < cols and grid[row][c] == color:
        count += 1
        c += 1
    if count >= MIN_MATCH_LENGTH:
        return True
    count = 1
    r = row - 1
    while r >= 0 and grid[r][col] == color:
        count += 1
        r -= 1
    r = row + 1
    while r < rows and grid[r][col] == color:
        count += 1
        r += 1
    return count >= MIN_MATCH_LENGTH


def swapped(grid: Sequence[Sequence[Color]], a: Position, b: Position) -> Grid:
    scratch = copy_grid(grid)
    (r1, c1), (r2, c2) = a, b
    scratch[r1][c1], scratch[r2][c2] = scratch[r2][c2], scratch[r1][c1]
    return scratch


def creates_match(grid: Sequence[Sequence[Color]], a: Position, b: Position) -> bool:
    """Return True when swapping ``a`` and ``b`` lines up a run through either cell."""
    if not is_adjacent(a, b):
        return False
    if grid[a[0]][a[1]] == grid[b[0]][b[1]]:
        return False
    scratch = swapped(grid, a, b)
    return _has_line_at(scratch, *a) or _has_line_at(scratch, *b)


def candidate_swaps(
    grid: Sequence[Sequence[Color]],
    frozen: Optional[Set[Position]] = None,
) -> List[Swap]:
    """All adjacent swaps, horizontal ones first, skipping frozen or empty cells."""
    frozen = frozen or set()
    rows = len(grid)
    cols = len(grid[0]) if rows else 0

    def usable(pos: Position) -> bool:
        return pos not in frozen and grid[pos[0]][pos[1]] is not Color.EMPTY

    swaps: List[Swap] = []
    for r in range(rows):
        for c in range(cols - 1):
            a, b = (r, c), (r, c + 1)
            if usable(a) and usable(b):
                swaps.append((a, b))
    for r in range(rows - 1):
        for c in range(cols):
            a, b = (r, c), (r + 1, c)
            if usable(a) and usable(b):
                swaps.append((a, b))
    return swaps


def find_valid_swaps(
    grid: Sequence[Sequence[Color]],
    frozen: Optional[Set[Position]] = None,
) -> List[Swap]:
    return [(a, b) for a, b in candidate_swaps(grid, frozen) if creates_match(grid, a, b)]


def has_valid_move(grid: Sequence[Sequence[Color]], frozen: Optional[Set[Position]] = None) -> bool:
    for a, b in candidate_swaps(grid, frozen):
        if creates_match(grid, a, b):
            return True
    return False
