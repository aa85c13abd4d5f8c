from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from esper import World

from manaduel.components.board import Board
from manaduel.components.board_position import BoardPosition
from manaduel.components.color import Color, SPAWNABLE_COLORS
from manaduel.components.tile import Tile
from manaduel.constants import MAX_BOARD_ATTEMPTS, MIN_MATCH_LENGTH
from manaduel.systems.match_finder import Grid, has_valid_move

Position = Tuple[int, int]


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    color: Color


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board component not found")


def board_dimensions(world: World) -> Tuple[int, int]:
    board = get_board(world)
    return board.rows, board.cols


def get_entity_at(world: World, row: int, col: int) -> int | None:
    for entity, position in world.get_component(BoardPosition):
        if position.row == row and position.col == col:
            return entity
    return None


def tile_index(world: World) -> Dict[Position, Tile]:
    """Map every board position to its Tile component."""
    return {
        (position.row, position.col): tile
        for _, (position, tile) in world.get_components(BoardPosition, Tile)
    }


def get_tile_at(world: World, row: int, col: int) -> Tile | None:
    entity = get_entity_at(world, row, col)
    if entity is None:
        return None
    return world.component_for_entity(entity, Tile)


def in_bounds(world: World, row: int, col: int) -> bool:
    rows, cols = board_dimensions(world)
    return 0 <= row < rows and 0 <= col < cols


def color_grid(world: World) -> Grid:
    """Snapshot tile colors as a row-major grid for the pure matcher."""
    rows, cols = board_dimensions(world)
    grid: Grid = [[Color.EMPTY for _ in range(cols)] for _ in range(rows)]
    for (row, col), tile in tile_index(world).items():
        grid[row][col] = tile.color
    return grid


def frozen_positions(world: World) -> Set[Position]:
    return {pos for pos, tile in tile_index(world).items() if tile.frozen}


def apply_color_grid(world: World, grid: Sequence[Sequence[Color]], *, reset_flags: bool = True) -> None:
    for (row, col), tile in tile_index(world).items():
        tile.color = grid[row][col]
        if reset_flags:
            tile.clear_flags()
            tile.frozen = False
            tile.ignited = False


def board_has_valid_move(world: World) -> bool:
    return has_valid_move(color_grid(world), frozen_positions(world))


def swap_tiles(world: World, src: Position, dst: Position) -> bool:
    """Swap tile state between two cells. Frozen tiles never move."""
    tiles = tile_index(world)
    a = tiles.get(src)
    b = tiles.get(dst)
    if a is None or b is None or a.frozen or b.frozen:
        return False
    a.color, b.color = b.color, a.color
    a.ignited, b.ignited = b.ignited, a.ignited
    return True


def mark_matched(world: World, positions: Iterable[Position]) -> None:
    tiles = tile_index(world)
    for pos in positions:
        tile = tiles.get(pos)
        if tile is not None and not tile.is_empty():
            tile.matched = True
            tile.animating = True


def destroy_tiles(world: World, positions: Iterable[Position]) -> List[Tuple[int, int, Color]]:
    """Commit destruction to ``empty``; returns (row, col, previous color) entries."""
    tiles = tile_index(world)
    destroyed: List[Tuple[int, int, Color]] = []
    for row, col in positions:
        tile = tiles.get((row, col))
        if tile is None or tile.is_empty():
            continue
        destroyed.append((row, col, tile.color))
        tile.color = Color.EMPTY
        tile.clear_flags()
        tile.frozen = False
        tile.ignited = False
    return destroyed


def compute_gravity_moves(world: World) -> List[GravityMove]:
    """Drop tiles into empty cells and return the moves performed.

    Works bottom-up per column. Frozen cells are never filled and never
    fall; tiles above a frozen cell may pass it to reach an empty cell below.
    """
    rows, cols = board_dimensions(world)
    tiles = tile_index(world)
    moves: List[GravityMove] = []
    for col in range(cols):
        for row in range(rows - 1, -1, -1):
            dest = tiles[(row, col)]
            if dest.frozen or not dest.is_empty():
                continue
            for src_row in range(row - 1, -1, -1):
                src = tiles[(src_row, col)]
                if src.frozen or src.is_empty():
                    continue
                dest.color = src.color
                dest.ignited = src.ignited
                dest.animating = True
                src.color = Color.EMPTY
                src.ignited = False
                moves.append(GravityMove(source=(src_row, col), target=(row, col), color=dest.color))
                break
    return moves


def refill_empty_tiles(world: World, rng: random.Random | None = None) -> List[Position]:
    rng = rng or random.Random()
    new_tiles: List[Position] = []
    for pos, tile in sorted(tile_index(world).items()):
        if not tile.is_empty() or tile.frozen:
            continue
        tile.color = rng.choice(SPAWNABLE_COLORS)
        tile.new = True
        tile.animating = True
        new_tiles.append(pos)
    return new_tiles


def _forms_triple(grid: Grid, row: int, col: int, color: Color) -> bool:
    if col >= MIN_MATCH_LENGTH - 1 and all(grid[row][col - k] == color for k in range(1, MIN_MATCH_LENGTH)):
        return True
    if row >= MIN_MATCH_LENGTH - 1 and all(grid[row - k][col] == color for k in range(1, MIN_MATCH_LENGTH)):
        return True
    return False


def generate_color_grid(
    rows: int,
    cols: int,
    rng: random.Random | None = None,
    max_attempts: int = MAX_BOARD_ATTEMPTS,
) -> Grid:
    """Generate a grid with no initial matches and at least one legal swap."""
    rng = rng or random.Random()
    for _ in range(max_attempts):
        grid: Grid = [[Color.EMPTY for _ in range(cols)] for _ in range(rows)]
        for r in range(rows):
            for c in range(cols):
                options = [color for color in SPAWNABLE_COLORS if not _forms_triple(grid, r, c, color)]
                grid[r][c] = rng.choice(options)
        if has_valid_move(grid):
            return grid
    raise RuntimeError("Unable to generate a board with a legal move")


def respawn_full_board(world: World, rng: random.Random | None = None) -> List[Position]:
    """Replace every tile with a fresh match-free layout."""
    rows, cols = board_dimensions(world)
    grid = generate_color_grid(rows, cols, rng)
    apply_color_grid(world, grid)
    for tile in tile_index(world).values():
        tile.new = True
    return [(r, c) for r in range(rows) for c in range(cols)]


# ----------------------------------------------------------------------------
# Area helpers shared by skills and ignite explosions
# ----------------------------------------------------------------------------

def area_positions(
    world: World,
    origin: Position,
    shape: str,
    radius: int = 1,
    *,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> List[Position]:
    """Positions covered by an area centred (or anchored) at ``origin``.

    Shapes: ``square`` and ``diamond`` use ``radius`` around the origin;
    ``cross`` is the origin plus its orthogonal neighbours; ``row`` and
    ``column`` span the board; ``block`` is a ``width`` x ``height``
    rectangle anchored at its top-left corner.
    """
    rows, cols = board_dimensions(world)
    orow, ocol = origin
    positions: List[Position] = []
    if shape == "square":
        for r in range(orow - radius, orow + radius + 1):
            for c in range(ocol - radius, ocol + radius + 1):
                positions.append((r, c))
    elif shape == "diamond":
        for r in range(orow - radius, orow + radius + 1):
            for c in range(ocol - radius, ocol + radius + 1):
                if abs(r - orow) + abs(c - ocol) <= radius:
                    positions.append((r, c))
    elif shape == "cross":
        positions = [origin, (orow - 1, ocol), (orow + 1, ocol), (orow, ocol - 1), (orow, ocol + 1)]
    elif shape == "row":
        positions = [(orow, c) for c in range(cols)]
    elif shape == "column":
        positions = [(r, ocol) for r in range(rows)]
    elif shape == "block":
        w = width or 2
        h = height or 2
        positions = [(r, c) for r in range(orow, orow + h) for c in range(ocol, ocol + w)]
    else:
        raise ValueError(f"Unknown area shape '{shape}'")
    return [(r, c) for r, c in positions if 0 <= r < rows and 0 <= c < cols]
