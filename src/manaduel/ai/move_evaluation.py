from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from manaduel.components.color import Color
from manaduel.constants import (
    AI_MAX_DIFFICULTY,
    AI_SCORE_PER_EXTRA_TILE,
    AI_SCORE_PER_MATCH,
    AI_SCORE_PRIMARY_COLOR,
    AI_TOP_MOVES,
    MIN_MATCH_LENGTH,
)
from manaduel.systems.match_finder import Match, candidate_swaps, find_matches, swapped

Position = Tuple[int, int]


@dataclass(slots=True, frozen=True)
class MoveOption:
    src: Position
    dst: Position
    score: int


def score_matches(matches: Iterable[Match], primary_color: Optional[Color] = None) -> int:
    score = 0
    for match in matches:
        score += AI_SCORE_PER_MATCH
        score += max(0, match.length - MIN_MATCH_LENGTH) * AI_SCORE_PER_EXTRA_TILE
        if primary_color is not None and match.color is primary_color:
            score += AI_SCORE_PRIMARY_COLOR
    return score


def evaluate_swap(
    grid: Sequence[Sequence[Color]],
    src: Position,
    dst: Position,
    primary_color: Optional[Color] = None,
) -> int:
    """Score of the first matching pass after swapping; 0 if nothing matches."""
    matches = find_matches(swapped(grid, src, dst))
    if not matches:
        return 0
    return score_matches(matches, primary_color)


def find_top_moves(
    grid: Sequence[Sequence[Color]],
    primary_color: Optional[Color] = None,
    frozen: Optional[Set[Position]] = None,
    limit: int = AI_TOP_MOVES,
) -> List[MoveOption]:
    """Best ``limit`` swaps by score, highest first.

    Ties keep enumeration order (horizontal swaps before vertical ones).
    """
    moves: List[MoveOption] = []
    for src, dst in candidate_swaps(grid, frozen):
        score = evaluate_swap(grid, src, dst, primary_color)
        if score > 0:
            moves.append(MoveOption(src=src, dst=dst, score=score))
    moves.sort(key=lambda move: -move.score)
    return moves[:limit]


def select_move_by_difficulty(
    moves: Sequence[MoveOption],
    difficulty: int,
    rng: random.Random | None = None,
) -> Optional[MoveOption]:
    """Pick uniformly among the first ``5 - difficulty + 1`` moves.

    Difficulty 5 always takes the best move; lower difficulties may settle
    for a weaker one, but never outside the top list.
    """
    if not moves:
        return None
    rng = rng or random.Random()
    max_index = max(0, min(AI_MAX_DIFFICULTY - difficulty, len(moves) - 1))
    return moves[rng.randint(0, max_index)]
