"""
Greedy movement heuristics for the non-player actors.

Chasers (Escape Door) step to the neighbour closest to the player. The thief
(Catch the Thief) runs from the player while the player is near and heads for
the exit otherwise. Both scan neighbours in the board's fixed direction order
and keep the first best candidate, so results are deterministic.
"""

from typing import Optional, Tuple

from coords import hex_distance_sum
from models import Actor
from rules import legal_moves
from state import EscapeGameState, ThiefGameState

EVADE_WEIGHT = 100
EXIT_WEIGHT = 10


def choose_chaser_move(game_state: EscapeGameState, chaser: Actor) -> Optional[Tuple[int, int]]:
    """
    Pick a chaser's step toward the player.

    Candidates are the legal neighbours given the positions of chasers that
    already moved this turn. The player's own hex is a candidate, and as the
    closest possible cell it is always taken when adjacent.

    Args:
        game_state: Current game state
        chaser: Chaser to move

    Returns:
        Target hex, or None if the chaser is boxed in
    """
    target = game_state.player.position
    best_move = None
    best_distance = None
    for move in legal_moves(game_state, chaser):
        distance = hex_distance_sum(move, target)
        if best_distance is None or distance < best_distance:
            best_distance = distance
            best_move = move
    return best_move


def score_thief_move(game_state: ThiefGameState, move: Tuple[int, int]) -> int:
    """
    Score one candidate step for the thief.

    Within ``evade_radius`` of the player, distance gained from the player
    dominates (x100); further out, progress toward the exit counts (x10).
    Exit progress is always added once more as a tie-leaning bonus.
    """
    coords = game_state.coords
    here = game_state.thief.position
    player = game_state.player.position
    exit_pos = game_state.exit_pos

    player_distance = coords.distance(here, player)
    exit_distance = coords.distance(here, exit_pos)
    exit_progress = exit_distance - coords.distance(move, exit_pos)

    if player_distance <= game_state.config['evade_radius']:
        score = (coords.distance(move, player) - player_distance) * EVADE_WEIGHT
    else:
        score = exit_progress * EXIT_WEIGHT
    return score + exit_progress


def choose_thief_move(game_state: ThiefGameState) -> Optional[Tuple[int, int]]:
    """Highest scoring legal step for the thief; first found wins ties. None if stuck."""
    best_move = None
    best_score = None
    for move in legal_moves(game_state, game_state.thief):
        score = score_thief_move(game_state, move)
        if best_score is None or score > best_score:
            best_score = score
            best_move = move
    return best_move
