"""
Movement validation shared by both games.

validate_move() raises MoveRejected with a reason; the turn controllers
catch it so illegal input never changes state, and report the reason in
their result dicts.
"""

from typing import List, Tuple

from models import Actor, CellType
from state import EscapeGameState, GameStateType


class MoveRejected(Exception):
    """Exception raised when a proposed move is not legal."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def is_blocked(game_state: GameStateType, coord: Tuple[int, int]) -> bool:
    """True if the cell is a wall."""
    return game_state.board.get(coord) == CellType.WALL


def is_adjacent(game_state: GameStateType, current: Tuple[int, int], target: Tuple[int, int]) -> bool:
    """One step apart under the board's adjacency (6 hex, 4 or 8 grid neighbours)."""
    return game_state.coords.is_adjacent(current, target)


def _check_occupancy(game_state: GameStateType, actor: Actor, target: Tuple[int, int]) -> None:
    if actor is game_state.player:
        # The player may step onto a chaser (caught) or the thief (caught him)
        return
    if isinstance(game_state, EscapeGameState):
        if game_state.chaser_at(target, excluding=actor):
            raise MoveRejected(f"{target} is occupied by another chaser")
    elif target == game_state.player.position:
        raise MoveRejected(f"{target} is occupied by the player")


def validate_move(game_state: GameStateType, actor: Actor, target: Tuple[int, int]) -> bool:
    """
    Validate a single step for an actor.

    Args:
        game_state: Current game state
        actor: Actor that wants to move
        target: Destination coordinate

    Returns:
        True when the move is legal

    Raises:
        MoveRejected: With a human-readable reason when it is not
    """
    if not actor.active:
        raise MoveRejected(f"{actor.id} is not active")
    if actor.moves_remaining <= 0:
        raise MoveRejected(f"{actor.id} has no moves left this turn")
    if not game_state.coords.in_bounds(target):
        raise MoveRejected(f"{target} is outside the board")
    if not is_adjacent(game_state, actor.position, target):
        raise MoveRejected(f"{target} is not adjacent to {actor.position}")
    if is_blocked(game_state, target):
        raise MoveRejected(f"{target} is a wall")
    _check_occupancy(game_state, actor, target)
    return True


def can_move(game_state: GameStateType, actor: Actor, target: Tuple[int, int]) -> bool:
    try:
        return validate_move(game_state, actor, target)
    except MoveRejected:
        return False


def legal_moves(game_state: GameStateType, actor: Actor) -> List[Tuple[int, int]]:
    """Neighbouring cells the actor may enter, in the board's direction order."""
    return [
        target for target in game_state.coords.neighbors(actor.position)
        if can_move(game_state, actor, target)
    ]
