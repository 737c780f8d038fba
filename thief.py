"""
Turn controller for Catch the Thief.

Each player step is a whole turn: the player moves, and unless that step
lands on the thief, the hidden thief answers with one step of its own. The
thief shows itself every ``visibility_interval`` turns and vanishes again
``hide_delay`` seconds later. The player wins by stepping onto the thief and
loses when the thief reaches the exit.
"""

import random
import uuid
from typing import Any, Dict, Optional, Tuple

from ai import choose_thief_move
from map_gen import generate_grid_map, place_actors
from models import Actor, Phase
from rules import MoveRejected, can_move, is_blocked, validate_move
from state import ThiefGameState, load_config, log_event

__all__ = [
    'initialize_game', 'start_game', 'return_to_menu', 'move_player_to',
    'move_player', 'can_player_move_to', 'end_turn', 'tick', 'is_blocked',
]


def _generate_round(game_state: ThiefGameState) -> None:
    config = game_state.config
    coords = game_state.coords
    player_start = game_state.rng.choice(coords.interior_coords())

    layout = generate_grid_map(
        config['grid_size'],
        game_state.rng,
        player_start,
        diagonal=config['diagonal_moves'],
        wall_count=config['wall_count'],
        require_reachable=config['require_reachable_goal'],
        max_attempts=config['max_generation_attempts'],
    )
    game_state.board = layout.board
    game_state.exit_pos = layout.goal
    game_state.player = Actor(id='player', position=player_start)

    placed = place_actors(1, game_state.board, coords, player_start, game_state.rng,
                          exclude={layout.goal})
    if placed:
        game_state.thief = Actor(id='thief', position=placed[0], visible=False)
    else:
        # Nowhere legal to hide: the thief sits out the round
        game_state.thief = Actor(id='thief', position=layout.goal, visible=False, active=False)
        log_event(game_state, "No legal start cell for the thief, thief not placed")
    game_state.visibility_counter = 0
    game_state.hide_token = None


def initialize_game(seed: Optional[int] = None, config: Optional[Dict[str, Any]] = None,
                    game_id: Optional[str] = None) -> ThiefGameState:
    """
    Create a Catch the Thief game sitting in the menu.

    Args:
        seed: Random seed for placement (None for an unseeded game)
        config: 'thief' config section (default: loaded from config.json)
        game_id: Identifier (default: a fresh UUID)

    Returns:
        New ThiefGameState in the MENU phase
    """
    game_state = ThiefGameState(
        game_id=game_id or str(uuid.uuid4()),
        config=config if config is not None else load_config()['thief'],
        rng=random.Random(seed),
    )
    _generate_round(game_state)
    return game_state


def start_game(game_state: ThiefGameState) -> ThiefGameState:
    """Begin a fresh round from any phase, discarding the previous one."""
    game_state.scheduler.cancel_all()
    game_state.round_id += 1
    game_state.phase = Phase.PLAYING
    game_state.turn = 1
    _generate_round(game_state)
    log_event(game_state, f"Round {game_state.round_id} started: player at {game_state.player.position}, "
              f"exit at {game_state.exit_pos}",
              player=game_state.player.position, exit=game_state.exit_pos)
    return game_state


def return_to_menu(game_state: ThiefGameState) -> ThiefGameState:
    game_state.scheduler.cancel_all()
    game_state.hide_token = None
    game_state.phase = Phase.MENU
    log_event(game_state, "Returned to menu")
    return game_state


def _finish(game_state: ThiefGameState, phase: Phase, event: str) -> None:
    game_state.phase = phase
    game_state.scheduler.cancel_all()
    game_state.hide_token = None
    # The round is over, show where the thief ended up
    game_state.thief.visible = True
    log_event(game_state, event, outcome=phase.value, thief=game_state.thief.position)


def can_player_move_to(game_state: ThiefGameState, target: Tuple[int, int]) -> bool:
    return game_state.phase == Phase.PLAYING and can_move(game_state, game_state.player, target)


def _update_visibility(game_state: ThiefGameState) -> None:
    thief = game_state.thief
    if game_state.hide_token is not None:
        game_state.scheduler.cancel(game_state.hide_token)
        game_state.hide_token = None

    game_state.visibility_counter += 1
    if game_state.visibility_counter >= game_state.config['visibility_interval']:
        thief.visible = True
        game_state.visibility_counter = 0
    else:
        thief.visible = False


def _arm_hide(game_state: ThiefGameState, now: Optional[float] = None) -> None:
    round_id = game_state.round_id

    def hide() -> None:
        if game_state.round_id == round_id and game_state.phase == Phase.PLAYING:
            game_state.thief.visible = False
            game_state.hide_token = None
            log_event(game_state, "Thief vanished from sight")

    game_state.hide_token = game_state.scheduler.schedule(
        game_state.config['hide_delay'], hide, name='hide_thief', now=now)


def _play_turn(game_state: ThiefGameState, target: Tuple[int, int],
               now: Optional[float] = None) -> Dict[str, Any]:
    player = game_state.player
    thief = game_state.thief
    results: Dict[str, Any] = {'moved': True, 'thief_moved': False, 'errors': []}

    old_position = player.position
    player.move(target)
    log_event(game_state, f"Player moved from {old_position} to {target}")

    if thief.active and player.position == thief.position:
        _finish(game_state, Phase.WON, f"Player caught the thief at {target}")
        return results

    _update_visibility(game_state)

    move = choose_thief_move(game_state)
    if move is not None:
        thief.move(move)
        results['thief_moved'] = True
        if thief.visible:
            log_event(game_state, f"Thief moved to {move}", thief=move, visible=True)
        else:
            log_event(game_state, "Thief moved out of sight", visible=False)

    if thief.active and thief.position == game_state.exit_pos:
        _finish(game_state, Phase.LOST, f"Thief escaped through the exit at {game_state.exit_pos}")
        return results

    if thief.visible:
        log_event(game_state, f"Thief spotted at {thief.position}", thief=thief.position)
        _arm_hide(game_state, now)

    player.reset_moves()
    thief.reset_moves()
    game_state.turn += 1
    return results


def move_player_to(game_state: ThiefGameState, target: Tuple[int, int],
                   now: Optional[float] = None) -> Dict[str, Any]:
    """
    Step the player onto an adjacent cell and play out the thief's reply.

    Non-adjacent, off-board or walled targets, and any call outside the
    PLAYING phase, are ignored; the reason comes back in ``errors``.

    Args:
        game_state: Round to advance
        target: (row, col) of the cell to step onto
        now: Host time of the move; the hide timer counts from here
            (default: the last time passed to tick())

    Returns:
        Dict with 'moved', 'thief_moved', 'phase', 'turn' and 'errors'
    """
    try:
        if game_state.phase != Phase.PLAYING:
            raise MoveRejected(f"Game is not in progress (phase {game_state.phase.value})")
        validate_move(game_state, game_state.player, target)
    except MoveRejected as e:
        results: Dict[str, Any] = {'moved': False, 'thief_moved': False, 'errors': [e.reason]}
        log_event(game_state, f"Player move to {target} rejected: {e.reason}", error_type="move_rejected")
    else:
        results = _play_turn(game_state, target, now)

    results['phase'] = game_state.phase.value
    results['turn'] = game_state.turn
    return results


def move_player(game_state: ThiefGameState, direction: str,
                now: Optional[float] = None) -> Dict[str, Any]:
    """Move one step in a named direction ('up', 'down_left', ...)."""
    try:
        target = game_state.coords.step(game_state.player.position, direction)
    except KeyError:
        log_event(game_state, f"Unknown direction {direction!r}", error_type="move_rejected")
        return {'moved': False, 'thief_moved': False, 'errors': [f"Unknown direction {direction!r}"],
                'phase': game_state.phase.value, 'turn': game_state.turn}
    return move_player_to(game_state, target, now)


def end_turn(game_state: ThiefGameState) -> Dict[str, Any]:
    """Every move already ends the turn in this game; nothing to do."""
    return {'ended': False, 'errors': ["Turns end automatically after each move"],
            'phase': game_state.phase.value, 'turn': game_state.turn}


def tick(game_state: ThiefGameState, now: float) -> int:
    """
    Run deferred callbacks (the thief re-hiding) due at host time ``now``.

    Timers armed without an explicit time count from the last ``now`` seen
    here, so hosts should either tick before each move or pass ``now`` to
    move_player_to.
    """
    return game_state.scheduler.tick(now)
