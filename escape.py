"""
Turn controller for Escape Door.

The player starts at the centre of a hex disk and has a few steps per turn to
reach the door on the rim. After the player ends the turn, each chaser in
order takes one greedy step toward them. A chaser landing on the player ends
the round at once; a player still standing on the door after the chasers
move wins.
"""

import random
import uuid
from typing import Any, Dict, Optional, Tuple

from ai import choose_chaser_move
from map_gen import generate_hex_map, place_actors
from models import Actor, CellType, Phase
from rules import MoveRejected, can_move, is_blocked, legal_moves, validate_move
from state import EscapeGameState, load_config, log_event

PLAYER_START = (0, 0)

__all__ = [
    'initialize_game', 'start_game', 'return_to_menu', 'move_player_to',
    'can_player_move_to', 'can_end_turn', 'end_turn', 'tick', 'is_blocked',
]


def _generate_round(game_state: EscapeGameState) -> None:
    """Replace board, player and chasers wholesale."""
    config = game_state.config
    layout = generate_hex_map(
        config['map_radius'],
        game_state.rng,
        player_start=PLAYER_START,
        require_reachable=config['require_reachable_goal'],
        max_attempts=config['max_generation_attempts'],
    )
    game_state.board = layout.board
    game_state.door = layout.goal
    if not layout.reachable:
        log_event(game_state, f"No reachable door after {layout.attempts} attempts, keeping last map",
                  attempts=layout.attempts)

    moves = config['moves_per_turn']
    game_state.player = Actor(id='player', position=PLAYER_START, max_moves=moves, moves_remaining=moves)

    positions = place_actors(config['chaser_count'], game_state.board, game_state.coords,
                             PLAYER_START, game_state.rng)
    game_state.chasers = [
        Actor(id=f"c{i}", position=pos) for i, pos in enumerate(positions, 1)
    ]
    if len(positions) < config['chaser_count']:
        log_event(game_state, f"Only {len(positions)} of {config['chaser_count']} chasers could be placed",
                  placed=len(positions), requested=config['chaser_count'])


def initialize_game(seed: Optional[int] = None, config: Optional[Dict[str, Any]] = None,
                    game_id: Optional[str] = None) -> EscapeGameState:
    """
    Create an Escape Door game sitting in the menu.

    A board is generated straight away so the menu has something to show;
    start_game() replaces it.

    Args:
        seed: Random seed for map generation (None for an unseeded game)
        config: 'escape' config section (default: loaded from config.json)
        game_id: Identifier (default: a fresh UUID)

    Returns:
        New EscapeGameState in the MENU phase
    """
    game_state = EscapeGameState(
        game_id=game_id or str(uuid.uuid4()),
        config=config if config is not None else load_config()['escape'],
        rng=random.Random(seed),
    )
    _generate_round(game_state)
    return game_state


def start_game(game_state: EscapeGameState) -> EscapeGameState:
    """Begin a fresh round from any phase, discarding the previous one."""
    game_state.scheduler.cancel_all()
    game_state.round_id += 1
    game_state.phase = Phase.PLAYING
    game_state.turn = 1
    _generate_round(game_state)
    log_event(game_state, f"Round {game_state.round_id} started: door at {game_state.door}, "
              f"{len(game_state.chasers)} chasers",
              door=game_state.door, chasers=[c.position for c in game_state.chasers])
    return game_state


def return_to_menu(game_state: EscapeGameState) -> EscapeGameState:
    game_state.scheduler.cancel_all()
    game_state.phase = Phase.MENU
    log_event(game_state, "Returned to menu")
    return game_state


def _finish(game_state: EscapeGameState, phase: Phase, event: str, **kwargs) -> None:
    game_state.phase = phase
    game_state.scheduler.cancel_all()
    log_event(game_state, event, outcome=phase.value, **kwargs)


def can_player_move_to(game_state: EscapeGameState, target: Tuple[int, int]) -> bool:
    return game_state.phase == Phase.PLAYING and can_move(game_state, game_state.player, target)


def move_player_to(game_state: EscapeGameState, target: Tuple[int, int],
                   now: Optional[float] = None) -> Dict[str, Any]:
    """
    Step the player onto an adjacent hex.

    Illegal moves leave the state untouched; the reason is returned in
    ``errors``. Stepping onto a chaser loses the round. With auto_end_turn
    configured, spending the last move ends the turn, either right away
    (delay 0) or through the scheduler, counting the delay from ``now``
    (default: the last time passed to tick()).

    Returns:
        Dict with 'moved', 'phase', 'moves_remaining' and 'errors'
    """
    results: Dict[str, Any] = {'moved': False, 'errors': []}
    player = game_state.player
    try:
        if game_state.phase != Phase.PLAYING:
            raise MoveRejected(f"Game is not in progress (phase {game_state.phase.value})")
        validate_move(game_state, player, target)
    except MoveRejected as e:
        results['errors'].append(e.reason)
        log_event(game_state, f"Player move to {target} rejected: {e.reason}", error_type="move_rejected")
    else:
        old_position = player.position
        player.move(target)
        results['moved'] = True
        log_event(game_state, f"Player moved from {old_position} to {target}",
                  moves_remaining=player.moves_remaining)

        catcher = game_state.chaser_at(target)
        if catcher:
            _finish(game_state, Phase.LOST, f"Player walked into chaser {catcher.id} at {target}",
                    chaser_id=catcher.id)
        elif game_state.config['auto_end_turn'] and player.moves_remaining == 0:
            _arm_auto_end_turn(game_state, now)

    results['phase'] = game_state.phase.value
    results['moves_remaining'] = player.moves_remaining
    return results


def _arm_auto_end_turn(game_state: EscapeGameState, now: Optional[float] = None) -> None:
    delay = game_state.config['auto_end_delay']
    if delay == 0:
        end_turn(game_state)
        return

    round_id = game_state.round_id
    turn = game_state.turn

    def fire() -> None:
        # The player may have ended the turn by hand or the round may be over
        if (game_state.round_id == round_id and game_state.turn == turn
                and game_state.phase == Phase.PLAYING):
            end_turn(game_state)

    game_state.scheduler.schedule(delay, fire, name='auto_end_turn', now=now)


def can_end_turn(game_state: EscapeGameState) -> bool:
    """End Turn is offered once the player has moved, or when they cannot move at all."""
    if game_state.phase != Phase.PLAYING:
        return False
    player = game_state.player
    return player.moves_remaining < player.max_moves or not legal_moves(game_state, player)


def end_turn(game_state: EscapeGameState) -> Dict[str, Any]:
    """
    Resolve the chasers' turn.

    Chasers move one at a time in list order, each seeing where earlier
    chasers ended up. The first chaser to land on the player ends the round
    and the rest stay put. Otherwise the player wins if standing on the door;
    if the round goes on, budgets reset and the turn counter advances.

    Returns:
        Dict with 'ended', 'chaser_moves' (id, from, to), 'phase', 'turn'
        and 'errors'
    """
    results: Dict[str, Any] = {'ended': False, 'chaser_moves': [], 'errors': []}
    if not can_end_turn(game_state):
        reason = ("Game is not in progress" if game_state.phase != Phase.PLAYING
                  else "Player must move before ending the turn")
        results['errors'].append(reason)
        results['phase'] = game_state.phase.value
        results['turn'] = game_state.turn
        return results

    results['ended'] = True
    player = game_state.player
    for chaser in game_state.chasers:
        move = choose_chaser_move(game_state, chaser)
        if move is None:
            log_event(game_state, f"Chaser {chaser.id} at {chaser.position} cannot move", chaser_id=chaser.id)
            continue
        old_position = chaser.position
        chaser.move(move)
        results['chaser_moves'].append((chaser.id, old_position, move))
        log_event(game_state, f"Chaser {chaser.id} moved from {old_position} to {move}", chaser_id=chaser.id)

        if chaser.position == player.position:
            _finish(game_state, Phase.LOST, f"Chaser {chaser.id} caught the player at {move}",
                    chaser_id=chaser.id)
            break

    if game_state.phase == Phase.PLAYING:
        if game_state.chaser_at(player.position):
            _finish(game_state, Phase.LOST, f"Player caught at {player.position}")
        elif game_state.board.get(player.position) == CellType.GOAL:
            _finish(game_state, Phase.WON, f"Player escaped through the door at {player.position}")

    if game_state.phase == Phase.PLAYING:
        player.reset_moves()
        for chaser in game_state.chasers:
            chaser.reset_moves()
        game_state.turn += 1
        log_event(game_state, f"Turn {game_state.turn} begins")

    results['phase'] = game_state.phase.value
    results['turn'] = game_state.turn
    return results


def tick(game_state: EscapeGameState, now: float) -> int:
    """
    Run deferred callbacks due at host time ``now``.

    Timers armed without an explicit time count from the last ``now`` seen
    here, so hosts should either tick before each move or pass ``now`` to
    move_player_to.
    """
    return game_state.scheduler.tick(now)
