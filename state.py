"""
Round state, configuration and event log for the Escape Door and Catch the
Thief engines.

Each game keeps one mutable state object that owns the board, every actor,
the turn counter, the pending deferred callbacks and the event log. The turn
controllers in escape.py and thief.py are the only code that mutates it.
"""

from __future__ import annotations

import copy
import json
import os
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from coords import GridCoordinates, HexCoordinates
from models import Actor, Board, CellType, Phase
from scheduler import Scheduler

CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.json')

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    'escape': {
        'map_radius': 3,
        'chaser_count': 3,
        'moves_per_turn': 3,
        'auto_end_turn': False,
        'auto_end_delay': 0.1,
        'require_reachable_goal': True,
        'max_generation_attempts': 10,
    },
    'thief': {
        'grid_size': 5,
        'diagonal_moves': True,
        'wall_count': 0,
        'visibility_interval': 3,
        'hide_delay': 0.5,
        'evade_radius': 3,
        'require_reachable_goal': True,
        'max_generation_attempts': 10,
    },
}


class ConfigError(Exception):
    """Raised when config.json parses but holds values the engine cannot use."""
    pass


def validate_config(config: Dict[str, Dict[str, Any]]) -> None:
    """Check value ranges, raising ConfigError on the first bad entry."""
    escape = config['escape']
    thief = config['thief']
    if escape['map_radius'] < 1:
        raise ConfigError(f"escape.map_radius must be >= 1, got {escape['map_radius']}")
    if escape['chaser_count'] < 0:
        raise ConfigError(f"escape.chaser_count must be >= 0, got {escape['chaser_count']}")
    if escape['moves_per_turn'] < 1:
        raise ConfigError(f"escape.moves_per_turn must be >= 1, got {escape['moves_per_turn']}")
    if thief['grid_size'] < 4:
        raise ConfigError(f"thief.grid_size must be >= 4, got {thief['grid_size']}")
    if thief['wall_count'] < 0:
        raise ConfigError(f"thief.wall_count must be >= 0, got {thief['wall_count']}")
    if thief['visibility_interval'] < 1:
        raise ConfigError(f"thief.visibility_interval must be >= 1, got {thief['visibility_interval']}")
    for section, key in [('escape', 'auto_end_delay'), ('thief', 'hide_delay')]:
        if config[section][key] < 0:
            raise ConfigError(f"{section}.{key} must be >= 0, got {config[section][key]}")
    for section in ('escape', 'thief'):
        if config[section]['max_generation_attempts'] < 1:
            raise ConfigError(f"{section}.max_generation_attempts must be >= 1")


def load_config(path: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """
    Load config.json merged over the built-in defaults.

    A missing or unparsable file yields the defaults. Unknown keys are kept
    so callers can read their own settings.

    Args:
        path: Config file to read (default: config.json beside this module)

    Returns:
        Dict with 'escape' and 'thief' sections
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    try:
        with open(path or CONFIG_PATH, 'r') as f:
            loaded = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        loaded = {}

    for section, values in loaded.items():
        if isinstance(values, dict):
            config.setdefault(section, {}).update(values)

    validate_config(config)
    return config


def log_event(game_state: GameStateType, event: str, **kwargs) -> None:
    """
    Add an event to the game state log.

    Args:
        game_state: Current game state
        event: Description of the event
        **kwargs: Additional event data to include
    """
    log_entry = {
        'turn': game_state.turn,
        'phase': game_state.phase.value,
        'event': event,
        **kwargs
    }
    game_state.log.append(log_entry)


@dataclass
class EscapeGameState:
    """
    Escape Door round: hex disk, one door on the rim, chasers closing in.

    The player gets ``moves_per_turn`` steps, then ends the turn and every
    chaser takes one step toward them.
    """
    game_id: str
    config: Dict[str, Any]  # The 'escape' config section
    rng: random.Random
    phase: Phase = Phase.MENU
    turn: int = 1
    round_id: int = 0  # Bumped by every start_game
    board: Board = field(default_factory=dict)
    door: Tuple[int, int] = (0, 0)
    player: Actor = field(default_factory=lambda: Actor(id='player', position=(0, 0)))
    chasers: List[Actor] = field(default_factory=list)
    scheduler: Scheduler = field(default_factory=Scheduler)
    log: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def coords(self) -> HexCoordinates:
        return HexCoordinates(self.config['map_radius'])

    def get_actor(self, actor_id: str) -> Optional[Actor]:
        """Get the player or a chaser by id."""
        for actor in [self.player] + self.chasers:
            if actor.id == actor_id:
                return actor
        return None

    def chaser_at(self, position: Tuple[int, int], excluding: Optional[Actor] = None) -> Optional[Actor]:
        for chaser in self.chasers:
            if chaser.position == position and chaser is not excluding:
                return chaser
        return None


@dataclass
class ThiefGameState:
    """
    Catch the Thief round: square grid, an exit corner and a hidden thief.

    Every player step is a full turn; the thief answers with one step and
    shows itself every ``visibility_interval`` turns.
    """
    game_id: str
    config: Dict[str, Any]  # The 'thief' config section
    rng: random.Random
    phase: Phase = Phase.MENU
    turn: int = 1
    round_id: int = 0
    board: Board = field(default_factory=dict)
    exit_pos: Tuple[int, int] = (0, 0)
    player: Actor = field(default_factory=lambda: Actor(id='player', position=(1, 1)))
    thief: Actor = field(default_factory=lambda: Actor(id='thief', position=(2, 2), visible=False))
    visibility_counter: int = 0
    hide_token: Optional[int] = None
    scheduler: Scheduler = field(default_factory=Scheduler)
    log: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def coords(self) -> GridCoordinates:
        return GridCoordinates(self.config['grid_size'], self.config['diagonal_moves'])

    def get_actor(self, actor_id: str) -> Optional[Actor]:
        for actor in (self.player, self.thief):
            if actor.id == actor_id:
                return actor
        return None


GameStateType = Union[EscapeGameState, ThiefGameState]


def _actor_summary(actor: Actor, keys: Tuple[str, str], reveal: bool = True) -> Dict[str, Any]:
    position = None
    if reveal:
        position = {keys[0]: actor.position[0], keys[1]: actor.position[1]}
    return {
        'id': actor.id,
        'position': position,
        'visible': actor.visible,
        'active': actor.active,
        'moves_remaining': actor.moves_remaining,
    }


def get_game_summary(game_state: GameStateType, reveal_hidden: bool = True) -> Dict[str, Any]:
    """
    Get a read-only snapshot of a game state for the presentation layer.

    Args:
        game_state: Current game state
        reveal_hidden: Include positions of hidden actors (the thief between
            sightings); hosts facing a player should pass False

    Returns:
        Dictionary with phase, turn, board and actor information
    """
    if isinstance(game_state, EscapeGameState):
        keys = ('q', 'r')
        actors = [_actor_summary(game_state.player, keys)]
        actors += [_actor_summary(c, keys) for c in game_state.chasers]
        extra = {
            'door': {'q': game_state.door[0], 'r': game_state.door[1]},
            'map_radius': game_state.config['map_radius'],
        }
    else:
        keys = ('row', 'col')
        thief = game_state.thief
        actors = [
            _actor_summary(game_state.player, keys),
            _actor_summary(thief, keys, reveal=reveal_hidden or thief.visible),
        ]
        extra = {
            'exit': {'row': game_state.exit_pos[0], 'col': game_state.exit_pos[1]},
            'grid_size': game_state.config['grid_size'],
            'visibility_counter': game_state.visibility_counter,
        }

    return {
        'game_id': game_state.game_id,
        'round_id': game_state.round_id,
        'turn': game_state.turn,
        'phase': game_state.phase.value,
        'moves_remaining': game_state.player.moves_remaining,
        'actors': actors,
        'board': [
            {keys[0]: coord[0], keys[1]: coord[1], 'cell': cell.value}
            for coord, cell in sorted(game_state.board.items())
        ],
        'pending_callbacks': game_state.scheduler.pending(),
        **extra,
    }
