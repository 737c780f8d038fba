"""Shared test fixtures and helpers."""

import copy
import random

import pytest

from coords import GridCoordinates, HexCoordinates
from models import Actor, CellType, Phase
from state import DEFAULT_CONFIG, EscapeGameState, ThiefGameState
import escape
import thief


# --- Fixtures ---


@pytest.fixture
def rng():
    """Deterministic RNG seeded at 42."""
    return random.Random(42)


@pytest.fixture
def escape_config():
    return copy.deepcopy(DEFAULT_CONFIG['escape'])


@pytest.fixture
def thief_config():
    return copy.deepcopy(DEFAULT_CONFIG['thief'])


@pytest.fixture
def escape_game(escape_config):
    """Escape Door round in progress (seed=42)."""
    return escape.start_game(escape.initialize_game(seed=42, config=escape_config))


@pytest.fixture
def thief_game(thief_config):
    """Catch the Thief round in progress (seed=42)."""
    return thief.start_game(thief.initialize_game(seed=42, config=thief_config))


@pytest.fixture
def api_client():
    """Flask test client."""
    from app import app

    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


# --- Helper functions ---


def make_escape_state(player=(0, 0), chasers=(), walls=(), door=(3, 0), radius=3, moves=3, **overrides):
    """Hand-built Escape Door round in the PLAYING phase."""
    config = dict(copy.deepcopy(DEFAULT_CONFIG['escape']), map_radius=radius, moves_per_turn=moves)
    config.update(overrides)
    board = {c: CellType.OPEN for c in HexCoordinates(radius).all_coords()}
    for wall in walls:
        board[wall] = CellType.WALL
    board[door] = CellType.GOAL
    return EscapeGameState(
        game_id="test",
        config=config,
        rng=random.Random(42),
        phase=Phase.PLAYING,
        round_id=1,
        board=board,
        door=door,
        player=Actor(id="player", position=player, max_moves=moves, moves_remaining=moves),
        chasers=[Actor(id=f"c{i}", position=pos) for i, pos in enumerate(chasers, 1)],
    )


def make_thief_state(player=(1, 1), thief_pos=(2, 2), exit_pos=(0, 0), size=5, diagonal=True,
                     walls=(), **overrides):
    """Hand-built Catch the Thief round in the PLAYING phase."""
    config = dict(copy.deepcopy(DEFAULT_CONFIG['thief']), grid_size=size, diagonal_moves=diagonal)
    config.update(overrides)
    board = {c: CellType.OPEN for c in GridCoordinates(size, diagonal).all_coords()}
    for wall in walls:
        board[wall] = CellType.WALL
    board[exit_pos] = CellType.GOAL
    return ThiefGameState(
        game_id="test",
        config=config,
        rng=random.Random(42),
        phase=Phase.PLAYING,
        round_id=1,
        board=board,
        exit_pos=exit_pos,
        player=Actor(id="player", position=player),
        thief=Actor(id="thief", position=thief_pos, visible=False),
    )
