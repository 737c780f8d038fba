# Models for board cells and actors shared by both games

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class CellType(Enum):
    OPEN = "Open"
    WALL = "Wall"
    GOAL = "Goal"  # Door on the hex board, exit on the grid board


class Phase(Enum):
    MENU = "menu"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass
class Actor:
    """
    A piece on the board: the player, a chaser or the thief.

    Actors live in lists owned by the round state and are addressed by id,
    so the same actor keeps its identity across turns while the state is the
    only thing that mutates it.
    """
    id: str  # Actor identifier (e.g., 'player', 'c1', 'thief')
    position: Tuple[int, int]  # (q, r) on the hex board, (row, col) on the grid
    max_moves: int = 1  # Per-turn move budget
    moves_remaining: int = 1
    visible: bool = True  # Only the thief is ever hidden
    active: bool = True

    def move(self, target: Tuple[int, int]) -> None:
        """Move to target and spend one move from the budget."""
        self.position = target
        self.moves_remaining = max(0, self.moves_remaining - 1)

    def reset_moves(self) -> None:
        self.moves_remaining = self.max_moves


Board = Dict[Tuple[int, int], CellType]
