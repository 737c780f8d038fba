"""
Map generation for the Escape Door and Catch the Thief boards.

Builds a board (coordinate -> CellType) with exactly one goal cell, a
scattering of walls that never covers the player's start or the goal, and
random start cells for the non-player actors.
"""

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from coords import Coord, GridCoordinates, HexCoordinates
from models import Board, CellType


@dataclass
class MapLayout:
    """Result of a generation run."""
    board: Board
    goal: Coord
    attempts: int = 1  # Generation attempts used; > 1 when reachability forced a retry
    reachable: bool = True


def wall_target(candidate_count: int) -> int:
    """Number of wall draws for a board with this many free cells (about 15-20%)."""
    return max(3, candidate_count // 6)


def a_star_pathfinding(
    start: Coord,
    goal: Coord,
    board: Board,
    coords,
) -> Optional[List[Coord]]:
    """
    A* pathfinding over a board, treating walls as impassable.

    Args:
        start: Starting coordinate
        goal: Goal coordinate
        board: Board to search
        coords: Coordinate system providing neighbors and distance

    Returns:
        List of coordinates forming path, or None if no path found
    """
    open_set = {start}
    came_from: Dict[Coord, Coord] = {}
    g_score = {start: 0}
    f_score = {start: coords.distance(start, goal)}

    while open_set:
        current = min(open_set, key=lambda c: (f_score.get(c, float('inf')), c))

        if current == goal:
            path = []
            while current in came_from:
                path.append(current)
                current = came_from[current]
            path.append(start)
            path.reverse()
            return path

        open_set.remove(current)

        for neighbor in coords.neighbors(current):
            if neighbor not in board or board[neighbor] == CellType.WALL:
                continue

            tentative_g_score = g_score[current] + 1
            if neighbor not in g_score or tentative_g_score < g_score[neighbor]:
                came_from[neighbor] = current
                g_score[neighbor] = tentative_g_score
                f_score[neighbor] = tentative_g_score + coords.distance(neighbor, goal)
                open_set.add(neighbor)

    return None


def place_walls(board: Board, candidates: List[Coord], draws: int, rng: random.Random) -> Set[Coord]:
    """
    Draw wall cells uniformly from candidates.

    Each draw may repeat an earlier one; repeats are dropped, so the number
    of walls placed can be lower than ``draws`` on small boards.

    Returns:
        Set of coordinates turned into walls
    """
    walls: Set[Coord] = set()
    if not candidates:
        return walls
    for _ in range(draws):
        pick = rng.choice(candidates)
        if pick not in walls:
            walls.add(pick)
            board[pick] = CellType.WALL
    return walls


def place_actors(
    count: int,
    board: Board,
    coords,
    player_start: Coord,
    rng: random.Random,
    exclude: Optional[Set[Coord]] = None,
) -> List[Coord]:
    """
    Pick distinct start cells for non-player actors.

    The pool skips walls, the player's start and every cell next to it,
    anything in ``exclude`` and cells already handed out. When the pool runs
    dry the remaining placements are skipped.

    Returns:
        Chosen coordinates, possibly fewer than ``count``
    """
    exclude = exclude or set()
    chosen: List[Coord] = []
    for _ in range(count):
        pool = [
            c for c in coords.all_coords()
            if board.get(c) != CellType.WALL
            and coords.distance(c, player_start) > 1
            and c not in exclude
            and c not in chosen
        ]
        if not pool:
            break
        chosen.append(rng.choice(pool))
    return chosen


def _build_hex_board(coords: HexCoordinates, player_start: Coord, rng: random.Random) -> Tuple[Board, Coord]:
    board: Board = {c: CellType.OPEN for c in coords.all_coords()}

    door_candidates = [c for c in coords.edge_coords() if c != player_start]
    door = rng.choice(door_candidates)
    board[door] = CellType.GOAL

    free = [c for c, cell in board.items() if cell == CellType.OPEN and c != player_start]
    place_walls(board, free, wall_target(len(free)), rng)
    return board, door


def generate_hex_map(
    radius: int,
    rng: random.Random,
    player_start: Coord = (0, 0),
    require_reachable: bool = True,
    max_attempts: int = 10,
) -> MapLayout:
    """
    Generate the hex disk for Escape Door.

    One door on the rim, walls among the remaining open hexes. When
    ``require_reachable`` is set the board is regenerated until A* finds a
    path from the start to the door, keeping the last attempt if none does.

    Args:
        radius: Disk radius
        rng: Random source
        player_start: Player start hex, never a wall or the door
        require_reachable: Retry boards whose door is walled off
        max_attempts: Upper bound on generation attempts

    Returns:
        MapLayout with the board and the door coordinate
    """
    coords = HexCoordinates(radius)
    attempts = 0
    while True:
        attempts += 1
        board, door = _build_hex_board(coords, player_start, rng)
        if not require_reachable:
            return MapLayout(board=board, goal=door, attempts=attempts)
        reachable = a_star_pathfinding(player_start, door, board, coords) is not None
        if reachable or attempts >= max_attempts:
            return MapLayout(board=board, goal=door, attempts=attempts, reachable=reachable)


def generate_grid_map(
    size: int,
    rng: random.Random,
    player_start: Coord,
    diagonal: bool = True,
    wall_count: int = 0,
    require_reachable: bool = True,
    max_attempts: int = 10,
) -> MapLayout:
    """
    Generate the square grid for Catch the Thief.

    The exit sits on one of the four corners. ``wall_count`` wall draws are
    made (capped at the usual wall target); the classic board uses none.
    """
    coords = GridCoordinates(size, diagonal)
    attempts = 0
    while True:
        attempts += 1
        board: Board = {c: CellType.OPEN for c in coords.all_coords()}
        exit_candidates = [c for c in coords.edge_coords() if c != player_start]
        exit_pos = rng.choice(exit_candidates)
        board[exit_pos] = CellType.GOAL

        if wall_count > 0:
            free = [c for c, cell in board.items() if cell == CellType.OPEN and c != player_start]
            place_walls(board, free, min(wall_count, wall_target(len(free))), rng)
        else:
            return MapLayout(board=board, goal=exit_pos, attempts=attempts)

        if not require_reachable:
            return MapLayout(board=board, goal=exit_pos, attempts=attempts)
        reachable = a_star_pathfinding(player_start, exit_pos, board, coords) is not None
        if reachable or attempts >= max_attempts:
            return MapLayout(board=board, goal=exit_pos, attempts=attempts, reachable=reachable)


def count_cells(board: Board) -> Dict[CellType, int]:
    """Tally cells by classification."""
    counts = {cell_type: 0 for cell_type in CellType}
    for cell in board.values():
        counts[cell] += 1
    return counts
