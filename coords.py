"""
Coordinate systems for the two boards.

Axial hex coordinates (q, r) for the Escape Door disk, and (row, col) grid
coordinates for the Catch the Thief square. Both expose the same small
interface so the validator and the AI never need to know which board they
are working on.
"""

from typing import List, Tuple

Coord = Tuple[int, int]

# Fixed enumeration order: chaser ties go to the first direction listed.
HEX_DIRECTIONS = [(1, 0), (-1, 0), (0, 1), (0, -1), (1, -1), (-1, 1)]

GRID_DIRECTIONS = {
    'up': (-1, 0),
    'down': (1, 0),
    'left': (0, -1),
    'right': (0, 1),
    'up_left': (-1, -1),
    'up_right': (-1, 1),
    'down_left': (1, -1),
    'down_right': (1, 1),
}
ORTHOGONAL = ['up', 'down', 'left', 'right']
DIAGONAL = ['up_left', 'up_right', 'down_left', 'down_right']


def get_hex_neighbors(q: int, r: int) -> List[Coord]:
    """
    Get the 6 neighboring hex coordinates in axial system.

    Args:
        q: Axial coordinate q
        r: Axial coordinate r

    Returns:
        List of (q, r) coordinates in the fixed direction order
    """
    return [(q + dq, r + dr) for dq, dr in HEX_DIRECTIONS]


def hex_distance_sum(a: Coord, b: Coord) -> int:
    """Unnormalised hex distance |dq| + |dr| + |dq + dr| (twice the step count)."""
    dq = a[0] - b[0]
    dr = a[1] - b[1]
    return abs(dq) + abs(dr) + abs(dq + dr)


def hex_distance(a: Coord, b: Coord) -> int:
    """
    Calculate distance between two hexes using axial coordinates.

    Args:
        a: First hex as (q, r)
        b: Second hex as (q, r)

    Returns:
        Number of single steps between the hexes
    """
    return hex_distance_sum(a, b) // 2


def manhattan_distance(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def chebyshev_distance(a: Coord, b: Coord) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


class HexCoordinates:
    """Hexagonal disk of the given radius centred on (0, 0)."""

    def __init__(self, radius: int):
        self.radius = radius

    def neighbors(self, coord: Coord) -> List[Coord]:
        return get_hex_neighbors(coord[0], coord[1])

    def in_bounds(self, coord: Coord) -> bool:
        q, r = coord
        s = -q - r
        return abs(q) <= self.radius and abs(r) <= self.radius and abs(s) <= self.radius

    def distance(self, a: Coord, b: Coord) -> int:
        return hex_distance(a, b)

    def is_adjacent(self, a: Coord, b: Coord) -> bool:
        return hex_distance(a, b) == 1

    def all_coords(self) -> List[Coord]:
        """All in-bounds hexes, q-major then r."""
        coords = []
        for q in range(-self.radius, self.radius + 1):
            for r in range(-self.radius, self.radius + 1):
                if self.in_bounds((q, r)):
                    coords.append((q, r))
        return coords

    def edge_coords(self) -> List[Coord]:
        """Hexes on the rim of the disk."""
        return [
            (q, r) for q, r in self.all_coords()
            if abs(q) == self.radius or abs(r) == self.radius or abs(q + r) == self.radius
        ]


class GridCoordinates:
    """
    Square grid of side ``size`` with 4- or 8-directional adjacency.

    The distance metric follows the adjacency: Manhattan for 4 directions,
    Chebyshev for 8, so AI scores always agree with what is reachable in one
    step.
    """

    def __init__(self, size: int, diagonal: bool = True):
        self.size = size
        self.diagonal = diagonal
        names = ORTHOGONAL + DIAGONAL if diagonal else list(ORTHOGONAL)
        self.directions = [(name, GRID_DIRECTIONS[name]) for name in names]

    def neighbors(self, coord: Coord) -> List[Coord]:
        row, col = coord
        return [(row + dr, col + dc) for _, (dr, dc) in self.directions]

    def step(self, coord: Coord, direction: str) -> Coord:
        """Apply a named direction. Raises KeyError for a direction this grid does not allow."""
        dr, dc = dict(self.directions)[direction]
        return (coord[0] + dr, coord[1] + dc)

    def in_bounds(self, coord: Coord) -> bool:
        row, col = coord
        return 0 <= row < self.size and 0 <= col < self.size

    def distance(self, a: Coord, b: Coord) -> int:
        if self.diagonal:
            return chebyshev_distance(a, b)
        return manhattan_distance(a, b)

    def is_adjacent(self, a: Coord, b: Coord) -> bool:
        return self.distance(a, b) == 1

    def all_coords(self) -> List[Coord]:
        return [(row, col) for row in range(self.size) for col in range(self.size)]

    def edge_coords(self) -> List[Coord]:
        """The four corners, the only exit candidates on a grid board."""
        last = self.size - 1
        return [(0, 0), (0, last), (last, 0), (last, last)]

    def interior_coords(self) -> List[Coord]:
        return [(row, col) for row in range(1, self.size - 1) for col in range(1, self.size - 1)]
