from typing import Iterable, Iterator, List, NamedTuple, Set, Tuple


class Block(NamedTuple):
    x: int
    y: int


# Direction bits, shared by the solvers for parent-direction grids
NORTH = 0b0001
EAST  = 0b0010
SOUTH = 0b0100
WEST  = 0b1000

DX = {NORTH: 0, EAST: 1, SOUTH: 0, WEST: -1}
DY = {NORTH: -1, EAST: 0, SOUTH: 1, WEST: 0}
OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}

# Fixed expansion order: up, right, down, left
DIRECTIONS: Tuple[int, ...] = (NORTH, EAST, SOUTH, WEST)


class GridConfig:
    __slots__ = ('width', 'height')

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> int:
        if self.contains(x, y):
            return y * self.width + x
        raise IndexError(f"Coordinate ({x}, {y}) out of bounds")

    def __eq__(self, other):
        if not isinstance(other, GridConfig):
            return NotImplemented
        return self.width == other.width and self.height == other.height

    def __repr__(self):
        return f"GridConfig({self.width}, {self.height})"


def step(block: Tuple[int, int], direction: int) -> Block:
    return Block(block[0] + DX[direction], block[1] + DY[direction])


def neighbors(block: Tuple[int, int], config: GridConfig) -> Iterator[Tuple[Block, int]]:
    """
    Yields (neighbor, direction_to_neighbor) for every in-bounds 4-neighbour,
    in up, right, down, left order. Barriers are not checked here.
    """
    for direction in DIRECTIONS:
        nb = step(block, direction)
        if config.contains(nb.x, nb.y):
            yield nb, direction


def toggle_barriers(barriers: Set[Block], blocks: Iterable[Tuple[int, int]]) -> Set[Block]:
    """
    Flips barrier membership for each block in order (XOR), in place.
    Replaying the same list a second time restores the original set.
    """
    for b in blocks:
        b = Block(*b)
        if b in barriers:
            barriers.remove(b)
        else:
            barriers.add(b)
    return barriers


def barrier_diff(old: Iterable[Tuple[int, int]], new: Iterable[Tuple[int, int]]) -> List[Block]:
    """Symmetric difference of two barrier sets as a sorted toggle list."""
    old_set = {Block(*b) for b in old}
    new_set = {Block(*b) for b in new}
    return sorted(old_set ^ new_set)
