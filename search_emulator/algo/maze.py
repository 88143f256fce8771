import logging
import random
from collections import deque
from typing import Iterable, List, Optional, Set, Tuple

from search_emulator.core.grid import Block, DIRECTIONS, DX, DY, GridConfig

logger = logging.getLogger(__name__)


class NoPathBlockError(ValueError):
    """A start or dest cell could not be placed on any open cell of the maze."""


class MazeGenerator:
    """
    Randomized backtracking carve that yields a barrier set.

    Cells start UNVISITED. A cell touching more than one PATH cell is turned
    into a WALL with probability wall_probability; otherwise it becomes PATH
    and its neighbours are carved in shuffled order. With wall_probability=1
    the open cells form a perfect spanning tree; lower values leave some
    junctions open and braid the maze with loops.
    """
    UNVISITED = -1
    PATH = 0
    WALL = 1

    DEFAULT_WALL_PROBABILITY = 0.9

    def __init__(self, seed: int = None):
        self.seed = seed
        self.rng = random.Random(seed)
        self.width = 0
        self.height = 0
        self.surrounded_by_walls = True
        self.wall_probability = self.DEFAULT_WALL_PROBABILITY
        self.barriers: Set[Block] = set()
        self.cells: List[int] = []

    def configure(self, width: int, height: int, surrounded_by_walls: bool = True,
                  wall_probability: float = None) -> "MazeGenerator":
        if wall_probability is None:
            wall_probability = self.DEFAULT_WALL_PROBABILITY
        if not 0.0 <= wall_probability <= 1.0:
            raise ValueError(f"wall_probability must be within [0, 1], got {wall_probability}")
        self.width = width
        self.height = height
        self.surrounded_by_walls = surrounded_by_walls
        self.wall_probability = wall_probability
        return self

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _is_wall_random(self) -> bool:
        return self.rng.random() < self.wall_probability

    def generate(self) -> Set[Block]:
        w, h = self.width, self.height
        self.cells = [self.UNVISITED] * (w * h)
        self.barriers = set()

        if w <= 0 or h <= 0:
            return self.barriers

        if self.surrounded_by_walls:
            for y in range(h):
                self.cells[y * w] = self.WALL
                self.cells[y * w + w - 1] = self.WALL
            for x in range(w):
                self.cells[x] = self.WALL
                self.cells[(h - 1) * w + x] = self.WALL

            if w <= 2 or h <= 2:
                # Nothing inside the border to carve
                return self._collect_walls()

        start = (1, 1) if self.surrounded_by_walls else (0, 0)
        self._carve(start)
        walls = self._collect_walls()
        logger.debug(f"Generated {w}x{h} maze: {len(walls)} walls (seed={self.seed})")
        return walls

    def _carve(self, start: Tuple[int, int]):
        # Explicit stack in place of recursion. Children are pushed in reverse
        # so they are popped in shuffled order, each subtree finishing before
        # the next sibling is looked at, exactly as the recursive carve would.
        w = self.width
        stack = [start]
        while stack:
            x, y = stack.pop()
            if not self._in_bounds(x, y):
                continue
            idx = y * w + x
            if self.cells[idx] != self.UNVISITED:
                continue

            path_neighbors = 0
            for d in DIRECTIONS:
                nx, ny = x + DX[d], y + DY[d]
                if self._in_bounds(nx, ny) and self.cells[ny * w + nx] == self.PATH:
                    path_neighbors += 1

            if path_neighbors > 1 and self._is_wall_random():
                self.cells[idx] = self.WALL
                continue

            self.cells[idx] = self.PATH
            dirs = list(DIRECTIONS)
            self.rng.shuffle(dirs)
            for d in reversed(dirs):
                stack.append((x + DX[d], y + DY[d]))

    def _collect_walls(self) -> Set[Block]:
        w = self.width
        self.barriers = {Block(i % w, i // w) for i, v in enumerate(self.cells) if v == self.WALL}
        return self.barriers

    def get_nearest_path_block(self, center, width: int, height: int,
                               barriers: Iterable = None) -> Optional[Block]:
        """
        Breadth-first search from center for the closest cell that is not a
        barrier. Walls are walked through; they only stop being answers.
        Ties go to the first cell found in up, right, down, left order.
        Returns None when every reachable cell is a wall.
        """
        walls = self.barriers if barriers is None else {Block(*b) for b in barriers}
        config = GridConfig(width, height)
        center = Block(*center)

        queue = deque([center])
        seen = {center}
        while queue:
            curr = queue.popleft()
            if curr not in walls and config.contains(*curr):
                return curr

            for d in DIRECTIONS:
                nb = Block(curr.x + DX[d], curr.y + DY[d])
                if config.contains(nb.x, nb.y) and nb not in seen:
                    seen.add(nb)
                    queue.append(nb)
        return None
