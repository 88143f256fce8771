from array import array
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple, Type

from search_emulator.core.grid import Block, DIRECTIONS, DX, DY, OPPOSITE, step
from search_emulator.core.events import MovementType, StepEvent, StepOutcome
from search_emulator.algo.base import SearchAlgo, SearchStrategy


class SearchBFS(SearchStrategy):
    """
    Breadth-first search over partial paths. The queue holds whole paths
    from start to the frontier, so the first time dest is popped its path is
    a shortest one.
    """
    def __init__(self):
        super().__init__()
        self.queue: Deque[Tuple[Block, ...]] = deque()

    @property
    def algo(self) -> SearchAlgo:
        return SearchAlgo.BFS

    @property
    def frontier_size(self) -> int:
        return len(self.queue)

    def _init_frontier(self):
        self.queue = deque([(self.start,)])
        if self.config.contains(*self.start):
            self._mark(self.start)

    def _clear_frontier(self):
        self.queue.clear()

    def _advance(self) -> List[StepOutcome]:
        path = self.queue.popleft()
        node = path[-1]
        events: List[StepOutcome] = [StepEvent(MovementType.STEP_IN, node)]

        if node == self.dest:
            events.append(self._finish(True, path))
            return events

        for direction in DIRECTIONS:
            nx, ny = node.x + DX[direction], node.y + DY[direction]
            if not self.is_valid_step(nx, ny):
                continue
            nb = Block(nx, ny)
            self._mark(nb)
            self.queue.append(path + (nb,))

        return events


class SearchDFS(SearchStrategy):
    """
    Depth-first search with a LIFO stack of blocks. Cells are marked visited
    when popped, so a cell may sit on the stack more than once; the stale
    copies are discarded. The path is rebuilt from a dense parent-direction
    grid.
    """
    def __init__(self):
        super().__init__()
        self.stack: List[Block] = []
        self.parents: Optional[array] = None

    @property
    def algo(self) -> SearchAlgo:
        return SearchAlgo.DFS

    @property
    def frontier_size(self) -> int:
        return len(self.stack)

    def _init_frontier(self):
        self.stack = [self.start]
        # 0 = None, otherwise the direction pointing back at the parent
        self.parents = array('B', [0] * self.config.cell_count)

    def _clear_frontier(self):
        self.stack.clear()
        self.parents = None

    def _wants_delay(self) -> bool:
        # Discarded duplicates cost no animation time
        if not self.stack:
            return True
        top = self.stack[-1]
        if not self.config.contains(top.x, top.y):
            return True
        return not self.is_visited(top.x, top.y)

    def _advance(self) -> List[StepOutcome]:
        node = self.stack.pop()
        if not self.config.contains(node.x, node.y) or self.is_visited(node.x, node.y):
            return []

        self._mark(node)
        events: List[StepOutcome] = [StepEvent(MovementType.STEP_IN, node)]

        if node == self.dest:
            events.append(self._finish(True, self.reconstruct_path()))
            return events

        for direction in DIRECTIONS:
            nx, ny = node.x + DX[direction], node.y + DY[direction]
            if not self.is_valid_step(nx, ny):
                continue
            self.stack.append(Block(nx, ny))
            self.parents[self.config.index(nx, ny)] = OPPOSITE[direction]

        return events

    def reconstruct_path(self) -> Tuple[Block, ...]:
        path = []
        curr = self.dest
        while curr != self.start:
            path.append(curr)
            p_dir = self.parents[self.config.index(curr.x, curr.y)]
            if p_dir == 0:
                break
            curr = step(curr, p_dir)
        path.append(self.start)
        path.reverse()
        return tuple(path)


STRATEGIES: Dict[SearchAlgo, Type[SearchStrategy]] = {
    SearchAlgo.BFS: SearchBFS,
    SearchAlgo.DFS: SearchDFS,
}


def create_strategy(algo) -> SearchStrategy:
    """Builds a fresh strategy for a SearchAlgo member or its name ("bfs"/"dfs")."""
    if not isinstance(algo, SearchAlgo):
        algo = SearchAlgo(str(algo).lower())
    return STRATEGIES[algo]()
