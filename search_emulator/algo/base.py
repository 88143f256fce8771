import logging
import time
from abc import ABC, abstractmethod
from array import array
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from search_emulator.core.grid import Block, GridConfig
from search_emulator.core.events import FinishEvent, MovementType, StepEvent, StepOutcome

logger = logging.getLogger(__name__)


class SearchNotInitializedError(RuntimeError):
    """search() or step() was called before init()."""


class SearchStatus(Enum):
    IDLE = "idle"
    INITIALIZED = "initialized"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class SearchAlgo(Enum):
    BFS = "bfs"
    DFS = "dfs"


StepCallback = Callable[[MovementType, Block], None]
PauseCallback = Callable[[], None]
FinishCallback = Callable[[bool, Optional[Tuple[Block, ...]]], None]


class SearchStrategy(ABC):
    """
    Resumable, cancellable grid search.

    configure() stores the board, init() builds the run state, and the
    orchestrator either calls step() itself (one frontier pop per call) or
    hands control to search(), which loops over step() with a delay between
    steps. A pending pause() is honoured at the top of the next iteration;
    the frontier and visited grid survive it so search() can continue after
    resume().
    """
    def __init__(self):
        self.config: Optional[GridConfig] = None
        self.start = Block(0, 0)
        self.dest = Block(0, 0)
        self.barriers: Tuple[Block, ...] = ()
        self.status = SearchStatus.IDLE

        # Run state, rebuilt by every init()
        self.visited: Optional[array] = None
        self.visited_count = 0

    @property
    @abstractmethod
    def algo(self) -> SearchAlgo:
        pass

    def configure(self, width: int, height: int, start, dest, barriers: Iterable = ()) -> "SearchStrategy":
        self.stop()
        self.config = GridConfig(width, height)
        self.start = Block(*start)
        self.dest = Block(*dest)
        self.barriers = tuple(Block(*b) for b in barriers)
        return self

    def init(self) -> "SearchStrategy":
        if self.config is None:
            raise SearchNotInitializedError("configure() must be called before init()")

        self.visited = array('B', [0] * self.config.cell_count)
        self.visited_count = 0
        for b in self.barriers:
            # Barriers outside the board are the caller's problem, not ours
            if self.config.contains(b.x, b.y):
                self.visited[self.config.index(b.x, b.y)] = 1

        self._init_frontier()
        self.status = SearchStatus.INITIALIZED
        logger.debug(f"{self.algo.name} initialized: {self.config.width}x{self.config.height}, "
                     f"{self.start} -> {self.dest}, {len(self.barriers)} barriers")
        return self

    @abstractmethod
    def _init_frontier(self):
        pass

    @abstractmethod
    def _advance(self) -> List[StepOutcome]:
        """Pops one frontier entry. Only called while the frontier is non-empty."""
        pass

    @property
    @abstractmethod
    def frontier_size(self) -> int:
        pass

    @property
    def is_initialized(self) -> bool:
        return self.visited is not None

    def _wants_delay(self) -> bool:
        return True

    def _require_init(self):
        if not self.is_initialized:
            raise SearchNotInitializedError("not init yet")

    def step(self) -> List[StepOutcome]:
        """
        Advances exactly one frontier pop and returns the events it produced:
        the StepEvent for the cell stepped into, followed by a FinishEvent when
        that cell was dest. An empty frontier yields a single failed
        FinishEvent. A discarded duplicate, a paused run or a finished run
        yields nothing.
        """
        self._require_init()
        if self.status in (SearchStatus.FINISHED, SearchStatus.PAUSED):
            return []

        self.status = SearchStatus.RUNNING
        if self.frontier_size == 0:
            return [self._finish(False, None)]
        return self._advance()

    def search(self, step_delay_ms: float, on_step: StepCallback, on_pause: PauseCallback,
               on_finish: FinishCallback, sleep: Callable[[float], None] = time.sleep):
        self._require_init()
        if self.status is SearchStatus.FINISHED:
            return

        if self.status is not SearchStatus.PAUSED:
            self.status = SearchStatus.RUNNING

        while self.frontier_size > 0:
            if step_delay_ms > 0 and self._wants_delay():
                sleep(step_delay_ms / 1000.0)

            if self.status is SearchStatus.PAUSED:
                on_pause()
                return
            # stop() from inside a callback ends the loop quietly
            if not self.is_initialized:
                return

            for outcome in self._advance():
                if isinstance(outcome, StepEvent):
                    on_step(outcome.kind, outcome.block)
                else:
                    on_finish(outcome.found, outcome.path)
                    return

        if not self.is_initialized:
            return
        if self.status is SearchStatus.PAUSED:
            on_pause()
            return
        self._finish(False, None)
        on_finish(False, None)

    def _finish(self, found: bool, path: Optional[Tuple[Block, ...]]) -> FinishEvent:
        self.status = SearchStatus.FINISHED
        logger.debug(f"{self.algo.name} finished: found={found}, visited={self.visited_count}")
        return FinishEvent(found, path)

    def _mark(self, block: Block):
        self.visited[self.config.index(block.x, block.y)] = 1
        self.visited_count += 1

    def is_visited(self, x: int, y: int) -> bool:
        return bool(self.visited[y * self.config.width + x])

    def is_valid_step(self, x: int, y: int) -> bool:
        return self.config.contains(x, y) and not self.visited[y * self.config.width + x]

    def pause(self):
        if self.status in (SearchStatus.INITIALIZED, SearchStatus.RUNNING):
            self.status = SearchStatus.PAUSED

    def resume(self):
        if self.status is SearchStatus.PAUSED:
            self.status = SearchStatus.INITIALIZED

    def stop(self):
        self.status = SearchStatus.IDLE
        self.visited = None
        self.visited_count = 0
        self._clear_frontier()

    reset = stop

    @abstractmethod
    def _clear_frontier(self):
        pass
