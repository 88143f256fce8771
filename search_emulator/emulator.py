import logging
import time
from enum import Enum
from typing import Callable, List, Optional, Tuple

from search_emulator import config
from search_emulator.algo.base import SearchAlgo, SearchStrategy
from search_emulator.algo.maze import MazeGenerator
from search_emulator.algo.solvers import create_strategy
from search_emulator.core.board import Board
from search_emulator.core.events import FinishEvent, MovementType, StepEvent, StepOutcome
from search_emulator.core.grid import Block

logger = logging.getLogger(__name__)


class SessionStatus(Enum):
    IDLE = "idle"
    STARTED = "started"
    PAUSED = "paused"
    FINISHED = "finished"


class Emulator:
    """
    One editing/search session: a Board, the strategy that searches it, and
    the results of the last run. Front ends talk to this object only.

    The board can be edited while IDLE or FINISHED (an edit clears the old
    results); edits during a run or while paused are ignored.
    """
    def __init__(self, board: Board, strategy: SearchStrategy = None,
                 step_delay_ms: int = None, maze_generator: MazeGenerator = None):
        self.board = board
        self.strategy = strategy if strategy is not None else create_strategy(SearchAlgo.DFS)
        # Speed tick, see config; an explicit delay overrides it
        self.speed = config.MOVEMENT_SPEED_DEFAULT
        if step_delay_ms is None:
            step_delay_ms = config.get_movement_speed_delay(self.speed)
        elif step_delay_ms > 0:
            self.speed = config.clamp_speed_tick(config.get_movement_speed_tick(step_delay_ms))
        else:
            self.speed = config.MOVEMENT_SPEED_MAX
        self.step_delay_ms = step_delay_ms
        self.maze_generator = maze_generator if maze_generator is not None else MazeGenerator()

        self.status = SessionStatus.IDLE
        self.passed: List[Block] = []
        self.path: List[Block] = []
        self.found: Optional[bool] = None

    @property
    def algo(self) -> SearchAlgo:
        return self.strategy.algo

    # Search control

    def start(self):
        if self.status == SessionStatus.STARTED:
            return
        if self.status == SessionStatus.PAUSED:
            self.strategy.resume()
        else:
            b = self.board
            self.strategy.configure(b.width, b.height, b.start, b.dest, b.barriers).init()
            self.passed = []
            self.found = None
            logger.debug(f"Search launched with {self.algo.name}")
        self.path = []
        self.status = SessionStatus.STARTED

    def pause(self):
        if self.status != SessionStatus.STARTED:
            return
        self.strategy.pause()
        self.status = SessionStatus.PAUSED

    def reset(self):
        self.strategy.stop()
        self.passed = []
        self.path = []
        self.found = None
        self.status = SessionStatus.IDLE

    def tick(self) -> List[StepOutcome]:
        """One frontier pop, for front ends that drive the search per frame."""
        if self.status != SessionStatus.STARTED:
            return []
        outcomes = self.strategy.step()
        for outcome in outcomes:
            if isinstance(outcome, StepEvent):
                self._on_step(outcome.kind, outcome.block)
            elif isinstance(outcome, FinishEvent):
                self._on_finish(outcome.found, outcome.path)
        return outcomes

    def run(self, sleep: Callable[[float], None] = time.sleep):
        """Runs the search loop until it finishes or is paused."""
        if self.status != SessionStatus.STARTED:
            self.start()
        self.strategy.search(self.step_delay_ms, self._on_step, self._on_pause, self._on_finish, sleep=sleep)

    def _on_step(self, kind: MovementType, block: Block):
        if kind is MovementType.STEP_IN:
            self.passed.append(block)
        elif block in self.passed:
            self.passed.remove(block)

    def _on_pause(self):
        logger.debug("Search paused")

    def _on_finish(self, found: bool, path: Optional[Tuple[Block, ...]]):
        self.found = found
        self.path = list(path) if path else []
        self.status = SessionStatus.FINISHED
        logger.debug(f"Search finished: found={found}, path length={len(self.path)}")

    # Settings

    def set_strategy(self, algo):
        strategy = create_strategy(algo)
        if strategy.algo == self.strategy.algo:
            return
        self.reset()
        self.strategy = strategy

    def set_speed(self, tick: float):
        self.speed = config.clamp_speed_tick(tick)
        self.step_delay_ms = config.get_movement_speed_delay(self.speed)

    # Board edits

    def _editable(self) -> bool:
        if self.status == SessionStatus.FINISHED:
            self.reset()
        if self.status != SessionStatus.IDLE:
            logger.debug(f"Edit ignored while {self.status.value}")
            return False
        return True

    def begin_drag(self, block):
        if self._editable():
            return self.board.begin_drag(block)
        return None

    def drag(self, block):
        if self.status == SessionStatus.IDLE:
            self.board.drag(block)

    def end_drag(self):
        if self.status == SessionStatus.IDLE:
            return self.board.end_drag()
        return None

    def tap(self, block):
        if self._editable():
            return self.board.tap(block)
        return None

    def clear_barriers(self):
        if self._editable():
            return self.board.clear_barriers()
        return None

    def generate_maze(self, surrounded_by_walls: bool = True, wall_probability: float = None):
        if not self._editable():
            return None
        if wall_probability is None:
            wall_probability = config.MAZE_WALL_PROBABILITY
        return self.board.generate_maze(self.maze_generator, surrounded_by_walls, wall_probability)

    def undo(self):
        if self._editable():
            return self.board.undo()
        return None

    def redo(self):
        if self._editable():
            return self.board.redo()
        return None

    def resize(self, width: int, height: int):
        if self._editable():
            self.board.resize(width, height)
