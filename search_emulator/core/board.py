import logging
from enum import Enum
from typing import Iterable, Optional, Set

from search_emulator.algo.maze import NoPathBlockError
from search_emulator.core.grid import Block, GridConfig, barrier_diff, toggle_barriers
from search_emulator.core.history import (
    DrawBarrier, GenerateMaze, MoveDest, MoveStart, OperationHistory, OperationUnit,
)

logger = logging.getLogger(__name__)


class EditMode(Enum):
    NONE = "none"
    BARRIER_DRAWING = "barrier_drawing"
    START_DRAGGING = "start_dragging"
    DEST_DRAGGING = "dest_dragging"


class Board:
    """
    Editable search board: size, start, dest and barrier set.

    Every edit goes through an OperationHistory session so it can be undone
    and redone. Barrier edits are stored as toggle lists, which lets a single
    drag that both draws and erases be reversed by replaying it backwards.
    """
    def __init__(self, width: int, height: int, start=(0, 0), dest=None,
                 barriers: Iterable = (), history: OperationHistory = None):
        self.config = GridConfig(width, height)
        self.start: Block = self._clamp(Block(*start))
        if dest is None:
            dest = (width - 1, height - 1)
        self.dest: Block = self._clamp(Block(*dest))
        self.barriers: Set[Block] = {Block(*b) for b in barriers if self.config.contains(*b)}
        self.history = history if history is not None else OperationHistory()
        self.mode = EditMode.NONE

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def _clamp(self, block: Block) -> Block:
        return Block(min(max(block.x, 0), self.width - 1), min(max(block.y, 0), self.height - 1))

    def is_barrier(self, block) -> bool:
        return Block(*block) in self.barriers

    # Drag gestures

    def begin_drag(self, block) -> EditMode:
        block = Block(*block)
        if block == self.start:
            new_mode, template = EditMode.START_DRAGGING, MoveStart()
        elif block == self.dest:
            new_mode, template = EditMode.DEST_DRAGGING, MoveDest()
        else:
            new_mode, template = EditMode.BARRIER_DRAWING, DrawBarrier()

        if self.mode == new_mode:
            return self.mode
        if self.mode != EditMode.NONE:
            # A gesture switching target closes the previous one first
            self.end_drag()

        self.history.start_recording(template)
        if new_mode == EditMode.START_DRAGGING:
            self.history.record(self.start)
        elif new_mode == EditMode.DEST_DRAGGING:
            self.history.record(self.dest)

        self.mode = new_mode
        return self.mode

    def drag(self, block):
        block = Block(*block)
        if not self.config.contains(*block):
            return

        if self.mode == EditMode.START_DRAGGING:
            if block in self.barriers or block == self.dest:
                return
            self.start = block
        elif self.mode == EditMode.DEST_DRAGGING:
            if block in self.barriers or block == self.start:
                return
            self.dest = block
        elif self.mode == EditMode.BARRIER_DRAWING:
            if block == self.start or block == self.dest:
                return
            toggle_barriers(self.barriers, (block,))
            self.history.record(block)

    def end_drag(self) -> Optional[OperationUnit]:
        if self.mode == EditMode.NONE:
            return None
        if self.mode == EditMode.START_DRAGGING:
            self.history.record(self.start)
        elif self.mode == EditMode.DEST_DRAGGING:
            self.history.record(self.dest)
        self.mode = EditMode.NONE
        return self.history.finish_recording()

    # One-shot edits

    def tap(self, block) -> Optional[OperationUnit]:
        block = Block(*block)
        if not self.config.contains(*block) or block == self.start or block == self.dest:
            return None
        toggle_barriers(self.barriers, (block,))
        return self.history.start_recording(DrawBarrier()).record(block).finish_recording()

    def clear_barriers(self) -> Optional[OperationUnit]:
        if not self.barriers:
            return None
        unit = self.history.start_recording(DrawBarrier()).record(sorted(self.barriers)).finish_recording()
        self.barriers = set()
        return unit

    def generate_maze(self, generator, surrounded_by_walls: bool = True,
                      wall_probability: float = None) -> OperationUnit:
        maze = generator.configure(self.width, self.height, surrounded_by_walls,
                                   wall_probability).generate()

        new_start = self.start
        if new_start in maze:
            new_start = generator.get_nearest_path_block(self.start, self.width, self.height, maze)
            if new_start is None:
                raise NoPathBlockError("no place to put start")
            logger.debug(f"Start {self.start} buried by maze, moved to {new_start}")

        new_dest = self.dest
        if new_dest in maze or new_dest == new_start:
            # The relocated start counts as occupied
            new_dest = generator.get_nearest_path_block(self.dest, self.width, self.height,
                                                        maze | {new_start})
            if new_dest is None:
                raise NoPathBlockError("no place to put dest")
            logger.debug(f"Dest {self.dest} buried by maze, moved to {new_dest}")

        template = GenerateMaze(start_from=self.start, start_to=new_start,
                                dest_from=self.dest, dest_to=new_dest)
        unit = self.history.start_recording(template).record(barrier_diff(self.barriers, maze)).finish_recording()

        self.barriers = set(maze)
        self.start = new_start
        self.dest = new_dest
        return unit

    # History

    def undo(self) -> Optional[OperationUnit]:
        # Not while a gesture is still recording
        if self.mode != EditMode.NONE or not self.history.has_undo():
            return None
        unit = self.history.undo()
        self._apply(unit, forward=False)
        return unit

    def redo(self) -> Optional[OperationUnit]:
        if self.mode != EditMode.NONE or not self.history.has_redo():
            return None
        unit = self.history.redo()
        self._apply(unit, forward=True)
        return unit

    def _apply(self, unit: OperationUnit, forward: bool):
        if isinstance(unit, MoveStart):
            target = unit.to_block if forward else unit.from_block
            if target is not None:
                self.start = target
        elif isinstance(unit, MoveDest):
            target = unit.to_block if forward else unit.from_block
            if target is not None:
                self.dest = target
        elif isinstance(unit, DrawBarrier):
            toggle_barriers(self.barriers, unit.path if forward else reversed(unit.path))
        elif isinstance(unit, GenerateMaze):
            diff = unit.barriers_diff
            toggle_barriers(self.barriers, diff if forward else reversed(diff))
            start = unit.start_to if forward else unit.start_from
            dest = unit.dest_to if forward else unit.dest_from
            if start is not None:
                self.start = start
            if dest is not None:
                self.dest = dest

    def resize(self, width: int, height: int):
        """Changes the board size. History is dropped since old edits may fall off the board."""
        self.config = GridConfig(width, height)
        self.barriers = {b for b in self.barriers if self.config.contains(*b)}
        self.start = self._clamp(self.start)
        self.dest = self._clamp(self.dest)
        self.barriers.discard(self.start)
        self.barriers.discard(self.dest)
        self.mode = EditMode.NONE
        self.history.clear()
