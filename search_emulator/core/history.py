import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple, Union

from search_emulator.core.grid import Block

logger = logging.getLogger(__name__)


class EmptyHistoryError(IndexError):
    """undo() or redo() was called with nothing on the stack."""


@dataclass(frozen=True)
class MoveStart:
    from_block: Optional[Block] = None
    to_block: Optional[Block] = None


@dataclass(frozen=True)
class MoveDest:
    from_block: Optional[Block] = None
    to_block: Optional[Block] = None


@dataclass(frozen=True)
class DrawBarrier:
    # Toggle list: replay forwards to redo, backwards to undo
    path: Tuple[Block, ...] = ()


@dataclass(frozen=True)
class GenerateMaze:
    barriers_diff: Tuple[Block, ...] = ()
    start_from: Optional[Block] = None
    start_to: Optional[Block] = None
    dest_from: Optional[Block] = None
    dest_to: Optional[Block] = None


OperationUnit = Union[MoveStart, MoveDest, DrawBarrier, GenerateMaze]


class OperationHistory:
    """
    Undo/redo stacks of finished edits.

    An edit is recorded in three calls: start_recording() with an empty unit
    of the wanted kind, any number of record() calls that buffer the touched
    blocks, and finish_recording() which turns the buffer into the final unit.
    Applying units to the board is the caller's job.
    """
    def __init__(self):
        self.undo_stack: List[OperationUnit] = []
        self.redo_stack: List[OperationUnit] = []
        self._template: Optional[OperationUnit] = None
        self._buffer: List[Block] = []

    @property
    def is_recording(self) -> bool:
        return self._template is not None

    def start_recording(self, unit_template: OperationUnit) -> "OperationHistory":
        if self._template is not None:
            # First session wins
            logger.debug(f"Recording already open ({type(self._template).__name__}), "
                         f"ignoring start of {type(unit_template).__name__}")
            return self
        self._template = unit_template
        self._buffer = []
        return self

    def record(self, blocks: Union[Tuple[int, int], Iterable[Tuple[int, int]]]) -> "OperationHistory":
        if self._template is None:
            return self
        if _is_block(blocks):
            self._buffer.append(Block(*blocks))
        else:
            self._buffer.extend(Block(*b) for b in blocks)
        return self

    def finish_recording(self) -> Optional[OperationUnit]:
        if self._template is None:
            return None

        template, buffer = self._template, self._buffer
        if isinstance(template, (MoveStart, MoveDest)):
            unit = replace(template,
                           from_block=buffer[0] if buffer else None,
                           to_block=buffer[-1] if buffer else None)
        elif isinstance(template, DrawBarrier):
            unit = replace(template, path=tuple(buffer))
        elif isinstance(template, GenerateMaze):
            unit = replace(template, barriers_diff=tuple(buffer))
        else:
            raise TypeError(f"Unknown operation unit: {template!r}")

        self.undo_stack.append(unit)
        self.redo_stack.clear()
        self._template = None
        self._buffer = []
        return unit

    def undo(self) -> OperationUnit:
        if not self.undo_stack:
            raise EmptyHistoryError("no movement to undo")
        unit = self.undo_stack.pop()
        self.redo_stack.append(unit)
        return unit

    def redo(self) -> OperationUnit:
        if not self.redo_stack:
            raise EmptyHistoryError("no movement to redo")
        unit = self.redo_stack.pop()
        self.undo_stack.append(unit)
        return unit

    def has_undo(self) -> bool:
        return bool(self.undo_stack)

    def has_redo(self) -> bool:
        return bool(self.redo_stack)

    def clear(self):
        self.undo_stack.clear()
        self.redo_stack.clear()
        self._template = None
        self._buffer = []


def _is_block(value) -> bool:
    return isinstance(value, tuple) and len(value) == 2 and all(isinstance(v, int) for v in value)
