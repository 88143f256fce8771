from enum import Enum
from typing import List, NamedTuple, Optional, Tuple, Union

from search_emulator.core.grid import Block


class MovementType(Enum):
    STEP_IN = 1
    REVERSE = 0


class StepEvent(NamedTuple):
    kind: MovementType
    block: Block


class FinishEvent(NamedTuple):
    found: bool
    path: Optional[Tuple[Block, ...]]


StepOutcome = Union[StepEvent, FinishEvent]


class EventLog:
    """
    Collects the callbacks of a search run in order.
    Its bound methods can be handed straight to SearchStrategy.search().
    """
    def __init__(self):
        self.events: List[Union[StepEvent, FinishEvent, str]] = []
        self.pause_count = 0
        self.finish: Optional[FinishEvent] = None

    def on_step(self, kind: MovementType, block: Block):
        self.events.append(StepEvent(kind, block))

    def on_pause(self):
        self.pause_count += 1
        self.events.append("pause")

    def on_finish(self, found: bool, path):
        self.finish = FinishEvent(found, tuple(path) if path is not None else None)
        self.events.append(self.finish)

    @property
    def stepped(self) -> List[Block]:
        return [e.block for e in self.events
                if isinstance(e, StepEvent) and e.kind is MovementType.STEP_IN]

    def clear(self):
        self.events.clear()
        self.pause_count = 0
        self.finish = None
