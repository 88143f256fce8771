from typing import Iterable, Optional

from search_emulator.core.grid import Block, GridConfig

WALL = "#"
START = "S"
DEST = "D"
PATH = "*"
PASSED = "."
EMPTY = " "


def render_board(config: GridConfig, barriers: Iterable, start=None, dest=None,
                 path: Optional[Iterable] = None, passed: Optional[Iterable] = None) -> str:
    """
    Draws the board one character per cell, one line per row. Markers win
    over path, path over passed cells, passed cells over walls.
    """
    rows = [[EMPTY] * config.width for _ in range(config.height)]

    def put(cells, ch):
        for b in cells or ():
            x, y = b
            if config.contains(x, y):
                rows[y][x] = ch

    put(barriers, WALL)
    put(passed, PASSED)
    put(path, PATH)
    if start is not None:
        put([Block(*start)], START)
    if dest is not None:
        put([Block(*dest)], DEST)
    return "\n".join("".join(r) for r in rows)
