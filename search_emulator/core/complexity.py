from collections import deque
from typing import Iterable, Optional, Set, Tuple

from search_emulator.core.grid import Block, GridConfig, neighbors


class MazeAnalyzer:
    @staticmethod
    def reachable_cells(config: GridConfig, barriers: Iterable, origin) -> Set[Block]:
        """Flood fill over non-barrier cells, 4-directional."""
        walls = {Block(*b) for b in barriers}
        origin = Block(*origin)
        if not config.contains(*origin) or origin in walls:
            return set()

        seen = {origin}
        queue = deque([origin])
        while queue:
            curr = queue.popleft()
            for nb, _ in neighbors(curr, config):
                if nb not in walls and nb not in seen:
                    seen.add(nb)
                    queue.append(nb)
        return seen

    @staticmethod
    def first_open_cell(config: GridConfig, barriers: Iterable) -> Optional[Block]:
        walls = {Block(*b) for b in barriers}
        for y in range(config.height):
            for x in range(config.width):
                if (x, y) not in walls:
                    return Block(x, y)
        return None

    @staticmethod
    def is_connected(config: GridConfig, barriers: Iterable, origin=None) -> bool:
        """True when every open cell can be reached from origin (default: first open cell)."""
        walls = {Block(*b) for b in barriers if config.contains(*b)}
        if origin is None:
            origin = MazeAnalyzer.first_open_cell(config, walls)
            if origin is None:
                return True
        open_count = config.cell_count - len(walls)
        return len(MazeAnalyzer.reachable_cells(config, walls, origin)) == open_count

    @staticmethod
    def calculate_stats(config: GridConfig, barriers: Iterable, origin: Tuple[int, int] = None):
        walls = {Block(*b) for b in barriers if config.contains(*b)}
        dead_ends = 0
        corridors = 0
        junctions = 0

        for y in range(config.height):
            for x in range(config.width):
                if (x, y) in walls:
                    continue
                exits = sum(1 for nb, _ in neighbors((x, y), config) if nb not in walls)
                if exits == 1:
                    dead_ends += 1
                elif exits == 2:
                    corridors += 1
                elif exits >= 3:
                    junctions += 1

        if origin is None:
            origin = MazeAnalyzer.first_open_cell(config, walls)
        reachable = len(MazeAnalyzer.reachable_cells(config, walls, origin)) if origin is not None else 0

        total = config.cell_count
        return {
            "walls": len(walls),
            "open": total - len(walls),
            "dead_ends": dead_ends,
            "corridors": corridors,
            "junctions": junctions,
            "reachable": reachable,
            "wall_percent": (len(walls) / total) * 100 if total > 0 else 0,
        }
