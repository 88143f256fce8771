import sys
import os
import time

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from search_emulator.core.grid import GridConfig
from search_emulator.core.board import Board
from search_emulator.core.complexity import MazeAnalyzer
from search_emulator.core.events import EventLog
from search_emulator.algo.maze import MazeGenerator
from search_emulator.algo.solvers import SearchBFS, SearchDFS


def benchmark_size(width: int, height: int, seed: int = 42):
    print(f"\n--- Benchmarking {width}x{height} ({width*height:,} cells) ---")

    # 1. Generation
    gen_start = time.time()
    board = Board(width, height, start=(1, 1), dest=(width - 2, height - 2))
    board.generate_maze(MazeGenerator(seed=seed))
    gen_time = time.time() - gen_start
    stats = MazeAnalyzer.calculate_stats(board.config, board.barriers, board.start)
    print(f"Generation Time: {gen_time:.4f}s")
    print(f"Walls: {stats['walls']:,} ({stats['wall_percent']:.1f}%)  Dead ends: {stats['dead_ends']:,}")

    # 2. Search
    print(f"\n{'ALGORITHM':<10} | {'TIME (s)':<10} | {'PATH LEN':<10} | {'VISITED':<10}")
    print("-" * 50)
    for name, cls in (("BFS", SearchBFS), ("DFS", SearchDFS)):
        log = EventLog()
        strategy = cls().configure(width, height, board.start, board.dest, board.barriers).init()
        t0 = time.time()
        strategy.search(0, log.on_step, log.on_pause, log.on_finish)
        duration = time.time() - t0
        path_len = len(log.finish.path) if log.finish and log.finish.path else 0
        print(f"{name:<10} | {duration:<10.4f} | {path_len:<10} | {len(log.stepped):<10}")


def connectivity_ratio(width: int, height: int, runs: int = 200):
    grid = GridConfig(width, height)
    connected = 0
    for seed in range(runs):
        walls = MazeGenerator(seed=seed).configure(width, height).generate()
        if MazeAnalyzer.is_connected(grid, walls, origin=(1, 1)):
            connected += 1
    print(f"\nConnectivity {width}x{height}: {connected}/{runs} ({connected / runs * 100:.1f}%) fully connected")


def run_suite():
    sizes = [
        (21, 21),
        (101, 101),
        (301, 301),
    ]

    for w, h in sizes:
        benchmark_size(w, h)

    connectivity_ratio(5, 5)
    connectivity_ratio(21, 21)


if __name__ == "__main__":
    run_suite()
