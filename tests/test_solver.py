import unittest
import sys
import os
from collections import deque

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from search_emulator.core.board import Board
from search_emulator.core.events import EventLog, FinishEvent, MovementType, StepEvent
from search_emulator.core.grid import Block, GridConfig, neighbors
from search_emulator.algo.base import SearchAlgo, SearchNotInitializedError, SearchStatus
from search_emulator.algo.maze import MazeGenerator
from search_emulator.algo.solvers import SearchBFS, SearchDFS, create_strategy


def shortest_length(width, height, start, dest, barriers):
    """Plain BFS distance in blocks (start and dest included), or None."""
    grid = GridConfig(width, height)
    walls = set(barriers)
    dist = {Block(*start): 1}
    queue = deque([Block(*start)])
    while queue:
        curr = queue.popleft()
        if curr == dest:
            return dist[curr]
        for nb, _ in neighbors(curr, grid):
            if nb not in walls and nb not in dist:
                dist[nb] = dist[curr] + 1
                queue.append(nb)
    return None


class TestSolvers(unittest.TestCase):
    def run_search(self, strategy, width, height, start, dest, barriers=()):
        log = EventLog()
        strategy.configure(width, height, start, dest, barriers).init()
        strategy.search(0, log.on_step, log.on_pause, log.on_finish)
        return log

    def assertValidPath(self, path, start, dest, barriers, width, height):
        self.assertEqual(path[0], start)
        self.assertEqual(path[-1], dest)
        self.assertEqual(len(set(path)), len(path), "Path revisits a block")
        grid = GridConfig(width, height)
        for a, b in zip(path, path[1:]):
            self.assertEqual(abs(a.x - b.x) + abs(a.y - b.y), 1, f"{a} -> {b} is not a single move")
        for b in path:
            self.assertTrue(grid.contains(*b))
            self.assertNotIn(b, barriers)

    def test_bfs_open_grid(self):
        log = self.run_search(SearchBFS(), 3, 3, (0, 0), (2, 2))

        self.assertTrue(log.finish.found)
        self.assertEqual(len(log.finish.path), 5)
        self.assertValidPath(log.finish.path, (0, 0), (2, 2), set(), 3, 3)
        self.assertEqual(log.stepped[0], (0, 0))
        self.assertEqual(log.stepped[-1], (2, 2))
        self.assertEqual(log.pause_count, 0)

    def test_no_path(self):
        # Column x=1 walls the start off
        wall = [(1, 0), (1, 1), (1, 2)]
        for strategy in (SearchBFS(), SearchDFS()):
            log = self.run_search(strategy, 3, 3, (0, 0), (2, 2), wall)
            self.assertEqual(log.finish, FinishEvent(False, None))
            self.assertEqual(set(log.stepped), {(0, 0), (0, 1), (0, 2)})
            self.assertEqual(strategy.status, SearchStatus.FINISHED)

    def test_boxed_in_start(self):
        log = self.run_search(SearchBFS(), 3, 3, (0, 0), (2, 2), [(1, 0), (0, 1)])
        self.assertEqual(log.stepped, [(0, 0)])
        self.assertFalse(log.finish.found)

    def test_start_is_dest(self):
        for strategy in (SearchBFS(), SearchDFS()):
            log = self.run_search(strategy, 4, 4, (2, 2), (2, 2))
            self.assertEqual(log.finish, FinishEvent(True, (Block(2, 2),)))

    def test_bfs_is_shortest_on_mazes(self):
        for seed in range(8):
            board = Board(15, 15, start=(0, 0), dest=(14, 14))
            board.generate_maze(MazeGenerator(seed=seed), wall_probability=0.6)
            expected = shortest_length(15, 15, board.start, board.dest, board.barriers)

            log = self.run_search(SearchBFS(), 15, 15, board.start, board.dest, board.barriers)
            if expected is None:
                self.assertFalse(log.finish.found)
            else:
                self.assertEqual(len(log.finish.path), expected, f"seed={seed}")
                self.assertValidPath(log.finish.path, board.start, board.dest, board.barriers, 15, 15)

    def test_dfs_path_is_valid(self):
        for seed in range(8):
            board = Board(15, 15, start=(0, 0), dest=(14, 14))
            board.generate_maze(MazeGenerator(seed=seed), wall_probability=0.6)
            shortest = shortest_length(15, 15, board.start, board.dest, board.barriers)

            log = self.run_search(SearchDFS(), 15, 15, board.start, board.dest, board.barriers)
            if shortest is None:
                self.assertFalse(log.finish.found)
                continue
            path = log.finish.path
            self.assertValidPath(path, board.start, board.dest, board.barriers, 15, 15)
            self.assertGreaterEqual(len(path), shortest)
            self.assertLessEqual(len(path), 15 * 15 - len(board.barriers))

    def test_dfs_small_grid(self):
        # Neighbours are pushed up, right, down, left so "down" is tried first
        log = self.run_search(SearchDFS(), 2, 2, (0, 0), (1, 1))
        self.assertEqual(log.stepped, [(0, 0), (0, 1), (1, 1)])
        self.assertEqual(log.finish.path, ((0, 0), (0, 1), (1, 1)))

    def test_stepped_cells_are_never_barriers(self):
        barriers = {Block(2, y) for y in range(4)} | {Block(-1, 0), Block(9, 9)}
        for strategy in (SearchBFS(), SearchDFS()):
            log = self.run_search(strategy, 5, 5, (0, 0), (4, 0), barriers)
            grid = GridConfig(5, 5)
            self.assertTrue(log.finish.found)
            self.assertEqual(len(log.stepped), len(set(log.stepped)))
            for b in log.stepped:
                self.assertNotIn(b, barriers)
                self.assertTrue(grid.contains(*b))

    def test_not_initialized(self):
        for strategy in (SearchBFS(), SearchDFS()):
            log = EventLog()
            with self.assertRaises(SearchNotInitializedError):
                strategy.search(0, log.on_step, log.on_pause, log.on_finish)
            with self.assertRaises(SearchNotInitializedError):
                strategy.init()

            strategy.configure(3, 3, (0, 0), (2, 2))
            with self.assertRaises(SearchNotInitializedError):
                strategy.search(0, log.on_step, log.on_pause, log.on_finish)
            with self.assertRaises(SearchNotInitializedError):
                strategy.step()

            self.assertEqual(log.events, [])
            self.assertEqual(strategy.status, SearchStatus.IDLE)
            self.assertIsNone(strategy.visited)

    def test_pause_and_resume(self):
        reference = self.run_search(SearchBFS(), 6, 6, (0, 0), (5, 5))

        strategy = SearchBFS().configure(6, 6, (0, 0), (5, 5)).init()
        log = EventLog()

        def pause_after_three(kind, block):
            log.on_step(kind, block)
            if len(log.stepped) == 3:
                strategy.pause()

        strategy.search(0, pause_after_three, log.on_pause, log.on_finish)
        self.assertEqual(strategy.status, SearchStatus.PAUSED)
        self.assertEqual(log.pause_count, 1)
        self.assertEqual(len(log.stepped), 3)
        self.assertIsNone(log.finish)
        self.assertGreater(strategy.frontier_size, 0)

        strategy.resume()
        self.assertEqual(strategy.status, SearchStatus.INITIALIZED)
        strategy.search(0, log.on_step, log.on_pause, log.on_finish)

        self.assertEqual(log.stepped, reference.stepped)
        self.assertEqual(log.finish, reference.finish)
        self.assertEqual(log.pause_count, 1)

    def test_pause_before_search(self):
        strategy = SearchDFS().configure(3, 3, (0, 0), (2, 2)).init()
        strategy.pause()
        log = EventLog()
        strategy.search(0, log.on_step, log.on_pause, log.on_finish)
        self.assertEqual(log.events, ["pause"])
        self.assertEqual(strategy.status, SearchStatus.PAUSED)

    def test_pause_and_resume_outside_a_run_are_ignored(self):
        strategy = SearchBFS()
        strategy.pause()
        strategy.resume()
        self.assertEqual(strategy.status, SearchStatus.IDLE)

        self.run_search(strategy, 3, 3, (0, 0), (2, 2))
        strategy.pause()
        self.assertEqual(strategy.status, SearchStatus.FINISHED)

    def test_stop_from_callback(self):
        strategy = SearchBFS().configure(5, 5, (0, 0), (4, 4)).init()
        log = EventLog()

        def stop_after_two(kind, block):
            log.on_step(kind, block)
            if len(log.stepped) == 2:
                strategy.stop()

        strategy.search(0, stop_after_two, log.on_pause, log.on_finish)
        self.assertEqual(len(log.stepped), 2)
        self.assertIsNone(log.finish)
        self.assertEqual(log.pause_count, 0)
        self.assertEqual(strategy.status, SearchStatus.IDLE)
        self.assertEqual(strategy.frontier_size, 0)

        # Needs a fresh init() before it can run again
        with self.assertRaises(SearchNotInitializedError):
            strategy.step()

    def test_search_after_finish_is_noop(self):
        strategy = SearchBFS()
        self.run_search(strategy, 3, 3, (0, 0), (2, 2))
        log = EventLog()
        strategy.search(0, log.on_step, log.on_pause, log.on_finish)
        self.assertEqual(log.events, [])

    def test_step_api(self):
        strategy = SearchBFS().configure(3, 1, (0, 0), (2, 0)).init()
        self.assertEqual(strategy.status, SearchStatus.INITIALIZED)

        self.assertEqual(strategy.step(), [StepEvent(MovementType.STEP_IN, Block(0, 0))])
        self.assertEqual(strategy.status, SearchStatus.RUNNING)
        self.assertEqual(strategy.step(), [StepEvent(MovementType.STEP_IN, Block(1, 0))])

        strategy.pause()
        self.assertEqual(strategy.step(), [])
        strategy.resume()

        last = strategy.step()
        self.assertEqual(last, [
            StepEvent(MovementType.STEP_IN, Block(2, 0)),
            FinishEvent(True, (Block(0, 0), Block(1, 0), Block(2, 0))),
        ])
        self.assertEqual(strategy.status, SearchStatus.FINISHED)
        self.assertEqual(strategy.step(), [])

    def test_step_reports_exhausted_frontier(self):
        strategy = SearchBFS().configure(3, 3, (0, 0), (2, 2), [(1, 0), (0, 1)]).init()
        self.assertEqual(len(strategy.step()), 1)
        self.assertEqual(strategy.step(), [FinishEvent(False, None)])

    def test_dfs_discards_duplicates(self):
        # dest off the board forces a full sweep; (1,0) gets pushed twice
        strategy = SearchDFS().configure(2, 2, (0, 0), (5, 5)).init()
        results = []
        while strategy.status is not SearchStatus.FINISHED:
            results.append(strategy.step())

        self.assertEqual([r[0].block for r in results[:4]], [(0, 0), (0, 1), (1, 1), (1, 0)])
        self.assertEqual(results[4], [])
        self.assertEqual(results[5], [FinishEvent(False, None)])

    def test_delay_between_steps(self):
        sleeps = []
        strategy = SearchBFS().configure(4, 4, (0, 0), (3, 3)).init()
        log = EventLog()
        strategy.search(40, log.on_step, log.on_pause, log.on_finish, sleep=sleeps.append)

        self.assertTrue(log.finish.found)
        self.assertEqual(len(sleeps), len(log.stepped))
        self.assertTrue(all(s == 0.04 for s in sleeps))

    def test_dfs_skips_delay_for_duplicates(self):
        sleeps = []
        strategy = SearchDFS().configure(2, 2, (0, 0), (5, 5)).init()
        log = EventLog()
        strategy.search(10, log.on_step, log.on_pause, log.on_finish, sleep=sleeps.append)

        self.assertEqual(len(log.stepped), 4)
        self.assertEqual(len(sleeps), 4)

    def test_configure_resets_run(self):
        strategy = SearchDFS()
        self.run_search(strategy, 3, 3, (0, 0), (2, 2))
        strategy.configure(4, 4, (0, 0), (3, 3))
        self.assertEqual(strategy.status, SearchStatus.IDLE)
        self.assertFalse(strategy.is_initialized)
        self.assertEqual(strategy.frontier_size, 0)

    def test_create_strategy(self):
        self.assertIsInstance(create_strategy("bfs"), SearchBFS)
        self.assertIsInstance(create_strategy("DFS"), SearchDFS)
        self.assertIsInstance(create_strategy(SearchAlgo.BFS), SearchBFS)
        with self.assertRaises(ValueError):
            create_strategy("astar")


if __name__ == '__main__':
    unittest.main()
