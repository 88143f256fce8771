import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from search_emulator.core.grid import Block
from search_emulator.core.history import (
    DrawBarrier, EmptyHistoryError, GenerateMaze, MoveDest, MoveStart, OperationHistory,
)


class TestOperationHistory(unittest.TestCase):
    def setUp(self):
        self.history = OperationHistory()

    def test_draw_barrier_session(self):
        h = self.history
        h.start_recording(DrawBarrier())
        self.assertTrue(h.is_recording)
        h.record((1, 0)).record((1, 1))
        unit = h.finish_recording()

        self.assertEqual(unit, DrawBarrier(path=(Block(1, 0), Block(1, 1))))
        self.assertFalse(h.is_recording)
        self.assertEqual(h.undo_stack, [unit])
        self.assertEqual(h.redo_stack, [])

    def test_move_session_keeps_first_and_last(self):
        h = self.history
        h.start_recording(MoveStart())
        for b in [(0, 0), (0, 1), (0, 2), (1, 2)]:
            h.record(b)
        self.assertEqual(h.finish_recording(), MoveStart(Block(0, 0), Block(1, 2)))

        h.start_recording(MoveDest())
        h.record((4, 4))
        self.assertEqual(h.finish_recording(), MoveDest(Block(4, 4), Block(4, 4)))

    def test_empty_move_session(self):
        h = self.history
        h.start_recording(MoveStart())
        unit = h.finish_recording()
        self.assertIsNone(unit.from_block)
        self.assertIsNone(unit.to_block)

    def test_record_iterable(self):
        h = self.history
        h.start_recording(GenerateMaze(start_from=Block(0, 0), start_to=Block(1, 1)))
        h.record([(2, 2), (3, 3)])
        unit = h.finish_recording()
        self.assertEqual(unit.barriers_diff, (Block(2, 2), Block(3, 3)))
        # Template fields survive
        self.assertEqual(unit.start_from, (0, 0))
        self.assertEqual(unit.start_to, (1, 1))

    def test_first_session_wins(self):
        h = self.history
        h.start_recording(DrawBarrier())
        h.record((1, 1))
        h.start_recording(MoveStart())
        h.record((2, 2))
        unit = h.finish_recording()

        self.assertIsInstance(unit, DrawBarrier)
        self.assertEqual(unit.path, ((1, 1), (2, 2)))

    def test_record_without_session(self):
        h = self.history
        h.record((1, 1))
        self.assertIsNone(h.finish_recording())
        self.assertEqual(h.undo_stack, [])

    def test_undo_redo_stacks(self):
        h = self.history
        first = h.start_recording(DrawBarrier()).record((1, 1)).finish_recording()
        second = h.start_recording(DrawBarrier()).record((2, 2)).finish_recording()

        self.assertIs(h.undo(), second)
        self.assertEqual(h.undo_stack, [first])
        self.assertEqual(h.redo_stack, [second])

        self.assertIs(h.redo(), second)
        self.assertEqual(h.undo_stack, [first, second])
        self.assertFalse(h.has_redo())

    def test_new_edit_clears_redo(self):
        h = self.history
        h.start_recording(DrawBarrier()).record((1, 1)).finish_recording()
        h.undo()
        self.assertTrue(h.has_redo())

        h.start_recording(MoveDest()).record((3, 3)).finish_recording()
        self.assertFalse(h.has_redo())
        with self.assertRaises(EmptyHistoryError):
            h.redo()

    def test_empty_stacks_raise(self):
        with self.assertRaisesRegex(EmptyHistoryError, "no movement to undo"):
            self.history.undo()
        with self.assertRaisesRegex(EmptyHistoryError, "no movement to redo"):
            self.history.redo()
        self.assertFalse(self.history.has_undo())

    def test_clear(self):
        h = self.history
        h.start_recording(DrawBarrier()).record((1, 1)).finish_recording()
        h.undo()
        h.start_recording(DrawBarrier())
        h.clear()
        self.assertFalse(h.has_undo())
        self.assertFalse(h.has_redo())
        self.assertFalse(h.is_recording)

    def test_unknown_template(self):
        self.history.start_recording("not a unit")
        with self.assertRaises(TypeError):
            self.history.finish_recording()


if __name__ == '__main__':
    unittest.main()
