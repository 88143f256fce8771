import logging
import pygame

from search_emulator import config
from search_emulator.algo.base import SearchAlgo
from search_emulator.core.grid import Block
from search_emulator.emulator import Emulator, SessionStatus

logger = logging.getLogger(__name__)


class Renderer:
    COLOR_BG = (10, 10, 10)
    COLOR_GRID = (30, 30, 30)
    COLOR_WALL = (200, 200, 200)
    COLOR_PASSED = (60, 100, 160)  # Blue tint
    COLOR_PATH = (255, 215, 0)     # Gold
    COLOR_START = (80, 200, 120)
    COLOR_DEST = (220, 70, 70)

    HUD_HEIGHT = 28

    def __init__(self, emulator: Emulator, width=1280, height=720, record=False):
        self.emulator = emulator
        self.screen_width = width
        self.screen_height = height

        from search_emulator.viz.recorder import VideoRecorder
        self.recorder = VideoRecorder(active=record)

        self.cell_size = 20
        self.offset_x = 0
        self.offset_y = self.HUD_HEIGHT

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None

        # Pointer state: a press becomes a tap unless it moves to another cell
        self.pressed_cell = None
        self.dragged = False
        self.last_drag_cell = None
        self.step_budget_ms = 0.0

    @property
    def board(self):
        return self.emulator.board

    def fit_to_screen(self):
        """Picks the largest whole-pixel cell size that shows the full board."""
        available_w = self.screen_width
        available_h = self.screen_height - self.HUD_HEIGHT
        self.cell_size = max(1, min(available_w // self.board.width, available_h // self.board.height))

        self.offset_x = (self.screen_width - self.board.width * self.cell_size) // 2
        self.offset_y = self.HUD_HEIGHT + (available_h - self.board.height * self.cell_size) // 2

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"Search Emulator - {self.board.width}x{self.board.height}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.fit_to_screen()

    def cell_to_screen(self, x, y):
        return x * self.cell_size + self.offset_x, y * self.cell_size + self.offset_y

    def screen_to_cell(self, sx, sy):
        # Floor division keeps pixels left/above the board negative
        return Block((sx - self.offset_x) // self.cell_size, (sy - self.offset_y) // self.cell_size)

    def handle_key(self, key):
        em = self.emulator
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_SPACE:
            if em.status == SessionStatus.STARTED:
                em.pause()
            else:
                if em.status == SessionStatus.FINISHED:
                    em.reset()
                em.start()
        elif key == pygame.K_r:
            em.reset()
        elif key == pygame.K_b:
            em.set_strategy(SearchAlgo.BFS)
        elif key == pygame.K_d:
            em.set_strategy(SearchAlgo.DFS)
        elif key == pygame.K_m:
            em.generate_maze()
        elif key == pygame.K_c:
            em.clear_barriers()
        elif key == pygame.K_u:
            em.undo()
        elif key == pygame.K_y:
            em.redo()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            em.set_speed(em.speed + 1)
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            em.set_speed(em.speed - 1)

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.on_press(event.pos)

            elif event.type == pygame.MOUSEMOTION:
                self.on_motion(event.pos)

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self.on_release()

    def on_press(self, pos):
        self.pressed_cell = self.screen_to_cell(*pos)
        self.dragged = False
        self.last_drag_cell = None

    def on_motion(self, pos):
        if self.pressed_cell is None:
            return
        cell = self.screen_to_cell(*pos)
        if not self.dragged:
            if cell == self.pressed_cell:
                return
            self.dragged = True
            self.emulator.begin_drag(self.pressed_cell)
            # The pressed cell itself is part of a barrier stroke
            self.emulator.drag(self.pressed_cell)
            self.last_drag_cell = self.pressed_cell
        # Board.drag toggles, so each cell is forwarded once per entry
        if cell != self.last_drag_cell:
            self.emulator.drag(cell)
            self.last_drag_cell = cell

    def on_release(self):
        if self.pressed_cell is None:
            return
        if self.dragged:
            self.emulator.end_drag()
        else:
            self.emulator.tap(self.pressed_cell)
        self.pressed_cell = None
        self.dragged = False
        self.last_drag_cell = None

    def fill_cell(self, x, y, color):
        sx, sy = self.cell_to_screen(x, y)
        pygame.draw.rect(self.surface, color, (sx, sy, self.cell_size, self.cell_size))

    def draw_board(self):
        self.surface.fill(self.COLOR_BG)
        w, h = self.board.width, self.board.height

        if self.cell_size > 4:
            for x in range(w + 1):
                sx, _ = self.cell_to_screen(x, 0)
                pygame.draw.line(self.surface, self.COLOR_GRID, (sx, self.offset_y),
                                 (sx, self.offset_y + h * self.cell_size))
            for y in range(h + 1):
                _, sy = self.cell_to_screen(0, y)
                pygame.draw.line(self.surface, self.COLOR_GRID, (self.offset_x, sy),
                                 (self.offset_x + w * self.cell_size, sy))

        for x, y in self.emulator.passed:
            self.fill_cell(x, y, self.COLOR_PASSED)
        for x, y in self.board.barriers:
            self.fill_cell(x, y, self.COLOR_WALL)
        for x, y in self.emulator.path:
            self.fill_cell(x, y, self.COLOR_PATH)

        self.fill_cell(*self.board.start, self.COLOR_START)
        self.fill_cell(*self.board.dest, self.COLOR_DEST)

    def hud_lines(self):
        em = self.emulator
        if em.found is None:
            result = ""
        else:
            result = f"Path: {len(em.path)}" if em.found else "No path"
        return [
            f"{em.algo.name}",
            f"Status: {em.status.value}",
            f"Speed: {em.speed:g} ({em.step_delay_ms} ms)",
            f"Visited: {len(em.passed)}",
            result,
            "REC" if self.recorder.active else "",
        ]

    def draw_hud(self):
        text = "  |  ".join(line for line in self.hud_lines() if line)
        lbl = self.font.render(text, True, (255, 255, 255))
        self.surface.blit(lbl, (10, 6))

    def advance_search(self, elapsed_ms):
        """Steps the search as many times as the step delay allows for this frame."""
        if self.emulator.status != SessionStatus.STARTED:
            self.step_budget_ms = 0.0
            return
        delay = max(1, self.emulator.step_delay_ms)
        self.step_budget_ms += elapsed_ms
        while self.step_budget_ms >= delay and self.emulator.status == SessionStatus.STARTED:
            self.step_budget_ms -= delay
            # Duplicate pops produce nothing; keep going until something shows
            while not self.emulator.tick() and self.emulator.status == SessionStatus.STARTED:
                pass

    def run_loop(self):
        while self.running:
            self.handle_input()
            elapsed = self.clock.tick(60)
            self.advance_search(elapsed)

            self.draw_board()
            self.draw_hud()
            pygame.display.flip()

            if self.recorder.active:
                self.recorder.capture_frame(self.surface)

        self.recorder.stop()
        pygame.quit()


def default_board_size(screen_w=1280, screen_h=720, size_tick=config.BOARD_SIZE_DEFAULT):
    _, cols, rows = config.get_board_dimensions(screen_w, screen_h - Renderer.HUD_HEIGHT, size_tick)
    return cols, rows
