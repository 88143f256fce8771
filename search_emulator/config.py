# Search animation speed. The delay between steps is BASE / tick milliseconds.
MOVEMENT_SPEED_BASE = 200
MOVEMENT_SPEED_DEFAULT = 18
MOVEMENT_SPEED_MIN = 1
MOVEMENT_SPEED_MAX = 20

# Board size: the shorter side holds BASE * tick blocks.
BOARD_SIZE_DEFAULT = 1
BOARD_SIZE_MIN = 1
BOARD_SIZE_MAX = 4
BOARD_SIZE_BASE = 20

# Chance that a junction cell is walled off during maze carving.
MAZE_WALL_PROBABILITY = 0.9


def clamp_speed_tick(tick: float) -> float:
    return max(MOVEMENT_SPEED_MIN, min(MOVEMENT_SPEED_MAX, tick))


def get_movement_speed_delay(tick: float) -> int:
    return int(MOVEMENT_SPEED_BASE / tick)


def get_movement_speed_tick(delay: float) -> float:
    return 1.0 / delay * MOVEMENT_SPEED_BASE


def get_board_size(tick: float) -> int:
    return BOARD_SIZE_BASE * int(tick)


def get_board_size_tick(block_count: int) -> float:
    return block_count / BOARD_SIZE_BASE


def get_board_dimensions(screen_w: int, screen_h: int, size_tick: float = BOARD_SIZE_DEFAULT):
    """
    Fits square blocks into a screen area so the shorter side holds
    get_board_size(size_tick) blocks. Returns (block_px, columns, rows).
    """
    min_side = get_board_size(size_tick)
    block_px = max(1, min(screen_w, screen_h) // min_side)
    return block_px, screen_w // block_px, screen_h // block_px
