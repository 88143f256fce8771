import argparse
import sys
import os
import logging

# Ensure project root is in path so we can import 'search_emulator' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from search_emulator import config


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def parse_block(text: str):
    try:
        x, y = (int(v) for v in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected 'x,y', got {text!r}")
    return x, y


def build_parser():
    parser = argparse.ArgumentParser(description="Search Emulator: step-by-step grid search visualizer")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Maze Command
    maze_parser = subparsers.add_parser("maze", help="Generate a maze and print it")
    maze_parser.add_argument("--width", type=int, default=21, help="Board Width")
    maze_parser.add_argument("--height", type=int, default=21, help="Board Height")
    maze_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    maze_parser.add_argument("--no-border", action="store_true", help="Do not surround the maze with walls")
    maze_parser.add_argument("--wall-probability", type=float, default=config.MAZE_WALL_PROBABILITY,
                             help="Chance a junction cell becomes a wall (1.0 = perfect maze)")

    # Solve Command
    solve_parser = subparsers.add_parser("solve", help="Run a search headless and print the result")
    solve_parser.add_argument("--width", type=int, default=21, help="Board Width")
    solve_parser.add_argument("--height", type=int, default=21, help="Board Height")
    solve_parser.add_argument("--algo", type=str, default="bfs", choices=["bfs", "dfs"], help="Search algorithm")
    solve_parser.add_argument("--maze", action="store_true", help="Generate a maze on the board first")
    solve_parser.add_argument("--seed", type=int, default=None, help="Maze Random Seed")
    solve_parser.add_argument("--start", type=parse_block, default=None, help="Start cell as x,y")
    solve_parser.add_argument("--dest", type=parse_block, default=None, help="Destination cell as x,y")
    solve_parser.add_argument("--delay", type=int, default=0, help="Delay between steps in ms")

    # Visual Command
    vis_parser = subparsers.add_parser("visual", help="Open the interactive board")
    vis_parser.add_argument("--width", type=int, default=None, help="Board Width (default: fit the window)")
    vis_parser.add_argument("--height", type=int, default=None, help="Board Height (default: fit the window)")
    vis_parser.add_argument("--size", type=int, default=config.BOARD_SIZE_DEFAULT,
                            choices=range(config.BOARD_SIZE_MIN, config.BOARD_SIZE_MAX + 1),
                            help="Board size tick used when width/height are not given")
    vis_parser.add_argument("--algo", type=str, default="dfs", choices=["bfs", "dfs"], help="Search algorithm")
    vis_parser.add_argument("--speed", type=int, default=config.MOVEMENT_SPEED_DEFAULT,
                            help=f"Speed tick {config.MOVEMENT_SPEED_MIN}-{config.MOVEMENT_SPEED_MAX}")
    vis_parser.add_argument("--maze", action="store_true", help="Start with a generated maze")
    vis_parser.add_argument("--seed", type=int, default=None, help="Maze Random Seed")
    vis_parser.add_argument("--record", action="store_true", help="Record the session to mp4")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("search_emulator")

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")

    from search_emulator.algo.maze import MazeGenerator, NoPathBlockError
    from search_emulator.core.grid import GridConfig

    if args.command == "maze":
        from search_emulator.core.complexity import MazeAnalyzer
        from search_emulator.viz.text import render_board

        logger.info(f"Generating {args.width}x{args.height} maze...")
        generator = MazeGenerator(seed=args.seed)
        walls = generator.configure(args.width, args.height, not args.no_border, args.wall_probability).generate()

        grid = GridConfig(args.width, args.height)
        print(render_board(grid, walls))
        stats = MazeAnalyzer.calculate_stats(grid, walls)
        logger.info(f"Stats: {stats}")
        return 0

    elif args.command == "solve":
        from search_emulator.core.board import Board
        from search_emulator.emulator import Emulator
        from search_emulator.algo.solvers import create_strategy
        from search_emulator.viz.text import render_board

        board = Board(args.width, args.height,
                      start=args.start or (0, 0),
                      dest=args.dest or (args.width - 1, args.height - 1))
        emulator = Emulator(board, strategy=create_strategy(args.algo), step_delay_ms=args.delay,
                            maze_generator=MazeGenerator(seed=args.seed))
        if args.maze:
            try:
                emulator.generate_maze()
            except NoPathBlockError as e:
                logger.error(f"Maze leaves no room for start/dest: {e}")
                return 1

        logger.info(f"Solving with {args.algo.upper()} from {board.start} to {board.dest}...")
        emulator.run()

        print(render_board(board.config, board.barriers, board.start, board.dest,
                           path=emulator.path, passed=emulator.passed))
        if emulator.found:
            print(f"\nDone. Visited: {len(emulator.passed)} Path Length: {len(emulator.path)}")
        else:
            print(f"\nNo path. Visited: {len(emulator.passed)}")
        return 0

    elif args.command == "visual":
        from search_emulator.core.board import Board
        from search_emulator.emulator import Emulator
        from search_emulator.algo.solvers import create_strategy
        from search_emulator.viz.renderer import Renderer, default_board_size

        if args.width and args.height:
            width, height = args.width, args.height
        else:
            width, height = default_board_size(size_tick=args.size)

        board = Board(width, height, start=(0, 0), dest=(min(10, width - 1), min(10, height - 1)))
        emulator = Emulator(board, strategy=create_strategy(args.algo),
                            maze_generator=MazeGenerator(seed=args.seed))
        emulator.set_speed(args.speed)
        if args.maze:
            try:
                emulator.generate_maze()
            except NoPathBlockError as e:
                logger.error(f"Maze leaves no room for start/dest: {e}")
                return 1

        logger.info(f"Visual mode enabled - {width}x{height} board, opening window...")
        renderer = Renderer(emulator, record=args.record)
        if args.record:
            if not os.path.exists("recordings"):
                os.makedirs("recordings")
            from search_emulator.viz.recorder import default_output_file
            renderer.recorder.output_file = default_output_file(f"search_{args.algo}_{width}x{height}")
            logger.info(f"Recording video to {renderer.recorder.output_file}")

        renderer.init_window()
        renderer.run_loop()
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
