"""
Pairs CLI - Command-line interface for the engine.

Usage:
    pairs play [--layout 2x2|3x3|5x6] [--new]   Play in the terminal
    pairs serve [--host HOST] [--port PORT]      Run the HTTP API
    pairs clear-save                             Delete the save slot
"""

import argparse
import logging
import sys


LAYOUT_CHOICES = {
    "2x2": "TWO_BY_TWO",
    "3x3": "THREE_BY_THREE",
    "5x6": "FIVE_BY_SIX",
}


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Pairs - Memory-matching card game",
        prog="pairs",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--layout", choices=sorted(LAYOUT_CHOICES), help="Board layout")
    play_parser.add_argument("--new", action="store_true", help="Ignore the save and start fresh")
    play_parser.add_argument("--seed", type=int, help="Random seed")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    # Clear save command
    subparsers.add_parser("clear-save", help="Delete the save slot")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "serve":
        cmd_serve(args)
    elif args.command == "clear-save":
        cmd_clear_save(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_play(args):
    """Play a game in the terminal."""
    import random
    from .config import GameConfig
    from .engine_core.errors import ConfigurationError, InvariantViolation
    from .engine_core.state import BoardLayout
    from .session import GameLoop, SessionController, SoundBank, TerminalPresenter

    try:
        config = GameConfig.from_env()
    except ConfigurationError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    presenter = TerminalPresenter(sound_bank=SoundBank(config.sound_clips))
    rng = random.Random(args.seed) if args.seed is not None else None
    controller = SessionController.from_config(config, presenter=presenter, rng=rng)
    loop = GameLoop(controller)

    layout = BoardLayout[LAYOUT_CHOICES[args.layout]] if args.layout else None
    if args.new or layout is not None:
        controller.start_new_game(layout)
    elif controller.resume():
        print("Resumed saved game.")

    print("Memorise the board...")
    print(render_board(controller.board, reveal=True))
    loop.pump()

    while True:
        print(render_board(controller.board))
        print(f"Score: {controller.score}  Moves: {controller.moves}  "
              f"Time: {controller.elapsed_time:.0f}s")
        try:
            line = input("Pick a slot (q to quit, n for new game): ").strip().lower()
        except EOFError:
            break
        if line in ("q", "quit"):
            break
        if line in ("n", "new"):
            controller.start_new_game()
            print(render_board(controller.board, reveal=True))
            loop.pump()
            continue

        try:
            position = int(line)
            loop.sync()
            controller.select_position(position)
        except ValueError:
            print("Enter a slot number.")
            continue
        except InvariantViolation as e:
            print(e.message)
            continue

        if controller.is_comparing:
            print(render_board(controller.board))
            # Stop once the pair resolves; a win schedules the restart next
            loop.pump(until=lambda: not controller.is_comparing)
        if controller.is_complete:
            print(render_board(controller.board))
            print(f"You won! Score {controller.score} in {controller.moves} moves.")
            loop.pump(until=lambda: not controller.is_complete)
            print("New game!")
            print(render_board(controller.board, reveal=True))
            loop.pump()

    print("Progress saved." if controller.store and controller.store.exists() else "Bye.")


def render_board(board, reveal=False):
    """Draw the board as a text grid; face-down cards show their slot number."""
    if board is None:
        return ""
    width = len(str(board.slot_count - 1)) + 2
    lines = []
    for row in range(board.layout.rows):
        cells = []
        for col in range(board.layout.cols):
            card = board.cards[row * board.layout.cols + col]
            if card.is_face_up or card.is_matched or reveal:
                text = "*" if card.is_bonus else chr(ord("A") + card.face_index % 26)
                if card.is_matched:
                    text = text.lower()
            else:
                text = f"#{card.position}"
            cells.append(text.rjust(width))
        lines.append(" ".join(cells))
    return "\n".join(lines)


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    from .api.app import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


def cmd_clear_save(args):
    """Delete the save slot."""
    from .config import GameConfig
    from .engine_core.errors import PersistenceError
    from .persistence import SaveStore

    config = GameConfig.from_env()
    store = SaveStore(save_dir=config.save_dir, filename=config.save_filename)
    try:
        store.clear()
    except PersistenceError as e:
        print(f"Error: {e.message}")
        sys.exit(1)
    print(f"Save cleared: {store.path}")


if __name__ == "__main__":
    main()
