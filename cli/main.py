"""CLI entrypoint for playing Lines of Action in the terminal."""

from __future__ import annotations

import argparse
import logging
from typing import Callable, List, Optional

from engine.board import IllegalMoveError, Move
from engine.game import Game, GameConfig, PlayerKind
from engine.pieces import Side

USAGE = "\n".join(
    [
        "   Commands:\tEffects:",
        "   s\t\tShows the board, side, # of moves.",
        "   t\t\tShows your remaining time",
        "   q\t\tQuits the program. Ends game.",
        "   p\t\tHands the machine sides to the computer and starts the clocks.",
        "   c1r1-c2r2\tMove piece c1r1 to c2r2 (eg, b8-b6)",
        "   #\t\tAnything following this is a comment. Ignored.",
    ]
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Lines of Action in terminal.")
    parser.add_argument("--config", type=str, default=None, help="Path to game config JSON")
    parser.add_argument("--white", action="store_true", help="Play the white pieces")
    parser.add_argument("--ai", type=int, default=None, choices=[0, 1, 2], help="Number of machine players")
    parser.add_argument("--seed", type=int, default=None, help="Deterministic game seed")
    parser.add_argument("--time", type=float, default=None, help="Time limit per side, in minutes")
    parser.add_argument("--depth", type=int, default=None, help="Search depth")
    parser.add_argument("--cutoff", type=float, default=None, help="Search cutoff score")
    parser.add_argument(
        "--strategy",
        type=str,
        default=None,
        choices=["minimax", "random"],
        help="Machine player strategy",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-level", type=str, default="INFO", help="Python logging level")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> GameConfig:
    config = GameConfig.from_json(args.config) if args.config else GameConfig({})
    if args.white:
        config.human_side = Side.WHITE
    if args.ai is not None:
        config.ai_players = args.ai
    if args.seed is not None:
        config.seed = args.seed
    if args.time is not None:
        config.time_limit_minutes = args.time
    if args.depth is not None:
        config.depth = args.depth
    if args.cutoff is not None:
        config.cutoff = args.cutoff
    if args.strategy is not None:
        config.strategy = args.strategy
    config.validate()
    return config


def parse_user_move(command: str) -> Optional[Move]:
    """Parse a move, ignoring any trailing '#' comment."""
    text = command.split("#", 1)[0].strip()
    if not text:
        return None
    return Move.parse(text)


def show(game: Game, write: Callable[[str], None]) -> None:
    board = game.board
    write("===")
    write(board.render_ascii())
    write(f"Next move: {board.turn}")
    write(f"Moves: {board.moves_made}")
    write("===")


def handle_command(game: Game, command: str, write: Callable[[str], None]) -> None:
    """Act on one line of human input."""
    stripped = command.strip()
    move = parse_user_move(stripped)
    if move is not None:
        try:
            game.submit_move(move)
        except IllegalMoveError:
            write("Invalid move")
        return

    op = stripped[:1].lower()
    if op == "#":
        return
    if op == "s":
        show(game, write)
    elif op == "t":
        write(f"{game.remaining_seconds(game.board.turn):.1f}")
    elif op == "q":
        write("  Thanks for playing!")
        game.quit()
    elif op == "p":
        if not game.deploy():
            write("   Players are already deployed.")
        elif game.config.ai_players == 0:
            write("   There are two humans playing.")
    else:
        write(USAGE)


def report_outcome(game: Game, write: Callable[[str], None]) -> None:
    outcome = game.outcome()
    if outcome is None:
        return
    if outcome.reason == "timeout":
        write("   You ran out of time.")
    elif outcome.reason == "no_legal_moves":
        write(f"   {outcome.winner.opponent().value.capitalize()} has no legal moves.")
    if outcome.winner is not None:
        write(f"{outcome.winner.value.capitalize()} wins.")


def play(
    game: Game,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """Alternate turns until the game ends."""
    logger = logging.getLogger("loa.cli")
    while not game.is_over():
        side = game.board.turn
        if game.controller(side) is PlayerKind.MACHINE:
            move = game.play_machine_turn()
            if move is not None:
                write(f"{side.prefix}::{move}")
            continue

        try:
            with game.thinking(side):
                command = read_line(f"{side}> ")
        except EOFError:
            logger.info("Input closed; ending game.")
            game.quit()
            break
        if game.is_over():
            break
        handle_command(game, command, write)

    report_outcome(game, write)


def run_cli(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    level = logging.DEBUG if args.debug else getattr(logging, args.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level)
    logger = logging.getLogger("loa.cli")

    config = build_config(args)
    game = Game(config)
    controllers = config.controllers()
    logger.info(
        "Starting Lines of Action. Black=%s White=%s seed=%d",
        controllers[Side.BLACK].value,
        controllers[Side.WHITE].value,
        config.seed,
    )
    print("   WELCOME TO LINES OF ACTION")
    play(game)


if __name__ == "__main__":
    run_cli()
