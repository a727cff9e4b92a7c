"""
chesscore – command line entry point
=====================================

Commands:

  1. **play**    – play a game in the terminal (moves in SAN or UCI).
  2. **perft**   – count the leaf nodes of the legal move tree.
  3. **moves**   – list the legal moves of a position (or of one square).
  4. **status**  – checkmate / stalemate / draw / ongoing.
  5. **show**    – print the board of a position.
  6. **games**   – list the games stored with `play --save`.

Usage examples
--------------

    chesscore play
    chesscore play --fen "8/8/8/8/8/5k2/4q3/6K1 b - - 0 1" --save
    chesscore perft --depth 4 --divide
    chesscore moves --fen "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1" --square e1
    chesscore games --status checkmate
"""

import argparse
import logging
import sys
from typing import Callable, Optional, TextIO

from chesscore.chess import rules
from chesscore.chess.fen import STARTING_FEN
from chesscore.chess.game import Game
from chesscore.chess.game_state import GameState
from chesscore.chess.rules import Outcome
from chesscore.core.config import Settings
from chesscore.core.exceptions import ChessError, IllegalMoveError
from chesscore.core.shared_types import Status
from chesscore.db.database import build_engine, get_db, session_factory
from chesscore.db.sql_repository import SQLGameRepository

log = logging.getLogger("chesscore")

EXIT_OK = 0
EXIT_INVALID_INPUT = 2

OUTCOME_DESCRIPTIONS: dict[Outcome, str] = {
    Outcome.ONGOING: "ongoing",
    Outcome.CHECKMATE: "checkmate",
    Outcome.STALEMATE: "stalemate",
    Outcome.DRAW_FIFTY_MOVE: "draw by fifty-move rule",
    Outcome.DRAW_REPETITION: "draw by repetition",
    Outcome.DRAW_INSUFFICIENT_MATERIAL: "draw by insufficient material",
}

PLAY_HELP = "Enter a move (e4, Nf3, e2e4), or one of: moves, board, history, resign, quit"


# ═══════════════════════════════════════════════════════════════════════
# Commands
# ═══════════════════════════════════════════════════════════════════════


def cmd_perft(args: argparse.Namespace, out: TextIO) -> int:
    state = GameState.from_fen(args.fen)
    if args.divide:
        counts = rules.divide(state, args.depth)
        for move_uci, count in counts.items():
            print(f"{move_uci}: {count}", file=out)
        print(f"\nNodes searched: {sum(counts.values())}", file=out)
    else:
        print(rules.perft(state, args.depth), file=out)
    return EXIT_OK


def cmd_moves(args: argparse.Namespace, out: TextIO) -> int:
    state = GameState.from_fen(args.fen)
    if args.square:
        moves = rules.legal_moves_from(state, args.square)
    else:
        moves = rules.legal_moves(state)
    print(" ".join(sorted(move.to_uci() for move in moves)), file=out)
    return EXIT_OK


def cmd_status(args: argparse.Namespace, out: TextIO) -> int:
    state = GameState.from_fen(args.fen)
    status = rules.game_status(state)
    description = OUTCOME_DESCRIPTIONS[status.outcome]
    if status.winner is not None:
        description += f" ({status.winner.name.lower()} wins)"
    elif not status.is_over and rules.is_check(state):
        description += f" ({state.color_to_move.name.lower()} is in check)"
    print(description, file=out)
    return EXIT_OK


def cmd_show(args: argparse.Namespace, out: TextIO) -> int:
    state = GameState.from_fen(args.fen)
    print(state.board.render(), file=out)
    return EXIT_OK


def cmd_play(
    args: argparse.Namespace, out: TextIO, stdin: Optional[TextIO] = None
) -> int:
    """
    Terminal game loop: print the board, read a move, repeat until the game is over.
    An illegal move gets reported and the board stays as it is.
    """
    stdin = stdin or sys.stdin
    game = Game.new_game(args.fen)
    print(PLAY_HELP, file=out)
    print(game.state.board.render(), file=out)

    while not game.is_over:
        print(f"{game.color_to_move.name.lower()} to move> ", end="", file=out)
        line = stdin.readline()
        if not line:
            # EOF: stop without a result
            break
        command = line.strip()
        if not command:
            continue

        if command == "quit":
            break
        if command == "moves":
            print(" ".join(game.legal_moves()), file=out)
            continue
        if command == "board":
            print(game.state.board.render(), file=out)
            continue
        if command == "history":
            print(game.move_list(), file=out)
            continue
        if command == "resign":
            game.resign(game.color_to_move)
            break

        try:
            game.make_move(command)
        except IllegalMoveError as e:
            print(f"Illegal move: {e}", file=out)
            continue
        print(game.state.board.render(), file=out)

    print(f"Result: {game.status.value}", file=out)
    if game.winner is not None:
        print(f"Winner: {game.winner.name.lower()}", file=out)
    print(game.move_list(), file=out)

    if args.save:
        _save_game(game, out)
    return EXIT_OK


def _save_game(game: Game, out: TextIO) -> None:
    engine = build_engine(Settings.from_env())
    for db in get_db(session_factory(engine)):
        _, game_id = SQLGameRepository(db).create_game(game.to_model())
        log.info("Saved game %s", game_id)
        print(f"Saved game {game_id}", file=out)


def cmd_games(args: argparse.Namespace, out: TextIO) -> int:
    engine = build_engine(Settings.from_env())
    for db in get_db(session_factory(engine)):
        stored = SQLGameRepository(db).list_games(status=args.status)
        for game_id, game in stored:
            result = game.status if game.winner is None else f"{game.status} ({game.winner} wins)"
            print(f"{game_id}  {len(game.moves_uci):>3} moves  {result}", file=out)
        if not stored:
            print("No stored games", file=out)
    return EXIT_OK


# ═══════════════════════════════════════════════════════════════════════
# CLI
# ═══════════════════════════════════════════════════════════════════════


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chesscore",
        description="Chess rules engine: legal moves, game status and terminal play.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands")

    # ── play ──
    p_play = sub.add_parser("play", help="Play a game in the terminal")
    p_play.add_argument("--fen", default=None, help="Start from this position")
    p_play.add_argument(
        "--save",
        action="store_true",
        help="Store the game in the database (CHESSCORE_DATABASE_URL) afterwards",
    )

    # ── perft ──
    p_perft = sub.add_parser("perft", help="Count leaf nodes of the move tree")
    p_perft.add_argument("--depth", type=int, required=True)
    p_perft.add_argument("--fen", default=STARTING_FEN)
    p_perft.add_argument(
        "--divide", action="store_true", help="Show the count per first move"
    )

    # ── moves ──
    p_moves = sub.add_parser("moves", help="List legal moves (UCI)")
    p_moves.add_argument("--fen", default=STARTING_FEN)
    p_moves.add_argument("--square", default=None, help="Only moves from this square")

    # ── status ──
    p_status = sub.add_parser("status", help="Show the status of a position")
    p_status.add_argument("--fen", default=STARTING_FEN)

    # ── show ──
    p_show = sub.add_parser("show", help="Print the board")
    p_show.add_argument("--fen", default=STARTING_FEN)

    # ── games ──
    p_games = sub.add_parser("games", help="List stored games")
    p_games.add_argument(
        "--status",
        default=None,
        choices=[status.value for status in Status],
        help="Only games with this status",
    )

    return parser


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def main(argv: Optional[list[str]] = None, out: Optional[TextIO] = None) -> int:
    out = out or sys.stdout
    configure_logging(Settings.from_env())
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help(file=out)
        return EXIT_OK

    dispatch: dict[str, Callable[[argparse.Namespace, TextIO], int]] = {
        "play": cmd_play,
        "perft": cmd_perft,
        "moves": cmd_moves,
        "status": cmd_status,
        "show": cmd_show,
        "games": cmd_games,
    }

    try:
        return dispatch[args.command](args, out)
    except ChessError as e:
        log.error("%s", e)
        print(f"Error: {e}", file=out)
        return EXIT_INVALID_INPUT


if __name__ == "__main__":
    sys.exit(main())
