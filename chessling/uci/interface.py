"""
UCI Protocol Implementation

This module implements the Universal Chess Interface (UCI) protocol for
communication between the chess engine and GUI applications. It is a thin
text front end over GameState and find_best_move().

UCI Commands Supported:
    - uci: Identify engine
    - isready: Synchronization check
    - ucinewgame: Start new game
    - position: Set board position
    - go: Start searching (depth only; clock parameters are ignored)
    - stop: Wait for the running search
    - quit: Shutdown engine

Threading:
    - Main thread: Listen for UCI commands
    - Search thread: Run alpha-beta search on its own GameState reference
    - GameState is immutable, so the search thread needs no copy or lock

References:
    - UCI Protocol: https://www.chessprogramming.org/UCI
"""

import logging
import sys
import threading
import time
from pathlib import Path
from typing import Optional

from chessling.board.notation import move_from_uci, move_to_uci, state_from_fen, state_to_fen
from chessling.board.state import GameState
from chessling.config import EngineConfig
from chessling.search.alphabeta import find_best_move


def setup_logger(log_dir: Path, debug: bool = True) -> logging.Logger:
    """
    Setup file-based logger for UCI debugging.

    Args:
        log_dir: Directory receiving engine.log
        debug: If True, log at DEBUG level; otherwise INFO level

    Returns:
        Configured logger instance
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "engine.log"

    logger = logging.getLogger("chessling")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = logging.FileHandler(log_file, mode='w')
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


class UCIEngine:
    """
    UCI-compliant chess engine interface.

    Attributes:
        state: Current position
        config: Engine configuration (default depth, logging)
        searching: Flag indicating if search is in progress
        search_thread: Background thread for search
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize UCI engine.

        Args:
            config: Engine configuration (default: EngineConfig.from_env())
        """
        self.config = config if config else EngineConfig.from_env()
        self.state = GameState.initial()

        # Search state
        self.searching = False
        self.search_thread: Optional[threading.Thread] = None

        # Engine info
        self.name = "Chessling"
        self.version = "0.1.0"
        self.author = "Chessling developers"

        self.logger = setup_logger(self.config.log_dir, debug=self.config.debug)
        self.logger.info("=== Chessling Engine Started ===")
        self.logger.info(f"Log file: {self.config.log_dir / 'engine.log'}")

    def run(self):
        """
        Main UCI command loop.

        Listens for UCI commands on stdin and responds on stdout.
        Runs until 'quit' command is received or stdin closes.
        """
        while True:
            try:
                command = input().strip()

                if not command:
                    continue

                self.logger.debug(f">>> {command}")

                tokens = command.split()
                cmd = tokens[0].lower()

                if cmd == "uci":
                    self.handle_uci()

                elif cmd == "isready":
                    self.handle_isready()

                elif cmd == "ucinewgame":
                    self.handle_ucinewgame()

                elif cmd == "position":
                    self.handle_position(tokens)

                elif cmd == "go":
                    self.handle_go(tokens)

                elif cmd == "stop":
                    self.handle_stop()

                elif cmd == "quit":
                    self.handle_quit()
                    break

                else:
                    # Unknown command - UCI protocol says to ignore
                    self.logger.debug(f"Unknown command ignored: {command}")

            except EOFError:
                self.logger.info("EOF received, shutting down")
                break
            except Exception as e:
                self.logger.error(f"Command error: {e}", exc_info=True)
                print(f"# Error: {e}", file=sys.stderr)

    def _send(self, line: str):
        print(line)
        sys.stdout.flush()
        self.logger.debug(f"<<< {line}")

    def handle_uci(self):
        """
        Handle 'uci' command - identify engine.

        Response:
            id name Chessling 0.1.0
            id author ...
            uciok
        """
        self.logger.info("Handling: uci")
        self._send(f"id name {self.name} {self.version}")
        self._send(f"id author {self.author}")
        self._send("uciok")

    def handle_isready(self):
        """Handle 'isready' command - respond with readyok."""
        self.logger.info("Handling: isready")
        self._send("readyok")

    def handle_ucinewgame(self):
        """Handle 'ucinewgame' command - reset for new game."""
        self.logger.info("Handling: ucinewgame - resetting position")
        self.handle_stop()
        self.state = GameState.initial()

    def handle_position(self, tokens):
        """
        Handle 'position' command - set board position.

        Formats:
            position startpos
            position startpos moves e2e4 e7e5
            position fen <FEN string>
            position fen <FEN string> moves e2e4

        Moves are checked against the legal moves of the side to move;
        the first illegal or malformed move stops move application.

        Args:
            tokens: Command tokens (e.g., ['position', 'startpos', 'moves', 'e2e4'])
        """
        self.logger.info(f"Handling: position {' '.join(tokens[1:])}")

        if len(tokens) < 2:
            self.logger.warning("Position command with insufficient arguments")
            return

        if tokens[1] == "startpos":
            state = GameState.initial()
            move_index = 2
        elif tokens[1] == "fen":
            try:
                move_index = tokens.index("moves")
            except ValueError:
                move_index = len(tokens)
            fen = " ".join(tokens[2:move_index])

            try:
                state = state_from_fen(fen)
                self.logger.debug(f"Set position from FEN: {fen}")
            except ValueError as e:
                self.logger.error(f"Invalid FEN: {e}")
                print(f"# Invalid FEN: {e}", file=sys.stderr)
                return
        else:
            self.logger.warning(f"Unknown position type: {tokens[1]}")
            return

        if move_index < len(tokens) and tokens[move_index] == "moves":
            moves_applied = []
            for move_str in tokens[move_index + 1:]:
                try:
                    move = move_from_uci(move_str)
                except ValueError as e:
                    self.logger.error(f"Invalid move format: {move_str} - {e}")
                    print(f"# Invalid move format: {move_str} - {e}", file=sys.stderr)
                    break

                if move not in state.legal_moves():
                    self.logger.error(f"Illegal move: {move_str}")
                    print(f"# Illegal move: {move_str}", file=sys.stderr)
                    break

                state = state.do(move)
                moves_applied.append(move_str)

            if moves_applied:
                self.logger.debug(f"Applied moves: {' '.join(moves_applied)}")

        self.state = state
        self.logger.info(f"Position updated: {state_to_fen(state)}")

    def handle_go(self, tokens):
        """
        Handle 'go' command - start search.

        Formats:
            go depth 5
            go (uses the configured default depth)

        Clock parameters (movetime, wtime, btime, infinite) are accepted and
        ignored: search is depth-bounded only.

        Args:
            tokens: Command tokens (e.g., ['go', 'depth', '5'])
        """
        self.logger.info(f"Handling: go {' '.join(tokens[1:])}")

        depth = None
        i = 1
        while i < len(tokens):
            if tokens[i] == "depth" and i + 1 < len(tokens):
                depth = int(tokens[i + 1])
                i += 2
            else:
                i += 1

        if depth is None:
            depth = self.config.search_depth
            self.logger.debug(f"No depth specified, using default depth {depth}")

        self.handle_stop()

        self.searching = True
        self.search_thread = threading.Thread(
            target=self._search_thread,
            args=(depth, self.state)
        )
        self.search_thread.start()

    def _search_thread(self, depth: int, state: GameState):
        """
        Background thread for search.

        Output:
            info depth X score cp Y nodes Z time T
            bestmove <move>   (bestmove 0000 when there is no move)
        """
        start_time = time.time()

        try:
            self.logger.info(f"Search started: depth={depth}, position={state_to_fen(state)}")

            result = find_best_move(state, depth)
            elapsed_ms = int((time.time() - start_time) * 1000)

            best = move_to_uci(result.move) if result.move else "0000"
            self.logger.info(
                f"Search complete: best_move={best}, score={result.score}, "
                f"nodes={result.nodes}, time={elapsed_ms}ms"
            )

            self._send(
                f"info depth {depth} score cp {result.score * 10} "
                f"nodes {result.nodes} time {elapsed_ms}"
            )
            self._send(f"bestmove {best}")

        except Exception as e:
            elapsed_time = time.time() - start_time
            self.logger.error(f"Search error after {elapsed_time:.3f}s: {e}", exc_info=True)
            print(f"# Search error: {e}", file=sys.stderr)
            self._send("bestmove 0000")

        finally:
            self.searching = False
            self.logger.debug("Search thread finished")

    def handle_stop(self):
        """
        Handle 'stop' command.

        Searches cannot be interrupted, so this waits for the running search
        to finish and print its bestmove.
        """
        if self.search_thread and self.search_thread.is_alive():
            self.logger.info("Handling: stop - waiting for search thread")
            self.search_thread.join()

    def handle_quit(self):
        """Handle 'quit' command - shutdown engine."""
        self.logger.info("Handling: quit - shutting down engine")

        if self.search_thread and self.search_thread.is_alive():
            self.logger.debug("Waiting for search thread to complete before quitting")
            self.search_thread.join()

        self.logger.info("=== Chessling Engine Stopped ===")
        sys.exit(0)


def main():
    """Run the engine on stdin/stdout until 'quit'."""
    engine = UCIEngine()
    engine.run()
