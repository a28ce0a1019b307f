"""
Search Worker

Runs best-move searches off the caller's thread. A search at depth 6 takes
seconds, so interactive front ends hand it to a worker and collect the
result later.

The worker boundary is message based, like a browser web worker: a request
is a serialized GameState plus a depth, and the reply is a serialized Move
(or None when the position has no candidate moves). Messages are plain dicts
so the same handler runs in a thread or a separate process.

Threading:
    - Caller: submits requests, receives concurrent.futures.Future objects
    - Worker: a single-worker process pool (default) or thread pool
    - Cancellation: none inside a search; shutdown(cancel_pending=True)
      drops queued requests and waits for the running one to finish
"""

import logging
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Any, Dict, Mapping, Optional

from chessling.board.serialization import move_from_dict, move_to_dict, state_from_dict, state_to_dict
from chessling.board.state import GameState, Move
from chessling.config import EngineConfig
from chessling.search.alphabeta import find_best_move

logger = logging.getLogger(__name__)


def search_request(payload: Mapping[str, Any]) -> Optional[Dict[str, int]]:
    """
    Handle one search message.

    Args:
        payload: {"state": state_to_dict(...), "depth": int}

    Returns:
        move_to_dict() of the best move, or None in a terminal position

    Raises:
        ValueError: If the payload is malformed
    """
    try:
        depth = int(payload["depth"])
        state = state_from_dict(payload["state"])
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed search request: {e}") from e

    result = find_best_move(state, depth)
    logger.debug(f"Search request done: depth={depth}, nodes={result.nodes}, score={result.score}")
    if result.move is None:
        return None
    return move_to_dict(result.move)


def _decode_reply(reply: Optional[Mapping[str, Any]]) -> Optional[Move]:
    return None if reply is None else move_from_dict(reply)


class SearchWorker:
    """
    Dispatches best-move searches to a background worker.

    Attributes:
        use_processes: True to search in a separate process (no GIL
            contention with the caller), False to use a thread

    Example:
        with SearchWorker() as worker:
            future = worker.request_best_move(state, depth=4)
            move = future.result()
    """

    def __init__(self, use_processes: bool = True):
        self.use_processes = use_processes
        self._executor: Optional[Executor] = None

    @classmethod
    def from_config(cls, config: EngineConfig) -> "SearchWorker":
        """Worker using the configured process/thread mode."""
        return cls(use_processes=config.use_processes)

    def _ensure_executor(self) -> Executor:
        if self._executor is None:
            if self.use_processes:
                self._executor = ProcessPoolExecutor(max_workers=1)
            else:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="chessling-search")
            logger.debug(f"Started search worker (processes={self.use_processes})")
        return self._executor

    def submit(self, payload: Mapping[str, Any]) -> "Future[Optional[Dict[str, int]]]":
        """Send a raw request message; the future resolves to the raw reply."""
        return self._ensure_executor().submit(search_request, dict(payload))

    def request_best_move(self, state: GameState, depth: int) -> "Future[Optional[Move]]":
        """
        Search ``state`` to ``depth`` in the background.

        Returns:
            Future resolving to the best Move, or None in a terminal position
        """
        raw = self.submit({"state": state_to_dict(state), "depth": depth})
        result: "Future[Optional[Move]]" = Future()

        def _relay(done: Future) -> None:
            if done.cancelled():
                result.cancel()
                return
            error = done.exception()
            if error is not None:
                result.set_exception(error)
                return
            try:
                result.set_result(_decode_reply(done.result()))
            except ValueError as e:
                result.set_exception(e)

        raw.add_done_callback(_relay)
        return result

    def shutdown(self, cancel_pending: bool = True) -> None:
        """Stop the worker; a search already running is allowed to finish."""
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=cancel_pending)
            self._executor = None
            logger.debug("Search worker stopped")

    def __enter__(self) -> "SearchWorker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
