"""
Engine configuration.
"""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class EngineConfig:
    """Configuration for the engine front ends.

    Collects the settings shared by the UCI interface, the search worker and
    the benchmark tool.
    """

    search_depth: int = 6
    """Default search depth in plies when a request names none"""

    use_processes: bool = True
    """Run background searches in a worker process instead of a thread"""

    log_dir: Path = Path.home() / ".chessling"
    """Directory for the UCI engine log file"""

    debug: bool = False
    """Log at DEBUG level instead of INFO"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.log_dir = Path(self.log_dir)

        if self.search_depth < 1:
            raise ValueError(f"search_depth must be at least 1, got {self.search_depth}")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Build a config from environment variables.

        Variables:
            CHESSLING_SEARCH_DEPTH: int
            CHESSLING_DEBUG: "1"/"true"/"yes" to enable
            CHESSLING_LOG_DIR: path

        Raises:
            ValueError: If CHESSLING_SEARCH_DEPTH is not a positive integer
        """
        overrides = {}
        depth = os.environ.get("CHESSLING_SEARCH_DEPTH")
        if depth:
            overrides["search_depth"] = int(depth)
        debug = os.environ.get("CHESSLING_DEBUG")
        if debug:
            overrides["debug"] = debug.strip().lower() in ("1", "true", "yes")
        log_dir = os.environ.get("CHESSLING_LOG_DIR")
        if log_dir:
            overrides["log_dir"] = Path(log_dir)
        return cls(**overrides)

    def __repr__(self) -> str:
        """String representation of config."""
        return (
            f"EngineConfig(depth={self.search_depth}, processes={self.use_processes}, "
            f"log_dir={self.log_dir}, debug={self.debug})"
        )
