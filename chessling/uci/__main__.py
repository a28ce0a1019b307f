"""
Main entry point for running Chessling as a UCI engine.

Usage:
    python -m chessling.uci
"""

from chessling.uci.interface import main

if __name__ == "__main__":
    main()
