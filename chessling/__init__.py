"""
Chessling Chess Engine

A two-player chess engine with its own rules engine and a fixed-depth
alpha-beta search.

## Architecture

The engine is organized into several key modules:

1. **board**: Rules engine
   - Immutable GameState with copy-on-write rows
   - Pseudo-legal and legal move generation, castling, promotion
   - Attack, check, checkmate and stalemate detection
   - Dict and FEN/UCI codecs

2. **evaluation**: Position evaluation functions
   - Abstract Evaluator interface (swappable design)
   - MaterialEvaluator: material plus pawn advancement, ±1000 without a king

3. **search**: Search algorithms
   - Minimax with alpha-beta pruning over pseudo-legal moves
   - SearchWorker for background (thread or process) searches

4. **uci**: Universal Chess Interface protocol front end

5. **utils**: Perft and a tactical test suite

## Quick Start

```python
from chessling import GameState, Move, request_best_move

state = GameState.initial()
state = state.do(Move((1, 4), (3, 4)))     # e2-e4
reply = request_best_move(state, depth=4)   # Black's answer
```

Known limitation: en passant is not modelled.

## Version

0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from chessling.board import CastlingRights, CheckInfo, Color, GameState, Move, Piece, PieceType
from chessling.evaluation import Evaluator, MaterialEvaluator, evaluate
from chessling.search import SearchWorker, find_best_move, reasonable_moves, request_best_move

__all__ = [
    'CastlingRights',
    'CheckInfo',
    'Color',
    'Evaluator',
    'GameState',
    'MaterialEvaluator',
    'Move',
    'Piece',
    'PieceType',
    'SearchWorker',
    'evaluate',
    'find_best_move',
    'reasonable_moves',
    'request_best_move',
]
