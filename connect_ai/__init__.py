"""
Connect AI - A Monte Carlo Tree Search engine for gravity grid games.

This package provides the rules of Connect Four style games (any board size
and connect length), together with an MCTS agent that picks the next column.
"""

__version__ = "0.1.0"
__author__ = "Connect AI Team"

# Make key components available at package level
from connect_ai.core.game import Game, GameState, GameResult, InvalidMoveError
from connect_ai.core.constants import (
    Cell, ROWS, COLUMNS, CONNECT_LENGTH, DEFAULT_MCTS_ITERATIONS, DEFAULT_MCTS_EXPLORATION
)
from connect_ai.mcts.search import best_move, NoLegalMoveError
from connect_ai.mcts.config import MCTSConfig

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))

# Default configuration
DEFAULT_CONFIG = {
    "rows": ROWS,
    "columns": COLUMNS,
    "connect_length": CONNECT_LENGTH,
    "iterations": DEFAULT_MCTS_ITERATIONS,
    "exploration_weight": DEFAULT_MCTS_EXPLORATION,
}
