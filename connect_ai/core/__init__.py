"""
Connect AI Core Package

This package contains the core game logic, including:
- Board state representation and move application
- Win and draw detection
- The turn loop between two agents
- Constants and enums

All core components can be imported directly from this package.
"""

# Game and game state
from connect_ai.core.game import (
    Game, GameState, GameResult, InvalidMoveError
)

# Constants
from connect_ai.core.constants import (
    Cell, PLAYERS, opponent,
    ROWS, COLUMNS, CONNECT_LENGTH,
    CELL_SYMBOLS, PLAYER_NAMES,
    DEFAULT_MCTS_ITERATIONS, DEFAULT_MCTS_EXPLORATION
)

__all__ = [
    # Game
    'Game', 'GameState', 'GameResult', 'InvalidMoveError',

    # Constants
    'Cell', 'PLAYERS', 'opponent',
    'ROWS', 'COLUMNS', 'CONNECT_LENGTH',
    'CELL_SYMBOLS', 'PLAYER_NAMES',
    'DEFAULT_MCTS_ITERATIONS', 'DEFAULT_MCTS_EXPLORATION'
]
