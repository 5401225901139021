"""
Constants for the Connect AI game.

This module defines the constants used throughout the implementation,
including cell values, default board geometry and search defaults.
"""
from enum import IntEnum
from typing import Dict, Final
import math


class Cell(IntEnum):
    """Enum representing the content of a board cell."""
    EMPTY = 0
    PLAYER_A = 1
    PLAYER_B = 2


# The two sides of the game
PLAYERS: Final = (Cell.PLAYER_A, Cell.PLAYER_B)


def opponent(player: Cell) -> Cell:
    """
    Get the opponent of a player.

    Args:
        player: PLAYER_A or PLAYER_B

    Returns:
        The other player
    """
    if player == Cell.PLAYER_A:
        return Cell.PLAYER_B
    if player == Cell.PLAYER_B:
        return Cell.PLAYER_A
    raise ValueError(f"{player!r} is not a player")


# Board geometry
ROWS: Final[int] = 6
COLUMNS: Final[int] = 7
CONNECT_LENGTH: Final[int] = 4  # Pieces in a row needed to win

# Symbols for the text board
CELL_SYMBOLS: Final[Dict[Cell, str]] = {
    Cell.EMPTY: ".",
    Cell.PLAYER_A: "X",
    Cell.PLAYER_B: "O",
}

# Display names
PLAYER_NAMES: Final[Dict[Cell, str]] = {
    Cell.PLAYER_A: "Player A",
    Cell.PLAYER_B: "Player B",
}

# AI settings
DEFAULT_MCTS_ITERATIONS: Final[int] = 10000  # Main knob for playing strength
DEFAULT_MCTS_EXPLORATION: Final[float] = math.sqrt(2)  # UCB1 exploration parameter
