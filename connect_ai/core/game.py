"""
Game state and flow management for Connect AI.

This module defines the core game mechanics, including:
- GameState: Immutable representation of a board position
- GameResult: Outcome of a position (in progress, win for either side, draw)
- Game: Manager for the turn loop between two agents

Pieces are dropped into columns and fall to the lowest empty cell. A player
wins by aligning ``connect_length`` pieces horizontally, vertically or
diagonally. Row 0 is the top of the board.
"""
from __future__ import annotations
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union
from enum import Enum, auto

import numpy as np

from connect_ai.core.constants import (
    Cell, PLAYERS, ROWS, COLUMNS, CONNECT_LENGTH, CELL_SYMBOLS, opponent
)


class InvalidMoveError(ValueError):
    """Raised when a piece cannot be dropped into the requested column."""


def _is_column_index(column) -> bool:
    """Whether a value can name a column (plain or numpy integer, not bool)."""
    return isinstance(column, (int, np.integer)) and not isinstance(column, bool)


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    PLAYER_A_WIN = auto()
    PLAYER_B_WIN = auto()
    DRAW = auto()

    @classmethod
    def from_winner(cls, winner: Optional[Cell]) -> 'GameResult':
        """Get the decisive result for a winner (None is a draw)."""
        if winner == Cell.PLAYER_A:
            return cls.PLAYER_A_WIN
        if winner == Cell.PLAYER_B:
            return cls.PLAYER_B_WIN
        return cls.DRAW

    @property
    def winner(self) -> Optional[Cell]:
        """The winning player, or None for draws and unfinished games."""
        if self is GameResult.PLAYER_A_WIN:
            return Cell.PLAYER_A
        if self is GameResult.PLAYER_B_WIN:
            return Cell.PLAYER_B
        return None

    @property
    def is_decisive(self) -> bool:
        return self.winner is not None

    @property
    def is_over(self) -> bool:
        return self is not GameResult.IN_PROGRESS


class GameState:
    """
    Immutable board position.

    The grid is a read-only numpy array of shape (rows, columns) holding
    ``Cell`` values. Every transition returns a new state; stored states
    are never modified.
    """

    __slots__ = ("_board", "_connect_length", "_winner")

    def __init__(self, board: np.ndarray, connect_length: int = CONNECT_LENGTH):
        """
        Initialize a game state.

        Args:
            board: 2-D array of cell values, row 0 at the top
            connect_length: Number of aligned pieces needed to win
        """
        grid = np.array(board, dtype=np.int8)
        if grid.ndim != 2 or grid.shape[0] == 0 or grid.shape[1] == 0:
            raise ValueError(f"board must be a non-empty 2-D grid, got shape {grid.shape}")
        valid = {int(cell) for cell in Cell}
        if not set(np.unique(grid).tolist()) <= valid:
            raise ValueError("board contains values that are not cells")
        if connect_length <= 0:
            raise ValueError("connect_length must be positive")
        if connect_length > max(grid.shape):
            raise ValueError(
                f"connect_length {connect_length} does not fit a {grid.shape[0]}x{grid.shape[1]} board"
            )

        grid.setflags(write=False)
        self._board = grid
        self._connect_length = connect_length
        self._winner: Union[Cell, None, bool] = False  # False = not computed yet

    @classmethod
    def new(
        cls,
        rows: int = ROWS,
        columns: int = COLUMNS,
        connect_length: int = CONNECT_LENGTH
    ) -> 'GameState':
        """
        Create an empty board.

        Args:
            rows: Number of rows
            columns: Number of columns
            connect_length: Number of aligned pieces needed to win

        Returns:
            Empty GameState
        """
        if rows <= 0 or columns <= 0:
            raise ValueError("rows and columns must be positive")
        return cls(np.zeros((rows, columns), dtype=np.int8), connect_length)

    @classmethod
    def from_grid(
        cls,
        grid: Union[np.ndarray, Sequence[Sequence[int]]],
        connect_length: int = CONNECT_LENGTH
    ) -> 'GameState':
        """
        Create a state from nested sequences of cell values.

        Args:
            grid: Rows of cell values, top row first
            connect_length: Number of aligned pieces needed to win

        Returns:
            GameState holding a copy of the grid
        """
        return cls(np.array(grid, dtype=np.int8), connect_length)

    # ------------------------------------------------------------------
    # Properties

    @property
    def board(self) -> np.ndarray:
        """Read-only view of the grid."""
        return self._board

    @property
    def rows(self) -> int:
        return self._board.shape[0]

    @property
    def columns(self) -> int:
        return self._board.shape[1]

    @property
    def connect_length(self) -> int:
        return self._connect_length

    def cell(self, row: int, column: int) -> Cell:
        """Get the content of a single cell."""
        return Cell(int(self._board[row, column]))

    def copy_grid(self) -> np.ndarray:
        """Get a writable copy of the grid."""
        return self._board.copy()

    def piece_count(self) -> int:
        """Number of occupied cells."""
        return int(np.count_nonzero(self._board))

    # ------------------------------------------------------------------
    # Moves

    def is_legal(self, column: int) -> bool:
        """
        Check if a piece can be dropped into a column.

        Args:
            column: Column index

        Returns:
            True if the column is in range and its top cell is empty
        """
        return (_is_column_index(column) and 0 <= column < self.columns
                and self._board[0, column] == Cell.EMPTY)

    def legal_moves(self) -> List[int]:
        """
        Get all columns that can still accept a piece.

        Returns:
            Column indices in ascending order (empty when the board is full)
        """
        return [int(c) for c in np.flatnonzero(self._board[0] == Cell.EMPTY)]

    def next_open_row(self, column: int) -> Optional[int]:
        """
        Get the row a piece dropped into a column would land in.

        Args:
            column: Column index

        Returns:
            Row index, or None if the column is full or out of range
        """
        if not _is_column_index(column) or not 0 <= column < self.columns:
            return None
        empty_rows = np.flatnonzero(self._board[:, column] == Cell.EMPTY)
        if empty_rows.size == 0:
            return None
        return int(empty_rows[-1])

    def apply(self, column: int, player: Cell) -> 'GameState':
        """
        Drop a piece for a player into a column.

        Args:
            column: Column index
            player: Player dropping the piece

        Returns:
            New GameState with the piece placed

        Raises:
            InvalidMoveError: If the column is not an integer, out of range or full
        """
        if player not in PLAYERS:
            raise InvalidMoveError(f"{player!r} cannot drop a piece")
        if not _is_column_index(column):
            raise InvalidMoveError(f"Column {column!r} is not an integer")
        if not 0 <= column < self.columns:
            raise InvalidMoveError(f"Column {column} is out of range [0, {self.columns})")

        row = self.next_open_row(column)
        if row is None:
            raise InvalidMoveError(f"Column {column} is full")

        grid = self._board.copy()
        grid[row, column] = player
        return self._derive(grid)

    def _derive(self, grid: np.ndarray) -> 'GameState':
        # Grid already known to be valid; skip the constructor checks
        grid.setflags(write=False)
        state = GameState.__new__(GameState)
        state._board = grid
        state._connect_length = self._connect_length
        state._winner = False
        return state

    # ------------------------------------------------------------------
    # Terminal detection

    def has_won(self, player: Cell) -> bool:
        """
        Check if a player has connect_length pieces in a row.

        All four orientations are scanned: horizontal, vertical and
        both diagonals.

        Args:
            player: Player to check

        Returns:
            True if the player occupies a full window
        """
        mask = self._board == player
        k = self._connect_length
        rows, cols = mask.shape

        # Horizontal
        if cols >= k:
            run = mask[:, :cols - k + 1].copy()
            for i in range(1, k):
                run &= mask[:, i:cols - k + 1 + i]
            if run.any():
                return True

        # Vertical
        if rows >= k:
            run = mask[:rows - k + 1, :].copy()
            for i in range(1, k):
                run &= mask[i:rows - k + 1 + i, :]
            if run.any():
                return True

        if rows < k or cols < k:
            return False

        # Diagonal going down-right (\)
        run = mask[:rows - k + 1, :cols - k + 1].copy()
        for i in range(1, k):
            run &= mask[i:rows - k + 1 + i, i:cols - k + 1 + i]
        if run.any():
            return True

        # Diagonal going up-right (/)
        run = mask[k - 1:, :cols - k + 1].copy()
        for i in range(1, k):
            run &= mask[k - 1 - i:rows - i, i:cols - k + 1 + i]
        return bool(run.any())

    def winner(self) -> Optional[Cell]:
        """
        Get the player with connect_length aligned pieces, if any.

        Returns:
            PLAYER_A, PLAYER_B, or None
        """
        if self._winner is False:
            self._winner = None
            for player in PLAYERS:
                if self.has_won(player):
                    self._winner = player
                    break
        return self._winner

    def is_full(self) -> bool:
        """Check if every column is full."""
        return not bool((self._board[0] == Cell.EMPTY).any())

    def result(self) -> GameResult:
        """
        Get the outcome of this position.

        Returns:
            A win for either player, DRAW for a full board, else IN_PROGRESS
        """
        winner = self.winner()
        if winner is not None:
            return GameResult.from_winner(winner)
        if self.is_full():
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    def is_terminal(self) -> bool:
        """Check if the game is over (win detected or board full)."""
        return self.result().is_over

    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameState):
            return NotImplemented
        return (self._connect_length == other._connect_length
                and np.array_equal(self._board, other._board))

    def __hash__(self) -> int:
        return hash((self._board.shape, self._board.tobytes(), self._connect_length))

    def __str__(self) -> str:
        header = " ".join(str(c % 10) for c in range(self.columns))
        lines = [header]
        for row in self._board:
            lines.append(" ".join(CELL_SYMBOLS[Cell(int(v))] for v in row))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"GameState(rows={self.rows}, columns={self.columns}, "
                f"connect_length={self._connect_length}, pieces={self.piece_count()})")


AgentCallback = Callable[[GameState, Cell], int]


class Game:
    """
    Manager for a game between two players.

    The game keeps the live board, whose turn it is and the move history,
    and asks registered agents for their moves.
    """

    def __init__(
        self,
        rows: int = ROWS,
        columns: int = COLUMNS,
        connect_length: int = CONNECT_LENGTH,
        first_player: Cell = Cell.PLAYER_A
    ):
        """
        Initialize a new game.

        Args:
            rows: Number of rows
            columns: Number of columns
            connect_length: Number of aligned pieces needed to win
            first_player: Player who moves first
        """
        if first_player not in PLAYERS:
            raise ValueError(f"{first_player!r} is not a player")

        self.rows = rows
        self.columns = columns
        self.connect_length = connect_length
        self.first_player = first_player
        self.agents: Dict[Cell, AgentCallback] = {}

        self.reset()

    def reset(self) -> GameState:
        """
        Reset the game to an empty board.

        Returns:
            The initial state
        """
        self.state = GameState.new(self.rows, self.columns, self.connect_length)
        self.current_player = self.first_player
        self.history: List[Tuple[Cell, int]] = []
        self.result = GameResult.IN_PROGRESS
        return self.state

    @property
    def turn_count(self) -> int:
        return len(self.history)

    @property
    def game_over(self) -> bool:
        return self.result.is_over

    def register_agent(self, player: Cell, callback: AgentCallback) -> None:
        """
        Register an agent that picks moves for a player.

        Args:
            player: Player the agent controls
            callback: Function taking (state, player) and returning a column
        """
        if player not in PLAYERS:
            raise ValueError(f"{player!r} is not a player")
        self.agents[player] = callback

    def step(self, column: Optional[int] = None) -> Tuple[GameState, bool]:
        """
        Play one move.

        Args:
            column: Column to play, or None to ask the registered agent

        Returns:
            Tuple of (new state, whether the game is over)
        """
        if self.game_over:
            raise ValueError("Game is already over")

        player = self.current_player
        if column is None:
            if player not in self.agents:
                raise ValueError(f"No agent registered for {player.name}")
            column = self.agents[player](self.state, player)

        self.state = self.state.apply(column, player)
        self.history.append((player, column))
        self.result = self.state.result()
        self.current_player = opponent(player)

        return self.state, self.game_over

    def play(self, max_turns: Optional[int] = None) -> GameResult:
        """
        Play the game to the end using the registered agents.

        Args:
            max_turns: Optional limit on the number of moves

        Returns:
            Final result (IN_PROGRESS if stopped by max_turns)
        """
        while not self.game_over:
            if max_turns is not None and self.turn_count >= max_turns:
                break
            self.step()
        return self.result

    def replay(self, moves: Iterable[int]) -> GameState:
        """
        Play a sequence of columns alternating players.

        Args:
            moves: Columns to play in order

        Returns:
            Resulting state
        """
        for column in moves:
            self.step(column)
        return self.state
