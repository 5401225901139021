#!/usr/bin/env python
"""
Tests for the Connect AI game model.

This script tests the board rules and the turn loop:
1. Legal move enumeration and move application
2. Win detection in all four orientations
3. Draw detection on a full board
4. The Game manager driving two agents
"""
import random
import unittest

import numpy as np

from connect_ai.core.constants import Cell, opponent
from connect_ai.core.game import Game, GameResult, GameState, InvalidMoveError

A = Cell.PLAYER_A
B = Cell.PLAYER_B

# Full 6x7 board without four in a row anywhere
DRAWN_GRID = [
    [A, A, B, B, A, A, B],
    [B, B, A, A, B, B, A],
    [A, A, B, B, A, A, B],
    [B, B, A, A, B, B, A],
    [A, A, B, B, A, A, B],
    [B, B, A, A, B, B, A],
]


def board_with(pieces, rows=6, columns=7, connect_length=4):
    """Build a state from (row, column, player) triples."""
    grid = np.zeros((rows, columns), dtype=np.int8)
    for row, column, player in pieces:
        grid[row, column] = player
    return GameState.from_grid(grid, connect_length)


class TestGameState(unittest.TestCase):
    """Test case for GameState."""

    def setUp(self):
        """Set up test fixtures."""
        self.empty = GameState.new()

    def test_empty_board(self):
        """An empty 6x7 board offers every column."""
        self.assertEqual(self.empty.rows, 6)
        self.assertEqual(self.empty.columns, 7)
        self.assertEqual(self.empty.connect_length, 4)
        self.assertEqual(self.empty.legal_moves(), list(range(7)))
        self.assertEqual(self.empty.piece_count(), 0)
        self.assertIsNone(self.empty.winner())
        self.assertEqual(self.empty.result(), GameResult.IN_PROGRESS)
        self.assertFalse(self.empty.is_terminal())

    def test_apply_drops_to_bottom(self):
        """A piece in column 0 lands in row 5 and nowhere else."""
        state = self.empty.apply(0, A)

        self.assertEqual(state.piece_count(), 1)
        self.assertEqual(state.cell(5, 0), A)
        occupied = np.argwhere(state.board != Cell.EMPTY).tolist()
        self.assertEqual(occupied, [[5, 0]])

        stacked = state.apply(0, B)
        self.assertEqual(stacked.cell(4, 0), B)
        self.assertEqual(stacked.next_open_row(0), 3)

    def test_apply_does_not_mutate(self):
        """States are never modified by applying a move."""
        state = self.empty.apply(3, A)
        self.assertEqual(self.empty.piece_count(), 0)
        self.assertNotEqual(state, self.empty)
        with self.assertRaises(ValueError):
            state.board[0, 0] = B

    def test_full_column_is_not_legal(self):
        """Once a column is full it never accepts another piece."""
        state = self.empty
        player = A
        for _ in range(6):
            state = state.apply(2, player)
            player = opponent(player)

        self.assertNotIn(2, state.legal_moves())
        self.assertFalse(state.is_legal(2))
        self.assertIsNone(state.next_open_row(2))
        with self.assertRaises(InvalidMoveError):
            state.apply(2, A)

    def test_out_of_range_column(self):
        """Columns outside [0, C) are rejected."""
        for column in (-1, 7, 100):
            with self.assertRaises(InvalidMoveError):
                self.empty.apply(column, A)
            self.assertFalse(self.empty.is_legal(column))

    def test_non_integer_column(self):
        """Columns must be integers; numpy integers are accepted."""
        for column in (2.5, 3.0, "3", None, True):
            with self.assertRaises(InvalidMoveError):
                self.empty.apply(column, A)
            self.assertFalse(self.empty.is_legal(column))
            self.assertIsNone(self.empty.next_open_row(column))

        state = self.empty.apply(np.int64(3), A)
        self.assertEqual(state.cell(5, 3), A)

    def test_legal_moves_never_offer_full_columns(self):
        """On every position reached by random play, legal columns have an empty top cell."""
        rng = random.Random(17)
        for _ in range(20):
            state = self.empty
            player = A
            while not state.is_terminal():
                legal = state.legal_moves()
                self.assertTrue(all(state.board[0, c] == Cell.EMPTY for c in legal))
                self.assertEqual(legal, [c for c in range(state.columns) if state.is_legal(c)])
                state = state.apply(rng.choice(legal), player)
                player = opponent(player)
            self.assertTrue(all(state.board[0, c] == Cell.EMPTY for c in state.legal_moves()))

    def test_empty_cell_cannot_move(self):
        with self.assertRaises(InvalidMoveError):
            self.empty.apply(0, Cell.EMPTY)

    def test_horizontal_win(self):
        """Four in a row along a row is a win for that player only."""
        state = board_with([(5, c, A) for c in range(2, 6)] + [(4, 2, B), (4, 3, B), (4, 4, B)])
        self.assertEqual(state.winner(), A)
        self.assertTrue(state.has_won(A))
        self.assertFalse(state.has_won(B))
        self.assertEqual(state.result(), GameResult.PLAYER_A_WIN)
        self.assertTrue(state.is_terminal())

    def test_vertical_win(self):
        state = board_with([(r, 6, B) for r in range(2, 6)])
        self.assertEqual(state.winner(), B)
        self.assertFalse(state.has_won(A))
        self.assertEqual(state.result(), GameResult.PLAYER_B_WIN)

    def test_diagonal_down_right_win(self):
        """Pieces at (r, c), (r+1, c+1), ... form a win."""
        state = board_with([(2 + i, 1 + i, A) for i in range(4)])
        self.assertEqual(state.winner(), A)

    def test_diagonal_up_right_win(self):
        """Pieces at (r, c), (r-1, c+1), ... form a win."""
        state = board_with([(5 - i, 3 + i, B) for i in range(4)])
        self.assertEqual(state.winner(), B)

    def test_three_is_not_a_win(self):
        state = board_with([(5, c, A) for c in range(3)] + [(5 - i, 4 + i, B) for i in range(3)])
        self.assertIsNone(state.winner())
        self.assertFalse(state.is_terminal())

    def test_windows_at_board_edges(self):
        """Runs touching the last row and column are found."""
        self.assertEqual(board_with([(5, c, A) for c in range(3, 7)]).winner(), A)
        self.assertEqual(board_with([(r, 0, B) for r in range(4)]).winner(), B)
        self.assertEqual(board_with([(i, 3 + i, A) for i in range(4)]).winner(), A)
        self.assertEqual(board_with([(3 - i, i, B) for i in range(4)]).winner(), B)

    def test_full_board_is_draw(self):
        """A full board without a win is a terminal draw."""
        state = GameState.from_grid(DRAWN_GRID)
        self.assertEqual(state.legal_moves(), [])
        self.assertTrue(state.is_full())
        self.assertIsNone(state.winner())
        self.assertTrue(state.is_terminal())
        self.assertEqual(state.result(), GameResult.DRAW)

    def test_custom_connect_length(self):
        """Smaller boards and connect lengths follow the same rules."""
        state = GameState.new(rows=4, columns=5, connect_length=3)
        self.assertEqual(state.legal_moves(), [0, 1, 2, 3, 4])

        state = board_with([(3, 0, A), (3, 1, A), (3, 2, A)], rows=4, columns=5, connect_length=3)
        self.assertEqual(state.winner(), A)

    def test_invalid_construction(self):
        with self.assertRaises(ValueError):
            GameState.new(rows=0)
        with self.assertRaises(ValueError):
            GameState.new(rows=3, columns=3, connect_length=4)
        with self.assertRaises(ValueError):
            GameState.from_grid([[0, 3], [0, 0]], connect_length=2)
        with self.assertRaises(ValueError):
            GameState.from_grid([1, 2, 0], connect_length=1)

    def test_equality_and_hash(self):
        first = self.empty.apply(3, A).apply(4, B)
        second = self.empty.apply(3, A).apply(4, B)
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))
        self.assertEqual(len({first, second}), 1)

    def test_str_rendering(self):
        text = str(self.empty.apply(0, A).apply(6, B))
        lines = text.splitlines()
        self.assertEqual(lines[0], "0 1 2 3 4 5 6")
        self.assertEqual(lines[-1], "X . . . . . O")
        self.assertEqual(len(lines), 7)


class TestGameResult(unittest.TestCase):
    """Test case for GameResult helpers."""

    def test_winner(self):
        self.assertEqual(GameResult.PLAYER_A_WIN.winner, A)
        self.assertEqual(GameResult.PLAYER_B_WIN.winner, B)
        self.assertIsNone(GameResult.DRAW.winner)
        self.assertIsNone(GameResult.IN_PROGRESS.winner)

    def test_from_winner(self):
        self.assertEqual(GameResult.from_winner(A), GameResult.PLAYER_A_WIN)
        self.assertEqual(GameResult.from_winner(B), GameResult.PLAYER_B_WIN)
        self.assertEqual(GameResult.from_winner(None), GameResult.DRAW)

    def test_flags(self):
        self.assertTrue(GameResult.PLAYER_A_WIN.is_decisive)
        self.assertFalse(GameResult.DRAW.is_decisive)
        self.assertTrue(GameResult.DRAW.is_over)
        self.assertFalse(GameResult.IN_PROGRESS.is_over)

    def test_opponent(self):
        self.assertEqual(opponent(A), B)
        self.assertEqual(opponent(B), A)
        with self.assertRaises(ValueError):
            opponent(Cell.EMPTY)


class TestGame(unittest.TestCase):
    """Test case for the Game manager."""

    def setUp(self):
        """Set up test fixtures."""
        self.game = Game()

    def test_initial_state(self):
        self.assertEqual(self.game.current_player, A)
        self.assertEqual(self.game.turn_count, 0)
        self.assertEqual(self.game.result, GameResult.IN_PROGRESS)
        self.assertFalse(self.game.game_over)

    def test_step_alternates_players(self):
        state, over = self.game.step(3)
        self.assertFalse(over)
        self.assertEqual(state.cell(5, 3), A)
        self.assertEqual(self.game.current_player, B)

        self.game.step(3)
        self.assertEqual(self.game.state.cell(4, 3), B)
        self.assertEqual(self.game.history, [(A, 3), (B, 3)])

    def test_invalid_step(self):
        with self.assertRaises(InvalidMoveError):
            self.game.step(9)
        self.assertEqual(self.game.turn_count, 0)
        self.assertEqual(self.game.current_player, A)

    def test_vertical_win_ends_game(self):
        state = self.game.replay([0, 1, 0, 1, 0, 1, 0])
        self.assertEqual(state.winner(), A)
        self.assertTrue(self.game.game_over)
        self.assertEqual(self.game.result, GameResult.PLAYER_A_WIN)
        with self.assertRaises(ValueError):
            self.game.step(2)

    def test_agents_play_to_the_end(self):
        """Two first-legal-column agents finish the game."""
        first_legal = lambda state, player: state.legal_moves()[0]
        self.game.register_agent(A, first_legal)
        self.game.register_agent(B, first_legal)

        result = self.game.play()

        self.assertTrue(result.is_over)
        self.assertTrue(self.game.state.is_terminal())

    def test_max_turns(self):
        first_legal = lambda state, player: state.legal_moves()[0]
        self.game.register_agent(A, first_legal)
        self.game.register_agent(B, first_legal)

        result = self.game.play(max_turns=3)

        self.assertEqual(result, GameResult.IN_PROGRESS)
        self.assertEqual(self.game.turn_count, 3)

    def test_missing_agent(self):
        with self.assertRaises(ValueError):
            self.game.step()

    def test_reset(self):
        self.game.step(0)
        self.game.reset()
        self.assertEqual(self.game.state.piece_count(), 0)
        self.assertEqual(self.game.history, [])
        self.assertEqual(self.game.current_player, A)

    def test_second_player_first(self):
        game = Game(first_player=B)
        game.step(0)
        self.assertEqual(game.state.cell(5, 0), B)


if __name__ == "__main__":
    unittest.main()
