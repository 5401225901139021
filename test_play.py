#!/usr/bin/env python
"""
Tests for the Connect AI command-line front end.
"""
import math
import unittest
from unittest import mock

from connect_ai import play
from connect_ai.core.constants import Cell
from connect_ai.core.game import GameResult, GameState
from connect_ai.mcts.agent import MCTSAgent
from connect_ai.mcts.config import MCTSConfig
from connect_ai.mcts.search import NoLegalMoveError


class TestPlay(unittest.TestCase):
    """Test case for the interactive game interface."""

    def test_parse_args_defaults(self):
        args = play.parse_args([])
        self.assertEqual(args.mode, "human")
        self.assertEqual(args.iterations, 10000)
        self.assertEqual(args.exploration, math.sqrt(2))
        self.assertEqual((args.rows, args.columns, args.connect), (6, 7, 4))
        self.assertIsNone(args.seed)
        self.assertFalse(args.first)

    def test_parse_column(self):
        state = GameState.new()
        self.assertEqual(play.parse_column("3", state), 3)
        self.assertEqual(play.parse_column(" 6\n", state), 6)
        self.assertIsNone(play.parse_column("7", state))
        self.assertIsNone(play.parse_column("-1", state))
        self.assertIsNone(play.parse_column("three", state))
        self.assertIsNone(play.parse_column("", state))

    def test_parse_column_rejects_full_column(self):
        state = GameState.new(rows=2, columns=3, connect_length=2)
        state = state.apply(1, Cell.PLAYER_A).apply(1, Cell.PLAYER_B)
        self.assertIsNone(play.parse_column("1", state))

    def test_human_move_reprompts(self):
        state = GameState.new()
        with mock.patch.object(play.console, "input", side_effect=["x", "9", "4"]), \
                mock.patch.object(play.console, "print"):
            self.assertEqual(play.get_human_move(state, Cell.PLAYER_A), 4)

    def test_render_board(self):
        state = GameState.new().apply(0, Cell.PLAYER_A).apply(6, Cell.PLAYER_B)
        lines = play.render_board(state).plain.splitlines()
        self.assertEqual(lines[0], " 0 1 2 3 4 5 6")
        self.assertEqual(lines[-2], "|X|.|.|.|.|.|O|")
        self.assertEqual(len(lines), 9)

    def test_ai_move_falls_back(self):
        """A search failure on a playable board falls back to the first legal column."""
        agent = MCTSAgent(config=MCTSConfig(iterations=5))
        state = GameState.new().apply(0, Cell.PLAYER_A)
        with mock.patch.object(agent, "select_action", side_effect=NoLegalMoveError("boom")), \
                mock.patch.object(play.console, "print"):
            self.assertEqual(play.get_ai_move(agent, state, Cell.PLAYER_B), 0)

    def test_ai_vs_ai_game(self):
        args = play.parse_args([
            "--mode", "ai", "--rows", "4", "--columns", "4", "--connect", "3",
            "--iterations", "20", "--seed", "1",
        ])
        with mock.patch.object(play.console, "print"):
            result = play.play_game(args)
        self.assertTrue(result.is_over)

    def test_human_game(self):
        """The human always picks the first playable column."""
        args = play.parse_args([
            "--rows", "4", "--columns", "4", "--connect", "3",
            "--iterations", "20", "--seed", "2", "--first",
        ])

        with mock.patch.object(play, "get_human_move",
                               side_effect=lambda state, player: state.legal_moves()[0]), \
                mock.patch.object(play.console, "print"):
            result = play.play_game(args)
        self.assertIsInstance(result, GameResult)
        self.assertTrue(result.is_over)

    def test_main_rejects_bad_board(self):
        with mock.patch.object(play.console, "print"):
            with self.assertRaises(SystemExit) as ctx:
                play.main(["--rows", "3", "--columns", "3", "--connect", "5"])
        self.assertEqual(ctx.exception.code, 2)

    def test_main_ai_mode(self):
        with mock.patch.object(play.console, "print") as printed:
            play.main(["--mode", "ai", "--rows", "4", "--columns", "4", "--connect", "3",
                       "--iterations", "10", "--seed", "3"])
        self.assertTrue(printed.called)


if __name__ == "__main__":
    unittest.main()
