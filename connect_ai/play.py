#!/usr/bin/env python
"""
Interactive game interface for playing against the MCTS agent.

This script provides a command-line interface for playing Connect Four style
games against the MCTS agent, or for watching two agents play each other.

Example usage:
    # Play against the default agent
    connect-play

    # Move first against a weaker, reproducible agent
    connect-play --first --iterations 2000 --seed 7

    # Watch two agents on a bigger board
    connect-play --mode ai --rows 7 --columns 9 --connect 5
"""
import argparse
import sys
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from connect_ai.core.constants import (
    Cell, CELL_SYMBOLS, DEFAULT_MCTS_EXPLORATION, DEFAULT_MCTS_ITERATIONS, PLAYER_NAMES, opponent
)
from connect_ai.core.game import Game, GameResult, GameState
from connect_ai.mcts.agent import MCTSAgent
from connect_ai.mcts.config import MCTSConfig
from connect_ai.mcts.search import NoLegalMoveError

console = Console()

CELL_STYLES = {
    Cell.EMPTY: "dim",
    Cell.PLAYER_A: "bold red",
    Cell.PLAYER_B: "bold yellow",
}


def parse_args(argv=None):
    """Parse command-line arguments for game configuration."""
    parser = argparse.ArgumentParser(description="Play Connect Four against an MCTS agent")

    parser.add_argument("--mode", type=str, default="human",
                        choices=["human", "ai"],
                        help="human = you against the AI, ai = AI against AI")

    # MCTS configuration
    parser.add_argument("--iterations", type=int, default=DEFAULT_MCTS_ITERATIONS,
                        help="Number of MCTS iterations per move")
    parser.add_argument("--exploration", type=float, default=DEFAULT_MCTS_EXPLORATION,
                        help="UCB1 exploration constant")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed (omit for a different game every time)")

    # Board configuration
    parser.add_argument("--rows", type=int, default=6, help="Number of rows")
    parser.add_argument("--columns", type=int, default=7, help="Number of columns")
    parser.add_argument("--connect", type=int, default=4,
                        help="Pieces in a row needed to win")

    parser.add_argument("--first", action="store_true",
                        help="Human player goes first")
    parser.add_argument("--verbose", action="store_true",
                        help="Show search statistics after each AI move")

    return parser.parse_args(argv)


def render_board(state: GameState) -> Text:
    """Render the board as rich text, column numbers on top."""
    text = Text()
    text.append(" " + " ".join(str(c % 10) for c in range(state.columns)) + "\n")
    text.append("-" * (2 * state.columns + 1) + "\n")
    for row in range(state.rows):
        for column in range(state.columns):
            cell = state.cell(row, column)
            text.append("|")
            text.append(CELL_SYMBOLS[cell], style=CELL_STYLES[cell])
        text.append("|\n")
    text.append("-" * (2 * state.columns + 1))
    return text


def display_board(state: GameState) -> None:
    console.print(render_board(state))


def parse_column(raw: str, state: GameState) -> Optional[int]:
    """
    Validate a column typed by the user.

    Args:
        raw: Raw input line
        state: Current game state

    Returns:
        The column, or None if the input is not a playable column
    """
    try:
        column = int(raw.strip())
    except ValueError:
        return None
    if not state.is_legal(column):
        return None
    return column


def get_human_move(state: GameState, player: Cell) -> int:
    """Ask the human player for a column until a legal one is given."""
    prompt = (f"{PLAYER_NAMES[player]} ({CELL_SYMBOLS[player]}), "
              f"enter column (0-{state.columns - 1}): ")
    while True:
        raw = console.input(prompt)
        column = parse_column(raw, state)
        if column is not None:
            return column
        console.print("[red]Invalid column choice. Please try again.[/red]")


def get_ai_move(agent: MCTSAgent, state: GameState, player: Cell) -> int:
    """
    Ask the agent for a column.

    Falls back to the first legal column if the search reports no move.
    """
    console.print(f"{agent.name} ({CELL_SYMBOLS[player]}) is thinking...")
    try:
        column = agent.select_action(state, player)
    except NoLegalMoveError as e:
        console.print(f"[red]Search error: {e}[/red]")
        legal = state.legal_moves()
        if not legal:
            raise
        column = legal[0]
        console.print(f"Fallback: {agent.name} choosing column {column}")
    console.print(f"{agent.name} ({CELL_SYMBOLS[player]}) chose column [cyan]{column}[/cyan]")
    return column


def create_agent(args, name: str, seed_offset: int = 0) -> MCTSAgent:
    """Create an MCTS agent from command-line arguments."""
    seed = None if args.seed is None else args.seed + seed_offset
    config = MCTSConfig(
        iterations=args.iterations,
        exploration_weight=args.exploration,
        seed=seed,
    )
    return MCTSAgent(config=config, name=name, verbose=args.verbose, console=console)


def announce_result(result: GameResult, human: Optional[Cell]) -> None:
    """Display the final result."""
    if result is GameResult.DRAW:
        message, style = "DRAW!", "bold yellow"
    elif human is not None and result.winner == human:
        message, style = "You win!", "bold green"
    elif human is not None:
        message, style = "The AI wins!", "bold red"
    else:
        winner = result.winner
        message, style = f"{PLAYER_NAMES[winner]} ({CELL_SYMBOLS[winner]}) wins!", "bold green"
    console.print(Panel(Text(message, style=style, justify="center"), title="GAME OVER"))


def play_game(args) -> GameResult:
    """Play one game according to the command-line arguments."""
    game = Game(rows=args.rows, columns=args.columns, connect_length=args.connect)

    if args.mode == "human":
        human = Cell.PLAYER_A if args.first else Cell.PLAYER_B
        agents = {opponent(human): create_agent(args, "MCTS AI")}
    else:
        human = None
        agents = {
            Cell.PLAYER_A: create_agent(args, "MCTS A", seed_offset=0),
            Cell.PLAYER_B: create_agent(args, "MCTS B", seed_offset=1),
        }

    display_board(game.state)

    while not game.game_over:
        player = game.current_player
        if player == human:
            column = get_human_move(game.state, player)
        else:
            column = get_ai_move(agents[player], game.state, player)

        game.step(column)
        display_board(game.state)

    announce_result(game.result, human)
    return game.result


def main(argv=None):
    """Main function."""
    args = parse_args(argv)

    console.print("[bold yellow]Welcome to Connect AI![/bold yellow]")
    console.print(f"Connect {args.connect} on a {args.rows}x{args.columns} board.")

    try:
        # Reject bad board or search settings before the first move
        Game(rows=args.rows, columns=args.columns, connect_length=args.connect)
        MCTSConfig(iterations=args.iterations, exploration_weight=args.exploration)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(2)

    try:
        play_game(args)
        while args.mode == "human":
            answer = console.input("\nPlay again? (y/n): ").strip().lower()
            if answer in ('y', 'yes'):
                play_game(args)
            elif answer in ('n', 'no'):
                break
            else:
                console.print("Please enter 'y' or 'n'.")
    except (KeyboardInterrupt, EOFError):
        console.print("\nGame interrupted by user.")
        sys.exit(0)

    console.print("Thanks for playing!")


if __name__ == "__main__":
    main()
