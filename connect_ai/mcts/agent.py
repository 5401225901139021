"""
Monte Carlo Tree Search Agent for Connect AI.

This module provides the MCTSAgent class, a ready-to-use AI player that
uses Monte Carlo Tree Search to pick columns, and a RandomAgent baseline.
The MCTS agent can be configured with different parameters and provides
statistics about its search process.
"""
from typing import Any, Callable, Dict, List, Optional, Tuple
import json
import random

from rich.console import Console
from rich.table import Table

from connect_ai.core.constants import Cell, DEFAULT_MCTS_EXPLORATION, DEFAULT_MCTS_ITERATIONS
from connect_ai.core.game import Game, GameState
from connect_ai.mcts.config import MCTSConfig
from connect_ai.mcts.search import NoLegalMoveError, mcts_search


class MCTSAgent:
    """
    Monte Carlo Tree Search agent.

    The agent runs one fresh search per decision; no tree survives from
    one move to the next.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        verbose: bool = False,
        rng: Optional[random.Random] = None,
        console: Optional[Console] = None
    ):
        """
        Initialize an MCTS agent.

        Args:
            config: MCTS configuration parameters
            name: Name of the agent
            verbose: Whether to print detailed information after each search
            rng: Random source shared by all searches (defaults to one seeded from config.seed)
            console: Console used for verbose output
        """
        self.config = config or MCTSConfig()
        self.name = name
        self.verbose = verbose
        self.rng = rng or random.Random(self.config.seed)
        self.console = console or Console()

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all moves and their statistics
        self.action_history: List[Tuple[int, Dict[str, Any]]] = []

    def select_action(self, state: GameState, player: Cell) -> int:
        """
        Select a column using Monte Carlo Tree Search.

        Args:
            state: Current game state
            player: Player to move

        Returns:
            Selected column

        Raises:
            NoLegalMoveError: If the state has no legal move
        """
        legal_moves = state.legal_moves()
        if state.is_terminal() or not legal_moves:
            raise NoLegalMoveError(f"{self.name} has no move to play")

        # If there's only one legal move, no need to search
        if len(legal_moves) == 1:
            move = legal_moves[0]
            self.last_stats = {"iterations": 0, "forced_move": True, "best_move": move}
            self.action_history.append((move, self.last_stats))
            return move

        move, stats = mcts_search(state, player, self.config, self.rng)

        self.last_stats = stats
        self.action_history.append((move, stats))

        if self.verbose:
            self._print_search_info(move, stats)

        return move

    def _print_search_info(self, move: int, stats: Dict[str, Any]) -> None:
        """
        Print information about the search.

        Args:
            move: Selected column
            stats: Search statistics
        """
        console = self.console
        console.print(f"\n[bold]{self.name}[/bold] selected column [cyan]{move}[/cyan]")
        console.print(f"Iterations: {stats['iterations']}")
        console.print(f"Time: {stats['time_elapsed']:.3f}s ({stats['iterations_per_second']:.1f} it/s)")
        console.print(f"Nodes: {stats['node_count']}  Max depth: {stats['max_depth']}")

        if stats.get("used_fallback"):
            console.print("[yellow]Warning: no children explored, picked a random untried move[/yellow]")
        if stats.get("immediate_win"):
            console.print("[green]Winning move available[/green]")

        table = Table(title="Root moves")
        table.add_column("Column", justify="right")
        table.add_column("Visits", justify="right")
        table.add_column("Wins", justify="right")
        table.add_column("Win rate", justify="right")

        visits = stats.get("action_visits", {})
        wins = stats.get("action_wins", {})
        for column, count in sorted(visits.items(), key=lambda x: x[1], reverse=True):
            win_rate = wins.get(column, 0) / count if count > 0 else 0.0
            table.add_row(str(column), str(count), str(wins.get(column, 0)), f"{win_rate:.3f}")

        console.print(table)

    def get_action_callback(self) -> Callable[[GameState, Cell], int]:
        """
        Get a callback function for selecting moves.

        This is useful for registering the agent with a Game object.

        Returns:
            Callback taking a game state and player and returning a column
        """
        return lambda state, player: self.select_action(state, player)

    def register_with_game(self, game: Game, player: Cell) -> None:
        """
        Register this agent with a game.

        Args:
            game: Game object
            player: Player to register as
        """
        game.register_agent(player, self.get_action_callback())

    def get_last_statistics(self) -> Dict[str, Any]:
        return self.last_stats

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.action_history = []

    def save_statistics(self, filename: str) -> None:
        """
        Save statistics to a JSON file.

        Args:
            filename: Name of the file to save to
        """
        history = []
        for move, stats in self.action_history:
            history.append({
                "move": move,
                "stats": {k: v for k, v in stats.items() if not isinstance(v, dict)}
            })

        data = {
            "agent_name": self.name,
            "config": self.config.to_dict(),
            "history": history,
            "total_actions": len(self.action_history)
        }

        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

    def __str__(self) -> str:
        return f"{self.name} (MCTS, {self.config.iterations} iterations)"


class RandomAgent:
    """Baseline agent that plays a uniformly random legal column."""

    def __init__(self, name: str = "Random Agent", rng: Optional[random.Random] = None):
        self.name = name
        self.rng = rng or random.Random()

    def select_action(self, state: GameState, player: Cell) -> int:
        legal_moves = state.legal_moves()
        if not legal_moves:
            raise NoLegalMoveError(f"{self.name} has no move to play")
        return self.rng.choice(legal_moves)

    def get_action_callback(self) -> Callable[[GameState, Cell], int]:
        return lambda state, player: self.select_action(state, player)

    def register_with_game(self, game: Game, player: Cell) -> None:
        game.register_agent(player, self.get_action_callback())

    def __str__(self) -> str:
        return f"{self.name} (random)"


class MCTSAgentFactory:
    """
    Factory for creating MCTS agents with different configurations.
    """

    @staticmethod
    def create_fast() -> MCTSAgent:
        """Create a fast MCTS agent with fewer iterations."""
        return MCTSAgent(config=MCTSConfig.fast(), name="Fast MCTS")

    @staticmethod
    def create_standard() -> MCTSAgent:
        """Create a standard MCTS agent with the default budget."""
        return MCTSAgent(config=MCTSConfig.default(), name="Standard MCTS")

    @staticmethod
    def create_strong() -> MCTSAgent:
        """Create a strong MCTS agent with more iterations."""
        return MCTSAgent(config=MCTSConfig.deep(), name="Strong MCTS")

    @staticmethod
    def create_custom(
        iterations: int = DEFAULT_MCTS_ITERATIONS,
        exploration_weight: float = DEFAULT_MCTS_EXPLORATION,
        seed: Optional[int] = None,
        name: str = "Custom MCTS",
        verbose: bool = False
    ) -> MCTSAgent:
        """
        Create a custom MCTS agent.

        Args:
            iterations: Number of MCTS iterations
            exploration_weight: UCB1 exploration parameter
            seed: Seed for the agent's random source
            name: Name of the agent
            verbose: Whether to print search information

        Returns:
            MCTSAgent
        """
        config = MCTSConfig(
            iterations=iterations,
            exploration_weight=exploration_weight,
            seed=seed
        )
        return MCTSAgent(config=config, name=name, verbose=verbose)
