"""
Monte Carlo Tree Search (MCTS) algorithm for Connect AI.

This module implements the core MCTS algorithm with the four standard phases:
1. Selection: Traverse the tree with UCB1 to find a promising node
2. Expansion: Create a new child node from an untried move
3. Simulation: Run a uniform-random playout to estimate the node's value
4. Backpropagation: Update statistics up the tree

Every function takes an explicit random.Random so that searches are
reproducible under a fixed seed.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import math
import random
import time

from tqdm import tqdm

from connect_ai.core.constants import Cell, DEFAULT_MCTS_EXPLORATION, opponent
from connect_ai.core.game import GameState, GameResult
from connect_ai.mcts.node import SearchNode, SearchTree
from connect_ai.mcts.config import MCTSConfig


class NoLegalMoveError(RuntimeError):
    """Raised when a search is started from a position without legal moves."""


def ucb_score(parent: SearchNode, child: SearchNode, exploration_weight: float) -> float:
    """
    Calculate the UCB1 score for a child node.

    UCB1 = wins / visits + exploration_weight * sqrt(ln(parent_visits) / visits)

    Args:
        parent: Node the child hangs from
        child: Child node to calculate score for
        exploration_weight: UCB1 exploration constant

    Returns:
        UCB1 score (infinite for unvisited children)
    """
    if child.visits == 0:
        return MCTSConfig.INFINITE_VALUE

    exploitation = child.wins / child.visits
    if parent.visits == 0:
        return exploitation

    exploration = math.sqrt(math.log(parent.visits) / child.visits)
    return exploitation + exploration_weight * exploration


def select_child(tree: SearchTree, node: SearchNode, exploration_weight: float) -> Optional[SearchNode]:
    """
    Pick the child with the highest UCB1 score.

    The first maximal child in expansion order wins ties.

    Args:
        tree: Tree owning the node
        node: Fully expanded node
        exploration_weight: UCB1 exploration constant

    Returns:
        Best child, or None if the node has no children
    """
    best_child = None
    best_score = -math.inf
    for child in tree.children_of(node):
        score = ucb_score(node, child, exploration_weight)
        if score > best_score:
            best_score = score
            best_child = child
    return best_child


def select_node(
    tree: SearchTree,
    rng: random.Random,
    exploration_weight: float = DEFAULT_MCTS_EXPLORATION
) -> SearchNode:
    """
    Select a node for simulation.

    This function implements the selection and expansion phases of MCTS.
    Starting at the root it stops at a terminal node, expands the first
    node that still has untried moves, and otherwise descends into the
    child with the best UCB1 score.

    Args:
        tree: Search tree
        rng: Random source for the expansion step
        exploration_weight: UCB1 exploration constant

    Returns:
        Node selected for simulation
    """
    node = tree.root
    while not node.is_terminal:
        if node.has_untried_moves():
            return expand_node(tree, node, rng)

        child = select_child(tree, node, exploration_weight)
        if child is None:
            # Non-terminal node with nothing left to try
            return node
        node = child

    return node


def expand_node(tree: SearchTree, node: SearchNode, rng: random.Random) -> SearchNode:
    """
    Expand a node by adding a child.

    A uniformly random untried move is removed from the node, applied to
    its state, and the resulting child (with the opponent to move) is
    appended to the node's children.

    Args:
        tree: Tree owning the node
        node: Node to expand
        rng: Random source

    Returns:
        The new child, or the node itself if it cannot be expanded
    """
    if node.is_terminal or not node.untried_moves:
        return node

    move_index = rng.randrange(len(node.untried_moves))
    move = node.untried_moves[move_index]

    try:
        child_state = node.state.apply(move, node.player)
        child = tree.create_node(node, move, child_state, opponent(node.player))
    except MemoryError:
        return node

    # Swap-remove; order of the remaining untried moves does not matter
    node.untried_moves[move_index] = node.untried_moves[-1]
    node.untried_moves.pop()
    node.children.append(child.index)

    return child


def simulate_game(node: SearchNode, rng: random.Random) -> Tuple[GameResult, int]:
    """
    Run a uniform-random playout from a node to the end of the game.

    Args:
        node: Node to simulate from
        rng: Random source

    Returns:
        Tuple of (final result, number of playout moves)
    """
    if node.is_terminal:
        return node.terminal_result, 0

    state = node.state
    player = node.player
    steps = 0

    while True:
        moves = state.legal_moves()
        if not moves:
            # No winner and nowhere to play
            return GameResult.DRAW, steps

        state = state.apply(rng.choice(moves), player)
        steps += 1

        result = state.result()
        if result.is_over:
            return result, steps

        player = opponent(player)


def backpropagate(tree: SearchTree, node: SearchNode, result: GameResult) -> None:
    """
    Update statistics from a node up to the root.

    Every node on the path gets one more visit. A node gets a win only
    when the result is decisive and its player to move is not the winner,
    i.e. the win goes to the player who moved into the node. Draws add
    visits only.

    Args:
        tree: Tree owning the node
        node: Node the simulation started from
        result: Simulation result
    """
    winner = result.winner
    for current in tree.path_to_root(node):
        current.visits += 1
        if winner is not None and current.player != winner:
            current.wins += 1


def run_iteration(
    tree: SearchTree,
    rng: random.Random,
    exploration_weight: float
) -> Tuple[SearchNode, GameResult, int]:
    """
    Run one select / simulate / backpropagate cycle.

    Returns:
        Tuple of (selected leaf, simulation result, playout length)
    """
    leaf = select_node(tree, rng, exploration_weight)
    result, steps = simulate_game(leaf, rng)
    backpropagate(tree, leaf, result)
    return leaf, result, steps


def most_visited_child(tree: SearchTree, node: SearchNode) -> Optional[SearchNode]:
    """Get the child with the most visits (first one on ties)."""
    best_child = None
    most_visits = -1
    for child in tree.children_of(node):
        if child.visits > most_visits:
            most_visits = child.visits
            best_child = child
    return best_child


def immediate_win(state: GameState, player: Cell) -> Optional[int]:
    """
    Find a column that wins the game on the spot.

    Args:
        state: Current position
        player: Player to move

    Returns:
        The lowest winning column, or None
    """
    for column in state.legal_moves():
        if state.apply(column, player).winner() == player:
            return column
    return None


def mcts_search(
    state: GameState,
    player: Cell,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None
) -> Tuple[int, Dict[str, Any]]:
    """
    Run Monte Carlo Tree Search to find the best move.

    This function runs the full MCTS algorithm:
    1. Create a fresh tree rooted at the current state
    2. Run the configured number of select / simulate / backpropagate cycles
    3. Return the most visited root move and release the tree

    Args:
        state: Current game state
        player: Player to move
        config: MCTS configuration parameters
        rng: Random source (defaults to one seeded from config.seed)

    Returns:
        Tuple of (best column, search statistics)

    Raises:
        NoLegalMoveError: If the state is terminal or has no legal move
    """
    if config is None:
        config = MCTSConfig()
    if rng is None:
        rng = random.Random(config.seed)

    tree = SearchTree(state, player)
    root = tree.root

    if root.is_terminal:
        tree.release()
        raise NoLegalMoveError(f"Search called on a finished game ({root.terminal_result.name})")
    if not root.untried_moves:
        tree.release()
        raise NoLegalMoveError("Search called on a position without legal moves")

    stats: Dict[str, Any] = {
        "iterations": 0,
        "max_depth": 0,
        "total_simulation_steps": 0,
        "time_elapsed": 0.0,
        "node_count": 1,
        "used_fallback": False,
        "immediate_win": False,
    }

    start_time = time.time()

    iterations = range(config.iterations)
    if config.show_progress:
        iterations = tqdm(iterations, desc="MCTS", leave=False)

    for _ in iterations:
        _, _, steps = run_iteration(tree, rng, config.exploration_weight)
        stats["iterations"] += 1
        stats["total_simulation_steps"] += steps

    # Read out the decision
    best_child = most_visited_child(tree, root)
    if best_child is not None:
        best_move = best_child.move
    elif root.untried_moves:
        best_move = rng.choice(root.untried_moves)
        stats["used_fallback"] = True
    else:
        legal = state.legal_moves()
        if not legal:
            tree.release()
            raise NoLegalMoveError("MCTS could not determine a move")
        best_move = legal[0]
        stats["used_fallback"] = True

    if config.take_immediate_wins:
        winning = immediate_win(state, player)
        if winning is not None:
            stats["immediate_win"] = True
            best_move = winning

    stats["action_visits"] = {child.move: child.visits for child in tree.children_of(root)}
    stats["action_wins"] = {child.move: child.wins for child in tree.children_of(root)}
    stats["root_visits"] = root.visits
    stats["node_count"] = count_nodes(tree)
    stats["max_depth"] = tree.max_depth()
    stats["time_elapsed"] = time.time() - start_time
    stats["iterations_per_second"] = stats["iterations"] / max(0.001, stats["time_elapsed"])
    stats["average_simulation_steps"] = stats["total_simulation_steps"] / max(1, stats["iterations"])
    stats["best_move"] = best_move

    tree.release()

    return best_move, stats


def best_move(
    state: GameState,
    player: Cell,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None
) -> int:
    """
    Get the recommended column for a player.

    Args:
        state: Current game state
        player: Player to move
        config: MCTS configuration parameters
        rng: Random source

    Returns:
        A legal column

    Raises:
        NoLegalMoveError: If the state has no legal move
    """
    move, _ = mcts_search(state, player, config, rng)
    return move


def search_tree(
    state: GameState,
    player: Cell,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None
) -> SearchTree:
    """
    Run the search loop and return the tree instead of a decision.

    Used for analysis; the caller is responsible for releasing the tree.

    Args:
        state: Current game state
        player: Player to move
        config: MCTS configuration parameters
        rng: Random source

    Returns:
        The searched tree
    """
    if config is None:
        config = MCTSConfig()
    if rng is None:
        rng = random.Random(config.seed)

    tree = SearchTree(state, player)
    if tree.root.is_terminal:
        tree.release()
        raise NoLegalMoveError(f"Search called on a finished game ({tree.root.terminal_result.name})")

    for _ in range(config.iterations):
        run_iteration(tree, rng, config.exploration_weight)
    return tree


def count_nodes(tree: SearchTree) -> int:
    """
    Count the total number of nodes in the tree.

    Args:
        tree: Search tree

    Returns:
        Total number of nodes
    """
    return len(tree)


def get_principal_variation(tree: SearchTree, max_depth: int = 10) -> List[Tuple[int, float]]:
    """
    Get the principal variation (most visited path) from the root.

    This is useful for analysis and debugging.

    Args:
        tree: Search tree
        max_depth: Maximum depth to explore

    Returns:
        List of (column, win rate) pairs representing the principal variation
    """
    result = []
    current = tree.root

    while current.children and len(result) < max_depth:
        best_child = most_visited_child(tree, current)
        result.append((best_child.move, best_child.win_rate))
        current = best_child

    return result


def get_action_statistics(
    tree: SearchTree,
    exploration_weight: float = DEFAULT_MCTS_EXPLORATION
) -> Dict[int, Dict[str, float]]:
    """
    Get statistics for all root moves.

    This is useful for analysis and debugging.

    Args:
        tree: Search tree
        exploration_weight: UCB1 exploration constant used for the scores

    Returns:
        Dictionary mapping columns to statistics
    """
    root = tree.root
    result = {}

    for child in tree.children_of(root):
        result[child.move] = {
            "visits": child.visits,
            "wins": child.wins,
            "value": child.win_rate,
            "ucb": ucb_score(root, child, exploration_weight),
        }

    return result
