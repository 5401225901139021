"""
Monte Carlo Tree Search (MCTS) implementation for Connect AI.

This package provides a complete MCTS agent that picks columns without any
training. The MCTS algorithm works by:

1. Selection: Starting from the root node, select child nodes using UCB1 until reaching
   a terminal node or a node that hasn't been fully expanded.
2. Expansion: Create a new child node by taking a random untried move.
3. Simulation: From the new node, perform a uniform-random playout to the end of the game.
4. Backpropagation: Update the visit and win counts of every node on the path.

The search is configured by its iteration budget and exploration constant.
"""

from connect_ai.mcts.node import SearchNode, SearchTree
from connect_ai.mcts.agent import MCTSAgent, MCTSAgentFactory, RandomAgent
from connect_ai.mcts.search import (
    NoLegalMoveError,
    best_move,
    mcts_search,
    select_node,
    expand_node,
    simulate_game,
    backpropagate,
    ucb_score,
    get_action_statistics,
    get_principal_variation,
)
from connect_ai.mcts.config import MCTSConfig
from connect_ai.core.constants import DEFAULT_MCTS_EXPLORATION, DEFAULT_MCTS_ITERATIONS

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    iterations=DEFAULT_MCTS_ITERATIONS,           # Number of MCTS iterations per move
    exploration_weight=DEFAULT_MCTS_EXPLORATION,  # UCB1 exploration parameter (sqrt(2))
)

__all__ = [
    'MCTSAgent',
    'MCTSAgentFactory',
    'RandomAgent',
    'SearchNode',
    'SearchTree',
    'MCTSConfig',
    'NoLegalMoveError',
    'best_move',
    'mcts_search',
    'select_node',
    'expand_node',
    'simulate_game',
    'backpropagate',
    'ucb_score',
    'get_action_statistics',
    'get_principal_variation',
    'DEFAULT_CONFIG'
]
