"""
Monte Carlo Tree Search nodes and tree for Connect AI.

This module defines the SearchNode class, which holds one position together
with its search statistics, and the SearchTree class, which owns every node
of one search. Nodes live in an arena (a flat list) and refer to their
parent and children by index, so the whole tree is released in one step
once the move decision has been read out.
"""
from __future__ import annotations
from typing import Iterator, List, Optional

from connect_ai.core.constants import Cell, opponent
from connect_ai.core.game import GameState, GameResult


class SearchNode:
    """
    A node in the Monte Carlo Tree Search.

    Each node represents a game state and tracks statistics about
    simulations that pass through it: visit count and win count. The win
    count credits the player who moved into this node, not the player
    about to move here.
    """

    __slots__ = (
        "index", "state", "player", "move", "parent", "children",
        "untried_moves", "visits", "wins", "is_terminal", "terminal_result",
    )

    def __init__(
        self,
        index: int,
        state: GameState,
        player: Cell,
        move: Optional[int] = None,
        parent: Optional[int] = None,
    ):
        """
        Initialize a search node.

        Terminal status and the untried moves are computed here, once;
        they are never recomputed afterwards.

        Args:
            index: Position of the node in its tree's arena
            state: The game state this node represents
            player: The player to move at this state
            move: The column that led to this state (None for root)
            parent: Arena index of the parent node (None for root)
        """
        self.index = index
        self.state = state
        self.player = player
        self.move = move
        self.parent = parent

        # Child arena indices in expansion order
        self.children: List[int] = []

        # Node statistics
        self.visits = 0
        self.wins = 0

        self.terminal_result: GameResult = state.result()
        self.is_terminal = self.terminal_result.is_over
        self.untried_moves: List[int] = [] if self.is_terminal else state.legal_moves()

    def has_untried_moves(self) -> bool:
        return bool(self.untried_moves)

    def is_fully_expanded(self) -> bool:
        return not self.untried_moves

    def is_root(self) -> bool:
        return self.parent is None

    @property
    def win_rate(self) -> float:
        """Fraction of visits credited as wins (0.0 when unvisited)."""
        if self.visits == 0:
            return 0.0
        return self.wins / self.visits

    @property
    def mover(self) -> Cell:
        """The player whose move produced this node."""
        return opponent(self.player)

    def __str__(self) -> str:
        return (f"SearchNode(move={self.move}, "
                f"player={self.player.name}, "
                f"visits={self.visits}, "
                f"wins={self.wins}, "
                f"children={len(self.children)}, "
                f"untried={len(self.untried_moves)})")


class SearchTree:
    """
    Owner of all nodes of one search.

    The tree is rooted at the live game position. Nodes are only created
    through create_node and only released together by release().
    """

    def __init__(self, root_state: GameState, root_player: Cell):
        """
        Create a tree holding only the root node.

        Args:
            root_state: The position to search from
            root_player: The player to move at that position
        """
        self._nodes: List[SearchNode] = []
        self.create_node(None, None, root_state, root_player)

    def create_node(
        self,
        parent: Optional[SearchNode],
        move: Optional[int],
        state: GameState,
        player: Cell,
    ) -> SearchNode:
        """
        Add a node to the tree.

        The node is registered in the arena; linking it into its parent's
        children is left to the caller (the expansion step).

        Args:
            parent: The parent node (None for root)
            move: The column that led to this state (None for root)
            state: The game state of the new node
            player: The player to move at that state

        Returns:
            The new node
        """
        if parent is None and self._nodes:
            raise ValueError("Tree already has a root")

        node = SearchNode(
            index=len(self._nodes),
            state=state,
            player=player,
            move=move,
            parent=None if parent is None else parent.index,
        )
        self._nodes.append(node)
        return node

    @property
    def root(self) -> SearchNode:
        if not self._nodes:
            raise ValueError("Tree has been released")
        return self._nodes[0]

    def node(self, index: int) -> SearchNode:
        return self._nodes[index]

    def parent_of(self, node: SearchNode) -> Optional[SearchNode]:
        if node.parent is None:
            return None
        return self._nodes[node.parent]

    def children_of(self, node: SearchNode) -> List[SearchNode]:
        return [self._nodes[i] for i in node.children]

    def path_to_root(self, node: SearchNode) -> Iterator[SearchNode]:
        """
        Walk from a node up to the root, inclusive.

        Args:
            node: Starting node

        Yields:
            The node, its parent, and so on up to the root
        """
        current: Optional[SearchNode] = node
        while current is not None:
            yield current
            current = self.parent_of(current)

    def depth_of(self, node: SearchNode) -> int:
        return sum(1 for _ in self.path_to_root(node)) - 1

    def max_depth(self) -> int:
        """Depth of the deepest node (0 for a lone root)."""
        depths = [0] * len(self._nodes)
        # Parents always precede their children in the arena
        for node in self._nodes[1:]:
            depths[node.index] = depths[node.parent] + 1
        return max(depths, default=0)

    def release(self) -> None:
        """Drop every node of the tree at once."""
        self._nodes.clear()

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[SearchNode]:
        return iter(self._nodes)
