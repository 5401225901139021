"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the configuration parameters for the MCTS algorithm:
the iteration budget, the UCB1 exploration constant and the random seed.
"""
from dataclasses import dataclass, fields
from typing import ClassVar, Dict, Optional

from connect_ai.core.constants import DEFAULT_MCTS_ITERATIONS, DEFAULT_MCTS_EXPLORATION


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    This class defines all tunable parameters for the MCTS algorithm,
    with validation and sensible defaults.
    """
    # Search parameters
    iterations: int = DEFAULT_MCTS_ITERATIONS
    """Number of MCTS iterations to perform per move decision"""

    exploration_weight: float = DEFAULT_MCTS_EXPLORATION
    """UCB1 exploration parameter (default is sqrt(2))"""

    # Reproducibility
    seed: Optional[int] = None
    """Seed for the search's random source (None = seeded from the OS)"""

    # Readout
    take_immediate_wins: bool = True
    """Whether a root move that wins on the spot overrides the visit-count choice"""

    # Output
    show_progress: bool = False
    """Whether to display a progress bar over the iteration loop"""

    # Constants
    INFINITE_VALUE: ClassVar[float] = float('inf')
    """Score given to unvisited children during selection"""

    ALIASES: ClassVar[Dict[str, str]] = {"exploration_constant": "exploration_weight"}
    """Alternative option names accepted by from_dict"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if isinstance(self.iterations, bool) or not isinstance(self.iterations, int):
            raise ValueError("iterations must be an integer")

        if self.iterations <= 0:
            raise ValueError("iterations must be positive")

        if self.exploration_weight <= 0:
            raise ValueError("exploration_weight must be positive")

        if self.seed is not None and not isinstance(self.seed, int):
            raise ValueError("seed must be an integer or None")

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed (fewer iterations).

        Returns:
            Fast MCTSConfig object
        """
        return cls(iterations=1000)

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for deep search.

        Returns:
            Deep MCTSConfig object
        """
        return cls(iterations=50000, exploration_weight=1.2)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters. Alternative
                names in ALIASES map onto their field; unknown keys are ignored.

        Returns:
            MCTSConfig object

        Raises:
            ValueError: If an option is given under both of its names
        """
        names = {f.name for f in fields(cls)}
        valid_params = {}
        for key, value in config_dict.items():
            name = cls.ALIASES.get(key, key)
            if name not in names:
                continue
            if name in valid_params:
                raise ValueError(f"{name} given more than once (as {key!r})")
            valid_params[name] = value
        return cls(**valid_params)

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = [f"{name}={value}" for name, value in self.to_dict().items()]
        return f"MCTSConfig({', '.join(params)})"
