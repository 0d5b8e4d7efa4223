"""
Candidate selection strategies.

Each strategy maps a SyntaxIndex to candidate nodes and is independent of
the transforms that will later be tried on them.
"""

from .base import LocationStrategy
from .random_strategy import RandomStrategy
from .target_strategy import TargetStrategy, validate_target_lines
from .guided_strategy import GuidedStrategy, validate_bug_report
from .config import get_strategy_config

__all__ = [
    "LocationStrategy",
    "RandomStrategy",
    "TargetStrategy",
    "GuidedStrategy",
    "validate_target_lines",
    "validate_bug_report",
    "get_strategy_config",
]
