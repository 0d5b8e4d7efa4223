"""
Configuration for candidate selection.

The random sample size shares the `mutation.default_random_count` setting
(and EQUIMUTANT_DEFAULT_RANDOM_COUNT) with the mutation engine.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from equimutant.user_config import UserConfig


def get_strategy_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """Resolved at call time so config files and environment changes are seen."""
    section = UserConfig(project_root).section("mutation")
    return {
        # Used when a random request asks for zero or fewer nodes
        "default_random_count": int(section.get("default_random_count", 5)),
    }
