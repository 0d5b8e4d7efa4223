"""
Configuration for mutant generation.

Defaults come from UserConfig (defaults, ~/.equimutant, .equimutant, env).
"""

from pathlib import Path
from typing import Any, Dict, Optional

from equimutant.strategy.config import get_strategy_config
from equimutant.user_config import UserConfig


def get_mutation_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """
    Get mutation configuration with user overrides applied.

    Resolved at call time so config files and environment changes are seen.
    """
    section = UserConfig(project_root).section("mutation")
    return {
        "default_random_count": get_strategy_config(project_root)["default_random_count"],
        "max_workers": max(1, int(section.get("max_workers", 1))),
        "mutant_extension": section.get("mutant_extension", ".java"),
        "sequence_start": 1,
    }


MUTATION_CONFIG = {
    "default_random_count": 5,
    "max_workers": 1,
    "mutant_extension": ".java",
    "sequence_start": 1,
}

MUTANT_FILE = {
    "header": "// mutant by transform {plugin} from {path}",
    "name": "{base}_mutant_{plugin}_{seq}{ext}",
    "unknown": "unknown",
}
