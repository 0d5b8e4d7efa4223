"""
Mutant generation: request validation, the candidate x transform engine and
the mutant file writer.
"""

from .engine import MutationEngine
from .writer import MutantWriter, SequenceCounter
from .validation import (
    resolve_transforms,
    validate_count,
    validate_paths,
)
from .config import (
    MUTATION_CONFIG,
    MUTANT_FILE,
    get_mutation_config,
)

__all__ = [
    # Engine
    "MutationEngine",

    # Components
    "MutantWriter",
    "SequenceCounter",
    "resolve_transforms",
    "validate_count",
    "validate_paths",

    # Configuration
    "MUTATION_CONFIG",
    "MUTANT_FILE",
    "get_mutation_config",
]
