"""
equimutant - Equivalent-mutant generator for Java sources.

Selects syntax-tree locations in a Java file and applies semantics-preserving
rewrites to them, writing every successful rewrite as a separate mutant file.
Used to check whether static analyzers report stable findings under
irrelevant code transformations.
"""

__version__ = "1.0.0"

from equimutant.schemas import BugReport, Mutant, MutationResult
from equimutant.mutation import MutationEngine, MutantWriter
from equimutant.transform import TransformRegistry

__all__ = [
    "__version__",
    "BugReport",
    "Mutant",
    "MutationResult",
    "MutationEngine",
    "MutantWriter",
    "TransformRegistry",
]
