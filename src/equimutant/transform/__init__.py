"""
Rewrite transforms and their registry.

Each transform is a check/apply pair; the registry maps transform names to
instances and is passed explicitly to the MutationEngine.
"""

from typing import List

from .base import Transform
from .registry import TransformRegistry
from .expressions import (
    AddBrackets,
    AddRedundantLiteral,
    CompoundExpression1,
    CompoundExpression2,
    CompoundExpression3,
)
from .wrappers import (
    CFWrapperWithDoWhile,
    CFWrapperWithForTrue1,
    CFWrapperWithIfFalse,
    CFWrapperWithIfTrue,
    CFWrapperWithWhileTrue,
)
from .declarations import AddLocalAssignment, AddStaticModifier
from .formatting import BlockFormatter, detect_indent_unit


def default_transforms() -> List[Transform]:
    """Fresh instances of the built-in transforms, in registration order."""
    return [
        AddBrackets(),
        AddLocalAssignment(),
        AddRedundantLiteral(),
        AddStaticModifier(),
        CFWrapperWithDoWhile(),
        CFWrapperWithForTrue1(),
        CFWrapperWithIfFalse(),
        CFWrapperWithIfTrue(),
        CFWrapperWithWhileTrue(),
        CompoundExpression1(),
        CompoundExpression2(),
        CompoundExpression3(),
    ]


__all__ = [
    "Transform",
    "TransformRegistry",
    "default_transforms",
    "AddBrackets",
    "AddLocalAssignment",
    "AddRedundantLiteral",
    "AddStaticModifier",
    "CFWrapperWithDoWhile",
    "CFWrapperWithForTrue1",
    "CFWrapperWithIfFalse",
    "CFWrapperWithIfTrue",
    "CFWrapperWithWhileTrue",
    "CompoundExpression1",
    "CompoundExpression2",
    "CompoundExpression3",
    "BlockFormatter",
    "detect_indent_unit",
]
