"""
Parser package: tree-sitter-java front end and the edit-list printer.
"""

from .facade import parse_source, parse_file, render, reparse
from .language_manager import get_parser
from .nodes import NodeKind, SyntaxNode, SyntaxTree, TextEdit
from .config import SUPPORTED_LANGUAGES

__all__ = [
    "parse_source",
    "parse_file",
    "render",
    "reparse",
    "get_parser",
    "NodeKind",
    "SyntaxNode",
    "SyntaxTree",
    "TextEdit",
    "SUPPORTED_LANGUAGES",
]
