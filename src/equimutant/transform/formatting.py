"""
Indentation helpers for transforms that wrap statements in new blocks.
"""

from typing import Dict, List, Optional

from equimutant.parser.nodes import SyntaxNode, SyntaxTree
from .config import INDENT_DETECTION


def get_indent(line: str) -> str:
    """Leading whitespace of a line."""
    return line[:len(line) - len(line.lstrip())]


def detect_indent_unit(source: str) -> str:
    """
    Detect the indentation unit of a source text.

    Returns:
        "\\t", two spaces or four spaces
    """
    sample_lines = source.splitlines()[:INDENT_DETECTION["max_sample_lines"]]

    tab_count = 0
    space_widths: Dict[int, int] = {}
    for line in sample_lines:
        if not line.strip():
            continue
        indent = get_indent(line)
        if "\t" in indent:
            tab_count += 1
        elif indent:
            space_widths[len(indent)] = space_widths.get(len(indent), 0) + 1

    space_count = sum(space_widths.values())
    if tab_count > space_count:
        return "\t"
    if space_widths:
        smallest = min(space_widths)
        if smallest >= 4:
            return "    "
        if smallest >= 2:
            return "  "
    return INDENT_DETECTION["default_indent"]


class BlockFormatter:
    """
    Builds replacement text that keeps the surrounding file's indentation.

    One formatter serves one tree; the indent unit is detected once.
    """

    def __init__(self, tree: SyntaxTree):
        self.tree = tree
        self.unit = detect_indent_unit(tree.source)

    def indent_of(self, node: SyntaxNode) -> str:
        """Indentation of the line on which `node` starts."""
        return get_indent(self.tree.line_text(node.line))

    def shift(self, text: str, prefix: Optional[str] = None) -> str:
        """Indent every line after the first by one more unit (blank lines stay blank)."""
        prefix = self.unit if prefix is None else prefix
        lines = text.split("\n")
        shifted = [lines[0]]
        for line in lines[1:]:
            shifted.append(prefix + line if line.strip() else line)
        return "\n".join(shifted)

    def block(self, header: str, node: SyntaxNode, body: List[str], footer: str = "}") -> str:
        """
        Render `header {` + body lines + footer at the indentation of `node`.

        The first body line is expected to be the (possibly multi-line) text of
        an existing statement; it is shifted as a whole.
        """
        indent = self.indent_of(node)
        inner = indent + self.unit
        lines = [f"{header} {{"]
        for item in body:
            lines.append(inner + self.shift(item))
        lines.append(indent + footer)
        return "\n".join(lines)

    def statement_break(self, node: SyntaxNode) -> str:
        """Separator that starts a new statement line aligned with `node`."""
        return "\n" + self.indent_of(node)
