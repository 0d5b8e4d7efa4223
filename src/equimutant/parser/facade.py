from pathlib import Path
from typing import List, Optional, Union

from equimutant.exceptions import ConfigError, InputFileError, ParserError
from equimutant.logging_config import logger
from .config import SKIPPED_NODE_TYPES, validate_extension
from .language_manager import get_parser
from .nodes import SyntaxNode, SyntaxTree, freeze_fields, kind_for


def parse_source(text: str, file_path: Optional[str] = None, language: str = "java") -> SyntaxTree:
    """
    Parse source text into a SyntaxTree.

    Args:
        text: Full source text
        file_path: Optional path used for messages and mutant naming
        language: Grammar to parse with

    Returns:
        A fresh SyntaxTree with no pending edits

    Raises:
        ParserError: If tree-sitter reports syntax errors
    """
    source_bytes = text.encode("utf-8")
    ts_tree = get_parser(language).parse(source_bytes)
    ts_root = ts_tree.root_node

    if ts_root.has_error:
        line = _first_error_line(ts_root)
        raise ParserError(file_path or "<string>", f"syntax error near line {line}")

    root = _convert(ts_root, source_bytes)
    return SyntaxTree(text, root, file_path=file_path, language=language, source_bytes=source_bytes)


def parse_file(file_path: Union[str, Path]) -> SyntaxTree:
    """
    Read and parse a source file.

    Raises:
        InputFileError: If the file is missing or unreadable
        ParserError: If the file type is unsupported or the content does not parse
    """
    path = Path(file_path)
    try:
        language = validate_extension(path.suffix)
    except ConfigError as e:
        raise ParserError(str(file_path), str(e)) from e

    if not path.is_file():
        raise InputFileError(str(file_path), "file does not exist")

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputFileError(str(file_path), str(e)) from e

    logger.debug(f"Parsing file: {file_path} with language {language}")
    return parse_source(content, file_path=str(file_path), language=language)


def render(tree: SyntaxTree) -> str:
    """Print a tree back to text, applying its pending edits."""
    return tree.apply_edits()


def reparse(tree: SyntaxTree) -> SyntaxTree:
    """Build an independent tree from the same original text (edits are not carried over)."""
    return parse_source(tree.source, file_path=tree.file_path, language=tree.language)


def _first_error_line(ts_node) -> int:
    stack = [ts_node]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return ts_node.start_point[0] + 1


def _char_column(source: bytes, start_byte: int, byte_col: int) -> int:
    """1-based character column; tree-sitter reports byte columns."""
    if byte_col == 0:
        return 1
    return len(source[start_byte - byte_col:start_byte].decode("utf-8", errors="replace")) + 1


def _convert(ts_root, source: bytes) -> SyntaxNode:
    """
    Convert a tree-sitter tree into SyntaxNodes.

    Iterative post-order build so deeply nested expressions do not hit the
    recursion limit.
    """
    # Each frame: [ts_node, ts_children, parent_ts_type, path, built_children, fields, tokens, next_index]
    stack: List[list] = [[ts_root, ts_root.children, None, (), [], {}, [], 0]]
    pending_field: List[Optional[str]] = [None]
    result: Optional[SyntaxNode] = None

    while stack:
        frame = stack[-1]
        ts_node, children, parent_type, path, built, fields, tokens, index = frame

        if index < len(children):
            frame[7] = index + 1
            child = children[index]
            if not child.is_named:
                tokens.append(child.type)
                continue
            if child.type in SKIPPED_NODE_TYPES:
                continue
            pending_field.append(ts_node.field_name_for_child(index))
            stack.append([child, child.children, ts_node.type, path + (len(built),), [], {}, [], 0])
            continue

        stack.pop()
        start_row, start_col = ts_node.start_point
        node = SyntaxNode(
            kind=kind_for(ts_node.type, parent_type),
            ts_type=ts_node.type,
            start_byte=ts_node.start_byte,
            end_byte=ts_node.end_byte,
            line=start_row + 1,
            column=_char_column(source, ts_node.start_byte, start_col),
            end_line=ts_node.end_point[0] + 1,
            path=path,
            children=tuple(built),
            fields=freeze_fields(fields),
            tokens=tuple(tokens),
            source=source,
        )
        for child in built:
            object.__setattr__(child, "parent", node)

        field_name = pending_field.pop()
        if stack:
            parent_built, parent_fields = stack[-1][4], stack[-1][5]
            parent_built.append(node)
            if field_name:
                parent_fields.setdefault(field_name, []).append(node)
        else:
            result = node

    return result
