"""
Tree-sitter Parser Module

Provides core Tree-sitter parsing functionality for TypeScript code analysis.
"""

import logging
from pathlib import Path
from typing import Any, Tuple

import tree_sitter_typescript
from tree_sitter import Language, Parser

logger = logging.getLogger(__name__)

# Type aliases
TreeSitterNode = Any  # tree_sitter.Node


class ParserInitializationError(Exception):
    """Raised when Tree-sitter parser initialization fails."""

    pass


class ParseError(Exception):
    """Raised when parsing fails."""

    pass


def is_tsx_file(filename: str) -> bool:
    return filename.endswith(".tsx")


def parse_typescript_source(
    source_code: str,
    filename: str = "<unknown>",
) -> Any:
    """
    Parse TypeScript source code using Tree-sitter.

    Files ending in ``.tsx`` are parsed with the TSX grammar.

    Args:
        source_code: TypeScript source code to parse
        filename: Filename for grammar selection and error reporting

    Returns:
        Tree-sitter root node

    Raises:
        ParseError: If parsing fails
    """
    try:
        parser = get_typescript_parser(tsx=is_tsx_file(filename))
        tree = parser.parse(bytes(source_code, "utf-8"))
        return tree.root_node
    except ParserInitializationError:
        raise
    except Exception as e:
        logger.error(f"Tree-sitter parsing failed: {e}")
        raise ParseError(f"Failed to parse {filename}: {e}") from e


def parse_file(file_path: str | Path) -> Tuple[TreeSitterNode, str]:
    """
    Parse a TypeScript file.

    Args:
        file_path: Path to the TypeScript file

    Returns:
        Tuple of Tree-sitter root node and the source text

    Raises:
        ParseError: If reading or parsing fails
    """
    file_path = Path(file_path)

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            source_code = f.read()
    except UnicodeDecodeError as e:
        raise ParseError(f"Encoding error reading {file_path}: {e}") from e
    except IOError as e:
        raise ParseError(f"Error reading {file_path}: {e}") from e

    return parse_typescript_source(source_code, filename=str(file_path)), source_code


def get_typescript_parser(tsx: bool = False) -> Parser:
    """
    Initialize and return a Tree-sitter parser for TypeScript.

    Args:
        tsx: Use the TSX grammar instead of plain TypeScript

    Returns:
        Parser: Configured Tree-sitter parser

    Raises:
        ParserInitializationError: If parser initialization fails

    Examples:
        >>> parser = get_typescript_parser()
        >>> tree = parser.parse(b"class A {}")
    """
    try:
        if tsx:
            ts_language = Language(tree_sitter_typescript.language_tsx())
        else:
            ts_language = Language(tree_sitter_typescript.language_typescript())

        parser = Parser()
        parser.language = ts_language

        logger.debug("Tree-sitter TypeScript parser initialized successfully")
        return parser
    except Exception as e:
        logger.error(f"Failed to initialize Tree-sitter parser: {e}")
        raise ParserInitializationError(f"Cannot initialize parser: {e}") from e


def get_node_text(node: TreeSitterNode) -> str:
    """
    Get the source text of a Tree-sitter node.

    Args:
        node: Tree-sitter node

    Returns:
        str: Text content of the node, empty for a missing node
    """
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")
