"""tree-sitterによるソースコード構文解析と構文木ヘルパー。"""

import logging
from collections.abc import Iterator
from pathlib import PurePath

import tree_sitter_java
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from pattern_police.models.errors import ParseError, UnsupportedLanguageError

logger = logging.getLogger(__name__)

_DEFAULT_ENCODING = "utf-8"

# tree-sitterは0始まり、報告する行番号は1始まり
LINE_INDEX_OFFSET = 1

_LANGUAGE_REGISTRY: dict[str, Language] = {
    "java": Language(tree_sitter_java.language()),
    "typescript": Language(tree_sitter_typescript.language_typescript()),
    "tsx": Language(tree_sitter_typescript.language_tsx()),
}

_JSX_EXTENSIONS = (".tsx", ".jsx")


def grammar_for_filename(filename: str) -> str:
    """ファイル名からTypeScript系の文法名を決める。

    JSXを含みうる拡張子はtsx文法、それ以外はtypescript文法で解析する。
    JavaScriptはTypeScript文法の部分集合として扱う。
    """
    suffix = PurePath(filename).suffix.lower()
    return "tsx" if suffix in _JSX_EXTENSIONS else "typescript"


def parse_source(code: str, grammar: str) -> Node:
    """ソースコードを解析して構文木のルートノードを返す。

    Args:
        code: 解析対象のソースコード
        grammar: 文法名（java / typescript / tsx）

    Returns:
        構文木のルートノード

    Raises:
        UnsupportedLanguageError: 文法名が未登録の場合
        ParseError: 構文エラーを含む場合
    """
    language = _LANGUAGE_REGISTRY.get(grammar)
    if language is None:
        raise UnsupportedLanguageError(grammar)

    parser = Parser()
    parser.language = language
    tree = parser.parse(bytes(code, _DEFAULT_ENCODING))
    root = tree.root_node

    if root.has_error:
        raise _syntax_error(root)
    return root


def _syntax_error(root: Node) -> ParseError:
    """構文木中で最初に見つかったエラーノードからParseErrorを組み立てる。"""
    for node in walk(root):
        if node.is_missing:
            line, column = start_line(node), start_column(node)
            return ParseError(f"Missing '{node.type}' at line {line}, column {column}", line, column)
        if node.is_error:
            line, column = start_line(node), start_column(node)
            snippet = node_text(node).strip().splitlines()
            near = f" near '{snippet[0][:40]}'" if snippet else ""
            return ParseError(f"Syntax error at line {line}, column {column}{near}", line, column)

    logger.debug("Syntax tree flagged an error without an error node")
    return ParseError("Syntax error")


def walk(node: Node) -> Iterator[Node]:
    """ノードとその子孫を行きがけ順（ソース出現順）に列挙する。"""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def node_text(node: Node) -> str:
    """ノードに対応するソーステキストを返す。"""
    if node.text is None:
        return ""
    return node.text.decode(_DEFAULT_ENCODING)


def start_line(node: Node) -> int:
    return node.start_point[0] + LINE_INDEX_OFFSET


def start_column(node: Node) -> int:
    return node.start_point[1] + LINE_INDEX_OFFSET


def find_children_by_type(node: Node, *child_types: str) -> list[Node]:
    """指定した型の直接の子ノードを全て返す。"""
    return [child for child in node.children if child.type in child_types]


def find_child_by_type(node: Node, *child_types: str) -> Node | None:
    """指定した型の最初の直接の子ノードを返す。"""
    for child in node.children:
        if child.type in child_types:
            return child
    return None
