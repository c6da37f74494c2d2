"""TypeScript/JavaScriptのスタイル・コードスメル検証ロジック。"""

import logging
import re

from tree_sitter import Node

from pattern_police.models.errors import ParseError
from pattern_police.models.rules import NamingStyle, TypeScriptRuleConfig
from pattern_police.models.validation import PARSE_ERROR_RULE, TypeScriptReport, Violation
from pattern_police.parsers.source import (
    find_child_by_type,
    grammar_for_filename,
    node_text,
    parse_source,
    start_column,
    start_line,
    walk,
)

logger = logging.getLogger(__name__)

_STYLE_PATTERNS: dict[NamingStyle, re.Pattern[str]] = {
    "PascalCase": re.compile(r"^[A-Z][a-zA-Z0-9]*$"),
    "camelCase": re.compile(r"^[a-z][a-zA-Z0-9]*$"),
    "UPPER_CASE": re.compile(r"^[^a-z]*$"),
    "snake_case": re.compile(r"^[a-z][a-z0-9_]*$"),
}

_CLASS_TYPES = ("class_declaration", "abstract_class_declaration")
_FUNCTION_DECLARATION_TYPES = ("function_declaration", "generator_function_declaration")
_FUNCTION_TYPES = (
    *_FUNCTION_DECLARATION_TYPES,
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
)
_VARIABLE_DECLARATION_TYPES = ("lexical_declaration", "variable_declaration")
_USAGE_TYPES = ("identifier", "shorthand_property_identifier", "shorthand_property_identifier_pattern")

_MIN_DUPLICATE_LENGTH = 20
_MIN_DUPLICATE_OCCURRENCES = 3
_MIN_CODE_LINES_FOR_COMMENTS = 50
_MIN_COMMENT_RATIO = 0.05


def to_pascal_case(name: str) -> str:
    """先頭を大文字にし、`_x`を`X`に置き換える単純な変換。"""
    converted = name[:1].upper() + name[1:]
    return re.sub(r"_([a-z])", lambda m: m.group(1).upper(), converted)


def to_camel_case(name: str) -> str:
    """先頭を小文字にし、`_x`を`X`に置き換える単純な変換。"""
    converted = name[:1].lower() + name[1:]
    return re.sub(r"_([a-z])", lambda m: m.group(1).upper(), converted)


def to_snake_case(name: str) -> str:
    """大文字の前に`_`を入れて全体を小文字にする単純な変換。"""
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name).lower()


def matches_style(name: str, style: NamingStyle) -> bool:
    return bool(_STYLE_PATTERNS[style].match(name))


def convert_to_style(name: str, style: NamingStyle) -> str:
    """識別子を指定スタイルに変換した候補名を返す。"""
    if style == "PascalCase":
        return to_pascal_case(name)
    if style == "camelCase":
        return to_camel_case(name)
    if style == "UPPER_CASE":
        return to_snake_case(name).upper()
    return to_snake_case(name)


class TypeScriptValidator:
    """ルール設定に基づくTypeScript/JavaScriptコードの検証を行う。"""

    def __init__(self, config: TypeScriptRuleConfig) -> None:
        self._config = config

    @property
    def config(self) -> TypeScriptRuleConfig:
        return self._config

    def validate(self, code: str, filename: str = "unknown.ts") -> TypeScriptReport:
        """コードを検証し、命名規則・SOLID・コードスメルの違反を返す。

        Args:
            code: 検証対象のソースコード。
            filename: ファイル名。拡張子で文法（TSX/TypeScript）を選ぶ。

        Returns:
            違反リストを含むレポート。構文エラー時はparse-error違反1件のみ。
        """
        try:
            root = parse_source(code, grammar_for_filename(filename))
        except ParseError as e:
            logger.debug("TypeScript parse failed for %s: %s", filename, e)
            return TypeScriptReport(
                filename=filename,
                violations=[
                    Violation(
                        rule=PARSE_ERROR_RULE,
                        category="parse",
                        severity="warning",
                        message=f"コードの構文解析に失敗しました: {e}",
                        line=e.line,
                        column=e.column,
                        suggestion="コードの構文を確認してください",
                    )
                ],
            )

        violations: list[Violation] = []
        violations.extend(self._check_naming(root))
        violations.extend(self._check_solid(root))
        violations.extend(self._check_code_smells(root, code))

        logger.debug("Validated %s: %d violations", filename, len(violations))
        return TypeScriptReport(filename=filename, violations=violations)

    # --- 命名規則 ---

    def _check_naming(self, root: Node) -> list[Violation]:
        rules = self._config.rules.naming
        if not rules.enabled:
            return []

        patterns = rules.patterns
        violations: list[Violation] = []
        for node in walk(root):
            if node.type in _CLASS_TYPES:
                name_node = node.child_by_field_name("name")
                if name_node is None:
                    continue
                name = node_text(name_node)
                if not matches_style(name, patterns.classes):
                    violations.append(
                        Violation(
                            rule="naming-class-pascalcase",
                            category="naming",
                            severity=rules.severity,
                            message=f"クラス'{name}'は{patterns.classes}で命名してください",
                            line=start_line(node),
                            column=start_column(node),
                            suggestion=f"'{convert_to_style(name, patterns.classes)}'に変更してください",
                        )
                    )

            elif node.type in _FUNCTION_DECLARATION_TYPES:
                name_node = node.child_by_field_name("name")
                if name_node is None:
                    continue
                name = node_text(name_node)
                if not matches_style(name, patterns.functions):
                    violations.append(
                        Violation(
                            rule="naming-function-camelcase",
                            category="naming",
                            severity=rules.severity,
                            message=f"関数'{name}'は{patterns.functions}で命名してください",
                            line=start_line(node),
                            column=start_column(node),
                            suggestion=f"'{convert_to_style(name, patterns.functions)}'に変更してください",
                        )
                    )

            elif node.type == "method_definition":
                # オブジェクトリテラルのメソッドは対象外
                if node.parent is None or node.parent.type != "class_body":
                    continue
                name_node = node.child_by_field_name("name")
                if name_node is None or name_node.type != "property_identifier" or _is_accessor(node):
                    continue
                name = node_text(name_node)
                if name != "constructor" and not matches_style(name, patterns.functions):
                    violations.append(
                        Violation(
                            rule="naming-method-camelcase",
                            category="naming",
                            severity=rules.severity,
                            message=f"メソッド'{name}'は{patterns.functions}で命名してください",
                            line=start_line(node),
                            column=start_column(node),
                            suggestion=f"'{convert_to_style(name, patterns.functions)}'に変更してください",
                        )
                    )

            elif node.type == "lexical_declaration" and _declaration_kind(node) == "const":
                violations.extend(self._check_const_names(node))

        return violations

    def _check_const_names(self, declaration: Node) -> list[Violation]:
        patterns = self._config.rules.naming.patterns
        violations: list[Violation] = []
        for declarator in declaration.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            if name_node is None or name_node.type != "identifier":
                continue
            name = node_text(name_node)
            if "_" not in name:
                continue
            if matches_style(name, patterns.constants) or matches_style(name, patterns.variables):
                continue
            violations.append(
                Violation(
                    rule="naming-const-convention",
                    category="naming",
                    severity="info",
                    message=f"定数'{name}'は{patterns.variables}または{patterns.constants}で命名してください",
                    line=start_line(declarator),
                    column=start_column(declarator),
                    suggestion=(
                        f"値には'{convert_to_style(name, patterns.variables)}'、"
                        f"グローバル定数には'{convert_to_style(name, patterns.constants)}'を使用してください"
                    ),
                )
            )
        return violations

    # --- SOLID ---

    def _check_solid(self, root: Node) -> list[Violation]:
        rules = self._config.rules.solid
        smells = self._config.rules.code_smells
        if not rules.enabled:
            return []

        violations: list[Violation] = []
        for node in walk(root):
            if node.type in _FUNCTION_TYPES or node.type == "method_definition":
                is_method = node.type == "method_definition"
                kind = "メソッド" if is_method else "関数"
                name = _callable_name(node)

                params = _parameter_count(node)
                if params > rules.max_parameters:
                    violations.append(
                        Violation(
                            rule="solid-too-many-parameters",
                            category="solid",
                            severity=rules.severity,
                            message=f"{kind}'{name}'の引数が{params}個あります（上限: {rules.max_parameters}）",
                            line=start_line(node),
                            column=start_column(node),
                            suggestion=f"オプションオブジェクトにまとめるか、{kind}を分割してください",
                        )
                    )

                length = node.end_point[0] - node.start_point[0]
                if smells.detect_long_methods and length > rules.max_function_lines:
                    violations.append(
                        Violation(
                            rule="solid-method-too-long" if is_method else "solid-function-too-long",
                            category="solid",
                            severity=rules.severity,
                            message=f"{kind}'{name}'が{length}行あります（上限: {rules.max_function_lines}）",
                            line=start_line(node),
                            column=start_column(node),
                            suggestion=f"より小さく目的の明確な{kind}に分割してください",
                        )
                    )

            if node.type in _CLASS_TYPES and smells.detect_god_classes:
                methods = _class_method_count(node)
                if methods > rules.max_class_methods:
                    name_node = node.child_by_field_name("name")
                    name = node_text(name_node) if name_node is not None else "無名クラス"
                    violations.append(
                        Violation(
                            rule="solid-god-class",
                            category="solid",
                            severity=rules.severity,
                            message=f"クラス'{name}'のメソッドが{methods}個あります（上限: {rules.max_class_methods}）",
                            line=start_line(node),
                            column=start_column(node),
                            suggestion="単一責任の原則に従ってクラスを分割してください",
                            evidence=[f"{methods}個のメソッド"],
                        )
                    )

        return violations

    # --- コードスメル ---

    def _check_code_smells(self, root: Node, code: str) -> list[Violation]:
        rules = self._config.rules.code_smells
        if not rules.enabled:
            return []

        violations: list[Violation] = []
        if rules.detect_dead_code:
            violations.extend(self._check_unused_variables(root))
        if rules.detect_duplication:
            violations.extend(self._check_duplication(code))
        violations.extend(self._check_comment_density(code))
        return violations

    def _check_unused_variables(self, root: Node) -> list[Violation]:
        severity = self._config.rules.code_smells.severity

        # 1パス目: 宣言を収集（同名の再宣言は最後の位置で上書き）
        declared: dict[str, tuple[int, int]] = {}
        for node in walk(root):
            if node.type not in _VARIABLE_DECLARATION_TYPES:
                continue
            for declarator in node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                if name_node is not None and name_node.type == "identifier":
                    declared[node_text(name_node)] = (start_line(declarator), start_column(declarator))

        # 2パス目: 宣言位置以外の出現を使用として記録
        used: set[str] = set()
        for node in walk(root):
            if node.type not in _USAGE_TYPES:
                continue
            name = node_text(node)
            if name in declared and not _is_declaration_site(node):
                used.add(name)

        return [
            Violation(
                rule="code-smell-unused-variable",
                category="code_smells",
                severity=severity,
                message=f"変数'{name}'は宣言されていますが使用されていません",
                line=line,
                column=column,
                suggestion="この変数を削除するか、コード内で使用してください",
            )
            for name, (line, column) in declared.items()
            if name not in used
        ]

    @staticmethod
    def _check_duplication(code: str) -> list[Violation]:
        occurrences: dict[str, list[int]] = {}
        for index, line in enumerate(code.split("\n")):
            trimmed = line.strip()
            if len(trimmed) > _MIN_DUPLICATE_LENGTH and not trimmed.startswith(("//", "/*")):
                occurrences.setdefault(trimmed, []).append(index + 1)

        violations: list[Violation] = []
        for lines in occurrences.values():
            if len(lines) < _MIN_DUPLICATE_OCCURRENCES:
                continue
            violations.append(
                Violation(
                    rule="code-smell-duplication",
                    category="code_smells",
                    severity="info",
                    message=f"重複したコードが{len(lines)}箇所にあります（行: {', '.join(str(n) for n in lines)}）",
                    line=lines[0],
                    suggestion="再利用可能な関数に抽出することを検討してください",
                    evidence=[f"line {n}" for n in lines],
                )
            )
        return violations

    @staticmethod
    def _check_comment_density(code: str) -> list[Violation]:
        stripped = [line.strip() for line in code.split("\n")]
        comment_lines = sum(1 for line in stripped if line.startswith(("//", "/*")))
        code_lines = sum(1 for line in stripped if line and not line.startswith("//"))

        if code_lines <= _MIN_CODE_LINES_FOR_COMMENTS or comment_lines / code_lines >= _MIN_COMMENT_RATIO:
            return []

        return [
            Violation(
                rule="code-smell-lack-of-comments",
                category="code_smells",
                severity="info",
                message=f"コメントが少なすぎます（コード{code_lines}行に対してコメント{comment_lines}行）",
                suggestion="複雑なロジックにはコメントを追加してください",
            )
        ]


def _declaration_kind(node: Node) -> str | None:
    keyword = find_child_by_type(node, "const", "let", "var")
    return keyword.type if keyword is not None else None


def _is_accessor(method: Node) -> bool:
    return find_child_by_type(method, "get", "set") is not None


def _is_declaration_site(node: Node) -> bool:
    parent = node.parent
    return parent is not None and parent.type == "variable_declarator" and parent.child_by_field_name("name") == node


def _callable_name(node: Node) -> str:
    """関数・メソッドの表示名。無名関数は代入先の変数名を使う。"""
    name_node = node.child_by_field_name("name")
    if name_node is not None:
        return node_text(name_node)

    parent = node.parent
    if parent is not None and parent.type == "variable_declarator":
        target = parent.child_by_field_name("name")
        if target is not None and target.type == "identifier":
            return node_text(target)
    return "無名関数"


def _parameter_count(node: Node) -> int:
    params = node.child_by_field_name("parameters")
    if params is not None:
        return sum(1 for child in params.named_children if child.type != "comment")
    # 括弧なしのアロー関数（x => ...）
    return 1 if node.child_by_field_name("parameter") is not None else 0


def _class_method_count(node: Node) -> int:
    body = node.child_by_field_name("body")
    if body is None:
        return 0

    count = 0
    for member in body.named_children:
        if member.type != "method_definition" or _is_accessor(member):
            continue
        name_node = member.child_by_field_name("name")
        if name_node is not None and node_text(name_node) == "constructor":
            continue
        count += 1
    return count
