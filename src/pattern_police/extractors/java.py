"""Javaの構文木からクラス構造モデルを抽出する。"""

from tree_sitter import Node

from pattern_police.models.java import ClassModel, FieldModel, MethodModel, ParameterModel
from pattern_police.parsers.source import (
    find_child_by_type,
    find_children_by_type,
    node_text,
    parse_source,
    start_line,
    walk,
)

_DECLARATION_TYPES = ("class_declaration", "interface_declaration")

_PRIMITIVE_TYPES = ("integral_type", "floating_point_type", "boolean_type")

_ANNOTATION_TYPES = ("marker_annotation", "annotation")


def extract_classes(code: str) -> list[ClassModel]:
    """Javaソースを解析し、全てのクラス・インターフェース宣言を返す。

    ネストした宣言も含め、ソース上の出現順（行きがけ順）に平坦化する。

    Raises:
        ParseError: 構文エラーを含む場合
    """
    root = parse_source(code, "java")
    return [_class_model(node) for node in walk(root) if node.type in _DECLARATION_TYPES]


def _class_model(node: Node) -> ClassModel:
    name = _field_text(node, "name")
    is_interface = node.type == "interface_declaration"
    modifiers, annotations = _modifiers(node)

    model = ClassModel(
        name=name,
        is_interface=is_interface,
        is_abstract=not is_interface and "abstract" in modifiers,
        annotations=annotations,
        modifiers=modifiers,
        outer_name=_outer_name(node),
        line=start_line(node),
    )

    if is_interface:
        extends = find_child_by_type(node, "extends_interfaces")
        if extends is not None:
            names = _type_list(extends)
            model.extends = names[0] if names else None
    else:
        superclass = node.child_by_field_name("superclass")
        if superclass is not None:
            type_nodes = [c for c in superclass.named_children if c.type != "annotation"]
            model.extends = _type_name(type_nodes[0]) if type_nodes else None
        interfaces = node.child_by_field_name("interfaces")
        if interfaces is not None:
            model.implements = _type_list(interfaces)

    body = node.child_by_field_name("body")
    if body is not None:
        for member in body.named_children:
            if member.type in ("field_declaration", "constant_declaration"):
                model.fields.extend(_fields(member, implicit_constant=is_interface))
            elif member.type == "method_declaration":
                model.methods.append(_method(member, in_interface=is_interface))
            elif member.type == "constructor_declaration":
                model.methods.append(_constructor(member, name))

    return model


def _outer_name(node: Node) -> str | None:
    parent = node.parent
    while parent is not None:
        if parent.type in _DECLARATION_TYPES:
            return _field_text(parent, "name")
        parent = parent.parent
    return None


def _method(node: Node, *, in_interface: bool) -> MethodModel:
    modifiers, annotations = _modifiers(node)
    type_node = node.child_by_field_name("type")
    has_body = node.child_by_field_name("body") is not None

    if in_interface:
        # インターフェースのメソッドは暗黙的にpublic、本体がなければabstract
        is_static = "static" in modifiers
        is_abstract = not has_body and not is_static
        is_private = "private" in modifiers
        is_public = not is_private
    else:
        is_static = "static" in modifiers
        is_abstract = "abstract" in modifiers
        is_private = "private" in modifiers
        is_public = "public" in modifiers

    return MethodModel(
        name=_field_text(node, "name"),
        is_abstract=is_abstract,
        is_static=is_static,
        is_private=is_private,
        is_public=is_public,
        return_type=_type_name(type_node) if type_node is not None else "void",
        parameters=_parameters(node),
        annotations=annotations,
        line=start_line(node),
    )


def _constructor(node: Node, class_name: str) -> MethodModel:
    modifiers, annotations = _modifiers(node)
    return MethodModel(
        name=class_name,
        is_private="private" in modifiers,
        is_public="public" in modifiers,
        return_type=None,
        parameters=_parameters(node),
        annotations=annotations,
        line=start_line(node),
    )


def _fields(node: Node, *, implicit_constant: bool) -> list[FieldModel]:
    modifiers, annotations = _modifiers(node)
    type_node = node.child_by_field_name("type")
    type_name = _type_name(type_node) if type_node is not None else "unknown"

    is_static = implicit_constant or "static" in modifiers
    is_final = implicit_constant or "final" in modifiers

    fields: list[FieldModel] = []
    for declarator in node.children_by_field_name("declarator"):
        fields.append(
            FieldModel(
                name=_field_text(declarator, "name"),
                type=type_name,
                is_static=is_static,
                is_final=is_final,
                is_private="private" in modifiers,
                modifiers=modifiers + annotations,
            )
        )
    return fields


def _parameters(node: Node) -> list[ParameterModel]:
    params_node = node.child_by_field_name("parameters")
    if params_node is None:
        return []

    params: list[ParameterModel] = []
    for param in params_node.named_children:
        if param.type == "formal_parameter":
            type_node = param.child_by_field_name("type")
            params.append(
                ParameterModel(
                    name=_field_text(param, "name"),
                    type=_type_name(type_node) if type_node is not None else "unknown",
                )
            )
        elif param.type == "spread_parameter":
            type_nodes = [c for c in param.named_children if c.type not in ("modifiers", "variable_declarator")]
            declarator = find_child_by_type(param, "variable_declarator")
            params.append(
                ParameterModel(
                    name=_field_text(declarator, "name") if declarator is not None else "unknown",
                    type=_type_name(type_nodes[0]) if type_nodes else "unknown",
                )
            )
    return params


def _modifiers(node: Node) -> tuple[list[str], list[str]]:
    """宣言の修飾子キーワードとアノテーション名を返す。

    クラス・メソッド・フィールド・コンストラクタで同じ形に揃える。
    """
    modifiers_node = find_child_by_type(node, "modifiers")
    if modifiers_node is None:
        return [], []

    keywords: list[str] = []
    annotations: list[str] = []
    for child in modifiers_node.children:
        if child.type in _ANNOTATION_TYPES:
            annotations.append(_simple_name(_field_text(child, "name")))
        elif not child.is_named:
            keywords.append(child.type)
    return keywords, annotations


def _type_list(node: Node) -> list[str]:
    type_list = find_child_by_type(node, "type_list")
    if type_list is None:
        return []
    return [_type_name(t) for t in type_list.named_children]


def _type_name(node: Node) -> str:
    """型ノードを単純名に縮約する。

    修飾名・ジェネリクスは末尾の識別子・基底型に、配列は要素型に、
    プリミティブ型はキーワードそのものに縮約する。
    """
    if node.type == "void_type":
        return "void"
    if node.type in _PRIMITIVE_TYPES:
        return node_text(node)
    if node.type == "type_identifier":
        return node_text(node)
    if node.type == "scoped_type_identifier":
        identifiers = find_children_by_type(node, "type_identifier")
        return node_text(identifiers[-1]) if identifiers else _simple_name(node_text(node))
    if node.type == "generic_type":
        base = find_child_by_type(node, "type_identifier", "scoped_type_identifier")
        return _type_name(base) if base is not None else "unknown"
    if node.type == "array_type":
        element = node.child_by_field_name("element")
        return _type_name(element) if element is not None else "unknown"
    if node.type == "annotated_type":
        inner = [c for c in node.named_children if c.type not in _ANNOTATION_TYPES]
        return _type_name(inner[-1]) if inner else "unknown"
    return _simple_name(node_text(node))


def _field_text(node: Node, field: str) -> str:
    child = node.child_by_field_name(field)
    return node_text(child) if child is not None else "Unknown"


def _simple_name(name: str) -> str:
    return name.rsplit(".", 1)[-1]
