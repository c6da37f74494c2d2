"""Javaクラス構造抽出のユニットテスト。"""

import pytest

from pattern_police.extractors.java import extract_classes
from pattern_police.models.errors import ParseError

_SOURCE = """
package com.example;

import java.util.List;

@Service
public class OrderService extends BaseService implements Auditable, Serializable {
    private static final long serialVersionUID = 1L;
    @Autowired
    private final OrderRepository repository;
    private List<Order> orders, archived;

    public OrderService(OrderRepository repository) {
        this.repository = repository;
    }

    public List<Order> findAll(int page, String... filters) {
        return orders;
    }

    private static void log(String message) {}

    public static class Builder {
        public Builder withId(long id) { return this; }
    }
}

interface Auditable {
    int VERSION = 1;
    void audit();
    default String name() { return "x"; }
}
"""


class TestExtractClasses:
    def test_declarations_in_source_order(self) -> None:
        classes = extract_classes(_SOURCE)
        assert [c.name for c in classes] == ["OrderService", "Builder", "Auditable"]

    def test_inheritance_and_annotations(self) -> None:
        service = extract_classes(_SOURCE)[0]
        assert service.extends == "BaseService"
        assert service.implements == ["Auditable", "Serializable"]
        assert service.annotations == ["Service"]
        assert "public" in service.modifiers

    def test_fields_one_per_declarator(self) -> None:
        service = extract_classes(_SOURCE)[0]
        names = [f.name for f in service.fields]
        assert names == ["serialVersionUID", "repository", "orders", "archived"]
        uid = service.fields[0]
        assert uid.is_static and uid.is_final and uid.is_private
        assert service.fields[1].type == "OrderRepository"
        assert "Autowired" in service.fields[1].modifiers
        # ジェネリクスは基底型名に縮約される
        assert service.fields[2].type == "List"

    def test_methods_and_constructor(self) -> None:
        service = extract_classes(_SOURCE)[0]
        constructor, find_all, log = service.methods
        assert constructor.is_constructor
        assert constructor.name == "OrderService"
        assert [p.name for p in find_all.parameters] == ["page", "filters"]
        assert find_all.return_type == "List"
        assert find_all.is_public
        assert log.is_private and log.is_static
        assert log.return_type == "void"

    def test_nested_class_has_outer_name(self) -> None:
        builder = extract_classes(_SOURCE)[1]
        assert builder.outer_name == "OrderService"
        assert builder.methods[0].return_type == "Builder"

    def test_interface_members_are_implicit(self) -> None:
        auditable = extract_classes(_SOURCE)[2]
        assert auditable.is_interface
        constant = auditable.fields[0]
        assert constant.is_static and constant.is_final
        audit, name = auditable.methods
        assert audit.is_public and audit.is_abstract
        assert name.is_public and not name.is_abstract

    def test_extraction_is_idempotent(self) -> None:
        first = extract_classes(_SOURCE)
        second = extract_classes(_SOURCE)
        assert first == second

    def test_syntax_error_raises(self) -> None:
        with pytest.raises(ParseError):
            extract_classes("public class Broken { void run( }")
