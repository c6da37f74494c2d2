"""オブジェクトリテラル簡易解析のユニットテスト。"""

from pattern_police.parsers.literal import find_closing, object_entries, string_items


class TestFindClosing:
    def test_skips_brackets_in_strings_and_comments(self) -> None:
        text = "{ a: '}', /* } */ b: [1, 2] // }\n}"
        assert find_closing(text, 0) == len(text) - 1

    def test_angle_brackets_ignore_arrow(self) -> None:
        text = "<{ onClick: (e: Event) => void }>()"
        assert find_closing(text, 0) == text.index(">(")

    def test_unbalanced_returns_minus_one(self) -> None:
        assert find_closing("{ a: [1, 2 }", 0) == -1


class TestObjectEntries:
    def test_top_level_keys_in_order(self) -> None:
        text = "{ name: 'x', data() { return { inner: 1 } }, async load() {}, 'quoted-key': 2, ...spread }"
        assert [e.key for e in object_entries(text, 0)] == ["name", "data", "load", "quoted-key"]

    def test_value_after_colon(self) -> None:
        entries = object_entries("{ methods: { save() {} } }", 0)
        assert entries[0].value == "{ save() {} }"

    def test_method_shorthand_keeps_whole_entry(self) -> None:
        entries = object_entries("{ data() { return {} } }", 0)
        assert entries[0].value.startswith("data()")

    def test_type_literal_separators(self) -> None:
        text = "{\n  id: number\n  title?: string; tags: Array<string>\n}"
        keys = [e.key for e in object_entries(text, 0, type_literal=True)]
        assert keys == ["id", "title", "tags"]


class TestStringItems:
    def test_collects_quoted_strings(self) -> None:
        assert string_items("['title', \"count\"]") == ["title", "count"]
