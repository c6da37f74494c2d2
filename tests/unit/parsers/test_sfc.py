"""SFCブロック分割のユニットテスト。"""

import pytest

from pattern_police.models.errors import ParseError
from pattern_police.parsers.sfc import block_line, parse_sfc

_COMPONENT = """<template>
  <div>
    <template v-if="ok"><span>yes</span></template>
  </div>
</template>

<script setup lang="ts">
const props = defineProps<{ id: number }>()
</script>

<!-- <script>コメント内のタグは無視される</script> -->
<style scoped>
.a { color: red; }
</style>
<i18n>{"en": {}}</i18n>
"""


class TestParseSfc:
    def test_splits_top_level_blocks(self) -> None:
        descriptor = parse_sfc(_COMPONENT, "Card.vue")
        assert descriptor.template is not None
        assert descriptor.script is None
        assert descriptor.script_setup is not None
        assert descriptor.script_setup.lang == "ts"
        assert len(descriptor.styles) == 1
        assert descriptor.styles[0].is_scoped
        assert [b.type for b in descriptor.custom_blocks] == ["i18n"]

    def test_nested_template_is_kept_inside_outer_template(self) -> None:
        descriptor = parse_sfc(_COMPONENT, "Card.vue")
        assert descriptor.template is not None
        assert '<template v-if="ok">' in descriptor.template.content
        assert "<span>yes</span></template>" in descriptor.template.content

    def test_block_line_is_absolute(self) -> None:
        descriptor = parse_sfc(_COMPONENT, "Card.vue")
        block = descriptor.script_setup
        assert block is not None
        index = block.content.find("defineProps")
        assert block_line(block, index) == 8

    def test_script_and_script_setup_coexist(self) -> None:
        code = "<script>\nexport default {}\n</script>\n<script setup>\nconst a = 1\n</script>\n"
        descriptor = parse_sfc(code, "Both.vue")
        assert descriptor.script is not None
        assert descriptor.script_setup is not None

    def test_missing_end_tag_raises(self) -> None:
        with pytest.raises(ParseError, match="missing end tag"):
            parse_sfc("<template>\n<div></div>\n<script>\nconst a = 1\n", "Broken.vue")

    def test_duplicate_template_raises(self) -> None:
        with pytest.raises(ParseError, match="only one <template>"):
            parse_sfc("<template><a/></template>\n<template><b/></template>\n", "Twice.vue")

    def test_duplicate_script_raises_with_line(self) -> None:
        code = "<script>\nexport default {}\n</script>\n<script>\nexport default {}\n</script>\n"
        with pytest.raises(ParseError) as exc_info:
            parse_sfc(code, "Twice.vue")
        assert exc_info.value.line == 4

    def test_unterminated_comment_raises(self) -> None:
        with pytest.raises(ParseError, match="Unterminated comment"):
            parse_sfc("<!-- open\n<template></template>\n", "Comment.vue")

    def test_bare_and_quoted_attributes(self) -> None:
        descriptor = parse_sfc("<style lang='scss' scoped></style>", "Style.vue")
        assert descriptor.styles[0].attrs == {"lang": "scss", "scoped": True}
