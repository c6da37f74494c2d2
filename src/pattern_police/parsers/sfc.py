"""Vue単一ファイルコンポーネント（SFC）のブロック分割。

トップレベルの<template>/<script>/<script setup>/<style>とカスタムブロックを
切り出す。ブロック内部の構文は解析しない。
"""

import re

from pattern_police.models.errors import ParseError
from pattern_police.models.vue import SFCBlock, SFCDescriptor

_COMMENT_START = "<!--"
_COMMENT_END = "-->"

_OPEN_TAG = re.compile(r"<([a-zA-Z][\w-]*)((?:\s+[^>]*?)?)\s*(/?)>")
_ATTRIBUTE = re.compile(r"""([^\s=/>]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+)))?""")

_NESTED_TEMPLATE = re.compile(r"<template(?=[\s>/])[^>]*?(/?)>|</template\s*>")


def parse_sfc(code: str, filename: str) -> SFCDescriptor:
    """SFCをブロック単位に分割する。

    Args:
        code: SFCのソーステキスト
        filename: ファイル名（位置表示用）

    Returns:
        ブロックごとに分割したSFCDescriptor

    Raises:
        ParseError: 終了タグの欠落、またはtemplate/script/script setupの重複がある場合
    """
    descriptor = SFCDescriptor(filename=filename)
    pos = 0

    while True:
        lt = code.find("<", pos)
        if lt == -1:
            break

        if code.startswith(_COMMENT_START, lt):
            end = code.find(_COMMENT_END, lt + len(_COMMENT_START))
            if end == -1:
                raise ParseError("Unterminated comment", _line_at(code, lt), None)
            pos = end + len(_COMMENT_END)
            continue

        match = _OPEN_TAG.match(code, lt)
        if match is None:
            pos = lt + 1
            continue

        tag = match.group(1).lower()
        attrs = _parse_attributes(match.group(2))
        self_closing = match.group(3) == "/"
        content_start = match.end()

        if self_closing:
            content, pos = "", content_start
        elif tag == "template":
            content_end, pos = _find_template_end(code, content_start, lt)
            content = code[content_start:content_end]
        else:
            close = re.compile(rf"</{re.escape(tag)}\s*>", re.IGNORECASE).search(code, content_start)
            if close is None:
                raise ParseError(f"Element is missing end tag: <{tag}>", _line_at(code, lt), None)
            content = code[content_start : close.start()]
            pos = close.end()

        block = SFCBlock(type=tag, content=content, attrs=attrs, line_offset=code.count("\n", 0, content_start))
        _assign_block(descriptor, block, _line_at(code, lt))

    return descriptor


def _assign_block(descriptor: SFCDescriptor, block: SFCBlock, line: int) -> None:
    if block.type == "template":
        if descriptor.template is not None:
            raise ParseError("Single file component can contain only one <template> element", line, None)
        descriptor.template = block
    elif block.type == "script" and block.is_setup:
        if descriptor.script_setup is not None:
            raise ParseError("Single file component can contain only one <script setup> element", line, None)
        descriptor.script_setup = block
    elif block.type == "script":
        if descriptor.script is not None:
            raise ParseError("Single file component can contain only one <script> element", line, None)
        descriptor.script = block
    elif block.type == "style":
        descriptor.styles.append(block)
    else:
        descriptor.custom_blocks.append(block)


def _find_template_end(code: str, content_start: int, open_at: int) -> tuple[int, int]:
    """ネストした<template>を数えて、対応する終了タグの位置を返す。"""
    depth = 1
    for match in _NESTED_TEMPLATE.finditer(code, content_start):
        if match.group(0).startswith("</"):
            depth -= 1
            if depth == 0:
                return match.start(), match.end()
        elif match.group(1) != "/":
            depth += 1
    raise ParseError("Element is missing end tag: <template>", _line_at(code, open_at), None)


def _parse_attributes(raw: str) -> dict[str, str | bool]:
    attrs: dict[str, str | bool] = {}
    for match in _ATTRIBUTE.finditer(raw):
        name = match.group(1)
        value = next((g for g in match.group(2, 3, 4) if g is not None), None)
        attrs[name] = value if value is not None else True
    return attrs


def _line_at(code: str, index: int) -> int:
    return code.count("\n", 0, index) + 1


def block_line(block: SFCBlock, index: int) -> int:
    """ブロック本文内の文字位置をファイル全体の行番号（1始まり）に変換する。"""
    return block.line_offset + block.content.count("\n", 0, max(index, 0)) + 1
