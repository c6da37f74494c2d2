"""JavaScript/TypeScriptのオブジェクトリテラル・型リテラルの簡易構造解析。

式全体は解析せず、括弧の対応と文字列・コメントの読み飛ばしだけで
トップレベルのキーを取り出す。
"""

import re
from typing import NamedTuple

_PAIRS = {"{": "}", "[": "]", "(": ")", "<": ">"}
_CLOSERS = {"}", "]", ")"}

_KEY = re.compile(
    r"""^(?:(?:async|get|set|static|readonly)\s+)*\*?\s*"""
    r"""(?:(['"])(?P<quoted>.+?)\1|(?P<name>[A-Za-z_$][\w$]*))\s*\??\s*(?P<sep>:|\(|<|$)""",
    re.DOTALL,
)


class Entry(NamedTuple):
    """トップレベルのプロパティ1件。"""

    key: str
    value: str
    # 元テキスト中のエントリ開始位置
    start: int


def skip_trivia(text: str, index: int) -> int:
    """indexが文字列・コメントの先頭なら、その直後の位置を返す。それ以外はそのまま返す。"""
    char = text[index]
    if char in "'\"`":
        end = index + 1
        while end < len(text):
            if text[end] == "\\":
                end += 2
                continue
            if text[end] == char:
                return end + 1
            end += 1
        return len(text)
    if text.startswith("//", index):
        end = text.find("\n", index)
        return len(text) if end == -1 else end
    if text.startswith("/*", index):
        end = text.find("*/", index + 2)
        return len(text) if end == -1 else end + 2
    return index


def find_closing(text: str, open_index: int) -> int:
    """open_indexの開き括弧に対応する閉じ括弧の位置を返す。見つからなければ-1。

    `<`で始めた場合は型引数として`<`/`>`の入れ子も数える。
    """
    opener = text[open_index]
    angle = opener == "<"
    stack = [_PAIRS[opener]]
    index = open_index + 1

    while index < len(text):
        skipped = skip_trivia(text, index)
        if skipped != index:
            index = skipped
            continue

        char = text[index]
        if char in "{[(" or (angle and char == "<"):
            stack.append(_PAIRS[char])
        elif char in _CLOSERS or (angle and char == ">" and text[index - 1] != "="):
            if char != stack[-1]:
                return -1
            stack.pop()
            if not stack:
                return index
        index += 1
    return -1


def object_entries(text: str, open_index: int, *, type_literal: bool = False) -> list[Entry]:
    """`{`から始まるリテラルのトップレベルのエントリを返す。

    Args:
        text: 解析対象テキスト
        open_index: `{`の位置
        type_literal: 型リテラルとして扱う（`;`と改行も区切りとみなす）

    Returns:
        出現順のエントリ。スプレッドや計算キーは含まない。
    """
    close = find_closing(text, open_index)
    if close == -1:
        return []

    separators = ",;\n" if type_literal else ","
    entries: list[Entry] = []
    depth = 0
    segment_start = open_index + 1
    index = segment_start

    while index <= close:
        if index < close:
            skipped = skip_trivia(text, index)
            if skipped != index:
                index = skipped
                continue

        char = text[index]
        if index == close or (depth == 0 and char in separators):
            entry = _entry(text, segment_start, index)
            if entry is not None:
                entries.append(entry)
            segment_start = index + 1
        elif char in "{[(" or (type_literal and char == "<"):
            depth += 1
        elif char in _CLOSERS or (type_literal and char == ">" and text[index - 1] != "="):
            depth -= 1
        index += 1

    return entries


def string_items(text: str) -> list[str]:
    """配列リテラル等に含まれる文字列リテラルの中身を出現順に返す。"""
    return [m.group(2) for m in re.finditer(r"""(['"])([^'"]+)\1""", text)]


def _entry(text: str, start: int, end: int) -> Entry | None:
    raw = text[start:end]
    stripped = _strip_leading_comments(raw).strip()
    if not stripped or stripped.startswith("..."):
        return None

    match = _KEY.match(stripped)
    if match is None:
        return None

    key = match.group("quoted") or match.group("name")
    if match.group("sep") == ":":
        value = stripped[match.end() :].strip()
    else:
        value = stripped
    return Entry(key=key, value=value, start=start + raw.find(stripped[:1]))


def _strip_leading_comments(raw: str) -> str:
    text = raw.lstrip()
    while text.startswith(("//", "/*")):
        end = skip_trivia(text, 0)
        text = text[end:].lstrip()
    return text
