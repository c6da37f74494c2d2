"""Vue SFCのブロックからコンポーネント構造モデルを抽出する。"""

import re
from pathlib import PurePath

from pattern_police.models.vue import ComponentModel, SFCDescriptor, StyleModel, VueVersion
from pattern_police.parsers.literal import Entry, find_closing, object_entries, string_items

_EXPORT_DEFAULT = re.compile(r"export\s+default\s+(?:(?:defineComponent|Vue\.extend)\s*\(\s*)?\{")

_IMPORT = re.compile(
    r"""import\s+(?:type\s+)?(?:[\w$]+\s*,\s*)?(?:\{[^}]*\}|\*\s+as\s+[\w$]+|[\w$]+)\s+from\s+['"]([^'"]+)['"]"""
    r"""|import\s+['"]([^'"]+)['"]"""
)
_COMPOSABLE_CALL = re.compile(r"(?<![\w$.])(use[A-Z][\w$]*)\s*\(")
_FUNCTION_KEYWORD_BEFORE = re.compile(r"function\s*\*?\s*$")
_EXPORTED_COMPOSABLE = re.compile(
    r"export\s+(?:async\s+)?function\s*\*?\s*(use[A-Z][\w$]*)|export\s+(?:const|let)\s+(use[A-Z][\w$]*)"
)

_DEFINE_PROPS = re.compile(r"\bdefineProps\s*(<|\(\s*[\[{])")
_DEFINE_EMITS = re.compile(r"\bdefineEmits\s*(<|\(\s*[\[{])")
_EMIT_SIGNATURE = re.compile(r"""\(\s*[\w$]+\s*:\s*(['"])([^'"]+)\1""")

_COMPOSITION_MACROS = re.compile(r"\bdefine(?:Props|Emits|Expose)\b")
_VUE3_TEMPLATE_TAGS = re.compile(r"<(?:Teleport|teleport|Suspense|suspense)\b")
_COMPOSITION_IMPORT = re.compile(
    r"""import\s*\{[^}]*\b(?:ref|reactive|computed|onMounted|onUnmounted|watch|watchEffect|toRefs?|unref)\b"""
    r"""[^}]*\}\s*from\s*['"]vue['"]"""
)
_SETUP_FUNCTION = re.compile(r"\bsetup\s*\([^)]*\)\s*\{|\bsetup\s*:\s*(?:async\s+)?function\b")
_LEGACY_HOOKS = re.compile(r"\b(?:beforeDestroy|destroyed)\b")
_OPTIONS_API = re.compile(
    r"\bdata\s*\(\s*\)\s*\{|\bdata\s*:\s*(?:function|\()|\b(?:methods|computed|watch|mixins|filters)\s*:"
)


def extract_component(descriptor: SFCDescriptor) -> ComponentModel:
    """分割済みSFCから1コンポーネント分の構造モデルを組み立てる。

    バージョン推定はフラグとOptions APIの抽出が済んでから行う。
    """
    script = descriptor.script.content if descriptor.script else ""
    script_setup = descriptor.script_setup.content if descriptor.script_setup else ""
    template = descriptor.template.content if descriptor.template else None

    model = ComponentModel(
        name=PurePath(descriptor.filename).stem or "Unknown",
        is_script_setup=descriptor.script_setup is not None,
        has_typescript=any(
            block is not None and block.lang in ("ts", "tsx")
            for block in (descriptor.script, descriptor.script_setup)
        ),
        template=template,
        script=script if descriptor.script else None,
        script_setup=script_setup if descriptor.script_setup else None,
        styles=[StyleModel(content=s.content, scoped=s.is_scoped, lang=s.lang) for s in descriptor.styles],
    )

    if descriptor.script is not None:
        _extract_script(script, model)
        _extract_options(script, model)
    if descriptor.script_setup is not None:
        _extract_script(script_setup, model)

    model.uses_options_api = _uses_options_api(script, model)
    model.uses_composition_api = _uses_composition_api(script, script_setup, model)
    model.version = infer_version(model, script, script_setup)

    for field in ("imports", "exports", "props", "emits", "composables", "mixins", "filters",
                  "data", "methods", "computed", "watch"):
        setattr(model, field, _unique(getattr(model, field)))
    return model


def infer_version(model: ComponentModel, script: str, script_setup: str) -> VueVersion:
    """シグナルの優先順位に従ってVueのバージョンを推定する。

    Composition API系のシグナルはOptions API系より常に優先する。
    """
    if model.is_script_setup:
        return "3"
    if _COMPOSITION_MACROS.search(script + script_setup):
        return "3"
    if model.template and _VUE3_TEMPLATE_TAGS.search(model.template):
        return "3"
    if _COMPOSITION_IMPORT.search(script):
        return "3"
    if _SETUP_FUNCTION.search(script):
        return "3"
    if model.filters:
        return "2"
    if _LEGACY_HOOKS.search(script):
        return "2"
    if model.uses_options_api and not model.uses_composition_api:
        return "2"
    return "unknown"


def _uses_options_api(script: str, model: ComponentModel) -> bool:
    extracted = model.data or model.methods or model.computed or model.watch or model.mixins or model.filters
    return bool(extracted) or bool(_OPTIONS_API.search(script))


def _uses_composition_api(script: str, script_setup: str, model: ComponentModel) -> bool:
    return model.is_script_setup or bool(
        _SETUP_FUNCTION.search(script) or _COMPOSITION_IMPORT.search(script) or script_setup.strip()
    )


# --- Composition API / 共通 ---


def _extract_script(content: str, model: ComponentModel) -> None:
    for match in _IMPORT.finditer(content):
        model.imports.append(match.group(1) or match.group(2))

    for match in _COMPOSABLE_CALL.finditer(content):
        before = content[max(0, match.start() - 16) : match.start()]
        if not _FUNCTION_KEYWORD_BEFORE.search(before):
            model.composables.append(match.group(1))

    for match in _EXPORTED_COMPOSABLE.finditer(content):
        model.exports.append(match.group(1) or match.group(2))

    for match in _DEFINE_PROPS.finditer(content):
        model.props.extend(_macro_keys(content, match, is_emits=False))

    for match in _DEFINE_EMITS.finditer(content):
        model.emits.extend(_macro_keys(content, match, is_emits=True))


def _macro_keys(content: str, match: re.Match[str], *, is_emits: bool) -> list[str]:
    """defineProps/defineEmitsの型引数または実行時引数から名前を取り出す。"""
    opener_index = match.end() - 1

    if match.group(1) == "<":
        close = find_closing(content, opener_index)
        if close == -1:
            return []
        type_arg = content[opener_index + 1 : close].strip()
        return _type_argument_keys(content, type_arg, is_emits=is_emits)

    if content[opener_index] == "[":
        close = find_closing(content, opener_index)
        return string_items(content[opener_index:close]) if close != -1 else []
    return [entry.key for entry in object_entries(content, opener_index)]


def _type_argument_keys(content: str, type_arg: str, *, is_emits: bool) -> list[str]:
    if type_arg.startswith("{"):
        if is_emits:
            signatures = [m.group(2) for m in _EMIT_SIGNATURE.finditer(type_arg)]
            if signatures:
                return signatures
        return [entry.key for entry in object_entries(type_arg, 0, type_literal=True)]

    name = re.match(r"[A-Za-z_$][\w$]*", type_arg)
    if name is None:
        return []
    declaration = re.search(
        rf"(?:interface\s+{re.escape(name.group(0))}\b[^{{]*|type\s+{re.escape(name.group(0))}\s*=\s*)\{{",
        content,
    )
    if declaration is None:
        return []
    body_start = declaration.end() - 1
    close = find_closing(content, body_start)
    if close == -1:
        return []
    return _type_argument_keys(content, content[body_start : close + 1], is_emits=is_emits)


# --- Options API ---


def _extract_options(script: str, model: ComponentModel) -> None:
    """export defaultのオブジェクトリテラルからOptions APIの各セクションを取り出す。"""
    match = _EXPORT_DEFAULT.search(script)
    if match is None:
        return

    for entry in object_entries(script, match.end() - 1):
        if entry.key == "mixins":
            model.mixins.extend(_array_identifiers(entry.value))
        elif entry.key == "filters":
            model.filters.extend(_nested_keys(entry))
        elif entry.key == "data":
            model.data.extend(_data_keys(entry.value))
        elif entry.key == "methods":
            model.methods.extend(_nested_keys(entry))
        elif entry.key == "computed":
            model.computed.extend(_nested_keys(entry))
        elif entry.key == "watch":
            model.watch.extend(_nested_keys(entry))
        elif entry.key == "props" and not model.props:
            model.props.extend(_props_names(entry.value))
        elif entry.key == "emits" and not model.emits:
            model.emits.extend(_props_names(entry.value))


def _nested_keys(entry: Entry) -> list[str]:
    value = entry.value
    if not value.startswith("{"):
        return []
    return [e.key for e in object_entries(value, 0)]


def _array_identifiers(value: str) -> list[str]:
    if not value.startswith("["):
        return []
    close = find_closing(value, 0)
    inner = value[1:close] if close != -1 else value[1:]
    return re.findall(r"[A-Za-z_$][\w$.]*", inner)


def _props_names(value: str) -> list[str]:
    if value.startswith("["):
        close = find_closing(value, 0)
        return string_items(value[: close + 1] if close != -1 else value)
    if value.startswith("{"):
        return [e.key for e in object_entries(value, 0)]
    return []


def _data_keys(value: str) -> list[str]:
    """data()が返すオブジェクトのキー。関数形式とアロー関数形式に対応する。"""
    returned = re.search(r"\breturn\s*\{|=>\s*\(\s*\{", value)
    if returned is None:
        return []
    return [e.key for e in object_entries(value, returned.end() - 1)]


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))
