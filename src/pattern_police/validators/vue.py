"""Vueコンポーネントのパターン検出・アンチパターン検証ロジック。"""

import logging
import re

from pattern_police.extractors.vue import extract_component
from pattern_police.models.errors import ParseError
from pattern_police.models.rules import VueRuleConfig
from pattern_police.models.validation import PARSE_ERROR_RULE
from pattern_police.models.vue import (
    ComponentModel,
    SFCBlock,
    SFCDescriptor,
    VueBlockType,
    VueDetection,
    VueLocation,
    VueReport,
    VueViolation,
)
from pattern_police.parsers.literal import find_closing
from pattern_police.parsers.sfc import block_line, parse_sfc

logger = logging.getLogger(__name__)

_FUNCTION_DEF = re.compile(r"(export\s+)?(?:async\s+)?function\s*\*?\s*([A-Za-z_$][\w$]*)\s*\(")
_ARROW_COMPOSABLE_DEF = re.compile(r"(export\s+)?const\s+(use[A-Z][\w$]*)\s*=\s*(?:async\s*)?\(")
_COMPOSABLE_NAME = re.compile(r"^use[A-Z]")

_REACTIVE_RETURN = re.compile(r"return\s*\{[^}]*\b(?:ref|reactive|computed|readonly|toRefs?)\b|return\s+(?:ref|reactive|computed|readonly)\s*\(")
_REACTIVE_CALL = re.compile(r"\b(?:ref|reactive|computed|readonly|shallowRef)\s*[<(]")
_OPTIONS_PARAMETER = re.compile(r"^\s*\(\s*(?:options|config|params|opts)\b")
_FLEXIBLE_ARGUMENTS = re.compile(r"\b(?:unref|toRef|toRefs|toValue|isRef)\s*\(")
_LIFECYCLE_HOOKS = re.compile(r"\b(?:onMounted|onUnmounted|onBeforeMount|onBeforeUnmount|onUpdated|onBeforeUpdate)\s*\(")

_BUSINESS_LOGIC = re.compile(r"(?:const|let|var)\s+[\w$]+\s*=\s*(?:computed|ref|reactive|watch)\b")

_SLOT = re.compile(r"<slot[\s/>]")
_NAMED_SLOT = re.compile(r"<slot\s+[^>]*\bname\s*=")
_SCOPED_SLOT = re.compile(r"<slot\s+[^>]*(?:\s:(?!name\b)[\w-]+|\sv-bind\b)")
_HTML_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)
_TAG = re.compile(r"</?([A-Za-z][\w-]*)")
_PROVIDE = re.compile(r"\bprovide\s*(?:\(|:)")
_INJECT = re.compile(r"\binject\s*(?:\(|:)")
_TELEPORT = re.compile(r"<(?:Teleport|teleport)\b")
_SUSPENSE = re.compile(r"<(?:Suspense|suspense)\b")

_V_IF_WITH_V_FOR = re.compile(r"<[\w-]+[^>]*\bv-for\b[^>]*\bv-if\b|<[\w-]+[^>]*\bv-if\b[^>]*\bv-for\b")
_V_FOR_TAG = re.compile(r"<[\w-]+[^>]*\bv-for\b[^>]*>")
_KEY_BINDING = re.compile(r"(?:\s:key|\sv-bind:key)\s*=")
_PARENT_ACCESS = re.compile(r"\$(?:parent|children|root)\b")
_TYPED_PROP = re.compile(r"\bdefineProps\s*<|\b[\w$]+\s*:\s*(?:String|Number|Boolean|Array|Object|Function|Date|Symbol)\b")
_KEBAB_CASE = re.compile(r"^[a-z]+(-[a-z]+)*$")


class VuePatternValidator:
    """ルール設定に基づくVue SFCの検証を行う。

    推定したVueバージョンによって同じ構造でも結果が変わる
    （mixinsやfiltersはVue 3のときだけ違反になる）。
    """

    def __init__(self, config: VueRuleConfig) -> None:
        self._config = config

    @property
    def config(self) -> VueRuleConfig:
        return self._config

    def validate(self, code: str, filename: str = "Component.vue") -> VueReport:
        """SFCを解析してパターン検出と違反検出を行う。

        Args:
            code: SFCのソーステキスト。
            filename: ファイル名。拡張子を除いた部分がコンポーネント名になる。

        Returns:
            コンポーネント情報・検出結果・違反リストを含むレポート。
        """
        try:
            descriptor = parse_sfc(code, filename)
        except ParseError as e:
            logger.debug("SFC parse failed for %s: %s", filename, e)
            return VueReport(
                filename=filename,
                violations=[
                    VueViolation(
                        rule=PARSE_ERROR_RULE,
                        category="parse",
                        severity="error",
                        message=f"Vueコンポーネントの解析に失敗しました: {e}",
                        location=VueLocation(line=e.line or 1),
                        suggestion="SFCのブロック構造（終了タグ・ブロックの重複）を確認してください",
                    )
                ],
            )

        component = extract_component(descriptor)
        rules = self._config.rules

        detections: list[VueDetection] = []
        if rules.composables.enabled:
            detections.extend(self._detect_composables(component, descriptor))
        if rules.components.enabled:
            detections.extend(self._detect_components(component, descriptor))
        if component.uses_options_api and component.version == "2":
            detections.extend(self._detect_options_api(component, descriptor))

        violations: list[VueViolation] = []
        if rules.anti_patterns.enabled:
            violations.extend(self._check_anti_patterns(component, descriptor))
        if rules.best_practices.enabled:
            violations.extend(self._check_best_practices(component, descriptor))
        if rules.template.enabled:
            violations.extend(self._check_template(component, descriptor))

        logger.debug(
            "Validated %s: version=%s, %d detections, %d violations",
            filename,
            component.version,
            len(detections),
            len(violations),
        )
        return VueReport(filename=filename, component=component, detections=detections, violations=violations)

    # --- パターン検出 ---

    def _detect_composables(self, component: ComponentModel, descriptor: SFCDescriptor) -> list[VueDetection]:
        rules = self._config.rules.composables
        block = _primary_script_block(descriptor)
        if block is None:
            return []
        content = block.content

        definitions: list[tuple[re.Match[str], str, bool]] = []
        for match in _FUNCTION_DEF.finditer(content):
            definitions.append((match, match.group(2), match.group(1) is not None))
        for match in _ARROW_COMPOSABLE_DEF.finditer(content):
            definitions.append((match, match.group(2), match.group(1) is not None))
        definitions.sort(key=lambda d: d[0].start())

        detections: list[VueDetection] = []
        for match, name, exported in definitions:
            params, body = _function_parts(content, match.end() - 1)
            is_named = bool(_COMPOSABLE_NAME.match(name))
            returns_reactive = bool(_REACTIVE_RETURN.search(body))

            if not is_named and not (rules.enforce_naming and exported and _REACTIVE_CALL.search(body)):
                continue

            evidence = [f"composable関数: {name}"]
            antipatterns: list[str] = []
            suggestions: list[str] = []

            if is_named:
                evidence.append("命名規則（useプレフィックス）に従っている")
            else:
                evidence.append("リアクティブな状態を扱うエクスポート関数")
                antipatterns.append("'use'プレフィックスがない")
                suggestions.append(f"'use{name[:1].upper()}{name[1:]}'のように命名してください")

            if returns_reactive:
                evidence.append("リアクティブな値（ref/reactive/computed）を返す")
            elif rules.enforce_return_reactive:
                suggestions.append("リアクティブな値を返すことを検討してください")
            if _OPTIONS_PARAMETER.match(params):
                evidence.append("オプションオブジェクトで設定を受け取る")
            if _FLEXIBLE_ARGUMENTS.search(body):
                evidence.append("柔軟な引数（ref/unref）を受け付ける")
            if _LIFECYCLE_HOOKS.search(body):
                evidence.append("ライフサイクルフック（onMounted等）を使用")

            detections.append(
                VueDetection(
                    pattern="composable",
                    category="composables",
                    component_name=name,
                    location=_location(block, match.start(), "script"),
                    confidence="high" if not antipatterns else "medium",
                    evidence=evidence,
                    antipatterns=antipatterns,
                    suggestions=suggestions,
                )
            )

        if component.composables:
            detections.append(
                VueDetection(
                    pattern="composable-usage",
                    category="composables",
                    component_name=component.name,
                    location=_location(block, content.find(component.composables[0]), "script"),
                    confidence="high" if len(component.composables) >= 2 else "medium",
                    evidence=[f"composableの呼び出し: {name}" for name in component.composables],
                )
            )
        return detections

    def _detect_components(self, component: ComponentModel, descriptor: SFCDescriptor) -> list[VueDetection]:
        rules = self._config.rules.components
        detections: list[VueDetection] = []
        script_block = _primary_script_block(descriptor)

        if component.is_script_setup and rules.enforce_smart_dumb and component.props:
            evidence = ["<script setup>（Composition API）を使用", f"definePropsで{len(component.props)}個のpropsを定義"]
            if component.emits:
                evidence.append(f"defineEmitsで{len(component.emits)}個のイベントを定義")

            if _BUSINESS_LOGIC.search(component.script_setup or ""):
                detections.append(
                    VueDetection(
                        pattern="smart-dumb-components",
                        category="components",
                        component_name=component.name,
                        location=_location(script_block, 0, "script"),
                        confidence="medium",
                        evidence=["Smartコンポーネント（ビジネスロジックを含む）", *evidence],
                        suggestions=["ロジックが大きくなる場合はcomposableへの分離を検討してください"],
                    )
                )
            else:
                detections.append(
                    VueDetection(
                        pattern="smart-dumb-components",
                        category="components",
                        component_name=component.name,
                        location=_location(script_block, 0, "script"),
                        confidence="high",
                        evidence=["Dumb/Presentationalコンポーネント（propsを受け取るだけ）", *evidence],
                    )
                )

        template_block = descriptor.template
        if template_block is not None:
            template = template_block.content

            named = _NAMED_SLOT.findall(template)
            if named:
                detections.append(
                    self._template_detection(
                        "named-slots",
                        component,
                        template_block,
                        template.find("<slot"),
                        ["<slot name>による名前付きスロット", f"{len(named)}個の名前付きスロット"],
                    )
                )

            scoped = [m for m in _SCOPED_SLOT.finditer(template)]
            if scoped:
                detections.append(
                    self._template_detection(
                        "scoped-slots",
                        component,
                        template_block,
                        scoped[0].start(),
                        ["スロットへのデータバインディング（スコープ付きスロット）", f"{len(scoped)}個のスコープ付きスロット"],
                    )
                )

            if _is_renderless(component, template):
                detections.append(
                    self._template_detection(
                        "renderless-component",
                        component,
                        template_block,
                        template.find("<slot"),
                        ["テンプレートが<slot>のみで構成される", "UIを持たずロジックだけを提供する"],
                    )
                )

            for pattern, regex, label in (
                ("teleport", _TELEPORT, "<Teleport>"),
                ("suspense", _SUSPENSE, "<Suspense>"),
            ):
                match = regex.search(template)
                if match is not None:
                    detections.append(
                        self._template_detection(
                            pattern,
                            component,
                            template_block,
                            match.start(),
                            [f"{label}を使用", "Vue 3専用の組み込みコンポーネント"],
                        )
                    )

        script = component.primary_script
        provides = _PROVIDE.search(script)
        injects = _INJECT.search(script)
        if provides or injects:
            evidence: list[str] = []
            if provides:
                evidence.append("provideで値を子孫へ提供")
            if injects:
                evidence.append("injectで祖先から値を受け取る")
            first = min(m.start() for m in (provides, injects) if m is not None)
            detections.append(
                VueDetection(
                    pattern="provide-inject",
                    category="components",
                    component_name=component.name,
                    location=_location(script_block, first, "script"),
                    confidence="high" if provides and injects else "medium",
                    evidence=evidence,
                )
            )
        return detections

    @staticmethod
    def _template_detection(
        pattern: str, component: ComponentModel, block: SFCBlock, index: int, evidence: list[str]
    ) -> VueDetection:
        return VueDetection(
            pattern=pattern,
            category="components",
            component_name=component.name,
            location=_location(block, index, "template"),
            confidence="high",
            evidence=evidence,
        )

    @staticmethod
    def _detect_options_api(component: ComponentModel, descriptor: SFCDescriptor) -> list[VueDetection]:
        block = descriptor.script
        detections: list[VueDetection] = []

        if component.data or component.methods or component.computed:
            evidence = ["Options API（Vue 2スタイル）を使用"]
            if component.data:
                evidence.append(f"data()で{len(component.data)}個のプロパティを定義")
            if component.methods:
                evidence.append(f"{len(component.methods)}個のメソッドを定義")
            if component.computed:
                evidence.append(f"{len(component.computed)}個の算出プロパティを定義")
            if component.watch:
                evidence.append(f"{len(component.watch)}個のウォッチャーを定義")
            detections.append(
                VueDetection(
                    pattern="options-api-structure",
                    category="options_api",
                    component_name=component.name,
                    location=_location(block, 0, "script"),
                    confidence="high" if len(evidence) >= 2 else "medium",
                    evidence=evidence,
                )
            )

        if component.mixins:
            detections.append(
                VueDetection(
                    pattern="vue2-mixins",
                    category="options_api",
                    component_name=component.name,
                    location=_location(block, _find(block, "mixins"), "script"),
                    confidence="high",
                    evidence=[
                        f"{len(component.mixins)}個のmixinを使用: {', '.join(component.mixins)}",
                        "Vue 2ではコード再利用の有効なパターン",
                    ],
                    suggestions=["Vue 3へ移行する際はcomposableへの置き換えを検討してください"],
                )
            )

        if component.filters:
            detections.append(
                VueDetection(
                    pattern="vue2-filters",
                    category="options_api",
                    component_name=component.name,
                    location=_location(block, _find(block, "filters"), "script"),
                    confidence="high",
                    evidence=[
                        f"{len(component.filters)}個のfilterを定義: {', '.join(component.filters)}",
                        "Vue 2ではテンプレートでの整形に有効なパターン",
                    ],
                    suggestions=["Vue 3へ移行する際は算出プロパティまたはメソッドに置き換えてください"],
                )
            )

        if component.watch:
            detections.append(
                VueDetection(
                    pattern="watchers",
                    category="options_api",
                    component_name=component.name,
                    location=_location(block, _find(block, "watch"), "script"),
                    confidence="high",
                    evidence=[
                        f"{len(component.watch)}個のウォッチャーでリアクティブな値を監視",
                        f"ウォッチャー: {', '.join(component.watch)}",
                    ],
                )
            )
        return detections

    # --- 違反検出 ---

    def _check_anti_patterns(self, component: ComponentModel, descriptor: SFCDescriptor) -> list[VueViolation]:
        rules = self._config.rules.anti_patterns
        violations: list[VueViolation] = []
        script_block = _primary_script_block(descriptor)
        script = component.primary_script

        if rules.detect_mixins and component.mixins and component.version == "3":
            violations.append(
                VueViolation(
                    rule="mixin-usage",
                    category="anti_patterns",
                    severity=rules.severity,
                    message="mixinsの使用を検出しました。Vue 3ではcomposableを推奨します",
                    location=_location(descriptor.script, _find(descriptor.script, "mixins"), "script"),
                    suggestion="Composition APIのcomposableに移行してください",
                    evidence=[f"mixins: {', '.join(component.mixins)}"],
                )
            )

        if component.filters and component.version == "3":
            violations.append(
                VueViolation(
                    rule="filter-deprecated",
                    category="migration",
                    severity=rules.severity,
                    message="filtersはVue 3で削除されました",
                    location=_location(descriptor.script, _find(descriptor.script, "filters"), "script"),
                    suggestion="算出プロパティまたはメソッドに置き換えてください",
                    evidence=[f"filters: {', '.join(component.filters)}"],
                )
            )

        if rules.detect_v_if_v_for and descriptor.template is not None:
            for match in _V_IF_WITH_V_FOR.finditer(descriptor.template.content):
                violations.append(
                    VueViolation(
                        rule="v-if-with-v-for",
                        category="anti_patterns",
                        severity=rules.severity,
                        message="同じ要素でv-ifとv-forを併用しています",
                        location=_location(descriptor.template, match.start(), "template"),
                        suggestion="算出プロパティでリストを絞り込むか、<template>で囲んでください",
                    )
                )

        if rules.detect_prop_mutation:
            for prop in component.props:
                mutation = re.search(
                    rf"(?<![\w$.])(?:props\.|this\.)?{re.escape(prop)}(?:\.value)?\s*=(?![=>])", script
                )
                if mutation is None:
                    continue
                violations.append(
                    VueViolation(
                        rule="prop-mutation",
                        category="anti_patterns",
                        severity="error",
                        message=f"prop '{prop}' を直接変更しています",
                        location=_location(script_block, mutation.start(), "script"),
                        suggestion="イベントをemitして親コンポーネントに値を更新させてください",
                        evidence=[mutation.group(0).strip()],
                    )
                )

        if rules.detect_parent_access:
            access = _PARENT_ACCESS.search(script)
            if access is not None:
                violations.append(
                    VueViolation(
                        rule="parent-access",
                        category="anti_patterns",
                        severity=rules.severity,
                        message=f"{access.group(0)}へのアクセスを検出しました",
                        location=_location(script_block, access.start(), "script"),
                        suggestion="props・イベント・provide/injectを使用してください",
                    )
                )

        max_size = self._config.rules.components.max_component_size
        total_lines = len(script.split("\n")) if script else 0
        if total_lines > max_size:
            violations.append(
                VueViolation(
                    rule="god-component",
                    category="anti_patterns",
                    severity=rules.severity,
                    message=f"コンポーネントが大きすぎます（{total_lines}行、推奨上限: {max_size}行）",
                    location=_location(script_block, 0, "script"),
                    suggestion="ロジックをcomposableに抽出するか、小さなコンポーネントに分割してください",
                    evidence=[f"{total_lines}行"],
                )
            )
        return violations

    def _check_best_practices(self, component: ComponentModel, descriptor: SFCDescriptor) -> list[VueViolation]:
        rules = self._config.rules.best_practices
        violations: list[VueViolation] = []
        script_block = _primary_script_block(descriptor)

        if rules.enforce_prop_validation and component.props and not _TYPED_PROP.search(component.primary_script):
            violations.append(
                VueViolation(
                    rule="prop-validation",
                    category="best_practices",
                    severity=rules.severity,
                    message="型検証のないpropsを検出しました",
                    location=_location(script_block, _find(script_block, "props"), "script"),
                    suggestion="TypeScriptまたは実行時の型指定でpropsに型を付けてください",
                    evidence=[f"props: {', '.join(component.props)}"],
                )
            )

        if rules.enforce_event_naming:
            for event in component.emits:
                if _KEBAB_CASE.match(event):
                    continue
                violations.append(
                    VueViolation(
                        rule="event-naming",
                        category="best_practices",
                        severity=rules.severity,
                        message=f"イベント'{event}'がkebab-caseではありません",
                        location=_location(script_block, _find(script_block, event), "script"),
                        suggestion="イベント名にはkebab-caseを使用してください（例: 'update-value'）",
                    )
                )

        if rules.enforce_script_setup and not component.is_script_setup and descriptor.script is not None:
            violations.append(
                VueViolation(
                    rule="script-setup-usage",
                    category="best_practices",
                    severity=rules.severity,
                    message="<script setup>を使用していません",
                    location=_location(descriptor.script, 0, "script"),
                    suggestion="開発体験と性能のため<script setup>への移行を検討してください",
                )
            )
        return violations

    def _check_template(self, component: ComponentModel, descriptor: SFCDescriptor) -> list[VueViolation]:
        rules = self._config.rules.template
        if not rules.enforce_v_for_key or descriptor.template is None:
            return []

        violations: list[VueViolation] = []
        for match in _V_FOR_TAG.finditer(descriptor.template.content):
            if _KEY_BINDING.search(match.group(0)):
                continue
            violations.append(
                VueViolation(
                    rule="missing-v-for-key",
                    category="template",
                    severity=rules.severity,
                    message="v-forに:keyが指定されていません",
                    location=_location(descriptor.template, match.start(), "template"),
                    suggestion="性能と正しさのためv-forには常に:keyを指定してください",
                )
            )
        return violations


def _primary_script_block(descriptor: SFCDescriptor) -> SFCBlock | None:
    return descriptor.script_setup or descriptor.script


def _location(block: SFCBlock | None, index: int, kind: VueBlockType) -> VueLocation:
    if block is None:
        return VueLocation(line=1, block=kind)
    return VueLocation(line=block_line(block, index), block=kind)


def _find(block: SFCBlock | None, needle: str) -> int:
    return block.content.find(needle) if block is not None else 0


def _function_parts(content: str, paren_index: int) -> tuple[str, str]:
    """`(`の位置から引数リストと本体（`{...}`）を取り出す。"""
    close = find_closing(content, paren_index)
    if close == -1:
        return "", ""
    params = content[paren_index : close + 1]
    body_start = content.find("{", close)
    if body_start == -1:
        return params, ""
    body_end = find_closing(content, body_start)
    return params, content[body_start : body_end + 1] if body_end != -1 else content[body_start:]


def _is_renderless(component: ComponentModel, template: str) -> bool:
    cleaned = _HTML_COMMENT.sub("", template).strip()
    if not _SLOT.match(cleaned):
        return False
    if component.script is None and component.script_setup is None:
        return False
    return all(tag.lower() == "slot" for tag in _TAG.findall(cleaned))
