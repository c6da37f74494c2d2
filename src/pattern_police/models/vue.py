"""Vue単一ファイルコンポーネントの構造モデルと検出結果のデータモデル。"""

from typing import Literal

from pydantic import BaseModel, Field

from pattern_police.models.validation import Confidence, Severity

VueVersion = Literal["2", "3", "unknown"]

VueBlockType = Literal["template", "script", "style"]

VuePatternCategory = Literal[
    "composables",
    "components",
    "anti_patterns",
    "best_practices",
    "template",
    "options_api",
    "migration",
    "parse",
]


class SFCBlock(BaseModel):
    """SFCのトップレベルブロック（<template>/<script>/<style>等）。"""

    type: str
    content: str
    attrs: dict[str, str | bool] = Field(default_factory=dict)
    # ブロック本文の直前までの改行数（ファイル内の行番号へ変換するためのオフセット）
    line_offset: int = 0

    @property
    def lang(self) -> str | None:
        value = self.attrs.get("lang")
        return value if isinstance(value, str) else None

    @property
    def is_setup(self) -> bool:
        return "setup" in self.attrs

    @property
    def is_scoped(self) -> bool:
        return "scoped" in self.attrs


class SFCDescriptor(BaseModel):
    """SFCをブロック単位に分割した結果。"""

    filename: str
    template: SFCBlock | None = None
    script: SFCBlock | None = None
    script_setup: SFCBlock | None = None
    styles: list[SFCBlock] = Field(default_factory=list)
    custom_blocks: list[SFCBlock] = Field(default_factory=list)


class StyleModel(BaseModel):
    content: str
    scoped: bool = False
    lang: str | None = None


class ComponentModel(BaseModel):
    """1コンポーネント分の構造情報。

    リスト項目は出現順を保った重複なしの集合として扱う。
    """

    name: str
    version: VueVersion = "unknown"
    is_script_setup: bool = False
    has_typescript: bool = False
    uses_options_api: bool = False
    uses_composition_api: bool = False
    imports: list[str] = Field(default_factory=list)
    exports: list[str] = Field(default_factory=list)
    props: list[str] = Field(default_factory=list)
    emits: list[str] = Field(default_factory=list)
    composables: list[str] = Field(default_factory=list)
    mixins: list[str] = Field(default_factory=list)
    filters: list[str] = Field(default_factory=list)
    data: list[str] = Field(default_factory=list)
    methods: list[str] = Field(default_factory=list)
    computed: list[str] = Field(default_factory=list)
    watch: list[str] = Field(default_factory=list)
    template: str | None = None
    script: str | None = None
    script_setup: str | None = None
    styles: list[StyleModel] = Field(default_factory=list)

    @property
    def primary_script(self) -> str:
        """<script setup>を優先した解析対象スクリプト。"""
        return self.script_setup or self.script or ""


class VueLocation(BaseModel):
    line: int = 1
    column: int | None = None
    block: VueBlockType | None = None


class VueDetection(BaseModel):
    """Vueパターンの検出結果。"""

    pattern: str
    category: VuePatternCategory
    component_name: str
    location: VueLocation = Field(default_factory=VueLocation)
    confidence: Confidence
    evidence: list[str] = Field(default_factory=list)
    antipatterns: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class VueViolation(BaseModel):
    """Vueのアンチパターン・ベストプラクティス違反。"""

    rule: str
    category: VuePatternCategory
    severity: Severity
    message: str
    location: VueLocation = Field(default_factory=VueLocation)
    suggestion: str | None = None
    evidence: list[str] = Field(default_factory=list)


class VueReport(BaseModel):
    """Vueコンポーネント1単位分の検証結果。"""

    filename: str
    component: ComponentModel | None = None
    detections: list[VueDetection] = Field(default_factory=list)
    violations: list[VueViolation] = Field(default_factory=list)
