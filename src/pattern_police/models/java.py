"""Javaのクラス構造モデルとパターン検出結果のデータモデル。"""

from typing import Literal

from pydantic import BaseModel, Field

from pattern_police.models.validation import Confidence, Severity

JavaPatternCategory = Literal[
    "creational",
    "structural",
    "behavioral",
    "enterprise",
    "architectural",
    "modern",
]

JavaPatternName = Literal[
    # Creational
    "singleton",
    "factory-method",
    "abstract-factory",
    "builder",
    "prototype",
    # Structural
    "adapter",
    "bridge",
    "composite",
    "decorator",
    "facade",
    "flyweight",
    "proxy",
    # Behavioral
    "chain-of-responsibility",
    "command",
    "interpreter",
    "iterator",
    "mediator",
    "memento",
    "observer",
    "state",
    "strategy",
    "template-method",
    "visitor",
    # Enterprise
    "dao",
    "repository",
    "dto",
    "service-layer",
    "value-object",
    "data-mapper",
    "active-record",
    # Architectural
    "mvc",
    "front-controller",
    "business-delegate",
    "session-facade",
    "service-locator",
    "transfer-object-assembler",
    "composite-entity",
    # Modern
    "dependency-injection",
    "circuit-breaker",
    "saga",
    "cqrs",
    "event-sourcing",
    "unit-of-work",
]


class ParameterModel(BaseModel):
    """メソッド・コンストラクタの仮引数。"""

    name: str
    type: str


class MethodModel(BaseModel):
    """メソッド（コンストラクタを含む）。

    コンストラクタはクラス名と同名で、return_typeがNoneになる。
    戻り値なしのメソッドはreturn_typeが"void"になる。
    """

    name: str
    is_abstract: bool = False
    is_static: bool = False
    is_private: bool = False
    is_public: bool = False
    return_type: str | None = None
    parameters: list[ParameterModel] = Field(default_factory=list)
    annotations: list[str] = Field(default_factory=list)
    line: int | None = None

    @property
    def is_constructor(self) -> bool:
        return self.return_type is None


class FieldModel(BaseModel):
    """フィールド宣言（1宣言子につき1件）。"""

    name: str
    type: str
    is_static: bool = False
    is_final: bool = False
    is_private: bool = False
    # 修飾子キーワードとアノテーション名をまとめて保持する
    modifiers: list[str] = Field(default_factory=list)


class ClassModel(BaseModel):
    """クラスまたはインターフェース宣言。

    ネストした宣言も同じリストに平坦化され、outer_nameで外側のクラスを参照する。
    """

    name: str
    is_interface: bool = False
    is_abstract: bool = False
    methods: list[MethodModel] = Field(default_factory=list)
    fields: list[FieldModel] = Field(default_factory=list)
    implements: list[str] = Field(default_factory=list)
    extends: str | None = None
    annotations: list[str] = Field(default_factory=list)
    modifiers: list[str] = Field(default_factory=list)
    outer_name: str | None = None
    line: int | None = None


class JavaDetectionLocation(BaseModel):
    """検出位置。アーキテクチャパターンではクラスを特定しない場合がある。"""

    class_name: str | None = None
    method_name: str | None = None
    line: int | None = None


class JavaDetection(BaseModel):
    """Javaデザインパターンの検出結果。"""

    pattern: JavaPatternName
    category: JavaPatternCategory
    confidence: Confidence
    location: JavaDetectionLocation = Field(default_factory=JavaDetectionLocation)
    evidence: list[str] = Field(default_factory=list)
    antipatterns: list[str] = Field(default_factory=list)


class JavaViolation(BaseModel):
    """呼び出し元へ返すJava検証結果の1件。

    パターン検出1件につき1件生成される。構文エラー時はpattern/categoryがNoneになる。
    """

    rule: str
    pattern: JavaPatternName | None = None
    category: JavaPatternCategory | None = None
    severity: Severity
    message: str
    confidence: Confidence | None = None
    class_name: str | None = None
    method_name: str | None = None
    line: int | None = None
    evidence: list[str] = Field(default_factory=list)
    antipatterns: list[str] = Field(default_factory=list)
    suggestion: str | None = None


class JavaReport(BaseModel):
    """Javaコード1単位分の検証結果。"""

    filename: str
    detections: list[JavaDetection] = Field(default_factory=list)
    violations: list[JavaViolation] = Field(default_factory=list)
    rules_evaluated: int = 0
