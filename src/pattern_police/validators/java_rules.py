"""Javaデザインパターンの検出ルール。

各ルールはClassModelを読み取るだけの純粋関数で、他のルールの結果に依存しない。
RULESの並び（カテゴリ順、カテゴリ内の宣言順）がそのまま検出結果の出力順になる。
"""

from collections.abc import Callable
from typing import NamedTuple

from pattern_police.models.java import (
    ClassModel,
    FieldModel,
    JavaDetection,
    JavaDetectionLocation,
    JavaPatternCategory,
    JavaPatternName,
    MethodModel,
)
from pattern_police.models.validation import Confidence

ClassRule = Callable[[ClassModel, list[ClassModel], bool], JavaDetection | None]
UnitRule = Callable[[list[ClassModel], bool], list[JavaDetection]]

_ACCESSOR_PREFIXES = ("get", "set", "is")
_OBJECT_PROTOCOL_METHODS = ("toString", "hashCode", "equals")
_COLLECTION_TYPES = ("List", "Set", "Collection")


class JavaRule(NamedTuple):
    category: JavaPatternCategory
    pattern: JavaPatternName
    evaluate: UnitRule


RULES: list[JavaRule] = []


def _per_class(category: JavaPatternCategory, pattern: JavaPatternName) -> Callable[[ClassRule], ClassRule]:
    """クラス単位のルールを登録する。クラスはソース上の宣言順に評価される。"""

    def decorator(func: ClassRule) -> ClassRule:
        def evaluate(classes: list[ClassModel], detect_antipatterns: bool) -> list[JavaDetection]:
            detections: list[JavaDetection] = []
            for cls in classes:
                detection = func(cls, classes, detect_antipatterns)
                if detection is not None:
                    detections.append(detection)
            return detections

        RULES.append(JavaRule(category, pattern, evaluate))
        return func

    return decorator


def _per_unit(category: JavaPatternCategory, pattern: JavaPatternName) -> Callable[[UnitRule], UnitRule]:
    """クラス一覧全体を対象とするルール（アーキテクチャパターン）を登録する。"""

    def decorator(func: UnitRule) -> UnitRule:
        RULES.append(JavaRule(category, pattern, func))
        return func

    return decorator


def _detection(
    pattern: JavaPatternName,
    category: JavaPatternCategory,
    confidence: Confidence,
    evidence: list[str],
    class_name: str | None = None,
    *,
    method_name: str | None = None,
    line: int | None = None,
    antipatterns: list[str] | None = None,
) -> JavaDetection:
    return JavaDetection(
        pattern=pattern,
        category=category,
        confidence=confidence,
        location=JavaDetectionLocation(class_name=class_name, method_name=method_name, line=line),
        evidence=evidence,
        antipatterns=antipatterns or [],
    )


# --- 共通ヘルパー ---


def _methods(cls: ClassModel) -> list[MethodModel]:
    """コンストラクタを除いたメソッド。"""
    return [m for m in cls.methods if not m.is_constructor]


def _constructors(cls: ClassModel) -> list[MethodModel]:
    return [m for m in cls.methods if m.is_constructor]


def _has_method(cls: ClassModel, *fragments: str) -> bool:
    return any(any(f in m.name.lower() for f in fragments) for m in _methods(cls))


def _instance_fields(cls: ClassModel) -> list[FieldModel]:
    return [f for f in cls.fields if not f.is_static]


def _public_instance_methods(cls: ClassModel) -> list[MethodModel]:
    return [m for m in _methods(cls) if m.is_public and not m.is_static]


def _name_has(cls: ClassModel, *fragments: str) -> bool:
    lowered = cls.name.lower()
    return any(f in lowered for f in fragments)


def _is_collection(type_name: str) -> bool:
    return any(t in type_name for t in _COLLECTION_TYPES)


def crud_score(cls: ClassModel) -> int:
    """CRUD操作の網羅度（0〜4）を返す。

    saveは作成と更新の両方に数える（upsertとして両方の意味を満たす）。
    """
    lowered = [m.name.lower() for m in _methods(cls)]
    saves = any("save" in n for n in lowered)
    score = 0
    if saves or any("create" in n or "insert" in n for n in lowered):
        score += 1
    if any("read" in n or "find" in n or "get" in n for n in lowered):
        score += 1
    if saves or any("update" in n for n in lowered):
        score += 1
    if any("delete" in n or "remove" in n for n in lowered):
        score += 1
    return score


# --- Creational ---


@_per_class("creational", "singleton")
def detect_singleton(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    has_private_constructor = any(m.is_private for m in _constructors(cls))
    has_static_instance = any(f.is_static and f.is_final and f.type == cls.name for f in cls.fields)
    accessor = next(
        (m for m in _methods(cls) if "instance" in m.name.lower() and m.is_static and m.is_public),
        None,
    )

    if not (has_private_constructor and (has_static_instance or accessor is not None)):
        return None

    evidence = ["privateコンストラクタ"]
    if has_static_instance:
        evidence.append("自クラス型のstatic finalフィールド")
    if accessor is not None:
        evidence.append(f"staticアクセサメソッド {accessor.name}()")

    antipatterns: list[str] = []
    if detect_antipatterns:
        static_instance = next((f for f in cls.fields if f.is_static and f.type == cls.name), None)
        if static_instance is not None and not static_instance.is_final:
            antipatterns.append("staticインスタンスがfinalではない（スレッドセーフではない）")
        if not any(m.name == "clone" for m in _methods(cls)):
            antipatterns.append("clone()をオーバーライドして複製を防ぐべき")
        if "Serializable" in cls.implements and not any(m.name == "readResolve" for m in _methods(cls)):
            antipatterns.append("readResolve()のないSerializableはシングルトンを破壊しうる")

    return _detection("singleton", "creational", "high", evidence, cls.name, line=cls.line, antipatterns=antipatterns)


@_per_class("creational", "builder")
def detect_builder(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    has_builder_class = "Builder" in cls.name or any(
        c.name == f"{cls.name}Builder" or (c.name == "Builder" and c.outer_name == cls.name) for c in classes
    )
    has_build_method = any(m.name == "build" and m.return_type != "void" for m in _methods(cls))
    fluent = [
        m for m in _methods(cls) if m.return_type == cls.name and (m.name.startswith("with") or m.name.startswith("set"))
    ]

    if not ((has_builder_class or has_build_method) and len(fluent) >= 2):
        return None

    evidence: list[str] = []
    if has_builder_class:
        evidence.append("Builderクラス（内部または同名+Builder）")
    if has_build_method:
        evidence.append("build()メソッド")
    evidence.append(f"{len(fluent)}個のfluentメソッド（with/setで自身を返す）")
    return _detection("builder", "creational", "high", evidence, cls.name, line=cls.line)


@_per_class("creational", "factory-method")
def detect_factory_method(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    factories = [
        m
        for m in _methods(cls)
        if m.is_static
        and m.is_public
        and m.return_type != "void"
        and any(k in m.name.lower() for k in ("create", "factory", "new", "get"))
    ]
    if not factories:
        return None

    return _detection(
        "factory-method",
        "creational",
        "medium",
        [
            f"{len(factories)}個のstaticファクトリメソッド",
            f"メソッド: {', '.join(m.name for m in factories)}",
        ],
        cls.name,
        line=cls.line,
    )


@_per_class("creational", "abstract-factory")
def detect_abstract_factory(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    if not (cls.is_interface or cls.is_abstract):
        return None

    creators = [m for m in _methods(cls) if "create" in m.name.lower() and m.return_type != "void"]
    if len(creators) < 2:
        return None

    return _detection(
        "abstract-factory",
        "creational",
        "medium",
        [
            "インターフェース" if cls.is_interface else "抽象クラス",
            f"{len(creators)}個のcreateメソッド",
            "関連するオブジェクト群を生成する",
        ],
        cls.name,
        line=cls.line,
    )


@_per_class("creational", "prototype")
def detect_prototype(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    implements_cloneable = "Cloneable" in cls.implements
    has_clone = any(m.name == "clone" and m.is_public for m in _methods(cls))
    if not (implements_cloneable and has_clone):
        return None

    return _detection(
        "prototype", "creational", "high", ["Cloneableを実装", "publicなclone()メソッド"], cls.name, line=cls.line
    )


# --- Structural ---


@_per_class("structural", "adapter")
def detect_adapter(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    if not (_name_has(cls, "adapter", "wrapper") and cls.fields and cls.implements):
        return None

    return _detection(
        "adapter",
        "structural",
        "high",
        [
            "名前に'Adapter'または'Wrapper'を含む",
            f"インターフェースを実装: {', '.join(cls.implements)}",
            "adapteeをコンポジションで保持",
        ],
        cls.name,
        line=cls.line,
    )


@_per_class("structural", "decorator")
def detect_decorator(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    is_decorator = _name_has(cls, "decorator")
    extends_base = cls.extends is not None
    has_component = bool(_instance_fields(cls))

    if not ((is_decorator or (extends_base and has_component)) and not cls.implements):
        return None

    evidence: list[str] = []
    if is_decorator:
        evidence.append("名前に'Decorator'を含む")
    if extends_base:
        evidence.append(f"基底クラス{cls.extends}を継承")
    if has_component:
        evidence.append("ラップ対象のコンポーネントフィールド")
    return _detection("decorator", "structural", "medium", evidence, cls.name, line=cls.line)


@_per_class("structural", "facade")
def detect_facade(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    is_facade = _name_has(cls, "facade")
    subsystems = _instance_fields(cls)
    public_methods = _public_instance_methods(cls)

    if not (is_facade or (len(subsystems) >= 2 and len(public_methods) >= 2)):
        return None

    evidence: list[str] = []
    if is_facade:
        evidence.append("名前に'Facade'を含む")
    evidence.append(f"{len(subsystems)}個のサブシステムを保持")
    evidence.append(f"{len(public_methods)}個の簡素化されたpublicメソッド")
    return _detection("facade", "structural", "high" if is_facade else "medium", evidence, cls.name, line=cls.line)


@_per_class("structural", "proxy")
def detect_proxy(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    has_subject = any(f.is_private for f in _instance_fields(cls))
    if not (_name_has(cls, "proxy") and cls.implements and has_subject):
        return None

    return _detection(
        "proxy",
        "structural",
        "high",
        ["名前に'Proxy'を含む", "実体と同じインターフェースを実装", "実体を保持するprivateフィールド"],
        cls.name,
        line=cls.line,
    )


@_per_class("structural", "composite")
def detect_composite(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    has_children = any(_is_collection(f.type) for f in cls.fields)
    if not (has_children and _has_method(cls, "add") and _has_method(cls, "remove")):
        return None

    return _detection(
        "composite",
        "structural",
        "medium",
        ["子要素のコレクションフィールド", "階層を管理するadd/removeメソッド"],
        cls.name,
        line=cls.line,
    )


@_per_class("structural", "bridge")
def detect_bridge(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    has_implementor = any("impl" in f.type.lower() for f in cls.fields)
    if not (cls.is_abstract and has_implementor):
        return None

    return _detection(
        "bridge",
        "structural",
        "low",
        ["抽象クラス", "実装側（Implementor）への参照フィールド", "抽象と実装を分離"],
        cls.name,
        line=cls.line,
    )


@_per_class("structural", "flyweight")
def detect_flyweight(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    has_cache = any(f.is_static and ("Map" in f.type or "Cache" in f.type) for f in cls.fields)
    has_getter = any(m.is_static and "get" in m.name.lower() for m in _methods(cls))
    if not (has_cache and has_getter):
        return None

    return _detection(
        "flyweight",
        "structural",
        "low",
        ["staticキャッシュ（Map）", "再利用のためのstatic getメソッド"],
        cls.name,
        line=cls.line,
    )


# --- Behavioral ---


@_per_class("behavioral", "observer")
def detect_observer(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    has_observers = any(
        ("List" in f.type or "Set" in f.type) and any(k in f.name.lower() for k in ("observer", "listener"))
        for f in cls.fields
    )
    has_notify = _has_method(cls, "notify", "update")
    has_add = any(
        "add" in m.name.lower() and any(k in m.name.lower() for k in ("observer", "listener")) for m in _methods(cls)
    )
    if not (has_observers and has_notify and has_add):
        return None

    return _detection(
        "observer",
        "behavioral",
        "high",
        ["observer/listenerのリスト", "notify/updateメソッド", "observer/listenerの登録メソッド"],
        cls.name,
        line=cls.line,
    )


@_per_class("behavioral", "strategy")
def detect_strategy(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    is_interface = cls.is_interface and bool(_methods(cls))
    has_strategy_field = any(k in f.type.lower() for f in cls.fields for k in ("strategy", "algorithm"))
    has_execute = _has_method(cls, "execute", "perform", "calculate")

    if not (is_interface or (has_strategy_field and has_execute)):
        return None

    evidence: list[str] = []
    if is_interface:
        evidence.append("戦略インターフェース")
        evidence.append(f"{len(_methods(cls))}個の差し替え可能なメソッド")
    if has_strategy_field:
        evidence.append("戦略オブジェクトのフィールド")
    if has_execute:
        evidence.append("execute/perform/calculateメソッド")
    return _detection("strategy", "behavioral", "high" if is_interface else "medium", evidence, cls.name, line=cls.line)


@_per_class("behavioral", "template-method")
def detect_template_method(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    abstract_methods = [m for m in _methods(cls) if m.is_abstract]
    template = next(
        (
            m
            for m in _methods(cls)
            if not m.is_abstract and m.is_public and any(k in m.name.lower() for k in ("template", "execute", "run"))
        ),
        None,
    )
    if not (cls.is_abstract and abstract_methods and template is not None):
        return None

    return _detection(
        "template-method",
        "behavioral",
        "high",
        ["抽象クラス", f"{len(abstract_methods)}個の抽象メソッド", f"テンプレートメソッド: {template.name}"],
        cls.name,
        method_name=template.name,
        line=template.line,
    )


@_per_class("behavioral", "command")
def detect_command(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    names = {m.name for m in _methods(cls)}
    has_undo = "undo" in names
    is_command = _name_has(cls, "command")
    if not ("execute" in names and (is_command or has_undo)):
        return None

    evidence = ["execute()メソッド"]
    if has_undo:
        evidence.append("undo()メソッド")
    if is_command:
        evidence.append("名前に'Command'を含む")
    return _detection("command", "behavioral", "high", evidence, cls.name, line=cls.line)


@_per_class("behavioral", "state")
def detect_state(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    has_state_field = any("state" in f.type.lower() for f in cls.fields)
    has_transition = _has_method(cls, "state", "transition")
    is_state_interface = cls.is_interface and _name_has(cls, "state")

    if not (is_state_interface or (has_state_field and has_transition)):
        return None

    evidence: list[str] = []
    if is_state_interface:
        evidence.append("Stateインターフェース")
    if has_state_field:
        evidence.append("状態オブジェクトのフィールド")
    if has_transition:
        evidence.append("状態遷移メソッド")
    return _detection("state", "behavioral", "medium", evidence, cls.name, line=cls.line)


@_per_class("behavioral", "iterator")
def detect_iterator(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    implements_iterator = "Iterator" in cls.implements
    names = {m.name for m in _methods(cls)}
    has_protocol = "next" in names and "hasNext" in names

    if not (implements_iterator or has_protocol):
        return None

    evidence: list[str] = []
    if implements_iterator:
        evidence.append("Iteratorを実装")
    if has_protocol:
        evidence.append("next()とhasNext()メソッド")
    confidence: Confidence = "high" if len(evidence) >= 2 else "medium"
    return _detection("iterator", "behavioral", confidence, evidence, cls.name, line=cls.line)


@_per_class("behavioral", "chain-of-responsibility")
def detect_chain_of_responsibility(
    cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool
) -> JavaDetection | None:
    has_next = any("handler" in f.type.lower() or "next" in f.name.lower() for f in cls.fields)
    if not (has_next and _has_method(cls, "handle", "process")):
        return None

    return _detection(
        "chain-of-responsibility",
        "behavioral",
        "medium",
        ["次のハンドラへの参照フィールド", "handle/processメソッド"],
        cls.name,
        line=cls.line,
    )


@_per_class("behavioral", "mediator")
def detect_mediator(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    has_colleagues = any(_is_collection(f.type) for f in cls.fields)
    if not (_name_has(cls, "mediator") and has_colleagues and _has_method(cls, "notify", "mediate")):
        return None

    return _detection(
        "mediator",
        "behavioral",
        "medium",
        ["名前に'Mediator'を含む", "同僚オブジェクトのコレクション", "notify/mediateメソッド"],
        cls.name,
        line=cls.line,
    )


@_per_class("behavioral", "memento")
def detect_memento(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    has_state = any(f.is_private and f.is_final for f in cls.fields)
    if not (_name_has(cls, "memento") and has_state):
        return None

    evidence = ["名前に'Memento'を含む", "状態を保持するprivate finalフィールド"]
    if any("caretaker" in c.name.lower() for c in classes):
        evidence.append("Caretakerクラスが存在")
    return _detection("memento", "behavioral", "medium", evidence, cls.name, line=cls.line)


@_per_class("behavioral", "visitor")
def detect_visitor(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    is_visitor = _name_has(cls, "visitor")
    visit_methods = [m for m in _methods(cls) if m.name.startswith("visit")]
    has_accept = any(m.name == "accept" for m in _methods(cls))

    if not ((is_visitor and len(visit_methods) >= 2) or has_accept):
        return None

    evidence: list[str] = []
    if is_visitor:
        evidence.append("名前に'Visitor'を含む")
    if len(visit_methods) >= 2:
        evidence.append(f"{len(visit_methods)}個のvisitメソッド")
    if has_accept:
        evidence.append("accept()メソッド")
    return _detection("visitor", "behavioral", "low", evidence, cls.name, line=cls.line)


@_per_class("behavioral", "interpreter")
def detect_interpreter(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    if not (_has_method(cls, "interpret", "evaluate") and _name_has(cls, "expression")):
        return None

    return _detection(
        "interpreter",
        "behavioral",
        "low",
        ["interpret/evaluateメソッド", "名前に'Expression'を含む"],
        cls.name,
        line=cls.line,
    )


# --- Enterprise ---


@_per_class("enterprise", "dao")
def detect_dao(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    score = crud_score(cls)
    if not (_name_has(cls, "dao", "dataaccess") and score >= 3):
        return None

    antipatterns: list[str] = []
    if detect_antipatterns and not cls.is_interface:
        antipatterns.append("DAOはインターフェースとして定義すべき")

    return _detection(
        "dao",
        "enterprise",
        "high",
        ["名前に'DAO'を含む", f"{score}種類のCRUD操作", "データアクセスの抽象化"],
        cls.name,
        line=cls.line,
        antipatterns=antipatterns,
    )


@_per_class("enterprise", "repository")
def detect_repository(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    is_repository = _name_has(cls, "repository")
    extends_repository = cls.extends is not None and "Repository" in cls.extends
    has_domain_methods = any(
        m.name.startswith("findBy") or m.name.startswith("getBy") or m.name in ("save", "delete") for m in _methods(cls)
    )

    if not (is_repository or extends_repository):
        return None

    evidence: list[str] = []
    if is_repository:
        evidence.append("名前に'Repository'を含む")
    if extends_repository:
        evidence.append(f"{cls.extends}を継承")
    if has_domain_methods:
        evidence.append("ドメイン操作メソッド（findBy/save等）")

    antipatterns: list[str] = []
    if detect_antipatterns and not cls.is_interface and not extends_repository:
        antipatterns.append("Repositoryはインターフェースとして定義すべき")

    return _detection(
        "repository",
        "enterprise",
        "high" if len(evidence) >= 2 else "medium",
        evidence,
        cls.name,
        line=cls.line,
        antipatterns=antipatterns,
    )


def _is_accessor_or_protocol(method: MethodModel) -> bool:
    return method.name.startswith(_ACCESSOR_PREFIXES) or method.name in _OBJECT_PROTOCOL_METHODS


@_per_class("enterprise", "dto")
def detect_dto(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    is_dto = _name_has(cls, "dto", "data")
    methods = _methods(cls)
    only_accessors = all(m.name.startswith(_ACCESSOR_PREFIXES) for m in methods)
    # アクセサとオブジェクトプロトコル以外のメソッドは全てビジネスロジックとみなす
    no_business_logic = all(_is_accessor_or_protocol(m) for m in methods)

    if not ((is_dto or (only_accessors and len(cls.fields) >= 2 and no_business_logic)) and cls.fields):
        return None

    evidence: list[str] = []
    if is_dto:
        evidence.append("名前に'DTO'または'Data'を含む")
    if only_accessors:
        evidence.append("getter/setterのみ")
    evidence.append(f"{len(cls.fields)}個のデータフィールド")
    if no_business_logic:
        evidence.append("ビジネスロジックなし")

    antipatterns: list[str] = []
    if detect_antipatterns and not no_business_logic:
        antipatterns.append("DTOはビジネスロジックを持つべきではない")

    return _detection("dto", "enterprise", "high", evidence, cls.name, line=cls.line, antipatterns=antipatterns)


@_per_class("enterprise", "service-layer")
def detect_service_layer(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    is_service = _name_has(cls, "service") or "Service" in cls.annotations
    business_methods = _public_instance_methods(cls)
    dependencies = _instance_fields(cls)

    if not (is_service and len(business_methods) >= 2):
        return None

    evidence = ["名前に'Service'を含む、または@Service", f"{len(business_methods)}個のビジネスメソッド"]
    if dependencies:
        evidence.append(f"{len(dependencies)}個の依存オブジェクトを統括")

    antipatterns: list[str] = []
    if detect_antipatterns:
        if any(not f.is_final for f in dependencies):
            antipatterns.append("依存フィールドはfinal（不変）にすべき")
        if any("dao" in f.type.lower() for f in cls.fields):
            antipatterns.append("サービス層はDAOではなくRepositoryに依存すべき")

    return _detection(
        "service-layer", "enterprise", "high", evidence, cls.name, line=cls.line, antipatterns=antipatterns
    )


@_per_class("enterprise", "value-object")
def detect_value_object(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    names = {m.name for m in _methods(cls)}
    all_final = all(f.is_final or f.is_static for f in cls.fields)
    has_equality = "equals" in names and "hashCode" in names
    no_setters = not any(n.startswith("set") for n in names)

    if not (cls.fields and all_final and has_equality and no_setters):
        return None

    return _detection(
        "value-object",
        "enterprise",
        "high",
        ["全フィールドがfinal（不変）", "equals/hashCodeを実装", "setterなし"],
        cls.name,
        line=cls.line,
    )


@_per_class("enterprise", "data-mapper")
def detect_data_mapper(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    mapping = [m for m in _methods(cls) if any(k in m.name.lower() for k in ("map", "to", "from"))]
    if not (_name_has(cls, "mapper") and len(mapping) >= 2):
        return None

    return _detection(
        "data-mapper",
        "enterprise",
        "medium",
        ["名前に'Mapper'を含む", f"{len(mapping)}個の変換メソッド"],
        cls.name,
        line=cls.line,
    )


@_per_class("enterprise", "active-record")
def detect_active_record(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    has_save = any(m.name == "save" and not m.is_static for m in _methods(cls))
    if not (crud_score(cls) >= 2 and cls.fields and has_save):
        return None

    return _detection(
        "active-record",
        "enterprise",
        "medium",
        ["ドメインデータを保持", "オブジェクト自身がCRUD操作を持つ", "非staticなsave()メソッド"],
        cls.name,
        line=cls.line,
    )


# --- Architectural ---


@_per_unit("architectural", "mvc")
def detect_mvc(classes: list[ClassModel], detect_antipatterns: bool) -> list[JavaDetection]:
    controllers = [
        c
        for c in classes
        if _name_has(c, "controller") or "Controller" in c.annotations or "RestController" in c.annotations
    ]
    models = [c for c in classes if _name_has(c, "model") or "Entity" in c.annotations]
    views = [c for c in classes if _name_has(c, "view")]

    if not (controllers and models):
        return []

    return [
        _detection(
            "mvc",
            "architectural",
            "high",
            [
                f"{len(controllers)}個のController",
                f"{len(models)}個のModel",
                f"{len(views)}個のView" if views else "View（テンプレート側）",
            ],
        )
    ]


@_per_unit("architectural", "front-controller")
def detect_front_controller(classes: list[ClassModel], detect_antipatterns: bool) -> list[JavaDetection]:
    detections: list[JavaDetection] = []
    for cls in classes:
        annotated = [a for a in cls.annotations if a in ("ControllerAdvice", "WebFilter")]
        named = _name_has(cls, "dispatcherservlet", "frontcontroller")
        if not (annotated or named):
            continue

        evidence: list[str] = []
        if annotated:
            evidence.append(f"アノテーション: {', '.join(annotated)}")
        if named:
            evidence.append("名前がFrontController/DispatcherServletを示す")
        evidence.append("リクエストの集中的な入口")
        detections.append(_detection("front-controller", "architectural", "high", evidence, cls.name, line=cls.line))
    return detections


@_per_unit("architectural", "business-delegate")
def detect_business_delegate(classes: list[ClassModel], detect_antipatterns: bool) -> list[JavaDetection]:
    detections: list[JavaDetection] = []
    for cls in classes:
        if not _name_has(cls, "delegate"):
            continue
        services = [f for f in cls.fields if any(k in f.type.lower() for k in ("service", "locator", "lookup"))]
        if not services:
            continue

        detections.append(
            _detection(
                "business-delegate",
                "architectural",
                "medium",
                ["名前に'Delegate'を含む", f"ビジネスサービスへの参照: {', '.join(f.type for f in services)}"],
                cls.name,
                line=cls.line,
            )
        )
    return detections


@_per_unit("architectural", "session-facade")
def detect_session_facade(classes: list[ClassModel], detect_antipatterns: bool) -> list[JavaDetection]:
    detections: list[JavaDetection] = []
    for cls in classes:
        session_annotations = [a for a in cls.annotations if a in ("Stateless", "Stateful")]
        is_facade = _name_has(cls, "facade")
        if session_annotations and is_facade:
            evidence = [f"セッションBeanアノテーション: {', '.join(session_annotations)}", "名前に'Facade'を含む"]
            detections.append(_detection("session-facade", "architectural", "high", evidence, cls.name, line=cls.line))
        elif _name_has(cls, "sessionfacade"):
            evidence = ["名前に'SessionFacade'を含む", f"{len(_public_instance_methods(cls))}個の粗粒度メソッド"]
            detections.append(_detection("session-facade", "architectural", "medium", evidence, cls.name, line=cls.line))
    return detections


@_per_unit("architectural", "service-locator")
def detect_service_locator(classes: list[ClassModel], detect_antipatterns: bool) -> list[JavaDetection]:
    detections: list[JavaDetection] = []
    for cls in classes:
        if not _name_has(cls, "servicelocator", "servicefactory"):
            continue

        antipatterns: list[str] = []
        if detect_antipatterns:
            antipatterns.append("Service Locatorは現代的なJavaではアンチパターン。依存性注入を使うべき")

        detections.append(
            _detection(
                "service-locator",
                "architectural",
                "medium",
                ["名前に'ServiceLocator'を含む", "サービス参照の取得を集中管理"],
                cls.name,
                line=cls.line,
                antipatterns=antipatterns,
            )
        )
    return detections


@_per_unit("architectural", "transfer-object-assembler")
def detect_transfer_object_assembler(classes: list[ClassModel], detect_antipatterns: bool) -> list[JavaDetection]:
    detections: list[JavaDetection] = []
    for cls in classes:
        if not _name_has(cls, "assembler"):
            continue
        builders = [
            m
            for m in _methods(cls)
            if m.return_type is not None and ("dto" in m.return_type.lower() or m.return_type.endswith("TO"))
        ]
        if not builders:
            continue

        detections.append(
            _detection(
                "transfer-object-assembler",
                "architectural",
                "medium",
                ["名前に'Assembler'を含む", f"転送オブジェクトを組み立てるメソッド: {', '.join(m.name for m in builders)}"],
                cls.name,
                line=cls.line,
            )
        )
    return detections


@_per_unit("architectural", "composite-entity")
def detect_composite_entity(classes: list[ClassModel], detect_antipatterns: bool) -> list[JavaDetection]:
    entity_names = {c.name for c in classes if "Entity" in c.annotations}
    detections: list[JavaDetection] = []
    for cls in classes:
        if cls.name not in entity_names:
            continue
        dependents = [f for f in _instance_fields(cls) if f.type in entity_names and f.type != cls.name]
        if len(dependents) < 2:
            continue

        detections.append(
            _detection(
                "composite-entity",
                "architectural",
                "low",
                ["@Entityクラス", f"{len(dependents)}個の依存エンティティを保持"],
                cls.name,
                line=cls.line,
            )
        )
    return detections


# --- Modern ---


def _has_annotation(field: FieldModel, *names: str) -> bool:
    return any(n in field.modifiers for n in names)


@_per_class("modern", "dependency-injection")
def detect_dependency_injection(
    cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool
) -> JavaDetection | None:
    has_autowired = any(_has_annotation(f, "Autowired") for f in cls.fields) or "Autowired" in cls.annotations
    has_inject = "Inject" in cls.annotations or any(_has_annotation(f, "Inject") for f in cls.fields)
    final_fields = [f for f in _instance_fields(cls) if f.is_final]
    has_constructor_injection = any(m.parameters for m in _constructors(cls)) and bool(final_fields)

    if not (has_autowired or has_inject or has_constructor_injection):
        return None

    evidence: list[str] = []
    if has_autowired:
        evidence.append("@Autowired")
    if has_inject:
        evidence.append("@Inject")
    if has_constructor_injection:
        evidence.append("finalフィールドへのコンストラクタインジェクション")
    injected = [f for f in cls.fields if _has_annotation(f, "Autowired", "Inject") or (f.is_final and not f.is_static)]
    if injected:
        evidence.append(f"{len(injected)}個の注入されるフィールド")

    antipatterns: list[str] = []
    if detect_antipatterns and has_autowired and not has_constructor_injection:
        antipatterns.append("フィールドインジェクション（@Autowired）よりコンストラクタインジェクションを推奨")

    return _detection(
        "dependency-injection",
        "modern",
        "high" if len(evidence) >= 2 else "medium",
        evidence,
        cls.name,
        line=cls.line,
        antipatterns=antipatterns,
    )


@_per_class("modern", "circuit-breaker")
def detect_circuit_breaker(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    breaker_annotations = ("CircuitBreaker", "HystrixCommand")
    class_annotated = any(a in cls.annotations for a in breaker_annotations)
    guarded = [m.name for m in _methods(cls) if any(a in m.annotations for a in breaker_annotations)]
    annotated = class_annotated or bool(guarded)
    named = _name_has(cls, "circuitbreaker")
    field_names = {f.name for f in cls.fields}
    has_states = any("state" in f.type.lower() for f in cls.fields) and bool(
        field_names & {"OPEN", "CLOSED", "HALF_OPEN"}
    )

    if not (annotated or named or has_states):
        return None

    evidence: list[str] = []
    if annotated:
        evidence.append("@CircuitBreakerまたは@HystrixCommandアノテーション")
        evidence.append("クラス全体を保護" if class_annotated else f"保護対象メソッド: {', '.join(guarded)}")
    if named:
        evidence.append("名前に'CircuitBreaker'を含む")
    if has_states:
        evidence.append("OPEN/CLOSED/HALF_OPENの状態")
    return _detection("circuit-breaker", "modern", "high" if annotated else "medium", evidence, cls.name, line=cls.line)


@_per_class("modern", "saga")
def detect_saga(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    compensations = [m for m in _methods(cls) if any(k in m.name.lower() for k in ("compensate", "rollback"))]
    if not (_name_has(cls, "saga") and compensations):
        return None

    return _detection(
        "saga",
        "modern",
        "medium",
        ["名前に'Saga'を含む", f"補償処理メソッド: {', '.join(m.name for m in compensations)}"],
        cls.name,
        line=cls.line,
    )


@_per_class("modern", "cqrs")
def detect_cqrs(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    methods = _methods(cls)
    is_command = _name_has(cls, "command") and not any(m.return_type != "void" for m in methods)
    is_query = _name_has(cls, "query") and any(m.return_type != "void" for m in methods)

    if not (is_command or is_query):
        return None

    evidence: list[str] = []
    if is_command:
        evidence.append("Command（書き込み操作、戻り値なし）")
    if is_query:
        evidence.append("Query（読み取り操作、データを返す）")
    evidence.append("コマンドとクエリの責務分離")
    return _detection("cqrs", "modern", "medium", evidence, cls.name, line=cls.line)


@_per_class("modern", "event-sourcing")
def detect_event_sourcing(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    is_event = _name_has(cls, "event")
    is_store = _name_has(cls, "eventstore")
    if not ((is_event or is_store) and _has_method(cls, "apply")):
        return None

    evidence: list[str] = []
    if is_event:
        evidence.append("Eventクラス")
    if is_store:
        evidence.append("EventStore")
    evidence.append("状態を再構築するapply()メソッド")
    return _detection("event-sourcing", "modern", "medium", evidence, cls.name, line=cls.line)


@_per_class("modern", "unit-of-work")
def detect_unit_of_work(cls: ClassModel, classes: list[ClassModel], detect_antipatterns: bool) -> JavaDetection | None:
    names = {m.name for m in _methods(cls)}
    named = _name_has(cls, "unitofwork")
    has_transaction = "commit" in names and "rollback" in names
    has_registration = any(n.startswith("register") for n in names)

    if not (named or (has_transaction and has_registration)):
        return None

    evidence: list[str] = []
    if named:
        evidence.append("名前に'UnitOfWork'を含む")
    if has_transaction:
        evidence.append("commit()とrollback()メソッド")
    if has_registration:
        evidence.append("変更対象の登録メソッド（register*）")
    return _detection("unit-of-work", "modern", "medium", evidence, cls.name, line=cls.line)
