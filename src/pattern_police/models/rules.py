"""ルール設定のスキーマ定義（YAMLから読み込み）。

全てのルールキーに既定値を持たせ、起動時に一度だけ検証する。
評価時にキーの有無を確認する必要はない。
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from pattern_police.models.java import JavaPatternCategory, JavaPatternName
from pattern_police.models.validation import Severity


class _RuleModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# --- TypeScript / JavaScript ---


NamingStyle = Literal["PascalCase", "camelCase", "UPPER_CASE", "snake_case"]


class NamingPatterns(_RuleModel):
    """識別子の種類ごとの命名スタイル。

    functionsはメソッドにも適用する。
    下線を含むconst名はconstantsまたはvariablesのどちらかに合えばよい。
    """

    classes: NamingStyle = "PascalCase"
    functions: NamingStyle = "camelCase"
    constants: NamingStyle = "UPPER_CASE"
    variables: NamingStyle = "camelCase"


class NamingRules(_RuleModel):
    enabled: bool = True
    severity: Severity = "warning"
    patterns: NamingPatterns = Field(default_factory=NamingPatterns)


class SolidRules(_RuleModel):
    enabled: bool = True
    severity: Severity = "warning"
    max_function_lines: int = Field(default=50, gt=0)
    max_class_methods: int = Field(default=10, gt=0)
    max_parameters: int = Field(default=5, gt=0)


class CodeSmellRules(_RuleModel):
    enabled: bool = True
    severity: Severity = "warning"
    detect_duplication: bool = True
    detect_long_methods: bool = True
    detect_god_classes: bool = True
    detect_dead_code: bool = True


class TypeScriptRules(_RuleModel):
    naming: NamingRules = Field(default_factory=NamingRules)
    solid: SolidRules = Field(default_factory=SolidRules)
    code_smells: CodeSmellRules = Field(default_factory=CodeSmellRules)


class TypeScriptRuleConfig(_RuleModel):
    rules: TypeScriptRules = Field(default_factory=TypeScriptRules)


# --- Java ---


class PatternRule(_RuleModel):
    """Javaパターン1件分の設定。YAMLで省略されたルールは無効扱いになる。"""

    enabled: bool = False
    severity: Severity = "info"
    detect_antipatterns: bool = False


class CreationalRules(_RuleModel):
    singleton: PatternRule = Field(default_factory=PatternRule)
    builder: PatternRule = Field(default_factory=PatternRule)
    factory_method: PatternRule = Field(default_factory=PatternRule)
    abstract_factory: PatternRule = Field(default_factory=PatternRule)
    prototype: PatternRule = Field(default_factory=PatternRule)


class StructuralRules(_RuleModel):
    adapter: PatternRule = Field(default_factory=PatternRule)
    decorator: PatternRule = Field(default_factory=PatternRule)
    facade: PatternRule = Field(default_factory=PatternRule)
    proxy: PatternRule = Field(default_factory=PatternRule)
    composite: PatternRule = Field(default_factory=PatternRule)
    bridge: PatternRule = Field(default_factory=PatternRule)
    flyweight: PatternRule = Field(default_factory=PatternRule)


class BehavioralRules(_RuleModel):
    observer: PatternRule = Field(default_factory=PatternRule)
    strategy: PatternRule = Field(default_factory=PatternRule)
    template_method: PatternRule = Field(default_factory=PatternRule)
    command: PatternRule = Field(default_factory=PatternRule)
    state: PatternRule = Field(default_factory=PatternRule)
    iterator: PatternRule = Field(default_factory=PatternRule)
    chain_of_responsibility: PatternRule = Field(default_factory=PatternRule)
    mediator: PatternRule = Field(default_factory=PatternRule)
    memento: PatternRule = Field(default_factory=PatternRule)
    visitor: PatternRule = Field(default_factory=PatternRule)
    interpreter: PatternRule = Field(default_factory=PatternRule)


class EnterpriseRules(_RuleModel):
    dao: PatternRule = Field(default_factory=PatternRule)
    repository: PatternRule = Field(default_factory=PatternRule)
    dto: PatternRule = Field(default_factory=PatternRule)
    service_layer: PatternRule = Field(default_factory=PatternRule)
    value_object: PatternRule = Field(default_factory=PatternRule)
    data_mapper: PatternRule = Field(default_factory=PatternRule)
    active_record: PatternRule = Field(default_factory=PatternRule)


class ArchitecturalRules(_RuleModel):
    mvc: PatternRule = Field(default_factory=PatternRule)
    front_controller: PatternRule = Field(default_factory=PatternRule)
    business_delegate: PatternRule = Field(default_factory=PatternRule)
    session_facade: PatternRule = Field(default_factory=PatternRule)
    service_locator: PatternRule = Field(default_factory=PatternRule)
    transfer_object_assembler: PatternRule = Field(default_factory=PatternRule)
    composite_entity: PatternRule = Field(default_factory=PatternRule)


class ModernRules(_RuleModel):
    dependency_injection: PatternRule = Field(default_factory=PatternRule)
    circuit_breaker: PatternRule = Field(default_factory=PatternRule)
    saga: PatternRule = Field(default_factory=PatternRule)
    cqrs: PatternRule = Field(default_factory=PatternRule)
    event_sourcing: PatternRule = Field(default_factory=PatternRule)
    unit_of_work: PatternRule = Field(default_factory=PatternRule)


class JavaRules(_RuleModel):
    creational: CreationalRules = Field(default_factory=CreationalRules)
    structural: StructuralRules = Field(default_factory=StructuralRules)
    behavioral: BehavioralRules = Field(default_factory=BehavioralRules)
    enterprise: EnterpriseRules = Field(default_factory=EnterpriseRules)
    architectural: ArchitecturalRules = Field(default_factory=ArchitecturalRules)
    modern: ModernRules = Field(default_factory=ModernRules)


class JavaRuleConfig(_RuleModel):
    rules: JavaRules = Field(default_factory=JavaRules)

    def rule_for(self, category: JavaPatternCategory, pattern: JavaPatternName) -> PatternRule:
        """パターンID（kebab-case）に対応するルール設定を返す。"""
        category_rules = getattr(self.rules, category)
        rule: PatternRule = getattr(category_rules, pattern.replace("-", "_"))
        return rule


# --- Vue ---


class ComposableRules(_RuleModel):
    enabled: bool = True
    enforce_naming: bool = True
    enforce_return_reactive: bool = True


class ComponentRules(_RuleModel):
    enabled: bool = True
    enforce_smart_dumb: bool = True
    max_component_size: int = Field(default=300, gt=0)


class AntiPatternRules(_RuleModel):
    enabled: bool = True
    severity: Severity = "warning"
    detect_mixins: bool = True
    detect_v_if_v_for: bool = True
    detect_prop_mutation: bool = True
    detect_parent_access: bool = True


class BestPracticeRules(_RuleModel):
    enabled: bool = True
    severity: Severity = "info"
    enforce_prop_validation: bool = True
    enforce_event_naming: bool = True
    enforce_script_setup: bool = True


class TemplateRules(_RuleModel):
    enabled: bool = True
    severity: Severity = "warning"
    enforce_v_for_key: bool = True


class VueRules(_RuleModel):
    composables: ComposableRules = Field(default_factory=ComposableRules)
    components: ComponentRules = Field(default_factory=ComponentRules)
    anti_patterns: AntiPatternRules = Field(default_factory=AntiPatternRules)
    best_practices: BestPracticeRules = Field(default_factory=BestPracticeRules)
    template: TemplateRules = Field(default_factory=TemplateRules)


class VueRuleConfig(_RuleModel):
    rules: VueRules = Field(default_factory=VueRules)
