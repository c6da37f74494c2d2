"""テスト共通フィクスチャ。"""

from pathlib import Path

import pytest

from pattern_police.config import ServerConfig
from pattern_police.models.rules import JavaRuleConfig, TypeScriptRuleConfig, VueRuleConfig
from pattern_police.services.validation import ValidationService
from pattern_police.validators.java import JavaPatternValidator
from pattern_police.validators.typescript import TypeScriptValidator
from pattern_police.validators.vue import VuePatternValidator

_JAVA_CATEGORIES = {
    "creational": ["singleton", "builder", "factory_method", "abstract_factory", "prototype"],
    "structural": ["adapter", "decorator", "facade", "proxy", "composite", "bridge", "flyweight"],
    "behavioral": [
        "observer",
        "strategy",
        "template_method",
        "command",
        "state",
        "iterator",
        "chain_of_responsibility",
        "mediator",
        "memento",
        "visitor",
        "interpreter",
    ],
    "enterprise": ["dao", "repository", "dto", "service_layer", "value_object", "data_mapper", "active_record"],
    "architectural": [
        "mvc",
        "front_controller",
        "business_delegate",
        "session_facade",
        "service_locator",
        "transfer_object_assembler",
        "composite_entity",
    ],
    "modern": ["dependency_injection", "circuit_breaker", "saga", "cqrs", "event_sourcing", "unit_of_work"],
}


def java_config(*enabled: str, detect_antipatterns: bool = True) -> JavaRuleConfig:
    """指定したルール（snake_case、省略時は全ルール）を有効にしたJava設定。"""
    rules: dict[str, dict[str, dict[str, object]]] = {}
    for category, names in _JAVA_CATEGORIES.items():
        rules[category] = {
            name: {"enabled": True, "severity": "info", "detect_antipatterns": detect_antipatterns}
            for name in names
            if not enabled or name in enabled
        }
    return JavaRuleConfig.model_validate({"rules": rules})


@pytest.fixture
def config_dir() -> Path:
    """設定ファイルディレクトリ。"""
    return Path(__file__).parent.parent / "config"


@pytest.fixture
def validation_service(config_dir: Path) -> ValidationService:
    """リポジトリ同梱の設定を使うValidationService。"""
    return ValidationService(config_dir=config_dir)


@pytest.fixture
def server_config(config_dir: Path) -> ServerConfig:
    """テスト用ServerConfig。"""
    return ServerConfig(config_dir=config_dir)


@pytest.fixture
def typescript_validator() -> TypeScriptValidator:
    """既定ルールのTypeScriptValidator。"""
    return TypeScriptValidator(TypeScriptRuleConfig())


@pytest.fixture
def java_validator() -> JavaPatternValidator:
    """全ルールを有効にしたJavaPatternValidator。"""
    return JavaPatternValidator(java_config())


@pytest.fixture
def vue_validator() -> VuePatternValidator:
    """既定ルールのVuePatternValidator。"""
    return VuePatternValidator(VueRuleConfig())
