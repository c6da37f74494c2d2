"""ルール設定スキーマのユニットテスト。"""

import pytest
from pydantic import ValidationError

from pattern_police.models.rules import JavaRuleConfig, TypeScriptRuleConfig, VueRuleConfig


class TestTypeScriptRuleConfig:
    def test_defaults(self) -> None:
        config = TypeScriptRuleConfig()
        assert config.rules.solid.max_parameters == 5
        assert config.rules.solid.max_class_methods == 10
        assert config.rules.solid.max_function_lines == 50
        assert config.rules.naming.enabled

    def test_partial_yaml_keeps_other_defaults(self) -> None:
        config = TypeScriptRuleConfig.model_validate({"rules": {"solid": {"max_parameters": 3}}})
        assert config.rules.solid.max_parameters == 3
        assert config.rules.solid.max_class_methods == 10

    def test_rejects_non_positive_threshold(self) -> None:
        with pytest.raises(ValidationError):
            TypeScriptRuleConfig.model_validate({"rules": {"solid": {"max_parameters": 0}}})

    def test_rejects_unknown_keys(self) -> None:
        with pytest.raises(ValidationError):
            TypeScriptRuleConfig.model_validate({"rules": {"solid": {"max_params": 3}}})

    def test_is_frozen(self) -> None:
        config = TypeScriptRuleConfig()
        with pytest.raises(ValidationError):
            config.rules.solid.max_parameters = 1  # type: ignore[misc]


class TestJavaRuleConfig:
    def test_omitted_rule_is_disabled(self) -> None:
        config = JavaRuleConfig.model_validate({"rules": {"creational": {"singleton": {"enabled": True}}}})
        assert config.rule_for("creational", "singleton").enabled
        assert not config.rule_for("creational", "builder").enabled

    def test_rule_for_maps_kebab_case(self) -> None:
        config = JavaRuleConfig.model_validate(
            {"rules": {"behavioral": {"chain_of_responsibility": {"enabled": True, "severity": "warning"}}}}
        )
        rule = config.rule_for("behavioral", "chain-of-responsibility")
        assert rule.enabled
        assert rule.severity == "warning"

    def test_rejects_invalid_severity(self) -> None:
        with pytest.raises(ValidationError):
            JavaRuleConfig.model_validate({"rules": {"modern": {"saga": {"severity": "fatal"}}}})


class TestVueRuleConfig:
    def test_defaults(self) -> None:
        config = VueRuleConfig()
        assert config.rules.components.max_component_size == 300
        assert config.rules.best_practices.severity == "info"
        assert config.rules.anti_patterns.detect_mixins

    def test_detection_sections_have_no_severity(self) -> None:
        # composables/componentsは検出のみを返すため重大度を持たない
        with pytest.raises(ValidationError):
            VueRuleConfig.model_validate({"rules": {"composables": {"severity": "error"}}})
        with pytest.raises(ValidationError):
            VueRuleConfig.model_validate({"rules": {"components": {"severity": "error"}}})
