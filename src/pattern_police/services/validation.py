"""言語別バリデータの保持とコード・ファイル検証を行うサービス。"""

import asyncio
import logging
from pathlib import Path
from typing import Any

from pattern_police.config import load_catalog, load_rule_config
from pattern_police.models.errors import (
    ConfigurationMissingError,
    FileReadError,
    InputShapeMismatchError,
    RuleConfigError,
    UnsupportedLanguageError,
    ValidatorUnavailableError,
)
from pattern_police.models.java import JavaReport
from pattern_police.models.rules import JavaRuleConfig, TypeScriptRuleConfig, VueRuleConfig
from pattern_police.models.validation import Severity, TypeScriptReport
from pattern_police.models.vue import VueReport
from pattern_police.validators.java import JavaPatternValidator
from pattern_police.validators.java_rules import RULES
from pattern_police.validators.typescript import TypeScriptValidator
from pattern_police.validators.vue import VuePatternValidator

logger = logging.getLogger(__name__)

TYPESCRIPT_RULES_FILE = "typescript.yaml"
JAVA_RULES_FILE = "java.yaml"
VUE_RULES_FILE = "vue.yaml"

# validate(language=...)で受け付ける言語名
_TYPESCRIPT_ALIASES = {"typescript", "javascript", "ts", "js", "tsx", "jsx"}

# ファイルパスではなくコード本文が渡されたことを示す断片
_MARKUP_FRAGMENTS = ("<template", "<script")


class ValidationService:
    """TypeScript・Java・Vueの各バリデータを保持し、検証要求を振り分ける。

    TypeScriptのルール設定は必須（不正なら起動失敗）。
    Java・Vueは任意で、設定を読めなければそのバリデータだけを無効化する。
    """

    def __init__(self, config_dir: Path) -> None:
        self.config_dir = config_dir

        try:
            typescript_config = load_rule_config(config_dir, TYPESCRIPT_RULES_FILE, TypeScriptRuleConfig)
        except ConfigurationMissingError:
            logger.info("%s not found, using default TypeScript rules", TYPESCRIPT_RULES_FILE)
            typescript_config = TypeScriptRuleConfig()
        self._typescript = TypeScriptValidator(typescript_config)

        self._java: JavaPatternValidator | None = None
        try:
            self._java = JavaPatternValidator(load_rule_config(config_dir, JAVA_RULES_FILE, JavaRuleConfig))
        except (ConfigurationMissingError, RuleConfigError) as e:
            logger.warning("Java validator disabled: %s", e)

        self._vue: VuePatternValidator | None = None
        try:
            self._vue = VuePatternValidator(load_rule_config(config_dir, VUE_RULES_FILE, VueRuleConfig))
        except (ConfigurationMissingError, RuleConfigError) as e:
            logger.warning("Vue validator disabled: %s", e)

        logger.info(
            "Validators ready: typescript=enabled, java=%s, vue=%s",
            "enabled" if self._java else "disabled",
            "enabled" if self._vue else "disabled",
        )

    @property
    def java_available(self) -> bool:
        return self._java is not None

    @property
    def vue_available(self) -> bool:
        return self._vue is not None

    def _java_validator(self) -> JavaPatternValidator:
        if self._java is None:
            raise ValidatorUnavailableError("Java", JAVA_RULES_FILE)
        return self._java

    def _vue_validator(self) -> VuePatternValidator:
        if self._vue is None:
            raise ValidatorUnavailableError("Vue", VUE_RULES_FILE)
        return self._vue

    # --- コード検証 ---

    def validate_typescript(self, code: str, filename: str | None = None) -> TypeScriptReport:
        return self._typescript.validate(code, filename or "unknown.ts")

    def validate_java(self, code: str, filename: str | None = None) -> JavaReport:
        return self._java_validator().validate(code, filename or "Unknown.java")

    def validate_vue(self, code: str, filename: str | None = None) -> VueReport:
        return self._vue_validator().validate(code, filename or "Component.vue")

    def validate(
        self, language: str, code: str, filename: str | None = None
    ) -> TypeScriptReport | JavaReport | VueReport:
        """言語名に応じたバリデータで検証する。

        Raises:
            UnsupportedLanguageError: 対応していない言語の場合。
            ValidatorUnavailableError: 対象バリデータが無効化されている場合。
        """
        normalized = language.strip().lower()
        if normalized in _TYPESCRIPT_ALIASES:
            return self.validate_typescript(code, filename)
        if normalized == "java":
            return self.validate_java(code, filename)
        if normalized == "vue":
            return self.validate_vue(code, filename)
        raise UnsupportedLanguageError(language)

    # --- ファイル検証 ---

    async def validate_typescript_file(self, filepath: str) -> TypeScriptReport:
        code = await self._read_source(filepath)
        return self.validate_typescript(code, filepath)

    async def validate_java_file(self, filepath: str) -> JavaReport:
        validator = self._java_validator()
        code = await self._read_source(filepath)
        return validator.validate(code, filepath)

    async def validate_vue_file(self, filepath: str) -> VueReport:
        """Vueファイルを読み込んで検証する。

        Raises:
            InputShapeMismatchError: filepathにSFCのマークアップが含まれている場合。
        """
        if any(fragment in filepath for fragment in _MARKUP_FRAGMENTS):
            raise InputShapeMismatchError("validate_vue_file", "validate_vue_code")
        validator = self._vue_validator()
        code = await self._read_source(filepath)
        return validator.validate(code, filepath)

    async def _read_source(self, filepath: str) -> str:
        path = Path(filepath)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", filepath, e)
            raise FileReadError(filepath, str(e)) from e

    # --- カタログ ---

    def list_typescript_rules(self) -> dict[str, Any]:
        """有効なTypeScriptルール設定を返す。"""
        return self._typescript.config.model_dump()

    def list_java_patterns(self) -> list[dict[str, Any]]:
        """Javaパターンカタログにルールごとの有効/重大度を付けて返す。"""
        config = self._java_validator().config
        catalog = load_catalog(self.config_dir, "java-patterns.yaml").get("patterns", {})

        patterns: list[dict[str, Any]] = []
        for rule in RULES:
            rule_config = config.rule_for(rule.category, rule.pattern)
            entry = catalog.get(rule.pattern, {})
            patterns.append(
                {
                    "pattern": rule.pattern,
                    "name": entry.get("name", rule.pattern),
                    "category": rule.category,
                    "description": entry.get("description", ""),
                    "enabled": rule_config.enabled,
                    "severity": rule_config.severity,
                    "detect_antipatterns": rule_config.detect_antipatterns,
                }
            )
        return patterns

    def list_vue_patterns(self) -> list[dict[str, Any]]:
        """Vueパターンカタログに所属セクションの有効状態を付けて返す。"""
        rules = self._vue_validator().config.rules
        catalog = load_catalog(self.config_dir, "vue-patterns.yaml").get("patterns", [])

        patterns: list[dict[str, Any]] = []
        for entry in catalog:
            section = entry.get("section")
            section_rules = getattr(rules, section, None) if section else None
            patterns.append({**entry, "enabled": section_rules.enabled if section_rules is not None else True})
        return patterns

    def get_violations(self, severity: Severity | None = None) -> list[dict[str, Any]]:
        """違反ガイドを返す。severity指定時はその重大度だけに絞る。"""
        guide = load_catalog(self.config_dir, "violation-guide.yaml").get("violations", [])
        if severity is None:
            return list(guide)
        return [v for v in guide if v.get("severity") == severity]
