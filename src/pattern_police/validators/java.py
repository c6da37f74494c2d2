"""Javaデザインパターン検出ロジック。"""

import logging

from pattern_police.extractors.java import extract_classes
from pattern_police.models.errors import ParseError
from pattern_police.models.java import ClassModel, JavaDetection, JavaReport, JavaViolation
from pattern_police.models.rules import JavaRuleConfig
from pattern_police.models.validation import PARSE_ERROR_RULE
from pattern_police.validators.aggregator import java_violations
from pattern_police.validators.java_rules import RULES

logger = logging.getLogger(__name__)


class JavaPatternValidator:
    """ルール設定に基づいてJavaコードのデザインパターンを検出する。

    検出結果は呼び出しごとに新しく組み立てて返し、インスタンスには蓄積しない。
    """

    def __init__(self, config: JavaRuleConfig) -> None:
        self._config = config

    @property
    def config(self) -> JavaRuleConfig:
        return self._config

    def enabled_rule_count(self) -> int:
        """有効なルール数を返す。"""
        return sum(1 for rule in RULES if self._config.rule_for(rule.category, rule.pattern).enabled)

    def validate(self, code: str, filename: str = "Unknown.java") -> JavaReport:
        """Javaコードを解析し、有効な全ルールを評価する。

        Args:
            code: Javaソースコード。
            filename: 位置表示用のファイル名。

        Returns:
            検出結果と違反リストを含むレポート。構文エラー時はparse-error違反1件のみ。
        """
        try:
            classes = extract_classes(code)
        except ParseError as e:
            logger.debug("Java parse failed for %s: %s", filename, e)
            return JavaReport(
                filename=filename,
                violations=[
                    JavaViolation(
                        rule=PARSE_ERROR_RULE,
                        severity="error",
                        message=f"Javaコードの構文解析に失敗しました: {e}",
                        line=e.line,
                    )
                ],
            )

        detections = self.detect(classes)
        report = JavaReport(
            filename=filename,
            detections=detections,
            violations=java_violations(detections, self._config),
            rules_evaluated=self.enabled_rule_count(),
        )
        logger.debug(
            "Validated %s: %d classes, %d detections", filename, len(classes), len(report.detections)
        )
        return report

    def detect(self, classes: list[ClassModel]) -> list[JavaDetection]:
        """カテゴリ順・ルール宣言順・クラス宣言順に検出結果を返す。"""
        detections: list[JavaDetection] = []
        for rule in RULES:
            rule_config = self._config.rule_for(rule.category, rule.pattern)
            if not rule_config.enabled:
                continue
            detections.extend(rule.evaluate(classes, rule_config.detect_antipatterns))
        return detections
