"""検出結果を呼び出し元へ返す違反リストへ集約する。"""

from collections.abc import Sequence
from typing import Protocol

from pattern_police.models.java import JavaDetection, JavaPatternName, JavaViolation
from pattern_police.models.rules import JavaRuleConfig


class _Categorized(Protocol):
    @property
    def category(self) -> str | None: ...


def format_pattern_name(pattern: JavaPatternName) -> str:
    """kebab-caseのパターンIDを表示名に変換する（例: factory-method → Factory Method）。"""
    return " ".join(word.capitalize() for word in pattern.split("-"))


def java_violations(detections: list[JavaDetection], config: JavaRuleConfig) -> list[JavaViolation]:
    """Javaの検出結果1件につき違反1件を生成する。

    重大度はルール設定の値をそのまま使う。出力順は検出順を保つ。
    """
    violations: list[JavaViolation] = []
    for detection in detections:
        rule = config.rule_for(detection.category, detection.pattern)
        message = (
            f"パターンを検出しました: {format_pattern_name(detection.pattern)} "
            f"({detection.category}) [信頼度: {detection.confidence}]"
        )
        suggestion = None
        if detection.antipatterns:
            suggestion = f"{len(detection.antipatterns)}件のアンチパターンを確認してください"

        violations.append(
            JavaViolation(
                rule=f"pattern-{detection.pattern}",
                pattern=detection.pattern,
                category=detection.category,
                severity=rule.severity,
                message=message,
                confidence=detection.confidence,
                class_name=detection.location.class_name,
                method_name=detection.location.method_name,
                line=detection.location.line,
                evidence=list(detection.evidence),
                antipatterns=list(detection.antipatterns),
                suggestion=suggestion,
            )
        )
    return violations


def group_by_category(items: Sequence[_Categorized]) -> dict[str, int]:
    """カテゴリごとの件数を初出順で返す。カテゴリなしの項目は数えない。"""
    counts: dict[str, int] = {}
    for item in items:
        if item.category is None:
            continue
        counts[item.category] = counts.get(item.category, 0) + 1
    return counts
