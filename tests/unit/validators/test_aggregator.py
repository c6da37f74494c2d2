"""検出結果集約のユニットテスト。"""

from conftest import java_config

from pattern_police.models.java import JavaDetection, JavaDetectionLocation, JavaViolation
from pattern_police.validators.aggregator import format_pattern_name, group_by_category, java_violations


class TestFormatPatternName:
    def test_kebab_case_to_title(self) -> None:
        assert format_pattern_name("factory-method") == "Factory Method"
        assert format_pattern_name("dao") == "Dao"


class TestJavaViolations:
    def test_one_violation_per_detection(self) -> None:
        detections = [
            JavaDetection(
                pattern="observer",
                category="behavioral",
                confidence="high",
                location=JavaDetectionLocation(class_name="EventBus", line=3),
                evidence=["a", "b"],
            ),
            JavaDetection(
                pattern="service-locator",
                category="architectural",
                confidence="medium",
                evidence=["c"],
                antipatterns=["x"],
            ),
        ]
        violations = java_violations(detections, java_config())
        assert [v.rule for v in violations] == ["pattern-observer", "pattern-service-locator"]
        assert violations[0].line == 3
        assert violations[0].suggestion is None
        assert violations[1].suggestion is not None
        assert "[信頼度: medium]" in violations[1].message


class TestGroupByCategory:
    def test_counts_in_first_seen_order_and_skips_none(self) -> None:
        items = [
            JavaViolation(rule="pattern-dao", category="enterprise", severity="info", message="m"),
            JavaViolation(rule="pattern-mvc", category="architectural", severity="info", message="m"),
            JavaViolation(rule="pattern-dto", category="enterprise", severity="info", message="m"),
            JavaViolation(rule="parse-error", severity="error", message="m"),
        ]
        counts = group_by_category(items)
        assert counts == {"enterprise": 2, "architectural": 1}
        assert list(counts) == ["enterprise", "architectural"]
