"""バリデーション結果に共通するデータモデル。"""

from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["error", "warning", "info"]
Confidence = Literal["low", "medium", "high"]

# 構文木を構築できなかった場合に返す唯一の違反ルールID
PARSE_ERROR_RULE = "parse-error"


class Violation(BaseModel):
    """TypeScript/JavaScriptのスタイル・コードスメル違反。"""

    rule: str
    category: str
    severity: Severity
    message: str
    line: int | None = None
    column: int | None = None
    suggestion: str | None = None
    evidence: list[str] = Field(default_factory=list)


class TypeScriptReport(BaseModel):
    """TypeScript/JavaScriptコード1単位分の検証結果。"""

    filename: str
    violations: list[Violation] = Field(default_factory=list)

    def count(self, severity: Severity) -> int:
        """指定した重大度の違反数を返す。"""
        return sum(1 for v in self.violations if v.severity == severity)
