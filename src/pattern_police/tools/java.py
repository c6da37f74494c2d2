"""Javaデザインパターン検出のMCPツール定義。"""

from typing import Any

from fastmcp import FastMCP

from pattern_police.models.errors import PatternPoliceError
from pattern_police.models.java import JavaReport
from pattern_police.services.validation import ValidationService
from pattern_police.validators.aggregator import group_by_category


def _report_to_dict(report: JavaReport) -> dict[str, Any]:
    return {
        "filename": report.filename,
        "rules_evaluated": report.rules_evaluated,
        "pattern_count": len(report.detections),
        "violations": [v.model_dump() for v in report.violations],
        "by_category": group_by_category(report.violations),
    }


def register_java_tools(mcp: FastMCP, validation_service: ValidationService) -> None:
    """Java関連のMCPツールを登録する。"""

    @mcp.tool()
    async def validate_java_code(code: str, filename: str = "Unknown.java") -> dict[str, Any]:
        """Javaコードからデザインパターン（GoF・エンタープライズ・モダン）を検出する。

        検出した各パターンは設定された重大度の違反として返します。
        構文エラーの場合はparse-error違反1件のみを返します。

        Args:
            code: 検証するJavaソースコード。
            filename: 位置表示用のファイル名。
        """
        try:
            return _report_to_dict(validation_service.validate_java(code, filename))
        except PatternPoliceError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def validate_java_file(filepath: str) -> dict[str, Any]:
        """Javaファイルを読み込んでデザインパターンを検出する。

        Args:
            filepath: 検証する.javaファイルのパス（UTF-8）。
        """
        try:
            return _report_to_dict(await validation_service.validate_java_file(filepath))
        except PatternPoliceError as e:
            return {"error": type(e).__name__, "message": str(e)}
