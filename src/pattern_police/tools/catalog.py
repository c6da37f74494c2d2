"""ルール・パターンカタログ参照のMCPツール定義。"""

from typing import Any

from fastmcp import FastMCP

from pattern_police.models.errors import PatternPoliceError
from pattern_police.models.validation import Severity
from pattern_police.services.validation import ValidationService


def register_catalog_tools(mcp: FastMCP, validation_service: ValidationService) -> None:
    """カタログ関連のMCPツールを登録する。"""

    @mcp.tool()
    async def list_patterns() -> dict[str, Any]:
        """TypeScript/JavaScriptの有効なルール設定を取得する。"""
        return validation_service.list_typescript_rules()

    @mcp.tool()
    async def list_java_patterns() -> dict[str, Any]:
        """検出可能なJavaデザインパターンの一覧を取得する。

        各パターンにはカテゴリ、説明、有効/無効、重大度が含まれます。
        """
        try:
            patterns = validation_service.list_java_patterns()
            return {"count": len(patterns), "patterns": patterns}
        except PatternPoliceError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def list_vue_patterns() -> dict[str, Any]:
        """検出可能なVueパターン・アンチパターンの一覧を取得する。"""
        try:
            patterns = validation_service.list_vue_patterns()
            return {"count": len(patterns), "patterns": patterns}
        except PatternPoliceError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def get_violations(severity: Severity | None = None) -> dict[str, Any]:
        """違反ルールの説明と修正方法を取得する。

        Args:
            severity: 絞り込む重大度（"error" / "warning" / "info"）。省略時は全件。
        """
        violations = validation_service.get_violations(severity)
        return {"count": len(violations), "violations": violations}
