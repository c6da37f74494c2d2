"""TypeScript/JavaScript検証のMCPツール定義。"""

from typing import Any

from fastmcp import FastMCP

from pattern_police.models.errors import PatternPoliceError
from pattern_police.models.validation import TypeScriptReport
from pattern_police.services.validation import ValidationService


def _report_to_dict(report: TypeScriptReport) -> dict[str, Any]:
    return {
        "filename": report.filename,
        "violations": [v.model_dump() for v in report.violations],
        "error_count": report.count("error"),
        "warning_count": report.count("warning"),
        "info_count": report.count("info"),
    }


def register_typescript_tools(mcp: FastMCP, validation_service: ValidationService) -> None:
    """TypeScript/JavaScript関連のMCPツールを登録する。"""

    @mcp.tool()
    async def validate_code(code: str, filename: str = "unknown.ts") -> dict[str, Any]:
        """TypeScript/JavaScriptコードを命名規則・SOLID・コードスメルのルールで検証する。

        Args:
            code: 検証するソースコード。
            filename: 位置表示用のファイル名。拡張子が.tsx/.jsxならTSX文法で解析します。
        """
        try:
            return _report_to_dict(validation_service.validate_typescript(code, filename))
        except PatternPoliceError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def validate_file(filepath: str) -> dict[str, Any]:
        """TypeScript/JavaScriptファイルを読み込んで検証する。

        Args:
            filepath: 検証するファイルのパス（UTF-8）。
        """
        try:
            return _report_to_dict(await validation_service.validate_typescript_file(filepath))
        except PatternPoliceError as e:
            return {"error": type(e).__name__, "message": str(e)}
