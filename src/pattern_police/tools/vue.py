"""Vueコンポーネント検証のMCPツール定義。"""

from typing import Any

from fastmcp import FastMCP

from pattern_police.models.errors import PatternPoliceError
from pattern_police.models.vue import VueReport
from pattern_police.services.validation import ValidationService
from pattern_police.validators.aggregator import group_by_category


def _report_to_dict(report: VueReport) -> dict[str, Any]:
    component = None
    if report.component is not None:
        # 本文はレスポンスに含めない
        component = report.component.model_dump(exclude={"template", "script", "script_setup", "styles"})
    return {
        "filename": report.filename,
        "component": component,
        "detections": [d.model_dump() for d in report.detections],
        "violations": [v.model_dump() for v in report.violations],
        "by_category": group_by_category([*report.detections, *report.violations]),
    }


def register_vue_tools(mcp: FastMCP, validation_service: ValidationService) -> None:
    """Vue関連のMCPツールを登録する。"""

    @mcp.tool()
    async def validate_vue_code(code: str, filename: str = "Component.vue") -> dict[str, Any]:
        """Vue単一ファイルコンポーネントのパターンとアンチパターンを検出する。

        Vueのバージョン（2/3）を推定し、バージョンに応じたルールを適用します。

        Args:
            code: .vueファイルの内容。
            filename: ファイル名。コンポーネント名の推定に使います。
        """
        try:
            return _report_to_dict(validation_service.validate_vue(code, filename))
        except PatternPoliceError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def validate_vue_file(filepath: str) -> dict[str, Any]:
        """Vueファイルを読み込んで検証する。

        コードを直接検証する場合はvalidate_vue_codeを使ってください。

        Args:
            filepath: .vueファイルのパス（例: "./components/MyComponent.vue"）。
        """
        try:
            return _report_to_dict(await validation_service.validate_vue_file(filepath))
        except PatternPoliceError as e:
            return {"error": type(e).__name__, "message": str(e)}
