"""FastMCPベースのMCPサーバーエントリポイント。"""

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from pattern_police.config import ServerConfig
from pattern_police.prompts.review import register_review_prompts
from pattern_police.resources.rules import register_rule_resources
from pattern_police.services.validation import ValidationService
from pattern_police.tools.catalog import register_catalog_tools
from pattern_police.tools.java import register_java_tools
from pattern_police.tools.typescript import register_typescript_tools
from pattern_police.tools.vue import register_vue_tools


def create_server(config: ServerConfig | None = None) -> FastMCP:
    """Pattern Police MCPサーバーを作成し、ツール・リソース・プロンプトを登録する。

    Args:
        config: サーバー設定。Noneの場合はデフォルト設定を使用。

    Returns:
        設定済みのFastMCPインスタンス。

    Raises:
        RuleConfigError: TypeScriptのルール設定が不正な場合。
    """
    if config is None:
        config = ServerConfig()

    mcp = FastMCP("pattern-police")

    # サービス層
    validation_service = ValidationService(config_dir=config.config_dir)

    # MCPインターフェース登録 — 検証ツール
    register_typescript_tools(mcp, validation_service)
    register_java_tools(mcp, validation_service)
    register_vue_tools(mcp, validation_service)
    register_catalog_tools(mcp, validation_service)

    # MCPインターフェース登録 — リソース・プロンプト
    register_rule_resources(mcp, validation_service, config.config_dir)
    register_review_prompts(mcp)

    # ヘルスチェックエンドポイント
    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "validators": {
                    "typescript": True,
                    "java": validation_service.java_available,
                    "vue": validation_service.vue_available,
                },
            }
        )

    return mcp
