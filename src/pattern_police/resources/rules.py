"""ルール設定・パターンカタログのMCPリソース定義。"""

from pathlib import Path

import yaml
from fastmcp import FastMCP

from pattern_police.config import load_catalog
from pattern_police.services.validation import ValidationService


def _dump(data: object) -> str:
    return yaml.dump(data, allow_unicode=True, default_flow_style=False, sort_keys=False)


def register_rule_resources(mcp: FastMCP, validation_service: ValidationService, config_dir: Path) -> None:
    """ルール・カタログ関連のMCPリソースを登録する。"""

    @mcp.resource("pattern-police://rules/typescript")
    async def typescript_rules() -> str:
        """TypeScript/JavaScriptの有効なルール設定を取得する。

        設定ファイルが無い項目は既定値で補われた状態で返します。
        """
        return _dump(validation_service.list_typescript_rules())

    @mcp.resource("pattern-police://rules/java")
    async def java_rules() -> str:
        """Javaパターン検出ルールの有効/重大度を取得する。"""
        if not validation_service.java_available:
            return _dump({"available": False})
        return _dump({"available": True, "patterns": validation_service.list_java_patterns()})

    @mcp.resource("pattern-police://rules/vue")
    async def vue_rules() -> str:
        """Vue検証ルールの設定を取得する。"""
        if not validation_service.vue_available:
            return _dump({"available": False})
        return _dump({"available": True, "patterns": validation_service.list_vue_patterns()})

    @mcp.resource("pattern-police://catalog/java")
    async def java_catalog() -> str:
        """Javaデザインパターンカタログ（説明・検出シグナル）を取得する。"""
        return _dump(load_catalog(config_dir, "java-patterns.yaml"))

    @mcp.resource("pattern-police://catalog/vue")
    async def vue_catalog() -> str:
        """Vueパターンカタログを取得する。"""
        return _dump(load_catalog(config_dir, "vue-patterns.yaml"))
