"""検証フローのMCPプロトコル経由統合テスト。"""

import json
import shutil
from pathlib import Path

import pytest
import yaml
from fastmcp import Client

from pattern_police.config import ServerConfig
from pattern_police.server import create_server

_CONFIG_DIR = Path(__file__).parent.parent.parent / "config"

_JAVA = """
public class ConfigurationManager {
    private static final ConfigurationManager INSTANCE = new ConfigurationManager();
    private ConfigurationManager() {}
    public static ConfigurationManager getInstance() { return INSTANCE; }
}
"""

_VUE = """<template>
  <ul>
    <li v-for="item in items">{{ item }}</li>
  </ul>
</template>
<script setup>
import { ref } from 'vue'
const items = ref([])
</script>
"""


@pytest.fixture
def mcp_server() -> object:
    """テスト用MCPサーバー。"""
    return create_server(ServerConfig(config_dir=_CONFIG_DIR))


@pytest.fixture
def typescript_only_server(tmp_path: Path) -> object:
    """typescript.yamlだけを持つ設定ディレクトリで起動したMCPサーバー。"""
    config_dir = tmp_path / "config"
    (config_dir / "rules").mkdir(parents=True)
    shutil.copy(_CONFIG_DIR / "rules" / "typescript.yaml", config_dir / "rules" / "typescript.yaml")
    return create_server(ServerConfig(config_dir=config_dir))


def parse_tool_result(result: object) -> dict:
    """CallToolResultからJSONデータを抽出する。"""
    content = result.content  # type: ignore[union-attr]
    assert len(content) > 0
    return json.loads(content[0].text)  # type: ignore[union-attr]


class TestTypeScriptViaMCP:
    async def test_validate_code(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool(
                "validate_code",
                {"code": "class user_service {}\n", "filename": "user.ts"},
            )
            data = parse_tool_result(result)
            assert data["filename"] == "user.ts"
            assert "naming-class-pascalcase" in [v["rule"] for v in data["violations"]]
            total = data["error_count"] + data["warning_count"] + data["info_count"]
            assert total == len(data["violations"])

    async def test_validate_file(self, mcp_server: object, tmp_path: Path) -> None:
        source = tmp_path / "service.ts"
        source.write_text("// サービス\nexport class UserService {}\n", encoding="utf-8")
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("validate_file", {"filepath": str(source)})
            data = parse_tool_result(result)
            assert data["filename"] == str(source)
            assert "error" not in data

    async def test_missing_file_returns_error(self, mcp_server: object, tmp_path: Path) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("validate_file", {"filepath": str(tmp_path / "missing.ts")})
            data = parse_tool_result(result)
            assert data["error"] == "FileReadError"


class TestJavaViaMCP:
    async def test_validate_java_code(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("validate_java_code", {"code": _JAVA})
            data = parse_tool_result(result)
            assert data["filename"] == "Unknown.java"
            assert data["rules_evaluated"] == 43
            assert data["pattern_count"] >= 1
            assert "pattern-singleton" in [v["rule"] for v in data["violations"]]
            assert "creational" in data["by_category"]

    async def test_list_java_patterns(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("list_java_patterns", {})
            data = parse_tool_result(result)
            assert data["count"] == 43
            assert data["patterns"][0]["pattern"] == "singleton"

    async def test_disabled_java_validator(self, typescript_only_server: object) -> None:
        async with Client(typescript_only_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("validate_java_code", {"code": _JAVA})
            data = parse_tool_result(result)
            assert data["error"] == "ValidatorUnavailableError"
            assert "java.yaml" in data["message"]

            # TypeScriptは引き続き利用できる
            result = await client.call_tool("validate_code", {"code": "const a = 1;\n"})
            assert "error" not in parse_tool_result(result)


class TestVueViaMCP:
    async def test_validate_vue_code(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("validate_vue_code", {"code": _VUE, "filename": "ItemList.vue"})
            data = parse_tool_result(result)
            assert data["component"]["name"] == "ItemList"
            assert data["component"]["version"] == "3"
            assert "script_setup" not in data["component"]
            missing_key = next(v for v in data["violations"] if v["rule"] == "missing-v-for-key")
            assert missing_key["location"]["line"] == 3

    async def test_vue_file_with_markup_returns_guidance(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("validate_vue_file", {"filepath": _VUE})
            data = parse_tool_result(result)
            assert data["error"] == "InputShapeMismatchError"
            assert "validate_vue_code" in data["message"]

    async def test_list_vue_patterns(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("list_vue_patterns", {})
            data = parse_tool_result(result)
            assert data["count"] == len(data["patterns"])
            assert "missing-v-for-key" in [p["id"] for p in data["patterns"]]


class TestCatalogViaMCP:
    async def test_get_violations_by_severity(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("get_violations", {"severity": "error"})
            data = parse_tool_result(result)
            assert data["count"] > 0
            assert all(v["severity"] == "error" for v in data["violations"])

    async def test_list_patterns_returns_typescript_rules(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("list_patterns", {})
            data = parse_tool_result(result)
            assert "solid" in data["rules"]


class TestResourcesAndPromptsViaMCP:
    async def test_read_typescript_rules_resource(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            contents = await client.read_resource("pattern-police://rules/typescript")
            data = yaml.safe_load(contents[0].text)  # type: ignore[union-attr]
            assert data["rules"]["solid"]["max_parameters"] > 0

    async def test_disabled_java_rules_resource(self, typescript_only_server: object) -> None:
        async with Client(typescript_only_server) as client:  # type: ignore[arg-type]
            contents = await client.read_resource("pattern-police://rules/java")
            data = yaml.safe_load(contents[0].text)  # type: ignore[union-attr]
            assert data == {"available": False}

    async def test_code_review_workflow_prompt(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.get_prompt("code_review_workflow", {})
            text = result.messages[0].content.text  # type: ignore[union-attr]
            assert "validate_java_code" in text
            assert "validate_vue_code" in text
