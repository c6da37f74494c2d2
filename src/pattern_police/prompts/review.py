"""コードレビューワークフローのMCPプロンプト定義。"""

from fastmcp import FastMCP


def register_review_prompts(mcp: FastMCP) -> None:
    """レビュー系のMCPプロンプトを登録する。"""

    def _select_phase() -> str:
        return (
            "## Phase 1: 対象の確認\n\n"
            "1. レビュー対象の言語を確認してください（TypeScript/JavaScript・Java・Vue）。\n"
            "2. ファイルが手元にある場合はファイル検証ツール、"
            "コード片しかない場合はコード検証ツールを使ってください。\n"
            "3. `validate_vue_file` の `filepath` にコード本文を渡さないでください。"
            " コード本文は `validate_vue_code` の `code` に渡します。\n\n"
        )

    def _validate_phase() -> str:
        return (
            "## Phase 2: 検証\n\n"
            "- TypeScript/JavaScript: `validate_code` または `validate_file`\n"
            "- Java: `validate_java_code` または `validate_java_file`\n"
            "- Vue: `validate_vue_code` または `validate_vue_file`\n\n"
            "結果に `error` キーがある場合は検証自体が行えていません。"
            "`message` の内容を利用者に伝えてください。\n"
            "`parse-error` 違反が1件だけ返った場合は構文エラーです。"
            "該当行を修正してから再検証してください。\n\n"
        )

    def _report_phase() -> str:
        return (
            "## Phase 3: 結果の報告\n\n"
            "1. 重大度（error → warning → info）の順に違反を整理してください。\n"
            "2. 各違反の `suggestion` と `get_violations` の修正方法を参照して改善案を提示してください。\n"
            "3. Javaの検出パターンは `confidence` と `evidence` を添えて説明し、"
            "`antipatterns` があれば優先して指摘してください。\n"
            "4. Vueは推定された `component.version` を明示してください。"
            " mixinsやfiltersの扱いはバージョンによって変わります。\n\n"
        )

    @mcp.prompt()
    def code_review_workflow() -> str:
        """パターン検出ツールを使ったコードレビューの手順。"""
        return (
            "# コードレビューワークフロー\n\n"
            "パターン検出ツールでコードを検証し、結果を利用者に報告してください。\n"
            "有効なルールは `pattern-police://rules/typescript` などのリソースで確認できます。\n\n"
            + _select_phase()
            + _validate_phase()
            + _report_phase()
        )
