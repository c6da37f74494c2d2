"""Pattern Policeのカスタム例外クラス。"""

from pathlib import Path


class PatternPoliceError(Exception):
    """Pattern Policeの基底例外クラス。"""


class ParseError(PatternPoliceError):
    """ソースコードから構文木を構築できなかった場合の例外。"""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class ConfigurationMissingError(PatternPoliceError):
    """ルール設定ファイルが存在しない場合の例外。"""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Rule configuration not found: {path}")
        self.path = path


class RuleConfigError(PatternPoliceError):
    """ルール設定ファイルの内容が不正な場合の例外。"""

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"Invalid rule configuration in {path}: {detail}")
        self.path = path
        self.detail = detail


class ValidatorUnavailableError(PatternPoliceError):
    """起動時に設定を読み込めず無効化されたバリデータが呼ばれた場合の例外。"""

    def __init__(self, language: str, config_file: str) -> None:
        super().__init__(
            f"{language} validator is not available. "
            f"Check that rules/{config_file} exists in the configuration directory."
        )
        self.language = language
        self.config_file = config_file


class UnsupportedLanguageError(PatternPoliceError):
    """対応していない言語が指定された場合の例外。"""

    def __init__(self, language: str) -> None:
        super().__init__(f"Unsupported language: {language}")
        self.language = language


class FileReadError(PatternPoliceError):
    """検証対象ファイルの読み込みに失敗した場合の例外。"""

    def __init__(self, filepath: str, reason: str) -> None:
        super().__init__(f"Failed to read file {filepath}: {reason}")
        self.filepath = filepath
        self.reason = reason


class InputShapeMismatchError(PatternPoliceError):
    """ファイルパスの代わりにコード本文が渡された場合の例外。"""

    def __init__(self, tool_name: str, code_tool_name: str) -> None:
        super().__init__(
            "The filepath argument looks like file CONTENT rather than a path. "
            f"To validate code directly, call '{code_tool_name}' with the 'code' argument. "
            f"To validate a file, call '{tool_name}' with a path such as './components/MyComponent.vue'."
        )
        self.tool_name = tool_name
        self.code_tool_name = code_tool_name
