"""Pattern Policeサーバーの設定管理。"""

from pathlib import Path
from typing import Literal, TypeVar

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings

from pattern_police.models.errors import ConfigurationMissingError, RuleConfigError

_PACKAGE_ROOT = Path(__file__).parent
_REPO_ROOT = _PACKAGE_ROOT.parent.parent

ConfigT = TypeVar("ConfigT", bound=BaseModel)


class ServerConfig(BaseSettings):
    """サーバー設定。環境変数から読み込み可能。"""

    model_config = {"env_prefix": "PATTERN_POLICE_"}

    config_dir: Path = _REPO_ROOT / "config"
    host: str = "0.0.0.0"
    port: int = 8000
    url_token: str = ""
    transport: Literal["stdio", "streamable-http"] = "stdio"
    log_level: str = "INFO"


def load_rule_config(config_dir: Path, filename: str, model: type[ConfigT]) -> ConfigT:
    """`<config_dir>/rules/<filename>`を読み込み、スキーマで検証する。

    Raises:
        ConfigurationMissingError: ファイルが存在しない場合。
        RuleConfigError: YAMLとして不正、またはスキーマに合わない場合。
    """
    path = config_dir / "rules" / filename
    if not path.exists():
        raise ConfigurationMissingError(path)

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RuleConfigError(path, str(e)) from e

    try:
        return model.model_validate(data or {})
    except ValidationError as e:
        raise RuleConfigError(path, str(e)) from e


def load_catalog(config_dir: Path, filename: str) -> dict:  # type: ignore[type-arg]
    """`<config_dir>/catalog/<filename>`のYAMLを読み込む。存在しなければ空の辞書を返す。"""
    path = config_dir / "catalog" / filename
    if not path.exists():
        return {}
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}
