"""生成設定のモデル定義とロード機能

erbgen.yaml の構造を定義する。
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from erbgen.core.engine.errors import ConfigError

CONFIG_FILENAME = "erbgen.yaml"


class GeneratorConfig(BaseModel):
    """生成設定

    Attributes:
        marker: 宣言を選択するアノテーションコメント（完全一致）
        template_extension: テンプレートファイルの拡張子
        output_suffix: 出力ファイル名のサフィックス（<stem><suffix>.py）
        header: 出力ファイル先頭のマーカーコメント
        formatter: 出力ファイルに実行するフォーマッタコマンド（空なら実行しない）
        error_mode: "fail_fast"（最初のエラーで中断）または "collect"
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    marker: str = "# +erb"
    template_extension: str = ".erb"
    output_suffix: str = "_gen"
    header: str = "# Autogenerated"
    formatter: list[str] = Field(default_factory=lambda: ["ruff", "format", "--quiet"])
    error_mode: Literal["fail_fast", "collect"] = "fail_fast"


def load_config(config_path: str | Path) -> GeneratorConfig:
    """設定YAMLをロードして検証

    Args:
        config_path: 設定YAMLのパス

    Returns:
        GeneratorConfig: 検証済み設定

    Raises:
        ConfigError: ファイルが存在しない、YAML形式エラー、検証エラー
    """
    config_path_obj = Path(config_path)

    if not config_path_obj.exists():
        raise ConfigError("config file not found", config_path_obj)

    try:
        with open(config_path_obj, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML: {e}", config_path_obj) from e

    try:
        return GeneratorConfig.model_validate(data or {})
    except ValidationError as e:
        raise ConfigError(f"invalid config: {e}", config_path_obj) from e


def resolve_config(directory: Path, config_path: str | Path | None = None) -> GeneratorConfig:
    """使用する設定を決定

    config_path 指定時はそれを、未指定時は directory/erbgen.yaml を
    存在すれば読み込む。どちらも無ければデフォルト設定。
    """
    if config_path is not None:
        return load_config(config_path)

    default_path = directory / CONFIG_FILENAME
    if default_path.is_file():
        return load_config(default_path)
    return GeneratorConfig()
