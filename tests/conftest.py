"""pytest設定とフィクスチャ定義"""

import shutil
import sys
from pathlib import Path

import pytest

from erbgen.core.engine.config_model import GeneratorConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# テスト中にインポートされる生成モジュール
_GENERATED_MODULES = ("example", "example_gen")


def _clear_generated_modules() -> None:
    for name in _GENERATED_MODULES:
        sys.modules.pop(name, None)


@pytest.fixture(autouse=True)
def clean_module_cache():
    """各テスト前後に生成モジュールをクリア"""
    _clear_generated_modules()
    yield
    _clear_generated_modules()


@pytest.fixture
def example_dir(tmp_path: Path) -> Path:
    """fixtures/example を一時ディレクトリにコピー"""
    target = tmp_path / "example"
    shutil.copytree(FIXTURES_DIR / "example", target)
    return target


@pytest.fixture
def config() -> GeneratorConfig:
    """フォーマッタを実行しない設定"""
    return GeneratorConfig(formatter=[])
