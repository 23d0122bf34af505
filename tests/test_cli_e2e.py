"""CLIエンドツーエンドテスト

python -m erbgen の実行結果を検証（内部実装に依存しない）
"""

import os
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).parent.parent


def _run(*args: str, cwd: Path) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "erbgen", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        env=env,
    )


class TestCLI:
    """erbgen コマンドのE2Eテスト"""

    def test_generate_is_silent(self, example_dir: Path):
        """成功時は何も出力せず終了コード0"""
        (example_dir / "erbgen.yaml").write_text("formatter: []\n", encoding="utf-8")

        result = _run(str(example_dir), cwd=example_dir.parent)

        assert result.returncode == 0, result.stderr
        assert result.stdout == ""
        assert result.stderr == ""
        assert (example_dir / "example_gen.py").exists()

    def test_default_directory_is_cwd(self, example_dir: Path):
        """引数が無ければカレントディレクトリを走査する"""
        (example_dir / "erbgen.yaml").write_text("formatter: []\n", encoding="utf-8")

        result = _run(cwd=example_dir)

        assert result.returncode == 0, result.stderr
        assert (example_dir / "example_gen.py").exists()

    def test_config_option(self, example_dir: Path, tmp_path: Path):
        """--config で設定ファイルを指定できる"""
        config_path = tmp_path / "custom.yaml"
        config_path.write_text("formatter: []\noutput_suffix: _views\n", encoding="utf-8")

        result = _run(str(example_dir), "--config", str(config_path), cwd=tmp_path)

        assert result.returncode == 0, result.stderr
        assert (example_dir / "example_views.py").exists()

    def test_missing_template_exits_nonzero(self, example_dir: Path):
        """テンプレートが無ければ原因をログに出して終了コード1"""
        (example_dir / "erbgen.yaml").write_text("formatter: []\n", encoding="utf-8")
        (example_dir / "Body.erb").unlink()

        result = _run(str(example_dir), cwd=example_dir.parent)

        assert result.returncode == 1
        assert "Body.erb: template file not found" in result.stderr
        assert not (example_dir / "example_gen.py").exists()

    def test_invalid_config_exits_nonzero(self, example_dir: Path):
        """設定エラーも終了コード1"""
        (example_dir / "erbgen.yaml").write_text("unknown: 1\n", encoding="utf-8")

        result = _run(str(example_dir), cwd=example_dir.parent)

        assert result.returncode == 1
        assert "invalid config" in result.stderr
