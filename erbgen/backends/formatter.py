"""外部フォーマッタの実行

書き出した生成ファイルに整形コマンドを実行する。
起動失敗・異常終了はいずれも致命的エラー。
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from erbgen.core.engine.errors import FormatterError

logger = logging.getLogger(__name__)


def run_formatter(command: Sequence[str], path: Path) -> None:
    """フォーマッタを実行

    Args:
        command: コマンドと引数（末尾に対象パスを追加して実行）。空なら何もしない
        path: 整形対象のファイル

    Raises:
        FormatterError: 起動失敗または0以外の終了コード
    """
    if not command:
        return

    args = [*command, str(path)]
    logger.debug("running formatter: %s", " ".join(args))

    try:
        result = subprocess.run(args, capture_output=True, text=True, check=False)
    except OSError as e:
        raise FormatterError(f"cannot start formatter {command[0]!r}: {e}", path) from e

    if result.returncode != 0:
        output = (result.stderr or result.stdout).strip()
        raise FormatterError(
            f"formatter {command[0]!r} exited with status {result.returncode}" + (f": {output}" if output else ""),
            path,
            output=output,
        )
