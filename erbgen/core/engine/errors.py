"""エラー定義とエラー報告境界

コンパイル時エラーはすべて致命的。生成処理は失敗を ErrorReporter に渡し、
即時中断するか（fail_fast）、全ファイル処理後にまとめて報告するか（collect）を
Reporter 側で決める。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class ErbgenError(Exception):
    """erbgen の基底例外"""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


class TemplateNotFoundError(ErbgenError, FileNotFoundError):
    """アノテーション付き宣言に対応するテンプレートファイルが存在しない"""

    pass


class TemplateReadError(ErbgenError):
    """テンプレートファイルの読み込み失敗"""

    pass


class TemplateSyntaxError(ErbgenError):
    """テンプレートの構文エラー

    Attributes:
        line: エラー位置の行（1始まり）
        column: エラー位置の列（1始まり）
    """

    def __init__(self, message: str, path: Path | str | None = None, line: int = 0, column: int = 0):
        super().__init__(message, path)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        location = f"{self.line}:{self.column}: " if self.line else ""
        if self.path is not None:
            return f"{self.path}:{location}{self.message}"
        return f"{location}{self.message}"


class SourceParseError(ErbgenError):
    """ソースファイルのパース失敗"""

    pass


class SignatureError(ErbgenError):
    """関数型のシグネチャを文字列化できない"""

    pass


class OutputWriteError(ErbgenError):
    """出力ファイルの書き込み失敗"""

    pass


class FormatterError(ErbgenError):
    """外部フォーマッタの起動失敗または異常終了"""

    def __init__(self, message: str, path: Path | str | None = None, output: str = ""):
        super().__init__(message, path)
        self.output = output


class ConfigError(ErbgenError):
    """設定ファイルの読み込み・検証エラー"""

    pass


class GenerationFailed(ErbgenError):
    """collect モードで収集されたエラーの集約"""

    def __init__(self, errors: list[ErbgenError]):
        super().__init__(f"generation failed with {len(errors)} error(s)")
        self.errors = errors

    def __str__(self) -> str:
        lines = [self.message]
        lines.extend(f"  {i}. {error}" for i, error in enumerate(self.errors, 1))
        return "\n".join(lines)


class ErrorReporter(Protocol):
    """エラー報告境界のプロトコル"""

    def report(self, error: ErbgenError) -> None:
        """ファイル単位の失敗を受け取る"""
        ...

    def finish(self) -> None:
        """実行終了時に呼ばれる"""
        ...


class FailFastReporter:
    """最初のエラーで実行全体を中断する"""

    def report(self, error: ErbgenError) -> None:
        raise error

    def finish(self) -> None:
        return None


class CollectingReporter:
    """エラーを収集し、実行終了時にまとめて送出する"""

    def __init__(self) -> None:
        self.errors: list[ErbgenError] = []

    def report(self, error: ErbgenError) -> None:
        logger.debug("collected error: %s", error)
        self.errors.append(error)

    def finish(self) -> None:
        if self.errors:
            raise GenerationFailed(self.errors)


def create_reporter(error_mode: str) -> ErrorReporter:
    """設定の error_mode から Reporter を作成

    Args:
        error_mode: "fail_fast" または "collect"

    Returns:
        ErrorReporter
    """
    if error_mode == "collect":
        return CollectingReporter()
    return FailFastReporter()
