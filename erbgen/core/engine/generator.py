"""Generator: ディレクトリ単位のコード生成

ソースファイルごとに Scanner → Transform → Assembler → 書き込み → フォーマッタ
を順に実行する。ファイルはファイル名の辞書順で処理する。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from erbgen.backends.formatter import run_formatter
from erbgen.backends.py_source import PythonSourceParser
from erbgen.core.base.ir import OutputUnit
from erbgen.core.engine.assembler import assemble_output, build_function
from erbgen.core.engine.config_model import GeneratorConfig
from erbgen.core.engine.errors import ErbgenError, ErrorReporter, OutputWriteError, create_reporter
from erbgen.core.engine.scanner import SourceParser, scan_declarations

logger = logging.getLogger(__name__)


class Generator:
    """アノテーション付き宣言からテンプレート関数を生成する

    Args:
        config: 生成設定（省略時はデフォルト）
        parser: ホスト言語のパーサー（省略時は PythonSourceParser）
        reporter_factory: error_mode から ErrorReporter を作る関数
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        parser: SourceParser | None = None,
        reporter_factory: Callable[[str], ErrorReporter] = create_reporter,
    ):
        self.config = config or GeneratorConfig()
        self.parser = parser or PythonSourceParser()
        self.reporter_factory = reporter_factory

    def source_files(self, directory: Path) -> list[Path]:
        """ディレクトリ直下のソースファイル（名前順）"""
        return sorted(
            path for path in directory.iterdir() if path.is_file() and path.suffix == self.parser.source_suffix
        )

    def compile_file(self, path: Path) -> OutputUnit | None:
        """1ソースファイルを出力ユニットに変換

        Returns:
            OutputUnit、生成対象の宣言が無い場合は None
        """
        source_file = self.parser.parse(path)
        results = scan_declarations(self.parser, source_file, self.config.marker)
        functions = [build_function(result, path, self.config.template_extension) for result in results]
        return assemble_output(source_file, functions, self.config.header, self.config.output_suffix)

    def write_output(self, unit: OutputUnit) -> None:
        """出力ファイルを上書きし、フォーマッタを実行"""
        try:
            with open(unit.path, "w", encoding="utf-8", newline="\n") as f:
                f.write(unit.content)
        except OSError as e:
            raise OutputWriteError(f"cannot write output: {e}", unit.path) from e

        logger.info("wrote %s (%d function(s))", unit.path, len(unit.functions))
        run_formatter(self.config.formatter, unit.path)

    def run(self, directory: Path) -> list[Path]:
        """ディレクトリ内の全ソースファイルを処理

        Args:
            directory: 走査するディレクトリ

        Returns:
            書き込んだ出力ファイルのパス

        Raises:
            ErbgenError: fail_fast モードでの最初のエラー
            GenerationFailed: collect モードで1つ以上のエラー
        """
        if not directory.is_dir():
            raise ErbgenError("not a directory", directory)

        reporter = self.reporter_factory(self.config.error_mode)
        written: list[Path] = []

        for path in self.source_files(directory):
            logger.debug("scanning %s", path)
            try:
                unit = self.compile_file(path)
                if unit is None:
                    continue
                self.write_output(unit)
            except ErbgenError as e:
                reporter.report(e)
                continue
            written.append(unit.path)

        reporter.finish()
        return written


def generate(directory: str | Path, config: GeneratorConfig | None = None) -> list[Path]:
    """ディレクトリのテンプレート関数を生成（Generator のショートカット）"""
    return Generator(config).run(Path(directory))
