"""Transform: トークン列→関数本体のPythonコード

出力セグメントはエラーアキュムレータで保護された書き出し文に、
文セグメントはそのままのコードに変換する。Pythonのブロック構造は文から決まる。
- 末尾が ":" の文はブロックを開く
- "end"（endfor / endif / endwhile / endwith / endtry / enddef も可）はブロックを閉じる
- else / elif / except / finally はブロックを閉じてから開き直す
"""

from __future__ import annotations

import logging
import re
import textwrap
from pathlib import Path

from erbgen.core.base.ir import (
    CompiledTemplate,
    EscapeMode,
    OutputToken,
    StatementToken,
    TextToken,
    Token,
)
from erbgen.core.engine.errors import TemplateNotFoundError, TemplateReadError, TemplateSyntaxError
from erbgen.core.engine.lexer import OPEN_MARKER, tokenize_template

logger = logging.getLogger(__name__)

INDENT = "    "
ERROR_VAR = "err"
WRITER_VAR = "writer"

WRITE_HELPER = "write_string"
HTML_HELPER = "escape_html"
URL_HELPER = "url_encode"

_BLOCK_END = re.compile(r"end(?:for|if|while|with|try|def)?")
_CONTINUATION = re.compile(r"(else|elif|except|finally)\b")


def wrap_value(expression: str, mode: EscapeMode) -> str:
    """エスケープ方式に従って式を変換"""
    if mode is EscapeMode.RAW:
        return expression
    if mode is EscapeMode.URL_ENCODE:
        return f"{URL_HELPER}({expression})"
    return f"{HTML_HELPER}({expression})"


def render_write_statement(value: str) -> list[str]:
    """エラー未記録時のみ書き出し、失敗をエラー変数に記録する文"""
    return [
        f"if {ERROR_VAR} is None:",
        f"{INDENT}{ERROR_VAR} = {WRITE_HELPER}({WRITER_VAR}, {value})",
    ]


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def _statement_lines(code: str, column: int = 1) -> list[str]:
    """文のコード単位を行に分割し、インデントを揃える

    2行目以降はまとめて dedent する。先頭行がブロックを開く場合、
    2行目以降は先頭行のコードの桁（"<%" の桁から求める）より深ければ
    その桁からの、浅ければ行頭からの深さでインデントする。
    """
    lines = code.split("\n")
    first = lines[0].strip()
    rest = [line.rstrip() for line in textwrap.dedent("\n".join(lines[1:])).split("\n")] if len(lines) > 1 else []

    body = [line for line in lines[1:] if line.strip()]
    if first.endswith(":") and body:
        code_column = column - 1 + len(OPEN_MARKER) + _indent_width(lines[0])
        depth = min(_indent_width(line) for line in body)
        prefix = " " * (depth - code_column if depth > code_column else depth)
        rest = [prefix + line if line else line for line in rest]

    result = [first] + rest
    while result and not result[0]:
        result.pop(0)
    while result and not result[-1]:
        result.pop()
    return result


class BodyBuilder:
    """インデントを管理しながら関数本体の行を組み立てる"""

    def __init__(self, path: Path | str | None = None):
        self.path = path
        self.lines: list[str] = []
        self.modes: set[EscapeMode] = set()
        # 開いているブロックごとの、開いた時点の行数
        self._blocks: list[tuple[int, StatementToken]] = []

    @property
    def depth(self) -> int:
        return len(self._blocks)

    def add_line(self, line: str) -> None:
        self.lines.append(INDENT * self.depth + line)

    def add_output(self, value: str, mode: EscapeMode) -> None:
        self.modes.add(mode)
        for line in render_write_statement(wrap_value(value, mode)):
            self.add_line(line)

    def add_statement(self, token: StatementToken) -> None:
        lines = _statement_lines(token.code, token.column)
        if not lines:
            return

        if len(lines) == 1 and _BLOCK_END.fullmatch(lines[0]):
            self.close_block(token)
            return

        if _CONTINUATION.match(lines[0]):
            self.close_block(token)

        for line in lines:
            self.add_line(line)

        if lines[-1].endswith(":"):
            self._blocks.append((len(self.lines), token))

    def close_block(self, token: StatementToken) -> None:
        if not self._blocks:
            raise TemplateSyntaxError("block closed without being opened", self.path, token.line, token.column)
        opened_at, _ = self._blocks[-1]
        if len(self.lines) == opened_at:
            self.add_line("pass")
        self._blocks.pop()

    def finish(self) -> CompiledTemplate:
        if self._blocks:
            _, opener = self._blocks[-1]
            raise TemplateSyntaxError("block is never closed", self.path, opener.line, opener.column)
        return CompiledTemplate(lines=self.lines, modes=self.modes)


def transform_tokens(tokens: list[Token], path: Path | str | None = None) -> CompiledTemplate:
    """トークン列を関数本体に変換

    Args:
        tokens: 文書順のトークン列
        path: エラーメッセージ用のテンプレートパス

    Returns:
        CompiledTemplate: 本体の行と使用したエスケープ方式
    """
    builder = BodyBuilder(path)
    for token in tokens:
        if isinstance(token, TextToken):
            builder.add_output(repr(token.text), EscapeMode.RAW)
        elif isinstance(token, OutputToken):
            builder.add_output(token.expression, token.mode)
        elif isinstance(token, StatementToken):
            builder.add_statement(token)
    return builder.finish()


def compile_template(text: str, path: Path | str | None = None) -> CompiledTemplate:
    """テンプレートテキストを関数本体に変換"""
    return transform_tokens(tokenize_template(text, path), path)


def load_template(path: Path) -> CompiledTemplate:
    """テンプレートファイルを読み込んで変換

    Raises:
        TemplateNotFoundError: テンプレートファイルが存在しない
        TemplateReadError: 読み込み失敗
        TemplateSyntaxError: テンプレートの構文エラー
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise TemplateNotFoundError("template file not found", path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateReadError(f"cannot read template: {e}", path) from e

    logger.debug("compiling template %s", path)
    return compile_template(content, path)
