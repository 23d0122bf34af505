"""Lexer: テンプレートテキスト→トークン列

2段階で処理する。
1. 空行抑制: 文だけの行（<% ... %> のみの行）が出力に残す改行を取り除く
2. 分割: テキストモード／コードモードの2状態レキサでトークン化する
"""

from __future__ import annotations

import bisect
import re
from enum import Enum
from pathlib import Path

from erbgen.core.base.ir import EscapeMode, OutputToken, StatementToken, TextToken, Token
from erbgen.core.engine.errors import TemplateSyntaxError

OPEN_MARKER = "<%"
CLOSE_MARKER = "%>"
OUTPUT_MARKER = "="

# 改行、空白、文だけのコード単位、空白、改行（\s は ASCII の \t\n\f\r と空白のみ）
_TRIM_PATTERN = re.compile(r"\n[\t\n\f\r ]*(<%[^=](?:[^%]|%[^>])+%>)[\t\n\f\r ]*\n")

_ESCAPE_FLAGS = {
    "=": EscapeMode.RAW,
    "u": EscapeMode.URL_ENCODE,
    "h": EscapeMode.HTML_ESCAPE_EXPLICIT,
}


class _LineMap:
    """空行抑制後の位置から元テキストの行番号・桁を求める"""

    def __init__(self) -> None:
        self._offsets: list[int] = [0]
        self._removed: list[int] = [0]
        # 前の行に詰められたコード単位の、元テキストでの桁
        self._unit_columns: dict[int, int] = {}

    def add(self, offset: int, removed: int) -> None:
        self._offsets.append(offset)
        self._removed.append(removed)

    def removed_before(self, offset: int) -> int:
        index = bisect.bisect_right(self._offsets, offset) - 1
        return self._removed[index]

    def add_unit_column(self, offset: int, column: int) -> None:
        self._unit_columns[offset] = column

    def unit_column(self, offset: int) -> int | None:
        return self._unit_columns.get(offset)


def trim_statement_lines(text: str) -> str:
    """文だけの行を「コード単位 + 改行1つ」に置き換える

    直前の改行もマッチに含まれるため、連続する文だけの行は
    それぞれ独立に（非再帰・非重複で）処理される。
    """
    return _TRIM_PATTERN.sub(lambda m: m.group(1) + "\n", text)


def _trim_with_line_map(text: str) -> tuple[str, _LineMap]:
    line_map = _LineMap()
    pieces: list[str] = []
    last = 0
    new_length = 0
    removed = 0

    for match in _TRIM_PATTERN.finditer(text):
        pieces.append(text[last : match.start()])
        new_length += match.start() - last

        unit = match.group(1)
        line_map.add(new_length, removed + text.count("\n", match.start(), match.start(1)))
        line_map.add_unit_column(new_length, match.start(1) - text.rfind("\n", 0, match.start(1)))
        pieces.append(unit + "\n")
        new_length += len(unit) + 1
        removed += match.group(0).count("\n") - 1
        line_map.add(new_length, removed)
        last = match.end()

    pieces.append(text[last:])
    return "".join(pieces), line_map


class _State(Enum):
    TEXT = "text"
    CODE = "code"


class TemplateLexer:
    """テキストモード／コードモードの2状態レキサ

    Args:
        text: テンプレートテキスト
        path: エラーメッセージ用のテンプレートパス
    """

    def __init__(self, text: str, path: Path | str | None = None):
        self.path = path
        self.text, self._line_map = _trim_with_line_map(text)
        self.pos = 0
        self.tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        state = _State.TEXT
        while self.pos < len(self.text):
            if state is _State.TEXT:
                self._lex_text()
                state = _State.CODE
            else:
                self._lex_code()
                state = _State.TEXT
        return self.tokens

    def _location(self, offset: int) -> tuple[int, int]:
        line_start = self.text.rfind("\n", 0, offset) + 1
        line = self.text.count("\n", 0, offset) + 1 + self._line_map.removed_before(offset)
        column = self._line_map.unit_column(offset)
        return line, column if column is not None else offset - line_start + 1

    def _error(self, message: str, offset: int) -> TemplateSyntaxError:
        line, column = self._location(offset)
        return TemplateSyntaxError(message, self.path, line, column)

    def _lex_text(self) -> None:
        start = self.pos
        end = self.text.find(OPEN_MARKER, start)
        if end == -1:
            end = len(self.text)
        if end > start:
            line, column = self._location(start)
            self.tokens.append(TextToken(self.text[start:end], line, column))
        self.pos = end

    def _lex_code(self) -> None:
        start = self.pos
        end = self.text.find(CLOSE_MARKER, start + len(OPEN_MARKER))
        if end == -1:
            raise self._error(f"unterminated code unit, missing {CLOSE_MARKER!r}", start)

        inner = self.text[start + len(OPEN_MARKER) : end]
        if not inner:
            raise self._error("empty code unit", start)

        line, column = self._location(start)
        if inner.startswith(OUTPUT_MARKER):
            self.tokens.append(self._output_token(inner[len(OUTPUT_MARKER) :], start, line, column))
        else:
            self.tokens.append(StatementToken(inner, line, column))
        self.pos = end + len(CLOSE_MARKER)

    def _output_token(self, expression: str, offset: int, line: int, column: int) -> OutputToken:
        stripped = expression.lstrip()
        if not stripped.strip():
            raise self._error("empty output expression", offset)

        mode = _ESCAPE_FLAGS.get(stripped[0])
        if mode is None:
            return OutputToken(stripped.strip(), EscapeMode.HTML_ESCAPE_DEFAULT, line, column)

        value = stripped[1:].strip()
        if not value:
            raise self._error(f"empty output expression after escape flag {stripped[0]!r}", offset)
        return OutputToken(value, mode, line, column)


def tokenize_template(text: str, path: Path | str | None = None) -> list[Token]:
    """テンプレートテキストをトークン列に変換

    Args:
        text: テンプレートテキスト
        path: エラーメッセージ用のテンプレートパス

    Returns:
        文書順のトークン列

    Raises:
        TemplateSyntaxError: 閉じられていない、または空のコード単位
    """
    return TemplateLexer(text, path).tokenize()
