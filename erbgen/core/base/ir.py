"""中間表現（IR）データ構造定義

ソースファイル→宣言→テンプレートトークン→生成関数→出力ユニットの
各段階で受け渡すデータを定義する。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Union


class EscapeMode(Enum):
    """出力式に適用するエスケープ方式"""

    RAW = "raw"
    URL_ENCODE = "url_encode"
    HTML_ESCAPE_EXPLICIT = "html_escape_explicit"
    HTML_ESCAPE_DEFAULT = "html_escape_default"


@dataclass(frozen=True)
class TextToken:
    """リテラルテキストのセグメント"""

    text: str
    line: int = 1
    column: int = 1


@dataclass(frozen=True)
class StatementToken:
    """出力を伴わないコードセグメント（<% code %>）"""

    code: str
    line: int = 1
    column: int = 1


@dataclass(frozen=True)
class OutputToken:
    """出力式セグメント（<%= expr %>）

    Attributes:
        expression: エスケープ方式の指示文字を取り除いた式
        mode: エスケープ方式
    """

    expression: str
    mode: EscapeMode
    line: int = 1
    column: int = 1


Token = Union[TextToken, StatementToken, OutputToken]


@dataclass
class TypeSpec:
    """名前付きの関数型（シグネチャスタブ）

    Attributes:
        name: 型名（生成関数名は Write<name>）
        node: パーサーが返した関数型ノード
        lineno: 宣言行
    """

    name: str
    node: Any
    lineno: int = 0


@dataclass
class Declaration:
    """1つ以上のTypeSpecをまとめる宣言

    Attributes:
        comments: 直前のコメントブロック（各行のコメントテキスト）
        type_specs: 宣言に属するTypeSpec
        lineno: 宣言の先頭行（デコレータを含む）
    """

    comments: list[str] = field(default_factory=list)
    type_specs: list[TypeSpec] = field(default_factory=list)
    lineno: int = 0


@dataclass
class SourceFile:
    """パース済みソースファイル"""

    path: Path
    declarations: list[Declaration] = field(default_factory=list)
    is_package: bool = False

    @property
    def module_name(self) -> str:
        return self.path.stem


@dataclass(frozen=True)
class ScanResult:
    """スキャナーが抽出した (名前, シグネチャ) の組"""

    name: str
    signature: str


@dataclass
class CompiledTemplate:
    """テンプレートの変換結果

    Attributes:
        lines: インデント済みの関数本体の行
        modes: 本体が使用するエスケープ方式
    """

    lines: list[str] = field(default_factory=list)
    modes: set[EscapeMode] = field(default_factory=set)

    @property
    def body(self) -> str:
        return "".join(line + "\n" for line in self.lines)


@dataclass
class GeneratedFunction:
    """生成された書き出し関数"""

    name: str
    source: str
    modes: set[EscapeMode] = field(default_factory=set)


@dataclass
class OutputUnit:
    """1ソースファイル分の生成結果"""

    source: SourceFile
    path: Path
    functions: list[GeneratedFunction] = field(default_factory=list)
    content: str = ""
