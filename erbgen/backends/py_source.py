"""Pythonソースのパーサー／プリンタ

ast で宣言を取り出し、ast が保持しないコメントはソース行から読む。
"""

from __future__ import annotations

import ast
import re
import tokenize
from pathlib import Path

from erbgen.core.base.ir import Declaration, SourceFile, TypeSpec
from erbgen.core.engine.errors import SignatureError, SourceParseError
from erbgen.core.engine.scanner import FUNCTION_KEYWORD

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _first_line(node: ast.stmt) -> int:
    decorators = getattr(node, "decorator_list", [])
    return min([node.lineno] + [d.lineno for d in decorators])


def _leading_comments(lines: list[str], first_line: int) -> list[str]:
    """宣言の直前にある連続したコメント行（インデントと改行を除いたテキスト）"""
    comments: list[str] = []
    index = first_line - 2
    while index >= 0:
        text = lines[index].lstrip(" \t")
        if not text.startswith("#"):
            break
        comments.append(text)
        index -= 1
    comments.reverse()
    return comments


def _type_specs(node: ast.stmt) -> list[TypeSpec]:
    if isinstance(node, ast.FunctionDef):
        return [TypeSpec(name=node.name, node=node, lineno=node.lineno)]
    if isinstance(node, ast.ClassDef):
        return [
            TypeSpec(name=child.name, node=child, lineno=child.lineno)
            for child in node.body
            if isinstance(child, ast.FunctionDef)
        ]
    return []


class PythonSourceParser:
    """Pythonモジュール用の SourceParser 実装

    宣言はモジュール直下の文。def スタブは1つのTypeSpecを、
    class はその直下の def スタブ群をTypeSpecとして持つ。
    """

    source_suffix = ".py"

    def parse(self, path: Path) -> SourceFile:
        """ソースファイルをパース

        Raises:
            SourceParseError: 読み込み失敗または構文エラー
        """
        try:
            with tokenize.open(path) as f:
                source = f.read()
        except (OSError, SyntaxError, UnicodeDecodeError) as e:
            raise SourceParseError(f"cannot read source: {e}", path) from e

        try:
            tree = ast.parse(source, filename=str(path))
        except SyntaxError as e:
            raise SourceParseError(f"invalid syntax at line {e.lineno}: {e.msg}", path) from e

        lines = _LINE_BREAK.split(source)
        declarations = []
        for node in tree.body:
            first_line = _first_line(node)
            declarations.append(
                Declaration(
                    comments=_leading_comments(lines, first_line),
                    type_specs=_type_specs(node),
                    lineno=first_line,
                )
            )

        return SourceFile(
            path=path,
            declarations=declarations,
            is_package=(path.parent / "__init__.py").is_file(),
        )

    def list_declarations(self, source_file: SourceFile) -> list[Declaration]:
        return source_file.declarations

    def has_annotation(self, declaration: Declaration, marker: str) -> bool:
        return any(comment == marker for comment in declaration.comments)

    def serialize_type(self, type_spec: TypeSpec) -> str:
        """関数型を "def(params) -> returns" 形式で文字列化

        Raises:
            SignatureError: 関数型でない、または文字列化に失敗
        """
        node = type_spec.node
        if not isinstance(node, ast.FunctionDef):
            raise SignatureError(f"{type_spec.name} is not a function type")

        try:
            params = ast.unparse(node.args)
            returns = f" -> {ast.unparse(node.returns)}" if node.returns is not None else ""
        except (ValueError, TypeError, AttributeError, RecursionError) as e:
            raise SignatureError(f"cannot print signature of {type_spec.name}: {e}") from e

        return f"{FUNCTION_KEYWORD}({params}){returns}"
