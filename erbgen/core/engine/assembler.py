"""Assembler: 生成関数と出力ファイル内容の組み立て

ScanResult とテンプレートから Write<Name> 関数を作り、
1ソースファイル分の関数をヘッダー・名前空間節とともに1つの出力ユニットにまとめる。
"""

from __future__ import annotations

from pathlib import Path

from erbgen.core.base.ir import EscapeMode, GeneratedFunction, OutputUnit, ScanResult, SourceFile
from erbgen.core.engine.scanner import strip_function_keyword
from erbgen.core.engine.transform import (
    ERROR_VAR,
    HTML_HELPER,
    INDENT,
    URL_HELPER,
    WRITE_HELPER,
    load_template,
)

FUNCTION_PREFIX = "Write"
RUNTIME_MODULE = "erbgen.runtime"


def template_path_for(source_path: Path, name: str, template_extension: str = ".erb") -> Path:
    """宣言に対応するテンプレートファイルのパス（ソースと同じディレクトリ）"""
    return source_path.parent / f"{name}{template_extension}"


def output_path_for(source_path: Path, output_suffix: str = "_gen") -> Path:
    """出力ファイルのパス（<stem><suffix>.py）"""
    return source_path.with_name(f"{source_path.stem}{output_suffix}{source_path.suffix}")


def render_function(name: str, signature: str, body_lines: list[str]) -> str:
    """Write<name> 関数のソースを組み立てる

    Args:
        name: TypeSpec名
        signature: 関数キーワードを除いたシグネチャ
        body_lines: 関数本体の行（本体基準のインデント）

    Returns:
        関数のソース（末尾改行付き）
    """
    lines = [f"def {FUNCTION_PREFIX}{name}{signature}:", f"{INDENT}{ERROR_VAR} = None"]
    lines.extend(INDENT + line if line else line for line in body_lines)
    lines.append(f"{INDENT}return {ERROR_VAR}")
    return "\n".join(lines) + "\n"


def build_function(result: ScanResult, source_path: Path, template_extension: str = ".erb") -> GeneratedFunction:
    """ScanResult から生成関数を作成

    Raises:
        TemplateNotFoundError: テンプレートファイルが存在しない
    """
    signature = strip_function_keyword(result.signature)
    compiled = load_template(template_path_for(source_path, result.name, template_extension))
    return GeneratedFunction(
        name=f"{FUNCTION_PREFIX}{result.name}",
        source=render_function(result.name, signature, compiled.lines),
        modes=compiled.modes,
    )


def runtime_helpers(functions: list[GeneratedFunction]) -> list[str]:
    """生成関数が使用するランタイムヘルパー名"""
    modes: set[EscapeMode] = set()
    for function in functions:
        modes |= function.modes

    helpers = set()
    if modes:
        helpers.add(WRITE_HELPER)
    if modes & {EscapeMode.HTML_ESCAPE_EXPLICIT, EscapeMode.HTML_ESCAPE_DEFAULT}:
        helpers.add(HTML_HELPER)
    if EscapeMode.URL_ENCODE in modes:
        helpers.add(URL_HELPER)
    return sorted(helpers)


def render_namespace_clause(source_file: SourceFile) -> str:
    """ソースモジュールの名前を生成コードから見えるようにする import"""
    prefix = "." if source_file.is_package else ""
    return f"from {prefix}{source_file.module_name} import *  # noqa: F401,F403"


def build_file_content(header: str, source_file: SourceFile, functions: list[GeneratedFunction]) -> str:
    """出力ファイルの内容を構築

    Args:
        header: 先頭のマーカーコメント
        source_file: 元のソースファイル
        functions: 生成関数

    Returns:
        完成したファイルコンテンツ
    """
    lines = [header, "from __future__ import annotations", ""]
    helpers = runtime_helpers(functions)
    if helpers:
        lines.append(f"from {RUNTIME_MODULE} import {', '.join(helpers)}")
    lines.append(render_namespace_clause(source_file))
    lines.extend(["", "", ""])
    return "\n".join(lines) + "\n\n".join(function.source for function in functions)


def assemble_output(
    source_file: SourceFile,
    functions: list[GeneratedFunction],
    header: str = "# Autogenerated",
    output_suffix: str = "_gen",
) -> OutputUnit | None:
    """1ソースファイル分の出力ユニットを作成

    Returns:
        OutputUnit、生成関数が1つも無い場合は None
    """
    if not functions:
        return None
    return OutputUnit(
        source=source_file,
        path=output_path_for(source_file.path, output_suffix),
        functions=functions,
        content=build_file_content(header, source_file, functions),
    )
