"""Scanner: アノテーション付き宣言の抽出

パーサーの機能インターフェース（SourceParser）だけに依存し、
特定のパーサー実装からは独立している。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from erbgen.core.base.ir import Declaration, ScanResult, SourceFile, TypeSpec

logger = logging.getLogger(__name__)

FUNCTION_KEYWORD = "def"


class SourceParser(Protocol):
    """ホスト言語のパーサー／プリンタの機能インターフェース"""

    source_suffix: str

    def parse(self, path: Path) -> SourceFile:
        """ソースファイルをパースする"""
        ...

    def list_declarations(self, source_file: SourceFile) -> list[Declaration]:
        """ソース順の宣言一覧"""
        ...

    def has_annotation(self, declaration: Declaration, marker: str) -> bool:
        """宣言のコメントにマーカーと完全一致する行があるか"""
        ...

    def serialize_type(self, type_spec: TypeSpec) -> str:
        """関数型を "def(...) -> ..." 形式の文字列に戻す"""
        ...


def scan_declarations(parser: SourceParser, source_file: SourceFile, marker: str) -> list[ScanResult]:
    """生成対象の (名前, シグネチャ) を抽出

    アノテーションの無い宣言は配下のTypeSpecごとスキップする。
    TypeSpecより下は見ない。

    Args:
        parser: パーサー
        source_file: パース済みソースファイル
        marker: アノテーションマーカー（完全一致）

    Returns:
        宣言順の ScanResult リスト

    Raises:
        SignatureError: シグネチャの文字列化に失敗
    """
    results: list[ScanResult] = []
    for declaration in parser.list_declarations(source_file):
        if not parser.has_annotation(declaration, marker):
            continue
        for type_spec in declaration.type_specs:
            signature = parser.serialize_type(type_spec)
            logger.debug("%s: found %s%s", source_file.path, type_spec.name, signature)
            results.append(ScanResult(name=type_spec.name, signature=signature))
    return results


def strip_function_keyword(signature: str) -> str:
    """シグネチャ先頭の関数キーワードを取り除く"""
    if signature.startswith(FUNCTION_KEYWORD):
        return signature[len(FUNCTION_KEYWORD) :]
    return signature
