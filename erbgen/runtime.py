"""生成コードが呼び出すランタイムヘルパー

生成された Write<Name> 関数は、書き出しの失敗を例外として送出せず
戻り値のエラーとして受け取り、最初のエラーを呼び出し元に返す。
"""

from __future__ import annotations

import html
from typing import Any, Protocol
from urllib.parse import quote_plus


class Writer(Protocol):
    """write(str) を持つ書き出し先"""

    def write(self, s: str, /) -> Any: ...


def write_string(writer: Writer, value: Any) -> Exception | None:
    """値を文字列として書き出す

    Returns:
        書き出しが送出した例外、成功時は None
    """
    try:
        writer.write(value if isinstance(value, str) else str(value))
    except Exception as e:
        return e
    return None


def escape_html(value: Any) -> str:
    """HTML特殊文字（& < > " '）をエスケープ"""
    return html.escape(str(value), quote=True)


def url_encode(value: Any) -> str:
    """クエリ文字列用にエンコード（空白は "+"）"""
    return quote_plus(str(value))
