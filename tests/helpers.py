"""テスト用ヘルパー

生成された関数をその場で実行するための補助関数。
"""

from __future__ import annotations

from erbgen.core.engine.assembler import render_function
from erbgen.core.engine.transform import compile_template
from erbgen.runtime import escape_html, url_encode, write_string


class FailingWriter:
    """fail_at 回目以降の write で例外を送出する書き出し先"""

    def __init__(self, fail_at: int = 1, error: Exception | None = None):
        self.fail_at = fail_at
        self.error = error or OSError("disk full")
        self.calls = 0
        self.written: list[str] = []

    def write(self, s: str) -> int:
        self.calls += 1
        if self.calls >= self.fail_at:
            raise self.error
        self.written.append(s)
        return len(s)

    def getvalue(self) -> str:
        return "".join(self.written)


def build_writer(template: str, signature: str = "(writer)", namespace: dict | None = None):
    """テンプレートから WriteTemplate 関数を生成して返す"""
    compiled = compile_template(template)
    source = render_function("Template", signature, compiled.lines)
    scope = {"write_string": write_string, "escape_html": escape_html, "url_encode": url_encode}
    scope.update(namespace or {})
    exec(compile(source, "<generated>", "exec"), scope)
    return scope["WriteTemplate"]
