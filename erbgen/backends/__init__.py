"""バックエンド層 - ホスト言語固有の処理

Pythonソースのパースとシグネチャの文字列化、外部フォーマッタの実行。
"""

from . import formatter, py_source

__all__ = ["formatter", "py_source"]
