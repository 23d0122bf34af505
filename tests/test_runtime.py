"""ランタイムヘルパーのテスト"""

import io

from erbgen.runtime import escape_html, url_encode, write_string
from helpers import FailingWriter


class TestWriteString:
    """書き出しとエラーの返却"""

    def test_write(self):
        writer = io.StringIO()

        assert write_string(writer, "abc") is None
        assert writer.getvalue() == "abc"

    def test_non_string_value(self):
        writer = io.StringIO()

        write_string(writer, 3.5)
        assert writer.getvalue() == "3.5"

    def test_error_is_returned(self):
        """書き出しの例外は送出せず戻り値で返す"""
        writer = FailingWriter(fail_at=1)

        assert write_string(writer, "abc") is writer.error

    def test_closed_writer(self):
        writer = io.StringIO()
        writer.close()

        assert isinstance(write_string(writer, "abc"), ValueError)


class TestEscaping:
    """エスケープ関数"""

    def test_escape_html(self):
        assert escape_html("<a href=\"x\">Tom & 'Jerry'</a>") == (
            "&lt;a href=&quot;x&quot;&gt;Tom &amp; &#x27;Jerry&#x27;&lt;/a&gt;"
        )

    def test_escape_html_non_string(self):
        assert escape_html(1) == "1"

    def test_url_encode(self):
        assert url_encode("a b&c=d/é") == "a+b%26c%3Dd%2F%C3%A9"
