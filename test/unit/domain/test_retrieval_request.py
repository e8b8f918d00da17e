"""
RetrievalRequest 的 pytest 测试
覆盖：绝对 URL 校验、查询参数解码、强制浏览器标志
"""

import pytest

from imgproxy.retrieval.domain.value_objects.retrieval_request import RetrievalRequest
from imgproxy.retrieval.domain.exceptions import InvalidRequestError


class TestValidation:
    """测试 URL 校验"""

    @pytest.mark.parametrize("url", [
        "https://example.com/a.jpg",
        "http://example.com",
        "HTTPS://Example.com/path?q=1",
        "https://cdn.example.com:8443/img/b.png",
    ])
    def test_accepts_absolute_http_urls(self, url):
        request = RetrievalRequest(url=url)
        assert request.url == url
        assert request.force_browser is False

    @pytest.mark.parametrize("url", [
        "",
        "   ",
        "example.com/a.jpg",
        "/relative/path.jpg",
        "ftp://example.com/a.jpg",
        "javascript:alert(1)",
        "file:///etc/passwd",
        "https://",
    ])
    def test_rejects_non_absolute_or_unsupported_urls(self, url):
        with pytest.raises(InvalidRequestError):
            RetrievalRequest(url=url)

    def test_strips_surrounding_whitespace(self):
        request = RetrievalRequest(url="  https://example.com/a.jpg  ")
        assert request.url == "https://example.com/a.jpg"

    def test_each_request_gets_unique_id(self):
        first = RetrievalRequest(url="https://example.com/a.jpg")
        second = RetrievalRequest(url="https://example.com/a.jpg")
        assert first.request_id != second.request_id


class TestFromQuery:
    """测试从查询参数构造请求"""

    def test_already_decoded_url_is_kept(self):
        request = RetrievalRequest.from_query("https://example.com/a%20b.jpg")
        # 已经是绝对地址时不再解码，保留路径中的转义
        assert request.url == "https://example.com/a%20b.jpg"

    def test_double_encoded_url_is_decoded(self):
        request = RetrievalRequest.from_query("https%3A%2F%2Fexample.com%2Fa.jpg")
        assert request.url == "https://example.com/a.jpg"

    def test_force_browser_flag_is_carried(self):
        request = RetrievalRequest.from_query("https://example.com/a.jpg", force_browser=True)
        assert request.force_browser is True

    def test_garbage_still_rejected_after_decoding(self):
        with pytest.raises(InvalidRequestError):
            RetrievalRequest.from_query("not%20a%20url")
