import pytest

from imgproxy.retrieval.domain.value_objects.header_profile import referer_for
from imgproxy.retrieval.infrastructure.header_profile_factory import (
    DEFAULT_USER_AGENT,
    build_header_profile,
)


@pytest.fixture
def profile():
    return build_header_profile()


class TestHeaderProfile:
    """测试请求头模板"""

    def test_contains_browser_like_headers(self, profile):
        headers = profile.as_dict()
        assert headers["User-Agent"] == DEFAULT_USER_AGENT
        assert headers["Accept-Language"] == "en-US,en;q=0.9"
        assert headers["Sec-Fetch-Dest"] == "image"
        assert headers["Sec-Fetch-Mode"] == "navigate"
        assert headers["Sec-Fetch-Site"] == "none"
        assert "Referer" not in headers

    def test_header_order_is_stable(self, profile):
        names = list(profile.as_dict().keys())
        assert names[0] == "User-Agent"
        assert names == [name for name, _ in profile.headers]

    def test_profile_is_deterministic(self):
        assert build_header_profile() == build_header_profile()

    def test_user_agent_override(self):
        profile = build_header_profile("TestBot/1.0")
        assert profile.user_agent == "TestBot/1.0"

    def test_without_user_agent(self, profile):
        headers = profile.without_user_agent()
        assert "User-Agent" not in headers
        assert headers["Accept-Language"] == "en-US,en;q=0.9"

    def test_with_referer_adds_origin(self, profile):
        headers = profile.with_referer("https://cdn.example.com/a/b.jpg?x=1")
        assert headers["Referer"] == "https://cdn.example.com/"
        # 模板本身不被修改
        assert "Referer" not in profile.as_dict()


class TestRefererFor:

    @pytest.mark.parametrize("url,expected", [
        ("https://example.com/a.jpg", "https://example.com/"),
        ("http://example.com:8080/x/y", "http://example.com:8080/"),
        ("not a url", None),
    ])
    def test_referer_derivation(self, url, expected):
        assert referer_for(url) == expected
