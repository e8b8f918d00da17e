"""
集成测试：使用真实 Chromium 访问本地 HTTP 服务

本地服务对所有页面返回 403（模拟反爬站点），但页面内容仍会被浏览器渲染。
未安装 Playwright 浏览器（playwright install chromium）时跳过。
"""

import threading
from functools import partial
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from imgproxy.retrieval.domain.exceptions import BrowserUnavailableError
from imgproxy.retrieval.domain.value_objects.retrieval_outcome import RetrievalStrategy
from imgproxy.retrieval.domain.value_objects.retrieval_request import RetrievalRequest
from imgproxy.retrieval.infrastructure.browser_session import BrowserSession
from imgproxy.retrieval.infrastructure.direct_fetch_client_impl import DirectFetchClientImpl
from imgproxy.retrieval.infrastructure.header_profile_factory import build_header_profile
from imgproxy.retrieval.services.retrieval_service import RetrievalService
from imgproxy.shared.config import ProxySettings

pytestmark = pytest.mark.integration

IMAGE_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256)) * 4

PAGES = {
    "/gallery": b'<html><body><h1>Protected</h1><img src="/asset/photo.png"></body></html>',
    "/no-image": b"<html><body><h1>Nothing to see</h1></body></html>",
}


class BlockingHandler(BaseHTTPRequestHandler):
    """页面一律返回 403；图片资源只对页面内请求（带 Referer）返回 200"""

    def do_GET(self):
        if self.path in PAGES:
            self._send(403, "text/html", PAGES[self.path])
        elif self.path == "/asset/photo.png" and self.headers.get("Referer"):
            self._send(200, "image/png", IMAGE_BYTES)
        else:
            self._send(404, "text/plain", b"not found")

    def _send(self, status, content_type, body):
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture(scope="module")
def server():
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), BlockingHandler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{httpd.server_address[1]}"
    httpd.shutdown()
    httpd.server_close()


@pytest.fixture(scope="module")
def settings():
    settings = ProxySettings(direct_fetch_timeout=5, navigation_timeout=30)
    probe = BrowserSession(settings, build_header_profile())
    try:
        probe.launch()
    except BrowserUnavailableError as e:
        pytest.skip(f"Chromium not available: {e.message}")
    finally:
        probe.close()
    return settings


@pytest.fixture
def service(settings):
    profile = build_header_profile()
    return RetrievalService(
        direct_client=DirectFetchClientImpl(profile, timeout=settings.direct_fetch_timeout),
        session_factory=partial(BrowserSession, settings, profile),
        navigation_timeout=settings.navigation_timeout,
    )


class TestRealBrowser:

    def test_blocked_page_image_is_fetched_inside_page(self, server, service):
        outcome = service.retrieve(RetrievalRequest(url=f"{server}/gallery"))

        assert outcome.is_success, getattr(outcome, "message", "")
        assert outcome.strategy is RetrievalStrategy.BROWSER_FETCH
        assert outcome.content == IMAGE_BYTES

    def test_page_without_image_is_screenshotted(self, server, service):
        outcome = service.retrieve(RetrievalRequest(url=f"{server}/no-image"))

        assert outcome.is_success, getattr(outcome, "message", "")
        assert outcome.strategy is RetrievalStrategy.BROWSER_SCREENSHOT
        assert outcome.content.startswith(b"\x89PNG")
        assert outcome.content_type == "image/png"
