import time
from enum import Enum
from typing import Any, Callable, Optional

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError, sync_playwright

from ..domain.demand_interface.i_browser_session import IBrowserSession
from ..domain.exceptions.retrieval_exceptions import (
    BrowserSessionStateError,
    BrowserUnavailableError,
)
from ..domain.value_objects.header_profile import HeaderProfile, referer_for
from imgproxy.shared.config import ProxySettings
from imgproxy.shared.logging_config import get_error_logger, get_performance_logger

# 获取 logger
error_logger = get_error_logger()
perf_logger = get_performance_logger()


class SessionState(Enum):
    CREATED = "CREATED"
    LAUNCHED = "LAUNCHED"
    NAVIGATED = "NAVIGATED"
    EXTRACTING = "EXTRACTING"
    CLOSED = "CLOSED"


class BrowserSession(IBrowserSession):
    """
    Playwright 浏览器会话

    Playwright Sync API 非线程安全，这里采用“每个请求启动独立实例”的策略：
    一个会话只属于一个请求，持有一个驱动、一个浏览器进程、一个上下文和一个页面。
    无论从哪个分支退出，close() 都会终止浏览器进程。
    """

    def __init__(
        self,
        settings: ProxySettings,
        header_profile: HeaderProfile,
        playwright_factory: Callable[[], Any] = sync_playwright,
    ):
        self._settings = settings
        self._profile = header_profile
        self._playwright_factory = playwright_factory

        self._state = SessionState.CREATED
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None
        self.navigation_completed: Optional[bool] = None

    @property
    def state(self) -> SessionState:
        return self._state

    def launch(self) -> None:
        """
        启动 headless Chromium，并按请求头模板创建上下文和页面

        任何一步失败都会释放已获取的资源，并抛出 BrowserUnavailableError
        """
        self._require(SessionState.CREATED)
        start_time = time.time()

        try:
            self._playwright = self._playwright_factory().start()

            launch_options = {'headless': self._settings.headless}
            if self._settings.browser_executable_path:
                launch_options['executable_path'] = self._settings.browser_executable_path
            if self._settings.browser_args:
                launch_options['args'] = list(self._settings.browser_args)
            self._browser = self._playwright.chromium.launch(**launch_options)

            # 创建新上下文（相当于隐身窗口），与直接请求使用同一份请求头
            self._context = self._browser.new_context(
                user_agent=self._profile.user_agent,
                extra_http_headers=self._profile.without_user_agent(),
            )
            self._page = self._context.new_page()

        except Exception as e:
            error_logger.error(
                f"Browser launch failed: {type(e).__name__} - {str(e)}",
                exc_info=True,
                extra={'component': 'BrowserSession', 'error_type': 'BrowserUnavailable'}
            )
            self.close()
            raise BrowserUnavailableError(f"Browser unavailable: {str(e)}") from e

        self._state = SessionState.LAUNCHED
        elapsed_ms = (time.time() - start_time) * 1000
        perf_logger.info(f"Browser Launch - {elapsed_ms:.2f}ms", extra={
            'method': 'LAUNCH',
            'elapsed_ms': elapsed_ms,
            'component': 'BrowserSession'
        })

    def install_filter(self, route_handler: Callable[[Any], None]) -> None:
        """拦截页面发出的所有请求，必须在 navigate() 之前调用"""
        self._require(SessionState.LAUNCHED)
        self._page.route("**/*", route_handler)

    def navigate(self, url: str) -> bool:
        """
        访问页面并等待网络空闲

        超时属于软失败：记录日志后返回 False，会话仍进入 NAVIGATED，后续对现有 DOM 进行提取
        """
        self._require(SessionState.LAUNCHED)
        start_time = time.time()

        try:
            self._page.goto(
                url,
                wait_until="networkidle",
                timeout=self._settings.navigation_timeout_ms,
                referer=referer_for(url),
            )
            self.navigation_completed = True
        except PlaywrightTimeoutError:
            error_logger.warning(
                f"Navigation timeout after {self._settings.navigation_timeout}s: {url}",
                extra={'url': url, 'component': 'BrowserSession', 'error_type': 'NavigationTimeout'}
            )
            self.navigation_completed = False

        self._state = SessionState.NAVIGATED
        elapsed_ms = (time.time() - start_time) * 1000
        perf_logger.info(f"Playwright Navigate {url} - {elapsed_ms:.2f}ms", extra={
            'url': url,
            'method': 'RENDER',
            'elapsed_ms': elapsed_ms,
            'completed': self.navigation_completed,
            'component': 'BrowserSession'
        })
        return self.navigation_completed

    def start_extraction(self) -> Any:
        """进入提取阶段并返回页面对象"""
        self._require(SessionState.LAUNCHED, SessionState.NAVIGATED)
        self._state = SessionState.EXTRACTING
        return self._page

    def close(self) -> None:
        """
        关闭浏览器并停止驱动

        幂等；关闭过程中的错误只记录日志，不会覆盖调用方已经捕获的异常
        """
        if self._state is SessionState.CLOSED:
            return
        self._state = SessionState.CLOSED

        if self._browser is not None:
            try:
                self._browser.close()
            except Exception as e:
                error_logger.warning(
                    f"Browser close failed: {type(e).__name__} - {str(e)}",
                    extra={'component': 'BrowserSession'}
                )

        if self._playwright is not None:
            try:
                self._playwright.stop()
            except Exception as e:
                error_logger.warning(
                    f"Playwright stop failed: {type(e).__name__} - {str(e)}",
                    extra={'component': 'BrowserSession'}
                )

        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None

    def _require(self, *states: SessionState) -> None:
        if self._state not in states:
            expected = "/".join(s.value for s in states)
            raise BrowserSessionStateError(
                f"Operation requires state {expected}, current state is {self._state.value}"
            )
