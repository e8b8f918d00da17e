"""
模块职责（应用层）
- 编排一次图片代理请求：直接请求 →（失败时）浏览器会话 → 资源过滤 + 图片提取；
- 将每一层的结果统一为 RetrievalSuccess / RetrievalFailure，由接口层映射为 HTTP 响应；
- 发布领域事件到事件总线（可选），业务日志由事件处理器写出。

设计要点
- 每一层都返回带标签的结果，编排层按 is_success 判断是否降级，而不是依赖异常在层间传播；
- 浏览器进程是唯一昂贵的资源：每个请求最多一个，且无论从哪个分支退出都在 with 块结束时关闭；
- 本类不持有跨请求的可变状态，可以被多个请求线程同时调用。
"""

import time
from typing import Callable, Optional

from ..domain.demand_interface.i_browser_session import IBrowserSession
from ..domain.demand_interface.i_direct_fetch_client import IDirectFetchClient
from ..domain.domain_event.proxy_events import (
    BrowserFallbackStartedEvent,
    DirectFetchFailedEvent,
    NavigationTimedOutEvent,
    RetrievalFailedEvent,
    RetrievalRequestedEvent,
    RetrievalSucceededEvent,
)
from ..domain.exceptions.retrieval_exceptions import BrowserUnavailableError, ExtractionEmptyError
from ..domain.value_objects.extraction_result import ExtractionTier
from ..domain.value_objects.retrieval_outcome import (
    RASTER_CONTENT_TYPE,
    FailureKind,
    RetrievalFailure,
    RetrievalOutcome,
    RetrievalStrategy,
    RetrievalSuccess,
)
from ..domain.value_objects.retrieval_request import RetrievalRequest
from ..infrastructure.image_extractor import ImageExtractor
from ..infrastructure.resource_filter import ResourceFilter
from imgproxy.shared.event_bus import EventBus
from imgproxy.shared.logging_config import get_error_logger, get_performance_logger

error_logger = get_error_logger()
perf_logger = get_performance_logger()


class RetrievalService:
    """
    应用服务 - 图片检索编排
    职责：
    - 按顺序执行直接请求与浏览器两层检索；
    - 保证浏览器会话在每条执行路径上都被关闭；
    - 检查提取结果非空。
    """

    def __init__(
        self,
        direct_client: IDirectFetchClient,
        session_factory: Callable[[], IBrowserSession],
        extractor: Optional[ImageExtractor] = None,
        filter_factory: Callable[[], ResourceFilter] = ResourceFilter,
        event_bus: Optional[EventBus] = None,
        navigation_timeout: float = 45.0,
    ):
        """
        构造函数注入依赖

        参数:
            direct_client: 直接请求客户端
            session_factory: 每次调用创建一个新的浏览器会话
            extractor: 图片提取器
            filter_factory: 每个页面创建一个新的资源过滤器
            event_bus: 事件总线 (可选，便于测试)
            navigation_timeout: 仅用于事件记录
        """
        self._direct = direct_client
        self._session_factory = session_factory
        self._extractor = extractor or ImageExtractor()
        self._filter_factory = filter_factory
        self._event_bus = event_bus
        self._navigation_timeout = navigation_timeout

    def retrieve(self, request: RetrievalRequest) -> RetrievalOutcome:
        """
        检索目标图片

        参数:
            request: 已通过校验的检索请求

        返回:
            RetrievalSuccess 或 RetrievalFailure（不会抛出异常）
        """
        start_time = time.time()
        self._publish(RetrievalRequestedEvent(
            request_id=request.request_id,
            url=request.url,
            force_browser=request.force_browser,
        ))

        if request.force_browser:
            reason = "forced"
        else:
            # 1. 直接请求：宽松站点的低延迟路径
            outcome = self._direct.fetch(request.url)
            if outcome.is_success:
                return self._finish(request, outcome, start_time)

            self._publish(DirectFetchFailedEvent(
                request_id=request.request_id,
                url=request.url,
                error_message=outcome.message,
            ))
            reason = "direct_fetch_failed"

        # 2. 浏览器兜底（没有第三层）
        self._publish(BrowserFallbackStartedEvent(
            request_id=request.request_id,
            url=request.url,
            reason=reason,
        ))
        outcome = self._fetch_with_browser(request)
        return self._finish(request, outcome, start_time)

    def _fetch_with_browser(self, request: RetrievalRequest) -> RetrievalOutcome:
        """
        启动浏览器 → 注册资源过滤 → 导航 → 提取

        with 块保证无论正常返回、提前返回还是抛出异常，浏览器进程都会被终止
        """
        try:
            with self._session_factory() as session:
                session.launch()

                resource_filter = self._filter_factory()
                session.install_filter(resource_filter)

                if not session.navigate(request.url):
                    self._publish(NavigationTimedOutEvent(
                        request_id=request.request_id,
                        url=request.url,
                        timeout_seconds=self._navigation_timeout,
                    ))

                page = session.start_extraction()
                result = self._extractor.extract(page)

                perf_logger.info(f"Resource filter {request.url} - {resource_filter.stats}", extra={
                    'url': request.url,
                    'component': 'ResourceFilter',
                    **resource_filter.stats
                })

                # 空字节视为两层提取都失败，绝不返回空 body 的 200
                if result.is_empty:
                    raise ExtractionEmptyError()

        except BrowserUnavailableError as e:
            return RetrievalFailure(kind=FailureKind.BROWSER_UNAVAILABLE, message=e.message)

        except ExtractionEmptyError as e:
            return RetrievalFailure(kind=FailureKind.EXTRACTION_EMPTY, message=e.message)

        except Exception as e:
            error_logger.error(
                f"Browser retrieval error: {request.url} - {type(e).__name__} - {str(e)}",
                exc_info=True,
                extra={'url': request.url, 'component': 'RetrievalService', 'error_type': 'Unexpected'}
            )
            return RetrievalFailure(kind=FailureKind.UNEXPECTED_ERROR, message=str(e) or type(e).__name__)

        strategy = (
            RetrievalStrategy.BROWSER_FETCH
            if result.tier is ExtractionTier.IN_PAGE_FETCH
            else RetrievalStrategy.BROWSER_SCREENSHOT
        )
        return RetrievalSuccess(content=result.content, content_type=RASTER_CONTENT_TYPE, strategy=strategy)

    def _finish(self, request: RetrievalRequest, outcome: RetrievalOutcome, start_time: float) -> RetrievalOutcome:
        """发布结束事件"""
        elapsed_ms = (time.time() - start_time) * 1000

        if outcome.is_success:
            self._publish(RetrievalSucceededEvent(
                request_id=request.request_id,
                url=request.url,
                strategy=outcome.strategy.value,
                content_type=outcome.content_type,
                size=outcome.size,
                elapsed_ms=elapsed_ms,
            ))
        else:
            error_logger.error(
                f"Proxy failed: {request.url} - {outcome.kind.value}: {outcome.message}",
                extra={'url': request.url, 'error_type': outcome.kind.value, 'component': 'RetrievalService'}
            )
            self._publish(RetrievalFailedEvent(
                request_id=request.request_id,
                url=request.url,
                failure_kind=outcome.kind.value,
                error_message=outcome.message,
                elapsed_ms=elapsed_ms,
            ))
        return outcome

    def set_event_bus(self, event_bus: Optional[EventBus]) -> None:
        """替换事件总线（应用启动时由组合根注入）"""
        self._event_bus = event_bus

    def _publish(self, event) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)
