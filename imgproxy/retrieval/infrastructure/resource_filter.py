import logging
from collections import Counter
from typing import Dict

from playwright.sync_api import Error as PlaywrightError, Route

from ..domain.domain_service.resource_policy import decide_resource_type
from ..domain.value_objects.resource_class import ResourceDecision

logger = logging.getLogger(__name__)


class ResourceFilter:
    """
    子请求拦截器（Playwright route handler）

    每个页面在导航前注册一次，对页面发出的每个请求都必须调用 abort() 或 continue_() 之一，
    否则页面加载会一直挂起。
    """

    def __init__(self):
        self._counts: Counter = Counter()

    def __call__(self, route: Route) -> None:
        decision = decide_resource_type(route.request.resource_type)
        self._counts[decision] += 1

        try:
            if decision is ResourceDecision.ABORT:
                route.abort()
            else:
                route.continue_()
        except PlaywrightError as e:
            # 页面已关闭时请求会随之失效
            logger.debug(f"Route already handled or page closed: {route.request.url} - {e}")

    @property
    def stats(self) -> Dict[str, int]:
        """放行/中止计数，写入性能日志"""
        return {
            'allowed': self._counts[ResourceDecision.ALLOW],
            'aborted': self._counts[ResourceDecision.ABORT],
        }
