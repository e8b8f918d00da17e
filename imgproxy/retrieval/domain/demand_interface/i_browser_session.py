from abc import ABC, abstractmethod
from typing import Any, Callable


class IBrowserSession(ABC):
    """
    单次请求内的浏览器会话（一个浏览器进程 + 一个页面）

    状态机: CREATED -> LAUNCHED -> NAVIGATED -> EXTRACTING -> CLOSED
    CLOSED 可以从任何状态到达；作为上下文管理器使用时，退出时总会 close()
    """

    @abstractmethod
    def launch(self) -> None:
        """启动浏览器并创建页面，失败时抛出 BrowserUnavailableError"""
        pass

    @abstractmethod
    def install_filter(self, route_handler: Callable[[Any], None]) -> None:
        """在导航之前注册子请求拦截器"""
        pass

    @abstractmethod
    def navigate(self, url: str) -> bool:
        """
        导航并等待网络空闲
        返回: True 表示正常完成，False 表示超时（仍可对当前 DOM 进行提取）
        """
        pass

    @abstractmethod
    def start_extraction(self) -> Any:
        """进入提取阶段，返回页面对象"""
        pass

    @abstractmethod
    def close(self) -> None:
        """终止浏览器进程；幂等，且不抛出异常"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
