from abc import ABC, abstractmethod
from datetime import datetime
from imgproxy.shared.domain.events import DomainEvent


class BaseEventHandler(ABC):
    """
    事件处理器基类
    提供通用的事件格式化方法
    """

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        """
        处理事件（子类必须实现）

        参数:
            event: DomainEvent 实例
        """
        pass

    def _format_event_to_log(self, event: DomainEvent) -> dict:
        """
        将领域事件转换为日志格式（通用方法）

        返回:
            格式化的日志字典
        """
        message, level = self._get_message_and_level(event)

        return {
            "timestamp": self._format_timestamp(event.timestamp),
            "level": level,
            "message": message,
            "event_type": event.event_type,
            "request_id": event.request_id,
            "data": event.data
        }

    def _get_message_and_level(self, event: DomainEvent) -> tuple[str, str]:
        """
        根据事件类型生成消息和日志级别

        返回:
            (message, level) 元组
        """
        event_type = event.event_type
        data = event.data

        if event_type == "RetrievalRequestedEvent":
            mode = " [强制浏览器]" if data.get('force_browser') else ""
            return (f"▶ 代理请求: {data.get('url', 'N/A')}{mode}", "INFO")

        elif event_type == "DirectFetchFailedEvent":
            return (
                f"↪ 直接请求失败，降级到浏览器: {data.get('url', '')}\n"
                f"  原因: {data.get('error_message', '')}",
                "WARNING"
            )

        elif event_type == "BrowserFallbackStartedEvent":
            return (f"🌐 启动浏览器检索 ({data.get('reason', '')}): {data.get('url', '')}", "INFO")

        elif event_type == "NavigationTimedOutEvent":
            return (
                f"⏱ [{data.get('failure_kind', 'NAVIGATION_TIMEOUT')}] 导航超时 ({data.get('timeout_seconds', 0):.0f}秒)，尝试提取现有页面内容",
                "WARNING"
            )

        elif event_type == "RetrievalSucceededEvent":
            return (
                f"✓ 代理成功 [{data.get('strategy', '')}] {data.get('size', 0)} bytes "
                f"({data.get('content_type', '')}, 耗时: {data.get('elapsed_ms', 0):.0f}ms)",
                "SUCCESS"
            )

        elif event_type == "RetrievalFailedEvent":
            return (
                f"✗ 代理失败 [{data.get('failure_kind', 'UNKNOWN')}]: {data.get('url', '')}\n"
                f"  错误: {data.get('error_message', '')}",
                "ERROR"
            )

        else:
            return (f"事件: {event_type}", "DEBUG")

    def _format_timestamp(self, timestamp: datetime) -> str:
        """格式化时间戳"""
        if not isinstance(timestamp, datetime):
            return str(timestamp)
        return timestamp.strftime('%Y-%m-%d %H:%M:%S')
