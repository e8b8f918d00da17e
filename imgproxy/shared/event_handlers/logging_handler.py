# imgproxy/shared/event_handlers/logging_handler.py
import logging
from .base_event_handler import BaseEventHandler
from imgproxy.shared.domain.events import DomainEvent
from imgproxy.shared.logging_config import get_request_logger

# 自定义级别 SUCCESS 在标准 logging 中按 INFO 处理
_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'SUCCESS': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
}


class LoggingEventHandler(BaseEventHandler):
    """
    日志事件处理器
    职责：捕获领域事件，转换为日志格式后写入 domain.proxy_request 日志
    """

    def __init__(self, logger: logging.Logger = None):
        self._logger = logger or get_request_logger()

    def handle(self, event: DomainEvent) -> None:
        """
        处理事件：转换为日志格式并写入

        参数:
            event: DomainEvent 实例
        """
        log_entry = self._format_event_to_log(event)
        level = _LEVELS.get(log_entry['level'], logging.INFO)

        self._logger.log(level, log_entry['message'], extra={
            'event_type': log_entry['event_type'],
            'request_id': log_entry['request_id'],
            'event_level': log_entry['level'],
            'data': log_entry['data'],
        })
