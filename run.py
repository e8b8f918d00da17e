from imgproxy import create_app
from imgproxy.shared.config import ProxySettings
from imgproxy.shared.event_bus import EventBus
from imgproxy.shared.event_handlers.logging_handler import LoggingEventHandler
from imgproxy.shared.logging_config import setup_logging
from imgproxy.retrieval.view.proxy_view import inject_event_bus

settings = ProxySettings.from_env()

# 初始化日志系统
setup_logging(settings.log_dir)

app = create_app()

# 创建事件总线并注册业务日志EventHandler
event_bus = EventBus()
logging_handler = LoggingEventHandler()
event_bus.subscribe_to_all(logging_handler.handle)

# 注入 EventBus 到 RetrievalService
inject_event_bus(event_bus)


if __name__ == '__main__':
    # threaded=True：每个请求在独立线程中处理，互不阻塞
    app.run(debug=False, port=5000, threaded=True)
