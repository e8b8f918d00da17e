# imgproxy/shared/logging_config.py
"""
日志配置模块
统一管理3类日志：
1. proxy_request/ - 代理请求生命周期日志（事件驱动）
2. error/ - 错误日志（Infrastructure层直接调用）
3. performance/ - 性能监控日志（Infrastructure层直接调用）

文件命名格式：{日期}_{日志类型}.log
例如：2025-11-30_proxy_request.log
"""

import logging
import logging.config
import logging.handlers
from pathlib import Path
from datetime import datetime
from typing import Optional

REQUEST_LOGGER = 'domain.proxy_request'
ERROR_LOGGER = 'infrastructure.error'
PERF_LOGGER = 'infrastructure.perf'


def setup_logging(log_root_dir: Optional[Path] = None, console_level: str = 'INFO'):
    """
    初始化并配置所有logger
    应在应用启动时调用：setup_logging(settings.log_dir)
    """

    # 默认日志根目录（项目根目录下的 logs/）
    if log_root_dir is None:
        log_root_dir = Path(__file__).resolve().parent.parent.parent / 'logs'
    log_root_dir = Path(log_root_dir)

    proxy_request_dir = log_root_dir / 'proxy_request'
    error_dir = log_root_dir / 'error'
    performance_dir = log_root_dir / 'performance'

    for directory in (proxy_request_dir, error_dir, performance_dir):
        directory.mkdir(parents=True, exist_ok=True)

    # 当前日期（用于初始文件名）
    today = datetime.now().strftime('%Y-%m-%d')

    LOGGING_CONFIG = {
        'version': 1,
        'disable_existing_loggers': False,

        # ==================== 格式化器 ====================
        'formatters': {
            'json': {
                '()': 'pythonjsonlogger.json.JsonFormatter',
                'format': '%(asctime)s %(name)s %(levelname)s %(message)s',
                'timestamp': True
            },
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },

        # ==================== 处理器 ====================
        'handlers': {
            'proxy_request_file': {
                'class': 'logging.handlers.TimedRotatingFileHandler',
                'filename': str(proxy_request_dir / f'{today}_proxy_request.log'),
                'when': 'MIDNIGHT',
                'interval': 1,
                'backupCount': 30,
                'encoding': 'utf-8',
                'formatter': 'json'
            },

            'error_file': {
                'class': 'logging.handlers.TimedRotatingFileHandler',
                'filename': str(error_dir / f'{today}_error.log'),
                'when': 'MIDNIGHT',
                'interval': 1,
                'backupCount': 30,
                'encoding': 'utf-8',
                'formatter': 'json'
            },

            'performance_file': {
                'class': 'logging.handlers.TimedRotatingFileHandler',
                'filename': str(performance_dir / f'{today}_performance.log'),
                'when': 'MIDNIGHT',
                'interval': 1,
                'backupCount': 7,           # 性能日志保留7天
                'encoding': 'utf-8',
                'formatter': 'json'
            },

            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': console_level
            }
        },

        # ==================== Logger配置 ====================
        'loggers': {
            # 业务日志（由 LoggingEventHandler 使用）
            REQUEST_LOGGER: {
                'handlers': ['proxy_request_file', 'console'],
                'level': 'INFO',
                'propagate': False
            },

            # 技术日志（Infrastructure 层直接使用）
            ERROR_LOGGER: {
                'handlers': ['error_file', 'console'],
                'level': 'WARNING',
                'propagate': False
            },

            PERF_LOGGER: {
                'handlers': ['performance_file'],
                'level': 'INFO',
                'propagate': False
            }
        },

        'root': {
            'level': 'INFO',
            'handlers': ['console']
        }
    }

    logging.config.dictConfig(LOGGING_CONFIG)

    _setup_custom_namer()

    logger = logging.getLogger(REQUEST_LOGGER)
    logger.info("日志系统初始化完成", extra={
        'log_root_dir': str(log_root_dir),
        'directories': {
            'proxy_request': str(proxy_request_dir),
            'error': str(error_dir),
            'performance': str(performance_dir)
        }
    })


def custom_namer(default_name: str) -> str:
    """
    将TimedRotatingFileHandler的默认命名转换为日期前缀格式

    /path/to/logs/error/2025-11-30_error.log.2025-11-29
    转换为：
    /path/to/logs/error/2025-11-29_error.log
    """
    path = Path(default_name)
    parts = path.name.split('.')

    # 格式：2025-11-30_error.log.2025-11-29
    if len(parts) == 3 and parts[1] == 'log' and '_' in parts[0]:
        log_type = parts[0].split('_', 1)[1]
        return str(path.parent / f"{parts[2]}_{log_type}.log")

    return default_name


def _setup_custom_namer():
    """为所有TimedRotatingFileHandler设置日期前缀命名规则"""
    for logger_name in (REQUEST_LOGGER, ERROR_LOGGER, PERF_LOGGER):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers:
            if isinstance(handler, logging.handlers.TimedRotatingFileHandler):
                handler.namer = custom_namer


# ==================== 便捷获取Logger的函数 ====================

def get_request_logger() -> logging.Logger:
    """获取代理请求日志Logger（EventHandler使用）"""
    return logging.getLogger(REQUEST_LOGGER)


def get_error_logger() -> logging.Logger:
    """获取错误日志Logger（Infrastructure层使用）"""
    return logging.getLogger(ERROR_LOGGER)


def get_performance_logger() -> logging.Logger:
    """获取性能监控日志Logger（Infrastructure层使用）"""
    return logging.getLogger(PERF_LOGGER)
