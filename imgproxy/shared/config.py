"""
配置模块
从环境变量（以及项目根目录下的 .env 文件）读取代理服务的运行参数。

所有参数在应用启动时一次性读取并校验，之后以不可变对象的形式在各层之间传递。
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

# 项目根目录（imgproxy/ 的上一级）
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(value: Optional[str], default: bool = False) -> bool:
    """将 "1/true/yes/on" 之类的字符串解析为布尔值，无法识别时抛出 ValueError"""
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"无法解析的布尔值: {value!r}")


@dataclass(frozen=True)
class ProxySettings:
    direct_fetch_timeout: float = 10.0  # 直接请求的总时限（秒）
    navigation_timeout: float = 45.0  # 浏览器导航时限（秒）
    browser_executable_path: Optional[str] = None
    browser_args: Tuple[str, ...] = field(default_factory=tuple)
    headless: bool = True
    user_agent: Optional[str] = None
    cache_max_age: int = 86400
    log_dir: Path = PROJECT_ROOT / "logs"

    def __post_init__(self):
        """
        参数校验
        """
        if self.direct_fetch_timeout <= 0:
            raise ValueError("direct_fetch_timeout 必须大于 0")
        if self.navigation_timeout <= 0:
            raise ValueError("navigation_timeout 必须大于 0")
        if self.cache_max_age < 0:
            raise ValueError("cache_max_age 不能为负数")

    @property
    def navigation_timeout_ms(self) -> float:
        """Playwright 使用毫秒"""
        return self.navigation_timeout * 1000

    @property
    def cache_control(self) -> str:
        return f"public, max-age={self.cache_max_age}, immutable"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "ProxySettings":
        """
        从环境变量构造配置

        参数:
            env_file: .env 文件路径，默认使用项目根目录下的 .env
        """
        load_dotenv(env_file or PROJECT_ROOT / ".env")

        browser_args = os.getenv("PROXY_BROWSER_ARGS", "")
        log_dir = os.getenv("PROXY_LOG_DIR")

        return cls(
            direct_fetch_timeout=float(os.getenv("PROXY_DIRECT_TIMEOUT", "10")),
            navigation_timeout=float(os.getenv("PROXY_NAVIGATION_TIMEOUT", "45")),
            browser_executable_path=os.getenv("PROXY_BROWSER_EXECUTABLE") or None,
            browser_args=tuple(browser_args.split()),
            headless=parse_bool(os.getenv("PROXY_HEADLESS"), default=True),
            user_agent=os.getenv("PROXY_USER_AGENT") or None,
            cache_max_age=int(os.getenv("PROXY_CACHE_MAX_AGE", "86400")),
            log_dir=Path(log_dir) if log_dir else PROJECT_ROOT / "logs",
        )
