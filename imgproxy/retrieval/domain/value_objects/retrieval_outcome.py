"""
检索结果值对象

每一层检索（直接请求 / 浏览器）都返回 RetrievalSuccess 或 RetrievalFailure，
编排层根据 is_success 决定是返回还是降级到下一层，而不是依赖异常传播。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"
RASTER_CONTENT_TYPE = "image/png"


class RetrievalStrategy(Enum):
    DIRECT = "direct"
    BROWSER_FETCH = "browser-fetch"
    BROWSER_SCREENSHOT = "browser-screenshot"


class FailureKind(Enum):
    INVALID_REQUEST = "INVALID_REQUEST"
    DIRECT_FETCH_FAILURE = "DIRECT_FETCH_FAILURE"
    BROWSER_UNAVAILABLE = "BROWSER_UNAVAILABLE"
    NAVIGATION_TIMEOUT = "NAVIGATION_TIMEOUT"
    EXTRACTION_EMPTY = "EXTRACTION_EMPTY"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


@dataclass(frozen=True)
class RetrievalSuccess:
    content: bytes
    content_type: str
    strategy: RetrievalStrategy

    @property
    def is_success(self) -> bool:
        return True

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class RetrievalFailure:
    kind: FailureKind
    message: str

    @property
    def is_success(self) -> bool:
        return False


RetrievalOutcome = Union[RetrievalSuccess, RetrievalFailure]
