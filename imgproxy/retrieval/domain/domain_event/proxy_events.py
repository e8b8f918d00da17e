from dataclasses import dataclass
from imgproxy.shared.domain.events import DomainEvent
from ..value_objects.retrieval_outcome import FailureKind


@dataclass
class RetrievalRequestedEvent(DomainEvent):
    """收到代理请求"""
    url: str
    force_browser: bool = False


@dataclass
class DirectFetchFailedEvent(DomainEvent):
    """直接请求失败（将降级到浏览器）"""
    url: str
    error_message: str


@dataclass
class BrowserFallbackStartedEvent(DomainEvent):
    """开始浏览器检索"""
    url: str
    reason: str  # "direct_fetch_failed" / "forced"


@dataclass
class NavigationTimedOutEvent(DomainEvent):
    """导航超时（软失败，仍会尝试提取）"""
    url: str
    timeout_seconds: float
    failure_kind: str = FailureKind.NAVIGATION_TIMEOUT.value


@dataclass
class RetrievalSucceededEvent(DomainEvent):
    """代理成功"""
    url: str
    strategy: str
    content_type: str
    size: int
    elapsed_ms: float


@dataclass
class RetrievalFailedEvent(DomainEvent):
    """代理最终失败"""
    url: str
    failure_kind: str
    error_message: str
    elapsed_ms: float
