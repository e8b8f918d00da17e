from abc import ABC, abstractmethod
from ..value_objects.retrieval_outcome import RetrievalOutcome


class IDirectFetchClient(ABC):
    @abstractmethod
    def fetch(self, url: str) -> RetrievalOutcome:
        """
        执行一次有时限的 HTTP GET
        返回: RetrievalSuccess(content, content_type) 或 RetrievalFailure(DIRECT_FETCH_FAILURE)
        处理: 非 2xx、超时、传输层错误都不抛异常，且内部不重试
        """
        pass
