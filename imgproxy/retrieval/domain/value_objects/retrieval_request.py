import uuid
from dataclasses import dataclass, field
from urllib.parse import unquote, urlparse

from ..exceptions.retrieval_exceptions import InvalidRequestError

ALLOWED_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class RetrievalRequest:
    url: str
    force_browser: bool = False  # 跳过直接请求，直接走浏览器
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        """
        校验 URL：必须是带主机名的 http/https 绝对地址
        校验失败时在任何网络 I/O 之前抛出 InvalidRequestError
        """
        if not self.url or not self.url.strip():
            raise InvalidRequestError("Missing url")

        parsed = urlparse(self.url.strip())
        if parsed.scheme.lower() not in ALLOWED_SCHEMES:
            raise InvalidRequestError(f"Unsupported or missing URL scheme: {self.url}")
        if not parsed.netloc or not parsed.hostname:
            raise InvalidRequestError(f"URL is not absolute: {self.url}")

        object.__setattr__(self, "url", self.url.strip())

    @classmethod
    def from_query(cls, raw_url: str, force_browser: bool = False) -> "RetrievalRequest":
        """
        从查询参数构造请求

        Flask 已经对查询参数做过一次百分号解码；
        如果调用方对 URL 做了二次编码（解码后仍然不含 "://"），这里再解码一次
        """
        url = (raw_url or "").strip()
        if "://" not in url:
            decoded = unquote(url)
            if "://" in decoded:
                url = decoded
        return cls(url=url, force_browser=force_browser)
