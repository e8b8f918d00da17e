"""
直接请求客户端实现

使用 requests 库发起一次带浏览器请求头的 GET，用于宽松站点的低延迟路径。
失败（非 2xx、超时、传输错误）只返回 RetrievalFailure，由编排层降级到浏览器。
"""

import time
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..domain.demand_interface.i_direct_fetch_client import IDirectFetchClient
from ..domain.value_objects.header_profile import HeaderProfile
from imgproxy.shared.logging_config import get_error_logger, get_performance_logger
from ..domain.value_objects.retrieval_outcome import (
    DEFAULT_IMAGE_CONTENT_TYPE,
    FailureKind,
    RetrievalFailure,
    RetrievalOutcome,
    RetrievalStrategy,
    RetrievalSuccess,
)

# 获取 logger
error_logger = get_error_logger()
perf_logger = get_performance_logger()

CHUNK_SIZE = 64 * 1024


class DirectFetchClientImpl(IDirectFetchClient):
    """直接请求客户端实现（使用 requests 库）"""

    def __init__(self, header_profile: HeaderProfile, timeout: float = 10.0):
        """
        初始化直接请求客户端

        参数:
            header_profile: 出站请求头模板
            timeout: 总时限（秒），覆盖连接、响应头和响应体
        """
        self._profile = header_profile
        self._timeout = timeout

    def _build_session(self) -> requests.Session:
        """
        每次请求新建会话，随 with 块关闭

        客户端本身被所有请求线程共享，不持有会话状态
        """
        session = requests.Session()

        # 不在内部重试：降级到浏览器就是重试
        retry_strategy = Retry(total=0, raise_on_status=False)
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def fetch(self, url: str) -> RetrievalOutcome:
        """
        执行直接请求

        参数:
            url: 目标 URL

        返回:
            RetrievalSuccess 或 RetrievalFailure
        """
        start_time = time.monotonic()
        deadline = start_time + self._timeout

        try:
            with self._build_session() as session:
                response = session.get(
                    url,
                    headers=self._profile.with_referer(url),
                    timeout=self._timeout,
                    allow_redirects=True,
                    stream=True,  # 流式读取，以便对响应体也执行总时限
                )

                try:
                    if not 200 <= response.status_code < 300:
                        return self._create_failure(
                            url, "HTTP", f"HTTP {response.status_code}", start_time
                        )

                    content = self._read_body(response, deadline)
                finally:
                    response.close()

            elapsed_ms = (time.monotonic() - start_time) * 1000
            perf_logger.info(
                f"Direct GET {url} - {response.status_code} - {len(content)} bytes - {elapsed_ms:.2f}ms",
                extra={
                    'url': url,
                    'method': 'GET',
                    'status_code': response.status_code,
                    'content_length': len(content),
                    'elapsed_ms': elapsed_ms,
                    'component': 'DirectFetchClientImpl'
                }
            )

            if not content:
                return self._create_failure(url, "EmptyBody", "Upstream returned an empty body", start_time)

            return RetrievalSuccess(
                content=content,
                content_type=response.headers.get('Content-Type') or DEFAULT_IMAGE_CONTENT_TYPE,
                strategy=RetrievalStrategy.DIRECT,
            )

        except requests.exceptions.Timeout:
            return self._create_failure(
                url, "Timeout", f"Request exceeded {self._timeout}s", start_time
            )

        except requests.exceptions.ConnectionError as e:
            # 包含 DNS 解析失败、TLS 错误与连接重置
            return self._create_failure(url, "ConnectionError", f"Connection error: {str(e)}", start_time)

        except requests.exceptions.TooManyRedirects:
            return self._create_failure(url, "TooManyRedirects", "Too many redirects", start_time)

        except requests.exceptions.RequestException as e:
            return self._create_failure(url, "RequestException", str(e), start_time)

    def _read_body(self, response: requests.Response, deadline: float) -> bytes:
        """读取响应体，超过总时限时抛出 Timeout"""
        chunks = []
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if time.monotonic() > deadline:
                raise requests.exceptions.Timeout("Body download exceeded deadline")
            if chunk:
                chunks.append(chunk)
        return b"".join(chunks)

    def _create_failure(
        self,
        url: str,
        error_type: str,
        error_detail: str,
        start_time: Optional[float] = None
    ) -> RetrievalFailure:
        """
        记录错误日志并创建失败结果

        参数:
            url: 请求 URL
            error_type: 错误类型
            error_detail: 错误详情
        """
        extra = {'url': url, 'error_type': error_type, 'component': 'DirectFetchClientImpl'}
        if start_time is not None:
            extra['elapsed_ms'] = (time.monotonic() - start_time) * 1000

        # 直接请求失败是可预期的（会降级），记为 WARNING
        error_logger.warning(f"Direct fetch failed: {url} - {error_type}: {error_detail}", extra=extra)

        return RetrievalFailure(
            kind=FailureKind.DIRECT_FETCH_FAILURE,
            message=f"{error_type}: {error_detail}",
        )
