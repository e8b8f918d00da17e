import base64
import binascii
import time
import logging
from typing import Any, Optional

from ..domain.value_objects.extraction_result import ExtractionResult, ExtractionTier
from imgproxy.shared.logging_config import get_performance_logger

logger = logging.getLogger(__name__)
perf_logger = get_performance_logger()

# 在页面上下文中重新请求第一个 <img> 的已解析地址（继承页面的 cookie/会话），
# 以 base64 字符串返回，避免 ArrayBuffer 无法跨进程序列化
IN_PAGE_FETCH_SCRIPT = """
async () => {
    const img = document.querySelector("img");
    if (!img) {
        return null;
    }
    const src = img.currentSrc || img.src;
    if (!src) {
        return null;
    }
    const response = await fetch(src);
    if (!response.ok) {
        return null;
    }
    const bytes = new Uint8Array(await response.arrayBuffer());
    let binary = "";
    const chunkSize = 0x8000;
    for (let i = 0; i < bytes.length; i += chunkSize) {
        binary += String.fromCharCode.apply(null, bytes.subarray(i, i + chunkSize));
    }
    return btoa(binary);
}
"""


class ImageExtractor:
    """
    从已渲染的页面中提取图片

    两层策略，按顺序尝试，先成功者胜出：
    1. 页面内重新请求第一个 <img> 的地址
    2. 整页 PNG 截图
    """

    def extract(self, page: Any) -> ExtractionResult:
        start_time = time.time()

        content = self._fetch_in_page(page)
        if content:
            result = ExtractionResult(content=content, tier=ExtractionTier.IN_PAGE_FETCH)
        else:
            result = ExtractionResult(content=self._screenshot(page), tier=ExtractionTier.SCREENSHOT)

        elapsed_ms = (time.time() - start_time) * 1000
        perf_logger.info(f"Image Extract ({result.tier.value}) - {len(result.content)} bytes - {elapsed_ms:.2f}ms", extra={
            'method': 'EXTRACT',
            'tier': result.tier.value,
            'content_length': len(result.content),
            'elapsed_ms': elapsed_ms,
            'component': 'ImageExtractor'
        })
        return result

    def _fetch_in_page(self, page: Any) -> Optional[bytes]:
        """第一层：任何错误都视为“没有结果”，不作为请求失败"""
        try:
            encoded = page.evaluate(IN_PAGE_FETCH_SCRIPT)
        except Exception as e:
            logger.debug(f"In-page image fetch failed: {type(e).__name__} - {str(e)}")
            return None

        if not encoded:
            return None

        try:
            return base64.b64decode(encoded, validate=True) or None
        except (binascii.Error, ValueError, TypeError) as e:
            logger.debug(f"In-page image fetch returned undecodable data: {str(e)}")
            return None

    def _screenshot(self, page: Any) -> bytes:
        """第二层：整页截图，页面崩溃或会话已关闭时异常向上抛出"""
        return page.screenshot(type="png", full_page=True) or b""
