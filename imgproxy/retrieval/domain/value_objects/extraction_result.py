from dataclasses import dataclass
from enum import Enum


class ExtractionTier(Enum):
    IN_PAGE_FETCH = "in-page-fetch"
    SCREENSHOT = "screenshot"


@dataclass(frozen=True)
class ExtractionResult:
    """页面内提取结果（content 可能为空，由编排层检查）"""
    content: bytes
    tier: ExtractionTier

    @property
    def is_empty(self) -> bool:
        return len(self.content) == 0
