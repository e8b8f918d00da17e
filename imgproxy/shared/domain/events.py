"""
领域事件基类
写在 shared 中，使 event_handlers 能识别所有领域事件的共同字段，而不依赖具体的业务模块
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict


@dataclass
class DomainEvent:
    """
    所有领域事件的基类
    自动提供时间戳和通用的数据转换接口

    timestamp 使用 kw_only，子类可以继续声明无默认值的字段
    """
    request_id: str
    timestamp: datetime = field(default_factory=datetime.now, kw_only=True)

    @property
    def event_type(self) -> str:
        """默认使用类名作为事件类型"""
        return self.__class__.__name__

    @property
    def data(self) -> Dict[str, Any]:
        """将事件字段转换为字典，排除基类字段"""
        all_data = asdict(self)
        return {
            k: v for k, v in all_data.items()
            if k not in ('request_id', 'timestamp')
        }
