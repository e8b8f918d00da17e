from enum import Enum


class ResourceClass(Enum):
    """页面加载过程中子请求的资源类别"""
    STYLESHEET = "stylesheet"
    FONT = "font"
    IMAGE = "image"
    MEDIA = "media"
    SCRIPT = "script"
    DOCUMENT = "document"
    OTHER = "other"

    @classmethod
    def from_resource_type(cls, resource_type: str) -> "ResourceClass":
        """
        将浏览器报告的 resource type 映射为资源类别

        xhr / fetch / websocket / manifest 等未单独列出的类型都归为 OTHER
        """
        try:
            return cls((resource_type or "").strip().lower())
        except ValueError:
            return cls.OTHER


class ResourceDecision(Enum):
    ALLOW = "allow"
    ABORT = "abort"
