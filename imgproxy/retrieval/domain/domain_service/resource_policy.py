"""
资源过滤策略（纯函数）

渲染目标图片不需要的资源类别一律中止，其余（文档导航、页面脚本发起的 xhr/fetch 等）放行。
脚本本身也被中止：页面内脚本能做的事情因此受限，换取更快的加载速度。
"""

from ..value_objects.resource_class import ResourceClass, ResourceDecision

BLOCKED_RESOURCE_CLASSES = frozenset({
    ResourceClass.STYLESHEET,
    ResourceClass.FONT,
    ResourceClass.IMAGE,
    ResourceClass.MEDIA,
    ResourceClass.SCRIPT,
})


def decide_resource(resource_class: ResourceClass) -> ResourceDecision:
    """资源类别 -> 放行/中止，对所有类别都有定义"""
    if resource_class in BLOCKED_RESOURCE_CLASSES:
        return ResourceDecision.ABORT
    return ResourceDecision.ALLOW


def decide_resource_type(resource_type: str) -> ResourceDecision:
    """便捷方法：直接使用浏览器报告的 resource type 字符串"""
    return decide_resource(ResourceClass.from_resource_type(resource_type))
