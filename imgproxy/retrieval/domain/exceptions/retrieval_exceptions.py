"""
检索异常类模块

定义浏览器检索过程中可能发生的异常类型。
这些异常只在浏览器层内部传播，编排层会把它们转换为 RetrievalFailure。
"""


class RetrievalError(Exception):
    """
    检索异常基类

    Attributes:
        message: 错误描述信息
    """

    def __init__(self, message: str = "Image retrieval failed"):
        self.message = message
        super().__init__(self.message)


class InvalidRequestError(RetrievalError):
    """
    请求无效异常

    URL 缺失、不是绝对地址或协议不受支持时抛出，不做任何网络 I/O。
    """

    def __init__(self, message: str = "Invalid url"):
        super().__init__(message)


class BrowserUnavailableError(RetrievalError):
    """
    浏览器不可用异常

    浏览器可执行文件缺失、资源耗尽等导致启动失败时抛出，不重试。
    """

    def __init__(self, message: str = "Browser unavailable"):
        super().__init__(message)


class ExtractionEmptyError(RetrievalError):
    """两层提取都没有得到任何字节"""

    def __init__(self, message: str = "No image data"):
        super().__init__(message)


class BrowserSessionStateError(RetrievalError):
    """浏览器会话的操作顺序不符合状态机"""

    def __init__(self, message: str = "Invalid browser session state"):
        super().__init__(message)
