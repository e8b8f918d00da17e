from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from urllib.parse import urlparse


@dataclass(frozen=True)
class HeaderProfile:
    """
    出站请求头模板（不可变，有序）

    直接请求和浏览器会话使用同一份模板，目标站点看到的是一致的指纹
    """
    headers: Tuple[Tuple[str, str], ...]

    @property
    def user_agent(self) -> Optional[str]:
        for name, value in self.headers:
            if name.lower() == "user-agent":
                return value
        return None

    def as_dict(self) -> Dict[str, str]:
        """按原顺序返回字典（dict 保持插入顺序）"""
        return dict(self.headers)

    def without_user_agent(self) -> Dict[str, str]:
        """Playwright 的 user_agent 单独设置，其余头作为 extra_http_headers"""
        return {name: value for name, value in self.headers if name.lower() != "user-agent"}

    def with_referer(self, target_url: str) -> Dict[str, str]:
        """在模板基础上追加由目标地址来源（scheme://host/）推导出的 Referer"""
        headers = self.as_dict()
        referer = referer_for(target_url)
        if referer:
            headers["Referer"] = referer
        return headers


def referer_for(target_url: str) -> Optional[str]:
    """
    根据目标 URL 推导 Referer

    例如 https://cdn.example.com/a/b.jpg -> https://cdn.example.com/
    """
    parsed = urlparse(target_url)
    if not parsed.scheme or not parsed.netloc:
        return None
    return f"{parsed.scheme}://{parsed.netloc}/"
