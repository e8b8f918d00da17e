from typing import Optional
from ..domain.value_objects.header_profile import HeaderProfile

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)


def build_header_profile(user_agent: Optional[str] = None) -> HeaderProfile:
    """
    构造模拟普通浏览器的出站请求头

    参数:
        user_agent: 覆盖默认的 User-Agent（可选）
    """
    return HeaderProfile(headers=(
        ("User-Agent", user_agent or DEFAULT_USER_AGENT),
        ("Accept", "image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8"),
        ("Accept-Language", "en-US,en;q=0.9"),
        ("Sec-Ch-Ua", '"Not_A Brand";v="8", "Chromium";v="121", "Google Chrome";v="121"'),
        ("Sec-Ch-Ua-Mobile", "?0"),
        ("Sec-Ch-Ua-Platform", '"Windows"'),
        ("Sec-Fetch-Dest", "image"),
        ("Sec-Fetch-Mode", "navigate"),
        ("Sec-Fetch-Site", "none"),
        ("Upgrade-Insecure-Requests", "1"),
    ))
