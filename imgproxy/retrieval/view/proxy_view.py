"""
模块职责
- 提供图片代理接口：GET /proxy?url=<编码后的目标地址>（同时保留 /api/image-proxy 路径）；
- 作为组合根（Composition Root）组装应用层依赖：请求头模板、直接请求客户端、浏览器会话工厂、编排服务；
- 将 RetrievalOutcome 映射为 HTTP 响应（200 图片字节 / 400 / 502 JSON）。

设计说明
- 此模块属于接口层，只做输入输出与服务编排，不承载检索规则；
- 组合根在模块级创建单例；测试可通过 inject_service() 或替换 _service 注入替身。
"""

from functools import partial

from flask import Blueprint, Response, jsonify, request

from ..services.retrieval_service import RetrievalService  # 应用层：两层检索编排
from ..infrastructure.direct_fetch_client_impl import DirectFetchClientImpl  # 基础设施：requests 直接请求
from ..infrastructure.browser_session import BrowserSession  # 基础设施：Playwright 浏览器会话
from ..infrastructure.header_profile_factory import build_header_profile
from ..domain.exceptions.retrieval_exceptions import InvalidRequestError
from ..domain.value_objects.retrieval_outcome import FailureKind
from ..domain.value_objects.retrieval_request import RetrievalRequest
from imgproxy.shared.config import ProxySettings, parse_bool
from imgproxy.shared.logging_config import get_request_logger

bp = Blueprint("proxy", __name__)
request_logger = get_request_logger()


def build_service(settings: ProxySettings, event_bus=None) -> RetrievalService:
    """根据配置组装编排服务"""
    profile = build_header_profile(settings.user_agent)
    return RetrievalService(
        direct_client=DirectFetchClientImpl(profile, timeout=settings.direct_fetch_timeout),
        session_factory=partial(BrowserSession, settings, profile),
        event_bus=event_bus,
        navigation_timeout=settings.navigation_timeout,
    )


# 组合根（模块级单例，进程内所有请求线程共享；直接请求客户端每次请求自建并关闭会话）
_settings = ProxySettings.from_env()
_service = build_service(_settings)


def inject_event_bus(event_bus):
    """依赖注入：注入事件总线"""
    _service.set_event_bus(event_bus)


def inject_service(service: RetrievalService, settings: ProxySettings = None):
    """依赖注入：替换编排服务（以及可选的配置）"""
    global _service, _settings
    _service = service
    if settings is not None:
        _settings = settings


@bp.route("/health", methods=["GET"])
def health():
    # 健康检查
    return jsonify({"status": "ok"})


@bp.route("/proxy", methods=["GET"])
@bp.route("/api/image-proxy", methods=["GET"])
def proxy():
    """代理目标图片"""
    raw_url = (request.args.get("url") or "").strip()
    if not raw_url:
        return jsonify({"error": "Missing url"}), 400

    try:
        force_browser = parse_bool(request.args.get("force_browser"), default=False)
        retrieval_request = RetrievalRequest.from_query(raw_url, force_browser=force_browser)
    except InvalidRequestError as e:
        request_logger.warning(f"Rejected proxy request: {e.message}", extra={
            "failure_kind": FailureKind.INVALID_REQUEST.value,
            "raw_url": raw_url,
        })
        return jsonify({"error": "Invalid url", "details": e.message}), 400
    except ValueError as e:
        return jsonify({"error": "Invalid force_browser", "details": str(e)}), 400

    outcome = _service.retrieve(retrieval_request)

    if not outcome.is_success:
        return jsonify({"error": "Proxy failed", "details": outcome.message}), 502

    return Response(
        outcome.content,
        status=200,
        headers={
            "Content-Type": outcome.content_type,
            "Cache-Control": _settings.cache_control,
            "Access-Control-Allow-Origin": "*",
            "Vary": "url",
            "X-Proxy-Strategy": outcome.strategy.value,
        },
    )
